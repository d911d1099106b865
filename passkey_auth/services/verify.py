# (c) Copyright Datacraft, 2026
"""Verifies ceremony responses against the signed challenge."""
import binascii
import logging
from typing import Any, Mapping

from webauthn.helpers import base64url_to_bytes

from passkey_auth.adapters import AUTHENTICATION_METHODS, assert_adapter_implements
from passkey_auth.ceremony import CeremonyLibrary
from passkey_auth.cookie import ChallengeCookieCodec
from passkey_auth.errors import (
	AdapterError,
	CeremonyVerificationError,
	StorageInvariantError,
)
from passkey_auth.schema import (
	Account,
	Authenticator,
	ChallengeCookiePayload,
	PasskeyProvider,
	User,
	UserData,
)

from .types import PasskeyFailure, PasskeyResult, PasskeySuccess

logger = logging.getLogger(__name__)

INVALID_RESPONSE = "Invalid response."
MISSING_COOKIE = "Missing challenge cookie."
AUTHENTICATOR_NOT_FOUND = "Authenticator not found."
EMAIL_REQUIRED = "Email is required for registration."
MISSING_ACCOUNT_ID = "Missing providerAccountId from challenge cookie."
NOT_VERIFIED = "Failed to verify response."


def _is_valid_response(response: Any) -> bool:
	return isinstance(response, dict) and isinstance(response.get("id"), str)


def _transports(response: dict[str, Any]) -> list[str] | None:
	inner = response.get("response")
	transports = inner.get("transports") if isinstance(inner, dict) else None
	if not isinstance(transports, list):
		return None
	return [t for t in transports if isinstance(t, str)]


class ResponseVerifier:
	"""Checks a client response against the challenge it was issued.

	Nothing is written to storage before the ceremony library has
	verified the response.
	"""

	def __init__(
		self,
		provider: PasskeyProvider,
		adapter,
		ceremony: CeremonyLibrary,
		codec: ChallengeCookieCodec,
	):
		self.provider = provider
		self.adapter = adapter
		self.ceremony = ceremony
		self.codec = codec

	def _challenge(self, cookies: Mapping[str, str]) -> ChallengeCookiePayload | None:
		return self.codec.decode(cookies)

	async def verify_authentication(
		self,
		cookies: Mapping[str, str],
		response: Any,
	) -> PasskeyResult:
		"""Verify a navigator.credentials.get() response.

		Raises:
			ConfigurationError: the adapter cannot look up authenticators
			StorageInvariantError: the verified authenticator has no owner
		"""
		assert_adapter_implements(
			self.adapter, AUTHENTICATION_METHODS, "Passkey verifyAuthentication"
		)

		if not _is_valid_response(response):
			return PasskeyFailure(INVALID_RESPONSE)

		cookie = self._challenge(cookies)
		if not cookie:
			return PasskeyFailure(MISSING_COOKIE)

		try:
			credential_id = base64url_to_bytes(response["id"])
		except (binascii.Error, ValueError):
			return PasskeyFailure(INVALID_RESPONSE)

		authenticator = await self.adapter.get_authenticator(credential_id)
		if not authenticator:
			logger.debug(f"Authenticator not found: {response['id']}")
			return PasskeyFailure(AUTHENTICATOR_NOT_FOUND)

		try:
			verification = await self.ceremony.verify_authentication(
				rp=self.provider.relaying_party,
				response=response,
				expected_challenge=cookie.challenge,
				authenticator=authenticator,
				require_user_verification=True,
			)
		except Exception as e:
			err = CeremonyVerificationError(e)
			logger.error(f"Authentication verification failed: {err}")
			return PasskeyFailure(str(err))

		info = verification.authentication_info
		if not verification.verified or info is None:
			return PasskeyFailure(NOT_VERIFIED)

		if info.new_counter <= authenticator.counter and (info.new_counter or authenticator.counter):
			logger.warning(
				f"Signature counter for account {authenticator.provider_account_id} "
				f"did not increase ({authenticator.counter} -> {info.new_counter}), "
				f"credential may be cloned"
			)
			return PasskeyFailure(NOT_VERIFIED)

		try:
			await self.adapter.update_authenticator_counter(
				authenticator.credential_id, info.new_counter
			)
		except Exception as e:
			# The ceremony itself succeeded
			logger.error(f"Counter update failed: {AdapterError(e)}")

		user = await self.adapter.get_user_by_account(
			self.provider.id, authenticator.provider_account_id
		)
		if not user:
			logger.debug(
				f"User not found for account {authenticator.provider_account_id} "
				f"of provider {self.provider.id}"
			)
			raise StorageInvariantError(
				"User not found. See debug logs for more details."
			)

		account = Account(
			user_id=user.id,
			type=self.provider.type,
			provider=self.provider.id,
			provider_account_id=authenticator.provider_account_id,
		)
		logger.info(f"Passkey authentication successful for user {user.id}")
		return PasskeySuccess(UserData(user=user, account=account))

	async def verify_registration(
		self,
		cookies: Mapping[str, str],
		response: Any,
		email: Any,
	) -> PasskeyResult:
		"""Verify a navigator.credentials.create() response.

		On success the returned user, account and authenticator are ready
		to be persisted by the caller.
		"""
		if not isinstance(email, str) or not email:
			return PasskeyFailure(EMAIL_REQUIRED)

		if not _is_valid_response(response):
			return PasskeyFailure(INVALID_RESPONSE)

		cookie = self._challenge(cookies)
		if not cookie:
			return PasskeyFailure(MISSING_COOKIE)

		provider_account_id = cookie.provider_account_id
		if not provider_account_id:
			return PasskeyFailure(MISSING_ACCOUNT_ID)

		try:
			verification = await self.ceremony.verify_registration(
				rp=self.provider.relaying_party,
				response=response,
				expected_challenge=cookie.challenge,
				require_user_verification=True,
			)
		except Exception as e:
			err = CeremonyVerificationError(e)
			logger.error(f"Registration verification failed: {err}")
			return PasskeyFailure(str(err))

		info = verification.registration_info
		if not verification.verified or info is None:
			return PasskeyFailure(NOT_VERIFIED)

		user = User(id=email, email=email, email_verified=None)
		account = Account(
			user_id=user.id,
			type=self.provider.type,
			provider=self.provider.id,
			provider_account_id=provider_account_id,
		)
		authenticator = Authenticator(
			provider_account_id=provider_account_id,
			counter=info.counter,
			credential_id=info.credential_id,
			credential_backed_up=info.credential_backed_up,
			credential_device_type=info.credential_device_type,
			credential_public_key=info.credential_public_key,
			transports=_transports(response),
		)
		logger.info(f"Passkey registration verified for {email}")
		return PasskeySuccess(UserData(user=user, account=account, authenticator=authenticator))
