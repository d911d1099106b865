# (c) Copyright Datacraft, 2026
"""Passkey provider entry points for the authentication framework."""
import logging
from typing import Mapping

from fastapi import Request
from pydantic import ValidationError

from passkey_auth.adapters import REGISTRATION_METHODS, assert_adapter_implements
from passkey_auth.ceremony import CeremonyLibrary, WebAuthnCeremony
from passkey_auth.config import Settings
from passkey_auth.cookie import ChallengeCookieCodec
from passkey_auth.errors import AccountNotLinked
from passkey_auth.schema import (
	PasskeyOptionsQuery,
	PasskeyProvider,
	PasskeyVerifyRequest,
	ResponseInternal,
	UserData,
	passkey_provider,
)
from passkey_auth.utils import get_session_email, request_cookies

from .action import INVALID_COMBINATION, REGISTER, resolve_action
from .options import ChallengeIssuer
from .types import ActionError, PasskeyFailure, PasskeyResult
from .verify import INVALID_RESPONSE, ResponseVerifier

logger = logging.getLogger(__name__)


class PasskeyHandler:
	"""Serves the options and verify steps of the passkey provider."""

	def __init__(
		self,
		provider: PasskeyProvider,
		adapter,
		codec: ChallengeCookieCodec,
		ceremony: CeremonyLibrary | None = None,
		settings: Settings | None = None,
	):
		self.provider = provider
		self.adapter = adapter
		self.codec = codec
		self.ceremony = ceremony or WebAuthnCeremony()
		self.settings = settings

	@classmethod
	def from_settings(cls, settings, adapter, ceremony: CeremonyLibrary | None = None) -> "PasskeyHandler":
		return cls(
			provider=passkey_provider(settings),
			adapter=adapter,
			codec=ChallengeCookieCodec.from_settings(settings),
			ceremony=ceremony,
			settings=settings,
		)

	def issuer(self) -> ChallengeIssuer:
		return ChallengeIssuer(self.provider, self.adapter, self.ceremony, self.codec)

	def verifier(self) -> ResponseVerifier:
		return ResponseVerifier(self.provider, self.adapter, self.ceremony, self.codec)

	async def options(
		self,
		query: PasskeyOptionsQuery,
		session_email: str | None = None,
	) -> ResponseInternal:
		"""Resolve the ceremony and return its options with a challenge cookie."""
		issuer = self.issuer()

		email_exists = False
		if query.email:
			email_exists = await self.adapter.get_user_by_email(query.email) is not None

		resolved = resolve_action(
			action=query.action,
			logged_in=bool(session_email),
			session_email=session_email,
			query_email=query.email,
			email_exists=email_exists,
		)
		if isinstance(resolved, ActionError):
			return ResponseInternal(status=400, body=resolved.message)

		if resolved.action == REGISTER:
			issued = await issuer.issue_registration(resolved.email)
		else:
			issued = await issuer.issue_authentication(resolved.email)

		return ResponseInternal(status=200, body=issued.body(), cookies=[issued.cookie])

	async def options_from_request(
		self,
		request: Request,
		query: PasskeyOptionsQuery | None = None,
	) -> ResponseInternal:
		"""Options step for a framework request; the query defaults to its query string."""
		if query is None:
			query = PasskeyOptionsQuery.model_validate(dict(request.query_params))
		return await self.options(query, get_session_email(request, self.settings))

	async def verify(
		self,
		payload: dict,
		cookies: Mapping[str, str],
		session_email: str | None = None,
	) -> ResponseInternal:
		"""Verify the browser's ceremony response.

		The challenge cookie is cleared whatever the outcome.
		"""
		clear = [self.codec.expire()]
		try:
			request = PasskeyVerifyRequest.model_validate(payload)
		except ValidationError:
			return ResponseInternal(status=400, body=INVALID_RESPONSE, cookies=clear)

		verifier = self.verifier()
		result: PasskeyResult
		if request.action == REGISTER:
			email = session_email or request.email
			if not session_email and email and await self.adapter.get_user_by_email(email):
				logger.warning(f"Anonymous registration for existing email {email} rejected")
				return ResponseInternal(status=400, body=INVALID_COMBINATION, cookies=clear)
			result = await verifier.verify_registration(cookies, request.response, email)
		else:
			result = await verifier.verify_authentication(cookies, request.response)

		if isinstance(result, PasskeyFailure):
			return ResponseInternal(status=400, body=result.message, cookies=clear)

		data = result.data
		if request.action == REGISTER:
			try:
				data = await self.persist_registration(data, session_email)
			except AccountNotLinked as exc:
				logger.warning(str(exc))
				return ResponseInternal(status=400, body=INVALID_COMBINATION, cookies=clear)

		return ResponseInternal(
			status=200,
			body=data.model_dump(mode="json", exclude={"authenticator"}),
			cookies=clear,
		)

	async def verify_from_request(self, request: Request, payload: dict) -> ResponseInternal:
		"""Verify step for a framework request carrying the parsed JSON body."""
		return await self.verify(
			payload,
			request_cookies(request),
			get_session_email(request, self.settings),
		)

	async def persist_registration(
		self,
		data: UserData,
		session_email: str | None = None,
	) -> UserData:
		"""Store the records produced by a verified registration.

		An existing user with the same email keeps its id, but only when
		the caller is signed in as that user. The account is linked once,
		and the authenticator is always added.
		"""
		assert_adapter_implements(self.adapter, REGISTRATION_METHODS, "Passkey registration")

		user = await self.adapter.get_user_by_email(data.user.email)
		if user is None:
			user = await self.adapter.create_user(data.user)
		elif session_email != user.email:
			raise AccountNotLinked(f"Passkey for {data.user.email} is not linked to the session user")

		account = data.account.model_copy(update={"user_id": user.id})
		linked = await self.adapter.list_linked_accounts(user.id) or []
		if not any(
			a.provider == account.provider
			and a.provider_account_id == account.provider_account_id
			for a in linked
		):
			await self.adapter.link_account(account)

		authenticator = data.authenticator
		if authenticator is not None:
			await self.adapter.create_authenticator(authenticator)

		logger.info(f"Registered passkey for user {user.id}")
		return UserData(user=user, account=account, authenticator=authenticator)
