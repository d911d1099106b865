# (c) Copyright Datacraft, 2026
"""Issues ceremony options and the matching challenge cookie."""
import logging
import secrets

from passkey_auth.adapters import OPTIONS_METHODS, assert_adapter_implements
from passkey_auth.ceremony import CeremonyLibrary
from passkey_auth.cookie import ChallengeCookieCodec
from passkey_auth.schema import Authenticator, ChallengeCookiePayload, PasskeyProvider, User

from .types import IssuedOptions

logger = logging.getLogger(__name__)


class ChallengeIssuer:
	"""Generates registration/authentication options for the browser.

	The challenge embedded in the options is signed into a cookie, which
	is the only copy of it the provider keeps.
	"""

	USER_ID_BYTES = 32

	def __init__(
		self,
		provider: PasskeyProvider,
		adapter,
		ceremony: CeremonyLibrary,
		codec: ChallengeCookieCodec,
	):
		assert_adapter_implements(adapter, OPTIONS_METHODS, "Passkey options")
		self.provider = provider
		self.adapter = adapter
		self.ceremony = ceremony
		self.codec = codec

	async def _get_user_and_authenticators(
		self,
		email: str | None,
	) -> tuple[list[Authenticator] | None, User | None]:
		"""Find the user for email and the authenticators of its passkey accounts."""
		user = await self.adapter.get_user_by_email(email) if email else None

		accounts = (await self.adapter.list_linked_accounts(user.id) or []) if user else []

		authenticators: list[Authenticator] = []
		for account in accounts:
			if account.provider != self.provider.id:
				continue
			authenticators.extend(
				await self.adapter.list_authenticators_by_account_id(
					account.provider_account_id
				) or []
			)

		return authenticators or None, user

	async def issue_registration(self, email: str) -> IssuedOptions:
		"""Options for creating a new passkey for email.

		Authenticators already registered to the account are excluded so
		the same device is not registered twice.
		"""
		authenticators, user = await self._get_user_and_authenticators(email)

		user_id = user.id.encode() if user else secrets.token_bytes(self.USER_ID_BYTES)
		user_name = (user.name or user.email) if user else email
		user_display_name = (user.name if user else None) or user_name

		options = await self.ceremony.generate_registration_options(
			rp=self.provider.relaying_party,
			user_id=user_id,
			user_name=user_name,
			user_display_name=user_display_name,
			exclude_credentials=authenticators,
			timeout=self.provider.timeout,
		)

		cookie = self.codec.sign(ChallengeCookiePayload(
			challenge=options["challenge"],
			provider_account_id=options["user"]["id"],
		))
		logger.info(
			f"Issued registration options for {email} "
			f"(excluding {len(authenticators or [])} credentials)"
		)
		return IssuedOptions(options=options, action="register", cookie=cookie)

	async def issue_authentication(self, email: str | None = None) -> IssuedOptions:
		"""Options for signing in with a passkey.

		With a known email only that account's credentials are allowed,
		otherwise the browser may offer any discoverable credential.
		"""
		authenticators, _ = await self._get_user_and_authenticators(email)

		options = await self.ceremony.generate_authentication_options(
			rp=self.provider.relaying_party,
			allow_credentials=authenticators,
			timeout=self.provider.timeout,
		)

		cookie = self.codec.sign(ChallengeCookiePayload(challenge=options["challenge"]))
		logger.info(
			f"Issued authentication options "
			f"(allowing {len(authenticators or [])} credentials)"
		)
		return IssuedOptions(options=options, action="authenticate", cookie=cookie)
