# (c) Copyright Datacraft, 2026
"""In-process adapter, for development and tests."""
import asyncio
import logging

from passkey_auth.errors import AdapterError, CounterRegressionError
from passkey_auth.schema import Account, Authenticator, User

logger = logging.getLogger(__name__)


class MemoryAdapter:
	"""Keeps users, accounts and authenticators in dictionaries.

	Records are copied in and out so callers never share state with the
	store.
	"""

	def __init__(self):
		self._users: dict[str, User] = {}
		self._accounts: dict[tuple[str, str], Account] = {}
		self._authenticators: dict[bytes, Authenticator] = {}
		self._lock = asyncio.Lock()

	async def get_user_by_email(self, email: str) -> User | None:
		for user in self._users.values():
			if user.email == email:
				return user.model_copy()
		return None

	async def list_linked_accounts(self, user_id: str) -> list[Account]:
		return [
			account.model_copy()
			for account in self._accounts.values()
			if account.user_id == user_id
		]

	async def list_authenticators_by_account_id(
		self, provider_account_id: str
	) -> list[Authenticator]:
		return [
			auth.model_copy()
			for auth in self._authenticators.values()
			if auth.provider_account_id == provider_account_id
		]

	async def get_authenticator(self, credential_id: bytes) -> Authenticator | None:
		auth = self._authenticators.get(bytes(credential_id))
		return auth.model_copy() if auth else None

	async def get_user_by_account(
		self, provider: str, provider_account_id: str
	) -> User | None:
		account = self._accounts.get((provider, provider_account_id))
		if not account:
			return None
		user = self._users.get(account.user_id)
		return user.model_copy() if user else None

	async def update_authenticator_counter(
		self, credential_id: bytes, new_counter: int
	) -> Authenticator:
		async with self._lock:
			auth = self._authenticators.get(bytes(credential_id))
			if not auth:
				raise AdapterError("Authenticator not found")

			# Authenticators that do not implement a counter always report 0
			if auth.counter == 0 and new_counter == 0:
				return auth.model_copy()

			if new_counter <= auth.counter:
				raise CounterRegressionError(
					f"Counter {new_counter} is not greater than stored counter {auth.counter}"
				)

			auth.counter = new_counter
			return auth.model_copy()

	async def create_user(self, user: User) -> User:
		async with self._lock:
			if user.id in self._users:
				raise AdapterError(f"User already exists: {user.id}")
			self._users[user.id] = user.model_copy()
		return user

	async def link_account(self, account: Account) -> Account:
		key = (account.provider, account.provider_account_id)
		async with self._lock:
			if key in self._accounts:
				raise AdapterError(f"Account already linked: {account.provider_account_id}")
			self._accounts[key] = account.model_copy()
		return account

	async def create_authenticator(self, authenticator: Authenticator) -> Authenticator:
		key = bytes(authenticator.credential_id)
		async with self._lock:
			if key in self._authenticators:
				raise AdapterError("Authenticator already registered")
			self._authenticators[key] = authenticator.model_copy()
		logger.debug(f"Stored authenticator for account {authenticator.provider_account_id}")
		return authenticator
