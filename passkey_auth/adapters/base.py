# (c) Copyright Datacraft, 2026
"""Adapter interface and capability checks."""
from typing import Protocol

from passkey_auth.errors import MissingAdapter, UnsupportedAdapter
from passkey_auth.schema import Account, Authenticator, User

# Methods each ceremony step calls on the adapter
OPTIONS_METHODS = (
	"get_user_by_email",
	"list_linked_accounts",
	"list_authenticators_by_account_id",
)
AUTHENTICATION_METHODS = (
	"get_authenticator",
	"get_user_by_account",
	"update_authenticator_counter",
)
REGISTRATION_METHODS = (
	"get_user_by_email",
	"create_user",
	"list_linked_accounts",
	"link_account",
	"create_authenticator",
)


class Adapter(Protocol):
	"""Interface the passkey provider expects from storage.

	``update_authenticator_counter`` must compare and set atomically and
	raise ``CounterRegressionError`` when the counter does not increase.
	"""

	async def get_user_by_email(self, email: str) -> User | None: ...

	async def list_linked_accounts(self, user_id: str) -> list[Account]: ...

	async def list_authenticators_by_account_id(
		self, provider_account_id: str
	) -> list[Authenticator]: ...

	async def get_authenticator(self, credential_id: bytes) -> Authenticator | None: ...

	async def get_user_by_account(
		self, provider: str, provider_account_id: str
	) -> User | None: ...

	async def update_authenticator_counter(
		self, credential_id: bytes, new_counter: int
	) -> Authenticator: ...

	async def create_user(self, user: User) -> User: ...

	async def link_account(self, account: Account) -> Account: ...

	async def create_authenticator(self, authenticator: Authenticator) -> Authenticator: ...


def assert_adapter_implements(adapter, methods, context: str) -> None:
	"""Raise a configuration error unless adapter implements every method."""
	if adapter is None:
		raise MissingAdapter(f"{context} requires an adapter.")

	missing = [
		name for name in methods
		if not callable(getattr(adapter, name, None))
	]
	if missing:
		raise UnsupportedAdapter(
			f"{context} requires an adapter that implements", missing
		)
