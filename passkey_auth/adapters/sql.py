# (c) Copyright Datacraft, 2026
"""SQLAlchemy backed adapter."""
import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from passkey_auth.db import orm
from passkey_auth.errors import AdapterError, CounterRegressionError
from passkey_auth.schema import Account, Authenticator, User

logger = logging.getLogger(__name__)


class SQLAlchemyAdapter:
	"""Adapter storing passkey records through SQLAlchemy."""

	def __init__(self, session_factory: sessionmaker | None = None):
		if session_factory is None:
			from passkey_auth.db.engine import get_sessionmaker
			session_factory = get_sessionmaker()
		self.session_factory = session_factory

	def create_all(self) -> None:
		"""Create the passkey tables if missing."""
		with self.session_factory() as db:
			orm.Base.metadata.create_all(db.get_bind())

	def _session(self) -> Session:
		return self.session_factory()

	async def get_user_by_email(self, email: str) -> User | None:
		with self._session() as db:
			row = db.scalar(select(orm.User).where(orm.User.email == email))
			return User.model_validate(row) if row else None

	async def list_linked_accounts(self, user_id: str) -> list[Account]:
		with self._session() as db:
			rows = db.scalars(select(orm.Account).where(orm.Account.user_id == user_id))
			return [Account.model_validate(row) for row in rows]

	async def list_authenticators_by_account_id(
		self, provider_account_id: str
	) -> list[Authenticator]:
		stmt = select(orm.Authenticator).where(
			orm.Authenticator.provider_account_id == provider_account_id
		)
		with self._session() as db:
			return [Authenticator.model_validate(row) for row in db.scalars(stmt)]

	async def get_authenticator(self, credential_id: bytes) -> Authenticator | None:
		with self._session() as db:
			row = db.get(orm.Authenticator, bytes(credential_id))
			return Authenticator.model_validate(row) if row else None

	async def get_user_by_account(
		self, provider: str, provider_account_id: str
	) -> User | None:
		stmt = (
			select(orm.User)
			.join(orm.Account, orm.Account.user_id == orm.User.id)
			.where(
				orm.Account.provider == provider,
				orm.Account.provider_account_id == provider_account_id,
			)
		)
		with self._session() as db:
			row = db.scalar(stmt)
			return User.model_validate(row) if row else None

	async def update_authenticator_counter(
		self, credential_id: bytes, new_counter: int
	) -> Authenticator:
		"""Set the counter only if it increases, in a single UPDATE."""
		credential_id = bytes(credential_id)
		with self._session() as db:
			row = db.get(orm.Authenticator, credential_id)
			if row is None:
				raise AdapterError("Authenticator not found")

			# Authenticators that do not implement a counter always report 0
			if row.counter == 0 and new_counter == 0:
				row.last_used_at = orm.utc_now()
				db.commit()
				return Authenticator.model_validate(row)

			result = db.execute(
				update(orm.Authenticator)
				.where(
					orm.Authenticator.credential_id == credential_id,
					orm.Authenticator.counter < new_counter,
				)
				.values(counter=new_counter, last_used_at=orm.utc_now())
				.execution_options(synchronize_session=False)
			)
			if result.rowcount == 0:
				db.rollback()
				raise CounterRegressionError(
					f"Counter {new_counter} is not greater than stored counter {row.counter}"
				)

			db.commit()
			db.refresh(row)
			return Authenticator.model_validate(row)

	async def create_user(self, user: User) -> User:
		with self._session() as db:
			db.add(orm.User(
				id=user.id,
				email=user.email,
				email_verified=user.email_verified,
				name=user.name,
			))
			self._commit(db, f"User already exists: {user.id}")
		return user

	async def link_account(self, account: Account) -> Account:
		with self._session() as db:
			db.add(orm.Account(
				user_id=account.user_id,
				type=account.type,
				provider=account.provider,
				provider_account_id=account.provider_account_id,
			))
			self._commit(db, f"Account already linked: {account.provider_account_id}")
		return account

	async def create_authenticator(self, authenticator: Authenticator) -> Authenticator:
		with self._session() as db:
			db.add(orm.Authenticator(
				credential_id=bytes(authenticator.credential_id),
				provider_account_id=authenticator.provider_account_id,
				credential_public_key=bytes(authenticator.credential_public_key),
				counter=authenticator.counter,
				credential_device_type=authenticator.credential_device_type,
				credential_backed_up=authenticator.credential_backed_up,
				transports=authenticator.transports,
			))
			self._commit(db, "Authenticator already registered")
		logger.info(f"Stored authenticator for account {authenticator.provider_account_id}")
		return authenticator

	def _commit(self, db: Session, message: str) -> None:
		try:
			db.commit()
		except IntegrityError as e:
			db.rollback()
			raise AdapterError(message) from e
