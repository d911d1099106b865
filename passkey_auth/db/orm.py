# (c) Copyright Datacraft, 2026
"""Passkey storage models."""
from datetime import datetime, timezone
from typing import List

from sqlalchemy import (
	String, ForeignKey, Integer, Boolean, LargeBinary, JSON, DateTime,
	UniqueConstraint, CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


def utc_now() -> datetime:
	return datetime.now(timezone.utc)


class User(Base):
	__tablename__ = "users"

	id: Mapped[str] = mapped_column(String(255), primary_key=True)
	email: Mapped[str] = mapped_column(String(320), unique=True, index=True)
	email_verified: Mapped[datetime | None] = mapped_column(
		DateTime(timezone=True), nullable=True
	)
	name: Mapped[str | None] = mapped_column(String(255), nullable=True)
	created_at: Mapped[datetime] = mapped_column(
		DateTime(timezone=True), default=utc_now
	)

	accounts: Mapped[List["Account"]] = relationship(
		back_populates="user", cascade="all, delete-orphan"
	)


class Account(Base):
	"""Link between a user and a provider identity."""

	__tablename__ = "accounts"
	__table_args__ = (
		UniqueConstraint("provider", "provider_account_id", name="uq_account_provider"),
	)

	id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
	user_id: Mapped[str] = mapped_column(
		ForeignKey("users.id", ondelete="CASCADE"), index=True
	)
	type: Mapped[str] = mapped_column(String(32), default="passkey")
	provider: Mapped[str] = mapped_column(String(64))
	provider_account_id: Mapped[str] = mapped_column(String(255), index=True)

	user: Mapped[User] = relationship(back_populates="accounts")


class Authenticator(Base):
	__tablename__ = "authenticators"
	__table_args__ = (
		CheckConstraint("counter >= 0", name="ck_authenticator_counter"),
	)

	credential_id: Mapped[bytes] = mapped_column(LargeBinary, primary_key=True)
	provider_account_id: Mapped[str] = mapped_column(String(255), index=True)
	credential_public_key: Mapped[bytes] = mapped_column(LargeBinary)
	counter: Mapped[int] = mapped_column(Integer, default=0)
	credential_device_type: Mapped[str] = mapped_column(String(32))
	credential_backed_up: Mapped[bool] = mapped_column(Boolean, default=False)
	transports: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
	created_at: Mapped[datetime] = mapped_column(
		DateTime(timezone=True), default=utc_now
	)
	last_used_at: Mapped[datetime | None] = mapped_column(
		DateTime(timezone=True), nullable=True
	)
