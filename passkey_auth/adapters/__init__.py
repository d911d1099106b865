# (c) Copyright Datacraft, 2026
"""Storage adapters for users, accounts and authenticators."""
from .base import (
	Adapter,
	AUTHENTICATION_METHODS,
	OPTIONS_METHODS,
	REGISTRATION_METHODS,
	assert_adapter_implements,
)
from .memory import MemoryAdapter
from .sql import SQLAlchemyAdapter

__all__ = [
	"Adapter",
	"MemoryAdapter",
	"SQLAlchemyAdapter",
	"OPTIONS_METHODS",
	"AUTHENTICATION_METHODS",
	"REGISTRATION_METHODS",
	"assert_adapter_implements",
]
