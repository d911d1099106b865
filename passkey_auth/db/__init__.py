# (c) Copyright Datacraft, 2026
"""Database module for passkey storage."""
from .orm import User, Account, Authenticator
from .base import Base

__all__ = [
	'Base',
	'User',
	'Account',
	'Authenticator',
]
