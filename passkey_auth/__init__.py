# (c) Copyright Datacraft, 2026
"""Passkey (WebAuthn) provider for the authentication framework."""
from .schema import PasskeyProvider, RelayingParty, passkey_provider
from .services import PasskeyHandler

__all__ = [
	"PasskeyHandler",
	"PasskeyProvider",
	"RelayingParty",
	"passkey_provider",
]
