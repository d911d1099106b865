# (c) Copyright Datacraft, 2026
"""WebAuthn/FIDO2 ceremony library."""

from .service import (
	AuthenticationInfo,
	AuthenticationVerification,
	CeremonyLibrary,
	RegistrationInfo,
	RegistrationVerification,
	WebAuthnCeremony,
	credential_descriptors,
)

__all__ = [
	"AuthenticationInfo",
	"AuthenticationVerification",
	"CeremonyLibrary",
	"RegistrationInfo",
	"RegistrationVerification",
	"WebAuthnCeremony",
	"credential_descriptors",
]
