# (c) Copyright Datacraft, 2026
"""WebAuthn ceremony library for passkey registration and authentication."""

import json
import logging
from dataclasses import dataclass
from typing import Any, Protocol

from webauthn import (
	generate_authentication_options,
	generate_registration_options,
	options_to_json,
	verify_authentication_response,
	verify_registration_response,
)
from webauthn.helpers import base64url_to_bytes
from webauthn.helpers.structs import (
	AttestationConveyancePreference,
	AuthenticatorSelectionCriteria,
	AuthenticatorTransport,
	COSEAlgorithmIdentifier,
	PublicKeyCredentialDescriptor,
	PublicKeyCredentialType,
	ResidentKeyRequirement,
	UserVerificationRequirement,
)

from passkey_auth.schema import Authenticator, RelayingParty

logger = logging.getLogger(__name__)

_TRANSPORTS = {t.value for t in AuthenticatorTransport}


@dataclass(frozen=True)
class RegistrationInfo:
	"""Credential created by a verified registration ceremony."""
	credential_id: bytes
	credential_public_key: bytes
	counter: int
	credential_device_type: str
	credential_backed_up: bool


@dataclass(frozen=True)
class AuthenticationInfo:
	"""Outcome of a verified authentication ceremony."""
	credential_id: bytes
	new_counter: int
	credential_device_type: str
	credential_backed_up: bool
	user_verified: bool


@dataclass(frozen=True)
class RegistrationVerification:
	verified: bool
	registration_info: RegistrationInfo | None = None


@dataclass(frozen=True)
class AuthenticationVerification:
	verified: bool
	authentication_info: AuthenticationInfo | None = None


class CeremonyLibrary(Protocol):
	"""Generates ceremony options and verifies client responses.

	Verification methods raise on malformed or rejected responses.
	"""

	async def generate_registration_options(
		self,
		rp: RelayingParty,
		user_id: bytes,
		user_name: str,
		user_display_name: str,
		exclude_credentials: list[Authenticator] | None = None,
		timeout: int = 60000,
	) -> dict[str, Any]: ...

	async def generate_authentication_options(
		self,
		rp: RelayingParty,
		allow_credentials: list[Authenticator] | None = None,
		timeout: int = 60000,
	) -> dict[str, Any]: ...

	async def verify_registration(
		self,
		rp: RelayingParty,
		response: dict[str, Any],
		expected_challenge: str,
		require_user_verification: bool = True,
	) -> RegistrationVerification: ...

	async def verify_authentication(
		self,
		rp: RelayingParty,
		response: dict[str, Any],
		expected_challenge: str,
		authenticator: Authenticator,
		require_user_verification: bool = True,
	) -> AuthenticationVerification: ...


def credential_descriptors(
	authenticators: list[Authenticator] | None,
) -> list[PublicKeyCredentialDescriptor] | None:
	"""Convert stored authenticators to credential descriptors."""
	if not authenticators:
		return None

	descriptors = []
	for auth in authenticators:
		# Transports the library doesn't know about are dropped
		transports = [
			AuthenticatorTransport(t)
			for t in (auth.transports or [])
			if t in _TRANSPORTS
		]
		descriptors.append(
			PublicKeyCredentialDescriptor(
				id=auth.credential_id,
				type=PublicKeyCredentialType.PUBLIC_KEY,
				transports=transports if transports else None,
			)
		)
	return descriptors


class WebAuthnCeremony:
	"""Ceremony library backed by py_webauthn."""

	def __init__(self, supported_pub_key_algs: list[COSEAlgorithmIdentifier] | None = None):
		self.supported_pub_key_algs = supported_pub_key_algs or [
			COSEAlgorithmIdentifier.ECDSA_SHA_256,
			COSEAlgorithmIdentifier.EDDSA,
			COSEAlgorithmIdentifier.RSASSA_PKCS1_v1_5_SHA_256,
		]

	async def generate_registration_options(
		self,
		rp: RelayingParty,
		user_id: bytes,
		user_name: str,
		user_display_name: str,
		exclude_credentials: list[Authenticator] | None = None,
		timeout: int = 60000,
	) -> dict[str, Any]:
		"""Generate options for navigator.credentials.create().

		Args:
			rp: Relaying party the credential is scoped to
			user_id: WebAuthn user handle
			user_name: Username (email)
			user_display_name: Display name
			exclude_credentials: Authenticators already registered to the account

		Returns:
			JSON-ready options dict
		"""
		options = generate_registration_options(
			rp_id=rp.id,
			rp_name=rp.name,
			user_id=user_id,
			user_name=user_name,
			user_display_name=user_display_name,
			timeout=timeout,
			attestation=AttestationConveyancePreference.NONE,
			authenticator_selection=AuthenticatorSelectionCriteria(
				resident_key=ResidentKeyRequirement.PREFERRED,
				require_resident_key=True,
				user_verification=UserVerificationRequirement.PREFERRED,
			),
			supported_pub_key_algs=self.supported_pub_key_algs,
			exclude_credentials=credential_descriptors(exclude_credentials),
		)
		return json.loads(options_to_json(options))

	async def generate_authentication_options(
		self,
		rp: RelayingParty,
		allow_credentials: list[Authenticator] | None = None,
		timeout: int = 60000,
	) -> dict[str, Any]:
		"""Generate options for navigator.credentials.get().

		An empty allow list lets the browser offer any discoverable
		credential for the relaying party.
		"""
		options = generate_authentication_options(
			rp_id=rp.id,
			timeout=timeout,
			allow_credentials=credential_descriptors(allow_credentials),
			user_verification=UserVerificationRequirement.PREFERRED,
		)
		return json.loads(options_to_json(options))

	async def verify_registration(
		self,
		rp: RelayingParty,
		response: dict[str, Any],
		expected_challenge: str,
		require_user_verification: bool = True,
	) -> RegistrationVerification:
		verification = verify_registration_response(
			credential=response,
			expected_challenge=base64url_to_bytes(expected_challenge),
			expected_rp_id=rp.id,
			expected_origin=rp.origin,
			require_user_verification=require_user_verification,
			supported_pub_key_algs=self.supported_pub_key_algs,
		)

		return RegistrationVerification(
			verified=True,
			registration_info=RegistrationInfo(
				credential_id=verification.credential_id,
				credential_public_key=verification.credential_public_key,
				counter=verification.sign_count,
				credential_device_type=_device_type(verification.credential_device_type),
				credential_backed_up=verification.credential_backed_up,
			),
		)

	async def verify_authentication(
		self,
		rp: RelayingParty,
		response: dict[str, Any],
		expected_challenge: str,
		authenticator: Authenticator,
		require_user_verification: bool = True,
	) -> AuthenticationVerification:
		# Raises when the sign count does not increase
		verification = verify_authentication_response(
			credential=response,
			expected_challenge=base64url_to_bytes(expected_challenge),
			expected_rp_id=rp.id,
			expected_origin=rp.origin,
			credential_public_key=authenticator.credential_public_key,
			credential_current_sign_count=authenticator.counter,
			require_user_verification=require_user_verification,
		)

		return AuthenticationVerification(
			verified=True,
			authentication_info=AuthenticationInfo(
				credential_id=verification.credential_id,
				new_counter=verification.new_sign_count,
				credential_device_type=_device_type(verification.credential_device_type),
				credential_backed_up=verification.credential_backed_up,
				user_verified=verification.user_verified,
			),
		)


def _device_type(value: Any) -> str:
	return getattr(value, "value", value) or "single_device"
