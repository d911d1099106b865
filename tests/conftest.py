# (c) Copyright Datacraft, 2026
import secrets

import pytest
from webauthn.helpers import base64url_to_bytes, bytes_to_base64url

from passkey_auth.adapters import MemoryAdapter
from passkey_auth.ceremony import (
	AuthenticationInfo,
	AuthenticationVerification,
	RegistrationInfo,
	RegistrationVerification,
)
from passkey_auth.config import Settings
from passkey_auth.cookie import ChallengeCookieCodec
from passkey_auth.schema import Account, Authenticator, User, passkey_provider
from passkey_auth.services import PasskeyHandler

SECRET = "test-secret-key-that-is-long-enough-for-hs256"
ORIGIN = "https://a.example"


class FakeCeremony:
	"""Ceremony library stand-in driven by plain dict responses.

	A response carries the challenge and origin the "browser" signed
	over, and the counter its authenticator reports.
	"""

	def __init__(self):
		self.registration_calls = []
		self.authentication_calls = []

	async def generate_registration_options(
		self, rp, user_id, user_name, user_display_name,
		exclude_credentials=None, timeout=60000,
	):
		self.registration_calls.append({
			"user_id": user_id,
			"user_name": user_name,
			"exclude_credentials": exclude_credentials,
		})
		return {
			"challenge": bytes_to_base64url(secrets.token_bytes(32)),
			"rp": {"id": rp.id, "name": rp.name},
			"user": {
				"id": bytes_to_base64url(user_id),
				"name": user_name,
				"displayName": user_display_name,
			},
			"excludeCredentials": [
				{"id": bytes_to_base64url(a.credential_id), "type": "public-key"}
				for a in exclude_credentials or []
			],
			"authenticatorSelection": {
				"residentKey": "preferred",
				"requireResidentKey": True,
				"userVerification": "preferred",
			},
		}

	async def generate_authentication_options(self, rp, allow_credentials=None, timeout=60000):
		self.authentication_calls.append({"allow_credentials": allow_credentials})
		return {
			"challenge": bytes_to_base64url(secrets.token_bytes(32)),
			"rpId": rp.id,
			"allowCredentials": [
				{"id": bytes_to_base64url(a.credential_id), "type": "public-key"}
				for a in allow_credentials or []
			],
			"userVerification": "preferred",
		}

	def _check(self, rp, response, expected_challenge):
		client_data = response["clientData"]
		if client_data["challenge"] != expected_challenge:
			raise ValueError("Client data challenge was not expected challenge")
		if client_data["origin"] != rp.origin:
			raise ValueError(f"Unexpected client data origin \"{client_data['origin']}\"")

	async def verify_registration(self, rp, response, expected_challenge, require_user_verification=True):
		self._check(rp, response, expected_challenge)
		if not response.get("verified", True):
			return RegistrationVerification(verified=False)
		return RegistrationVerification(
			verified=True,
			registration_info=RegistrationInfo(
				credential_id=base64url_to_bytes(response["id"]),
				credential_public_key=b"public-key",
				counter=response.get("counter", 0),
				credential_device_type="multi_device",
				credential_backed_up=True,
			),
		)

	async def verify_authentication(
		self, rp, response, expected_challenge, authenticator, require_user_verification=True,
	):
		self._check(rp, response, expected_challenge)
		if not response.get("verified", True):
			return AuthenticationVerification(verified=False)
		return AuthenticationVerification(
			verified=True,
			authentication_info=AuthenticationInfo(
				credential_id=authenticator.credential_id,
				new_counter=response["counter"],
				credential_device_type="multi_device",
				credential_backed_up=True,
				user_verified=True,
			),
		)


def make_response(credential_id: bytes, challenge: str, counter: int = 0, origin: str = ORIGIN, **extra) -> dict:
	response = {
		"id": bytes_to_base64url(credential_id),
		"rawId": bytes_to_base64url(credential_id),
		"type": "public-key",
		"response": {"transports": ["internal", "hybrid"]},
		"clientData": {"challenge": challenge, "origin": origin},
		"counter": counter,
	}
	response.update(extra)
	return response


def cookie_jar(cookie) -> dict[str, str]:
	return {cookie.name: cookie.value}


async def seed_passkey_user(
	adapter: MemoryAdapter,
	email: str,
	credential_id: bytes,
	counter: int = 0,
	provider_account_id: str = "account-1",
) -> Authenticator:
	await adapter.create_user(User(id=f"user-{email}", email=email))
	await adapter.link_account(Account(
		user_id=f"user-{email}",
		provider_account_id=provider_account_id,
	))
	return await adapter.create_authenticator(Authenticator(
		credential_id=credential_id,
		provider_account_id=provider_account_id,
		credential_public_key=b"public-key",
		counter=counter,
		credential_device_type="multi_device",
		credential_backed_up=True,
		transports=["internal"],
	))


@pytest.fixture
def settings() -> Settings:
	return Settings(
		secret_key=SECRET,
		webauthn_rp_id="a.example",
		webauthn_rp_name="Example",
		webauthn_origin=ORIGIN,
	)


@pytest.fixture
def provider(settings):
	return passkey_provider(settings)


@pytest.fixture
def codec(settings) -> ChallengeCookieCodec:
	return ChallengeCookieCodec.from_settings(settings)


@pytest.fixture
def adapter() -> MemoryAdapter:
	return MemoryAdapter()


@pytest.fixture
def ceremony() -> FakeCeremony:
	return FakeCeremony()


@pytest.fixture
def handler(settings, adapter, ceremony) -> PasskeyHandler:
	return PasskeyHandler.from_settings(settings, adapter, ceremony=ceremony)
