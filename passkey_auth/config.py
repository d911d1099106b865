# (c) Copyright Datacraft, 2026
import logging

from functools import lru_cache
from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .schema import RelayingParty


logger = logging.getLogger(__name__)


class Algs(str, Enum):
    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"


class Settings(BaseSettings):
    secret_key: str
    db_url: str = "sqlite:///./passkey.db"

    token_algorithm: Algs = Algs.HS256
    session_cookie_name: str = "access_token"

    # Challenge cookie settings
    challenge_cookie_name: str = "passkey.challenge"
    challenge_max_age: int = Field(gt=0, default=300, description="Challenge cookie lifetime in seconds")
    secure_cookies: bool = True

    # WebAuthn/Passkey settings
    webauthn_rp_id: str = Field(default="localhost", description="Relaying Party ID (domain)")
    webauthn_rp_name: str = Field(default="Passkey", description="Relaying Party display name")
    webauthn_origin: str = Field(default="https://localhost", description="Expected origin for WebAuthn")
    webauthn_timeout: int = Field(default=60000, description="WebAuthn timeout in ms")

    model_config = SettingsConfigDict(env_prefix='pk_')

    def relaying_party(self) -> RelayingParty:
        return RelayingParty(
            name=self.webauthn_rp_name,
            id=self.webauthn_rp_id,
            origin=self.webauthn_origin,
        )


@lru_cache()
def get_settings():
    return Settings()
