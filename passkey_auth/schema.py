# (c) Copyright Datacraft, 2026
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


PasskeyAction = Literal["authenticate", "register"]


class RelayingParty(BaseModel):
    name: str
    id: str  # usually the site's domain
    origin: str

    model_config = ConfigDict(frozen=True)


class PasskeyProvider(BaseModel):
    id: str = "passkey"
    name: str = "Passkey"
    type: Literal["passkey"] = "passkey"
    relaying_party: RelayingParty
    timeout: int = 60000  # ms

    model_config = ConfigDict(frozen=True)


def passkey_provider(settings) -> PasskeyProvider:
    return PasskeyProvider(
        relaying_party=settings.relaying_party(),
        timeout=settings.webauthn_timeout,
    )


class User(BaseModel):
    id: str
    email: str
    email_verified: datetime | None = None
    name: str | None = None

    model_config = ConfigDict(from_attributes=True)


class Account(BaseModel):
    user_id: str
    type: str = "passkey"
    provider: str = "passkey"
    provider_account_id: str

    model_config = ConfigDict(from_attributes=True)


class Authenticator(BaseModel):
    credential_id: bytes
    provider_account_id: str
    credential_public_key: bytes
    counter: int = Field(ge=0)
    credential_device_type: str
    credential_backed_up: bool
    transports: list[str] | None = None

    model_config = ConfigDict(from_attributes=True)


class UserData(BaseModel):
    user: User
    account: Account
    authenticator: Authenticator | None = None


class ChallengeCookiePayload(BaseModel):
    """Ceremony state carried by the signed challenge cookie.

    Serialized as ``{"challenge": ..., "providerAccountId": ...}``.
    """
    challenge: str = Field(min_length=1)
    provider_account_id: str | None = Field(default=None, alias="providerAccountId")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_claims(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# Request/Response models


class PasskeyOptionsQuery(BaseModel):
    """Query of the options step."""
    action: str | None = None
    email: str | None = None


class PasskeyVerifyRequest(BaseModel):
    """Body posted by the browser script to the verify step."""
    action: PasskeyAction
    email: str | None = None
    response: Any = None


class CookieOptions(BaseModel):
    http_only: bool = True
    same_site: Literal["lax", "strict", "none"] = "lax"
    path: str = "/"
    secure: bool = True
    max_age: int = 0


class SignedCookie(BaseModel):
    name: str
    value: str
    options: CookieOptions = Field(default_factory=CookieOptions)


class ResponseInternal(BaseModel):
    """Framework-level response: status, body and cookies to set."""
    status: int = 200
    body: Any = None
    cookies: list[SignedCookie] = []
