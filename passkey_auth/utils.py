# (c) Copyright Datacraft, 2026
"""Session lookup for requests reaching the passkey provider."""
import logging

from fastapi import Request
from fastapi.security.utils import get_authorization_scheme_param
import jwt

from .config import Settings, get_settings

logger = logging.getLogger(__name__)


def from_header(request: Request) -> str | None:
    authorization = request.headers.get("Authorization")
    scheme, token = get_authorization_scheme_param(authorization)

    if not authorization or scheme.lower() != "bearer":
        return None

    return token


def from_cookie(request: Request, settings: Settings) -> str | None:
    return request.cookies.get(settings.session_cookie_name, None)


def get_token(request: Request, settings: Settings) -> str | None:
    return from_cookie(request, settings) or from_header(request)


def get_session_email(request: Request, settings: Settings | None = None) -> str | None:
    """Email of the signed-in user, or None for anonymous requests.

    A missing, expired or invalid session token counts as anonymous.
    """
    settings = settings or get_settings()
    token = get_token(request, settings)
    if not token:
        return None

    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.token_algorithm.value],
        )
    except jwt.ExpiredSignatureError:
        logger.debug("Session token has expired")
        return None
    except jwt.InvalidTokenError:
        logger.debug("Invalid session token")
        return None

    email = payload.get("email")
    return email if isinstance(email, str) and email else None


def request_cookies(request: Request) -> dict[str, str]:
    """Cookie jar of the request, as the verifier reads it."""
    return dict(request.cookies)
