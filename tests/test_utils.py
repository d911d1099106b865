# (c) Copyright Datacraft, 2026
from datetime import datetime, timezone, timedelta

import jwt
from starlette.requests import Request

from passkey_auth.utils import get_session_email, request_cookies

from conftest import SECRET


def make_request(headers: dict[str, str]) -> Request:
	return Request({
		"type": "http",
		"method": "GET",
		"path": "/",
		"headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
	})


def session_token(email="me@x.com", secret=SECRET, expires_in=60) -> str:
	exp = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
	return jwt.encode({"sub": "user-1", "email": email, "exp": exp}, secret, algorithm="HS256")


def test_session_email_from_cookie(settings):
	request = make_request({"Cookie": f"access_token={session_token()}"})
	assert get_session_email(request, settings) == "me@x.com"


def test_session_email_from_bearer_header(settings):
	request = make_request({"Authorization": f"Bearer {session_token()}"})
	assert get_session_email(request, settings) == "me@x.com"


def test_anonymous_request(settings):
	assert get_session_email(make_request({}), settings) is None
	assert get_session_email(make_request({"Authorization": "Basic abc"}), settings) is None


def test_invalid_or_expired_session_is_anonymous(settings):
	forged = make_request({"Cookie": f"access_token={session_token(secret='another-secret-that-is-long-enough!')}"})
	expired = make_request({"Cookie": f"access_token={session_token(expires_in=-60)}"})

	assert get_session_email(forged, settings) is None
	assert get_session_email(expired, settings) is None


def test_request_cookies():
	request = make_request({"Cookie": "passkey.challenge=abc; other=1"})
	assert request_cookies(request) == {"passkey.challenge": "abc", "other": "1"}
