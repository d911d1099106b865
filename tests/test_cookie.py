# (c) Copyright Datacraft, 2026
from datetime import datetime, timezone, timedelta

import jwt
import pytest

from passkey_auth.cookie import ChallengeCookieCodec
from passkey_auth.schema import ChallengeCookiePayload

from conftest import SECRET


def test_sign_then_decode_returns_payload(codec):
	payload = ChallengeCookiePayload(challenge="abc", provider_account_id="acct")
	cookie = codec.sign(payload)

	assert cookie.name == "passkey.challenge"
	assert cookie.options.http_only is True
	assert cookie.options.max_age == 300
	assert codec.decode({cookie.name: cookie.value}) == payload


def test_payload_wire_shape(codec):
	cookie = codec.sign(ChallengeCookiePayload(challenge="abc", provider_account_id="acct"))
	claims = jwt.decode(cookie.value, SECRET, algorithms=["HS256"])
	assert claims["challenge"] == "abc"
	assert claims["providerAccountId"] == "acct"
	assert claims["exp"] > claims["iat"]

	cookie = codec.sign(ChallengeCookiePayload(challenge="abc"))
	claims = jwt.decode(cookie.value, SECRET, algorithms=["HS256"])
	assert "providerAccountId" not in claims


def test_decode_with_wrong_secret_is_none(codec):
	cookie = codec.sign(ChallengeCookiePayload(challenge="abc"))
	other = ChallengeCookieCodec(secret="another-secret-that-is-also-long-enough")
	assert other.decode({cookie.name: cookie.value}) is None


def test_decode_truncated_cookie_is_none(codec):
	cookie = codec.sign(ChallengeCookiePayload(challenge="abc"))
	assert codec.decode({cookie.name: cookie.value[:-5]}) is None
	assert codec.decode({cookie.name: "not-a-token"}) is None


def test_decode_missing_cookie_is_none(codec):
	assert codec.decode({}) is None
	assert codec.decode({"other": "value"}) is None


def test_decode_expired_cookie_is_none(codec):
	past = datetime.now(timezone.utc) - timedelta(minutes=10)
	token = jwt.encode(
		{"challenge": "abc", "iat": past, "exp": past + timedelta(seconds=1)},
		SECRET,
		algorithm="HS256",
	)
	assert codec.decode({codec.name: token}) is None


def test_decode_requires_expiry_and_challenge(codec):
	no_exp = jwt.encode({"challenge": "abc"}, SECRET, algorithm="HS256")
	assert codec.decode({codec.name: no_exp}) is None

	future = datetime.now(timezone.utc) + timedelta(minutes=1)
	no_challenge = jwt.encode({"exp": future}, SECRET, algorithm="HS256")
	assert codec.decode({codec.name: no_challenge}) is None


def test_expire_clears_cookie(codec):
	cookie = codec.expire()
	assert cookie.value == ""
	assert cookie.options.max_age == 0


def test_empty_secret_is_rejected():
	with pytest.raises(ValueError):
		ChallengeCookieCodec(secret="")
