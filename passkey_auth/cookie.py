# (c) Copyright Datacraft, 2026
"""Signed challenge cookie carrying ceremony state between requests."""
import logging
from datetime import datetime, timezone, timedelta
from typing import Mapping

import jwt
from pydantic import ValidationError

from .schema import ChallengeCookiePayload, CookieOptions, SignedCookie

logger = logging.getLogger(__name__)


class ChallengeCookieCodec:
	"""Encodes ceremony state into an HMAC signed, expiring JWT cookie.

	No ceremony state is kept on the server; the browser returns the
	cookie with the verification request.
	"""

	def __init__(
		self,
		secret: str,
		name: str = "passkey.challenge",
		max_age: int = 300,
		algorithm: str = "HS256",
		secure: bool = True,
	):
		if not secret:
			raise ValueError("secret is expected to be non-empty")
		self.secret = secret
		self.name = name
		self.max_age = max_age
		self.algorithm = algorithm
		self.secure = secure

	@classmethod
	def from_settings(cls, settings) -> "ChallengeCookieCodec":
		return cls(
			secret=settings.secret_key,
			name=settings.challenge_cookie_name,
			max_age=settings.challenge_max_age,
			algorithm=settings.token_algorithm.value,
			secure=settings.secure_cookies,
		)

	def _options(self, max_age: int) -> CookieOptions:
		return CookieOptions(
			http_only=True,
			same_site="lax",
			path="/",
			secure=self.secure,
			max_age=max_age,
		)

	def sign(self, payload: ChallengeCookiePayload) -> SignedCookie:
		"""Sign the payload into a cookie ready to be set on the response."""
		now = datetime.now(timezone.utc)
		claims = payload.to_claims()
		claims["iat"] = now
		claims["exp"] = now + timedelta(seconds=self.max_age)

		token = jwt.encode(claims, self.secret, algorithm=self.algorithm)
		return SignedCookie(
			name=self.name,
			value=token,
			options=self._options(self.max_age),
		)

	def decode(self, cookies: Mapping[str, str]) -> ChallengeCookiePayload | None:
		"""Return the verified payload or None if the cookie is unusable."""
		token = cookies.get(self.name)
		if not token:
			logger.debug(f"Challenge cookie {self.name} not present")
			return None

		try:
			claims = jwt.decode(
				token,
				self.secret,
				algorithms=[self.algorithm],
				options={"require": ["exp"]},
			)
		except jwt.ExpiredSignatureError:
			logger.warning("Challenge cookie expired")
			return None
		except jwt.InvalidTokenError as e:
			logger.warning(f"Challenge cookie rejected: {e}")
			return None

		try:
			return ChallengeCookiePayload.model_validate(claims)
		except ValidationError as e:
			logger.warning(f"Challenge cookie payload invalid: {e}")
			return None

	def expire(self) -> SignedCookie:
		"""Cookie that clears the challenge in the browser."""
		return SignedCookie(name=self.name, value="", options=self._options(0))
