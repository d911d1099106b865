# (c) Copyright Datacraft, 2026
"""Passkey provider errors."""


class PasskeyError(Exception):
	"""Base passkey provider error."""

	def __init__(self, message: str | Exception | None = None):
		if isinstance(message, Exception):
			self.cause = message
			message = str(message) or message.__class__.__name__
		else:
			self.cause = None
		super().__init__(message or self.__class__.__doc__)


class ConfigurationError(PasskeyError):
	"""The passkey provider is misconfigured."""


class MissingAdapter(ConfigurationError):
	"""Passkey ceremonies require an adapter."""


class UnsupportedAdapter(ConfigurationError):
	"""The adapter does not implement the methods an operation needs."""

	def __init__(self, context: str, missing: list[str]):
		self.missing = missing
		super().__init__(f"{context}: {', '.join(missing)}")


class CeremonyVerificationError(PasskeyError):
	"""The ceremony library rejected the client response."""


class StorageInvariantError(PasskeyError):
	"""Stored passkey records are inconsistent."""


class AdapterError(PasskeyError):
	"""An adapter call failed."""


class CounterRegressionError(AdapterError):
	"""Signature counter did not increase; the credential may be cloned."""


class AccountNotLinked(PasskeyError):
	"""The email belongs to a user the caller is not signed in as."""
