# (c) Copyright Datacraft, 2026
"""Result types of the passkey ceremony services."""
from dataclasses import dataclass
from typing import Any, Literal

from passkey_auth.schema import PasskeyAction, SignedCookie, UserData


@dataclass(frozen=True)
class ResolvedAction:
	"""Ceremony the options request resolved to."""
	action: PasskeyAction
	email: str | None = None
	success: Literal[True] = True


@dataclass(frozen=True)
class ActionError:
	"""Options request that cannot be served."""
	message: str
	success: Literal[False] = False


@dataclass(frozen=True)
class IssuedOptions:
	"""Ceremony options plus the signed challenge cookie to set."""
	options: dict[str, Any]
	action: PasskeyAction
	cookie: SignedCookie

	def body(self) -> dict[str, Any]:
		return {"options": self.options, "action": self.action}


@dataclass(frozen=True)
class PasskeySuccess:
	"""Verified ceremony."""
	data: UserData
	success: Literal[True] = True


@dataclass(frozen=True)
class PasskeyFailure:
	"""Rejected ceremony; message is safe to show to the user."""
	message: str
	success: Literal[False] = False


PasskeyResult = PasskeySuccess | PasskeyFailure
