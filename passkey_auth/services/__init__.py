# (c) Copyright Datacraft, 2026
"""Passkey ceremony services."""
from .action import resolve_action
from .options import ChallengeIssuer
from .verify import ResponseVerifier
from .passkey import PasskeyHandler
from .types import (
	ActionError,
	IssuedOptions,
	PasskeyFailure,
	PasskeyResult,
	PasskeySuccess,
	ResolvedAction,
)

__all__ = [
	"resolve_action",
	"ChallengeIssuer",
	"ResponseVerifier",
	"PasskeyHandler",
	"ActionError",
	"IssuedOptions",
	"PasskeyFailure",
	"PasskeyResult",
	"PasskeySuccess",
	"ResolvedAction",
]
