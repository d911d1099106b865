# (c) Copyright Datacraft, 2026
import pytest

from passkey_auth.services.action import (
	AUTHENTICATE_LOGGED_IN,
	EMAIL_REQUIRED,
	EMAIL_REQUIRED_LOGGED_IN,
	INVALID_ACTION,
	INVALID_COMBINATION,
	resolve_action,
)
from passkey_auth.services.types import ActionError, ResolvedAction


@pytest.mark.parametrize(
	"action, logged_in, session_email, query_email, email_exists, expected",
	[
		# anonymous without email
		(None, False, None, None, False, ActionError(EMAIL_REQUIRED)),
		("register", False, None, None, False, ActionError(EMAIL_REQUIRED)),
		# anonymous with email, resolved by the existence check
		(None, False, None, "a@x.com", True, ResolvedAction("authenticate", "a@x.com")),
		(None, False, None, "a@x.com", False, ResolvedAction("register", "a@x.com")),
		("authenticate", False, None, "a@x.com", True, ResolvedAction("authenticate", "a@x.com")),
		("register", False, None, "a@x.com", False, ResolvedAction("register", "a@x.com")),
		# explicit action contradicting the existence check
		("authenticate", False, None, "a@x.com", False, ActionError(INVALID_COMBINATION)),
		("register", False, None, "a@x.com", True, ActionError(INVALID_COMBINATION)),
		# logged in without email
		(None, True, "me@x.com", None, False, ActionError(EMAIL_REQUIRED_LOGGED_IN)),
		("register", True, "me@x.com", None, False, ActionError(EMAIL_REQUIRED_LOGGED_IN)),
		# logged in with email only registers, using the session email
		(None, True, "me@x.com", "me@x.com", True, ResolvedAction("register", "me@x.com")),
		("register", True, "me@x.com", "other@x.com", False, ResolvedAction("register", "me@x.com")),
		# authenticate while logged in
		("authenticate", True, "me@x.com", "me@x.com", True, ActionError(AUTHENTICATE_LOGGED_IN)),
		("authenticate", True, "me@x.com", None, False, ActionError(AUTHENTICATE_LOGGED_IN)),
	],
)
def test_resolve_action_table(action, logged_in, session_email, query_email, email_exists, expected):
	assert resolve_action(action, logged_in, session_email, query_email, email_exists) == expected


def test_anonymous_authenticate_without_email_is_unrestricted():
	result = resolve_action("authenticate", False, None, None, False)
	assert result == ResolvedAction("authenticate", None)


def test_unknown_action_is_rejected():
	result = resolve_action("delete", False, None, "a@x.com", True)
	assert isinstance(result, ActionError)
	assert result.message == INVALID_ACTION
	assert result.success is False
