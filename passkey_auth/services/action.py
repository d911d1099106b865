# (c) Copyright Datacraft, 2026
"""Decides whether an options request registers or authenticates."""
import logging

from .types import ActionError, ResolvedAction

logger = logging.getLogger(__name__)

AUTHENTICATE = "authenticate"
REGISTER = "register"

EMAIL_REQUIRED = "email is required to register"
EMAIL_REQUIRED_LOGGED_IN = "email is required to register a new passkey"
AUTHENTICATE_LOGGED_IN = "authenticate is not permitted while logged in"
INVALID_COMBINATION = "Invalid action/email combination"
INVALID_ACTION = "Invalid action"


def resolve_action(
	action: str | None,
	logged_in: bool,
	session_email: str | None,
	query_email: str | None,
	email_exists: bool,
) -> ResolvedAction | ActionError:
	"""Resolve the ceremony for an options request.

	A logged-in session already proves identity, so it may only add
	passkeys. An anonymous caller is identified by the queried email:
	authenticate when it is registered, register otherwise. An explicit
	action must agree with those facts.

	Args:
		action: "authenticate", "register" or None to decide automatically
		logged_in: Whether the request carries a session
		session_email: Email of the session user
		query_email: Email sent with the request
		email_exists: Whether a user with query_email is registered

	Returns:
		ResolvedAction with the email to use, or ActionError
	"""
	if action is not None and action not in (AUTHENTICATE, REGISTER):
		return ActionError(INVALID_ACTION)

	email = session_email or query_email

	if logged_in:
		if action == AUTHENTICATE:
			return ActionError(AUTHENTICATE_LOGGED_IN)
		if not query_email:
			return ActionError(EMAIL_REQUIRED_LOGGED_IN)
		return ResolvedAction(REGISTER, email)

	if not query_email:
		# Conditional UI: the browser offers any discoverable credential
		if action == AUTHENTICATE:
			return ResolvedAction(AUTHENTICATE, None)
		return ActionError(EMAIL_REQUIRED)

	if action is None:
		return ResolvedAction(AUTHENTICATE if email_exists else REGISTER, email)

	if action == AUTHENTICATE and not email_exists:
		logger.debug(f"No account to authenticate for {query_email}")
		return ActionError(INVALID_COMBINATION)
	if action == REGISTER and email_exists:
		logger.debug(f"{query_email} is already registered")
		return ActionError(INVALID_COMBINATION)

	return ResolvedAction(action, email)
