"""Messaging exceptions."""

from modules.core.exceptions import ValidationFailed

SEND_FORBIDDEN = "You do not have permission to message on this order"
LIST_FORBIDDEN = "You do not have permission to view messages on this order"


class MessageValidationError(ValidationFailed):
    """Message text missing or blank."""
