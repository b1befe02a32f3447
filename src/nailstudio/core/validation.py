"""Input validation shared by the API client and the UI handlers."""

import logging

logger = logging.getLogger(__name__)

EMPTY_PROMPT_MESSAGE = "Por favor ingresa una descripción"


class ValidationError(Exception):
    """User-friendly validation error.

    This exception is raised when user input fails validation.
    The message is intended to be displayed directly to the user.
    """

    pass


def validate_prompt(prompt: str | None) -> None:
    """Validate a generation prompt before anything is sent.

    Args:
        prompt: Text typed by the user

    Raises:
        ValidationError: If the prompt is missing or whitespace only
    """
    if not prompt or not prompt.strip():
        logger.debug("Rejected empty prompt")
        raise ValidationError(EMPTY_PROMPT_MESSAGE)
