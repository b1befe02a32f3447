"""Validation utilities for Nail Studio UI inputs.

The rules live in :mod:`nailstudio.core.validation` so the API client can
use them without importing the UI package.
"""

from nailstudio.core.validation import EMPTY_PROMPT_MESSAGE, ValidationError, validate_prompt

__all__ = ["EMPTY_PROMPT_MESSAGE", "ValidationError", "validate_prompt"]
