"""Unified chat error taxonomy public surface.

This module re-exports the implementations under
``vault_chat.base.errors_parts`` to keep a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ProviderError
from .errors_parts.classification import (
    classify_exception,
    is_connection_refused,
    is_name_resolution_failure,
    status_to_code,
)

__all__ = [
    "ErrorCode",
    "ProviderError",
    "classify_exception",
    "is_connection_refused",
    "is_name_resolution_failure",
    "status_to_code",
]
