"""Validation engine - per-value pipeline and composite handlers."""

from .base import Handler, HookOptions, ValidationContext, call_hook, create_error, run_hook
from .core import DEFAULT_HANDLERS, matches_basic_type, validate_value

__all__ = [
    "DEFAULT_HANDLERS",
    "Handler",
    "HookOptions",
    "ValidationContext",
    "call_hook",
    "create_error",
    "matches_basic_type",
    "run_hook",
    "validate_value",
]
