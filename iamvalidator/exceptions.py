# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Exception types and error codes for the validator.

Two families live here:

* ``TemplateError`` - raised synchronously by ``create_validator`` when a
  template or custom type descriptor is malformed. These are programmer
  mistakes and are never surfaced through the validation result.
* ``ValidationError`` - the structured data error produced by a validation
  call. It carries ``code``, ``path``, ``data`` (when a value was present) and
  ``info``, mirroring the shape callers serialize with :meth:`to_dict`.

User hooks report failures by raising :class:`HookError`; the engine turns
those into a ``ValidationError`` located at the hook's path.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Union


class _Missing:
    """Sentinel type for an absent value (distinct from ``None``)."""

    _instance: Optional["_Missing"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_Missing, ())


MISSING: Any = _Missing()


class ErrorCode(str, Enum):
    """Built-in error codes surfaced on :class:`ValidationError`."""

    BOOLEAN_NOT_IN_VALUES = "BOOLEAN_NOT_IN_VALUES"
    CUSTOM_ERROR = "CUSTOM_ERROR"
    DUPLICATE_ITEMS = "DUPLICATE_ITEMS"
    EXTRA_FIELDS = "EXTRA_FIELDS"
    INVALID_ARRAY_LENGTH = "INVALID_ARRAY_LENGTH"
    INVALID_NUMBER = "INVALID_NUMBER"
    INVALID_STRING = "INVALID_STRING"
    INVALID_STRING_LENGTH = "INVALID_STRING_LENGTH"
    MISSING_FIELD = "MISSING_FIELD"
    NUMBER_NOT_INTEGER = "NUMBER_NOT_INTEGER"
    NUMBER_NOT_IN_VALUES = "NUMBER_NOT_IN_VALUES"
    NO_MATCHING_VARIANT = "NO_MATCHING_VARIANT"
    STRING_NOT_IN_VALUES = "STRING_NOT_IN_VALUES"
    TYPE_MISMATCH = "TYPE_MISMATCH"
    UNALLOWED_NULL = "UNALLOWED_NULL"

    def __str__(self) -> str:
        return self.value


PathSegment = Union[str, int]


class IamValidatorError(Exception):
    """Base class for all validator exceptions."""


class ConfigurationError(IamValidatorError, ValueError):
    """Raised for invalid validator options or environment configuration."""


class TemplateError(IamValidatorError, ValueError):
    """Raised when a template or custom type descriptor is malformed."""


class ValidationError(IamValidatorError):
    """Structured validation failure.

    ``code`` is an :class:`ErrorCode` for built-in failures or whatever string
    a hook supplied. ``path`` lists field names and indices from the root.
    ``data`` is the offending value, or ``MISSING`` when no value was present.
    """

    def __init__(
        self,
        code: Union[ErrorCode, str],
        path: Sequence[PathSegment] = (),
        data: Any = MISSING,
        info: Optional[Mapping[str, Any]] = None,
    ):
        self.code = code
        self.path = list(path)
        self.data = data
        self.info: Dict[str, Any] = dict(info) if info else {}
        super().__init__(self._format_message())

    @property
    def has_data(self) -> bool:
        return self.data is not MISSING

    @property
    def dotted_path(self) -> str:
        return ".".join(str(segment) for segment in self.path) or "<root>"

    def _format_message(self) -> str:
        message = f"{self.code} at {self.dotted_path}"
        if self.info:
            details = ", ".join(f"{key}={value!r}" for key, value in self.info.items())
            message = f"{message} ({details})"
        return message

    def to_dict(self) -> Dict[str, Any]:
        """Return the plain ``{code, path, data?, info}`` representation."""

        payload: Dict[str, Any] = {
            "code": str(self.code),
            "path": list(self.path),
            "info": dict(self.info),
        }
        if self.has_data:
            payload["data"] = self.data
        return payload

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValidationError):
            return NotImplemented
        return (
            self.code == other.code
            and self.path == other.path
            and self.data == other.data
            and self.info == other.info
        )

    __hash__ = Exception.__hash__

    def __repr__(self) -> str:
        return (
            f"ValidationError(code={str(self.code)!r}, path={self.path!r}, "
            f"data={self.data!r}, info={self.info!r})"
        )


class HookError(IamValidatorError):
    """Raised by user hooks (and custom type ``validate``) to reject a value.

    ``code`` defaults to ``CUSTOM_ERROR`` when omitted; ``info`` defaults to an
    empty dict.
    """

    def __init__(
        self,
        code: Optional[str] = None,
        info: Optional[Mapping[str, Any]] = None,
        message: Optional[str] = None,
    ):
        self.code = code
        self.info = info
        super().__init__(message or (code or ErrorCode.CUSTOM_ERROR.value))


__all__ = [
    "MISSING",
    "ConfigurationError",
    "ErrorCode",
    "HookError",
    "IamValidatorError",
    "PathSegment",
    "TemplateError",
    "ValidationError",
]
