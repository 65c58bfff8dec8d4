# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Constraint checks for leaf values (string, number, boolean)."""

from __future__ import annotations

import math
from typing import Any, Optional

from ..exceptions import ErrorCode
from ..template.model import Template
from .base import Path, create_error


def strict_equals(left: Any, right: Any) -> bool:
    """Equality that never matches a ``bool`` with a number."""

    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    return left == right


def _contains(values: Any, value: Any) -> bool:
    if isinstance(values, frozenset) and value not in values:
        return False
    return any(item is value or strict_equals(value, item) for item in values)


def check_values(value: Any, template: Template, path: Path, code: ErrorCode) -> None:
    values = template.values
    if values is not None and not _contains(values, value):
        raise create_error(code, path, value, {"expected_values": template.expected_values()})


def _check_length(value: Any, template: Template, path: Path, code: ErrorCode) -> None:
    size = len(value)

    if template.length is not None and size != template.length:
        raise create_error(code, path, value, {"expected_length": template.length, "length": size})

    if template.min_length is not None and size < template.min_length:
        raise create_error(code, path, value, {"expected_min_length": template.min_length, "length": size})

    if template.max_length is not None and size > template.max_length:
        raise create_error(code, path, value, {"expected_max_length": template.max_length, "length": size})


def validate_string(value: str, template: Template, path: Path) -> str:
    check_values(value, template, path, ErrorCode.STRING_NOT_IN_VALUES)
    _check_length(value, template, path, ErrorCode.INVALID_STRING_LENGTH)

    if template.regexp is not None and template.regexp.search(value) is None:
        raise create_error(ErrorCode.INVALID_STRING, path, value)

    return value


def _is_integral(value: Any) -> bool:
    if isinstance(value, int):
        return True
    return math.isfinite(value) and float(value).is_integer()


def validate_number(value: Any, template: Template, path: Path) -> Any:
    check_values(value, template, path, ErrorCode.NUMBER_NOT_IN_VALUES)

    if template.is_integer and not _is_integral(value):
        raise create_error(ErrorCode.NUMBER_NOT_INTEGER, path, value)

    minimum: Optional[Any] = template.min_value
    if minimum is not None and value < minimum:
        raise create_error(ErrorCode.INVALID_NUMBER, path, value, {"expected_min_value": minimum})

    maximum: Optional[Any] = template.max_value
    if maximum is not None and value > maximum:
        raise create_error(ErrorCode.INVALID_NUMBER, path, value, {"expected_max_value": maximum})

    return value


def validate_boolean(value: bool, template: Template, path: Path) -> bool:
    check_values(value, template, path, ErrorCode.BOOLEAN_NOT_IN_VALUES)
    return value


def check_array_length(value: Any, template: Template, path: Path) -> None:
    _check_length(value, template, path, ErrorCode.INVALID_ARRAY_LENGTH)


__all__ = [
    "check_array_length",
    "check_values",
    "strict_equals",
    "validate_boolean",
    "validate_number",
    "validate_string",
]
