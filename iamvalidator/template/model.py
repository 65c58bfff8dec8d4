# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Compiled template data structures."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional, Pattern, Tuple, Union

from ..exceptions import MISSING

if TYPE_CHECKING:
    from ..registry import CustomType


class MissingStrategy(str, Enum):
    """What to do when a declared value is absent."""

    DEFAULT = "default"
    ERROR = "error"
    IGNORE = "ignore"


class ExtraStrategy(str, Enum):
    """What to do with undeclared keys on an object."""

    ERROR = "error"
    EXCLUDE = "exclude"
    INCLUDE = "include"


class TypeKind(str, Enum):
    """Closed set of node kinds a template compiles to."""

    ARRAY = "array"
    BOOLEAN = "boolean"
    CLASS = "class"
    CUSTOM = "custom"
    DATE = "date"
    NUMBER = "number"
    OBJECT = "object"
    STRING = "string"
    VARIANT = "variant"


BASIC_TYPES: Tuple[str, ...] = ("array", "boolean", "date", "number", "object", "string", "variant")


Hook = Callable[..., Any]
TypeRef = Union[str, type]


@dataclass(frozen=True)
class Template:
    """One node of a compiled template tree.

    ``type`` is the declared tag or class exactly as authored. ``kind`` is the
    dispatch kind; ``custom`` holds the registry descriptor for custom tags
    and for class/basic types that a registered descriptor augments.
    """

    type: TypeRef
    kind: TypeKind
    basic_type: TypeRef
    custom: Optional["CustomType"] = None
    is_nullable: bool = False
    missing_strategy: MissingStrategy = MissingStrategy.ERROR
    default_value: Any = MISSING
    extra_strategy: ExtraStrategy = ExtraStrategy.ERROR
    fields: Mapping[str, "Template"] = field(default_factory=dict)
    element: Optional["Template"] = None
    variants: Tuple["Template", ...] = ()
    hint: Optional[Hook] = None
    length: Optional[int] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    min_value: Optional[Union[int, float]] = None
    max_value: Optional[Union[int, float]] = None
    is_integer: bool = False
    regexp: Optional[Pattern[str]] = None
    values: Optional[Union[Tuple[Any, ...], frozenset]] = None
    forbid_duplicates: bool = False
    check_equality: Optional[Callable[[Any, Any], bool]] = None
    transform_before: Optional[Hook] = None
    transform_after: Optional[Hook] = None
    validate_before: Optional[Hook] = None
    validate_after: Optional[Hook] = None

    @property
    def is_variant(self) -> bool:
        return self.kind is TypeKind.VARIANT

    @property
    def type_name(self) -> str:
        """Human-readable type description used in ``TYPE_MISMATCH`` info."""

        if isinstance(self.basic_type, type):
            return "[class]"
        return self.basic_type

    def expected_values(self) -> Any:
        """Return the allow-list in the container shape it was authored in."""

        if isinstance(self.values, frozenset):
            return set(self.values)
        if self.values is None:
            return None
        return list(self.values)


def compile_pattern(pattern: Union[str, Pattern[str]]) -> Pattern[str]:
    if isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern)


__all__ = [
    "BASIC_TYPES",
    "ExtraStrategy",
    "MissingStrategy",
    "Template",
    "TypeKind",
    "compile_pattern",
]
