# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Custom type descriptors and the per-validator registry."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, Mapping, Optional, Union

from .exceptions import TemplateError
from .template.model import BASIC_TYPES

logger = logging.getLogger(__name__)

TypeKey = Union[str, type]

_DESCRIPTOR_KEYS = frozenset({"type", "basic_type", "match", "validate"})


@dataclass(frozen=True)
class CustomType:
    """A caller-registered type.

    ``basic_type`` is the runtime shape the data must have before ``match``
    and ``validate`` are consulted: a basic tag such as ``"string"`` or a
    class. ``match(value, options)`` may decline a value, falling back to
    plain handling; ``validate(value, options)`` returns the (possibly
    rewritten) value or raises :class:`~iamvalidator.exceptions.HookError`.
    Both may be sync or async callables.
    """

    type: TypeKey
    basic_type: TypeKey
    validate: Callable[..., Any]
    match: Optional[Callable[..., Any]] = None


class CustomTypeRegistry(Mapping[TypeKey, CustomType]):
    """Immutable lookup table from type tag (or class) to descriptor.

    Each descriptor is reachable under its own ``type`` and under its
    ``basic_type``; the latter is what lets a descriptor with
    ``basic_type="date"`` augment every ``"date"`` field.
    """

    def __init__(self, custom_types: Iterable[Union[CustomType, Mapping[str, Any]]] = ()):
        table: Dict[TypeKey, CustomType] = {}
        for index, entry in enumerate(custom_types):
            descriptor = _coerce_descriptor(entry, index)
            table[descriptor.type] = descriptor
            table[descriptor.basic_type] = descriptor
        self._table = table
        if table:
            logger.debug("Registered %d custom type key(s): %s", len(table), list(table))

    def __getitem__(self, key: TypeKey) -> CustomType:
        return self._table[key]

    def __iter__(self) -> Iterator[TypeKey]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def is_custom_tag(self, key: Any) -> bool:
        """True when *key* is a registered tag that is not a basic tag."""

        return isinstance(key, str) and key not in BASIC_TYPES and key in self._table

    def __repr__(self) -> str:
        return f"CustomTypeRegistry({list(self._table)!r})"


def _coerce_descriptor(entry: Union[CustomType, Mapping[str, Any]], index: int) -> CustomType:
    prefix = f"Invalid custom type [{index}]"

    if isinstance(entry, CustomType):
        descriptor = entry
    elif isinstance(entry, Mapping):
        unknown = set(entry) - _DESCRIPTOR_KEYS
        if unknown:
            raise TemplateError(f"{prefix}: unknown key(s) {sorted(unknown)}")
        if "validate" not in entry or "type" not in entry or "basic_type" not in entry:
            missing = sorted(_DESCRIPTOR_KEYS - {"match"} - set(entry))
            raise TemplateError(f"{prefix}: missing key(s) {missing}")
        descriptor = CustomType(
            type=entry["type"],
            basic_type=entry["basic_type"],
            validate=entry["validate"],
            match=entry.get("match"),
        )
    else:
        raise TemplateError(prefix)

    type_ = descriptor.type
    if not (isinstance(type_, type) or (isinstance(type_, str) and type_ and type_ not in BASIC_TYPES)):
        raise TemplateError(f"{prefix}.type")

    basic_type = descriptor.basic_type
    basic_is_tag = isinstance(basic_type, str)
    if basic_is_tag:
        if basic_type not in BASIC_TYPES or basic_type == "variant":
            raise TemplateError(f"{prefix}.basic_type")
    elif not isinstance(basic_type, type):
        raise TemplateError(f"{prefix}.basic_type")

    if descriptor.match is not None and not callable(descriptor.match):
        raise TemplateError(f"{prefix}.match")

    if basic_is_tag and descriptor.match is None:
        raise TemplateError(f"{prefix}.match")

    if not callable(descriptor.validate):
        raise TemplateError(f"{prefix}.validate")

    return descriptor


__all__ = ["CustomType", "CustomTypeRegistry"]
