# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Construction-time template validation.

``compile_template`` walks an authored template (plain mappings, the way
callers write them) and produces an immutable :class:`Template` tree. Every
structural problem is reported here, synchronously, as a ``TemplateError``
naming the offending key by its dotted template path, so nothing at
validation time has to defend against a malformed template.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Dict, Generator, List, Mapping, Optional, Sequence, Tuple

from ..exceptions import MISSING, TemplateError
from .model import (
    BASIC_TYPES,
    ExtraStrategy,
    MissingStrategy,
    Template,
    TypeKind,
    compile_pattern,
)

if TYPE_CHECKING:
    from ..registry import CustomTypeRegistry

logger = logging.getLogger(__name__)

_COMMON_KEYS = frozenset(
    {
        "type",
        "is_nullable",
        "missing_strategy",
        "default_value",
        "transform_before",
        "transform_after",
        "validate_before",
        "validate_after",
    }
)

_KEYS_BY_TAG = {
    "array": frozenset({"element", "length", "min_length", "max_length", "forbid_duplicates", "check_equality"}),
    "boolean": frozenset({"values"}),
    "date": frozenset(),
    "number": frozenset({"values", "min_value", "max_value", "is_integer"}),
    "object": frozenset({"fields", "extra_strategy"}),
    "string": frozenset({"values", "length", "min_length", "max_length", "regexp"}),
    "variant": frozenset({"variants"}),
}

_HOOK_KEYS = ("transform_before", "transform_after", "validate_before", "validate_after")

# Tags whose builders request child templates.
_NESTED_TAGS = frozenset({"array", "object", "variant"})

# A child request is ``(raw, path, allow_hint)``; the compiled child is sent back.
ChildRequest = Tuple[Any, Tuple[Any, ...], bool]
NodeCompilation = Generator[ChildRequest, Template, Template]
OptionsCompilation = Generator[ChildRequest, Template, dict]


def _dotted(path: Sequence[Any]) -> str:
    return ".".join(str(segment) for segment in path) or "<root>"


def _key_path(path: Sequence[Any], key: str) -> str:
    return ".".join([*(str(segment) for segment in path), key])


def _is_length(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_values(raw: Mapping[str, Any], path: Sequence[Any]) -> Optional[Any]:
    values = raw.get("values")
    if values is None and "values" not in raw:
        return None
    if isinstance(values, (set, frozenset)) and values:
        return frozenset(values)
    if isinstance(values, (list, tuple)) and values:
        return tuple(values)
    raise TemplateError(f"Invalid {_key_path(path, 'values')}")


def _check_lengths(raw: Mapping[str, Any], path: Sequence[Any]) -> Tuple[Optional[int], ...]:
    lengths: List[Optional[int]] = []
    for key in ("length", "min_length", "max_length"):
        value = raw.get(key)
        if value is not None and not _is_length(value):
            raise TemplateError(f"Invalid {_key_path(path, key)}")
        lengths.append(value)
    return tuple(lengths)


def _check_flag(raw: Mapping[str, Any], key: str, path: Sequence[Any]) -> bool:
    value = raw.get(key, False)
    if not isinstance(value, bool):
        raise TemplateError(f"Invalid {_key_path(path, key)}")
    return value


def _check_callable(raw: Mapping[str, Any], key: str, path: Sequence[Any]):
    value = raw.get(key)
    if value is not None and not callable(value):
        raise TemplateError(f"Invalid {_key_path(path, key)}")
    return value


class TemplateCompiler:
    """Validate and compile one template tree against a custom type registry.

    Each node is compiled by a generator that yields ``(raw, path,
    allow_hint)`` for every child template it needs and receives the compiled
    child back. :meth:`compile` drives those generators from an explicit
    stack, so template depth is not limited by the Python recursion limit.
    """

    def __init__(self, registry: "CustomTypeRegistry"):
        self._registry = registry
        self.node_count = 0

    def compile(self, raw: Any, path: Tuple[Any, ...] = (), *, allow_hint: bool = False) -> Template:
        stack: List[NodeCompilation] = [self._compile_node(raw, path, allow_hint)]
        compiled: Optional[Template] = None
        while stack:
            try:
                child = stack[-1].send(compiled)
            except StopIteration as done:
                stack.pop()
                compiled = done.value
            else:
                stack.append(self._compile_node(*child))
                compiled = None
        return compiled

    def _compile_node(self, raw: Any, path: Tuple[Any, ...], allow_hint: bool) -> NodeCompilation:
        if not isinstance(raw, Mapping):
            raise TemplateError(f"Invalid template {_dotted(path)}")

        self.node_count += 1
        type_ = raw.get("type")
        kind, basic_tag = self._resolve_kind(type_, path)

        allowed = _COMMON_KEYS | _KEYS_BY_TAG.get(basic_tag, frozenset())
        if allow_hint:
            allowed = allowed | {"hint"}
        unknown = sorted(str(key) for key in raw if key not in allowed)
        if unknown:
            raise TemplateError(f"Unknown key(s) {unknown} in template {_dotted(path)}")

        options = self._common_options(raw, path)

        if kind is TypeKind.CUSTOM:
            descriptor = self._registry[type_]
            return Template(type=type_, kind=kind, basic_type=descriptor.basic_type, custom=descriptor, **options)

        if kind is TypeKind.CLASS:
            descriptor = self._registry.get(type_)
            basic_type = descriptor.basic_type if descriptor is not None else type_
            return Template(type=type_, kind=kind, basic_type=basic_type, custom=descriptor, **options)

        builder = getattr(self, f"_compile_{basic_tag}")
        if basic_tag in _NESTED_TAGS:
            options.update((yield from builder(raw, path)))
        else:
            options.update(builder(raw, path))
        return Template(
            type=type_,
            kind=kind,
            basic_type=type_,
            custom=None if kind is TypeKind.VARIANT else self._registry.get(type_),
            **options,
        )

    def _resolve_kind(self, type_: Any, path: Sequence[Any]) -> Tuple[TypeKind, Optional[str]]:
        if isinstance(type_, type):
            return TypeKind.CLASS, None
        if isinstance(type_, str):
            if type_ in BASIC_TYPES:
                return TypeKind(type_), type_
            if self._registry.is_custom_tag(type_):
                return TypeKind.CUSTOM, None
        raise TemplateError(f"Invalid {_key_path(path, 'type')}")

    def _common_options(self, raw: Mapping[str, Any], path: Sequence[Any]) -> dict:
        options: dict = {"is_nullable": _check_flag(raw, "is_nullable", path)}

        for key in _HOOK_KEYS:
            options[key] = _check_callable(raw, key, path)

        strategy = raw.get("missing_strategy", MissingStrategy.ERROR)
        try:
            options["missing_strategy"] = MissingStrategy(strategy)
        except ValueError:
            raise TemplateError(f"Invalid {_key_path(path, 'missing_strategy')}") from None

        if options["missing_strategy"] is MissingStrategy.DEFAULT and "default_value" not in raw:
            raise TemplateError(f"Missing {_key_path(path, 'default_value')}")
        options["default_value"] = raw.get("default_value", MISSING)

        return options

    def _compile_array(self, raw: Mapping[str, Any], path: Tuple[Any, ...]) -> OptionsCompilation:
        length, min_length, max_length = _check_lengths(raw, path)
        options = {
            "length": length,
            "min_length": min_length,
            "max_length": max_length,
            "forbid_duplicates": _check_flag(raw, "forbid_duplicates", path),
            "check_equality": _check_callable(raw, "check_equality", path),
        }
        options["element"] = yield (raw.get("element"), path + ("element",), False)
        return options

    def _compile_boolean(self, raw: Mapping[str, Any], path: Tuple[Any, ...]) -> dict:
        return {"values": _check_values(raw, path)}

    def _compile_date(self, raw: Mapping[str, Any], path: Tuple[Any, ...]) -> dict:
        return {}

    def _compile_number(self, raw: Mapping[str, Any], path: Tuple[Any, ...]) -> dict:
        options = {
            "is_integer": _check_flag(raw, "is_integer", path),
            "values": _check_values(raw, path),
        }
        for key in ("min_value", "max_value"):
            value = raw.get(key)
            if value is not None and not _is_number(value):
                raise TemplateError(f"Invalid {_key_path(path, key)}")
            options[key] = value
        return options

    def _compile_object(self, raw: Mapping[str, Any], path: Tuple[Any, ...]) -> OptionsCompilation:
        strategy = raw.get("extra_strategy", ExtraStrategy.ERROR)
        try:
            extra_strategy = ExtraStrategy(strategy)
        except ValueError:
            raise TemplateError(f"Invalid {_key_path(path, 'extra_strategy')}") from None

        fields = raw.get("fields")
        if not isinstance(fields, Mapping):
            raise TemplateError(f"Invalid {_key_path(path, 'fields')}")

        compiled: Dict[str, Template] = {}
        for name, field_template in fields.items():
            compiled[name] = yield (field_template, path + ("fields", name), False)
        return {"extra_strategy": extra_strategy, "fields": compiled}

    def _compile_string(self, raw: Mapping[str, Any], path: Tuple[Any, ...]) -> dict:
        length, min_length, max_length = _check_lengths(raw, path)
        regexp = raw.get("regexp")
        if regexp is not None:
            if not isinstance(regexp, (str, re.Pattern)):
                raise TemplateError(f"Invalid {_key_path(path, 'regexp')}")
            try:
                regexp = compile_pattern(regexp)
            except re.error as exc:
                raise TemplateError(f"Invalid {_key_path(path, 'regexp')}: {exc}") from exc
        return {
            "length": length,
            "min_length": min_length,
            "max_length": max_length,
            "regexp": regexp,
            "values": _check_values(raw, path),
        }

    def _compile_variant(self, raw: Mapping[str, Any], path: Tuple[Any, ...]) -> OptionsCompilation:
        variants = raw.get("variants")
        if not isinstance(variants, (list, tuple)) or not variants:
            raise TemplateError(f"Invalid {_key_path(path, 'variants')}")

        compiled: List[Template] = []
        for index, variant in enumerate(variants):
            variant_path = path + ("variants", index)
            node = yield (variant, variant_path, True)
            hint = variant.get("hint")
            if hint is not None:
                if not callable(hint):
                    raise TemplateError(f"Invalid {_key_path(variant_path, 'hint')}")
                node = replace(node, hint=hint)
            compiled.append(node)
        return {"variants": tuple(compiled)}


def compile_template(raw: Any, registry: "CustomTypeRegistry") -> Template:
    """Validate *raw* and return the compiled root :class:`Template`.

    Raises:
        TemplateError: if any node of the tree is malformed.
    """

    compiler = TemplateCompiler(registry)
    template = compiler.compile(raw)
    logger.debug("Compiled template with %d node(s)", compiler.node_count)
    return template


__all__ = ["TemplateCompiler", "compile_template"]
