# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Shared types for the validation engine: per-call context and hook plumbing."""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from functools import reduce
from typing import Any, Awaitable, Callable, Mapping, Optional, Tuple

from ..exceptions import ErrorCode, HookError, PathSegment, ValidationError
from ..registry import CustomTypeRegistry
from ..scheduler import DelayManager
from ..template.model import Template, TypeKind

Path = Tuple[PathSegment, ...]

# Signature of the recursive entry point composite handlers call back into.
Recurse = Callable[[Any, Template, Path, "ValidationContext"], Awaitable[Any]]
# Per-kind handlers share the same shape.
Handler = Recurse


@dataclass
class ValidationContext:
    """State shared by every step of one top-level validation call.

    ``root`` is the untouched input used by :meth:`get_data`; ``context`` is
    the caller's mutable object handed to every hook. ``depth`` counts the
    nested values currently being validated; steps of one call never overlap,
    so a single counter is enough.
    """

    root: Any
    context: Any
    custom_types: CustomTypeRegistry
    delay_manager: DelayManager
    recurse: Recurse
    handlers: Mapping[TypeKind, Handler]
    depth: int = 0

    def get_data(self, path: Any) -> Any:
        """Resolve an absolute *path* against the original input."""

        return reduce(lambda node, segment: node[segment], path, self.root)

    def hook_options(self, path: Path, template: Template, *, variant_index: Optional[int] = None) -> "HookOptions":
        return HookOptions(
            context=self.context,
            get_data=self.get_data,
            path=path,
            template=template,
            custom_types=self.custom_types,
            variant_index=variant_index,
        )


@dataclass(frozen=True)
class HookOptions:
    """Second argument passed to every hook, ``hint``, ``match`` and custom ``validate``."""

    context: Any
    get_data: Callable[[Any], Any]
    path: Path
    template: Template
    custom_types: CustomTypeRegistry = field(repr=False)
    variant_index: Optional[int] = None


async def call_hook(hook: Callable[..., Any], value: Any, options: HookOptions) -> Any:
    """Invoke a sync or async hook and return its (awaited) result."""

    result = hook(value, options)
    if inspect.isawaitable(result):
        result = await result
    return result


def create_error(code: ErrorCode, path: Path, data: Any, info: Optional[Mapping[str, Any]] = None) -> ValidationError:
    return ValidationError(code, path, data, info)


def custom_error(path: Path, data: Any, error: HookError) -> ValidationError:
    """Normalize a hook failure into the structured error shape."""

    code = error.code if isinstance(error.code, str) and error.code else ErrorCode.CUSTOM_ERROR
    info = error.info if isinstance(error.info, Mapping) else {}
    return ValidationError(code, path, data, info)


async def run_hook(
    hook: Callable[..., Any],
    value: Any,
    path: Path,
    template: Template,
    ctx: ValidationContext,
    *,
    data: Any,
    variant_index: Optional[int] = None,
) -> Any:
    """Call *hook*, converting a :class:`HookError` into a ``ValidationError`` at *path*.

    *data* is the value reported on failure, which is the node's current
    value rather than necessarily the one handed to the hook.
    """

    try:
        return await call_hook(hook, value, ctx.hook_options(path, template, variant_index=variant_index))
    except HookError as exc:
        raise custom_error(path, data, exc) from exc


__all__ = [
    "Handler",
    "HookOptions",
    "Path",
    "Recurse",
    "ValidationContext",
    "call_hook",
    "create_error",
    "custom_error",
    "run_hook",
]
