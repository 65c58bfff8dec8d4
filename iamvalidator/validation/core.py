# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Per-value validation pipeline.

Each value goes through the same stages, each one preceded by a check of the
call's delay manager::

    missing check -> transform_before -> null check / type resolution
        -> validate_before -> dispatch -> validate_after -> transform_after

The missing check happens first, because an absent value never reaches the
hooks. A nullable ``None`` stops right after the null check and is returned
as is. Dispatch hands the value to the matched custom type, or to the handler
registered for the template's kind. Kinds without a handler (``date``, plain
classes, declined custom types) pass the value through unchanged.

Every :data:`STACK_SEGMENT_DEPTH` levels of nesting the walk continues in a
child task, so the Python stack stays bounded however deep the input is.
"""

from __future__ import annotations

import datetime
from typing import Any, Callable, Mapping, Optional

from ..exceptions import MISSING, ErrorCode
from ..registry import CustomType
from ..scheduler import run_in_new_task
from ..template.model import MissingStrategy, Template, TypeKind
from .array import validate_array
from .base import Handler, Path, ValidationContext, create_error, run_hook
from .basic import validate_boolean, validate_number, validate_string
from .object import validate_object
from .variant import validate_variant

STACK_SEGMENT_DEPTH = 64


def _leaf(check: Callable[[Any, Template, Path], Any]) -> Handler:
    async def handler(value: Any, template: Template, path: Path, ctx: ValidationContext) -> Any:
        return check(value, template, path)

    handler.__name__ = check.__name__
    return handler


DEFAULT_HANDLERS: Mapping[TypeKind, Handler] = {
    TypeKind.ARRAY: validate_array,
    TypeKind.BOOLEAN: _leaf(validate_boolean),
    TypeKind.NUMBER: _leaf(validate_number),
    TypeKind.OBJECT: validate_object,
    TypeKind.STRING: _leaf(validate_string),
    TypeKind.VARIANT: validate_variant,
}


def matches_basic_type(value: Any, basic_type: Any) -> bool:
    """Return True when *value*'s runtime representation fits *basic_type*."""

    if isinstance(basic_type, type):
        return isinstance(value, basic_type)
    if basic_type == "array":
        return isinstance(value, (list, tuple))
    if basic_type == "object":
        return isinstance(value, Mapping)
    if basic_type == "string":
        return isinstance(value, str)
    if basic_type == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if basic_type == "boolean":
        return isinstance(value, bool)
    if basic_type == "date":
        return isinstance(value, datetime.date)
    return False


async def _resolve_custom(data: Any, template: Template, path: Path, ctx: ValidationContext) -> Optional[CustomType]:
    """Check the runtime type of *data* and return the custom type that claims it, if any."""

    if not matches_basic_type(data, template.basic_type):
        raise create_error(ErrorCode.TYPE_MISMATCH, path, data, {"expected_type": template.type_name})

    custom = template.custom
    if custom is None:
        return None
    if custom.match is None or await run_hook(custom.match, data, path, template, ctx, data=data):
        return custom
    return None


async def _run_stages(value: Any, template: Template, path: Path, ctx: ValidationContext) -> Any:
    pause_if_due = ctx.delay_manager.pause_if_due

    # ``data`` is the input after transform_before and is what errors report;
    # ``value`` is the evolving result.
    await pause_if_due()
    if template.transform_before is not None:
        value = await run_hook(template.transform_before, value, path, template, ctx, data=value)
    data = value

    await pause_if_due()
    custom: Optional[CustomType] = None
    if data is None and not template.is_variant:
        if template.is_nullable:
            return None
        raise create_error(ErrorCode.UNALLOWED_NULL, path, data)
    if not template.is_variant:
        custom = await _resolve_custom(data, template, path, ctx)

    await pause_if_due()
    if template.validate_before is not None:
        await run_hook(template.validate_before, data, path, template, ctx, data=data)

    await pause_if_due()
    if custom is not None:
        value = await run_hook(custom.validate, value, path, template, ctx, data=data)
    else:
        handler = ctx.handlers.get(template.kind)
        if handler is not None:
            value = await handler(value, template, path, ctx)

    await pause_if_due()
    if template.validate_after is not None:
        await run_hook(template.validate_after, value, path, template, ctx, data=data)

    await pause_if_due()
    if template.transform_after is not None:
        value = await run_hook(template.transform_after, value, path, template, ctx, data=data)

    return value


async def validate_value(value: Any, template: Template, path: Path, ctx: ValidationContext) -> Any:
    """Validate *value* against *template* at *path*.

    Returns the validated (possibly transformed) value, ``MISSING`` for an
    absent value whose template ignores it, or the template's default.

    Raises:
        ValidationError: on the first failure anywhere below this node.
    """

    if value is MISSING:
        strategy = template.missing_strategy
        if strategy is MissingStrategy.DEFAULT:
            return template.default_value
        if strategy is MissingStrategy.IGNORE:
            return MISSING
        raise create_error(ErrorCode.MISSING_FIELD, path, MISSING)

    ctx.depth += 1
    try:
        if ctx.depth % STACK_SEGMENT_DEPTH == 0:
            return await run_in_new_task(_run_stages, value, template, path, ctx)
        return await _run_stages(value, template, path, ctx)
    finally:
        ctx.depth -= 1


__all__ = ["DEFAULT_HANDLERS", "STACK_SEGMENT_DEPTH", "matches_basic_type", "validate_value"]
