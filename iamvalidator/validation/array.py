# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Array (list/tuple) validation."""

from __future__ import annotations

from typing import Any, List, Sequence

from ..exceptions import ErrorCode
from ..scheduler import run_chain
from ..template.model import Template
from .base import Path, ValidationContext, create_error
from .basic import check_array_length, strict_equals


async def validate_array(value: Sequence[Any], template: Template, path: Path, ctx: ValidationContext) -> List[Any]:
    """Check length bounds, validate elements in index order, then look for duplicates.

    Length constraints are checked before any element is touched. The
    duplicate scan compares validated elements pairwise, lowest index first,
    one chain step per left-hand index so large arrays stay interruptible.
    """

    check_array_length(value, template, path)

    if not value:
        return []

    element = template.element
    result: List[Any] = []
    for index, item in enumerate(value):
        await ctx.delay_manager.pause_if_due()
        result.append(await ctx.recurse(item, element, path + (index,), ctx))

    if template.forbid_duplicates:
        equals = template.check_equality or strict_equals

        def duplicate_step(index: int):
            async def step():
                for other in range(index + 1, len(result)):
                    if equals(result[index], result[other]):
                        raise create_error(ErrorCode.DUPLICATE_ITEMS, path, value, {"indexes": [index, other]})

            return step

        await run_chain((duplicate_step(index) for index in range(len(result))), ctx.delay_manager)

    return result


__all__ = ["validate_array"]
