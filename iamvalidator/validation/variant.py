# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Union ("variant") resolution.

Resolution happens in two phases over the declared variants:

1. Every ``hint`` is evaluated, in declaration order, against the raw value.
   A variant is eligible when its hint returns truthy or when it has no hint.
2. Eligible variants are attempted in declaration order with full
   validation. The first success wins and the rest are never attempted.

When every attempt fails, the reported error is the one from the *last*
attempted variant. With no eligible variant at all the error is
``NO_MATCHING_VARIANT``. ``None`` is not special here: each variant applies
its own ``is_nullable`` rule.
"""

from __future__ import annotations

from typing import Any, List, Optional

from ..exceptions import ErrorCode, ValidationError
from ..scheduler import run_chain
from ..template.model import Template
from .base import Path, ValidationContext, create_error, run_hook


async def validate_variant(value: Any, template: Template, path: Path, ctx: ValidationContext) -> Any:
    eligible: List[Template] = []

    def hint_step(index: int, variant: Template):
        async def step():
            if variant.hint is None:
                eligible.append(variant)
                return
            if await run_hook(variant.hint, value, path, template, ctx, data=value, variant_index=index):
                eligible.append(variant)

        return step

    await run_chain((hint_step(index, variant) for index, variant in enumerate(template.variants)), ctx.delay_manager)

    last_error: Optional[ValidationError] = None

    for variant in eligible:
        await ctx.delay_manager.pause_if_due()
        try:
            return await ctx.recurse(value, variant, path, ctx)
        except ValidationError as exc:
            last_error = exc

    if last_error is not None:
        raise last_error
    raise create_error(ErrorCode.NO_MATCHING_VARIANT, path, value)


__all__ = ["validate_variant"]
