# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Object (mapping) validation."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from ..exceptions import MISSING, ErrorCode
from ..template.model import ExtraStrategy, Template
from .base import Path, ValidationContext, create_error


async def validate_object(value: Mapping[str, Any], template: Template, path: Path, ctx: ValidationContext) -> Dict[str, Any]:
    """Validate declared fields in declaration order and apply the extra-field policy.

    Undeclared keys are rejected (``error``), dropped (``exclude``) or copied
    verbatim ahead of the declared fields (``include``). A declared field whose
    result is ``MISSING`` is left out of the output.
    """

    fields = template.fields
    extra = {key: item for key, item in value.items() if key not in fields}

    if extra and template.extra_strategy is ExtraStrategy.ERROR:
        raise create_error(ErrorCode.EXTRA_FIELDS, path, value, {"field_names": list(extra)})

    result: Dict[str, Any] = dict(extra) if template.extra_strategy is ExtraStrategy.INCLUDE else {}

    for name, field_template in fields.items():
        await ctx.delay_manager.pause_if_due()
        validated = await ctx.recurse(value.get(name, MISSING), field_template, path + (name,), ctx)
        if validated is not MISSING:
            result[name] = validated

    return result


__all__ = ["validate_object"]
