# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Metric instrument definitions for the validator."""

from __future__ import annotations

import time
from typing import Optional

from .runtime import meter

validate_total = meter.create_counter(
    name="iamvalidator.validate.total",
    description="Counts top-level validation calls partitioned by status and error code.",
    unit="1",
)

validate_latency_ms = meter.create_histogram(
    name="iamvalidator.validate.latency.ms",
    description="Wall-clock time of a top-level validation call, including hook suspensions.",
    unit="ms",
)

scheduler_yield_total = meter.create_counter(
    name="iamvalidator.scheduler.yield.total",
    description="Counts cooperative yields taken because a call exceeded its delay budget.",
    unit="1",
)

template_compile_total = meter.create_counter(
    name="iamvalidator.template.compile.total",
    description="Counts compiled templates partitioned by outcome.",
    unit="1",
)


def record_validation_metrics(status: str, started_at: float, code: Optional[str] = None) -> None:
    """Record the outcome of one validation call.

    Args:
        status: ``"ok"`` or ``"error"``.
        started_at: ``time.perf_counter()`` value taken when the call began.
        code: Error code for failed calls.
    """

    duration_ms = (time.perf_counter() - started_at) * 1000.0
    attributes = {"status": status}
    if code is not None:
        attributes["code"] = code
    validate_latency_ms.record(duration_ms, {"status": status})
    validate_total.add(1, attributes)


__all__ = [
    "record_validation_metrics",
    "scheduler_yield_total",
    "template_compile_total",
    "validate_latency_ms",
    "validate_total",
]
