"""Telemetry package - OpenTelemetry metrics and tracing."""

from .metrics import (
    record_validation_metrics,
    scheduler_yield_total,
    template_compile_total,
    validate_latency_ms,
    validate_total,
)
from .runtime import get_tracer, meter

__all__ = [
    "get_tracer",
    "meter",
    "record_validation_metrics",
    "scheduler_yield_total",
    "template_compile_total",
    "validate_latency_ms",
    "validate_total",
]
