# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""OpenTelemetry handles shared by the validator.

Only the OpenTelemetry *API* is used. Without an SDK configured by the host
application every instrument and span is a no-op.
"""

from __future__ import annotations

from opentelemetry import metrics, trace

from .._version import __version__

INSTRUMENTATION_NAME = "iamvalidator"

meter = metrics.get_meter(INSTRUMENTATION_NAME, __version__)


def get_tracer(name: str = INSTRUMENTATION_NAME) -> trace.Tracer:
    """Return a tracer from the globally configured tracer provider."""

    return trace.get_tracer(name, __version__)


__all__ = ["INSTRUMENTATION_NAME", "get_tracer", "meter"]
