# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Environment-driven defaults."""

from __future__ import annotations

import logging
import os
from typing import Optional

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

MAX_DELAY_ENV = "IAMVALIDATOR_MAX_DELAY_NSECS"

# One millisecond of synchronous work before a cooperative yield.
DEFAULT_MAX_DELAY_NSECS = 1_000_000


def _parse_positive_int(name: str, raw: str) -> int:
    try:
        value = int(raw.strip())
    except ValueError:
        raise ConfigurationError(f"{name} must be a positive integer, got {raw!r}") from None
    if value <= 0:
        raise ConfigurationError(f"{name} must be a positive integer, got {raw!r}")
    return value


def get_default_max_delay_nsecs() -> int:
    """Return the yield threshold from ``IAMVALIDATOR_MAX_DELAY_NSECS``.

    Falls back to :data:`DEFAULT_MAX_DELAY_NSECS` when the variable is unset
    or empty.
    """

    raw = os.getenv(MAX_DELAY_ENV, "")
    if not raw.strip():
        return DEFAULT_MAX_DELAY_NSECS
    value = _parse_positive_int(MAX_DELAY_ENV, raw)
    logger.debug("Using %s=%d", MAX_DELAY_ENV, value)
    return value


def resolve_max_delay_nsecs(explicit: Optional[int], fallback: Optional[int] = None) -> int:
    """Pick the effective yield threshold: explicit argument, then *fallback*, then env."""

    for candidate in (explicit, fallback):
        if candidate is None:
            continue
        if isinstance(candidate, bool) or not isinstance(candidate, int) or candidate <= 0:
            raise ConfigurationError(f"max_delay_nsecs must be a positive integer, got {candidate!r}")
        return candidate
    return get_default_max_delay_nsecs()


__all__ = [
    "DEFAULT_MAX_DELAY_NSECS",
    "MAX_DELAY_ENV",
    "get_default_max_delay_nsecs",
    "resolve_max_delay_nsecs",
]
