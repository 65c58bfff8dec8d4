# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Cooperative scheduling for validation calls.

A single validation call can walk a very large or deep input without ever
awaiting anything that suspends (hooks are optional, and most are
synchronous). To keep such a call from monopolising the event loop, the
engine consults the call's :class:`DelayManager` before each step and
checkpoints on the event loop once the call has run longer than its budget
since the last checkpoint. :func:`run_chain` packages that for a sequence of
steps; the recursive walk calls :meth:`DelayManager.pause_if_due` inline.

Steps run strictly one at a time, in order. A step either continues (returns
``None``/``CONTINUE``), interrupts the chain successfully (returns
``INTERRUPT``), or aborts it by raising.

A checkpoint does not unwind the Python stack of the suspended call, so deep
inputs are walked in segments: :func:`run_in_new_task` continues a nested
validation in a child task, which starts from the event loop's own frame.
"""

from __future__ import annotations

import enum
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional

import anyio

from .config import DEFAULT_MAX_DELAY_NSECS
from .telemetry.metrics import scheduler_yield_total

logger = logging.getLogger(__name__)


class StepOutcome(enum.Enum):
    CONTINUE = "continue"
    INTERRUPT = "interrupt"


CONTINUE = StepOutcome.CONTINUE
INTERRUPT = StepOutcome.INTERRUPT

Step = Callable[[], Awaitable[Optional[StepOutcome]]]


class DelayManager:
    """Track how long a call has run since its last cooperative yield."""

    def __init__(self, max_delay_nsecs: int = DEFAULT_MAX_DELAY_NSECS, *, clock: Callable[[], int] = time.perf_counter_ns):
        self.max_delay_nsecs = max_delay_nsecs
        self._clock = clock
        self._previous = clock()
        self.yield_count = 0

    def elapsed_nsecs(self) -> int:
        return self._clock() - self._previous

    def should_delay_execution(self) -> bool:
        return self.elapsed_nsecs() > self.max_delay_nsecs

    def update_timestamp(self) -> None:
        self._previous = self._clock()

    async def checkpoint(self) -> None:
        """Yield to the event loop, then start a fresh budget."""

        self.yield_count += 1
        scheduler_yield_total.add(1)
        logger.debug("Yielding after %d ns (yield #%d)", self.elapsed_nsecs(), self.yield_count)
        await anyio.sleep(0)
        self.update_timestamp()

    async def pause_if_due(self) -> None:
        if self.should_delay_execution():
            await self.checkpoint()


async def run_chain(steps: Iterable[Step], delay_manager: DelayManager) -> bool:
    """Run *steps* sequentially under *delay_manager*.

    Returns:
        True if a step interrupted the chain with ``INTERRUPT``, False if every
        step ran to completion.

    Raises:
        Whatever a step raises; remaining steps are not run.
    """

    for step in steps:
        await delay_manager.pause_if_due()
        if await step() is INTERRUPT:
            return True
    return False


async def run_in_new_task(func: Callable[..., Awaitable[Any]], *args: Any) -> Any:
    """Await ``func(*args)`` in a child task and return its result.

    The child starts on a fresh stack. An exception raised by *func* is
    re-raised here as is, not wrapped in an exception group.
    """

    outcome: Dict[str, Any] = {}

    async def runner() -> None:
        try:
            outcome["result"] = await func(*args)
        except Exception as exc:
            outcome["error"] = exc

    async with anyio.create_task_group() as tg:
        tg.start_soon(runner)

    if "error" in outcome:
        raise outcome["error"]
    return outcome["result"]


__all__ = [
    "CONTINUE",
    "DelayManager",
    "INTERRUPT",
    "Step",
    "StepOutcome",
    "run_chain",
    "run_in_new_task",
]
