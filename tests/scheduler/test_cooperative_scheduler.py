# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""
Tests for the cooperative scheduler.

Key concepts:
- A DelayManager tracks time since the last cooperative yield
- run_chain consults it before every step and yields once the budget is spent
- Steps continue, interrupt (success) or raise (abort)
"""

from __future__ import annotations

import anyio
import pytest

from iamvalidator import create_validator
from iamvalidator.scheduler import CONTINUE, INTERRUPT, DelayManager, run_chain, run_in_new_task


class FakeClock:
    def __init__(self):
        self.now = 0

    def __call__(self):
        return self.now


def test_delay_manager_threshold():
    clock = FakeClock()
    manager = DelayManager(100, clock=clock)

    clock.now = 100
    assert manager.should_delay_execution() is False

    clock.now = 101
    assert manager.should_delay_execution() is True

    manager.update_timestamp()
    assert manager.elapsed_nsecs() == 0
    assert manager.should_delay_execution() is False


@pytest.mark.anyio
async def test_chain_runs_every_step_in_order():
    order = []

    def step(index, outcome=None):
        async def _step():
            order.append(index)
            return outcome

        return _step

    interrupted = await run_chain([step(0), step(1, CONTINUE), step(2)], DelayManager())

    assert interrupted is False
    assert order == [0, 1, 2]


@pytest.mark.anyio
async def test_interrupt_skips_remaining_steps():
    order = []

    def step(index, outcome=None):
        async def _step():
            order.append(index)
            return outcome

        return _step

    interrupted = await run_chain([step(0), step(1, INTERRUPT), step(2)], DelayManager())

    assert interrupted is True
    assert order == [0, 1]


@pytest.mark.anyio
async def test_raising_step_aborts_chain():
    order = []

    async def boom():
        raise RuntimeError("boom")

    async def after():
        order.append("after")

    with pytest.raises(RuntimeError, match="boom"):
        await run_chain([boom, after], DelayManager())

    assert order == []


@pytest.mark.anyio
async def test_checkpoint_taken_once_budget_is_spent():
    """
    GIVEN: A 100ns budget on a fake clock
    WHEN: Each step advances the clock by 60ns
    THEN: The manager yields before every second step and restarts its budget
    """
    clock = FakeClock()
    manager = DelayManager(100, clock=clock)

    async def tick():
        clock.now += 60

    await run_chain([tick] * 6, manager)

    assert manager.yield_count == 2
    assert manager.elapsed_nsecs() == 120


@pytest.mark.anyio
async def test_validation_yields_under_tiny_budget():
    """A 1ns budget forces checkpoints during an ordinary validation call."""
    template = {"type": "array", "element": {"type": "number"}}

    validator = create_validator(template, max_delay_nsecs=1)

    assert await validator.validate(list(range(50))) == list(range(50))


@pytest.mark.anyio
async def test_other_tasks_progress_during_long_validation():
    progressed = []
    seen_during_validation = []

    async def background():
        progressed.append(True)

    template = {
        "type": "array",
        "element": {"type": "number"},
        "validate_after": lambda value, options: seen_during_validation.extend(progressed),
    }
    validator = create_validator(template, max_delay_nsecs=1)

    async with anyio.create_task_group() as tg:
        tg.start_soon(background)
        result = await validator.validate(list(range(200)))

    assert result == list(range(200))
    assert seen_during_validation == [True]


@pytest.mark.anyio
async def test_run_in_new_task_returns_result():
    async def add(a, b):
        return a + b

    assert await run_in_new_task(add, 2, 3) == 5


@pytest.mark.anyio
async def test_run_in_new_task_reraises_unwrapped():
    error = ValueError("bad")

    async def fail():
        raise error

    with pytest.raises(ValueError) as exc_info:
        await run_in_new_task(fail)

    assert exc_info.value is error
