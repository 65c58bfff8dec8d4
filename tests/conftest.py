"""Pytest fixtures for the iamvalidator test-suite."""
from __future__ import annotations

import pytest

from iamvalidator.config import MAX_DELAY_ENV


@pytest.fixture(autouse=True)
def _clear_delay_env(monkeypatch):
    """Keep a developer's ``IAMVALIDATOR_MAX_DELAY_NSECS`` out of the tests."""
    monkeypatch.delenv(MAX_DELAY_ENV, raising=False)


# ---------------------------------------------------------------------------
# anyio backend selection – ensure tests run only with asyncio backend
# ---------------------------------------------------------------------------

@pytest.fixture()
def anyio_backend():  # noqa: D401
    """Force *anyio* tests to use the standard asyncio backend only."""
    return "asyncio"
