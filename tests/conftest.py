"""Shared pytest fixtures for the postal test suite."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from postal.config import clear_config

# pylint: disable=redefined-outer-name


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep the config cache and ``$POSTAL_CONFIG`` from leaking between tests."""
    monkeypatch.delenv("POSTAL_CONFIG", raising=False)
    clear_config()
    yield
    clear_config()
