"""Shared fixtures for the healthy-sdk test suite."""
from __future__ import annotations

import os

import pytest


@pytest.fixture(autouse=True)
def _clean_healthy_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ambient HEALTHY_* variables from leaking into config tests."""
    for key in list(os.environ):
        if key.startswith("HEALTHY_"):
            monkeypatch.delenv(key, raising=False)
