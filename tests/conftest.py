"""Shared fixtures for the integer primitive tests."""

from __future__ import annotations

import pytest

import diagnostics
from inttypes import ALL_TYPES


@pytest.fixture(autouse=True)
def clean_diagnostics():
    """Every test starts and ends with a clear diagnostic state."""
    diagnostics.clear()
    yield
    diagnostics.clear()


@pytest.fixture(params=ALL_TYPES, ids=str)
def int_type(request):
    return request.param
