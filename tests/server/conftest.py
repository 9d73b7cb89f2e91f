"""Pytest fixtures for server module testing."""

from collections.abc import Iterator
from unittest.mock import patch

import pytest

from tests.server.helpers import ControlledReader


@pytest.fixture(autouse=True)
def controlled_reader(monkeypatch: pytest.MonkeyPatch) -> Iterator[ControlledReader]:
    reader = ControlledReader()
    monkeypatch.setenv("AI2GNSS_NOINIT", "1")
    with patch("server.main.AI2Reader", return_value=reader):
        yield reader
    reader.cancel()
