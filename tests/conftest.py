from __future__ import annotations

from pathlib import Path

import pytest

from manualpack.storage import ManualStore
from tests.helpers import HashingEmbedder, RecordingSink


@pytest.fixture
def hashing_embedder() -> HashingEmbedder:
    return HashingEmbedder()


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def store(tmp_path: Path) -> ManualStore:
    """An initialized, empty pack in a temp directory."""
    s = ManualStore(tmp_path / "test.manualpack")
    s.initialize()
    return s


@pytest.fixture
def sample_manual_markdown() -> str:
    return (
        "# Galaga Service Manual\n\n"
        "### Page 1\n"
        "Safety. Always unplug the cabinet before opening the service door. "
        "High voltage is present on the monitor chassis even when power is off.\n\n"
        "### Page 2\n"
        "Coin door. If the coin mechanism rejects quarters, clean the coin path "
        "and check the credit switch wiring.\n"
    )
