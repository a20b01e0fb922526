"""
Pytest configuration and fixtures for Relaycord tests.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add src directory to path so imports work without an install
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from fakes import FakeConfigStore  # noqa: E402


@pytest.fixture
def config_store():
    return FakeConfigStore()


@pytest.fixture
def fake_bot():
    return MagicMock()
