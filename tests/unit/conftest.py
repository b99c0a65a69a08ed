"""
Unit test fixtures and configuration.

Fixtures specific to unit tests (fast, isolated tests).
"""

from unittest.mock import MagicMock

import numpy as np
import pytest


@pytest.fixture
def mock_logger():
    """Create a mock logger for unit tests."""
    return MagicMock()


@pytest.fixture
def rng():
    return np.random.default_rng(42)
