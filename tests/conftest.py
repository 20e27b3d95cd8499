"""
Pytest configuration for RestMachine Client tests.
"""

import pytest

from restmachine_client.testing import MockTransport


@pytest.fixture
def anyio_backend():
    """Run async tests on asyncio only (trio not installed)."""
    return "asyncio"


@pytest.fixture
def transport():
    """Fresh recording transport for each test."""
    return MockTransport()
