"""
Pytest Configuration and Shared Fixtures

Reference 2x2 tables used across the test suite.
"""

import pytest

from epicalc.schema.base import ContingencyTable


@pytest.fixture
def harmful_exposure_table():
    """Exposure raises an outcome from 5% to 20% (100 per arm)."""
    return ContingencyTable(a=20, b=80, c=5, d=95)


@pytest.fixture
def zero_exposed_events_table():
    """No events in the exposed arm."""
    return ContingencyTable(a=0, b=100, c=10, d=90)


@pytest.fixture
def case_control_table():
    return ContingencyTable(a=10, b=20, c=10, d=20)


@pytest.fixture
def equal_risk_table():
    """10% risk in both arms."""
    return ContingencyTable(a=5, b=45, c=5, d=45)


@pytest.fixture
def straddling_table():
    """Small protective effect whose risk-difference CI crosses zero."""
    return ContingencyTable(a=3, b=97, c=5, d=95)


def pytest_configure(config):
    """Configure pytest settings."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
