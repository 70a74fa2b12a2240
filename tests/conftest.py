"""Global configuration and fixtures for all pytest-based tests"""

import pytest
from prometheus_client import CollectorRegistry

from catalogprep.catalog.record import CatalogRecord


@pytest.fixture(name="registry")
def fixture_registry():
    return CollectorRegistry()


@pytest.fixture(name="record")
def fixture_record():
    return CatalogRecord(origin="host1", source="srv1", metric="cpu.usage")
