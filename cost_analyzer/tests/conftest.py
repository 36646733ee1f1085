"""
Shared pytest fixtures for cost analyzer tests.
"""

import sys
import os
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

# Keep tests on the embedded catalogue and away from the route rate limit
os.environ.setdefault('PROVIDER_SERVICE_URL', '')
os.environ.setdefault('RATE_LIMIT_PER_WINDOW', '10000')

import pytest
from fastapi.testclient import TestClient
from cost_analyzer.main import app
from cost_analyzer.cache.cache_store import get_cache_store
from cost_analyzer.resilience.circuit_breaker import reset_circuit_breakers


@pytest.fixture(autouse=True)
def reset_shared_state():
    """Clear the shared cache and circuit breakers between tests."""
    get_cache_store().clear()
    reset_circuit_breakers()
    yield
    get_cache_store().clear()
    reset_circuit_breakers()


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock():
    """Controllable clock for TTL and breaker tests."""
    return FakeClock()


@pytest.fixture
def sample_workload():
    """A mixed workload touching every category."""
    return {
        'compute': [
            {'size': 'medium', 'quantity': 2, 'hoursPerMonth': 730, 'utilization': 50},
            {'size': 'large', 'quantity': 1, 'hoursPerMonth': 365, 'utilization': 30, 'os': 'windows'},
        ],
        'storage': [
            {'type': 'object', 'sizeGB': 500},
            {'type': 'block', 'sizeGB': 200, 'critical': True},
        ],
        'database': [
            {'type': 'mysql', 'tier': 'medium', 'storageSizeGB': 100, 'highAvailability': 'standby'},
        ],
        'networking': [
            {'type': 'loadBalancer', 'dataTransferGB': 200},
        ],
        'serverless': [
            {'type': 'function', 'executionsPerMonth': 2000000, 'memoryMB': 256, 'avgDurationMs': 200},
        ],
        'managedServices': [
            {'type': 'kubernetes', 'size': 'medium', 'quantity': 1},
        ],
        'preferred_provider': 'aws',
        'userType': 'business',
    }
