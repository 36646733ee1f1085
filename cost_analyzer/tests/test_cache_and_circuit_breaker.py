"""
Tests for the TTL cache store and the circuit breaker.
"""

from cost_analyzer.cache.cache_store import InMemoryCacheStore
from cost_analyzer.resilience.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerError,
    CircuitState,
    get_circuit_breaker,
)
import pytest


def test_cache_returns_value_until_expiry(fake_clock):
    """Values are served until their TTL passes."""
    cache = InMemoryCacheStore(clock=fake_clock)
    cache.set('providers:list', [{'id': 'aws'}], ttl_seconds=60)

    fake_clock.advance(59)
    assert cache.get('providers:list') == [{'id': 'aws'}]

    fake_clock.advance(1)
    assert cache.get('providers:list') is None


def test_cache_returns_copies(fake_clock):
    """Mutating a returned value does not change the cached one."""
    cache = InMemoryCacheStore(clock=fake_clock)
    value = {'regions': ['us-east-1']}
    cache.set('provider:aws:regions', value, ttl_seconds=60)

    value['regions'].append('mutated')
    cached = cache.get('provider:aws:regions')
    cached['regions'].append('mutated again')

    assert cache.get('provider:aws:regions') == {'regions': ['us-east-1']}


def test_cache_delete_and_non_positive_ttl(fake_clock):
    """Deleted keys and zero TTLs leave nothing behind."""
    cache = InMemoryCacheStore(clock=fake_clock)
    cache.set('a', 1, ttl_seconds=60)
    cache.delete('a')
    cache.set('b', 2, ttl_seconds=0)

    assert cache.get('a') is None
    assert cache.get('b') is None
    assert len(cache) == 0


def test_cache_sweeps_expired_entries(fake_clock):
    """Periodic cleanup drops expired entries that are never read."""
    cache = InMemoryCacheStore(cleanup_interval=10, clock=fake_clock)
    cache.set('stale', 1, ttl_seconds=5)
    fake_clock.advance(11)
    cache.set('fresh', 2, ttl_seconds=60)

    assert len(cache) == 1


def test_breaker_opens_after_threshold(fake_clock):
    """Three consecutive failures open the circuit."""
    breaker = CircuitBreaker('svc', clock=fake_clock)
    for _ in range(3):
        assert breaker.allow_request()
        breaker.record_failure()

    assert breaker.current_state() == CircuitState.OPEN
    assert not breaker.allow_request()
    with pytest.raises(CircuitBreakerError):
        breaker.ensure_closed()


def test_success_resets_failure_count(fake_clock):
    """A success between failures keeps the circuit closed."""
    breaker = CircuitBreaker('svc', clock=fake_clock)
    breaker.record_failure()
    breaker.record_failure()
    breaker.record_success()
    breaker.record_failure()

    assert breaker.current_state() == CircuitState.CLOSED


def test_half_open_allows_single_trial_call(fake_clock):
    """After the open period one trial call is let through."""
    breaker = CircuitBreaker('svc', clock=fake_clock)
    for _ in range(3):
        breaker.record_failure()

    fake_clock.advance(60)
    assert breaker.allow_request()
    assert breaker.current_state() == CircuitState.HALF_OPEN
    assert not breaker.allow_request()


def test_trial_success_closes_and_failure_reopens(fake_clock):
    """The trial call outcome decides the next state."""
    breaker = CircuitBreaker('svc', clock=fake_clock)
    for _ in range(3):
        breaker.record_failure()

    fake_clock.advance(60)
    breaker.allow_request()
    breaker.record_failure()
    assert breaker.current_state() == CircuitState.OPEN
    assert not breaker.allow_request()

    fake_clock.advance(60)
    breaker.allow_request()
    breaker.record_success()
    assert breaker.current_state() == CircuitState.CLOSED
    assert breaker.allow_request()


def test_registry_returns_shared_instance():
    """Breakers are shared per service name."""
    assert get_circuit_breaker('provider_service') is get_circuit_breaker('provider_service')
    assert get_circuit_breaker('provider_service') is not get_circuit_breaker('other')
