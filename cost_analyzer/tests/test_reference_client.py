"""
Tests for the provider reference data client and its catalogue fallback.
"""

import httpx
import pytest
from cost_analyzer.cache.cache_store import InMemoryCacheStore
from cost_analyzer.pricing import reference_catalog
from cost_analyzer.pricing.reference_client import ReferenceDataClient
from cost_analyzer.resilience.circuit_breaker import CircuitBreaker, CircuitState


SERVICE_URL = 'http://provider-service.test'

LIVE_PROVIDERS = [
    {'id': 'aws', 'name': 'AWS (live)', 'description': 'live'},
    {'id': 'gcp', 'name': 'GCP (live)', 'description': 'live'},
]


def _client(handler, cache=None, breaker=None, base_url=SERVICE_URL):
    return ReferenceDataClient(
        base_url=base_url,
        cache=cache if cache is not None else InMemoryCacheStore(),
        timeout=1.0,
        cache_ttl_seconds=60,
        circuit_breaker=breaker or CircuitBreaker('provider_service_test'),
        transport=httpx.MockTransport(handler),
    )


def _live_handler(calls):
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        if request.url.path == '/list':
            return httpx.Response(200, json=LIVE_PROVIDERS)
        if request.url.path == '/provider/aws':
            return httpx.Response(200, json=LIVE_PROVIDERS[0])
        if request.url.path == '/provider/aws/regions':
            return httpx.Response(200, json={
                'provider': 'aws',
                'regions': [{'id': 'us-east-1', 'name': 'N. Virginia', 'location': 'Virginia', 'continent': 'North America'}],
            })
        return httpx.Response(404, json={'error': 'not found'})
    return handler


@pytest.mark.asyncio
async def test_live_provider_list_is_cached():
    """Live responses are returned and served from cache afterwards."""
    calls = []
    client = _client(_live_handler(calls))

    first = await client.list_providers()
    second = await client.list_providers()

    assert first == LIVE_PROVIDERS
    assert second == LIVE_PROVIDERS
    assert calls == ['/list']


@pytest.mark.asyncio
async def test_live_regions_unwrapped():
    """The regions payload is unwrapped to the region list."""
    client = _client(_live_handler([]))
    regions = await client.get_regions('aws')
    assert regions[0]['id'] == 'us-east-1'


@pytest.mark.asyncio
async def test_live_not_found_falls_back_to_catalogue():
    """A 404 from the service defers to the embedded catalogue."""
    client = _client(_live_handler([]))
    assert (await client.get_provider('azure'))['name'] == 'Microsoft Azure'
    assert await client.get_provider('vultr') is None


@pytest.mark.asyncio
async def test_timeout_falls_back_to_catalogue():
    """Timeouts never surface to callers."""
    def handler(request):
        raise httpx.ReadTimeout('timed out', request=request)

    cache = InMemoryCacheStore()
    client = _client(handler, cache=cache)
    providers = await client.list_providers()

    assert [p['id'] for p in providers] == [p['id'] for p in reference_catalog.PROVIDERS]
    assert cache.get('providers:list') is None


@pytest.mark.asyncio
async def test_server_error_falls_back_to_catalogue():
    """HTTP errors fall back to the catalogue regions."""
    client = _client(lambda request: httpx.Response(503))
    regions = await client.get_regions('digitalocean')
    assert [r['id'] for r in regions][:2] == ['nyc1', 'sfo3']


@pytest.mark.asyncio
async def test_malformed_payload_falls_back():
    """Payloads without provider ids are treated as unavailable."""
    client = _client(lambda request: httpx.Response(200, json={'unexpected': True}))
    providers = await client.list_providers()
    assert len(providers) == len(reference_catalog.PROVIDERS)


@pytest.mark.asyncio
async def test_repeated_failures_open_circuit():
    """After three failures the service is no longer called."""
    calls = []

    def handler(request):
        calls.append(request.url.path)
        return httpx.Response(500)

    breaker = CircuitBreaker('provider_service_test')
    client = _client(handler, breaker=breaker)
    for _ in range(5):
        await client.list_providers()

    assert breaker.current_state() == CircuitState.OPEN
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_unconfigured_client_uses_catalogue_without_requests():
    """Without a service URL the catalogue answers directly."""
    calls = []
    client = _client(_live_handler(calls), base_url='')

    assert (await client.get_provider('ibm'))['name'] == 'IBM Cloud'
    assert calls == []
