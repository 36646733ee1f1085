"""
Tests for HTTP middleware: rate limiting, size limits, request ids and error shaping.
"""

from fastapi import FastAPI
from fastapi.testclient import TestClient
from cost_analyzer.middleware.error_shaping import SafeErrorMiddleware
from cost_analyzer.middleware.rate_limiter import RateLimiter, RateLimitMiddleware
from cost_analyzer.middleware.request_id import RequestIdMiddleware, REQUEST_ID_HEADER
from cost_analyzer.middleware.request_size_limiter import MAX_ENTRIES_PER_CATEGORY


def _rate_limited_app(limit, limiter):
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, limit=limit, limiter=limiter)

    @app.post('/api/pricing')
    async def pricing():
        return {'ok': True}

    @app.get('/api/providers')
    async def providers():
        return []

    return app


def test_rate_limit_rejects_after_limit(fake_clock):
    """Requests beyond the window limit get 429."""
    limiter = RateLimiter(window_seconds=900, clock=fake_clock)
    client = TestClient(_rate_limited_app(2, limiter))

    assert client.post('/api/pricing').status_code == 200
    assert client.post('/api/pricing').status_code == 200

    response = client.post('/api/pricing')
    assert response.status_code == 429
    assert response.json()['error'] == 'rate_limited'
    assert response.headers['Retry-After'] == '900'


def test_rate_limit_window_slides(fake_clock):
    """Old requests stop counting once the window passes."""
    limiter = RateLimiter(window_seconds=900, clock=fake_clock)
    client = TestClient(_rate_limited_app(1, limiter))

    assert client.post('/api/pricing').status_code == 200
    assert client.post('/api/pricing').status_code == 429

    fake_clock.advance(901)
    assert client.post('/api/pricing').status_code == 200


def test_rate_limit_skips_catalogue_routes(fake_clock):
    """Catalogue routes are not rate limited."""
    limiter = RateLimiter(window_seconds=900, clock=fake_clock)
    client = TestClient(_rate_limited_app(1, limiter))

    for _ in range(3):
        assert client.get('/api/providers').status_code == 200


def test_rate_limit_is_per_client(fake_clock):
    """Each forwarded client has its own budget."""
    limiter = RateLimiter(window_seconds=900, clock=fake_clock)
    client = TestClient(_rate_limited_app(1, limiter))

    assert client.post('/api/pricing', headers={'X-Forwarded-For': '10.0.0.1'}).status_code == 200
    assert client.post('/api/pricing', headers={'X-Forwarded-For': '10.0.0.2'}).status_code == 200
    assert client.post('/api/pricing', headers={'X-Forwarded-For': '10.0.0.1'}).status_code == 429


def test_too_many_entries_rejected(client):
    """Categories over the entry limit are rejected with 413."""
    workload = {'storage': [{'type': 'object'}] * (MAX_ENTRIES_PER_CATEGORY + 1)}
    response = client.post('/api/pricing', json=workload)

    assert response.status_code == 413
    assert response.json()['error'] == 'request_too_large'


def test_oversized_body_rejected(client):
    """Bodies over 1 MB are rejected with 413."""
    response = client.post(
        '/api/recommendations',
        content=b'{"pad": "' + b'x' * 1_100_000 + b'"}',
        headers={'Content-Type': 'application/json'},
    )
    assert response.status_code == 413


def test_body_still_readable_after_size_check(client):
    """Accepted bodies reach the route intact."""
    response = client.post('/api/pricing', json={'compute': [{'size': 'small'}]})
    assert response.status_code == 200
    assert response.json()['aws']['compute'] == 8.75


def test_request_id_echoed_or_generated(client):
    """The request id header is propagated or generated."""
    response = client.get('/health', headers={REQUEST_ID_HEADER: 'abc-123'})
    assert response.headers[REQUEST_ID_HEADER] == 'abc-123'

    generated = client.get('/health').headers[REQUEST_ID_HEADER]
    assert len(generated) == 36


def test_unhandled_errors_do_not_leak():
    """Unhandled errors become a generic 500 with the request id."""
    app = FastAPI()
    app.add_middleware(SafeErrorMiddleware)
    app.add_middleware(RequestIdMiddleware)

    @app.get('/boom')
    async def boom():
        raise RuntimeError('secret internals')

    response = TestClient(app).get('/boom', headers={REQUEST_ID_HEADER: 'rid-1'})
    assert response.status_code == 500
    body = response.json()
    assert 'secret internals' not in response.text
    assert body['request_id'] == 'rid-1'
