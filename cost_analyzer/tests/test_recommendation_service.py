"""
Tests for the cached recommendation service and workload templates.
"""

from cost_analyzer.cache.cache_store import InMemoryCacheStore
from cost_analyzer.services.recommendation_service import RecommendationService, workload_cache_key
from cost_analyzer.services.workload_normalizer import normalize_workload
from cost_analyzer.services.workload_templates import get_template, list_templates, TEMPLATES


def test_generate_uses_selected_provider(sample_workload):
    """Savings are computed against the preferred provider's pricing."""
    sample_workload['preferred_provider'] = 'gcp'
    service = RecommendationService(cache=InMemoryCacheStore(), ttl_seconds=60)
    payload = service.generate(normalize_workload(sample_workload))

    assert payload['summary']['current_monthly_cost'] > 0
    assert payload['summary']['total_recommendations'] == len(payload['recommendations'])


def test_generate_uses_existing_provider_without_preferred():
    """With only an existing provider, savings are computed against its pricing."""
    service = RecommendationService(cache=InMemoryCacheStore(), ttl_seconds=60)
    payload = service.generate(normalize_workload({
        'existingProvider': 'azure',
        'compute': [{'size': 'medium'}],
    }))

    assert payload['summary']['current_monthly_cost'] == 16.0


def test_cache_key_is_stable_and_workload_specific(sample_workload):
    """Equal workloads share a key; different ones do not."""
    first = workload_cache_key(normalize_workload(sample_workload))
    second = workload_cache_key(normalize_workload(dict(sample_workload)))
    assert first == second
    assert first.startswith('recommendations:')

    sample_workload['userType'] = 'developer'
    assert workload_cache_key(normalize_workload(sample_workload)) != first


def test_generate_caches_payload(fake_clock, sample_workload):
    """Payloads are cached for the configured TTL."""
    cache = InMemoryCacheStore(clock=fake_clock)
    service = RecommendationService(cache=cache, ttl_seconds=3600)
    workload = normalize_workload(sample_workload)

    payload = service.generate(workload)
    assert cache.get(workload_cache_key(workload)) == payload

    fake_clock.advance(3600)
    assert cache.get(workload_cache_key(workload)) is None


def test_templates_merge_over_initial_workload():
    """Templates carry the full initial context plus their resources."""
    template = get_template('serverless_app')
    workload = template['workload']

    assert template['name'] == 'Serverless Application'
    assert workload['userType'] == 'business'
    assert workload['region']['gcp'] == 'us-central1'
    assert workload['compute'] == []
    assert workload['serverless'][0]['executionsPerMonth'] == 5000000
    assert 'name' not in workload


def test_templates_are_independent_copies():
    """Mutating a returned template does not affect later calls."""
    get_template('small_website')['workload']['compute'].append({'size': 'xlarge'})
    assert len(get_template('small_website')['workload']['compute']) == 1


def test_every_template_normalizes():
    """All templates are valid workloads."""
    assert len(list_templates()) == len(TEMPLATES)
    for template in list_templates():
        normalize_workload(template['workload'], require_compute=False)
