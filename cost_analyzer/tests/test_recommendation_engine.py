"""
Tests for the recommendation rule engine.
"""

import pytest
from cost_analyzer.services.workload_normalizer import normalize_workload
from cost_analyzer.services.cost_aggregator import price_provider
from cost_analyzer.services.recommendation_engine import evaluate_rules, Rule, RULES
from cost_analyzer.domain.recommendation_models import Severity


def _actions(raw):
    workload = normalize_workload(raw)
    return [r.action for r in evaluate_rules(workload, price_provider(workload, workload.selected_provider))]


def test_downsize_large_low_utilization():
    """Large instances under 50% utilization trigger downsizing."""
    workload = normalize_workload({'compute': [{'size': 'large', 'quantity': 2, 'utilization': 30}]})
    recommendations = evaluate_rules(workload, price_provider(workload, 'aws'))

    downsize = recommendations[0]
    assert downsize.action == 'resize'
    assert downsize.type == 'compute'
    assert downsize.severity == Severity.HIGH
    assert downsize.saving_potential == '20-30%'
    assert downsize.resource == 'large instance (1 units)'


def test_downsize_not_triggered_at_threshold():
    """Exactly 50% utilization is not low utilization."""
    assert 'resize' not in _actions({'compute': [{'size': 'large', 'utilization': 50}]})


def test_reserved_instances_for_always_on():
    """Instances running at least 700 hours qualify for reservations."""
    assert 'reserved_instance' in _actions({'compute': [{'hoursPerMonth': 700}]})
    assert 'reserved_instance' not in _actions({'compute': [{'hoursPerMonth': 699}]})


def test_lifecycle_uses_total_object_storage():
    """Object storage is summed across entries before the 1000 GB threshold."""
    workload = normalize_workload({'storage': [
        {'type': 'object', 'sizeGB': 600},
        {'type': 'object', 'sizeGB': 600},
        {'type': 'block', 'sizeGB': 5000},
    ]})
    recommendations = evaluate_rules(workload)
    assert [r.action for r in recommendations] == ['lifecycle_policy']
    assert recommendations[0].resource == 'Object storage (1200 GB)'

    assert 'lifecycle_policy' not in _actions({'storage': [{'type': 'object', 'sizeGB': 1000}]})


def test_business_profile_rules():
    """Business rules fire on licensing, budget, compliance, growth and multi-cloud context."""
    actions = _actions({
        'compute': [{'hoursPerMonth': 100}],
        'businessMetrics': {'budgetConstraint': 2000, 'expectedGrowth': 'high'},
        'complianceRequirements': ['gdpr'],
        'preferred_provider': 'aws',
        'existingProvider': 'azure',
    })
    assert actions == [
        'license_optimization',
        'budget_control',
        'consolidate_logging',
        'savings_plan',
        'multi_cloud_management',
    ]


def test_developer_profile_rules():
    """Developer rules fire on clusters, networking, serverless and technical requirements."""
    actions = _actions({
        'userType': 'developer',
        'managedServices': [{'type': 'kubernetes'}],
        'networking': [{}],
        'serverless': [{}],
        'technicalRequirements': {
            'architecturePattern': 'traditional',
            'highAvailability': True,
            'performanceRequirements': 'high',
        },
    })
    assert actions == [
        'cluster_optimization',
        'optimize_data_transfer',
        'optimize_serverless',
        'modernize_architecture',
        'use_managed_ha',
        'use_compute_optimized',
    ]


def test_profiles_are_exclusive():
    """Business rules never fire for developers and vice versa."""
    developer = _actions({'userType': 'developer', 'compute': [{'hoursPerMonth': 100}]})
    assert 'license_optimization' not in developer

    business = _actions({'networking': [{}], 'serverless': [{}]})
    assert business == []


def test_same_existing_and_preferred_provider_skips_multi_cloud():
    """Multi-cloud management needs a different existing provider."""
    assert 'multi_cloud_management' not in _actions({'existingProvider': 'aws', 'preferred_provider': 'aws'})


def test_existing_provider_without_preferred_triggers_multi_cloud():
    """An existing provider with no preferred provider counts as multi-cloud."""
    assert 'multi_cloud_management' in _actions({'existingProvider': 'aws'})


def test_no_resources_no_recommendations():
    """An empty workload yields no recommendations."""
    assert _actions({}) == []


def test_custom_rule_registry():
    """Callers can evaluate an alternative registry."""
    workload = normalize_workload({'compute': [{}]})
    rules = [rule for rule in RULES if rule.name == 'reserved_instances']
    assert [r.action for r in evaluate_rules(workload, rules=rules)] == ['reserved_instance']

    silent = Rule('never', lambda w, p: None)
    assert evaluate_rules(workload, rules=[silent]) == []


def test_saving_potential_strings_are_parseable():
    """Every built-in rule emits an X% or X-Y% saving potential."""
    workload = normalize_workload({
        'compute': [{'size': 'large', 'utilization': 10}],
        'storage': [{'type': 'object', 'sizeGB': 5000}],
        'businessMetrics': {'budgetConstraint': 1, 'expectedGrowth': 'rapid'},
        'complianceRequirements': ['soc2'],
        'existingProvider': 'gcp',
    })
    for recommendation in evaluate_rules(workload):
        assert recommendation.saving_potential.endswith('%')
