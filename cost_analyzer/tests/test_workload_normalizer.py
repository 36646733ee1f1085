"""
Tests for workload normalization and structural validation.
"""

import copy
import dataclasses

import pytest
from cost_analyzer.services.workload_normalizer import (
    normalize_workload,
    WorkloadValidationError,
    COMPUTE_REQUIRED_MESSAGE,
)


def test_empty_workload_gets_context_defaults():
    """An empty document normalizes to an empty business workload on aws."""
    workload = normalize_workload({})

    assert workload.compute == ()
    assert workload.preferred_provider is None
    assert workload.selected_provider == 'aws'
    assert workload.user_type == 'business'
    assert workload.deployment_strategy == 'single-cloud'
    assert workload.flow == 'simple'
    assert workload.region_for('aws') == 'us-east-1'
    assert workload.region_for('digitalocean') == 'nyc1'


def test_entry_defaults_applied_per_category():
    """Missing entry fields are filled with category defaults."""
    workload = normalize_workload({
        'compute': [{}],
        'storage': [{}],
        'database': [{}],
        'networking': [{}],
        'serverless': [{}],
        'managedServices': [{}],
    })

    vm = workload.compute[0]
    assert (vm.size, vm.quantity, vm.hours_per_month, vm.utilization) == ('medium', 1, 730, 50)
    assert (vm.os, vm.instance_type) == ('linux', 'general')

    volume = workload.storage[0]
    assert (volume.type, volume.size_gb, volume.critical, volume.access_pattern) == ('object', 100, False, 'standard')

    db = workload.database[0]
    assert (db.type, db.tier, db.quantity, db.hours_per_month) == ('mysql', 'small', 1, 730)
    assert (db.storage_size_gb, db.high_availability) == (0, 'none')

    net = workload.networking[0]
    assert (net.type, net.tier, net.data_transfer_gb, net.vpn_type) == ('loadBalancer', 'standard', 100, None)

    fn = workload.serverless[0]
    assert (fn.type, fn.executions_per_month, fn.memory_mb, fn.avg_duration_ms) == ('function', 1_000_000, 128, 500)

    svc = workload.managed_services[0]
    assert (svc.type, svc.size, svc.quantity) == ('kubernetes', 'small', 1)


def test_input_is_not_mutated(sample_workload):
    """Normalization never modifies the submitted document."""
    original = copy.deepcopy(sample_workload)
    normalize_workload(sample_workload)
    assert sample_workload == original


def test_normalized_workload_is_frozen():
    """Normalized workloads cannot be modified."""
    workload = normalize_workload({'compute': [{'size': 'small'}]})

    with pytest.raises(dataclasses.FrozenInstanceError):
        workload.preferred_provider = 'gcp'
    with pytest.raises(dataclasses.FrozenInstanceError):
        workload.compute[0].quantity = 5


@pytest.mark.parametrize('raw', [[], 'workload', 42, None])
def test_non_object_workload_rejected(raw):
    """Only JSON objects are accepted as workloads."""
    with pytest.raises(WorkloadValidationError):
        normalize_workload(raw)


def test_structural_errors_are_collected_with_field_paths():
    """Every structural problem is reported with its field path."""
    with pytest.raises(WorkloadValidationError) as exc_info:
        normalize_workload({
            'compute': [
                {'quantity': 0},
                {'hoursPerMonth': 800, 'utilization': 120},
                'not-an-entry',
            ],
            'storage': {'type': 'object'},
            'serverless': [{'memoryMB': -1}],
        })

    errors = exc_info.value.errors
    assert 'compute[0].quantity must be at least 1' in errors
    assert 'compute[1].hoursPerMonth must be at most 730' in errors
    assert 'compute[1].utilization must be at most 100' in errors
    assert 'compute[2] must be an object' in errors
    assert 'storage must be a list' in errors
    assert 'serverless[0].memoryMB must be at least 0' in errors


def test_zero_hours_rejected():
    """hoursPerMonth must be strictly positive."""
    with pytest.raises(WorkloadValidationError) as exc_info:
        normalize_workload({'compute': [{'hoursPerMonth': 0}]})
    assert exc_info.value.errors == ['compute[0].hoursPerMonth must be greater than 0']


def test_boolean_is_not_a_number():
    """Booleans are rejected for numeric fields."""
    with pytest.raises(WorkloadValidationError) as exc_info:
        normalize_workload({'database': [{'quantity': True}]})
    assert exc_info.value.errors == ['database[0].quantity must be a number']


def test_numeric_strings_are_accepted():
    """Form values posted as numeric strings are converted."""
    workload = normalize_workload({'compute': [{'quantity': '3', 'utilization': '75.5'}]})
    assert workload.compute[0].quantity == 3
    assert workload.compute[0].utilization == 75.5


def test_unknown_user_type_rejected():
    """userType must be business or developer."""
    with pytest.raises(WorkloadValidationError) as exc_info:
        normalize_workload({'userType': 'manager'})
    assert 'userType' in exc_info.value.errors[0]


def test_existing_provider_selected_without_preferred():
    """Without a preferred provider the existing one is selected."""
    workload = normalize_workload({'existingProvider': 'Azure'})
    assert workload.preferred_provider is None
    assert workload.existing_provider == 'azure'
    assert workload.selected_provider == 'azure'


def test_unknown_deployment_strategy_rejected():
    """deploymentStrategy must be single-cloud or multi-cloud."""
    with pytest.raises(WorkloadValidationError) as exc_info:
        normalize_workload({'deploymentStrategy': 'hybrid'})
    assert exc_info.value.errors == [
        'workload.deploymentStrategy must be one of single-cloud, multi-cloud (got: hybrid)',
    ]


def test_unknown_enum_values_pass_through():
    """Unknown types and providers are not structural errors."""
    workload = normalize_workload({
        'storage': [{'type': 'premium'}],
        'preferred_provider': 'Vultr',
    })
    assert workload.storage[0].type == 'premium'
    assert workload.preferred_provider == 'vultr'


def test_compute_required_when_requested():
    """The detailed flow requires at least one compute resource."""
    with pytest.raises(WorkloadValidationError) as exc_info:
        normalize_workload({'storage': [{}]}, require_compute=True)
    assert exc_info.value.message == COMPUTE_REQUIRED_MESSAGE
    assert exc_info.value.errors == [COMPUTE_REQUIRED_MESSAGE]


def test_region_selection_merged_over_defaults():
    """Explicit regions override the per-provider defaults only where given."""
    workload = normalize_workload({'region': {'aws': 'eu-west-1'}})
    assert workload.region_for('aws') == 'eu-west-1'
    assert workload.region_for('azure') == 'eastus'


def test_explicit_providers_deduplicated_in_order():
    """The explicit provider list keeps first-seen order."""
    workload = normalize_workload({'providers': ['gcp', 'AWS', 'gcp']})
    assert workload.providers == ('gcp', 'aws')


def test_context_sections_read():
    """Business metrics and technical requirements are carried through."""
    workload = normalize_workload({
        'businessMetrics': {'expectedGrowth': 'rapid', 'budgetConstraint': 5000, 'userTraffic': 1000},
        'technicalRequirements': {'highAvailability': True, 'architecturePattern': 'traditional'},
        'complianceRequirements': ['hipaa'],
    })
    assert workload.business_metrics.expected_growth == 'rapid'
    assert workload.business_metrics.budget_constraint == 5000
    assert workload.business_metrics.user_traffic == 1000
    assert workload.technical_requirements.high_availability is True
    assert workload.technical_requirements.architecture_pattern == 'traditional'
    assert workload.compliance_requirements == ('hipaa',)
