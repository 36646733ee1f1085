"""
Workload normalizer.

Turns a raw workload document (as posted by the front end) into a frozen
Workload with every default applied. Structural problems are collected and
raised together; unknown enum values such as a storage type or provider id
are passed through untouched and priced as zero later on.
"""
import math
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from cost_analyzer.domain.workload_models import (
    Workload,
    ComputeResource,
    StorageResource,
    DatabaseResource,
    NetworkingResource,
    ServerlessResource,
    ManagedServiceResource,
    BusinessMetrics,
    TechnicalRequirements,
    UserType,
    DeploymentStrategy,
)
from cost_analyzer.pricing.rate_tables import HOURS_PER_MONTH
from cost_analyzer.pricing.reference_catalog import DEFAULT_REGIONS


logger = logging.getLogger(__name__)

COMPUTE_REQUIRED_MESSAGE = "At least one compute resource is required"
FLOWS = ("simple", "detailed")


class WorkloadValidationError(Exception):
    """Raised when a workload is structurally invalid."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors if errors is not None else [message]


class _EntryReader:
    """Reads typed fields from one raw entry, recording errors under a field path."""

    def __init__(self, entry: Dict[str, Any], path: str, errors: List[str]):
        self.entry = entry
        self.path = path
        self.errors = errors

    def _error(self, key: str, problem: str) -> None:
        self.errors.append(f"{self.path}.{key} {problem}")

    def string(self, key: str, default: Optional[str]) -> Optional[str]:
        value = self.entry.get(key)
        if value is None or value == "":
            return default
        if not isinstance(value, str):
            self._error(key, "must be a string")
            return default
        return value.strip()

    def flag(self, key: str, default: bool = False) -> bool:
        value = self.entry.get(key)
        if value is None:
            return default
        if not isinstance(value, bool):
            self._error(key, "must be a boolean")
            return default
        return value

    def number(
        self,
        key: str,
        default: Optional[float],
        minimum: Optional[float] = None,
        maximum: Optional[float] = None,
        exclusive_minimum: bool = False,
    ) -> Optional[float]:
        value = self.entry.get(key)
        if value is None or value == "":
            return default

        if isinstance(value, bool):
            self._error(key, "must be a number")
            return default
        if isinstance(value, str):
            try:
                value = float(value)
            except ValueError:
                self._error(key, "must be a number")
                return default
        if not isinstance(value, (int, float)) or math.isnan(value) or math.isinf(value):
            self._error(key, "must be a number")
            return default

        if minimum is not None:
            if exclusive_minimum and value <= minimum:
                self._error(key, f"must be greater than {minimum:g}")
                return default
            if not exclusive_minimum and value < minimum:
                self._error(key, f"must be at least {minimum:g}")
                return default
        if maximum is not None and value > maximum:
            self._error(key, f"must be at most {maximum:g}")
            return default

        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value


def _read_compute(reader: _EntryReader) -> ComputeResource:
    return ComputeResource(
        size=reader.string("size", "medium"),
        quantity=reader.number("quantity", 1, minimum=1),
        hours_per_month=reader.number(
            "hoursPerMonth", HOURS_PER_MONTH, minimum=0, maximum=HOURS_PER_MONTH,
            exclusive_minimum=True,
        ),
        utilization=reader.number("utilization", 50, minimum=0, maximum=100),
        os=reader.string("os", "linux"),
        instance_type=reader.string("instanceType", "general"),
        provider=reader.string("provider", None),
    )


def _read_storage(reader: _EntryReader) -> StorageResource:
    return StorageResource(
        type=reader.string("type", "object"),
        size_gb=reader.number("sizeGB", 100, minimum=0),
        critical=reader.flag("critical"),
        access_pattern=reader.string("accessPattern", "standard"),
    )


def _read_database(reader: _EntryReader) -> DatabaseResource:
    return DatabaseResource(
        type=reader.string("type", "mysql"),
        tier=reader.string("tier", "small"),
        quantity=reader.number("quantity", 1, minimum=1),
        hours_per_month=reader.number(
            "hoursPerMonth", HOURS_PER_MONTH, minimum=0, maximum=HOURS_PER_MONTH,
            exclusive_minimum=True,
        ),
        storage_size_gb=reader.number("storageSizeGB", 0, minimum=0),
        high_availability=reader.string("highAvailability", "none"),
    )


def _read_networking(reader: _EntryReader) -> NetworkingResource:
    return NetworkingResource(
        type=reader.string("type", "loadBalancer"),
        tier=reader.string("tier", "standard"),
        data_transfer_gb=reader.number("dataTransferGB", 100, minimum=0),
        vpn_type=reader.string("vpnType", None),
    )


def _read_serverless(reader: _EntryReader) -> ServerlessResource:
    return ServerlessResource(
        type=reader.string("type", "function"),
        executions_per_month=reader.number("executionsPerMonth", 1_000_000, minimum=0),
        memory_mb=reader.number("memoryMB", 128, minimum=0),
        avg_duration_ms=reader.number("avgDurationMs", 500, minimum=0),
    )


def _read_managed_service(reader: _EntryReader) -> ManagedServiceResource:
    return ManagedServiceResource(
        type=reader.string("type", "kubernetes"),
        size=reader.string("size", "small"),
        quantity=reader.number("quantity", 1, minimum=1),
    )


CATEGORY_READERS: Dict[str, Callable[[_EntryReader], Any]] = {
    "compute": _read_compute,
    "storage": _read_storage,
    "database": _read_database,
    "networking": _read_networking,
    "serverless": _read_serverless,
    "managedServices": _read_managed_service,
}


def _read_category(raw: Dict[str, Any], category: str, errors: List[str]) -> Tuple[Any, ...]:
    entries = raw.get(category)
    if entries is None:
        return ()
    if not isinstance(entries, list):
        errors.append(f"{category} must be a list")
        return ()

    read_entry = CATEGORY_READERS[category]
    result = []
    for index, entry in enumerate(entries):
        path = f"{category}[{index}]"
        if not isinstance(entry, dict):
            errors.append(f"{path} must be an object")
            continue
        result.append(read_entry(_EntryReader(entry, path, errors)))
    return tuple(result)


def _read_section(raw: Dict[str, Any], key: str, errors: List[str]) -> _EntryReader:
    section = raw.get(key)
    if section is None:
        section = {}
    elif not isinstance(section, dict):
        errors.append(f"{key} must be an object")
        section = {}
    return _EntryReader(section, key, errors)


def _read_string_list(raw: Dict[str, Any], key: str, errors: List[str]) -> Tuple[str, ...]:
    values = raw.get(key)
    if values is None:
        return ()
    if not isinstance(values, list) or not all(isinstance(value, str) for value in values):
        errors.append(f"{key} must be a list of strings")
        return ()
    return tuple(value.strip() for value in values if value.strip())


def _read_regions(raw: Dict[str, Any], errors: List[str]) -> Tuple[Tuple[str, str], ...]:
    regions = dict(DEFAULT_REGIONS)
    selected = raw.get("region")
    if selected is None:
        return tuple(regions.items())
    if not isinstance(selected, dict):
        errors.append("region must be an object")
        return tuple(regions.items())

    for provider_id, region_id in selected.items():
        if not isinstance(region_id, str) or not region_id:
            errors.append(f"region.{provider_id} must be a non-empty string")
            continue
        regions[str(provider_id).lower()] = region_id
    return tuple(regions.items())


def _provider_id(value: Optional[str]) -> Optional[str]:
    return value.lower() if value else None


def normalize_workload(raw: Any, require_compute: bool = False) -> Workload:
    """
    Normalize a raw workload document.

    Args:
        raw: Decoded JSON workload
        require_compute: Reject workloads without any compute entry

    Returns:
        Frozen Workload with defaults applied

    Raises:
        WorkloadValidationError: If the workload is structurally invalid
    """
    if not isinstance(raw, dict):
        raise WorkloadValidationError("Workload must be a JSON object")

    errors: List[str] = []
    categories = {category: _read_category(raw, category, errors) for category in CATEGORY_READERS}

    context = _EntryReader(raw, "workload", errors)
    preferred_provider = _provider_id(context.string("preferred_provider", None))
    existing_provider = _provider_id(context.string("existingProvider", None))
    user_type = context.string("userType", UserType.BUSINESS.value)
    if user_type not in {member.value for member in UserType}:
        errors.append(f"workload.userType must be one of business, developer (got: {user_type})")
    deployment_strategy = context.string("deploymentStrategy", DeploymentStrategy.SINGLE_CLOUD.value)
    if deployment_strategy not in {member.value for member in DeploymentStrategy}:
        errors.append(
            f"workload.deploymentStrategy must be one of single-cloud, multi-cloud (got: {deployment_strategy})"
        )
    flow = context.string("flow", "simple")
    if flow not in FLOWS:
        errors.append(f"workload.flow must be one of {', '.join(FLOWS)} (got: {flow})")

    metrics = _read_section(raw, "businessMetrics", errors)
    business_metrics = BusinessMetrics(
        expected_growth=metrics.string("expectedGrowth", None),
        budget_constraint=metrics.entry.get("budgetConstraint") or None,
        user_traffic=metrics.number("userTraffic", None, minimum=0),
    )

    technical = _read_section(raw, "technicalRequirements", errors)
    technical_requirements = TechnicalRequirements(
        high_availability=technical.flag("highAvailability"),
        disaster_recovery=technical.flag("disasterRecovery"),
        autoscaling=technical.flag("autoscaling"),
        multi_region=technical.flag("multiRegion"),
        architecture_pattern=technical.string("architecturePattern", None),
        performance_requirements=technical.string("performanceRequirements", None),
    )

    compliance_requirements = _read_string_list(raw, "complianceRequirements", errors)
    providers = tuple(dict.fromkeys(
        provider.lower() for provider in _read_string_list(raw, "providers", errors)
    ))
    region = _read_regions(raw, errors)

    if errors:
        logger.info(f"Rejected workload with {len(errors)} validation error(s)")
        raise WorkloadValidationError("Workload is invalid", errors)

    if require_compute and not categories["compute"]:
        raise WorkloadValidationError(COMPUTE_REQUIRED_MESSAGE)

    return Workload(
        compute=categories["compute"],
        storage=categories["storage"],
        database=categories["database"],
        networking=categories["networking"],
        serverless=categories["serverless"],
        managed_services=categories["managedServices"],
        preferred_provider=preferred_provider,
        existing_provider=existing_provider,
        user_type=user_type,
        deployment_strategy=deployment_strategy,
        compliance_requirements=compliance_requirements,
        business_metrics=business_metrics,
        technical_requirements=technical_requirements,
        region=region,
        providers=providers,
        flow=flow,
    )
