"""
Category cost calculators.

Each category has a per-entry pricing function returning a
ResourceCostDetail and a category function summing those entries. All
functions are pure over (entries, provider, rate table, adjustments) and
keep full float precision; rounding happens when a PricingResult is built.

An entry whose provider, type or size has no rate is priced at zero and
flagged ``priced=False`` with the reason.
"""
from typing import Callable, Dict, Iterable, List, Optional

from cost_analyzer.domain.pricing_models import ResourceCostDetail
from cost_analyzer.domain.workload_models import (
    ComputeResource,
    StorageResource,
    DatabaseResource,
    NetworkingResource,
    ServerlessResource,
    ManagedServiceResource,
    ResourceCategory,
)
from cost_analyzer.pricing.rate_tables import (
    RateTable,
    AdjustmentTable,
    DEFAULT_RATE_TABLE,
    DEFAULT_ADJUSTMENTS,
    HOURS_PER_MONTH,
)


GRAPH_UNSUPPORTED_REASON = "no managed graph database offering"


def _unpriced(index: int, label: str, quantity: float, reason: str,
              base_rate: float = 0.0) -> ResourceCostDetail:
    return ResourceCostDetail(
        index=index,
        label=label,
        quantity=quantity,
        monthly_cost=0.0,
        base_rate=base_rate,
        multipliers={},
        priced=False,
        reason=reason,
    )


def _missing_rate_reason(category: str, provider: str) -> str:
    return f"no {category} rate for provider '{provider}'"


def _compute_label(entry: ComputeResource) -> str:
    return f"{entry.size} {entry.os} instance"


def price_compute_entry(
    index: int,
    entry: ComputeResource,
    provider: str,
    rates: RateTable = DEFAULT_RATE_TABLE,
    adjustments: AdjustmentTable = DEFAULT_ADJUSTMENTS,
) -> ResourceCostDetail:
    """
    Price one compute entry.

    cost = baseRate × sizeMult × quantity × hours/730 × utilization/100 × osMult × instanceTypeMult

    Args:
        index: Position of the entry in the workload
        entry: Compute resource
        provider: Provider id
        rates: Base rate table
        adjustments: Multiplier table

    Returns:
        ResourceCostDetail for the entry
    """
    label = _compute_label(entry)
    base_rate = rates.flat_rate(ResourceCategory.COMPUTE.value, provider)
    if base_rate is None:
        return _unpriced(index, label, entry.quantity, _missing_rate_reason("compute", provider))

    size_mult = adjustments.compute_size.get(entry.size)
    if size_mult is None:
        return _unpriced(index, label, entry.quantity, f"unknown compute size '{entry.size}'", base_rate)

    multipliers = {
        "size": size_mult,
        "hours": entry.hours_per_month / HOURS_PER_MONTH,
        "utilization": entry.utilization / 100,
        "os": adjustments.premium_os_factor if entry.os in adjustments.premium_os else 1,
        "instance_type": (
            adjustments.specialized_instance_factor
            if entry.instance_type in adjustments.specialized_instance_types else 1
        ),
    }
    monthly_cost = base_rate * entry.quantity
    for factor in multipliers.values():
        monthly_cost *= factor

    return ResourceCostDetail(index, label, entry.quantity, monthly_cost, base_rate, multipliers)


def price_storage_entry(
    index: int,
    entry: StorageResource,
    provider: str,
    rates: RateTable = DEFAULT_RATE_TABLE,
    adjustments: AdjustmentTable = DEFAULT_ADJUSTMENTS,
) -> ResourceCostDetail:
    """Price one storage entry: baseRate × typeMult × sizeGB × criticalMult × accessMult."""
    label = f"{entry.type} storage"
    base_rate = rates.flat_rate(ResourceCategory.STORAGE.value, provider)
    if base_rate is None:
        return _unpriced(index, label, entry.size_gb, _missing_rate_reason("storage", provider))

    type_mult = adjustments.storage_type.get(entry.type)
    if type_mult is None:
        return _unpriced(index, label, entry.size_gb, f"unknown storage type '{entry.type}'", base_rate)

    multipliers = {
        "type": type_mult,
        "critical": adjustments.critical_storage_factor if entry.critical else 1,
        "access_pattern": adjustments.access_pattern.get(entry.access_pattern, 1),
    }
    monthly_cost = base_rate * entry.size_gb
    for factor in multipliers.values():
        monthly_cost *= factor

    return ResourceCostDetail(index, label, entry.size_gb, monthly_cost, base_rate, multipliers)


def price_database_entry(
    index: int,
    entry: DatabaseResource,
    provider: str,
    rates: RateTable = DEFAULT_RATE_TABLE,
    adjustments: AdjustmentTable = DEFAULT_ADJUSTMENTS,
) -> ResourceCostDetail:
    """
    Price one database entry.

    cost = baseRate(type, provider) × tierMult × quantity × hours/730 × haMult × (1 + storageGB/1000)

    The tier multiplier only applies to mysql. Providers without a managed
    graph database carry a zero rate and are reported as unpriced.
    """
    category = ResourceCategory.DATABASE.value
    label = f"{entry.type} database ({entry.tier})"
    if not rates.has_type(category, entry.type):
        return _unpriced(index, label, entry.quantity, f"unknown database type '{entry.type}'")

    base_rate = rates.typed_rate(category, entry.type, provider)
    if base_rate is None:
        return _unpriced(index, label, entry.quantity, _missing_rate_reason("database", provider))
    if base_rate == 0:
        return _unpriced(index, label, entry.quantity, GRAPH_UNSUPPORTED_REASON)

    multipliers = {
        "tier": adjustments.mysql_tier.get(entry.tier, 1) if entry.type == "mysql" else 1,
        "hours": entry.hours_per_month / HOURS_PER_MONTH,
        "high_availability": adjustments.database_ha.get(entry.high_availability, 1),
        "storage": 1 + entry.storage_size_gb / adjustments.database_storage_divisor,
    }
    monthly_cost = base_rate * entry.quantity
    for factor in multipliers.values():
        monthly_cost *= factor

    return ResourceCostDetail(index, label, entry.quantity, monthly_cost, base_rate, multipliers)


def price_networking_entry(
    index: int,
    entry: NetworkingResource,
    provider: str,
    rates: RateTable = DEFAULT_RATE_TABLE,
    adjustments: AdjustmentTable = DEFAULT_ADJUSTMENTS,
) -> ResourceCostDetail:
    """Price one networking entry: baseRate × typeMult × dataTransferGB × vpnMult."""
    label = f"{entry.type} ({entry.tier})"
    base_rate = rates.flat_rate(ResourceCategory.NETWORKING.value, provider)
    if base_rate is None:
        return _unpriced(index, label, entry.data_transfer_gb, _missing_rate_reason("networking", provider))

    type_mult = adjustments.networking_type.get(entry.type)
    if type_mult is None:
        return _unpriced(
            index, label, entry.data_transfer_gb, f"unknown networking type '{entry.type}'", base_rate
        )

    multipliers = {
        "type": type_mult,
        "vpn": adjustments.vpn_type.get(entry.vpn_type, 1),
    }
    monthly_cost = base_rate * entry.data_transfer_gb * type_mult * multipliers["vpn"]
    return ResourceCostDetail(index, label, entry.data_transfer_gb, monthly_cost, base_rate, multipliers)


def price_serverless_entry(
    index: int,
    entry: ServerlessResource,
    provider: str,
    rates: RateTable = DEFAULT_RATE_TABLE,
    adjustments: AdjustmentTable = DEFAULT_ADJUSTMENTS,
) -> ResourceCostDetail:
    """
    Price one serverless entry.

    Usage is converted to GB-seconds (executions × ms/1000 × MB/1024) and
    billed at baseRate × typeMult per GB-second.
    """
    label = f"serverless {entry.type}"
    base_rate = rates.flat_rate(ResourceCategory.SERVERLESS.value, provider)
    if base_rate is None:
        return _unpriced(
            index, label, entry.executions_per_month, _missing_rate_reason("serverless", provider)
        )

    type_mult = adjustments.serverless_type.get(entry.type)
    if type_mult is None:
        return _unpriced(
            index, label, entry.executions_per_month, f"unknown serverless type '{entry.type}'", base_rate
        )

    gb_seconds = entry.executions_per_month * (entry.avg_duration_ms / 1000) * (entry.memory_mb / 1024)
    multipliers = {"gb_seconds": gb_seconds, "type": type_mult}
    monthly_cost = base_rate * gb_seconds * type_mult
    return ResourceCostDetail(index, label, entry.executions_per_month, monthly_cost, base_rate, multipliers)


def price_managed_service_entry(
    index: int,
    entry: ManagedServiceResource,
    provider: str,
    rates: RateTable = DEFAULT_RATE_TABLE,
    adjustments: AdjustmentTable = DEFAULT_ADJUSTMENTS,
) -> ResourceCostDetail:
    """Price one managed service entry: baseRate(type, provider) × sizeMult × quantity."""
    category = ResourceCategory.MANAGED_SERVICES.value
    label = f"{entry.type} ({entry.size})"
    if not rates.has_type(category, entry.type):
        return _unpriced(index, label, entry.quantity, f"unknown managed service type '{entry.type}'")

    base_rate = rates.typed_rate(category, entry.type, provider)
    if base_rate is None:
        return _unpriced(index, label, entry.quantity, _missing_rate_reason("managed service", provider))

    size_mult = adjustments.managed_service_size.get(entry.size)
    if size_mult is None:
        return _unpriced(index, label, entry.quantity, f"unknown managed service size '{entry.size}'", base_rate)

    multipliers = {"size": size_mult}
    monthly_cost = base_rate * size_mult * entry.quantity
    return ResourceCostDetail(index, label, entry.quantity, monthly_cost, base_rate, multipliers)


EntryPricer = Callable[..., ResourceCostDetail]

ENTRY_PRICERS: Dict[ResourceCategory, EntryPricer] = {
    ResourceCategory.COMPUTE: price_compute_entry,
    ResourceCategory.STORAGE: price_storage_entry,
    ResourceCategory.DATABASE: price_database_entry,
    ResourceCategory.NETWORKING: price_networking_entry,
    ResourceCategory.SERVERLESS: price_serverless_entry,
    ResourceCategory.MANAGED_SERVICES: price_managed_service_entry,
}


def price_entries(
    category: ResourceCategory,
    entries: Iterable,
    provider: str,
    rates: RateTable = DEFAULT_RATE_TABLE,
    adjustments: AdjustmentTable = DEFAULT_ADJUSTMENTS,
    pin_compute: bool = False,
) -> List[ResourceCostDetail]:
    """
    Price every entry of a category, preserving workload order.

    With ``pin_compute`` set (multi-cloud deployments) a compute entry is
    only priced on the provider it is pinned to and reported as unpriced
    everywhere else.
    """
    pricer = ENTRY_PRICERS[category]
    pinned = pin_compute and category is ResourceCategory.COMPUTE
    details = []
    for index, entry in enumerate(entries):
        if pinned and entry.pinned_provider != provider:
            details.append(_unpriced(
                index, _compute_label(entry), entry.quantity,
                f"pinned to provider '{entry.pinned_provider}'",
            ))
        else:
            details.append(pricer(index, entry, provider, rates, adjustments))
    return details


def _category_total(category: ResourceCategory) -> Callable[..., float]:
    def calculate(
        entries: Iterable,
        provider: str,
        rates: Optional[RateTable] = None,
        adjustments: Optional[AdjustmentTable] = None,
    ) -> float:
        details = price_entries(
            category,
            entries,
            provider,
            rates or DEFAULT_RATE_TABLE,
            adjustments or DEFAULT_ADJUSTMENTS,
        )
        return sum(detail.monthly_cost for detail in details)

    calculate.__name__ = f"calculate_{category.name.lower()}_cost"
    calculate.__doc__ = f"Monthly {category.value} cost of the entries for a provider."
    return calculate


calculate_compute_cost = _category_total(ResourceCategory.COMPUTE)
calculate_storage_cost = _category_total(ResourceCategory.STORAGE)
calculate_database_cost = _category_total(ResourceCategory.DATABASE)
calculate_networking_cost = _category_total(ResourceCategory.NETWORKING)
calculate_serverless_cost = _category_total(ResourceCategory.SERVERLESS)
calculate_managed_services_cost = _category_total(ResourceCategory.MANAGED_SERVICES)
