"""
Provider cost aggregator.

Runs the six category calculators for each candidate provider and builds
PricingResult objects with per-resource drill-down, plus provider
comparisons derived from those results.
"""
from typing import Dict, Iterable, List, Optional
import logging

from cost_analyzer.core.config import config
from cost_analyzer.domain.pricing_models import (
    PricingResult,
    ProviderComparison,
    ProviderRanking,
    round_half_up,
)
from cost_analyzer.domain.workload_models import Provider, ResourceCategory, Workload
from cost_analyzer.pricing.rate_tables import (
    RateTable,
    AdjustmentTable,
    DEFAULT_RATE_TABLE,
    DEFAULT_ADJUSTMENTS,
)
from cost_analyzer.services.cost_calculators import price_entries


logger = logging.getLogger(__name__)


def price_provider(
    workload: Workload,
    provider: str,
    rates: RateTable = DEFAULT_RATE_TABLE,
    adjustments: AdjustmentTable = DEFAULT_ADJUSTMENTS,
) -> PricingResult:
    """
    Price a workload on one provider.

    Each category is rounded to cents and the total is the sum of the
    rounded categories. Providers outside the catalogue price at zero with
    every entry flagged as unpriced.

    Args:
        workload: Normalized workload
        provider: Provider id
        rates: Base rate table
        adjustments: Multiplier table

    Returns:
        PricingResult for the provider
    """
    if Provider.from_id(provider) is None:
        logger.warning(f"Unknown provider '{provider}' priced at zero")

    costs: Dict[ResourceCategory, float] = {}
    details = {}
    for category in ResourceCategory:
        entries = price_entries(
            category, workload.entries(category), provider, rates, adjustments,
            pin_compute=workload.is_multi_cloud,
        )
        costs[category] = round_half_up(sum(entry.monthly_cost for entry in entries))
        details[category.value] = entries

    total = round_half_up(sum(costs.values()))

    return PricingResult(
        provider=provider,
        compute=costs[ResourceCategory.COMPUTE],
        storage=costs[ResourceCategory.STORAGE],
        database=costs[ResourceCategory.DATABASE],
        networking=costs[ResourceCategory.NETWORKING],
        serverless=costs[ResourceCategory.SERVERLESS],
        managed_services=costs[ResourceCategory.MANAGED_SERVICES],
        total=total,
        region=workload.region_for(provider),
        details=details,
    )


def resolve_providers(workload: Workload, providers: Optional[Iterable[str]] = None) -> List[str]:
    """
    Determine which providers to price, in order and without duplicates.

    The explicit provider list (argument, then workload) comes first, or the
    configured default set when none is given; the selected provider
    (preferred, else existing, else aws) and the existing provider are
    appended. Multi-cloud workloads also add the provider each compute entry
    is pinned to, so no pinned entry goes unpriced.

    Args:
        workload: Normalized workload
        providers: Optional explicit provider ids

    Returns:
        Ordered provider ids
    """
    explicit = [provider.lower() for provider in providers] if providers else list(workload.providers)
    candidates = explicit or list(config.DEFAULT_PRICED_PROVIDERS)
    candidates.append(workload.selected_provider)
    if workload.existing_provider:
        candidates.append(workload.existing_provider)
    if workload.is_multi_cloud:
        candidates.extend(entry.pinned_provider for entry in workload.compute)
    return [provider for provider in dict.fromkeys(candidates) if provider]


def price_workload(
    workload: Workload,
    providers: Optional[Iterable[str]] = None,
    rates: RateTable = DEFAULT_RATE_TABLE,
    adjustments: AdjustmentTable = DEFAULT_ADJUSTMENTS,
) -> Dict[str, PricingResult]:
    """
    Price a workload on every candidate provider.

    Args:
        workload: Normalized workload
        providers: Optional explicit provider ids
        rates: Base rate table
        adjustments: Multiplier table

    Returns:
        Mapping of provider id to PricingResult, in candidate order
    """
    results = {
        provider: price_provider(workload, provider, rates, adjustments)
        for provider in resolve_providers(workload, providers)
    }
    logger.info(
        f"Priced workload on {len(results)} provider(s) using rate table {rates.version}"
    )
    return results


def _safe_divide(numerator: float, denominator: Optional[float]) -> float:
    if not denominator:
        return 0.0
    return numerator / denominator


def compare_providers(pricing: Dict[str, PricingResult], workload: Workload) -> ProviderComparison:
    """
    Rank priced providers and estimate savings from switching.

    Args:
        pricing: Mapping of provider id to PricingResult
        workload: Normalized workload (for the selected provider and user traffic)

    Returns:
        ProviderComparison with providers ordered cheapest first
    """
    user_traffic = workload.business_metrics.user_traffic
    ordered = sorted(pricing.values(), key=lambda result: result.total)
    rankings = [
        ProviderRanking(
            provider=result.provider,
            total=result.total,
            cost_per_user=_safe_divide(result.total, user_traffic),
            annual_cost_per_user=_safe_divide(result.total * 12, user_traffic),
        )
        for result in ordered
    ]

    selected_provider = workload.selected_provider
    cheapest = ordered[0] if ordered else None
    selected = pricing.get(selected_provider)

    switch_savings = 0.0
    if cheapest is not None and selected is not None and selected.total > 0:
        switch_savings = max(0.0, (1 - cheapest.total / selected.total) * 100)

    return ProviderComparison(
        rankings=rankings,
        cheapest_provider=cheapest.provider if cheapest else None,
        selected_provider=selected_provider,
        potential_switch_savings_percentage=switch_savings,
    )
