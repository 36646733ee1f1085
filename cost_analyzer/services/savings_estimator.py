"""
Savings estimator.
Turns recommendations and the selected provider's pricing into a RecommendationSummary.
"""
import re
import logging
from typing import Dict, List, Optional

from cost_analyzer.core.config import config
from cost_analyzer.domain.pricing_models import PricingResult, round_half_up
from cost_analyzer.domain.recommendation_models import (
    Recommendation,
    RecommendationSummary,
    Severity,
)


logger = logging.getLogger(__name__)

# Share of a category's cost a recommendation of that type is assumed to touch
AFFECTED_COST_FRACTIONS: Dict[str, float] = {
    "compute": 0.5,
    "storage": 0.7,
    "database": 0.6,
    "networking": 0.8,
    "serverless": 0.9,
    "managedServices": 0.7,
}
DEFAULT_AFFECTED_TOTAL_FRACTION = 0.2

_SAVING_POTENTIAL_PATTERN = re.compile(
    r"^\s*(\d+(?:\.\d+)?)\s*%?\s*(?:-\s*(\d+(?:\.\d+)?)\s*)?%\s*$"
)


def parse_saving_potential(value: str) -> float:
    """
    Parse a saving potential string into a fraction.

    "20-30%" yields the midpoint 0.25 and "15%" yields 0.15. Anything else
    contributes nothing.

    Args:
        value: Saving potential string

    Returns:
        Average saving as a fraction of affected cost
    """
    match = _SAVING_POTENTIAL_PATTERN.match(value or "") if isinstance(value, str) else None
    if not match:
        logger.warning(f"Unparseable saving potential {value!r}; counting it as no saving")
        return 0.0

    low = float(match.group(1))
    high = float(match.group(2)) if match.group(2) is not None else low
    return (low + high) / 200


def affected_cost(recommendation: Recommendation, pricing: PricingResult) -> float:
    """Cost a recommendation is assumed to act on."""
    fraction = AFFECTED_COST_FRACTIONS.get(recommendation.type)
    if fraction is None:
        return pricing.total * DEFAULT_AFFECTED_TOTAL_FRACTION
    return pricing.category_cost(recommendation.type) * fraction


def summarize(
    recommendations: List[Recommendation],
    pricing: Optional[PricingResult],
    clamp: Optional[bool] = None,
) -> RecommendationSummary:
    """
    Summarize recommendations against the selected provider's pricing.

    Args:
        recommendations: Recommendations from the rule engine
        pricing: PricingResult of the selected provider (None prices as zero)
        clamp: Cap savings at the current cost (defaults to CLAMP_SAVINGS_ESTIMATE)

    Returns:
        RecommendationSummary
    """
    if clamp is None:
        clamp = config.CLAMP_SAVINGS_ESTIMATE

    current_cost = pricing.total if pricing is not None else 0.0
    savings = 0.0
    if pricing is not None:
        for recommendation in recommendations:
            savings += affected_cost(recommendation, pricing) * parse_saving_potential(
                recommendation.saving_potential
            )

    if clamp and savings > current_cost:
        logger.info(
            f"Estimated savings {savings:.2f} exceed current cost {current_cost:.2f}; capping"
        )
        savings = current_cost

    percentage = int(round_half_up(savings / current_cost * 100, 0)) if current_cost > 0 else 0
    if clamp:
        percentage = min(100, max(0, percentage))

    return RecommendationSummary(
        total_recommendations=len(recommendations),
        high_priority=sum(1 for r in recommendations if r.severity == Severity.HIGH),
        medium_priority=sum(1 for r in recommendations if r.severity == Severity.MEDIUM),
        low_priority=sum(1 for r in recommendations if r.severity == Severity.LOW),
        estimated_monthly_savings=round_half_up(savings),
        current_monthly_cost=round_half_up(current_cost),
        savings_percentage=percentage,
    )
