"""
Domain models for provider pricing results.
Defines per-provider category costs, drill-down entries and provider comparisons.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Dict, Any, Optional, Tuple
from dataclasses import dataclass, field


CATEGORY_FIELDS: Tuple[str, ...] = (
    "compute",
    "storage",
    "database",
    "networking",
    "serverless",
    "managedServices",
)


def round_half_up(value: float, places: int = 2) -> float:
    """
    Round to a number of decimal places with halves rounded away from zero.

    The built-in round() rounds halves to even, so 26.5 would become 26.

    Args:
        value: Amount to round
        places: Decimal places to keep

    Returns:
        Rounded amount
    """
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(exponent, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class ResourceCostDetail:
    """Monthly cost of a single resource entry, with the factors that produced it."""
    index: int
    label: str
    quantity: float
    monthly_cost: float
    base_rate: float
    multipliers: Dict[str, float] = field(default_factory=dict)
    priced: bool = True
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "index": self.index,
            "label": self.label,
            "quantity": self.quantity,
            "monthly_cost": round_half_up(self.monthly_cost),
            "base_rate": self.base_rate,
            "multipliers": dict(self.multipliers),
            "priced": self.priced,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class PricingResult:
    """
    Monthly cost estimate for one provider.

    Category values are already rounded to cents and ``total`` is the sum
    of the rounded categories, so the breakdown always adds up exactly.
    """
    provider: str
    compute: float = 0.0
    storage: float = 0.0
    database: float = 0.0
    networking: float = 0.0
    serverless: float = 0.0
    managed_services: float = 0.0
    total: float = 0.0
    region: Optional[str] = None
    details: Dict[str, List[ResourceCostDetail]] = field(default_factory=dict)

    def category_cost(self, category: str) -> float:
        """Return the cost for a category by its wire name."""
        if category == "managedServices":
            return self.managed_services
        if category in CATEGORY_FIELDS:
            return getattr(self, category)
        return 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "compute": round_half_up(self.compute),
            "storage": round_half_up(self.storage),
            "database": round_half_up(self.database),
            "networking": round_half_up(self.networking),
            "serverless": round_half_up(self.serverless),
            "managedServices": round_half_up(self.managed_services),
            "total": round_half_up(self.total),
            "region": self.region,
            "details": {
                category: [entry.to_dict() for entry in entries]
                for category, entries in self.details.items()
            },
        }


@dataclass(frozen=True)
class ProviderRanking:
    """One row of a provider comparison."""
    provider: str
    total: float
    cost_per_user: float
    annual_cost_per_user: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "provider": self.provider,
            "total": round_half_up(self.total),
            "cost_per_user": round_half_up(self.cost_per_user),
            "annual_cost_per_user": round_half_up(self.annual_cost_per_user),
        }


@dataclass(frozen=True)
class ProviderComparison:
    """Providers ranked by monthly total, cheapest first."""
    rankings: List[ProviderRanking]
    cheapest_provider: Optional[str]
    selected_provider: str
    potential_switch_savings_percentage: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "rankings": [ranking.to_dict() for ranking in self.rankings],
            "cheapest_provider": self.cheapest_provider,
            "selected_provider": self.selected_provider,
            "potential_switch_savings_percentage": round_half_up(self.potential_switch_savings_percentage, 1),
        }
