"""
Domain models for optimization recommendations.
"""
from typing import Dict, Any
from dataclasses import dataclass
from enum import Enum

from cost_analyzer.domain.pricing_models import round_half_up


class Severity(str, Enum):
    """Recommendation priority."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Recommendation:
    """A single cost optimization suggestion emitted by a rule."""
    type: str
    severity: Severity
    description: str
    resource: str
    recommendation: str
    action: str
    details: str
    saving_potential: str  # "X%" or "X-Y%"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": self.type,
            "severity": self.severity.value,
            "description": self.description,
            "resource": self.resource,
            "recommendation": self.recommendation,
            "action": self.action,
            "details": self.details,
            "saving_potential": self.saving_potential,
        }


@dataclass(frozen=True)
class RecommendationSummary:
    """Counts by priority and the estimated savings for the selected provider."""
    total_recommendations: int
    high_priority: int
    medium_priority: int
    low_priority: int
    estimated_monthly_savings: float
    current_monthly_cost: float
    savings_percentage: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "total_recommendations": self.total_recommendations,
            "high_priority": self.high_priority,
            "medium_priority": self.medium_priority,
            "low_priority": self.low_priority,
            "estimated_monthly_savings": round_half_up(self.estimated_monthly_savings),
            "current_monthly_cost": round_half_up(self.current_monthly_cost),
            "savings_percentage": self.savings_percentage,
        }
