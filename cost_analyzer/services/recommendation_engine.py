"""
Recommendation rule engine.

Rules are independent predicates over (workload, pricing result) that emit
at most one Recommendation each. Baseline rules always run; profile rules
run when the workload's user type matches. Every matching rule fires and
output follows registry order.
"""
from dataclasses import dataclass
from typing import Callable, List, Optional
import logging

from cost_analyzer.domain.pricing_models import PricingResult
from cost_analyzer.domain.recommendation_models import Recommendation, Severity
from cost_analyzer.domain.workload_models import UserType, Workload


logger = logging.getLogger(__name__)

RuleFunction = Callable[[Workload, Optional[PricingResult]], Optional[Recommendation]]

DOWNSIZE_UTILIZATION_THRESHOLD = 50
RESERVED_HOURS_THRESHOLD = 700
LIFECYCLE_OBJECT_STORAGE_GB = 1000
GROWTH_LEVELS = ("high", "rapid")


@dataclass(frozen=True)
class Rule:
    """A named recommendation rule, optionally bound to a user profile."""
    name: str
    evaluate: RuleFunction
    profile: Optional[UserType] = None

    def applies_to(self, workload: Workload) -> bool:
        return self.profile is None or self.profile.value == workload.user_type


def _format_quantity(value: float) -> str:
    return f"{value:g}"


# Baseline rules

def downsize_large_instances(workload: Workload, pricing: Optional[PricingResult]) -> Optional[Recommendation]:
    """Large instances running below 50% utilization."""
    candidates = [
        entry for entry in workload.compute
        if entry.size == "large" and entry.utilization < DOWNSIZE_UTILIZATION_THRESHOLD
    ]
    if not candidates:
        return None
    return Recommendation(
        type="compute",
        severity=Severity.HIGH,
        description="Consider downsizing large instances with low utilization",
        resource=f"large instance ({len(candidates)} units)",
        recommendation="Downsize to medium instances",
        action="resize",
        details="Large instances with less than 50% utilization are candidates for downsizing.",
        saving_potential="20-30%",
    )


def reserved_instances(workload: Workload, pricing: Optional[PricingResult]) -> Optional[Recommendation]:
    """Instances running close to 24/7."""
    candidates = [entry for entry in workload.compute if entry.hours_per_month >= RESERVED_HOURS_THRESHOLD]
    if not candidates:
        return None
    return Recommendation(
        type="compute",
        severity=Severity.HIGH,
        description="Consider reserved instances for 24/7 workloads",
        resource=f"24/7 instances ({len(candidates)} units)",
        recommendation="Purchase 1-year or 3-year reserved instances",
        action="reserved_instance",
        details="Instances running 24/7 can benefit significantly from reserved instance pricing.",
        saving_potential="30-60%",
    )


def storage_lifecycle(workload: Workload, pricing: Optional[PricingResult]) -> Optional[Recommendation]:
    """More than 1000 GB of object storage in total."""
    object_storage_gb = sum(entry.size_gb for entry in workload.storage if entry.type == "object")
    if object_storage_gb <= LIFECYCLE_OBJECT_STORAGE_GB:
        return None
    return Recommendation(
        type="storage",
        severity=Severity.MEDIUM,
        description="Implement storage lifecycle policies",
        resource=f"Object storage ({_format_quantity(object_storage_gb)} GB)",
        recommendation="Implement lifecycle policies to move older data to cheaper storage tiers",
        action="lifecycle_policy",
        details="Large object storage can benefit from lifecycle policies that move older data "
                "to cheaper storage classes.",
        saving_potential="10-30%",
    )


# Business profile

def license_optimization(workload: Workload, pricing: Optional[PricingResult]) -> Optional[Recommendation]:
    if not workload.compute:
        return None
    return Recommendation(
        type="licensing",
        severity=Severity.MEDIUM,
        description="Optimize software licensing costs",
        resource="Licensed software",
        recommendation="Consolidate licenses or move to BYOL model",
        action="license_optimization",
        details="Bringing your own licenses (BYOL) can reduce costs significantly compared to "
                "license-included instances.",
        saving_potential="15-25%",
    )


def budget_alerts(workload: Workload, pricing: Optional[PricingResult]) -> Optional[Recommendation]:
    if not workload.business_metrics.budget_constraint:
        return None
    return Recommendation(
        type="general",
        severity=Severity.LOW,
        description="Implement budget alerts and guardrails",
        resource="All resources",
        recommendation="Set up budget alerts and automated shutdown policies",
        action="budget_control",
        details="Implementing budget controls can prevent unexpected costs from resource sprawl "
                "or misconfiguration.",
        saving_potential="5-10%",
    )


def compliance_consolidation(workload: Workload, pricing: Optional[PricingResult]) -> Optional[Recommendation]:
    if not workload.compliance_requirements:
        return None
    return Recommendation(
        type="general",
        severity=Severity.MEDIUM,
        description="Optimize compliance-related infrastructure",
        resource="Compliance infrastructure",
        recommendation="Consolidate logging and monitoring resources",
        action="consolidate_logging",
        details="Centralized logging and monitoring can reduce duplicate resources required for "
                "compliance while maintaining audit capabilities.",
        saving_potential="8-15%",
    )


def growth_reserved_capacity(workload: Workload, pricing: Optional[PricingResult]) -> Optional[Recommendation]:
    if workload.business_metrics.expected_growth not in GROWTH_LEVELS:
        return None
    return Recommendation(
        type="reserved_instances",
        severity=Severity.HIGH,
        description="Pre-purchase capacity for planned growth",
        resource="Future compute resources",
        recommendation="Use Savings Plans or Reserved Instances with planned growth",
        action="savings_plan",
        details="For high-growth scenarios, pre-purchasing capacity with flexible Savings Plans "
                "can provide significant discounts on future usage.",
        saving_potential="25-40%",
    )


def multi_cloud_management(workload: Workload, pricing: Optional[PricingResult]) -> Optional[Recommendation]:
    if not workload.existing_provider or workload.existing_provider == workload.preferred_provider:
        return None
    return Recommendation(
        type="general",
        severity=Severity.MEDIUM,
        description="Optimize multi-cloud strategy",
        resource="Cross-cloud resources",
        recommendation="Implement centralized cloud management platform",
        action="multi_cloud_management",
        details="When operating across multiple cloud providers, a unified management platform "
                "can reduce operational overhead and improve cost visibility.",
        saving_potential="10-20%",
    )


# Developer profile

def cluster_autoscaling(workload: Workload, pricing: Optional[PricingResult]) -> Optional[Recommendation]:
    if not any(entry.type == "kubernetes" for entry in workload.managed_services):
        return None
    return Recommendation(
        type="managedServices",
        severity=Severity.MEDIUM,
        description="Optimize Kubernetes cluster configuration",
        resource="Kubernetes clusters",
        recommendation="Implement cluster autoscaling and node rightsizing",
        action="cluster_optimization",
        details="Kubernetes clusters often have idle capacity. Implementing autoscaling and "
                "selecting appropriate node sizes can significantly reduce costs.",
        saving_potential="20-35%",
    )


def data_transfer_optimization(workload: Workload, pricing: Optional[PricingResult]) -> Optional[Recommendation]:
    if not workload.networking:
        return None
    return Recommendation(
        type="networking",
        severity=Severity.MEDIUM,
        description="Optimize data transfer patterns",
        resource="Data transfer",
        recommendation="Implement CDN and review cross-region traffic",
        action="optimize_data_transfer",
        details="Data transfer, especially between regions, can incur significant costs. Using "
                "CDNs and keeping traffic within regions can reduce these costs.",
        saving_potential="15-30%",
    )


def serverless_right_sizing(workload: Workload, pricing: Optional[PricingResult]) -> Optional[Recommendation]:
    if not workload.serverless:
        return None
    return Recommendation(
        type="serverless",
        severity=Severity.HIGH,
        description="Optimize serverless function configuration",
        resource="Serverless functions",
        recommendation="Reduce memory allocation and optimize code execution time",
        action="optimize_serverless",
        details="Serverless functions are often over-provisioned. Reducing memory allocation and "
                "optimizing code can significantly reduce costs.",
        saving_potential="25-40%",
    )


def architecture_modernization(workload: Workload, pricing: Optional[PricingResult]) -> Optional[Recommendation]:
    if workload.technical_requirements.architecture_pattern != "traditional":
        return None
    return Recommendation(
        type="architecture",
        severity=Severity.HIGH,
        description="Consider modernizing architecture",
        resource="Application architecture",
        recommendation="Evaluate serverless or container-based architecture",
        action="modernize_architecture",
        details="Modern architectures can significantly reduce costs by allowing for more "
                "granular scaling and pay-per-use pricing models.",
        saving_potential="30-50%",
    )


def managed_high_availability(workload: Workload, pricing: Optional[PricingResult]) -> Optional[Recommendation]:
    if not workload.technical_requirements.high_availability:
        return None
    return Recommendation(
        type="architecture",
        severity=Severity.MEDIUM,
        description="Optimize high availability configuration",
        resource="Multi-AZ deployments",
        recommendation="Use managed services with built-in HA instead of custom solutions",
        action="use_managed_ha",
        details="Custom high availability solutions often result in over-provisioning. Many "
                "managed services offer built-in HA at a lower cost.",
        saving_potential="15-25%",
    )


def compute_optimized_instances(workload: Workload, pricing: Optional[PricingResult]) -> Optional[Recommendation]:
    if workload.technical_requirements.performance_requirements != "high":
        return None
    return Recommendation(
        type="compute",
        severity=Severity.MEDIUM,
        description="Use compute-optimized instances for high performance workloads",
        resource="Compute instances",
        recommendation="Switch to compute-optimized instance families",
        action="use_compute_optimized",
        details="For high-performance workloads, compute-optimized instances offer better "
                "price-performance ratio than general-purpose instances.",
        saving_potential="10-20%",
    )


RULES: List[Rule] = [
    Rule("downsize_large_instances", downsize_large_instances),
    Rule("reserved_instances", reserved_instances),
    Rule("storage_lifecycle", storage_lifecycle),
    Rule("license_optimization", license_optimization, UserType.BUSINESS),
    Rule("budget_alerts", budget_alerts, UserType.BUSINESS),
    Rule("compliance_consolidation", compliance_consolidation, UserType.BUSINESS),
    Rule("growth_reserved_capacity", growth_reserved_capacity, UserType.BUSINESS),
    Rule("multi_cloud_management", multi_cloud_management, UserType.BUSINESS),
    Rule("cluster_autoscaling", cluster_autoscaling, UserType.DEVELOPER),
    Rule("data_transfer_optimization", data_transfer_optimization, UserType.DEVELOPER),
    Rule("serverless_right_sizing", serverless_right_sizing, UserType.DEVELOPER),
    Rule("architecture_modernization", architecture_modernization, UserType.DEVELOPER),
    Rule("managed_high_availability", managed_high_availability, UserType.DEVELOPER),
    Rule("compute_optimized_instances", compute_optimized_instances, UserType.DEVELOPER),
]


def evaluate_rules(
    workload: Workload,
    pricing: Optional[PricingResult] = None,
    rules: Optional[List[Rule]] = None,
) -> List[Recommendation]:
    """
    Evaluate every applicable rule against a workload.

    Args:
        workload: Normalized workload
        pricing: Pricing result for the selected provider
        rules: Rule registry (defaults to RULES)

    Returns:
        Recommendations in registry order
    """
    recommendations = []
    for rule in rules if rules is not None else RULES:
        if not rule.applies_to(workload):
            continue
        recommendation = rule.evaluate(workload, pricing)
        if recommendation is not None:
            logger.debug(f"Rule {rule.name} fired")
            recommendations.append(recommendation)
    return recommendations
