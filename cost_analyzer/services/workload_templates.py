"""
Starter workload templates.

Each template is merged over the initial workload context so it can be
posted straight to the pricing and recommendation routes.
"""

import copy
from typing import Any, Dict, List, Optional

from cost_analyzer.pricing.reference_catalog import DEFAULT_REGIONS


INITIAL_WORKLOAD: Dict[str, Any] = {
    "compute": [],
    "storage": [],
    "database": [],
    "networking": [],
    "serverless": [],
    "managedServices": [],
    "region": dict(DEFAULT_REGIONS),
    "preferred_provider": "aws",
    "userType": "business",
    "deploymentStrategy": "single-cloud",
    "existingProvider": None,
    "complianceRequirements": [],
    "businessMetrics": {
        "expectedGrowth": "moderate",
        "budgetConstraint": None,
        "userTraffic": None,
    },
    "technicalRequirements": {
        "highAvailability": False,
        "disasterRecovery": False,
        "autoscaling": False,
        "multiRegion": False,
    },
}

TEMPLATES: Dict[str, Dict[str, Any]] = {
    "small_website": {
        "name": "Small Website",
        "description": "Basic website with low traffic",
        "compute": [
            {"size": "small", "quantity": 2, "hoursPerMonth": 730},
        ],
        "storage": [
            {"type": "object", "sizeGB": 50},
            {"type": "block", "sizeGB": 100},
        ],
        "database": [
            {"type": "mysql", "tier": "small", "quantity": 1},
        ],
    },
    "ecommerce": {
        "name": "E-commerce Application",
        "description": "Medium-sized e-commerce platform",
        "compute": [
            {"size": "medium", "quantity": 4, "hoursPerMonth": 730},
            {"size": "small", "quantity": 2, "hoursPerMonth": 730},
        ],
        "storage": [
            {"type": "object", "sizeGB": 500},
            {"type": "block", "sizeGB": 1000},
        ],
        "database": [
            {"type": "mysql", "tier": "medium", "quantity": 1},
            {"type": "nosql", "quantity": 1},
        ],
        "networking": [
            {"type": "loadBalancer", "tier": "standard", "dataTransferGB": 500},
        ],
    },
    "data_analytics": {
        "name": "Data Analytics Platform",
        "description": "Large data processing application",
        "compute": [
            {"size": "large", "quantity": 2, "hoursPerMonth": 730},
            {"size": "medium", "quantity": 4, "hoursPerMonth": 730},
        ],
        "storage": [
            {"type": "object", "sizeGB": 5000},
            {"type": "block", "sizeGB": 2000},
        ],
        "database": [
            {"type": "mysql", "tier": "large", "quantity": 1},
            {"type": "nosql", "quantity": 2},
        ],
    },
    "microservices": {
        "name": "Microservices Architecture",
        "description": "Containerized application with multiple services",
        "compute": [
            {"size": "medium", "quantity": 6, "hoursPerMonth": 730},
        ],
        "storage": [
            {"type": "object", "sizeGB": 200},
            {"type": "block", "sizeGB": 500},
        ],
        "database": [
            {"type": "mysql", "tier": "medium", "quantity": 1},
            {"type": "nosql", "quantity": 3},
        ],
        "managedServices": [
            {"type": "kubernetes", "size": "medium", "quantity": 1},
        ],
        "networking": [
            {"type": "loadBalancer", "tier": "standard", "dataTransferGB": 1000},
        ],
    },
    "serverless_app": {
        "name": "Serverless Application",
        "description": "Event-driven architecture using serverless functions",
        "serverless": [
            {"type": "function", "executionsPerMonth": 5000000, "memoryMB": 256, "avgDurationMs": 800},
        ],
        "storage": [
            {"type": "object", "sizeGB": 100},
        ],
        "database": [
            {"type": "nosql", "quantity": 1},
        ],
    },
}


def get_template(name: str) -> Optional[Dict[str, Any]]:
    """
    Build the workload for a named template.

    Args:
        name: Template key (e.g., "ecommerce")

    Returns:
        Template with a full "workload" document, or None if unknown
    """
    template = TEMPLATES.get(name)
    if template is None:
        return None

    workload = copy.deepcopy(INITIAL_WORKLOAD)
    workload.update(copy.deepcopy({
        key: value for key, value in template.items() if key not in ("name", "description")
    }))
    return {
        "id": name,
        "name": template["name"],
        "description": template["description"],
        "workload": workload,
    }


def list_templates() -> List[Dict[str, Any]]:
    """List every template with its merged workload."""
    return [get_template(name) for name in TEMPLATES]
