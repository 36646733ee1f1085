"""
Static rate tables for the category cost calculators.

Base rates are monthly USD list prices per provider. Multipliers live in a
separate declarative adjustment table so the calculators only ever combine
values looked up here. Both tables are read-only once built.
"""
from types import MappingProxyType
from typing import Dict, Mapping, Optional, FrozenSet
from dataclasses import dataclass


RATE_TABLE_VERSION = "2024.1"

# Compute and database hours are billed against a 24/7 month
HOURS_PER_MONTH = 730


def _freeze(mapping: Dict) -> Mapping:
    """Recursively wrap nested dictionaries in read-only proxies."""
    return MappingProxyType({
        key: _freeze(value) if isinstance(value, dict) else value
        for key, value in mapping.items()
    })


# Per-provider base rates for categories priced by a single provider rate.
# compute: USD per medium instance-month; storage: USD per GB-month;
# networking: USD per GB transferred; serverless: USD per GB-second.
_FLAT_RATES: Dict[str, Dict[str, float]] = {
    "compute": {
        "aws": 35, "azure": 32, "gcp": 28, "oracle": 36, "ibm": 34,
        "alibaba": 25, "digitalocean": 25,
    },
    "storage": {
        "aws": 0.023, "azure": 0.018, "gcp": 0.02, "oracle": 0.025, "ibm": 0.022,
        "alibaba": 0.015, "digitalocean": 0.015,
    },
    "networking": {
        "aws": 0.08, "azure": 0.07, "gcp": 0.075, "oracle": 0.065, "ibm": 0.09,
        "alibaba": 0.085, "digitalocean": 0.085,
    },
    "serverless": {
        "aws": 0.0000002, "azure": 0.0000002, "gcp": 0.0000004, "oracle": 0.0000005,
        "ibm": 0.0000003, "alibaba": 0.0000004, "digitalocean": 0.0000004,
    },
}

# Rates keyed by service type, then provider. DigitalOcean carries the
# Alibaba values. Graph databases are only offered on AWS and Azure.
_TYPED_RATES: Dict[str, Dict[str, Dict[str, float]]] = {
    "database": {
        "mysql": {
            "aws": 25, "azure": 26, "gcp": 22, "oracle": 30, "ibm": 28,
            "alibaba": 20, "digitalocean": 20,
        },
        "nosql": {
            "aws": 20, "azure": 22, "gcp": 18, "oracle": 23, "ibm": 21,
            "alibaba": 16, "digitalocean": 16,
        },
        "redis": {
            "aws": 35, "azure": 33, "gcp": 30, "oracle": 38, "ibm": 36,
            "alibaba": 28, "digitalocean": 28,
        },
        "analytics": {
            "aws": 80, "azure": 75, "gcp": 70, "oracle": 85, "ibm": 82,
            "alibaba": 65, "digitalocean": 65,
        },
        "graph": {
            "aws": 90, "azure": 85, "gcp": 0, "oracle": 0, "ibm": 0,
            "alibaba": 0, "digitalocean": 0,
        },
    },
    "managedServices": {
        "kubernetes": {
            "aws": 73, "azure": 77, "gcp": 70, "oracle": 65, "ibm": 80,
            "alibaba": 75, "digitalocean": 75,
        },
        "cache": {
            "aws": 60, "azure": 55, "gcp": 65, "oracle": 70, "ibm": 50,
            "alibaba": 60, "digitalocean": 60,
        },
        "queue": {
            "aws": 40, "azure": 35, "gcp": 30, "oracle": 45, "ibm": 38,
            "alibaba": 35, "digitalocean": 35,
        },
        "api-gateway": {
            "aws": 45, "azure": 42, "gcp": 38, "oracle": 50, "ibm": 48,
            "alibaba": 40, "digitalocean": 40,
        },
        "ci-cd": {
            "aws": 55, "azure": 60, "gcp": 52, "oracle": 65, "ibm": 58,
            "alibaba": 50, "digitalocean": 50,
        },
    },
}


@dataclass(frozen=True)
class RateTable:
    """
    Versioned base rates per (category, provider) and (category, type, provider).

    Lookups return None when no rate exists, which callers treat as unpriced.
    """
    version: str
    flat_rates: Mapping[str, Mapping[str, float]]
    typed_rates: Mapping[str, Mapping[str, Mapping[str, float]]]

    def flat_rate(self, category: str, provider: str) -> Optional[float]:
        """
        Look up a per-provider base rate.

        Args:
            category: Category wire name (e.g., "compute")
            provider: Provider id (e.g., "aws")

        Returns:
            Base rate, or None if the provider has no rate for the category
        """
        return self.flat_rates.get(category, {}).get(provider)

    def typed_rate(self, category: str, service_type: str, provider: str) -> Optional[float]:
        """
        Look up a base rate keyed by service type and provider.

        Args:
            category: "database" or "managedServices"
            service_type: Service type (e.g., "mysql", "kubernetes")
            provider: Provider id

        Returns:
            Base rate, or None if the type or provider is unknown
        """
        return self.typed_rates.get(category, {}).get(service_type, {}).get(provider)

    def has_type(self, category: str, service_type: str) -> bool:
        """Check whether a service type exists for a typed category."""
        return service_type in self.typed_rates.get(category, {})

    def providers(self) -> FrozenSet[str]:
        """Providers with at least one base rate."""
        found = set()
        for rates in self.flat_rates.values():
            found.update(rates.keys())
        return frozenset(found)


@dataclass(frozen=True)
class AdjustmentTable:
    """
    Declarative multipliers applied on top of base rates.

    Tables without a default make unknown keys unpriced. Tables with a
    default (access pattern, VPN type, HA mode, MySQL tier) fall back to it.
    """
    compute_size: Mapping[str, float]
    premium_os: FrozenSet[str]
    premium_os_factor: float
    specialized_instance_types: FrozenSet[str]
    specialized_instance_factor: float
    storage_type: Mapping[str, float]
    critical_storage_factor: float
    access_pattern: Mapping[str, float]
    database_ha: Mapping[str, float]
    mysql_tier: Mapping[str, float]
    database_storage_divisor: float
    networking_type: Mapping[str, float]
    vpn_type: Mapping[str, float]
    serverless_type: Mapping[str, float]
    managed_service_size: Mapping[str, float]


DEFAULT_RATE_TABLE = RateTable(
    version=RATE_TABLE_VERSION,
    flat_rates=_freeze(_FLAT_RATES),
    typed_rates=_freeze(_TYPED_RATES),
)

DEFAULT_ADJUSTMENTS = AdjustmentTable(
    compute_size=_freeze({"small": 0.5, "medium": 1, "large": 3, "xlarge": 8}),
    premium_os=frozenset({"windows", "rhel", "suse"}),
    premium_os_factor=1.3,
    specialized_instance_types=frozenset({"compute", "memory", "storage", "gpu"}),
    specialized_instance_factor=1.2,
    storage_type=_freeze({"object": 1, "block": 1.8, "file": 2.2, "archive": 0.4}),
    critical_storage_factor=1.5,
    access_pattern=_freeze({"infrequent": 0.6, "intensive": 1.4, "throughput": 1.3}),
    database_ha=_freeze({"none": 1, "standby": 1.7, "cluster": 2.5}),
    mysql_tier=_freeze({"medium": 2, "large": 4}),
    database_storage_divisor=1000,
    networking_type=_freeze({
        "loadBalancer": 1, "dataTransfer": 0.8, "vpn": 0.7, "firewall": 0.5, "cdn": 0.9,
    }),
    vpn_type=_freeze({"site-to-site": 1.2, "point-to-site": 0.9}),
    serverless_type=_freeze({"function": 1, "container": 1.5, "edge": 1.8}),
    managed_service_size=_freeze({"small": 1, "medium": 2, "large": 3}),
)
