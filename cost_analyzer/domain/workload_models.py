"""
Domain models for workload descriptions.
Defines the normalized, immutable shape of a workload submitted for pricing.
"""
from typing import Dict, Any, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum


class Provider(str, Enum):
    """Cloud providers known to the reference catalogue."""
    AWS = "aws"
    AZURE = "azure"
    GCP = "gcp"
    IBM = "ibm"
    ORACLE = "oracle"
    ALIBABA = "alibaba"
    DIGITALOCEAN = "digitalocean"

    @classmethod
    def from_id(cls, provider_id: Optional[str]) -> Optional["Provider"]:
        """Resolve a provider id, returning None when it is not in the catalogue."""
        if not provider_id:
            return None
        try:
            return cls(str(provider_id).lower())
        except ValueError:
            return None


class ResourceCategory(str, Enum):
    """Resource categories, valued by their wire names."""
    COMPUTE = "compute"
    STORAGE = "storage"
    DATABASE = "database"
    NETWORKING = "networking"
    SERVERLESS = "serverless"
    MANAGED_SERVICES = "managedServices"


class UserType(str, Enum):
    """Recommendation profile selected by the workload."""
    BUSINESS = "business"
    DEVELOPER = "developer"


class DeploymentStrategy(str, Enum):
    """How compute is spread across providers."""
    SINGLE_CLOUD = "single-cloud"
    MULTI_CLOUD = "multi-cloud"


@dataclass(frozen=True)
class ComputeResource:
    """A group of identical virtual machines."""
    size: str = "medium"
    quantity: int = 1
    hours_per_month: float = 730
    utilization: float = 50
    os: str = "linux"
    instance_type: str = "general"
    provider: Optional[str] = None

    @property
    def pinned_provider(self) -> str:
        """Provider this entry runs on in a multi-cloud deployment."""
        return (self.provider or Provider.AWS.value).lower()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary using wire field names."""
        return {
            "size": self.size,
            "quantity": self.quantity,
            "hoursPerMonth": self.hours_per_month,
            "utilization": self.utilization,
            "os": self.os,
            "instanceType": self.instance_type,
            "provider": self.provider,
        }


@dataclass(frozen=True)
class StorageResource:
    """A storage volume or bucket."""
    type: str = "object"
    size_gb: float = 100
    critical: bool = False
    access_pattern: str = "standard"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary using wire field names."""
        return {
            "type": self.type,
            "sizeGB": self.size_gb,
            "critical": self.critical,
            "accessPattern": self.access_pattern,
        }


@dataclass(frozen=True)
class DatabaseResource:
    """A managed database deployment."""
    type: str = "mysql"
    tier: str = "small"
    quantity: int = 1
    hours_per_month: float = 730
    storage_size_gb: float = 0
    high_availability: str = "none"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary using wire field names."""
        return {
            "type": self.type,
            "tier": self.tier,
            "quantity": self.quantity,
            "hoursPerMonth": self.hours_per_month,
            "storageSizeGB": self.storage_size_gb,
            "highAvailability": self.high_availability,
        }


@dataclass(frozen=True)
class NetworkingResource:
    """A networking component billed by transferred volume."""
    type: str = "loadBalancer"
    tier: str = "standard"
    data_transfer_gb: float = 100
    vpn_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary using wire field names."""
        return {
            "type": self.type,
            "tier": self.tier,
            "dataTransferGB": self.data_transfer_gb,
            "vpnType": self.vpn_type,
        }


@dataclass(frozen=True)
class ServerlessResource:
    """A serverless function, container or edge workload."""
    type: str = "function"
    executions_per_month: float = 1_000_000
    memory_mb: float = 128
    avg_duration_ms: float = 500

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary using wire field names."""
        return {
            "type": self.type,
            "executionsPerMonth": self.executions_per_month,
            "memoryMB": self.memory_mb,
            "avgDurationMs": self.avg_duration_ms,
        }


@dataclass(frozen=True)
class ManagedServiceResource:
    """A managed platform service billed at a flat monthly rate."""
    type: str = "kubernetes"
    size: str = "small"
    quantity: int = 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary using wire field names."""
        return {
            "type": self.type,
            "size": self.size,
            "quantity": self.quantity,
        }


@dataclass(frozen=True)
class BusinessMetrics:
    """Business context used by the business recommendation profile."""
    expected_growth: Optional[str] = None
    budget_constraint: Optional[Any] = None
    user_traffic: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary using wire field names."""
        return {
            "expectedGrowth": self.expected_growth,
            "budgetConstraint": self.budget_constraint,
            "userTraffic": self.user_traffic,
        }


@dataclass(frozen=True)
class TechnicalRequirements:
    """Technical context used by the developer recommendation profile."""
    high_availability: bool = False
    disaster_recovery: bool = False
    autoscaling: bool = False
    multi_region: bool = False
    architecture_pattern: Optional[str] = None
    performance_requirements: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary using wire field names."""
        return {
            "highAvailability": self.high_availability,
            "disasterRecovery": self.disaster_recovery,
            "autoscaling": self.autoscaling,
            "multiRegion": self.multi_region,
            "architecturePattern": self.architecture_pattern,
            "performanceRequirements": self.performance_requirements,
        }


@dataclass(frozen=True)
class Workload:
    """
    A fully defaulted workload.

    Built once by the normalizer and never mutated afterwards. Resource
    lists are stored as tuples so the instance stays immutable.
    """
    compute: Tuple[ComputeResource, ...] = ()
    storage: Tuple[StorageResource, ...] = ()
    database: Tuple[DatabaseResource, ...] = ()
    networking: Tuple[NetworkingResource, ...] = ()
    serverless: Tuple[ServerlessResource, ...] = ()
    managed_services: Tuple[ManagedServiceResource, ...] = ()
    preferred_provider: Optional[str] = None
    existing_provider: Optional[str] = None
    user_type: str = UserType.BUSINESS.value
    deployment_strategy: str = DeploymentStrategy.SINGLE_CLOUD.value
    compliance_requirements: Tuple[str, ...] = ()
    business_metrics: BusinessMetrics = field(default_factory=BusinessMetrics)
    technical_requirements: TechnicalRequirements = field(default_factory=TechnicalRequirements)
    region: Tuple[Tuple[str, str], ...] = ()
    providers: Tuple[str, ...] = ()
    flow: str = "simple"

    def entries(self, category: ResourceCategory) -> Tuple[Any, ...]:
        """Return the resource entries for a category."""
        return {
            ResourceCategory.COMPUTE: self.compute,
            ResourceCategory.STORAGE: self.storage,
            ResourceCategory.DATABASE: self.database,
            ResourceCategory.NETWORKING: self.networking,
            ResourceCategory.SERVERLESS: self.serverless,
            ResourceCategory.MANAGED_SERVICES: self.managed_services,
        }[category]

    def region_for(self, provider_id: str) -> Optional[str]:
        """Return the selected region for a provider, if any."""
        return dict(self.region).get(provider_id)

    @property
    def selected_provider(self) -> str:
        """Provider whose costs drive the savings summary."""
        return self.preferred_provider or self.existing_provider or Provider.AWS.value

    @property
    def is_multi_cloud(self) -> bool:
        return self.deployment_strategy == DeploymentStrategy.MULTI_CLOUD.value

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary using wire field names."""
        return {
            "compute": [entry.to_dict() for entry in self.compute],
            "storage": [entry.to_dict() for entry in self.storage],
            "database": [entry.to_dict() for entry in self.database],
            "networking": [entry.to_dict() for entry in self.networking],
            "serverless": [entry.to_dict() for entry in self.serverless],
            "managedServices": [entry.to_dict() for entry in self.managed_services],
            "preferred_provider": self.preferred_provider,
            "existingProvider": self.existing_provider,
            "userType": self.user_type,
            "deploymentStrategy": self.deployment_strategy,
            "complianceRequirements": list(self.compliance_requirements),
            "businessMetrics": self.business_metrics.to_dict(),
            "technicalRequirements": self.technical_requirements.to_dict(),
            "region": dict(self.region),
            "providers": list(self.providers),
            "flow": self.flow,
        }
