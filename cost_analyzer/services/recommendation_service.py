"""
Recommendation service.
Prices the selected provider, evaluates rules and summarizes savings, caching the payload.
"""
import hashlib
import json
import logging
from typing import Any, Dict, Optional

from cost_analyzer.core.config import config
from cost_analyzer.cache.cache_store import CacheStore, get_cache_store
from cost_analyzer.domain.workload_models import Workload
from cost_analyzer.services.cost_aggregator import price_provider
from cost_analyzer.services.recommendation_engine import evaluate_rules
from cost_analyzer.services.savings_estimator import summarize


logger = logging.getLogger(__name__)


def workload_cache_key(workload: Workload) -> str:
    """Cache key derived from the canonical JSON of a normalized workload."""
    canonical = json.dumps(workload.to_dict(), sort_keys=True, separators=(",", ":"), default=str)
    return f"recommendations:{hashlib.sha256(canonical.encode('utf-8')).hexdigest()}"


class RecommendationService:
    """Builds recommendation payloads for workloads."""

    def __init__(self, cache: Optional[CacheStore] = None, ttl_seconds: Optional[int] = None):
        """
        Initialize recommendation service.

        Args:
            cache: Cache store for generated payloads
            ttl_seconds: Payload TTL (defaults to RECOMMENDATION_CACHE_TTL_SECONDS)
        """
        self.cache = cache if cache is not None else get_cache_store()
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else config.RECOMMENDATION_CACHE_TTL_SECONDS

    def generate(self, workload: Workload) -> Dict[str, Any]:
        """
        Generate recommendations and a savings summary.

        Args:
            workload: Normalized workload

        Returns:
            Dictionary with "recommendations" and "summary"
        """
        cache_key = workload_cache_key(workload)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Recommendation cache hit")
            return cached

        pricing = price_provider(workload, workload.selected_provider)
        recommendations = evaluate_rules(workload, pricing)
        summary = summarize(recommendations, pricing)

        payload = {
            "recommendations": [recommendation.to_dict() for recommendation in recommendations],
            "summary": summary.to_dict(),
        }
        self.cache.set(cache_key, payload, self.ttl_seconds)

        logger.info(
            f"Generated {summary.total_recommendations} recommendation(s) for "
            f"{workload.selected_provider} ({workload.user_type} profile)"
        )
        return payload


# Global singleton instance
_recommendation_service: Optional[RecommendationService] = None


def get_recommendation_service() -> RecommendationService:
    """
    Get the global recommendation service.

    Returns:
        RecommendationService instance
    """
    global _recommendation_service
    if _recommendation_service is None:
        _recommendation_service = RecommendationService()
    return _recommendation_service
