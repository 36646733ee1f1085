"""
Provider reference data client.
Looks providers and regions up from the provider service, falling back to the embedded catalogue.
"""
from typing import Any, Dict, List, Optional
import logging
import httpx

from cost_analyzer.core.config import config
from cost_analyzer.cache.cache_store import CacheStore, get_cache_store
from cost_analyzer.pricing import reference_catalog
from cost_analyzer.resilience.circuit_breaker import CircuitBreaker, get_circuit_breaker


logger = logging.getLogger(__name__)


class ReferenceDataUnavailable(Exception):
    """Raised internally when live reference data cannot be obtained."""
    pass


class ReferenceDataClient:
    """
    Client for the provider service.

    Every public lookup succeeds: when the service is not configured, times
    out, errors, returns a malformed payload, or its circuit is open, the
    embedded catalogue answers instead. Only live responses are cached.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        cache: Optional[CacheStore] = None,
        timeout: Optional[float] = None,
        cache_ttl_seconds: Optional[int] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the reference data client.

        Args:
            base_url: Provider service URL (defaults to PROVIDER_SERVICE_URL)
            cache: Cache store for live responses
            timeout: Request timeout in seconds
            cache_ttl_seconds: TTL for cached responses
            circuit_breaker: Breaker guarding the provider service
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = (config.PROVIDER_SERVICE_URL if base_url is None else base_url).rstrip("/")
        self.cache = cache if cache is not None else get_cache_store()
        self.timeout = timeout if timeout is not None else config.REFERENCE_DATA_TIMEOUT_SECONDS
        self.cache_ttl_seconds = (
            cache_ttl_seconds if cache_ttl_seconds is not None else config.PRICING_CACHE_TTL_SECONDS
        )
        self.circuit_breaker = circuit_breaker or get_circuit_breaker("provider_service")
        self._transport = transport

    async def _fetch(self, path: str) -> Optional[Any]:
        """
        Fetch a JSON document from the provider service.

        Args:
            path: Path relative to the service URL

        Returns:
            Decoded JSON, or None when the service reports 404

        Raises:
            ReferenceDataUnavailable: If the service is unconfigured or the call fails
        """
        if not self.base_url:
            raise ReferenceDataUnavailable("provider service not configured")

        if not self.circuit_breaker.allow_request():
            raise ReferenceDataUnavailable("provider service circuit open")

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                response = await client.get(f"{self.base_url}{path}")
                if response.status_code == 404:
                    self.circuit_breaker.record_success()  # Not found is not a failure
                    return None
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as error:
            self.circuit_breaker.record_failure()
            raise ReferenceDataUnavailable(f"provider service timed out: {path}") from error
        except httpx.HTTPStatusError as error:
            self.circuit_breaker.record_failure()
            raise ReferenceDataUnavailable(
                f"provider service returned {error.response.status_code}: {path}"
            ) from error
        except httpx.RequestError as error:
            self.circuit_breaker.record_failure()
            raise ReferenceDataUnavailable(f"provider service request failed: {error}") from error
        except ValueError as error:
            self.circuit_breaker.record_failure()
            raise ReferenceDataUnavailable(f"provider service returned invalid JSON: {path}") from error

        self.circuit_breaker.record_success()
        return data

    def _log_fallback(self, lookup: str, error: ReferenceDataUnavailable) -> None:
        if self.base_url:
            logger.warning(f"Reference data fallback for {lookup}: {error}")
        else:
            logger.debug(f"Using embedded catalogue for {lookup}")

    @staticmethod
    def _is_entry_list(payload: Any) -> bool:
        return isinstance(payload, list) and all(
            isinstance(item, dict) and item.get("id") for item in payload
        )

    async def list_providers(self) -> List[Dict[str, Any]]:
        """
        List known cloud providers.

        Returns:
            Provider entries with id, name and description
        """
        cache_key = "providers:list"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            payload = await self._fetch("/list")
            if not self._is_entry_list(payload):
                raise ReferenceDataUnavailable("malformed provider list payload")
        except ReferenceDataUnavailable as error:
            self._log_fallback("provider list", error)
            return [dict(provider) for provider in reference_catalog.PROVIDERS]

        self.cache.set(cache_key, payload, self.cache_ttl_seconds)
        return payload

    async def get_provider(self, provider_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a single provider.

        Args:
            provider_id: Provider id (e.g., "aws")

        Returns:
            Provider entry, or None if the provider is unknown
        """
        cache_key = f"provider:{provider_id}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            payload = await self._fetch(f"/provider/{provider_id}")
            if payload is None:
                return reference_catalog.get_provider(provider_id)
            if not isinstance(payload, dict) or not payload.get("id"):
                raise ReferenceDataUnavailable("malformed provider payload")
        except ReferenceDataUnavailable as error:
            self._log_fallback(f"provider {provider_id}", error)
            return reference_catalog.get_provider(provider_id)

        self.cache.set(cache_key, payload, self.cache_ttl_seconds)
        return payload

    async def get_regions(self, provider_id: str) -> Optional[List[Dict[str, Any]]]:
        """
        Get the regions offered by a provider.

        Args:
            provider_id: Provider id

        Returns:
            Region entries with id, name, location and continent,
            or None if the provider is unknown
        """
        cache_key = f"provider:{provider_id}:regions"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            payload = await self._fetch(f"/provider/{provider_id}/regions")
            if payload is None:
                return reference_catalog.get_regions(provider_id)
            regions = payload.get("regions") if isinstance(payload, dict) else payload
            if not self._is_entry_list(regions):
                raise ReferenceDataUnavailable("malformed regions payload")
        except ReferenceDataUnavailable as error:
            self._log_fallback(f"regions of {provider_id}", error)
            return reference_catalog.get_regions(provider_id)

        self.cache.set(cache_key, regions, self.cache_ttl_seconds)
        return regions


# Global singleton instance
_reference_client: Optional[ReferenceDataClient] = None


def get_reference_client() -> ReferenceDataClient:
    """
    Get the global reference data client.

    Returns:
        ReferenceDataClient instance
    """
    global _reference_client
    if _reference_client is None:
        _reference_client = ReferenceDataClient()
    return _reference_client
