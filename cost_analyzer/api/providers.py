"""
API routes for the provider and region catalogue.
"""
from typing import List
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field
import logging

from cost_analyzer.pricing.reference_client import get_reference_client


logger = logging.getLogger(__name__)
router = APIRouter()


class ProviderInfo(BaseModel):
    """A cloud provider in the catalogue."""
    id: str = Field(..., description="Provider id (e.g., aws)")
    name: str = Field(..., description="Display name")
    description: str = Field(default="", description="Short provider description")


class RegionInfo(BaseModel):
    """A provider region."""
    id: str = Field(..., description="Region id (e.g., us-east-1)")
    name: str = Field(..., description="Display name")
    location: str = Field(default="", description="City or area")
    continent: str = Field(default="", description="Continent")


class ProviderRegionsResponse(BaseModel):
    """Regions offered by one provider."""
    provider: str = Field(..., description="Provider id")
    regions: List[RegionInfo] = Field(..., description="Regions offered by the provider")


@router.get("/api/providers", response_model=List[ProviderInfo])
async def list_providers() -> List[ProviderInfo]:
    """
    List supported cloud providers.

    Returns:
        Provider entries with id, name and description
    """
    try:
        providers = await get_reference_client().list_providers()
        return [ProviderInfo(**provider) for provider in providers]
    except Exception as error:
        logger.error(f"Unexpected error listing providers: {error}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to list providers.") from error


@router.get("/api/providers/{provider_id}", response_model=ProviderInfo)
async def get_provider(provider_id: str) -> ProviderInfo:
    """
    Get a single provider.

    Args:
        provider_id: Provider id (e.g., "aws")

    Returns:
        Provider entry

    Raises:
        HTTPException: 404 if the provider is unknown
    """
    try:
        provider = await get_reference_client().get_provider(provider_id.lower())
        if provider is None:
            raise HTTPException(status_code=404, detail=f"Provider '{provider_id}' not found")
        return ProviderInfo(**provider)

    except HTTPException:
        raise
    except Exception as error:
        logger.error(f"Unexpected error fetching provider {provider_id}: {error}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch provider.") from error


@router.get("/api/providers/{provider_id}/regions", response_model=ProviderRegionsResponse)
async def get_provider_regions(provider_id: str) -> ProviderRegionsResponse:
    """
    List the regions offered by a provider.

    Args:
        provider_id: Provider id

    Returns:
        Provider id and its regions

    Raises:
        HTTPException: 404 if the provider is unknown
    """
    try:
        provider_id = provider_id.lower()
        regions = await get_reference_client().get_regions(provider_id)
        if regions is None:
            raise HTTPException(status_code=404, detail=f"Provider '{provider_id}' not found")
        return ProviderRegionsResponse(
            provider=provider_id,
            regions=[RegionInfo(**region) for region in regions],
        )

    except HTTPException:
        raise
    except Exception as error:
        logger.error(f"Unexpected error fetching regions for {provider_id}: {error}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch regions.") from error
