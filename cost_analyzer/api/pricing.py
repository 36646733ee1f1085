"""
API routes for workload pricing.
"""
from typing import Any, Dict
from fastapi import APIRouter, Body, HTTPException
import logging

from cost_analyzer.services.workload_normalizer import normalize_workload, WorkloadValidationError
from cost_analyzer.services.cost_aggregator import price_workload, compare_providers
from cost_analyzer.domain.workload_models import Workload


logger = logging.getLogger(__name__)
router = APIRouter()


def parse_workload(payload: Any) -> Workload:
    """
    Normalize a request body into a Workload.

    The detailed form flow requires at least one compute resource.

    Raises:
        WorkloadValidationError: If the body is not a valid workload
    """
    require_compute = isinstance(payload, dict) and payload.get("flow") == "detailed"
    return normalize_workload(payload, require_compute=require_compute)


@router.post("/api/pricing")
async def get_pricing(payload: Any = Body(...)) -> Dict[str, Any]:
    """
    Price a workload on every candidate provider.

    Candidates are the workload's ``providers`` list (or the configured
    defaults), followed by the selected and existing providers.

    Args:
        payload: Workload document

    Returns:
        Mapping of provider id to pricing result

    Raises:
        WorkloadValidationError: If the workload is invalid (mapped to 400)
        HTTPException: On unexpected errors
    """
    try:
        workload = parse_workload(payload)
        pricing = price_workload(workload)
        return {provider: result.to_dict() for provider, result in pricing.items()}

    except (HTTPException, WorkloadValidationError):
        raise
    except Exception as error:
        logger.error(f"Unexpected error during pricing: {error}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="An unexpected error occurred while pricing the workload."
        ) from error


@router.post("/api/pricing/compare")
async def compare_pricing(payload: Any = Body(...)) -> Dict[str, Any]:
    """
    Rank candidate providers by monthly total.

    Args:
        payload: Workload document

    Returns:
        Provider comparison with cheapest provider, switch savings and cost per user

    Raises:
        WorkloadValidationError: If the workload is invalid (mapped to 400)
        HTTPException: On unexpected errors
    """
    try:
        workload = parse_workload(payload)
        pricing = price_workload(workload)
        return compare_providers(pricing, workload).to_dict()

    except (HTTPException, WorkloadValidationError):
        raise
    except Exception as error:
        logger.error(f"Unexpected error during provider comparison: {error}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="An unexpected error occurred while comparing providers."
        ) from error
