"""
API routes for optimization recommendations.
"""
from typing import Any, Dict
from fastapi import APIRouter, Body, HTTPException
import logging

from cost_analyzer.api.pricing import parse_workload
from cost_analyzer.services.workload_normalizer import WorkloadValidationError
from cost_analyzer.services.recommendation_service import get_recommendation_service


logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/api/recommendations")
async def get_recommendations(payload: Any = Body(...)) -> Dict[str, Any]:
    """
    Generate cost optimization recommendations for a workload.

    Recommendations are evaluated against the selected provider
    (preferred, else existing, else aws).

    Args:
        payload: Workload document

    Returns:
        Dictionary with "recommendations" and "summary"

    Raises:
        WorkloadValidationError: If the workload is invalid (mapped to 400)
        HTTPException: On unexpected errors
    """
    try:
        workload = parse_workload(payload)
        return get_recommendation_service().generate(workload)

    except (HTTPException, WorkloadValidationError):
        raise
    except Exception as error:
        logger.error(f"Unexpected error generating recommendations: {error}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="An unexpected error occurred while generating recommendations."
        ) from error
