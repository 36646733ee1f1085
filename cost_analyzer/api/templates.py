"""
API routes for starter workload templates.
"""
from typing import Any, Dict, List
from fastapi import APIRouter, HTTPException

from cost_analyzer.services.workload_templates import get_template, list_templates


router = APIRouter()


@router.get("/api/templates")
async def get_templates() -> List[Dict[str, Any]]:
    """List starter workload templates."""
    return list_templates()


@router.get("/api/templates/{name}")
async def get_template_by_name(name: str) -> Dict[str, Any]:
    """
    Get one starter workload template.

    Raises:
        HTTPException: 404 if the template does not exist
    """
    template = get_template(name)
    if template is None:
        raise HTTPException(status_code=404, detail=f"Template '{name}' not found")
    return template
