"""Weekly update template routes."""

from typing import Any, Dict, List

from fastapi import APIRouter

from weekly.services import template_service

router = APIRouter(prefix="/api/templates", tags=["templates"])


@router.get("")
async def list_templates() -> List[Dict[str, Any]]:
    return template_service.list_templates()


@router.get("/{template_id}")
async def get_template(template_id: str) -> Dict[str, Any]:
    """Full template with sections. Unknown ids answer 404 via the error handler."""
    return template_service.get_template(template_id).to_dict()
