"""Journal prompt endpoint."""

from fastapi import APIRouter

from audiojournal.core.models import PromptsResponse
from audiojournal.services.prompts import get_prompts

router = APIRouter(prefix="/prompts", tags=["prompts"])


@router.get("", response_model=PromptsResponse)
async def list_prompts():
    """Writing prompts for when the user does not know where to start."""
    return PromptsResponse(prompts=get_prompts())
