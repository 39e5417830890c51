"""Welcome-screen flag endpoints."""

from fastapi import APIRouter, Depends

from audiojournal.api.dependencies import get_welcome
from audiojournal.core.models import OnboardingState
from audiojournal.services.storage import WelcomeFlag

router = APIRouter(prefix="/onboarding", tags=["onboarding"])


@router.get("", response_model=OnboardingState)
async def get_onboarding(welcome: WelcomeFlag = Depends(get_welcome)):
    return OnboardingState(has_seen_welcome=await welcome.get())


@router.put("", response_model=OnboardingState)
async def update_onboarding(
    body: OnboardingState,
    welcome: WelcomeFlag = Depends(get_welcome),
):
    await welcome.set(body.has_seen_welcome)
    return OnboardingState(has_seen_welcome=await welcome.get())
