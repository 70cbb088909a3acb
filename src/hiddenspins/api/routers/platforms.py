"""Platform classification endpoint (used by the add-artist form while typing a link)."""

from fastapi import APIRouter, Query

from hiddenspins.api.schemas import PlatformInfoResponse
from hiddenspins.domain.value_objects import classify

router = APIRouter(prefix="/platforms", tags=["Platforms"])


@router.get("/classify", response_model=PlatformInfoResponse)
async def classify_url(
    url: str = Query("", description="Link to classify"),
) -> PlatformInfoResponse:
    """Which platform a link belongs to and whether it's streaming or social."""
    return PlatformInfoResponse.from_info(classify(url))
