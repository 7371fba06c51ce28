from fastapi import APIRouter, Depends

from careerpilot.api.deps import get_usage_tracker
from careerpilot.core.security import current_user_id
from careerpilot.schemas.documents import UsageResponse
from careerpilot.services.usage_tracker import UsageTracker

router = APIRouter()


@router.get("/usage", response_model=UsageResponse)
def usage_stats(
    user_id: str = Depends(current_user_id),
    usage: UsageTracker = Depends(get_usage_tracker),
):
    return usage.stats(user_id)
