from fastapi import APIRouter, Depends

from careerpilot.ai.completion_client import CompletionClient
from careerpilot.api.deps import get_completion_client
from careerpilot.core.security import require_api_key

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the application.")
def health_check(client: CompletionClient = Depends(get_completion_client)):
    return {"status": "healthy", "ai": client.health_status()}


@router.get("/health/ai", summary="AI Connection Check", description="Send a short prompt to the completion provider.")
def ai_connection_check(
    client: CompletionClient = Depends(get_completion_client),
    _: None = Depends(require_api_key),
):
    connected = client.configured and client.test_connection()
    return {"status": "connected" if connected else "unavailable", "connected": connected, "model": client.default_model}
