from fastapi import APIRouter

from ..core.ai_client import ai_client
from ..settings import settings

router = APIRouter()


@router.get("/ready")
async def ready():
    return {
        "ok": True,
        "ai_enabled": ai_client.is_available(),
        "fdc_configured": bool(settings.fdc_api_key),
    }
