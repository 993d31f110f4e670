from fastapi import APIRouter

from questlog.models import CURRENT_CHARACTER_MODEL_VERSION, CURRENT_VERSION

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness check; also reports the data model versions this server writes."""
    return {
        "ok": True,
        "progressVersion": CURRENT_VERSION,
        "characterModelVersion": CURRENT_CHARACTER_MODEL_VERSION,
    }
