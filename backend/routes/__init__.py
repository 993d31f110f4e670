"""FastAPI API endpoints under /api.

Endpoint groups: health, game-states (with nested choices and party),
party-classes, party-configurations, and per-session adventures and saved
parties under /api/sessions/{session_id}/.
"""

from fastapi import APIRouter

from .adventures import router as adventures_router
from .game_states import router as game_states_router
from .health import router as health_router
from .parties import router as parties_router

router = APIRouter()
router.include_router(health_router)
router.include_router(game_states_router)
router.include_router(adventures_router)
router.include_router(parties_router)
