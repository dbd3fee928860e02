"""Central API router that aggregates all route modules."""

from fastapi import APIRouter

from voice_platform.api.clone import router as clone_router
from voice_platform.api.health import router as health_router
from voice_platform.api.stt import router as stt_router
from voice_platform.api.stt_stream import router as stt_stream_router
from voice_platform.api.tts import router as tts_router
from voice_platform.api.users import router as users_router

api_router = APIRouter()

api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(tts_router, prefix="/tts", tags=["tts"])
api_router.include_router(stt_stream_router, prefix="/stt/stream", tags=["stt"])
api_router.include_router(stt_router, prefix="/stt", tags=["stt"])
api_router.include_router(clone_router, prefix="/clone", tags=["clone"])
api_router.include_router(users_router, prefix="/users", tags=["users"])
