"""FastAPI application entry point with lifespan management."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from voice_platform.api.realtime import websocket_tts
from voice_platform.api.router import api_router
from voice_platform.config import settings
from voice_platform.db.database import DatabaseError
from voice_platform.dependencies import (
    get_database,
    get_fish_audio_client,
    get_scheduler,
    get_whisper_service,
)
from voice_platform.voice.fish_audio import FishAudioError

logger = logging.getLogger(__name__)

SESSION_SWEEP_JOB_ID = "stt_session_sweep"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown lifecycle."""
    logger.info("Starting voice platform backend...")

    database = get_database()
    await database.initialize()
    logger.info("Database initialized successfully")

    whisper = get_whisper_service()
    await whisper.initialize()

    # Sweep idle and finalized streaming sessions on the event loop
    async def sweep_streaming_sessions() -> None:
        removed = whisper.cleanup_expired_sessions()
        if removed:
            logger.info("Session sweep removed %d streaming sessions", removed)

    scheduler = get_scheduler()
    await scheduler.initialize()
    scheduler.schedule_interval(
        sweep_streaming_sessions,
        seconds=settings.stt_sweep_interval_seconds,
        job_id=SESSION_SWEEP_JOB_ID,
        name="Streaming STT session sweep",
    )
    logger.info("Scheduler initialized successfully")

    fish_audio = None
    if settings.fish_audio_api_token:
        fish_audio = get_fish_audio_client()
        await fish_audio.initialize()
    else:
        logger.warning("FISH_AUDIO_API_TOKEN not set, TTS and cloning are disabled")

    yield

    # Cleanup
    if fish_audio is not None:
        await fish_audio.close()
    await scheduler.shutdown()
    await whisper.cleanup()
    await database.close()
    logger.info("Voice platform backend shut down cleanly")


app = FastAPI(
    title="Voice Platform API",
    description="Text-to-speech, speech-to-text and voice cloning backend",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        settings.frontend_url,
        "http://localhost:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(
    status_code: int, message: str, headers: dict[str, str] | None = None
) -> JSONResponse:
    """Error body read by the web frontend (``error``) and FastAPI clients (``detail``)."""
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "detail": message},
        headers=headers,
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"error": "Invalid request", "detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(FishAudioError)
async def fish_audio_error_handler(request: Request, exc: FishAudioError) -> JSONResponse:
    logger.error("Fish Audio error on %s: %s", request.url.path, exc)
    return error_response(500, str(exc))


@app.exception_handler(DatabaseError)
async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    logger.error("Database error on %s: %s", request.url.path, exc)
    return error_response(500, str(exc))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return error_response(500, "Internal server error")


# Mount API routes
app.include_router(api_router, prefix="/api")

# Mount WebSocket endpoint (outside /api prefix)
app.websocket("/ws/tts")(websocket_tts)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
