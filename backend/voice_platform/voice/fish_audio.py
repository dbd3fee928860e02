"""Fish Audio text-to-speech and voice cloning via REST API with bearer auth.

Realtime synthesis uses the service's WebSocket endpoint: one JSON request
is sent, audio arrives as binary frames, and a ``{"event": "finish"}`` text
frame ends the stream.
"""

import json
import logging
from typing import Any, AsyncIterator

import httpx
import websockets
from pydantic import ValidationError
from websockets.exceptions import WebSocketException

from voice_platform.config import settings
from voice_platform.models.records import ModelStatus
from voice_platform.models.synthesis import (
    CloneResult,
    CreditResult,
    ModelStatusResult,
    TTSRequest,
    VoiceModelInfo,
)

logger = logging.getLogger(__name__)

# Used when the service cannot list its voices
DEFAULT_VOICE_MODELS: tuple[VoiceModelInfo, ...] = (
    VoiceModelInfo(
        id="default_female_zh",
        name="默认女声（中文）",
        language="zh-CN",
        gender="female",
        description="标准中文女声",
    ),
    VoiceModelInfo(
        id="default_male_zh",
        name="默认男声（中文）",
        language="zh-CN",
        gender="male",
        description="标准中文男声",
    ),
    VoiceModelInfo(
        id="default_female_en",
        name="Default Female (English)",
        language="en-US",
        gender="female",
        description="Standard English female voice",
    ),
    VoiceModelInfo(
        id="default_male_en",
        name="Default Male (English)",
        language="en-US",
        gender="male",
        description="Standard English male voice",
    ),
)


class FishAudioError(Exception):
    """The Fish Audio service rejected a request or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FishAudioClient:
    """Client for the Fish Audio open API."""

    def __init__(
        self,
        api_token: str | None = None,
        base_url: str | None = None,
        ws_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_token = api_token or settings.fish_audio_api_token
        if not self._api_token:
            raise FishAudioError("Fish Audio API token is required")
        self._base_url = (base_url or settings.fish_audio_base_url).rstrip("/")
        self._ws_url = ws_url or settings.fish_audio_ws_url
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def initialize(self) -> None:
        """Create the HTTP client."""
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Authorization": f"Bearer {self._api_token}"},
            timeout=settings.fish_audio_timeout,
            transport=self._transport,
        )
        logger.info("FishAudioClient initialized (base_url=%s)", self._base_url)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
        logger.info("FishAudioClient closed")

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError(
                "FishAudioClient not initialized. Call initialize() first."
            )
        return self._client

    # ------------------------------------------------------------------
    # Synthesis
    # ------------------------------------------------------------------

    async def text_to_speech(self, request: TTSRequest) -> bytes:
        """Synthesize ``request.text`` with the voice ``request.reference_id``.

        Returns:
            Encoded audio (MP3) exactly as returned by the service.

        Raises:
            FishAudioError: on a non-2xx response or transport failure.
        """
        try:
            response = await self.client.post("/tts", json=request.model_dump())
        except httpx.HTTPError as e:
            logger.error("TTS request failed: %s", e)
            raise FishAudioError(f"TTS request failed: {e}") from e

        if not response.is_success:
            logger.error(
                "TTS API error %d: %s", response.status_code, response.text[:200]
            )
            raise FishAudioError(
                f"TTS request failed: {response.status_code} {response.text}",
                status_code=response.status_code,
            )

        logger.info(
            "TTS synthesized %d bytes for text: '%s'",
            len(response.content),
            request.text[:50],
        )
        return response.content

    async def realtime_tts(self, request: TTSRequest) -> AsyncIterator[bytes]:
        """Stream synthesized audio over the realtime WebSocket endpoint.

        Yields:
            Binary audio frames in arrival order.
        """
        message = {
            "reference_id": request.reference_id,
            "text": request.text,
            "speed": request.speed,
            "version": request.version,
        }

        try:
            async with websockets.connect(
                self._ws_url,
                additional_headers={"Authorization": f"Bearer {self._api_token}"},
            ) as ws:
                logger.info("Realtime TTS connection established")
                await ws.send(json.dumps(message))

                async for frame in ws:
                    if isinstance(frame, bytes):
                        yield frame
                        continue

                    event = _parse_event(frame)
                    if event.get("event") == "finish":
                        break
                    if event.get("event") == "error":
                        raise FishAudioError(
                            f"Realtime TTS failed: {event.get('message', 'unknown error')}"
                        )
        except (OSError, WebSocketException) as e:
            logger.error("Realtime TTS connection failed: %s", e)
            raise FishAudioError(f"Realtime TTS failed: {e}") from e

    # ------------------------------------------------------------------
    # Voice models
    # ------------------------------------------------------------------

    async def get_voice_models(self) -> list[VoiceModelInfo]:
        """List voices offered by the service, or the built-in defaults."""
        try:
            response = await self.client.get("/models")
        except httpx.HTTPError as e:
            logger.error("Get models error: %s", e)
            return list(DEFAULT_VOICE_MODELS)

        if not response.is_success:
            logger.error("Get models error: %d", response.status_code)
            return list(DEFAULT_VOICE_MODELS)

        payload = _json_object(response)
        items = (payload or {}).get("data") or []
        if payload is None or not isinstance(items, list):
            logger.error("Get models error: unexpected payload %s", response.text[:200])
            return list(DEFAULT_VOICE_MODELS)

        try:
            return [VoiceModelInfo.model_validate(item) for item in items]
        except ValidationError as e:
            logger.error("Get models error: %s", e)
            return list(DEFAULT_VOICE_MODELS)

    async def clone_voice(
        self,
        audio_file: bytes,
        name: str,
        description: str | None = None,
        filename: str = "voice_sample.wav",
        content_type: str = "audio/wav",
    ) -> CloneResult:
        """Upload a voice sample and start training a new voice model.

        Raises:
            FishAudioError: on a non-2xx response or transport failure.
        """
        data: dict[str, Any] = {"name": name}
        if description:
            data["description"] = description

        try:
            response = await self.client.post(
                "/clone",
                data=data,
                files={"audio_file": (filename, audio_file, content_type)},
            )
        except httpx.HTTPError as e:
            logger.error("Clone request failed: %s", e)
            raise FishAudioError(f"Voice clone request failed: {e}") from e

        if not response.is_success:
            logger.error(
                "Clone API error %d: %s", response.status_code, response.text[:200]
            )
            raise FishAudioError(
                f"Voice clone request failed: {response.status_code} {response.text}",
                status_code=response.status_code,
            )

        result = _json_object(response)
        if result is None or not result.get("model_id"):
            logger.error("Clone API returned no model id: %s", response.text[:200])
            raise FishAudioError(
                f"Voice clone request failed: unexpected response {response.text[:200]}",
                status_code=response.status_code,
            )

        return CloneResult(
            model_id=str(result["model_id"]),
            status=str(result.get("status") or ModelStatus.TRAINING.value),
        )

    async def check_model_status(self, model_id: str) -> ModelStatusResult:
        """Ask the service for a model's training status.

        Never raises: ``unknown`` is reported for a non-2xx response and
        ``error`` when the service cannot be reached.
        """
        try:
            response = await self.client.get(f"/model/{model_id}/status")
        except httpx.HTTPError as e:
            logger.error("Check model status error: %s", e)
            return ModelStatusResult(status="error", ready=False)

        if not response.is_success:
            logger.error("Check model status error: %d", response.status_code)
            return ModelStatusResult(status="unknown", ready=False)

        payload = _json_object(response)
        if payload is None:
            logger.error("Check model status error: invalid body %s", response.text[:200])
            return ModelStatusResult(status="error", ready=False)

        status = str(payload.get("status", "unknown"))
        return ModelStatusResult(status=status, ready=status == ModelStatus.READY.value)

    # ------------------------------------------------------------------
    # Account
    # ------------------------------------------------------------------

    async def get_api_credit(self) -> CreditResult:
        try:
            response = await self.client.get("/wallet/credit")
        except httpx.HTTPError as e:
            return CreditResult(credits=0, error=f"Failed to get credits: {e}")

        if not response.is_success:
            return CreditResult(
                credits=0, error=f"Failed to get credits: {response.status_code}"
            )

        payload = _json_object(response)
        if payload is None:
            return CreditResult(credits=0, error="Failed to get credits: invalid response")

        try:
            return CreditResult(credits=payload.get("credits") or 0)
        except ValidationError:
            return CreditResult(
                credits=0, error=f"Failed to get credits: {payload.get('credits')!r}"
            )


def _json_object(response: httpx.Response) -> dict[str, Any] | None:
    """Decode a JSON object body; ``None`` if it is not one."""
    try:
        payload = response.json()
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


def _parse_event(frame: str) -> dict[str, Any]:
    """Decode a realtime text frame into an event object."""
    try:
        event = json.loads(frame)
    except json.JSONDecodeError as e:
        raise FishAudioError(f"Realtime TTS failed: invalid message {frame[:100]!r}") from e
    if not isinstance(event, dict):
        raise FishAudioError(f"Realtime TTS failed: invalid message {frame[:100]!r}")
    return event
