"""HTTP clients for the AI collaborator backend."""

from dataclasses import dataclass

import httpx

from repaint_bot.errors import CollaboratorUnavailable, RenderServiceError
from repaint_bot.services.captions import CaptionClient
from repaint_bot.services.meta import ChatClient
from repaint_bot.services.render import RendererClient
from repaint_bot.services.transcription import TranscriptionClient

_BINARY_HEADERS = {"Content-Type": "binary/octet-stream"}


@dataclass
class HttpxCaptionClient(CaptionClient):
    """Captioner exposed at ``/sd/interrogate``."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 60

    async def interrogate(self, image_bytes: bytes) -> str:
        """Post raw image bytes and return the caption text."""
        try:
            response = await self.http_client.post(
                f"{self.base_url}/sd/interrogate",
                content=image_bytes,
                headers=_BINARY_HEADERS,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise CollaboratorUnavailable(f"captioner failed: {exc}") from exc
        return response.text


@dataclass
class HttpxTranscriptionClient(TranscriptionClient):
    """Transcriber exposed at ``/whisper/transcribe``."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 60

    async def transcribe(self, audio_bytes: bytes, language: str) -> str:
        """Post raw audio bytes and return the transcript."""
        try:
            response = await self.http_client.post(
                f"{self.base_url}/whisper/transcribe",
                params={"language": language},
                content=audio_bytes,
                headers=_BINARY_HEADERS,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise CollaboratorUnavailable(f"transcriber failed: {exc}") from exc
        return response.text


@dataclass
class HttpxChatClient(ChatClient):
    """Chat-completion proxy exposed at ``/chatgpt/chat``."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 30

    async def complete(self, prompt: str, max_tokens: int) -> str:
        """Send an instruction and return the answer text, or an empty string."""
        try:
            response = await self.http_client.post(
                f"{self.base_url}/chatgpt/chat",
                json={"prompt": prompt, "options": {"max_tokens": max_tokens}},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise CollaboratorUnavailable(f"chat service failed: {exc}") from exc
        try:
            payload = response.json()
        except ValueError as exc:
            raise CollaboratorUnavailable("chat service returned invalid JSON") from exc
        text = payload.get("text") if isinstance(payload, dict) else None
        return text if isinstance(text, str) else ""


@dataclass
class HttpxControlNetClient(RendererClient):
    """Renderer exposed at ``/sd/controlnet/txt2img``."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 300

    async def txt2img(self, payload: dict[str, object]) -> bytes:
        """Submit a render request and return the image bytes."""
        try:
            response = await self.http_client.post(
                f"{self.base_url}/sd/controlnet/txt2img",
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise RenderServiceError(f"renderer failed: {exc}") from exc
        if response.headers.get("content-type", "").startswith("application/json"):
            raise RenderServiceError(f"renderer returned no image: {response.text}")
        return response.content
