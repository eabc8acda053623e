"""Voice transcription service."""

from dataclasses import dataclass
from typing import Protocol

from repaint_bot.errors import CollaboratorUnavailable


class TranscriptionClient(Protocol):
    """Interface for the speech-to-text collaborator."""

    async def transcribe(self, audio_bytes: bytes, language: str) -> str:
        """Return the plain-text transcript of an audio clip."""


@dataclass
class TranscriptionService:
    """Turns voice notes into style instructions."""

    client: TranscriptionClient
    language: str = "en"

    async def transcribe(self, audio_bytes: bytes) -> str:
        text = (await self.client.transcribe(audio_bytes, self.language)).strip()
        if not text:
            raise CollaboratorUnavailable("cannot recognize the voice message")
        return text
