"""Image captioning service."""

from dataclasses import dataclass
from typing import Protocol

from repaint_bot.errors import CollaboratorUnavailable

ERROR_MARKER = "<error>"


class CaptionClient(Protocol):
    """Interface for the image captioning collaborator."""

    async def interrogate(self, image_bytes: bytes) -> str:
        """Return a free-text description of an image."""


@dataclass
class CaptionService:
    """Turns stored images into descriptive captions."""

    client: CaptionClient

    async def describe(self, image_bytes: bytes) -> str:
        """Caption an image, dropping any embedded error marker."""
        caption = await self.client.interrogate(image_bytes)
        if not caption:
            raise CollaboratorUnavailable("cannot generate prompt")
        cleaned = caption.replace(ERROR_MARKER, "").strip()
        if not cleaned:
            raise CollaboratorUnavailable("cannot generate prompt")
        return cleaned
