"""Per-conversation record of the active photo."""

from dataclasses import dataclass, field
from typing import Protocol

from repaint_bot.domain.photos import PhotoMessage


class SessionStore(Protocol):
    """Interface for tracking the last photo seen in each chat."""

    def remember(self, chat_id: int, photo_message: PhotoMessage) -> None:
        """Make a photo message the active photo for a chat."""

    def active_photo(self, chat_id: int) -> PhotoMessage | None:
        """Return the active photo for a chat, if any."""


@dataclass
class InMemorySessionStore(SessionStore):
    """Session store held in process memory."""

    photos: dict[int, PhotoMessage] = field(default_factory=dict)

    def remember(self, chat_id: int, photo_message: PhotoMessage) -> None:
        self.photos[chat_id] = photo_message

    def active_photo(self, chat_id: int) -> PhotoMessage | None:
        return self.photos.get(chat_id)
