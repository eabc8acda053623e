"""Domain models for uploaded photos."""

from dataclasses import dataclass

MessageKey = tuple[int, int]


@dataclass(frozen=True)
class PhotoRef:
    """Highest-resolution variant of an uploaded image."""

    file_id: str
    width: int
    height: int


@dataclass(frozen=True)
class PhotoMessage:
    """An inbound message that carries a photo."""

    chat_id: int
    message_id: int
    photo: PhotoRef

    @property
    def key(self) -> MessageKey:
        """Return the cache key identifying this message."""
        return (self.chat_id, self.message_id)
