"""Models describing the outcome of a repaint."""

from dataclasses import dataclass
from enum import Enum


class RepaintState(Enum):
    """Stages a single repaint passes through."""

    IDLE = "idle"
    NO_PHOTO = "no_photo"
    PHOTO_RESOLVED = "photo_resolved"
    CAPTION_READY = "caption_ready"
    META_READY = "meta_ready"
    STYLE_APPLIED = "style_applied"
    RENDERING = "rendering"
    DELIVERED = "delivered"
    FAILED = "failed"


@dataclass(frozen=True)
class RepaintOutcome:
    """Tagged result of a repaint invocation."""

    state: RepaintState
    style: str
    error: str | None = None
    error_kind: str | None = None
    failed_at: RepaintState | None = None

    @property
    def delivered(self) -> bool:
        return self.state is RepaintState.DELIVERED
