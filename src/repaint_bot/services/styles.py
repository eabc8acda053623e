"""Style and acknowledgment selection."""

import random
from dataclasses import dataclass, field

STYLES: tuple[str, ...] = (
    "Abstract",
    "Documentary",
    "Still-life",
    "Conceptual",
    "Fashion",
    "Black-and-white",
)

AWAITING_MESSAGES: tuple[str, ...] = (
    "Repainting your image...",
    "Processing your image...",
    "Creating a new masterpiece...",
)


@dataclass
class StylePicker:
    """Random choices used by the bot, seedable for tests."""

    rng: random.Random = field(default_factory=random.Random)
    styles: tuple[str, ...] = STYLES
    awaiting_messages: tuple[str, ...] = AWAITING_MESSAGES

    @classmethod
    def create(cls, seed: int | None = None) -> "StylePicker":
        """Create a picker, optionally with a fixed seed."""
        return cls(rng=random.Random(seed))

    def random_style(self) -> str:
        return self.rng.choice(self.styles)

    def awaiting_message(self) -> str:
        return self.rng.choice(self.awaiting_messages)
