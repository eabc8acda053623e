"""In-memory artifact cache keyed by photo message."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Protocol, TypeVar

from repaint_bot.domain.meta import FeatureMeta
from repaint_bot.domain.photos import MessageKey, PhotoRef

T = TypeVar("T")


class ArtifactCache(Protocol):
    """Cache interface for values derived from a photo message."""

    def remember_photo(self, key: MessageKey, photo: PhotoRef) -> PhotoRef:
        """Store the photo reference for a message and return the stored one."""

    async def caption(
        self, key: MessageKey, compute: Callable[[], Awaitable[str]]
    ) -> str:
        """Return the cached caption or compute and store it."""

    async def meta(
        self, key: MessageKey, compute: Callable[[], Awaitable[FeatureMeta]]
    ) -> FeatureMeta:
        """Return the cached original meta or compute and store it."""


@dataclass
class InMemoryArtifactCache(ArtifactCache):
    """Process-lifetime cache without eviction.

    Population is single-flight per key: concurrent callers for the same
    message wait for the first computation instead of repeating it.
    """

    photos: dict[MessageKey, PhotoRef] = field(default_factory=dict)
    captions: dict[MessageKey, str] = field(default_factory=dict)
    metas: dict[MessageKey, FeatureMeta] = field(default_factory=dict)
    _locks: dict[tuple[str, MessageKey], asyncio.Lock] = field(
        default_factory=dict, repr=False
    )

    def remember_photo(self, key: MessageKey, photo: PhotoRef) -> PhotoRef:
        """Store the photo reference unless one is already cached.

        The first reference wins so cached captions and meta always describe
        the file that gets rendered.
        """
        return self.photos.setdefault(key, photo)

    async def caption(
        self, key: MessageKey, compute: Callable[[], Awaitable[str]]
    ) -> str:
        """Return the cached caption or compute and store it."""
        return await self._get_or_compute("caption", self.captions, key, compute)

    async def meta(
        self, key: MessageKey, compute: Callable[[], Awaitable[FeatureMeta]]
    ) -> FeatureMeta:
        """Return the cached original meta or compute and store it."""
        return await self._get_or_compute("meta", self.metas, key, compute)

    async def _get_or_compute(
        self,
        kind: str,
        entries: dict[MessageKey, T],
        key: MessageKey,
        compute: Callable[[], Awaitable[T]],
    ) -> T:
        if key in entries:
            return entries[key]
        lock = self._locks.setdefault((kind, key), asyncio.Lock())
        async with lock:
            if key in entries:
                return entries[key]
            value = await compute()
            entries[key] = value
            return value
