"""Telegram file download client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class TelegramFileClient(Protocol):
    """Interface for downloading Telegram files."""

    async def download_file_bytes(self, file_id: str) -> bytes:
        """Download a Telegram file and return its bytes."""


@dataclass
class HttpxTelegramFileClient(TelegramFileClient):
    """Telegram file client using httpx."""

    bot_token: str
    http_client: httpx.AsyncClient
    timeout: float = 10
    download_timeout: float = 30

    @classmethod
    def create(cls, bot_token: str, timeout: float = 10) -> "HttpxTelegramFileClient":
        """Create a Telegram file client with a managed httpx session."""
        return cls(
            bot_token=bot_token,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
            download_timeout=timeout * 3,
        )

    async def download_file_bytes(self, file_id: str) -> bytes:
        """Resolve a file path via getFile, then fetch the content."""
        response = await self.http_client.get(
            f"https://api.telegram.org/bot{self.bot_token}/getFile",
            params={"file_id": file_id},
            timeout=self.timeout,
        )
        response.raise_for_status()
        payload = response.json()
        if not payload.get("ok"):
            raise RuntimeError(f"Telegram getFile failed for {file_id}")
        file_path = payload["result"]["file_path"]
        file_response = await self.http_client.get(
            f"https://api.telegram.org/file/bot{self.bot_token}/{file_path}",
            timeout=self.download_timeout,
        )
        file_response.raise_for_status()
        return file_response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
