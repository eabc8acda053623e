"""Telegram API client adapter."""

import json
from dataclasses import dataclass
from typing import Protocol

import httpx


class TelegramClient(Protocol):
    """Interface for Telegram API interactions."""

    async def send_message(  # noqa: PLR0913
        self,
        chat_id: int,
        text: str,
        reply_markup: dict | None = None,
        reply_to_message_id: int | None = None,
        parse_mode: str | None = None,
    ) -> int:
        """Send a text message and return its message id."""

    async def send_photo(  # noqa: PLR0913
        self,
        chat_id: int,
        photo: bytes,
        caption: str | None = None,
        reply_markup: dict | None = None,
        reply_to_message_id: int | None = None,
    ) -> int:
        """Upload a photo and return its message id."""

    async def edit_message_text(self, chat_id: int, message_id: int, text: str) -> None:
        """Replace the text of a sent message."""

    async def delete_message(self, chat_id: int, message_id: int) -> None:
        """Delete a sent message."""

    async def answer_callback_query(
        self, callback_query_id: str, text: str | None = None
    ) -> None:
        """Answer a Telegram callback query."""

    async def set_my_commands(self, commands: list[dict[str, str]]) -> None:
        """Set the bot command list."""

    async def set_chat_menu_button(
        self, menu_button: dict[str, object] | None = None
    ) -> None:
        """Set the chat menu button."""


@dataclass
class HttpxTelegramClient:
    """Telegram client implemented with httpx."""

    bot_token: str
    http_client: httpx.AsyncClient
    timeout: float = 10

    @classmethod
    def create(cls, bot_token: str, timeout: float = 10) -> "HttpxTelegramClient":
        """Create a Telegram client with a managed httpx session."""
        return cls(
            bot_token=bot_token, http_client=httpx.AsyncClient(), timeout=timeout
        )

    def _url(self, method: str) -> str:
        return f"https://api.telegram.org/bot{self.bot_token}/{method}"

    async def _call(self, method: str, payload: dict[str, object]) -> dict[str, object]:
        response = await self.http_client.post(
            self._url(method), json=payload, timeout=self.timeout
        )
        response.raise_for_status()
        return response.json()

    async def send_message(  # noqa: PLR0913
        self,
        chat_id: int,
        text: str,
        reply_markup: dict | None = None,
        reply_to_message_id: int | None = None,
        parse_mode: str | None = None,
    ) -> int:
        """Send a message using Telegram's sendMessage API."""
        payload: dict[str, object] = {"chat_id": chat_id, "text": text}
        if reply_markup is not None:
            payload["reply_markup"] = reply_markup
        if reply_to_message_id is not None:
            payload["reply_to_message_id"] = reply_to_message_id
        if parse_mode is not None:
            payload["parse_mode"] = parse_mode
        data = await self._call("sendMessage", payload)
        return _message_id(data)

    async def send_photo(  # noqa: PLR0913
        self,
        chat_id: int,
        photo: bytes,
        caption: str | None = None,
        reply_markup: dict | None = None,
        reply_to_message_id: int | None = None,
    ) -> int:
        """Upload a photo using Telegram's sendPhoto API."""
        form: dict[str, str] = {"chat_id": str(chat_id)}
        if caption is not None:
            form["caption"] = caption
        if reply_markup is not None:
            form["reply_markup"] = json.dumps(reply_markup)
        if reply_to_message_id is not None:
            form["reply_to_message_id"] = str(reply_to_message_id)
        response = await self.http_client.post(
            self._url("sendPhoto"),
            data=form,
            files={"photo": ("repaint.png", photo, "image/png")},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return _message_id(response.json())

    async def edit_message_text(self, chat_id: int, message_id: int, text: str) -> None:
        """Edit a message using Telegram's editMessageText API."""
        await self._call(
            "editMessageText",
            {"chat_id": chat_id, "message_id": message_id, "text": text},
        )

    async def delete_message(self, chat_id: int, message_id: int) -> None:
        """Delete a message using Telegram's deleteMessage API."""
        await self._call(
            "deleteMessage", {"chat_id": chat_id, "message_id": message_id}
        )

    async def answer_callback_query(
        self, callback_query_id: str, text: str | None = None
    ) -> None:
        """Answer a callback query using Telegram's API."""
        payload: dict[str, object] = {"callback_query_id": callback_query_id}
        if text is not None:
            payload["text"] = text
        await self._call("answerCallbackQuery", payload)

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()

    async def set_my_commands(self, commands: list[dict[str, str]]) -> None:
        """Set the bot command list."""
        await self._call("setMyCommands", {"commands": commands})

    async def set_chat_menu_button(
        self, menu_button: dict[str, object] | None = None
    ) -> None:
        """Set the chat menu button."""
        await self._call(
            "setChatMenuButton", {"menu_button": menu_button or {"type": "commands"}}
        )


def _message_id(data: dict[str, object]) -> int:
    """Read the message id from a Telegram API response."""
    if not data.get("ok"):
        raise RuntimeError(f"Telegram API call failed: {data.get('description')}")
    result = data.get("result")
    if not isinstance(result, dict):
        raise RuntimeError("Telegram API returned no message")
    return int(result["message_id"])
