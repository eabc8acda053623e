"""Telegram bot command configuration."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class TelegramCommand:
    """Declarative bot command definition."""

    command: str
    description: str


class BotCommand(Enum):
    """Enum of bot commands (single source of truth)."""

    START = TelegramCommand("start", "Send a photo to repaint it")
    HELP = TelegramCommand("help", "How to pick a style")


def telegram_commands() -> list[dict[str, str]]:
    """Return commands formatted for Telegram API."""
    return [
        {"command": entry.value.command, "description": entry.value.description}
        for entry in BotCommand
    ]


def parse_command(text: str) -> BotCommand | None:
    """Return the bot command a message invokes, if any."""
    if not text.startswith("/"):
        return None
    parts = text[1:].split(maxsplit=1)
    if not parts:
        return None
    name = parts[0].split("@", maxsplit=1)[0]
    for entry in BotCommand:
        if entry.value.command == name:
            return entry
    return None


CHAT_MENU_BUTTON: dict[str, object] = {"type": "commands"}
