"""Command handlers for Telegram updates."""

import logging
from dataclasses import dataclass

from repaint_bot.adapters.telegram_client import TelegramClient
from repaint_bot.adapters.telegram_file_client import TelegramFileClient
from repaint_bot.domain.photos import PhotoMessage
from repaint_bot.domain.repaint import RepaintOutcome
from repaint_bot.services.repaint import RepaintOrchestrator
from repaint_bot.services.styles import STYLES
from repaint_bot.services.transcription import TranscriptionService

logger = logging.getLogger(__name__)

PHOTO_PROMPT_TEXT = (
    "How do you want to repaint this image?\n\n"
    "_Note that you can type or send a voice on any language._"
)
RANDOM_CALLBACK = "random"
VOICE_FAILURE_TEXT = "Sorry, I cannot recognize this voice message."


def random_style_keyboard() -> dict:
    """Inline keyboard letting the user pick a random style."""
    return {
        "inline_keyboard": [[{"text": "Randomly", "callback_data": RANDOM_CALLBACK}]]
    }


@dataclass
class StartCommandHandler:
    """Handle the /start and /help Telegram commands."""

    telegram_client: TelegramClient

    async def handle(self, chat_id: int) -> None:
        """Send the welcome message."""
        await self.telegram_client.send_message(
            chat_id=chat_id,
            text=(
                "Send me an image and I will repaint it! 🎨\n"
                "Then reply with a style, a voice note, or tap Randomly."
            ),
        )

    async def handle_help(self, chat_id: int) -> None:
        """Send a short usage guide."""
        await self.telegram_client.send_message(
            chat_id=chat_id,
            text=(
                "1. Send a photo.\n"
                "2. Describe the style you want, by text or voice.\n"
                "3. Tap Try again under the result to repaint in the same style.\n\n"
                f"Random styles: {', '.join(STYLES)}."
            ),
        )


@dataclass
class PhotoUploadHandler:
    """Make an uploaded photo the chat's active photo and ask for a style."""

    telegram_client: TelegramClient
    orchestrator: RepaintOrchestrator

    async def handle(self, photo_message: PhotoMessage) -> None:
        self.orchestrator.sessions.remember(photo_message.chat_id, photo_message)
        await self.telegram_client.send_message(
            chat_id=photo_message.chat_id,
            text=PHOTO_PROMPT_TEXT,
            reply_markup=random_style_keyboard(),
            reply_to_message_id=photo_message.message_id,
            parse_mode="Markdown",
        )


@dataclass
class VoiceCommandHandler:
    """Transcribe a voice note and use it as a style instruction."""

    telegram_client: TelegramClient
    file_client: TelegramFileClient
    transcription_service: TranscriptionService
    orchestrator: RepaintOrchestrator

    async def handle(
        self,
        chat_id: int,
        message_id: int,
        file_id: str,
        photo_message: PhotoMessage | None,
    ) -> RepaintOutcome | None:
        """Echo the transcript, then repaint with it."""
        try:
            audio = await self.file_client.download_file_bytes(file_id)
            text = await self.transcription_service.transcribe(audio)
        except Exception:
            logger.exception("Voice transcription failed", extra={"file_id": file_id})
            await self.telegram_client.send_message(
                chat_id=chat_id,
                text=VOICE_FAILURE_TEXT,
                reply_to_message_id=message_id,
            )
            return None
        await self.telegram_client.send_message(
            chat_id=chat_id, text=text, reply_to_message_id=message_id
        )
        return await self.orchestrator.repaint(chat_id, photo_message, text)
