"""Repaint pipeline for a single style request."""

import logging
from dataclasses import dataclass

from repaint_bot.adapters.telegram_client import TelegramClient
from repaint_bot.adapters.telegram_file_client import TelegramFileClient
from repaint_bot.domain.photos import PhotoMessage, PhotoRef
from repaint_bot.domain.repaint import RepaintOutcome, RepaintState
from repaint_bot.services.cache import ArtifactCache
from repaint_bot.services.captions import CaptionService
from repaint_bot.services.meta import MetaService
from repaint_bot.services.render import RenderService
from repaint_bot.services.sessions import SessionStore
from repaint_bot.services.styles import StylePicker

logger = logging.getLogger(__name__)

NO_PHOTO_TEXT = "Send me an image and I will repaint it! 🎨"
RENDERING_TEXT = "Repainting... Please wait a bit..."
FAILURE_TEXT = "Sorry, I cannot repaint this photo."
REPAINT_CALLBACK = "repaint"


def repaint_keyboard() -> dict:
    """Inline keyboard offering to repeat the same style."""
    return {
        "inline_keyboard": [[{"text": "Try again", "callback_data": REPAINT_CALLBACK}]]
    }


@dataclass
class RepaintOrchestrator:
    """Resolves the target photo, drives the collaborators and reports back."""

    telegram_client: TelegramClient
    file_client: TelegramFileClient
    sessions: SessionStore
    cache: ArtifactCache
    caption_service: CaptionService
    meta_service: MetaService
    render_service: RenderService
    style_picker: StylePicker

    async def repaint(
        self, chat_id: int, photo_message: PhotoMessage | None, style: str
    ) -> RepaintOutcome:
        """Repaint the explicit or active photo of a chat in the given style."""
        target = photo_message or self.sessions.active_photo(chat_id)
        if target is None:
            await self.telegram_client.send_message(chat_id=chat_id, text=NO_PHOTO_TEXT)
            return RepaintOutcome(state=RepaintState.NO_PHOTO, style=style)
        self.sessions.remember(chat_id, target)
        photo = self.cache.remember_photo(target.key, target.photo)
        state = RepaintState.PHOTO_RESOLVED

        ack_id: int | None = None
        try:
            ack_id = await self.telegram_client.send_message(
                chat_id=chat_id, text=self.style_picker.awaiting_message()
            )
            caption = await self.cache.caption(
                target.key, lambda: self._describe(photo)
            )
            state = RepaintState.CAPTION_READY
            meta = await self.cache.meta(
                target.key, lambda: self.meta_service.extract(caption)
            )
            state = RepaintState.META_READY
            logger.info("Meta for [%s]: %s", caption, meta.as_json_dict())
            styled = await self.meta_service.transform(meta, style)
            state = RepaintState.STYLE_APPLIED
            logger.info(
                "Modified meta for [%s]: %s", caption, styled.meta.as_json_dict()
            )
            await self.telegram_client.edit_message_text(
                chat_id=chat_id, message_id=ack_id, text=RENDERING_TEXT
            )
            state = RepaintState.RENDERING
            image_bytes = await self.file_client.download_file_bytes(photo.file_id)
            image = await self.render_service.render(
                image_bytes, styled, photo.width, photo.height
            )
            await self.telegram_client.send_photo(
                chat_id=chat_id,
                photo=image,
                caption=style,
                reply_markup=repaint_keyboard(),
                reply_to_message_id=target.message_id,
            )
        except Exception as exc:
            logger.exception(
                "Repaint failed",
                extra={"chat_id": chat_id, "stage": state.value, "style": style},
            )
            await self._report_failure(chat_id, exc)
            return RepaintOutcome(
                state=RepaintState.FAILED,
                style=style,
                error=str(exc),
                error_kind=type(exc).__name__,
                failed_at=state,
            )
        finally:
            if ack_id is not None:
                await self._delete_ack(chat_id, ack_id)
        return RepaintOutcome(state=RepaintState.DELIVERED, style=style)

    async def _describe(self, photo: PhotoRef) -> str:
        image_bytes = await self.file_client.download_file_bytes(photo.file_id)
        return await self.caption_service.describe(image_bytes)

    async def _report_failure(self, chat_id: int, exc: Exception) -> None:
        try:
            await self.telegram_client.send_message(
                chat_id=chat_id, text=f"{FAILURE_TEXT}\n{exc}"
            )
        except Exception:
            logger.exception("Failed to send repaint failure message")

    async def _delete_ack(self, chat_id: int, message_id: int) -> None:
        try:
            await self.telegram_client.delete_message(
                chat_id=chat_id, message_id=message_id
            )
        except Exception:
            logger.exception("Failed to delete acknowledgment message")
