"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import BackgroundTasks, FastAPI, Request

from repaint_bot.api.telegram_models import (
    TelegramCallbackQuery,
    TelegramMessage,
    TelegramPhotoSize,
    TelegramUpdate,
)
from repaint_bot.app_logging import configure_logging
from repaint_bot.config import parse_allowed_user_ids
from repaint_bot.containers import AppContainer
from repaint_bot.domain.photos import PhotoMessage, PhotoRef
from repaint_bot.services.commands import RANDOM_CALLBACK
from repaint_bot.services.repaint import REPAINT_CALLBACK
from repaint_bot.telegram_commands import (
    CHAT_MENU_BUTTON,
    BotCommand,
    parse_command,
    telegram_commands,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    allowed_user_ids = parse_allowed_user_ids(
        container.settings.telegram_allowed_user_ids
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.telegram_client.set_my_commands(
                telegram_commands()
            )
            await app.state.container.telegram_client.set_chat_menu_button(
                CHAT_MENU_BUTTON
            )
        except Exception:
            logger.exception("Failed to sync Telegram bot commands")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/telegram/webhook")
    async def telegram_webhook(
        update: TelegramUpdate, request: Request, background_tasks: BackgroundTasks
    ) -> dict[str, str]:
        """Handle Telegram webhook updates.

        Repaints and voice notes run as background tasks so Telegram gets its
        answer right away.
        """
        state_container: AppContainer = request.app.state.container
        user_id = _extract_user_id(update)
        if user_id is not None and not _is_user_allowed(user_id, allowed_user_ids):
            try:
                if update.callback_query:
                    await state_container.telegram_client.answer_callback_query(
                        update.callback_query.id,
                        text="Not authorized.",
                    )
                elif update.message:
                    await state_container.telegram_client.send_message(
                        chat_id=update.message.chat.id,
                        text="This bot is private.",
                    )
            except Exception:
                logger.exception(
                    "Failed to reject unauthorized user", extra={"user_id": user_id}
                )
            return {"status": "ok"}

        if update.callback_query:
            try:
                await _handle_callback(
                    state_container, update.callback_query, background_tasks
                )
            except Exception:
                logger.exception(
                    "Failed to handle callback query",
                    extra={"callback_data": update.callback_query.data},
                )
            return {"status": "ok"}

        message = update.message
        if message is None:
            return {"status": "ok"}

        if message.photo:
            try:
                await state_container.photo_upload_handler.handle(
                    _to_photo_message(message)
                )
            except Exception:
                logger.exception(
                    "Failed to prompt for a style",
                    extra={"chat_id": message.chat.id},
                )
            return {"status": "ok"}

        if message.voice:
            background_tasks.add_task(
                state_container.voice_command_handler.handle,
                chat_id=message.chat.id,
                message_id=message.message_id,
                file_id=message.voice.file_id,
                photo_message=_referenced_photo(message),
            )
            return {"status": "ok"}

        if message.text:
            command = parse_command(message.text)
            if command in (BotCommand.START, BotCommand.HELP):
                try:
                    if command is BotCommand.START:
                        await state_container.start_command_handler.handle(
                            message.chat.id
                        )
                    else:
                        await state_container.start_command_handler.handle_help(
                            message.chat.id
                        )
                except Exception:
                    logger.exception(
                        "Failed to answer command",
                        extra={"chat_id": message.chat.id, "command": command.name},
                    )
                return {"status": "ok"}
            background_tasks.add_task(
                state_container.repaint_orchestrator.repaint,
                message.chat.id,
                _referenced_photo(message),
                message.text,
            )
        return {"status": "ok"}

    return app


async def _handle_callback(
    state_container: AppContainer,
    callback: TelegramCallbackQuery,
    background_tasks: BackgroundTasks,
) -> None:
    await state_container.telegram_client.answer_callback_query(callback.id)
    message = callback.message
    if message is None:
        return
    if callback.data == RANDOM_CALLBACK:
        style = state_container.style_picker.random_style()
    elif callback.data == REPAINT_CALLBACK and message.caption:
        style = message.caption
    else:
        return
    background_tasks.add_task(
        state_container.repaint_orchestrator.repaint,
        message.chat.id,
        _referenced_photo(message),
        style,
    )


def _referenced_photo(message: TelegramMessage) -> PhotoMessage | None:
    """Return the photo a message replies to, if it replies to one."""
    reply = message.reply_to_message
    if reply is None or not reply.photo:
        return None
    return _to_photo_message(reply)


def _to_photo_message(message: TelegramMessage) -> PhotoMessage:
    photo = _select_largest_photo(message.photo or [])
    return PhotoMessage(
        chat_id=message.chat.id,
        message_id=message.message_id,
        photo=PhotoRef(file_id=photo.file_id, width=photo.width, height=photo.height),
    )


def _select_largest_photo(photos: list[TelegramPhotoSize]) -> TelegramPhotoSize:
    """Select the largest photo size from the Telegram payload."""
    return max(photos, key=lambda photo: (photo.width * photo.height))


def _extract_user_id(update: TelegramUpdate) -> int | None:
    """Extract Telegram user id from update, if present."""
    if update.callback_query:
        return update.callback_query.from_user.id
    if update.message and update.message.from_user:
        return update.message.from_user.id
    return None


def _is_user_allowed(user_id: int, allowed: set[int] | None) -> bool:
    """Return true when the user is allowed to interact with the bot."""
    return allowed is None or user_id in allowed
