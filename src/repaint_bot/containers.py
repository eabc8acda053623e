"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx

from repaint_bot.adapters.backend_clients import (
    HttpxCaptionClient,
    HttpxChatClient,
    HttpxControlNetClient,
    HttpxTranscriptionClient,
)
from repaint_bot.adapters.openai_chat_client import OpenAIChatClient
from repaint_bot.adapters.telegram_client import (
    HttpxTelegramClient,
    TelegramClient,
)
from repaint_bot.adapters.telegram_file_client import (
    HttpxTelegramFileClient,
    TelegramFileClient,
)
from repaint_bot.config import Settings
from repaint_bot.services.cache import InMemoryArtifactCache
from repaint_bot.services.captions import CaptionService
from repaint_bot.services.commands import (
    PhotoUploadHandler,
    StartCommandHandler,
    VoiceCommandHandler,
)
from repaint_bot.services.meta import ChatClient, MetaService
from repaint_bot.services.render import RenderService
from repaint_bot.services.repaint import RepaintOrchestrator
from repaint_bot.services.sessions import InMemorySessionStore
from repaint_bot.services.styles import StylePicker
from repaint_bot.services.transcription import TranscriptionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    telegram_client: TelegramClient
    telegram_file_client: TelegramFileClient
    style_picker: StylePicker
    repaint_orchestrator: RepaintOrchestrator
    start_command_handler: StartCommandHandler
    photo_upload_handler: PhotoUploadHandler
    voice_command_handler: VoiceCommandHandler
    close_resources: Callable[[], Awaitable[None]]


def build_chat_client(
    settings: Settings, http_client: httpx.AsyncClient
) -> ChatClient:
    """Pick the chat-completion collaborator named in settings."""
    if settings.chat_provider == "openai":
        if not settings.openai_api_key:
            raise ValueError("chat_provider=openai requires OPENAI_API_KEY")
        return OpenAIChatClient.create(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            timeout=settings.chat_timeout,
        )
    if settings.chat_provider != "backend":
        raise ValueError(f"Unknown chat provider: {settings.chat_provider}")
    return HttpxChatClient(
        base_url=settings.api_url.rstrip("/"),
        http_client=http_client,
        timeout=settings.chat_timeout,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    base_url = resolved_settings.api_url.rstrip("/")
    backend_http = httpx.AsyncClient()
    chat_client = build_chat_client(resolved_settings, backend_http)
    telegram_client = HttpxTelegramClient.create(
        resolved_settings.telegram_bot_token, timeout=resolved_settings.telegram_timeout
    )
    telegram_file_client = HttpxTelegramFileClient.create(
        resolved_settings.telegram_bot_token, timeout=resolved_settings.telegram_timeout
    )
    caption_service = CaptionService(
        HttpxCaptionClient(
            base_url=base_url,
            http_client=backend_http,
            timeout=resolved_settings.caption_timeout,
        )
    )
    meta_service = MetaService(
        client=chat_client,
        max_tokens=resolved_settings.chat_max_tokens,
    )
    render_service = RenderService(
        HttpxControlNetClient(
            base_url=base_url,
            http_client=backend_http,
            timeout=resolved_settings.render_timeout,
        )
    )
    transcription_service = TranscriptionService(
        client=HttpxTranscriptionClient(
            base_url=base_url,
            http_client=backend_http,
            timeout=resolved_settings.transcribe_timeout,
        ),
        language=resolved_settings.transcribe_language,
    )
    style_picker = StylePicker.create(resolved_settings.random_seed)
    orchestrator = RepaintOrchestrator(
        telegram_client=telegram_client,
        file_client=telegram_file_client,
        sessions=InMemorySessionStore(),
        cache=InMemoryArtifactCache(),
        caption_service=caption_service,
        meta_service=meta_service,
        render_service=render_service,
        style_picker=style_picker,
    )

    async def close_resources() -> None:
        await telegram_client.close()
        await telegram_file_client.close()
        await backend_http.aclose()
        if isinstance(chat_client, OpenAIChatClient):
            await chat_client.close()

    return AppContainer(
        settings=resolved_settings,
        telegram_client=telegram_client,
        telegram_file_client=telegram_file_client,
        style_picker=style_picker,
        repaint_orchestrator=orchestrator,
        start_command_handler=StartCommandHandler(telegram_client),
        photo_upload_handler=PhotoUploadHandler(telegram_client, orchestrator),
        voice_command_handler=VoiceCommandHandler(
            telegram_client=telegram_client,
            file_client=telegram_file_client,
            transcription_service=transcription_service,
            orchestrator=orchestrator,
        ),
        close_resources=close_resources,
    )
