"""Shared test fixtures."""

import json
import random
from dataclasses import dataclass, field

import pytest

from repaint_bot.adapters.telegram_client import TelegramClient
from repaint_bot.config import Settings
from repaint_bot.containers import AppContainer
from repaint_bot.domain.photos import PhotoMessage, PhotoRef
from repaint_bot.services.cache import InMemoryArtifactCache
from repaint_bot.services.captions import CaptionClient, CaptionService
from repaint_bot.services.commands import (
    PhotoUploadHandler,
    StartCommandHandler,
    VoiceCommandHandler,
)
from repaint_bot.services.meta import ChatClient, MetaService
from repaint_bot.services.render import RendererClient, RenderService
from repaint_bot.services.repaint import RepaintOrchestrator
from repaint_bot.services.sessions import InMemorySessionStore
from repaint_bot.services.styles import StylePicker
from repaint_bot.services.transcription import (
    TranscriptionClient,
    TranscriptionService,
)

ORIGINAL_META: dict[str, object] = {
    "object": "cat",
    "env": "sofa in a living room",
    "type": "photo",
    "style": "realistic",
    "interior": False,
    "humans": False,
    "face": False,
    "photo": True,
    "sketch": False,
}

STYLED_META: dict[str, object] = {
    "object": "cat",
    "env": "abstract shapes",
    "type": "painting",
    "style": "abstract",
    "interior": True,
    "humans": False,
    "face": True,
    "photo": False,
    "sketch": True,
}


@dataclass
class FakeTelegramClient(TelegramClient):
    """Fake Telegram client that records outbound calls."""

    messages: list[tuple[int, str]] = field(default_factory=list)
    sent: list[dict[str, object]] = field(default_factory=list)
    photos: list[dict[str, object]] = field(default_factory=list)
    edits: list[tuple[int, int, str]] = field(default_factory=list)
    deleted: list[tuple[int, int]] = field(default_factory=list)
    callbacks: list[tuple[str, str | None]] = field(default_factory=list)
    commands: list[dict[str, str]] | None = None
    menu_button: dict[str, object] | None = None
    next_message_id: int = 1000

    def _new_id(self) -> int:
        self.next_message_id += 1
        return self.next_message_id

    async def send_message(  # noqa: PLR0913
        self,
        chat_id: int,
        text: str,
        reply_markup: dict | None = None,
        reply_to_message_id: int | None = None,
        parse_mode: str | None = None,
    ) -> int:
        message_id = self._new_id()
        self.messages.append((chat_id, text))
        self.sent.append(
            {
                "chat_id": chat_id,
                "message_id": message_id,
                "text": text,
                "reply_markup": reply_markup,
                "reply_to_message_id": reply_to_message_id,
                "parse_mode": parse_mode,
            }
        )
        return message_id

    async def send_photo(  # noqa: PLR0913
        self,
        chat_id: int,
        photo: bytes,
        caption: str | None = None,
        reply_markup: dict | None = None,
        reply_to_message_id: int | None = None,
    ) -> int:
        message_id = self._new_id()
        self.photos.append(
            {
                "chat_id": chat_id,
                "message_id": message_id,
                "photo": photo,
                "caption": caption,
                "reply_markup": reply_markup,
                "reply_to_message_id": reply_to_message_id,
            }
        )
        return message_id

    async def edit_message_text(self, chat_id: int, message_id: int, text: str) -> None:
        self.edits.append((chat_id, message_id, text))

    async def delete_message(self, chat_id: int, message_id: int) -> None:
        self.deleted.append((chat_id, message_id))

    async def answer_callback_query(
        self, callback_query_id: str, text: str | None = None
    ) -> None:
        self.callbacks.append((callback_query_id, text))

    async def set_my_commands(self, commands: list[dict[str, str]]) -> None:
        self.commands = commands

    async def set_chat_menu_button(
        self, menu_button: dict[str, object] | None = None
    ) -> None:
        self.menu_button = menu_button


@dataclass
class FakeTelegramFileClient:
    """Fake Telegram file client that returns static bytes."""

    content: bytes = b"fake-image-bytes"
    downloads: list[str] = field(default_factory=list)

    async def download_file_bytes(self, file_id: str) -> bytes:
        self.downloads.append(file_id)
        return self.content


@dataclass
class FakeCaptionClient(CaptionClient):
    """Fake captioner returning a fixed caption."""

    caption: str = "a cat sleeping on a sofa<error>"
    calls: int = 0

    async def interrogate(self, image_bytes: bytes) -> str:
        self.calls += 1
        return self.caption


@dataclass
class FakeChatClient(ChatClient):
    """Fake chat collaborator answering extraction and restyle prompts."""

    extract_reply: str = field(
        default_factory=lambda: "Here you go:\n" + json.dumps(ORIGINAL_META)
    )
    transform_reply: str = field(default_factory=lambda: json.dumps(STYLED_META))
    prompts: list[str] = field(default_factory=list)

    @property
    def extract_calls(self) -> int:
        return sum(1 for prompt in self.prompts if prompt.startswith("Extract"))

    @property
    def transform_calls(self) -> int:
        return sum(1 for prompt in self.prompts if prompt.startswith("change"))

    async def complete(self, prompt: str, max_tokens: int) -> str:
        self.prompts.append(prompt)
        if prompt.startswith("Extract"):
            return self.extract_reply
        return self.transform_reply


@dataclass
class FakeRendererClient(RendererClient):
    """Fake renderer returning fixed bytes."""

    image: bytes = b"rendered-image"
    payloads: list[dict[str, object]] = field(default_factory=list)

    async def txt2img(self, payload: dict[str, object]) -> bytes:
        self.payloads.append(payload)
        return self.image


@dataclass
class FakeTranscriptionClient(TranscriptionClient):
    """Fake transcriber returning fixed text."""

    text: str = "make it look like a watercolor"
    languages: list[str] = field(default_factory=list)

    async def transcribe(self, audio_bytes: bytes, language: str) -> str:
        self.languages.append(language)
        return self.text


def make_photo_message(
    chat_id: int = 1, message_id: int = 10, file_id: str = "large"
) -> PhotoMessage:
    return PhotoMessage(
        chat_id=chat_id,
        message_id=message_id,
        photo=PhotoRef(file_id=file_id, width=512, height=384),
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        telegram_bot_token="test-token",
        api_url="https://backend.test",
        random_seed=7,
    )


@pytest.fixture
def telegram_client() -> FakeTelegramClient:
    return FakeTelegramClient()


@pytest.fixture
def file_client() -> FakeTelegramFileClient:
    return FakeTelegramFileClient()


@pytest.fixture
def caption_client() -> FakeCaptionClient:
    return FakeCaptionClient()


@pytest.fixture
def chat_client() -> FakeChatClient:
    return FakeChatClient()


@pytest.fixture
def renderer_client() -> FakeRendererClient:
    return FakeRendererClient()


@pytest.fixture
def transcription_client() -> FakeTranscriptionClient:
    return FakeTranscriptionClient()


@pytest.fixture
def orchestrator(  # noqa: PLR0913
    telegram_client: FakeTelegramClient,
    file_client: FakeTelegramFileClient,
    caption_client: FakeCaptionClient,
    chat_client: FakeChatClient,
    renderer_client: FakeRendererClient,
) -> RepaintOrchestrator:
    return RepaintOrchestrator(
        telegram_client=telegram_client,
        file_client=file_client,
        sessions=InMemorySessionStore(),
        cache=InMemoryArtifactCache(),
        caption_service=CaptionService(caption_client),
        meta_service=MetaService(client=chat_client),
        render_service=RenderService(renderer_client),
        style_picker=StylePicker(rng=random.Random(7)),
    )


@pytest.fixture
def container(
    settings: Settings,
    telegram_client: FakeTelegramClient,
    file_client: FakeTelegramFileClient,
    transcription_client: FakeTranscriptionClient,
    orchestrator: RepaintOrchestrator,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        telegram_client=telegram_client,
        telegram_file_client=file_client,
        style_picker=orchestrator.style_picker,
        repaint_orchestrator=orchestrator,
        start_command_handler=StartCommandHandler(telegram_client),
        photo_upload_handler=PhotoUploadHandler(telegram_client, orchestrator),
        voice_command_handler=VoiceCommandHandler(
            telegram_client=telegram_client,
            file_client=file_client,
            transcription_service=TranscriptionService(transcription_client),
            orchestrator=orchestrator,
        ),
        close_resources=close_resources,
    )
