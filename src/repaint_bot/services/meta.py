"""Feature meta extraction and restyling via a chat-completion collaborator."""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from repaint_bot.domain.meta import FeatureMeta, StyledMeta
from repaint_bot.errors import MetaExtractError, MetaTransformError

logger = logging.getLogger(__name__)

PRESERVED_FIELDS: tuple[str, ...] = ("sketch", "interior", "face")

EXTRACT_PROMPT = (
    "Extract features of image from description. Write a json with fields:\n"
    "object - main objects of image (string)\n"
    "env - image environment description (string)\n"
    'type - a type of image (string "photo", "painting", "art", etc)\n'
    "style - a style of image\n"
    "interior - true if the main object is an interior without people (boolean)\n"
    "humans - true if image contains humans (boolean)\n"
    "face - true if the main object is a human and face is in focus (boolean)\n"
    "photo - true if the image is a photo (boolean)\n"
    "sketch - true if the image is a scribble, sketch or ink painting (boolean)\n\n"
    "Return only a JSON without any explanations.\n\n"
    "Description: {caption}"
)

TRANSFORM_PROMPT = (
    'change image JSON meta to remake it to "{style}". '
    "Change type of image accordingly to new meta if needed. "
    "Add additional string fields to JSON if needed. "
    "Return only a JSON without any explanations.\n{meta}"
)


class ChatClient(Protocol):
    """Interface for the chat-completion collaborator."""

    async def complete(self, prompt: str, max_tokens: int) -> str:
        """Return the free-text answer to an instruction."""


@dataclass
class MetaService:
    """Extracts feature meta from captions and restyles it."""

    client: ChatClient
    max_tokens: int = 150

    async def extract(self, caption: str) -> FeatureMeta:
        """Extract the original feature meta from an image caption."""
        text = await self.client.complete(
            EXTRACT_PROMPT.format(caption=caption), self.max_tokens
        )
        if not text:
            raise MetaExtractError("cannot receive response from chat service")
        fields = extract_json_object(text)
        if fields is None:
            logger.warning("Cannot parse meta JSON: %s", text)
            raise MetaExtractError("try a bit later")
        return FeatureMeta.model_validate(fields)

    async def transform(self, meta: FeatureMeta, style: str) -> StyledMeta:
        """Restyle meta and assemble the rendering prompt."""
        prompt = TRANSFORM_PROMPT.format(
            style=style, meta=json.dumps(meta.as_json_dict(), indent=2)
        )
        text = await self.client.complete(prompt, self.max_tokens)
        if not text:
            raise MetaTransformError("cannot receive response from chat service")
        fields = extract_json_object(text)
        if fields is None:
            logger.warning("Cannot parse restyled meta JSON: %s", text)
            raise MetaTransformError("try a bit later")
        fields = apply_preserved_fields(fields, meta)
        styled = FeatureMeta.model_validate(fields)
        return StyledMeta(meta=styled, prompt=build_prompt(fields, style), style=style)


def apply_preserved_fields(
    fields: Mapping[str, object], original: FeatureMeta
) -> dict[str, object]:
    """Post-process restyled fields against the original meta.

    Keys keep the order the collaborator produced them in; keys that were
    missing are appended.
    """
    result = dict(fields)
    result["type"] = "photography" if _is_true(result.get("photo")) else result.get(
        "type"
    )
    for name in PRESERVED_FIELDS:
        result[name] = getattr(original, name)
    return result


def build_prompt(fields: Mapping[str, object], style: str) -> str:
    """Join string-valued fields in order and append the style weighting."""
    parts = [value for value in fields.values() if isinstance(value, str)]
    return ", ".join([*parts, f"({style}):1.2"])


def extract_json_object(text: str) -> dict[str, object] | None:
    """Return the first complete JSON object embedded in text."""
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            parsed, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
            continue
        if isinstance(parsed, dict):
            return parsed
        start = text.find("{", start + 1)
    return None


def _is_true(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)
