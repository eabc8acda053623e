"""Image-to-image rendering with control-guidance module selection."""

import base64
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

from repaint_bot.domain.meta import FeatureMeta, StyledMeta
from repaint_bot.domain.render import ControlUnit, RenderRequest
from repaint_bot.errors import RenderServiceError

logger = logging.getLogger(__name__)

CONTROL_MODELS: dict[str, str] = {
    "mlsd": "control_sd15_mlsd [fef5e48e]",
    "hed": "control_sd15_hed [fef5e48e]",
    "scribble": "control_sd15_scribble [fef5e48e]",
    "none": "control_sd15_scribble [fef5e48e]",
}

NEGATIVE_PROMPT = (
    "blurry, deformed face, part of face, extra faces, deformed hands, "
    "deformed fingers, ugly, bad anatomy, extra fingers, bad anatomy, extra legs"
)


class RendererClient(Protocol):
    """Interface for the image-to-image rendering collaborator."""

    async def txt2img(self, payload: dict[str, object]) -> bytes:
        """Render an image and return its bytes."""


def select_control_module(meta: FeatureMeta) -> str:
    """Pick the control module for a transformed meta.

    Sketches pass through with minimal guidance, empty interiors keep their
    straight lines, everything else gets soft-edge guidance.
    """
    if meta.sketch:
        return "none"
    if meta.interior and not meta.humans and not meta.face:
        return "mlsd"
    return "hed"


def build_render_request(
    image_bytes: bytes,
    styled: StyledMeta,
    width: int,
    height: int,
    models: Mapping[str, str] = CONTROL_MODELS,
) -> RenderRequest:
    """Assemble the renderer request for a styled meta."""
    module = select_control_module(styled.meta)
    model = models[module]
    unit = ControlUnit(
        input_image=base64.b64encode(image_bytes).decode("utf-8"),
        module=module,
        model=model,
    )
    return RenderRequest(
        prompt=styled.prompt,
        negative_prompt=NEGATIVE_PROMPT,
        width=width,
        height=height,
        restore_faces=styled.meta.face or styled.meta.humans,
        controlnet_units=[unit],
    )


@dataclass
class RenderService:
    """Dispatches render requests to the configured renderer."""

    client: RendererClient
    models: dict[str, str] = field(default_factory=lambda: dict(CONTROL_MODELS))

    async def render(
        self, image_bytes: bytes, styled: StyledMeta, width: int, height: int
    ) -> bytes:
        """Render a styled version of an image."""
        request = build_render_request(image_bytes, styled, width, height, self.models)
        unit = request.controlnet_units[0]
        logger.info(
            "Rendering [%s] with [%s] and [%s]", request.prompt, unit.module, unit.model
        )
        image = await self.client.txt2img(request.to_payload())
        if not image:
            raise RenderServiceError("renderer returned an empty image")
        return image
