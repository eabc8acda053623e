"""Models for image-to-image render requests."""

from dataclasses import asdict, dataclass, field


@dataclass(frozen=True)
class ControlUnit:
    """Single control-guidance unit sent along with a render request."""

    input_image: str
    module: str
    model: str
    mask: str = ""
    weight: float = 1
    resize_mode: str = "Just Resize"
    lowvram: bool = False
    processor_res: int = 64
    threshold_a: int = 64
    threshold_b: int = 64
    guidance: float = 1
    guidance_start: float = 0
    guidance_end: float = 1
    guessmode: bool = False


@dataclass(frozen=True)
class RenderRequest:
    """Structured request for the image-to-image renderer."""

    prompt: str
    negative_prompt: str
    width: int
    height: int
    restore_faces: bool
    controlnet_units: list[ControlUnit] = field(default_factory=list)
    sampler_name: str = "DPM++ 2S a Karras"
    sampler_index: str = "DPM++ 2S a Karras"
    batch_size: int = 1
    n_iter: int = 1
    steps: int = 50
    cfg_scale: float = 8
    tiling: bool = False

    def to_payload(self) -> dict[str, object]:
        """Return the JSON payload for the renderer."""
        return asdict(self)
