"""Models for image feature meta."""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FeatureMeta(BaseModel):
    """Structured description of an image's content and style.

    Extra fields produced by a restyle are kept as-is. Descriptive fields
    accept whatever the chat collaborator wrote (a list of objects is common);
    only string values ever reach the rendering prompt.
    """

    model_config = ConfigDict(extra="allow")

    object_: Any = Field(default=None, alias="object")
    env: Any = None
    type: Any = None
    style: Any = None
    interior: bool = False
    humans: bool = False
    face: bool = False
    photo: bool = False
    sketch: bool = False

    @field_validator("interior", "humans", "face", "photo", "sketch", mode="before")
    @classmethod
    def _coerce_flag(cls, value: object) -> bool:
        if isinstance(value, str):
            return value.strip().lower() == "true"
        return bool(value)

    def as_json_dict(self) -> dict[str, object]:
        """Return the meta keyed the way the chat collaborator writes it."""
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class StyledMeta:
    """Transformed meta together with the assembled rendering prompt."""

    meta: FeatureMeta
    prompt: str
    style: str
