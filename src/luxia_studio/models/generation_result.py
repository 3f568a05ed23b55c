"""
Generation result models.

A result set is the ordered tuple of GenerationResult produced by one
completed generation, in provider return order.
"""

import base64
import time
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from luxia_studio.config import get_config


class MediaKind(str, Enum):
    """Kind of media produced by a capability."""

    IMAGE = "image"
    VIDEO = "video"


_DEFAULT_MIME_TYPES = {
    MediaKind.IMAGE: "image/png",
    MediaKind.VIDEO: "video/mp4",
}


def _extension_for(kind: MediaKind) -> str:
    config = get_config()
    if kind is MediaKind.IMAGE:
        return config.image_extension
    return config.video_extension


def download_name(kind: MediaKind, timestamp_ms: int, prefix: str | None = None) -> str:
    """
    Derive the download filename for a result.

    Deterministic for a given (kind, timestamp_ms): results generated
    in the same millisecond share a name.
    """
    prefix = prefix or get_config().download_prefix
    return f"{prefix}-{timestamp_ms}.{_extension_for(MediaKind(kind))}"


class GenerationResult(BaseModel):
    """One produced media artifact."""

    model_config = ConfigDict(frozen=True)

    kind: MediaKind = Field(..., description="image or video")
    url: str = Field(..., min_length=1, description="Data URL or remote URL of the artifact")

    @classmethod
    def from_bytes(cls, kind: MediaKind, data: bytes, mime_type: str | None = None) -> "GenerationResult":
        """Wrap raw media bytes in a base64 data URL."""
        mime_type = mime_type or _DEFAULT_MIME_TYPES[MediaKind(kind)]
        b64 = base64.b64encode(data).decode("ascii")
        return cls(kind=kind, url=f"data:{mime_type};base64,{b64}")

    @property
    def is_data_url(self) -> bool:
        return self.url.startswith("data:")

    @property
    def mime_type(self) -> str:
        if self.is_data_url:
            header = self.url[len("data:"):].split(",", 1)[0]
            return header.split(";", 1)[0] or _DEFAULT_MIME_TYPES[self.kind]
        return _DEFAULT_MIME_TYPES[self.kind]

    def download_name(self, timestamp_ms: int | None = None) -> str:
        if timestamp_ms is None:
            timestamp_ms = time.time_ns() // 1_000_000
        return download_name(self.kind, timestamp_ms)


ResultSet = tuple[GenerationResult, ...]

EMPTY_RESULTS: ResultSet = ()
