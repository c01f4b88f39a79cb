"""Message types exchanged with the detector: raw images in, boxes out."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum


class PixelFormat(Enum):
    """Pixel layouts an uncompressed image may arrive in."""

    RGB888 = "rgb888"
    RGBA8888 = "rgba8888"
    NV12 = "nv12"
    YUV420 = "yuv420"
    YUV422 = "yuv422"
    YUV444 = "yuv444"


@dataclass(frozen=True)
class RawImage:
    """An uncompressed image: its pixel layout, dimensions and raw bytes.

    A ``format`` of ``None`` stands for a message that carries no image.
    """

    format: PixelFormat | None
    width: int
    height: int
    data: bytes = b""


@dataclass(frozen=True)
class AxisAlignedBox:
    """A box given by its top-left corner and its size."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_corners(cls, x0: float, y0: float, x1: float, y1: float) -> AxisAlignedBox:
        """Build a box from its top-left and bottom-right corners."""
        return cls(x=x0, y=y0, width=x1 - x0, height=y1 - y0)


@dataclass(frozen=True)
class Detection:
    """One detected object: where it is, how sure, and which class."""

    geometry: AxisAlignedBox
    confidence: float
    class_id: int


@dataclass
class Detections:
    """The detections found in one image."""

    boxes: list[Detection] = field(default_factory=list)

    def __iter__(self) -> Iterator[Detection]:
        return iter(self.boxes)

    def __len__(self) -> int:
        return len(self.boxes)