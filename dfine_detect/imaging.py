"""Conversion of raw images into the padded, normalised input the model takes."""

from __future__ import annotations

import math

import numpy as np
from PIL import Image

from .messages import PixelFormat, RawImage


class ImageConversionError(ValueError):
    """Raised when a raw image cannot be turned into an RGB image."""


def _gray_to_rgb(plane: np.ndarray) -> Image.Image:
    return Image.fromarray(np.ascontiguousarray(np.stack([plane] * 3, axis=-1)))


def _luma_plane(data: bytes, width: int, height: int, what: str) -> Image.Image:
    size = width * height
    if len(data) < size:
        raise ImageConversionError(f"{what} size mismatch")
    plane = np.frombuffer(data, dtype=np.uint8, count=size).reshape(height, width)
    return _gray_to_rgb(plane)


def raw_to_rgb(image: RawImage) -> Image.Image:
    """Convert a raw image to an RGB image.

    RGBA drops its alpha channel; NV12 and the YUV formats keep only their
    luma plane, shown as gray.
    """
    w, h = image.width, image.height
    data = bytes(image.data)
    fmt = image.format
    if fmt is PixelFormat.RGB888:
        if len(data) != w * h * 3:
            raise ImageConversionError("RGB888 size mismatch")
        return Image.frombytes("RGB", (w, h), data)
    if fmt is PixelFormat.RGBA8888:
        if len(data) != w * h * 4:
            raise ImageConversionError("RGBA8888 size mismatch")
        pixels = np.frombuffer(data, dtype=np.uint8).reshape(h, w, 4)[:, :, :3]
        return Image.fromarray(np.ascontiguousarray(pixels))
    if fmt is PixelFormat.NV12:
        return _luma_plane(data, w, h, "NV12")
    if fmt in (PixelFormat.YUV420, PixelFormat.YUV422, PixelFormat.YUV444):
        return _luma_plane(data, w, h, "Y plane")
    raise ImageConversionError("Unsupported format")


def _round_half_away(value: float) -> int:
    floor = math.floor(value)
    return floor + 1 if value - floor >= 0.5 else floor


def resize_with_aspect_ratio(
    image: Image.Image, target_size: int = 640
) -> tuple[Image.Image, float, int, int]:
    """Scale an image to fit a square, centred on black padding.

    Returns the padded image, the scale factor, and the left and top padding.
    """
    orig_w, orig_h = image.size
    target = np.float32(target_size)
    scale = min(target / np.float32(orig_w), target / np.float32(orig_h))
    new_w = _round_half_away(float(np.float32(orig_w) * scale))
    new_h = _round_half_away(float(np.float32(orig_h) * scale))

    resized = image.convert("RGB").resize((new_w, new_h), Image.Resampling.BILINEAR)
    padded = Image.new("RGB", (target_size, target_size))
    pad_w = (target_size - new_w) // 2
    pad_h = (target_size - new_h) // 2
    padded.paste(resized, (pad_w, pad_h))
    return padded, float(scale), pad_w, pad_h


def image_to_tensor(image: Image.Image) -> np.ndarray:
    """Return the image as a float32 array of shape (1, 3, H, W) in [0, 1]."""
    pixels = np.asarray(image.convert("RGB"), dtype=np.float32) / np.float32(255.0)
    return np.ascontiguousarray(pixels.transpose(2, 0, 1)[np.newaxis, ...])