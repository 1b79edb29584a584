"""Decoding of photographed documents into pixel arrays."""

from __future__ import annotations

import io
import os
from typing import Union

import cv2
import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from ..logging import get_logger
from ..paths import resolve_input_path
from .errors import ImageDecodeError

LOG = get_logger("ocr-image")

ImageInput = Union[np.ndarray, Image.Image, bytes, bytearray, str, "os.PathLike[str]"]


def _pil_to_bgr(im: Image.Image) -> np.ndarray:
    im = ImageOps.exif_transpose(im)
    return cv2.cvtColor(np.array(im.convert("RGB")), cv2.COLOR_RGB2BGR)


def decode_image_bytes(data: bytes) -> np.ndarray:
    """Decode encoded image bytes, honoring EXIF orientation when Pillow can read them."""
    if not data:
        raise ImageDecodeError("Image data is empty")
    try:
        with Image.open(io.BytesIO(data)) as im:
            return _pil_to_bgr(im)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        LOG.debug(f"Pillow could not decode image ({exc}); trying OpenCV")
    buf = np.frombuffer(data, dtype=np.uint8)
    img = cv2.imdecode(buf, cv2.IMREAD_COLOR)
    if img is None:
        raise ImageDecodeError("Image data is not a decodable bitmap")
    return img


def read_image(path: Union[str, "os.PathLike[str]"]) -> np.ndarray:
    p = resolve_input_path(os.fspath(path))
    try:
        with open(p, "rb") as f:
            data = f.read()
    except OSError as exc:
        raise ImageDecodeError(f"Could not read image: {p} ({exc})") from exc
    LOG.debug(f"Read {len(data)} bytes from {p}")
    return decode_image_bytes(data)


def to_pixels(image: ImageInput) -> np.ndarray:
    """Return a (height, width[, channels]) array for any supported image input."""
    if isinstance(image, np.ndarray):
        pixels = image
    elif isinstance(image, Image.Image):
        try:
            pixels = _pil_to_bgr(image)
        except (OSError, ValueError) as exc:
            raise ImageDecodeError(f"Could not convert PIL image: {exc}") from exc
    elif isinstance(image, (bytes, bytearray, memoryview)):
        pixels = decode_image_bytes(bytes(image))
    elif isinstance(image, (str, os.PathLike)):
        pixels = read_image(image)
    else:
        raise ImageDecodeError(f"Unsupported image input type: {type(image).__name__}")

    if pixels.ndim not in (2, 3) or pixels.shape[0] == 0 or pixels.shape[1] == 0:
        raise ImageDecodeError(f"Image has no usable pixel data (shape={pixels.shape})")
    return pixels
