"""Recognition engines that turn one image (or segment) into text lines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Tuple

import cv2
import numpy as np
import pytesseract
from pytesseract import Output

from ..config import OcrSettings
from ..logging import get_logger
from .errors import NoTextFoundError, RecognizerError

LOG = get_logger("ocr-recognizer")


@dataclass(frozen=True)
class RecognitionOptions:
    accurate: bool = True
    language_correction: bool = True


class Recognizer(Protocol):
    def recognize(self, image: np.ndarray, options: RecognitionOptions) -> List[str]:
        """Return text lines in top-to-bottom reading order.

        Raises NoTextFoundError when nothing was detected and RecognizerError
        on engine failure.
        """
        ...


def _to_gray(img: np.ndarray) -> np.ndarray:
    if img.ndim == 2:
        return img
    if img.shape[2] == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2GRAY)
    return cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)


def preprocess_for_ocr(img: np.ndarray) -> np.ndarray:
    """Enhance a receipt photo for Tesseract: denoise, contrast, sharpen, upscale."""
    gray = _to_gray(img)
    if gray.dtype != np.uint8:
        gray = cv2.normalize(gray, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)

    # Gentle denoise preserving edges
    gray = cv2.bilateralFilter(gray, 7, 60, 60)

    # Adaptive contrast using CLAHE (great for receipts)
    clahe = cv2.createCLAHE(clipLimit=2.0, tileGridSize=(8, 8))
    gray = clahe.apply(gray)

    # Slight unsharp mask: sharpen text strokes
    blur = cv2.GaussianBlur(gray, (0, 0), 1.0)
    gray = cv2.addWeighted(gray, 1.6, blur, -0.6, 0)

    # Upscale to help Tesseract resolve small glyphs
    h, w = gray.shape[:2]
    if max(h, w) < 2000:
        gray = cv2.resize(gray, (w * 2, h * 2), interpolation=cv2.INTER_CUBIC)
    return gray


def group_lines(data: Dict[str, List]) -> List[str]:
    """Join Tesseract word boxes into lines keyed by (block, paragraph, line)."""
    lines: Dict[Tuple[int, int, int], List[str]] = {}
    n = len(data.get("text", []))
    for i in range(n):
        word = (data["text"][i] or "").strip()
        if not word:
            continue
        try:
            conf = float(data["conf"][i])
        except (TypeError, ValueError):
            conf = -1.0
        if conf < 0:
            continue
        key = (int(data["block_num"][i]), int(data["par_num"][i]), int(data["line_num"][i]))
        lines.setdefault(key, []).append(word)
    # dict preserves Tesseract's reading order
    return [" ".join(words) for words in lines.values()]


class TesseractRecognizer:
    """Recognizer backed by the Tesseract engine through pytesseract."""

    def __init__(self, *, lang: str = "eng", tesseract_cmd: Optional[str] = None, psm: int = 4) -> None:
        self.lang = lang
        self.psm = psm
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
            LOG.debug(f"Using Tesseract binary at {tesseract_cmd}")

    @classmethod
    def from_settings(cls, settings: OcrSettings) -> "TesseractRecognizer":
        return cls(lang=settings.tesseract_lang, tesseract_cmd=settings.tesseract_cmd)

    def _config(self, options: RecognitionOptions) -> str:
        parts = [f"--oem 1 --psm {self.psm}"]
        if not options.language_correction:
            parts.append("-c load_system_dawg=0 -c load_freq_dawg=0")
        return " ".join(parts)

    def recognize(self, image: np.ndarray, options: RecognitionOptions) -> List[str]:
        prepared = preprocess_for_ocr(image) if options.accurate else _to_gray(image)
        try:
            data = pytesseract.image_to_data(
                prepared,
                lang=self.lang,
                config=self._config(options),
                output_type=Output.DICT,
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, RuntimeError) as exc:
            raise RecognizerError(f"Tesseract failed: {exc}") from exc

        lines = group_lines(data)
        if not lines:
            raise NoTextFoundError("No text found in image")
        LOG.debug(f"Tesseract returned {len(lines)} line(s) for {image.shape[1]}x{image.shape[0]} px")
        return lines
