"""Text recognition pipeline for photographed receipts and nutrition labels."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, List, Optional

import numpy as np

from ..config import OcrSettings
from ..logging import get_logger
from .errors import NoTextFoundError, OcrError, RecognizerError
from .image import to_pixels
from .recognizer import RecognitionOptions, Recognizer, TesseractRecognizer
from .segments import ImageSegment, crop_segments, is_long_image, merge_segment_texts

LOG = get_logger("ocr-pipeline")


class TextRecognitionPipeline:
    """Convert a document image into newline-delimited text.

    Tall images are recognised in overlapping strips; the strips are
    recognised concurrently and stitched back together in source order.
    """

    def __init__(
        self,
        recognizer: Optional[Recognizer] = None,
        settings: Optional[OcrSettings] = None,
        options: Optional[RecognitionOptions] = None,
    ) -> None:
        self.settings = settings or OcrSettings()
        self.recognizer = recognizer or TesseractRecognizer.from_settings(self.settings)
        self.options = options or RecognitionOptions(accurate=True, language_correction=True)

    def _recognize(self, pixels: np.ndarray) -> str:
        try:
            lines = self.recognizer.recognize(pixels, self.options)
        except OcrError:
            raise
        except Exception as exc:
            raise RecognizerError(f"Recognizer failed: {exc}") from exc
        if not lines:
            raise NoTextFoundError("No text found in image")
        text = "\n".join(lines)
        if not text:
            raise NoTextFoundError("No text found in image")
        return text

    def _recognize_segments(self, segments: List[ImageSegment]) -> List[str]:
        workers = min(self.settings.max_workers, len(segments))
        if workers <= 1:
            return [self._recognize(seg.pixels) for seg in segments]

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ocr-segment") as pool:
            futures: List[Future] = [pool.submit(self._recognize, seg.pixels) for seg in segments]
            texts: List[str] = []
            try:
                for seg, fut in zip(segments, futures):
                    texts.append(fut.result())
                    LOG.debug(f"Segment y={seg.y_offset} h={seg.height} recognised")
            except BaseException:
                for fut in futures:
                    fut.cancel()
                raise
        return texts

    def extract_text(self, image: Any) -> str:
        pixels = to_pixels(image)
        height, width = int(pixels.shape[0]), int(pixels.shape[1])

        if not is_long_image(width, height, self.settings):
            LOG.debug(f"Single recognition pass for {width}x{height} px image")
            return self._recognize(pixels)

        segments = crop_segments(pixels, self.settings)
        LOG.info(f"Long image {width}x{height} px; recognising {len(segments)} segment(s)")
        merged = merge_segment_texts(self._recognize_segments(segments))
        if not merged.strip():
            raise NoTextFoundError("No text found in image")
        return merged


def extract_text(
    image: Any,
    *,
    recognizer: Optional[Recognizer] = None,
    settings: Optional[OcrSettings] = None,
) -> str:
    """Return best-effort recognised text for an image (array, PIL image, bytes or path)."""
    return TextRecognitionPipeline(recognizer, settings).extract_text(image)
