"""Splitting of tall images into overlapping strips and stitching their text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from ..config import OcrSettings
from ..logging import get_logger

LOG = get_logger("ocr-segments")

# Lines inspected on each side of a segment boundary when looking for overlap.
DEDUP_WINDOW = 10


@dataclass(frozen=True)
class SegmentSpan:
    y_offset: int
    height: int

    @property
    def end(self) -> int:
        return self.y_offset + self.height


@dataclass(frozen=True)
class ImageSegment:
    y_offset: int
    height: int
    pixels: np.ndarray


def is_long_image(width: int, height: int, settings: OcrSettings) -> bool:
    """True when the image is both tall relative to its width and taller than one segment."""
    aspect_ratio = height / width
    return aspect_ratio > settings.long_image_threshold and height > settings.max_segment_height


def plan_segments(height: int, settings: OcrSettings) -> List[SegmentSpan]:
    """Return overlapping row spans covering [0, height).

    Offsets advance by ``max_segment_height - segment_overlap``. When the rows
    left after an advance are fewer than twice the overlap, they are absorbed
    into the last span instead of becoming a separate sliver.
    """
    step = settings.effective_step
    spans: List[SegmentSpan] = []
    y = 0
    while y < height:
        spans.append(SegmentSpan(y, min(settings.max_segment_height, height - y)))
        y += step
        if height - y < settings.segment_overlap * 2:
            break

    if spans and spans[-1].end < height:
        last = spans[-1]
        spans[-1] = SegmentSpan(last.y_offset, height - last.y_offset)
        LOG.debug(f"Absorbed {height - last.end} trailing row(s) into segment at y={last.y_offset}")
    return spans


def crop_segments(pixels: np.ndarray, settings: OcrSettings) -> List[ImageSegment]:
    spans = plan_segments(int(pixels.shape[0]), settings)
    return [
        ImageSegment(s.y_offset, s.height, pixels[s.y_offset:s.end])
        for s in spans
    ]


def _boundary_skip(previous_lines: Sequence[str], current_lines: Sequence[str]) -> int:
    """Number of leading lines of the current segment already present in the result tail."""
    tail = [line.strip() for line in previous_lines[-DEDUP_WINDOW:]]
    for j, raw in enumerate(current_lines[:DEDUP_WINDOW]):
        line = raw.strip()
        if not line:
            continue
        if line in tail:
            return j + 1
    return 0


def merge_segment_texts(segments: Sequence[str]) -> str:
    """Concatenate per-segment texts in order, dropping lines repeated across boundaries.

    Only the first lines of each segment are compared against the last lines
    of the accumulated text, with exact (whitespace-trimmed) equality. When
    nothing matches the whole segment is appended.
    """
    if not segments:
        return ""

    result = segments[0]
    for index, text in enumerate(segments[1:], start=1):
        current_lines = text.split("\n")
        skip = _boundary_skip(result.split("\n"), current_lines)
        LOG.debug(f"Segment {index}: skipping {skip} overlapping line(s)")
        new_lines = current_lines[skip:]
        if new_lines:
            result += "\n" + "\n".join(new_lines)
    return result
