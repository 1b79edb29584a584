"""Text extraction from PDF receipts: embedded text first, OCR of rendered pages otherwise."""

from __future__ import annotations

import os
from typing import List, Optional, Union

import cv2
import fitz  # PyMuPDF
import numpy as np

from ..logging import get_logger
from ..paths import resolve_input_path
from .errors import NoTextFoundError, PdfLoadError
from .pipeline import TextRecognitionPipeline

LOG = get_logger("ocr-pdf")


def _open_document(source: Union[str, "os.PathLike[str]", bytes]) -> fitz.Document:
    try:
        if isinstance(source, (bytes, bytearray)):
            return fitz.open(stream=bytes(source), filetype="pdf")
        return fitz.open(resolve_input_path(os.fspath(source)))
    except Exception as exc:
        raise PdfLoadError(f"Failed to load PDF: {exc}") from exc


def render_page(page: fitz.Page, scale: float) -> np.ndarray:
    """Render a page onto a white background as a BGR pixel array, like decoded photos."""
    pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), colorspace=fitz.csRGB, alpha=False)
    rgb = np.frombuffer(pix.samples, dtype=np.uint8).reshape(pix.height, pix.width, pix.n)
    return cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)


def _embedded_text(doc: fitz.Document) -> str:
    parts: List[str] = []
    for page in doc:
        txt = page.get_text("text") or ""
        if txt:
            parts.append(txt + "\n")
    return "".join(parts)


def _ocr_pages(doc: fitz.Document, pipeline: TextRecognitionPipeline) -> str:
    parts: List[str] = []
    scale = pipeline.settings.pdf_render_scale
    for index, page in enumerate(doc):
        LOG.debug(f"Rendering page {index + 1}/{doc.page_count} at scale {scale}")
        parts.append(pipeline.extract_text(render_page(page, scale)) + "\n")
    return "".join(parts)


def _extract(doc: fitz.Document, pipeline: Optional[TextRecognitionPipeline]) -> str:
    if doc.page_count == 0:
        raise PdfLoadError("PDF has no pages")
    text = _embedded_text(doc)
    if not text.strip():
        LOG.info(f"No embedded text; running OCR on {doc.page_count} rendered page(s)")
        text = _ocr_pages(doc, pipeline or TextRecognitionPipeline())
    if not text.strip():
        raise NoTextFoundError("No text found in PDF")
    return text


def extract_text_from_pdf(
    path: Union[str, "os.PathLike[str]"], *, pipeline: Optional[TextRecognitionPipeline] = None
) -> str:
    with _open_document(path) as doc:
        return _extract(doc, pipeline)


def extract_text_from_pdf_bytes(data: bytes, *, pipeline: Optional[TextRecognitionPipeline] = None) -> str:
    with _open_document(data) as doc:
        return _extract(doc, pipeline)
