import os
import sys

import fitz  # PyMuPDF
import pytest
from PIL import Image

sys.path.insert(0, os.path.abspath("src"))

from grocery_scan.config import OcrSettings
from grocery_scan.ocr import (
    NoTextFoundError,
    PdfLoadError,
    TextRecognitionPipeline,
    extract_text_from_pdf,
    extract_text_from_pdf_bytes,
)
from grocery_scan.ocr.image import to_pixels
from grocery_scan.ocr.pdf import render_page


class StubRecognizer:
    def __init__(self, lines):
        self.lines = lines
        self.shapes = []

    def recognize(self, image, options):
        self.shapes.append(image.shape)
        return list(self.lines)


def _pdf_bytes(texts):
    doc = fitz.open()
    for t in texts:
        page = doc.new_page(width=200, height=300)
        if t:
            page.insert_text((20, 40), t)
    data = doc.tobytes()
    doc.close()
    return data


def test_embedded_text_is_used_without_ocr():
    rec = StubRecognizer(["should not be used"])
    pipeline = TextRecognitionPipeline(rec)
    text = extract_text_from_pdf_bytes(_pdf_bytes(["Oat Milk 1.99", "TOTAL 1.99"]), pipeline=pipeline)
    assert "Oat Milk 1.99" in text
    assert "TOTAL 1.99" in text
    assert rec.shapes == []


def test_scanned_pdf_pages_are_rendered_and_recognised():
    rec = StubRecognizer(["Scanned line"])
    pipeline = TextRecognitionPipeline(rec, OcrSettings(pdf_render_scale=2.0))
    text = extract_text_from_pdf_bytes(_pdf_bytes([None, None]), pipeline=pipeline)
    assert text == "Scanned line\nScanned line\n"
    assert rec.shapes == [(600, 400, 3), (600, 400, 3)]


def test_pdf_from_path(tmp_path):
    path = tmp_path / "receipt.pdf"
    path.write_bytes(_pdf_bytes(["Bananas 0.89"]))
    assert "Bananas 0.89" in extract_text_from_pdf(str(path))


def test_scanned_pdf_without_text_raises():
    pipeline = TextRecognitionPipeline(StubRecognizer([]))
    with pytest.raises(NoTextFoundError):
        extract_text_from_pdf_bytes(_pdf_bytes([None]), pipeline=pipeline)


def test_invalid_pdf_raises_load_error(tmp_path):
    with pytest.raises(PdfLoadError):
        extract_text_from_pdf_bytes(b"%PDF-garbage")
    with pytest.raises(PdfLoadError):
        extract_text_from_pdf(str(tmp_path / "missing.pdf"))


def test_rendered_pages_use_same_channel_order_as_photos():
    doc = fitz.open()
    page = doc.new_page(width=50, height=50)
    page.draw_rect(page.rect, color=(1, 0, 0), fill=(1, 0, 0))
    rendered = render_page(page, 1.0)
    doc.close()

    photo = to_pixels(Image.new("RGB", (4, 4), (255, 0, 0)))
    assert rendered[25, 25].tolist() == photo[0, 0].tolist() == [0, 0, 255]
