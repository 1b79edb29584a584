import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.abspath("src"))

import pytesseract

from grocery_scan.ocr import recognizer as recognizer_module
from grocery_scan.ocr.errors import NoTextFoundError, RecognizerError
from grocery_scan.ocr.recognizer import (
    RecognitionOptions,
    TesseractRecognizer,
    group_lines,
    preprocess_for_ocr,
)


def _data(rows):
    keys = ("text", "conf", "block_num", "par_num", "line_num")
    return {k: [r[i] for r in rows] for i, k in enumerate(keys)}


def test_group_lines_joins_words_in_reading_order():
    data = _data([
        ("", "-1", 1, 1, 0),
        ("Oat", "96.1", 1, 1, 1),
        ("Milk", "95.0", 1, 1, 1),
        ("1.99", "91", 1, 1, 1),
        ("Bananas", "88", 1, 1, 2),
        ("0.89", "90", 1, 1, 2),
        ("TOTAL", "93", 2, 1, 1),
        ("  ", "50", 2, 1, 1),
    ])
    assert group_lines(data) == ["Oat Milk 1.99", "Bananas 0.89", "TOTAL"]


def test_group_lines_drops_unconfident_tokens():
    data = _data([("ghost", "-1", 1, 1, 1), ("real", "70", 1, 1, 2)])
    assert group_lines(data) == ["real"]


def test_language_correction_toggles_dictionaries():
    rec = TesseractRecognizer()
    assert "load_system_dawg=0" not in rec._config(RecognitionOptions())
    cfg = rec._config(RecognitionOptions(language_correction=False))
    assert "load_system_dawg=0" in cfg and "load_freq_dawg=0" in cfg


def test_preprocess_upscales_small_images_to_gray():
    img = np.full((50, 80, 3), 200, dtype=np.uint8)
    out = preprocess_for_ocr(img)
    assert out.shape == (100, 160)
    assert out.dtype == np.uint8


def test_recognize_returns_grouped_lines(monkeypatch):
    captured = {}

    def fake_image_to_data(image, lang, config, output_type):
        captured["lang"] = lang
        captured["shape"] = image.shape
        return _data([("Greek", "90", 1, 1, 1), ("Yogurt", "90", 1, 1, 1), ("2.49", "90", 1, 1, 2)])

    monkeypatch.setattr(recognizer_module.pytesseract, "image_to_data", fake_image_to_data)
    rec = TesseractRecognizer(lang="deu+eng")
    lines = rec.recognize(np.zeros((40, 40), dtype=np.uint8), RecognitionOptions(accurate=False))
    assert lines == ["Greek Yogurt", "2.49"]
    assert captured == {"lang": "deu+eng", "shape": (40, 40)}


def test_recognize_without_text_raises(monkeypatch):
    monkeypatch.setattr(recognizer_module.pytesseract, "image_to_data", lambda *a, **k: _data([]))
    with pytest.raises(NoTextFoundError):
        TesseractRecognizer().recognize(np.zeros((10, 10), dtype=np.uint8), RecognitionOptions())


def test_engine_failure_is_wrapped(monkeypatch):
    def boom(*args, **kwargs):
        raise pytesseract.TesseractError(1, "bad input")

    monkeypatch.setattr(recognizer_module.pytesseract, "image_to_data", boom)
    with pytest.raises(RecognizerError):
        TesseractRecognizer().recognize(np.zeros((10, 10), dtype=np.uint8), RecognitionOptions())
