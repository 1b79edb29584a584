import os
import sys

import pytest

sys.path.insert(0, os.path.abspath("src"))

from grocery_scan.config import OcrSettings, load_ocr_settings

_KEYS = (
    "GROCERY_OCR_MAX_SEGMENT_HEIGHT",
    "GROCERY_OCR_SEGMENT_OVERLAP",
    "GROCERY_OCR_LONG_IMAGE_THRESHOLD",
    "GROCERY_OCR_MAX_WORKERS",
    "GROCERY_OCR_PDF_SCALE",
    "TESSERACT_CMD",
    "TESSERACT_LANG",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in _KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_without_env(tmp_path):
    settings = load_ocr_settings(str(tmp_path))
    assert settings == OcrSettings()
    assert settings.effective_step == 3800


def test_dotenv_found_in_parent_directory(tmp_path):
    (tmp_path / ".env").write_text(
        "# receipts are long\nGROCERY_OCR_MAX_SEGMENT_HEIGHT=3000\nTESSERACT_LANG='deu+eng'\n",
        encoding="utf-8",
    )
    nested = tmp_path / "src" / "pkg"
    nested.mkdir(parents=True)
    settings = load_ocr_settings(str(nested))
    assert settings.max_segment_height == 3000
    assert settings.tesseract_lang == "deu+eng"


def test_environment_overrides_dotenv(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("GROCERY_OCR_MAX_WORKERS=2\n", encoding="utf-8")
    monkeypatch.setenv("GROCERY_OCR_MAX_WORKERS", "8")
    assert load_ocr_settings(str(tmp_path)).max_workers == 8


def test_invalid_values_fall_back_to_defaults(tmp_path, monkeypatch):
    monkeypatch.setenv("GROCERY_OCR_SEGMENT_OVERLAP", "lots")
    monkeypatch.setenv("GROCERY_OCR_LONG_IMAGE_THRESHOLD", "2.5")
    settings = load_ocr_settings(str(tmp_path))
    assert settings.segment_overlap == 200
    assert settings.long_image_threshold == 2.5


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_segment_height": 0},
        {"segment_overlap": -1},
        {"max_segment_height": 200, "segment_overlap": 200},
        {"max_workers": 0},
        {"long_image_threshold": 0},
    ],
)
def test_inconsistent_geometry_is_rejected(kwargs):
    with pytest.raises(ValueError):
        OcrSettings(**kwargs)
