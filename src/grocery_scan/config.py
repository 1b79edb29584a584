import os
from dataclasses import dataclass
from typing import Callable, Dict, Optional, TypeVar

from dotenv import dotenv_values

from .logging import get_logger

log = get_logger("config")

T = TypeVar("T")

DEFAULT_MAX_SEGMENT_HEIGHT = 4000
DEFAULT_SEGMENT_OVERLAP = 200
DEFAULT_LONG_IMAGE_THRESHOLD = 3.0
DEFAULT_MAX_WORKERS = 4
DEFAULT_TESSERACT_LANG = "eng"
DEFAULT_PDF_RENDER_SCALE = 2.0

# Minimum substring-match score accepted by the local name matcher.
MATCH_CUTOFF = 0.6


@dataclass(frozen=True)
class OcrSettings:
    """Tunable geometry and engine options for the text recognition pipeline."""

    max_segment_height: int = DEFAULT_MAX_SEGMENT_HEIGHT
    segment_overlap: int = DEFAULT_SEGMENT_OVERLAP
    long_image_threshold: float = DEFAULT_LONG_IMAGE_THRESHOLD
    max_workers: int = DEFAULT_MAX_WORKERS
    tesseract_cmd: Optional[str] = None
    tesseract_lang: str = DEFAULT_TESSERACT_LANG
    pdf_render_scale: float = DEFAULT_PDF_RENDER_SCALE

    def __post_init__(self) -> None:
        if self.max_segment_height <= 0:
            raise ValueError("max_segment_height must be positive")
        if self.segment_overlap < 0:
            raise ValueError("segment_overlap must not be negative")
        if self.segment_overlap >= self.max_segment_height:
            raise ValueError("segment_overlap must be smaller than max_segment_height")
        if self.long_image_threshold <= 0:
            raise ValueError("long_image_threshold must be positive")
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if self.pdf_render_scale <= 0:
            raise ValueError("pdf_render_scale must be positive")

    @property
    def effective_step(self) -> int:
        """Vertical advance between consecutive segment offsets."""
        return self.max_segment_height - self.segment_overlap


def _find_upwards(start_dir: str, filename: str) -> Optional[str]:
    """Return first matching file found when walking up from start_dir.

    This makes running tools from subdirectories (e.g., `src/`) still find
    repository-level config files like `.env`.
    """
    d = os.path.abspath(start_dir or ".")
    while True:
        candidate = os.path.join(d, filename)
        if os.path.isfile(candidate):
            return candidate
        parent = os.path.dirname(d)
        if parent == d:
            return None
        d = parent


def _read_dotenv(dotenv_dir: str) -> Dict[str, str]:
    """Return key/value pairs from the nearest .env; does not mutate environment."""
    path = _find_upwards(dotenv_dir, ".env")
    if not path:
        log.debug(f"No .env found starting from: {os.path.abspath(dotenv_dir)}")
        return {}
    try:
        values = dotenv_values(path)
    except (OSError, UnicodeDecodeError) as e:
        log.warning(f"Failed reading .env: {e}")
        return {}
    env = {k: v.strip() for k, v in values.items() if v is not None}
    log.debug(f"Loaded {len(env)} key(s) from .env at {path}")
    return env


def _lookup(env: Dict[str, str], key: str) -> Optional[str]:
    v = os.environ.get(key)
    if v is not None and v.strip():
        return v.strip()
    v = env.get(key)
    return v.strip() if v else None


def _coerce(env: Dict[str, str], key: str, cast: Callable[[str], T], default: T) -> T:
    raw = _lookup(env, key)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError:
        log.warning(f"{key}={raw!r} is invalid; falling back to {default!r}")
        return default


def load_ocr_settings(dotenv_dir: str = ".") -> OcrSettings:
    """Build OcrSettings from the environment, then .env, then defaults."""
    env = _read_dotenv(dotenv_dir)
    settings = OcrSettings(
        max_segment_height=_coerce(env, "GROCERY_OCR_MAX_SEGMENT_HEIGHT", int, DEFAULT_MAX_SEGMENT_HEIGHT),
        segment_overlap=_coerce(env, "GROCERY_OCR_SEGMENT_OVERLAP", int, DEFAULT_SEGMENT_OVERLAP),
        long_image_threshold=_coerce(env, "GROCERY_OCR_LONG_IMAGE_THRESHOLD", float, DEFAULT_LONG_IMAGE_THRESHOLD),
        max_workers=_coerce(env, "GROCERY_OCR_MAX_WORKERS", int, DEFAULT_MAX_WORKERS),
        tesseract_cmd=_lookup(env, "TESSERACT_CMD"),
        tesseract_lang=_lookup(env, "TESSERACT_LANG") or DEFAULT_TESSERACT_LANG,
        pdf_render_scale=_coerce(env, "GROCERY_OCR_PDF_SCALE", float, DEFAULT_PDF_RENDER_SCALE),
    )
    log.debug(f"OCR settings: {settings}")
    return settings
