"""Error taxonomy for the text recognition pipeline."""


class OcrError(Exception):
    """Base class for recognition failures surfaced to callers."""


class ImageDecodeError(OcrError):
    """Input is not a decodable bitmap image."""


class NoTextFoundError(OcrError):
    """Recognition succeeded but produced no text."""


class RecognizerError(OcrError):
    """The recognition engine failed while processing a segment."""


class PdfLoadError(OcrError):
    """Input PDF could not be opened."""
