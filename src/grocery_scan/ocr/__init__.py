"""Text recognition for photographed receipts, labels and PDFs."""

from .errors import ImageDecodeError, NoTextFoundError, OcrError, PdfLoadError, RecognizerError
from .recognizer import RecognitionOptions, Recognizer, TesseractRecognizer
from .segments import ImageSegment, SegmentSpan, merge_segment_texts, plan_segments
from .pipeline import TextRecognitionPipeline, extract_text
from .pdf import extract_text_from_pdf, extract_text_from_pdf_bytes

__all__ = [
    "OcrError",
    "ImageDecodeError",
    "NoTextFoundError",
    "RecognizerError",
    "PdfLoadError",
    "RecognitionOptions",
    "Recognizer",
    "TesseractRecognizer",
    "ImageSegment",
    "SegmentSpan",
    "merge_segment_texts",
    "plan_segments",
    "TextRecognitionPipeline",
    "extract_text",
    "extract_text_from_pdf",
    "extract_text_from_pdf_bytes",
]
