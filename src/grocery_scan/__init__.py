"""
Grocery Scan – receipt and nutrition-label recognition toolkit.

This package turns photographed receipts and labels into plain text and
links extracted item names to a local food bank.

Subpackages:
- ocr: segmented text recognition for long images and PDFs
- domain: food-bank model, local name matching, nutrition totals
"""

__all__ = [
    "config",
    "logging",
    "paths",
    "ocr",
    "domain",
]
