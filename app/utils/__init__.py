"""Utility functions for the Product Promo Generator."""

from app.utils.text_utils import non_empty_lines, preview, split_into_chunks, strip_code_fence

__all__ = [
    "non_empty_lines",
    "preview",
    "split_into_chunks",
    "strip_code_fence",
]
