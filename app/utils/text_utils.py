"""Text utility functions for script processing."""

# This module is part of app.utils package

import math
import re

CODE_FENCE_RE = re.compile(r"^\s*```[\w-]*\s*\n(.*?)\n?\s*```\s*$", re.DOTALL)


def non_empty_lines(text: str) -> list[str]:
    """
    Return the stripped, non-blank lines of text.

    Args:
        text: Multi-line text.

    Returns:
        Lines in original order with surrounding whitespace removed.
    """
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


def split_into_chunks(items: list, parts: int) -> list[list]:
    """
    Split items into exactly `parts` contiguous groups of ceil(len/parts) items.

    The chunk size is at least 1, so short inputs leave the trailing groups empty.

    Args:
        items: Items to split.
        parts: Number of groups to produce.

    Returns:
        List of `parts` lists.
    """
    size = max(1, math.ceil(len(items) / parts))
    return [items[i * size : (i + 1) * size] for i in range(parts)]


def strip_code_fence(text: str) -> str:
    """Remove a surrounding Markdown code fence (```json ... ```), if present."""
    text = (text or "").strip()
    match = CODE_FENCE_RE.match(text)
    return match.group(1).strip() if match else text


def preview(text: str, limit: int = 120) -> str:
    """Shorten text for log lines."""
    text = text or ""
    return text[:limit] + "..." if len(text) > limit else text
