"""
Text Normalizer
===============
Canonicalizes raw document text before any pattern matching runs.
"""

from __future__ import annotations

import re

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_SPACE_RUNS = re.compile(r"  +")
_LEADING_SPACES = re.compile(r"\n +")
_TRAILING_SPACES = re.compile(r" +\n")
_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w\s\-\.]", re.ASCII)


def normalize_text(text: str) -> str:
    """
    Normalize line endings, whitespace and control characters.

    Newlines survive, every other control character is dropped, tabs and
    non-breaking spaces become plain spaces and runs of spaces collapse.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = text.replace("\t", " ").replace("\u00a0", " ")
    text = _CONTROL_CHARS.sub("", text)
    text = _SPACE_RUNS.sub(" ", text)
    text = _LEADING_SPACES.sub("\n", text)
    text = _TRAILING_SPACES.sub("\n", text)
    return text.strip()


def sanitize_file_name(file_name: str, max_length: int = 255) -> str:
    """Replace anything but ASCII word chars, spaces, dash and dot with '_'."""
    if not file_name:
        return "unknown"
    return _UNSAFE_FILENAME_CHARS.sub("_", file_name[:max_length])
