"""
Document Loader
===============
Reads plain text out of local files for the CLI. PDFs go through
PyMuPDF (fitz); everything else is read as UTF-8 text.
"""

from __future__ import annotations

import logging
from pathlib import Path

import fitz  # PyMuPDF

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".txt", ".pdf")


def load_text(path: str) -> str:
    """
    Return the text content of a document.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        RuntimeError: If a PDF cannot be opened.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    if file_path.suffix.lower() == ".pdf":
        return _load_pdf_text(file_path)

    return file_path.read_text(encoding="utf-8", errors="replace")


def _load_pdf_text(file_path: Path) -> str:
    try:
        with fitz.open(str(file_path)) as doc:
            logger.info(f"Reading {doc.page_count} pages from {file_path.name}")
            return "\n".join(page.get_text("text") for page in doc)
    except (fitz.FileDataError, fitz.EmptyFileError) as e:
        raise RuntimeError(f"Cannot open PDF {file_path.name}: {e}") from e
