"""
Exam Metadata Detector
======================
Infers the exam board ("banca") and reference year of a document from its
file name and header.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from .models import NOT_IDENTIFIED
from .taxonomy import BOARD_OVERRIDES, KNOWN_BOARDS, BoardOverride

logger = logging.getLogger(__name__)

BOARD_SAMPLE_CHARS = 5000
YEAR_SAMPLE_CHARS = 3000

YEAR_PATTERN = re.compile(r"\b(20[0-2]\d)\b")


class ExamMetadataDetector:
    """Board and year detection over the head of a document."""

    def __init__(
        self,
        boards: tuple[str, ...] = KNOWN_BOARDS,
        overrides: tuple[BoardOverride, ...] = BOARD_OVERRIDES,
    ):
        self.boards = boards
        self.overrides = overrides

    def detect_board(self, text: str, file_name: str) -> str:
        """
        First known board name found (case-insensitive) wins. Without one,
        the first matching institution override applies.
        """
        sample = f"{file_name} {text[:BOARD_SAMPLE_CHARS]}".upper()

        for board in self.boards:
            if board.upper() in sample:
                return board

        for override in self.overrides:
            if override.marker.upper() in sample:
                logger.debug(
                    f"Board inferred from institution '{override.marker}'"
                )
                return override.board

        return NOT_IDENTIFIED

    def detect_year(self, text: str, file_name: str) -> Optional[int]:
        """First year in 2000-2029 found in the file name or header."""
        sample = f"{file_name} {text[:YEAR_SAMPLE_CHARS]}"
        match = YEAR_PATTERN.search(sample)
        return int(match.group(1)) if match else None
