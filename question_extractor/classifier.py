"""
Classifiers
===========
Theme and discipline inference for extracted questions.

Both classifiers are deterministic: explicit labels beat keywords, and
among keywords the first entry in table order wins ties.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from .models import DEFAULT_THEME, NOT_IDENTIFIED
from .taxonomy import DISCIPLINES, THEME_KEYWORDS, Discipline, ThemeKeyword

logger = logging.getLogger(__name__)

# ─── Theme Label Patterns ─────────────────────────────────────────────────────

# Checked in this order; a label only counts at the start of a line
THEME_LABEL_PATTERNS = [
    re.compile(
        rf"^[ ]*{label}[ ]*:[ ]*([^\n]+)", re.IGNORECASE | re.MULTILINE
    )
    for label in (
        r"TEMA",
        r"ASSUNTO",
        r"MAT[ÉE]RIA",
        r"CONTE[ÚU]DO",
        r"T[ÓO]PICO",
    )
]

# Label values are split on the first separator present, in this order
THEME_SEPARATORS = ("/", " - ", ":")

KEYWORD_SCAN_LINES = 5


class ThemeClassifier:
    """
    Extracts (theme, subtheme) from a block of question text.

    Looks for an explicit label line first ("TEMA: Juros / Montante"),
    then falls back to a keyword table matched against the block's
    opening lines.
    """

    def __init__(self, keywords: tuple[ThemeKeyword, ...] = THEME_KEYWORDS):
        self.keywords = keywords

    def classify(self, block: str) -> tuple[str, Optional[str]]:
        for pattern in THEME_LABEL_PATTERNS:
            match = pattern.search(block)
            if match:
                value = match.group(1).strip()
                if value:
                    return self._split_label(value)

        opening = " ".join(block.split("\n")[:KEYWORD_SCAN_LINES]).lower()
        for item in self.keywords:
            if item.keyword in opening:
                return item.theme, None

        return DEFAULT_THEME, None

    @staticmethod
    def _split_label(value: str) -> tuple[str, Optional[str]]:
        """Split "Theme / Sub" (or " - ", ":") into theme and subtheme."""
        for separator in THEME_SEPARATORS:
            if separator not in value:
                continue
            if separator == ":" and value.startswith(":"):
                continue

            parts = [p.strip() for p in value.split(separator)]
            parts = [p for p in parts if p]
            if len(parts) >= 2:
                return parts[0], separator.join(parts[1:])
            if separator != ":":
                return (parts[0] if parts else DEFAULT_THEME), None

        return value, None


class DisciplineClassifier:
    """
    Scores candidate text against the discipline taxonomy.

    Scoring per discipline:
        +3 per keyword hit longer than 5 characters, +2 otherwise
        +10 when the discipline's own name appears in the text
    """

    MIN_SCORE = 2

    def __init__(self, disciplines: tuple[Discipline, ...] = DISCIPLINES):
        self.disciplines = disciplines

    def score(self, text: str, discipline: Discipline) -> int:
        text = text.lower()
        total = 0
        for keyword in discipline.keywords:
            if keyword.lower() in text:
                total += 3 if len(keyword) > 5 else 2
        if discipline.name.lower() in text:
            total += 10
        return total

    def classify(self, enunciado: str, theme: str, file_name: str) -> str:
        """Return the best-scoring discipline name, or "Não identificada"."""
        text = f"{file_name} {theme} {enunciado}".lower()

        best_name = NOT_IDENTIFIED
        best_score = 0
        for discipline in self.disciplines:
            score = self.score(text, discipline)
            if score > best_score:
                best_name, best_score = discipline.name, score

        if best_score < self.MIN_SCORE:
            logger.debug(f"Discipline not identified (best score {best_score})")
            return NOT_IDENTIFIED
        return best_name
