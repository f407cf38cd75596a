"""
Text Block Parser
=================
Generic parser turning an arbitrary window of document text into a single
question candidate. Shared by the question-number and alternative-block
strategies, which only differ in how they cut windows out of a document.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from .classifier import ThemeClassifier
from .models import UNKNOWN_ANSWER, Candidate

logger = logging.getLogger(__name__)

MIN_ALTERNATIVES = 3
MIN_ENUNCIADO_LENGTH = 15

# ─── Alternative Patterns ─────────────────────────────────────────────────────

# Strictest first. A letter keeps the text of the first pattern that finds it.
ALTERNATIVE_PATTERNS = [
    # (A) text  /  ( a ) text
    re.compile(r"\(\s*([A-E])\s*\)\s*([^\n\(]+)", re.IGNORECASE),
    # A) text
    re.compile(r"(?:^|\n)\s*([A-E])\s*\)\s*([^\n]+)", re.MULTILINE),
    # A. text
    re.compile(r"(?:^|\n)\s*([A-E])\s*\.\s*([^\n]+)", re.MULTILINE),
    # a) text
    re.compile(r"(?:^|\n)\s*([a-e])\s*\)\s*([^\n]+)", re.MULTILINE),
    # A Text starting with a capital letter
    re.compile(r"(?:^|\n)\s*([A-E])\s+([A-ZÀ-Ú][^\n]{5,})", re.MULTILINE),
]

# ─── Answer Patterns ──────────────────────────────────────────────────────────

# Keywords are case-insensitive, the letter itself must be upper case and
# must not open an "A)" alternative
ANSWER_PATTERNS = [
    re.compile(
        r"(?<!\w)(?i:GABARITO|RESPOSTA|CORRETA?)\b[:\s]*([A-E])\b(?!\s*\))"
    ),
    re.compile(r"\*\s*([A-E])\s*\*"),
    re.compile(r"(?i:LETRA)\s+([A-E])\b"),
]

# ─── Enunciado Cleanup ────────────────────────────────────────────────────────

NUMBER_PREFIX_PATTERN = re.compile(r"^\s*\d{1,3}\s*[\.\)]\s*", re.MULTILINE)
QUESTION_MARKER_PREFIX_PATTERN = re.compile(
    r"^\s*QUEST[ÃA]O\s*\d{1,3}[:\.\s]*", re.IGNORECASE
)
THEME_LINE_PATTERN = re.compile(
    r"^[ ]*(?:TEMA|ASSUNTO|MAT[ÉE]RIA|CONTE[ÚU]DO|T[ÓO]PICO)[ ]*:[^\n]*\n?",
    re.IGNORECASE | re.MULTILINE,
)
WHITESPACE_PATTERN = re.compile(r"\s+")


def find_alternatives(block: str) -> tuple[dict[str, str], int]:
    """
    Run every alternative pattern over the block.

    Returns:
        (letter -> text, position of the earliest accepted alternative).
        The position is len(block) when nothing was found.
    """
    found: dict[str, str] = {}
    first_position = len(block)

    for pattern in ALTERNATIVE_PATTERNS:
        for match in pattern.finditer(block):
            letter = match.group(1).upper()
            text = match.group(2).strip()
            if letter in found or not text:
                continue
            found[letter] = text
            first_position = min(first_position, match.start())

    return found, first_position


def find_answer(block: str) -> str:
    for pattern in ANSWER_PATTERNS:
        match = pattern.search(block)
        if match:
            return match.group(1).upper()
    return UNKNOWN_ANSWER


def clean_enunciado(raw: str) -> str:
    """Strip numbering, question marker and theme line; collapse whitespace."""
    text = raw.strip()
    text = NUMBER_PREFIX_PATTERN.sub("", text, count=1)
    text = QUESTION_MARKER_PREFIX_PATTERN.sub("", text, count=1)
    text = THEME_LINE_PATTERN.sub("", text, count=1)
    return WHITESPACE_PATTERN.sub(" ", text).strip()


class TextBlockParser:
    """
    Parses one window of text into a Candidate.

    A window that does not yield at least three alternatives and an
    enunciado longer than 15 characters produces nothing.
    """

    def __init__(self, theme_classifier: Optional[ThemeClassifier] = None):
        self.theme_classifier = theme_classifier or ThemeClassifier()

    def parse(
        self,
        block: str,
        sequence_number: Optional[int] = None,
    ) -> Optional[Candidate]:
        alternatives, first_position = find_alternatives(block)
        if len(alternatives) < MIN_ALTERNATIVES:
            return None

        enunciado = clean_enunciado(block[:first_position])
        if len(enunciado) <= MIN_ENUNCIADO_LENGTH:
            logger.debug(
                f"Block rejected: enunciado too short ({len(enunciado)} chars)"
            )
            return None

        theme, subtheme = self.theme_classifier.classify(block)

        return Candidate(
            enunciado=enunciado,
            alternatives=alternatives,
            answer=find_answer(block),
            theme=theme,
            subtheme=subtheme,
            sequence_number=sequence_number,
        )
