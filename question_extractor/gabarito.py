"""
Gabarito Resolver
=================
Recovers question-number -> answer-letter mappings that a document states
apart from the questions themselves (an answer key, or "gabarito").

Sources, in precedence order:
    1. Answer-key sections ("GABARITO", "RESPOSTAS", "CHAVE DE CORREÇÃO")
       running until the next blank line
    2. Inline references anywhere: "questão 12: C", "q.12-C"
    3. Bare "12 - C" lines anywhere

The first occurrence of a question number wins; later ones are ignored.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

GabaritoMap = dict[int, str]

# ─── Patterns ─────────────────────────────────────────────────────────────────

# Header keyword up to the next blank line (or end of document)
SECTION_PATTERNS = [
    re.compile(r"GABARITO[\s\S]*?(?=\n\s*\n|\Z)", re.IGNORECASE),
    re.compile(r"RESPOSTAS?[\s\S]*?(?=\n\s*\n|\Z)", re.IGNORECASE),
    re.compile(r"CHAVE DE CORRE[ÇC][ÃA]O[\s\S]*?(?=\n\s*\n|\Z)", re.IGNORECASE),
]

# "1-A", "1.A", "1)A", "01 - A", "1: A"
KEY_PAIR_PATTERN = re.compile(r"(\d{1,3})\s*[-\.\):]\s*([A-E])", re.IGNORECASE)

# "questão 12: C", "Questao 3 - B", "q.12-C" (separator on the same line)
INLINE_PATTERN = re.compile(
    r"\b(?:quest[ãa]o|q\.?)[ ]*(\d{1,3})[ ]*[:\-–][ ]*([A-E])\b",
    re.IGNORECASE,
)

# A whole line holding only "12 - C" or "12 – C"
BARE_LINE_PATTERN = re.compile(
    r"^[ ]*(\d{1,3})[ ]*[-–][ ]*([A-E])[ ]*$", re.IGNORECASE | re.MULTILINE
)


class GabaritoResolver:
    """Scans a whole document for answer keys."""

    def resolve(self, text: str) -> GabaritoMap:
        """
        Build the answer map for a document.

        Args:
            text: Normalized document text.

        Returns:
            Mapping of question number to upper-case answer letter.
            Empty when the document carries no answer key.
        """
        gabarito: GabaritoMap = {}

        for pattern in SECTION_PATTERNS:
            for section in pattern.finditer(text):
                for match in KEY_PAIR_PATTERN.finditer(section.group(0)):
                    self._record(gabarito, match)

        for match in INLINE_PATTERN.finditer(text):
            self._record(gabarito, match)

        for match in BARE_LINE_PATTERN.finditer(text):
            self._record(gabarito, match)

        if gabarito:
            logger.info(f"Gabarito resolved with {len(gabarito)} entries")
        else:
            logger.debug("No gabarito found in document")

        return gabarito

    @staticmethod
    def _record(gabarito: GabaritoMap, match: re.Match) -> None:
        number = int(match.group(1))
        if number not in gabarito:
            gabarito[number] = match.group(2).upper()
