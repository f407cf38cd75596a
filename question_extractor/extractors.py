"""
Extraction Strategies
=====================
Ordered, stateless strategies that turn a normalized document into
question candidates, plus the chain that runs them.

Chain order:
    1. StructuredFormatExtractor   "QUESTÃO n / TEMA: / Enunciado: / ..."
    2. LabeledFormatExtractor      single "Enunciado: ... Alternativas: ..."
    3. QuestionNumberExtractor     windows cut at "12." / "QUESTÃO 12"
    4. AlternativeBlockExtractor   windows around consecutive A/B/C options

The first strategy that yields at least one candidate wins for the whole
document; the remaining strategies are never run.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from .block_parser import MIN_ALTERNATIVES, MIN_ENUNCIADO_LENGTH, TextBlockParser
from .classifier import ThemeClassifier
from .models import UNKNOWN_ANSWER, Candidate, QuestionFormat

logger = logging.getLogger(__name__)


class Extractor(ABC):
    """A single extraction strategy."""

    name: str = "extractor"

    @abstractmethod
    def try_extract(self, text: str) -> list[Candidate]:
        """Return every candidate found; an empty list is a miss, not an error."""


# ─── Structured Format ────────────────────────────────────────────────────────

BLOCK_SPLIT_PATTERN = re.compile(
    r"(?=QUEST[ÃA]O\s*\d+)|(?:\A|\n)-{3,}(?:\n|\Z)", re.IGNORECASE
)
MIN_BLOCK_LENGTH = 50

QUESTION_NUMBER_PATTERN = re.compile(r"QUEST[ÃA]O\s*(\d+)", re.IGNORECASE)
BOARD_LINE_PATTERN = re.compile(r"(?<!\w)BANCA[ ]*:[ ]*([^\n]+)", re.IGNORECASE)
YEAR_LINE_PATTERN = re.compile(r"(?<!\w)ANO[ ]*:[ ]*(\d{4})", re.IGNORECASE)
ENUNCIADO_FIELD_PATTERN = re.compile(
    r"Enunciado:\s*([\s\S]*?)(?=Alternativas?:|\Z)", re.IGNORECASE
)
ALTERNATIVES_FIELD_PATTERN = re.compile(
    r"Alternativas?:\s*([\s\S]*?)(?=GABARITO:|Resposta:|\Z)", re.IGNORECASE
)
PAREN_ALTERNATIVE_PATTERN = re.compile(r"\(([A-E])\)\s*([^\n]+)", re.IGNORECASE)
LINE_ALTERNATIVE_PATTERN = re.compile(r"^([A-E])[\s\)\.]+(.+)$", re.IGNORECASE)
GABARITO_FIELD_PATTERN = re.compile(r"GABARITO:\s*([A-E])", re.IGNORECASE)


def _clean_alternative(text: str) -> str:
    text = text.strip()
    return text[:-1] if text.endswith(".") else text


class StructuredFormatExtractor(Extractor):
    """
    Explicit labeled grammar, one block per question:

        QUESTÃO 1
        BANCA: CESGRANRIO          (optional)
        ANO: 2018                  (optional)
        TEMA: Juros Compostos / Rentabilidade
        Enunciado: ...
        Alternativas:
        (A) ...                    or bare "A ..."
        GABARITO: C
        ---

    Blocks missing a field or falling short of the minimums are skipped.
    """

    name = "structured_format"

    def __init__(self, theme_classifier: Optional[ThemeClassifier] = None):
        self.theme_classifier = theme_classifier or ThemeClassifier()

    def try_extract(self, text: str) -> list[Candidate]:
        blocks = [
            b for b in BLOCK_SPLIT_PATTERN.split(text)
            if b and len(b.strip()) > MIN_BLOCK_LENGTH
        ]
        logger.debug(f"[{self.name}] {len(blocks)} potential blocks")

        candidates = []
        for block in blocks:
            candidate = self._parse_block(block)
            if candidate is not None:
                candidates.append(candidate)
        return candidates

    def _parse_block(self, block: str) -> Optional[Candidate]:
        number_match = QUESTION_NUMBER_PATTERN.search(block)
        number = int(number_match.group(1)) if number_match else None

        enunciado_match = ENUNCIADO_FIELD_PATTERN.search(block)
        if not enunciado_match:
            logger.debug(f"[{self.name}] Block without 'Enunciado:', skipping")
            return None

        enunciado = enunciado_match.group(1).strip()
        if len(enunciado) < MIN_ENUNCIADO_LENGTH:
            logger.debug(
                f"[{self.name}] Enunciado too short "
                f"({len(enunciado)} chars), skipping"
            )
            return None

        alternatives_match = ALTERNATIVES_FIELD_PATTERN.search(block)
        if not alternatives_match:
            logger.debug(f"[{self.name}] Block without 'Alternativas:', skipping")
            return None

        alternatives = self._parse_alternatives(alternatives_match.group(1))
        if len(alternatives) < MIN_ALTERNATIVES:
            logger.debug(
                f"[{self.name}] Only {len(alternatives)} alternatives, skipping"
            )
            return None

        board_match = BOARD_LINE_PATTERN.search(block)
        year_match = YEAR_LINE_PATTERN.search(block)
        gabarito_match = GABARITO_FIELD_PATTERN.search(block)
        theme, subtheme = self.theme_classifier.classify(block)

        candidate = Candidate(
            enunciado=enunciado,
            alternatives=alternatives,
            answer=(
                gabarito_match.group(1).upper()
                if gabarito_match else UNKNOWN_ANSWER
            ),
            theme=theme,
            subtheme=subtheme,
            exam_board=board_match.group(1).strip() if board_match else None,
            year=int(year_match.group(1)) if year_match else None,
            sequence_number=number,
            format=(
                QuestionFormat.PADRAO2
                if board_match or year_match else QuestionFormat.PADRAO1
            ),
        )

        logger.debug(
            f"[{self.name}] Q{number or '?'}: theme='{theme}', "
            f"board={candidate.exam_board}, year={candidate.year}, "
            f"answer={candidate.answer}"
        )
        return candidate

    @staticmethod
    def _parse_alternatives(alternatives_text: str) -> dict[str, str]:
        alternatives: dict[str, str] = {}

        for match in PAREN_ALTERNATIVE_PATTERN.finditer(alternatives_text):
            letter = match.group(1).upper()
            if letter not in alternatives:
                alternatives[letter] = _clean_alternative(match.group(2))

        if len(alternatives) < MIN_ALTERNATIVES:
            for line in alternatives_text.split("\n"):
                match = LINE_ALTERNATIVE_PATTERN.match(line.strip())
                if not match:
                    continue
                letter = match.group(1).upper()
                text = _clean_alternative(match.group(2))
                if letter not in alternatives and text:
                    alternatives[letter] = text

        return alternatives


# ─── Labeled Format ───────────────────────────────────────────────────────────

LABELED_ENUNCIADO_PATTERN = re.compile(
    r"Enunciado:\s*([\s\S]*?)(?:Alternativas?:|\Z)", re.IGNORECASE
)
LABELED_ALTERNATIVES_PATTERN = re.compile(
    r"Alternativas?:\s*([\s\S]*?)(?:Gabarito:|Resposta:|\Z)", re.IGNORECASE
)
LABELED_ANSWER_PATTERN = re.compile(
    r"(?<!\w)(?i:Gabarito|Resposta)[ ]*:[ ]*([A-E])\b"
)

# Increasingly permissive; letters accumulate until three are known.
# When every pattern falls short the text is split before each "A Text"
# letter as a last resort.
LABELED_ALTERNATIVE_PATTERNS = [
    # (A) text
    re.compile(r"\(([A-E])\)\s*([^\n]+)"),
    # A) text  /  A. text
    re.compile(r"(?:^|\n)[ ]*([A-E])[ ]*[\.\)][ ]*([^\n]+)", re.MULTILINE),
    # A text. B text. C text.  (all on one line)
    re.compile(
        r"(?<!\w)([A-E])\s+([^\n]{10,}?)(?=\s+[A-E]\s+[A-ZÀ-Ú]|\n|\Z)"
    ),
]
LETTER_SPLIT_PATTERN = re.compile(r"(?=\b[A-E]\s+[A-ZÀ-Ú])")
LETTER_PART_PATTERN = re.compile(r"^([A-E])\s+(.+)", re.DOTALL)


class LabeledFormatExtractor(Extractor):
    """
    Looser labeled layout for single-question or irregular documents:
    one "Enunciado:" ... "Alternativas:" ... "Gabarito:" sequence with no
    question marker.
    """

    name = "labeled_format"

    def __init__(self, theme_classifier: Optional[ThemeClassifier] = None):
        self.theme_classifier = theme_classifier or ThemeClassifier()

    def try_extract(self, text: str) -> list[Candidate]:
        enunciado_match = LABELED_ENUNCIADO_PATTERN.search(text)
        alternatives_match = LABELED_ALTERNATIVES_PATTERN.search(text)
        if not enunciado_match or not alternatives_match:
            return []

        enunciado = enunciado_match.group(1).strip()
        alternatives = self._parse_alternatives(alternatives_match.group(1))
        theme, subtheme = self.theme_classifier.classify(text)

        logger.debug(
            f"[{self.name}] {len(alternatives)} alternatives, theme='{theme}'"
        )

        if len(enunciado) <= MIN_ENUNCIADO_LENGTH:
            return []
        if len(alternatives) < MIN_ALTERNATIVES:
            return []

        # The answer label only counts after the alternatives
        answer_match = LABELED_ANSWER_PATTERN.search(
            text, alternatives_match.end(1)
        )
        return [Candidate(
            enunciado=enunciado,
            alternatives=alternatives,
            answer=answer_match.group(1).upper() if answer_match else UNKNOWN_ANSWER,
            theme=theme,
            subtheme=subtheme,
        )]

    @staticmethod
    def _parse_alternatives(alternatives_text: str) -> dict[str, str]:
        alternatives: dict[str, str] = {}

        for pattern in LABELED_ALTERNATIVE_PATTERNS:
            for match in pattern.finditer(alternatives_text):
                letter = match.group(1).upper()
                text = _clean_alternative(match.group(2))
                if letter not in alternatives and text:
                    alternatives[letter] = text
            if len(alternatives) >= MIN_ALTERNATIVES:
                return alternatives

        for part in LETTER_SPLIT_PATTERN.split(alternatives_text):
            match = LETTER_PART_PATTERN.match(part)
            if match:
                text = _clean_alternative(match.group(2))
                if text:
                    alternatives.setdefault(match.group(1).upper(), text)

        return alternatives


# ─── Question Numbers ─────────────────────────────────────────────────────────

# "12." or "12)" at the start of a line, followed by an upper-case letter
NUMBERED_START_PATTERN = re.compile(
    r"(?:^|\n)\s*(\d{1,3})\s*[\.\)]\s*(?=[A-ZÀ-Ú])", re.MULTILINE
)
# "QUESTÃO 12", "Questão 01"
MARKER_START_PATTERN = re.compile(r"QUEST[ÃA]O\s*(\d{1,3})", re.IGNORECASE)


class QuestionNumberExtractor(Extractor):
    """
    Slices the document at every question start and hands each window to
    the generic block parser.
    """

    name = "question_numbers"

    def __init__(
        self,
        block_parser: Optional[TextBlockParser] = None,
        window_size: int = 3000,
    ):
        self.block_parser = block_parser or TextBlockParser()
        self.window_size = window_size

    def find_starts(self, text: str) -> list[tuple[int, int]]:
        """(position, question number) pairs, sorted and unique by position."""
        starts = [
            (m.start(), int(m.group(1)))
            for pattern in (NUMBERED_START_PATTERN, MARKER_START_PATTERN)
            for m in pattern.finditer(text)
        ]
        starts.sort(key=lambda s: s[0])

        unique: list[tuple[int, int]] = []
        for position, number in starts:
            if unique and unique[-1][0] == position:
                continue
            unique.append((position, number))
        return unique

    def try_extract(self, text: str) -> list[Candidate]:
        starts = self.find_starts(text)
        logger.debug(f"[{self.name}] {len(starts)} question start positions")

        candidates = []
        for i, (start, number) in enumerate(starts):
            if i < len(starts) - 1:
                end = starts[i + 1][0]
            else:
                end = min(start + self.window_size, len(text))

            candidate = self.block_parser.parse(text[start:end], number)
            if candidate is not None:
                candidates.append(candidate)
        return candidates


# ─── Alternative Blocks ───────────────────────────────────────────────────────

CONSECUTIVE_ALTERNATIVE_PATTERNS = [
    # (A) ... (B) ... (C)  or  A. ... B. ... C.
    re.compile(
        r"[\(\s]A\s*[\)\.][\s\S]{1,200}[\(\s]B\s*[\)\.][\s\S]{1,200}[\(\s]C\s*[\)\.]",
        re.IGNORECASE,
    ),
    # A Texto / B Texto / C Texto on consecutive lines
    re.compile(
        r"\nA\s+[A-ZÀ-Ú][^\n]+\n+B\s+[A-ZÀ-Ú][^\n]+\n+C\s+[A-ZÀ-Ú]",
        re.IGNORECASE,
    ),
]


class AlternativeBlockExtractor(Extractor):
    """
    Anchors on runs of consecutive A/B/C alternatives and rebuilds the
    surrounding question window from the text before and after them.
    """

    name = "alternative_blocks"

    def __init__(
        self,
        block_parser: Optional[TextBlockParser] = None,
        lookbehind: int = 1500,
        lookahead: int = 2000,
    ):
        self.block_parser = block_parser or TextBlockParser()
        self.lookbehind = lookbehind
        self.lookahead = lookahead

    def try_extract(self, text: str) -> list[Candidate]:
        candidates = []
        for pattern in CONSECUTIVE_ALTERNATIVE_PATTERNS:
            for match in pattern.finditer(text):
                start = max(0, match.start() - self.lookbehind)
                end = min(match.start() + self.lookahead, len(text))
                candidate = self.block_parser.parse(text[start:end])
                if candidate is not None:
                    candidates.append(candidate)
        return candidates


# ─── Chain ────────────────────────────────────────────────────────────────────


@dataclass
class ChainResult:
    """Candidates of the winning strategy (empty when every strategy missed)."""
    strategy: Optional[str] = None
    candidates: list[Candidate] = field(default_factory=list)


def default_extractors(
    theme_classifier: Optional[ThemeClassifier] = None,
    question_window: int = 3000,
    lookbehind: int = 1500,
    lookahead: int = 2000,
) -> tuple[Extractor, ...]:
    """The standard strategy order."""
    theme_classifier = theme_classifier or ThemeClassifier()
    block_parser = TextBlockParser(theme_classifier)
    return (
        StructuredFormatExtractor(theme_classifier),
        LabeledFormatExtractor(theme_classifier),
        QuestionNumberExtractor(block_parser, window_size=question_window),
        AlternativeBlockExtractor(
            block_parser, lookbehind=lookbehind, lookahead=lookahead
        ),
    )


class ExtractionChain:
    """Runs strategies in order until one yields candidates."""

    def __init__(self, extractors: Optional[tuple[Extractor, ...]] = None):
        self.extractors = extractors if extractors is not None else default_extractors()

    def run(self, text: str) -> ChainResult:
        for extractor in self.extractors:
            candidates = extractor.try_extract(text)
            logger.info(f"Strategy {extractor.name}: {len(candidates)} candidates")
            if candidates:
                return ChainResult(strategy=extractor.name, candidates=candidates)
        return ChainResult()
