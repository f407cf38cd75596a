"""
Extraction Engine
=================
Main orchestrator that combines normalization, answer-key resolution,
the extraction chain, classification, validation and deduplication into
a complete question extraction pipeline.

Usage:
    engine = ExtractionEngine(config)
    result = engine.extract(text, file_name="prova_cesgranrio_2018.txt")
    # result is an ExtractionResult with questions + stats

Architecture:
    text → TextNormalizer → GabaritoResolver + ExtractionChain →
    Candidates → Classifiers → QualityValidator → Deduplicator →
    acceptance filter → ExtractionResult (JSON)

Each call is synchronous and independent; the engine keeps no
per-document state, so one instance can serve concurrent callers.
"""

from __future__ import annotations

import logging
import math
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .classifier import DisciplineClassifier, ThemeClassifier
from .dedup import Deduplicator
from .exceptions import InputValidationError, NoQuestionsFoundError
from .extractors import ExtractionChain, default_extractors
from .gabarito import GabaritoMap, GabaritoResolver
from .metadata import ExamMetadataDetector
from .models import (
    ANSWER_LETTERS,
    DEFAULT_THEME,
    UNKNOWN_ANSWER,
    Candidate,
    ExtractedQuestion,
    ExtractionResult,
    ExtractionStats,
    RawDocument,
)
from .normalizer import normalize_text, sanitize_file_name
from .taxonomy import (
    BOARD_OVERRIDES,
    DISCIPLINES,
    KNOWN_BOARDS,
    THEME_KEYWORDS,
    BoardOverride,
    Discipline,
    ThemeKeyword,
)
from .validator import MIN_ALTERNATIVES, QualityValidator

logger = logging.getLogger(__name__)

NO_QUESTIONS_MESSAGE = (
    "Nenhuma questão válida encontrada. O texto extraído pode estar "
    "corrompido. Tente converter o PDF para TXT antes de fazer upload."
)

# Output field caps
MAX_ENUNCIADO_CHARS = 10000
MAX_ALTERNATIVE_CHARS = 2000
MAX_THEME_CHARS = 200
MAX_BOARD_CHARS = 100


@dataclass
class ExtractorConfig:
    """Configuration for the extraction engine."""

    # Input limits
    min_text_length: int = 50
    max_text_length: int = 2_000_000
    max_filename_length: int = 255
    default_file_name: str = "document"

    # Acceptance filter
    min_score: int = 20
    min_enunciado_length: int = 15

    # Strategy windows (characters)
    question_window: int = 3000
    lookbehind: int = 1500
    lookahead: int = 2000

    # Taxonomies (read-only, shared)
    disciplines: tuple[Discipline, ...] = DISCIPLINES
    theme_keywords: tuple[ThemeKeyword, ...] = THEME_KEYWORDS
    boards: tuple[str, ...] = KNOWN_BOARDS
    board_overrides: tuple[BoardOverride, ...] = BOARD_OVERRIDES

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None


class ExtractionEngine:
    """
    Main question extraction engine.

    Orchestrates the full pipeline:
        1. Input validation and file name sanitation
        2. Text normalization
        3. Board / year detection and gabarito resolution
        4. Extraction chain (first strategy with results wins)
        5. Gabarito merge, classification and scoring
        6. Deduplication and acceptance filter

    Thread-safe for parallel document processing.
    """

    def __init__(self, config: Optional[ExtractorConfig] = None):
        self.config = config or ExtractorConfig()
        self._setup_logging()

        theme_classifier = ThemeClassifier(self.config.theme_keywords)
        self.chain = ExtractionChain(default_extractors(
            theme_classifier,
            question_window=self.config.question_window,
            lookbehind=self.config.lookbehind,
            lookahead=self.config.lookahead,
        ))
        self.gabarito_resolver = GabaritoResolver()
        self.discipline_classifier = DisciplineClassifier(self.config.disciplines)
        self.metadata_detector = ExamMetadataDetector(
            self.config.boards, self.config.board_overrides
        )
        self.validator = QualityValidator()
        self.deduplicator = Deduplicator()

    def _setup_logging(self):
        """Configure logging based on config."""
        log_level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        # Configure root logger for the package
        package_logger = logging.getLogger("question_extractor")
        package_logger.setLevel(log_level)

        formatter = logging.Formatter(
            "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        # Console handler
        if not package_logger.handlers:
            console = logging.StreamHandler()
            console.setLevel(log_level)
            console.setFormatter(formatter)
            package_logger.addHandler(console)

        # File handler
        if self.config.log_file:
            log_path = Path(self.config.log_file)
            already_attached = any(
                isinstance(h, logging.FileHandler)
                and Path(h.baseFilename) == log_path.absolute()
                for h in package_logger.handlers
            )
            if not already_attached:
                log_path.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(log_path, encoding="utf-8")
                file_handler.setLevel(log_level)
                file_handler.setFormatter(formatter)
                package_logger.addHandler(file_handler)

    # ─── Input ────────────────────────────────────────────────────────────

    def validate_input(self, text: Any, file_name: Optional[str]) -> RawDocument:
        """
        Reject malformed input before any parsing begins.

        Raises:
            InputValidationError: Missing, non-string, too short or too long text.
        """
        if not text or not isinstance(text, str):
            raise InputValidationError("Texto é obrigatório")

        if len(text) < self.config.min_text_length:
            raise InputValidationError("Texto muito curto")

        if len(text) > self.config.max_text_length:
            raise InputValidationError("Texto muito grande. Máximo 2MB.")

        if file_name is not None and not isinstance(file_name, str):
            raise InputValidationError("Nome de arquivo inválido")

        safe_name = sanitize_file_name(
            file_name or self.config.default_file_name,
            self.config.max_filename_length,
        )
        return RawDocument(text=text, file_name=safe_name)

    # ─── Pipeline ─────────────────────────────────────────────────────────

    def extract(self, text: Any, file_name: Optional[str] = None) -> ExtractionResult:
        """
        Extract structured questions from document text.

        Args:
            text: Plain text of the exam document.
            file_name: Original upload name, used for board/year/discipline hints.

        Returns:
            ExtractionResult with accepted questions and aggregate stats.

        Raises:
            InputValidationError: If the input is rejected.
            NoQuestionsFoundError: If nothing survives the acceptance filter.
        """
        document = self.validate_input(text, file_name)

        start_time = time.time()
        logger.info(
            f"Starting extraction of: {document.file_name} "
            f"({len(document.text)} chars)"
        )

        # ── Step 1: Normalize ─────────────────────────────────────────
        normalized = normalize_text(document.text)

        # ── Step 2: Document metadata + answer key ────────────────────
        board = self.metadata_detector.detect_board(normalized, document.file_name)
        year = self.metadata_detector.detect_year(normalized, document.file_name)
        gabarito = self.gabarito_resolver.resolve(normalized)

        # ── Step 3: Extraction chain ──────────────────────────────────
        logger.info("Phase 1: Extraction chain")
        chain_result = self.chain.run(normalized)
        candidates = self.merge_gabarito(chain_result.candidates, gabarito)

        # ── Step 4: Enrichment + scoring ──────────────────────────────
        logger.info("Phase 2: Classification and scoring")
        questions = []
        for candidate in candidates:
            if candidate.filled_alternatives < MIN_ALTERNATIVES:
                logger.debug(
                    f"Dropping candidate with {candidate.filled_alternatives} "
                    f"alternatives"
                )
                continue
            questions.append(
                self.enrich(candidate, document.file_name, board, year)
            )

        # ── Step 5: Dedup + acceptance filter ─────────────────────────
        logger.info("Phase 3: Deduplication and filtering")
        unique = self.deduplicator.deduplicate(questions)
        accepted = [
            q for q in unique
            if q.score_qualidade >= self.config.min_score
            and len(q.enunciado) > self.config.min_enunciado_length
        ]

        if not accepted:
            logger.warning(f"No valid questions found in {document.file_name}")
            raise NoQuestionsFoundError(NO_QUESTIONS_MESSAGE)

        self.validator.report(accepted)

        result = ExtractionResult(
            questions=accepted,
            stats=self.compute_stats(accepted, chain_result.strategy or ""),
        )

        elapsed = time.time() - start_time
        logger.info(
            f"Extraction complete in {elapsed:.2f}s — "
            f"{len(accepted)} questions via {chain_result.strategy}"
        )
        return result

    def merge_gabarito(
        self, candidates: list[Candidate], gabarito: GabaritoMap
    ) -> list[Candidate]:
        """
        Fill unresolved answers from the answer key.

        Candidates are looked up by their own question number, or by their
        1-based position when the strategy could not tell the number.
        """
        if not gabarito:
            return list(candidates)

        merged = []
        for position, candidate in enumerate(candidates, start=1):
            number = (
                candidate.sequence_number
                if candidate.sequence_number is not None else position
            )
            if candidate.answer == UNKNOWN_ANSWER and number in gabarito:
                candidate = candidate.model_copy(
                    update={"answer": gabarito[number]}
                )
            merged.append(candidate)
        return merged

    def enrich(
        self,
        candidate: Candidate,
        file_name: str,
        board: str,
        year: Optional[int],
    ) -> ExtractedQuestion:
        """Classify and score a candidate into an output question."""
        validation = self.validator.validate(candidate)

        answer = (candidate.answer or UNKNOWN_ANSWER).strip().upper()
        if answer not in ANSWER_LETTERS:
            answer = UNKNOWN_ANSWER

        theme = candidate.theme or DEFAULT_THEME
        discipline = self.discipline_classifier.classify(
            candidate.enunciado, theme, file_name
        )
        subtheme = candidate.subtheme[:MAX_THEME_CHARS] if candidate.subtheme else None

        return ExtractedQuestion(
            id=str(uuid.uuid4()),
            numero=candidate.sequence_number,
            enunciado=candidate.enunciado.strip()[:MAX_ENUNCIADO_CHARS],
            alternativa_a=candidate.alternative("A").strip()[:MAX_ALTERNATIVE_CHARS],
            alternativa_b=candidate.alternative("B").strip()[:MAX_ALTERNATIVE_CHARS],
            alternativa_c=candidate.alternative("C").strip()[:MAX_ALTERNATIVE_CHARS],
            alternativa_d=candidate.alternative("D").strip()[:MAX_ALTERNATIVE_CHARS],
            alternativa_e=candidate.alternative("E").strip()[:MAX_ALTERNATIVE_CHARS],
            resposta_correta=answer,
            disciplina=discipline,
            tema=theme[:MAX_THEME_CHARS],
            subtema=subtheme,
            banca=(candidate.exam_board or board)[:MAX_BOARD_CHARS],
            ano_referencia=candidate.year or year,
            score_qualidade=validation.score,
            nivel_confianca=validation.confidence_tier,
            issues=validation.issues,
            formato=candidate.format,
        )

    @staticmethod
    def compute_stats(
        questions: list[ExtractedQuestion], strategy: str
    ) -> ExtractionStats:
        total = len(questions)
        avg = sum(q.score_qualidade for q in questions) / total if total else 0
        return ExtractionStats(
            total=total,
            gabarito_identified=sum(1 for q in questions if q.has_answer),
            avg_quality=math.floor(avg + 0.5),
            extraction_method=strategy,
        )

    # ─── Inspection ───────────────────────────────────────────────────────

    def inspect(self, text: Any, file_name: Optional[str] = None) -> dict:
        """Document-level findings without building output questions."""
        document = self.validate_input(text, file_name)
        normalized = normalize_text(document.text)
        chain_result = self.chain.run(normalized)
        return {
            "file_name": document.file_name,
            "characters": len(normalized),
            "banca": self.metadata_detector.detect_board(
                normalized, document.file_name
            ),
            "ano_referencia": self.metadata_detector.detect_year(
                normalized, document.file_name
            ),
            "gabarito": self.gabarito_resolver.resolve(normalized),
            "strategy": chain_result.strategy,
            "candidates": len(chain_result.candidates),
        }
