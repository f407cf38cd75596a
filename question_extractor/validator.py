"""
Quality Validator
=================
Deterministic quality scoring for question candidates.

Every candidate starts at 100 and loses points per issue:
    - Enunciado missing or shorter than 15 chars      -30
    - Fewer than 3 non-empty alternatives             -12 per missing one
    - Answer is the unknown marker "?"                -10
    - Answer is anything else outside A-E             -25

The score is clamped to [0, 100] and mapped to a confidence tier.
Never raises: every candidate gets a result.
"""

from __future__ import annotations

import logging
from collections import Counter

from .models import (
    ANSWER_LETTERS,
    UNKNOWN_ANSWER,
    Candidate,
    ConfidenceTier,
    ExtractedQuestion,
    ValidationResult,
)

logger = logging.getLogger(__name__)

MIN_ENUNCIADO_LENGTH = 15
MIN_ALTERNATIVES = 3

SHORT_ENUNCIADO_PENALTY = 30
MISSING_ALTERNATIVE_PENALTY = 12
UNKNOWN_ANSWER_PENALTY = 10
INVALID_ANSWER_PENALTY = 25

HIGH_CONFIDENCE_SCORE = 70
MEDIUM_CONFIDENCE_SCORE = 45


def confidence_for(score: int) -> ConfidenceTier:
    """Confidence tier as a function of the score alone."""
    if score >= HIGH_CONFIDENCE_SCORE:
        return ConfidenceTier.ALTO
    if score >= MEDIUM_CONFIDENCE_SCORE:
        return ConfidenceTier.MEDIO
    return ConfidenceTier.BAIXO


class QualityValidator:
    """Scores candidates and summarizes accepted questions."""

    def validate(self, candidate: Candidate) -> ValidationResult:
        issues: list[str] = []
        score = 100

        if not candidate.enunciado or len(candidate.enunciado) < MIN_ENUNCIADO_LENGTH:
            issues.append("enunciado curto")
            score -= SHORT_ENUNCIADO_PENALTY

        filled = candidate.filled_alternatives
        if filled < MIN_ALTERNATIVES:
            missing = len(ANSWER_LETTERS) - filled
            issues.append(f"{missing} alternativa(s) ausente(s)")
            score -= missing * MISSING_ALTERNATIVE_PENALTY

        answer = (candidate.answer or "").strip().upper()
        if answer not in ANSWER_LETTERS:
            if answer == UNKNOWN_ANSWER:
                issues.append("gabarito não identificado")
                score -= UNKNOWN_ANSWER_PENALTY
            else:
                issues.append("resposta inválida")
                score -= INVALID_ANSWER_PENALTY

        score = max(0, min(100, score))
        return ValidationResult(
            score=score,
            confidence_tier=confidence_for(score),
            issues=issues,
        )

    def report(self, questions: list[ExtractedQuestion]) -> None:
        """Log a summary of the accepted questions."""
        if not questions:
            logger.warning("No questions to report")
            return

        tiers = Counter(q.nivel_confianca.value for q in questions)
        issues = Counter(issue for q in questions for issue in q.issues)
        answered = sum(1 for q in questions if q.has_answer)

        logger.info("=" * 60)
        logger.info("EXTRACTION REPORT")
        logger.info("=" * 60)
        logger.info(f"Questions Accepted: {len(questions)}")
        logger.info(f"Answers Identified: {answered}")
        for tier in ConfidenceTier:
            logger.info(f"Confidence {tier.value}: {tiers.get(tier.value, 0)}")

        if issues:
            logger.info("Issue Breakdown:")
            for issue, count in sorted(issues.items()):
                logger.info(f"  • {issue}: {count}")

        logger.info("=" * 60)
