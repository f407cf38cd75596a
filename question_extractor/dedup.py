"""
Deduplicator
============
Collapses near-duplicate questions, keeping the best-scored variant.

Two questions are duplicates when the first 60 characters of their
lower-cased, whitespace-collapsed enunciados are equal. Distinct questions
that share a long common prefix (e.g. the same instructions) therefore
collapse too.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from .models import ExtractedQuestion

logger = logging.getLogger(__name__)

KEY_LENGTH = 60
MIN_KEY_LENGTH = 15

_WHITESPACE = re.compile(r"\s+")


def dedup_key(enunciado: str) -> Optional[str]:
    """Comparison key, or None when the enunciado is too short to compare."""
    key = _WHITESPACE.sub(" ", enunciado.lower()).strip()[:KEY_LENGTH]
    return key if len(key) >= MIN_KEY_LENGTH else None


class Deduplicator:
    """One question per key; higher score wins, ties keep the first seen."""

    def deduplicate(
        self, questions: list[ExtractedQuestion]
    ) -> list[ExtractedQuestion]:
        seen: dict[str, ExtractedQuestion] = {}
        dropped = 0

        for question in questions:
            key = dedup_key(question.enunciado)
            if key is None:
                dropped += 1
                continue

            current = seen.get(key)
            if current is None or question.score_qualidade > current.score_qualidade:
                seen[key] = question

        removed = len(questions) - dropped - len(seen)
        if removed or dropped:
            logger.info(
                f"Deduplication removed {removed} duplicates and "
                f"{dropped} non-comparable questions"
            )
        return list(seen.values())
