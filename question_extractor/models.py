"""
Data Models
===========
Pydantic models for the extraction pipeline.
Output models serialize to the JSON shape consumed by the review UI.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

# ─── Constants ────────────────────────────────────────────────────────────────

ANSWER_LETTERS = ("A", "B", "C", "D", "E")
UNKNOWN_ANSWER = "?"
NOT_IDENTIFIED = "Não identificada"
DEFAULT_THEME = "Geral"

AnswerLetter = Literal["A", "B", "C", "D", "E", "?"]


# ─── Enums ────────────────────────────────────────────────────────────────────


class ConfidenceTier(str, Enum):
    """Confidence tier derived from the quality score."""
    ALTO = "alto"
    MEDIO = "medio"
    BAIXO = "baixo"


class QuestionFormat(str, Enum):
    """Layout a question was recognized in."""
    PADRAO1 = "padrao1"  # labeled block without BANCA/ANO
    PADRAO2 = "padrao2"  # labeled block with BANCA and/or ANO
    DESCONHECIDO = "desconhecido"


# ─── Input ────────────────────────────────────────────────────────────────────


class RawDocument(BaseModel):
    """A document accepted for extraction, with its sanitized file name."""
    model_config = ConfigDict(frozen=True)

    text: str
    file_name: str


# ─── Candidate ────────────────────────────────────────────────────────────────


class Candidate(BaseModel):
    """
    A provisional question produced by one extractor invocation.
    Unvalidated and unscored.
    """
    enunciado: str
    alternatives: dict[str, str] = Field(
        default_factory=dict,
        description="Option letter (A-E) -> option text",
    )
    answer: str = UNKNOWN_ANSWER
    theme: str = DEFAULT_THEME
    subtheme: Optional[str] = None
    exam_board: Optional[str] = None
    year: Optional[int] = None
    sequence_number: Optional[int] = None
    format: QuestionFormat = QuestionFormat.DESCONHECIDO

    def alternative(self, letter: str) -> str:
        return self.alternatives.get(letter, "")

    @computed_field
    @property
    def filled_alternatives(self) -> int:
        """Number of non-empty alternatives among A-E."""
        return sum(
            1 for letter in ANSWER_LETTERS
            if self.alternative(letter).strip()
        )


# ─── Validation ───────────────────────────────────────────────────────────────


class ValidationResult(BaseModel):
    """Deterministic quality assessment of a single candidate."""
    score: int = Field(ge=0, le=100)
    confidence_tier: ConfidenceTier
    issues: list[str] = Field(default_factory=list)


# ─── Output ───────────────────────────────────────────────────────────────────


class ExtractedQuestion(BaseModel):
    """
    Pipeline output unit: a candidate enriched with classification,
    validation and a generated identifier.
    """
    id: str
    numero: Optional[int] = None
    enunciado: str
    alternativa_a: str = ""
    alternativa_b: str = ""
    alternativa_c: str = ""
    alternativa_d: str = ""
    alternativa_e: str = ""
    resposta_correta: AnswerLetter = UNKNOWN_ANSWER
    disciplina: str = NOT_IDENTIFIED
    tema: str = DEFAULT_THEME
    subtema: Optional[str] = None
    nivel: Literal["facil", "medio", "dificil"] = "medio"
    banca: str = NOT_IDENTIFIED
    explicacao: str = ""
    ano_referencia: Optional[int] = None
    score_qualidade: int = Field(ge=0, le=100)
    nivel_confianca: ConfidenceTier
    issues: list[str] = Field(default_factory=list)
    formato: QuestionFormat = QuestionFormat.DESCONHECIDO

    @property
    def has_answer(self) -> bool:
        return self.resposta_correta != UNKNOWN_ANSWER


class ExtractionStats(BaseModel):
    """Aggregate statistics over the accepted questions."""
    total: int = 0
    gabarito_identified: int = 0
    avg_quality: int = 0
    with_explanation: int = 0
    extraction_method: str = ""


class ExtractionResult(BaseModel):
    """
    Complete output of an extraction run.
    This is the top-level JSON structure returned to the caller.
    """
    success: bool = True
    questions: list[ExtractedQuestion] = Field(default_factory=list)
    stats: ExtractionStats = Field(default_factory=ExtractionStats)
