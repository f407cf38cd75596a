"""
Question Extractor
==================
Extraction and classification pipeline for multiple-choice exam questions
recovered from plain document text.

Architecture:
    - Text Normalizer: Canonicalizes line endings, whitespace and control chars
    - Gabarito Resolver: Builds the question-number -> answer-letter map
    - Extraction Chain: Ordered fallback strategies, first non-empty wins
    - Classifiers: Theme, discipline, exam board and year inference
    - Quality Validator: Scores each question 0-100 with a confidence tier
    - Deduplicator: Collapses near-duplicate questions

Version: 1.0.0
"""

__version__ = "1.0.0"
