"""
Exceptions
==========
Errors surfaced by the extraction pipeline to its callers.

Each error carries the HTTP-style status code the caller maps to UI
feedback. Extraction misses (a strategy or a block failing its own
acceptance rules) are never raised; they simply yield no candidates.
"""

from __future__ import annotations

from typing import Optional


class ExtractionError(Exception):
    """Base error for every failure reported to the caller."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {"success": False, "error": self.message}


class InputValidationError(ExtractionError):
    """Request rejected before any parsing begins (400)."""

    status_code = 400


class NoQuestionsFoundError(ExtractionError):
    """Every strategy ran but nothing survived the acceptance filter (400)."""

    status_code = 400


class AuthenticationError(ExtractionError):
    """Missing or rejected caller credentials (401)."""

    status_code = 401
