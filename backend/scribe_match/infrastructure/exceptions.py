"""
Custom Exceptions for Scribe Match

Hierarchical exception classes for proper error handling across layers.
"""

from typing import Optional, Dict, Any


class ScribeMatchError(Exception):
    """Base exception for all Scribe Match errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.original_error = original_error

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details
        }


class ValidationError(ScribeMatchError):
    """Raised when input validation fails."""
    pass


class NotFoundError(ScribeMatchError):
    """Raised when a requested session or candidate is not found."""

    def __init__(
        self,
        message: str,
        resource: Optional[str] = None,
        identifier: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if resource:
            details["resource"] = resource
        if identifier:
            details["id"] = identifier
        super().__init__(message, details, original_error)


class AvailabilityProbeError(ScribeMatchError):
    """Raised when the availability calendar cannot be consulted."""

    def __init__(
        self,
        message: str,
        scribe_id: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if scribe_id:
            details["scribe_id"] = scribe_id
        super().__init__(message, details, original_error)


class CandidateEvaluationError(ScribeMatchError):
    """Raised when a single candidate cannot be scored."""

    def __init__(
        self,
        message: str,
        scribe_id: Optional[str] = None,
        stage: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if scribe_id:
            details["scribe_id"] = scribe_id
        if stage:
            details["stage"] = stage
        super().__init__(message, details, original_error)
        self.scribe_id = scribe_id


class IneligibleCandidateError(CandidateEvaluationError):
    """Raised when a candidate fails a hard eligibility constraint."""
    pass


class OrchestratorRunError(ScribeMatchError):
    """Raised when a whole match run cannot be completed."""

    def __init__(
        self,
        message: str,
        generation: Optional[int] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if generation is not None:
            details["generation"] = generation
        super().__init__(message, details, original_error)


class SessionClosedError(ScribeMatchError):
    """Raised when a closed matching session is asked to do work."""
    pass


class ConfigurationError(ScribeMatchError):
    """Raised when configuration is missing or invalid."""

    def __init__(
        self,
        message: str,
        missing_keys: Optional[list] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if missing_keys:
            details["missing_keys"] = missing_keys
        super().__init__(message, details, original_error)
