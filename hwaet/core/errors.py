"""
Exception hierarchy for the glossing pipeline.
"""

from typing import Optional

from hwaet.core.constants import ERROR_ANALYSIS_FAILED


class HwaetError(Exception):
    """Base class for all errors raised by the package."""


class ConfigurationError(HwaetError):
    """The oracle cannot be called with the current configuration."""


class OracleTransportError(HwaetError):
    """The request to the oracle failed before a usable body came back."""


class AnnotationError(HwaetError):
    """The oracle answered, but not with something we can use."""


class SegmentAnnotationError(AnnotationError):
    """A single segment of a multi-segment run could not be annotated."""

    def __init__(self, message: str, segment_index: Optional[int] = None):
        super().__init__(message)
        self.segment_index = segment_index


class DeepAnalysisError(AnnotationError):
    """Single-token re-analysis returned no text or unusable structure."""


class ImportValidationError(HwaetError):
    """An imported document is not a gloss token array."""


class AnalysisFailed(HwaetError):
    """
    User-facing wrapper for any annotation pipeline failure.

    The root cause is kept on ``__cause__`` for logging.
    """

    def __init__(self, message: str = ERROR_ANALYSIS_FAILED):
        super().__init__(message)
