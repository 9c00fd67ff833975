"""
Core Package.

This package provides the data model, configuration, errors and shared
helpers for the hwaet package.
"""

from hwaet.core.errors import (
    AnalysisFailed,
    AnnotationError,
    ConfigurationError,
    DeepAnalysisError,
    HwaetError,
    ImportValidationError,
    OracleTransportError,
    SegmentAnnotationError,
)
from hwaet.core.models import (
    DeepAnalysisResult,
    GlossConfig,
    Source,
    Token,
    TokenUpdate,
    is_line_break_text,
)
from hwaet.core.utils import ensure_dir_exists, extract_json_text, get_file_contents, write_file_contents

__all__ = [
    # Models
    "GlossConfig",
    "Source",
    "Token",
    "TokenUpdate",
    "DeepAnalysisResult",
    "is_line_break_text",
    # Errors
    "HwaetError",
    "ConfigurationError",
    "OracleTransportError",
    "AnnotationError",
    "SegmentAnnotationError",
    "DeepAnalysisError",
    "ImportValidationError",
    "AnalysisFailed",
    # Utilities
    "ensure_dir_exists",
    "extract_json_text",
    "get_file_contents",
    "write_file_contents",
]
