"""
Output processing for model responses.

Scanner/repair, resilient parser, result builder and confidence aggregation.
"""

from .scanner import (
    ScanState,
    find_balanced_span,
    repair_truncated_json,
    scan_json,
    strip_code_fences,
)
from .confidence import (
    HIGH_CONFIDENCE_THRESHOLD,
    LOW_CONFIDENCE_THRESHOLD,
    ConfidenceSummary,
    aggregate_confidence,
    calculate_data_quality_score,
)
from .builder import ResultBuilder, create_fallback_result, merge_category
from .parser import ParsedResponse, ResponseParser

__all__ = [
    # Scanner
    "ScanState",
    "find_balanced_span",
    "repair_truncated_json",
    "scan_json",
    "strip_code_fences",
    # Confidence
    "HIGH_CONFIDENCE_THRESHOLD",
    "LOW_CONFIDENCE_THRESHOLD",
    "ConfidenceSummary",
    "aggregate_confidence",
    "calculate_data_quality_score",
    # Builder
    "ResultBuilder",
    "create_fallback_result",
    "merge_category",
    # Parser
    "ParsedResponse",
    "ResponseParser",
]
