"""
Intake Analyzer - Data Models

Shared data models used across the system.
"""

from .analysis import (
    EVIDENCE_KEYS,
    AnalysisInput,
    AnalysisResult,
    AnalyzeResult,
    CategoryFields,
    InferenceSource,
    InferredField,
    TokenUsage,
)

__all__ = [
    "EVIDENCE_KEYS",
    "AnalysisInput",
    "AnalysisResult",
    "AnalyzeResult",
    "CategoryFields",
    "InferenceSource",
    "InferredField",
    "TokenUsage",
]
