"""
Intake Analyzer - Claude-backed analysis of business research data.

Client, prompt builders and the orchestration engine.
"""

from .client import (
    AnalysisResponse,
    ClaudeAPIError,
    ClaudeClient,
    ClaudeErrorType,
    classify_error,
    estimate_cost,
    get_claude_client,
    is_claude_ready,
)
from .prompts import build_data_context, build_system_prompt, estimate_prompt_tokens
from .engine import IntakeAnalyzer, analyze_intake_data, can_analyze

__all__ = [
    # Client
    "AnalysisResponse",
    "ClaudeAPIError",
    "ClaudeClient",
    "ClaudeErrorType",
    "classify_error",
    "estimate_cost",
    "get_claude_client",
    "is_claude_ready",
    # Prompts
    "build_data_context",
    "build_system_prompt",
    "estimate_prompt_tokens",
    # Engine
    "IntakeAnalyzer",
    "analyze_intake_data",
    "can_analyze",
]
