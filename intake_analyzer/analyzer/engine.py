"""
Intake Analysis Engine

Orchestrates a single analysis run:
1. Short-circuit to defaults when Claude is not configured
2. Build the system prompt and data context, estimate cost
3. Call Claude (retries live in the client)
4. Parse (repairing truncated output) and merge over defaults

The engine never fails: every error path converges on a fallback result.
"""

import logging
import time
from dataclasses import replace
from typing import Any, Dict, Optional, Tuple

from ..models import AnalysisInput, AnalyzeResult, TokenUsage
from ..output import ResponseParser, ResultBuilder, create_fallback_result
from ..utils.config import Settings, get_settings
from .client import AnalysisResponse, ClaudeClient, estimate_cost, get_claude_client
from .prompts import build_data_context, build_system_prompt, estimate_prompt_tokens

logger = logging.getLogger(__name__)

NOT_CONFIGURED_ERROR = "ANTHROPIC_API_KEY not configured"
CLIENT_FAILED_ERROR = "Claude API call failed"
PARSE_FAILED_ERROR = "Failed to parse AI response"
TRUNCATION_WARNING = "AI response was truncated (max_tokens reached). Some insights may be incomplete."
NO_RESEARCH_DATA_REASON = "No research data available. Complete at least one research task first."


class IntakeAnalyzer:
    """
    Runs the intake analysis pipeline for one session at a time.

    Usage:
        analyzer = IntakeAnalyzer()
        result = await analyzer.analyze(analysis_input)
        fields = result.data.categories
    """

    def __init__(
        self,
        client: Optional[ClaudeClient] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.client = client or get_claude_client()
        self.parser = ResponseParser(ResultBuilder(self.settings))

    async def analyze(self, data: AnalysisInput) -> AnalyzeResult:
        """
        Analyze research data for one session.

        Args:
            data: Evidence bundle for the session

        Returns:
            AnalyzeResult, always with success=True. Failures are reported
            inside the result (model "fallback", warnings, errors).
        """
        start_time = time.perf_counter()

        if not self.client.is_configured:
            logger.info("Claude API not configured, using fallback analysis")
            return AnalyzeResult(
                success=True,
                data=create_fallback_result(data, NOT_CONFIGURED_ERROR),
                estimated_cost=0.0,
                error=NOT_CONFIGURED_ERROR,
            )

        # Build prompts
        system_prompt = build_system_prompt()
        data_context = build_data_context(data, self.settings.MAX_EVIDENCE_ITEMS)

        # Estimate tokens and cost
        estimated_input_tokens = estimate_prompt_tokens(system_prompt, data_context)
        estimated_output_tokens = self.settings.ESTIMATED_OUTPUT_TOKENS
        estimated_cost = estimate_cost(estimated_input_tokens, estimated_output_tokens, self.client.model)

        logger.info(f"Starting AI analysis for session {data.session_id}")
        logger.info(
            f"Estimated tokens: {estimated_input_tokens} input, {estimated_output_tokens} output "
            f"(${estimated_cost:.4f})"
        )

        response = await self._call_client(system_prompt, data_context)
        processing_time_ms = int((time.perf_counter() - start_time) * 1000)

        if not response.success:
            error = response.error or CLIENT_FAILED_ERROR
            logger.error(f"Claude API call failed for {data.session_id}: {error}")
            return AnalyzeResult(
                success=True,
                data=create_fallback_result(data, error),
                estimated_cost=0.0,
                error=error,
            )

        content = response.content
        if response.was_truncated:
            logger.warning("Claude response was truncated (max_tokens), parser will repair it")

        logger.info(f"Claude response: {len(content)} chars, stop_reason={response.stop_reason}")

        result = self.parser.parse(content, data, model=response.model)

        if result is None:
            fallback = create_fallback_result(data, PARSE_FAILED_ERROR)
            if response.was_truncated:
                fallback.warnings.append(TRUNCATION_WARNING)
            return AnalyzeResult(
                success=True,
                data=fallback,
                estimated_cost=estimated_cost,
                error=PARSE_FAILED_ERROR,
            )

        warnings = list(result.warnings)
        if response.was_truncated:
            warnings.append(TRUNCATION_WARNING)

        result = replace(
            result,
            model=response.model,
            token_usage=response.usage,
            processing_time_ms=processing_time_ms,
            warnings=warnings,
        )
        actual_cost = estimate_cost(
            response.usage.input_tokens, response.usage.output_tokens, response.model
        )

        logger.info(f"AI analysis completed in {processing_time_ms}ms")
        logger.info(
            f"Actual tokens: {response.usage.input_tokens} input, {response.usage.output_tokens} output "
            f"(${actual_cost:.4f})"
        )
        logger.info(f"Overall confidence: {result.overall_confidence * 100:.1f}%")

        return AnalyzeResult(success=True, data=result, estimated_cost=actual_cost)

    async def _call_client(self, system_prompt: str, data_context: str) -> AnalysisResponse:
        """Call Claude, converting anything the client lets escape into a failed response."""
        try:
            return await self.client.analyze_research_data(
                system_prompt,
                data_context,
                temperature=self.settings.CLAUDE_TEMPERATURE,
            )
        except Exception as e:
            logger.error(f"Unexpected error calling Claude: {e}")
            return AnalysisResponse(
                content="",
                usage=TokenUsage(),
                model=self.client.model,
                stop_reason="error",
                success=False,
                error=str(e) or CLIENT_FAILED_ERROR,
            )


async def analyze_intake_data(data: AnalysisInput) -> AnalyzeResult:
    """Analyze research data with the shared client and settings."""
    return await IntakeAnalyzer().analyze(data)


def can_analyze(results: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Check whether a research session has enough data to analyze.

    Args:
        results: Research results keyed by evidence kind (camelCase)

    Returns:
        (can_analyze, reason) - reason is None when analysis can run
    """
    has_data = any(results.get(key) for key in ("gbp", "websiteCrawl", "sitemap"))
    if not has_data:
        return False, NO_RESEARCH_DATA_REASON
    return True, None
