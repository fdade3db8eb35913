"""
Claude API Client for Intake Analysis

Provides a robust client for interacting with Claude API,
including error classification, retry logic, and cost tracking.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Optional

import anthropic

from ..models import TokenUsage
from ..utils.config import Settings, get_settings

logger = logging.getLogger(__name__)


CLAUDE_MODELS = {
    "sonnet": "claude-sonnet-4-20250514",
    "opus": "claude-opus-4-20250514",
    "haiku": "claude-3-5-haiku-20241022",
}

# USD per million tokens
TOKEN_COSTS: Dict[str, Dict[str, float]] = {
    CLAUDE_MODELS["sonnet"]: {"input": 3.0, "output": 15.0},
    CLAUDE_MODELS["opus"]: {"input": 15.0, "output": 75.0},
    CLAUDE_MODELS["haiku"]: {"input": 0.8, "output": 4.0},
}


def estimate_cost(input_tokens: int, output_tokens: int, model: Optional[str] = None) -> float:
    """
    Estimate request cost in USD.

    Unknown models are priced as Sonnet.
    """
    costs = TOKEN_COSTS.get(model or CLAUDE_MODELS["sonnet"], TOKEN_COSTS[CLAUDE_MODELS["sonnet"]])
    input_cost = (input_tokens / 1_000_000) * costs["input"]
    output_cost = (output_tokens / 1_000_000) * costs["output"]
    return input_cost + output_cost


# =============================================================================
# ERRORS
# =============================================================================


class ClaudeErrorType(str, Enum):
    """Classification of a failed Claude call."""
    API_KEY_MISSING = "api_key_missing"
    RATE_LIMITED = "rate_limited"
    TIMEOUT = "timeout"
    INVALID_REQUEST = "invalid_request"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"
    UNKNOWN = "unknown"  # Unexpected exception, likely a bug: not retried


RETRYABLE_ERRORS = {
    ClaudeErrorType.RATE_LIMITED,
    ClaudeErrorType.TIMEOUT,
    ClaudeErrorType.SERVER_ERROR,
    ClaudeErrorType.NETWORK_ERROR,
}


class ClaudeAPIError(Exception):
    """A classified failure of a single Claude request."""

    def __init__(
        self,
        message: str,
        error_type: ClaudeErrorType,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.status_code = status_code
        self.retryable = error_type in RETRYABLE_ERRORS


def classify_error(error: Exception) -> ClaudeAPIError:
    """
    Map an SDK or asyncio exception to a classified error.

    Args:
        error: Exception raised by a request attempt

    Returns:
        ClaudeAPIError with type and retryability
    """
    if isinstance(error, ClaudeAPIError):
        return error

    # APITimeoutError subclasses APIConnectionError, so check it first
    if isinstance(error, (anthropic.APITimeoutError, asyncio.TimeoutError)):
        return ClaudeAPIError("Request timed out", ClaudeErrorType.TIMEOUT)

    if isinstance(error, anthropic.APIConnectionError):
        return ClaudeAPIError(str(error) or "Connection error", ClaudeErrorType.NETWORK_ERROR)

    if isinstance(error, anthropic.APIStatusError):
        status = error.status_code
        if isinstance(error, (anthropic.AuthenticationError, anthropic.PermissionDeniedError)):
            error_type = ClaudeErrorType.API_KEY_MISSING
        elif isinstance(error, anthropic.RateLimitError):
            error_type = ClaudeErrorType.RATE_LIMITED
        elif status >= 500:
            # Includes 529 overloaded and gateway errors
            error_type = ClaudeErrorType.SERVER_ERROR
        else:
            error_type = ClaudeErrorType.INVALID_REQUEST
        return ClaudeAPIError(error.message or f"HTTP {status}", error_type, status_code=status)

    # Socket-level failures that escaped the SDK's own wrapping
    if isinstance(error, OSError):
        return ClaudeAPIError(str(error) or "Network error", ClaudeErrorType.NETWORK_ERROR)

    return ClaudeAPIError(
        f"{type(error).__name__}: {error}" if str(error) else type(error).__name__,
        ClaudeErrorType.UNKNOWN,
    )


# =============================================================================
# CLIENT
# =============================================================================


@dataclass
class AnalysisResponse:
    """Response from Claude analysis."""
    content: str
    usage: TokenUsage
    model: str
    stop_reason: str
    success: bool = True
    error: Optional[str] = None
    error_type: Optional[ClaudeErrorType] = None
    retryable: bool = False

    @property
    def was_truncated(self) -> bool:
        return self.stop_reason == "max_tokens"


class ClaudeClient:
    """
    Async client for Claude API optimized for single-shot structured analysis.

    Features:
    - Error classification (retryable vs fatal)
    - Retry with capped exponential backoff
    - Per-attempt timeout
    - Token usage and cost tracking
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize Claude client.

        A missing API key does not raise; check is_configured instead.

        Args:
            api_key: Anthropic API key (defaults to settings)
            model: Model to use (defaults to settings)
            settings: Settings instance (defaults to cached settings)
        """
        self.settings = settings or get_settings()
        self.api_key = api_key or self.settings.ANTHROPIC_API_KEY
        self.model = model or self.settings.CLAUDE_MODEL

        self.max_retries = self.settings.CLAUDE_MAX_RETRIES
        self.timeout = self.settings.CLAUDE_TIMEOUT
        self.base_delay = self.settings.RETRY_BASE_DELAY
        self.max_delay = self.settings.RETRY_MAX_DELAY

        # SDK retries disabled: the retry policy lives in analyze_with_retry()
        self.async_client = (
            anthropic.AsyncAnthropic(api_key=self.api_key, max_retries=0)
            if self.api_key
            else None
        )

        # Track cumulative usage
        self.total_usage = TokenUsage()
        self.call_count = 0

    @property
    def is_configured(self) -> bool:
        return self.async_client is not None

    def get_retry_delay(self, attempt: int) -> float:
        """Backoff before retry number attempt + 1, in seconds."""
        return min(self.base_delay * (2 ** attempt), self.max_delay)

    async def analyze(
        self,
        prompt: str,
        system: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        model: Optional[str] = None,
    ) -> AnalysisResponse:
        """
        Send one request to Claude.

        Args:
            prompt: User prompt
            system: System prompt
            max_tokens: Maximum output tokens
            temperature: Sampling temperature
            model: Model override

        Returns:
            AnalysisResponse with content and usage

        Raises:
            ClaudeAPIError: If the request fails
        """
        if not self.is_configured:
            raise ClaudeAPIError("ANTHROPIC_API_KEY not configured", ClaudeErrorType.API_KEY_MISSING)

        kwargs: Dict[str, Any] = {
            "model": model or self.model,
            "max_tokens": max_tokens or self.settings.CLAUDE_MAX_OUTPUT_TOKENS,
            "temperature": self.settings.CLAUDE_TEMPERATURE if temperature is None else temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system

        try:
            response = await asyncio.wait_for(
                self.async_client.messages.create(**kwargs),
                timeout=self.timeout,
            )
        except Exception as e:
            raise classify_error(e) from e

        # Extract content
        content = ""
        for block in response.content:
            if hasattr(block, "text"):
                content += block.text

        # Track usage
        usage = TokenUsage(
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )
        self.total_usage.input_tokens += usage.input_tokens
        self.total_usage.output_tokens += usage.output_tokens
        self.call_count += 1

        logger.info(
            f"Claude call: {usage.input_tokens} in, {usage.output_tokens} out, "
            f"${usage.estimated_cost:.4f}, stop_reason={response.stop_reason}"
        )

        return AnalysisResponse(
            content=content,
            usage=usage,
            model=getattr(response, "model", None) or kwargs["model"],
            stop_reason=response.stop_reason or "end_turn",
        )

    async def analyze_with_retry(
        self,
        prompt: str,
        system: Optional[str] = None,
        **kwargs,
    ) -> AnalysisResponse:
        """
        Analyze with retry logic for transient failures.

        Makes one initial attempt plus up to max_retries retries. A
        non-retryable error stops immediately.

        Args:
            prompt: User prompt
            system: System prompt
            **kwargs: Additional arguments for analyze()

        Returns:
            AnalysisResponse (success=False with a classified error on failure)
        """
        last_error: Optional[ClaudeAPIError] = None

        for attempt in range(self.max_retries + 1):
            try:
                return await self.analyze(prompt, system, **kwargs)
            except ClaudeAPIError as e:
                last_error = e

            if not last_error.retryable:
                logger.error(f"Claude call failed ({last_error.error_type.value}): {last_error.message}")
                break

            if attempt < self.max_retries:
                wait_time = self.get_retry_delay(attempt)
                logger.warning(
                    f"Claude call failed (attempt {attempt + 1}/{self.max_retries + 1}), "
                    f"retrying in {wait_time}s: {last_error.message}"
                )
                await asyncio.sleep(wait_time)
            else:
                logger.error(f"Claude call failed after {attempt + 1} attempts: {last_error.message}")

        return AnalysisResponse(
            content="",
            usage=TokenUsage(),
            model=kwargs.get("model") or self.model,
            stop_reason="error",
            success=False,
            error=last_error.message,
            error_type=last_error.error_type,
            retryable=last_error.retryable,
        )

    async def analyze_research_data(
        self,
        system_prompt: str,
        data_context: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        model: Optional[str] = None,
    ) -> AnalysisResponse:
        """
        Run the intake analysis call: system instructions plus one user message.

        Args:
            system_prompt: Rendered system prompt
            data_context: Rendered research data context
            max_tokens: Output token ceiling (defaults to settings)
            temperature: Sampling temperature (defaults to settings)
            model: Model override

        Returns:
            AnalysisResponse
        """
        return await self.analyze_with_retry(
            data_context,
            system_prompt,
            max_tokens=max_tokens or self.settings.CLAUDE_MAX_OUTPUT_TOKENS,
            temperature=temperature,
            model=model,
        )

    def get_total_cost(self) -> float:
        """Get total cost for all calls in this session."""
        return self.total_usage.estimated_cost

    def get_usage_summary(self) -> Dict[str, Any]:
        """Get summary of all API usage."""
        return {
            "total_calls": self.call_count,
            "input_tokens": self.total_usage.input_tokens,
            "output_tokens": self.total_usage.output_tokens,
            "total_tokens": self.total_usage.total_tokens,
            "estimated_cost": self.total_usage.estimated_cost,
        }


@lru_cache
def get_claude_client() -> ClaudeClient:
    """Get or create the shared Claude client."""
    return ClaudeClient()


def is_claude_ready() -> bool:
    """Check if the shared client has an API key."""
    return get_claude_client().is_configured
