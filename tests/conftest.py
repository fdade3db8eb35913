"""
Pytest Configuration and Shared Fixtures

Provides common fixtures and configuration for all test modules.
"""

import json
import pytest
from typing import Dict, Any, Callable
from unittest.mock import MagicMock, AsyncMock

from intake_analyzer.analyzer.client import AnalysisResponse, ClaudeClient
from intake_analyzer.models import AnalysisInput, TokenUsage
from intake_analyzer.taxonomy import CATEGORY_FIELDS
from intake_analyzer.utils.config import Settings


TEST_MODEL = "claude-sonnet-4-20250514"


# ============================================================================
# Settings Fixtures
# ============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """Settings with an API key and default retry policy, ignoring .env."""
    return Settings(
        _env_file=None,
        ANTHROPIC_API_KEY="test-key",
        CLAUDE_MODEL=TEST_MODEL,
        CLAUDE_MAX_RETRIES=3,
        RETRY_BASE_DELAY=1.0,
        RETRY_MAX_DELAY=30.0,
        CLAUDE_TIMEOUT=120.0,
    )


@pytest.fixture
def unconfigured_settings() -> Settings:
    """Settings without an API key."""
    return Settings(_env_file=None, ANTHROPIC_API_KEY=None, CLAUDE_MODEL=TEST_MODEL)


# ============================================================================
# Input Fixtures
# ============================================================================

@pytest.fixture
def acme_input() -> AnalysisInput:
    """Minimal input with no evidence at all."""
    return AnalysisInput(
        session_id="session-acme",
        business_name="Acme",
        website="https://acme.com",
    )


@pytest.fixture
def sample_input() -> AnalysisInput:
    """Input with GBP, crawl and competitor evidence."""
    return AnalysisInput(
        session_id="session-123",
        business_name="Summit Home Inspections",
        website="https://summitinspections.com",
        city="Denver",
        state="CO",
        industry="Home Inspection",
        gbp={
            "name": "Summit Home Inspections",
            "rating": 4.8,
            "reviewCount": 127,
            "categories": ["Home inspector"],
        },
        website_crawl={
            "pages": [
                {
                    "url": "https://summitinspections.com/services/radon-testing",
                    "title": "Radon Testing in Denver",
                    "pageType": "service",
                    "schemaTypes": ["LocalBusiness"],
                },
            ],
        },
        competitors=[
            {"name": "Peak Inspections", "rating": 4.6},
            {"name": "Front Range Inspectors", "rating": 4.2},
            {"name": "Mile High Home Check", "rating": 3.9},
        ],
    )


@pytest.fixture
def session_payload() -> Dict[str, Any]:
    """Collector session payload in wire (camelCase) form."""
    return {
        "sessionId": "session-456",
        "businessName": "Bright Dental",
        "website": "http://brightdental.example",
        "city": "Austin",
        "state": "TX",
        "websiteCrawl": {"pages": [{"url": "http://brightdental.example/"}]},
        "seoAudit": {"score": 61},
        "manualInput": {"businessContext": {"yearsInBusiness": 12}},
    }


# ============================================================================
# Model Response Fixtures
# ============================================================================

def _sample_value(type_: str, options) -> Any:
    if options:
        return [options[0]] if type_.startswith("string[]") else options[0]
    if type_.startswith("string[]"):
        return ["Radon testing", "Mold inspection"]
    if type_.startswith("number"):
        return 42
    if type_.startswith("boolean"):
        return True
    return "Inferred value"


@pytest.fixture
def full_response_payload() -> Dict[str, Any]:
    """A complete, well-formed response covering every taxonomy field."""
    categories = {}
    for category, fields in CATEGORY_FIELDS.items():
        categories[category] = {
            spec.name: {
                "value": _sample_value(spec.type, spec.options),
                "source": "websiteCrawl",
                "confidence": 0.9,
                "reasoning": f"Found {spec.name} on the website",
            }
            for spec in fields
        }
    categories["businessContext"]["companyName"]["value"] = "Summit Home Inspections LLC"

    return {
        "categories": categories,
        "insights": {
            "contentGaps": [
                {
                    "gap": "No radon testing FAQ",
                    "priority": "high",
                    "action": "Add 6-question FAQ to /services/radon-testing",
                    "category": "Spoke Page",
                    "targetKeyword": "radon testing denver",
                    "estimatedImpact": "Featured snippet eligibility",
                    "wordCountTarget": 1800,
                },
            ],
            "quickWins": [
                {
                    "action": "Add LocalBusiness schema with areaServed",
                    "impact": "high",
                    "effort": "easy",
                    "category": "Schema",
                    "implementation": "Add JSON-LD to the homepage",
                    "timeframe": "This week",
                },
            ],
        },
        "dataQualityScore": 72,
        "warnings": [],
    }


@pytest.fixture
def full_response_text(full_response_payload) -> str:
    """The complete response serialized as the model would emit it."""
    return json.dumps(full_response_payload, indent=2)


@pytest.fixture
def make_response() -> Callable[..., AnalysisResponse]:
    """Factory for client responses."""
    def _make(
        content: str = "",
        stop_reason: str = "end_turn",
        input_tokens: int = 12000,
        output_tokens: int = 3500,
        success: bool = True,
        error: str = None,
    ) -> AnalysisResponse:
        return AnalysisResponse(
            content=content,
            usage=TokenUsage(input_tokens=input_tokens, output_tokens=output_tokens),
            model=TEST_MODEL,
            stop_reason=stop_reason if success else "error",
            success=success,
            error=error,
        )
    return _make


@pytest.fixture
def mock_claude_client():
    """Mock Claude client for testing without API calls."""
    client = MagicMock(spec=ClaudeClient)
    client.is_configured = True
    client.model = TEST_MODEL
    client.analyze_research_data = AsyncMock()
    return client


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
