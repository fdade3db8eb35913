"""
Test Suite for the Intake Analysis Engine

Tests the orchestration paths: unconfigured, client failure, parse failure,
truncation and success. The engine must always return success=True.
"""

import pytest
from unittest.mock import patch

from intake_analyzer.analyzer.engine import (
    NO_RESEARCH_DATA_REASON,
    NOT_CONFIGURED_ERROR,
    PARSE_FAILED_ERROR,
    TRUNCATION_WARNING,
    IntakeAnalyzer,
    analyze_intake_data,
    can_analyze,
)
from intake_analyzer.output.parser import REPAIRED_PARSE_WARNING
from intake_analyzer.taxonomy import CATEGORY_NAMES, category_field_names


def assert_fallback(result):
    assert result.success
    assert result.data.model == "fallback"
    assert result.data.overall_confidence == 0.2
    assert result.data.fields_with_high_confidence == 0
    assert result.data.fields_with_low_confidence == 68
    assert result.data.data_quality_score == 10


class TestUnconfigured:
    """Test the no-API-key path."""

    @pytest.mark.asyncio
    async def test_returns_fallback_without_calling(self, mock_claude_client, test_settings, acme_input):
        mock_claude_client.is_configured = False
        analyzer = IntakeAnalyzer(client=mock_claude_client, settings=test_settings)

        result = await analyzer.analyze(acme_input)

        assert_fallback(result)
        assert result.estimated_cost == 0
        assert result.error == NOT_CONFIGURED_ERROR
        assert result.data.warnings == [f"AI analysis unavailable: {NOT_CONFIGURED_ERROR}"]
        mock_claude_client.analyze_research_data.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_fallback_is_schema_complete(self, mock_claude_client, test_settings, sample_input):
        mock_claude_client.is_configured = False
        result = await IntakeAnalyzer(client=mock_claude_client, settings=test_settings).analyze(sample_input)

        for category in CATEGORY_NAMES:
            assert set(result.data.categories[category]) == set(category_field_names(category))
        assert result.data.get_field("localSEO", "gbpStatus").value == "claimed"


class TestClientFailure:
    """Test failures inside the client call."""

    @pytest.mark.asyncio
    async def test_failed_response(self, mock_claude_client, test_settings, make_response, acme_input):
        mock_claude_client.analyze_research_data.return_value = make_response(
            success=False, error="Rate limited"
        )
        analyzer = IntakeAnalyzer(client=mock_claude_client, settings=test_settings)

        result = await analyzer.analyze(acme_input)

        assert_fallback(result)
        assert result.estimated_cost == 0
        assert result.error == "Rate limited"
        assert result.data.errors == ["Rate limited"]

    @pytest.mark.asyncio
    async def test_client_raises(self, mock_claude_client, test_settings, acme_input):
        mock_claude_client.analyze_research_data.side_effect = RuntimeError("event loop closed")
        analyzer = IntakeAnalyzer(client=mock_claude_client, settings=test_settings)

        result = await analyzer.analyze(acme_input)

        assert_fallback(result)
        assert result.estimated_cost == 0
        assert "event loop closed" in result.data.warnings[0]


class TestParseFailure:
    """Test responses with nothing recoverable."""

    @pytest.mark.asyncio
    async def test_unparseable_response(self, mock_claude_client, test_settings, make_response, acme_input):
        mock_claude_client.analyze_research_data.return_value = make_response(
            "I cannot produce that analysis."
        )
        analyzer = IntakeAnalyzer(client=mock_claude_client, settings=test_settings)

        result = await analyzer.analyze(acme_input)

        assert_fallback(result)
        assert result.error == PARSE_FAILED_ERROR
        # The call was made, so the estimated cost is reported
        assert result.estimated_cost > 0
        assert TRUNCATION_WARNING not in result.data.warnings

    @pytest.mark.asyncio
    async def test_unparseable_truncated_response(self, mock_claude_client, test_settings, make_response, acme_input):
        mock_claude_client.analyze_research_data.return_value = make_response(
            "{{{", stop_reason="max_tokens"
        )
        analyzer = IntakeAnalyzer(client=mock_claude_client, settings=test_settings)

        result = await analyzer.analyze(acme_input)

        assert_fallback(result)
        assert result.data.warnings[-1] == TRUNCATION_WARNING


class TestSuccess:
    """Test successful analysis."""

    @pytest.mark.asyncio
    async def test_full_response(self, mock_claude_client, test_settings, make_response,
                                 full_response_text, sample_input):
        mock_claude_client.analyze_research_data.return_value = make_response(
            full_response_text, input_tokens=1_000_000, output_tokens=1_000_000
        )
        analyzer = IntakeAnalyzer(client=mock_claude_client, settings=test_settings)

        result = await analyzer.analyze(sample_input)

        assert result.success
        assert result.error is None
        assert result.data.model == "claude-sonnet-4-20250514"
        assert result.data.fields_with_high_confidence == 84
        assert result.data.data_quality_score == 72
        assert result.data.token_usage.input_tokens == 1_000_000
        assert result.data.warnings == []
        assert result.estimated_cost == pytest.approx(18.0)

    @pytest.mark.asyncio
    async def test_call_arguments(self, mock_claude_client, test_settings, make_response,
                                  full_response_text, sample_input):
        mock_claude_client.analyze_research_data.return_value = make_response(full_response_text)
        analyzer = IntakeAnalyzer(client=mock_claude_client, settings=test_settings)

        await analyzer.analyze(sample_input)

        system_prompt, data_context = mock_claude_client.analyze_research_data.call_args.args
        assert "## Field Requirements by Category" in system_prompt
        assert "- Business Name: Summit Home Inspections" in data_context

    @pytest.mark.asyncio
    async def test_truncated_response_repaired(self, mock_claude_client, test_settings, make_response,
                                               full_response_text, sample_input):
        cut = full_response_text.index('"quickWins"')
        mock_claude_client.analyze_research_data.return_value = make_response(
            full_response_text[:cut], stop_reason="max_tokens"
        )
        analyzer = IntakeAnalyzer(client=mock_claude_client, settings=test_settings)

        result = await analyzer.analyze(sample_input)

        assert result.success
        assert result.data.model != "fallback"
        assert result.data.get_field("businessContext", "companyName").value == "Summit Home Inspections LLC"
        assert result.data.warnings == [REPAIRED_PARSE_WARNING, TRUNCATION_WARNING]
        # contentGaps closed before the cut, so the model's list survives
        assert result.data.insights["contentGaps"][0]["gap"] == "No radon testing FAQ"
        # Cut before quickWins: the default section is kept
        assert result.data.insights["quickWins"][0]["action"] == "Claim and optimize Google Business Profile"


class TestConvenienceFunctions:
    """Test module-level helpers."""

    @pytest.mark.asyncio
    async def test_analyze_intake_data_uses_shared_client(self, mock_claude_client, test_settings, acme_input):
        mock_claude_client.is_configured = False

        with patch("intake_analyzer.analyzer.engine.get_claude_client", return_value=mock_claude_client), \
             patch("intake_analyzer.analyzer.engine.get_settings", return_value=test_settings):
            result = await analyze_intake_data(acme_input)

        assert result.data.model == "fallback"

    @pytest.mark.parametrize("results,expected", [
        ({}, False),
        ({"competitors": [{"name": "X"}], "seoAudit": {"score": 50}}, False),
        ({"gbp": {"name": "Acme"}}, True),
        ({"websiteCrawl": {"pages": []}}, True),
        ({"sitemap": {"urls": ["/"]}}, True),
    ])
    def test_can_analyze(self, results, expected):
        ok, reason = can_analyze(results)

        assert ok is expected
        if expected:
            assert reason is None
        else:
            assert reason == NO_RESEARCH_DATA_REASON
