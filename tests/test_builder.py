"""
Test Suite for Result Building and Confidence Aggregation

Tests cover:
1. Confidence aggregation thresholds
2. Data quality scoring
3. Merging parsed output over defaults
4. The fallback result
"""

import pytest

from intake_analyzer.models import InferenceSource, InferredField
from intake_analyzer.output import (
    ResultBuilder,
    aggregate_confidence,
    calculate_data_quality_score,
    create_fallback_result,
    merge_category,
)
from intake_analyzer.output.confidence import clamp_quality_score
from intake_analyzer.taxonomy import (
    CATEGORY_NAMES,
    QUESTIONNAIRE_FIELD_COUNT,
    TAXONOMY_VERSION,
    create_default_insights,
    synthesize_defaults,
)


def _field(confidence: float) -> InferredField:
    return InferredField(value="x", source=InferenceSource.AI, confidence=confidence)


@pytest.fixture
def builder(test_settings):
    return ResultBuilder(settings=test_settings)


# =============================================================================
# CONFIDENCE AGGREGATION
# =============================================================================


class TestAggregateConfidence:
    """Test mean confidence and high/low counts."""

    def test_thresholds_are_inclusive(self):
        summary = aggregate_confidence({
            "a": {"f1": _field(0.7), "f2": _field(0.4), "f3": _field(0.55)},
        })

        assert summary.high_count == 1
        assert summary.low_count == 1
        assert summary.medium_count == 1
        assert summary.fields_total == 3
        assert summary.overall_confidence == pytest.approx((0.7 + 0.4 + 0.55) / 3)

    def test_custom_thresholds(self):
        summary = aggregate_confidence(
            {"a": {"f1": _field(0.8), "f2": _field(0.6)}},
            high_threshold=0.9,
            low_threshold=0.6,
        )
        assert summary.high_count == 0
        assert summary.low_count == 1

    def test_empty_categories(self):
        summary = aggregate_confidence({})
        assert summary.overall_confidence == 0.1
        assert summary.fields_total == 0

    def test_to_dict(self):
        summary = aggregate_confidence({"a": {"f1": _field(0.9)}})
        assert summary.to_dict() == {
            "overall_confidence": 0.9,
            "fields_total": 1,
            "high": 1,
            "medium": 0,
            "low": 0,
        }


# =============================================================================
# DATA QUALITY
# =============================================================================


class TestDataQualityScore:
    """Test evidence completeness scoring."""

    def test_no_evidence(self, acme_input):
        assert calculate_data_quality_score(acme_input) == 0

    def test_weighted_sum(self, sample_input):
        # gbp 25 + websiteCrawl 25 + competitors 15
        assert calculate_data_quality_score(sample_input) == 65

    def test_all_evidence(self, sample_input):
        sample_input.sitemap = {"urls": ["/"]}
        sample_input.seo_audit = {"score": 70}
        sample_input.citations = [{"site": "yelp"}]
        assert calculate_data_quality_score(sample_input) == 100

    @pytest.mark.parametrize("raw,expected", [
        (72, 72.0),
        (150, 100.0),
        (-5, 0.0),
        ("72", None),
        (None, None),
        (True, None),
        (float("nan"), None),
    ])
    def test_clamp_quality_score(self, raw, expected):
        assert clamp_quality_score(raw) == expected


# =============================================================================
# BUILDER
# =============================================================================


class TestResultBuilder:
    """Test merging parsed output into complete results."""

    def test_full_response(self, builder, full_response_payload, sample_input):
        result = builder.build(
            full_response_payload["categories"],
            full_response_payload["insights"],
            sample_input,
            data_quality_score=72,
        )

        assert result.fields_with_high_confidence == 84
        assert result.fields_with_low_confidence == 0
        assert result.overall_confidence == pytest.approx(0.9)
        assert result.fields_analyzed == QUESTIONNAIRE_FIELD_COUNT
        assert result.data_quality_score == 72
        assert result.model == "claude-sonnet-4-20250514"

    def test_single_override(self, builder, acme_input):
        parsed = {
            "localSEO": {
                "gbpRating": {"value": 4.9, "source": "gbp", "confidence": 0.95, "reasoning": "GBP"},
            },
        }
        result = builder.build(parsed, None, acme_input)

        assert result.fields_with_high_confidence == 1
        assert result.fields_with_low_confidence == 83
        assert result.get_field("localSEO", "gbpRating").value == 4.9

    def test_calculated_quality_when_not_reported(self, builder, sample_input):
        result = builder.build({}, None, sample_input)
        assert result.data_quality_score == 65

    def test_reported_quality_clamped(self, builder, sample_input):
        result = builder.build({}, None, sample_input, data_quality_score=150)
        assert result.data_quality_score == 100

    def test_empty_parse_equals_defaults(self, builder, sample_input):
        result = builder.build(None, None, sample_input)

        assert result.categories == synthesize_defaults(sample_input)
        assert result.insights == create_default_insights()

    def test_merge_categories_drops_unknown(self, builder, acme_input):
        merged = builder.merge_categories(
            {"toneVoice": {"brandTone": {"value": "Warm", "confidence": 0.8}, "mascot": {"value": "Owl"}}},
            acme_input,
        )
        assert "mascot" not in merged["toneVoice"]
        assert merged["toneVoice"]["brandTone"].value == "Warm"
        assert set(merged) == set(CATEGORY_NAMES)

    @pytest.mark.parametrize("category,name,payload", [
        ("websiteReadiness", "hasSsl", {"value": "yes", "confidence": 0.9}),
        ("localSEO", "gbpRating", {"value": "4.5", "confidence": 0.9}),
        ("localSEO", "gbpReviewCount", {"value": True, "confidence": 0.9}),
        ("businessContext", "uniqueSellingPoints", {"value": "Fast service", "confidence": 0.9}),
        ("toneVoice", "brandTone", {"value": None, "confidence": 0.9}),
    ])
    def test_mistyped_value_keeps_default(self, acme_input, category, name, payload):
        defaults = synthesize_defaults(acme_input)[category]
        merged = merge_category(category, defaults, {name: payload})
        assert merged[name] == defaults[name]

    @pytest.mark.parametrize("category,name,value", [
        ("localSEO", "gbpRating", None),
        ("localSEO", "gbpRating", 4),
        ("conversionMeasurement", "phoneTrackingStatus", False),
        ("websiteReadiness", "schemaTypes", []),
    ])
    def test_well_typed_value_accepted(self, acme_input, category, name, value):
        defaults = synthesize_defaults(acme_input)[category]
        merged = merge_category(category, defaults, {name: {"value": value, "confidence": 0.9}})
        assert merged[name].value == value
        assert merged[name].confidence == 0.9

    def test_taxonomy_version_reported(self, builder, acme_input):
        result = builder.build({}, None, acme_input)
        assert result.taxonomy_version == TAXONOMY_VERSION
        assert result.to_dict()["taxonomyVersion"] == "2.1"

    def test_warnings_copied(self, builder, acme_input):
        warnings = ["first"]
        result = builder.build({}, None, acme_input, warnings=warnings)
        warnings.append("second")
        assert result.warnings == ["first"]


class TestFallbackResult:
    """Test the pure-default fallback."""

    def test_fallback_constants(self, acme_input):
        result = create_fallback_result(acme_input, "AI API key not configured")

        assert result.model == "fallback"
        assert result.is_fallback
        assert result.overall_confidence == 0.2
        assert result.fields_analyzed == 68
        assert result.fields_with_high_confidence == 0
        assert result.fields_with_low_confidence == 68
        assert result.data_quality_score == 10
        assert result.warnings == ["AI analysis unavailable: AI API key not configured"]
        assert result.errors == ["AI API key not configured"]

    def test_fallback_categories_are_defaults(self, sample_input):
        result = create_fallback_result(sample_input, "boom")
        assert result.categories == synthesize_defaults(sample_input)
        assert result.insights == create_default_insights()

    def test_to_dict_wire_shape(self, acme_input):
        wire = create_fallback_result(acme_input, "boom").to_dict()

        assert wire["model"] == "fallback"
        assert wire["sessionId"] == "session-acme"
        assert wire["fieldsWithLowConfidence"] == 68
        assert wire["tokenUsage"] == {"input": 0, "output": 0, "total": 0}
        assert wire["categories"]["businessContext"]["companyName"] == {
            "value": "Acme",
            "source": "userInput",
            "confidence": 0.1,
            "reasoning": "From user input",
        }
        assert "analyzedAt" in wire
        assert wire["taxonomyVersion"] == TAXONOMY_VERSION
