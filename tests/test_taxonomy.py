"""
Test Suite for the Field Taxonomy and Default Synthesis

Tests cover:
1. Category/field declarations
2. Deterministic default synthesis
3. Insights defaults and merging
"""

import pytest

from intake_analyzer.models import AnalysisInput, InferenceSource
from intake_analyzer.taxonomy import (
    CATEGORY_FIELDS,
    CATEGORY_NAMES,
    DEFAULT_INSIGHTS,
    INFERRABLE_CONFIDENCE,
    INSIGHT_KEYS,
    QUESTIONNAIRE_FIELD_COUNT,
    UNKNOWN_CONFIDENCE,
    FieldSpec,
    category_field_names,
    create_default_insights,
    field_specs,
    format_category_name,
    merge_insights,
    synthesize_defaults,
    total_field_count,
)


# =============================================================================
# TAXONOMY
# =============================================================================


class TestTaxonomy:
    """Test the category and field declarations."""

    def test_seven_categories_in_order(self):
        assert CATEGORY_NAMES == (
            "businessContext",
            "revenueServices",
            "localSEO",
            "websiteReadiness",
            "toneVoice",
            "conversionMeasurement",
            "aiConsiderations",
        )

    def test_field_counts(self):
        counts = {category: len(fields) for category, fields in CATEGORY_FIELDS.items()}
        assert counts == {
            "businessContext": 10,
            "revenueServices": 12,
            "localSEO": 10,
            "websiteReadiness": 21,
            "toneVoice": 8,
            "conversionMeasurement": 8,
            "aiConsiderations": 15,
        }
        assert total_field_count() == 84

    def test_questionnaire_count_is_separate_from_leaf_count(self):
        assert QUESTIONNAIRE_FIELD_COUNT == 68
        assert total_field_count() != QUESTIONNAIRE_FIELD_COUNT

    def test_field_names_unique_within_category(self):
        for category in CATEGORY_NAMES:
            names = category_field_names(category)
            assert len(names) == len(set(names)), category

    def test_format_category_name(self):
        assert format_category_name("toneVoice") == "Tone & Voice (8 fields)"
        assert format_category_name("websiteReadiness") == (
            "Website Readiness (21 fields - includes Hub+Spoke assessment)"
        )
        assert format_category_name("somethingElse") == "somethingElse"

    def test_describe_field(self):
        gbp_rating = next(s for s in CATEGORY_FIELDS["localSEO"] if s.name == "gbpRating")
        assert gbp_rating.describe() == "- **gbpRating** (number|null) - Range: 0-5"

        business_model = next(s for s in CATEGORY_FIELDS["businessContext"] if s.name == "businessModel")
        assert business_model.describe() == "- **businessModel** (string) - Options: B2B, B2C, B2B2C, D2C"

    @pytest.mark.parametrize("type_,value,accepted", [
        ("string", "Warm", True),
        ("string", None, False),
        ("string|null", None, True),
        ("number", 4.5, True),
        ("number", 3, True),
        ("number", True, False),
        ("number", "4.5", False),
        ("number|null", None, True),
        ("boolean", False, True),
        ("boolean", 0, False),
        ("boolean|null", None, True),
        ("string[]", ["a", "b"], True),
        ("string[]", [], True),
        ("string[]", "a", False),
        ("string[]", ["a", 1], False),
    ])
    def test_accepts_declared_type(self, type_, value, accepted):
        assert FieldSpec(name="f", type=type_).accepts(value) is accepted

    def test_accepts_ignores_options(self):
        business_model = field_specs("businessContext")["businessModel"]
        assert business_model.accepts("Franchise")

    def test_every_declared_type_is_checkable(self):
        for fields in CATEGORY_FIELDS.values():
            for spec in fields:
                assert isinstance(spec.accepts(None), bool)


# =============================================================================
# DEFAULTS
# =============================================================================


class TestSynthesizeDefaults:
    """Test default construction from the input alone."""

    def test_covers_taxonomy_exactly(self, sample_input):
        defaults = synthesize_defaults(sample_input)

        assert set(defaults) == set(CATEGORY_NAMES)
        for category in CATEGORY_NAMES:
            assert set(defaults[category]) == set(category_field_names(category))

    def test_deterministic(self, sample_input):
        assert synthesize_defaults(sample_input) == synthesize_defaults(sample_input)

    def test_minimal_input(self, acme_input):
        defaults = synthesize_defaults(acme_input)

        company = defaults["businessContext"]["companyName"]
        assert company.value == "Acme"
        assert company.source == InferenceSource.USER_INPUT
        assert company.confidence == UNKNOWN_CONFIDENCE

        website = defaults["websiteReadiness"]["websiteUrl"]
        assert website.value == "https://acme.com"
        assert website.source == InferenceSource.USER_INPUT

        ssl = defaults["websiteReadiness"]["hasSsl"]
        assert ssl.value is True
        assert ssl.confidence == INFERRABLE_CONFIDENCE
        assert ssl.reasoning == "From URL protocol"

        assert defaults["businessContext"]["primaryIndustry"].value == "Service Provider"
        assert defaults["localSEO"]["primaryServiceArea"].value == "Local area"
        assert defaults["localSEO"]["gbpStatus"].value == "unknown"

    def test_plain_http_site_has_no_ssl(self):
        data = AnalysisInput(session_id="s", business_name="Plain", website="http://plain.example")
        assert synthesize_defaults(data)["websiteReadiness"]["hasSsl"].value is False

    @pytest.mark.parametrize("website,has_ssl", [
        ("HTTPS://ACME.COM", True),
        ("  https://acme.com", True),
        ("httpsfoo.com", False),
        ("acme.com", False),
    ])
    def test_ssl_inferred_from_protocol(self, website, has_ssl):
        data = AnalysisInput(session_id="s", business_name="Acme", website=website)
        assert synthesize_defaults(data)["websiteReadiness"]["hasSsl"].value is has_ssl

    def test_input_driven_fields(self, sample_input):
        defaults = synthesize_defaults(sample_input)

        industry = defaults["businessContext"]["primaryIndustry"]
        assert industry.value == "Home Inspection"
        assert industry.source == InferenceSource.USER_INPUT
        assert industry.confidence == INFERRABLE_CONFIDENCE

        area = defaults["localSEO"]["primaryServiceArea"]
        assert area.value == "Denver, CO"
        assert area.source == InferenceSource.USER_INPUT

        assert defaults["localSEO"]["gbpStatus"].value == "claimed"

    def test_confidence_tiers(self, sample_input):
        defaults = synthesize_defaults(sample_input)
        for fields in defaults.values():
            for f in fields.values():
                assert f.confidence in (UNKNOWN_CONFIDENCE, INFERRABLE_CONFIDENCE)


# =============================================================================
# INSIGHTS
# =============================================================================


class TestInsights:
    """Test insights defaults and merging."""

    def test_default_tree_has_every_key(self):
        assert set(INSIGHT_KEYS) == set(DEFAULT_INSIGHTS)

    def test_create_returns_independent_copy(self):
        first = create_default_insights()
        first["quickWins"].append({"action": "mutated"})
        first["competitorComparison"]["competitors"].append({"name": "X"})

        second = create_default_insights()
        assert second == DEFAULT_INSIGHTS
        assert {"action": "mutated"} not in second["quickWins"]

    def test_merge_none_gives_defaults(self):
        assert merge_insights(None) == DEFAULT_INSIGHTS

    def test_merge_replaces_top_level_keys(self):
        merged = merge_insights({"quickWins": [{"action": "Add schema"}]})

        assert merged["quickWins"] == [{"action": "Add schema"}]
        assert merged["riskFactors"] == DEFAULT_INSIGHTS["riskFactors"]
        for key in INSIGHT_KEYS:
            assert key in merged

    def test_merge_is_one_level(self):
        merged = merge_insights({"competitorComparison": {"competitors": []}})
        # The whole sub-tree is replaced, not deep-merged
        assert merged["competitorComparison"] == {"competitors": []}

    def test_merge_keeps_extra_keys(self):
        merged = merge_insights({"reviewThemes": ["punctual"]})
        assert merged["reviewThemes"] == ["punctual"]
