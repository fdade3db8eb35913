"""
Intake Field Taxonomy

The fixed, versioned schema of the business-intake questionnaire:
7 categories, each with a closed set of named fields. Every other component
(defaults, prompt, parser, aggregator) is driven from these definitions.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple


TAXONOMY_VERSION = "2.1"

# Size of the intake questionnaire these fields answer, reported as
# fieldsAnalyzed on every result.
QUESTIONNAIRE_FIELD_COUNT = 68


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


# Value check per type alternative in FieldSpec.type
_TYPE_CHECKS: Dict[str, Callable[[Any], bool]] = {
    "string": lambda value: isinstance(value, str),
    "number": _is_number,
    "boolean": lambda value: isinstance(value, bool),
    "null": lambda value: value is None,
    "string[]": _is_string_list,
}


@dataclass(frozen=True)
class FieldSpec:
    """Declaration of a single intake field."""
    name: str
    type: str  # e.g. "string", "number|null", "string[]"
    options: Tuple[str, ...] = field(default_factory=tuple)
    range: Optional[str] = None  # e.g. "0-100"
    required: bool = False

    def describe(self) -> str:
        """One-line description used in the system prompt."""
        desc = f"- **{self.name}** ({self.type})"
        if self.options:
            desc += f" - Options: {', '.join(self.options)}"
        if self.range:
            desc += f" - Range: {self.range}"
        return desc

    def accepts(self, value: Any) -> bool:
        """Check a value against the declared type (options and range are not enforced)."""
        return any(_TYPE_CHECKS[alternative](value) for alternative in self.type.split("|"))


def _f(name: str, type: str, *options: str, range: Optional[str] = None,
       required: bool = False) -> FieldSpec:
    return FieldSpec(name=name, type=type, options=tuple(options), range=range, required=required)


# ============================================================================
# CATEGORY DEFINITIONS
# ============================================================================

CATEGORY_FIELDS: Dict[str, List[FieldSpec]] = {
    "businessContext": [
        _f("companyName", "string", required=True),
        _f("yearsInBusiness", "number|null"),
        _f("teamSize", "string|null", "Solo", "2-5", "6-10", "11-25", "26-50", "50+"),
        _f("primaryIndustry", "string", required=True),
        _f("businessDescription", "string", required=True),
        _f("uniqueSellingPoints", "string[]", required=True),
        _f("targetAudience", "string", required=True),
        _f("competitiveAdvantages", "string[]", required=True),
        _f("businessModel", "string", "B2B", "B2C", "B2B2C", "D2C"),
        _f("seasonality", "string|null"),
    ],
    "revenueServices": [
        _f("primaryServices", "string[]", required=True),
        _f("secondaryServices", "string[]"),
        _f("serviceDeliveryMethod", "string[]", "On-site", "In-store", "Online", "Hybrid"),
        _f("averageTransactionValue", "string|null"),
        _f("pricingModel", "string", "Fixed", "Hourly", "Project-based", "Subscription", "Mixed"),
        _f("topRevenueServices", "string[]"),
        _f("serviceAreaType", "string", "Local", "Regional", "National", "International"),
        _f("serviceRadius", "string|null"),
        _f("clientRetentionRate", "string|null"),
        _f("referralPercentage", "string|null"),
        _f("upsellOpportunities", "string[]"),
        _f("recurringRevenueServices", "string[]"),
    ],
    "localSEO": [
        _f("gbpStatus", "string", "claimed", "unclaimed", "not_found", "unknown"),
        _f("gbpCompleteness", "number", range="0-100"),
        _f("gbpRating", "number|null", range="0-5"),
        _f("gbpReviewCount", "number|null"),
        _f("gbpCategories", "string[]"),
        _f("gbpPhotosCount", "number|null"),
        _f("primaryServiceArea", "string", required=True),
        _f("serviceAreas", "string[]"),
        _f("napConsistency", "number", range="0-100"),
        _f("citationScore", "number|null", range="0-100"),
    ],
    "websiteReadiness": [
        _f("websiteUrl", "string", required=True),
        _f("cms", "string|null", "WordPress", "Wix", "Squarespace", "Shopify", "Custom", "Unknown"),
        _f("hasSsl", "boolean", required=True),
        _f("isMobileResponsive", "boolean", required=True),
        _f("hasStructuredData", "boolean", required=True),
        _f("schemaTypes", "string[]"),
        _f("pageCount", "number|null"),
        _f("hasServicePages", "boolean", required=True),
        _f("servicePageCount", "number|null"),
        _f("hasBlogSection", "boolean", required=True),
        _f("blogPostCount", "number|null"),
        _f("hasLocationPages", "boolean"),
        _f("locationPageCount", "number|null"),
        _f("hasHubPages", "boolean"),
        _f("hubPageCount", "number|null"),
        _f("averagePageWordCount", "string", "Thin (<1000)", "Adequate (1000-1500)",
           "Strong (1500-2200)", "Comprehensive (2200+)"),
        _f("hasRobotsTxt", "boolean", required=True),
        _f("hasLlmsTxt", "boolean", required=True),
        _f("loadSpeed", "string|null", "Fast", "Average", "Slow"),
        _f("seoScore", "number|null", range="0-100"),
        _f("contentDepthScore", "number|null", range="0-100"),
    ],
    "toneVoice": [
        _f("brandTone", "string", "Professional", "Friendly", "Authoritative", "Casual", "Technical", "Warm"),
        _f("writingStyle", "string", "Formal", "Conversational", "Technical", "Storytelling"),
        _f("keyMessaging", "string[]", required=True),
        _f("brandPersonality", "string[]", required=True),
        _f("targetEmotions", "string[]"),
        _f("communicationStyle", "string", "Direct", "Nurturing", "Educational", "Persuasive"),
        _f("industryJargonLevel", "string", "None", "Moderate", "Heavy"),
        _f("callToActionStyle", "string", "Urgent", "Soft", "Value-focused", "Trust-building"),
    ],
    "conversionMeasurement": [
        _f("primaryConversionGoal", "string", "Phone calls", "Form submissions", "Purchases",
           "Appointments", "Quote requests"),
        _f("secondaryConversionGoals", "string[]"),
        _f("currentTrackingSetup", "string[]", "Google Analytics", "GTM", "Facebook Pixel", "None detected"),
        _f("phoneTrackingStatus", "boolean|null"),
        _f("formTrackingStatus", "boolean|null"),
        _f("currentLeadVolume", "string|null"),
        _f("conversionRate", "string|null"),
        _f("customerJourneyLength", "string", "Same day", "1-7 days", "1-4 weeks", "1-3 months", "3+ months"),
    ],
    "aiConsiderations": [
        _f("aiSearchVisibility", "string", "High", "Medium", "Low", "Unknown"),
        _f("contentDepth", "string", "Comprehensive", "Moderate", "Basic", "Minimal"),
        _f("expertiseSignals", "string[]"),
        _f("trustSignals", "string[]"),
        _f("authorshipClarity", "boolean", required=True),
        _f("contentFreshness", "string", "Current", "Dated", "Mixed", "Unknown"),
        _f("citationWorthiness", "string", "High", "Medium", "Low"),
        _f("llmReadinessScore", "number", range="0-100"),
        _f("entityFirstScore", "number", range="0-100"),
        _f("hasSameAsReferences", "boolean"),
        _f("sameAsPlatforms", "string[]"),
        _f("hasAuthorBio", "boolean"),
        _f("hasCredentials", "boolean"),
        _f("aeoComplianceScore", "number", range="0-100"),
        _f("hubSpokeScore", "number", range="0-100"),
    ],
}

CATEGORY_NAMES: Tuple[str, ...] = tuple(CATEGORY_FIELDS)

_CATEGORY_LABELS = {
    "businessContext": ("Business Context", ""),
    "revenueServices": ("Revenue & Services", ""),
    "localSEO": ("Local SEO", ""),
    "websiteReadiness": ("Website Readiness", " - includes Hub+Spoke assessment"),
    "toneVoice": ("Tone & Voice", ""),
    "conversionMeasurement": ("Conversion & Measurement", ""),
    "aiConsiderations": ("AI & AEO Considerations", " - includes Entity-First assessment"),
}


def category_field_names(category: str) -> List[str]:
    """Declared field names of a category, in declaration order."""
    return [spec.name for spec in CATEGORY_FIELDS[category]]


def field_specs(category: str) -> Dict[str, FieldSpec]:
    """Field specs of a category keyed by field name."""
    return {spec.name: spec for spec in CATEGORY_FIELDS[category]}


def total_field_count() -> int:
    """Number of leaf fields across all categories."""
    return sum(len(fields) for fields in CATEGORY_FIELDS.values())


def format_category_name(category: str) -> str:
    """Display name with field count, e.g. 'Tone & Voice (8 fields)'."""
    if category not in _CATEGORY_LABELS:
        return category
    label, suffix = _CATEGORY_LABELS[category]
    return f"{label} ({len(CATEGORY_FIELDS[category])} fields{suffix})"
