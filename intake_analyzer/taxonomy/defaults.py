"""
Default Field Synthesizer

Deterministic, pure construction of a complete category map from the
analysis input alone. Used as the merge base for parsed model output and as
the entire result when generation is unavailable.

Two confidence tiers:
- UNKNOWN_CONFIDENCE: nothing in the input says anything about the field
- INFERRABLE_CONFIDENCE: a sensible domain-norm guess for local service businesses
"""

from typing import Any, Callable, Dict

from ..models import AnalysisInput, CategoryFields, InferenceSource, InferredField

UNKNOWN_CONFIDENCE = 0.1
INFERRABLE_CONFIDENCE = 0.4


def unknown_field(value: Any, reasoning: str = "No data available") -> InferredField:
    """Field with no derivable signal."""
    return InferredField(
        value=value,
        source=InferenceSource.AI,
        confidence=UNKNOWN_CONFIDENCE,
        reasoning=reasoning,
    )


def inferrable_field(value: Any, reasoning: str = "Default assumption") -> InferredField:
    """Field filled with a domain-norm assumption."""
    return InferredField(
        value=value,
        source=InferenceSource.AI,
        confidence=INFERRABLE_CONFIDENCE,
        reasoning=reasoning,
    )


def user_input_field(value: Any, confidence: float = UNKNOWN_CONFIDENCE) -> InferredField:
    """Field copied verbatim from the input."""
    return InferredField(
        value=value,
        source=InferenceSource.USER_INPUT,
        confidence=confidence,
        reasoning="From user input",
    )


# ============================================================================
# PER-CATEGORY DEFAULTS
# ============================================================================


def default_business_context(data: AnalysisInput) -> CategoryFields:
    if data.industry:
        industry = user_input_field(data.industry, INFERRABLE_CONFIDENCE)
    else:
        industry = inferrable_field("Service Provider")

    return {
        "companyName": user_input_field(data.business_name),
        "yearsInBusiness": unknown_field(None),
        "teamSize": unknown_field(None),
        "primaryIndustry": industry,
        "businessDescription": inferrable_field(
            f"{data.business_name} - Local business", "Generated default"
        ),
        "uniqueSellingPoints": unknown_field([]),
        "targetAudience": inferrable_field("Local customers"),
        "competitiveAdvantages": unknown_field([]),
        "businessModel": inferrable_field("B2C"),
        "seasonality": inferrable_field(None),
    }


def default_revenue_services(data: AnalysisInput) -> CategoryFields:
    return {
        "primaryServices": unknown_field([]),
        "secondaryServices": unknown_field([]),
        "serviceDeliveryMethod": inferrable_field(["On-site"]),
        "averageTransactionValue": unknown_field(None),
        "pricingModel": inferrable_field("Project-based"),
        "topRevenueServices": unknown_field([]),
        "serviceAreaType": inferrable_field("Local"),
        "serviceRadius": unknown_field(None),
        "clientRetentionRate": unknown_field(None),
        "referralPercentage": unknown_field(None),
        "upsellOpportunities": unknown_field([]),
        "recurringRevenueServices": unknown_field([]),
    }


def default_local_seo(data: AnalysisInput) -> CategoryFields:
    if data.location:
        service_area = user_input_field(data.location, INFERRABLE_CONFIDENCE)
    else:
        service_area = inferrable_field("Local area")

    gbp_status = "claimed" if data.has_evidence("gbp") else "unknown"

    return {
        "gbpStatus": inferrable_field(gbp_status, "Based on GBP data presence"),
        "gbpCompleteness": unknown_field(0),
        "gbpRating": unknown_field(None),
        "gbpReviewCount": unknown_field(None),
        "gbpCategories": unknown_field([]),
        "gbpPhotosCount": unknown_field(None),
        "primaryServiceArea": service_area,
        "serviceAreas": unknown_field([]),
        "napConsistency": unknown_field(0),
        "citationScore": unknown_field(None),
    }


def default_website_readiness(data: AnalysisInput) -> CategoryFields:
    return {
        "websiteUrl": user_input_field(data.website),
        "cms": unknown_field(None),
        "hasSsl": inferrable_field(data.website.strip().lower().startswith("https://"), "From URL protocol"),
        "isMobileResponsive": inferrable_field(True),
        "hasStructuredData": unknown_field(False),
        "schemaTypes": unknown_field([]),
        "pageCount": unknown_field(None),
        "hasServicePages": unknown_field(False),
        "servicePageCount": unknown_field(None),
        "hasBlogSection": unknown_field(False),
        "blogPostCount": unknown_field(None),
        "hasLocationPages": unknown_field(False),
        "locationPageCount": unknown_field(None),
        "hasHubPages": unknown_field(False),
        "hubPageCount": unknown_field(None),
        "averagePageWordCount": inferrable_field("Thin (<1000)"),
        "hasRobotsTxt": unknown_field(False),
        "hasLlmsTxt": unknown_field(False),
        "loadSpeed": unknown_field(None),
        "seoScore": unknown_field(None),
        "contentDepthScore": unknown_field(None),
    }


def default_tone_voice(data: AnalysisInput) -> CategoryFields:
    return {
        "brandTone": inferrable_field("Professional"),
        "writingStyle": inferrable_field("Conversational"),
        "keyMessaging": unknown_field([]),
        "brandPersonality": unknown_field([]),
        "targetEmotions": unknown_field([]),
        "communicationStyle": inferrable_field("Direct"),
        "industryJargonLevel": inferrable_field("Moderate"),
        "callToActionStyle": inferrable_field("Value-focused"),
    }


def default_conversion_measurement(data: AnalysisInput) -> CategoryFields:
    return {
        "primaryConversionGoal": inferrable_field("Phone calls"),
        "secondaryConversionGoals": inferrable_field(["Form submissions"]),
        "currentTrackingSetup": unknown_field(["None detected"]),
        "phoneTrackingStatus": unknown_field(None),
        "formTrackingStatus": unknown_field(None),
        "currentLeadVolume": unknown_field(None),
        "conversionRate": unknown_field(None),
        "customerJourneyLength": inferrable_field("1-7 days"),
    }


def default_ai_considerations(data: AnalysisInput) -> CategoryFields:
    return {
        "aiSearchVisibility": unknown_field("Unknown"),
        "contentDepth": inferrable_field("Basic"),
        "expertiseSignals": unknown_field([]),
        "trustSignals": unknown_field([]),
        "authorshipClarity": unknown_field(False),
        "contentFreshness": unknown_field("Unknown"),
        "citationWorthiness": inferrable_field("Low"),
        "llmReadinessScore": inferrable_field(30),
        "entityFirstScore": inferrable_field(20),
        "hasSameAsReferences": unknown_field(False),
        "sameAsPlatforms": unknown_field([]),
        "hasAuthorBio": unknown_field(False),
        "hasCredentials": unknown_field(False),
        "aeoComplianceScore": inferrable_field(20),
        "hubSpokeScore": inferrable_field(20),
    }


CATEGORY_DEFAULTS: Dict[str, Callable[[AnalysisInput], CategoryFields]] = {
    "businessContext": default_business_context,
    "revenueServices": default_revenue_services,
    "localSEO": default_local_seo,
    "websiteReadiness": default_website_readiness,
    "toneVoice": default_tone_voice,
    "conversionMeasurement": default_conversion_measurement,
    "aiConsiderations": default_ai_considerations,
}


def synthesize_defaults(data: AnalysisInput) -> Dict[str, CategoryFields]:
    """
    Build the full default category map for an input.

    Args:
        data: Analysis input (only identity fields and evidence presence are read)

    Returns:
        Mapping category -> field name -> InferredField, covering every
        taxonomy field
    """
    return {category: build(data) for category, build in CATEGORY_DEFAULTS.items()}
