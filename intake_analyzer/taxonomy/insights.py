"""
Strategic Insights Defaults

The insights tree is loosely typed (plain dicts and lists, camelCase keys as
emitted by the model). This module owns the complete default tree, used
whenever the model output lacks a top-level insight section.
"""

import copy
from typing import Any, Dict, Optional, Tuple


INSIGHT_KEYS: Tuple[str, ...] = (
    "contentGaps",
    "competitiveInsights",
    "competitorComparison",
    "icpAnalysis",
    "serpGapAnalysis",
    "suggestedKeywords",
    "quickWins",
    "seoTechnical",
    "aeoStrategy",
    "hubSpokeAnalysis",
    "servicePageStrategy",
    "locationPageStrategy",
    "priorityRecommendations",
    "riskFactors",
)


# ============================================================================
# DEFAULT TREE
# ============================================================================

_EMPTY_COMPETITOR_PROFILE: Dict[str, Any] = {
    "name": "",
    "website": "",
    "gbpRating": None,
    "gbpReviewCount": None,
    "gbpPhotosCount": None,
    "gbpCategories": [],
    "gbpResponseRate": None,
    "estimatedPageCount": None,
    "hasServicePages": False,
    "servicePageCount": None,
    "hasBlogSection": False,
    "blogPostCount": None,
    "hasLocationPages": False,
    "contentDepthAssessment": "minimal",
    "hasSsl": False,
    "hasSchema": False,
    "schemaTypes": [],
    "primaryServices": [],
    "uniqueValueProps": [],
    "pricingIndicators": None,
    "targetAudience": "",
    "strengths": [],
    "weaknesses": [],
}

DEFAULT_INSIGHTS: Dict[str, Any] = {
    "contentGaps": [
        {
            "gap": "Service descriptions need detailed content (1,500-2,200 words)",
            "priority": "high",
            "action": "Create comprehensive service pages following spoke page standards",
            "category": "Spoke Page",
            "targetKeyword": "",
            "estimatedImpact": "Improved rankings for service keywords",
            "wordCountTarget": 1800,
        },
    ],
    "competitiveInsights": [],
    "competitorComparison": {
        "clientProfile": _EMPTY_COMPETITOR_PROFILE,
        "competitors": [],
        "gbpComparison": {
            "clientRank": 0,
            "averageCompetitorRating": 0,
            "reviewCountComparison": "below",
            "photoCountComparison": "below",
            "recommendations": ["Complete competitor research to generate GBP comparison"],
        },
        "contentComparison": {
            "clientContentScore": 0,
            "averageCompetitorScore": 0,
            "contentGapsVsCompetitors": [],
            "contentAdvantages": [],
            "wordCountComparison": "below",
        },
        "serviceComparison": {
            "sharedServices": [],
            "uniqueToClient": [],
            "missingFromClient": [],
            "pricingPosition": "unknown",
        },
        "technicalComparison": {
            "schemaAdoption": [],
            "clientSchemaGaps": [],
        },
        "overallPosition": "laggard",
        "competitiveAdvantages": [],
        "competitiveDisadvantages": ["Insufficient data for competitive analysis"],
        "marketOpportunities": [],
    },
    "icpAnalysis": {
        "primaryICP": {
            "demographics": {
                "ageRange": "Unknown",
                "gender": "All",
                "incomeLevel": "Unknown",
                "homeownership": "Unknown",
                "familyStatus": "Unknown",
                "location": "Local area",
            },
            "psychographics": {
                "values": [],
                "lifestyle": "Unknown",
                "buyingMotivation": "Unknown",
                "decisionStyle": "Research-heavy",
            },
            "painPoints": [],
            "needs": [],
            "objections": [],
            "buyingBehavior": {
                "researchSources": ["Google Search", "Online Reviews"],
                "decisionTimeframe": "1-7 days",
                "decisionInfluencers": [],
                "priceWeight": "secondary",
                "qualityExpectations": "Unknown",
            },
            "marketingChannels": {
                "primary": ["Google Search", "Google Business Profile"],
                "secondary": [],
                "messagingThemes": [],
            },
            "confidence": 0.1,
            "reasoning": "Insufficient data to identify ICP - complete research tasks first",
        },
        "secondaryICPs": [],
        "avatars": [],
        "marketInsights": {
            "estimatedMarketSize": "Unknown",
            "competitionLevel": "medium",
            "growthTrend": "stable",
            "seasonalPatterns": [],
        },
        "targetingRecommendations": ["Complete research to generate targeting recommendations"],
        "messagingRecommendations": ["Complete research to generate messaging recommendations"],
        "channelRecommendations": ["Complete research to generate channel recommendations"],
    },
    "serpGapAnalysis": {
        "overallOpportunityScore": 0,
        "marketSaturation": "medium",
        "quickWinCount": 0,
        "serpOpportunities": [],
        "topicCoverageGaps": [],
        "contentFreshnessGaps": [],
        "technicalGaps": [],
        "competitorWeaknessSummary": [],
        "quickWinActions": [],
        "longTermOpportunities": [],
    },
    "suggestedKeywords": [],
    "quickWins": [
        {
            "action": "Claim and optimize Google Business Profile",
            "impact": "high",
            "effort": "easy",
            "category": "Local SEO",
            "timeframe": "Immediate",
            "implementation": "Go to business.google.com, claim listing, complete all fields",
        },
    ],
    "seoTechnical": {
        "metaTitleTemplate": "[Service] in [City], [State] | [Business Name]",
        "metaDescriptionTemplate": (
            "[Business Name] provides [service] in [City]. [Value prop]. "
            "Call [phone] for a free quote."
        ),
        "robotsTxtStatus": "missing",
        "robotsTxtRecommendations": ["Add robots.txt with sitemap reference"],
        "llmsTxtStatus": "missing",
        "llmsTxtRecommendations": (
            "Create llms.txt with business description, services, expertise, and contact info"
        ),
        "missingSchemaTypes": ["LocalBusiness", "Service", "FAQPage"],
        "canonicalIssues": [],
    },
    "aeoStrategy": {
        "currentReadiness": "low",
        "entityFirstScore": 20,
        "entityAssessment": {
            "brandNameInFirstParagraph": False,
            "authorAttribution": False,
            "sameAsReferences": [],
            "missingSameAs": ["LinkedIn", "YouTube", "Facebook"],
            "redundantEntityMentions": False,
            "expertiseSignalsFound": [],
            "authoritySignalsMissing": ["Credentials", "Years in business", "Certifications"],
        },
        "schemaReadiness": {
            "faqSchemaPresent": False,
            "howToSchemaPresent": False,
            "localBusinessSchemaComplete": False,
            "articleSchemaPresent": False,
            "missingSchemaOpportunities": ["LocalBusiness", "Service", "FAQPage", "HowTo"],
        },
        "faqOpportunities": [],
        "speakableContent": [],
        "citableStatements": [],
        "contentStructureRecommendations": [
            "Add FAQ sections to service pages",
            "Include author bios with credentials",
        ],
        "aeoComplianceChecklist": {
            "brandInFirstParagraph": False,
            "twoSameAsReferences": False,
            "schemaCompatibleFormatting": False,
            "authorAttribution": False,
            "redundantEntityMentions": False,
            "internalTopicClusterLinks": False,
            "backedClaimsWithCitations": False,
            "h1WithPrimaryTopic": False,
            "dateModifiedVisible": False,
            "overallScore": 20,
            "recommendations": ["Complete analysis to generate specific recommendations"],
        },
    },
    "hubSpokeAnalysis": {
        "overallScore": 20,
        "hasHubPages": False,
        "hubPages": [],
        "spokePages": [],
        "missingHubTopics": [],
        "internalLinkingScore": 20,
        "internalLinkingIssues": ["No hub-spoke content architecture detected"],
        "contentJourneyCoverage": {
            "awareness": "missing",
            "consideration": "missing",
            "decision": "missing",
            "gaps": ["All customer journey stages need content"],
        },
    },
    "servicePageStrategy": [],
    "locationPageStrategy": [],
    "priorityRecommendations": [
        {
            "priority": 1,
            "action": "Complete analysis data collection",
            "category": "Technical SEO",
            "rationale": "Need more data for comprehensive recommendations",
            "expectedImpact": "Enable full analysis and specific recommendations",
        },
    ],
    "riskFactors": [
        {
            "risk": "Insufficient data for comprehensive analysis",
            "severity": "medium",
            "mitigation": "Complete all research tasks before running analysis",
        },
    ],
}


def create_default_insights() -> Dict[str, Any]:
    """Fresh copy of the full default insights tree."""
    return copy.deepcopy(DEFAULT_INSIGHTS)


def merge_insights(parsed: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Merge parsed insights over the defaults, one level deep.

    A top-level key present in the parsed tree replaces the default for that
    key wholesale; missing keys keep their defaults. Extra top-level keys the
    model emitted are kept.

    Args:
        parsed: Parsed insights object (or None)

    Returns:
        Complete insights tree containing every default key
    """
    merged = create_default_insights()
    if isinstance(parsed, dict):
        merged.update(parsed)
    return merged
