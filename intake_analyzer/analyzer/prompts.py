"""
Intake Analysis Prompts

Builds the system prompt (task, output contract, response structure, field
requirements) and the per-session data context (research evidence).

Both builders are deterministic: identical input renders identical text.
"""

import json
import logging
import math
from typing import Any, Dict, List, Optional

from ..models import AnalysisInput, InferenceSource
from ..taxonomy import CATEGORY_FIELDS, CATEGORY_NAMES, INSIGHT_KEYS, format_category_name
from ..utils.config import get_settings

logger = logging.getLogger(__name__)

CHARS_PER_TOKEN = 4


# ============================================================================
# SYSTEM PROMPT SECTIONS
# ============================================================================

ROLE_SECTION = """You are an expert digital marketing strategist specializing in local business SEO, Answer Engine Optimization (AEO), and competitive analysis. You analyze research data about a local business and produce SPECIFIC, ACTIONABLE output aligned with AEO and Hub+Spoke content strategy.

## Your Role
You are helping a marketing agency onboard a new client. You must:
1. Pre-populate every intake questionnaire field with a reasoned inference
2. Give SPECIFIC, IMPLEMENTABLE recommendations (never generic advice)
3. Focus on SEO and AEO opportunities
4. Assess content depth using Hub+Spoke methodology
5. Evaluate entity-first formatting and schema-informed content structure

## Output Format
You MUST respond with valid JSON only. No markdown fences, no commentary before or after - just the JSON object."""

CONFIDENCE_SECTION = """## Confidence Scoring Guidelines
- 0.9-1.0: Direct data match from a source
- 0.7-0.89: Strong inference from multiple data points
- 0.5-0.69: Reasonable inference from limited data
- 0.3-0.49: Weak inference, needs verification
- 0.1-0.29: Educated guess, likely needs correction"""

GUIDANCE_SECTION = """## Insights Must Be SPECIFIC

### Quick Wins
Each quick win names the exact change. Not "Improve meta descriptions" but the exact meta description to publish. Not "Add schema markup" but the schema type and its required properties. Not "Create service pages" but the page, its target keyword, its H1, word count and sections.

### Service Page Strategy (Spoke Page Standards)
For each missing or weak service page specify: exact title tag and H1, target keywords (primary, secondary, long-tail), word count target of 1,500-2,200 words (pages under 1,000 words are "thin"), sections (intro, 4-6 main sections, FAQ with 6 questions, CTA conclusion), 2+ links to hub pages and 2+ links to related spokes, and the schema types to implement.

### Location Page Strategy
For each service area without dedicated content specify: URL structure, title tag in the form "[Service] in [City], [State] | [Business Name]", a 1,500-2,200 word target, local keywords, nearby areas for semantic relevance, local proof points and LocalBusiness/Service schema with areaServed.

### Hub Page Assessment (Pillar Content Standards)
Hub pages run 3,000-5,000 words, cover the topic broadly and link to 8-12 supporting spoke pages. Assess whether each major service has one, how many spokes support it, and whether hub-to-spoke and spoke-to-spoke linking exists.

### SEO Technical Recommendations
Give exact meta title (under 60 characters) and meta description (under 160 characters) formats, missing robots.txt directives, llms.txt content, schema types with required properties and canonical URL issues.

### AEO (Answer Engine Optimization) - Entity-First Standards
Content should anchor around a defined entity (person or brand). Evaluate: brand name in the first paragraph, author attribution with credentials, at least 2 sameAs platform references, schema-compatible formatting (FAQPage, HowTo, Article, LocalBusiness), redundant entity mentions, backed claims, quotable statements, H1 with the primary topic, and a visible modified date.

## Competitor Analysis
For each competitor extract GBP metrics, website depth, technical SEO signals, service positioning, strengths and weaknesses. Compare the client against them on GBP, content, services and schema adoption, then classify the client's overall position as leader, competitive, challenger or laggard.

## Ideal Client Profile (ICP) and Customer Avatars
From all research data infer the primary ICP: demographics, psychographics, pain points, needs, objections, buying behavior and marketing channels, with a confidence score and reasoning. Create 2-3 distinct customer avatars covering different segments, motivations and decision styles, each with a trigger event, decision criteria, preferred channels and a representative quote.

## SERP Gap Analysis
Use competitor weaknesses (thin or outdated content, missing schema, missing title keywords, slow pages, no FAQ) to find ranking opportunities. Score each opportunity 0-100, identify the top quick wins (rankable in 1-3 months), topic coverage gaps, content freshness gaps, technical gaps and long-term opportunities."""

FIELD_STRUCTURE_SECTION = """Each category field MUST follow this structure:
{
  "value": <the inferred value>,
  "source": "<data source>",
  "confidence": 0.0-1.0,
  "reasoning": "Brief explanation"
}"""

SOURCE_DESCRIPTIONS = {
    InferenceSource.GBP: "Google Business Profile data",
    InferenceSource.SITEMAP: "Website sitemap analysis",
    InferenceSource.WEBSITE_CRAWL: "Website content and structure",
    InferenceSource.COMPETITORS: "Competitor analysis data",
    InferenceSource.SEO_AUDIT: "SEO technical audit",
    InferenceSource.CITATIONS: "Business citation data",
    InferenceSource.AI: "Your synthesis of multiple sources",
}

# Shape hints for each insight section
INSIGHT_SHAPES: Dict[str, Any] = {
    "contentGaps": [{
        "gap": "Specific description of what's missing",
        "priority": "high|medium|low",
        "action": "Exact implementation steps",
        "category": "Hub Page|Spoke Page|Location Page|Blog|Technical SEO|Schema|AEO",
        "targetKeyword": "primary keyword to target",
        "estimatedImpact": "Expected outcome",
        "wordCountTarget": 1500,
    }],
    "competitiveInsights": [{
        "insight": "What competitors are doing",
        "opportunity": "Specific way to differentiate or match",
        "competitors": ["names"],
        "actionableStep": "Exact implementation",
    }],
    "competitorComparison": {
        "clientProfile": "competitor profile object for the client (name, website, GBP metrics, page counts, schema, services, strengths, weaknesses)",
        "competitors": ["same structure as clientProfile, one per competitor"],
        "gbpComparison": {
            "clientRank": 1,
            "averageCompetitorRating": 4.3,
            "reviewCountComparison": "above|at|below",
            "photoCountComparison": "above|at|below",
            "recommendations": ["specific GBP improvements"],
        },
        "contentComparison": {
            "clientContentScore": "0-100",
            "averageCompetitorScore": "0-100",
            "contentGapsVsCompetitors": ["topics competitors cover that client doesn't"],
            "contentAdvantages": ["topics client covers better"],
            "wordCountComparison": "above|at|below",
        },
        "serviceComparison": {
            "sharedServices": ["services all/most offer"],
            "uniqueToClient": ["services only client offers"],
            "missingFromClient": ["services competitors offer that client doesn't"],
            "pricingPosition": "premium|mid-market|budget|unknown",
        },
        "technicalComparison": {
            "schemaAdoption": [{"competitor": "name", "schemaTypes": ["types"]}],
            "clientSchemaGaps": ["schema types to add"],
        },
        "overallPosition": "leader|competitive|challenger|laggard",
        "competitiveAdvantages": ["specific advantages"],
        "competitiveDisadvantages": ["specific disadvantages"],
        "marketOpportunities": ["opportunities in the market"],
    },
    "icpAnalysis": {
        "primaryICP": {
            "demographics": "ageRange, gender, incomeLevel, homeownership, familyStatus, location",
            "psychographics": "values[], lifestyle, buyingMotivation, decisionStyle",
            "painPoints": ["specific pain points"],
            "needs": ["what they need from the service"],
            "objections": ["common hesitations"],
            "buyingBehavior": "researchSources[], decisionTimeframe, decisionInfluencers[], priceWeight, qualityExpectations",
            "marketingChannels": "primary[], secondary[], messagingThemes[]",
            "confidence": 0.75,
            "reasoning": "Why this ICP was identified based on data",
        },
        "secondaryICPs": [],
        "avatars": ["2-3 persona objects: name, tagline, demographics, backgroundStory, goals[], frustrations[], triggerEvent, decisionCriteria[], objections[], preferredChannels[], lifetimeValueEstimate, representativeQuote"],
        "marketInsights": {
            "estimatedMarketSize": "Qualitative estimate",
            "competitionLevel": "high|medium|low",
            "growthTrend": "growing|stable|declining",
            "seasonalPatterns": ["patterns"],
        },
        "targetingRecommendations": ["specific targeting advice"],
        "messagingRecommendations": ["specific messaging advice"],
        "channelRecommendations": ["specific channel advice"],
    },
    "serpGapAnalysis": {
        "overallOpportunityScore": "0-100",
        "marketSaturation": "high|medium|low",
        "quickWinCount": 5,
        "serpOpportunities": ["keyword, searchIntent, difficulty, opportunityScore, rationale, competitorWeaknesses[], recommendedContentType, recommendedWordCount, targetUrl, titleTagRecommendation, estimatedTimeToRank"],
        "topicCoverageGaps": ["topic, competitorsCovering[], priority, recommendedContentFormat, suggestedTitle, estimatedWordCount, relatedKeywords[]"],
        "contentFreshnessGaps": ["topic, competitorWithOutdatedContent, lastUpdatedEstimate, recommendedAction"],
        "technicalGaps": ["gapType, description, competitorsWithAdvantage[], clientCurrentStatus, recommendedFix, implementationPriority"],
        "competitorWeaknessSummary": ["competitor, weaknessCount, primaryWeaknesses[], exploitationStrategy"],
        "quickWinActions": ["action, targetKeyword, competitorToOutrank, estimatedEffort, estimatedTimeToRank, rationale"],
        "longTermOpportunities": ["opportunity, timeframe, investmentLevel, expectedReturn"],
    },
    "suggestedKeywords": [{
        "keyword": "exact keyword phrase",
        "intent": "informational|navigational|commercial|transactional",
        "pageTarget": "Which page should target this",
        "currentlyRanking": False,
        "priority": "high|medium|low",
    }],
    "quickWins": [{
        "action": "SPECIFIC action with exact details",
        "impact": "high|medium|low",
        "effort": "easy|medium|hard",
        "category": "GBP|On-Page SEO|Technical SEO|Content|Schema|AEO|Local SEO|Entity Optimization",
        "implementation": "Step-by-step how to implement",
        "timeframe": "Immediate|This week|This month",
    }],
    "seoTechnical": {
        "metaTitleTemplate": "Recommended format with [variables]",
        "metaDescriptionTemplate": "Recommended format with [variables]",
        "robotsTxtStatus": "found|missing|incomplete",
        "robotsTxtRecommendations": ["specific directives to add"],
        "llmsTxtStatus": "found|missing",
        "llmsTxtRecommendations": "Exact content to include for llms.txt file",
        "missingSchemaTypes": ["specific schema with required properties"],
        "canonicalIssues": ["specific issues found"],
    },
    "aeoStrategy": {
        "currentReadiness": "high|medium|low",
        "entityFirstScore": "0-100",
        "entityAssessment": "brandNameInFirstParagraph, authorAttribution, sameAsReferences[], missingSameAs[], redundantEntityMentions, expertiseSignalsFound[], authoritySignalsMissing[]",
        "schemaReadiness": "faqSchemaPresent, howToSchemaPresent, localBusinessSchemaComplete, articleSchemaPresent, missingSchemaOpportunities[]",
        "faqOpportunities": [{"question": "Exact question", "answer": "Answer structure", "targetPage": "Where to add it", "schemaReady": True}],
        "speakableContent": ["Content sections good for voice search"],
        "citableStatements": ["Quotable expertise statements to add"],
        "contentStructureRecommendations": ["Formatting improvements for AI readability"],
        "aeoComplianceChecklist": "one boolean per entity-first checklist item, plus overallScore (0-100) and recommendations[]",
    },
    "hubSpokeAnalysis": {
        "overallScore": "0-100",
        "hasHubPages": False,
        "hubPages": ["topic, currentUrl, status (missing|thin|adequate|strong), currentWordCount, targetWordCount, spokeCount, targetSpokeCount, recommendations[]"],
        "spokePages": ["topic, parentHub, currentUrl, status, currentWordCount, targetWordCount, hasHubLink, hasCrossLinks, recommendations[]"],
        "missingHubTopics": ["topic, rationale, suggestedSpokes[], primaryKeyword, searchIntent"],
        "internalLinkingScore": "0-100",
        "internalLinkingIssues": ["specific linking gaps"],
        "contentJourneyCoverage": {
            "awareness": "strong|adequate|weak|missing",
            "consideration": "strong|adequate|weak|missing",
            "decision": "strong|adequate|weak|missing",
            "gaps": ["journey stage content missing"],
        },
    },
    "servicePageStrategy": [{
        "service": "Service name",
        "currentStatus": "missing|thin|adequate|strong",
        "currentWordCount": 0,
        "recommendedUrl": "/exact-url-path",
        "titleTag": "Exact title tag (under 60 chars)",
        "metaDescription": "Exact meta description (under 160 chars)",
        "h1": "Exact H1 tag",
        "targetKeywords": ["primary", "secondary", "long-tail"],
        "contentSections": ["section outline"],
        "wordCountTarget": 1800,
        "schemaTypes": ["Service", "FAQPage"],
        "internalLinks": {"toHub": "Hub page", "toSpokes": ["related spokes"], "fromPages": ["pages that should link here"]},
        "externalLinkSuggestions": ["high-authority external link topics"],
    }],
    "locationPageStrategy": [{
        "location": "City, State",
        "currentStatus": "missing|thin|adequate",
        "currentWordCount": 0,
        "recommendedUrl": "/exact-url-path",
        "titleTag": "Exact title tag",
        "metaDescription": "Exact meta description",
        "h1": "Exact H1 tag",
        "localKeywords": ["keywords"],
        "contentAngle": "Unique angle for this location",
        "wordCountTarget": 1800,
        "contentSections": ["section outline"],
        "nearbyAreas": ["areas to mention"],
        "localProofPoints": ["local testimonials, projects, landmarks"],
        "schemaTypes": ["LocalBusiness", "Service with areaServed"],
    }],
    "priorityRecommendations": [{
        "priority": 1,
        "action": "Specific action",
        "category": "Hub Content|Spoke Content|AEO|Technical SEO|Local SEO",
        "rationale": "Why this is priority",
        "expectedImpact": "What improvement to expect",
    }],
    "riskFactors": [{
        "risk": "Specific risk or issue",
        "severity": "high|medium|low",
        "mitigation": "How to address it",
    }],
}


def _source_section() -> str:
    lines = ["## Source Attribution"]
    for source, description in SOURCE_DESCRIPTIONS.items():
        lines.append(f'- "{source.value}": {description}')
    return "\n".join(lines)


def _response_structure() -> str:
    structure = {
        "categories": {
            category: {"<fieldName>": "{value, source, confidence, reasoning}"}
            for category in CATEGORY_NAMES
        },
        "insights": {key: INSIGHT_SHAPES[key] for key in INSIGHT_KEYS},
        "dataQualityScore": "0-100",
        "warnings": [],
    }
    return "## Response Structure\n" + json.dumps(structure, indent=2)


def _field_requirements() -> str:
    lines = ["## Field Requirements by Category", ""]
    for category, fields in CATEGORY_FIELDS.items():
        lines.append(f"### {format_category_name(category)}")
        lines.extend(spec.describe() for spec in fields)
        lines.append("")
    return "\n".join(lines)


def build_system_prompt() -> str:
    """
    Build the complete system prompt.

    Returns:
        Role and output contract, scoring guidelines, response structure and
        the field requirements rendered from the taxonomy
    """
    sections = [
        ROLE_SECTION,
        CONFIDENCE_SECTION,
        _source_section(),
        GUIDANCE_SECTION,
        _response_structure(),
        FIELD_STRUCTURE_SECTION,
        _field_requirements(),
    ]
    return "\n\n".join(sections)


# ============================================================================
# DATA CONTEXT
# ============================================================================

# (attribute, heading, preamble lines, absent text)
EVIDENCE_SECTIONS = [
    (
        "gbp",
        "Google Business Profile Data",
        [],
        "No GBP data available - recommend claiming/optimizing GBP.",
    ),
    (
        "sitemap",
        "Sitemap Data (Raw URLs)",
        [
            "**IMPORTANT:** Categorize these URLs yourself from URL patterns AND titles.",
            "Do NOT rely on any pre-categorized data.",
        ],
        "No sitemap found - this is a technical SEO issue to address.",
    ),
    (
        "website_crawl",
        "Website Crawl Data (Enriched Pages)",
        [
            "Each page may include `pageType` (verify against title and content), `contentPreview` "
            "(use for tone, USPs, team and credentials), `headings` (structure and keyword targeting), "
            "link counts (Hub+Spoke linking health) and per-page `schemaTypes` (AEO compliance).",
        ],
        "No website crawl data available.",
    ),
    (
        "competitors",
        "Competitor Analysis",
        ["Use this data to identify competitive gaps and opportunities."],
        "No competitor data available.",
    ),
    (
        "seo_audit",
        "SEO Audit Results",
        [],
        "No SEO audit data available.",
    ),
    (
        "citations",
        "Business Citations",
        [],
        "No citation data available - recommend citation audit.",
    ),
]

ANALYSIS_INSTRUCTIONS = """---

# Analysis Instructions

## Required Analysis
1. **Infer all 68+ intake fields** with confidence scores
2. **Identify specific content gaps** - be exact about which pages or content are missing
3. **Provide implementable quick wins** - not generic advice
4. **Assess Hub+Spoke content architecture** - content depth and structure
5. **Evaluate AEO/Entity-First compliance** - score against the AEO checklist

## Extract These Fields FROM WEBSITE DATA (High Confidence)
When found on the website, assign confidence 0.85+:
- **serviceAreas**, **primaryServiceArea**, **serviceRadius**: service area and location pages, footers
- **teamSize**, **yearsInBusiness**, **expertiseSignals**: team, about and staff pages
- **brandTone**, **writingStyle**, **keyMessaging**: page copy and headings across the site
- **uniqueSellingPoints**, **primaryServices**, **secondaryServices**, **businessDescription**: homepage, about and service pages
- **competitiveAdvantages**: compare the client against the competitor data
- **seasonality**: infer from industry norms plus the city/state

## Fields That REQUIRE Manual Input (Low Confidence OK)
referralPercentage, clientRetentionRate, averageTransactionValue, currentLeadVolume, conversionRate and tracking details cannot be found on websites.

## Output Reminder
Respond with valid JSON only. Be SPECIFIC in all recommendations.
Include word counts, exact URLs, exact title/meta tags.
Score content against Hub+Spoke and AEO standards.
"""


def _truncate_data(data: Any, max_items: int) -> Any:
    """Truncate long evidence lists to keep the prompt bounded."""
    if isinstance(data, list):
        if len(data) > max_items:
            logger.debug(f"Truncating evidence list from {len(data)} to {max_items} items")
        return [_truncate_data(item, max_items) for item in data[:max_items]]
    if isinstance(data, dict):
        return {key: _truncate_data(value, max_items) for key, value in data.items()}
    return data


def _json_block(data: Any) -> str:
    return "```json\n" + json.dumps(data, indent=2, default=str) + "\n```"


def build_data_context(data: AnalysisInput, max_items: Optional[int] = None) -> str:
    """
    Render the research evidence for one session.

    Args:
        data: Analysis input
        max_items: Ceiling on evidence list lengths (defaults to settings)

    Returns:
        Data context document
    """
    if max_items is None:
        max_items = get_settings().MAX_EVIDENCE_ITEMS

    lines: List[str] = ["# Research Data for Analysis", "", "## Business Information"]
    lines.append(f"- Business Name: {data.business_name}")
    lines.append(f"- Website: {data.website}")
    if data.city:
        lines.append(f"- City: {data.city}")
    if data.state:
        lines.append(f"- State: {data.state}")
    if data.industry:
        lines.append(f"- Industry: {data.industry}")
    lines.append("")

    for attr, heading, preamble, absent in EVIDENCE_SECTIONS:
        lines.append(f"## {heading}")
        if data.has_evidence(attr):
            lines.extend(preamble)
            lines.append(_json_block(_truncate_data(getattr(data, attr), max_items)))
        else:
            lines.append(absent)
        lines.append("")

    if data.has_evidence("manual_input"):
        lines.append("## USER-VERIFIED DATA (HIGH CONFIDENCE)")
        lines.append("**IMPORTANT:** The following data was provided directly by the business owner/agency.")
        lines.append("Use this data with HIGH CONFIDENCE (0.95+) for the corresponding fields.")
        lines.append("This overrides any conflicting inferences from other data sources.")
        lines.append("")
        lines.append(_json_block(data.manual_input))
        lines.append("")

    lines.append(ANALYSIS_INSTRUCTIONS)
    return "\n".join(lines)


def estimate_prompt_tokens(system_prompt: str, data_context: str) -> int:
    """Rough token estimate for a prompt pair (~4 characters per token)."""
    return math.ceil((len(system_prompt) + len(data_context)) / CHARS_PER_TOKEN)
