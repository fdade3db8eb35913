"""
Intake Analysis Data Models

Defines the types flowing through the analysis pipeline:
- InferredField: a value plus provenance, confidence and justification
- AnalysisInput: the evidence bundle collected for one research session
- AnalysisResult: the complete, schema-complete result envelope
- AnalyzeResult: the orchestrator's wrapper (always successful)

Python attributes are snake_case; to_dict() produces the versioned camelCase
wire shape consumed by the store and the presentation layer.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


# =============================================================================
# ENUMS
# =============================================================================


class InferenceSource(str, Enum):
    """Where an inferred field value came from."""
    GBP = "gbp"  # Google Business Profile data
    SITEMAP = "sitemap"  # Sitemap analysis
    WEBSITE_CRAWL = "websiteCrawl"  # Website crawler data
    COMPETITORS = "competitors"  # Competitor analysis
    SEO_AUDIT = "seoAudit"  # SEO audit data
    CITATIONS = "citations"  # Citation check data
    AI = "ai"  # Model inference (synthesized from multiple sources)
    USER_INPUT = "userInput"  # Direct user input

    @classmethod
    def coerce(cls, value: Any) -> "InferenceSource":
        """Map a raw source string to a known source, defaulting to AI."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return cls.AI


# =============================================================================
# FIELDS
# =============================================================================


def _coerce_confidence(raw: Any, default: float) -> float:
    """Clamp a model-reported confidence into [0, 1]."""
    if isinstance(raw, bool):
        return default
    if isinstance(raw, str):
        try:
            raw = float(raw.strip())
        except ValueError:
            return default
    if not isinstance(raw, (int, float)) or math.isnan(raw):
        return default
    return max(0.0, min(1.0, float(raw)))


@dataclass
class InferredField:
    """A field value with confidence scoring and source tracking."""
    value: Any
    source: InferenceSource
    confidence: float  # 0.0 - 1.0
    reasoning: str = ""
    alternative_values: Optional[List[Any]] = None

    @classmethod
    def from_payload(cls, payload: Any, fallback: "InferredField") -> "InferredField":
        """
        Build a field from what the model emitted for it.

        Args:
            payload: Raw parsed JSON for the field
            fallback: Default field, used for a missing or invalid confidence

        Returns:
            InferredField carrying the model's value, or the fallback itself
            when the payload is an object without a value
        """
        if isinstance(payload, dict):
            if "value" not in payload:
                # Typically a field whose value was cut off by truncation
                return fallback
            alternatives = payload.get("alternativeValues")
            return cls(
                value=payload["value"],
                source=InferenceSource.coerce(payload.get("source", InferenceSource.AI)),
                confidence=_coerce_confidence(payload.get("confidence"), fallback.confidence),
                reasoning=str(payload.get("reasoning") or ""),
                alternative_values=alternatives if isinstance(alternatives, list) else None,
            )

        # Bare value instead of the {value, source, confidence} shape
        return cls(
            value=payload,
            source=InferenceSource.AI,
            confidence=fallback.confidence,
            reasoning="Model returned a bare value without confidence metadata",
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        data = {
            "value": self.value,
            "source": self.source.value,
            "confidence": self.confidence,
            "reasoning": self.reasoning,
        }
        if self.alternative_values is not None:
            data["alternativeValues"] = self.alternative_values
        return data


CategoryFields = Dict[str, InferredField]


# =============================================================================
# INPUT
# =============================================================================


# Python attribute -> wire key for each evidence kind
EVIDENCE_KEYS: Dict[str, str] = {
    "gbp": "gbp",
    "sitemap": "sitemap",
    "website_crawl": "websiteCrawl",
    "competitors": "competitors",
    "seo_audit": "seoAudit",
    "citations": "citations",
    "manual_input": "manualInput",
}


@dataclass
class AnalysisInput:
    """
    Evidence bundle for one analysis run.

    Evidence records are opaque: the core only checks presence, and renders
    them into the prompt as JSON.
    """
    session_id: str
    business_name: str
    website: str
    city: Optional[str] = None
    state: Optional[str] = None
    industry: Optional[str] = None

    # Research results
    gbp: Optional[Dict[str, Any]] = None
    sitemap: Optional[Dict[str, Any]] = None
    website_crawl: Optional[Dict[str, Any]] = None
    competitors: Optional[List[Dict[str, Any]]] = None
    seo_audit: Optional[Dict[str, Any]] = None
    citations: Optional[List[Dict[str, Any]]] = None

    # User-verified corrections: category -> field -> value
    manual_input: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisInput":
        """
        Build input from a collector session payload (camelCase keys).

        Raises:
            ValueError: If a required key is missing
        """
        required = {
            "sessionId": "session_id",
            "businessName": "business_name",
            "website": "website",
        }
        missing = [key for key in required if not data.get(key)]
        if missing:
            raise ValueError(f"Missing required input: {', '.join(missing)}")

        kwargs: Dict[str, Any] = {attr: data[key] for key, attr in required.items()}
        for key in ("city", "state", "industry"):
            if data.get(key):
                kwargs[key] = data[key]
        for attr, key in EVIDENCE_KEYS.items():
            if data.get(key) is not None:
                kwargs[attr] = data[key]

        return cls(**kwargs)

    def has_evidence(self, attr: str) -> bool:
        """Check if an evidence kind is present and non-empty."""
        value = getattr(self, attr, None)
        if value is None:
            return False
        if isinstance(value, (dict, list)):
            return len(value) > 0
        return True

    def evidence_summary(self) -> Dict[str, bool]:
        """Presence/absence of each evidence kind, keyed by wire name."""
        return {key: self.has_evidence(attr) for attr, key in EVIDENCE_KEYS.items()}

    @property
    def location(self) -> str:
        """City and state joined, or empty string."""
        return ", ".join(part for part in (self.city, self.state) if part)


# =============================================================================
# RESULT
# =============================================================================


@dataclass
class TokenUsage:
    """Track token usage for cost calculation."""
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    @property
    def estimated_cost(self) -> float:
        """Estimate cost based on Claude Sonnet 4 pricing."""
        # Sonnet 4 pricing: $3/1M input, $15/1M output
        input_cost = (self.input_tokens / 1_000_000) * 3.0
        output_cost = (self.output_tokens / 1_000_000) * 15.0
        return input_cost + output_cost

    def to_dict(self) -> Dict[str, int]:
        return {
            "input": self.input_tokens,
            "output": self.output_tokens,
            "total": self.total_tokens,
        }


@dataclass
class AnalysisResult:
    """Complete intake analysis result."""

    # Metadata
    analyzed_at: datetime
    model: str  # Model identifier or "fallback"
    session_id: str

    # All 7 categories, fixed field names
    categories: Dict[str, CategoryFields]

    # Strategic insights (loosely typed tree)
    insights: Dict[str, Any]

    # Aggregate metrics
    overall_confidence: float  # 0-1 average confidence
    fields_analyzed: int
    fields_with_high_confidence: int
    fields_with_low_confidence: int
    data_quality_score: float  # 0-100 based on input data completeness

    # API usage tracking
    token_usage: TokenUsage = field(default_factory=TokenUsage)

    # Processing metadata
    processing_time_ms: int = 0
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    # Version of the field taxonomy the categories follow
    taxonomy_version: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.model == "fallback"

    def get_field(self, category: str, name: str) -> InferredField:
        """Get a single field by category and field name."""
        return self.categories[category][name]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the versioned wire shape."""
        return {
            "analyzedAt": self.analyzed_at.isoformat(),
            "model": self.model,
            "taxonomyVersion": self.taxonomy_version,
            "sessionId": self.session_id,
            "categories": {
                category: {name: f.to_dict() for name, f in fields.items()}
                for category, fields in self.categories.items()
            },
            "insights": self.insights,
            "overallConfidence": self.overall_confidence,
            "fieldsAnalyzed": self.fields_analyzed,
            "fieldsWithHighConfidence": self.fields_with_high_confidence,
            "fieldsWithLowConfidence": self.fields_with_low_confidence,
            "dataQualityScore": self.data_quality_score,
            "tokenUsage": self.token_usage.to_dict(),
            "processingTimeMs": self.processing_time_ms,
            "warnings": list(self.warnings),
            "errors": list(self.errors),
        }


@dataclass
class AnalyzeResult:
    """Result wrapper returned by the orchestrator."""
    success: bool
    data: Optional[AnalysisResult] = None
    estimated_cost: float = 0.0
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "data": self.data.to_dict() if self.data else None,
            "estimatedCost": self.estimated_cost,
            "error": self.error,
        }
