"""
Confidence Aggregation

Summarizes per-field confidence across all categories, and scores how
complete the evidence behind an analysis was.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..models import AnalysisInput, CategoryFields

logger = logging.getLogger(__name__)

HIGH_CONFIDENCE_THRESHOLD = 0.7
LOW_CONFIDENCE_THRESHOLD = 0.4

# Mean confidence reported when there are no fields at all
EMPTY_CONFIDENCE = 0.1

# Evidence weights for the data quality score (sum to 100)
EVIDENCE_WEIGHTS: Dict[str, int] = {
    "gbp": 25,
    "website_crawl": 25,
    "sitemap": 15,
    "competitors": 15,
    "seo_audit": 10,
    "citations": 10,
}


@dataclass
class ConfidenceSummary:
    """Aggregate confidence metrics for a result."""
    overall_confidence: float
    fields_total: int
    high_count: int
    low_count: int

    @property
    def medium_count(self) -> int:
        return self.fields_total - self.high_count - self.low_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall_confidence": round(self.overall_confidence, 3),
            "fields_total": self.fields_total,
            "high": self.high_count,
            "medium": self.medium_count,
            "low": self.low_count,
        }


def aggregate_confidence(
    categories: Dict[str, CategoryFields],
    high_threshold: float = HIGH_CONFIDENCE_THRESHOLD,
    low_threshold: float = LOW_CONFIDENCE_THRESHOLD,
) -> ConfidenceSummary:
    """
    Walk every leaf field and summarize its confidence.

    A field counts as high when confidence >= high_threshold, otherwise as
    low when confidence <= low_threshold. Fields in between count as neither.

    Args:
        categories: Category map (category -> field name -> InferredField)
        high_threshold: Inclusive lower bound for high confidence
        low_threshold: Inclusive upper bound for low confidence

    Returns:
        ConfidenceSummary with mean confidence and counts
    """
    scores = []
    high = 0
    low = 0

    for fields in categories.values():
        for inferred in fields.values():
            scores.append(inferred.confidence)
            if inferred.confidence >= high_threshold:
                high += 1
            elif inferred.confidence <= low_threshold:
                low += 1

    overall = sum(scores) / len(scores) if scores else EMPTY_CONFIDENCE

    return ConfidenceSummary(
        overall_confidence=overall,
        fields_total=len(scores),
        high_count=high,
        low_count=low,
    )


def calculate_data_quality_score(data: AnalysisInput) -> float:
    """
    Score evidence completeness 0-100.

    Each evidence kind present contributes its weight.
    """
    score = sum(weight for attr, weight in EVIDENCE_WEIGHTS.items() if data.has_evidence(attr))
    logger.debug(f"Data quality score for {data.session_id}: {score}")
    return float(score)


def clamp_quality_score(raw: Any) -> Optional[float]:
    """
    Validate a model-reported data quality score.

    Returns:
        Score clamped to 0-100, or None if the value is not a number
    """
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    if math.isnan(raw):
        return None
    return max(0.0, min(100.0, float(raw)))
