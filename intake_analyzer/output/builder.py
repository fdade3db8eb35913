"""
Result Builder

Merges parsed model output over deterministic defaults and computes the
aggregate metrics of an AnalysisResult. Also builds the pure-default
fallback result used whenever generation is unavailable.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..models import AnalysisInput, AnalysisResult, CategoryFields, InferredField
from ..taxonomy import (
    CATEGORY_NAMES,
    QUESTIONNAIRE_FIELD_COUNT,
    TAXONOMY_VERSION,
    create_default_insights,
    field_specs,
    merge_insights,
    synthesize_defaults,
)
from ..utils.config import Settings, get_settings
from .confidence import aggregate_confidence, calculate_data_quality_score, clamp_quality_score

logger = logging.getLogger(__name__)

FALLBACK_MODEL = "fallback"
FALLBACK_OVERALL_CONFIDENCE = 0.2
FALLBACK_DATA_QUALITY_SCORE = 10.0


def merge_category(
    category: str,
    defaults: CategoryFields,
    parsed: Optional[Dict[str, Any]],
) -> CategoryFields:
    """
    Override default fields with parsed ones, field by field.

    Field names outside the taxonomy are dropped, and so are parsed values
    that do not match the field's declared type.
    """
    merged = dict(defaults)
    if not isinstance(parsed, dict):
        return merged

    specs = field_specs(category)
    for name, payload in parsed.items():
        if name not in specs:
            logger.debug(f"Dropping unknown field from AI response: {category}.{name}")
            continue
        inferred = InferredField.from_payload(payload, defaults[name])
        if not specs[name].accepts(inferred.value):
            logger.debug(
                f"Keeping default for {category}.{name}: "
                f"{type(inferred.value).__name__} does not match {specs[name].type}"
            )
            continue
        merged[name] = inferred

    return merged


class ResultBuilder:
    """
    Builds complete AnalysisResults from (possibly partial) parsed output.

    Every category and every field of the taxonomy is always present in the
    built result.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def merge_categories(
        self,
        parsed_categories: Optional[Dict[str, Any]],
        data: AnalysisInput,
    ) -> Dict[str, CategoryFields]:
        """Merge parsed categories over the defaults for this input."""
        defaults = synthesize_defaults(data)
        parsed_categories = parsed_categories or {}
        return {
            category: merge_category(category, defaults[category], parsed_categories.get(category))
            for category in CATEGORY_NAMES
        }

    def build(
        self,
        parsed_categories: Optional[Dict[str, Any]],
        parsed_insights: Optional[Dict[str, Any]],
        data: AnalysisInput,
        data_quality_score: Any = None,
        warnings: Optional[List[str]] = None,
        model: Optional[str] = None,
    ) -> AnalysisResult:
        """
        Build a result from parsed model output.

        Args:
            parsed_categories: Parsed category objects keyed by category name
            parsed_insights: Parsed insights object
            data: Analysis input (drives the defaults)
            data_quality_score: Model-reported score, if any
            warnings: Warnings to carry into the result
            model: Model identifier

        Returns:
            Complete AnalysisResult
        """
        categories = self.merge_categories(parsed_categories, data)
        summary = aggregate_confidence(
            categories,
            high_threshold=self.settings.HIGH_CONFIDENCE_THRESHOLD,
            low_threshold=self.settings.LOW_CONFIDENCE_THRESHOLD,
        )

        quality = clamp_quality_score(data_quality_score)
        if quality is None:
            quality = calculate_data_quality_score(data)

        logger.debug(
            f"Built result for {data.session_id}: confidence {summary.overall_confidence:.2f}, "
            f"{summary.high_count} high / {summary.low_count} low"
        )

        return AnalysisResult(
            analyzed_at=datetime.now(timezone.utc),
            model=model or self.settings.CLAUDE_MODEL,
            session_id=data.session_id,
            categories=categories,
            insights=merge_insights(parsed_insights),
            overall_confidence=summary.overall_confidence,
            fields_analyzed=QUESTIONNAIRE_FIELD_COUNT,
            fields_with_high_confidence=summary.high_count,
            fields_with_low_confidence=summary.low_count,
            data_quality_score=quality,
            warnings=list(warnings or []),
            taxonomy_version=TAXONOMY_VERSION,
        )


def create_fallback_result(data: AnalysisInput, error: str) -> AnalysisResult:
    """
    Create the pure-default result used when generation is unavailable.

    Args:
        data: Analysis input
        error: Human-readable reason generation was unavailable

    Returns:
        AnalysisResult with model "fallback"
    """
    logger.warning(f"Using fallback analysis for {data.session_id}: {error}")

    return AnalysisResult(
        analyzed_at=datetime.now(timezone.utc),
        model=FALLBACK_MODEL,
        session_id=data.session_id,
        categories=synthesize_defaults(data),
        insights=create_default_insights(),
        overall_confidence=FALLBACK_OVERALL_CONFIDENCE,
        fields_analyzed=QUESTIONNAIRE_FIELD_COUNT,
        fields_with_high_confidence=0,
        fields_with_low_confidence=QUESTIONNAIRE_FIELD_COUNT,
        data_quality_score=FALLBACK_DATA_QUALITY_SCORE,
        warnings=[f"AI analysis unavailable: {error}"],
        errors=[error],
        taxonomy_version=TAXONOMY_VERSION,
    )
