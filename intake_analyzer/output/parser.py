"""
Resilient Response Parser

Turns the model's free-text response into an AnalysisResult.

Extraction stages, in order:
1. Strip a surrounding markdown code fence
2. Direct JSON parse (must be an object with "categories")
3. Repair-then-parse for truncated output
4. Partial extraction of the "categories" and "insights" sub-objects

Each stage only runs if the previous one failed. Nothing here raises.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..models import AnalysisInput, AnalysisResult
from ..taxonomy import CATEGORY_NAMES
from .builder import ResultBuilder
from .scanner import find_balanced_span, repair_truncated_json, strip_code_fences

logger = logging.getLogger(__name__)

_QUALITY_SCORE_PATTERN = re.compile(r'"dataQualityScore"\s*:\s*(-?\d+(?:\.\d+)?)')

PARTIAL_PARSE_WARNING = "AI response could not be parsed as a whole; recovered sections were extracted individually"
MISSING_CATEGORIES_WARNING = "Intake fields could not be recovered from the AI response; default values used"
MISSING_INSIGHTS_WARNING = "Strategic insights could not be recovered from the AI response; default insights used"
REPAIRED_PARSE_WARNING = "AI response was incomplete and had to be repaired; cut-off values were replaced with defaults"


@dataclass
class ParsedResponse:
    """Raw sections extracted from a model response."""
    categories: Dict[str, Dict[str, Any]]
    insights: Optional[Dict[str, Any]]
    data_quality_score: Optional[float]
    warnings: List[str] = field(default_factory=list)
    parse_method: str = "direct"  # "direct", "repaired", "partial"


class ResponseParser:
    """
    Parses model responses with graceful degradation.

    Supports multiple recovery strategies with fallback chain:
    1. Direct parse of the (fence-stripped) response
    2. Truncation repair, then parse
    3. Independent extraction of the categories and insights objects
    """

    def __init__(self, builder: Optional[ResultBuilder] = None):
        self.builder = builder or ResultBuilder()

    def parse(
        self,
        text: str,
        data: AnalysisInput,
        model: Optional[str] = None,
    ) -> Optional[AnalysisResult]:
        """
        Parse a model response into a complete result.

        Args:
            text: Raw response text
            data: Analysis input (drives the defaults)
            model: Model identifier to record on the result

        Returns:
            AnalysisResult, or None if nothing usable could be extracted
        """
        try:
            parsed = self.extract(text)
            if parsed is None:
                logger.warning(f"Failed to parse AI response ({len(text or '')} chars)")
                logger.debug(f"Response preview: {(text or '')[:500]}")
                return None

            logger.info(f"Parsed AI response via {parsed.parse_method} extraction")
            return self.builder.build(
                parsed.categories,
                parsed.insights,
                data,
                data_quality_score=parsed.data_quality_score,
                warnings=parsed.warnings,
                model=model,
            )
        except Exception as e:
            logger.error(f"Unexpected error parsing AI response: {e}")
            return None

    def extract(self, text: str) -> Optional[ParsedResponse]:
        """
        Run the extraction stages over a response.

        Returns:
            ParsedResponse, or None if no stage recovered anything
        """
        if not text:
            return None

        cleaned = strip_code_fences(text)
        if not cleaned:
            return None

        methods = [
            ("direct", self._load_direct),
            ("repaired", self._load_repaired),
        ]

        for method_name, loader in methods:
            try:
                payload = loader(cleaned)
            except (json.JSONDecodeError, RecursionError) as e:
                logger.debug(f"{method_name} parsing failed: {e}")
                continue
            if payload is not None:
                return self._from_payload(payload, method_name, cleaned)

        return self._extract_partial(cleaned)

    # =========================================================================
    # WHOLE-DOCUMENT STAGES
    # =========================================================================

    def _load_direct(self, text: str) -> Optional[Dict[str, Any]]:
        payload = json.loads(text)
        return payload if self._is_analysis_payload(payload) else None

    def _load_repaired(self, text: str) -> Optional[Dict[str, Any]]:
        repaired = repair_truncated_json(text)
        if repaired == text:
            return None
        payload = json.loads(repaired)
        return payload if self._is_analysis_payload(payload) else None

    def _is_analysis_payload(self, payload: Any) -> bool:
        return isinstance(payload, dict) and isinstance(payload.get("categories"), dict)

    def _from_payload(self, payload: Dict[str, Any], method: str, text: str) -> ParsedResponse:
        """Build a ParsedResponse from a fully parsed document."""
        insights = payload.get("insights")
        insights = insights if isinstance(insights, dict) else None
        raw_warnings = payload.get("warnings")
        warnings = [str(w) for w in raw_warnings] if isinstance(raw_warnings, list) else []

        if method == "repaired":
            insights = self._drop_cut_insight(text, insights)
            warnings.append(REPAIRED_PARSE_WARNING)

        return ParsedResponse(
            categories=self._known_categories(payload["categories"]),
            insights=insights,
            data_quality_score=payload.get("dataQualityScore"),
            warnings=warnings,
            parse_method=method,
        )

    def _drop_cut_insight(
        self,
        text: str,
        insights: Optional[Dict[str, Any]],
    ) -> Optional[Dict[str, Any]]:
        """
        Drop the last insight section when the truncation fell inside it.

        Repair closes a cut section as a fragment; dropping it lets the
        default section take its place.
        """
        if not insights:
            return insights

        match = re.search(r'"insights"\s*:\s*\{', text)
        if not match or find_balanced_span(text, match.end() - 1) is not None:
            return insights

        last_key = list(insights)[-1]
        value_start = None
        for key_match in re.finditer(rf'"{re.escape(last_key)}"\s*:\s*', text[match.end():]):
            value_start = match.end() + key_match.end()

        if (
            value_start is not None
            and value_start < len(text)
            and text[value_start] in "{["
            and find_balanced_span(text, value_start) is not None
        ):
            return insights

        logger.warning(f"Insight section {last_key} was cut off, using defaults for it")
        return {key: value for key, value in insights.items() if key != last_key}

    def _known_categories(self, categories: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
        known = {}
        for name, fields in categories.items():
            if name in CATEGORY_NAMES and isinstance(fields, dict):
                known[name] = fields
            else:
                logger.debug(f"Ignoring unexpected category in AI response: {name}")
        return known

    # =========================================================================
    # PARTIAL EXTRACTION
    # =========================================================================

    def _extract_partial(self, text: str) -> Optional[ParsedResponse]:
        """Recover the categories and insights objects independently."""
        categories = self._extract_object(text, "categories")
        if categories is not None and not any(name in categories for name in CATEGORY_NAMES):
            logger.debug("Extracted categories object has no known category")
            categories = None

        insights = self._extract_object(text, "insights")

        if categories is None and insights is None:
            return None

        warnings = [PARTIAL_PARSE_WARNING]
        if categories is None:
            warnings.append(MISSING_CATEGORIES_WARNING)
        if insights is None:
            warnings.append(MISSING_INSIGHTS_WARNING)

        quality_match = _QUALITY_SCORE_PATTERN.search(text)

        logger.warning(
            f"AI response partially extracted "
            f"(categories: {categories is not None}, insights: {insights is not None})"
        )

        return ParsedResponse(
            categories=self._known_categories(categories) if categories else {},
            insights=insights,
            data_quality_score=float(quality_match.group(1)) if quality_match else None,
            warnings=warnings,
            parse_method="partial",
        )

    def _extract_object(self, text: str, key: str) -> Optional[Dict[str, Any]]:
        """
        Extract the object value of a top-level key by brace matching.

        An unterminated object is repaired before parsing.
        """
        match = re.search(rf'"{re.escape(key)}"\s*:\s*\{{', text)
        if not match:
            return None

        start = match.end() - 1
        end = find_balanced_span(text, start)
        if end is not None:
            fragment = text[start:end + 1]
        else:
            fragment = repair_truncated_json(text[start:])

        try:
            value = json.loads(fragment)
        except (json.JSONDecodeError, RecursionError) as e:
            logger.debug(f"Could not parse extracted {key} object: {e}")
            return None

        return value if isinstance(value, dict) else None
