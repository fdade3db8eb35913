"""
Intake Taxonomy

Fixed field schema, deterministic defaults, and the default insights tree.
"""

from .fields import (
    CATEGORY_FIELDS,
    CATEGORY_NAMES,
    QUESTIONNAIRE_FIELD_COUNT,
    TAXONOMY_VERSION,
    FieldSpec,
    category_field_names,
    field_specs,
    format_category_name,
    total_field_count,
)
from .defaults import (
    INFERRABLE_CONFIDENCE,
    UNKNOWN_CONFIDENCE,
    inferrable_field,
    synthesize_defaults,
    unknown_field,
    user_input_field,
)
from .insights import (
    DEFAULT_INSIGHTS,
    INSIGHT_KEYS,
    create_default_insights,
    merge_insights,
)

__all__ = [
    # Fields
    "CATEGORY_FIELDS",
    "CATEGORY_NAMES",
    "QUESTIONNAIRE_FIELD_COUNT",
    "TAXONOMY_VERSION",
    "FieldSpec",
    "category_field_names",
    "field_specs",
    "format_category_name",
    "total_field_count",
    # Defaults
    "INFERRABLE_CONFIDENCE",
    "UNKNOWN_CONFIDENCE",
    "inferrable_field",
    "synthesize_defaults",
    "unknown_field",
    "user_input_field",
    # Insights
    "DEFAULT_INSIGHTS",
    "INSIGHT_KEYS",
    "create_default_insights",
    "merge_insights",
]
