from typing import Any, Dict, Tuple

from modules.search_space.boundaries import SearchBoundaries
from modules.search_space.schemas import (
    HyperparameterSchema,
    default_boundaries,
    get_schema,
    schema_from_config,
)
from utils import constants


def resolve_search_space(tuning_config: Dict[str, Any]) -> Tuple[HyperparameterSchema, SearchBoundaries]:
    """
    Schema and boundaries for the configured model family.

    Family defaults apply only when neither 'numeric_boundaries' nor
    'string_boundaries' is given; once either is supplied, the caller's
    boundaries must cover the whole schema on their own.
    """
    family = tuning_config.get('model_family')
    if family == constants.CUSTOM_FAMILY:
        schema = schema_from_config(tuning_config.get('schema', []))
    else:
        schema = get_schema(family)

    if 'numeric_boundaries' in tuning_config or 'string_boundaries' in tuning_config:
        numeric = tuning_config.get('numeric_boundaries', {})
        strings = tuning_config.get('string_boundaries', {})
    else:
        numeric, strings = default_boundaries(family, tuning_config.get('model_type', 'regressor'))

    boundaries = SearchBoundaries(numeric, strings)
    boundaries.validate(schema)
    return schema, boundaries
