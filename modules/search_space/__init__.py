"""
Search Space Module
===================

Responsibility:
- Static per-family hyperparameter schemas (no reflection).
- Search boundaries and their validation against a schema.
- The immutable Candidate value object.
- Discretization of numeric boundaries into linear/log/integer value arrays.
"""

from .schemas import (
    Dimension,
    HyperparameterSchema,
    FAMILY_SCHEMAS,
    get_schema,
    schema_from_config,
    default_boundaries,
)
from .boundaries import SearchBoundaries
from .candidate import Candidate
from .discretizer import linear_space, log_space, integer_space, discretize
from .resolver import resolve_search_space

__all__ = [
    'Dimension',
    'HyperparameterSchema',
    'FAMILY_SCHEMAS',
    'get_schema',
    'schema_from_config',
    'default_boundaries',
    'SearchBoundaries',
    'Candidate',
    'linear_space',
    'log_space',
    'integer_space',
    'discretize',
    'resolve_search_space',
]
