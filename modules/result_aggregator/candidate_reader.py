import math
from typing import Any, List, Optional

import pandas as pd

from modules.search_space import Candidate, Dimension, HyperparameterSchema, SearchBoundaries
from utils import constants
from utils.exceptions import DataValidationError
from utils.json_utils import to_native

PARAM_PREFIX = "param_"

_TRUE_STRINGS = {'true', '1', 'yes'}
_FALSE_STRINGS = {'false', '0', 'no'}


def _cast(dim: Dimension, raw: Any, row_label: Any) -> Any:
    value = to_native(raw)
    if value is None or (isinstance(value, float) and math.isnan(value)):
        raise DataValidationError(f"Row {row_label}: missing value for '{dim.name}'")

    if dim.kind == constants.NUMERIC_CONTINUOUS:
        return float(value)
    if dim.kind == constants.NUMERIC_INTEGER:
        number = float(value)
        if not number.is_integer():
            raise DataValidationError(f"Row {row_label}: '{dim.name}' must be an integer, got {value!r}")
        return int(number)
    if dim.kind == constants.BOOLEAN:
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise DataValidationError(f"Row {row_label}: '{dim.name}' is not a boolean: {value!r}")
    return value


def candidates_from_frame(df: pd.DataFrame, schema: HyperparameterSchema,
                          boundaries: Optional[SearchBoundaries] = None,
                          include_failed: bool = False) -> List[Candidate]:
    """
    Rebuild typed Candidates from a results table (``TuningReport.results_frame()``
    or a re-loaded ``all_results.parquet``), one per row in row order.

    Reads the ``param_<dimension>`` columns, casts each value to its dimension
    kind and, when boundaries are given, rejects values outside them. Rows
    flagged as failed are skipped unless ``include_failed`` is set.

    Raises:
        DataValidationError: missing column, missing/uncastable value or
            out-of-boundary value, naming the row and dimension.
    """
    missing = [f"{PARAM_PREFIX}{name}" for name in schema.names if f"{PARAM_PREFIX}{name}" not in df.columns]
    if missing:
        raise DataValidationError(f"Results table lacks hyperparameter columns: {missing}")

    if not include_failed and 'failed' in df.columns:
        df = df[~df['failed'].fillna(False).astype(bool)]

    candidates = []
    for label, row in df.iterrows():
        values = []
        for dim in schema:
            value = _cast(dim, row[f"{PARAM_PREFIX}{dim.name}"], label)
            if boundaries is not None and not boundaries.contains(dim, value):
                raise DataValidationError(
                    f"Row {label}: '{dim.name}' value {value!r} lies outside its boundary"
                )
            values.append((dim.name, value))
        candidates.append(Candidate(tuple(values)))
    return candidates
