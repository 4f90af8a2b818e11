import json
import math
import numpy as np


class NumpyEncoder(json.JSONEncoder):
    """
    Handles serialization of NumPy types to JSON.
    Prevents 'Object of type int64 is not JSON serializable' errors.
    """
    def default(self, obj):
        if isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.bool_):
            return bool(obj)
        elif isinstance(obj, (np.ndarray,)):
            return obj.tolist()
        return json.JSONEncoder.default(self, obj)


def to_native(value):
    """Convert NumPy scalars to plain Python values (NaN becomes None)."""
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and math.isnan(value):
        return None
    return value
