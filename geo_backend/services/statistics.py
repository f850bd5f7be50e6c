"""
Statistical helper functions shared by the GEO, IGO and hallucination engines.

All helpers are pure and deterministic. Zero-denominator handling lives in
exactly one place, safe_ratio(), so every aggregator applies the same policy:
a ratio whose denominator is zero is computed against a denominator of 1,
which turns "0 of 0" into 0 instead of raising.

Dependencies:
    - numpy: mean and population standard deviation
"""

import math
from typing import Iterable, List

import numpy as np


# =============================================================================
# Descriptive Statistics
# =============================================================================


def mean(values: Iterable[float]) -> float:
    """
    Calculate the arithmetic mean of a sequence of values.

    Args:
        values: Numeric values

    Returns:
        Arithmetic mean, or 0.0 if empty
    """
    array = np.asarray(list(values), dtype=np.float64)
    if array.size == 0:
        return 0.0
    return float(np.mean(array))


def std_dev(values: Iterable[float]) -> float:
    """
    Calculate the population standard deviation (ddof=0) of a sequence.

    A single value has a deviation of 0.0.

    Args:
        values: Numeric values

    Returns:
        Standard deviation, or 0.0 if empty

    Example:
        >>> std_dev([1.0, 0.0])
        0.5
    """
    array = np.asarray(list(values), dtype=np.float64)
    if array.size == 0:
        return 0.0
    return float(np.std(array))


# =============================================================================
# Normalization
# =============================================================================


def safe_ratio(numerator: float, denominator: float) -> float:
    """
    Divide, replacing a zero denominator by 1.

    Args:
        numerator: Dividend
        denominator: Divisor; 0 is replaced by 1

    Returns:
        numerator / denominator, or numerator when denominator is 0
    """
    if denominator == 0:
        denominator = 1
    return numerator / denominator


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Bound a value to [low, high]."""
    return min(high, max(low, value))


def round2(value: float) -> float:
    """
    Round to 2 decimal places, halves away from zero.

    Every numeric field returned by an aggregator goes through this function.
    """
    scaled = math.floor(abs(value) * 100 + 0.5) / 100
    return math.copysign(scaled, value) if scaled else 0.0


def rates_by_key(flags_by_key: dict) -> List[float]:
    """
    Turn {key: [bool, ...]} into the list of per-key True rates.

    Keys keep their insertion order so results are reproducible.
    """
    return [
        safe_ratio(sum(1 for flag in flags if flag), len(flags))
        for flags in flags_by_key.values()
    ]
