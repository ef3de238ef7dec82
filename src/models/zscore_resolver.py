"""
Weight-for-age SD band resolver.

Given (age, weight, sex), picks the reference row and places the weight on
the SD scale: exact tabulated weights map straight to their band, anything
else is linearly interpolated from a (lower, higher) bracket. The result is
signed by comparing the weight against the row median.
"""
import logging
from functools import lru_cache
from typing import Callable, Dict, Tuple

import numpy as np

from config.settings import ZSCORE_BRACKET_STRATEGY
from src.models.data_structures import SDRow, Sex
from src.models.exceptions import ReferenceLookupError
from src.models.zscore_table import ReferenceTable, get_reference_table

logger = logging.getLogger(__name__)

Bracket = Tuple[np.float32, np.float32]


def legacy_bracket(row: SDRow, weight: np.float32) -> Bracket:
    """Historical rule-engine scan.

    Every tabulated weight below the query overwrites ``lower``; every
    other one overwrites ``higher``. ``higher`` therefore ends on the row
    maximum whenever the query is below it, and both limits stay at 0.0
    when nothing overwrites them.
    """
    lower = higher = np.float32(0.0)
    for w, _ in row:
        if weight > w:
            lower = w
            continue
        higher = w
    return lower, higher


def nearest_bracket(row: SDRow, weight: np.float32) -> Bracket:
    """Tight bracket: greatest weight below and smallest weight above."""
    below = [w for w, _ in row if w < weight]
    above = [w for w, _ in row if w > weight]
    if not below or not above:
        raise ReferenceLookupError(
            f"Weight {float(weight):g} is outside the tabulated range "
            f"[{float(row.minimum):g}, {float(row.maximum):g}]"
        )
    return below[-1], above[0]


BRACKET_STRATEGIES: Dict[str, Callable[[SDRow, np.float32], Bracket]] = {
    'legacy': legacy_bracket,
    'nearest': nearest_bracket,
}


def check_strategy(strategy: str) -> str:
    if strategy not in BRACKET_STRATEGIES:
        raise ValueError(
            f"Unknown bracket strategy '{strategy}'; "
            f"expected one of {sorted(BRACKET_STRATEGIES)}"
        )
    return strategy


def median_sign(row: SDRow, weight) -> int:
    """-1, 0 or +1 as the weight is below, at, or above the row median."""
    median = row.median
    return int(weight > median) - int(weight < median)


class ZScoreResolver:
    """Resolves weight-for-age SD band values against a ReferenceTable."""

    def __init__(self, table: ReferenceTable = None,
                 strategy: str = ZSCORE_BRACKET_STRATEGY):
        self.table = table if table is not None else get_reference_table()
        self.strategy = check_strategy(strategy)
        self._bracket = BRACKET_STRATEGIES[strategy]

    def row_for(self, age: int, sex: Sex) -> SDRow:
        return self.table.lookup(self.table.key(sex, age))

    def band_value(self, row: SDRow, weight) -> str:
        weight = np.float32(weight)
        sign = median_sign(row, weight)

        if weight in row:
            return str(row.sd_for(weight) * sign)

        lower, higher = self._bracket(row, weight)
        gap = lower - weight
        span = lower - higher
        # sd_for raises when the scan never moved lower off 0.0
        value = np.float32(row.sd_for(lower) + gap / span)
        return str(np.float32(value * sign))

    def resolve(self, age: int, weight, sex: Sex) -> str:
        row = self.row_for(age, sex)
        logger.debug("Resolving z-score: age=%s weight=%s sex=%s strategy=%s",
                     age, weight, sex.value, self.strategy)
        return self.band_value(row, weight)


@lru_cache(maxsize=1)
def get_default_resolver() -> ZScoreResolver:
    """Shared resolver for the configured strategy and the built-in table."""
    return ZScoreResolver()
