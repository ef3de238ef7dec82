"""
Data structures for the growth z-score reference tables.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple

import numpy as np

from src.models.exceptions import ReferenceDataError, ReferenceLookupError

# Standard-deviation bands, in the order of ascending tabulated weight.
SD_BANDS: Tuple[int, ...] = (-3, -2, -1, 0, 1, 2, 3)
MEDIAN_INDEX = 3


class Sex(Enum):
    MALE = "male"
    FEMALE = "female"


@dataclass(frozen=True)
class ReferenceKey:
    sex: Sex
    age: int  # months
    version: int = 1

    @property
    def table_key(self) -> Tuple[int, int]:
        """Key within the sex-specific table."""
        return (self.version, self.age)

    def __str__(self) -> str:
        return f"{self.sex.value}, age={self.age}, version={self.version}"


@dataclass(frozen=True)
class SDRow:
    """One reference row: seven tabulated weights for SD bands -3..+3.

    Weights are held as single-precision floats in ascending order, so the
    median (SD 0) is always at position 3.
    """
    weights: Tuple[np.float32, ...]

    def __post_init__(self):
        arr = np.asarray(self.weights, dtype=np.float32)
        if arr.shape != (len(SD_BANDS),):
            raise ReferenceDataError(
                f"SD row needs exactly {len(SD_BANDS)} weights, got {arr.size}"
            )
        if not np.all(np.diff(arr) > 0):
            raise ReferenceDataError(
                f"SD row weights must be strictly increasing: {arr.tolist()}"
            )
        object.__setattr__(self, "weights", tuple(arr))

    @classmethod
    def from_values(cls, values) -> "SDRow":
        return cls(tuple(np.float32(v) for v in values))

    def __iter__(self) -> Iterator[Tuple[np.float32, int]]:
        # A fresh ascending (weight, sd) walk on every call.
        return zip(self.weights, SD_BANDS)

    def __len__(self) -> int:
        return len(self.weights)

    def __contains__(self, weight) -> bool:
        return np.float32(weight) in self.weights

    @property
    def median(self) -> np.float32:
        return self.weights[MEDIAN_INDEX]

    @property
    def minimum(self) -> np.float32:
        return self.weights[0]

    @property
    def maximum(self) -> np.float32:
        return self.weights[-1]

    def sd_for(self, weight) -> int:
        """Return the SD band tabulated at exactly ``weight``."""
        target = np.float32(weight)
        for w, sd in self:
            if w == target:
                return sd
        raise ReferenceLookupError(
            f"No SD band tabulated at weight {float(target):g}"
        )

    def to_dict(self) -> dict:
        return {str(sd): round(float(w), 3) for w, sd in self}
