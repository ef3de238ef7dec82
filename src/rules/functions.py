"""
Rule functions callable from rule expressions.

Each function receives its evaluated arguments as strings plus the engine's
variable bindings and supplementary data, and returns a string result.
"""
import logging
import re
from abc import ABC, abstractmethod
from typing import Dict, List, Mapping, Optional

from config.settings import ARGUMENT_MAX, ARGUMENT_MIN, MALE_CODES
from src.models.data_structures import Sex
from src.models.exceptions import InvalidArgument, UnknownFunctionError
from src.models.zscore_resolver import ZScoreResolver, get_default_resolver

logger = logging.getLogger(__name__)

_SMALL_INT = re.compile(r"[+-]?[0-9]+")


class RuleFunction(ABC):
    name: str = ""

    @abstractmethod
    def evaluate(self, arguments: List[str],
                 value_map: Optional[Mapping] = None,
                 supplementary_data: Optional[Mapping[str, List[str]]] = None) -> str:
        ...


def parse_small_int(value: str, label: str) -> int:
    """Parse ``value`` as an integer in [ARGUMENT_MIN, ARGUMENT_MAX]."""
    if value is None or not _SMALL_INT.fullmatch(value):
        raise InvalidArgument(f"{label} is not an integer: {value!r}")
    number = int(value)
    if not ARGUMENT_MIN <= number <= ARGUMENT_MAX:
        raise InvalidArgument(
            f"{label} {number} is outside {ARGUMENT_MIN}..{ARGUMENT_MAX}"
        )
    return number


def normalize_sex(code: str) -> Sex:
    """MALE for the recognised male tokens, FEMALE for anything else."""
    return Sex.MALE if code in MALE_CODES else Sex.FEMALE


class RuleFunctionZScore(RuleFunction):
    """d2:zScore(age, weight, <unused>, sex) — weight-for-age SD band.

    The arity check accepts three arguments, but the sex code is read from
    the fourth position; callers have to pass all four.
    """
    name = "d2:zScore"

    def __init__(self, resolver: ZScoreResolver = None):
        self.resolver = resolver if resolver is not None else get_default_resolver()

    def evaluate(self, arguments: List[str],
                 value_map: Optional[Mapping] = None,
                 supplementary_data: Optional[Mapping[str, List[str]]] = None) -> str:
        if len(arguments) < 3:
            logger.warning("%s called with %d arguments", self.name, len(arguments))
            raise InvalidArgument(
                f"At least three arguments required but found: {len(arguments)}"
            )
        if len(arguments) < 4:
            raise InvalidArgument(
                "Sex code expected as the fourth argument but only "
                f"{len(arguments)} arguments were given"
            )

        sex = normalize_sex(arguments[3])
        try:
            age = parse_small_int(arguments[0], "Age")
            weight = parse_small_int(arguments[1], "Weight")
        except InvalidArgument:
            logger.warning("%s rejected arguments %r", self.name, arguments[:2])
            raise

        return self.resolver.resolve(age, weight, sex)


_REGISTRY: Dict[str, type] = {
    RuleFunctionZScore.name: RuleFunctionZScore,
}


def get_rule_function(name: str) -> RuleFunction:
    if name not in _REGISTRY:
        raise UnknownFunctionError(name)
    return _REGISTRY[name]()


def available_functions() -> List[str]:
    return sorted(_REGISTRY)
