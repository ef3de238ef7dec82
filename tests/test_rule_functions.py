"""
Tests for the d2:zScore rule function.
Run: pytest tests/test_rule_functions.py -v
"""
import inspect

import pytest

from config.settings import MALE_CODES
from src.models.data_structures import Sex
from src.models.exceptions import (
    InvalidArgument, ReferenceLookupError, UnknownFunctionError
)
from src.models.zscore_resolver import ZScoreResolver, get_default_resolver
from src.rules.functions import (
    RuleFunction, RuleFunctionZScore, get_rule_function, normalize_sex,
    parse_small_int
)


@pytest.fixture
def zscore():
    return RuleFunctionZScore(ZScoreResolver(strategy='legacy'))


class TestArguments:

    @pytest.mark.parametrize("arguments", [[], ["6"], ["6", "7"]])
    def test_fewer_than_three(self, zscore, arguments):
        with pytest.raises(InvalidArgument, match="found: %d" % len(arguments)):
            zscore.evaluate(arguments, {}, {})

    def test_three_arguments_missing_sex_slot(self, zscore):
        with pytest.raises(InvalidArgument, match="fourth argument"):
            zscore.evaluate(["6", "7", ""], {}, {})

    @pytest.mark.parametrize("age, weight", [
        ("six", "7"), ("6", "seven"), ("6.5", "7"), ("6", " 7"), ("", "7"),
    ])
    def test_non_numeric(self, zscore, age, weight):
        with pytest.raises(InvalidArgument):
            zscore.evaluate([age, weight, "", "male"], {}, {})

    @pytest.mark.parametrize("value", ["128", "-1", "300"])
    def test_out_of_range(self, value):
        with pytest.raises(InvalidArgument, match=value.lstrip("-")):
            parse_small_int(value, "Age")

    def test_parse_small_int(self):
        assert parse_small_int("0", "Age") == 0
        assert parse_small_int("+12", "Age") == 12
        assert parse_small_int("127", "Weight") == 127

    def test_invalid_argument_is_value_error(self, zscore):
        with pytest.raises(ValueError):
            zscore.evaluate(["x", "7", "", "m"])


class TestSexNormalization:

    @pytest.mark.parametrize("code", sorted(MALE_CODES))
    def test_male_tokens(self, code):
        assert normalize_sex(code) is Sex.MALE

    @pytest.mark.parametrize("code", ["", "female", "F", "f", "2", "1", "true", "Ma", "MALE "])
    def test_everything_else_is_female(self, code):
        assert normalize_sex(code) is Sex.FEMALE

    def test_male_table_used(self, zscore):
        male = zscore.evaluate(["6", "7", "", "M"], {}, {})
        female = zscore.evaluate(["6", "7", "", "F"], {}, {})
        assert male == "1.8666667"
        assert female == "0.8780488"


class TestEvaluate:

    def test_median_is_zero(self, zscore):
        assert zscore.evaluate(["23", "12", "", "male"], {}, {}) == "0"

    def test_exact_plus_three(self, zscore):
        assert zscore.evaluate(["0", "5", "", "0"], {}, {}) == "3"

    def test_context_maps_ignored(self, zscore):
        plain = zscore.evaluate(["12", "9", "", "false"])
        with_context = zscore.evaluate(
            ["12", "9", "", "false"], {"weight": "10"}, {"extra": ["x"]}
        )
        assert plain == with_context

    def test_extra_arguments_ignored(self, zscore):
        assert zscore.evaluate(["23", "12", "", "m", "ignored"]) == "0"

    def test_age_without_reference_row(self, zscore):
        with pytest.raises(LookupError):
            zscore.evaluate(["100", "12", "", "male"], {}, {})

    def test_weight_below_table(self, zscore):
        with pytest.raises(ReferenceLookupError):
            zscore.evaluate(["24", "1", "", "male"], {}, {})


class TestRegistry:

    def test_get_zscore(self):
        assert isinstance(get_rule_function("d2:zScore"), RuleFunctionZScore)

    def test_unknown(self):
        with pytest.raises(UnknownFunctionError):
            get_rule_function("d2:heightForAge")

    def test_functions_share_default_resolver(self):
        first = get_rule_function("d2:zScore")
        second = get_rule_function("d2:zScore")
        assert first.resolver is second.resolver is get_default_resolver()

    def test_evaluate_signature_matches_base(self):
        base = inspect.signature(RuleFunction.evaluate)
        override = inspect.signature(RuleFunctionZScore.evaluate)
        assert override == base
