"""
Tests for the tokenizer (MathEngine.translator).

Verifies:
- numeric literals, scientific notation and the 'E' marker
- implicit multiplication and sign detection
- function calls arriving as parsed subtrees
- tokenizer failures and the nesting limit
"""

import pytest

from Modules import MathEngine
from Modules.error import ParsingError, ParsingErrorKind, error_category
from Modules.Expression import (Operator, Number, Operation, FunctionCall, FunctionCall2,
                                BinaryOperation)
from Modules.ScientificEngine import Function


MUL = Operation(Operator.MULTIPLY)


class TestNumbers:
    """Numeric literals."""

    def test_integer_and_decimal(self):
        assert MathEngine.translator("12") == (Number(12),)
        assert MathEngine.translator("0.25") == (Number(0.25),)

    def test_scientific_literal_is_one_number(self):
        assert MathEngine.translator("1.5E-3") == (Number(0.0015),)
        assert MathEngine.translator("2E5") == (Number(200000),)

    def test_leading_e_marker(self):
        assert MathEngine.translator("E5") == (Operation(Operator.SCIENTIFIC_E), Number(5))

    def test_invalid_literal(self):
        with pytest.raises(ParsingError) as excinfo:
            MathEngine.translator("1.2.3")
        assert excinfo.value.kind == ParsingErrorKind.UNEXPECTED_TOKEN

    def test_whitespace_is_skipped(self):
        assert MathEngine.translator(" 1 + 2 ") == (Number(1), Operation(Operator.ADD), Number(2))


class TestImplicitMultiplication:
    """Juxtaposition means multiplication."""

    def test_number_and_pi(self):
        assert MathEngine.translator("2π") == (Number(2), MUL, Operation(Operator.CONSTANT_PI))

    def test_number_and_parenthesis(self):
        assert MathEngine.translator("2(3)") == (
            Number(2), MUL, Operation(Operator.OPEN_PARENTHESIS), Number(3),
            Operation(Operator.CLOSE_PARENTHESIS))

    def test_two_constants(self):
        assert MathEngine.translator("πe") == (
            Operation(Operator.CONSTANT_PI), MUL, Operation(Operator.CONSTANT_E))

    def test_variable_before_number(self):
        assert MathEngine.translator("x2") == (Operation(Operator.VARIABLE_X), MUL, Number(2))

    def test_number_before_function(self):
        tokens = MathEngine.translator("2sin(0)")
        assert tokens == (Number(2), MUL, FunctionCall(Function.SIN, Number(0)))

    def test_function_before_parenthesis(self):
        tokens = MathEngine.translator("abs(2)(3)")
        assert tokens[0] == FunctionCall(Function.ABS, Number(2))
        assert tokens[1] == MUL
        assert tokens[2] == Operation(Operator.OPEN_PARENTHESIS)

    def test_no_multiplication_after_operator(self):
        assert MUL not in MathEngine.translator("2+π")


class TestMinusSign:
    """Sign versus subtraction."""

    def test_leading_minus_is_unary(self):
        assert MathEngine.translator("-3") == (Operation(Operator.UNARY_MINUS), Number(3))

    def test_minus_between_numbers_is_subtraction(self):
        assert MathEngine.translator("2-3")[1] == Operation(Operator.SUBTRACT)

    def test_minus_after_operator_is_unary(self):
        assert MathEngine.translator("2⋅-3") == (
            Number(2), MUL, Operation(Operator.UNARY_MINUS), Number(3))

    def test_minus_after_parenthesis_and_power(self):
        assert MathEngine.translator("(-3)")[1] == Operation(Operator.UNARY_MINUS)
        assert MathEngine.translator("2^-1")[2] == Operation(Operator.UNARY_MINUS)

    def test_keyboard_operators(self):
        assert MathEngine.translator("6/3*2") == (
            Number(6), Operation(Operator.DIVIDE), Number(3), MUL, Number(2))


class TestFunctionCalls:
    """Functions are tokenized and parsed recursively into single tokens."""

    def test_two_argument_function(self):
        assert MathEngine.translator("logb(8,2)") == (
            FunctionCall2(Function.LOGB, Number(8), Number(2)),)

    def test_argument_is_parsed(self):
        (token,) = MathEngine.translator("sin(1+2)")
        assert token == FunctionCall(
            Function.SIN, BinaryOperation(Number(1), Operator.ADD, Number(2)))

    def test_nested_commas_belong_to_inner_call(self):
        (token,) = MathEngine.translator("hypot(logb(8,2),4)")
        assert token.function == Function.HYPOT
        assert token.first == FunctionCall2(Function.LOGB, Number(8), Number(2))
        assert token.second == Number(4)

    def test_arity_mismatch(self):
        with pytest.raises(ParsingError) as excinfo:
            MathEngine.translator("logb(2)")
        assert excinfo.value.kind == ParsingErrorKind.UNEXPECTED_TOKEN

    def test_too_many_arguments(self):
        with pytest.raises(ParsingError):
            MathEngine.translator("sin(1,2)")

    def test_missing_parenthesis_after_name(self):
        with pytest.raises(ParsingError) as excinfo:
            MathEngine.translator("sin 3")
        assert excinfo.value.code == "3010"

    def test_unknown_function(self):
        with pytest.raises(ParsingError) as excinfo:
            MathEngine.translator("foo(2)")
        assert excinfo.value.code == "3012"

    def test_unclosed_call(self):
        with pytest.raises(ParsingError) as excinfo:
            MathEngine.translator("sin(2", graphing=True)
        assert excinfo.value.kind == ParsingErrorKind.UNMATCHED_PARENTHESIS

    def test_nesting_limit(self):
        nested = "sin(" * 5 + "1" + ")" * 5
        assert len(MathEngine.translator(nested, max_depth=5)) == 1
        with pytest.raises(ParsingError) as excinfo:
            MathEngine.translator(nested, max_depth=3)
        assert excinfo.value.code == "3031"


class TestFailures:
    """Characters and syntax the tokenizer rejects."""

    def test_unknown_character(self):
        with pytest.raises(ParsingError) as excinfo:
            MathEngine.translator("2$3")
        assert excinfo.value.kind == ParsingErrorKind.UNEXPECTED_TOKEN
        assert str(excinfo.value) == "unexpected-token"

    def test_strict_mode_reports_unmatched_parenthesis(self):
        with pytest.raises(ParsingError) as excinfo:
            MathEngine.translator("(1+2")
        assert excinfo.value.kind == ParsingErrorKind.UNMATCHED_PARENTHESIS

    def test_graphing_mode_skips_syntax_check(self):
        assert len(MathEngine.translator("(1+2", graphing=True)) == 4

    def test_strict_mode_rejects_adjacent_operators(self):
        with pytest.raises(ParsingError) as excinfo:
            MathEngine.translator("2+⋅3")
        assert excinfo.value.kind == ParsingErrorKind.UNEXPECTED_TOKEN

    def test_error_category(self):
        with pytest.raises(ParsingError) as excinfo:
            MathEngine.translator("foo(2)")
        assert error_category(excinfo.value.code) == "Calculator Error"
        assert error_category("5001") == "Configuration Error"
