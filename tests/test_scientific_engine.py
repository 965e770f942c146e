"""
Tests for the function catalog (ScientificEngine).

Verifies:
- trig evaluation in both angle modes, with snapping near zero crossings and asymptotes
- inverse trig domain checks and degree output
- logarithms, rounding and the two-argument functions
- factorial limits
"""

import math

import pytest

from Modules import ScientificEngine
from Modules.error import CalculationError, ConfigurationError
from Modules.ScientificEngine import AngleMode, Function


def f(function, value, angle_mode=AngleMode.RADIANS):
    return ScientificEngine.evaluate_function(function, value, angle_mode)


def f2(function, first, second):
    return ScientificEngine.evaluate_function2(function, first, second)


class TestAngleMode:

    def test_from_setting(self):
        assert AngleMode.from_setting(0) == AngleMode.RADIANS
        assert AngleMode.from_setting("1") == AngleMode.DEGREES
        assert AngleMode.from_setting("Degrees") == AngleMode.DEGREES
        assert AngleMode.from_setting(AngleMode.RADIANS) == AngleMode.RADIANS

    def test_invalid_value(self):
        with pytest.raises(ConfigurationError) as excinfo:
            AngleMode.from_setting("gradians")
        assert excinfo.value.code == "5001"


class TestCatalog:

    def test_lookup_by_name(self):
        assert Function.from_name("sin") == Function.SIN
        assert Function.from_name("nCr") == Function.NCR
        assert Function.from_name("foo") is None

    def test_arity(self):
        assert Function.LOGB.arity == 2
        assert Function.SIN.arity == 1

    def test_families(self):
        assert Function.COT.is_trigonometric
        assert Function.ACOT.is_inverse_trigonometric
        assert not Function.LN.is_trigonometric


class TestTrigonometric:
    """Forward trig functions and their singularities."""

    def test_degrees(self):
        assert f(Function.SIN, 90, AngleMode.DEGREES) == 1.0
        assert f(Function.SIN, 180, AngleMode.DEGREES) == 0.0
        assert f(Function.TAN, 90, AngleMode.DEGREES) is None

    def test_zero_crossings_snap(self):
        assert f(Function.SIN, math.pi) == 0.0
        assert f(Function.SIN, 2 * math.pi + 1e-11) == 0.0
        assert f(Function.SIN, -1e-12) == 0.0
        assert f(Function.COS, math.pi / 2) == 0.0
        assert f(Function.TAN, -math.pi) == 0.0

    def test_asymptotes(self):
        assert f(Function.TAN, math.pi / 2 + 1e-11) is None
        assert f(Function.TAN, -math.pi / 2) is None
        assert f(Function.CSC, 0.0) is None
        assert f(Function.SEC, 3 * math.pi / 2) is None
        assert f(Function.COT, math.pi) is None

    def test_cot_at_half_pi(self):
        assert f(Function.COT, math.pi / 2) == 0.0

    def test_regular_values(self):
        assert f(Function.SIN, 1.0) == math.sin(1.0)
        assert f(Function.SEC, 1.0) == pytest.approx(1 / math.cos(1.0))


class TestInverseTrigonometric:

    def test_radians(self):
        assert f(Function.ASIN, 1.0) == math.pi / 2
        assert f(Function.ACOT, 0.0) == math.pi / 2

    def test_degrees_output(self):
        assert f(Function.ASIN, 1.0, AngleMode.DEGREES) == 90.0
        assert f(Function.ATAN, 1.0, AngleMode.DEGREES) == pytest.approx(45.0)

    def test_domain(self):
        assert f(Function.ASIN, 2.0) is None
        assert f(Function.ACOS, -1.5) is None
        assert f(Function.ACSC, 0.5) is None
        assert f(Function.ASEC, 0.0) is None


class TestOtherFunctions:

    def test_logarithms(self):
        assert f(Function.LOG, 100.0) == 2.0
        assert f(Function.LN, math.e) == 1.0
        assert f(Function.LN, 0.0) is None
        assert f(Function.LOG, -1.0) is None

    def test_rounding(self):
        assert f(Function.ROUND, 2.5) == 3.0
        assert f(Function.ROUND, -2.5) == -3.0
        assert f(Function.FLOOR, -1.5) == -2.0
        assert f(Function.CEIL, 1.2) == 2.0
        assert f(Function.ABS, -4.0) == 4.0


class TestTwoArgumentFunctions:

    def test_logb(self):
        assert f2(Function.LOGB, 8.0, 2.0) == pytest.approx(3.0)
        assert f2(Function.LOGB, 8.0, 1.0) is None
        assert f2(Function.LOGB, -8.0, 2.0) is None

    def test_root(self):
        assert f2(Function.ROOT, 27.0, 3.0) == pytest.approx(3.0)
        assert f2(Function.ROOT, 4.0, 0.0) is None

    def test_mod_keeps_sign_of_dividend(self):
        assert f2(Function.MOD, -7.0, 3.0) == -1.0
        assert f2(Function.MOD, 1.0, 0.0) is None

    def test_hypot(self):
        assert f2(Function.HYPOT, 3.0, 4.0) == 5.0

    def test_combinatorics(self):
        assert f2(Function.NPR, 5.0, 2.0) == 20.0
        assert f2(Function.NCR, 5.0, 2.0) == 10.0
        assert f2(Function.NCR, 5.9, 2.2) == 10.0

    def test_combinatorics_domain(self):
        assert f2(Function.NPR, 2.0, 5.0) == 0.0
        assert f2(Function.NCR, -1.0, 0.0) == 0.0
        assert f2(Function.NCR, 171.0, 2.0) is None


class TestFactorial:

    def test_values(self):
        assert ScientificEngine.factorial(0) == 1
        assert ScientificEngine.factorial(5) == 120
        assert math.isfinite(float(ScientificEngine.factorial(170)))

    def test_limit(self):
        with pytest.raises(CalculationError) as excinfo:
            ScientificEngine.factorial(171)
        assert excinfo.value.code == "3026"

    def test_negative(self):
        with pytest.raises(CalculationError):
            ScientificEngine.factorial(-1)


class TestFamiliesDriveAngleMode:
    """Only the trigonometric families look at the angle mode."""

    def test_non_trigonometric_ignores_degrees(self):
        assert f(Function.LOG, 100.0, AngleMode.DEGREES) == 2.0
        assert f(Function.ABS, -90.0, AngleMode.DEGREES) == 90.0

    def test_every_trig_function_is_in_a_family(self):
        for name in ("sin", "cos", "tan", "csc", "sec", "cot"):
            function = Function.from_name(name)
            assert function.is_trigonometric
            assert Function.from_name("a" + name).is_inverse_trigonometric
