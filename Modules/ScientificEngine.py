# ScientificEngine
"""""
Function catalog for the expression engine.

Holds the fixed set of named functions (trig, inverse trig, logarithms, rounding and the
two-argument functions), the angle mode they are evaluated in, and the numeric guards
around their singularities. Every evaluator here returns a float, or None where the
function is undefined. Undefined points are skipped by the grapher instead of failing
the whole expression.
"""""

import enum
import logging
import math

from . import error as E

logger = logging.getLogger(__name__)

# Inputs this close to a zero crossing / asymptote of a trig function are snapped
EPSILON = 1e-10
HALF_PI = math.pi / 2.0

# 171! no longer fits into a float
FACTORIAL_LIMIT = 170


class AngleMode(enum.Enum):
    RADIANS = "radians"
    DEGREES = "degrees"

    @classmethod
    def from_setting(cls, value):
        """Accept an AngleMode, its name ("radians"/"degrees") or the segment index (0/1)."""
        if isinstance(value, AngleMode):
            return value
        if value in (0, "0"):
            return cls.RADIANS
        if value in (1, "1"):
            return cls.DEGREES
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise E.ConfigurationError(f"Invalid angle mode: {value}", code="5001")


class Function(enum.Enum):
    SIN = "sin"
    COS = "cos"
    TAN = "tan"
    CSC = "csc"
    SEC = "sec"
    COT = "cot"
    ASIN = "asin"
    ACOS = "acos"
    ATAN = "atan"
    ACSC = "acsc"
    ASEC = "asec"
    ACOT = "acot"
    LOG = "log"
    LN = "ln"
    ABS = "abs"
    FLOOR = "floor"
    CEIL = "ceil"
    ROUND = "round"
    LOGB = "logb"
    ROOT = "root"
    MOD = "mod"
    HYPOT = "hypot"
    NPR = "nPr"
    NCR = "nCr"

    @property
    def arity(self):
        if self in TWO_ARGUMENT_FUNCTIONS:
            return 2
        return 1

    @property
    def is_trigonometric(self):
        return self in TRIGONOMETRIC_FUNCTIONS

    @property
    def is_inverse_trigonometric(self):
        return self in INVERSE_TRIGONOMETRIC_FUNCTIONS

    @classmethod
    def from_name(cls, name):
        """Return the Function called `name`, or None if there is none."""
        try:
            return cls(name)
        except ValueError:
            return None


TRIGONOMETRIC_FUNCTIONS = frozenset([Function.SIN, Function.COS, Function.TAN,
                                     Function.CSC, Function.SEC, Function.COT])
INVERSE_TRIGONOMETRIC_FUNCTIONS = frozenset([Function.ASIN, Function.ACOS, Function.ATAN,
                                             Function.ACSC, Function.ASEC, Function.ACOT])
TWO_ARGUMENT_FUNCTIONS = frozenset([Function.LOGB, Function.ROOT, Function.MOD,
                                    Function.HYPOT, Function.NPR, Function.NCR])


# -----------------------------
# Singularity checks
# -----------------------------

def is_near_multiple(angle, period, offset=0.0):
    """True if angle lies within EPSILON of offset + k*period for some integer k."""
    remainder = (angle - offset) % period
    return remainder < EPSILON or period - remainder < EPSILON


def is_near_zero_crossing(angle):
    """Multiples of pi: sin and tan are zero, csc and cot are undefined."""
    return is_near_multiple(angle, math.pi)


def is_near_half_pi(angle):
    """Odd multiples of pi/2: cos and cot are zero, tan and sec are undefined."""
    return is_near_multiple(angle, math.pi, HALF_PI)


def round_half_away(value):
    """Round to the nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3)."""
    return math.copysign(math.floor(abs(value) + 0.5), value)


# -----------------------------
# Factorial and combinatorics
# -----------------------------

def factorial(n):
    """Exact n! for 0 <= n <= FACTORIAL_LIMIT. Raises CalculationError outside that range."""
    if n < 0:
        raise E.CalculationError(f"Factorial of negative number: {n}", code="3026")
    if n > FACTORIAL_LIMIT:
        raise E.CalculationError(f"Number too big for factorial: {n}", code="3026")
    result = 1
    for i in range(2, n + 1):
        result *= i
    return result


def permutations(n, r):
    """nPr. Arguments are truncated to integers; n < 0, r < 0 or r > n give 0."""
    n, r = int(n), int(r)
    if n < 0 or r < 0 or r > n:
        return 0.0
    return float(factorial(n) // factorial(n - r))


def combinations(n, r):
    """nCr, with the same domain policy as permutations()."""
    n, r = int(n), int(r)
    if n < 0 or r < 0 or r > n:
        return 0.0
    return float(factorial(n) // (factorial(r) * factorial(n - r)))


# -----------------------------
# Evaluation
# -----------------------------

def _trigonometric(function, angle):
    if function == Function.SIN:
        return 0.0 if is_near_zero_crossing(angle) else math.sin(angle)
    elif function == Function.COS:
        return 0.0 if is_near_half_pi(angle) else math.cos(angle)
    elif function == Function.TAN:
        if is_near_zero_crossing(angle):
            return 0.0
        if is_near_half_pi(angle):
            return None
        return math.tan(angle)
    elif function == Function.CSC:
        if is_near_zero_crossing(angle):
            return None
        return 1.0 / math.sin(angle)
    elif function == Function.SEC:
        if is_near_half_pi(angle):
            return None
        return 1.0 / math.cos(angle)
    elif function == Function.COT:
        if is_near_zero_crossing(angle):
            return None
        if is_near_half_pi(angle):
            return 0.0
        return 1.0 / math.tan(angle)


def _inverse_trigonometric(function, value):
    if function == Function.ASIN:
        return None if abs(value) > 1.0 else math.asin(value)
    elif function == Function.ACOS:
        return None if abs(value) > 1.0 else math.acos(value)
    elif function == Function.ATAN:
        return math.atan(value)
    elif function == Function.ACSC:
        return None if abs(value) < 1.0 else math.asin(1.0 / value)
    elif function == Function.ASEC:
        return None if abs(value) < 1.0 else math.acos(1.0 / value)
    elif function == Function.ACOT:
        return HALF_PI - math.atan(value)


def evaluate_function(function, value, angle_mode=AngleMode.RADIANS):
    """Evaluate a one-argument function. Returns None where it is undefined."""
    try:
        if function.is_trigonometric:
            angle = math.radians(value) if angle_mode == AngleMode.DEGREES else value
            return _trigonometric(function, angle)

        elif function.is_inverse_trigonometric:
            result = _inverse_trigonometric(function, value)
            if result is not None and angle_mode == AngleMode.DEGREES:
                result = math.degrees(result)
            return result

        elif function == Function.LN:
            if value <= 0:
                return None
            return math.log(value)
        elif function == Function.LOG:
            return math.log10(value)
        elif function == Function.ABS:
            return abs(value)
        elif function == Function.FLOOR:
            return float(math.floor(value))
        elif function == Function.CEIL:
            return float(math.ceil(value))
        elif function == Function.ROUND:
            return round_half_away(value)

    except (ValueError, OverflowError, ZeroDivisionError) as e:
        logger.debug("%s(%r) is undefined: %s", function.value, value, e)
        return None

    logger.debug("%s is not a one-argument function", function.value)
    return None


def evaluate_function2(function, first, second):
    """Evaluate a two-argument function. Returns None where it is undefined."""
    try:
        if function == Function.LOGB:
            if first <= 0.0 or second <= 0.0 or second == 1.0:
                return None
            return math.log(first) / math.log(second)
        elif function == Function.ROOT:
            return math.pow(first, 1.0 / second)
        elif function == Function.MOD:
            return math.fmod(first, second)
        elif function == Function.HYPOT:
            return math.hypot(first, second)
        elif function == Function.NPR:
            return permutations(first, second)
        elif function == Function.NCR:
            return combinations(first, second)

    except (ValueError, OverflowError, ZeroDivisionError, E.CalculationError) as e:
        logger.debug("%s(%r, %r) is undefined: %s", function.value, first, second, e)
        return None

    logger.debug("%s is not a two-argument function", function.value)
    return None
