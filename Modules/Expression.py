# Expression.py
"""""
Shared vocabulary of the expression engine.

- Operator: every single-character operator, constant and parenthesis the tokenizer knows
- Expression nodes: the tokens produced by the tokenizer and the tree built by the parser

Tokens and tree nodes are the same classes. A function call is already a finished subtree
when the tokenizer emits it, so the parser can take it as one atomic token.
Nodes are never mutated after construction and every node owns its children.
"""""

import enum
import logging
import math

from . import ScientificEngine
from .ScientificEngine import AngleMode, Function
from .error import ParsingErrorKind

logger = logging.getLogger(__name__)


class Operator(enum.Enum):
    ADD = "+"
    SUBTRACT = "-"
    UNARY_MINUS = "_"
    MULTIPLY = "⋅"
    DIVIDE = "÷"
    OPEN_PARENTHESIS = "("
    CLOSE_PARENTHESIS = ")"
    CONSTANT_PI = "π"
    CONSTANT_E = "e"
    CONSTANT_ANS = "(ans)"
    SCIENTIFIC_E = "E"
    EXPONENT = "^"
    SQUARE_ROOT = "√"
    VARIABLE_X = "x"

    @property
    def precedence(self):
        if self in (Operator.ADD, Operator.SUBTRACT):
            return 1
        elif self in (Operator.MULTIPLY, Operator.DIVIDE):
            return 2
        elif self == Operator.EXPONENT:
            return 3
        elif self in (Operator.UNARY_MINUS, Operator.SQUARE_ROOT):
            return 4
        elif self == Operator.SCIENTIFIC_E:
            return 6
        return 5

    @property
    def is_right_associative(self):
        return self == Operator.EXPONENT

    @classmethod
    def from_character(cls, character):
        """Resolve one input character, or return None if it is not an operator."""
        if character in OPERATOR_ALIASES:
            return OPERATOR_ALIASES[character]
        try:
            return cls(character)
        except ValueError:
            return None


# Keyboard spellings of the display operators
OPERATOR_ALIASES = {
    "*": Operator.MULTIPLY,
    "/": Operator.DIVIDE,
}

# Operators that end a value, so that a following value means multiplication
VALUE_OPERATORS = frozenset([Operator.CONSTANT_PI, Operator.CONSTANT_E,
                             Operator.VARIABLE_X, Operator.CLOSE_PARENTHESIS])


# -----------------------------
# AST node types
# -----------------------------

class Expression:
    """Base class of all tokens / tree nodes."""

    __slots__ = ()
    _fields = ()

    def evaluate(self, x_value=0.0, angle_mode=AngleMode.RADIANS):
        """Return the float value of this subtree, or None if it is undefined."""
        raise NotImplementedError

    def is_value(self):
        """True if a value ends at this token (implicit multiplication may follow)."""
        return False

    # Comparison, hashing and repr walk the tree with an explicit stack:
    # a chain like 1+1+...+1 is as deep as it is long.

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        pending = [(self, other)]
        while pending:
            left, right = pending.pop()
            if type(left) is not type(right):
                return False
            for name in left._fields:
                left_field = getattr(left, name)
                right_field = getattr(right, name)
                if isinstance(left_field, Expression):
                    pending.append((left_field, right_field))
                elif left_field != right_field:
                    return False
        return True

    def __hash__(self):
        parts = []
        pending = [self]
        while pending:
            node = pending.pop()
            if not isinstance(node, Expression):
                parts.append(node)
                continue
            parts.append(type(node).__name__)
            pending.extend(reversed([getattr(node, name) for name in node._fields]))
        return hash(tuple(parts))

    def __repr__(self):
        pieces = []
        pending = [(False, self)]
        while pending:
            is_text, item = pending.pop()
            if is_text:
                pieces.append(item)
            elif isinstance(item, Expression) and type(item).__repr__ is Expression.__repr__:
                parts = [(True, f"{type(item).__name__}(")]
                for index, name in enumerate(item._fields):
                    if index:
                        parts.append((True, ", "))
                    parts.append((False, getattr(item, name)))
                parts.append((True, ")"))
                pending.extend(reversed(parts))
            else:
                pieces.append(repr(item))
        return "".join(pieces)


class Number(Expression):
    """Numeric literal."""

    __slots__ = ("value",)
    _fields = ("value",)

    def __init__(self, value):
        self.value = float(value)

    def evaluate(self, x_value=0.0, angle_mode=AngleMode.RADIANS):
        return self.value

    def is_value(self):
        return True


class Variable(Expression):
    """The single free variable. Evaluates to the x value of the current sample."""

    __slots__ = ("name",)
    _fields = ("name",)

    def __init__(self, name="x"):
        self.name = name

    def evaluate(self, x_value=0.0, angle_mode=AngleMode.RADIANS):
        return x_value

    def is_value(self):
        return True


class Operation(Expression):
    """A bare operator token. Constants stay in the tree in this form."""

    __slots__ = ("operator",)
    _fields = ("operator",)

    def __init__(self, operator):
        self.operator = operator

    def evaluate(self, x_value=0.0, angle_mode=AngleMode.RADIANS):
        if self.operator == Operator.CONSTANT_PI:
            return math.pi
        elif self.operator == Operator.CONSTANT_E:
            return math.e
        elif self.operator == Operator.VARIABLE_X:
            return x_value
        return None

    def is_value(self):
        return self.operator in VALUE_OPERATORS

    def __repr__(self):
        return f"Operation({self.operator.value!r})"


class UnaryOperation(Expression):
    __slots__ = ("operator", "operand")
    _fields = ("operator", "operand")

    def __init__(self, operator, operand):
        self.operator = operator
        self.operand = operand

    def evaluate(self, x_value=0.0, angle_mode=AngleMode.RADIANS):
        value = self.operand.evaluate(x_value, angle_mode)
        if value is None:
            return None

        if self.operator == Operator.UNARY_MINUS:
            return -value
        elif self.operator == Operator.SQUARE_ROOT:
            if value < 0:
                return None
            return math.sqrt(value)
        elif self.operator == Operator.SCIENTIFIC_E:
            try:
                return math.pow(10.0, value)
            except OverflowError:
                return None
        return None


class BinaryOperation(Expression):
    """Binary operation: left <operator> right."""

    __slots__ = ("left", "operator", "right")
    _fields = ("left", "operator", "right")

    def __init__(self, left, operator, right):
        self.left = left
        self.operator = operator
        self.right = right

    def evaluate(self, x_value=0.0, angle_mode=AngleMode.RADIANS):
        # The parser builds chains left-deep, so walk the left spine in a loop
        chain = []
        node = self
        while isinstance(node, BinaryOperation):
            chain.append(node)
            node = node.left

        value = node.evaluate(x_value, angle_mode)
        for link in reversed(chain):
            if value is None:
                return None
            value = link.apply(value, link.right.evaluate(x_value, angle_mode))
        return value

    def apply(self, left_value, right_value):
        """Combine two operand values with this node's operator."""
        if left_value is None or right_value is None:
            return None

        if self.operator == Operator.ADD:
            return left_value + right_value
        elif self.operator == Operator.SUBTRACT:
            return left_value - right_value
        elif self.operator == Operator.MULTIPLY:
            return left_value * right_value
        elif self.operator == Operator.DIVIDE:
            if right_value == 0:
                return None
            return left_value / right_value
        elif self.operator == Operator.EXPONENT:
            try:
                return math.pow(left_value, right_value)
            except (ValueError, OverflowError) as e:
                logger.debug("%r ^ %r is undefined: %s", left_value, right_value, e)
                return None
        return None


class FunctionCall(Expression):
    """One-argument function applied to an already parsed argument."""

    __slots__ = ("function", "operand")
    _fields = ("function", "operand")

    def __init__(self, function, operand):
        self.function = function
        self.operand = operand

    def evaluate(self, x_value=0.0, angle_mode=AngleMode.RADIANS):
        value = self.operand.evaluate(x_value, angle_mode)
        if value is None:
            return None
        return ScientificEngine.evaluate_function(self.function, value, angle_mode)

    def is_value(self):
        return True


class FunctionCall2(Expression):
    """Two-argument function (logb, root, mod, hypot, nPr, nCr)."""

    __slots__ = ("function", "first", "second")
    _fields = ("function", "first", "second")

    def __init__(self, function, first, second):
        self.function = function
        self.first = first
        self.second = second

    def evaluate(self, x_value=0.0, angle_mode=AngleMode.RADIANS):
        first_value = self.first.evaluate(x_value, angle_mode)
        second_value = self.second.evaluate(x_value, angle_mode)
        if first_value is None or second_value is None:
            return None
        return ScientificEngine.evaluate_function2(self.function, first_value, second_value)

    def is_value(self):
        return True


class ErrorNode(Expression):
    """Placeholder for a part of the input that could not be parsed. Never has a value."""

    __slots__ = ("kind",)
    _fields = ("kind",)

    def __init__(self, kind=ParsingErrorKind.UNEXPECTED_TOKEN):
        self.kind = kind

    def evaluate(self, x_value=0.0, angle_mode=AngleMode.RADIANS):
        return None

    def __repr__(self):
        return f"ErrorNode({self.kind.value!r})"
