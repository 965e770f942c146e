# MathEngine.py
"""""
Core calculation engine for Calculator Plus.

Pipeline
--------
1) Tokenizer: converts the raw display string into a flat tuple of tokens.
   Function calls are tokenized and parsed recursively, so they leave the tokenizer
   as finished subtrees.
2) Syntax check: rejects unbalanced parentheses and operators that follow each other
   (strict mode only, graphing mode tolerates half-typed input).
3) Parser (AST): recursive-descent, precedence aware, never raises. Parts it cannot
   make sense of become ErrorNode leaves.
4) Evaluator: every node evaluates itself for a given x value and angle mode and
   returns None for undefined points.
5) Formatter: renders a float the way the display shows it.

The engine holds no state between calls. Angle mode, x value and the previous
answer are passed in by the caller (see Session.py).
"""""

import logging
import math

from . import error as E
from .error import ParsingErrorKind
from .Expression import (Operator, Number, Variable, Operation, UnaryOperation,
                         BinaryOperation, FunctionCall, FunctionCall2, ErrorNode)
from .ScientificEngine import AngleMode, Function

logger = logging.getLogger(__name__)

# Nesting limit for function arguments (tokenizer) and for parentheses, powers
# and prefix operators (parser)
DEFAULT_MAX_DEPTH = 64

# Results this close to an integer are displayed as that integer
SNAP_TOLERANCE = 3e-8
SCIENTIFIC_UPPER = 1e8
SCIENTIFIC_LOWER = 1e-8
SIGNIFICANT_DIGITS = 12

# Sampled domain of the free variable
GRAPH_START = -10.0
GRAPH_STOP = 10.0
GRAPH_STEP = 0.001

ANSWER_PLACEHOLDER = "ans"
PARSE_ERROR_RESULT = "Error1"
NO_RESULT = "Error2"

NUMBER_CHARACTERS = "0123456789."
# Letters that are operators of their own and therefore never start a function name
RESERVED_LETTERS = ("e", "π", "x")

# A '-' following one of these is a sign, not a subtraction
UNARY_CONTEXT = frozenset([Operator.ADD, Operator.SUBTRACT, Operator.UNARY_MINUS,
                           Operator.MULTIPLY, Operator.DIVIDE, Operator.OPEN_PARENTHESIS,
                           Operator.EXPONENT, Operator.SQUARE_ROOT])

# Juxtaposing a value with one of these means multiplication: 2(3), 2π, πx, x√4, ...
IMPLICIT_FOLLOWERS = frozenset([Operator.OPEN_PARENTHESIS, Operator.SQUARE_ROOT,
                                Operator.CONSTANT_PI, Operator.CONSTANT_E, Operator.VARIABLE_X])

ARITHMETIC = frozenset([Operator.ADD, Operator.SUBTRACT, Operator.MULTIPLY, Operator.DIVIDE])

# Precedence levels of the binary operators, lowest first
SUM_PRECEDENCE = Operator.ADD.precedence
PRODUCT_PRECEDENCE = Operator.MULTIPLY.precedence
POWER_PRECEDENCE = Operator.EXPONENT.precedence


# -----------------------------
# Utilities / small helpers
# -----------------------------

def isfloat(zahl):
    """Return True if the given string can be parsed as float; else False."""
    try:
        float(zahl)
        return True
    except ValueError:
        return False


def operator_of(token):
    """Return the Operator of a bare operator token, None for every other token."""
    if isinstance(token, Operation):
        return token.operator
    return None


def append_value(tokens, token):
    """Append a value token, inserting a multiplication if a value precedes it."""
    if tokens and tokens[-1].is_value():
        tokens.append(Operation(Operator.MULTIPLY))
    tokens.append(token)


def flush_number(tokens, number_string, problem):
    """Turn the pending numeric literal into tokens.

    '2.5', '3E-4' become a Number. A literal starting with 'E' ('E5') is the
    scientific marker followed by its exponent, which the parser turns into 10^5.
    """
    if not number_string:
        return
    if isfloat(number_string):
        append_value(tokens, Number(number_string))
    elif number_string.startswith("E"):
        tokens.append(Operation(Operator.SCIENTIFIC_E))
        if len(number_string) > 1:
            exponent = number_string[1:]
            if not isfloat(exponent):
                raise E.ParsingError(ParsingErrorKind.UNEXPECTED_TOKEN,
                                     f"Invalid number literal: {number_string}", code="3008", equation=problem)
            tokens.append(Number(exponent))
    else:
        raise E.ParsingError(ParsingErrorKind.UNEXPECTED_TOKEN,
                             f"Invalid number literal: {number_string}", code="3008", equation=problem)


def isolate_arguments(problem, open_index):
    """Split the argument list that opens at problem[open_index] == '('.

    Walks forward counting parentheses depth; commas on the outermost level separate
    arguments.
    Returns:
        (list_of_argument_strings, position_after_closing_paren)
    """
    arguments = []
    current_argument = ""
    bracket_count = 1
    b = open_index + 1
    while b < len(problem):
        current_char = problem[b]
        if current_char == "(":
            bracket_count += 1
        elif current_char == ")":
            bracket_count -= 1
            if bracket_count == 0:
                arguments.append(current_argument)
                return arguments, b + 1
        elif current_char == "," and bracket_count == 1:
            arguments.append(current_argument)
            current_argument = ""
            b += 1
            continue
        current_argument += current_char
        b += 1

    raise E.ParsingError(ParsingErrorKind.UNMATCHED_PARENTHESIS,
                         f"Missing ')' after function arguments: {problem[open_index:]}", code="3009", equation=problem)


# -----------------------------
# Tokenizer
# -----------------------------

def translator(problem, graphing=False, depth=0, max_depth=DEFAULT_MAX_DEPTH):
    """Convert a raw input string into a tuple of tokens.

    Notes:
    - Inserts implicit multiplication where needed (e.g., '2π' -> 2, '⋅', π).
    - Decides between subtraction and a sign for every '-'.
    - Function calls ('sin(...)', 'logb(.., ..)') are tokenized and parsed recursively,
      one argument at a time, and emitted as one FunctionCall / FunctionCall2 token.
    - Outside graphing mode the result has to pass check_syntax().

    Raises ParsingError on characters it does not know, malformed function calls and
    (strict mode) syntax errors.
    """
    if depth > max_depth:
        raise E.ParsingError(ParsingErrorKind.UNEXPECTED_TOKEN,
                             f"Function calls nested deeper than {max_depth} levels.", code="3031", equation=problem)

    tokens = []
    number_string = ""
    b = 0

    while b < len(problem):
        current_char = problem[b]

        # --- Numbers: digits, decimal separator and 'E' exponents (1.5E-3) ---
        if (current_char in NUMBER_CHARACTERS or current_char == "E" or
                (current_char == "-" and number_string.endswith("E"))):
            number_string += current_char
            b += 1
            continue

        flush_number(tokens, number_string, problem)
        number_string = ""

        # --- Function names: a run of letters that has to be followed by '(' ---
        if current_char.isalpha() and current_char not in RESERVED_LETTERS:
            name_end = b
            while name_end < len(problem) and problem[name_end].isalpha():
                name_end += 1
            function_name = problem[b:name_end]

            if name_end >= len(problem) or problem[name_end] != "(":
                raise E.ParsingError(ParsingErrorKind.UNEXPECTED_TOKEN,
                                     f"Missing '(' after function: {function_name}", code="3010", equation=problem)

            function = Function.from_name(function_name)
            if function is None:
                raise E.ParsingError(ParsingErrorKind.UNEXPECTED_TOKEN,
                                     f"Unknown function: {function_name}", code="3012", equation=problem)

            arguments, b = isolate_arguments(problem, name_end)
            if len(arguments) != function.arity:
                raise E.ParsingError(ParsingErrorKind.UNEXPECTED_TOKEN,
                                     f"{function_name} expects {function.arity} argument(s), got {len(arguments)}",
                                     code="3013", equation=problem)

            parsed_arguments = [parse(translator(argument, graphing, depth + 1, max_depth), max_depth)
                                for argument in arguments]
            if function.arity == 2:
                append_value(tokens, FunctionCall2(function, parsed_arguments[0], parsed_arguments[1]))
            else:
                append_value(tokens, FunctionCall(function, parsed_arguments[0]))
            continue

        # --- Whitespace (ignored) ---
        if current_char.isspace():
            b += 1
            continue

        # --- Operators, parentheses, constants and the variable ---
        operator = Operator.from_character(current_char)
        if operator is None:
            raise E.ParsingError(ParsingErrorKind.UNEXPECTED_TOKEN,
                                 f"Unexpected Token: {current_char}", code="3011", equation=problem)

        if operator in IMPLICIT_FOLLOWERS and tokens and tokens[-1].is_value():
            tokens.append(Operation(Operator.MULTIPLY))

        if operator == Operator.SUBTRACT and (not tokens or operator_of(tokens[-1]) in UNARY_CONTEXT):
            operator = Operator.UNARY_MINUS

        tokens.append(Operation(operator))
        b += 1

    # Trailing literal
    flush_number(tokens, number_string, problem)

    if not graphing:
        kind = find_syntax_error(tokens)
        if kind is not None:
            raise E.ParsingError(kind, f"Syntax check failed: {problem}", code="3014", equation=problem)

    logger.debug("Tokens for %r: %s", problem, tokens)
    return tuple(tokens)


# -----------------------------
# Syntax check (strict mode)
# -----------------------------

def find_syntax_error(tokens):
    """Return the ParsingErrorKind of the first syntax error in `tokens`, or None."""
    open_parentheses = []
    previous_operator = None

    for index, token in enumerate(tokens):
        operator = operator_of(token)

        if operator in ARITHMETIC:
            # '2+*3', '(+3': an operator without an operand in front of it
            if previous_operator in ARITHMETIC or previous_operator == Operator.OPEN_PARENTHESIS:
                return ParsingErrorKind.UNEXPECTED_TOKEN
        elif operator == Operator.OPEN_PARENTHESIS:
            open_parentheses.append(index)
        elif operator == Operator.CLOSE_PARENTHESIS:
            if previous_operator == Operator.OPEN_PARENTHESIS:
                return ParsingErrorKind.UNEXPECTED_TOKEN
            if not open_parentheses:
                return ParsingErrorKind.UNMATCHED_PARENTHESIS
            open_parentheses.pop()

        previous_operator = operator

    if open_parentheses:
        return ParsingErrorKind.UNMATCHED_PARENTHESIS
    return None


def check_syntax(tokens):
    """Return True if the token sequence passes the strict-mode syntax check."""
    return find_syntax_error(tokens) is None


# -----------------------------
# Parser (recursive descent)
# -----------------------------

class Parser:
    """Precedence-climbing parser over an immutable token tuple.

    expression := term (('+'|'-') term)*
    term       := factor (('⋅'|'÷') factor)*
    factor     := base ('^' factor)?
    base       := function call | '(' expression ')' | 'E' number | number
                  | 'π' | 'e' | 'x' | ('_'|'√') base
    """

    def __init__(self, tokens, max_depth=DEFAULT_MAX_DEPTH):
        self.tokens = tuple(tokens)
        self.position = 0
        self.depth = 0
        self.max_depth = max_depth

    def peek(self):
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None

    def advance(self):
        token = self.peek()
        self.position += 1
        return token

    def parse(self):
        """Parse all tokens. Leftover tokens make the whole tree an ErrorNode."""
        tree = self.parse_expression()
        if self.position < len(self.tokens):
            logger.debug("Unparsed tokens: %s", self.tokens[self.position:])
            return ErrorNode(ParsingErrorKind.UNEXPECTED_TOKEN)
        return tree

    def nested(self, parse_function):
        """Run one level deeper; past max_depth an ErrorNode is returned instead."""
        if self.depth >= self.max_depth:
            logger.debug("Parser nesting limit of %d reached", self.max_depth)
            return ErrorNode(ParsingErrorKind.UNEXPECTED_TOKEN)
        self.depth += 1
        try:
            return parse_function()
        finally:
            self.depth -= 1

    def binary_operator(self, precedence):
        """Return the operator at the cursor if it is a binary operator of `precedence`."""
        operator = operator_of(self.peek())
        if operator is not None and operator.precedence == precedence:
            return operator
        return None

    def parse_expression(self):
        """Addition and subtraction."""
        return self.parse_level(SUM_PRECEDENCE)

    def parse_term(self):
        """Multiplication and division."""
        return self.parse_level(PRODUCT_PRECEDENCE)

    def parse_factor(self):
        """Exponentiation, right-associative: 2^3^2 = 2^(3^2)."""
        return self.parse_level(POWER_PRECEDENCE)

    def parse_level(self, precedence):
        """Binary operators of one precedence level.

        Left-associative operators are folded in a loop, so a long chain costs no stack.
        A right-associative operator takes the rest of its level as right operand.
        """
        if precedence == POWER_PRECEDENCE:
            tree = self.parse_base()
        else:
            tree = self.parse_level(precedence + 1)

        operator = self.binary_operator(precedence)
        while operator is not None:
            self.advance()
            if operator.is_right_associative:
                right = self.nested(lambda: self.parse_level(precedence))
                return BinaryOperation(tree, operator, right)
            tree = BinaryOperation(tree, operator, self.parse_level(precedence + 1))
            operator = self.binary_operator(precedence)
        return tree

    def parse_base(self):
        token = self.peek()
        if token is None:
            return ErrorNode(ParsingErrorKind.UNEXPECTED_TOKEN)

        # Function calls arrive already parsed
        if isinstance(token, (FunctionCall, FunctionCall2, Number)):
            self.advance()
            return token

        operator = operator_of(token)

        # Parenthesized sub-expression
        if operator == Operator.OPEN_PARENTHESIS:
            self.advance()
            inner = self.nested(self.parse_expression)
            if operator_of(self.peek()) != Operator.CLOSE_PARENTHESIS:
                return ErrorNode(ParsingErrorKind.UNMATCHED_PARENTHESIS)
            self.advance()
            return inner

        # 'E5' -> 10^5
        elif operator == Operator.SCIENTIFIC_E:
            self.advance()
            exponent = self.peek()
            if not isinstance(exponent, Number):
                return ErrorNode(ParsingErrorKind.UNEXPECTED_TOKEN)
            self.advance()
            return UnaryOperation(Operator.SCIENTIFIC_E, exponent)

        elif operator in (Operator.CONSTANT_PI, Operator.CONSTANT_E):
            self.advance()
            return token
        elif operator == Operator.VARIABLE_X:
            self.advance()
            return Variable(Operator.VARIABLE_X.value)

        elif operator in (Operator.UNARY_MINUS, Operator.SQUARE_ROOT):
            self.advance()
            operand = self.nested(self.parse_base)
            return UnaryOperation(operator, operand)

        return ErrorNode(ParsingErrorKind.UNEXPECTED_TOKEN)


def parse(tokens, max_depth=DEFAULT_MAX_DEPTH):
    """Parse a token sequence into one expression tree (see Parser)."""
    return Parser(tokens, max_depth).parse()


def build_ast(problem, graphing=False, max_depth=DEFAULT_MAX_DEPTH):
    """Tokenize and parse `problem`. Raises ParsingError if it cannot be tokenized."""
    tree = parse(translator(problem, graphing=graphing, max_depth=max_depth), max_depth)
    logger.debug("Final AST for %r: %s", problem, tree)
    return tree


# -----------------------------
# Result formatting
# -----------------------------

def format_result(value):
    """Render a float the way the display shows it.

    - values within SNAP_TOLERANCE of an integer (and larger than 0.01) become that integer
    - |value| >= 1e8 or < 1e-8: scientific, '1.234568E8'
    - integers without decimal point
    - everything else with 12 significant digits, trailing zeros removed
    """
    if not math.isfinite(value):
        return str(value)

    rounded = round(value)
    if abs(value - rounded) < SNAP_TOLERANCE and abs(value) > 0.01:
        value = float(rounded)

    magnitude = abs(value)
    if magnitude >= SCIENTIFIC_UPPER or 0 < magnitude < SCIENTIFIC_LOWER:
        mantissa, exponent = f"{value:.6E}".split("E")
        mantissa = mantissa.rstrip("0").rstrip(".")
        return f"{mantissa}E{int(exponent)}"

    if value == int(value):
        return str(int(value))

    decimals = SIGNIFICANT_DIGITS - len(str(int(magnitude)))
    display = f"{value:.{decimals}f}"
    display = display.rstrip("0").rstrip(".")
    return display


# -----------------------------
# Public entry points
# -----------------------------

def calculate(problem, angle_mode=AngleMode.RADIANS, previous_answer="", graphing=False,
              max_depth=DEFAULT_MAX_DEPTH):
    """Main API: substitute ans → tokenize → parse → evaluate at x = 0 → format.

    Returns the formatted result, or one of the failure strings:
    - 'unexpected-token' / 'unmatched-parenthesis' if the input could not be tokenized
    - 'Error1' if the input parsed to an error
    - 'Error2' if nothing could be computed and the input is not a number itself
    """
    angle_mode = AngleMode.from_setting(angle_mode)
    problem = problem.replace(ANSWER_PLACEHOLDER, previous_answer)
    display = problem

    try:
        tree = build_ast(problem, graphing=graphing, max_depth=max_depth)
        if isinstance(tree, ErrorNode):
            display = PARSE_ERROR_RESULT
        else:
            result = tree.evaluate(0.0, angle_mode)
            if result is not None and math.isfinite(result):
                display = format_result(result)
            else:
                logger.info("No result for %r", problem)

    except E.ParsingError as e:
        logger.info("Could not tokenize %r: %s", problem, e.message)
        display = str(e)

    # '1E400' is a float literal, but not a number the display can show
    if display == problem and not (isfloat(problem) and math.isfinite(float(problem))):
        display = NO_RESULT
    return display


def evaluate_expression(problem, x_value=0.0, angle_mode=AngleMode.RADIANS, graphing=False,
                        max_depth=DEFAULT_MAX_DEPTH):
    """Evaluate `problem` at one x value. Returns None if undefined there.

    Raises ParsingError if the input cannot be tokenized.
    """
    tree = build_ast(problem, graphing=graphing, max_depth=max_depth)
    return tree.evaluate(x_value, AngleMode.from_setting(angle_mode))


def sample_points(tree, angle_mode=AngleMode.RADIANS, start=GRAPH_START, stop=GRAPH_STOP, step=GRAPH_STEP):
    """Evaluate `tree` for x from start to stop (inclusive). Undefined and non-finite points are left out."""
    points = {}
    samples = int(round((stop - start) / step))
    for i in range(samples + 1):
        x_value = round(start + i * step, 10)
        y_value = tree.evaluate(x_value, angle_mode)
        if y_value is not None and math.isfinite(y_value):
            points[x_value] = y_value
    return points


def graph(problem, angle_mode=AngleMode.RADIANS, previous_answer="", graphing=True,
          start=GRAPH_START, stop=GRAPH_STOP, step=GRAPH_STEP, max_depth=DEFAULT_MAX_DEPTH):
    """Return the mapping x → y of `problem` over the sampled domain.

    Never raises: input that cannot be tokenized or parses to an error gives no points.
    """
    angle_mode = AngleMode.from_setting(angle_mode)
    problem = problem.replace(ANSWER_PLACEHOLDER, previous_answer)
    try:
        tree = build_ast(problem, graphing=graphing, max_depth=max_depth)
    except E.ParsingError as e:
        logger.debug("Nothing to graph for %r: %s", problem, e)
        return {}

    if isinstance(tree, ErrorNode):
        return {}
    return sample_points(tree, angle_mode, start, stop, step)
