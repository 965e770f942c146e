import enum


class ParsingErrorKind(enum.Enum):
    UNEXPECTED_TOKEN = "unexpected-token"
    UNMATCHED_PARENTHESIS = "unmatched-parenthesis"
    EVALUATION_ERROR = "evaluation-error"


class MathError(Exception):
    def __init__(self, message, code="9999", equation=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.equation = equation

class SyntaxError(MathError):
    pass

class CalculationError(MathError):
    pass

class ConfigurationError(MathError):
    pass


class ParsingError(SyntaxError):
    """Tokenizer failure. `kind` is one of the ParsingErrorKind members."""

    def __init__(self, kind, message=None, code="3011", equation=None):
        super().__init__(message or ERROR_MESSAGES.get(code, kind.value), code=code, equation=equation)
        self.kind = kind

    def __str__(self):
        return self.kind.value



Error_Dictionary= {

    "1" : "Missing Files",
    "3" : "Calculator Error",
    "4" : "UI Error",
    "5" : "Configuration Error",
    "9" : "Runtime Error"

}


def error_category(code):
    """Main error group of a code, from its first digit ("3026" -> "Calculator Error")."""
    return Error_Dictionary.get(str(code)[:1], Error_Dictionary["9"])

#Error Messages are structured in:
# 1. Digit: Main Error
# 2. Digit: Specification
# 3. and 4. Digit: Error Number



ERROR_MESSAGES = {
    "3003" : "Division by Zero",
    "3008" : "Invalid number literal: ", # + literal
    "3009" : "Missing ')'. ",
    "3010" : "Missing '(' after function: ", # + function name
    "3011" : "Unexpected Token: ", # + Token
    "3012" : "Unknown function: ", # + function name
    "3013" : "Wrong number of arguments for function: ", # + function name
    "3014" : "Syntax check failed: ", # + Equation
    "3026" : "Number too big.",
    "3031" : "Expression nested too deeply.",


    "4002" : "Calculation already Running!",
    "4501" : "Not all Settings could be saved: ", # + Error raising setting


    "5001" : "Invalid angle mode: ", # + value


    "9999" : "Unexpected Error: " #+error
}
