class TemplateError(Exception):
    """Base class for all template loading failures.

    ``line`` and ``column`` are 0-based; the string form reports them 1-based.
    """

    stage = "Template"

    def __init__(self, line: int, column: int, message: str) -> None:
        super().__init__(message)
        self.line = line
        self.column = column
        self.message = message

    def __str__(self) -> str:
        return f"{self.stage} error: {self.line + 1}:{self.column + 1}: {self.message}"


class LexError(TemplateError):
    stage = "Lexer"


class ParseError(TemplateError):
    stage = "Parser"


class ValidationError(TemplateError):
    stage = "Validation"
