"""
Error types for token expression parsing, resolution, and function evaluation.

Two groups:

- Caller errors (``TokenTreeError``, ``CatalogError``, ``SettingsError``)
  propagate out of the engine.
- Function errors (``TokenFunctionError`` and subclasses) are raised by
  catalog functions and caught by the expression processor, which leaves
  the offending expression unresolved.
"""

from dataclasses import dataclass
from typing import Optional


class TokensmithError(Exception):
    """Base exception for all tokensmith errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class TokenTreeError(TokensmithError, TypeError):
    """
    Raised when the engine is handed something that is not a token tree.

    Examples:
    - A list or string passed to resolve_all()
    - A group whose keys are not strings
    """

    pass


class CatalogError(TokensmithError):
    """
    Raised when the function catalog is misused.

    Examples:
    - Registering a non-callable
    - Registering under an invalid identifier
    """

    pass


class SettingsError(TokensmithError):
    """Raised when tokensmith settings cannot be loaded or validated."""

    pass


class TokenFunctionError(TokensmithError):
    """
    Raised by a catalog function when its arguments are unusable.

    Never escapes resolve_all()/resolve_one(): the processor logs it and
    returns the expression unchanged.
    """

    pass


class InvalidColorError(TokenFunctionError, ValueError):
    """Raised when an argument cannot be parsed as a color."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid color: {value!r}")


class InvalidValueError(TokenFunctionError, ValueError):
    """Raised when an argument is not a number, percentage, or dimension."""

    pass


class IncompatibleUnitsError(TokenFunctionError):
    """Raised when two dimensions cannot be converted into one another."""

    def __init__(self, left: str, right: str, operation: str = ""):
        self.left = left
        self.right = right
        where = f" in {operation}()" if operation else ""
        super().__init__(f"Incompatible units{where}: '{left}' and '{right}'")


class DivisionByZeroError(TokenFunctionError, ZeroDivisionError):
    """Raised by divide()/mod() when the divisor is zero."""

    def __init__(self, operation: str = "divide"):
        super().__init__(f"Division by zero in {operation}()")


@dataclass
class ErrorContext:
    """
    Where in the token tree an error happened.

    Attributes:
        expression: The raw expression being evaluated
        path: Dot-path of the token owning the expression, if known
        function: Catalog function name, if the error came from a call
    """

    expression: str
    path: str | None = None
    function: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "color.light: tint({color.brand}, 80%)"
        """
        location = self.path or "<value>"
        if self.function:
            location += f" [{self.function}]"
        return f"{location}: {self.expression}"


def make_function_error(
    message: str,
    expression: str,
    function: str | None = None,
    path: str | None = None,
) -> TokenFunctionError:
    """
    Helper to create a TokenFunctionError with context.

    Args:
        message: Error description
        expression: Expression that failed
        function: Optional catalog function name
        path: Optional token path

    Returns:
        TokenFunctionError with context attached
    """
    context = ErrorContext(expression=expression, path=path, function=function)
    return TokenFunctionError(message, context)
