"""Safe error message formatting utilities.

Ensures exceptions always have useful display messages, even when
their str() representation is empty (e.g., TimeoutError, CancelledError),
and that exception groups show every underlying cause.
"""

from __future__ import annotations

import asyncio

from rich.markup import escape as _escape_markup

# Friendly messages for specific exception types known to have empty str()
FRIENDLY_MESSAGES: dict[type, str] = {
    TimeoutError: "Operation timed out.",
    asyncio.CancelledError: "Operation was cancelled.",
    KeyboardInterrupt: "Operation interrupted by user.",
}


def format_error_message(e: BaseException, *, include_type: bool = True) -> str:
    """Format an exception into a useful display message.

    Args:
        e: The exception to format
        include_type: Whether to include the exception type name

    Returns:
        A non-empty, user-friendly error message

    Examples:
        >>> format_error_message(ValueError("invalid input"))
        'ValueError: invalid input'

        >>> format_error_message(ValueError("invalid input"), include_type=False)
        'invalid input'
    """
    error_str = e.message if isinstance(e, BaseExceptionGroup) else str(e)
    error_type = type(e).__name__

    if error_str:
        if include_type and error_type not in error_str:
            return f"{error_type}: {error_str}"
        return error_str

    for exc_type, friendly_msg in FRIENDLY_MESSAGES.items():
        if isinstance(e, exc_type):
            return f"{error_type}: {friendly_msg}"

    return f"{error_type}: (no additional details)"


def format_error_lines(e: BaseException) -> list[str]:
    """Format an exception as display lines, one per cause.

    Exception groups are flattened so every sub-exception gets its own line.
    """
    if isinstance(e, BaseExceptionGroup):
        lines: list[str] = []
        for sub in e.exceptions:
            lines.extend(format_error_lines(sub))
        return lines
    return [format_error_message(e, include_type=False)]


def escape_markup(value: object) -> str:
    """Escape a value for safe interpolation into Rich markup strings.

    Module paths and tool output can contain brackets that Rich would
    otherwise parse as markup tags.
    """
    return _escape_markup(str(value))
