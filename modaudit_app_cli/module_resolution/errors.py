"""Fetch error taxonomy.

All failures raised by fetch() derive from FetchError. Unresolved modules are
reported together as a single UnresolvedModulesError group.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..model import ModuleReference


class FetchError(Exception):
    """Raised when modules could not be fetched."""


class ToolNotFoundError(FetchError):
    """Raised when the module tool is not on PATH."""

    def __init__(self, tool: str):
        super().__init__(f"Module tool not found on PATH: {tool}")
        self.tool = tool


class CommandFailedError(FetchError):
    """Raised when the module tool exits nonzero or cannot be started."""

    def __init__(self, message: str, output: bytes = b""):
        text = output.decode("utf-8", errors="replace")
        super().__init__(f"failed to fetch: {message} (output: {text})")
        self.output = output


class FetchTimeoutError(FetchError):
    """Raised when the module tool exceeds the configured timeout."""

    def __init__(self, timeout: float, output: bytes = b""):
        super().__init__(f"Module download timed out after {timeout}s")
        self.timeout = timeout
        self.output = output


class ModuleDecodeError(FetchError):
    """Raised when the tool output is not a stream of module objects."""

    def __init__(self, message: str, content: str):
        super().__init__(f"failed to decode JSON: {message}. Input: {content}")
        self.content = content


class ModuleNotResolvedError(FetchError):
    """A single requested module missing from the fetched set."""

    def __init__(self, reference: ModuleReference, reason: str = ""):
        message = f"module {reference} could not be resolved"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.reference = reference
        self.reason = reason


class UnresolvedModulesError(FetchError, ExceptionGroup):
    """Every requested module that could not be resolved, reported together."""

    def __new__(cls, errors: Sequence[ModuleNotResolvedError]):
        return super().__new__(cls, _group_message(errors), list(errors))

    def __init__(self, errors: Sequence[ModuleNotResolvedError]):
        super().__init__(_group_message(errors), list(errors))

    def derive(self, excs):
        return UnresolvedModulesError(excs)

    @property
    def references(self) -> list[ModuleReference]:
        return [e.reference for e in self.exceptions]


def _group_message(errors: Sequence[ModuleNotResolvedError]) -> str:
    details = "; ".join(str(e) for e in errors)
    return f"failed to fetch all modules: {details}"
