"""Module resolution.

Fetches Go modules with the Go toolchain and verifies that every requested
module was resolved.
"""

from .decode import decode_modules
from .decode import sanitize_output
from .errors import CommandFailedError
from .errors import FetchError
from .errors import FetchTimeoutError
from .errors import ModuleDecodeError
from .errors import ModuleNotResolvedError
from .errors import ToolNotFoundError
from .errors import UnresolvedModulesError
from .fetch import fetch
from .fetch import verify_fetched
from .runner import CommandError
from .runner import CommandRunner
from .runner import SubprocessRunner

__all__ = [
    "fetch",
    "verify_fetched",
    "decode_modules",
    "sanitize_output",
    "CommandRunner",
    "SubprocessRunner",
    "CommandError",
    "FetchError",
    "ToolNotFoundError",
    "CommandFailedError",
    "FetchTimeoutError",
    "ModuleDecodeError",
    "ModuleNotResolvedError",
    "UnresolvedModulesError",
]
