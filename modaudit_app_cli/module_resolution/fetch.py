"""Module fetching via `go mod download`.

Resolution itself is delegated to the Go toolchain. This module only runs
the tool in an isolated directory, decodes what it reports, adds local
modules (which the tool never sees) and checks that nothing is missing.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from collections.abc import Callable
from collections.abc import Iterable
from pathlib import Path

from ..lib.settings import FetchSettings
from ..model import Module
from ..model import ModuleReference
from .decode import decode_modules
from .errors import CommandFailedError
from .errors import FetchError
from .errors import FetchTimeoutError
from .errors import ModuleNotResolvedError
from .errors import ToolNotFoundError
from .errors import UnresolvedModulesError
from .runner import CommandError
from .runner import CommandRunner
from .runner import CommandTimeoutError
from .runner import SubprocessRunner

logger = logging.getLogger(__name__)

DOWNLOAD_ARGS = ["mod", "download", "-json"]
TEMP_DIR_PREFIX = "modaudit"


async def fetch(
    refs: Iterable[ModuleReference],
    *,
    settings: FetchSettings | None = None,
    runner: CommandRunner | None = None,
    which: Callable[[str], str | None] = shutil.which,
) -> list[Module]:
    """Download every referenced module and return the resolved modules.

    Local references are not downloaded; they are returned with empty
    metadata. The result holds one module per distinct reference.

    When every reference is local the tool is neither looked up nor run, so
    ToolNotFoundError cannot occur. Cancelling the awaiting task kills the
    tool process.

    Args:
        refs: Module references to resolve
        settings: Tool name and timeout (default: FetchSettings())
        runner: Command runner (default: SubprocessRunner for the located tool)
        which: Executable lookup, used only when no runner is given

    Returns:
        Resolved modules; remote modules in tool output order, then local ones

    Raises:
        ToolNotFoundError: Module tool not on PATH (only with remote references)
        CommandFailedError: Tool exited nonzero or could not be started
        FetchTimeoutError: Tool exceeded the configured timeout
        ModuleDecodeError: Tool output could not be decoded
        UnresolvedModulesError: One or more references were not resolved
        FetchError: Temporary directory could not be created
    """
    requested = list(dict.fromkeys(refs))
    if not requested:
        return []

    settings = settings or FetchSettings()
    remote = [ref for ref in requested if not ref.is_local()]
    local = [ref for ref in requested if ref.is_local()]

    modules: list[Module] = []
    if remote:
        if runner is None:
            runner = _default_runner(settings, which)
        modules.extend(await _download(runner, remote))

    modules.extend(Module.local(ref) for ref in local)

    verify_fetched(modules, requested)

    logger.info(f"Fetched {len(modules)} modules ({len(remote)} remote, {len(local)} local)")
    return modules


def verify_fetched(fetched: Iterable[Module], requested: Iterable[ModuleReference]) -> None:
    """Check that every requested reference is among the fetched modules.

    Modules the tool reported with an error do not count as fetched.

    Raises:
        UnresolvedModulesError: Every missing reference, in request order
    """
    found: set[ModuleReference] = set()
    failures: dict[ModuleReference, str] = {}
    for module in fetched:
        if module.error:
            failures[module.reference] = module.error
        else:
            found.add(module.reference)

    errors = [
        ModuleNotResolvedError(ref, failures.get(ref, "")) for ref in requested if ref not in found
    ]
    if errors:
        raise UnresolvedModulesError(errors)


def _default_runner(settings: FetchSettings, which: Callable[[str], str | None]) -> CommandRunner:
    executable = which(settings.tool)
    if executable is None:
        raise ToolNotFoundError(settings.tool)
    return SubprocessRunner(executable, timeout=settings.timeout)


async def _download(runner: CommandRunner, refs: list[ModuleReference]) -> list[Module]:
    args = DOWNLOAD_ARGS + [str(ref) for ref in refs]

    try:
        temp_dir = tempfile.TemporaryDirectory(prefix=TEMP_DIR_PREFIX, ignore_cleanup_errors=True)
    except OSError as e:
        raise FetchError(f"failed to create temp directory: {e}") from e

    with temp_dir as work_dir:
        logger.debug(f"Downloading {len(refs)} modules in {work_dir}")
        try:
            output = await runner.run(args, Path(work_dir))
        except CommandError as e:
            raise CommandFailedError(str(e), e.output) from e
        except CommandTimeoutError as e:
            raise FetchTimeoutError(e.timeout, e.output) from e
        except OSError as e:
            raise CommandFailedError(str(e)) from e

    if Path(temp_dir.name).exists():
        logger.warning(f"Could not remove temp directory: {temp_dir.name}")

    modules = decode_modules(output)
    logger.debug(f"Decoded {len(modules)} modules from tool output")
    return modules
