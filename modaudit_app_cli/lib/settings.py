"""Settings management for modaudit-app-cli.

Scope-aware YAML settings. The `fetch` section configures how modules are
downloaded:

```yaml
fetch:
  tool: go          # executable name or path
  timeout: 300      # seconds, omit for no limit
```
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_TOOL = "go"
TOOL_ENV_VAR = "MODAUDIT_GO_BIN"


@dataclass
class FetchSettings:
    """Settings for fetching modules.

    Attributes:
        tool: Module tool executable, looked up on PATH
        timeout: Seconds before the tool is killed (None = no limit)
    """

    tool: str = DEFAULT_TOOL
    timeout: float | None = None

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> FetchSettings:
        """Load fetch settings from a merged settings dictionary.

        The MODAUDIT_GO_BIN environment variable overrides `fetch.tool`.

        Raises:
            ValueError: timeout is not a positive number
        """
        fetch_settings = settings.get("fetch") or {}

        tool = os.environ.get(TOOL_ENV_VAR) or fetch_settings.get("tool") or DEFAULT_TOOL

        timeout = fetch_settings.get("timeout")
        if timeout is not None:
            timeout = float(timeout)
            if timeout <= 0:
                raise ValueError(f"fetch.timeout must be positive, got {timeout}")

        return cls(tool=str(tool), timeout=timeout)


@dataclass
class SettingsPaths:
    """Standard paths for settings files."""

    global_settings: Path
    project_settings: Path
    local_settings: Path

    @classmethod
    def default(cls) -> SettingsPaths:
        """Create default paths for standard modaudit layout."""
        return cls(
            global_settings=Path.home() / ".modaudit" / "settings.yaml",
            project_settings=Path.cwd() / ".modaudit" / "settings.yaml",
            local_settings=Path.cwd() / ".modaudit" / "settings.local.yaml",
        )


class AppSettings:
    """Simple settings manager with scope-aware merging.

    Scope priority (most specific wins):
    1. local (.modaudit/settings.local.yaml) - gitignored, machine-specific
    2. project (.modaudit/settings.yaml) - committed, team-shared
    3. global (~/.modaudit/settings.yaml) - user defaults
    """

    def __init__(self, paths: SettingsPaths | None = None) -> None:
        self.paths = paths or SettingsPaths.default()

    def get_merged_settings(self) -> dict[str, Any]:
        """Load and merge settings from all scopes."""
        result: dict[str, Any] = {}
        for path in [self.paths.global_settings, self.paths.project_settings, self.paths.local_settings]:
            if path.exists():
                try:
                    with open(path) as f:
                        content = yaml.safe_load(f) or {}
                except (OSError, yaml.YAMLError) as e:
                    logger.warning(f"Skipping malformed settings file {path}: {e}")
                    continue
                result = self._deep_merge(result, content)
        return result

    def get_fetch_settings(self) -> FetchSettings:
        """Get module fetch settings."""
        return FetchSettings.from_settings(self.get_merged_settings())

    def _deep_merge(self, base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dicts, overlay wins."""
        result = base.copy()
        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result


def get_settings() -> AppSettings:
    """Get a settings instance with default paths."""
    return AppSettings()
