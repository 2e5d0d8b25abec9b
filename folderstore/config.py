"""Runtime configuration for the transfer agent."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from common.constants import BASEDIR_ENV


@dataclass(frozen=True)
class AgentConfig:
    """
    Settings established at startup and shared read-only by every request.

    An empty base_dir is a valid state: it is reported to the host on init.
    """
    base_dir: str
    git_dir: Path

    @property
    def has_base_dir(self) -> bool:
        return bool(self.base_dir)


def resolve_base_dir(cli_value: Optional[str] = None) -> str:
    """
    Pick the store folder from the command line, falling back to the environment.

    Args:
        cli_value: Positional base directory argument, if given

    Returns:
        Base directory with '~' expanded, or an empty string when unset
    """
    value = cli_value if cli_value else os.environ.get(BASEDIR_ENV, "")
    value = value.strip()
    if not value:
        return ""
    return os.path.expanduser(value)


def load_config(base_dir: Optional[str], git_dir: Path) -> AgentConfig:
    return AgentConfig(base_dir=resolve_base_dir(base_dir), git_dir=git_dir)
