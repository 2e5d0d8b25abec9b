"""Resolves the host repository's metadata directory via git."""

import os
import subprocess
from pathlib import Path
from typing import Optional

from common.logging_config import get_logger
from folderstore.exceptions import GitDirError

logger = get_logger(__name__)

GIT_DIR_COMMAND = ["git", "rev-parse", "--git-dir"]


def resolve_git_dir(cwd: Optional[str] = None) -> Path:
    """
    Locate the git dir of the repository the agent was launched in.

    Args:
        cwd: Working directory for the git call, defaults to the current one

    Returns:
        Absolute, symlink-resolved path of the git dir

    Raises:
        GitDirError: If git cannot be run or reports an error
    """
    try:
        result = subprocess.run(
            GIT_DIR_COMMAND,
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise GitDirError(f"Failed to call {' '.join(GIT_DIR_COMMAND)}: {e}") from e
    except subprocess.CalledProcessError as e:
        raise GitDirError(
            f"Failed to call {' '.join(GIT_DIR_COMMAND)}: {e} {(e.stderr or '').strip()}"
        ) from e

    path = result.stdout.strip()
    if not path:
        raise GitDirError("git rev-parse --git-dir returned an empty path")

    # git answers relative to the directory it ran in
    if cwd is not None and not os.path.isabs(path):
        path = os.path.join(cwd, path)

    git_dir = Path(os.path.abspath(path)).resolve()
    logger.debug(f"Resolved git dir: {git_dir}")
    return git_dir
