"""Entry point for the transfer agent.
Resolves the git dir, then serves host requests from stdin until terminated.
"""

import argparse
import io
import os
import sys
from typing import Optional, Sequence

from common.constants import AGENT_NAME, AGENT_VERSION, BASEDIR_ENV
from common.logging_config import setup_logging
from folderstore.config import load_config
from folderstore.dispatcher import serve
from folderstore.exceptions import GitDirError
from folderstore.git_dir import resolve_git_dir


def _use_utf8(stdin, stdout) -> None:
    """
    Protocol streams are UTF-8 with bare newlines whatever the platform default.

    Undecodable input bytes are replaced so the line fails request
    validation and is skipped, instead of ending the read loop.
    """
    if isinstance(stdin, io.TextIOWrapper):
        stdin.reconfigure(encoding="utf-8", errors="replace", newline="\n")
    if isinstance(stdout, io.TextIOWrapper):
        stdout.reconfigure(encoding="utf-8", newline="\n")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog=AGENT_NAME,
        description="git-lfs custom transfer agent storing objects in a shared folder.",
    )
    p.add_argument(
        "basedir",
        nargs="?",
        help=f"Folder holding the object store (default: ${BASEDIR_ENV}).",
    )
    p.add_argument("--version", action="version", version=f"{AGENT_NAME} {AGENT_VERSION}")
    p.add_argument("--debug", action="store_true", help="Log diagnostics at DEBUG level.")
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Bootstrap the agent; returns the process exit status."""
    args = build_parser().parse_args(argv)

    log_level = 'DEBUG' if args.debug else os.getenv('LOG_LEVEL', 'INFO')
    logger = setup_logging('folderstore', log_level=log_level)

    if sys.stdin.isatty():
        logger.warning(
            f"{AGENT_NAME} is a custom transfer agent for git-lfs and is meant to be "
            "started by git-lfs, not run directly"
        )

    try:
        git_dir = resolve_git_dir()
    except GitDirError as e:
        logger.error(f"Unable to retrieve git dir: {e}")
        return 1

    config = load_config(args.basedir, git_dir)
    logger.debug(f"Base dir: {config.base_dir!r}, git dir: {config.git_dir}")

    _use_utf8(sys.stdin, sys.stdout)
    serve(config, sys.stdin, sys.stdout)
    return 0


def run() -> None:
    """Console script wrapper."""
    raise SystemExit(main())


if __name__ == "__main__":
    run()
