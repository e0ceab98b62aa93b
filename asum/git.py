"""Diff source: staged changes from git, or a diff piped on stdin.

Contains:
- GitError: Raised when git cannot produce the staged diff
- _run_git_command: Run a git command and return its output
- get_staged_diff: 'git diff --staged', optionally limited to pathspecs
- get_staged_files: Staged paths with their status
- read_diff: Read stdin when asked to, otherwise ask git
"""

import logging
import subprocess
import sys
from typing import Optional, Sequence, TextIO

logger = logging.getLogger(__name__)


class GitError(Exception):
    """Custom exception for git-related errors."""

    pass


def _run_git_command(args: list[str], strip: bool = True) -> str:
    """Run a git command and return its output.

    Args:
        args: List of arguments to pass to git.
        strip: Strip surrounding whitespace from the output.

    Returns:
        The stdout of the git command.

    Raises:
        GitError: If the command fails.
    """
    try:
        result = subprocess.run(
            ["git"] + args,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=True,
        )
    except subprocess.CalledProcessError as e:
        raise GitError(f"Git command failed: git {' '.join(args)}\n{e.stderr.strip()}") from e
    except FileNotFoundError as e:
        raise GitError("Git is not installed or not in PATH.") from e
    return result.stdout.strip() if strip else result.stdout


def get_staged_diff(extensions: Sequence[str] = ()) -> str:
    """Get the staged diff of the current repository.

    Args:
        extensions: Optional pathspecs (e.g. '*.py') to limit the diff to.

    Returns:
        The raw diff text; empty if nothing is staged.

    Raises:
        GitError: If git fails (e.g. not inside a repository).
    """
    args = ["diff", "--staged", "--"]
    args.extend(extensions)
    logger.debug("Running git %s", " ".join(args))
    return _run_git_command(args, strip=False)


def get_staged_files() -> str:
    """List staged files with their status ('M\tpath' per line)."""
    return _run_git_command(["diff", "--staged", "--name-status"])


def read_diff(
    extensions: Sequence[str] = (),
    from_stdin: bool = False,
    stdin: Optional[TextIO] = None,
) -> str:
    """Read the diff to summarize.

    With from_stdin the diff is read from stdin and git is not consulted.
    Otherwise the staged diff is taken from git. When git_extensions leave
    nothing to show, the staged file list is used instead so the change can
    still be described from file names.

    Raises:
        GitError: If git fails.
    """
    if from_stdin:
        stream = sys.stdin if stdin is None else stdin
        piped = stream.read()
        logger.debug("Read %d characters of diff from stdin", len(piped))
        return piped

    diff = get_staged_diff(extensions)
    if extensions and not diff.strip():
        logger.warning("No staged changes found in supported code files. Falling back to file list...")
        diff = get_staged_files()
    return diff
