"""Shell utilities.

Provides a simple wrapper around subprocess calls for running commands,
plus output formatting helpers.
"""

from __future__ import annotations

import subprocess
from pathlib import Path


def run(
    *args: str, cwd: Path | str | None = None, check: bool = True
) -> subprocess.CompletedProcess[bytes]:
    """Run an arbitrary shell command.

    Output isn't captured - it streams directly to the terminal so users
    can see publish progress.

    Args:
        *args: Command and arguments (e.g., "npm", "publish").
        cwd: Directory to run the command in.
        check: If True (default), raise on non-zero exit.

    Returns:
        CompletedProcess with returncode for checking success.
    """
    return subprocess.run(args, cwd=cwd, check=check)


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Used to separate major phases of the publish run in terminal output.
    """
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")
