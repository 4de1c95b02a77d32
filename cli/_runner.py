"""
Shared CLI runner helper.

Every project script shells out through ``run`` so that exit codes are
propagated the same way.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def run(cmd: Sequence[str]) -> None:
    """
    Run a command from the project root and exit with its return code.

    Args:
        cmd: Command and arguments to execute

    Example:
        >>> run([sys.executable, "-m", "pytest", "-q"])
    """
    result = subprocess.run(list(cmd), cwd=PROJECT_ROOT)
    raise SystemExit(result.returncode)
