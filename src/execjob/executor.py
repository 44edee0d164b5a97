# executor.py
# Boundary between the job engine and the operating system.
# Everything that launches a process or quotes text for the shell lives here.

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from pathlib import Path
from typing import Dict, Optional

from .model import ExecResult

logger = logging.getLogger(__name__)


def quote_arg(value: str) -> str:
    """
    Quote a value so the host shell treats it as one literal token.

    POSIX shells get single quotes (shlex.quote), cmd.exe gets the
    MSVCRT double-quote convention.
    """
    if os.name == "nt":
        return subprocess.list2cmdline([value])
    return shlex.quote(value)


def _clean(text: str | None) -> Optional[str]:
    # empty or whitespace-only streams count as "no output"
    if not text:
        return None
    text = text.strip()
    return text or None


def execute(
    command: str,
    cwd: str | Path | None = None,
    env: Optional[Dict[str, str]] = None,
) -> ExecResult:
    """
    Run a command through the platform shell and capture its streams.

    Args:
        command: Fully substituted command line, handed to the shell as-is.
        cwd: Working directory for the child (None = current directory).
        env: Exact environment for the child (None = inherit ours).

    Returns:
        ExecResult with trimmed stdout as output and trimmed stderr as error.
        The exit code is not a failure signal; non-empty stderr is.
        A process that cannot be launched at all (missing directory, NUL
        byte in the command, invalid environment name) is reported as an
        error instead of raising.
    """
    logger.debug("exec: %s (cwd=%s)", command, cwd or ".")

    try:
        # communicate() drains stdout and stderr together, so a child that
        # fills one pipe while we read the other cannot deadlock us
        proc = subprocess.run(
            command,
            shell=True,
            cwd=str(cwd) if cwd is not None else None,
            env=env,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except (OSError, ValueError) as e:
        # ValueError: NUL byte in the command or env, or "=" in an env name
        logger.debug("exec failed to launch: %s", e)
        return ExecResult(output=None, error=f"failed to launch command: {e}")

    logger.debug("exec finished (exit=%s)", proc.returncode)
    return ExecResult(output=_clean(proc.stdout), error=_clean(proc.stderr))
