# src/execjob/dsl.py
from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

from .job import Job
from .model import Directive, Step


# ---------------------------------------------------------------------
# Step helpers
# ---------------------------------------------------------------------

def must(cmd: str) -> Step:
    """Create a step whose failure halts the job."""
    return Step(Directive.MUST, cmd)


def may(cmd: str) -> Step:
    """Create a step whose failure is only recorded."""
    return Step(Directive.MAY, cmd)


# ---------------------------------------------------------------------
# Functional Job helper
# ---------------------------------------------------------------------

def job(
    *steps: Step,  # allow: job(must(...), may(...))
    steps_list: Optional[Iterable[Step]] = None,  # allow: job(steps_list=[...])
    args: Optional[Dict[str, str]] = None,
    env: Optional[Dict[str, str]] = None,
    cwd: str | None = None,
    wrapper: Optional[Tuple[str, str]] = None,
) -> Job:
    """
    Build a Job in one expression.

    Job files for the CLI usually look like:

        from execjob.dsl import job, must, may

        JOB = job(
            must("mkdir -p <out>"),
            may("rm -rf <out>/tmp"),
            args={"out": "dist"},
        )
    """
    steps_final = list(steps_list or []) + list(steps)
    if not steps_final:
        raise ValueError("job() must have at least one step")

    j = Job()
    for s in steps_final:
        j.add(s)
    if wrapper is not None:
        j.set_arg_wrapper(*wrapper)
    for name, value in (args or {}).items():
        j.arg(name, value)
    for key, value in (env or {}).items():
        j.set_env(key, value)
    if cwd is not None:
        j.set_working_directory(cwd)
    return j
