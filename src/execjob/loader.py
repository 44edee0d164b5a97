# loader.py
from __future__ import annotations

import runpy
from pathlib import Path

from .job import Job


class JobFileError(Exception):
    """Job file is missing or does not define a Job."""


def load_job(path: str | Path) -> Job:
    """
    Load a job from a python file path.

    The file must define either:
      - job() -> Job
      - JOB = Job(...)

    Returns:
      Job
    """
    job_path = Path(path).expanduser().resolve()
    if not job_path.exists():
        raise JobFileError(f"Job file not found: {job_path}")
    if job_path.suffix != ".py":
        raise JobFileError(f"Job file must be a .py file, got: {job_path.name}")

    module_name = f"execjob_file_{job_path.stem}"
    globals_dict = runpy.run_path(str(job_path), run_name=module_name)

    found = None
    factory = globals_dict.get("job")
    # `from execjob.dsl import job` also puts a callable named job in the
    # module, so only accept a factory defined in the file itself
    if isinstance(globals_dict.get("JOB"), Job):
        found = globals_dict["JOB"]
    elif callable(factory) and getattr(factory, "__module__", None) == module_name:
        found = factory()

    if not isinstance(found, Job):
        raise JobFileError(
            f"{job_path.name} must define job() -> Job or JOB = Job(...)."
        )

    return found
