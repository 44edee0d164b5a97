from .job import Job
from .executor import execute, quote_arg
from .model import Directive, Step, ExecResult, RunResult, StepFailure, JobConfigError
from .loader import load_job, JobFileError

__all__ = [
    "Job",
    "Directive",
    "Step",
    "ExecResult",
    "RunResult",
    "StepFailure",
    "JobConfigError",
    "JobFileError",
    "execute",
    "quote_arg",
    "load_job",
]
