# execjob_job.py
# Checks for execjob itself: lint, format, tests.
# Run with: execjob run   (or: execjob show, to see the commands first)
from __future__ import annotations

from execjob.dsl import job, must, may

JOB = job(
    # pip writes upgrade notices to stderr, so install is only a warning
    may("python -m pip install -q -e <pkg>[test]"),
    may("ruff check <src>"),
    may("ruff format --check <src>"),
    must("python -m pytest -q <tests>"),
    args={"pkg": ".", "src": "src", "tests": "tests"},
)
