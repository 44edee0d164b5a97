# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Directive(str, Enum):
    """How a step failure affects the rest of the job."""
    MUST = "must"   # failure halts the job
    MAY = "may"     # failure is recorded, job continues


@dataclass(frozen=True)
class Step:
    """A single queued command template inside a job."""
    directive: Directive
    command: str

    def __post_init__(self) -> None:
        directive = self.directive
        if isinstance(directive, str) and not isinstance(directive, Directive):
            try:
                directive = Directive(directive.lower())
            except ValueError:
                raise TypeError(f"Unknown directive: {self.directive!r}") from None
        if not isinstance(directive, Directive):
            raise TypeError(f"directive must be a Directive, got {type(directive).__name__}")
        if not isinstance(self.command, str):
            raise TypeError(f"command must be a str, got {type(self.command).__name__}")
        # frozen: bypass __setattr__ to store the coerced value
        object.__setattr__(self, "directive", directive)

    @property
    def malformed(self) -> bool:
        return not self.command

    def to_dict(self) -> Dict[str, Any]:
        return {"directive": self.directive.value, "command": self.command}


@dataclass(frozen=True)
class ExecResult:
    """Trimmed stdout/stderr of one command, None where the stream was empty."""
    output: Optional[str] = None
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return bool(self.error)


@dataclass(frozen=True)
class RunResult:
    """
    Outcome of a single Job.run().

    errors/output hold one slot per processed step, in step order.
    A run that halted on a MUST failure only contains the steps up to
    and including the failing one.
    """
    ok: bool
    errors: List[Optional[str]] = field(default_factory=list)
    output: List[Optional[str]] = field(default_factory=list)
    commands: List[Optional[str]] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.ok

    @property
    def processed(self) -> int:
        return len(self.errors)

    def raise_for_status(self) -> None:
        """Raise StepFailure for the step that halted the run, if any."""
        if self.ok:
            return
        index = self.processed - 1
        raise StepFailure(
            index=index,
            command=self.commands[index] if index < len(self.commands) else None,
            error=self.errors[index] or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "ok": self.ok,
            "steps": [
                {"command": cmd, "output": out, "error": err}
                for cmd, out, err in zip(self.commands, self.output, self.errors)
            ],
        }


# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------

class JobConfigError(ValueError):
    """Invalid job configuration (only raised where strict checking is requested)."""


@dataclass
class StepFailure(Exception):
    index: int
    command: Optional[str]
    error: str

    def __str__(self) -> str:
        first = self.error.splitlines()[0] if self.error else "unknown error"
        return f"step {self.index} failed: {self.command}\n{first}"
