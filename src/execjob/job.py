# job.py
from __future__ import annotations

import json
import logging
import re
import threading
from dataclasses import replace
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from . import executor
from .model import Directive, ExecResult, JobConfigError, RunResult, Step

logger = logging.getLogger(__name__)

DEFAULT_WRAPPER: Tuple[str, str] = ("<", ">")

Executor = Callable[[str, Optional[str], Optional[Dict[str, str]]], ExecResult]


class Job:
    """
    An ordered list of shell commands run one after another.

    Steps are added with must() (a failure stops the job) or may()
    (a failure is recorded and the job carries on). Named arguments
    registered with arg() are shell-quoted and substituted into every
    command at run time, wherever the name appears wrapped in the
    argument delimiters (default ``<name>``).

    Example:
        job = Job()
        job.arg("target", "build dir")
        job.must("mkdir -p <target>")
        job.may("ls <target>")
        result = job.run()
        if not result:
            print(result.errors)

    A command fails when it writes anything to stderr; the exit code is
    not consulted.
    """

    def __init__(self, executor_fn: Optional[Executor] = None):
        self._steps: List[Step] = []
        self._args: Dict[str, str] = {}
        self._wrapper: Tuple[str, str] = DEFAULT_WRAPPER
        self._cwd: Optional[Path] = None
        self._env: Optional[Dict[str, str]] = None
        self._exec: Executor = executor_fn or executor.execute
        self._last: RunResult = RunResult(ok=True)
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"Job(steps={len(self._steps)}, args={sorted(self._args)})"

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def must(self, command: str) -> "Job":
        """Add a step whose failure halts the job."""
        return self.add(Step(Directive.MUST, command))

    def may(self, command: str) -> "Job":
        """Add a step whose failure is recorded but does not halt the job."""
        return self.add(Step(Directive.MAY, command))

    def add(self, step: Step) -> "Job":
        if not isinstance(step, Step):
            raise TypeError(f"expected Step, got {type(step).__name__}")
        self._steps.append(step)
        return self

    @property
    def steps(self) -> Tuple[Step, ...]:
        return tuple(self._steps)

    # ------------------------------------------------------------------
    # Arguments
    # ------------------------------------------------------------------

    def arg(self, name: str, value: str) -> "Job":
        """
        Register a named argument. The value is shell-quoted now and
        substituted for every wrapped occurrence of ``name`` at run time.
        Registering the same name again replaces the old value.
        """
        self._args[name] = executor.quote_arg(str(value))
        return self

    @property
    def args(self) -> Dict[str, str]:
        return dict(self._args)

    def set_arg_wrapper(self, start: str, end: str) -> "Job":
        """Change the delimiters around argument names (default ``<`` and ``>``)."""
        self._wrapper = (start, end)
        return self

    @property
    def wrapper(self) -> Tuple[str, str]:
        return self._wrapper

    # ------------------------------------------------------------------
    # Execution context
    # ------------------------------------------------------------------

    def set_working_directory(self, path: str | Path, strict: bool = False) -> "Job":
        """
        Run every command inside ``path``.

        A path that is not an existing directory is ignored with a warning
        and the previous directory stays in effect. Pass strict=True to get
        a JobConfigError instead.
        """
        p = Path(path).expanduser()
        if not p.is_dir():
            if strict:
                raise JobConfigError(f"working directory not found: {p}")
            logger.warning("ignoring working directory %s: not a directory", p)
            return self
        self._cwd = p.resolve()
        return self

    @property
    def working_directory(self) -> Optional[Path]:
        return self._cwd

    def set_env(self, key: str, value: str) -> "Job":
        """
        Set an environment variable for the commands.

        The first call replaces the inherited environment with an empty
        one, so only variables set here are visible to the commands.
        """
        if self._env is None:
            self._env = {}
        self._env[key] = str(value)
        return self

    @property
    def env(self) -> Optional[Dict[str, str]]:
        return dict(self._env) if self._env is not None else None

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def substitute(self, command: str) -> str:
        """
        Replace every wrapped argument name in ``command`` with its value.

        Done in a single scan: text that came from a value is never
        searched again, so one value cannot inject another.
        """
        if not self._args:
            return command
        start, end = self._wrapper
        tokens = {f"{start}{name}{end}": value for name, value in self._args.items()}
        # alternatives in registration order: at any position the earliest
        # registered argument whose token matches wins
        pattern = re.compile("|".join(re.escape(f"{start}{name}{end}") for name in self._args))
        return pattern.sub(lambda m: tokens[m.group(0)], command)

    def render(self) -> List[Optional[str]]:
        """Substituted command for each step, None for malformed ones. Nothing is run."""
        return [None if s.malformed else self.substitute(s.command) for s in self._steps]

    def run(self) -> RunResult:
        """
        Run all steps in the order they were added.

        Returns a RunResult that is truthy when no MUST step failed. Its
        errors/output lists hold one slot per step processed; a MUST
        failure stops the run, so later steps get no slot at all.
        """
        with self._lock:
            result = self._run()
            # keep a private copy so callers can mutate what they got back
            self._last = replace(
                result,
                errors=list(result.errors),
                output=list(result.output),
                commands=list(result.commands),
            )
        return result

    def _run(self) -> RunResult:
        errors: List[Optional[str]] = []
        output: List[Optional[str]] = []
        commands: List[Optional[str]] = []

        cwd = str(self._cwd) if self._cwd is not None else None
        env = dict(self._env) if self._env is not None else None

        for i, step in enumerate(self._steps):
            if step.malformed:
                logger.warning("step %d is malformed, skipping", i)
                errors.append(f"malformed input detected: {json.dumps(step.to_dict())}")
                output.append(None)
                commands.append(None)
                continue

            command = self.substitute(step.command)
            logger.debug("step %d [%s]: %s", i, step.directive.value, command)

            res = self._exec(command, cwd, env)

            errors.append(res.error)
            output.append(res.output)
            commands.append(command)

            if res.error:
                if step.directive is Directive.MUST:
                    logger.info("step %d failed, halting job: %s", i, res.error)
                    return RunResult(ok=False, errors=errors, output=output, commands=commands)
                logger.info("optional step %d failed, continuing: %s", i, res.error)

        return RunResult(ok=True, errors=errors, output=output, commands=commands)

    # ------------------------------------------------------------------
    # Results of the most recent run
    # ------------------------------------------------------------------

    def errors(self) -> List[Optional[str]]:
        """Errors of the last run; None marks a step that succeeded."""
        return list(self._last.errors)

    def output(self) -> List[Optional[str]]:
        """Output of the last run; None marks a step that printed nothing."""
        return list(self._last.output)
