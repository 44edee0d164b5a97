"""Console output formatting utilities for execjob."""

from __future__ import annotations

import sys
from typing import Optional

from execjob.model import RunResult


class Console:
    """Centralized console output formatting."""

    def __init__(self, debug: bool = False):
        """
        Initialize console formatter.

        Args:
            debug: If True, show detailed output including stack traces
        """
        self.debug = debug

    def print_header(self, title: str) -> None:
        """Print a section header."""
        print(f"\n{title}")
        print("-" * len(title))

    def print_run_started(self, job_file: str, step_count: int) -> None:
        """Print run start information."""
        print("\nRUN STARTED")
        print(f"Job: {job_file}")
        print(f"Steps: {step_count}")
        print()

    def print_step(self, index: int, command: Optional[str]) -> None:
        """Print step header."""
        print(f"STEP {index}: {command if command is not None else '(malformed)'}")

    def print_failure(self, reason: str) -> None:
        """
        Print step failure message.

        Only the first line of the error is shown unless debug mode is on.
        """
        if self.debug:
            print(f"Error: {reason}")
        else:
            print(f"Error: {reason.splitlines()[0] if reason else 'Unknown error'}")

    def print_output(self, output: str) -> None:
        """Print captured output, indented."""
        for line in output.splitlines():
            print(f"  {line}")

    def print_results(self, result: RunResult, step_count: int) -> None:
        """Print per-step results and the final summary."""
        for i, (cmd, out, err) in enumerate(zip(result.commands, result.output, result.errors)):
            self.print_step(i, cmd)
            if out:
                self.print_output(out)
            if err:
                self.print_failure(err)

        skipped = step_count - result.processed
        print("\n" + "=" * 40)
        print("RESULTS")
        print("=" * 40)
        print(f"  Processed: {result.processed}/{step_count}")
        print(f"  Errors: {sum(1 for e in result.errors if e)}")
        if skipped:
            print(f"  Not run: {skipped}")
        print(f"  Status: {'SUCCESS' if result.ok else 'FAILED'}")

    def print_plan(self, commands: list[Optional[str]], directives: list[str]) -> None:
        """Print rendered commands without running them."""
        self.print_header("PLAN")
        for i, (cmd, directive) in enumerate(zip(commands, directives)):
            shown = cmd if cmd is not None else "(malformed)"
            print(f"  {i} [{directive}] {shown}")

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.

        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        print(f"\nERROR: {title}", file=sys.stderr)
        print(f"{message}", file=sys.stderr)
        if details:
            for detail in details:
                print(f"  {detail}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)

    def print_exception(self, exc: Exception) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            import traceback
            traceback.print_exc()
        else:
            print(f"Error: {exc}", file=sys.stderr)

    def print_info(self, message: str) -> None:
        """Print informational message."""
        print(message)


# Global console instance (will be initialized by CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console
