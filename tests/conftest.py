from __future__ import annotations

import pytest

from execjob.model import ExecResult


class FakeExecutor:
    """Stands in for execjob.executor.execute and records every call."""

    def __init__(self, results: dict[str, ExecResult] | None = None):
        self.results = results or {}
        self.calls: list[tuple[str, str | None, dict | None]] = []

    def __call__(self, command, cwd=None, env=None):
        self.calls.append((command, cwd, env))
        return self.results.get(command, ExecResult(output=command))

    @property
    def commands(self) -> list[str]:
        return [c for c, _, _ in self.calls]


@pytest.fixture
def fake_exec():
    return FakeExecutor()
