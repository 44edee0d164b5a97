from __future__ import annotations

import os
import shlex

import pytest

from execjob.executor import execute, quote_arg
from execjob.model import ExecResult

pytestmark = pytest.mark.skipif(os.name == "nt", reason="needs a POSIX shell")


def test_captures_stdout_and_stderr():
    res = execute("echo out; echo err >&2")
    assert res == ExecResult(output="out", error="err")
    assert res.failed


def test_empty_streams_are_none():
    res = execute("true")
    assert res.output is None
    assert res.error is None
    assert not res.failed


def test_whitespace_only_stderr_is_not_an_error():
    res = execute("echo ok; printf '  \\n' >&2")
    assert res.output == "ok"
    assert res.error is None


def test_large_output_on_both_streams_does_not_deadlock():
    size = 256 * 1024
    cmd = (
        f"head -c {size} /dev/zero | tr '\\0' a; "
        f"head -c {size} /dev/zero | tr '\\0' b >&2; "
        f"head -c {size} /dev/zero | tr '\\0' a"
    )
    res = execute(cmd)
    assert len(res.output) == 2 * size
    assert len(res.error) == size


def test_child_gets_no_stdin():
    res = execute("cat")
    assert res == ExecResult()


def test_cwd(tmp_path):
    (tmp_path / "marker.txt").write_text("x")
    res = execute("ls", cwd=tmp_path)
    assert res.output == "marker.txt"


def test_exact_env(monkeypatch):
    monkeypatch.setenv("EXECJOB_PARENT", "parent")
    assert execute("echo $EXECJOB_PARENT").output == "parent"
    res = execute('echo "${EXECJOB_PARENT:-none}:$ONLY"', env={"ONLY": "child"})
    assert res.output == "none:child"


def test_missing_cwd_is_reported_not_raised(tmp_path):
    res = execute("echo hi", cwd=tmp_path / "nope")
    assert res.output is None
    assert res.error.startswith("failed to launch command")


def test_undecodable_bytes_are_replaced():
    res = execute("printf 'a\\377b'")
    assert res.output == "a�b"


@pytest.mark.parametrize("value", ["plain", "two words", "it's", "$(id)", "", "a\nb"])
def test_quote_arg_round_trips_through_the_shell(value):
    quoted = quote_arg(value)
    assert shlex.split(quoted) == [value]
    res = execute(f"printf '[%s]' {quoted}")
    assert res.output == f"[{value}]"


@pytest.mark.parametrize(
    "command, env",
    [
        ("echo a\x00b", None),
        ("echo hi", {"A=B": "1"}),
        ("echo hi", {"A": "x\x00y"}),
    ],
)
def test_invalid_launch_arguments_are_reported_not_raised(command, env):
    res = execute(command, env=env)
    assert res.output is None
    assert res.error.startswith("failed to launch command")
