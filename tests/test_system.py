"""
HostSystem tests: the real OS capability set, isolated with tmp_path and
monkeypatch so the test process's own state is restored.
"""
from __future__ import annotations

import io
import os
import pwd
from pathlib import Path

import psutil
import pytest

from minish.cli import run_repl
from minish.config import ShellConfig
from minish.errors import ErrorKind, OSQueryError
from minish.executor import SubprocessExecutor
from minish.kernel import Shell
from minish.system import HostSystem, MemoryStats


@pytest.fixture
def host() -> HostSystem:
    return HostSystem()


def test_chdir_and_getcwd(host: HostSystem, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "sub").mkdir()

    host.chdir("sub")

    assert Path(host.getcwd()) == (tmp_path / "sub").resolve()


def test_chdir_missing_directory_keeps_cwd(
    host: HostSystem, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.chdir(tmp_path)
    before = host.getcwd()

    with pytest.raises(OSQueryError) as exc:
        host.chdir("missing")

    assert exc.value.kind is ErrorKind.OS_QUERY
    assert "missing" in str(exc.value)
    assert host.getcwd() == before


def test_chdir_to_file_is_rejected(host: HostSystem, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "file.txt").write_text("x")

    with pytest.raises(OSQueryError):
        host.chdir("file.txt")


def test_home_dir_follows_home(host: HostSystem, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert host.home_dir() == str(tmp_path)


def test_listdir_returns_entry_names(host: HostSystem, tmp_path: Path):
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "dir").mkdir()

    assert sorted(host.listdir(str(tmp_path))) == ["a.txt", "dir"]


def test_listdir_missing_directory_raises(host: HostSystem, tmp_path: Path):
    with pytest.raises(OSQueryError):
        host.listdir(str(tmp_path / "missing"))


def test_environment_round_trip(host: HostSystem, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("MINISH_TEST_VAR", raising=False)
    assert host.getenv("MINISH_TEST_VAR") is None

    host.setenv("MINISH_TEST_VAR", "value")
    try:
        assert host.getenv("MINISH_TEST_VAR") == "value"
        assert host.environ()["MINISH_TEST_VAR"] == "value"
        assert os.environ["MINISH_TEST_VAR"] == "value"
    finally:
        os.environ.pop("MINISH_TEST_VAR", None)


def test_setenv_rejects_invalid_name(host: HostSystem):
    with pytest.raises(OSQueryError):
        host.setenv("BAD=NAME", "x")


def test_username_comes_from_uid_not_environment(
    host: HostSystem, monkeypatch: pytest.MonkeyPatch
):
    uid_name = pwd.getpwuid(os.getuid()).pw_name
    monkeypatch.setenv("USER", "mallory")
    monkeypatch.setenv("LOGNAME", "mallory")

    assert host.username() == uid_name


def test_prompt_ignores_env_user_change(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("USER", "placeholder")
    uid_name = pwd.getpwuid(os.getuid()).pw_name
    out: list[str] = []
    shell = Shell(
        system=HostSystem(),
        executor=SubprocessExecutor(),
        config=ShellConfig({}),
        output_fn=out.append,
        error_fn=out.append,
    )

    run_repl(shell, stdin=io.StringIO("env USER mallory\nexit\n"))

    text = "".join(out)
    assert "mallory" not in text
    assert text.count(f"[{uid_name}] $ ") == 2


def test_username_failure_becomes_os_query_error(host: HostSystem, monkeypatch: pytest.MonkeyPatch):
    class FailingProcess:
        def username(self):
            raise psutil.AccessDenied()

    monkeypatch.setattr(psutil, "Process", FailingProcess)

    with pytest.raises(OSQueryError) as exc:
        host.username()
    assert exc.value.kind is ErrorKind.OS_QUERY
    assert "user lookup" in str(exc.value)


def test_memory_stats_reports_positive_totals(host: HostSystem):
    stats = host.memory_stats()

    assert isinstance(stats, MemoryStats)
    assert stats.total > 0
    assert 0 <= stats.free <= stats.total


def test_memory_stats_failure_becomes_os_query_error(
    host: HostSystem, monkeypatch: pytest.MonkeyPatch
):
    def fail():
        raise psutil.Error("no /proc")

    monkeypatch.setattr(psutil, "virtual_memory", fail)

    with pytest.raises(OSQueryError) as exc:
        host.memory_stats()
    assert "alloc" in str(exc.value)
