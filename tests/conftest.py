"""
Shared fakes for minish tests.

FakeSystem keeps cwd/environment/memory in memory so builtins can be
exercised without touching the real process state.
"""
from __future__ import annotations

import posixpath
from dataclasses import dataclass, field

import pytest

from minish.errors import OSQueryError
from minish.executor import ExecResult
from minish.kernel import Shell
from minish.system import MemoryStats


class FakeSystem:
    def __init__(
        self,
        cwd: str = "/home/alice",
        dirs: dict[str, list[str]] | None = None,
        env: dict[str, str] | None = None,
        user: str = "alice",
    ):
        self.cwd = cwd
        # directory path -> entry names
        self.dirs = dirs if dirs is not None else {
            "/": ["home", "tmp"],
            "/home": ["alice"],
            "/home/alice": ["notes.txt", "src"],
            "/home/alice/src": ["main.py"],
            "/tmp": [],
        }
        self.env = env if env is not None else {"HOME": "/home/alice", "PATH": "/bin"}
        self.user = user
        self.user_error: Exception | None = None
        self.memory = MemoryStats(total=8_000, free=3_000)
        self.memory_calls = 0

    def getcwd(self) -> str:
        return self.cwd

    def chdir(self, path: str) -> None:
        target = posixpath.normpath(posixpath.join(self.cwd, path))
        if target not in self.dirs:
            raise OSQueryError(f"cd: {path}: No such file or directory")
        self.cwd = target

    def home_dir(self) -> str:
        return self.env.get("HOME", "/")

    def username(self) -> str:
        if self.user_error is not None:
            raise self.user_error
        return self.user

    def environ(self) -> dict[str, str]:
        return dict(self.env)

    def getenv(self, name: str) -> str | None:
        return self.env.get(name)

    def setenv(self, name: str, value: str) -> None:
        self.env[name] = value

    def listdir(self, path: str = ".") -> list[str]:
        target = posixpath.normpath(posixpath.join(self.cwd, path))
        return list(self.dirs[target])

    def memory_stats(self) -> MemoryStats:
        self.memory_calls += 1
        return self.memory


class FakeExecutor:
    def __init__(self, exit_code: int = 0):
        self.exit_code = exit_code
        self.commands_run: list[tuple[str, list[str], str | None]] = []

    def run(self, name: str, args: list[str], cwd: str | None = None) -> ExecResult:
        self.commands_run.append((name, list(args), cwd))
        return ExecResult(
            exit_code=self.exit_code,
            started_at="2025-12-14T10:00:00",
            duration_ms=1,
        )


@dataclass
class FakeConfig:
    prompt_template: str = "{cwd} [{user}] $ "
    fallback_prompt: str = "$ "
    farewell: str = "exiting gracefully..."
    exit_on_eof: bool = True
    collapse_whitespace: bool = False
    inherit_stdin: bool = True
    extra: dict = field(default_factory=dict)

    def get_path(self, path: str, default=None):
        return self.extra.get(path, default)


@dataclass
class Captured:
    out: list[str] = field(default_factory=list)
    err: list[str] = field(default_factory=list)

    @property
    def stdout(self) -> str:
        return "".join(self.out)

    @property
    def stderr(self) -> str:
        return "".join(self.err)


@pytest.fixture
def system() -> FakeSystem:
    return FakeSystem()


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def fake_config() -> FakeConfig:
    return FakeConfig()


@pytest.fixture
def captured() -> Captured:
    return Captured()


@pytest.fixture
def shell(
    system: FakeSystem,
    executor: FakeExecutor,
    fake_config: FakeConfig,
    captured: Captured,
) -> Shell:
    return Shell(
        system=system,
        executor=executor,
        config=fake_config,
        output_fn=captured.out.append,
        error_fn=captured.err.append,
    )
