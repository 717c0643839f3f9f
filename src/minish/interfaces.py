# minish — Minimal Interactive Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Protocol definitions for dependency injection.

These interfaces keep the shell loop away from process-global OS state,
so tests can hand the Shell an in-memory system and a recording executor.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .executor import ExecResult  # pragma: no cover
    from .system import MemoryStats  # pragma: no cover


class SystemAccess(Protocol):
    """Protocol for the OS capabilities the shell borrows its state from."""

    def getcwd(self) -> str:
        """Return the absolute current working directory."""
        ...

    def chdir(self, path: str) -> None:
        """Change the current working directory."""
        ...

    def home_dir(self) -> str:
        """Return the current user's home directory."""
        ...

    def username(self) -> str:
        """Return the current user's login name."""
        ...

    def environ(self) -> dict[str, str]:
        """Return a snapshot of all environment variables."""
        ...

    def getenv(self, name: str) -> str | None:
        """Return one environment variable, or None if unset."""
        ...

    def setenv(self, name: str, value: str) -> None:
        """Set one environment variable."""
        ...

    def listdir(self, path: str = ".") -> list[str]:
        """Return the entry names of a directory."""
        ...

    def memory_stats(self) -> MemoryStats:
        """Return total and free physical memory in bytes."""
        ...


class Executor(Protocol):
    """Protocol for external command execution."""

    def run(
        self, name: str, args: list[str], cwd: str | None = None
    ) -> ExecResult:
        """Run a program synchronously with inherited output streams."""
        ...


class ConfigModel(Protocol):
    """Protocol for configuration access."""

    @property
    def prompt_template(self) -> str:
        ...

    @property
    def fallback_prompt(self) -> str:
        ...

    @property
    def farewell(self) -> str:
        ...

    @property
    def exit_on_eof(self) -> bool:
        ...

    @property
    def collapse_whitespace(self) -> bool:
        ...

    @property
    def inherit_stdin(self) -> bool:
        ...
