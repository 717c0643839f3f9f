# minish — Minimal Interactive Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
minish kernel.

Core implementation of minish:
- prompt rendering from live OS state
- input parsing (command name + positional arguments)
- builtin dispatch with external command fallback
- exit signal consumed by the loop in cli.run_repl

Important boundary:
- Kernel does not load YAML or touch os/subprocess directly.
- Kernel consumes the injected SystemAccess, Executor and ConfigModel.
"""

from __future__ import annotations

import sys
import threading
import traceback
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from . import config as cfg_module
from .builtins import get_builtin
from .errors import ExternalCommandError, OSQueryError
from .interfaces import ConfigModel, Executor, SystemAccess


def write_crash_log(
    error: Exception,
    raw_command: str = "",
    cwd: str = "",
) -> None:
    """Write an entry to the crash log.

    Logs unhandled exceptions raised while dispatching a command.
    Only creates the log directory when actually needed.
    Appends to crash.log (never overwrites).
    """
    try:
        logs_dir = cfg_module.logs_dir(cfg_module.get_data_root())
        logs_dir.mkdir(parents=True, exist_ok=True)

        crash_log_path = logs_dir / "crash.log"

        lines = [f"{datetime.now().isoformat()}"]
        if raw_command:
            lines.append(f"raw={raw_command}")
        if cwd:
            lines.append(f"cwd={cwd}")

        lines.append(f"error={type(error).__name__}: {error}")
        lines.append("traceback:")
        lines.append(traceback.format_exc())
        lines.append("----")

        with crash_log_path.open("a", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")

    except Exception:
        # Already reporting a failure; a broken crash log must not add another.
        pass


def parse_line(line: str, collapse_whitespace: bool = False) -> tuple[str, list[str]]:
    """Split an input line into a command name and its arguments.

    Leading/trailing whitespace is trimmed, then the line is split on single
    spaces, so "a  b" yields an empty-string argument between a and b.
    With collapse_whitespace, runs of whitespace are treated as one
    separator instead.

    Returns:
        (name, args); name is "" for a blank line
    """
    stripped = line.strip()
    if collapse_whitespace:
        parts = stripped.split()
        if not parts:
            return "", []
    else:
        parts = stripped.split(" ")
    return parts[0], parts[1:]


def _default_write(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


def _default_write_err(text: str) -> None:
    sys.stderr.write(text)
    sys.stderr.flush()


@dataclass
class Shell:
    """minish session engine."""

    system: SystemAccess
    executor: Executor
    config: ConfigModel

    # Output hooks (wired by CLI/UI)
    output_fn: Callable[[str], None] = _default_write
    error_fn: Callable[[str], None] = _default_write_err

    # Set by `exit`, checked by the loop before each prompt.
    _exit_signal: threading.Event = field(default_factory=threading.Event)

    # -----------------------
    # Output
    # -----------------------

    def write(self, text: str) -> None:
        self.output_fn(text)

    def write_error(self, text: str) -> None:
        if not text.endswith("\n"):
            text += "\n"
        self.error_fn(text)

    # -----------------------
    # Exit signal
    # -----------------------

    def request_exit(self) -> None:
        """Ask the loop to stop on its next check. Idempotent."""
        self._exit_signal.set()

    @property
    def exit_requested(self) -> bool:
        return self._exit_signal.is_set()

    # -----------------------
    # Prompt
    # -----------------------

    def prompt(self) -> str:
        """Return the prompt for the current OS state.

        The working directory and user are looked up on every call.

        Raises:
            OSQueryError: either lookup failed
        """
        user = self.system.username()
        cwd = self.system.getcwd()
        try:
            return self.config.prompt_template.format(cwd=cwd, user=user)
        except (KeyError, IndexError, ValueError) as e:
            raise OSQueryError.wrap("prompt template", e) from e

    # -----------------------
    # Command handling
    # -----------------------

    def handle_command(self, line: str) -> None:
        """Parse and run a single input line.

        Raises:
            ShellError: the builtin or external command failed
        """
        name, args = parse_line(line, self.config.collapse_whitespace)
        if not name:
            return

        builtin = get_builtin(name)
        if builtin is not None:
            builtin.handler(self, args)
            return

        self.run_external(name, args)

    def run_external(self, name: str, args: list[str]) -> None:
        """Run a non-builtin command and turn a non-zero exit into an error."""
        result = self.executor.run(name, args, cwd=self.system.getcwd())
        if result.exit_code == 0:
            return
        if result.exit_code < 0:
            # Popen reports death by signal N as -N.
            raise ExternalCommandError(
                name, f"terminated by signal {-result.exit_code}",
                exit_code=128 - result.exit_code,
            )
        raise ExternalCommandError(
            name, f"exit status {result.exit_code}",
            exit_code=result.exit_code,
        )
