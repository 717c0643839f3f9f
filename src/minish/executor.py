# minish — Minimal Interactive Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Subprocess-backed executor implementation for minish.

External commands run with full terminal control: stdout and stderr are
inherited from the shell process and nothing is captured. The call blocks
until the child exits. There is no timeout.
"""

from __future__ import annotations

import subprocess
import time
from dataclasses import dataclass
from datetime import datetime

from .errors import ExternalCommandError


@dataclass(frozen=True)
class ExecResult:
    """Result from passthrough execution (no output capture)."""

    exit_code: int
    started_at: str
    duration_ms: int


class SubprocessExecutor:
    """Subprocess implementation of Executor protocol."""

    def __init__(self, inherit_stdin: bool = True):
        """Initialize executor with configuration.

        Args:
            inherit_stdin: If False, the child reads from the null device
                instead of the shell's stdin
        """
        self.inherit_stdin = inherit_stdin

    def run(
        self, name: str, args: list[str], cwd: str | None = None
    ) -> ExecResult:
        """Run a program with arguments and wait for it to finish.

        The program is looked up on PATH by the OS; no shell is involved,
        so arguments are passed through verbatim.

        Args:
            name: program name or path
            args: positional arguments
            cwd: working directory for the command (default: current directory)

        Returns:
            ExecResult (exit_code, started_at, duration_ms)

        Raises:
            ExternalCommandError: the program could not be started
        """
        started_at = datetime.now().isoformat()
        start_ts = time.time()

        try:
            proc = subprocess.Popen(
                [name, *args],
                stdin=None if self.inherit_stdin else subprocess.DEVNULL,
                stdout=None,  # inherit from parent
                stderr=None,  # inherit from parent
                cwd=cwd,
            )
        except FileNotFoundError as e:
            raise ExternalCommandError(
                name, "command not found", exit_code=127
            ) from e
        except PermissionError as e:
            raise ExternalCommandError(
                name, "permission denied", exit_code=126
            ) from e
        except (OSError, ValueError) as e:
            raise ExternalCommandError(
                name, f"error executing command: {e}"
            ) from e

        while True:
            try:
                exit_code = proc.wait()
                break
            except KeyboardInterrupt:
                # The terminal delivered SIGINT to the child as well;
                # keep waiting until it is reaped.
                continue
        duration_ms = int((time.time() - start_ts) * 1000)

        return ExecResult(
            exit_code=exit_code,
            started_at=started_at,
            duration_ms=duration_ms,
        )
