# minish — Minimal Interactive Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Error hierarchy for minish.

Every error the loop reports is a ShellError carrying an ErrorKind, so
callers (and tests) can tell usage mistakes from OS failures without
parsing messages. None of them end the session.
"""

from __future__ import annotations

from enum import Enum, auto


class ErrorKind(Enum):
    """Category of a reported error."""
    IO = auto()
    USAGE = auto()
    EXTERNAL = auto()
    OS_QUERY = auto()


class ShellError(Exception):
    """Base class for all errors reported by the shell loop.

    Attributes:
        message: Human-readable error message
        kind: ErrorKind category
        exit_code: Suggested exit code (default: 1)
    """

    def __init__(
        self, message: str, kind: ErrorKind = ErrorKind.IO, exit_code: int = 1
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.exit_code = exit_code

    def __str__(self) -> str:
        return self.message


class UsageError(ShellError):
    """Raised when a builtin is called with the wrong arguments."""

    def __init__(self, usage: str):
        super().__init__(f"Usage: {usage}", kind=ErrorKind.USAGE, exit_code=2)
        self.usage = usage


class OSQueryError(ShellError):
    """Raised when the OS refuses a query or mutation.

    Working directory, user identity, directory listing, environment and
    memory statistics failures all end up here.
    """

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message, kind=ErrorKind.OS_QUERY)
        self.cause = cause

    @classmethod
    def wrap(cls, what: str, exc: BaseException) -> OSQueryError:
        detail = getattr(exc, "strerror", None) or str(exc) or type(exc).__name__
        filename = getattr(exc, "filename", None)
        if filename:
            return cls(f"{what}: {filename}: {detail}", cause=exc)
        return cls(f"{what}: {detail}", cause=exc)


class ExternalCommandError(ShellError):
    """Raised when an external command cannot be run or exits non-zero."""

    def __init__(self, command: str, message: str, exit_code: int = 1):
        super().__init__(
            f"{command}: {message}", kind=ErrorKind.EXTERNAL,
            exit_code=exit_code,
        )
        self.command = command
