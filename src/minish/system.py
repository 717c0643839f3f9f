# minish — Minimal Interactive Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Host OS implementation of the SystemAccess protocol.

Nothing here is cached: the working directory, environment and user are
read from the OS on every call, since `cd` and `env` mutate them between
prompts.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

import psutil

from .errors import OSQueryError


@dataclass(frozen=True)
class MemoryStats:
    total: int
    free: int


class HostSystem:
    """SystemAccess backed by the real process state."""

    def getcwd(self) -> str:
        try:
            return os.getcwd()
        except OSError as e:
            raise OSQueryError.wrap("getcwd", e) from e

    def chdir(self, path: str) -> None:
        try:
            os.chdir(path)
        except OSError as e:
            raise OSQueryError.wrap("cd", e) from e

    def home_dir(self) -> str:
        home = os.path.expanduser("~")
        if home == "~":
            raise OSQueryError("cd: cannot determine home directory")
        return home

    def username(self) -> str:
        # Resolved from the process uid; USER/LOGNAME are not consulted.
        try:
            return psutil.Process().username()
        except (OSError, psutil.Error) as e:
            raise OSQueryError.wrap("user lookup", e) from e

    def environ(self) -> dict[str, str]:
        return dict(os.environ)

    def getenv(self, name: str) -> str | None:
        return os.environ.get(name)

    def setenv(self, name: str, value: str) -> None:
        try:
            os.environ[name] = value
        except (OSError, ValueError) as e:
            raise OSQueryError.wrap("env", e) from e

    def listdir(self, path: str = ".") -> list[str]:
        try:
            with os.scandir(path) as entries:
                return [entry.name for entry in entries]
        except OSError as e:
            raise OSQueryError.wrap("ls", e) from e

    def memory_stats(self) -> MemoryStats:
        try:
            vm = psutil.virtual_memory()
        except (OSError, psutil.Error) as e:
            raise OSQueryError.wrap("alloc", e) from e
        return MemoryStats(total=int(vm.total), free=int(vm.free))
