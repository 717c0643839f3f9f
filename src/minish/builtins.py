# minish — Minimal Interactive Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Built-in shell commands registry.

Each builtin is a plain function taking the Shell and its arguments. It
writes through shell.write() and raises ShellError subclasses on failure.
BUILTINS is read-only: new builtins are added to _REGISTRY below.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from .errors import UsageError

if TYPE_CHECKING:
    from .kernel import Shell  # pragma: no cover


Handler = Callable[["Shell", list[str]], None]


@dataclass(frozen=True)
class Builtin:
    name: str
    handler: Handler
    description: str
    usage: str


def cmd_cd(shell: Shell, args: list[str]) -> None:
    if len(args) > 1:
        raise UsageError("cd [dir]")
    target = args[0] if args else shell.system.home_dir()
    shell.system.chdir(target)


def cmd_env(shell: Shell, args: list[str]) -> None:
    if len(args) == 0:
        for key, value in sorted(shell.system.environ().items()):
            shell.write(f"{key}={value}\n")
    elif len(args) == 1:
        shell.write(f"{shell.system.getenv(args[0]) or ''}\n")
    elif len(args) == 2:
        shell.system.setenv(args[0], args[1])
    else:
        raise UsageError("env [name [value]]")


def cmd_exit(shell: Shell, args: list[str]) -> None:
    shell.request_exit()


def cmd_ls(shell: Shell, args: list[str]) -> None:
    for name in shell.system.listdir("."):
        shell.write(f"{name}\t")
    shell.write("\n")


def cmd_pwd(shell: Shell, args: list[str]) -> None:
    shell.write(f"{shell.system.getcwd()}\n")


def cmd_alloc(shell: Shell, args: list[str]) -> None:
    # Validate before touching the stats collaborator.
    if args:
        raise UsageError("alloc")
    stats = shell.system.memory_stats()
    shell.write(f"Total: {stats.total}, Free: {stats.free}\n")


def cmd_echo(shell: Shell, args: list[str]) -> None:
    shell.write(" ".join(args) + "\n")


def cmd_help(shell: Shell, args: list[str]) -> None:
    if not args:
        shell.write("Available commands:\n")
        for name, builtin in BUILTINS.items():
            shell.write(f"  {name}: {builtin.description}\n")
        return

    name = args[0]
    builtin = BUILTINS.get(name)
    if builtin is None:
        shell.write(f"Unknown command: {name}\n")
        return
    shell.write(
        f"Help for {name}:\n{builtin.description}\nUsage: {builtin.usage}\n"
    )


_REGISTRY: dict[str, Builtin] = {
    b.name: b
    for b in (
        Builtin(
            "cd", cmd_cd,
            "Change the current working directory", "cd [dir]",
        ),
        Builtin(
            "env", cmd_env,
            "Display or modify environment variables", "env [name [value]]",
        ),
        Builtin("exit", cmd_exit, "Exit the shell", "exit"),
        Builtin("ls", cmd_ls, "List files in the current directory", "ls"),
        Builtin(
            "pwd", cmd_pwd, "Print the current working directory", "pwd",
        ),
        Builtin(
            "alloc", cmd_alloc,
            "Display information about memory allocation", "alloc",
        ),
        Builtin(
            "echo", cmd_echo,
            "Print arguments to the standard output", "echo [arg ...]",
        ),
        Builtin(
            "help", cmd_help,
            "Display information about available commands", "help [command]",
        ),
    )
}

BUILTINS: MappingProxyType[str, Builtin] = MappingProxyType(_REGISTRY)


def get_builtin(name: str) -> Builtin | None:
    """Return the builtin registered under name, or None."""
    return BUILTINS.get(name)
