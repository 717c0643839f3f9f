# minish — Minimal Interactive Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
minish CLI entry point and REPL loop.

Design:
- CLI owns process startup and config resolution.
- Shell is the session engine (system+executor+config injected).
- UI is a PromptSession line reader when stdin is a terminal; otherwise
  lines are read straight from the stream.

Loop states: exit check -> prompt -> read -> dispatch -> exit check.
No error ends the loop; only the exit signal (or end of input) does.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING, TextIO

import yaml

from . import config
from .errors import ShellError
from .executor import SubprocessExecutor
from .kernel import Shell, write_crash_log
from .system import HostSystem

if TYPE_CHECKING:
    from .ui import PromptToolkitUI  # pragma: no cover


def _read_line(
    shell: Shell, prompt: str, ui: PromptToolkitUI | None, stdin: TextIO
) -> str:
    """Show the prompt and read one line. Raises EOFError at end of input."""
    if ui is not None:
        return ui.read(prompt)

    shell.write(prompt)
    line = stdin.readline()
    if line == "":
        raise EOFError("end of input")
    return line


def run_repl(
    shell: Shell,
    ui: PromptToolkitUI | None = None,
    stdin: TextIO | None = None,
) -> None:
    """Run the minish read-dispatch-execute loop until the exit signal."""
    if stdin is None:
        stdin = sys.stdin

    while True:
        if shell.exit_requested:
            shell.write(shell.config.farewell + "\n")
            return

        try:
            prompt = shell.prompt()
        except ShellError as e:
            shell.write_error(str(e))
            # Read anyway instead of looping back to the exit check, so a
            # lookup that always fails cannot spin without consuming input.
            prompt = shell.config.fallback_prompt

        try:
            line = _read_line(shell, prompt, ui, stdin)
        except EOFError as e:
            if shell.config.exit_on_eof:
                shell.write("\n")
                shell.request_exit()
            else:
                shell.write_error(f"read error: {e or 'EOF'}")
            continue
        except KeyboardInterrupt:
            # Ctrl+C at the prompt discards the line.
            shell.write("\n")
            continue
        except (OSError, UnicodeDecodeError) as e:
            shell.write_error(f"read error: {e}")
            continue

        try:
            shell.handle_command(line)
        except ShellError as e:
            shell.write_error(str(e))
        except OSError as e:
            shell.write_error(f"I/O error: {e}")
        except KeyboardInterrupt:
            shell.write("\n")
        except Exception as e:
            # Unhandled exception - write crash log
            try:
                cwd = shell.system.getcwd()
            except ShellError:
                cwd = ""
            write_crash_log(e, raw_command=line.strip(), cwd=cwd)
            shell.write_error(
                f"[ERROR] Unhandled exception: {type(e).__name__}: {e}"
            )
            # Continue session


def main() -> int:
    """Main entry point for minish CLI."""
    try:
        cfg = config.load_system_config()
    except (OSError, ValueError, yaml.YAMLError) as e:
        sys.stderr.write(f"minish: cannot load config: {e}\n")
        return 1

    # Explicit wiring: config + executor + system injected into shell
    executor = SubprocessExecutor(inherit_stdin=cfg.inherit_stdin)
    shell = Shell(system=HostSystem(), executor=executor, config=cfg)

    use_ui = (
        bool(cfg.ui.get("enabled", True))
        and os.environ.get("MINISH_LEGACY_UI") != "1"
        and sys.stdin.isatty()
    )
    if not use_ui:
        run_repl(shell)
        return 0

    from .ui import PromptToolkitUI

    ui = PromptToolkitUI(shell)

    # Route builtin output through UI
    shell.output_fn = ui.write
    shell.error_fn = ui.write_error

    run_repl(shell, ui=ui)
    return 0
