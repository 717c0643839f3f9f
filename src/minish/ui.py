# minish — Minimal Interactive Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.history import DummyHistory
from prompt_toolkit.patch_stdout import patch_stdout
from prompt_toolkit.shortcuts import print_formatted_text
from prompt_toolkit.styles import Style

if TYPE_CHECKING:
    from .kernel import Shell  # pragma: no cover


# ----------------------------
# Config helpers (come from config.py facade via shell.config.get_path)
# ----------------------------


def _cfg_get_path(shell: Shell | None, path: str, default):
    if shell is None:
        return default
    cfg = getattr(shell, "config", None)
    if cfg is None or not hasattr(cfg, "get_path"):
        return default
    return cfg.get_path(path, default)


def _cfg_dict(shell: Shell | None, path: str, default: dict) -> dict:
    val = _cfg_get_path(shell, path, default)
    return val if isinstance(val, dict) else default


# ----------------------------
# Theme / Style
# ----------------------------


def _default_style_dict() -> dict[str, str]:
    return {
        "minish.error": "#ff5f5f",
    }


def _build_style(shell: Shell | None) -> Style:
    base = _default_style_dict()
    overrides = _cfg_dict(shell, "ui.theme.style", {})
    # only keep string->string
    for k, v in list(overrides.items()):
        if isinstance(k, str) and isinstance(v, str):
            base[k] = v
    return Style.from_dict(base)


# ----------------------------
# PromptSession UI
# ----------------------------


class PromptToolkitUI:
    """
    Terminal line reader:
      - Keeps normal terminal scrollback + drag-select copy.
      - Line editing only: no history recall and no completion.
      - Ctrl+D raises EOFError, Ctrl+C raises KeyboardInterrupt.
    """

    def __init__(self, shell: Shell | None = None) -> None:
        self.shell = shell
        self.session: PromptSession[str] | None = None
        self._style = _build_style(shell)

        # Track whether we ended on a newline (to prevent prompt mangling)
        self._needs_newline_before_prompt = False

    def _ensure_session(self) -> None:
        if self.session is not None:
            return

        self.session = PromptSession(
            history=DummyHistory(),
            enable_history_search=False,
            style=self._style,
        )

    # ---------- public API ----------

    def read(self, prompt: str) -> str:
        self._ensure_session()
        assert self.session is not None

        # If last output didn't end with newline, insert one
        # before prompt redraw
        if self._needs_newline_before_prompt:
            print_formatted_text("", style=self._style)
            self._needs_newline_before_prompt = False

        with patch_stdout():
            return self.session.prompt(prompt)

    def write(self, text: str) -> None:
        """Write EXACTLY what we receive (no extra newline)."""
        if not text:
            return
        print_formatted_text(text, style=self._style, end="")
        self._needs_newline_before_prompt = not text.endswith("\n")

    def write_error(self, text: str) -> None:
        if not text:
            return
        print_formatted_text(
            FormattedText([("class:minish.error", text)]),
            style=self._style, end="", file=sys.stderr,
        )
        self._needs_newline_before_prompt = not text.endswith("\n")
