# minish — Minimal Interactive Command Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
minish core package.

A minimal interactive shell: a handful of builtins (cd, env, exit, ls, pwd,
alloc, echo, help) and everything else forwarded to the OS as a process.
"""
from .kernel import Shell as Shell  # noqa: F401 (re-export)
