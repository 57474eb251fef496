# -*- coding: utf-8 -*-
"""
Exception types for CodePrompt.

Fatal problems (bad options, missing root) propagate to the CLI. Per-entry
problems (unreadable files, malformed ignore lines) are raised close to where
they happen and recovered by the walker or the ignore loader.
"""

from pathlib import Path
from typing import Optional, Union


class CodePromptError(Exception):
    """Base class for all CodePrompt errors."""


class ConfigError(CodePromptError, ValueError):
    """Invalid caller-supplied option (glob pattern, branch pair, template)."""


class TraversalError(CodePromptError):
    """The directory walk cannot start."""


class RootNotFoundError(TraversalError, FileNotFoundError):
    """Root path is missing or is not a directory."""

    def __init__(self, root: Union[str, Path], reason: str = "not found"):
        self.root = str(root)
        self.reason = reason
        super().__init__(f"Starting directory {reason}: '{root}'")


class EntryReadError(CodePromptError, OSError):
    """A single file could not be read or decoded as text."""

    def __init__(self, path: Union[str, Path], reason: str, cause: Optional[BaseException] = None):
        self.path = str(path)
        self.reason = reason
        self.cause = cause
        super().__init__(f"Cannot read '{path}': {reason}")


class IgnoreFileParseError(CodePromptError, ValueError):
    """A line of an ignore file could not be parsed."""

    def __init__(self, source: Union[str, Path], line_no: int, line: str, reason: str = ""):
        self.source = str(source)
        self.line_no = line_no
        self.line = line
        message = f"{source}:{line_no}: invalid ignore rule '{line}'"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
