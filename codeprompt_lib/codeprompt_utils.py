# -*- coding: utf-8 -*-
"""
Utility functions for CodePrompt: formatting, logging, and error reporting.
"""

import sys
from pathlib import Path
from datetime import datetime
from typing import Callable, Union

from .codeprompt_styling import Colors

# Signature shared by every component that logs: log_func(message, level="info")
LogFunc = Callable[..., None]


# --- Formatting ---
def format_bytes(size_bytes: int) -> str:
    """Helper function to format bytes into KB, MB, GB."""
    if not isinstance(size_bytes, (int, float)) or size_bytes < 0: return "N/A"
    if size_bytes < 1024: return f"{size_bytes} B"
    elif size_bytes < 1024**2: return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024**3: return f"{size_bytes / 1024**2:.1f} MB"
    else: return f"{size_bytes / 1024**3:.2f} GB"


# --- Logging ---
def log_message(message: str, level: str = "info", verbose: bool = False, colorize: bool = False):
    """Logs a message to stderr. info/debug only appear when verbose is enabled."""
    if not verbose and level in ("info", "debug"):
        return

    color_map = {
        "error": Colors.RED, "warning": Colors.YELLOW, "success": Colors.GREEN,
        "info": Colors.CYAN, "debug": Colors.GRAY
    }
    color = color_map.get(level.lower(), Colors.RESET) if colorize else ""
    reset = Colors.RESET if colorize else ""
    timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3] # Milliseconds

    log_prefix = f"[{timestamp}] {color}[{level.upper():<7}] {reset}" # Padded level

    # Indent subsequent lines of a multi-line message
    lines = str(message).splitlines()
    if not lines: return

    print(f"{log_prefix}{lines[0]}", file=sys.stderr)
    indent = " " * (len(log_prefix) - len(color) - len(reset))
    for line in lines[1:]:
        print(f"{indent}{line}", file=sys.stderr)


def make_logger(verbose: bool = False, colorize: bool = False) -> LogFunc:
    """Binds log_message to a verbosity/colour setting."""
    return lambda msg, level="info": log_message(msg, level, verbose, colorize)


def null_log(message: str, level: str = "info") -> None:
    """Logger that discards everything."""


# --- Error Reporting ---
def describe_error(path: Union[str, Path], error: BaseException, phase: str = "processing") -> str:
    """
    Builds a one-line description of a recoverable filesystem error, with a hint
    for the common causes.
    """
    description = f"Error {phase} '{path}': {error.__class__.__name__}: {error}"
    cause = getattr(error, "cause", None) or error
    if isinstance(cause, PermissionError):
        description += " (permission denied; check the file's access rights)"
    elif isinstance(cause, FileNotFoundError):
        description += " (it may have been moved or deleted during the walk)"
    elif isinstance(cause, UnicodeDecodeError):
        description += " (not valid UTF-8 text; treated as binary)"
    return description
