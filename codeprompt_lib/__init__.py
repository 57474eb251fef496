# -*- coding: utf-8 -*-
"""
CodePrompt Package - Turn a codebase into a single prompt for Large Language Models

This package provides tools for:
- Walking a directory with include/exclude globs and ignore-file support
- Rendering the project structure as a source tree
- Collecting file contents (optionally line-numbered and fenced)
- Adding git diffs/logs, counting tokens, and sending the prompt to the
  clipboard or a file

Usage:
    from codeprompt_lib import CodePrompt
    prompt = CodePrompt(root_dir="path/to/project", include="*.py").generate_prompt()
"""

# Package version
__version__ = "1.0.0"

# Import public classes and functions for direct access
from .codeprompt_errors import (
    CodePromptError, ConfigError, TraversalError, RootNotFoundError, EntryReadError, IgnoreFileParseError,
)
from .codeprompt_patterns import PatternSet, compile_patterns, parse_patterns
from .codeprompt_ignore import IgnoreResolver, is_ignored
from .codeprompt_policy import Decision, decide
from .codeprompt_records import FileRecord, build_file_record
from .codeprompt_walker import TreeWalker, walk
from .codeprompt_core import CodePrompt
from .codeprompt_cli import main

# Define what gets imported with 'from codeprompt_lib import *'
__all__ = [
    'CodePrompt', 'main', 'walk', 'TreeWalker', 'PatternSet', 'compile_patterns', 'parse_patterns',
    'IgnoreResolver', 'is_ignored', 'Decision', 'decide', 'FileRecord', 'build_file_record',
    'CodePromptError', 'ConfigError', 'TraversalError', 'RootNotFoundError', 'EntryReadError',
    'IgnoreFileParseError',
]
