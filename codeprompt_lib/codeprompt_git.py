# -*- coding: utf-8 -*-
"""
Version-control data for the prompt (staged diff, branch diff, branch log).

Everything here shells out to the ``git`` executable and degrades to an empty
string when git is unavailable, the path is not a repository, or a branch is
unknown: git data is optional decoration for the prompt.
"""

import subprocess
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .codeprompt_errors import ConfigError
from .codeprompt_patterns import parse_patterns
from .codeprompt_utils import LogFunc, null_log

GIT_TIMEOUT_SECONDS = 30


def _run_git(repo: Union[str, Path], args: List[str], log_func: LogFunc = null_log) -> Optional[str]:
    """Runs a git command in ``repo``; returns stdout, or None on any failure."""
    command = ["git", "--no-pager", *args]
    try:
        result = subprocess.run(
            command,
            cwd=str(repo),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=GIT_TIMEOUT_SECONDS,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as e:
        log_func(f"Git: could not run '{' '.join(command)}': {e}", "warning")
        return None
    if result.returncode != 0:
        log_func(f"Git: '{' '.join(command)}' failed: {result.stderr.strip()}", "warning")
        return None
    return result.stdout


def branch_exists(repo: Union[str, Path], branch: str, log_func: LogFunc = null_log) -> bool:
    return _run_git(repo, ["rev-parse", "--verify", "--quiet", f"{branch}^{{commit}}"], log_func) is not None


def parse_branch_pair(value: str) -> Tuple[str, str]:
    """Splits 'a,b' into two branch names. Raises ConfigError for any other count."""
    branches = parse_patterns(value)
    if len(branches) != 2:
        raise ConfigError("Please provide exactly two branches separated by a comma.")
    return branches[0], branches[1]


def get_git_diff(repo: Union[str, Path], log_func: LogFunc = null_log) -> str:
    """Staged changes (HEAD against the index)."""
    log_func("Git: collecting staged diff", "info")
    return _run_git(repo, ["diff", "--cached", "--no-color", "--no-ext-diff"], log_func) or ""


def get_git_diff_between_branches(repo: Union[str, Path], branch_a: str, branch_b: str,
                                  log_func: LogFunc = null_log) -> str:
    """Patch turning ``branch_a`` into ``branch_b``."""
    for branch in (branch_a, branch_b):
        if not branch_exists(repo, branch, log_func):
            log_func(f"Git: branch '{branch}' does not exist", "warning")
            return ""
    log_func(f"Git: collecting diff {branch_a}..{branch_b}", "info")
    return _run_git(repo, ["diff", "--no-color", "--no-ext-diff", f"{branch_a}..{branch_b}"], log_func) or ""


def get_git_log(repo: Union[str, Path], branch_a: str, branch_b: str, log_func: LogFunc = null_log) -> str:
    """Commits reachable from ``branch_b`` but not ``branch_a``, one '<id> - <summary>' per line."""
    for branch in (branch_a, branch_b):
        if not branch_exists(repo, branch, log_func):
            log_func(f"Git: branch '{branch}' does not exist", "warning")
            return ""
    output = _run_git(repo, ["log", "--format=%H%x00%s", f"{branch_a}..{branch_b}"], log_func)
    if not output:
        return ""
    lines = []
    for line in output.splitlines():
        commit_id, _, summary = line.partition("\x00")
        lines.append(f"{commit_id[:7]} - {summary}")
    return "\n".join(lines) + "\n"
