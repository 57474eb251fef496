# -*- coding: utf-8 -*-
"""
Ignore-file handling for CodePrompt.

Every directory may carry ignore files (``.gitignore``, ``.ignore``). Their
rules apply to paths below that directory. While walking, the rule sets of the
current directory's ancestors form a stack: deeper sets win over shallower
ones, and inside one set the last matching rule wins. Anything ignored is
pruned from the walk entirely.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import pathspec

from .codeprompt_config import IGNORE_FILE_NAMES
from .codeprompt_errors import IgnoreFileParseError
from .codeprompt_utils import LogFunc, null_log


class RuleKind(Enum):
    LITERAL = "literal"               # plain name or path, no wildcards
    GLOB = "glob"                     # '*', '?' or '[...]' inside one segment
    RECURSIVE_GLOB = "recursive_glob" # contains '**'


@dataclass(frozen=True)
class IgnoreRule:
    """One parsed ignore-file line."""
    pattern: str
    negated: bool
    dir_only: bool
    kind: RuleKind
    matcher: pathspec.Pattern

    def matches(self, relative_path: str, is_dir: bool) -> bool:
        if self.dir_only and not is_dir:
            return False
        # Directories are tested with a trailing slash so 'name/' rules apply to them
        candidate = relative_path + "/" if is_dir else relative_path
        return self.matcher.regex.match(candidate) is not None


def classify_rule(body: str) -> RuleKind:
    if "**" in body:
        return RuleKind.RECURSIVE_GLOB
    if any(ch in body for ch in "*?["):
        return RuleKind.GLOB
    return RuleKind.LITERAL


def parse_rule(line: str, source: str = "<ignore>", line_no: int = 0) -> Optional[IgnoreRule]:
    """
    Parses one ignore-file line.

    Returns None for blank lines and comments. Raises IgnoreFileParseError for
    lines the git-wildmatch grammar rejects.
    """
    text = line.rstrip("\n").rstrip("\r")
    if not text.strip() or text.startswith("#"):
        return None
    try:
        spec = pathspec.PathSpec.from_lines("gitwildmatch", [text])
    except ValueError as e:
        raise IgnoreFileParseError(source, line_no, text, str(e)) from e
    if not spec.patterns or spec.patterns[0].include is None:
        return None

    negated = text.startswith("!")
    body = text[1:] if negated else text
    body = body.rstrip()
    return IgnoreRule(
        pattern=text,
        negated=negated,
        dir_only=body.endswith("/"),
        kind=classify_rule(body),
        matcher=spec.patterns[0],
    )


@dataclass(frozen=True)
class IgnoreRuleSet:
    """Ordered rules from the ignore files of one directory."""
    directory: str # Root-relative POSIX path of the owning directory ('' for the root)
    rules: Tuple[IgnoreRule, ...]

    def verdict(self, relative_path: str, is_dir: bool) -> Optional[bool]:
        """
        Returns True (ignored), False (re-included by a negation) or None when
        no rule of this set matches the path.
        """
        local_path = self._localize(relative_path)
        if local_path is None:
            return None
        result: Optional[bool] = None
        for rule in self.rules:
            if rule.matches(local_path, is_dir):
                result = not rule.negated
        return result

    def _localize(self, relative_path: str) -> Optional[str]:
        if not self.directory:
            return relative_path
        prefix = self.directory + "/"
        if not relative_path.startswith(prefix):
            return None
        return relative_path[len(prefix):]


# Root-to-current ancestors; extended by copy, never mutated
IgnoreRuleStack = Tuple[IgnoreRuleSet, ...]


def is_ignored(relative_path: str, is_dir: bool, rule_stack: IgnoreRuleStack) -> bool:
    """Evaluates the stack from the root down; the deepest matching set decides."""
    ignored = False
    for rule_set in rule_stack:
        verdict = rule_set.verdict(relative_path, is_dir)
        if verdict is not None:
            ignored = verdict
    return ignored


def parse_rules(lines: Iterable[str], source: str, log_func: LogFunc = null_log) -> List[IgnoreRule]:
    """Parses ignore-file lines, skipping (and logging) malformed ones."""
    rules: List[IgnoreRule] = []
    for line_no, line in enumerate(lines, start=1):
        try:
            rule = parse_rule(line, source, line_no)
        except IgnoreFileParseError as e:
            log_func(f"Skipping ignore rule: {e}", "warning")
            continue
        if rule is not None:
            rules.append(rule)
    return rules


class IgnoreResolver:
    """Loads ignore files while walking and answers ignore queries."""

    def __init__(self, ignore_file_names: Tuple[str, ...] = IGNORE_FILE_NAMES, log_func: LogFunc = null_log):
        self.ignore_file_names = tuple(ignore_file_names)
        self._log = log_func

    def load_rule_set(self, directory: Path, relative_dir: str) -> Optional[IgnoreRuleSet]:
        """Reads the ignore files of one directory. Missing or unreadable files add no rules."""
        rules: List[IgnoreRule] = []
        for name in self.ignore_file_names:
            ignore_file = directory / name
            if not ignore_file.is_file():
                continue
            try:
                lines = ignore_file.read_text(encoding="utf-8", errors="replace").splitlines()
            except OSError as e:
                self._log(f"Could not read ignore file '{ignore_file}': {e}", "warning")
                continue
            parsed = parse_rules(lines, str(ignore_file), self._log)
            self._log(f"Loaded {len(parsed)} ignore rules from '{ignore_file}'", "debug")
            rules.extend(parsed)
        if not rules:
            return None
        return IgnoreRuleSet(relative_dir, tuple(rules))

    def extend(self, parent_stack: IgnoreRuleStack, directory: Path, relative_dir: str) -> IgnoreRuleStack:
        """Returns the stack for ``directory``: the parent's stack plus its own rules, if any."""
        rule_set = self.load_rule_set(directory, relative_dir)
        if rule_set is None:
            return parent_stack
        return parent_stack + (rule_set,)

    def is_ignored(self, relative_path: str, is_dir: bool, rule_stack: IgnoreRuleStack) -> bool:
        return is_ignored(relative_path, is_dir, rule_stack)
