# -*- coding: utf-8 -*-
"""
Include/exclude glob patterns for CodePrompt.

Patterns are matched against the path relative to the traversal root, with
forward slashes on every platform:

* ``*`` matches within one path segment, ``?`` one character of a segment
* ``**`` matches across segments (``**/`` also matches no segment at all)
* ``[abc]`` / ``[!abc]`` are character classes
* a pattern without a ``/`` also matches the entry's base name anywhere
  (``*.txt`` selects ``docs/readme.txt``)
* a trailing ``/`` selects the directory and everything below it
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Tuple

from .codeprompt_errors import ConfigError

_COMPILED_REGEX_CACHE: Dict[str, Pattern[str]] = {}


def parse_patterns(text: Optional[str]) -> List[str]:
    """Splits a comma-separated option value into trimmed, non-empty segments."""
    if not text:
        return []
    return [segment.strip() for segment in text.split(",") if segment.strip()]


def _translate_class(pattern: str, start: int) -> Tuple[str, int]:
    """Translates the character class opening at ``start``; returns (regex, next index)."""
    i = start + 1
    negate = i < len(pattern) and pattern[i] in "!^"
    if negate:
        i += 1
    body_start = i
    if i < len(pattern) and pattern[i] == "]": # Leading ']' is a literal
        i += 1
    end = pattern.find("]", i)
    if end == -1:
        raise ConfigError(f"Invalid glob pattern '{pattern}': unterminated character class")
    body = pattern[body_start:end].replace("\\", "\\\\").replace("[", "\\[").replace("]", "\\]")
    if negate:
        return f"[^/{body}]", end + 1
    return f"[{body}]", end + 1


def _translate_glob(pattern: str) -> str:
    """Converts a glob into a regex body (no anchors)."""
    parts: List[str] = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if c == "*":
            j = i
            while j < n and pattern[j] == "*":
                j += 1
            if j - i == 1:
                parts.append("[^/]*")
            elif (i == 0 or pattern[i - 1] == "/") and j < n and pattern[j] == "/":
                parts.append("(?:.*/)?") # '**/' may match zero segments
                j += 1
            else:
                parts.append(".*")
            i = j
        elif c == "?":
            parts.append("[^/]")
            i += 1
        elif c == "[":
            regex, i = _translate_class(pattern, i)
            parts.append(regex)
        elif c == "\\":
            if i + 1 >= n:
                raise ConfigError(f"Invalid glob pattern '{pattern}': trailing escape character")
            parts.append(re.escape(pattern[i + 1]))
            i += 2
        else:
            parts.append(re.escape(c))
            i += 1
    return "".join(parts)


def _compile_pattern(pattern: str) -> Pattern[str]:
    """Compile a glob pattern to an anchored regex, caching the result."""
    if pattern in _COMPILED_REGEX_CACHE:
        return _COMPILED_REGEX_CACHE[pattern]

    core = pattern
    if core.startswith("./"):
        core = core[2:]
    anchored = core.startswith("/")
    core = core.lstrip("/")
    dir_and_below = core.endswith("/")
    core = core.rstrip("/")
    if not core:
        raise ConfigError(f"Invalid glob pattern '{pattern}': pattern is empty")

    body = _translate_glob(core)
    if "/" not in core and not anchored:
        body = "(?:.*/)?" + body # Base-name match at any depth
    if dir_and_below:
        body += "(?:/.*)?"

    try:
        compiled = re.compile(rf"(?s:{body})\Z")
    except re.error as e:
        raise ConfigError(f"Invalid glob pattern '{pattern}': {e}") from e

    _COMPILED_REGEX_CACHE[pattern] = compiled
    return compiled


@dataclass(frozen=True)
class GlobPattern:
    """A compiled glob. Whether it includes or excludes depends on the list holding it."""
    text: str
    regex: Pattern[str]

    @classmethod
    def compile(cls, text: str) -> "GlobPattern":
        return cls(text, _compile_pattern(text))

    def matches(self, relative_path: str) -> bool:
        return self.regex.match(relative_path) is not None


@dataclass(frozen=True)
class PatternSet:
    """Compiled include and exclude pattern lists for one run."""
    includes: Tuple[GlobPattern, ...] = ()
    excludes: Tuple[GlobPattern, ...] = ()

    def matches_include(self, relative_path: str) -> bool:
        """True when no include patterns are set, or any of them matches."""
        if not self.includes:
            return True
        return any(p.matches(relative_path) for p in self.includes)

    def matches_exclude(self, relative_path: str) -> bool:
        """True when any exclude pattern matches; never true for an empty list."""
        return any(p.matches(relative_path) for p in self.excludes)

    @property
    def include_texts(self) -> List[str]:
        return [p.text for p in self.includes]

    @property
    def exclude_texts(self) -> List[str]:
        return [p.text for p in self.excludes]


def compile_pattern_lists(includes: List[str], excludes: List[str]) -> PatternSet:
    """Compiles already-split pattern lists. Raises ConfigError on a malformed glob."""
    return PatternSet(
        includes=tuple(GlobPattern.compile(p) for p in includes),
        excludes=tuple(GlobPattern.compile(p) for p in excludes),
    )


def compile_patterns(include: Optional[str] = None, exclude: Optional[str] = None) -> PatternSet:
    """Compiles comma-separated include/exclude option strings into a PatternSet."""
    return compile_pattern_lists(parse_patterns(include), parse_patterns(exclude))
