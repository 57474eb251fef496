# -*- coding: utf-8 -*-
"""
Inclusion policy for CodePrompt: turns the ignore verdict and the include/exclude
pattern matches of one path into a single display/content decision.
"""

from dataclasses import dataclass

from .codeprompt_patterns import PatternSet


@dataclass(frozen=True)
class Decision:
    show_in_tree: bool
    include_content: bool


HIDDEN = Decision(show_in_tree=False, include_content=False)


def is_selected(relative_path: str, pattern_set: PatternSet, include_priority: bool) -> bool:
    """
    Applies the include/exclude patterns to one path.

    When both an include and an exclude pattern match, ``include_priority``
    decides. A non-empty include list that does not match leaves the path
    unselected.
    """
    inc = pattern_set.matches_include(relative_path)
    exc = pattern_set.matches_exclude(relative_path)
    if inc and exc:
        return include_priority
    return inc and not exc


def decide(
    relative_path: str,
    is_dir: bool,
    pattern_set: PatternSet,
    ignored: bool,
    include_priority: bool,
    exclude_from_tree: bool,
) -> Decision:
    """
    Decides whether a path is listed in the tree and whether its content is emitted.

    Args:
        relative_path: Root-relative POSIX path of the entry.
        is_dir: Whether the entry is a directory (directories never carry content).
        pattern_set: Compiled include/exclude patterns.
        ignored: Verdict of the ignore files; ignored paths are never shown.
        include_priority: Tie-break when include and exclude both match.
        exclude_from_tree: Hide unselected paths instead of listing them.

    Returns:
        The Decision for this path. It only concerns the path itself: an
        unselected directory is still descended into.
    """
    if ignored:
        return HIDDEN

    selected = is_selected(relative_path, pattern_set, include_priority)
    return Decision(
        show_in_tree=selected or not exclude_from_tree,
        include_content=selected and not is_dir,
    )
