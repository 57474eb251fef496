# -*- coding: utf-8 -*-
"""
Directory traversal for CodePrompt: walks the root depth-first, applies the
ignore files and the inclusion policy to every entry, and produces the source
tree text together with the ordered file records.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .codeprompt_config import DEFAULT_STYLE
from .codeprompt_errors import EntryReadError, RootNotFoundError
from .codeprompt_ignore import IgnoreResolver, IgnoreRuleStack
from .codeprompt_patterns import PatternSet
from .codeprompt_policy import Decision, decide
from .codeprompt_records import FileRecord, read_file_record
from .codeprompt_styling import TreeStyle
from .codeprompt_utils import LogFunc, describe_error, null_log


@dataclass
class TreeNode:
    name: str
    path: Path
    relative_path: str
    is_dir: bool
    is_file: bool
    decision: Decision
    children: List["TreeNode"] = field(default_factory=list)
    record: Optional[FileRecord] = None
    listable: bool = True
    visible: bool = False


class TreeWalker:
    """
    Builds the source tree and the file records for one root directory.

    The walk runs in two passes over an explicit stack (no recursion, so deep
    trees are fine): the first pass lists directories and reads included files,
    the second decides which directories remain visible and renders the lines
    in pre-order.
    """

    def __init__(
            self,
            root: Union[str, Path],
            pattern_set: Optional[PatternSet] = None,
            include_priority: bool = False,
            line_numbers: bool = False,
            relative_paths: bool = False,
            exclude_from_tree: bool = False,
            no_codeblock: bool = False,
            hidden: bool = True,
            style: str = DEFAULT_STYLE,
            ignore_resolver: Optional[IgnoreResolver] = None,
            log_func: LogFunc = null_log,
    ):
        root_path = Path(root)
        if not root_path.exists():
            raise RootNotFoundError(root, "not found")
        if not root_path.is_dir():
            raise RootNotFoundError(root, "is not a directory")
        self.root = root_path.resolve()

        self.pattern_set = pattern_set or PatternSet()
        self.include_priority = include_priority
        self.line_numbers = line_numbers
        self.relative_paths = relative_paths
        self.exclude_from_tree = exclude_from_tree
        self.no_codeblock = no_codeblock
        self.hidden = hidden
        self.style_config = TreeStyle.get_style(style)
        self._log = log_func
        self.ignore_resolver = ignore_resolver or IgnoreResolver(log_func=log_func)

        # --- Walk statistics ---
        self.skipped_items: List[Tuple[str, str]] = []
        self.entries_seen = 0
        self.entries_listed = 0
        self.total_chars = 0

    # --- Pass 1: listing ---
    def _skip(self, path: Path, error: BaseException, phase: str) -> None:
        message = describe_error(path, error, phase)
        self.skipped_items.append((str(path), message))
        self._log(message, "warning")

    def _read_record(self, node: TreeNode) -> Optional[FileRecord]:
        """Raises EntryReadError when the file cannot be read."""
        record = read_file_record(
            node.path, self.root, self.line_numbers, self.relative_paths, self.no_codeblock
        )
        if record is None:
            self._log(f"No text content in '{node.relative_path}' (binary or empty), content skipped.", "debug")
            return None
        self.total_chars += record.char_count
        return record

    def _list_entries(self, node: TreeNode) -> Optional[List[os.DirEntry]]:
        try:
            with os.scandir(node.path) as it:
                return sorted(it, key=lambda e: e.name)
        except OSError as e:
            self._skip(node.path, e, "listing directory")
            return None

    def _collect(self) -> TreeNode:
        root_node = TreeNode(
            name=self.root.name or str(self.root), path=self.root, relative_path="",
            is_dir=True, is_file=False, decision=Decision(True, False),
        )
        root_rules = self.ignore_resolver.extend((), self.root, "")
        stack: List[Tuple[TreeNode, IgnoreRuleStack]] = [(root_node, root_rules)]

        while stack:
            node, rule_stack = stack.pop()
            entries = self._list_entries(node)
            if entries is None:
                node.listable = False
                continue

            for entry in entries:
                self.entries_seen += 1
                entry_path = Path(entry.path)
                relative_path = f"{node.relative_path}/{entry.name}" if node.relative_path else entry.name

                if not self.hidden and entry.name.startswith("."):
                    self._log(f"Skipping hidden entry '{relative_path}'", "debug")
                    continue

                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                    is_file = not is_dir and entry.is_file()
                except OSError as e:
                    self._skip(entry_path, e, "reading entry type of")
                    continue

                ignored = self.ignore_resolver.is_ignored(relative_path, is_dir, rule_stack)
                if ignored:
                    self._log(f"Pruning ignored entry '{relative_path}'", "debug")
                    continue

                decision = decide(
                    relative_path, is_dir, self.pattern_set, ignored,
                    self.include_priority, self.exclude_from_tree,
                )
                child = TreeNode(
                    name=entry.name, path=entry_path, relative_path=relative_path,
                    is_dir=is_dir, is_file=is_file, decision=decision,
                    visible=decision.show_in_tree,
                )
                if is_dir:
                    child_rules = self.ignore_resolver.extend(rule_stack, entry_path, relative_path)
                    stack.append((child, child_rules))
                elif is_file and decision.include_content:
                    try:
                        child.record = self._read_record(child)
                    except EntryReadError as e:
                        # Unreadable files are left out of the tree as well
                        self._skip(entry_path, e, "reading file")
                        continue
                node.children.append(child)

        return root_node

    # --- Pass 2: visibility and rendering ---
    @staticmethod
    def _mark_visible(root_node: TreeNode) -> None:
        """A directory is shown when its own decision says so or when anything below it is shown."""
        directories: List[TreeNode] = []
        stack = [root_node]
        while stack:
            node = stack.pop()
            directories.append(node)
            stack.extend(child for child in node.children if child.is_dir)

        for node in reversed(directories): # Children before parents
            node.visible = node.listable and (
                node.decision.show_in_tree or any(child.visible for child in node.children)
            )
        root_node.visible = True

    def _render(self, root_node: TreeNode) -> Tuple[List[str], List[FileRecord]]:
        pointers = self.style_config
        lines = [root_node.name]
        records: List[FileRecord] = []

        def push_children(node: TreeNode, prefix: str) -> None:
            visible_children = [child for child in node.children if child.visible]
            last_index = len(visible_children) - 1
            for index in range(last_index, -1, -1): # Reversed so the first child pops first
                stack.append((visible_children[index], prefix, index == last_index))

        stack: List[Tuple[TreeNode, str, bool]] = []
        push_children(root_node, "")
        while stack:
            node, prefix, is_last = stack.pop()
            pointer = pointers["last_tee"] if is_last else pointers["tee"]
            lines.append(f"{prefix}{pointer}{node.name}")
            self.entries_listed += 1
            if node.record is not None:
                records.append(node.record)
            if node.is_dir:
                push_children(node, prefix + (pointers["empty"] if is_last else pointers["branch"]))

        return lines, records

    def walk(self) -> Tuple[str, List[FileRecord]]:
        """Walks the root and returns (tree_text, file_records)."""
        self._log(f"Starting walk of '{self.root}'", "info")
        self.skipped_items = []
        self.entries_seen = 0
        self.entries_listed = 0
        self.total_chars = 0

        root_node = self._collect()
        self._mark_visible(root_node)
        lines, records = self._render(root_node)

        self._log(
            f"Walk complete. Scanned: {self.entries_seen}, Listed: {self.entries_listed}, "
            f"Files with content: {len(records)}, Skipped: {len(self.skipped_items)}", "info"
        )
        return "\n".join(lines), records


def walk(
    root: Union[str, Path],
    pattern_set: Optional[PatternSet] = None,
    include_priority: bool = False,
    line_numbers: bool = False,
    relative_paths: bool = False,
    exclude_from_tree: bool = False,
    no_codeblock: bool = False,
    *,
    hidden: bool = True,
    style: str = DEFAULT_STYLE,
    log_func: LogFunc = null_log,
) -> Tuple[str, List[FileRecord]]:
    """
    Walks ``root`` and returns the tree text and the file records in pre-order.

    Raises:
        RootNotFoundError: ``root`` does not exist or is not a directory.
    """
    walker = TreeWalker(
        root, pattern_set, include_priority, line_numbers, relative_paths,
        exclude_from_tree, no_codeblock, hidden=hidden, style=style, log_func=log_func,
    )
    return walker.walk()
