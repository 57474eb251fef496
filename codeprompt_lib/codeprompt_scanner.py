# -*- coding: utf-8 -*-
"""
Directory scanning for CodePrompt's interactive setup.
Counts file extensions or directory names so the user can pick include and
exclude patterns from what the project actually contains.
"""

import os
from collections import Counter
from pathlib import Path
from typing import Counter as CounterType, List, Tuple

from .codeprompt_ignore import IgnoreResolver, IgnoreRuleStack
from .codeprompt_utils import LogFunc, null_log

NO_EXTENSION = "(no ext)"


def scan_directory(
    root_dir: Path,
    scan_type: str, # "file" or "dir"
    max_items: int,
    show_hidden: bool,
    log_func: LogFunc = null_log,
) -> CounterType[str]:
    """
    Scans the directory breadth-first, honouring ignore files, and counts file
    extensions (scan_type="file") or directory names (scan_type="dir").
    Stops after ``max_items`` entries.
    """
    log_func(f"Starting {scan_type} scan in '{root_dir}' (max: {max_items}, hidden: {show_hidden})", "info")
    item_counter: CounterType[str] = Counter()
    scanned_count = 0
    resolver = IgnoreResolver(log_func=log_func)

    queue: List[Tuple[Path, str, IgnoreRuleStack]] = [(root_dir, "", resolver.extend((), root_dir, ""))]
    while queue and scanned_count < max_items:
        current_dir, current_rel, rule_stack = queue.pop(0) # BFS
        try:
            with os.scandir(current_dir) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            log_func(f"Scan: Could not list '{current_dir}', skipping: {e}", "warning")
            continue

        for entry in entries:
            if scanned_count >= max_items:
                log_func(f"Scan reached max items ({max_items}).", "info")
                break
            if entry.name.startswith(".") and not show_hidden:
                continue
            relative_path = f"{current_rel}/{entry.name}" if current_rel else entry.name
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError as e:
                log_func(f"Scan: Could not stat '{entry.path}', skipping. Error: {e}", "warning")
                continue
            if resolver.is_ignored(relative_path, is_dir, rule_stack):
                continue
            scanned_count += 1

            if is_dir:
                if scan_type == "dir":
                    item_counter[entry.name] += 1
                entry_path = Path(entry.path)
                queue.append((entry_path, relative_path, resolver.extend(rule_stack, entry_path, relative_path)))
            elif scan_type == "file":
                suffix = Path(entry.name).suffix
                item_counter[suffix[1:] if suffix else NO_EXTENSION] += 1

    log_func(f"Scan finished. Found {len(item_counter)} unique entries from {scanned_count} items processed.", "info")
    return item_counter
