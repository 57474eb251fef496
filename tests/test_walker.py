# tests/test_walker.py
import os
import sys

import pytest

from codeprompt_lib.codeprompt_errors import RootNotFoundError, TraversalError
from codeprompt_lib.codeprompt_patterns import compile_patterns
from codeprompt_lib.codeprompt_walker import TreeWalker, walk


def display_paths(records):
    return [record.display_path for record in records]


# --- Ignore files ---

def test_gitignored_directory_is_pruned(scenario_root):
    tree_text, records = walk(scenario_root, relative_paths=True)
    assert tree_text == "\n".join([
        "proj",
        "├── .gitignore",
        "├── a.txt",
        "└── b",
        "    └── c.txt",
    ])
    assert display_paths(records) == [".gitignore", "a.txt", "b/c.txt"]


def test_nested_ignore_file_can_re_include(make_tree):
    root = make_tree({
        ".gitignore": "*.log\n",
        "x.log": "x",
        "sub": {".gitignore": "!keep.log\n", "keep.log": "k", "drop.log": "d"},
    })
    tree_text, records = walk(root, relative_paths=True)
    assert display_paths(records) == [".gitignore", "sub/.gitignore", "sub/keep.log"]
    assert "x.log" not in tree_text
    assert "drop.log" not in tree_text


def test_sibling_ignore_rules_do_not_leak(make_tree):
    root = make_tree({
        "a": {".gitignore": "*.txt\n", "one.txt": "1"},
        "b": {"two.txt": "2"},
    })
    _, records = walk(root, relative_paths=True)
    assert display_paths(records) == ["a/.gitignore", "b/two.txt"]


def test_ignored_directory_beats_include_patterns(make_tree):
    root = make_tree({".gitignore": "secret/\n", "secret": {"a.txt": "s"}, "pub.txt": "p"})
    tree_text, records = walk(root, compile_patterns("*.txt"), relative_paths=True)
    assert display_paths(records) == ["pub.txt"]
    assert "secret" not in tree_text


# --- Include / exclude ---

def test_include_priority_keeps_conflicting_file(scenario_root):
    tree_text, records = walk(scenario_root, compile_patterns("*.txt", "b/*"), include_priority=True,
                              relative_paths=True)
    assert display_paths(records) == ["a.txt", "b/c.txt"]
    assert "c.txt" in tree_text


def test_excluded_file_stays_listed_without_content(scenario_root):
    tree_text, records = walk(scenario_root, compile_patterns("*.txt", "b/*"), relative_paths=True)
    assert display_paths(records) == ["a.txt"]
    assert "└── c.txt" in tree_text


def test_exclude_from_tree_hides_excluded_entries(scenario_root):
    tree_text, records = walk(scenario_root, compile_patterns("*.txt", "b/*"), exclude_from_tree=True,
                              relative_paths=True)
    assert tree_text == "proj\n└── a.txt"
    assert display_paths(records) == ["a.txt"]


def test_ancestors_of_shown_files_are_always_listed(make_tree):
    root = make_tree({
        "docs": {"readme.md": "# docs\n"},
        "src": {"pkg": {"mod.py": "x = 1\n"}},
    })
    tree_text, records = walk(root, compile_patterns("*.py"), exclude_from_tree=True, relative_paths=True)
    assert tree_text == "proj\n└── src\n    └── pkg\n        └── mod.py"
    assert display_paths(records) == ["src/pkg/mod.py"]


def test_excluded_directory_is_still_descended(scenario_root):
    tree_text, records = walk(scenario_root, compile_patterns(None, "b"), exclude_from_tree=True,
                              relative_paths=True)
    assert "b/c.txt" in display_paths(records)
    assert "└── b" in tree_text


# --- Ordering and rendering ---

def test_pre_order_with_interleaved_sorting(make_tree):
    root = make_tree({
        "c.txt": "c",
        "a.txt": "top",
        "a": {"z.txt": "z", "b": {"y.txt": "y"}},
    })
    tree_text, records = walk(root, relative_paths=True)
    assert tree_text == "\n".join([
        "proj",
        "├── a",
        "│   ├── b",
        "│   │   └── y.txt",
        "│   └── z.txt",
        "├── a.txt",
        "└── c.txt",
    ])
    assert display_paths(records) == ["a/b/y.txt", "a/z.txt", "a.txt", "c.txt"]


def test_ascii_style(make_tree):
    root = make_tree({"a": {"x.txt": "x"}, "b.txt": "b"})
    tree_text, _ = walk(root, style="ascii")
    assert tree_text == "proj\n|-- a\n|   `-- x.txt\n`-- b.txt"


def test_walk_is_deterministic(project_root):
    first = walk(project_root, relative_paths=True, line_numbers=True)
    second = walk(project_root, relative_paths=True, line_numbers=True)
    assert first == second


def test_empty_directory_is_listed(make_tree):
    root = make_tree({"empty": {}, "a.py": "pass\n"})
    tree_text, _ = walk(root)
    assert tree_text == "proj\n├── a.py\n└── empty"


def test_binary_file_listed_without_record(project_root):
    tree_text, records = walk(project_root, relative_paths=True)
    assert "logo.png" in tree_text
    assert "assets/logo.png" not in display_paths(records)


def test_line_numbers_in_records(make_tree):
    root = make_tree({"three.txt": "first\nsecond\nthird"})
    _, records = walk(root, line_numbers=True, no_codeblock=True)
    assert records[0].content.splitlines() == ["   1 | first", "   2 | second", "   3 | third"]


def test_absolute_display_paths(make_tree):
    root = make_tree({"a.txt": "a"})
    _, records = walk(root)
    assert records[0].display_path == str((root.resolve() / "a.txt").absolute())


def test_hidden_entries_can_be_skipped(scenario_root):
    tree_text, records = walk(scenario_root, hidden=False, relative_paths=True)
    assert ".gitignore" not in tree_text
    assert display_paths(records) == ["a.txt", "b/c.txt"]


def test_deep_nesting_does_not_recurse(tmp_path):
    current = tmp_path / "deep"
    current.mkdir()
    root = current
    for _ in range(1100):
        current = current / "d"
        current.mkdir()
    (current / "leaf.txt").write_text("bottom\n", encoding="utf-8")

    tree_text, records = walk(root, relative_paths=True)
    assert tree_text.splitlines()[-1].endswith("└── leaf.txt")
    assert len(records) == 1


# --- Errors ---

def test_missing_root_raises(tmp_path):
    with pytest.raises(RootNotFoundError, match="not found"):
        walk(tmp_path / "nope")


def test_file_root_raises(tmp_path):
    target = tmp_path / "file.txt"
    target.write_text("x", encoding="utf-8")
    with pytest.raises(TraversalError, match="is not a directory"):
        walk(target)


@pytest.mark.skipif(sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
                    reason="directory permissions are not enforced")
def test_unreadable_directory_is_skipped(make_tree):
    root = make_tree({"locked": {"inner.txt": "secret"}, "open.txt": "visible"})
    locked = root / "locked"
    locked.chmod(0)
    try:
        walker = TreeWalker(root, relative_paths=True)
        tree_text, records = walker.walk()
    finally:
        locked.chmod(0o755)

    assert tree_text == "proj\n└── open.txt"
    assert display_paths(records) == ["open.txt"]
    assert [path for path, _ in walker.skipped_items] == [str(locked.resolve())]


@pytest.mark.skipif(not hasattr(os, "symlink") or sys.platform == "win32", reason="symlinks unavailable")
def test_symlinked_directory_is_a_leaf(make_tree):
    root = make_tree({"real": {"x.txt": "x"}})
    os.symlink(root / "real", root / "link")
    tree_text, records = walk(root, relative_paths=True)
    assert tree_text == "proj\n├── link\n└── real\n    └── x.txt"
    assert display_paths(records) == ["real/x.txt"]


@pytest.mark.skipif(sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
                    reason="file permissions are not enforced")
def test_unreadable_file_is_left_out(make_tree):
    root = make_tree({"a.txt": "a", "b.txt": "b"})
    (root / "b.txt").chmod(0)
    try:
        walker = TreeWalker(root, relative_paths=True)
        tree_text, records = walker.walk()
    finally:
        (root / "b.txt").chmod(0o644)

    assert tree_text == "proj\n└── a.txt"
    assert display_paths(records) == ["a.txt"]
    assert len(walker.skipped_items) == 1
    assert "permission denied" in walker.skipped_items[0][1]
