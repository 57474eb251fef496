# tests/test_scanner.py
from codeprompt_lib.codeprompt_interactive import directories_to_patterns, extensions_to_patterns
from codeprompt_lib.codeprompt_scanner import NO_EXTENSION, scan_directory


def test_scan_counts_file_extensions(project_root):
    counts = scan_directory(project_root, "file", 1000, show_hidden=False)
    assert counts["py"] == 3
    assert counts["md"] == 1
    assert counts["png"] == 1


def test_scan_counts_directory_names(make_tree):
    root = make_tree({"a": {"build": {}}, "b": {"build": {"x.o": "o"}}, "docs": {}})
    counts = scan_directory(root, "dir", 1000, show_hidden=False)
    assert counts == {"a": 1, "b": 1, "build": 2, "docs": 1}


def test_scan_honours_ignore_files_and_hidden_flag(make_tree):
    root = make_tree({
        ".gitignore": "dist/\n",
        "dist": {"bundle.js": "x"},
        ".cache": {"c.tmp": "x"},
        "Makefile": "all:\n",
    })
    assert scan_directory(root, "file", 1000, show_hidden=False) == {NO_EXTENSION: 1}
    with_hidden = scan_directory(root, "file", 1000, show_hidden=True)
    assert with_hidden["tmp"] == 1
    assert "js" not in with_hidden


def test_scan_stops_at_max_items(make_tree):
    root = make_tree({f"f{i}.txt": "x" for i in range(10)})
    assert sum(scan_directory(root, "file", 4, show_hidden=False).values()) == 4


def test_selection_to_patterns():
    assert extensions_to_patterns(["py", NO_EXTENSION, "md"]) == ["*.py", "*.md"]
    assert directories_to_patterns(["build", "node_modules"]) == ["build/", "node_modules/"]
