# tests/test_ignore.py
import pytest

from codeprompt_lib.codeprompt_errors import IgnoreFileParseError
from codeprompt_lib.codeprompt_ignore import (
    IgnoreResolver, IgnoreRuleSet, RuleKind, is_ignored, parse_rule, parse_rules,
)
from codeprompt_lib.codeprompt_walker import walk


def rule_set(directory, *lines):
    return IgnoreRuleSet(directory, tuple(parse_rules(lines, "<test>")))


# --- Rule parsing ---

@pytest.mark.parametrize("line", ["", "   ", "# a comment", "#*.py"])
def test_blank_and_comment_lines_give_no_rule(line):
    assert parse_rule(line) is None


@pytest.mark.parametrize("line, negated, dir_only, kind", [
    (".git/", False, True, RuleKind.LITERAL),
    ("!keep.log", True, False, RuleKind.LITERAL),
    ("*.log", False, False, RuleKind.GLOB),
    ("build-[0-9]/", False, True, RuleKind.GLOB),
    ("**/tmp", False, False, RuleKind.RECURSIVE_GLOB),
])
def test_rule_attributes(line, negated, dir_only, kind):
    rule = parse_rule(line)
    assert rule is not None
    assert rule.pattern == line
    assert rule.negated is negated
    assert rule.dir_only is dir_only
    assert rule.kind is kind


@pytest.mark.parametrize("line", ["!", "\\"])
def test_malformed_line_raises_parse_error(line):
    with pytest.raises(IgnoreFileParseError) as excinfo:
        parse_rule(line, ".gitignore", 3)
    assert excinfo.value.line_no == 3
    assert excinfo.value.line == line


def test_malformed_lines_are_skipped_during_walk(make_tree):
    root = make_tree({
        ".gitignore": "*.log\n!\n\\\n/build/\n",
        "app.log": "noise",
        "build": {"out.o": "obj"},
        "main.py": "print(1)\n",
    })
    warnings = []

    def log_func(message, level="info"):
        if level == "warning":
            warnings.append(message)

    tree_text, records = walk(root, hidden=False, relative_paths=True, log_func=log_func)

    assert tree_text == "proj\n└── main.py"
    assert [r.display_path for r in records] == ["main.py"]
    assert len(warnings) == 2
    assert all("Skipping ignore rule" in w and ".gitignore:" in w for w in warnings)


# --- Verdicts ---

def test_last_matching_rule_wins_within_a_set():
    stack = (rule_set("", "*.log", "!keep.log"),)
    assert is_ignored("a.log", False, stack)
    assert not is_ignored("keep.log", False, stack)
    assert not is_ignored("x/keep.log", False, stack)
    assert not is_ignored("notes.txt", False, stack)


def test_dir_only_rule_skips_files():
    stack = (rule_set("", "build/"),)
    assert is_ignored("build", True, stack)
    assert is_ignored("src/build", True, stack)
    assert not is_ignored("build", False, stack)


def test_anchored_rule_only_matches_at_its_directory():
    stack = (rule_set("", "/dist"),)
    assert is_ignored("dist", True, stack)
    assert not is_ignored("pkg/dist", True, stack)


def test_deeper_set_overrides_shallower():
    stack = (rule_set("", "*.txt"), rule_set("sub", "!important.txt"))
    assert not is_ignored("sub/important.txt", False, stack)
    assert is_ignored("sub/other.txt", False, stack)
    assert is_ignored("important.txt", False, stack)


def test_rules_are_relative_to_their_directory():
    stack = (rule_set("sub", "/local.cfg"),)
    assert is_ignored("sub/local.cfg", False, stack)
    assert not is_ignored("local.cfg", False, stack)
    assert not is_ignored("other/local.cfg", False, stack)


def test_empty_stack_ignores_nothing():
    assert not is_ignored("anything", False, ())


# --- Resolver ---

def test_resolver_loads_both_ignore_files(make_tree):
    root = make_tree({".gitignore": "*.log\n", ".ignore": "secrets/\n"})
    resolver = IgnoreResolver()
    stack = resolver.extend((), root, "")

    assert len(stack) == 1
    assert [r.pattern for r in stack[0].rules] == ["*.log", "secrets/"]
    assert resolver.is_ignored("secrets", True, stack)
    assert resolver.is_ignored("app.log", False, stack)


def test_resolver_without_ignore_files_keeps_parent_stack(make_tree):
    root = make_tree({"sub": {"a.txt": "a"}, ".gitignore": "*.log\n"})
    resolver = IgnoreResolver()
    parent = resolver.extend((), root, "")
    child = resolver.extend(parent, root / "sub", "sub")
    assert child is parent


def test_extend_does_not_mutate_parent(make_tree):
    root = make_tree({".gitignore": "*.log\n", "sub": {".gitignore": "!keep.log\n"}})
    resolver = IgnoreResolver()
    parent = resolver.extend((), root, "")
    child = resolver.extend(parent, root / "sub", "sub")

    assert len(parent) == 1
    assert len(child) == 2
    assert is_ignored("sub/keep.log", False, parent)
    assert not is_ignored("sub/keep.log", False, child)
