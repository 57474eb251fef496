# -*- coding: utf-8 -*-
"""
Prompt rendering for CodePrompt.

The default layout is assembled line by line. Custom templates are Handlebars
files rendered with pybars3: the data model keys are top-level names and
``files`` is the list of file records, so a template can lay out each file
itself (``{{#each files}}{{#if code}}...{{/if}}{{/each}}``). Output is plain
text, never HTML-escaped.
"""

import re
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import pybars

from .codeprompt_errors import ConfigError

# Names that are always present in the data model
BUILTIN_VARIABLES = (
    "absolute_code_path", "source_tree", "files",
    "git_diff", "git_diff_branch", "git_log_branch",
)

# Names resolved inside blocks (file record fields, Handlebars keywords)
BLOCK_IDENTIFIERS = ("path", "code", "extension", "char_count", "fenced", "this", "else")

# Simple {{expression}}: not a block, comment, partial or triple-stash
_SIMPLE_MUSTACHE = re.compile(r"(?<!\{)\{\{(?![{#/!>^&~])(?!\s*else\s*\}\})\s*([^{}]+?)\s*\}\}(?!\})")
_VARIABLE = re.compile(r"\{\{\{?\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}?\}\}")

_compiler = pybars.Compiler()


def load_template(template_path: Union[str, Path]) -> str:
    try:
        return Path(template_path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read custom template file '{template_path}': {e}") from e


# --- Default Template ---

def render_default(data: Dict[str, Any]) -> str:
    """Renders the built-in prompt layout."""
    lines: List[str] = [
        f"Project Path: {data.get('absolute_code_path', '')}",
        "",
        "Source Tree:",
        "",
        "```",
        data.get("source_tree", ""),
        "```",
        "",
    ]
    for file in data.get("files", []):
        if not file.get("code"):
            continue
        lines.extend([f"`{file['path']}`:", "", file["code"], ""])

    sections = (
        ("git_diff", "Git Diff:"),
        ("git_diff_branch", "Git Diff between branches:"),
        ("git_log_branch", "Git Log between branches:"),
    )
    for key, title in sections:
        if data.get(key):
            lines.extend([title, data[key].rstrip("\n"), ""])

    return "\n".join(lines)


# --- Custom Templates ---

def template_variables(template_text: str) -> List[str]:
    """Plain placeholder names used by a template, in order of first use."""
    names: List[str] = []
    for match in _VARIABLE.finditer(template_text):
        name = match.group(1)
        if name not in names:
            names.append(name)
    return names


def handle_undefined_variables(
    data: Dict[str, Any],
    template_text: str,
    ask: Optional[Callable[[str], str]] = None,
) -> List[str]:
    """
    Fills template variables missing from ``data``.

    Each missing variable is asked for through ``ask`` (typically ``input``);
    without a prompt function missing variables become empty strings.

    Returns:
        The names that were undefined.
    """
    undefined = [
        name for name in template_variables(template_text)
        if name not in data and name not in BUILTIN_VARIABLES and name not in BLOCK_IDENTIFIERS
    ]
    for name in undefined:
        data[name] = ask(f"Enter value for '{name}': ") if ask else ""
    return undefined


def unescape_placeholders(template_text: str) -> str:
    """Turns every simple ``{{expr}}`` into ``{{{expr}}}`` so values are inserted verbatim."""
    return _SIMPLE_MUSTACHE.sub(r"{{{\1}}}", template_text)


def _template_context(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: ("" if value is None else value) for key, value in data.items()}


def render_template(template_text: Optional[str], data: Dict[str, Any]) -> str:
    """
    Renders the prompt. ``None`` selects the default layout.

    Raises:
        ConfigError: The template is not valid Handlebars.
    """
    if template_text is None:
        return render_default(data)
    try:
        template = _compiler.compile(unescape_placeholders(template_text))
    except pybars.PybarsError as e:
        raise ConfigError(f"Invalid template: {e}") from e
    return str(template(_template_context(data)))
