# -*- coding: utf-8 -*-
"""
Core logic for CodePrompt: the class that turns a directory into a prompt by
orchestrating traversal, git data, template rendering, token counting and the
output sinks.
"""

import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pyperclip

from .codeprompt_config import DEFAULT_STYLE
from .codeprompt_errors import RootNotFoundError
from .codeprompt_git import get_git_diff, get_git_diff_between_branches, get_git_log, parse_branch_pair
from .codeprompt_output import copy_to_clipboard, write_to_file
from .codeprompt_patterns import compile_patterns
from .codeprompt_records import FileRecord
from .codeprompt_styling import Colors, status_prefix
from .codeprompt_template import handle_undefined_variables, load_template, render_template
from .codeprompt_tokens import count_tokens, get_model_info, normalize_encoding
from .codeprompt_utils import format_bytes, log_message
from .codeprompt_walker import TreeWalker


class CodePrompt:
    """
    Generates an LLM prompt (source tree + file contents + optional git data)
    for one directory.
    """

    def __init__(
            self,
            root_dir: str = ".",
            # Filtering
            include: Optional[str] = None, exclude: Optional[str] = None,
            include_priority: bool = False, exclude_from_tree: bool = False,
            hidden: bool = False,
            # Formatting
            line_number: bool = False, no_codeblock: bool = False, relative_paths: bool = False,
            style: str = DEFAULT_STYLE,
            # Git
            diff: bool = False, git_diff_branch: Optional[str] = None, git_log_branch: Optional[str] = None,
            # Output
            template: Optional[str] = None, output: Optional[str] = None,
            no_clipboard: bool = False, json_output: bool = False,
            tokens: bool = False, encoding: Optional[str] = None,
            # Behavior
            verbose: bool = False, colorize: bool = True, interactive_prompts: bool = True,
            user_variables: Optional[Dict[str, str]] = None,
    ):
        root_path = Path(root_dir)
        if not root_path.exists():
            raise RootNotFoundError(root_dir, "not found")
        if not root_path.is_dir():
            raise RootNotFoundError(root_dir, "is not a directory")
        self.root_dir = root_path.resolve()

        # --- Store settings ---
        # Options are validated here so a bad pattern or branch pair fails before the walk
        self.include = include
        self.exclude = exclude
        self.pattern_set = compile_patterns(include, exclude)
        self.include_priority = include_priority
        self.exclude_from_tree = exclude_from_tree
        self.hidden = hidden

        self.line_number = line_number
        self.no_codeblock = no_codeblock
        self.relative_paths = relative_paths
        self.style = style

        self.diff = diff
        self.diff_branches = parse_branch_pair(git_diff_branch) if git_diff_branch else None
        self.log_branches = parse_branch_pair(git_log_branch) if git_log_branch else None

        self.template_path = template
        self.template_text = load_template(template) if template else None
        self.output = output
        self.no_clipboard = no_clipboard
        self.json_output = json_output
        self.tokens = tokens
        self.encoding = normalize_encoding(encoding)

        self.verbose = verbose
        self.colorize = colorize and sys.stdout.isatty()
        self.interactive_prompts = interactive_prompts and sys.stdin.isatty()
        self.user_variables = dict(user_variables or {})

        # --- Internal State ---
        self.files: List[FileRecord] = []
        self.source_tree: Optional[str] = None
        self.skipped_items: List = []
        self.token_count: Optional[int] = None

        # Configure logging function for this instance
        self._log = lambda msg, level="info": log_message(msg, level, self.verbose, self.colorize)

        self._log(f"Initialized CodePrompt for: {self.root_dir}", "info")
        if self.verbose:
            self._log(f"  Include Patterns: {self.pattern_set.include_texts}", "debug")
            self._log(f"  Exclude Patterns: {self.pattern_set.exclude_texts}", "debug")
            self._log(f"  Include Priority: {self.include_priority}", "debug")
            self._log(f"  Exclude From Tree: {self.exclude_from_tree}", "debug")
            self._log(f"  Hidden Entries: {self.hidden}", "debug")
            self._log(f"  Line Numbers: {self.line_number}, Code Blocks: {not self.no_codeblock}, "
                      f"Relative Paths: {self.relative_paths}", "debug")
            self._log(f"  Template: {self.template_path or 'Default'}", "debug")
            self._log(f"  Encoding: {self.encoding}", "debug")

    # --- Data Model ---
    def walk(self) -> None:
        """Builds the source tree and file records (cached on the instance)."""
        walker = TreeWalker(
            self.root_dir, self.pattern_set, self.include_priority, self.line_number,
            self.relative_paths, self.exclude_from_tree, self.no_codeblock,
            hidden=self.hidden, style=self.style, log_func=self._log,
        )
        self.source_tree, self.files = walker.walk()
        self.skipped_items = walker.skipped_items
        self._log(f"Collected {len(self.files)} files ({format_bytes(walker.total_chars)} of content)", "info")

    def build_data(self) -> Dict[str, Any]:
        """Assembles the data model handed to the template."""
        if self.source_tree is None:
            self.walk()

        git_diff = get_git_diff(self.root_dir, self._log) if self.diff else ""
        git_diff_branch = (
            get_git_diff_between_branches(self.root_dir, *self.diff_branches, log_func=self._log)
            if self.diff_branches else ""
        )
        git_log_branch = (
            get_git_log(self.root_dir, *self.log_branches, log_func=self._log)
            if self.log_branches else ""
        )

        data: Dict[str, Any] = dict(self.user_variables)
        data.update({
            "absolute_code_path": self.root_dir.name or str(self.root_dir),
            "source_tree": self.source_tree,
            "files": [record.to_dict() for record in self.files],
            "git_diff": git_diff,
            "git_diff_branch": git_diff_branch,
            "git_log_branch": git_log_branch,
        })
        return data

    # --- Rendering ---
    def render(self, data: Optional[Dict[str, Any]] = None) -> str:
        if data is None:
            data = self.build_data()
        if self.template_text is not None:
            ask: Optional[Callable[[str], str]] = input if self.interactive_prompts else None
            undefined = handle_undefined_variables(data, self.template_text, ask)
            if undefined:
                self._log(f"Template variables filled at runtime: {', '.join(undefined)}", "info")
        return render_template(self.template_text, data)

    def generate_prompt(self) -> str:
        """Renders the prompt, or the JSON document describing it when json_output is set."""
        rendered = self.render()

        if self.tokens or self.json_output:
            self.token_count = count_tokens(rendered, self.encoding)

        if self.json_output:
            return json.dumps({
                "prompt": rendered,
                "directory_name": self.root_dir.name or str(self.root_dir),
                "token_count": self.token_count,
                "model_info": get_model_info(self.encoding),
                "files": [record.display_path for record in self.files],
            }, indent=2, ensure_ascii=False)
        return rendered

    # --- Output ---
    def _print_token_count(self) -> None:
        count = f"{Colors.BOLD}{Colors.YELLOW}{self.token_count}{Colors.RESET}" if self.colorize else str(self.token_count)
        print(f"{status_prefix('i', Colors.BLUE, self.colorize)} Token count: {count}, "
              f"Model info: {get_model_info(self.encoding)}")

    def _copy_to_clipboard(self, text: str) -> bool:
        red = Colors.RED if self.colorize else ""
        green = Colors.GREEN if self.colorize else ""
        reset = Colors.RESET if self.colorize else ""
        try:
            copy_to_clipboard(text)
        except pyperclip.PyperclipException as e:
            print(f"{status_prefix('!', Colors.RED, self.colorize)} {red}Failed to copy to clipboard: {e}{reset}",
                  file=sys.stderr)
            return False
        print(f"{status_prefix('✓', Colors.GREEN, self.colorize)} {green}Copied to clipboard successfully.{reset}",
              file=sys.stderr)
        return True

    def run(self) -> str:
        """Generates the prompt and sends it to the configured sinks. Returns it."""
        prompt = self.generate_prompt()

        if self.tokens and not self.json_output:
            self._print_token_count()

        delivered = False
        if self.json_output:
            print(prompt)
            delivered = True
        elif not self.no_clipboard:
            delivered = self._copy_to_clipboard(prompt)

        if self.output:
            written = write_to_file(self.output, prompt)
            self._log(f"Prompt written to file: {written}", "success")
            delivered = True

        if not delivered:
            print(prompt)

        if self.skipped_items:
            self._log(f"{len(self.skipped_items)} entries skipped due to errors", "warning")
        return prompt
