# -*- coding: utf-8 -*-
"""
Command-line interface (CLI) for CodePrompt.
Handles argument parsing and runs prompt generation.
"""

import sys
import argparse
import traceback
from typing import Any, Dict, List, Optional, Tuple

from . import __version__
from .codeprompt_config import DEFAULT_ENCODING, DEFAULT_STYLE, save_config, saved_cli_defaults
from .codeprompt_core import CodePrompt
from .codeprompt_errors import CodePromptError
from .codeprompt_interactive import interactive_supported, pick_available, run_interactive_setup
from .codeprompt_styling import Colors, TreeStyle
from .codeprompt_tokens import TIKTOKEN_ENCODINGS


# --- Argument Parsing ---
def parse_variable(text: str) -> Tuple[str, str]:
    """argparse type for --var: 'key=value' with an identifier key."""
    key, sep, value = text.partition('=')
    key = key.strip()
    if not sep or not key.isidentifier():
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE with an identifier key, got '{text}'")
    return key, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codeprompt",
        description=f"CodePrompt v{__version__} - Turn a codebase into a single LLM prompt.",
        formatter_class=argparse.RawTextHelpFormatter # Preserve formatting in help
    )

    # --- Positional Argument ---
    parser.add_argument(
        'path',
        nargs='?',
        default=None,
        help="Path to the codebase directory.\nIf omitted, interactive setup is started (requires 'pick')."
    )
    parser.add_argument(
        '-i', '--interactive',
        action='store_true',
        help="Choose the options interactively." if pick_available
        else "Choose the options interactively.\n(Requires 'pick' library - NOT FOUND)"
    )

    # --- Filtering Group ---
    filter_group = parser.add_argument_group('Filtering Options')
    filter_group.add_argument(
        '--include',
        metavar='PATTERNS',
        default=None,
        help="Comma-separated glob patterns of files to include (e.g. '*.py,src/**/*.js')."
    )
    filter_group.add_argument(
        '--exclude',
        metavar='PATTERNS',
        default=None,
        help="Comma-separated glob patterns of files/directories to exclude (e.g. '*.log,build/')."
    )
    filter_group.add_argument(
        '--include-priority',
        action='store_true',
        default=False,
        help="When a path matches both an include and an exclude pattern, include it."
    )
    filter_group.add_argument(
        '--exclude-from-tree',
        action='store_true',
        default=False,
        help="Hide excluded paths from the source tree instead of listing them."
    )
    filter_group.add_argument(
        '--hidden',
        action='store_true',
        default=False,
        help="Include hidden files and directories (those starting with '.')."
    )

    # --- Formatting Group ---
    format_group = parser.add_argument_group('Formatting Options')
    format_group.add_argument(
        '-l', '--line-number',
        action='store_true',
        default=False,
        help="Prefix file content lines with line numbers."
    )
    format_group.add_argument(
        '--relative-paths',
        action='store_true',
        default=False,
        help="Use paths relative to the codebase directory instead of absolute paths."
    )
    format_group.add_argument(
        '--no-codeblock',
        action='store_true',
        default=False,
        help="Do not wrap file contents in fenced code blocks."
    )
    format_group.add_argument(
        '--style',
        default=DEFAULT_STYLE,
        choices=list(TreeStyle.AVAILABLE.keys()),
        help=f"Source tree drawing style (Default: {DEFAULT_STYLE})."
    )

    # --- Git Group ---
    git_group = parser.add_argument_group('Git Options')
    git_group.add_argument(
        '-d', '--diff',
        action='store_true',
        default=False,
        help="Include the staged git diff."
    )
    git_group.add_argument(
        '--git-diff-branch',
        metavar='BRANCH_A,BRANCH_B',
        default=None,
        help="Include the git diff between two branches."
    )
    git_group.add_argument(
        '--git-log-branch',
        metavar='BRANCH_A,BRANCH_B',
        default=None,
        help="Include the git log between two branches."
    )

    # --- Output Group ---
    output_group = parser.add_argument_group('Output Options')
    output_group.add_argument(
        '-t', '--template',
        metavar='FILE',
        default=None,
        help="Custom Handlebars template file ({{name}}, {{#each files}}...{{/each}})."
    )
    output_group.add_argument(
        '-o', '--output',
        metavar='FILE',
        default=None,
        help="Write the prompt to this file."
    )
    output_group.add_argument(
        '--no-clipboard',
        action='store_true',
        default=False,
        help="Do not copy the prompt to the clipboard."
    )
    output_group.add_argument(
        '--json',
        action='store_true',
        dest='json_output',
        default=False,
        help="Print a JSON document (prompt, directory name, token count, files) instead."
    )
    output_group.add_argument(
        '--tokens',
        action='store_true',
        default=False,
        help="Display the token count of the generated prompt."
    )
    output_group.add_argument(
        '-c', '--encoding',
        default=DEFAULT_ENCODING,
        choices=list(TIKTOKEN_ENCODINGS.keys()),
        help=f"Tokenizer encoding for the token count (Default: {DEFAULT_ENCODING})."
    )
    output_group.add_argument(
        '--var',
        metavar='KEY=VALUE',
        action='append',
        type=parse_variable,
        default=None,
        help="Set a custom template variable (repeatable)."
    )

    # --- Behavior Group ---
    behavior_group = parser.add_argument_group('Behavior Options')
    behavior_group.add_argument(
        '-v', '--verbose',
        action='store_true',
        default=False,
        help="Show verbose logging messages during processing."
    )
    behavior_group.add_argument(
        '--no-prompt',
        action='store_false',
        dest='interactive_prompts',
        default=True,
        help="Never ask for undefined template variables (they become empty)."
    )
    behavior_group.add_argument(
        '--save-config',
        action='store_true',
        default=False,
        help="Save the current formatting/output options as defaults for future runs."
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'CodePrompt v{__version__}'
    )
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parses command-line arguments; saved user defaults apply unless overridden."""
    parser = build_parser()
    parser.set_defaults(**saved_cli_defaults())
    return parser.parse_args(argv)


CONFIG_KEYS = (
    'include', 'exclude', 'include_priority', 'exclude_from_tree', 'hidden',
    'line_number', 'relative_paths', 'no_codeblock', 'style',
    'diff', 'git_diff_branch', 'git_log_branch',
    'template', 'output', 'no_clipboard', 'json_output', 'tokens', 'encoding',
    'verbose', 'interactive_prompts',
)


def config_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    config = {key: getattr(args, key) for key in CONFIG_KEYS}
    config['root_dir'] = args.path
    config['user_variables'] = dict(args.var or [])
    return config


def _error(message: str) -> None:
    print(f"{Colors.RED}{message}{Colors.RESET}", file=sys.stderr)


# --- Main Execution Logic ---
def main(argv: Optional[List[str]] = None) -> int:
    """Main function of the prompt generator. Returns the process exit code."""
    try:
        args = parse_args(argv)
        config = config_from_args(args)

        use_interactive = args.interactive or args.path is None
        if use_interactive:
            if not interactive_supported():
                _error("Error: No directory specified.")
                print("Provide a directory path, or run interactively in a terminal with 'pick' installed.",
                      file=sys.stderr)
                return 1
            interactive_config = run_interactive_setup(args.path)
            if not interactive_config: # Setup was cancelled
                return 0
            config.update(interactive_config)

        if args.save_config:
            save_config(config)

        try:
            CodePrompt(**config).run()
        except CodePromptError as e:
            _error(f"Error: {e}")
            return 1
        except OSError as e:
            _error(f"Output Error: {e}")
            return 1
        except Exception:
            _error("An unexpected error occurred during execution:")
            print(traceback.format_exc(), file=sys.stderr)
            return 1
        return 0

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == '__main__':
    sys.exit(main())
