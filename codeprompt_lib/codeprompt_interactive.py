# -*- coding: utf-8 -*-
"""
Interactive setup for CodePrompt, using the 'pick' library for selections
(directory, file types to include, directories to exclude).
"""

import sys
from pathlib import Path
from typing import Any, Counter as CounterType, Dict, List, Optional

# --- Optional Dependency: pick ---
pick_module: Optional[Any] = None
pick_available: bool = False
try:
    import pick as pick_lib
    pick_module = pick_lib
    pick_available = True
except ImportError:
    pass # Interactive mode is reported as unavailable by the CLI

from . import __version__
from .codeprompt_config import get_default_dir, save_config, set_default_dir
from .codeprompt_scanner import NO_EXTENSION, scan_directory
from .codeprompt_styling import Colors
from .codeprompt_utils import make_logger

SCAN_MAX_ITEMS = 20000


def ask_yes_no(question: str, default: bool = False) -> bool:
    hint = f"[{Colors.GREEN}Y{Colors.RESET}/n]" if default else f"[y/{Colors.GREEN}N{Colors.RESET}]"
    answer = input(f"{question} {hint}: ").strip().lower()
    if not answer:
        return default
    return answer in ("y", "yes")


# --- Interactive Directory Selection ---
def select_directory_interactive(start_dir: Optional[str] = None) -> Optional[str]:
    """Simple directory browser. Returns the chosen directory, or None when cancelled."""
    if not pick_available or pick_module is None:
        print("Interactive directory selection unavailable ('pick' library missing).")
        return None

    current_path = Path(start_dir).resolve() if start_dir and Path(start_dir).is_dir() else Path.cwd()
    try:
        while True:
            options = []
            if current_path.parent != current_path: # Not at filesystem root
                options.append(pick_module.Option(".. (Parent Directory)", str(current_path.parent)))
            try:
                subdirs = sorted((d for d in current_path.iterdir() if d.is_dir()), key=lambda d: d.name.lower())
                options.extend(pick_module.Option(f"{d.name}/", str(d)) for d in subdirs)
            except OSError as e:
                print(f"{Colors.RED}Error listing '{current_path}': {e}{Colors.RESET}")
            options.append(pick_module.Option(f"Select Current: '{current_path.name}'", "__SELECT__"))
            options.append(pick_module.Option("Cancel Selection", "__CANCEL__"))

            picker = pick_module.Picker(options, f"Directory Browser - Current: {current_path}", indicator="=>")
            selected, _ = picker.start()
            if selected.value == "__CANCEL__":
                return None
            if selected.value == "__SELECT__":
                return str(current_path)
            current_path = Path(selected.value)
    except KeyboardInterrupt:
        print("\nDirectory selection cancelled.")
        return None


# --- Generic Interactive Selection (file types, directory names) ---
def general_interactive_selection(
    items_counter: CounterType[str],
    item_type_label: str, # e.g., "file type", "directory name"
    prompt_title: str,
) -> List[str]:
    """Multi-select over the scanned items, most frequent first."""
    if not pick_available or pick_module is None:
        print(f"Interactive {item_type_label} selection unavailable ('pick' library missing).")
        return []
    if not items_counter:
        print(f"No {item_type_label}s found to select.")
        return []

    sorted_items = sorted(items_counter.items(), key=lambda item: (-item[1], item[0]))
    options = [pick_module.Option(f"{name} ({count} occurrences)", name) for name, count in sorted_items]
    title = f"{prompt_title}\nControls: Up/Down Navigate | Space Toggle | Enter Confirm"

    try:
        picker = pick_module.Picker(options, title, indicator="*", multiselect=True, min_selection_count=0)
        selected = picker.start()
    except KeyboardInterrupt:
        print(f"\n{item_type_label.capitalize()} selection cancelled.")
        return []

    names = [option.value for option, _ in selected]
    print(f"{Colors.GREEN}Selected {len(names)} {item_type_label}s:{Colors.RESET} {', '.join(names) or 'None'}")
    return names


def extensions_to_patterns(extensions: List[str]) -> List[str]:
    return [f"*.{ext}" for ext in extensions if ext != NO_EXTENSION]


def directories_to_patterns(names: List[str]) -> List[str]:
    # Trailing slash: the directory and everything below it, at any depth
    return [f"{name}/" for name in names]


# --- Interactive Setup Workflow ---
def run_interactive_setup(start_dir: Optional[str] = None) -> Dict[str, Any]:
    """
    Guides the user through the prompt options.
    Returns keyword arguments for CodePrompt, or an empty dict if cancelled.
    """
    print(f"\n--- {Colors.BOLD}CodePrompt v{__version__} Interactive Setup{Colors.RESET} ---")
    config: Dict[str, Any] = {}
    default_dir = get_default_dir()

    # Step 1: Directory
    print(f"\n{Colors.BOLD}Step 1: Directory Selection{Colors.RESET}")
    if start_dir:
        config['root_dir'] = start_dir
    else:
        choices = [pick_module.Option(f"Current directory: {Path.cwd()}", str(Path.cwd()))]
        if default_dir:
            choices.append(pick_module.Option(f"Default directory: {default_dir}", default_dir))
        choices.append(pick_module.Option("Browse file system", "__SELECT__"))
        choices.append(pick_module.Option("Enter path manually", "__MANUAL__"))
        choices.append(pick_module.Option("Cancel setup", "__CANCEL__"))
        choice, _ = pick_module.Picker(choices, "Choose directory source:", indicator="=>").start()
        if choice.value == "__CANCEL__":
            return {}
        if choice.value == "__MANUAL__":
            while True:
                entered = input("Directory path (empty to cancel): ").strip()
                if not entered:
                    return {}
                if Path(entered).expanduser().is_dir():
                    config['root_dir'] = str(Path(entered).expanduser())
                    break
                print(f"{Colors.RED}Not a directory: '{entered}'{Colors.RESET}")
        elif choice.value == "__SELECT__":
            selected_dir = select_directory_interactive(default_dir)
            if selected_dir is None:
                return {}
            config['root_dir'] = selected_dir
        else:
            config['root_dir'] = choice.value
    print(f"Using directory: {Colors.CYAN}{config['root_dir']}{Colors.RESET}")
    if config['root_dir'] != default_dir and ask_yes_no("Set it as default for future runs?"):
        set_default_dir(config['root_dir'])

    # Step 2: Filtering
    print(f"\n{Colors.BOLD}Step 2: Filtering{Colors.RESET}")
    config['hidden'] = ask_yes_no("Include hidden files and directories (starting with '.')?")
    root_path = Path(config['root_dir'])
    scan_log = make_logger(verbose=False, colorize=True)
    includes: List[str] = []
    excludes: List[str] = []
    if ask_yes_no("Scan the directory to choose file types to include?", default=True):
        file_types = scan_directory(root_path, "file", SCAN_MAX_ITEMS, config['hidden'], scan_log)
        includes = extensions_to_patterns(general_interactive_selection(
            file_types, "file type", "Select file types to INCLUDE (none selected = all files):"))
    if ask_yes_no("Scan the directory to choose directories to exclude?"):
        dir_names = scan_directory(root_path, "dir", SCAN_MAX_ITEMS, config['hidden'], scan_log)
        excludes = directories_to_patterns(general_interactive_selection(
            dir_names, "directory name", "Select directory names to EXCLUDE:"))
    config['include'] = ",".join(includes) or None
    config['exclude'] = ",".join(excludes) or None
    if includes and excludes:
        config['include_priority'] = ask_yes_no("When a path matches both, should include win?")
    config['exclude_from_tree'] = ask_yes_no("Hide excluded paths from the source tree?")

    # Step 3: Formatting and output
    print(f"\n{Colors.BOLD}Step 3: Formatting and Output{Colors.RESET}")
    config['line_number'] = ask_yes_no("Add line numbers to file contents?")
    config['relative_paths'] = ask_yes_no("Use paths relative to the directory?", default=True)
    config['no_codeblock'] = not ask_yes_no("Wrap file contents in code blocks?", default=True)
    config['tokens'] = ask_yes_no("Display the token count of the prompt?")
    config['no_clipboard'] = not ask_yes_no("Copy the prompt to the clipboard?", default=True)
    config['output'] = input("Write the prompt to a file (empty for none): ").strip() or None

    # Summary
    print(f"\n{Colors.MAGENTA}--- Configuration Summary ---{Colors.RESET}")
    for key, value in config.items():
        print(f"  {key}: {value}")
    if input("\nPress Enter to generate with these settings, or 'q' to quit: ").strip().lower() == 'q':
        print("Setup cancelled.")
        return {}
    if ask_yes_no("Save these settings (excluding directory and patterns) as defaults?"):
        save_config(config)
        print("Configuration saved.")
    return config


def interactive_supported() -> bool:
    return pick_available and sys.stdin.isatty()
