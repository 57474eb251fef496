# -*- coding: utf-8 -*-
"""
Configuration settings, constants, and saved user defaults for CodePrompt.
"""

import os
import json
from pathlib import Path
from typing import Optional, Dict, Any, Tuple

# --- Constants ---

# Ignore files honoured in every directory, in increasing precedence order
IGNORE_FILE_NAMES: Tuple[str, ...] = (".gitignore", ".ignore")

DEFAULT_ENCODING = "cl100k"
DEFAULT_STYLE = "unicode"

# Width of the right-aligned line number column
LINE_NUMBER_WIDTH = 4

# Keys of the user config that may be saved and reused as CLI defaults.
# Paths and per-run patterns are context-dependent and never saved.
SAVE_KEYS = {
    'include_priority', 'exclude_from_tree', 'line_number', 'relative_paths',
    'no_codeblock', 'no_clipboard', 'tokens', 'encoding', 'hidden', 'style',
    'template', 'verbose',
}


def get_config_path() -> Path:
    """Location of the user config file (CODEPROMPT_CONFIG overrides it)."""
    override = os.environ.get("CODEPROMPT_CONFIG")
    if override:
        return Path(override)
    return Path.home() / ".codeprompt_config.json"


# --- Default Directory Functions ---
def get_saved_config() -> Dict[str, Any]:
    """Get all saved configuration options"""
    config_file = get_config_path()
    try:
        if config_file.exists():
            data = json.loads(config_file.read_text(encoding='utf-8'))
            if isinstance(data, dict):
                return data
    except (OSError, ValueError):
        pass # Ignore errors reading config
    return {}

def get_default_dir() -> Optional[str]:
    """Get stored default directory from user config"""
    return get_saved_config().get('default_dir')

def _write_config(config_data: Dict[str, Any]) -> None:
    config_file = get_config_path()
    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(json.dumps(config_data, indent=2), encoding='utf-8')

def set_default_dir(directory: str) -> None:
    """Store default directory in user config"""
    try:
        config_data = get_saved_config()
        config_data['default_dir'] = str(Path(directory).resolve())
        _write_config(config_data)
    except OSError as e:
        print(f"Warning: Error saving default directory: {e}")

def save_config(config_to_save: Dict[str, Any]) -> None:
    """Save configuration settings for future use (only whitelisted keys)."""
    try:
        existing_config = get_saved_config()
        for key in SAVE_KEYS:
            if key in config_to_save:
                existing_config[key] = config_to_save[key]
        _write_config(existing_config)
    except OSError as e:
        print(f"Warning: Error saving configuration: {e}")

def saved_cli_defaults() -> Dict[str, Any]:
    """Saved values usable as argparse defaults."""
    return {k: v for k, v in get_saved_config().items() if k in SAVE_KEYS}
