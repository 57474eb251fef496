# -*- coding: utf-8 -*-
"""
Styling definitions (terminal colors, tree connector styles) for CodePrompt.
"""

from typing import Dict

# --- Styling ---

class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    GRAY = "\033[90m"

class TreeStyle:
    """Connector glyphs used when rendering the source tree."""
    ASCII: Dict[str, str] = {"branch": "|   ", "tee": "|-- ", "last_tee": "`-- ", "empty": "    "}
    UNICODE: Dict[str, str] = {"branch": "│   ", "tee": "├── ", "last_tee": "└── ", "empty": "    "}
    ROUNDED: Dict[str, str] = {"branch": "│   ", "tee": "├── ", "last_tee": "╰── ", "empty": "    "}

    AVAILABLE: Dict[str, Dict[str, str]] = {
        "unicode": UNICODE,
        "ascii": ASCII,
        "rounded": ROUNDED,
    }

    @staticmethod
    def get_style(style_name: str) -> Dict[str, str]:
        """Gets the style config, defaulting to unicode."""
        return dict(TreeStyle.AVAILABLE.get((style_name or "").lower(), TreeStyle.UNICODE))


def status_prefix(symbol: str, color: str, colorize: bool = True) -> str:
    """Builds the bracketed status marker, e.g. '[i]' or '[✓]'."""
    if not colorize:
        return f"[{symbol}]"
    return f"{Colors.BOLD}{Colors.WHITE}[{Colors.RESET}{Colors.BOLD}{color}{symbol}{Colors.RESET}{Colors.BOLD}{Colors.WHITE}]{Colors.RESET}"
