# -*- coding: utf-8 -*-
"""
Output sinks for the rendered prompt: system clipboard and output file.
"""

from pathlib import Path
from typing import Union

import pyperclip


def copy_to_clipboard(text: str) -> None:
    """Copies ``text`` to the clipboard. Raises pyperclip.PyperclipException on failure."""
    pyperclip.copy(text)


def write_to_file(output_path: Union[str, Path], text: str) -> Path:
    """Writes the prompt as UTF-8, creating parent directories. Returns the path written."""
    path = Path(output_path)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        f.write(text)
    return path
