# -*- coding: utf-8 -*-
"""
File records for CodePrompt.
Reads the content of included files and formats it (line numbers, code fences)
for the prompt template.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .codeprompt_config import LINE_NUMBER_WIDTH
from .codeprompt_errors import EntryReadError

FENCE = "```"


@dataclass(frozen=True)
class FileRecord:
    """One included file, as handed to the template renderer."""
    path: str           # Filesystem path as reached from the root
    display_path: str   # Root-relative or absolute, per the relative_paths option
    extension: str
    content: str
    char_count: int
    fenced: bool

    def to_dict(self) -> Dict[str, Any]:
        """Template/JSON view of the record."""
        return {
            "path": self.display_path,
            "extension": self.extension,
            "code": self.content,
            "char_count": self.char_count,
            "fenced": self.fenced,
        }


# --- Content Formatting ---

def decode_text(data: Union[bytes, str]) -> Optional[str]:
    """Decodes file bytes as UTF-8 text. Returns None for binary content."""
    if isinstance(data, str):
        text = data
    else:
        if b"\x00" in data:
            return None
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if text.startswith("\ufeff"): # Drop a UTF-8 BOM
        text = text[1:]
    return text


def split_lines(text: str) -> List[str]:
    """
    Splits on line terminators only (\\n, \\r\\n). Form feeds and Unicode line
    separators stay inside their line; a trailing newline adds no line.
    """
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def number_lines(text: str, width: int = LINE_NUMBER_WIDTH) -> str:
    """Prefixes every line with its right-aligned 1-based number."""
    return "\n".join(f"{i:>{width}} | {line}" for i, line in enumerate(split_lines(text), start=1))


def wrap_in_fence(text: str, extension: str) -> str:
    return f"{FENCE}{extension}\n{text}\n{FENCE}"


def strip_fence(text: str) -> str:
    """Inverse of wrap_in_fence; returns the text unchanged when it is not fenced."""
    lines = text.split("\n")
    if len(lines) >= 2 and lines[0].startswith(FENCE) and lines[-1] == FENCE:
        return "\n".join(lines[1:-1])
    return text


def display_path_for(path: Path, root: Path, relative_paths: bool) -> str:
    if relative_paths:
        try:
            return path.relative_to(root).as_posix()
        except ValueError:
            return path.name
    return str(path.absolute())


# --- Record Building ---

def build_file_record(
    path: Path,
    data: Union[bytes, str],
    line_numbers: bool,
    relative_paths: bool,
    no_codeblock: bool,
    root: Path,
) -> Optional[FileRecord]:
    """
    Builds the record for one file from its raw content.

    Args:
        path: Path of the file.
        data: Raw bytes (decoded as UTF-8) or already-decoded text.
        line_numbers: Prefix each line with its number.
        relative_paths: Use the root-relative path as display path.
        no_codeblock: Do not wrap the content in a fenced code block.
        root: Traversal root, for relative display paths.

    Returns:
        The FileRecord, or None when the content is binary or blank.
    """
    text = decode_text(data)
    if text is None or not text.strip():
        return None

    extension = path.suffix[1:] if path.suffix else ""
    content = number_lines(text) if line_numbers else text
    if not no_codeblock:
        content = wrap_in_fence(content, extension)

    return FileRecord(
        path=str(path),
        display_path=display_path_for(path, root, relative_paths),
        extension=extension,
        content=content,
        char_count=len(content),
        fenced=not no_codeblock,
    )


def read_file_record(
    path: Path,
    root: Path,
    line_numbers: bool = False,
    relative_paths: bool = False,
    no_codeblock: bool = False,
) -> Optional[FileRecord]:
    """
    Reads a file and builds its record. The file is closed before returning.

    Raises:
        EntryReadError: The file could not be opened or read.
    """
    try:
        with path.open("rb") as f:
            data = f.read()
    except OSError as e:
        raise EntryReadError(path, e.strerror or str(e), e) from e
    return build_file_record(path, data, line_numbers, relative_paths, no_codeblock, root)
