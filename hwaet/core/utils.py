"""
Core Utilities Module.

This module provides file helpers used by the command-line interface.
"""

import json
from pathlib import Path
from typing import Any, Union


def ensure_dir_exists(directory_path: Union[str, Path]) -> Path:
    """
    Ensure that a directory exists, creating it if necessary.

    Args:
        directory_path: Path to the directory

    Returns:
        Path: Path to the directory
    """
    path = Path(directory_path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_file_contents(file_path: Union[str, Path], encoding: str = "utf-8") -> str:
    """
    Read the contents of a file.

    Args:
        file_path: Path to the file
        encoding: File encoding (default: utf-8)

    Returns:
        str: Contents of the file
    """
    with open(file_path, "r", encoding=encoding) as f:
        return f.read()


def write_file_contents(file_path: Union[str, Path], contents: str, encoding: str = "utf-8") -> Path:
    """
    Write contents to a file, creating parent directories as needed.

    Args:
        file_path: Path to the file
        contents: Contents to write
        encoding: File encoding (default: utf-8)

    Returns:
        Path: The path that was written
    """
    path = Path(file_path)
    ensure_dir_exists(path.parent)
    with open(path, "w", encoding=encoding, newline="") as f:
        f.write(contents)
    return path


def extract_json_text(text: str) -> Any:
    """
    Parse JSON from an oracle reply, tolerating a Markdown code fence.

    Raises:
        json.JSONDecodeError: if the unwrapped text is not JSON
    """
    body = text.strip()
    if body.startswith("```"):
        body = body.split("\n", 1)[1] if "\n" in body else ""
        if body.rstrip().endswith("```"):
            body = body.rstrip()[:-3]
    return json.loads(body.strip())
