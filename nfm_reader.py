from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, TextIO


def safe_input_path(raw: str, *, root: Path | None = None) -> Path:
    """
    Turn a path given on the command line or in a URL into the absolute path
    of an existing document file.

    Relative paths are taken from `root` when one is given, and the result
    must then stay inside it. Malformed paths raise ValueError; a missing
    file or a directory raises the matching OSError.
    """
    if not raw.strip():
        raise ValueError("Empty input path.")
    if "\x00" in raw:
        raise ValueError("NUL byte in path is not allowed.")

    p = Path(raw).expanduser()
    if ".." in p.parts:
        raise ValueError(f"Path may not contain '..': {raw}")

    if root is not None and not p.is_absolute():
        p = root / p
    resolved = p.resolve()

    if root is not None:
        root_resolved = root.resolve(strict=True)
        if root_resolved != resolved and root_resolved not in resolved.parents:
            raise ValueError(f"Path is outside of {root_resolved}: {raw}")

    if not resolved.exists():
        raise FileNotFoundError(f"File not found: {resolved}")
    if not resolved.is_file():
        raise IsADirectoryError(f"Not a file: {resolved}")

    return resolved


def read_stdin(stream: Optional[TextIO] = None) -> str:
    """
    Read the whole document from stdin (or `stream`).

    An empty read is an error: there is nothing to convert and no path was given.
    """
    stream = stream if stream is not None else sys.stdin
    text = stream.read()
    if not text:
        raise ValueError("No data from stdin, argument PATH must be included")
    return text
