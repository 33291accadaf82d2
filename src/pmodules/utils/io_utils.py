"""
Centralized file I/O utilities.

- Single place for encoding and pseudo-file handling
- Use Path.read_text() consistently (no raw open/read)
"""

from pathlib import Path
from typing import Optional, Union

from .config import DEFAULT_FILE_ENCODING, PSEUDO_FILE_PREFIX


def read_source_file(path: Union[Path, str]) -> str:
    """Read source file with standard encoding."""
    p = Path(path) if not isinstance(path, Path) else path
    return p.read_text(encoding=DEFAULT_FILE_ENCODING)


def try_read_source_file(path: Union[Path, str, None]) -> Optional[str]:
    """Best-effort read for diagnostics; None when the file is gone or unreadable."""
    if path is None or is_pseudo_file(path):
        return None
    try:
        return read_source_file(path)
    except (OSError, UnicodeDecodeError):
        return None


def is_pseudo_file(path: Union[Path, str]) -> bool:
    """True for exec/REPL pseudo-files such as '<string>' or '<stdin>'."""
    return str(path).startswith(PSEUDO_FILE_PREFIX)
