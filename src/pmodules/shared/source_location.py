"""
Source Location

Where a directive statement was written: file, line, column.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..utils.io_utils import is_pseudo_file


@dataclass(frozen=True)
class SourceLocation:
    """
    Source location of a directive.

    Immutable (frozen) for hashability. ``file`` may be a pseudo-file such as
    ``<string>`` when the directive did not come from a source unit on disk.
    """
    file: str
    line: int
    column: int = 1
    end_line: int = 0
    end_column: int = 0

    def __str__(self) -> str:
        """Format as file:line:column"""
        return f"{self.file}:{self.line}:{self.column}"

    @property
    def is_file_backed(self) -> bool:
        """True when the location names a real file (not '<string>', '<stdin>', ...)"""
        return bool(self.file) and not is_pseudo_file(self.file)

    @property
    def path(self) -> Optional[Path]:
        return Path(self.file) if self.is_file_backed else None
