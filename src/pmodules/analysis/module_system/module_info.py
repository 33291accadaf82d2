"""
Module System Types

Pure data records shared by the oracle, the registry and the loader.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from ...shared.namespace_path import NamespacePath


class NodeKind(Enum):
    ROOT = "root"
    PARENT = "parent"
    LEAF = "leaf"

    @property
    def has_children(self) -> bool:
        return self is not NodeKind.LEAF


@dataclass(frozen=True)
class Location:
    """Backing file found for a segment and the convention that matched."""
    file: Path
    kind: NodeKind

    @property
    def directory(self) -> Path:
        return self.file.parent


@dataclass(frozen=True)
class LoadRecord:
    """
    Registry entry for a loaded namespace path.

    ``file`` and ``kind`` are None for names the host already had bound
    before the session started (its baseline); such names have no backing
    directory to search for children.
    """
    path: NamespacePath
    file: Optional[Path] = None
    kind: Optional[NodeKind] = None
    order: int = 0

    @property
    def directory(self) -> Optional[Path]:
        return self.file.parent if self.file is not None else None

    def __str__(self) -> str:
        kind = self.kind.value if self.kind else "bound"
        return f"{self.path} [{kind}]" + (f" {self.file}" if self.file else "")
