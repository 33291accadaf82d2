"""
Load Registry

Run-scoped record of which absolute namespace paths are available. The only
mutable shared state of a load session. Grows monotonically, never shrinks.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional

from .module_info import LoadRecord, NodeKind
from ...shared.errors import PmoduleImplementationError
from ...shared.namespace_path import NamespacePath

logger = logging.getLogger(__name__)

BoundQuery = Callable[[NamespacePath], bool]


class LoadRegistry:
    """
    Set of loaded namespace paths, queried as "deepest loaded prefix".

    ``baseline`` is the host's own view of already-bound names; a path the
    host reports as bound counts as loaded even though this registry never
    recorded it (e.g. a function defined inside a loaded module).
    """

    def __init__(self, baseline: Optional[BoundQuery] = None):
        self._records: Dict[NamespacePath, LoadRecord] = {}
        self._baseline = baseline

    def __contains__(self, path: NamespacePath) -> bool:
        if path in self._records:
            return True
        return self._baseline is not None and self._baseline(path)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[LoadRecord]:
        """Recorded entries in load order."""
        return iter(sorted(self._records.values(), key=lambda r: r.order))

    def get(self, path: NamespacePath) -> Optional[LoadRecord]:
        return self._records.get(path)

    def record(self, path: NamespacePath, file: Optional[Path], kind: Optional[NodeKind]) -> LoadRecord:
        """
        Mark ``path`` loaded. Its parent must already be available: prefixes
        are always recorded outer to inner.
        """
        if path.is_relative:
            raise PmoduleImplementationError(f"Registry holds absolute paths only, got '{path}'")
        if path in self._records:
            raise PmoduleImplementationError(f"'{path}' recorded twice")
        if path.depth > 1 and path.parent not in self:
            raise PmoduleImplementationError(
                f"'{path}' recorded before its parent '{path.parent}'"
            )
        entry = LoadRecord(path=path, file=file, kind=kind, order=len(self._records))
        self._records[path] = entry
        logger.debug(f"Registered {entry}")
        return entry

    def first_missing(self, path: NamespacePath) -> Optional[NamespacePath]:
        """
        Shortest prefix of ``path`` that is not loaded, or None when the whole
        path is available. Tested segment by segment from the root.
        """
        for prefix in path.prefixes():
            if prefix not in self:
                return prefix
        return None

    def is_loaded(self, path: NamespacePath) -> bool:
        return self.first_missing(path) is None

    def paths(self) -> List[NamespacePath]:
        return [entry.path for entry in self]
