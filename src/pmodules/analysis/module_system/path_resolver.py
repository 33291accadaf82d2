"""
Filesystem Convention Oracle

Pure path arithmetic over the layout conventions:

- src/App.py               root (always a parent)
- src/Util.py              leaf of App (any other file directly in src/)
- src/Sub/Sub.py           parent App.Sub (self-named file in a same-named directory)
- src/Sub/Helper.py        leaf App.Sub.Helper

This class is stateless and can be shared/reused.
"""

import logging
from pathlib import Path
from typing import List, Optional

from .module_info import Location, NodeKind
from ...shared.errors import AmbiguousDefinition, DefinitionNotFound
from ...shared.namespace_path import NamespacePath
from ...utils.config import ROOT_DIRECTORY_NAME, SOURCE_FILE_EXTENSION

logger = logging.getLogger(__name__)


def _is_child_name(stem: str) -> bool:
    """Identifiers only; dunder files (__init__, __main__) are packaging artefacts."""
    return stem.isidentifier() and not (stem.startswith("__") and stem.endswith("__"))


class PathResolver:
    """
    Decides parent/leaf classification and locates backing files.

    The extension and root directory name are fixed conventions; they are
    constructor arguments only so the loader can be pointed at other
    conventions in tests.
    """

    def __init__(
        self,
        extension: str = SOURCE_FILE_EXTENSION,
        root_directory_name: str = ROOT_DIRECTORY_NAME,
    ):
        self.extension = extension
        self.root_directory_name = root_directory_name

    def leaf_candidate(self, directory: Path, segment: str) -> Path:
        return directory / f"{segment}{self.extension}"

    def parent_candidate(self, directory: Path, segment: str) -> Path:
        return directory / segment / f"{segment}{self.extension}"

    def classify_and_locate(self, directory: Path, segment: str) -> Location:
        """
        Find the file defining ``segment`` as a child of the node backed by ``directory``.

        Exactly one of ``segment.py`` and ``segment/segment.py`` must exist.

        Raises:
            AmbiguousDefinition: both files exist
            DefinitionNotFound: neither exists
        """
        leaf_file = self.leaf_candidate(directory, segment)
        parent_file = self.parent_candidate(directory, segment)
        leaf_exists = leaf_file.is_file()
        parent_exists = parent_file.is_file()

        if leaf_exists and parent_exists:
            raise AmbiguousDefinition(
                f"'{segment}' is defined twice in {directory}",
                candidates=(leaf_file, parent_file),
                note=f"both {leaf_file} and {parent_file} exist",
                help="remove one of the two files so the name binds once",
            )
        if leaf_exists:
            logger.debug(f"Located '{segment}' as leaf file {leaf_file}")
            return Location(leaf_file, NodeKind.LEAF)
        if parent_exists:
            logger.debug(f"Located '{segment}' as parent file {parent_file}")
            return Location(parent_file, NodeKind.PARENT)
        raise DefinitionNotFound(
            f"No definition found for '{segment}' in {directory}",
            searched=(leaf_file, parent_file),
            note=f"searched {leaf_file}, {parent_file}",
        )

    def is_parent(self, backing_file: Path, path: NamespacePath) -> bool:
        """
        Whether the module backed by ``backing_file`` with full name ``path`` is a parent.

        - a top-level package declaration is always a parent
        - inside a root directory ('src') only the outermost module is a parent
        - elsewhere: directory name == file stem == last path segment
        """
        backing_file = Path(backing_file)
        if not backing_file.is_absolute():
            raise ValueError(f"Given path must be an absolute path: {backing_file}")

        if path.depth == 1:
            return True

        directory = backing_file.parent.name
        if directory == self.root_directory_name:
            return False

        return directory == backing_file.stem == path.name

    def classify(self, backing_file: Path, path: NamespacePath) -> NodeKind:
        if path.depth == 1:
            return NodeKind.ROOT
        return NodeKind.PARENT if self.is_parent(backing_file, path) else NodeKind.LEAF

    def list_children(self, directory: Path, exclude_file: Optional[Path] = None) -> List[str]:
        """
        Child segment names of the parent whose file lives in ``directory``.

        Every source file other than ``exclude_file`` is a leaf candidate;
        every subdirectory holding a self-named source file is a parent
        candidate. Sorted for a deterministic load order.
        """
        excluded = exclude_file.resolve() if exclude_file is not None else None
        children = set()

        for entry in directory.iterdir():
            if entry.is_file():
                if entry.suffix != self.extension or not _is_child_name(entry.stem):
                    continue
                if excluded is not None and entry.resolve() == excluded:
                    continue
                children.add(entry.stem)
            elif entry.is_dir():
                if _is_child_name(entry.name) and self.parent_candidate(directory, entry.name).is_file():
                    children.add(entry.name)

        result = sorted(children)
        logger.debug(f"Children of {directory}: {result}")
        return result
