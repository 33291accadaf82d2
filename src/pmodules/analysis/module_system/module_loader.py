"""
Module Loader

The Ensure-Loaded engine: resolves a (possibly relative) namespace path,
finds the first prefix that is not loaded yet, locates its file through the
PathResolver and performs exactly one load through the host.

Loading is synchronous and re-entrant: the loaded file's own directives call
back into ensure_loaded, so one top-level reference completes the whole
remaining chain through recursion, not through iteration here.
"""

import logging
from pathlib import Path
from typing import Any, List, Optional

from typing_extensions import Protocol

from .load_registry import LoadRegistry
from .module_info import LoadRecord, NodeKind
from .path_resolver import PathResolver
from ...shared.errors import (
    DefinitionNotFound,
    ForeignRootReference,
    PmoduleError,
    PmoduleImplementationError,
    SessionAborted,
)
from ...shared.namespace_path import NamespacePath, resolve
from ...shared.source_location import SourceLocation
from ...utils.config import MAX_LOAD_DEPTH

logger = logging.getLogger(__name__)


class LoadHost(Protocol):
    """External collaborators the loader consumes."""

    def load(self, file: Path, target: Optional[NamespacePath]) -> Any:
        """Bind the declarations of ``file`` under ``target`` (None for the package root)."""
        ...

    def is_bound(self, path: NamespacePath) -> bool:
        """Whether the host already binds ``path`` (its baseline)."""
        ...


class ModuleLoader:
    """
    Ensure-Loaded engine for one top-level package.

    Owns the LoadRegistry for the session. Every path is registered *before*
    its file is loaded, so a namespace whose body imports a sibling that
    imports it back sees itself as available and the recursion terminates.

    Any error aborts the session: later calls raise SessionAborted instead
    of serving paths whose bodies may not have finished.
    """

    def __init__(
        self,
        root_file: Path,
        host: LoadHost,
        path_resolver: Optional[PathResolver] = None,
        max_depth: int = MAX_LOAD_DEPTH,
    ):
        self.root_file = Path(root_file).resolve()
        root_name = self.root_file.stem
        if not root_name.isidentifier():
            raise ValueError(f"Package root file name is not an identifier: {self.root_file.name}")
        self.root = NamespacePath.of(root_name)
        self.host = host
        self.path_resolver = path_resolver or PathResolver()
        self.registry = LoadRegistry(baseline=host.is_bound)
        self.max_depth = max_depth
        self.loading_stack: List[NamespacePath] = []
        self.aborted: Optional[BaseException] = None

    @property
    def root_name(self) -> str:
        return self.root.root

    def load_package(self) -> LoadRecord:
        """Register and load the package root (no-op when already loaded)."""
        self.check_usable()
        existing = self.registry.get(self.root)
        if existing is not None:
            return existing

        if not self.root_file.is_file():
            error = DefinitionNotFound(
                f"Package root file not found: {self.root_file}",
                searched=(self.root_file,),
            )
            self.abort(error)
            raise error
        if self.root_file.parent.name != self.path_resolver.root_directory_name:
            logger.warning(
                f"Package root {self.root_file} is not inside a "
                f"'{self.path_resolver.root_directory_name}' directory"
            )

        record = self.registry.record(self.root, self.root_file, NodeKind.ROOT)
        self._load(record, target=None, location=None)
        return record

    def ensure_loaded(
        self,
        ref: NamespacePath,
        caller: NamespacePath,
        location: Optional[SourceLocation] = None,
    ) -> Optional[NamespacePath]:
        """
        Make sure the first missing prefix of ``ref`` (seen from ``caller``) is loaded.

        Returns the prefix that was loaded, or None when nothing had to be
        loaded: the path is already available, or it lies outside the
        package root and is left to the ordinary import mechanism.

        Raises:
            InvalidRelativeReference: relative up-count exceeds caller depth
            AmbiguousDefinition / DefinitionNotFound: file lookup failed
        """
        self.check_usable()
        try:
            path = resolve(ref, caller)
            self._check_root(path)
        except ForeignRootReference as e:
            logger.debug(f"Skipping {e.message}")
            return None
        except PmoduleError as e:
            self.abort(e)
            raise e.with_location(location)

        missing = self.registry.first_missing(path)
        if missing is None:
            logger.debug(f"'{path}' already loaded")
            return None

        if missing == self.root:
            self.load_package()
            return missing

        enclosing = self.registry.get(missing.parent)
        try:
            record = self._locate(missing, enclosing)
        except PmoduleError as e:
            self.abort(e)
            raise e.with_location(location)

        self._load(record, target=missing.parent, location=location)
        return missing

    def is_loaded(self, ref: NamespacePath, caller: Optional[NamespacePath] = None) -> bool:
        path = resolve(ref, caller or self.root)
        return self.registry.is_loaded(path)

    def loading_chain(self) -> str:
        return " -> ".join(str(p) for p in self.loading_stack)

    def abort(self, error: BaseException) -> None:
        """
        Mark the session unusable. Paths registered so far may belong to
        bodies that never finished, so nothing may be served from them again.
        The first error is kept.
        """
        if self.aborted is None:
            logger.debug(f"Session for '{self.root}' aborted: {error!r}")
            self.aborted = error

    def check_usable(self) -> None:
        """Raise SessionAborted once an error has aborted the session."""
        if self.aborted is not None:
            raise SessionAborted(
                f"Load session for '{self.root}' was aborted by an earlier error",
                cause=self.aborted,
                note=f"first error: {self.aborted}",
            )

    # --- Internal helpers ---

    def _check_root(self, path: NamespacePath) -> None:
        if path.root != self.root_name:
            raise ForeignRootReference(
                f"'{path}' is outside package '{self.root_name}'"
            )

    def _locate(self, missing: NamespacePath, enclosing: Optional[LoadRecord]) -> LoadRecord:
        """Find and register the backing file of ``missing`` (registration precedes the load)."""
        if enclosing is None or enclosing.file is None:
            raise DefinitionNotFound(
                f"Cannot locate '{missing}': '{missing.parent}' is not backed by a source file",
            )
        if not enclosing.kind.has_children:
            raise DefinitionNotFound(
                f"Cannot locate '{missing}': '{missing.parent}' is a leaf module and has no children",
                help=f"move {enclosing.file.name} into a directory named '{enclosing.path.name}' to make it a parent",
            )

        location = self.path_resolver.classify_and_locate(enclosing.directory, missing.name)
        if location.file.resolve() == enclosing.file.resolve():
            raise DefinitionNotFound(
                f"Cannot locate '{missing}': the only candidate is the file of '{enclosing.path}' itself",
                searched=(location.file,),
            )

        kind = self.path_resolver.classify(location.file, missing)
        return self.registry.record(missing, location.file, kind)

    def _load(self, record: LoadRecord, target: Optional[NamespacePath], location: Optional[SourceLocation]) -> None:
        if len(self.loading_stack) >= self.max_depth:
            error = PmoduleImplementationError(
                f"Load depth {len(self.loading_stack)} exceeded while loading '{record.path}': "
                f"{self.loading_chain()}"
            )
            self.abort(error)
            raise error

        self.loading_stack.append(record.path)
        try:
            logger.info(f"Loading {record.file} into {target if target is not None else '<top>'}")
            self.host.load(record.file, target)
        except PmoduleError as e:
            logger.debug(f"Load failed in chain {self.loading_chain()}: {e.message}")
            self.abort(e)
            raise e.with_location(location)
        except Exception as e:
            self.abort(e)
            raise
        finally:
            self.loading_stack.pop()
