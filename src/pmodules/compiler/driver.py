"""
Load Session Driver

Wires the directive parser, the expansion passes and the ensure-loaded
engine together for one top-level package, and exposes the statement-rewrite
hook the host calls for every directive.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from typing_extensions import Protocol

from ..analysis.module_system.load_registry import LoadRegistry
from ..analysis.module_system.module_info import LoadRecord
from ..analysis.module_system.module_loader import LoadHost, ModuleLoader
from ..analysis.module_system.path_resolver import PathResolver
from ..frontend.parser import parse_directive
from ..frontend.transformers.base import Directive
from ..passes.import_expansion import ImportExpansionPass
from ..passes.module_expansion import ModuleExpansionPass
from ..shared.errors import ErrorReporter, PmoduleError
from ..shared.namespace_path import NamespacePath
from ..shared.nodes import ExpandedDeclaration, ExpandedStatement, ImportStatement, ModuleDeclaration
from ..shared.source_location import SourceLocation

logger = logging.getLogger(__name__)

Expanded = Union[ExpandedStatement, ExpandedDeclaration]


class SessionHost(LoadHost, Protocol):
    """A LoadHost that can also carry out the original import semantics."""

    def perform_import(
        self,
        statement: ImportStatement,
        caller: NamespacePath,
        scope: Optional[Dict[str, Any]],
    ) -> Dict[str, Any]:
        ...


class StatementRewriter:
    """
    Statement-rewrite hook: directive + location + enclosing namespace in,
    expanded record out. Pure; nothing is loaded here.
    """

    def __init__(self, root_name: str, path_resolver: PathResolver):
        self.import_pass = ImportExpansionPass(root_name, path_resolver)
        self.module_pass = ModuleExpansionPass(root_name, path_resolver)

    def rewrite(
        self,
        directive: Union[str, Directive],
        location: Optional[SourceLocation],
        enclosing: NamespacePath,
    ) -> Expanded:
        node = parse_directive(directive, location) if isinstance(directive, str) else directive
        if isinstance(node, ModuleDeclaration):
            return self.module_pass.expand(node, enclosing)
        if isinstance(node, ImportStatement):
            return self.import_pass.expand(node, enclosing)
        raise TypeError(f"Unsupported directive node: {type(node).__name__}")


@dataclass
class LoadResult:
    """Outcome of loading a package through LoadSession.run()"""
    success: bool
    root: Optional[Any] = None
    loaded: List[LoadRecord] = field(default_factory=list)
    reporter: ErrorReporter = field(default_factory=ErrorReporter)
    error: Optional[PmoduleError] = None

    def has_errors(self) -> bool:
        return self.reporter.has_errors()


class LoadSession:
    """
    One load session for one top-level package.

    Starts with an empty registry, loads on demand, and is discarded with the
    host. Not thread-safe: loading is single-threaded and synchronous.
    """

    def __init__(
        self,
        root_file: Union[str, Path],
        host: Optional[SessionHost] = None,
        path_resolver: Optional[PathResolver] = None,
    ):
        if host is None:
            from ..runtime.host import PythonHost
            host = PythonHost()
        self.host = host
        attach = getattr(host, "attach", None)
        if attach is not None:
            attach(self)

        self.loader = ModuleLoader(Path(root_file), host, path_resolver)
        self.rewriter = StatementRewriter(self.loader.root_name, self.loader.path_resolver)

    @property
    def root(self) -> NamespacePath:
        return self.loader.root

    @property
    def registry(self) -> LoadRegistry:
        return self.loader.registry

    @property
    def aborted(self) -> bool:
        return self.loader.aborted is not None

    def load(self) -> LoadRecord:
        """Load the package root; raises PmoduleError on layout or directive errors."""
        logger.info(f"Loading package '{self.root}' from {self.loader.root_file}")
        return self.loader.load_package()

    def run(self) -> LoadResult:
        """
        Load the package, collecting a PmoduleError into the result instead of raising.

        A failed result carries no loaded records: the session is aborted and
        what it registered may be incomplete.
        """
        result = LoadResult(success=False)
        try:
            self.load()
        except PmoduleError as e:
            result.error = e
            result.reporter.report_exception(e)
        else:
            result.success = True
            result.root = getattr(self.host, "root_module", None)
            result.loaded = list(self.registry)
        return result

    def ensure_loaded(
        self,
        ref: Union[str, NamespacePath],
        caller: Optional[NamespacePath] = None,
        location: Optional[SourceLocation] = None,
    ) -> Optional[NamespacePath]:
        """Ensure ``ref`` as seen from ``caller`` (the package root by default)."""
        path = NamespacePath.parse(ref) if isinstance(ref, str) else ref
        return self.loader.ensure_loaded(path, caller or self.root, location)

    def execute(
        self,
        expanded: Expanded,
        enclosing: NamespacePath,
        scope: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Run an expanded directive: every ensure call in order, then the
        original import (declarations have nothing further to run).
        """
        for call in expanded.ensure:
            self.loader.ensure_loaded(call.path, call.caller, call.location)
        if isinstance(expanded, ExpandedStatement):
            return self.host.perform_import(expanded.original, enclosing, scope)
        return None

    def directive(
        self,
        directive: Union[str, Directive],
        location: Optional[SourceLocation],
        enclosing: NamespacePath,
        scope: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Rewrite and run one directive: the entry point behind P("...")."""
        self.loader.check_usable()
        try:
            expanded = self.rewriter.rewrite(directive, location, enclosing)
            return self.execute(expanded, enclosing, scope)
        except Exception as e:
            self.loader.abort(e)
            raise

    def tree(self) -> List[LoadRecord]:
        """Recorded registry entries sorted by namespace path."""
        self.loader.check_usable()
        return sorted(self.registry, key=lambda r: r.path.segments)
