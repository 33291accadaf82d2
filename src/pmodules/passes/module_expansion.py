"""
Module Declaration Expansion

A parent module's declaration expands into one EnsureLoaded per direct child
found on disk, to run before the module body:

    src/App.py: 'module App'  ->  ensure_loaded(App.Sub), ensure_loaded(App.Util)

A leaf module's declaration is only validated.
"""

import logging
from pathlib import Path

from .base import ExpansionPass
from ..shared.errors import ModuleNameMismatch, NotAFileContext, NotAParentModule, UnsupportedDeclaration
from ..shared.namespace_path import NamespacePath
from ..shared.nodes import EnsureLoaded, ExpandedDeclaration, ModuleDeclaration

logger = logging.getLogger(__name__)


class ModuleExpansionPass(ExpansionPass):
    """Validates module declarations and expands parent declarations."""

    def expand(self, declaration: ModuleDeclaration, declaring_path: NamespacePath) -> ExpandedDeclaration:
        """
        Validate ``declaration`` of the module ``declaring_path`` and expand it
        when the module is a parent; leaf declarations pass through unchanged.
        """
        if declaration.is_bare:
            raise UnsupportedDeclaration(
                f"'baremodule {declaration.name}' is not supported",
                location=declaration.location,
                help=f"declare it as 'module {declaration.name}'",
            )

        source_file = self._source_file(declaration)
        if declaration.name != source_file.stem or declaration.name != declaring_path.name:
            raise ModuleNameMismatch(
                f"Module '{declaration.name}' declared in {source_file.name} loaded as '{declaring_path}'",
                location=declaration.location,
                help="module names must match the file name they are defined in",
            )

        if not self.path_resolver.is_parent(source_file, declaring_path):
            logger.debug(f"'{declaring_path}' is a leaf module")
            return ExpandedDeclaration(declaration, declaring_path, is_parent=False)
        return self.expand_parent(declaration, declaring_path)

    def expand_parent(self, declaration: ModuleDeclaration, declaring_path: NamespacePath) -> ExpandedDeclaration:
        """
        Enumerate the direct children of a parent module and emit an
        EnsureLoaded for each, in lexicographic order.

        Raises:
            NotAFileContext: the declaration has no backing file
            NotAParentModule: the backing file is not a parent by the layout rules
        """
        source_file = self._source_file(declaration)
        if not self.path_resolver.is_parent(source_file, declaring_path):
            raise NotAParentModule(
                f"'{declaring_path}' ({source_file}) is not a parent module",
                location=declaration.location,
            )

        children = self.path_resolver.list_children(source_file.parent, exclude_file=source_file)
        ensure = [
            EnsureLoaded(declaring_path.child(name), declaring_path, declaration.location)
            for name in children
        ]
        logger.debug(f"'{declaring_path}' expands to {len(ensure)} child load(s)")
        return ExpandedDeclaration(declaration, declaring_path, is_parent=True, ensure=ensure)

    def _source_file(self, declaration: ModuleDeclaration) -> Path:
        location = declaration.location
        if location is None or not location.is_file_backed:
            raise NotAFileContext(
                f"'{declaration}' must be declared in a source file to be expanded",
                location=location,
            )
        return Path(location.file).resolve()
