"""
Import Statement Expansion

    using App.Sub: Helper, Tools     ->  ensure_loaded(App.Sub.Helper)
                                         ensure_loaded(App.Sub.Tools)
                                         using App.Sub: Helper, Tools
"""

import logging
from typing import List

from .base import ExpansionPass
from ..shared.errors import InvalidImportForm
from ..shared.namespace_path import NamespacePath
from ..shared.nodes import EnsureLoaded, ExpandedStatement, ImportStatement

logger = logging.getLogger(__name__)


class ImportExpansionPass(ExpansionPass):
    """
    Extracts every namespace path an import refers to and emits one
    EnsureLoaded per internal path, in statement order.

    The colon sub-identifier form is allowed only when the statement has
    exactly one top-level spec.
    """

    def expand(self, statement: ImportStatement, caller: NamespacePath) -> ExpandedStatement:
        paths = self.referenced_paths(statement)
        internal = [p for p in paths if self.is_internal(p)]
        skipped = len(paths) - len(internal)
        if skipped:
            logger.debug(f"{skipped} path(s) of '{statement}' left to the default import mechanism")

        return ExpandedStatement(
            original=statement,
            ensure=[EnsureLoaded(p, caller, statement.location) for p in internal],
        )

    def referenced_paths(self, statement: ImportStatement) -> List[NamespacePath]:
        """All distinct namespace paths of the statement, first occurrence order."""
        if not statement.specs:
            raise InvalidImportForm(f"'{statement.kind.value}' without any module", location=statement.location)

        if len(statement.specs) > 1:
            colon_specs = [s for s in statement.specs if s.is_colon_form]
            if colon_specs:
                raise InvalidImportForm(
                    f"Colon specifier '{colon_specs[0].base}:' in {statement.kind.value} "
                    f"statement with {len(statement.specs)} modules",
                    location=statement.location,
                    help="split the statement so the colon form stands alone",
                )

        seen = set()
        paths: List[NamespacePath] = []
        for spec in statement.specs:
            for path in spec.module_paths():
                if path not in seen:
                    seen.add(path)
                    paths.append(path)
        return paths
