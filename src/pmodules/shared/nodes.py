"""
Declaration Records

Structured records the directive parser produces and the expanders consume.
The expanders never see Python syntax, only these records.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .namespace_path import NamespacePath
from .source_location import SourceLocation


class ImportKind(Enum):
    IMPORT = "import"
    USING = "using"


@dataclass(frozen=True)
class ModuleDeclaration:
    """
    A namespace-definition directive: 'module Name' or 'baremodule Name'.
    """
    name: str
    is_bare: bool = False
    location: Optional[SourceLocation] = None

    def __str__(self) -> str:
        return f"{'baremodule' if self.is_bare else 'module'} {self.name}"


@dataclass(frozen=True)
class ImportSpec:
    """
    One top-level spec of an import statement.

    ``members`` is None for the plain form ('App.Sub') and holds the
    sub-identifiers of the colon form ('App.Sub: Helper, Tools.Extra').
    """
    base: NamespacePath
    members: Optional[Tuple[NamespacePath, ...]] = None

    @property
    def is_colon_form(self) -> bool:
        return self.members is not None

    def module_paths(self) -> List[NamespacePath]:
        """Every namespace path this spec refers to (members joined to the base)."""
        if self.members is None:
            return [self.base]
        return [self.base.join(member) for member in self.members]

    def __str__(self) -> str:
        if self.members is None:
            return str(self.base)
        return f"{self.base}: " + ", ".join(str(m) for m in self.members)


@dataclass(frozen=True)
class ImportStatement:
    """An 'import ...' or 'using ...' directive."""
    kind: ImportKind
    specs: Tuple[ImportSpec, ...]
    location: Optional[SourceLocation] = None

    def __str__(self) -> str:
        return f"{self.kind.value} " + ", ".join(str(s) for s in self.specs)


@dataclass(frozen=True)
class EnsureLoaded:
    """A load-ensuring call emitted by an expander: ensure ``path`` as seen from ``caller``."""
    path: NamespacePath
    caller: NamespacePath
    location: Optional[SourceLocation] = None

    def __str__(self) -> str:
        return f"ensure_loaded({self.path}) from {self.caller}"


@dataclass
class ExpandedStatement:
    """
    Rewritten import: run every ``ensure`` call in order, then the original
    import, unmodified.
    """
    original: ImportStatement
    ensure: List[EnsureLoaded] = field(default_factory=list)


@dataclass
class ExpandedDeclaration:
    """
    Rewritten module declaration: ``ensure`` runs before the module body.
    Empty for leaf modules.
    """
    declaration: ModuleDeclaration
    path: NamespacePath
    is_parent: bool
    ensure: List[EnsureLoaded] = field(default_factory=list)
