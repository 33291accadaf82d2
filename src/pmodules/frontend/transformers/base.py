"""
Directive Transformer
Converts the lark parse tree of one directive into declaration records
"""

from dataclasses import dataclass
from typing import List, Optional, Union

from lark import Transformer, v_args
from lark.lexer import Token
from typing_extensions import TypeAlias

from ...shared.errors import InvalidImportForm
from ...shared.namespace_path import NamespacePath
from ...shared.nodes import ImportKind, ImportSpec, ImportStatement, ModuleDeclaration
from ...shared.source_location import SourceLocation

Directive: TypeAlias = Union[ModuleDeclaration, ImportStatement]


@dataclass
class _ImportItem:
    """Flat item of an import statement before regrouping into specs"""
    path: NamespacePath
    member: Optional[NamespacePath] = None


@v_args(inline=True)
class DirectiveTransformer(Transformer):
    """
    Builds ModuleDeclaration / ImportStatement records.

    ``location`` is the call site of the directive; every record produced by
    one ``transform`` call carries it.
    """

    def __init__(self, location: Optional[SourceLocation] = None):
        super().__init__()
        self.location = location

    def module_decl(self, name: Token) -> ModuleDeclaration:
        return ModuleDeclaration(name=str(name), is_bare=False, location=self.location)

    def baremodule_decl(self, name: Token) -> ModuleDeclaration:
        return ModuleDeclaration(name=str(name), is_bare=True, location=self.location)

    def module_path(self, *tokens: Token) -> NamespacePath:
        up_count = 0
        names = []
        for tok in tokens:
            if tok.type == "DOTS":
                up_count = len(tok)
            else:
                names.append(str(tok))
        return NamespacePath(tuple(names), up_count)

    def member_path(self, *names: Token) -> NamespacePath:
        return NamespacePath(tuple(str(n) for n in names))

    def path_item(self, path: NamespacePath) -> _ImportItem:
        return _ImportItem(path)

    def colon_item(self, path: NamespacePath, member: NamespacePath) -> _ImportItem:
        return _ImportItem(path, member)

    def import_stmt(self, kind: Token, *items: _ImportItem) -> ImportStatement:
        return ImportStatement(
            kind=ImportKind(str(kind)),
            specs=tuple(self._group_specs(list(items))),
            location=self.location,
        )

    def _group_specs(self, items: List[_ImportItem]) -> List[ImportSpec]:
        """
        Regroup flat items: 'A, B: x, y' -> [A], [B: x, y].

        Every item after a colon item is a member of it, so only the last
        top-level spec can carry members.
        """
        specs: List[ImportSpec] = []
        colon_base: Optional[NamespacePath] = None
        members: List[NamespacePath] = []

        for item in items:
            if colon_base is None:
                if item.member is None:
                    specs.append(ImportSpec(item.path))
                else:
                    colon_base = item.path
                    members.append(item.member)
                continue
            if item.member is not None:
                raise InvalidImportForm(
                    f"Second colon specifier '{item.path}:' after '{colon_base}:'",
                    location=self.location,
                )
            if item.path.is_relative:
                raise InvalidImportForm(
                    f"Sub-identifier '{item.path}' of '{colon_base}' cannot be relative",
                    location=self.location,
                )
            members.append(item.path)

        if colon_base is not None:
            specs.append(ImportSpec(colon_base, tuple(members)))
        return specs
