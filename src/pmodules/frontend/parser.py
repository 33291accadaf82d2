"""
Directive Parser

Parses directive text ("module App", "using App.Sub: Helper") with lark.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from lark import Lark
from lark.exceptions import UnexpectedInput, VisitError

from .transformers.base import Directive, DirectiveTransformer
from ..shared.errors import DirectiveSyntaxError, PmoduleError
from ..shared.source_location import SourceLocation
from ..utils.config import DEFAULT_PARSER_CACHE_FILE

logger = logging.getLogger("pmodules.frontend.parser")


class Parser:
    """
    Directive parser.

    LALR with lark's native grammar cache; the transformer runs as a separate
    step so each call can carry its own source location.
    """

    def __init__(self, cache_file: Optional[str] = DEFAULT_PARSER_CACHE_FILE):
        grammar_path = Path(__file__).parent / "grammar.lark"
        self.parser = Lark.open(
            str(grammar_path),
            parser="lalr",
            cache=cache_file if cache_file else False,
            propagate_positions=True,
            maybe_placeholders=False,
        )

    def parse(self, text: str, location: Optional[SourceLocation] = None) -> Directive:
        """
        Parse one directive.

        Returns a ModuleDeclaration or ImportStatement stamped with ``location``.
        Raises DirectiveSyntaxError for text the grammar rejects and
        InvalidImportForm for structurally invalid import statements.
        """
        try:
            tree = self.parser.parse(text)
        except UnexpectedInput as e:
            context = e.get_context(text).rstrip()
            raise DirectiveSyntaxError(
                f"Invalid directive {text.strip()!r}",
                location=location,
                note=f"at column {e.column}:\n{context}",
            ) from e

        try:
            directive = DirectiveTransformer(location).transform(tree)
        except VisitError as e:
            # Transformer callbacks raise PmoduleErrors; lark wraps them
            if isinstance(e.orig_exc, PmoduleError):
                raise e.orig_exc from None
            raise
        logger.debug(f"Parsed directive {directive} at {location}")
        return directive


@lru_cache(maxsize=1)
def get_parser() -> Parser:
    """Process-wide parser instance (grammar is immutable, safe to share)."""
    return Parser()


def parse_directive(text: str, location: Optional[SourceLocation] = None) -> Directive:
    return get_parser().parse(text, location)
