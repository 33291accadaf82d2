"""Directive frontend: lark grammar, parser and transformer."""

from .parser import Parser, get_parser, parse_directive

__all__ = ["Parser", "get_parser", "parse_directive"]
