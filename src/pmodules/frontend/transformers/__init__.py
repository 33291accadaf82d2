"""Lark tree to declaration-record transformers."""

from .base import DirectiveTransformer

__all__ = ["DirectiveTransformer"]
