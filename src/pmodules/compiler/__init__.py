"""Load session driver and statement-rewrite hook."""

from .driver import LoadSession, LoadResult, StatementRewriter, SessionHost

__all__ = ["LoadSession", "LoadResult", "StatementRewriter", "SessionHost"]
