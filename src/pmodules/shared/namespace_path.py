"""
Namespace Path

Canonical representation of a dotted identifier, absolute or relative,
plus the relative reference resolver.

    NamespacePath.parse("App.Sub.Helper")   -> absolute, 3 segments
    NamespacePath.parse("..Other")          -> relative, up-count 2, ['Other']

A relative path discards ``up_count`` trailing segments of the caller's own
path before appending its segments:

    resolve(parse("..D"), parse("A.B.C"))   -> A.D
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple

from .errors import InvalidRelativeReference
from ..utils.config import MODULE_SEPARATOR, RELATIVE_MARKER


@dataclass(frozen=True, order=True)
class NamespacePath:
    """
    Ordered, non-empty sequence of identifier segments.

    ``up_count == 0`` marks an absolute path; a positive ``up_count`` marks a
    relative reference. Equality is structural, so two absolute paths are
    equal iff their segments are equal.
    """
    segments: Tuple[str, ...]
    up_count: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.segments, tuple):
            object.__setattr__(self, "segments", tuple(self.segments))
        if not self.segments:
            raise ValueError("Namespace path must have at least one segment")
        for segment in self.segments:
            if not isinstance(segment, str) or not segment.isidentifier():
                raise ValueError(f"Invalid namespace path segment: {segment!r}")
        if self.up_count < 0:
            raise ValueError(f"Relative up-count must be non-negative, got {self.up_count}")

    @classmethod
    def of(cls, *segments: str) -> NamespacePath:
        """Absolute path from segments: NamespacePath.of('App', 'Sub')"""
        return cls(tuple(segments))

    @classmethod
    def parse(cls, text: str) -> NamespacePath:
        """Parse the dotted surface form; leading dots give the up-count."""
        stripped = text.strip()
        body = stripped.lstrip(RELATIVE_MARKER)
        up_count = len(stripped) - len(body)
        return cls(tuple(body.split(MODULE_SEPARATOR)) if body else (), up_count)

    @property
    def is_relative(self) -> bool:
        return self.up_count > 0

    @property
    def is_absolute(self) -> bool:
        return self.up_count == 0

    @property
    def root(self) -> str:
        return self.segments[0]

    @property
    def name(self) -> str:
        return self.segments[-1]

    @property
    def depth(self) -> int:
        return len(self.segments)

    @property
    def parent(self) -> NamespacePath:
        """Enclosing path (last segment removed); the root has no parent."""
        if self.depth == 1:
            raise ValueError(f"'{self}' has no parent")
        return NamespacePath(self.segments[:-1], self.up_count)

    def child(self, name: str) -> NamespacePath:
        return NamespacePath(self.segments + (name,), self.up_count)

    def join(self, other: NamespacePath | Iterable[str]) -> NamespacePath:
        """Append the segments of ``other`` (which must not itself be relative)."""
        if isinstance(other, NamespacePath):
            if other.is_relative:
                raise ValueError(f"Cannot join relative path '{other}' onto '{self}'")
            extra = other.segments
        else:
            extra = tuple(other)
        return NamespacePath(self.segments + extra, self.up_count)

    def prefixes(self) -> Iterator[NamespacePath]:
        """All prefixes from the root outwards-in, ending with the path itself."""
        for i in range(1, self.depth + 1):
            yield NamespacePath(self.segments[:i], self.up_count)

    def is_prefix_of(self, other: NamespacePath) -> bool:
        """Non-strict prefix test between two paths of the same kind."""
        return (
            self.up_count == other.up_count
            and self.depth <= other.depth
            and other.segments[:self.depth] == self.segments
        )

    def __str__(self) -> str:
        return RELATIVE_MARKER * self.up_count + MODULE_SEPARATOR.join(self.segments)

    def __repr__(self) -> str:
        return f"NamespacePath({str(self)!r})"


def resolve(ref: NamespacePath, caller: NamespacePath) -> NamespacePath:
    """
    Rewrite a relative reference into an absolute path anchored at ``caller``.

    Absolute references are returned unchanged. Raises InvalidRelativeReference
    when the up-count is larger than the caller's depth.
    """
    if ref.is_absolute:
        return ref
    if caller.is_relative:
        raise InvalidRelativeReference(
            f"Cannot anchor '{ref}' at relative caller path '{caller}'"
        )
    if ref.up_count > caller.depth:
        raise InvalidRelativeReference(
            f"Relative reference '{ref}' climbs {ref.up_count} level(s) "
            f"but '{caller}' is only {caller.depth} deep",
            help=f"use at most {caller.depth} leading '{RELATIVE_MARKER}' or an absolute path",
        )
    kept = caller.segments[:caller.depth - ref.up_count]
    return NamespacePath(kept + ref.segments)
