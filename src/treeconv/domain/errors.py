"""Conversion error hierarchy.

Every decode failure is a :class:`ConversionError` carrying a machine code,
a human message and the path to the failing node. Each recursion level of
the conversion layer prepends its own segment (a field name or a sequence
index) through :meth:`ConversionError.at`, so the error that reaches the
caller names the full location::

    holds[0].ikConstraint: missing required field 'link'
"""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from typing import Any, ClassVar, Self

PathSegment = str | int


def format_path(path: tuple[PathSegment, ...]) -> str:
    """Render *path* as ``name[3].other``; the empty path renders as ``""``."""
    parts: list[str] = []
    for segment in path:
        if isinstance(segment, int):
            parts.append(f"[{segment}]")
        elif parts:
            parts.append(f".{segment}")
        else:
            parts.append(segment)
    return "".join(parts)


class ConversionError(Exception):
    """Base class for all encode/decode/stream failures."""

    code: ClassVar[str] = "CONVERSION_ERROR"

    def __init__(self, message: str, *, path: tuple[PathSegment, ...] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.path: tuple[PathSegment, ...] = tuple(path)

    def at(self, segment: PathSegment) -> Self:
        """Prepend *segment* to the error path and return the same error."""
        self.path = (segment, *self.path)
        return self

    @property
    def location(self) -> str:
        return format_path(self.path)

    def to_detail(self) -> dict[str, Any]:
        """Structured payload for service-layer error reporting."""
        return {"path": list(self.path), "location": self.location}

    def __str__(self) -> str:
        if self.path:
            return f"{self.location}: {self.message}"
        return self.message


class TypeMismatch(ConversionError):
    """A scalar could not be coerced to the requested type."""

    code: ClassVar[str] = "TYPE_MISMATCH"

    def __init__(
        self,
        expected: str,
        actual: str,
        *,
        message: str | None = None,
        path: tuple[PathSegment, ...] = (),
    ) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(message or f"expected {expected}, got {actual}", path=path)

    def to_detail(self) -> dict[str, Any]:
        return {**super().to_detail(), "expected": self.expected, "actual": self.actual}


class ShapeMismatch(ConversionError):
    """A node had the wrong kind (scalar / sequence / record)."""

    code: ClassVar[str] = "SHAPE_MISMATCH"

    def __init__(self, expected: str, actual: str, *, path: tuple[PathSegment, ...] = ()) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"expected a {expected} node, got a {actual} node", path=path)

    def to_detail(self) -> dict[str, Any]:
        return {**super().to_detail(), "expected": self.expected, "actual": self.actual}


class MissingField(ConversionError):
    """A required record field was absent."""

    code: ClassVar[str] = "MISSING_FIELD"

    def __init__(self, field: str, *, path: tuple[PathSegment, ...] = ()) -> None:
        self.field = field
        super().__init__(f"missing required field {field!r}", path=path)

    def to_detail(self) -> dict[str, Any]:
        return {**super().to_detail(), "field": self.field}


class SizeMismatch(ConversionError):
    """A fixed-size or paired aggregate received the wrong element count."""

    code: ClassVar[str] = "SIZE_MISMATCH"

    def __init__(self, expected: int, actual: int, *, path: tuple[PathSegment, ...] = ()) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"expected {expected} elements, got {actual}", path=path)

    def to_detail(self) -> dict[str, Any]:
        return {**super().to_detail(), "expected": self.expected, "actual": self.actual}


class DuplicateKey(ConversionError):
    """Two elements of a keyed collection share the same key."""

    code: ClassVar[str] = "DUPLICATE_KEY"


class StreamError(ConversionError):
    """The document layer failed to read or write a tree."""

    code: ClassVar[str] = "STREAM_ERROR"


class UnresolvableType(TypeError):
    """No converter can be resolved for a target type.

    This is a programming error (an unregistered aggregate or an unsupported
    annotation), not a data error, so it is not a :class:`ConversionError`.
    """


@contextmanager
def at_path(segment: PathSegment) -> Generator[None]:
    """Annotate any :class:`ConversionError` raised in the block with *segment*."""
    try:
        yield
    except ConversionError as exc:
        exc.at(segment)
        raise
