"""Categorized vertex identifiers.

A graph may mix id encodings (numeric, string and UUID ids). Identifiers of
different categories never compare equal, so ``VertexId.of(1)`` and
``VertexId.of("1")`` name two different vertices.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple, Union

from .exceptions import InputError

RawId = Union[int, str, uuid.UUID]

_LONG_RE = re.compile(r"^[+-]?\d+$")
_UUID_RE = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


class IdType(Enum):
    """Id category, ordered by its ``code``."""

    LONG = 1
    UTF8 = 2
    UUID = 3

    @property
    def code(self) -> int:
        return int(self.value)


@dataclass(frozen=True)
class VertexId:
    """Opaque, hashable vertex identifier carrying its category.

    Attributes:
        kind: Id category derived from the raw value's type.
        value: The raw id value.
    """

    kind: IdType
    value: RawId

    @classmethod
    def of(cls, raw: Any) -> "VertexId":
        """Wrap a raw Python value, deriving its category from the type.

        Raises:
            InputError: If ``raw`` is not an ``int``, ``str`` or ``UUID``.
        """
        if isinstance(raw, VertexId):
            return raw
        # bool is an int subclass; True would otherwise alias id 1
        if isinstance(raw, bool):
            raise InputError(f"vertex id must not be a bool, got {raw!r}")
        if isinstance(raw, int):
            return cls(IdType.LONG, int(raw))
        if isinstance(raw, str):
            if not raw:
                raise InputError("vertex id must not be empty")
            return cls(IdType.UTF8, raw)
        if isinstance(raw, uuid.UUID):
            return cls(IdType.UUID, raw)
        raise InputError(f"unsupported vertex id type {type(raw).__name__}: {raw!r}")

    @classmethod
    def parse(cls, token: str) -> "VertexId":
        """Parse the text form of an id.

        ``42`` is a LONG id, a hyphenated UUID is a UUID id, ``"42"`` (double
        quoted) is the UTF8 id ``42`` and anything else is a UTF8 id.

        Examples:
            ```python
            >>> VertexId.parse("7")
            VertexId(kind=<IdType.LONG: 1>, value=7)
            >>> VertexId.parse('"7"').kind
            <IdType.UTF8: 2>
            ```
        """
        text = token.strip()
        if not text:
            raise InputError("vertex id must not be blank")
        if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
            inner = text[1:-1]
            if not inner:
                raise InputError("quoted vertex id must not be empty")
            return cls(IdType.UTF8, inner)
        if _LONG_RE.match(text):
            return cls(IdType.LONG, int(text))
        if _UUID_RE.match(text):
            return cls(IdType.UUID, uuid.UUID(text))
        return cls(IdType.UTF8, text)

    @property
    def sort_key(self) -> Tuple[int, Any]:
        """Total order key: category first, then value within the category."""
        return (self.kind.code, self.value)

    def to_text(self) -> str:
        """Inverse of :meth:`parse`."""
        if self.kind is IdType.UTF8 and (
            _LONG_RE.match(str(self.value)) or _UUID_RE.match(str(self.value))
        ):
            return f'"{self.value}"'
        return str(self.value)

    def __str__(self) -> str:
        return str(self.value)


__all__ = ["IdType", "VertexId", "RawId"]
