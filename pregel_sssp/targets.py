"""Parsing of the source/target configuration into a :class:`TargetSpec`.

The target configuration is a comma-separated list of vertex ids in the text
form accepted by :meth:`VertexId.parse`. The single token ``*`` selects every
vertex. Examples::

    "7"            -> SINGLE   {7}
    "7, 9, 7"      -> MULTIPLE {7, 9}
    "*"            -> ALL      {}
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional

from .exceptions import ConfigError, InputError
from .ids import VertexId

ALL_TARGETS = "*"


class QuantityType(Enum):
    """How many targets the job was configured with."""

    SINGLE = "single"
    MULTIPLE = "multiple"
    ALL = "all"


@dataclass(frozen=True)
class TargetSpec:
    """Immutable target selection built once at job initialization.

    Attributes:
        quantity: SINGLE, MULTIPLE or ALL.
        target_ids: Distinct target ids; empty iff ``quantity`` is ALL.
    """

    quantity: QuantityType
    target_ids: FrozenSet[VertexId]

    def __post_init__(self) -> None:
        if (self.quantity is QuantityType.ALL) != (not self.target_ids):
            raise ConfigError("target_ids must be empty exactly when quantity is ALL")
        if self.quantity is QuantityType.SINGLE and len(self.target_ids) != 1:
            raise ConfigError("a SINGLE target spec holds exactly one target id")
        if self.quantity is QuantityType.MULTIPLE and len(self.target_ids) < 2:
            raise ConfigError("a MULTIPLE target spec holds at least two target ids")

    @classmethod
    def parse(cls, raw: Optional[str]) -> "TargetSpec":
        """Parse a target configuration string.

        Raises:
            ConfigError: If ``raw`` is blank or malformed (empty tokens, ``*``
                combined with explicit ids).
        """
        if raw is None or not raw.strip():
            raise ConfigError("the target id must not be blank")
        tokens = [t.strip() for t in raw.split(",")]
        if any(not t for t in tokens):
            raise ConfigError(f"malformed target id list {raw!r}: empty entry")
        if ALL_TARGETS in tokens:
            if len(tokens) != 1:
                raise ConfigError(f"malformed target id list {raw!r}: '*' must stand alone")
            return cls(QuantityType.ALL, frozenset())
        try:
            ids = frozenset(VertexId.parse(t) for t in tokens)
        except InputError as exc:
            raise ConfigError(f"malformed target id list {raw!r}: {exc}") from exc
        quantity = QuantityType.SINGLE if len(ids) == 1 else QuantityType.MULTIPLE
        return cls(quantity, ids)

    @property
    def single_target(self) -> Optional[VertexId]:
        """The sole target id for SINGLE specs, else ``None``."""
        if self.quantity is not QuantityType.SINGLE:
            return None
        (only,) = self.target_ids
        return only

    def is_target(self, vertex_id: VertexId) -> bool:
        return vertex_id in self.target_ids

    def to_text(self) -> str:
        if self.quantity is QuantityType.ALL:
            return ALL_TARGETS
        return ",".join(v.to_text() for v in sorted(self.target_ids, key=lambda v: v.sort_key))


def parse_source_id(raw: Optional[str]) -> VertexId:
    """Parse the source configuration into exactly one vertex id.

    Raises:
        ConfigError: If ``raw`` is blank, names several ids, or is ``*``.
    """
    if raw is None or not raw.strip():
        raise ConfigError("the source id must not be blank")
    text = raw.strip()
    if text == ALL_TARGETS or "," in text:
        raise ConfigError(f"the source id must identify exactly one vertex, got {raw!r}")
    try:
        return VertexId.parse(text)
    except InputError as exc:  # pragma: no cover - blank already rejected
        raise ConfigError(str(exc)) from exc


__all__ = ["ALL_TARGETS", "QuantityType", "TargetSpec", "parse_source_id"]
