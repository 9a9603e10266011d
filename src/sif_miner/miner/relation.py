"""Relation (SIF edge) records and their merge rules."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sif_miner.graph import Element


class RelationType(str, Enum):
    """Relation types, tagged as they appear in SIF output."""

    CONTROLS_STATE_CHANGE_OF = "controls-state-change-of"
    CONTROLS_TRANSPORT_OF = "controls-transport-of"
    CONTROLS_EXPRESSION_OF = "controls-expression-of"
    CONTROLS_DEGRADATION_OF = "controls-degradation-of"
    CONTROLS_PRODUCTION_OF = "controls-production-of"
    CONSUMPTION_CONTROLLED_BY = "consumption-controlled-by"
    CATALYSIS_PRECEDES = "catalysis-precedes"
    USED_TO_PRODUCE = "used-to-produce"
    REACTS_WITH = "reacts-with"
    IN_COMPLEX_WITH = "in-complex-with"
    INTERACTS_WITH = "interacts-with"

    @property
    def tag(self) -> str:
        return self.value

    @property
    def directed(self) -> bool:
        return self not in _UNDIRECTED

    @classmethod
    def from_tag(cls, tag: str) -> RelationType:
        """Look up a type by its tag, accepting enum names too."""
        text = tag.strip()
        for member in cls:
            if text.lower() == member.value or text.upper() == member.name:
                return member
        valid = ", ".join(m.value for m in cls)
        raise ValueError(f"Unknown relation type '{tag}'. Valid types: {valid}")


_UNDIRECTED = frozenset(
    {RelationType.REACTS_WITH, RelationType.IN_COMPLEX_WITH, RelationType.INTERACTS_WITH}
)


class Relation:
    """A typed pairwise relation between two identified entities.

    Identity is (type, source, target). Undirected relations store their
    endpoints in sorted order, so A-B and B-A are the same relation. The
    mediator set is provenance: it grows on merge but is not part of identity.
    """

    __slots__ = ("type", "source", "target", "mediators")

    def __init__(
        self,
        type: RelationType,
        source: str,
        target: str,
        mediators: Iterable[Element] = (),
    ) -> None:
        if not type.directed and target < source:
            source, target = target, source
        self.type = type
        self.source = source
        self.target = target
        self.mediators: set[Element] = set(mediators)

    @property
    def directed(self) -> bool:
        return self.type.directed

    @property
    def key(self) -> tuple[RelationType, str, str]:
        return (self.type, self.source, self.target)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Relation):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        arrow = "->" if self.directed else "--"
        return (
            f"Relation({self.source} {arrow}[{self.type.tag}] {self.target}, "
            f"mediators={len(self.mediators)})"
        )

    def merge_with(self, other: Relation) -> None:
        """Absorb the provenance of an equal relation."""
        if other.key != self.key:
            raise ValueError(f"Cannot merge {other!r} into {self!r}: different identity")
        self.mediators |= other.mediators

    def merged(self, other: Relation) -> Relation:
        """Return a new relation holding the provenance of both."""
        result = Relation(self.type, self.source, self.target, self.mediators)
        result.merge_with(other)
        return result

    def mediator_ids(self) -> list[str]:
        return sorted(m.uri for m in self.mediators)

    def sort_key(self) -> tuple[str, str, str, tuple[str, ...]]:
        """Order by type tag, source, target; ties broken by mediator URIs."""
        return (self.type.tag, self.source, self.target, tuple(self.mediator_ids()))

    def to_text(self, with_mediators: bool = False) -> str:
        """Render as ``source<TAB>type<TAB>target``, optionally with mediators."""
        columns = [self.source, self.type.tag, self.target]
        if with_mediators:
            columns.extend(self.mediator_ids())
        return "\t".join(columns)

    def __str__(self) -> str:
        return self.to_text()
