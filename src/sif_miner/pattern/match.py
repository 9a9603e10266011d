"""Pattern variables and match binding vectors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from sif_miner.graph import Element
    from sif_miner.pattern.pattern import Pattern


@dataclass(frozen=True)
class Variable:
    """A pattern variable: a label bound to a slot index."""

    name: str
    index: int


class Match:
    """Fixed-size binding of pattern variables to graph elements.

    Matches are immutable. Binding a slot returns a new match, so partial
    matches can be handed to sibling search branches without copying.
    """

    __slots__ = ("_slots",)

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError("A match needs at least one slot")
        self._slots: tuple[Optional[Element], ...] = (None,) * size

    @classmethod
    def seeded(cls, size: int, seed: Element) -> Match:
        return cls(size).extended(0, seed)

    def __len__(self) -> int:
        return len(self._slots)

    def __getitem__(self, index: int) -> Element:
        element = self._slots[index]
        if element is None:
            raise LookupError(f"Slot {index} is not bound")
        return element

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Match):
            return NotImplemented
        return self._slots == other._slots

    def __hash__(self) -> int:
        return hash(self._slots)

    def __repr__(self) -> str:
        bound = ", ".join("_" if e is None else e.uri for e in self._slots)
        return f"Match({bound})"

    def get(self, index: int) -> Optional[Element]:
        return self._slots[index]

    def get_by_label(self, label: str, pattern: Pattern) -> Element:
        return self[pattern.index_of(label)]

    def is_bound(self, index: int) -> bool:
        return self._slots[index] is not None

    @property
    def is_complete(self) -> bool:
        return all(e is not None for e in self._slots)

    def elements(self) -> tuple[Optional[Element], ...]:
        return self._slots

    def extended(self, index: int, element: Element) -> Match:
        """Return a copy of this match with ``index`` bound to ``element``."""
        if self._slots[index] is not None:
            raise ValueError(f"Slot {index} is already bound")
        child = Match.__new__(Match)
        child._slots = self._slots[:index] + (element,) + self._slots[index + 1 :]
        return child
