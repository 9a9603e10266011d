"""Protocol definitions for the collaborators of the miner.

The pattern engine only talks to the element graph, the symbol lookup and the
ID resolver through these interfaces, so alternative graph stores or resolvers
can be plugged in without touching the engine.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sif_miner.graph import ControlType, ConversionDirection, Element, ElementKind, Xref


@dataclass
class MinerStats:
    """Statistics from running one miner over a graph."""

    miner: str
    matches: int = 0
    relations: int = 0
    unresolved: int = 0
    duration_seconds: float = 0.0

    def __str__(self) -> str:
        """Return a human-readable summary."""
        parts = [f"{self.matches:,} matches", f"{self.relations:,} relations"]
        if self.unresolved:
            parts.append(f"{self.unresolved:,} unresolved")
        return f"{self.miner}: {', '.join(parts)} ({self.duration_seconds:.1f}s)"


@runtime_checkable
class ElementGraph(Protocol):
    """Read-only view of a molecular interaction graph.

    Every accessor returns finite sequences of element handles. Implementations
    may be cyclic; callers must not assume otherwise.
    """

    def elements_of_kind(self, kind: ElementKind) -> Sequence[Element]: ...

    def elements_matching(self, predicate: Callable[[ElementKind], bool]) -> Sequence[Element]: ...

    def display_name(self, element: Element) -> Optional[str]: ...

    def names(self, element: Element) -> Sequence[str]: ...

    def xrefs(self, element: Element) -> Sequence[Xref]: ...

    def entity_reference(self, entity: Element) -> Optional[Element]: ...

    def entity_reference_of(self, reference: Element) -> Sequence[Element]: ...

    def participant_of(self, entity: Element) -> Sequence[Element]: ...

    def participants(self, interaction: Element) -> Sequence[Element]: ...

    def left(self, conversion: Element) -> Sequence[Element]: ...

    def right(self, conversion: Element) -> Sequence[Element]: ...

    def direction(self, conversion: Element) -> Optional[ConversionDirection]: ...

    def controllers(self, control: Element) -> Sequence[Element]: ...

    def controlled(self, control: Element) -> Sequence[Element]: ...

    def controller_of(self, entity: Element) -> Sequence[Element]: ...

    def controlled_by(self, interaction: Element) -> Sequence[Element]: ...

    def control_type(self, control: Element) -> Optional[ControlType]: ...

    def components(self, complex_: Element) -> Sequence[Element]: ...

    def component_of(self, entity: Element) -> Sequence[Element]: ...

    def products(self, template_reaction: Element) -> Sequence[Element]: ...


@runtime_checkable
class SymbolLookup(Protocol):
    """Maps a gene accession to its canonical symbol."""

    def symbol_for(self, accession: str) -> Optional[str]:
        """Return the symbol, or None if the accession is unknown."""
        ...


@runtime_checkable
class IDResolver(Protocol):
    """Maps an element to the identifier written into relations."""

    def resolve(self, graph: ElementGraph, element: Element) -> Optional[str]:
        """Return a stable identifier, or None when the element cannot be named."""
        ...
