"""Tests for collaborator protocols and miner statistics."""

from __future__ import annotations

from dataclasses import fields
from typing import Optional

from sif_miner.graph import Element
from sif_miner.protocol import ElementGraph, IDResolver, MinerStats, SymbolLookup


class TestMinerStats:
    """Tests for MinerStats dataclass."""

    def test_defaults(self) -> None:
        """Test default counters."""
        stats = MinerStats(miner="reacts-with")
        assert stats.matches == 0
        assert stats.relations == 0
        assert stats.unresolved == 0
        assert stats.duration_seconds == 0.0
        assert [f.name for f in fields(stats)] == [
            "miner",
            "matches",
            "relations",
            "unresolved",
            "duration_seconds",
        ]

    def test_str(self) -> None:
        """Test the summary line."""
        stats = MinerStats(
            miner="used-to-produce", matches=1200, relations=340, duration_seconds=1.26
        )
        assert str(stats) == "used-to-produce: 1,200 matches, 340 relations (1.3s)"

    def test_str_with_unresolved(self) -> None:
        """Test that unresolved matches are reported when present."""
        stats = MinerStats(miner="in-complex-with", matches=4, relations=1, unresolved=2)
        assert str(stats) == "in-complex-with: 4 matches, 1 relations, 2 unresolved (0.0s)"


class TestProtocols:
    """Tests for structural protocol checks."""

    def test_symbol_lookup(self) -> None:
        """Test that any object with symbol_for is a SymbolLookup."""

        class Fixed:
            def symbol_for(self, accession: str) -> Optional[str]:
                return "EGFR"

        assert isinstance(Fixed(), SymbolLookup)
        assert not isinstance(object(), SymbolLookup)

    def test_id_resolver(self) -> None:
        """Test that any object with resolve is an IDResolver."""

        class ByUri:
            def resolve(self, graph: ElementGraph, element: Element) -> Optional[str]:
                return element.uri

        assert isinstance(ByUri(), IDResolver)

    def test_partial_graph_is_not_element_graph(self) -> None:
        """Test that a graph missing accessors does not satisfy ElementGraph."""

        class Partial:
            def elements_of_kind(self, kind: object) -> list[Element]:
                return []

        assert not isinstance(Partial(), ElementGraph)
