"""Default element to identifier resolution."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from sif_miner.graph import Element
    from sif_miner.protocol import ElementGraph, SymbolLookup

logger = logging.getLogger(__name__)


class DefaultIDResolver:
    """Names chemicals by their names and genes by their HGNC symbol.

    - Chemicals: the display name, else the first alternate name. An empty
      display name counts as missing, so no relation gets a blank endpoint.
    - Anything else with cross references: the first HGNC xref whose accession
      maps to a non-empty symbol.

    Elements that match neither rule resolve to None and the relations that
    need them are dropped.
    """

    def __init__(self, symbols: SymbolLookup) -> None:
        self.symbols = symbols

    def resolve(self, graph: ElementGraph, element: Element) -> Optional[str]:
        if element.kind.is_chemical:
            display_name = graph.display_name(element)
            if display_name:
                return display_name
            names = graph.names(element)
            return names[0] if names else None

        if element.kind.is_xreferrable:
            for xref in graph.xrefs(element):
                if xref.db is None or not xref.db.lower().startswith("hgnc"):
                    continue
                if xref.id is None:
                    continue
                symbol = self.symbols.symbol_for(xref.id)
                if symbol:
                    return symbol
                logger.debug("No HGNC symbol for %s on %s", xref.id, element.uri)

        return None
