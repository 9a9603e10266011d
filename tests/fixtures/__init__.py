"""Test fixtures for sif_miner."""

from __future__ import annotations

from pathlib import Path

from sif_miner.graph import (
    ControlType,
    ConversionDirection,
    ElementKind,
    InMemoryGraph,
    Xref,
)
from sif_miner.hgnc import HGNCSymbolTable

FIXTURES_DIR = Path(__file__).parent

PATHWAY_SYMBOLS = {
    "HGNC:3236": "EGFR",
    "HGNC:6407": "KRAS",
    "HGNC:1097": "BRAF",
    "HGNC:11998": "TP53",
    "HGNC:6973": "MDM2",
    "HGNC:4922": "HK1",
    "HGNC:4458": "GPI",
}


def load_fixture(name: str) -> str:
    """Load a fixture file by name."""
    return (FIXTURES_DIR / name).read_text()


def pathway_symbols() -> HGNCSymbolTable:
    return HGNCSymbolTable(PATHWAY_SYMBOLS)


def _protein(graph: InMemoryGraph, symbol: str, hgnc_id: str | None) -> None:
    xrefs = [Xref(db="HGNC", id=hgnc_id)] if hgnc_id else []
    graph.add_element(f"ref/{symbol}", ElementKind.PROTEIN_REFERENCE, xrefs=xrefs)


def _chemical(graph: InMemoryGraph, uri: str, name: str) -> None:
    ref = graph.add_element(f"ref/{uri}", ElementKind.SMALL_MOLECULE_REFERENCE, display_name=name)
    pe = graph.add_element(f"pe/{uri}", ElementKind.SMALL_MOLECULE)
    graph.set_reference(pe, ref)


def build_pathway_graph() -> InMemoryGraph:
    """Small signaling + glycolysis graph covering every relation type.

    Expected relations (with an HGNC table from ``pathway_symbols``):
    - EGFR controls-state-change-of KRAS (GDP -> GTP)
    - TP53 controls-expression-of MDM2
    - MDM2 controls-degradation-of TP53
    - HK1 turns glucose + ATP into glucose-6-phosphate + ADP
    - GPI turns glucose-6-phosphate into fructose-6-phosphate
    - EGFR and BRAF form a complex; BRAF binds active KRAS
    """
    g = InMemoryGraph()

    for symbol, hgnc_id in [
        ("EGFR", "HGNC:3236"),
        ("KRAS", "HGNC:6407"),
        ("BRAF", "HGNC:1097"),
        ("TP53", "HGNC:11998"),
        ("MDM2", "HGNC:6973"),
        ("HK1", "HGNC:4922"),
        ("GPI", "HGNC:4458"),
    ]:
        _protein(g, symbol, hgnc_id)

    def pe(uri: str, ref: str) -> None:
        element = g.add_element(uri, ElementKind.PROTEIN)
        g.set_reference(element, _get(g, ref))

    pe("pe/EGFR", "ref/EGFR")
    pe("pe/KRAS-GDP", "ref/KRAS")
    pe("pe/KRAS-GTP", "ref/KRAS")
    pe("pe/BRAF", "ref/BRAF")
    pe("pe/TP53", "ref/TP53")
    pe("pe/MDM2", "ref/MDM2")
    pe("pe/HK1", "ref/HK1")
    pe("pe/GPI", "ref/GPI")

    _chemical(g, "glucose", "glucose")
    _chemical(g, "atp", "ATP")
    _chemical(g, "g6p", "glucose-6-phosphate")
    _chemical(g, "adp", "ADP")
    _chemical(g, "f6p", "fructose-6-phosphate")

    # KRAS activation catalysed by EGFR
    rxn = g.add_element("rxn/kras-activation", ElementKind.BIOCHEMICAL_REACTION)
    g.add_left(rxn, _get(g, "pe/KRAS-GDP"))
    g.add_right(rxn, _get(g, "pe/KRAS-GTP"))
    g.set_direction(rxn, ConversionDirection.LEFT_TO_RIGHT)
    ctrl = g.add_element("ctrl/egfr-kras", ElementKind.CATALYSIS)
    g.add_controller(ctrl, _get(g, "pe/EGFR"))
    g.add_controlled(ctrl, rxn)

    # Hexokinase step, direction unknown
    hk = g.add_element("rxn/hexokinase", ElementKind.BIOCHEMICAL_REACTION)
    for uri in ("pe/glucose", "pe/atp"):
        g.add_left(hk, _get(g, uri))
    for uri in ("pe/g6p", "pe/adp"):
        g.add_right(hk, _get(g, uri))
    hk_ctrl = g.add_element("ctrl/hk1", ElementKind.CATALYSIS)
    g.add_controller(hk_ctrl, _get(g, "pe/HK1"))
    g.add_controlled(hk_ctrl, hk)

    # Isomerase step, written right to left
    gpi = g.add_element("rxn/isomerase", ElementKind.BIOCHEMICAL_REACTION)
    g.add_left(gpi, _get(g, "pe/f6p"))
    g.add_right(gpi, _get(g, "pe/g6p"))
    g.set_direction(gpi, ConversionDirection.RIGHT_TO_LEFT)
    gpi_ctrl = g.add_element("ctrl/gpi", ElementKind.CATALYSIS)
    g.add_controller(gpi_ctrl, _get(g, "pe/GPI"))
    g.add_controlled(gpi_ctrl, gpi)

    # TP53 drives MDM2 expression, MDM2 degrades TP53
    tr = g.add_element("tr/mdm2", ElementKind.TEMPLATE_REACTION)
    g.add_product(tr, _get(g, "pe/MDM2"))
    tr_ctrl = g.add_element("ctrl/tp53-mdm2", ElementKind.CONTROL)
    g.add_controller(tr_ctrl, _get(g, "pe/TP53"))
    g.add_controlled(tr_ctrl, tr)
    g.set_control_type(tr_ctrl, ControlType.ACTIVATION)

    deg = g.add_element("deg/tp53", ElementKind.DEGRADATION)
    g.add_left(deg, _get(g, "pe/TP53"))
    deg_ctrl = g.add_element("ctrl/mdm2-tp53", ElementKind.CONTROL)
    g.add_controller(deg_ctrl, _get(g, "pe/MDM2"))
    g.add_controlled(deg_ctrl, deg)

    # Binding
    cx = g.add_element("cx/egfr-braf", ElementKind.COMPLEX)
    g.add_component(cx, _get(g, "pe/EGFR"))
    g.add_component(cx, _get(g, "pe/BRAF"))

    mi = g.add_element("mi/braf-kras", ElementKind.MOLECULAR_INTERACTION)
    g.add_participant(mi, _get(g, "pe/BRAF"))
    g.add_participant(mi, _get(g, "pe/KRAS-GTP"))

    return g


def _get(graph: InMemoryGraph, uri: str):  # type: ignore[no-untyped-def]
    element = graph.get(uri)
    assert element is not None, uri
    return element
