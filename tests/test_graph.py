"""Tests for the in-memory element graph."""

from __future__ import annotations

from pathlib import Path

import pytest

from sif_miner.graph import (
    ControlType,
    ConversionDirection,
    Element,
    ElementKind,
    GraphFormatError,
    InMemoryGraph,
    Xref,
)
from sif_miner.protocol import ElementGraph
from tests.fixtures import FIXTURES_DIR, build_pathway_graph


class TestElementKind:
    """Tests for ElementKind capabilities."""

    def test_physical_entities(self) -> None:
        """Test physical entity kinds."""
        assert ElementKind.PROTEIN.is_physical_entity
        assert ElementKind.COMPLEX.is_physical_entity
        assert not ElementKind.PROTEIN_REFERENCE.is_physical_entity

    def test_conversions_are_interactions(self) -> None:
        """Test that conversions count as interactions."""
        for kind in (
            ElementKind.BIOCHEMICAL_REACTION,
            ElementKind.TRANSPORT,
            ElementKind.DEGRADATION,
        ):
            assert kind.is_conversion
            assert kind.is_interaction
        assert not ElementKind.TEMPLATE_REACTION.is_conversion
        assert ElementKind.TEMPLATE_REACTION.is_interaction

    def test_controls(self) -> None:
        """Test control kinds."""
        assert ElementKind.CATALYSIS.is_control
        assert ElementKind.CONTROL.is_interaction
        assert not ElementKind.MOLECULAR_INTERACTION.is_control

    def test_chemicals(self) -> None:
        """Test chemical kinds."""
        assert ElementKind.SMALL_MOLECULE.is_chemical
        assert ElementKind.SMALL_MOLECULE_REFERENCE.is_chemical
        assert not ElementKind.PROTEIN.is_chemical


class TestElement:
    """Tests for element handles."""

    def test_equality_by_index(self) -> None:
        """Test that handles compare by arena index only."""
        a = Element(index=3, kind=ElementKind.PROTEIN, uri="a")
        b = Element(index=3, kind=ElementKind.COMPLEX, uri="b")
        assert a == b
        assert hash(a) == hash(b)
        assert a != Element(index=4, kind=ElementKind.PROTEIN, uri="a")

    def test_str_is_uri(self) -> None:
        """Test string form."""
        assert str(Element(index=0, kind=ElementKind.PROTEIN, uri="pe/X")) == "pe/X"


class TestInMemoryGraphBuilding:
    """Tests for graph builders."""

    def test_add_element(self) -> None:
        """Test adding elements assigns sequential indices."""
        graph = InMemoryGraph()
        a = graph.add_element("a", ElementKind.PROTEIN)
        b = graph.add_element("b", ElementKind.COMPLEX)

        assert (a.index, b.index) == (0, 1)
        assert len(graph) == 2
        assert list(graph) == [a, b]
        assert graph.get("b") is b
        assert graph.get("missing") is None

    def test_duplicate_uri_rejected(self) -> None:
        """Test that URIs are unique."""
        graph = InMemoryGraph()
        graph.add_element("a", ElementKind.PROTEIN)
        with pytest.raises(ValueError, match="already exists"):
            graph.add_element("a", ElementKind.PROTEIN)

    def test_foreign_element_rejected(self) -> None:
        """Test that handles from another graph are rejected."""
        graph = InMemoryGraph()
        other = InMemoryGraph()
        foreign = other.add_element("a", ElementKind.PROTEIN)
        other.add_element("b", ElementKind.PROTEIN)

        assert foreign not in graph
        with pytest.raises(KeyError):
            graph.display_name(foreign)

    def test_kind_checks(self) -> None:
        """Test that builders validate element kinds."""
        graph = InMemoryGraph()
        pe = graph.add_element("pe", ElementKind.PROTEIN)
        ref = graph.add_element("ref", ElementKind.PROTEIN_REFERENCE)
        rxn = graph.add_element("rxn", ElementKind.BIOCHEMICAL_REACTION)

        with pytest.raises(ValueError, match="is not a physical entity"):
            graph.set_reference(ref, ref)
        with pytest.raises(ValueError, match="is not a conversion"):
            graph.add_left(pe, pe)
        with pytest.raises(ValueError, match="is not a control"):
            graph.add_controller(rxn, pe)
        with pytest.raises(ValueError, match="is not a complex"):
            graph.add_component(pe, pe)

    def test_links_are_not_duplicated(self) -> None:
        """Test that repeated links are stored once."""
        graph = InMemoryGraph()
        cx = graph.add_element("cx", ElementKind.COMPLEX)
        pe = graph.add_element("pe", ElementKind.PROTEIN)
        graph.add_component(cx, pe)
        graph.add_component(cx, pe)

        assert graph.components(cx) == (pe,)
        assert graph.component_of(pe) == (cx,)


class TestInMemoryGraphAccessors:
    """Tests for neighbor accessors on the pathway fixture."""

    def test_satisfies_protocol(self) -> None:
        """Test that the graph implements the ElementGraph protocol."""
        assert isinstance(build_pathway_graph(), ElementGraph)

    def test_reference_links(self) -> None:
        """Test entity reference links in both directions."""
        graph = build_pathway_graph()
        ref = graph.get("ref/KRAS")
        gdp = graph.get("pe/KRAS-GDP")
        gtp = graph.get("pe/KRAS-GTP")
        assert ref is not None and gdp is not None and gtp is not None

        assert graph.entity_reference(gdp) == ref
        assert graph.entity_reference_of(ref) == (gdp, gtp)

    def test_conversion_sides(self) -> None:
        """Test left, right, direction and participants of a conversion."""
        graph = build_pathway_graph()
        rxn = graph.get("rxn/hexokinase")
        assert rxn is not None

        assert [e.uri for e in graph.left(rxn)] == ["pe/glucose", "pe/atp"]
        assert [e.uri for e in graph.right(rxn)] == ["pe/g6p", "pe/adp"]
        assert graph.direction(rxn) is None
        assert [e.uri for e in graph.participants(rxn)] == [
            "pe/glucose",
            "pe/atp",
            "pe/g6p",
            "pe/adp",
        ]

    def test_participant_of(self) -> None:
        """Test reverse participation links."""
        graph = build_pathway_graph()
        g6p = graph.get("pe/g6p")
        assert g6p is not None

        assert [e.uri for e in graph.participant_of(g6p)] == [
            "rxn/hexokinase",
            "rxn/isomerase",
        ]

    def test_control_links(self) -> None:
        """Test controller and controlled links."""
        graph = build_pathway_graph()
        ctrl = graph.get("ctrl/tp53-mdm2")
        tp53 = graph.get("pe/TP53")
        tr = graph.get("tr/mdm2")
        assert ctrl is not None and tp53 is not None and tr is not None

        assert graph.controllers(ctrl) == (tp53,)
        assert graph.controlled(ctrl) == (tr,)
        assert graph.controller_of(tp53) == (ctrl,)
        assert graph.controlled_by(tr) == (ctrl,)
        assert graph.control_type(ctrl) is ControlType.ACTIVATION

    def test_products(self) -> None:
        """Test template reaction products."""
        graph = build_pathway_graph()
        tr = graph.get("tr/mdm2")
        mdm2 = graph.get("pe/MDM2")
        assert tr is not None and mdm2 is not None

        assert graph.products(tr) == (mdm2,)
        assert graph.participants(tr) == (mdm2,)
        assert tr in graph.participant_of(mdm2)

    def test_elements_of_kind(self) -> None:
        """Test enumeration by kind keeps insertion order."""
        graph = build_pathway_graph()
        refs = graph.elements_of_kind(ElementKind.SMALL_MOLECULE_REFERENCE)
        assert [e.uri for e in refs] == [
            "ref/glucose",
            "ref/atp",
            "ref/g6p",
            "ref/adp",
            "ref/f6p",
        ]

    def test_elements_matching(self) -> None:
        """Test enumeration by capability."""
        graph = build_pathway_graph()
        controls = graph.elements_matching(lambda kind: kind.is_control)
        assert len(controls) == 5


class TestGraphLoading:
    """Tests for loading graphs from declarative models."""

    def test_from_yaml(self) -> None:
        """Test loading the pathway fixture."""
        graph = InMemoryGraph.from_yaml(FIXTURES_DIR / "pathway.yaml")

        rxn = graph.get("rxn/kras-activation")
        ctrl = graph.get("ctrl/egfr-kras")
        kras = graph.get("ref/KRAS")
        assert rxn is not None and ctrl is not None and kras is not None

        assert graph.direction(rxn) is ConversionDirection.LEFT_TO_RIGHT
        assert graph.control_type(ctrl) is ControlType.ACTIVATION
        assert graph.xrefs(kras) == (
            Xref(db="UniProt", id="P01116"),
            Xref(db="HGNC", id="HGNC:6407"),
        )

    def test_names_and_display_name(self) -> None:
        """Test name fields."""
        graph = InMemoryGraph.from_yaml(FIXTURES_DIR / "pathway.yaml")
        atp = graph.get("ref/atp")
        glucose = graph.get("ref/glucose")
        assert atp is not None and glucose is not None

        assert graph.display_name(atp) is None
        assert graph.names(atp) == ("ATP", "adenosine triphosphate")
        assert graph.display_name(glucose) == "glucose"

    def test_forward_references(self) -> None:
        """Test that links may point at entries defined later."""
        graph = InMemoryGraph.from_dict(
            {
                "elements": [
                    {"uri": "cx", "kind": "complex", "components": ["pe"]},
                    {"uri": "pe", "kind": "PROTEIN"},
                ]
            }
        )
        cx = graph.get("cx")
        pe = graph.get("pe")
        assert cx is not None and pe is not None
        assert graph.components(cx) == (pe,)

    def test_empty_model(self) -> None:
        """Test an empty model."""
        assert len(InMemoryGraph.from_dict({})) == 0

    def test_unknown_kind(self) -> None:
        """Test that unknown kinds are rejected."""
        with pytest.raises(GraphFormatError, match="unknown kind"):
            InMemoryGraph.from_dict({"elements": [{"uri": "x", "kind": "pathway"}]})

    def test_missing_uri(self) -> None:
        """Test that entries need a uri."""
        with pytest.raises(GraphFormatError, match="without a uri"):
            InMemoryGraph.from_dict({"elements": [{"kind": "protein"}]})

    def test_dangling_link(self) -> None:
        """Test that links to unknown URIs are rejected."""
        with pytest.raises(GraphFormatError, match="unknown components 'nope'"):
            InMemoryGraph.from_dict(
                {"elements": [{"uri": "cx", "kind": "complex", "components": ["nope"]}]}
            )

    def test_invalid_link_kind(self) -> None:
        """Test that builder kind errors surface as format errors."""
        with pytest.raises(GraphFormatError, match="cx: "):
            InMemoryGraph.from_dict(
                {
                    "elements": [
                        {"uri": "cx", "kind": "complex", "left": ["pe"]},
                        {"uri": "pe", "kind": "protein"},
                    ]
                }
            )

    def test_invalid_direction(self) -> None:
        """Test that unknown directions are rejected."""
        with pytest.raises(GraphFormatError):
            InMemoryGraph.from_dict(
                {"elements": [{"uri": "r", "kind": "transport", "direction": "sideways"}]}
            )

    def test_top_level_must_be_mapping(self, tmp_path: Path) -> None:
        """Test YAML files whose top level is not a mapping."""
        path = tmp_path / "model.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(GraphFormatError, match="expected a mapping"):
            InMemoryGraph.from_yaml(path)
