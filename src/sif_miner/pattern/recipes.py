"""Ready-made patterns for the relation miners.

Protein patterns start at protein references ("PR") and walk down to the
physical entities ("PE") that use them, then up into any complexes that
contain those entities. Small molecule patterns start at small molecule
references ("SMR"). Ubiquitous molecules (ATP, water, ...) are excluded from
the small-molecule roles when their URIs are given.
"""

from __future__ import annotations

from collections.abc import Collection

from sif_miner.graph import ElementKind
from sif_miner.pattern.constraints import (
    ControllerOf,
    ControlToController,
    ControlToControlled,
    ControlledBy,
    ConversionSide,
    Equality,
    ERToPE,
    InteractionParticipant,
    LinkDirection,
    LinkedPE,
    NonUbique,
    Not,
    Or,
    ParticipatesInConv,
    ParticipatesInInteraction,
    PEToER,
    RelType,
    Side,
    SideCount,
    TemplateProduct,
    Type,
)
from sif_miner.pattern.pattern import Pattern

_METABOLIC_CONVERSION = Or(Type(ElementKind.BIOCHEMICAL_REACTION), Type(ElementKind.TRANSPORT))


def _controller_to_control(p: Pattern) -> Pattern:
    """controller PR -> controller simple PE -> controller PE -> Control."""
    p.add(ERToPE(), "controller PR", "controller simple PE")
    p.add(LinkedPE(LinkDirection.UP), "controller simple PE", "controller PE")
    p.add(ControllerOf(), "controller PE", "Control")
    return p


def _state_change(conversion_kind: ElementKind) -> Pattern:
    p = _controller_to_control(Pattern(ElementKind.PROTEIN_REFERENCE, "controller PR"))
    p.add(ControlToControlled(), "Control", "Conversion")
    p.add(Type(conversion_kind), "Conversion")
    p.add(Not(ParticipatesInInteraction()), "controller PE", "Conversion")
    p.add(InteractionParticipant(), "Conversion", "input PE")
    p.add(ParticipatesInConv(RelType.INPUT), "input PE", "Conversion")
    p.add(LinkedPE(LinkDirection.DOWN), "input PE", "input simple PE")
    p.add(Type(ElementKind.PROTEIN), "input simple PE")
    p.add(PEToER(), "input simple PE", "changed PR")
    p.add(ConversionSide(Side.OTHER), "input PE", "Conversion", "output PE")
    p.add(LinkedPE(LinkDirection.DOWN), "output PE", "output simple PE")
    p.add(Equality(False), "input simple PE", "output simple PE")
    p.add(PEToER(), "output simple PE", "changed PR")
    return p


def controls_state_change() -> Pattern:
    """A protein controls a reaction that changes the state of a second protein.

    The second protein appears on both sides of the reaction as different
    physical entities sharing one reference.
    """
    return _state_change(ElementKind.BIOCHEMICAL_REACTION)


def controls_transport() -> Pattern:
    """A protein controls the transport of a second protein."""
    return _state_change(ElementKind.TRANSPORT)


def controls_state_change_through_binding_small_molecule(
    ubique_ids: Collection[str] = (),
) -> Pattern:
    """A protein produces a small molecule that binds a second protein and changes its state.

    The upper protein catalyses a reaction with a non-ubiquitous small molecule
    as output. That molecule is an input of a second reaction in which the
    changed protein appears on both sides as different physical entities.
    """
    p = Pattern(ElementKind.PROTEIN_REFERENCE, "upper controller PR")
    p.add(ERToPE(), "upper controller PR", "upper controller simple PE")
    p.add(LinkedPE(LinkDirection.UP), "upper controller simple PE", "upper controller PE")
    p.add(ControllerOf(), "upper controller PE", "upper Control")
    p.add(ControlToControlled(), "upper Control", "upper Conversion")
    p.add(_METABOLIC_CONVERSION, "upper Conversion")
    p.add(InteractionParticipant(), "upper Conversion", "SM")
    p.add(ParticipatesInConv(RelType.OUTPUT), "SM", "upper Conversion")
    p.add(Type(ElementKind.SMALL_MOLECULE), "SM")
    p.add(NonUbique(ubique_ids), "SM")
    p.add(ParticipatesInConv(RelType.INPUT), "SM", "Conversion")
    p.add(Equality(False), "upper Conversion", "Conversion")
    p.add(Type(ElementKind.BIOCHEMICAL_REACTION), "Conversion")
    p.add(ConversionSide(Side.SAME), "SM", "Conversion", "input PE")
    p.add(LinkedPE(LinkDirection.DOWN), "input PE", "input simple PE")
    p.add(Type(ElementKind.PROTEIN), "input simple PE")
    p.add(PEToER(), "input simple PE", "changed ER")
    p.add(ConversionSide(Side.OTHER), "input PE", "Conversion", "output PE")
    p.add(LinkedPE(LinkDirection.DOWN), "output PE", "output simple PE")
    p.add(Equality(False), "input simple PE", "output simple PE")
    p.add(PEToER(), "output simple PE", "changed ER")
    return p


def _metabolic_catalysis(ubique_ids: Collection[str], role: RelType) -> Pattern:
    p = _controller_to_control(Pattern(ElementKind.PROTEIN_REFERENCE, "controller PR"))
    p.add(ControlToControlled(), "Control", "Conversion")
    p.add(_METABOLIC_CONVERSION, "Conversion")
    p.add(InteractionParticipant(), "Conversion", "part PE")
    p.add(ParticipatesInConv(role), "part PE", "Conversion")
    p.add(Type(ElementKind.SMALL_MOLECULE), "part PE")
    p.add(NonUbique(ubique_ids), "part PE")
    p.add(PEToER(), "part PE", "part SMR")
    return p


def controls_production(ubique_ids: Collection[str] = ()) -> Pattern:
    """A protein controls a reaction that produces a small molecule."""
    return _metabolic_catalysis(ubique_ids, RelType.OUTPUT)


def consumption_controlled_by(ubique_ids: Collection[str] = ()) -> Pattern:
    """A protein controls a reaction that consumes a small molecule."""
    return _metabolic_catalysis(ubique_ids, RelType.INPUT)


def controls_degradation() -> Pattern:
    p = _controller_to_control(Pattern(ElementKind.PROTEIN_REFERENCE, "controller PR"))
    p.add(ControlToControlled(), "Control", "Conversion")
    p.add(Type(ElementKind.DEGRADATION), "Conversion")
    p.add(InteractionParticipant(), "Conversion", "input PE")
    p.add(LinkedPE(LinkDirection.DOWN), "input PE", "input simple PE")
    p.add(Type(ElementKind.PROTEIN), "input simple PE")
    p.add(PEToER(), "input simple PE", "degraded PR")
    return p


def controls_expression() -> Pattern:
    """A transcription factor controls a template reaction producing a protein."""
    p = _controller_to_control(Pattern(ElementKind.PROTEIN_REFERENCE, "controller PR"))
    p.add(ControlToControlled(), "Control", "TempReac")
    p.add(Type(ElementKind.TEMPLATE_REACTION), "TempReac")
    p.add(TemplateProduct(), "TempReac", "product PE")
    p.add(LinkedPE(LinkDirection.DOWN), "product PE", "product simple PE")
    p.add(Type(ElementKind.PROTEIN), "product simple PE")
    p.add(PEToER(), "product simple PE", "product PR")
    return p


def controls_expression_with_conversion() -> Pattern:
    """A protein controls a conversion that creates a second protein from nothing.

    Some models write expression as a conversion with an empty left side and
    a single product instead of a template reaction.
    """
    p = _controller_to_control(Pattern(ElementKind.PROTEIN_REFERENCE, "controller PR"))
    p.add(ControlToControlled(), "Control", "Conversion")
    p.add(Type(lambda kind: kind.is_conversion), "Conversion")
    p.add(SideCount(left=0, right=1), "Conversion")
    p.add(InteractionParticipant(), "Conversion", "product PE")
    p.add(LinkedPE(LinkDirection.DOWN), "product PE", "product simple PE")
    p.add(Type(ElementKind.PROTEIN), "product simple PE")
    p.add(PEToER(), "product simple PE", "product PR")
    p.add(Equality(False), "controller PR", "product PR")
    return p


def catalysis_precedes(ubique_ids: Collection[str] = ()) -> Pattern:
    """Two proteins catalyse consecutive reactions linked by a small molecule."""
    p = Pattern(ElementKind.PROTEIN_REFERENCE, "first PR")
    p.add(ERToPE(), "first PR", "first simple PE")
    p.add(LinkedPE(LinkDirection.UP), "first simple PE", "first controller PE")
    p.add(ControllerOf(), "first controller PE", "first Control")
    p.add(ControlToControlled(), "first Control", "first Conversion")
    p.add(_METABOLIC_CONVERSION, "first Conversion")
    p.add(InteractionParticipant(), "first Conversion", "linker PE")
    p.add(ParticipatesInConv(RelType.OUTPUT), "linker PE", "first Conversion")
    p.add(Type(ElementKind.SMALL_MOLECULE), "linker PE")
    p.add(NonUbique(ubique_ids), "linker PE")
    p.add(ParticipatesInConv(RelType.INPUT), "linker PE", "second Conversion")
    p.add(Equality(False), "first Conversion", "second Conversion")
    p.add(ControlledBy(), "second Conversion", "second Control")
    p.add(ControlToController(), "second Control", "second controller PE")
    p.add(LinkedPE(LinkDirection.DOWN), "second controller PE", "second simple PE")
    p.add(Type(ElementKind.PROTEIN), "second simple PE")
    p.add(PEToER(), "second simple PE", "second PR")
    return p


def used_to_produce(ubique_ids: Collection[str] = ()) -> Pattern:
    """A small molecule is consumed by a reaction that produces another one."""
    p = Pattern(ElementKind.SMALL_MOLECULE_REFERENCE, "first SMR")
    p.add(NonUbique(ubique_ids), "first SMR")
    p.add(ERToPE(), "first SMR", "first SM")
    p.add(ParticipatesInConv(RelType.INPUT), "first SM", "Conversion")
    p.add(ConversionSide(Side.OTHER), "first SM", "Conversion", "second SM")
    p.add(ParticipatesInConv(RelType.OUTPUT), "second SM", "Conversion")
    p.add(Type(ElementKind.SMALL_MOLECULE), "second SM")
    p.add(PEToER(), "second SM", "second SMR")
    p.add(NonUbique(ubique_ids), "second SMR")
    p.add(Equality(False), "first SMR", "second SMR")
    return p


def reacts_with(ubique_ids: Collection[str] = ()) -> Pattern:
    """Two small molecules are inputs of the same reaction."""
    p = Pattern(ElementKind.SMALL_MOLECULE_REFERENCE, "first SMR")
    p.add(NonUbique(ubique_ids), "first SMR")
    p.add(ERToPE(), "first SMR", "first SM")
    p.add(ParticipatesInConv(RelType.INPUT), "first SM", "Conversion")
    p.add(Type(ElementKind.BIOCHEMICAL_REACTION), "Conversion")
    p.add(ConversionSide(Side.SAME), "first SM", "Conversion", "second SM")
    p.add(Type(ElementKind.SMALL_MOLECULE), "second SM")
    p.add(PEToER(), "second SM", "second SMR")
    p.add(NonUbique(ubique_ids), "second SMR")
    p.add(Equality(False), "first SMR", "second SMR")
    return p


def in_complex_with() -> Pattern:
    """Two proteins are members of the same complex."""
    p = Pattern(ElementKind.PROTEIN_REFERENCE, "PR1")
    p.add(ERToPE(), "PR1", "simple PE1")
    p.add(LinkedPE(LinkDirection.UP), "simple PE1", "Complex")
    p.add(Type(ElementKind.COMPLEX), "Complex")
    p.add(LinkedPE(LinkDirection.DOWN), "Complex", "simple PE2")
    p.add(Type(ElementKind.PROTEIN), "simple PE2")
    p.add(PEToER(), "simple PE2", "PR2")
    p.add(Equality(False), "PR1", "PR2")
    return p


def molecular_interaction() -> Pattern:
    """Two proteins participate in the same molecular interaction."""
    p = Pattern(ElementKind.PROTEIN_REFERENCE, "PR1")
    p.add(ERToPE(), "PR1", "simple PE1")
    p.add(LinkedPE(LinkDirection.UP), "simple PE1", "PE1")
    p.add(ParticipatesInInteraction(ElementKind.MOLECULAR_INTERACTION), "PE1", "Interaction")
    p.add(InteractionParticipant(), "Interaction", "PE2")
    p.add(Equality(False), "PE1", "PE2")
    p.add(LinkedPE(LinkDirection.DOWN), "PE2", "simple PE2")
    p.add(Type(ElementKind.PROTEIN), "simple PE2")
    p.add(PEToER(), "simple PE2", "PR2")
    p.add(Equality(False), "PR1", "PR2")
    return p
