"""Relation miners and the catalog that maps relation types to them.

A miner binds a pattern to the variables that name the source, target and
mediators of a relation. The catalog is a plain immutable mapping from
relation type to miner factories; callers that need other miners build their
own catalog instead of mutating a shared one.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Optional, TextIO

from sif_miner.miner.relation import Relation, RelationType
from sif_miner.pattern import recipes
from sif_miner.pattern.pattern import Pattern, PatternError

if TYPE_CHECKING:
    from sif_miner.graph import Element
    from sif_miner.pattern.match import Match
    from sif_miner.protocol import ElementGraph, IDResolver

logger = logging.getLogger(__name__)

DEFAULT_HEADER = "Source\tRelation\tTarget"


@dataclass(frozen=True, eq=False)
class Miner:
    """Turns pattern matches into relations of one type."""

    name: str
    relation_type: RelationType
    pattern: Pattern
    source_label: str
    target_label: str
    mediator_labels: tuple[str, ...] = ()
    description: str = ""
    header: str = DEFAULT_HEADER

    def __post_init__(self) -> None:
        for label in (self.source_label, self.target_label, *self.mediator_labels):
            if not self.pattern.has_label(label):
                raise PatternError(f"Miner '{self.name}': pattern has no variable '{label}'")

    @property
    def directed(self) -> bool:
        return self.relation_type.directed

    def create_relation(
        self, graph: ElementGraph, match: Match, resolver: IDResolver
    ) -> Optional[Relation]:
        """Build the relation for a match, or None if an endpoint has no ID."""
        source_id = resolver.resolve(graph, match.get_by_label(self.source_label, self.pattern))
        if source_id is None:
            return None
        target_id = resolver.resolve(graph, match.get_by_label(self.target_label, self.pattern))
        if target_id is None:
            return None
        mediators = [match.get_by_label(label, self.pattern) for label in self.mediator_labels]
        return Relation(self.relation_type, source_id, target_id, mediators)

    def write_result(
        self,
        graph: ElementGraph,
        matches: Mapping[Element, Sequence[Match]],
        out: TextIO,
        resolver: IDResolver,
        with_mediators: bool = False,
    ) -> int:
        """Write this miner's relations as SIF text, preceded by its header.

        Returns:
            Number of distinct relations written.
        """
        relations: dict[Relation, Relation] = {}
        for match_list in matches.values():
            for match in match_list:
                relation = self.create_relation(graph, match, resolver)
                if relation is None:
                    continue
                if relation in relations:
                    relations[relation].merge_with(relation)
                else:
                    relations[relation] = relation

        out.write(self.header)
        for relation in sorted(relations, key=Relation.sort_key):
            out.write("\n")
            out.write(relation.to_text(with_mediators))
        out.write("\n")
        return len(relations)


MinerFactory = Callable[[Collection[str]], Miner]


def controls_state_change_miner(ubique_ids: Collection[str] = ()) -> Miner:
    return Miner(
        name="controls-state-change",
        relation_type=RelationType.CONTROLS_STATE_CHANGE_OF,
        pattern=recipes.controls_state_change(),
        source_label="controller PR",
        target_label="changed PR",
        mediator_labels=("Control", "Conversion"),
        description="First protein controls a reaction that changes the state of the second.",
        header="Upstream\tRelation\tDownstream",
    )


def controls_state_change_through_binding_small_molecule_miner(
    ubique_ids: Collection[str] = (),
) -> Miner:
    return Miner(
        name="controls-state-change-through-binding-small-molecule",
        relation_type=RelationType.CONTROLS_STATE_CHANGE_OF,
        pattern=recipes.controls_state_change_through_binding_small_molecule(ubique_ids),
        source_label="upper controller PR",
        target_label="changed ER",
        mediator_labels=("upper Control", "upper Conversion", "Conversion"),
        description=(
            "First protein produces a non-ubiquitous small molecule, and this small "
            "molecule controls the state of the second protein."
        ),
        header="Upstream\tRelation\tDownstream",
    )


def controls_transport_miner(ubique_ids: Collection[str] = ()) -> Miner:
    return Miner(
        name="controls-transport",
        relation_type=RelationType.CONTROLS_TRANSPORT_OF,
        pattern=recipes.controls_transport(),
        source_label="controller PR",
        target_label="changed PR",
        mediator_labels=("Control", "Conversion"),
        description="First protein controls the transport of the second.",
        header="Upstream\tRelation\tDownstream",
    )


def controls_expression_miner(ubique_ids: Collection[str] = ()) -> Miner:
    return Miner(
        name="controls-expression",
        relation_type=RelationType.CONTROLS_EXPRESSION_OF,
        pattern=recipes.controls_expression(),
        source_label="controller PR",
        target_label="product PR",
        mediator_labels=("Control", "TempReac"),
        description="First protein controls a template reaction producing the second.",
        header="Upstream\tRelation\tDownstream",
    )


def controls_expression_with_conversion_miner(ubique_ids: Collection[str] = ()) -> Miner:
    return Miner(
        name="controls-expression-with-conversion",
        relation_type=RelationType.CONTROLS_EXPRESSION_OF,
        pattern=recipes.controls_expression_with_conversion(),
        source_label="controller PR",
        target_label="product PR",
        mediator_labels=("Control", "Conversion"),
        description="First protein controls a conversion that creates the second from nothing.",
        header="Upstream\tRelation\tDownstream",
    )


def controls_degradation_miner(ubique_ids: Collection[str] = ()) -> Miner:
    return Miner(
        name="controls-degradation",
        relation_type=RelationType.CONTROLS_DEGRADATION_OF,
        pattern=recipes.controls_degradation(),
        source_label="controller PR",
        target_label="degraded PR",
        mediator_labels=("Control", "Conversion"),
        description="First protein controls a conversion that degrades the second.",
        header="Upstream\tRelation\tDownstream",
    )


def controls_production_miner(ubique_ids: Collection[str] = ()) -> Miner:
    return Miner(
        name="controls-production",
        relation_type=RelationType.CONTROLS_PRODUCTION_OF,
        pattern=recipes.controls_production(ubique_ids),
        source_label="controller PR",
        target_label="part SMR",
        mediator_labels=("Control", "Conversion"),
        description="Protein controls a reaction that produces a small molecule.",
    )


def consumption_controlled_by_miner(ubique_ids: Collection[str] = ()) -> Miner:
    return Miner(
        name="consumption-controlled-by",
        relation_type=RelationType.CONSUMPTION_CONTROLLED_BY,
        pattern=recipes.consumption_controlled_by(ubique_ids),
        source_label="part SMR",
        target_label="controller PR",
        mediator_labels=("Control", "Conversion"),
        description="Small molecule is consumed by a reaction the protein controls.",
    )


def catalysis_precedes_miner(ubique_ids: Collection[str] = ()) -> Miner:
    return Miner(
        name="catalysis-precedes",
        relation_type=RelationType.CATALYSIS_PRECEDES,
        pattern=recipes.catalysis_precedes(ubique_ids),
        source_label="first PR",
        target_label="second PR",
        mediator_labels=(
            "first Control",
            "first Conversion",
            "second Control",
            "second Conversion",
        ),
        description="First protein catalyses a reaction whose output feeds the second's.",
    )


def used_to_produce_miner(ubique_ids: Collection[str] = ()) -> Miner:
    return Miner(
        name="used-to-produce",
        relation_type=RelationType.USED_TO_PRODUCE,
        pattern=recipes.used_to_produce(ubique_ids),
        source_label="first SMR",
        target_label="second SMR",
        mediator_labels=("Conversion",),
        description="First small molecule is an input of a reaction producing the second.",
    )


def reacts_with_miner(ubique_ids: Collection[str] = ()) -> Miner:
    return Miner(
        name="reacts-with",
        relation_type=RelationType.REACTS_WITH,
        pattern=recipes.reacts_with(ubique_ids),
        source_label="first SMR",
        target_label="second SMR",
        mediator_labels=("Conversion",),
        description="Two small molecules are inputs of the same reaction.",
        header="Molecule 1\tRelation\tMolecule 2",
    )


def in_complex_with_miner(ubique_ids: Collection[str] = ()) -> Miner:
    return Miner(
        name="in-complex-with",
        relation_type=RelationType.IN_COMPLEX_WITH,
        pattern=recipes.in_complex_with(),
        source_label="PR1",
        target_label="PR2",
        mediator_labels=("Complex",),
        description="Two proteins are members of the same complex.",
        header="Protein 1\tRelation\tProtein 2",
    )


def interacts_with_miner(ubique_ids: Collection[str] = ()) -> Miner:
    return Miner(
        name="interacts-with",
        relation_type=RelationType.INTERACTS_WITH,
        pattern=recipes.molecular_interaction(),
        source_label="PR1",
        target_label="PR2",
        mediator_labels=("Interaction",),
        description="Two proteins participate in the same molecular interaction.",
        header="Protein 1\tRelation\tProtein 2",
    )


@dataclass(frozen=True)
class MinerCatalog:
    """Immutable mapping from relation type to the factories of its miners."""

    factories: Mapping[RelationType, tuple[MinerFactory, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen = {t: tuple(fs) for t, fs in self.factories.items()}
        object.__setattr__(self, "factories", MappingProxyType(frozen))

    def types(self) -> list[RelationType]:
        return list(self.factories)

    def with_factories(self, relation_type: RelationType, *factories: MinerFactory) -> MinerCatalog:
        """Return a copy of this catalog with the miners for one type replaced."""
        updated = dict(self.factories)
        updated[relation_type] = tuple(factories)
        return MinerCatalog(updated)

    def build(
        self,
        types: Iterable[RelationType],
        ubique_ids: Collection[str] = frozenset(),
    ) -> list[Miner]:
        """Instantiate the miners for the requested types.

        Raises:
            ValueError: If a requested type has no miners in this catalog.
        """
        miners: list[Miner] = []
        for relation_type in dict.fromkeys(types):
            if relation_type not in self.factories:
                raise ValueError(f"No miners registered for '{relation_type.tag}'")
            miners.extend(factory(ubique_ids) for factory in self.factories[relation_type])
        return miners


def default_catalog() -> MinerCatalog:
    """Return a fresh catalog with a miner for every relation type."""
    return MinerCatalog(
        {
            RelationType.CONTROLS_STATE_CHANGE_OF: (
                controls_state_change_miner,
                controls_state_change_through_binding_small_molecule_miner,
            ),
            RelationType.CONTROLS_TRANSPORT_OF: (controls_transport_miner,),
            RelationType.CONTROLS_EXPRESSION_OF: (
                controls_expression_miner,
                controls_expression_with_conversion_miner,
            ),
            RelationType.CONTROLS_DEGRADATION_OF: (controls_degradation_miner,),
            RelationType.CONTROLS_PRODUCTION_OF: (controls_production_miner,),
            RelationType.CONSUMPTION_CONTROLLED_BY: (consumption_controlled_by_miner,),
            RelationType.CATALYSIS_PRECEDES: (catalysis_precedes_miner,),
            RelationType.USED_TO_PRODUCE: (used_to_produce_miner,),
            RelationType.REACTS_WITH: (reacts_with_miner,),
            RelationType.IN_COMPLEX_WITH: (in_complex_with_miner,),
            RelationType.INTERACTS_WITH: (interacts_with_miner,),
        }
    )
