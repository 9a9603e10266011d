"""
In-memory molecular interaction graph.

Elements are lightweight handles into an arena owned by the graph. The graph
itself is cyclic (entities point at the interactions they take part in, and
those interactions point back), so callers only ever compare handles, never
the records behind them.

Supported kinds follow the BioPAX level 3 vocabulary the miners depend on:
- physical entities: protein, small molecule, complex
- entity references: protein reference, small molecule reference
- interactions: conversions, template reactions, molecular interactions
- controls: control and catalysis
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, cast

import yaml

logger = logging.getLogger(__name__)


class GraphFormatError(ValueError):
    """Raised when a graph model is malformed."""


class ElementKind(str, Enum):
    """Closed set of element kinds known to the pattern engine."""

    PROTEIN = "protein"
    SMALL_MOLECULE = "small_molecule"
    COMPLEX = "complex"
    PROTEIN_REFERENCE = "protein_reference"
    SMALL_MOLECULE_REFERENCE = "small_molecule_reference"
    BIOCHEMICAL_REACTION = "biochemical_reaction"
    TRANSPORT = "transport"
    DEGRADATION = "degradation"
    TEMPLATE_REACTION = "template_reaction"
    MOLECULAR_INTERACTION = "molecular_interaction"
    CONTROL = "control"
    CATALYSIS = "catalysis"

    @property
    def is_physical_entity(self) -> bool:
        return self in _PHYSICAL_ENTITIES

    @property
    def is_entity_reference(self) -> bool:
        return self in _ENTITY_REFERENCES

    @property
    def is_conversion(self) -> bool:
        return self in _CONVERSIONS

    @property
    def is_control(self) -> bool:
        return self in _CONTROLS

    @property
    def is_interaction(self) -> bool:
        return self.is_conversion or self.is_control or self in _OTHER_INTERACTIONS

    @property
    def is_chemical(self) -> bool:
        """Small molecules and their references."""
        return self in (ElementKind.SMALL_MOLECULE, ElementKind.SMALL_MOLECULE_REFERENCE)

    @property
    def is_xreferrable(self) -> bool:
        return self.is_physical_entity or self.is_entity_reference or self.is_interaction


_PHYSICAL_ENTITIES = frozenset(
    {ElementKind.PROTEIN, ElementKind.SMALL_MOLECULE, ElementKind.COMPLEX}
)
_ENTITY_REFERENCES = frozenset(
    {ElementKind.PROTEIN_REFERENCE, ElementKind.SMALL_MOLECULE_REFERENCE}
)
_CONVERSIONS = frozenset(
    {ElementKind.BIOCHEMICAL_REACTION, ElementKind.TRANSPORT, ElementKind.DEGRADATION}
)
_CONTROLS = frozenset({ElementKind.CONTROL, ElementKind.CATALYSIS})
_OTHER_INTERACTIONS = frozenset(
    {ElementKind.TEMPLATE_REACTION, ElementKind.MOLECULAR_INTERACTION}
)


class ConversionDirection(str, Enum):
    """Direction of a conversion. An absent direction is modelled as ``None``."""

    LEFT_TO_RIGHT = "LEFT_TO_RIGHT"
    RIGHT_TO_LEFT = "RIGHT_TO_LEFT"
    REVERSIBLE = "REVERSIBLE"


class ControlType(str, Enum):
    """Effect of a control on the interaction it controls."""

    ACTIVATION = "ACTIVATION"
    INHIBITION = "INHIBITION"
    ACTIVATION_ALLOSTERIC = "ACTIVATION_ALLOSTERIC"
    INHIBITION_ALLOSTERIC = "INHIBITION_ALLOSTERIC"
    INHIBITION_COMPETITIVE = "INHIBITION_COMPETITIVE"


@dataclass(frozen=True)
class Xref:
    """Cross reference to an external database record."""

    db: Optional[str]
    id: Optional[str]


@dataclass(frozen=True)
class Element:
    """Opaque handle to a graph element. Equality is arena index equality."""

    index: int
    kind: ElementKind = field(compare=False)
    uri: str = field(compare=False)

    def __str__(self) -> str:
        return self.uri


@dataclass
class _Record:
    """Arena record behind an element handle."""

    display_name: Optional[str] = None
    names: list[str] = field(default_factory=list)
    xrefs: list[Xref] = field(default_factory=list)
    reference: Optional[Element] = None
    direction: Optional[ConversionDirection] = None
    control_type: Optional[ControlType] = None
    left: list[Element] = field(default_factory=list)
    right: list[Element] = field(default_factory=list)
    participants: list[Element] = field(default_factory=list)
    controllers: list[Element] = field(default_factory=list)
    controlled: list[Element] = field(default_factory=list)
    components: list[Element] = field(default_factory=list)
    products: list[Element] = field(default_factory=list)
    # reverse links
    participant_of: list[Element] = field(default_factory=list)
    controller_of: list[Element] = field(default_factory=list)
    controlled_by: list[Element] = field(default_factory=list)
    component_of: list[Element] = field(default_factory=list)
    entity_reference_of: list[Element] = field(default_factory=list)


def _append_unique(items: list[Element], element: Element) -> None:
    if element not in items:
        items.append(element)


class InMemoryGraph:
    """Arena-backed element graph with typed neighbor accessors."""

    def __init__(self) -> None:
        self._elements: list[Element] = []
        self._records: list[_Record] = []
        self._by_uri: dict[str, Element] = {}

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[Element]:
        return iter(self._elements)

    def __contains__(self, element: object) -> bool:
        return (
            isinstance(element, Element)
            and element.index < len(self._elements)
            and self._elements[element.index] is element
        )

    # -------------------------------------------------------------------------
    # Building
    # -------------------------------------------------------------------------

    def add_element(
        self,
        uri: str,
        kind: ElementKind,
        display_name: Optional[str] = None,
        names: Iterable[str] = (),
        xrefs: Iterable[Xref] = (),
    ) -> Element:
        """Create a new element. URIs must be unique within a graph."""
        if uri in self._by_uri:
            raise ValueError(f"Element '{uri}' already exists")
        element = Element(index=len(self._elements), kind=kind, uri=uri)
        self._elements.append(element)
        self._records.append(
            _Record(display_name=display_name, names=list(names), xrefs=list(xrefs))
        )
        self._by_uri[uri] = element
        return element

    def set_reference(self, entity: Element, reference: Element) -> None:
        self._require(entity, entity.kind.is_physical_entity, "a physical entity")
        self._require(reference, reference.kind.is_entity_reference, "an entity reference")
        self._record(entity).reference = reference
        _append_unique(self._record(reference).entity_reference_of, entity)

    def add_left(self, conversion: Element, entity: Element) -> None:
        self._add_side(conversion, entity, self._record(conversion).left)

    def add_right(self, conversion: Element, entity: Element) -> None:
        self._add_side(conversion, entity, self._record(conversion).right)

    def set_direction(
        self, conversion: Element, direction: Optional[ConversionDirection]
    ) -> None:
        self._require(conversion, conversion.kind.is_conversion, "a conversion")
        self._record(conversion).direction = direction

    def add_participant(self, interaction: Element, entity: Element) -> None:
        """Link a participant to a non-conversion interaction."""
        self._require(
            interaction,
            interaction.kind is ElementKind.MOLECULAR_INTERACTION,
            "a molecular interaction",
        )
        self._require(entity, entity.kind.is_physical_entity, "a physical entity")
        _append_unique(self._record(interaction).participants, entity)
        _append_unique(self._record(entity).participant_of, interaction)

    def add_product(self, template_reaction: Element, entity: Element) -> None:
        self._require(
            template_reaction,
            template_reaction.kind is ElementKind.TEMPLATE_REACTION,
            "a template reaction",
        )
        self._require(entity, entity.kind.is_physical_entity, "a physical entity")
        _append_unique(self._record(template_reaction).products, entity)
        _append_unique(self._record(entity).participant_of, template_reaction)

    def add_controller(self, control: Element, entity: Element) -> None:
        self._require(control, control.kind.is_control, "a control")
        self._require(entity, entity.kind.is_physical_entity, "a physical entity")
        _append_unique(self._record(control).controllers, entity)
        _append_unique(self._record(entity).controller_of, control)

    def add_controlled(self, control: Element, interaction: Element) -> None:
        self._require(control, control.kind.is_control, "a control")
        self._require(interaction, interaction.kind.is_interaction, "an interaction")
        _append_unique(self._record(control).controlled, interaction)
        _append_unique(self._record(interaction).controlled_by, control)

    def set_control_type(self, control: Element, control_type: Optional[ControlType]) -> None:
        self._require(control, control.kind.is_control, "a control")
        self._record(control).control_type = control_type

    def add_component(self, complex_: Element, entity: Element) -> None:
        self._require(complex_, complex_.kind is ElementKind.COMPLEX, "a complex")
        self._require(entity, entity.kind.is_physical_entity, "a physical entity")
        _append_unique(self._record(complex_).components, entity)
        _append_unique(self._record(entity).component_of, complex_)

    def _add_side(self, conversion: Element, entity: Element, side: list[Element]) -> None:
        self._require(conversion, conversion.kind.is_conversion, "a conversion")
        self._require(entity, entity.kind.is_physical_entity, "a physical entity")
        _append_unique(side, entity)
        _append_unique(self._record(entity).participant_of, conversion)

    def _record(self, element: Element) -> _Record:
        if element not in self:
            raise KeyError(f"Element '{element.uri}' does not belong to this graph")
        return self._records[element.index]

    @staticmethod
    def _require(element: Element, ok: bool, what: str) -> None:
        if not ok:
            raise ValueError(f"'{element.uri}' ({element.kind.value}) is not {what}")

    # -------------------------------------------------------------------------
    # Enumeration
    # -------------------------------------------------------------------------

    def get(self, uri: str) -> Optional[Element]:
        return self._by_uri.get(uri)

    def elements_of_kind(self, kind: ElementKind) -> tuple[Element, ...]:
        return tuple(e for e in self._elements if e.kind is kind)

    def elements_matching(self, predicate: Callable[[ElementKind], bool]) -> tuple[Element, ...]:
        return tuple(e for e in self._elements if predicate(e.kind))

    # -------------------------------------------------------------------------
    # Neighbor accessors
    # -------------------------------------------------------------------------

    def display_name(self, element: Element) -> Optional[str]:
        return self._record(element).display_name

    def names(self, element: Element) -> tuple[str, ...]:
        return tuple(self._record(element).names)

    def xrefs(self, element: Element) -> tuple[Xref, ...]:
        return tuple(self._record(element).xrefs)

    def entity_reference(self, entity: Element) -> Optional[Element]:
        return self._record(entity).reference

    def entity_reference_of(self, reference: Element) -> tuple[Element, ...]:
        return tuple(self._record(reference).entity_reference_of)

    def participant_of(self, entity: Element) -> tuple[Element, ...]:
        return tuple(self._record(entity).participant_of)

    def participants(self, interaction: Element) -> tuple[Element, ...]:
        record = self._record(interaction)
        seen: list[Element] = []
        for entity in (*record.left, *record.right, *record.participants, *record.products):
            _append_unique(seen, entity)
        return tuple(seen)

    def left(self, conversion: Element) -> tuple[Element, ...]:
        return tuple(self._record(conversion).left)

    def right(self, conversion: Element) -> tuple[Element, ...]:
        return tuple(self._record(conversion).right)

    def direction(self, conversion: Element) -> Optional[ConversionDirection]:
        return self._record(conversion).direction

    def controllers(self, control: Element) -> tuple[Element, ...]:
        return tuple(self._record(control).controllers)

    def controlled(self, control: Element) -> tuple[Element, ...]:
        return tuple(self._record(control).controlled)

    def controller_of(self, entity: Element) -> tuple[Element, ...]:
        return tuple(self._record(entity).controller_of)

    def controlled_by(self, interaction: Element) -> tuple[Element, ...]:
        return tuple(self._record(interaction).controlled_by)

    def control_type(self, control: Element) -> Optional[ControlType]:
        return self._record(control).control_type

    def components(self, complex_: Element) -> tuple[Element, ...]:
        return tuple(self._record(complex_).components)

    def component_of(self, entity: Element) -> tuple[Element, ...]:
        return tuple(self._record(entity).component_of)

    def products(self, template_reaction: Element) -> tuple[Element, ...]:
        return tuple(self._record(template_reaction).products)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @classmethod
    def from_yaml(cls, path: str | Path) -> InMemoryGraph:
        """Load a graph model from a YAML file."""
        with Path(path).open() as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, Mapping):
            raise GraphFormatError(f"{path}: expected a mapping at the top level")
        return cls.from_dict(cast(Mapping[str, object], raw))

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> InMemoryGraph:
        """Build a graph from a declarative model.

        The model has a single ``elements`` list. Each entry needs ``uri`` and
        ``kind``; links refer to other entries by URI and are resolved after all
        elements are created, so entries may appear in any order.
        """
        raw_elements = data.get("elements", [])
        if not isinstance(raw_elements, list):
            raise GraphFormatError("'elements' must be a list")

        graph = cls()
        entries: list[tuple[Element, Mapping[str, object]]] = []
        for raw in raw_elements:
            if not isinstance(raw, Mapping):
                raise GraphFormatError(f"Element entry must be a mapping, got {raw!r}")
            uri = raw.get("uri")
            if not isinstance(uri, str) or not uri:
                raise GraphFormatError(f"Element entry without a uri: {raw!r}")
            try:
                kind = ElementKind(str(raw.get("kind", "")).lower())
            except ValueError:
                raise GraphFormatError(f"{uri}: unknown kind {raw.get('kind')!r}") from None
            try:
                element = graph.add_element(
                    uri,
                    kind,
                    display_name=_optional_str(raw.get("display_name")),
                    names=_as_str_list(raw.get("names")),
                    xrefs=_parse_xrefs(uri, raw.get("xrefs")),
                )
            except ValueError as e:
                raise GraphFormatError(str(e)) from e
            entries.append((element, raw))

        for element, raw in entries:
            graph._link_entry(element, raw)

        logger.debug("Loaded graph with %d elements", len(graph))
        return graph

    def _link_entry(self, element: Element, raw: Mapping[str, object]) -> None:
        links: dict[str, Callable[[Element], None]] = {
            "reference": lambda ref: self.set_reference(element, ref),
            "left": lambda pe: self.add_left(element, pe),
            "right": lambda pe: self.add_right(element, pe),
            "participants": lambda pe: self.add_participant(element, pe),
            "products": lambda pe: self.add_product(element, pe),
            "controllers": lambda pe: self.add_controller(element, pe),
            "controlled": lambda inter: self.add_controlled(element, inter),
            "components": lambda pe: self.add_component(element, pe),
        }
        try:
            for key, link in links.items():
                for uri in _as_str_list(raw.get(key)):
                    target = self.get(uri)
                    if target is None:
                        raise GraphFormatError(f"{element.uri}: unknown {key} '{uri}'")
                    link(target)

            if raw.get("direction") is not None:
                self.set_direction(element, ConversionDirection(str(raw["direction"]).upper()))
            if raw.get("control_type") is not None:
                self.set_control_type(element, ControlType(str(raw["control_type"]).upper()))
        except GraphFormatError:
            raise
        except ValueError as e:
            raise GraphFormatError(f"{element.uri}: {e}") from e


def _optional_str(value: object) -> Optional[str]:
    return str(value) if value is not None else None


def _as_str_list(value: object) -> list[str]:
    """Convert value to list of strings."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(v) for v in value]
    return []


def _parse_xrefs(uri: str, value: object) -> list[Xref]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise GraphFormatError(f"{uri}: 'xrefs' must be a list")
    xrefs: list[Xref] = []
    for item in value:
        if not isinstance(item, Mapping):
            raise GraphFormatError(f"{uri}: xref entries must be mappings")
        xrefs.append(Xref(db=_optional_str(item.get("db")), id=_optional_str(item.get("id"))))
    return xrefs
