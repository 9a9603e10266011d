"""Constraints over match slots.

A constraint reads ``size`` slots of a match. Checking constraints answer a
yes/no question about bound slots. Generative constraints read the first
``size - 1`` slots and enumerate candidates for the last one; when the last
slot is already bound they act as a check against the generated candidates.

Constraints must be pure over a graph snapshot and finish in finite time.
Accessor errors from the graph are never caught here.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Collection, Iterable
from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

from sif_miner.graph import ConversionDirection, ElementKind

if TYPE_CHECKING:
    from sif_miner.graph import Element
    from sif_miner.pattern.match import Match
    from sif_miner.protocol import ElementGraph


class RelType(str, Enum):
    """Role of a physical entity in a conversion."""

    INPUT = "input"
    OUTPUT = "output"


class Side(str, Enum):
    SAME = "same"
    OTHER = "other"


class LinkDirection(str, Enum):
    """Which way to walk complex membership."""

    UP = "up"
    DOWN = "down"


def _unique(elements: Iterable[Element]) -> list[Element]:
    return list(dict.fromkeys(elements))


class Constraint(ABC):
    """Abstract base class for all constraints."""

    def __init__(self, size: int) -> None:
        self.size = size

    @property
    def can_generate(self) -> bool:
        return False

    @abstractmethod
    def satisfies(self, graph: ElementGraph, match: Match, *ind: int) -> bool:
        """Check the constraint against bound slots."""

    def generate(self, graph: ElementGraph, match: Match, *ind: int) -> Collection[Element]:
        """Enumerate candidates for slot ``ind[-1]`` from the other operands."""
        raise NotImplementedError(f"{type(self).__name__} is not a generative constraint")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={self.size})"


class GenerativeConstraint(Constraint):
    """Constraint that binds its last operand.

    As a check, it holds when the bound last operand is among the candidates.
    """

    @property
    def can_generate(self) -> bool:
        return True

    def satisfies(self, graph: ElementGraph, match: Match, *ind: int) -> bool:
        return match[ind[-1]] in self.generate(graph, match, *ind)

    @abstractmethod
    def generate(self, graph: ElementGraph, match: Match, *ind: int) -> Collection[Element]:
        """Enumerate candidates for slot ``ind[-1]`` from the other operands."""


# =============================================================================
# Checks
# =============================================================================


KindSpec = Union[ElementKind, Callable[[ElementKind], bool]]


class Type(Constraint):
    """Element is of a given kind, or its kind has a given capability."""

    def __init__(self, kind: KindSpec) -> None:
        super().__init__(1)
        self.kind = kind

    def satisfies(self, graph: ElementGraph, match: Match, *ind: int) -> bool:
        element_kind = match[ind[0]].kind
        if isinstance(self.kind, ElementKind):
            return element_kind is self.kind
        return bool(self.kind(element_kind))


class Equality(Constraint):
    """Two slots hold (or do not hold) the same element."""

    def __init__(self, equal: bool) -> None:
        super().__init__(2)
        self.equal = equal

    def satisfies(self, graph: ElementGraph, match: Match, *ind: int) -> bool:
        return (match[ind[0]] == match[ind[1]]) == self.equal


class NonUbique(Constraint):
    """Element is not ubiquitous.

    Physical entities are judged by their own URI and by the URI of their
    entity reference.
    """

    def __init__(self, ubique_ids: Collection[str]) -> None:
        super().__init__(1)
        self.ubique_ids = frozenset(ubique_ids)

    def satisfies(self, graph: ElementGraph, match: Match, *ind: int) -> bool:
        element = match[ind[0]]
        if element.uri in self.ubique_ids:
            return False
        if element.kind.is_physical_entity:
            reference = graph.entity_reference(element)
            if reference is not None and reference.uri in self.ubique_ids:
                return False
        return True


class SideCount(Constraint):
    """Conversion has exactly ``left`` and ``right`` participants on each side.

    A count of None leaves that side unchecked. Sides are read as written,
    whatever the direction of the conversion.
    """

    def __init__(self, left: Optional[int] = None, right: Optional[int] = None) -> None:
        super().__init__(1)
        self.left = left
        self.right = right

    def satisfies(self, graph: ElementGraph, match: Match, *ind: int) -> bool:
        conversion = match[ind[0]]
        if self.left is not None and len(graph.left(conversion)) != self.left:
            return False
        if self.right is not None and len(graph.right(conversion)) != self.right:
            return False
        return True


# =============================================================================
# Generators
# =============================================================================


class ParticipatesInConv(GenerativeConstraint):
    """Gets the conversions where the physical entity is input or output.

    var0 is a physical entity, var1 is a conversion.

    Conversions with no direction are treated as LEFT_TO_RIGHT. This is an
    approximation, not a guarantee about the underlying reaction.
    """

    def __init__(self, role: RelType, treat_reversible_as_left_to_right: bool = False) -> None:
        super().__init__(2)
        self.role = role
        self.treat_reversible_as_left_to_right = treat_reversible_as_left_to_right

    def generate(self, graph: ElementGraph, match: Match, *ind: int) -> Collection[Element]:
        entity = match[ind[0]]
        result: list[Element] = []

        for interaction in graph.participant_of(entity):
            if not interaction.kind.is_conversion:
                continue

            direction = graph.direction(interaction)
            on_left = entity in graph.left(interaction)
            on_right = entity in graph.right(interaction)
            naive_side = on_left if self.role is RelType.INPUT else on_right
            opposite_side = on_right if self.role is RelType.INPUT else on_left

            if (
                direction is ConversionDirection.REVERSIBLE
                and not self.treat_reversible_as_left_to_right
            ):
                result.append(interaction)
            elif direction is ConversionDirection.RIGHT_TO_LEFT:
                if opposite_side:
                    result.append(interaction)
            elif naive_side:
                result.append(interaction)

        return _unique(result)


class ConversionSide(GenerativeConstraint):
    """Gets the participants on the same or other side of a conversion.

    var0 is a physical entity, var1 a conversion it takes part in, var2 the
    generated participant. The entity itself is never generated.
    """

    def __init__(self, side: Side) -> None:
        super().__init__(3)
        self.side = side

    def generate(self, graph: ElementGraph, match: Match, *ind: int) -> Collection[Element]:
        entity = match[ind[0]]
        conversion = match[ind[1]]
        left = graph.left(conversion)
        right = graph.right(conversion)

        result: list[Element] = []
        if entity in left:
            result.extend(left if self.side is Side.SAME else right)
        if entity in right:
            result.extend(right if self.side is Side.SAME else left)
        return [e for e in _unique(result) if e != entity]


class ParticipatesInInteraction(GenerativeConstraint):
    """Gets the interactions a physical entity participates in."""

    def __init__(self, kind: KindSpec | None = None) -> None:
        super().__init__(2)
        self.kind = kind

    def generate(self, graph: ElementGraph, match: Match, *ind: int) -> Collection[Element]:
        interactions = graph.participant_of(match[ind[0]])
        if self.kind is None:
            return _unique(interactions)
        if isinstance(self.kind, ElementKind):
            return _unique(i for i in interactions if i.kind is self.kind)
        predicate = self.kind
        return _unique(i for i in interactions if predicate(i.kind))


class InteractionParticipant(GenerativeConstraint):
    """Gets the participants of an interaction."""

    def __init__(self) -> None:
        super().__init__(2)

    def generate(self, graph: ElementGraph, match: Match, *ind: int) -> Collection[Element]:
        return _unique(graph.participants(match[ind[0]]))


class ControllerOf(GenerativeConstraint):
    """Gets the controls where the physical entity is a controller."""

    def __init__(self) -> None:
        super().__init__(2)

    def generate(self, graph: ElementGraph, match: Match, *ind: int) -> Collection[Element]:
        return _unique(graph.controller_of(match[ind[0]]))


class ControlledBy(GenerativeConstraint):
    """Gets the controls that control an interaction."""

    def __init__(self) -> None:
        super().__init__(2)

    def generate(self, graph: ElementGraph, match: Match, *ind: int) -> Collection[Element]:
        return _unique(graph.controlled_by(match[ind[0]]))


class ControlToController(GenerativeConstraint):
    def __init__(self) -> None:
        super().__init__(2)

    def generate(self, graph: ElementGraph, match: Match, *ind: int) -> Collection[Element]:
        return _unique(graph.controllers(match[ind[0]]))


class ControlToControlled(GenerativeConstraint):
    def __init__(self) -> None:
        super().__init__(2)

    def generate(self, graph: ElementGraph, match: Match, *ind: int) -> Collection[Element]:
        return _unique(graph.controlled(match[ind[0]]))


class PEToER(GenerativeConstraint):
    """Gets the entity reference of a physical entity."""

    def __init__(self) -> None:
        super().__init__(2)

    def generate(self, graph: ElementGraph, match: Match, *ind: int) -> Collection[Element]:
        reference = graph.entity_reference(match[ind[0]])
        return [] if reference is None else [reference]


class ERToPE(GenerativeConstraint):
    """Gets the physical entities that use an entity reference."""

    def __init__(self) -> None:
        super().__init__(2)

    def generate(self, graph: ElementGraph, match: Match, *ind: int) -> Collection[Element]:
        return _unique(graph.entity_reference_of(match[ind[0]]))


class LinkedPE(GenerativeConstraint):
    """Walks complex membership transitively, including the start entity.

    UP yields the entity and every complex that contains it, directly or
    through nested complexes. DOWN yields the entity and every member.
    Visited entities are tracked, so cyclic membership still terminates.
    """

    def __init__(self, direction: LinkDirection) -> None:
        super().__init__(2)
        self.direction = direction

    def generate(self, graph: ElementGraph, match: Match, *ind: int) -> Collection[Element]:
        start = match[ind[0]]
        step = graph.component_of if self.direction is LinkDirection.UP else graph.components
        visited: dict[Element, None] = {start: None}
        stack = [start]
        while stack:
            current = stack.pop()
            if not current.kind.is_physical_entity:
                continue
            if self.direction is LinkDirection.DOWN and current.kind is not ElementKind.COMPLEX:
                continue
            for linked in step(current):
                if linked not in visited:
                    visited[linked] = None
                    stack.append(linked)
        return list(visited)


class TemplateProduct(GenerativeConstraint):
    """Gets the products of a template reaction."""

    def __init__(self) -> None:
        super().__init__(2)

    def generate(self, graph: ElementGraph, match: Match, *ind: int) -> Collection[Element]:
        return _unique(graph.products(match[ind[0]]))


# =============================================================================
# Combinators
# =============================================================================


class Not(Constraint):
    """Logical negation of a constraint, always used as a check."""

    def __init__(self, operand: Constraint) -> None:
        super().__init__(operand.size)
        self.operand = operand

    def satisfies(self, graph: ElementGraph, match: Match, *ind: int) -> bool:
        return not self.operand.satisfies(graph, match, *ind)


class Or(Constraint):
    """Logical disjunction (ANY). Generates when every operand generates."""

    def __init__(self, *operands: Constraint) -> None:
        if not operands:
            raise ValueError("Or needs at least one operand")
        sizes = {op.size for op in operands}
        if len(sizes) != 1:
            raise ValueError(f"Or operands must have the same size, got {sorted(sizes)}")
        super().__init__(sizes.pop())
        self.operands = list(operands)

    @property
    def can_generate(self) -> bool:
        return all(op.can_generate for op in self.operands)

    def satisfies(self, graph: ElementGraph, match: Match, *ind: int) -> bool:
        return any(op.satisfies(graph, match, *ind) for op in self.operands)

    def generate(self, graph: ElementGraph, match: Match, *ind: int) -> Collection[Element]:
        if not self.can_generate:
            return super().generate(graph, match, *ind)
        result: list[Element] = []
        for op in self.operands:
            result.extend(op.generate(graph, match, *ind))
        return _unique(result)
