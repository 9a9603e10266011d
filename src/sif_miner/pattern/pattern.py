"""Pattern definition: a seed kind plus an ordered list of constraint steps."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sif_miner.graph import ElementKind
from sif_miner.pattern.constraints import Constraint
from sif_miner.pattern.match import Variable


class PatternError(ValueError):
    """Raised when a pattern is built with unknown labels or wrong operand counts."""


@dataclass(frozen=True)
class Step:
    """A constraint mapped onto slot indices.

    ``generated`` is the slot the step binds, or None for checking steps.
    """

    constraint: Constraint
    indices: tuple[int, ...]
    generated: Optional[int] = None

    @property
    def is_generative(self) -> bool:
        return self.generated is not None


class Pattern:
    """Ordered constraint steps over named variables.

    Slot 0 holds the seed variable, which is bound to every element of
    ``start_kind`` when the pattern is searched. Each later variable is
    introduced by the generative step that first mentions it.
    """

    def __init__(self, start_kind: ElementKind, start_label: str) -> None:
        self.start_kind = start_kind
        self._variables: dict[str, int] = {start_label: 0}
        self._steps: list[Step] = []

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        return (
            f"Pattern(start={self.start_kind.value!r}, variables={self.labels}, "
            f"steps={len(self._steps)})"
        )

    @property
    def start_label(self) -> str:
        return self.labels[0]

    @property
    def labels(self) -> list[str]:
        return list(self._variables)

    @property
    def variables(self) -> list[Variable]:
        return [Variable(name, index) for name, index in self._variables.items()]

    @property
    def variable_count(self) -> int:
        return len(self._variables)

    @property
    def steps(self) -> tuple[Step, ...]:
        return tuple(self._steps)

    def has_label(self, label: str) -> bool:
        return label in self._variables

    def index_of(self, label: str) -> int:
        try:
            return self._variables[label]
        except KeyError:
            raise PatternError(f"Unknown variable '{label}'") from None

    def add(self, constraint: Constraint, *labels: str) -> Pattern:
        """Append a constraint over the given variables.

        When the constraint can generate and the last label is new, the label
        is registered and bound by this step. All other labels must already
        exist.

        Raises:
            PatternError: On operand count mismatch, unknown labels, or a new
                label on a constraint that cannot generate it.
        """
        if len(labels) != constraint.size:
            raise PatternError(
                f"{constraint!r} takes {constraint.size} variables, got {len(labels)}"
            )

        *operands, last = labels
        for label in operands:
            if label not in self._variables:
                raise PatternError(f"Variable '{label}' is used before it is bound")

        if last in self._variables:
            indices = tuple(self._variables[label] for label in labels)
            self._steps.append(Step(constraint, indices))
            return self

        if not constraint.can_generate:
            raise PatternError(
                f"Variable '{last}' is used before it is bound "
                f"and {constraint!r} cannot generate it"
            )

        generated = len(self._variables)
        self._variables[last] = generated
        indices = tuple(self._variables[label] for label in labels)
        self._steps.append(Step(constraint, indices, generated))
        return self
