"""
Rank-1 constraint system

Variables are indices into an assignment vector `z`, where `z[0]` is the constant one.
A constraint is a triple of sparse linear combinations `(a, b, c)` that holds when
`<a, z> * <b, z> == <c, z>` modulo the field modulus.
"""
from __future__ import annotations
import contextlib
import enum
import logging
from dataclasses import dataclass
from typing import Iterator, Mapping

from .field import DEFAULT_MODULUS

logger = logging.getLogger(__name__)

ONE = 0

LinearCombination = Mapping[int, int]


class SynthesisError(Exception):
    pass


class AllocationMode(enum.Enum):
    CONSTANT = 'constant'
    INPUT = 'input'
    WITNESS = 'witness'


@dataclass(frozen=True)
class Constraint:
    a: dict[int, int]
    b: dict[int, int]
    c: dict[int, int]
    label: str


class ConstraintSystem:
    def __init__(self, modulus: int = DEFAULT_MODULUS):
        if modulus < 2:
            raise ValueError(f"Invalid modulus: {modulus}")
        self.modulus = modulus
        self.assignment: list[int] = [1]
        self.variable_labels: list[str] = ['one']
        self.public_indices: list[int] = []
        self.constraints: list[Constraint] = []
        self._namespace: list[str] = []

    def __repr__(self):
        return (
            f"<ConstraintSystem(constraints={self.num_constraints}, "
            f"instance={self.num_instance_variables}, witness={self.num_witness_variables})>"
        )

    @contextlib.contextmanager
    def namespace(self, name: str) -> Iterator[None]:
        """
        Prefix the labels of everything allocated or enforced inside the block with `name`.

        Labels are for diagnostics only: every allocation gets a fresh index, so namespaces
        that reuse the same labels never share variables.
        """
        self._namespace.append(name)
        try:
            yield
        finally:
            self._namespace.pop()

    def _label(self, name: str) -> str:
        return '/'.join([*self._namespace, name])

    def _new_variable(self, value: int, name: str, public: bool) -> int:
        if not isinstance(value, int):
            raise SynthesisError(f"Expected an int value for {self._label(name)}, got {type(value)}")
        index = len(self.assignment)
        self.assignment.append(value % self.modulus)
        self.variable_labels.append(self._label(name))
        if public:
            self.public_indices.append(index)
        return index

    def new_input_variable(self, value: int, name: str = 'input') -> int:
        return self._new_variable(value, name, public=True)

    def new_witness_variable(self, value: int, name: str = 'witness') -> int:
        return self._new_variable(value, name, public=False)

    def enforce(
        self,
        a: LinearCombination,
        b: LinearCombination,
        c: LinearCombination,
        label: str = 'constraint',
    ) -> None:
        for lc in (a, b, c):
            for index in lc:
                if not 0 <= index < len(self.assignment):
                    raise SynthesisError(f"Unknown variable index {index} in {self._label(label)}")
        self.constraints.append(Constraint(
            a=dict(a),
            b=dict(b),
            c=dict(c),
            label=self._label(label),
        ))

    def evaluate(self, lc: LinearCombination) -> int:
        return sum(coeff * self.assignment[index] for index, coeff in lc.items()) % self.modulus

    def which_is_unsatisfied(self) -> str | None:
        for constraint in self.constraints:
            lhs = self.evaluate(constraint.a) * self.evaluate(constraint.b) % self.modulus
            if lhs != self.evaluate(constraint.c):
                return constraint.label
        return None

    def is_satisfied(self) -> bool:
        unsatisfied = self.which_is_unsatisfied()
        if unsatisfied is not None:
            logger.debug("Unsatisfied constraint: %s", unsatisfied)
            return False
        return True

    @property
    def num_constraints(self) -> int:
        return len(self.constraints)

    @property
    def num_instance_variables(self) -> int:
        # includes the constant one
        return 1 + len(self.public_indices)

    @property
    def num_witness_variables(self) -> int:
        return len(self.assignment) - self.num_instance_variables

    def public_inputs(self) -> list[int]:
        return [self.assignment[index] for index in self.public_indices]

    def to_json(self) -> dict:
        """
        Export the system for an external proving backend.

        Variables are renumbered so that the constant one comes first, then the public
        inputs in allocation order, then the witnesses. Matrix rows are sparse
        `[[index, coefficient], ...]` lists. Field elements are decimal strings.
        """
        public = set(self.public_indices)
        order = [ONE, *self.public_indices] + [
            index for index in range(1, len(self.assignment)) if index not in public
        ]
        renumber = {old: new for new, old in enumerate(order)}

        def row(lc: dict[int, int]) -> list[list]:
            return [
                [renumber[index], str(coeff % self.modulus)]
                for index, coeff in sorted(lc.items(), key=lambda item: renumber[item[0]])
                if coeff % self.modulus
            ]

        return {
            "modulus": str(self.modulus),
            "num_public": len(self.public_indices),
            "num_variables": len(order),
            "A": [row(c.a) for c in self.constraints],
            "B": [row(c.b) for c in self.constraints],
            "C": [row(c.c) for c in self.constraints],
            "labels": [c.label for c in self.constraints],
            "witness": [str(self.assignment[index]) for index in order],
        }
