"""
AND / OR combinators for spending predicates

A combined predicate takes ordered pairs as data: `(first_data, second_data)` for each
slot, natively and in-circuit. Both constituents always emit their constraints, OR
included, so the cost of a combination is the sum of the costs of its parts.

Combinators are pairwise. Larger conditions are nested trees of pairs and are never
flattened, so `and_combine(and_combine(a, b), c)` takes `((a_data, b_data), c_data)`.
"""
from __future__ import annotations
import enum
import logging
from typing import Any

from ..core.tx import TxVar
from ..r1cs import AllocationMode, Boolean, ConstraintSystem
from .base import DataSlot, SpendingPredicate

logger = logging.getLogger(__name__)


class IncompatiblePredicates(TypeError):
    pass


class LogicalOperator(enum.Enum):
    AND = 'and'
    OR = 'or'

    def apply(self, first: Boolean, second: Boolean) -> Boolean:
        if self is LogicalOperator.AND:
            return first.and_(second)
        return first.or_(second)


def _split(value: Any, what: str) -> tuple[Any, Any]:
    if not isinstance(value, tuple) or len(value) != 2:
        raise ValueError(f"Expected a pair as {what}, got {value!r}")
    return value


class CombinedPredicate(SpendingPredicate):
    LockingData = tuple
    UnlockingData = tuple
    Witness = tuple
    LockingDataVar = tuple
    UnlockingDataVar = tuple
    WitnessVar = tuple

    def __init__(
        self,
        first: SpendingPredicate,
        second: SpendingPredicate,
        operator: LogicalOperator,
        tags: tuple[Any, Any] = (1, 2),
    ):
        for predicate in (first, second):
            if not isinstance(predicate, SpendingPredicate):
                raise TypeError(f"Expected a SpendingPredicate, got {type(predicate).__name__}")
        if first.config != second.config:
            raise IncompatiblePredicates(
                f"Cannot combine {first!r} and {second!r}: "
                f"{first.config} differs from {second.config}"
            )
        if tags[0] == tags[1]:
            raise ValueError(f"Tags must differ, got {tags}")
        super().__init__(first.config)
        self.first = first
        self.second = second
        self.operator = operator
        self.tags = tuple(tags)

    def __repr__(self):
        return f"{self.operator.name}({self.first!r}, {self.second!r})"

    def _namespaces(self) -> tuple[str, str]:
        return tuple(f"{self.operator.value}_{tag}" for tag in self.tags)

    def allocate(self, slot: DataSlot, cs: ConstraintSystem, value: Any, mode: AllocationMode) -> tuple[Any, Any]:
        first_value, second_value = _split(value, slot.value)
        first_ns, second_ns = self._namespaces()
        with cs.namespace(first_ns):
            first_var = self.first.allocate(slot, cs, first_value, mode)
        with cs.namespace(second_ns):
            second_var = self.second.allocate(slot, cs, second_value, mode)
        return first_var, second_var

    def to_field_elements(self, slot: DataSlot, value: Any) -> list[int]:
        first_value, second_value = _split(value, slot.value)
        return [
            *self.first.to_field_elements(slot, first_value),
            *self.second.to_field_elements(slot, second_value),
        ]

    def default(self, slot: DataSlot) -> tuple[Any, Any]:
        return self.first.default(slot), self.second.default(slot)

    def generate_constraints(
        self,
        cs: ConstraintSystem,
        locking_data: tuple[Any, Any],
        unlocking_data: tuple[Any, Any],
        spending_tx: TxVar,
        witness: tuple[Any, Any],
    ) -> Boolean:
        self.check_spending_tx(spending_tx)
        first_locking, second_locking = _split(locking_data, 'locking data')
        first_unlocking, second_unlocking = _split(unlocking_data, 'unlocking data')
        first_witness, second_witness = _split(witness, 'witness')
        first_ns, second_ns = self._namespaces()

        with cs.namespace(first_ns):
            first = self.first.generate_constraints(cs, first_locking, first_unlocking, spending_tx, first_witness)
        with cs.namespace(second_ns):
            second = self.second.generate_constraints(
                cs, second_locking, second_unlocking, spending_tx, second_witness,
            )
        logger.debug("%s: %s %s %s", self, first.value, self.operator.name, second.value)
        return self.operator.apply(first, second)


def and_combine(first: SpendingPredicate, second: SpendingPredicate) -> CombinedPredicate:
    return CombinedPredicate(first, second, LogicalOperator.AND)


def or_combine(first: SpendingPredicate, second: SpendingPredicate) -> CombinedPredicate:
    return CombinedPredicate(first, second, LogicalOperator.OR)
