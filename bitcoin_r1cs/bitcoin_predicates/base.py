"""
Spending predicates

A spending predicate is a condition circuit over a spending transaction of a fixed shape.
Predicates declare native data types for the three data slots (locking data, unlocking
data, witness) together with their circuit counterparts, and emit constraints through
`generate_constraints`, which returns a Boolean signal that is true iff the condition holds.
A false signal is not an error; enforcing it just leaves the constraint system unsatisfiable.
"""
from __future__ import annotations
import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from ..core.shape import ShapeMismatch, TransactionShape, validate
from ..core.tx import TxVar
from ..r1cs import DEFAULT_MODULUS, AllocationMode, Boolean, ConstraintSystem, SynthesisError
from .data_structures import Unit, UnitVar


class DataSlot(enum.Enum):
    LOCKING_DATA = 'locking_data'
    UNLOCKING_DATA = 'unlocking_data'
    WITNESS = 'witness'


@dataclass(frozen=True)
class PredicateConfig:
    """The field and the transaction shape a predicate is defined over"""
    shape: TransactionShape
    modulus: int = DEFAULT_MODULUS

    def __post_init__(self):
        if not isinstance(self.shape, TransactionShape):
            raise TypeError(f"Expected a TransactionShape, got {type(self.shape).__name__}")
        validate(self.shape)
        if not isinstance(self.modulus, int) or self.modulus < 2:
            raise ValueError(f"Invalid modulus: {self.modulus!r}")


class SpendingPredicate(ABC):
    LockingData: type = Unit
    UnlockingData: type = Unit
    Witness: type = Unit
    LockingDataVar: type = UnitVar
    UnlockingDataVar: type = UnitVar
    WitnessVar: type = UnitVar

    def __init__(self, config: PredicateConfig):
        if not isinstance(config, PredicateConfig):
            raise TypeError(f"Expected a PredicateConfig, got {type(config).__name__}")
        self.config = config

    def __repr__(self):
        return f"<{type(self).__name__}>"

    @property
    def shape(self) -> TransactionShape:
        return self.config.shape

    @property
    def modulus(self) -> int:
        return self.config.modulus

    def native_type(self, slot: DataSlot) -> type:
        return {
            DataSlot.LOCKING_DATA: self.LockingData,
            DataSlot.UNLOCKING_DATA: self.UnlockingData,
            DataSlot.WITNESS: self.Witness,
        }[slot]

    def var_type(self, slot: DataSlot) -> type:
        return {
            DataSlot.LOCKING_DATA: self.LockingDataVar,
            DataSlot.UNLOCKING_DATA: self.UnlockingDataVar,
            DataSlot.WITNESS: self.WitnessVar,
        }[slot]

    def allocate(self, slot: DataSlot, cs: ConstraintSystem, value: Any, mode: AllocationMode) -> Any:
        """Allocate the native `value` of `slot` as its circuit counterpart"""
        expected = self.native_type(slot)
        if not isinstance(value, expected):
            raise SynthesisError(
                f"{self!r} expects {expected.__name__} as {slot.value}, got {type(value).__name__}"
            )
        return self.var_type(slot).new_variable(cs, value, mode)

    def to_field_elements(self, slot: DataSlot, value: Any) -> list[int]:
        """Public input elements contributed by `value` when allocated with AllocationMode.INPUT"""
        return value.to_field_elements()

    def default(self, slot: DataSlot) -> Any:
        """Placeholder value of `slot`, used for key setup"""
        return self.native_type(slot)()

    def check_spending_tx(self, spending_tx: TxVar) -> None:
        if spending_tx.shape != self.shape:
            raise ShapeMismatch(f"{self!r} is defined over {self.shape}, got a transaction of {spending_tx.shape}")

    @abstractmethod
    def generate_constraints(
        self,
        cs: ConstraintSystem,
        locking_data: Any,
        unlocking_data: Any,
        spending_tx: TxVar,
        witness: Any,
    ) -> Boolean:
        raise NotImplementedError()

    def enforce_constraints(
        self,
        cs: ConstraintSystem,
        locking_data: Any,
        unlocking_data: Any,
        spending_tx: TxVar,
        witness: Any,
    ) -> None:
        satisfied = self.generate_constraints(cs, locking_data, unlocking_data, spending_tx, witness)
        satisfied.enforce_equal(Boolean.constant(cs, True), label='predicate_satisfied')
