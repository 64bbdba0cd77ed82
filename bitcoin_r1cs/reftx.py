"""
RefTx circuit

Top-level circuit for one spending predicate. The public inputs are the predicate's locking
data, the integrity tag of the spending transaction and the unlocking data. The spending
transaction and the predicate witness are private. The circuit enforces that the tag
commits to the private transaction and that the predicate holds on it.

A circuit instance is single use: build a fresh one for key setup (`for_setup`) and for
every proof.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any

from bitcointx.core import CTransaction

from .bitcoin_predicates import DataSlot, SpendingPredicate
from .core.integrity import IntegrityTag, IntegrityTagError, IntegrityTagVar, commit, enforce_integrity
from .core.shape import build_default_transaction, check_transaction
from .core.tx import TxVar
from .r1cs import AllocationMode, ConstraintSystem, SynthesisError

logger = logging.getLogger(__name__)


@dataclass
class RefTxCircuit:
    predicate: SpendingPredicate
    locking_data: Any = None
    integrity_tag: IntegrityTag | None = None
    unlocking_data: Any = None
    witness: Any = None
    spending_tx: CTransaction | None = None
    _used: bool = field(default=False, init=False, repr=False)

    def __post_init__(self):
        predicate = self.predicate
        if self.locking_data is None:
            self.locking_data = predicate.default(DataSlot.LOCKING_DATA)
        if self.unlocking_data is None:
            self.unlocking_data = predicate.default(DataSlot.UNLOCKING_DATA)
        if self.witness is None:
            self.witness = predicate.default(DataSlot.WITNESS)
        if self.spending_tx is None:
            self.spending_tx = build_default_transaction(predicate.shape)
        check_transaction(self.spending_tx, predicate.shape)
        if self.integrity_tag is None:
            self.integrity_tag = commit(self.spending_tx, predicate.modulus)
        elif not isinstance(self.integrity_tag, IntegrityTag):
            raise IntegrityTagError(f"Expected an IntegrityTag, got {type(self.integrity_tag).__name__}")
        self.integrity_tag.check_canonical(predicate.modulus)

    @classmethod
    def for_setup(cls, predicate: SpendingPredicate) -> RefTxCircuit:
        """Placeholder circuit: default data and a zeroed transaction of the predicate's shape"""
        return cls(predicate=predicate)

    def public_input(self) -> list[int]:
        """Public input elements in the order the circuit allocates them"""
        predicate = self.predicate
        modulus = predicate.modulus
        elements = [
            *predicate.to_field_elements(DataSlot.LOCKING_DATA, self.locking_data),
            *self.integrity_tag.to_field_elements(),
            *predicate.to_field_elements(DataSlot.UNLOCKING_DATA, self.unlocking_data),
        ]
        return [element % modulus for element in elements]

    def generate_constraints(self, cs: ConstraintSystem) -> None:
        if self._used:
            raise SynthesisError("RefTxCircuit instances are single use, build a new one")
        self._used = True
        predicate = self.predicate
        if cs.modulus != predicate.modulus:
            raise SynthesisError(
                f"Constraint system modulus {cs.modulus} differs from the predicate modulus {predicate.modulus}"
            )

        with cs.namespace('public_inputs'):
            with cs.namespace('locking_data'):
                locking_data = predicate.allocate(DataSlot.LOCKING_DATA, cs, self.locking_data, AllocationMode.INPUT)
            integrity_tag = IntegrityTagVar.new_variable(cs, self.integrity_tag, AllocationMode.INPUT)
            with cs.namespace('unlocking_data'):
                unlocking_data = predicate.allocate(
                    DataSlot.UNLOCKING_DATA, cs, self.unlocking_data, AllocationMode.INPUT,
                )

        with cs.namespace('witness'):
            spending_tx = TxVar.new_variable(cs, self.spending_tx, predicate.shape, AllocationMode.WITNESS)
            with cs.namespace('predicate_witness'):
                witness = predicate.allocate(DataSlot.WITNESS, cs, self.witness, AllocationMode.WITNESS)

        enforce_integrity(spending_tx, integrity_tag)

        with cs.namespace('predicate'):
            predicate.enforce_constraints(cs, locking_data, unlocking_data, spending_tx, witness)

    def synthesize(self) -> ConstraintSystem:
        cs = ConstraintSystem(self.predicate.modulus)
        self.generate_constraints(cs)
        logger.info(
            "Synthesized %r: %s constraints, %s public inputs, %s witness variables",
            self.predicate,
            cs.num_constraints,
            len(cs.public_indices),
            cs.num_witness_variables,
        )
        return cs
