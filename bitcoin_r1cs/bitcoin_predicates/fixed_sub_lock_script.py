from __future__ import annotations

from ..core.shape import ShapeError
from ..core.tx import ScriptVar, TxVar
from ..r1cs import AllocationMode, Boolean, ConstraintSystem
from .base import PredicateConfig, SpendingPredicate
from .data_structures import UnitVar


class FixedSubLockScript(SpendingPredicate):
    """
    Bytes `start:end` of the locking script of output `index` equal `lock_script`.

    Useful for templates where part of a script is fixed (an opcode prefix, a key) and the
    rest is free.
    """

    def __init__(self, config: PredicateConfig, lock_script: bytes, index: int, start: int, end: int):
        super().__init__(config)
        lock_script = bytes(lock_script)
        shape = config.shape
        if not 0 <= index < shape.n_outputs:
            raise ShapeError(f"Output index {index} out of range, shape has {shape.n_outputs} outputs")
        if not 0 <= start <= end <= shape.len_lock_scripts[index]:
            raise ShapeError(
                f"Range {start}:{end} does not fit the {shape.len_lock_scripts[index]}-byte "
                f"locking script of output #{index}"
            )
        if len(lock_script) != end - start:
            raise ShapeError(f"Expected {end - start} bytes for range {start}:{end}, got {len(lock_script)}")
        self.lock_script = lock_script
        self.index = index
        self.start = start
        self.end = end

    def __repr__(self):
        return (
            f"<FixedSubLockScript(index={self.index}, range={self.start}:{self.end}, "
            f"lock_script={self.lock_script.hex()})>"
        )

    def generate_constraints(
        self,
        cs: ConstraintSystem,
        locking_data: UnitVar,
        unlocking_data: UnitVar,
        spending_tx: TxVar,
        witness: UnitVar,
    ) -> Boolean:
        self.check_spending_tx(spending_tx)
        expected = ScriptVar.new_variable(cs, self.lock_script, AllocationMode.CONSTANT, 'expected_sub_script')
        actual = spending_tx.outputs[self.index].lock_script.slice(self.start, self.end)
        return actual.is_eq(expected)
