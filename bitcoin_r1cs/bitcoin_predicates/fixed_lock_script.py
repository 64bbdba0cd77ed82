from __future__ import annotations
import logging

from bitcointx.core.script import CScript

from ..core.shape import ShapeError
from ..core.tx import ScriptVar, TxVar
from ..r1cs import AllocationMode, Boolean, ConstraintSystem
from .base import PredicateConfig, SpendingPredicate
from .data_structures import UnitVar

logger = logging.getLogger(__name__)


class FixedLockScript(SpendingPredicate):
    """
    The locking script of output `index` of the spending transaction equals `lock_script`.

    Locking data, unlocking data and witness are all empty: the expected script is a
    construction-time parameter and ends up in the circuit as constants.
    """

    def __init__(self, config: PredicateConfig, lock_script: bytes, index: int):
        super().__init__(config)
        lock_script = bytes(lock_script)
        shape = config.shape
        if not 0 <= index < shape.n_outputs:
            raise ShapeError(f"Output index {index} out of range, shape has {shape.n_outputs} outputs")
        if len(lock_script) != shape.len_lock_scripts[index]:
            raise ShapeError(
                f"Expected a {shape.len_lock_scripts[index]}-byte locking script for output #{index}, "
                f"got {len(lock_script)} bytes"
            )
        self.lock_script = lock_script
        self.index = index

    def __repr__(self):
        return f"<FixedLockScript(index={self.index}, lock_script={CScript(self.lock_script)!r})>"

    def generate_constraints(
        self,
        cs: ConstraintSystem,
        locking_data: UnitVar,
        unlocking_data: UnitVar,
        spending_tx: TxVar,
        witness: UnitVar,
    ) -> Boolean:
        self.check_spending_tx(spending_tx)
        expected = ScriptVar.new_variable(cs, self.lock_script, AllocationMode.CONSTANT, 'expected_lock_script')
        actual = spending_tx.outputs[self.index].lock_script
        logger.debug("Checking locking script of output #%s", self.index)
        return actual.is_eq(expected)
