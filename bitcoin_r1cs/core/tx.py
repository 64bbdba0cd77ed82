"""
In-circuit representation of a transaction

Every transaction field is allocated as a range-checked unsigned integer, scripts as
sequences of bytes. The layout is fixed by a TransactionShape.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass

from bitcointx.core import CTransaction, CTxIn, CTxOut

from ..r1cs import (
    AllocationMode,
    Boolean,
    ConstraintSystem,
    FpVar,
    SynthesisError,
    UInt8,
    UInt32,
    UInt64,
    get_chunk_size,
    is_eq_sequence,
    pack_le,
)
from .shape import TransactionShape, check_transaction

logger = logging.getLogger(__name__)

PREVOUT_HASH_SIZE = 32


def _new_bytes(cs: ConstraintSystem, data: bytes, mode: AllocationMode, name: str) -> list[UInt8]:
    return [
        UInt8.new_variable(cs, byte, mode, f'{name}[{i}]')
        for i, byte in enumerate(data)
    ]


@dataclass
class ScriptVar:
    cs: ConstraintSystem
    data: list[UInt8]

    def __len__(self):
        return len(self.data)

    @classmethod
    def new_variable(
        cls,
        cs: ConstraintSystem,
        script: bytes,
        mode: AllocationMode,
        name: str = 'script',
    ) -> ScriptVar:
        return cls(cs=cs, data=_new_bytes(cs, bytes(script), mode, name))

    @property
    def value(self) -> bytes:
        return bytes(byte.value for byte in self.data)

    def to_field_elements(self) -> list[FpVar]:
        return pack_le(self.data, get_chunk_size(self.cs.modulus))

    def slice(self, start: int, end: int) -> ScriptVar:
        return ScriptVar(cs=self.cs, data=self.data[start:end])

    def is_eq(self, other: ScriptVar) -> Boolean:
        # packed chunks do not encode the length: b"\x01" and b"\x01\x00" pack alike
        if len(self) != len(other):
            raise SynthesisError(f"Cannot compare scripts of length {len(self)} and {len(other)}")
        # bytes are range-checked, so comparing packed chunks compares every byte
        return is_eq_sequence(self.cs, self.to_field_elements(), other.to_field_elements())


@dataclass
class TxInVar:
    prevout_hash: list[UInt8]
    prevout_index: UInt32
    unlock_script: ScriptVar
    sequence: UInt32

    @classmethod
    def new_variable(
        cls,
        cs: ConstraintSystem,
        txin: CTxIn,
        mode: AllocationMode,
        name: str = 'input',
    ) -> TxInVar:
        return cls(
            prevout_hash=_new_bytes(cs, txin.prevout.hash, mode, f'{name}/prevout_hash'),
            prevout_index=UInt32.new_variable(cs, txin.prevout.n, mode, f'{name}/prevout_index'),
            unlock_script=ScriptVar.new_variable(cs, txin.scriptSig, mode, f'{name}/unlock_script'),
            sequence=UInt32.new_variable(cs, txin.nSequence, mode, f'{name}/sequence'),
        )


@dataclass
class TxOutVar:
    amount: UInt64
    lock_script: ScriptVar

    @classmethod
    def new_variable(
        cls,
        cs: ConstraintSystem,
        txout: CTxOut,
        mode: AllocationMode,
        name: str = 'output',
    ) -> TxOutVar:
        return cls(
            amount=UInt64.new_variable(cs, txout.nValue, mode, f'{name}/amount'),
            lock_script=ScriptVar.new_variable(cs, txout.scriptPubKey, mode, f'{name}/lock_script'),
        )


@dataclass
class TxVar:
    cs: ConstraintSystem
    shape: TransactionShape
    version: UInt32
    inputs: list[TxInVar]
    outputs: list[TxOutVar]
    locktime: UInt32

    @classmethod
    def new_variable(
        cls,
        cs: ConstraintSystem,
        tx: CTransaction,
        shape: TransactionShape,
        mode: AllocationMode,
        name: str = 'tx',
    ) -> TxVar:
        check_transaction(tx, shape)
        with cs.namespace(name):
            tx_var = cls(
                cs=cs,
                shape=shape,
                version=UInt32.new_variable(cs, tx.nVersion & 0xffffffff, mode, 'version'),
                inputs=[
                    TxInVar.new_variable(cs, txin, mode, f'input{i}')
                    for i, txin in enumerate(tx.vin)
                ],
                outputs=[
                    TxOutVar.new_variable(cs, txout, mode, f'output{i}')
                    for i, txout in enumerate(tx.vout)
                ],
                locktime=UInt32.new_variable(cs, tx.nLockTime, mode, 'locktime'),
            )
        logger.debug("Allocated %s as %s, %d constraints so far", shape, mode.value, cs.num_constraints)
        return tx_var

    def to_field_elements(self) -> list[FpVar]:
        """
        Commitment preimage, see integrity.tx_field_elements for the layout.

        Unlocking scripts are left out.
        """
        cs = self.cs
        chunk_size = get_chunk_size(cs.modulus)
        elements = [
            FpVar.constant(cs, self.shape.n_inputs),
            FpVar.constant(cs, self.shape.n_outputs),
            self.version.to_fp(),
        ]
        for txin in self.inputs:
            elements.extend(pack_le(txin.prevout_hash, chunk_size))
            elements.append(txin.prevout_index.to_fp())
            elements.append(txin.sequence.to_fp())
        for txout in self.outputs:
            elements.append(txout.amount.to_fp())
            elements.append(FpVar.constant(cs, len(txout.lock_script)))
            elements.extend(txout.lock_script.to_field_elements())
        elements.append(self.locktime.to_fp())
        return elements
