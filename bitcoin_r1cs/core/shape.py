"""
Transaction shapes

A shape fixes the topology of a transaction (input and output counts, script lengths)
independently of its content. Circuits are sized from the shape, so the placeholder
transaction used for key setup and every real spending transaction must match it exactly.
"""
from __future__ import annotations
from dataclasses import dataclass

from bitcointx.core import CTransaction, CTxIn, CTxOut, COutPoint
from bitcointx.core.script import CScript


PLACEHOLDER_TX_VERSION = 2


class ShapeError(ValueError):
    pass


class ShapeMismatch(ShapeError):
    pass


@dataclass(frozen=True)
class TransactionShape:
    n_inputs: int
    n_outputs: int
    len_unlock_scripts: tuple[int, ...]
    len_lock_scripts: tuple[int, ...]

    def __post_init__(self):
        # accept lists, store tuples so that shapes stay hashable
        object.__setattr__(self, 'len_unlock_scripts', tuple(self.len_unlock_scripts))
        object.__setattr__(self, 'len_lock_scripts', tuple(self.len_lock_scripts))
        validate(self)

    def __repr__(self):
        return (
            f"<TransactionShape(inputs={self.n_inputs}, outputs={self.n_outputs}, "
            f"unlock_scripts={list(self.len_unlock_scripts)}, lock_scripts={list(self.len_lock_scripts)})>"
        )

    def to_json(self) -> dict:
        return {
            "nInputs": self.n_inputs,
            "nOutputs": self.n_outputs,
            "lenUnlockScripts": list(self.len_unlock_scripts),
            "lenLockScripts": list(self.len_lock_scripts),
        }


def validate(shape: TransactionShape) -> None:
    if shape.n_inputs < 0 or shape.n_outputs < 0:
        raise ShapeError(f"Negative input or output count: {shape.n_inputs}, {shape.n_outputs}")
    if len(shape.len_unlock_scripts) != shape.n_inputs:
        raise ShapeError(
            f"Expected {shape.n_inputs} unlocking script lengths, got {len(shape.len_unlock_scripts)}"
        )
    if len(shape.len_lock_scripts) != shape.n_outputs:
        raise ShapeError(
            f"Expected {shape.n_outputs} locking script lengths, got {len(shape.len_lock_scripts)}"
        )
    for length in (*shape.len_unlock_scripts, *shape.len_lock_scripts):
        if not isinstance(length, int) or length < 0:
            raise ShapeError(f"Invalid script length: {length!r}")


def shape_of(tx: CTransaction) -> TransactionShape:
    return TransactionShape(
        n_inputs=len(tx.vin),
        n_outputs=len(tx.vout),
        len_unlock_scripts=tuple(len(txin.scriptSig) for txin in tx.vin),
        len_lock_scripts=tuple(len(txout.scriptPubKey) for txout in tx.vout),
    )


def check_transaction(tx: CTransaction, shape: TransactionShape) -> None:
    """Raise ShapeMismatch if the topology of `tx` disagrees with `shape`"""
    if len(tx.vin) != shape.n_inputs:
        raise ShapeMismatch(f"Transaction has {len(tx.vin)} inputs, shape expects {shape.n_inputs}")
    if len(tx.vout) != shape.n_outputs:
        raise ShapeMismatch(f"Transaction has {len(tx.vout)} outputs, shape expects {shape.n_outputs}")
    for index, (txin, expected) in enumerate(zip(tx.vin, shape.len_unlock_scripts)):
        if len(txin.scriptSig) != expected:
            raise ShapeMismatch(
                f"Input #{index} unlocking script has {len(txin.scriptSig)} bytes, shape expects {expected}"
            )
    for index, (txout, expected) in enumerate(zip(tx.vout, shape.len_lock_scripts)):
        if len(txout.scriptPubKey) != expected:
            raise ShapeMismatch(
                f"Output #{index} locking script has {len(txout.scriptPubKey)} bytes, shape expects {expected}"
            )


def build_default_transaction(shape: TransactionShape) -> CTransaction:
    """
    Placeholder transaction with exactly the topology of `shape` and zeroed content.

    Only meant for key setup, so that keys depend on the shape and never on real data.
    """
    validate(shape)
    return CTransaction(
        vin=[
            CTxIn(
                prevout=COutPoint(hash=b'\x00' * 32, n=0),
                scriptSig=CScript(b'\x00' * length),
                nSequence=0,
            )
            for length in shape.len_unlock_scripts
        ],
        vout=[
            CTxOut(
                nValue=0,
                scriptPubKey=CScript(b'\x00' * length),
            )
            for length in shape.len_lock_scripts
        ],
        nLockTime=0,
        nVersion=PLACEHOLDER_TX_VERSION,
    )
