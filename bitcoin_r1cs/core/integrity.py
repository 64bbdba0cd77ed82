"""
Transaction integrity tags

The integrity tag is a single field element committing to a spending transaction minus
its unlocking data. It lets a circuit take a short public value instead of the whole
transaction: the circuit recomputes the tag from the witnessed transaction and enforces
equality with the public one.

Commitment preimage, one field element per entry, chunks as in field.to_field_chunks:

    n_inputs, n_outputs, version
    for each input:  *chunks(prevout hash), prevout index, sequence
    for each output: amount, len(locking script), *chunks(locking script)
    locktime

The preimage is hashed with MiMC (see mimc.py). Unlocking scripts and witnesses are not
committed; sequence numbers and locktime are.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass

from bitcointx.core import CTransaction

from ..r1cs import AllocationMode, ConstraintSystem, DEFAULT_MODULUS, FpVar, Boolean, to_field_chunks
from .mimc import mimc_hash, mimc_hash_var
from .tx import TxVar

logger = logging.getLogger(__name__)

TAG_SIZE = 32
MAX_UINT32 = 0xffffffff
MAX_UINT64 = 0xffffffffffffffff


class IntegrityTagError(ValueError):
    pass


@dataclass(frozen=True)
class IntegrityTag:
    value: int

    def __repr__(self):
        return f"<IntegrityTag({self.hex()})>"

    def to_field_elements(self) -> list[int]:
        return [self.value]

    def hex(self) -> str:
        return self.value.to_bytes(TAG_SIZE, 'big').hex()

    def check_canonical(self, modulus: int = DEFAULT_MODULUS) -> IntegrityTag:
        """
        Reject tags that are not reduced field elements. A value `v >= modulus` would be
        accepted as `v % modulus`, giving a second tag for the same transaction.
        """
        if not 0 <= self.value < modulus:
            raise IntegrityTagError(f"Integrity tag {self.hex()} is not a canonical field element")
        return self

    @classmethod
    def fromhex(cls, s: str, modulus: int = DEFAULT_MODULUS) -> IntegrityTag:
        try:
            raw = bytes.fromhex(s)
        except ValueError as e:
            raise IntegrityTagError(f"Invalid integrity tag hex: {s!r}") from e
        if len(raw) != TAG_SIZE:
            raise IntegrityTagError(f"Expected a {TAG_SIZE}-byte integrity tag, got {len(raw)} bytes")
        return cls(int.from_bytes(raw, 'big')).check_canonical(modulus)


def _check_range(value: int, maximum: int, what: str) -> int:
    if not 0 <= value <= maximum:
        raise IntegrityTagError(f"{what} out of range: {value}")
    return value


def tx_field_elements(tx: CTransaction, modulus: int = DEFAULT_MODULUS) -> list[int]:
    elements = [len(tx.vin), len(tx.vout), tx.nVersion & MAX_UINT32]
    for index, txin in enumerate(tx.vin):
        elements.extend(to_field_chunks(txin.prevout.hash, modulus))
        elements.append(_check_range(txin.prevout.n, MAX_UINT32, f"input #{index} prevout index"))
        elements.append(_check_range(txin.nSequence, MAX_UINT32, f"input #{index} sequence"))
    for index, txout in enumerate(tx.vout):
        elements.append(_check_range(txout.nValue, MAX_UINT64, f"output #{index} amount"))
        elements.append(len(txout.scriptPubKey))
        elements.extend(to_field_chunks(txout.scriptPubKey, modulus))
    elements.append(_check_range(tx.nLockTime, MAX_UINT32, "locktime"))
    return elements


def commit(tx: CTransaction, modulus: int = DEFAULT_MODULUS) -> IntegrityTag:
    return IntegrityTag(mimc_hash(tx_field_elements(tx, modulus), modulus))


def verify(tx: CTransaction, tag: IntegrityTag, modulus: int = DEFAULT_MODULUS) -> bool:
    return commit(tx, modulus) == tag


@dataclass
class IntegrityTagVar:
    inner: FpVar

    @classmethod
    def new_variable(
        cls,
        cs: ConstraintSystem,
        tag: IntegrityTag,
        mode: AllocationMode,
        name: str = 'integrity_tag',
    ) -> IntegrityTagVar:
        if not isinstance(tag, IntegrityTag):
            raise IntegrityTagError(f"Expected an IntegrityTag, got {type(tag).__name__}")
        tag.check_canonical(cs.modulus)
        return cls(inner=FpVar.new_variable(cs, tag.value, mode, name))

    @property
    def value(self) -> IntegrityTag:
        return IntegrityTag(self.inner.value)

    def is_eq(self, other: IntegrityTagVar) -> Boolean:
        return self.inner.is_eq(other.inner)

    def enforce_equal(self, other: IntegrityTagVar) -> None:
        self.inner.enforce_equal(other.inner, label='integrity_tag')


def commit_var(tx_var: TxVar) -> IntegrityTagVar:
    return IntegrityTagVar(inner=mimc_hash_var(tx_var.cs, tx_var.to_field_elements()))


def enforce_integrity(tx_var: TxVar, tag_var: IntegrityTagVar) -> None:
    """Enforce that `tag_var` commits to the transaction in `tx_var`"""
    cs = tx_var.cs
    before = cs.num_constraints
    with cs.namespace('integrity'):
        commit_var(tx_var).enforce_equal(tag_var)
    logger.debug("Integrity check: %d constraints", cs.num_constraints - before)
