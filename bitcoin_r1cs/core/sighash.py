"""
Sighash-bound transaction tags

The integrity tag in integrity.py is a MiMC commitment that is cheap to recompute in a
circuit but that Bitcoin Script cannot compute. A protocol that needs the tag to be tied
to what a signature on chain commits to can use the signature hash of one input
instead: the 32-byte BIP-143 digest, read as a little-endian integer and reduced into
the field.

The digest is computed natively with python-bitcointx. It is not recomputed in-circuit:
a circuit that takes it as public input has no constraint linking it to the witnessed
transaction, so binding it to the proof is left to whoever checks the signature.

The digest commits to the previous outputs of every input (unless ANYONECANPAY), the
script code and amount of the signed input, the outputs selected by the sighash flag and
the locktime. Like the MiMC tag it does not commit to unlocking scripts.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass

from bitcointx.core import CTransaction
from bitcointx.core.script import CScript, SIGHASH_ALL, SIGHASH_Type, SIGVERSION_WITNESS_V0

from ..r1cs import DEFAULT_MODULUS
from .integrity import IntegrityTagError, MAX_UINT64, TAG_SIZE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SighashConfig:
    """
    Which input is signed, how long its script code is and with which sighash flag.
    Fixed per circuit, like the TransactionShape.
    """
    n_input: int
    len_prev_lock_script: int
    sighash_flag: int = SIGHASH_ALL

    def __post_init__(self):
        if self.n_input < 0:
            raise IntegrityTagError(f"Input index must not be negative, got {self.n_input}")
        if self.len_prev_lock_script < 0:
            raise IntegrityTagError(f"Script code length must not be negative, got {self.len_prev_lock_script}")
        try:
            SIGHASH_Type(self.sighash_flag)
        except ValueError as e:
            raise IntegrityTagError(f"Unsupported sighash flag {self.sighash_flag:#04x}") from e

    @property
    def hashtype(self) -> SIGHASH_Type:
        return SIGHASH_Type(self.sighash_flag)

    def to_json(self):
        return {
            "nInput": self.n_input,
            "lenPrevLockScript": self.len_prev_lock_script,
            "sighashFlag": self.sighash_flag,
        }


def sighash(
    tx: CTransaction,
    config: SighashConfig,
    prev_lock_script: bytes,
    prev_amount: int,
) -> bytes:
    """BIP-143 signature hash of input `config.n_input` of `tx`"""
    if config.n_input >= len(tx.vin):
        raise IntegrityTagError(f"Input index {config.n_input} out of range, tx has {len(tx.vin)} inputs")
    if len(prev_lock_script) != config.len_prev_lock_script:
        raise IntegrityTagError(
            f"Expected a {config.len_prev_lock_script}-byte script code, got {len(prev_lock_script)} bytes"
        )
    if not 0 <= prev_amount <= MAX_UINT64:
        raise IntegrityTagError(f"Previous amount out of range: {prev_amount}")

    digest = CScript(prev_lock_script).sighash(
        tx,
        config.n_input,
        config.hashtype,
        amount=prev_amount,
        sigversion=SIGVERSION_WITNESS_V0,
    )
    assert len(digest) == TAG_SIZE
    logger.debug("Sighash of input #%d with flag %#04x: %s", config.n_input, config.sighash_flag, digest.hex())
    return digest


def sighash_to_field(digest: bytes, modulus: int = DEFAULT_MODULUS) -> int:
    if len(digest) != TAG_SIZE:
        raise IntegrityTagError(f"Expected a {TAG_SIZE}-byte sighash, got {len(digest)} bytes")
    return int.from_bytes(digest, 'little') % modulus


def sighash_field_element(
    tx: CTransaction,
    config: SighashConfig,
    prev_lock_script: bytes,
    prev_amount: int,
    modulus: int = DEFAULT_MODULUS,
) -> int:
    return sighash_to_field(sighash(tx, config, prev_lock_script, prev_amount), modulus)
