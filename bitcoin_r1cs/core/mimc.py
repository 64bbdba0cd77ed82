"""
MiMC hash, natively and in-circuit

MiMC with exponent 5 used as a block cipher `E_k(x)` and chained in Miyaguchi-Preneel
mode: `h_0 = 0`, `h_{i+1} = E_{h_i}(m_i) + h_i + m_i`.

Parameters after Albrecht et al., "MiMC: Efficient Encryption and Cryptographic Hashing
with Minimal Multiplicative Complexity" (ASIACRYPT 2016). The exponent must satisfy
gcd(d, p - 1) == 1. For the BLS12-381 scalar field 3 divides p - 1, so d = 5. The round
count is ceil(log_d p), 110 for that field. The first round constant is zero and the
others are SHA-256 of ROUND_CONSTANTS_SEED and the round index, reduced into the field.

The native and circuit versions walk the same rounds with the same constants, so a
circuit fed the same elements always lands on the same digest.
"""
from __future__ import annotations
import functools
import hashlib
import math
from typing import Sequence

from ..r1cs import ConstraintSystem, FpVar

EXPONENT = 5
ROUND_CONSTANTS_SEED = b'bitcoin_r1cs/mimc5'


@functools.lru_cache(maxsize=None)
def round_constants(modulus: int) -> tuple[int, ...]:
    if math.gcd(EXPONENT, modulus - 1) != 1:
        raise ValueError(f"x^{EXPONENT} is not a permutation of the field with modulus {modulus}")
    num_rounds = math.ceil(modulus.bit_length() / math.log2(EXPONENT))
    # first constant is zero by convention
    constants = [0]
    for i in range(1, num_rounds):
        digest = hashlib.sha256(ROUND_CONSTANTS_SEED + i.to_bytes(4, 'big')).digest()
        constants.append(int.from_bytes(digest, 'big') % modulus)
    return tuple(constants)


def mimc_encrypt(x: int, key: int, modulus: int) -> int:
    for constant in round_constants(modulus):
        x = pow((x + key + constant) % modulus, EXPONENT, modulus)
    return (x + key) % modulus


def mimc_hash(elements: Sequence[int], modulus: int) -> int:
    h = 0
    for m in elements:
        m %= modulus
        h = (mimc_encrypt(m, h, modulus) + h + m) % modulus
    return h


def mimc_encrypt_var(x: FpVar, key: FpVar) -> FpVar:
    for constant in round_constants(x.cs.modulus):
        t = x + key + constant
        t2 = t * t
        t4 = t2 * t2
        x = t4 * t
    return x + key


def mimc_hash_var(cs: ConstraintSystem, elements: Sequence[FpVar]) -> FpVar:
    h = FpVar.constant(cs, 0)
    for m in elements:
        h = mimc_encrypt_var(m, h) + h + m
    return h
