"""
Circuit variables built on top of ConstraintSystem

FpVar is a field element, Boolean a field element constrained to {0, 1}, and the UInt*
classes are unsigned integers range-checked through their bit decomposition.
"""
from __future__ import annotations
import functools
import operator
from typing import Iterable, Sequence

from .constraint_system import ONE, AllocationMode, ConstraintSystem, SynthesisError
from .field import inverse


class FpVar:
    def __init__(self, cs: ConstraintSystem, lc: dict[int, int], value: int):
        modulus = cs.modulus
        self.cs = cs
        self.lc = {index: coeff % modulus for index, coeff in lc.items() if coeff % modulus}
        self.value = value % modulus

    def __repr__(self):
        return f"<FpVar(value={self.value}, constant={self.is_constant})>"

    @classmethod
    def constant(cls, cs: ConstraintSystem, value: int) -> FpVar:
        return cls(cs, {ONE: value}, value)

    @classmethod
    def new_variable(
        cls,
        cs: ConstraintSystem,
        value: int,
        mode: AllocationMode,
        name: str = 'fp',
    ) -> FpVar:
        if mode is AllocationMode.CONSTANT:
            return cls.constant(cs, value)
        if mode is AllocationMode.INPUT:
            index = cs.new_input_variable(value, name)
        else:
            index = cs.new_witness_variable(value, name)
        return cls(cs, {index: 1}, value)

    @property
    def is_constant(self) -> bool:
        return all(index == ONE for index in self.lc)

    def _coerce(self, other: FpVar | int) -> FpVar:
        if isinstance(other, FpVar):
            if other.cs is not self.cs:
                raise SynthesisError("Variables belong to different constraint systems")
            return other
        if isinstance(other, int):
            return FpVar.constant(self.cs, other)
        raise TypeError(f"Cannot combine FpVar with {type(other).__name__}")

    def _scale(self, factor: int) -> FpVar:
        return FpVar(
            self.cs,
            {index: coeff * factor for index, coeff in self.lc.items()},
            self.value * factor,
        )

    def __add__(self, other: FpVar | int) -> FpVar:
        other = self._coerce(other)
        lc = dict(self.lc)
        for index, coeff in other.lc.items():
            lc[index] = lc.get(index, 0) + coeff
        return FpVar(self.cs, lc, self.value + other.value)

    __radd__ = __add__

    def __neg__(self) -> FpVar:
        return self._scale(-1)

    def __sub__(self, other: FpVar | int) -> FpVar:
        return self + (-self._coerce(other))

    def __rsub__(self, other: int) -> FpVar:
        return self._coerce(other) - self

    def __mul__(self, other: FpVar | int) -> FpVar:
        other = self._coerce(other)
        if other.is_constant:
            return self._scale(other.value)
        if self.is_constant:
            return other._scale(self.value)
        product = FpVar.new_variable(self.cs, self.value * other.value, AllocationMode.WITNESS, 'product')
        self.cs.enforce(self.lc, other.lc, product.lc, label='product')
        return product

    __rmul__ = __mul__

    def is_zero(self) -> Boolean:
        cs = self.cs
        if self.is_constant:
            return Boolean.constant(cs, self.value == 0)
        is_zero = FpVar.new_variable(cs, int(self.value == 0), AllocationMode.WITNESS, 'is_zero')
        inv = FpVar.new_variable(
            cs,
            inverse(self.value, cs.modulus) if self.value else 0,
            AllocationMode.WITNESS,
            'is_zero/inverse',
        )
        # self * inv == 1 - is_zero and self * is_zero == 0 force is_zero to be boolean and correct
        cs.enforce(self.lc, inv.lc, (1 - is_zero).lc, label='is_zero/inverse')
        cs.enforce(self.lc, is_zero.lc, {}, label='is_zero/zero')
        return Boolean(is_zero)

    def is_eq(self, other: FpVar | int) -> Boolean:
        return (self - other).is_zero()

    def enforce_equal(self, other: FpVar | int, label: str = 'equal') -> None:
        diff = self - other
        if not diff.lc:
            return
        # unequal constants still produce a constraint, leaving the system unsatisfiable
        self.cs.enforce(diff.lc, {ONE: 1}, {}, label=label)


class Boolean:
    def __init__(self, var: FpVar):
        self.var = var

    def __repr__(self):
        return f"<Boolean(value={self.value}, constant={self.is_constant})>"

    @classmethod
    def constant(cls, cs: ConstraintSystem, value: bool) -> Boolean:
        return cls(FpVar.constant(cs, int(bool(value))))

    @classmethod
    def new_variable(
        cls,
        cs: ConstraintSystem,
        value: bool,
        mode: AllocationMode,
        name: str = 'bit',
    ) -> Boolean:
        var = FpVar.new_variable(cs, int(bool(value)), mode, name)
        if mode is not AllocationMode.CONSTANT:
            cs.enforce(var.lc, (1 - var).lc, {}, label=f'{name}/boolean')
        return cls(var)

    @property
    def cs(self) -> ConstraintSystem:
        return self.var.cs

    @property
    def value(self) -> bool:
        return bool(self.var.value)

    @property
    def is_constant(self) -> bool:
        return self.var.is_constant

    def not_(self) -> Boolean:
        return Boolean(1 - self.var)

    def and_(self, other: Boolean) -> Boolean:
        if self.is_constant:
            return other if self.value else self
        if other.is_constant:
            return self if other.value else other
        return Boolean(self.var * other.var)

    def or_(self, other: Boolean) -> Boolean:
        if self.is_constant:
            return self if self.value else other
        if other.is_constant:
            return other if other.value else self
        return Boolean(self.var + other.var - self.var * other.var)

    @staticmethod
    def kary_and(bits: Iterable[Boolean]) -> Boolean:
        bits = list(bits)
        if not bits:
            raise SynthesisError("kary_and needs at least one bit")
        variables = []
        for bit in bits:
            if bit.is_constant:
                if not bit.value:
                    return bit
            else:
                variables.append(bit)
        if not variables:
            return Boolean.constant(bits[0].cs, True)
        if len(variables) <= 2:
            return functools.reduce(Boolean.and_, variables)
        # all bits are set iff they sum to their count
        total = functools.reduce(operator.add, (bit.var for bit in variables))
        return total.is_eq(len(variables))

    @staticmethod
    def kary_or(bits: Iterable[Boolean]) -> Boolean:
        bits = list(bits)
        if not bits:
            raise SynthesisError("kary_or needs at least one bit")
        variables = []
        for bit in bits:
            if bit.is_constant:
                if bit.value:
                    return bit
            else:
                variables.append(bit)
        if not variables:
            return Boolean.constant(bits[0].cs, False)
        if len(variables) <= 2:
            return functools.reduce(Boolean.or_, variables)
        total = functools.reduce(operator.add, (bit.var for bit in variables))
        return total.is_zero().not_()

    def enforce_equal(self, other: Boolean, label: str = 'boolean_equal') -> None:
        self.var.enforce_equal(other.var, label=label)


class UIntVar:
    NUM_BITS: int

    def __init__(self, bits: list[Boolean], packed: FpVar):
        self.bits = bits
        self.packed = packed

    def __repr__(self):
        return f"<{type(self).__name__}(value={self.value})>"

    @classmethod
    def new_variable(
        cls,
        cs: ConstraintSystem,
        value: int,
        mode: AllocationMode,
        name: str = 'uint',
    ) -> UIntVar:
        num_bits = cls.NUM_BITS
        if not isinstance(value, int) or not 0 <= value < 2 ** num_bits:
            raise SynthesisError(f"{name}: {value!r} does not fit in {num_bits} unsigned bits")
        if mode is AllocationMode.CONSTANT:
            bits = [Boolean.constant(cs, (value >> i) & 1) for i in range(num_bits)]
            return cls(bits, FpVar.constant(cs, value))

        bits = [
            Boolean.new_variable(cs, (value >> i) & 1, AllocationMode.WITNESS, f'{name}/bit{i}')
            for i in range(num_bits)
        ]
        packed = functools.reduce(operator.add, (bit.var * (1 << i) for i, bit in enumerate(bits)))
        if mode is AllocationMode.INPUT:
            public = FpVar.new_variable(cs, value, AllocationMode.INPUT, name)
            public.enforce_equal(packed, label=f'{name}/packing')
            packed = public
        return cls(bits, packed)

    @property
    def value(self) -> int:
        return self.packed.value

    def to_fp(self) -> FpVar:
        return self.packed

    def is_eq(self, other: UIntVar) -> Boolean:
        return self.packed.is_eq(other.packed)


class UInt8(UIntVar):
    NUM_BITS = 8


class UInt32(UIntVar):
    NUM_BITS = 32


class UInt64(UIntVar):
    NUM_BITS = 64


def pack_le(byte_vars: Sequence[UInt8], chunk_size: int) -> list[FpVar]:
    """In-circuit counterpart of field.to_field_chunks"""
    chunks = []
    for start in range(0, len(byte_vars), chunk_size):
        chunk = byte_vars[start:start + chunk_size]
        acc = chunk[0].to_fp()
        for offset, byte in enumerate(chunk[1:], start=1):
            acc = acc + byte.to_fp() * (1 << (8 * offset))
        chunks.append(acc)
    return chunks


def is_eq_sequence(cs: ConstraintSystem, left: Sequence[FpVar], right: Sequence[FpVar]) -> Boolean:
    if len(left) != len(right):
        raise SynthesisError(f"Cannot compare sequences of length {len(left)} and {len(right)}")
    if not left:
        return Boolean.constant(cs, True)
    return Boolean.kary_and(a.is_eq(b) for a, b in zip(left, right))
