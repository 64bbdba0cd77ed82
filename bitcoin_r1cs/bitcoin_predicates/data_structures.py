"""
Data types for predicate locking data, unlocking data and witnesses

Each native type has a circuit counterpart with a `new_variable(cs, value, mode)`
constructor, and `to_field_elements()` lists the public input elements it contributes.
"""
from __future__ import annotations
from dataclasses import dataclass

from ..r1cs import AllocationMode, Boolean, ConstraintSystem, FpVar, SynthesisError, UInt8, is_eq_sequence


def _check_type(value, expected: type):
    if not isinstance(value, expected):
        raise SynthesisError(f"Expected {expected.__name__}, got {type(value).__name__}")


@dataclass(frozen=True)
class Unit:
    """No data"""

    def to_field_elements(self) -> list[int]:
        return []


@dataclass(frozen=True)
class UnitVar:
    @classmethod
    def new_variable(cls, cs: ConstraintSystem, value: Unit, mode: AllocationMode) -> UnitVar:
        _check_type(value, Unit)
        return cls()


@dataclass(frozen=True)
class ByteArray:
    data: bytes = b''

    def __post_init__(self):
        object.__setattr__(self, 'data', bytes(self.data))

    @classmethod
    def zeros(cls, length: int) -> ByteArray:
        return cls(b'\x00' * length)

    def to_field_elements(self) -> list[int]:
        return list(self.data)


@dataclass(frozen=True)
class ByteArrayVar:
    cs: ConstraintSystem
    data: tuple[UInt8, ...]

    @classmethod
    def new_variable(cls, cs: ConstraintSystem, value: ByteArray, mode: AllocationMode) -> ByteArrayVar:
        _check_type(value, ByteArray)
        return cls(
            cs=cs,
            data=tuple(
                UInt8.new_variable(cs, byte, mode, f'byte[{i}]')
                for i, byte in enumerate(value.data)
            ),
        )

    @property
    def value(self) -> ByteArray:
        return ByteArray(bytes(byte.value for byte in self.data))

    def is_eq(self, other: ByteArrayVar) -> Boolean:
        return is_eq_sequence(
            self.cs,
            [byte.to_fp() for byte in self.data],
            [byte.to_fp() for byte in other.data],
        )


@dataclass(frozen=True)
class FieldArray:
    elements: tuple[int, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'elements', tuple(self.elements))

    @classmethod
    def zeros(cls, length: int) -> FieldArray:
        return cls((0,) * length)

    def to_field_elements(self) -> list[int]:
        return list(self.elements)


@dataclass(frozen=True)
class FieldArrayVar:
    cs: ConstraintSystem
    elements: tuple[FpVar, ...]

    @classmethod
    def new_variable(cls, cs: ConstraintSystem, value: FieldArray, mode: AllocationMode) -> FieldArrayVar:
        _check_type(value, FieldArray)
        return cls(
            cs=cs,
            elements=tuple(
                FpVar.new_variable(cs, element, mode, f'element[{i}]')
                for i, element in enumerate(value.elements)
            ),
        )

    @property
    def value(self) -> FieldArray:
        return FieldArray(tuple(element.value for element in self.elements))

    def is_eq(self, other: FieldArrayVar) -> Boolean:
        return is_eq_sequence(self.cs, list(self.elements), list(other.elements))
