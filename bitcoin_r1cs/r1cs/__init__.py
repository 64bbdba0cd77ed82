from .constraint_system import AllocationMode, Constraint, ConstraintSystem, SynthesisError
from .field import DEFAULT_MODULUS, BLS12_381_SCALAR_MODULUS, get_chunk_size, to_field_chunks
from .gadgets import Boolean, FpVar, UInt8, UInt32, UInt64, UIntVar, is_eq_sequence, pack_le

__all__ = [
    "AllocationMode",
    "BLS12_381_SCALAR_MODULUS",
    "Boolean",
    "Constraint",
    "ConstraintSystem",
    "DEFAULT_MODULUS",
    "FpVar",
    "SynthesisError",
    "UInt8",
    "UInt32",
    "UInt64",
    "UIntVar",
    "get_chunk_size",
    "is_eq_sequence",
    "pack_le",
    "to_field_chunks",
]
