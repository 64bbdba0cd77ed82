import itertools

import pytest

from bitcoin_r1cs.r1cs import (
    AllocationMode,
    Boolean,
    ConstraintSystem,
    FpVar,
    SynthesisError,
    UInt8,
    UInt32,
    get_chunk_size,
    is_eq_sequence,
    pack_le,
    to_field_chunks,
)


def _index(var: FpVar) -> int:
    (index,) = var.lc
    return index


def test_fp_arithmetic(cs: ConstraintSystem):
    x = FpVar.new_variable(cs, 6, AllocationMode.WITNESS, 'x')
    y = FpVar.new_variable(cs, 7, AllocationMode.WITNESS, 'y')

    assert (x + y).value == 13
    assert (x - y).value == cs.modulus - 1
    assert (3 - x).value == cs.modulus - 3
    assert (x * 2 + 1).value == 13
    # linear operations are free
    assert cs.num_constraints == 0

    assert (x * y).value == 42
    assert cs.num_constraints == 1
    assert cs.is_satisfied()


def test_constants_stay_constant(cs: ConstraintSystem):
    a = FpVar.constant(cs, 5)
    b = FpVar.new_variable(cs, 5, AllocationMode.CONSTANT)
    assert (a * b).is_constant
    assert (a * b).value == 25
    assert a.is_eq(b).is_constant
    assert a.is_eq(b).value is True
    assert cs.num_constraints == 0


@pytest.mark.parametrize('value', [0, 1, 12345])
def test_is_zero(cs: ConstraintSystem, value):
    x = FpVar.new_variable(cs, value, AllocationMode.WITNESS)
    assert x.is_zero().value is (value == 0)
    assert cs.is_satisfied()


def test_is_zero_cannot_be_forged(cs: ConstraintSystem):
    x = FpVar.new_variable(cs, 5, AllocationMode.WITNESS)
    is_zero = x.is_zero()
    cs.assignment[_index(is_zero.var)] = 1
    assert not cs.is_satisfied()


def test_enforce_equal(cs: ConstraintSystem):
    x = FpVar.new_variable(cs, 5, AllocationMode.WITNESS)
    x.enforce_equal(5)
    assert cs.is_satisfied()
    x.enforce_equal(6, label='wrong')
    assert cs.which_is_unsatisfied() == 'wrong'


def test_enforce_equal_between_unequal_constants_is_unsatisfiable(cs: ConstraintSystem):
    FpVar.constant(cs, 1).enforce_equal(FpVar.constant(cs, 2))
    assert not cs.is_satisfied()


def test_mixing_constraint_systems_fails(cs: ConstraintSystem):
    other = ConstraintSystem()
    x = FpVar.new_variable(cs, 1, AllocationMode.WITNESS)
    y = FpVar.new_variable(other, 1, AllocationMode.WITNESS)
    with pytest.raises(SynthesisError):
        x + y


def test_boolean_must_be_a_bit(cs: ConstraintSystem):
    b = Boolean.new_variable(cs, True, AllocationMode.WITNESS)
    assert cs.is_satisfied()
    cs.assignment[_index(b.var)] = 2
    assert not cs.is_satisfied()


@pytest.mark.parametrize('a,b', list(itertools.product([False, True], repeat=2)))
def test_boolean_gates(cs: ConstraintSystem, a, b):
    x = Boolean.new_variable(cs, a, AllocationMode.WITNESS)
    y = Boolean.new_variable(cs, b, AllocationMode.WITNESS)
    assert x.and_(y).value is (a and b)
    assert x.or_(y).value is (a or b)
    assert x.not_().value is (not a)
    assert cs.is_satisfied()


@pytest.mark.parametrize('bits', list(itertools.product([False, True], repeat=3)))
def test_kary_gates(cs: ConstraintSystem, bits):
    variables = [Boolean.new_variable(cs, b, AllocationMode.WITNESS) for b in bits]
    assert Boolean.kary_and(variables).value is all(bits)
    assert Boolean.kary_or(variables).value is any(bits)
    assert cs.is_satisfied()


def test_kary_gates_with_constants(cs: ConstraintSystem):
    true = Boolean.constant(cs, True)
    false = Boolean.constant(cs, False)
    x = Boolean.new_variable(cs, True, AllocationMode.WITNESS)
    assert Boolean.kary_and([true, x]) is x
    assert Boolean.kary_and([x, false]).value is False
    assert Boolean.kary_or([false, false]).value is False
    assert Boolean.kary_or([x, true]).value is True
    with pytest.raises(SynthesisError):
        Boolean.kary_and([])


def test_uint_range_check(cs: ConstraintSystem):
    byte = UInt8.new_variable(cs, 0xab, AllocationMode.WITNESS)
    assert byte.value == 0xab
    assert [bit.value for bit in byte.bits] == [True, True, False, True, False, True, False, True]
    assert cs.is_satisfied()
    with pytest.raises(SynthesisError):
        UInt8.new_variable(cs, 256, AllocationMode.WITNESS)
    with pytest.raises(SynthesisError):
        UInt32.new_variable(cs, -1, AllocationMode.WITNESS)


def test_uint_input_adds_one_public_input(cs: ConstraintSystem):
    value = UInt32.new_variable(cs, 0xdeadbeef, AllocationMode.INPUT, 'value')
    assert cs.public_inputs() == [0xdeadbeef]
    assert value.to_fp().value == 0xdeadbeef
    assert cs.is_satisfied()


def test_pack_le_matches_native_chunks(cs: ConstraintSystem):
    data = bytes(range(1, 40))
    byte_vars = [UInt8.new_variable(cs, byte, AllocationMode.WITNESS) for byte in data]
    packed = pack_le(byte_vars, get_chunk_size(cs.modulus))
    assert [chunk.value for chunk in packed] == to_field_chunks(data, cs.modulus)


def test_is_eq_sequence(cs: ConstraintSystem):
    left = [FpVar.new_variable(cs, v, AllocationMode.WITNESS) for v in (1, 2, 3)]
    same = [FpVar.new_variable(cs, v, AllocationMode.WITNESS) for v in (1, 2, 3)]
    different = [FpVar.new_variable(cs, v, AllocationMode.WITNESS) for v in (1, 2, 4)]
    assert is_eq_sequence(cs, left, same).value is True
    assert is_eq_sequence(cs, left, different).value is False
    assert is_eq_sequence(cs, [], []).value is True
    assert cs.is_satisfied()
    with pytest.raises(SynthesisError):
        is_eq_sequence(cs, left, left[:2])
