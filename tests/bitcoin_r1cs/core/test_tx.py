import pytest

from bitcoin_r1cs.core.integrity import tx_field_elements
from bitcoin_r1cs.core.shape import ShapeMismatch, TransactionShape, shape_of
from bitcoin_r1cs.core.tx import ScriptVar, TxVar
from bitcoin_r1cs.r1cs import AllocationMode, ConstraintSystem, SynthesisError
from tests.utils.transactions import P2WPKH_SCRIPT_A


def test_allocate_transaction(cs: ConstraintSystem, sample_tx):
    tx_var = TxVar.new_variable(cs, sample_tx, shape_of(sample_tx), AllocationMode.WITNESS)

    assert tx_var.version.value == 2
    assert tx_var.locktime.value == 500
    assert [txin.unlock_script.value for txin in tx_var.inputs] == [b'\x51\x52\x53', b'']
    assert tx_var.inputs[1].prevout_index.value == 1
    assert bytes(byte.value for byte in tx_var.inputs[0].prevout_hash) == b'\x01' * 32
    assert [txout.amount.value for txout in tx_var.outputs] == [50_000, 1_000]
    assert tx_var.outputs[0].lock_script.value == P2WPKH_SCRIPT_A
    assert cs.public_inputs() == []
    assert cs.is_satisfied()


def test_allocate_checks_the_shape_first(cs: ConstraintSystem, sample_tx):
    with pytest.raises(ShapeMismatch):
        TxVar.new_variable(cs, sample_tx, TransactionShape(0, 2, [], [22, 22]), AllocationMode.WITNESS)
    assert len(cs.assignment) == 1


def test_field_elements_match_native(cs: ConstraintSystem, sample_tx):
    tx_var = TxVar.new_variable(cs, sample_tx, shape_of(sample_tx), AllocationMode.WITNESS)
    assert [e.value for e in tx_var.to_field_elements()] == tx_field_elements(sample_tx, cs.modulus)


def test_script_var_slice_and_compare(cs: ConstraintSystem):
    script = ScriptVar.new_variable(cs, P2WPKH_SCRIPT_A, AllocationMode.WITNESS)
    prefix = ScriptVar.new_variable(cs, b'\x00\x14', AllocationMode.CONSTANT)
    other_prefix = ScriptVar.new_variable(cs, b'\x51\x20', AllocationMode.CONSTANT)

    assert len(script) == 22
    assert script.slice(0, 2).value == b'\x00\x14'
    assert script.slice(0, 2).is_eq(prefix).value is True
    assert script.slice(0, 2).is_eq(other_prefix).value is False
    assert cs.is_satisfied()


@pytest.mark.parametrize(
    'left,right',
    [
        (b'\x01', b'\x01\x00'),
        (b'\x00\x14', b'\x00\x14\x00\x00'),
    ],
)
def test_script_var_compare_requires_equal_lengths(cs: ConstraintSystem, left, right):
    a = ScriptVar.new_variable(cs, left, AllocationMode.WITNESS)
    b = ScriptVar.new_variable(cs, right, AllocationMode.CONSTANT)
    assert a.to_field_elements()[0].value == b.to_field_elements()[0].value
    with pytest.raises(SynthesisError):
        a.is_eq(b)
    with pytest.raises(SynthesisError):
        b.is_eq(a)
