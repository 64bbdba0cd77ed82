import pytest

from bitcoin_r1cs.bitcoin_predicates import (
    DataSlot,
    FixedLockScript,
    FixedSubLockScript,
    PredicateConfig,
    Unit,
)
from bitcoin_r1cs.core.shape import ShapeError, ShapeMismatch, TransactionShape, shape_of
from tests.utils.predicates import evaluate
from tests.utils.transactions import P2WPKH_SCRIPT_A, P2WPKH_SCRIPT_B, make_tx


def test_fixed_lock_script(two_output_shape):
    config = PredicateConfig(two_output_shape)
    predicate = FixedLockScript(config, lock_script=b'\x01', index=1)

    cs, signal = evaluate(predicate, make_tx([b'\x00', b'\x01']), two_output_shape)
    assert signal.value is True
    assert cs.is_satisfied()

    cs, signal = evaluate(predicate, make_tx([b'\x01', b'\x09']), two_output_shape)
    assert signal.value is False
    # a false signal is not a violated constraint
    assert cs.is_satisfied()


def test_fixed_lock_script_data_is_empty(two_output_shape):
    predicate = FixedLockScript(PredicateConfig(two_output_shape), lock_script=b'\x00', index=0)
    for slot in DataSlot:
        assert predicate.default(slot) == Unit()
        assert predicate.to_field_elements(slot, Unit()) == []


@pytest.mark.parametrize(
    'lock_script,index',
    [
        (b'\x00', 2),
        (b'\x00', -1),
        (b'\x00\x00', 0),
        (b'', 1),
    ],
)
def test_fixed_lock_script_must_fit_the_shape(two_output_shape, lock_script, index):
    with pytest.raises(ShapeError):
        FixedLockScript(PredicateConfig(two_output_shape), lock_script=lock_script, index=index)


def test_predicate_rejects_transactions_of_another_shape(two_output_shape, sample_tx):
    predicate = FixedLockScript(PredicateConfig(two_output_shape), lock_script=b'\x00', index=0)
    with pytest.raises(ShapeMismatch):
        evaluate(predicate, sample_tx, shape_of(sample_tx))


def test_fixed_sub_lock_script(sample_tx):
    shape = shape_of(sample_tx)
    config = PredicateConfig(shape)
    program_a = FixedSubLockScript(config, lock_script=P2WPKH_SCRIPT_A[2:], index=0, start=2, end=22)
    program_b = FixedSubLockScript(config, lock_script=P2WPKH_SCRIPT_B[2:], index=0, start=2, end=22)
    witness_v0 = FixedSubLockScript(config, lock_script=b'\x00\x14', index=1, start=0, end=2)

    assert evaluate(program_a, sample_tx, shape)[1].value is True
    assert evaluate(program_b, sample_tx, shape)[1].value is False
    assert evaluate(witness_v0, sample_tx, shape)[1].value is True


@pytest.mark.parametrize(
    'lock_script,index,start,end',
    [
        (b'\x00', 2, 0, 1),
        (b'\x00' * 2, 0, 21, 23),
        (b'\x00' * 2, 0, 3, 2),
        (b'\x00' * 3, 0, 0, 2),
    ],
)
def test_fixed_sub_lock_script_must_fit_the_shape(lock_script, index, start, end):
    config = PredicateConfig(TransactionShape(0, 2, [], [22, 22]))
    with pytest.raises(ShapeError):
        FixedSubLockScript(config, lock_script=lock_script, index=index, start=start, end=end)


def test_predicate_config_validation(two_output_shape):
    with pytest.raises(TypeError):
        PredicateConfig(shape=(0, 2, [], [1, 1]))
    with pytest.raises(ValueError):
        PredicateConfig(two_output_shape, modulus=1)
    with pytest.raises(TypeError):
        FixedLockScript(two_output_shape, lock_script=b'\x00', index=0)
