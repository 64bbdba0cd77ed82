import pytest
from bitcointx import ChainParams
from bitcointx.core import CTransaction

from bitcoin_r1cs.core.shape import TransactionShape
from bitcoin_r1cs.r1cs import ConstraintSystem
from .utils.transactions import P2WPKH_SCRIPT_A, P2WPKH_SCRIPT_B, make_tx


@pytest.fixture(autouse=True)
def use_regtest_bitcointx():
    with ChainParams("bitcoin/regtest"):
        yield


@pytest.fixture()
def cs() -> ConstraintSystem:
    return ConstraintSystem()


@pytest.fixture()
def sample_tx() -> CTransaction:
    """Two inputs, two P2WPKH outputs"""
    return make_tx(
        lock_scripts=[P2WPKH_SCRIPT_A, P2WPKH_SCRIPT_B],
        unlock_scripts=[b'\x51\x52\x53', b''],
        amounts=[50_000, 1_000],
        locktime=500,
    )


@pytest.fixture()
def two_output_shape() -> TransactionShape:
    """No inputs, two outputs with one-byte locking scripts"""
    return TransactionShape(
        n_inputs=0,
        n_outputs=2,
        len_unlock_scripts=[],
        len_lock_scripts=[1, 1],
    )
