import io
import json

import pytest

from bitcoin_r1cs.core.integrity import commit
from bitcoin_r1cs.r1cs import DEFAULT_MODULUS
from bitcoin_r1cs.scripts._base import run_py_client_script
from bitcoin_r1cs.scripts.integrity_tag import integrity_tag
from tests.utils.transactions import BIP143_AMOUNT, BIP143_SCRIPT_CODE, BIP143_SIGHASH, BIP143_TX_HEX


def run_script(func, input_data) -> tuple[int, dict]:
    stdin = input_data if isinstance(input_data, io.StringIO) else io.StringIO(json.dumps(input_data))
    stdout = io.StringIO()
    exit_code = run_py_client_script(func, stdin=stdin, stdout=stdout)
    return exit_code, json.loads(stdout.getvalue())


def test_integrity_tag(sample_tx):
    exit_code, output = run_script(integrity_tag, {"tx": sample_tx.serialize().hex()})
    assert exit_code == 0
    assert output == {
        "result": {
            "tag": commit(sample_tx).hex(),
            "shape": {
                "nInputs": 2,
                "nOutputs": 2,
                "lenUnlockScripts": [3, 0],
                "lenLockScripts": [22, 22],
            },
            "txid": sample_tx.GetTxid()[::-1].hex(),
        },
    }


def test_integrity_tag_with_sighash():
    exit_code, output = run_script(integrity_tag, {
        "tx": BIP143_TX_HEX,
        "sighash": {
            "nInput": 1,
            "prevLockScript": BIP143_SCRIPT_CODE.hex(),
            "prevAmount": BIP143_AMOUNT,
        },
    })
    assert exit_code == 0
    element = int.from_bytes(BIP143_SIGHASH, 'little') % DEFAULT_MODULUS
    assert output["result"]["sighash"] == {
        "nInput": 1,
        "lenPrevLockScript": len(BIP143_SCRIPT_CODE),
        "sighashFlag": 1,
        "digest": BIP143_SIGHASH.hex(),
        "element": element.to_bytes(32, 'big').hex(),
    }


def test_function_output_goes_to_stderr(capsys):
    def noisy(input_data):
        print("progress")
        return input_data["value"] * 2

    exit_code, output = run_script(noisy, {"value": 21})
    assert exit_code == 0
    assert output == {"result": 42}
    assert capsys.readouterr().err.strip() == "progress"


def test_default_streams(monkeypatch, capsys, sample_tx):
    monkeypatch.setattr('sys.stdin', io.StringIO(json.dumps({"tx": sample_tx.serialize().hex()})))
    assert run_py_client_script(integrity_tag) == 0
    output = json.loads(capsys.readouterr().out)
    assert output["result"]["tag"] == commit(sample_tx).hex()


@pytest.mark.parametrize(
    'input_data,error',
    [
        ({"tx": "zz"}, {"error": "Invalid hex string: 'zz'", "errorType": "ValueError"}),
        ({}, {"error": "Missing input field 'tx'", "errorType": "KeyError"}),
        (
            {"tx": BIP143_TX_HEX, "sighash": {"nInput": 1, "prevLockScript": "51"}},
            {"error": "Missing input field 'prevAmount'", "errorType": "KeyError"},
        ),
        (
            {"tx": BIP143_TX_HEX, "sighash": {"nInput": 5, "prevLockScript": "51", "prevAmount": 1}},
            {"error": "Input index 5 out of range, tx has 2 inputs", "errorType": "IntegrityTagError"},
        ),
        (
            [1, 2],
            {"error": "Expected a JSON object as input, got list", "errorType": "InvalidInput"},
        ),
    ],
)
def test_input_errors(input_data, error):
    exit_code, output = run_script(integrity_tag, input_data)
    assert exit_code == 1
    assert output == error


def test_invalid_json():
    exit_code, output = run_script(integrity_tag, io.StringIO("{not json"))
    assert exit_code == 1
    assert output["errorType"] == "InvalidInput"
    assert output["error"].startswith("Invalid JSON input")


def test_unexpected_errors_are_reported(caplog):
    def broken(input_data):
        raise RuntimeError("boom")

    exit_code, output = run_script(broken, {})
    assert exit_code == 1
    assert output == {"error": "boom", "errorType": "RuntimeError"}
    assert "py-client script error" in caplog.text
