"""
Integrity tag of a transaction, as a JSON filter

Input:
    {
        "tx": "<hex>",
        "sighash": {                        (optional)
            "nInput": 0,
            "prevLockScript": "<hex>",
            "prevAmount": 100000,
            "sighashFlag": 1                (optional, default SIGHASH_ALL)
        }
    }

Output:
    {"result": {"tag": "<hex>", "shape": {...}, "txid": "<hex>", "sighash": {...}}}

where the output "sighash" is only present when asked for and holds the config, the
32-byte "digest" and its "element" in the field.
"""
import sys

from bitcointx.core import CTransaction, b2lx
from bitcointx.core.script import SIGHASH_ALL

from bitcoin_r1cs.core.integrity import TAG_SIZE, commit
from bitcoin_r1cs.core.parsing import parse_script, parse_transaction
from bitcoin_r1cs.core.shape import shape_of
from bitcoin_r1cs.core.sighash import SighashConfig, sighash, sighash_to_field
from ._base import run_py_client_script


def sighash_result(tx: CTransaction, sighash_input: dict) -> dict:
    prev_lock_script = parse_script(sighash_input["prevLockScript"])
    prev_amount = sighash_input["prevAmount"]
    if not isinstance(prev_amount, int):
        raise TypeError(f"Expected an integer prevAmount, got {prev_amount!r}")
    config = SighashConfig(
        n_input=sighash_input["nInput"],
        len_prev_lock_script=len(prev_lock_script),
        sighash_flag=sighash_input.get("sighashFlag", int(SIGHASH_ALL)),
    )
    digest = sighash(tx, config, prev_lock_script, prev_amount)
    return {
        **config.to_json(),
        "digest": digest,
        "element": sighash_to_field(digest).to_bytes(TAG_SIZE, 'big'),
    }


def integrity_tag(input_data: dict) -> dict:
    tx = parse_transaction(input_data["tx"])
    result = {
        "tag": commit(tx),
        "shape": shape_of(tx),
        "txid": b2lx(tx.GetTxid()),
    }
    if input_data.get("sighash") is not None:
        result["sighash"] = sighash_result(tx, input_data["sighash"])
    return result


if __name__ == "__main__":
    sys.exit(run_py_client_script(integrity_tag))
