from __future__ import annotations
from abc import ABC, abstractmethod
import argparse
from dataclasses import dataclass
import logging
import sys

import requests
from bitcointx.core import CTransaction
from bitcointx.core.script import CScript
from bitcointx.wallet import CCoinAddress, CCoinAddressError

from bitcoin_r1cs.bitcoin_predicates import FixedLockScript, PredicateConfig
from bitcoin_r1cs.btc.rpc import BitcoinRPC, JSONRPCError
from bitcoin_r1cs.core.parsing import parse_script, parse_transaction
from bitcoin_r1cs.core.shape import ShapeError, shape_of

logger = logging.getLogger(__name__)


class Command(ABC):
    name: str

    def init_parser(self, parser: argparse.ArgumentParser):
        # add args etc -- optional
        pass

    @abstractmethod
    def run(self, context: Context):
        ...


@dataclass
class Context:
    args: argparse.Namespace
    bitcoin_rpc: BitcoinRPC


def add_tx_args(parser: argparse.ArgumentParser):
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument('--tx', help='Serialized transaction as hex')
    group.add_argument('--txid', help='Txid of a transaction to fetch from the bitcoin node')


def load_transaction(context: Context) -> CTransaction:
    args = context.args
    if args.tx is not None:
        try:
            return parse_transaction(args.tx)
        except ValueError as e:
            sys.exit(f"Invalid --tx: {e}")

    logger.info("Fetching transaction %s from %s", args.txid, context.bitcoin_rpc.url)
    try:
        return context.bitcoin_rpc.get_raw_transaction(args.txid)
    except JSONRPCError as e:
        sys.exit(f"Cannot fetch transaction {args.txid}: {e.message}")
    except requests.ConnectionError as e:
        sys.exit(f"Cannot connect to the bitcoin node at {context.bitcoin_rpc.url} (error: {e})")


def add_predicate_args(parser: argparse.ArgumentParser):
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument('--lock-script', help='Expected locking script as hex')
    group.add_argument('--address', help='Address whose scriptPubKey is the expected locking script')
    parser.add_argument('--index', type=int, default=0, help='Index of the output to check (default: 0)')


def build_predicate(context: Context, tx: CTransaction) -> FixedLockScript:
    """Fixed lock script predicate over the shape of `tx`, from the command line arguments"""
    args = context.args
    if args.lock_script is not None:
        try:
            lock_script = parse_script(args.lock_script)
        except ValueError as e:
            sys.exit(f"Invalid --lock-script: {e}")
    else:
        try:
            lock_script = CCoinAddress(args.address).to_scriptPubKey()
        except CCoinAddressError as e:
            sys.exit(f"Invalid --address {args.address}: {e}")

    config = PredicateConfig(shape=shape_of(tx))
    try:
        return FixedLockScript(config, lock_script=lock_script, index=args.index)
    except ShapeError as e:
        sys.exit(f"Predicate does not fit the transaction: {e}")


def format_script(script: bytes) -> str:
    script = CScript(script)
    try:
        address = CCoinAddress.from_scriptPubKey(script)
    except CCoinAddressError:
        return f"{script!r} ({script.hex()})"
    return f"{address} ({script.hex()})"
