import argparse
import sys
from typing import Sequence
import logging

import requests
from bitcointx import ChainParams

from bitcoin_r1cs.btc.rpc import BitcoinRPC
from bitcoin_r1cs.conf import get_bitcoin_chain, get_bitcoin_rpc_url
from bitcoin_r1cs.core.environ import load_bitcoin_r1cs_dotenv
from ._base import Context
from .check import CheckCommand
from .export import ExportCommand
from .show import ShowCommand
from .tag import TagCommand

COMMAND_CLASSES = [
    CheckCommand,
    ExportCommand,
    ShowCommand,
    TagCommand,
]


def main(argv: Sequence[str] = None):
    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
    )
    load_bitcoin_r1cs_dotenv()

    parser = argparse.ArgumentParser()
    parser.add_argument('--rpc', help='bitcoin rpc url, used with --txid',
                        default=get_bitcoin_rpc_url())
    parser.add_argument('--chain', help='bitcointx chain params, e.g. bitcoin/mainnet. '
                        'Defaults to the chain of the --rpc node with --txid, else to BITCOIN_CHAIN',
                        default=None)

    subparsers = parser.add_subparsers(
        dest='command',
        required=True,
    )
    commands = {}
    for command_cls in COMMAND_CLASSES:
        command = command_cls()
        subparser = subparsers.add_parser(command.name, help=command.__doc__)
        command.init_parser(subparser)
        commands[command.name] = command

    args = parser.parse_args(argv)

    bitcoin_rpc = BitcoinRPC(args.rpc)
    chain = args.chain
    if chain is None and getattr(args, 'txid', None):
        try:
            chain = bitcoin_rpc.get_chain_params_name()
        except (requests.RequestException, ValueError) as e:
            sys.exit(f"Cannot get the chain of the bitcoin node at {args.rpc}, pass --chain (error: {e})")
    if chain is None:
        chain = get_bitcoin_chain()

    try:
        chain_params = ChainParams(chain)
    except ValueError as e:
        sys.exit(f"Invalid --chain {chain} (error: {e})")

    with chain_params:
        command = commands[args.command]
        command.run(Context(
            args=args,
            bitcoin_rpc=bitcoin_rpc,
        ))


if __name__ == "__main__":
    main()
