import argparse

from bitcoin_r1cs.core.integrity import commit
from ._base import Command, Context, add_tx_args, load_transaction


class TagCommand(Command):
    """
    Print the integrity tag of a transaction
    """
    name = 'tag'

    def init_parser(self, parser: argparse.ArgumentParser):
        add_tx_args(parser)

    def run(
        self,
        context: Context,
    ):
        tx = load_transaction(context)
        print(commit(tx).hex())
