import argparse
import logging
import sys

from bitcoin_r1cs.reftx import RefTxCircuit
from ._base import Command, Context, add_predicate_args, add_tx_args, build_predicate, load_transaction

logger = logging.getLogger(__name__)


class CheckCommand(Command):
    """
    Check that a transaction satisfies a fixed locking script predicate, through the RefTx circuit
    """
    name = 'check'

    def init_parser(self, parser: argparse.ArgumentParser):
        add_tx_args(parser)
        add_predicate_args(parser)

    def run(
        self,
        context: Context,
    ):
        tx = load_transaction(context)
        predicate = build_predicate(context, tx)

        circuit = RefTxCircuit(predicate=predicate, spending_tx=tx)
        cs = circuit.synthesize()

        print("Predicate:".ljust(19), predicate)
        print("Constraints:".ljust(19), cs.num_constraints)
        print("Public inputs:".ljust(19), len(cs.public_indices))
        print("Witness variables:".ljust(19), cs.num_witness_variables)

        unsatisfied = cs.which_is_unsatisfied()
        if unsatisfied is not None:
            sys.exit(f"NOT SATISFIED (first failing constraint: {unsatisfied})")
        print("Satisfied")
