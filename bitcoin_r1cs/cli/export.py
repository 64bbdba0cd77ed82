import argparse
import json
import logging

from bitcoin_r1cs.reftx import RefTxCircuit
from ._base import Command, Context, add_predicate_args, add_tx_args, build_predicate, load_transaction

logger = logging.getLogger(__name__)


class ExportCommand(Command):
    """
    Export the R1CS of the RefTx circuit for a fixed locking script predicate as JSON
    """
    name = 'export'

    def init_parser(self, parser: argparse.ArgumentParser):
        add_tx_args(parser)
        add_predicate_args(parser)
        parser.add_argument('--setup', action='store_true',
                            help='Export the placeholder circuit for key setup instead of the given transaction')
        parser.add_argument('--out', default='-', help='Output file (default: stdout)')

    def run(
        self,
        context: Context,
    ):
        args = context.args
        tx = load_transaction(context)
        predicate = build_predicate(context, tx)

        if args.setup:
            circuit = RefTxCircuit.for_setup(predicate)
        else:
            circuit = RefTxCircuit(predicate=predicate, spending_tx=tx)
        cs = circuit.synthesize()
        r1cs_json = json.dumps(cs.to_json())

        if args.out == '-':
            print(r1cs_json)
        else:
            with open(args.out, 'w') as f:
                f.write(r1cs_json)
            logger.info("Wrote %s constraints to %s", cs.num_constraints, args.out)
