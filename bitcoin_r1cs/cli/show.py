import argparse
import sys

from bitcointx.core import CTransaction, b2lx
from bitcointx.core.script import SIGHASH_ALL

from bitcoin_r1cs.core.integrity import IntegrityTagError, commit
from bitcoin_r1cs.core.parsing import parse_script
from bitcoin_r1cs.core.shape import shape_of
from bitcoin_r1cs.core.sighash import SighashConfig, sighash, sighash_to_field
from ._base import Command, Context, add_tx_args, format_script, load_transaction


class ShowCommand(Command):
    """
    Show the shape, content and integrity tag of a transaction
    """
    name = 'show'

    def init_parser(self, parser: argparse.ArgumentParser):
        add_tx_args(parser)
        group = parser.add_argument_group('sighash')
        group.add_argument('--sighash-input', type=int,
                           help='Also show the BIP-143 sighash of this input')
        group.add_argument('--prev-lock-script',
                           help='Script code of the output spent by --sighash-input, as hex')
        group.add_argument('--prev-amount', type=int,
                           help='Amount of the output spent by --sighash-input, in sat')
        group.add_argument('--sighash-flag', type=lambda s: int(s, 0), default=int(SIGHASH_ALL),
                           help='Sighash flag, e.g. 0x01 or 0x83 (default: SIGHASH_ALL)')

    def run(
        self,
        context: Context,
    ):
        tx = load_transaction(context)
        shape = shape_of(tx)

        print("Txid:".ljust(19), b2lx(tx.GetTxid()))
        print("Version:".ljust(19), tx.nVersion)
        print("Locktime:".ljust(19), tx.nLockTime)
        print("Shape:".ljust(19), shape)
        print("Integrity tag:".ljust(19), commit(tx).hex())
        if context.args.sighash_input is not None:
            self.show_sighash(context, tx)
        print("Inputs:")
        for index, txin in enumerate(tx.vin):
            print(f"- input {index}: {b2lx(txin.prevout.hash)}:{txin.prevout.n}")
            print(f"  - sequence:      {txin.nSequence:#010x}")
            print(f"  - unlock script: {len(txin.scriptSig)} B")
        print("Outputs:")
        for index, txout in enumerate(tx.vout):
            print(f"- output {index}:")
            print(f"  - amount:        {txout.nValue} sat")
            print(f"  - lock script:   {format_script(txout.scriptPubKey)}")

    def show_sighash(self, context: Context, tx: CTransaction):
        args = context.args
        if args.prev_lock_script is None or args.prev_amount is None:
            sys.exit("--sighash-input needs --prev-lock-script and --prev-amount")
        try:
            prev_lock_script = parse_script(args.prev_lock_script)
        except ValueError as e:
            sys.exit(f"Invalid --prev-lock-script: {e}")
        try:
            config = SighashConfig(
                n_input=args.sighash_input,
                len_prev_lock_script=len(prev_lock_script),
                sighash_flag=args.sighash_flag,
            )
            digest = sighash(tx, config, prev_lock_script, args.prev_amount)
        except IntegrityTagError as e:
            sys.exit(f"Cannot compute the sighash: {e}")
        print("Sighash:".ljust(19), digest.hex())
        print("Sighash element:".ljust(19), f"{sighash_to_field(digest):064x}")
