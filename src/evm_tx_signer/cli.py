# -*- encoding: utf-8 -*-
"""
EVM Tx Signer
evm_tx_signer.cli module

Command-line interface for offline transaction signing.

  evm-tx-signer --privatekey HEX --chainid N [--signer london|legacy] UNSIGNED_TX

Prints a JSON result on stdout and exits 0 on success, 1 on any failure
(including missing inputs and bad arguments). Logs go to stderr.
"""

import argparse
import json
import logging
import sys

from evm_tx_signer.codec import bytes_to_hex, hex_to_bytes
from evm_tx_signer.config import build_signer_config, load_config
from evm_tx_signer.errors import MalformedEncoding, TxSignerError
from evm_tx_signer.pipeline import sign_transaction
from evm_tx_signer.signing_hash import transaction_hash

logger = logging.getLogger(__name__)

DESCRIPTION = (
    "Signs an unsigned transaction using the supplied private key for EVM "
    "based blockchains like Ethereum and Polygon."
)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser():
    parser = _ArgumentParser(prog="evm-tx-signer", description=DESCRIPTION)
    parser.add_argument(
        "--privatekey", help="Hex encoded private key (required)"
    )
    parser.add_argument(
        "--chainid", help="The chain ID to use for signing transaction (required)"
    )
    parser.add_argument(
        "--signer", help="The signer to use [london|legacy] (london by default)"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Log pipeline stages to stderr"
    )
    parser.add_argument(
        "unsigned_tx", nargs="*", help="Hex encoded unsigned transaction"
    )
    return parser


def _attempted_chain_id(value):
    try:
        return int(str(value).strip(), 10)
    except ValueError:
        return value


def print_result(result, stream=None):
    stream = stream or sys.stdout
    print(json.dumps(result, indent=2), file=stream)


def run(args, config):
    """Sign the transaction described by parsed args.

    Returns:
        (exit_code, result_dict)
    """
    signer = args.signer if args.signer is not None else config["TX_SIGNER_SCHEME"]
    chain_id = args.chainid if args.chainid is not None else config["TX_SIGNER_CHAIN_ID"]
    result = {"signer": signer, "chain_id": _attempted_chain_id(chain_id)}

    try:
        signer_config = build_signer_config(
            private_key=args.privatekey,
            chain_id=chain_id,
            scheme=signer,
            config=config,
        )
        if not args.unsigned_tx:
            raise MalformedEncoding("unsigned transaction is required")
        # The last positional argument is the transaction
        raw = hex_to_bytes(args.unsigned_tx[-1])
        signed = sign_transaction(raw, signer_config)
    except TxSignerError as exc:
        logger.error("Signing failed (%s): %s", exc.code, exc.message)
        result["error"] = exc.message
        result["error_code"] = exc.code
        return 1, result

    result["signed_tx"] = bytes_to_hex(signed)
    result["tx_hash"] = "0x" + transaction_hash(signed).hex()
    return 0, result


def main(argv=None):
    """Entry point for the evm-tx-signer CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    config = load_config()

    if args.verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, config["TX_SIGNER_LOG_LEVEL"].upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    exit_code, result = run(args, config)
    if exit_code and not args.unsigned_tx:
        parser.print_usage(sys.stderr)
    print_result(result)
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
