# -*- encoding: utf-8 -*-
"""
Tests for the evm-tx-signer command line (cli module).

Verifies the JSON result shape, exit codes (0 on success, 1 on every
failure path including missing inputs and bad arguments), and that the
last positional argument is taken as the transaction.
"""

import json

import pytest
from eth_account import Account

from evm_tx_signer.cli import build_parser, main, run
from evm_tx_signer.codec import encode_transaction
from evm_tx_signer.config import DEFAULTS
from tests.conftest import (
    ANVIL_BACKER_ADDRESS,
    ANVIL_BACKER_KEY,
    EIP155_KEY,
    EIP155_SIGNED_TX,
)


def _output(capsys):
    return json.loads(capsys.readouterr().out)


class TestSuccess:
    def test_legacy_signing(self, eip155_tx, capsys):
        unsigned = encode_transaction(eip155_tx).hex()
        code = main([
            "--privatekey", EIP155_KEY,
            "--chainid", "1",
            "--signer", "legacy",
            unsigned,
        ])
        assert code == 0
        result = _output(capsys)
        assert result["signer"] == "legacy"
        assert result["chain_id"] == 1
        assert result["signed_tx"] == EIP155_SIGNED_TX
        assert result["tx_hash"].startswith("0x") and len(result["tx_hash"]) == 66
        assert "error" not in result

    def test_london_is_default_signer(self, typed_tx, capsys):
        code = main([
            "--privatekey", ANVIL_BACKER_KEY,
            "--chainid", "1",
            "0x" + encode_transaction(typed_tx).hex(),
        ])
        assert code == 0
        result = _output(capsys)
        assert result["signer"] == "london"
        signed = bytes.fromhex(result["signed_tx"])
        assert Account.recover_transaction(signed) == ANVIL_BACKER_ADDRESS

    def test_last_positional_is_the_transaction(self, legacy_tx, capsys):
        code = main([
            "--privatekey", ANVIL_BACKER_KEY,
            "--chainid", "1",
            "--signer", "legacy",
            "ignored",
            encode_transaction(legacy_tx).hex(),
        ])
        assert code == 0
        assert "signed_tx" in _output(capsys)


class TestFailures:
    def test_scheme_mismatch(self, legacy_tx, capsys):
        code = main([
            "--privatekey", ANVIL_BACKER_KEY,
            "--chainid", "137",
            "--signer", "london",
            encode_transaction(legacy_tx).hex(),
        ])
        assert code == 1
        result = _output(capsys)
        assert result["error_code"] == "scheme_mismatch"
        assert result["signer"] == "london"
        assert result["chain_id"] == 137
        assert "signed_tx" not in result

    def test_malformed_transaction(self, capsys):
        code = main(["--privatekey", ANVIL_BACKER_KEY, "--chainid", "1", "ff"])
        assert code == 1
        assert _output(capsys)["error_code"] == "malformed_encoding"

    def test_bad_hex(self, capsys):
        code = main(["--privatekey", ANVIL_BACKER_KEY, "--chainid", "1", "not-hex"])
        assert code == 1
        assert _output(capsys)["error_code"] == "malformed_encoding"

    def test_missing_transaction(self, capsys):
        code = main(["--privatekey", ANVIL_BACKER_KEY, "--chainid", "1"])
        assert code == 1
        captured = capsys.readouterr()
        assert json.loads(captured.out)["error"] == "unsigned transaction is required"
        assert "usage:" in captured.err

    def test_unsupported_signer(self, legacy_tx, capsys):
        code = main([
            "--privatekey", ANVIL_BACKER_KEY,
            "--chainid", "1",
            "--signer", "frontier",
            encode_transaction(legacy_tx).hex(),
        ])
        assert code == 1
        result = _output(capsys)
        assert result["error_code"] == "unsupported_scheme"
        assert result["signer"] == "frontier"

    def test_non_numeric_chain_id_is_reported_as_given(self, legacy_tx, capsys):
        code = main([
            "--privatekey", ANVIL_BACKER_KEY,
            "--chainid", "mainnet",
            encode_transaction(legacy_tx).hex(),
        ])
        assert code == 1
        result = _output(capsys)
        assert result["error_code"] == "invalid_chain_id"
        assert result["chain_id"] == "mainnet"

    def test_unknown_flag_exits_1(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--bogus"])
        assert excinfo.value.code == 1


class TestEnvironmentFallback:
    """run() with an explicit config dict, as load_config() would build it."""

    def test_flags_fall_back_to_config(self, legacy_tx):
        config = dict(DEFAULTS)
        config.update(
            TX_SIGNER_PRIVATE_KEY=ANVIL_BACKER_KEY,
            TX_SIGNER_CHAIN_ID="1",
            TX_SIGNER_SCHEME="legacy",
        )
        args = build_parser().parse_args([encode_transaction(legacy_tx).hex()])
        code, result = run(args, config)
        assert code == 0
        assert result["signer"] == "legacy"
        assert result["chain_id"] == 1
        signed = bytes.fromhex(result["signed_tx"])
        assert Account.recover_transaction(signed) == ANVIL_BACKER_ADDRESS

    def test_missing_key_in_both(self, legacy_tx):
        args = build_parser().parse_args(["--chainid", "1", encode_transaction(legacy_tx).hex()])
        code, result = run(args, dict(DEFAULTS))
        assert code == 1
        assert result["error_code"] == "invalid_key"
