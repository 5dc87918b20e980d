# -*- encoding: utf-8 -*-
"""
EVM Tx Signer Test Configuration

Shared constants and pytest fixtures for the signer test suite.

Everything is real and offline:
- rlp / eth_keys: the same codec and secp256k1 backend the package uses
- eth_account: an independent reference signer for golden comparisons
  and sender recovery

No mocks, no stubs, no monkeypatching.
"""

import pytest
from web3 import Web3

from evm_tx_signer.transactions import (
    AccessListEntry,
    LegacyTransaction,
    Scheme,
    SignerConfig,
    TypedTransaction,
)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# anvil's deterministic account #0
ANVIL_DEPLOYER_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
ANVIL_DEPLOYER_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

# anvil's deterministic account #1
ANVIL_BACKER_KEY = "0x59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d"
ANVIL_BACKER_ADDRESS = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"

# EIP-155 worked example: key 0x4646..46 signing a 1 ETH transfer on chain 1
EIP155_KEY = "0x" + "46" * 32
EIP155_SIGNING_DATA = (
    "ec098504a817c800825208943535353535353535353535353535353535353535"
    "880de0b6b3a764000080018080"
)
EIP155_SIGNING_HASH = "daf5a779ae972f972197303d7b574746c7ef83eadac0f2791ad23db92e4c8e53"
EIP155_SIGNED_TX = (
    "f86c098504a817c800825208943535353535353535353535353535353535353535"
    "880de0b6b3a76400008025a028ef61340bd939bc2195fe537567866003e1a15d3c"
    "71ff63e1590620aa636276a067cbe9d8997f761aecb703304b3800ccf555c9f3dc"
    "64214b297fb1966a3b6d83"
)

ZERO_ADDRESS = b"\x00" * 20
RECIPIENT = bytes.fromhex("35" * 20)
RECIPIENT_CHECKSUM = Web3.to_checksum_address("0x" + "35" * 20)
STORAGE_KEY_1 = (1).to_bytes(32, "big")
STORAGE_KEY_2 = (2).to_bytes(32, "big")

MAINNET = 1
POLYGON = 137


def key_scalar(hex_key):
    return int(hex_key, 16)


# ---------------------------------------------------------------------------
# Transaction fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def eip155_tx():
    """The unsigned transaction from the EIP-155 worked example."""
    return LegacyTransaction(
        nonce=9,
        gas_price=20 * 10**9,
        gas=21000,
        to=RECIPIENT,
        value=10**18,
        data=b"",
    )


@pytest.fixture
def legacy_tx():
    """Minimal legacy transfer to the zero address."""
    return LegacyTransaction(
        nonce=0, gas_price=1, gas=21000, to=ZERO_ADDRESS, value=0, data=b""
    )


@pytest.fixture
def typed_tx():
    """EIP-1559 call with calldata and a two-key access list on mainnet."""
    return TypedTransaction(
        chain_id=MAINNET,
        nonce=3,
        max_priority_fee_per_gas=2 * 10**9,
        max_fee_per_gas=30 * 10**9,
        gas=50000,
        to=RECIPIENT,
        value=12345,
        data=bytes.fromhex("deadbeef"),
        access_list=[
            AccessListEntry(address=RECIPIENT, storage_keys=[STORAGE_KEY_1, STORAGE_KEY_2]),
        ],
    )


@pytest.fixture
def legacy_config():
    return SignerConfig(
        private_key=key_scalar(ANVIL_BACKER_KEY), chain_id=MAINNET, scheme=Scheme.LEGACY
    )


@pytest.fixture
def london_config():
    return SignerConfig(
        private_key=key_scalar(ANVIL_BACKER_KEY), chain_id=MAINNET, scheme=Scheme.LONDON
    )
