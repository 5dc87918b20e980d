# -*- encoding: utf-8 -*-
"""
EVM Tx Signer
evm_tx_signer.config module

Signer configuration from command-line values with environment fallbacks.

Environment variables (all optional, flags take precedence):
  TX_SIGNER_PRIVATE_KEY  hex private key (with or without 0x)
  TX_SIGNER_CHAIN_ID     decimal chain id
  TX_SIGNER_SCHEME       legacy | london
  TX_SIGNER_LOG_LEVEL    logging level name for the CLI
"""

import os

from eth_keys.constants import SECPK1_N

from evm_tx_signer.errors import InvalidChainId, InvalidKey, UnsupportedScheme
from evm_tx_signer.signing_hash import validate_chain_id
from evm_tx_signer.transactions import Scheme, SignerConfig

DEFAULTS = {
    "TX_SIGNER_PRIVATE_KEY": "",
    "TX_SIGNER_CHAIN_ID": "0",
    "TX_SIGNER_SCHEME": Scheme.LONDON.value,
    "TX_SIGNER_LOG_LEVEL": "WARNING",
}

PRIVATE_KEY_HEX_LENGTH = 64


def load_config():
    """Load signer settings from environment variables.

    Returns:
        dict with all configuration values, as strings.
    """
    config = {}
    for key, default in DEFAULTS.items():
        config[key] = os.environ.get(key, default)
    return config


def parse_private_key(text):
    """Parse a hex private key into its integer scalar.

    Raises:
        InvalidKey: empty, not 32 bytes of hex, or outside [1, n-1].
    """
    text = (text or "").strip()
    if text[:2].lower() == "0x":
        text = text[2:]
    if not text:
        raise InvalidKey("private key is required")
    if len(text) != PRIVATE_KEY_HEX_LENGTH:
        raise InvalidKey(
            f"private key must be {PRIVATE_KEY_HEX_LENGTH} hex characters, got {len(text)}"
        )
    try:
        scalar = int.from_bytes(bytes.fromhex(text), "big")
    except ValueError as exc:
        raise InvalidKey("private key is not valid hex") from exc
    if not 0 < scalar < SECPK1_N:
        raise InvalidKey("private key scalar is outside [1, n-1]")
    return scalar


def parse_chain_id(value):
    """Parse a chain id given as int or decimal string.

    Raises:
        InvalidChainId: missing, non-numeric, zero or negative.
    """
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise InvalidChainId("chain id is required")
        try:
            value = int(value, 10)
        except ValueError as exc:
            raise InvalidChainId(f"chain id is not a number: {value!r}") from exc
    if value is None:
        raise InvalidChainId("chain id is required")
    return validate_chain_id(value)


def parse_scheme(value):
    """Map a signer name (case-insensitive) to a Scheme.

    Raises:
        UnsupportedScheme: anything but legacy or london.
    """
    if isinstance(value, Scheme):
        return value
    name = (value or "").strip().lower()
    try:
        return Scheme(name)
    except ValueError as exc:
        choices = ", ".join(s.value for s in Scheme)
        raise UnsupportedScheme(
            f"unsupported signer {value!r} (expected one of: {choices})"
        ) from exc


def build_signer_config(private_key=None, chain_id=None, scheme=None, config=None):
    """Build a validated SignerConfig.

    Explicit arguments win; anything left as None falls back to the
    environment config from load_config().

    Args:
        private_key: hex private key.
        chain_id: chain id as int or decimal string.
        scheme: signer name or Scheme.
        config: dict from load_config(). Loaded from env if None.

    Returns:
        SignerConfig.
    """
    if config is None:
        config = load_config()
    if private_key is None:
        private_key = config["TX_SIGNER_PRIVATE_KEY"]
    if chain_id is None:
        chain_id = config["TX_SIGNER_CHAIN_ID"]
    if scheme is None:
        scheme = config["TX_SIGNER_SCHEME"]

    return SignerConfig(
        private_key=parse_private_key(private_key),
        chain_id=parse_chain_id(chain_id),
        scheme=parse_scheme(scheme),
    )
