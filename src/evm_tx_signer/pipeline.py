# -*- encoding: utf-8 -*-
"""
EVM Tx Signer
evm_tx_signer.pipeline module

Sequential signing pipeline:

    decode -> scheme check -> derive digest -> sign -> attach -> encode

The scheme in SignerConfig is fixed for the whole run. Each stage either
returns its value or raises exactly one classified TxSignerError, which
stops the pipeline; nothing partial is ever returned. Unexpected
exceptions inside a stage are reported as that stage's error class.
"""

import logging
from contextlib import contextmanager

from evm_tx_signer.assembler import attach_signature
from evm_tx_signer.codec import (
    bytes_to_hex,
    decode_transaction,
    encode_signed_transaction,
    hex_to_bytes,
)
from evm_tx_signer.errors import (
    EncodeError,
    MalformedEncoding,
    SchemeMismatch,
    SigningError,
    TxSignerError,
    UnsupportedScheme,
)
from evm_tx_signer.signer import sign_digest
from evm_tx_signer.signing_hash import derive_signing_hash, validate_chain_id
from evm_tx_signer.transactions import Scheme

logger = logging.getLogger(__name__)


@contextmanager
def _stage(name, error_class):
    logger.debug("Stage %s", name)
    try:
        yield
    except TxSignerError as exc:
        logger.debug("Stage %s failed: %s", name, exc.code)
        raise
    except Exception as exc:
        raise error_class(f"{name} failed: {exc}") from exc


def _check_scheme(tx, scheme):
    if tx.scheme is not scheme:
        raise SchemeMismatch(
            f"{scheme.value} signer cannot sign a {tx.scheme.value} transaction"
        )


def build_signed_transaction(raw, config):
    """Run every stage except the final encode.

    Args:
        raw: unsigned transaction bytes.
        config: SignerConfig with key, chain id and scheme.

    Returns:
        SignedTransaction.
    """
    try:
        scheme = Scheme(config.scheme)
    except ValueError as exc:
        raise UnsupportedScheme(f"unsupported signer: {config.scheme!r}") from exc
    validate_chain_id(config.chain_id)

    with _stage("decode", MalformedEncoding):
        tx = decode_transaction(raw)
        _check_scheme(tx, scheme)

    with _stage("derive", SigningError):
        digest = derive_signing_hash(tx, config.chain_id)

    with _stage("sign", SigningError):
        raw_signature = sign_digest(config.private_key, digest)

    with _stage("attach", SigningError):
        signed = attach_signature(tx, config.chain_id, raw_signature)

    logger.info(
        "Signed %s transaction for chain %d", scheme.value, config.chain_id
    )
    return signed


def sign_transaction(raw, config) -> bytes:
    """Sign unsigned transaction bytes and return the signed encoding."""
    signed = build_signed_transaction(raw, config)
    with _stage("encode", EncodeError):
        return encode_signed_transaction(signed)


def sign_transaction_hex(unsigned_hex, config) -> str:
    """Hex in, hex out (no 0x prefix on the output)."""
    return bytes_to_hex(sign_transaction(hex_to_bytes(unsigned_hex), config))
