# -*- encoding: utf-8 -*-
"""
EVM Tx Signer
evm_tx_signer.codec module

Canonical binary codec for Legacy and Typed (0x02) transactions.

Decoding inspects the first byte: anything above 0x7f starts an RLP list and
is read as a Legacy field list; anything else is an EIP-2718 type byte, and
only 0x02 is accepted. Unsigned inputs may carry a trailing zeroed
[v, r, s] slot, which is how go-ethereum serializes an unsigned transaction;
the slot is dropped on decode.

Encoding is the inverse, optionally extended with a signature. The two
signing preimages (EIP-155 and EIP-1559) are built here too so that the
hashing module never touches RLP directly.
"""

import logging

import rlp
from rlp.exceptions import RLPException
from rlp.sedes import big_endian_int
from web3 import Web3

from evm_tx_signer.errors import EncodeError, MalformedEncoding, UnsupportedType
from evm_tx_signer.transactions import (
    TYPED_TX_TYPE,
    UINT256_MAX,
    LegacySignature,
    LegacyTransaction,
    TypedSignature,
    TypedTransaction,
    check_field_ranges,
)

logger = logging.getLogger(__name__)

SIGNATURE_FIELD_COUNT = 3

# Highest byte that can be an EIP-2718 type; above it an RLP list begins.
MAX_TYPE_BYTE = 0x7F


def hex_to_bytes(text):
    """Decode a hex string (with or without 0x prefix) into bytes.

    Raises:
        MalformedEncoding: the text is not valid hex or has an odd length.
    """
    text = (text or "").strip()
    if text[:2] in ("0x", "0X"):
        text = text[2:]
    # Web3.to_bytes left-pads odd-length hex, which would shift every byte.
    if len(text) % 2:
        raise MalformedEncoding("failed to hex decode transaction: odd length hex string")
    try:
        return bytes(Web3.to_bytes(hexstr=text))
    except (ValueError, TypeError) as exc:
        raise MalformedEncoding(f"failed to hex decode transaction: {exc}") from exc


def bytes_to_hex(raw):
    """Hex-encode without a 0x prefix, the same way the output is printed."""
    return bytes(raw).hex()


def decode_transaction(raw):
    """Decode canonical transaction bytes into an unsigned transaction.

    Args:
        raw: bytes, either an RLP list (Legacy) or 0x02 || RLP list (Typed).

    Returns:
        LegacyTransaction or TypedTransaction.

    Raises:
        MalformedEncoding: not a well-formed encoding, wrong field count,
            non-canonical integers or out-of-range values.
        UnsupportedType: a type byte other than 0x02.
    """
    raw = bytes(raw)
    if not raw:
        raise MalformedEncoding("empty transaction encoding")

    first = raw[0]
    if first > MAX_TYPE_BYTE:
        tx_class, payload = LegacyTransaction, raw
    elif first == TYPED_TX_TYPE:
        tx_class, payload = TypedTransaction, raw[1:]
    else:
        raise UnsupportedType(f"unsupported transaction type 0x{first:02x}")

    try:
        items = rlp.decode(payload, strict=True)
    except RLPException as exc:
        raise MalformedEncoding(f"invalid RLP payload: {exc}") from exc
    if not isinstance(items, list):
        raise MalformedEncoding("transaction payload is not an RLP list")

    n_fields = len(tx_class._meta.field_names)
    if len(items) not in (n_fields, n_fields + SIGNATURE_FIELD_COUNT):
        raise MalformedEncoding(
            f"{tx_class.__name__} expects {n_fields} or "
            f"{n_fields + SIGNATURE_FIELD_COUNT} fields, got {len(items)}"
        )

    if any(isinstance(item, list) for item in items[n_fields:]):
        raise MalformedEncoding("signature slot must hold integers, not lists")
    try:
        tx = tx_class.deserialize(items[:n_fields])
        slot = [big_endian_int.deserialize(item) for item in items[n_fields:]]
    except RLPException as exc:
        raise MalformedEncoding(f"invalid {tx_class.__name__} fields: {exc}") from exc

    try:
        check_field_ranges(tx)
    except ValueError as exc:
        raise MalformedEncoding(str(exc)) from exc

    # An unsigned EIP-155 slot is [chainId, 0, 0]; only r or s mark a signature.
    if any(slot[1:]):
        logger.warning("Input already carries a signature; it will be replaced")
    return tx


def _serialize_fields(tx):
    try:
        check_field_ranges(tx)
        return list(type(tx).serialize(tx))
    except (ValueError, RLPException) as exc:
        raise EncodeError(f"cannot encode {type(tx).__name__}: {exc}") from exc


def _serialize_uints(values):
    out = []
    for value in values:
        if not isinstance(value, int) or value < 0 or value > UINT256_MAX:
            raise EncodeError(f"integer field out of range: {value!r}")
        out.append(big_endian_int.serialize(value))
    return out


def _envelope(tx, fields):
    body = rlp.encode(fields)
    if isinstance(tx, TypedTransaction):
        return bytes([TYPED_TX_TYPE]) + body
    return body


def encode_transaction(tx, signature=None):
    """Encode a transaction, optionally with its signature appended.

    Args:
        tx: LegacyTransaction or TypedTransaction.
        signature: None, or the LegacySignature / TypedSignature matching
            the transaction variant.

    Returns:
        Canonical transaction bytes.

    Raises:
        EncodeError: negative or oversize integer fields, or a signature of
            the wrong kind for the variant.
    """
    if not isinstance(tx, (LegacyTransaction, TypedTransaction)):
        raise EncodeError(f"not a transaction: {type(tx).__name__}")
    fields = _serialize_fields(tx)
    if signature is not None:
        expected = LegacySignature if isinstance(tx, LegacyTransaction) else TypedSignature
        if not isinstance(signature, expected):
            raise EncodeError(
                f"{type(signature).__name__} cannot sign a {type(tx).__name__}"
            )
        fields += _serialize_uints(signature.to_fields())
    return _envelope(tx, fields)


def encode_signed_transaction(signed):
    return encode_transaction(signed.transaction, signed.signature)


def legacy_signing_payload(tx, chain_id):
    """EIP-155 preimage: rlp([nonce, gasPrice, gas, to, value, data, chainId, 0, 0])."""
    if not isinstance(tx, LegacyTransaction):
        raise EncodeError(f"EIP-155 payload needs a LegacyTransaction, got {type(tx).__name__}")
    fields = _serialize_fields(tx) + _serialize_uints([chain_id, 0, 0])
    return rlp.encode(fields)


def typed_signing_payload(tx):
    """EIP-1559 preimage: 0x02 || rlp(unsigned fields)."""
    if not isinstance(tx, TypedTransaction):
        raise EncodeError(f"EIP-1559 payload needs a TypedTransaction, got {type(tx).__name__}")
    return _envelope(tx, _serialize_fields(tx))
