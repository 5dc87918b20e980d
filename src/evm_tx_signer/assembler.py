# -*- encoding: utf-8 -*-
"""
EVM Tx Signer
evm_tx_signer.assembler module

Turns a raw (r, s, recovery id) into the scheme's signature encoding and
joins it with the transaction.

  - Legacy (EIP-155): v = recovery_id + 35 + 2 * chain_id
  - Typed (EIP-1559): y_parity = recovery_id, which must be 0 or 1

A zero r or s marks an unsigned placeholder and is never emitted. There is
no retry: the primitive is deterministic and would reproduce the failure.
"""

from evm_tx_signer.errors import SigningError
from evm_tx_signer.signing_hash import validate_chain_id
from evm_tx_signer.transactions import (
    LegacySignature,
    LegacyTransaction,
    SignedTransaction,
    TypedSignature,
    TypedTransaction,
)

EIP155_V_OFFSET = 35
MAX_RECOVERY_ID = 3


def legacy_v(recovery_id, chain_id):
    return recovery_id + EIP155_V_OFFSET + chain_id * 2


def recovery_id_from_v(v, chain_id):
    """Invert the EIP-155 v encoding for chain_id, the inverse of legacy_v.

    Raises:
        SigningError: v does not map to a recovery id in 0..3 on chain_id.
    """
    recovery_id = v - EIP155_V_OFFSET - chain_id * 2
    if not 0 <= recovery_id <= MAX_RECOVERY_ID:
        raise SigningError(f"v={v} is not an EIP-155 value for chain {chain_id}")
    return recovery_id


def attach_signature(tx, chain_id, raw):
    """Encode raw into the variant's signature and attach it to tx.

    Args:
        tx: LegacyTransaction or TypedTransaction.
        chain_id: chain the signature is bound to.
        raw: RawSignature from the signing primitive.

    Returns:
        SignedTransaction of the same variant as tx.

    Raises:
        SigningError: r or s is zero, or the recovery id is unusable for the
            scheme.
    """
    validate_chain_id(chain_id)
    if raw.r == 0 or raw.s == 0:
        raise SigningError("degenerate signature: r and s must be non-zero")
    if not 0 <= raw.recovery_id <= MAX_RECOVERY_ID:
        raise SigningError(f"recovery id {raw.recovery_id} outside 0..3")

    if isinstance(tx, LegacyTransaction):
        signature = LegacySignature(
            v=legacy_v(raw.recovery_id, chain_id), r=raw.r, s=raw.s
        )
    elif isinstance(tx, TypedTransaction):
        if raw.recovery_id not in (0, 1):
            raise SigningError(
                f"recovery id {raw.recovery_id} cannot be expressed as a y parity"
            )
        signature = TypedSignature(y_parity=raw.recovery_id & 1, r=raw.r, s=raw.s)
    else:
        raise SigningError(f"cannot attach a signature to {type(tx).__name__}")
    return SignedTransaction(transaction=tx, signature=signature)
