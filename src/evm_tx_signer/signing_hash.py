# -*- encoding: utf-8 -*-
"""
EVM Tx Signer
evm_tx_signer.signing_hash module

Signing digest derivation for both schemes.

  - Legacy (EIP-155): keccak256(rlp([...6 fields, chainId, 0, 0]))
  - Typed (EIP-1559): keccak256(0x02 || rlp([...9 fields]))

The EIP-155 suffix binds a legacy signature to one chain without changing
the unsigned wire format. Typed transactions carry the chain id as a signed
field, so the requested chain id must simply agree with it.
"""

from web3 import Web3

from evm_tx_signer.codec import legacy_signing_payload, typed_signing_payload
from evm_tx_signer.errors import InvalidChainId
from evm_tx_signer.transactions import UINT256_MAX, LegacyTransaction, TypedTransaction


def validate_chain_id(chain_id):
    """Raise InvalidChainId unless chain_id is a positive uint256."""
    if not isinstance(chain_id, int) or isinstance(chain_id, bool):
        raise InvalidChainId(f"chain id must be an integer, got {chain_id!r}")
    if chain_id <= 0 or chain_id > UINT256_MAX:
        raise InvalidChainId(f"chain id must be positive, got {chain_id}")
    return chain_id


def derive_signing_hash(tx, chain_id) -> bytes:
    """Return the 32-byte digest that must be signed for tx on chain_id.

    Args:
        tx: LegacyTransaction or TypedTransaction.
        chain_id: target chain id.

    Raises:
        InvalidChainId: chain_id is not positive, or differs from the chain
            id embedded in a TypedTransaction.
    """
    validate_chain_id(chain_id)
    if isinstance(tx, LegacyTransaction):
        payload = legacy_signing_payload(tx, chain_id)
    elif isinstance(tx, TypedTransaction):
        if tx.chain_id != chain_id:
            raise InvalidChainId(
                f"transaction is bound to chain {tx.chain_id}, not {chain_id}"
            )
        payload = typed_signing_payload(tx)
    else:
        raise TypeError(f"not a transaction: {type(tx).__name__}")
    return bytes(Web3.keccak(payload))


def transaction_hash(raw_signed) -> bytes:
    """Network transaction hash: keccak256 of the signed canonical bytes."""
    return bytes(Web3.keccak(bytes(raw_signed)))
