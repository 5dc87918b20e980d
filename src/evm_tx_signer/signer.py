# -*- encoding: utf-8 -*-
"""
EVM Tx Signer
evm_tx_signer.signer module

secp256k1 signing primitive, delegated to eth_keys.

eth_keys signs with an RFC 6979 deterministic nonce, so the same key and
digest always yield the same (r, s, recovery id). Nothing here touches curve
arithmetic; this module only checks inputs and adapts the result into a
RawSignature.
"""

from eth_keys import keys
from eth_keys.constants import SECPK1_N
from eth_keys.exceptions import BadSignature, ValidationError

from evm_tx_signer.errors import InvalidDigest, InvalidKey, SigningError
from evm_tx_signer.transactions import RawSignature

PRIVATE_KEY_SIZE = 32
DIGEST_SIZE = 32


def _private_key(private_key):
    if not isinstance(private_key, int) or isinstance(private_key, bool):
        raise InvalidKey("private key must be an integer scalar")
    if not 0 < private_key < SECPK1_N:
        raise InvalidKey("private key scalar is outside [1, n-1]")
    return keys.PrivateKey(private_key.to_bytes(PRIVATE_KEY_SIZE, "big"))


def _check_digest(digest):
    if not isinstance(digest, (bytes, bytearray)) or len(digest) != DIGEST_SIZE:
        size = len(digest) if isinstance(digest, (bytes, bytearray)) else None
        raise InvalidDigest(f"digest must be exactly {DIGEST_SIZE} bytes, got {size}")
    return bytes(digest)


def sign_digest(private_key, digest):
    """Sign a 32-byte digest with a secp256k1 private key scalar.

    Args:
        private_key: int scalar in [1, n-1].
        digest: 32-byte message hash.

    Returns:
        RawSignature(r, s, recovery_id) with recovery_id in {0, 1}.

    Raises:
        InvalidKey: scalar out of range.
        InvalidDigest: digest is not 32 bytes.
    """
    key = _private_key(private_key)
    digest = _check_digest(digest)
    signature = key.sign_msg_hash(digest)
    return RawSignature(r=signature.r, s=signature.s, recovery_id=signature.v)


def private_key_to_address(private_key):
    """Checksummed address controlled by the private key scalar."""
    return _private_key(private_key).public_key.to_checksum_address()


def recover_address(digest, raw_signature):
    """Recover the checksummed signer address from a digest and signature.

    Raises:
        InvalidDigest: digest is not 32 bytes.
        SigningError: the signature does not recover to a public key.
    """
    digest = _check_digest(digest)
    try:
        signature = keys.Signature(
            vrs=(raw_signature.recovery_id, raw_signature.r, raw_signature.s)
        )
        public_key = signature.recover_public_key_from_msg_hash(digest)
    except (BadSignature, ValidationError) as exc:
        raise SigningError(f"cannot recover signer: {exc}") from exc
    return public_key.to_checksum_address()
