# -*- encoding: utf-8 -*-
"""
EVM Tx Signer
evm_tx_signer.errors module

Classified errors raised by each stage of the signing pipeline.

Every failure surfaces as exactly one TxSignerError subclass carrying a
stable machine-readable code. The CLI reports the code next to the scheme
and chain id that were attempted.
"""


class TxSignerError(Exception):
    """Base class for all signing pipeline failures."""

    code = "tx_signer_error"

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {"code": self.code, "message": self.message}


class InvalidKey(TxSignerError):
    """Private key is missing, not hex, or outside [1, n-1]."""

    code = "invalid_key"


class InvalidChainId(TxSignerError):
    """Chain id is zero, unset, non-numeric, or disagrees with the tx."""

    code = "invalid_chain_id"


class UnsupportedScheme(TxSignerError):
    code = "unsupported_scheme"


class MalformedEncoding(TxSignerError):
    """Input bytes are not a well-formed transaction encoding."""

    code = "malformed_encoding"


class UnsupportedType(TxSignerError):
    """Input carries an EIP-2718 type byte other than 0x02."""

    code = "unsupported_type"


class SchemeMismatch(TxSignerError):
    """Decoded transaction variant does not match the requested scheme."""

    code = "scheme_mismatch"


class SigningError(TxSignerError):
    """Degenerate signature or unusable recovery id."""

    code = "signing_error"


class InvalidDigest(SigningError):
    code = "invalid_digest"


class EncodeError(TxSignerError):
    """Internal invariant violated while re-encoding a transaction."""

    code = "encode_error"
