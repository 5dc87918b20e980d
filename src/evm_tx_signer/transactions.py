# -*- encoding: utf-8 -*-
"""
EVM Tx Signer
evm_tx_signer.transactions module

Transaction data model for the two supported variants.

LegacyTransaction is the pre-EIP-2718 flat field list. TypedTransaction is
the EIP-1559 ("london") type-0x02 envelope with chain id as a first-class
field. Both are rlp.Serializable records, which makes them immutable and
gives the codec their positional field layout for free.

Signatures are held apart from the transaction and only joined at the end
of the pipeline in a SignedTransaction.
"""

import enum
from dataclasses import dataclass, field
from typing import Optional, Union

from rlp import Serializable
from rlp.sedes import Binary, CountableList, big_endian_int, binary

TYPED_TX_TYPE = 0x02

UINT64_MAX = 2**64 - 1
UINT256_MAX = 2**256 - 1

# Empty string is the contract-creation recipient
address = Binary.fixed_length(20, allow_empty=True)
hash32 = Binary.fixed_length(32)


class Scheme(str, enum.Enum):
    """Signer scheme selector, named the way the command line names them."""

    LEGACY = "legacy"  # EIP-155
    LONDON = "london"  # EIP-1559 typed


class AccessListEntry(Serializable):
    fields = [
        ("address", Binary.fixed_length(20)),
        ("storage_keys", CountableList(hash32)),
    ]


class LegacyTransaction(Serializable):
    """[nonce, gasPrice, gas, to, value, data]"""

    fields = [
        ("nonce", big_endian_int),
        ("gas_price", big_endian_int),
        ("gas", big_endian_int),
        ("to", address),
        ("value", big_endian_int),
        ("data", binary),
    ]

    scheme = Scheme.LEGACY
    integer_fields = ("nonce", "gas_price", "gas", "value")

    @property
    def recipient(self) -> Optional[bytes]:
        """Recipient address, or None for contract creation."""
        return self.to or None


class TypedTransaction(Serializable):
    """0x02 || [chainId, nonce, maxPriorityFeePerGas, maxFeePerGas, gas,
    to, value, data, accessList]"""

    fields = [
        ("chain_id", big_endian_int),
        ("nonce", big_endian_int),
        ("max_priority_fee_per_gas", big_endian_int),
        ("max_fee_per_gas", big_endian_int),
        ("gas", big_endian_int),
        ("to", address),
        ("value", big_endian_int),
        ("data", binary),
        ("access_list", CountableList(AccessListEntry)),
    ]

    scheme = Scheme.LONDON
    integer_fields = (
        "chain_id",
        "nonce",
        "max_priority_fee_per_gas",
        "max_fee_per_gas",
        "gas",
        "value",
    )

    @property
    def recipient(self) -> Optional[bytes]:
        """Recipient address, or None for contract creation."""
        return self.to or None


Transaction = Union[LegacyTransaction, TypedTransaction]

# Fields bounded to 64 bits; every other integer field is a uint256.
UINT64_FIELDS = frozenset(("nonce", "gas"))


def check_field_ranges(tx):
    """Raise ValueError naming the first integer field outside its range."""
    for name in tx.integer_fields:
        value = getattr(tx, name)
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValueError(f"{name} must be an integer, got {type(value).__name__}")
        upper = UINT64_MAX if name in UINT64_FIELDS else UINT256_MAX
        if value < 0 or value > upper:
            raise ValueError(f"{name} out of range: {value}")


@dataclass(frozen=True)
class RawSignature:
    """What the ECDSA primitive hands back: (r, s, recovery id)."""

    r: int
    s: int
    recovery_id: int


@dataclass(frozen=True)
class LegacySignature:
    v: int
    r: int
    s: int

    def to_fields(self):
        return [self.v, self.r, self.s]


@dataclass(frozen=True)
class TypedSignature:
    y_parity: int
    r: int
    s: int

    def to_fields(self):
        return [self.y_parity, self.r, self.s]


Signature = Union[LegacySignature, TypedSignature]


@dataclass(frozen=True)
class SignedTransaction:
    """A transaction joined with the signature kind of its own variant."""

    transaction: Transaction
    signature: Signature

    @property
    def scheme(self):
        return self.transaction.scheme


@dataclass(frozen=True)
class SignerConfig:
    """Everything one signing run needs: key scalar, chain id and scheme."""

    private_key: int = field(repr=False)
    chain_id: int
    scheme: Scheme
