"""
Canonical payload encoding

Produces the exact byte sequence the network re-derives when it checks a
signature. Fields are RLP-encoded in each variant's fixed order: integers as
minimal big-endian scalars, addresses as raw 20-byte strings, text and enum
names as UTF-8 strings. Regular variants are wrapped in an RLP list header;
the two bridge variants are the bare concatenation of their field encodings.
"""

from enum import Enum
from typing import Any, List, Tuple

import rlp
from eth_utils import keccak

from ..errors import EncodingError
from ..types.common import TokenAmount, MAX_U64, MAX_U256, to_address
from ..types.payloads import (
    MetadataKVPair,
    PaymentPayload,
    TokenMintPayload,
    TokenBurnPayload,
    TokenAuthorityPayload,
    TokenPausePayload,
    TokenBlacklistPayload,
    TokenWhitelistPayload,
    TokenMetadataUpdatePayload,
    TokenBridgeAndMintPayload,
    TokenBurnAndBridgePayload,
)

# Field kinds
U64 = "u64"
U256 = "u256"
ADDRESS = "address"
TEXT = "text"
ENUM = "enum"
METADATA = "metadata"
OPTIONAL_TEXT = "optional_text"

FieldLayout = Tuple[Tuple[str, str], ...]

_ANCHOR: FieldLayout = (
    ("recent_epoch", U64),
    ("recent_checkpoint", U64),
    ("chain_id", U64),
    ("nonce", U64),
)

_TRANSFER: FieldLayout = _ANCHOR + (
    ("recipient", ADDRESS),
    ("value", U256),
    ("token", ADDRESS),
)

_AUTHORITY: FieldLayout = _ANCHOR + (
    ("action", ENUM),
    ("authority_type", ENUM),
    ("authority_address", ADDRESS),
    ("token", ADDRESS),
    ("value", U256),
)

_PAUSE: FieldLayout = _ANCHOR + (
    ("action", ENUM),
    ("token", ADDRESS),
)

_LIST_MANAGEMENT: FieldLayout = _ANCHOR + (
    ("action", ENUM),
    ("address", ADDRESS),
    ("token", ADDRESS),
)

_METADATA_UPDATE: FieldLayout = _ANCHOR + (
    ("name", TEXT),
    ("uri", TEXT),
    ("token", ADDRESS),
    ("additional_metadata", METADATA),
)

_BRIDGE_AND_MINT: FieldLayout = (
    ("recent_checkpoint", U64),
    ("chain_id", U64),
    ("nonce", U64),
    ("recipient", ADDRESS),
    ("value", U256),
    ("token", ADDRESS),
    ("source_chain_id", U64),
    ("source_tx_hash", TEXT),
    ("bridge_metadata", OPTIONAL_TEXT),
)

_BURN_AND_BRIDGE: FieldLayout = (
    ("recent_checkpoint", U64),
    ("chain_id", U64),
    ("nonce", U64),
    ("sender", ADDRESS),
    ("value", U256),
    ("token", ADDRESS),
    ("destination_chain_id", U64),
    ("destination_address", TEXT),
    ("escrow_fee", U256),
    ("bridge_metadata", OPTIONAL_TEXT),
    ("bbnonce", U64),
)


def _layout_for(payload: Any) -> Tuple[FieldLayout, bool]:
    """Return (field layout, wrap in list header) for a payload variant"""
    if isinstance(payload, (PaymentPayload, TokenMintPayload, TokenBurnPayload)):
        return _TRANSFER, True
    elif isinstance(payload, TokenAuthorityPayload):
        return _AUTHORITY, True
    elif isinstance(payload, TokenPausePayload):
        return _PAUSE, True
    elif isinstance(payload, (TokenBlacklistPayload, TokenWhitelistPayload)):
        return _LIST_MANAGEMENT, True
    elif isinstance(payload, TokenMetadataUpdatePayload):
        return _METADATA_UPDATE, True
    elif isinstance(payload, TokenBridgeAndMintPayload):
        return _BRIDGE_AND_MINT, False
    elif isinstance(payload, TokenBurnAndBridgePayload):
        return _BURN_AND_BRIDGE, False
    raise EncodingError.unsupported_payload(payload)


def _unsigned(name: str, value: Any, bits: int, maximum: int) -> int:
    if isinstance(value, TokenAmount):
        value = value.value
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError.invalid(name, f"expected integer, got {type(value).__name__}")
    if value < 0 or value > maximum:
        raise EncodingError.out_of_range(name, value, bits)
    return value


def _text(name: str, value: Any) -> bytes:
    if not isinstance(value, str):
        raise EncodingError.invalid(name, f"expected str, got {type(value).__name__}")
    return value.encode("utf-8")


def _field_items(name: str, kind: str, value: Any) -> List[Any]:
    """RLP items (ints, bytes or nested lists) contributed by one field"""
    if kind == OPTIONAL_TEXT:
        if value is None:
            return [0]
        return [1, _text(name, value)]

    if value is None:
        raise EncodingError.missing_field(name)

    if kind == U64:
        return [_unsigned(name, value, 64, MAX_U64)]
    if kind == U256:
        return [_unsigned(name, value, 256, MAX_U256)]
    if kind == ADDRESS:
        return [to_address(value, name).value]
    if kind == TEXT:
        return [_text(name, value)]
    if kind == ENUM:
        if not isinstance(value, Enum):
            raise EncodingError.invalid(name, f"expected enum member, got {type(value).__name__}")
        return [_text(name, value.value)]
    if kind == METADATA:
        pairs = []
        for pair in value:
            if not isinstance(pair, MetadataKVPair):
                raise EncodingError.invalid(name, f"expected MetadataKVPair, got {type(pair).__name__}")
            pairs.append([_text(f"{name}.key", pair.key), _text(f"{name}.value", pair.value)])
        return [pairs]
    raise EncodingError.invalid(name, f"unknown field kind {kind}")


class CanonicalEncoder:
    """
    Deterministic payload serializer

    Stateless and pure; safe to share between threads and tasks.

    Usage:
        encoder = CanonicalEncoder()
        data = encoder.encode(payload)
        digest = encoder.signature_hash(payload)
    """

    def encode(self, payload: Any) -> bytes:
        """
        Encode a payload to its canonical bytes

        Raises:
            EncodingError: Unknown payload type, missing field, wrong field type,
                or an integer that does not fit its declared width
        """
        layout, with_header = _layout_for(payload)

        items: List[Any] = []
        for name, kind in layout:
            items.extend(_field_items(name, kind, getattr(payload, name, None)))

        if with_header:
            return rlp.encode(items)
        return b"".join(rlp.encode(item) for item in items)

    def signature_hash(self, payload: Any) -> bytes:
        """keccak256 of the canonical encoding; this is what gets signed"""
        return keccak(self.encode(payload))


_default_encoder = CanonicalEncoder()


def encode_payload(payload: Any) -> bytes:
    """Encode a payload with the shared encoder"""
    return _default_encoder.encode(payload)


def signature_hash(payload: Any) -> bytes:
    """Signature hash of a payload with the shared encoder"""
    return _default_encoder.signature_hash(payload)
