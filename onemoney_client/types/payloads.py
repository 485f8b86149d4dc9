"""
Transaction payload variants

Each variant is a frozen dataclass; together they form the closed Payload
union that the canonical encoder dispatches over. Field declaration order is
the canonical signing order.

Address and amount fields are coerced on construction, so hex strings, raw
bytes, ints and decimal strings all end up as Address / TokenAmount and the
wire form never carries a bare JSON number for a U256.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from .common import Address, TokenAmount, Signature, to_address, to_amount
from ..errors import EncodingError


class _NamedEnum(Enum):
    """Enum whose value is the protocol's PascalCase name"""

    @classmethod
    def from_string(cls, name: str):
        """Parse from the protocol name, case-insensitive"""
        for member in cls:
            if member.value.lower() == name.lower() or member.name.lower() == name.lower():
                return member
        valid = ", ".join(m.value for m in cls)
        raise EncodingError.invalid(cls.__name__, f"unknown value '{name}', expected one of: {valid}")

    def __str__(self) -> str:
        return self.value


class AuthorityAction(_NamedEnum):
    GRANT = "Grant"
    REVOKE = "Revoke"


class Authority(_NamedEnum):
    """Token authority roles"""
    MASTER_MINT_BURN = "MasterMintBurn"
    MINT_BURN_TOKENS = "MintBurnTokens"
    PAUSE = "Pause"
    MANAGE_LIST = "ManageList"
    UPDATE_METADATA = "UpdateMetadata"


class PauseAction(_NamedEnum):
    PAUSE = "Pause"
    UNPAUSE = "Unpause"


class BlacklistAction(_NamedEnum):
    ADD = "Add"
    REMOVE = "Remove"


class WhitelistAction(_NamedEnum):
    ADD = "Add"
    REMOVE = "Remove"


@dataclass(frozen=True)
class MetadataKVPair:
    """Additional token metadata entry"""
    key: str
    value: str

    def to_dict(self) -> Dict[str, str]:
        return {"key": self.key, "value": self.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MetadataKVPair":
        return cls(key=str(data["key"]), value=str(data["value"]))


MetadataPairs = Tuple[MetadataKVPair, ...]


def metadata_pairs(items: Union[Dict[str, str], List[Any], Tuple[Any, ...], None]) -> MetadataPairs:
    """Normalize a dict or a sequence of pairs into the tuple form payloads hold"""
    if not items:
        return ()
    if isinstance(items, dict):
        return tuple(MetadataKVPair(key=k, value=v) for k, v in items.items())
    if not isinstance(items, (list, tuple)):
        raise EncodingError.invalid(
            "additional_metadata", f"expected dict or sequence, got {type(items).__name__}"
        )
    pairs = []
    for item in items:
        if isinstance(item, MetadataKVPair):
            pairs.append(item)
        elif isinstance(item, dict):
            pairs.append(MetadataKVPair.from_dict(item))
        else:
            raise EncodingError.invalid(
                "additional_metadata", f"expected MetadataKVPair or dict, got {type(item).__name__}"
            )
    return tuple(pairs)


def _coerce(name: str, kind: Any, value: Any) -> Any:
    if kind == MetadataPairs:
        return metadata_pairs(value)
    if value is None:
        # Left for the encoder to report as a missing field
        return value
    if kind is Address:
        return to_address(value, name)
    if kind is TokenAmount:
        return to_amount(value)
    if isinstance(kind, type) and issubclass(kind, _NamedEnum) and isinstance(value, str):
        return kind.from_string(value)
    return value


def _wire_value(value: Any) -> Any:
    if isinstance(value, Address):
        return value.checksum()
    if isinstance(value, TokenAmount):
        return value.to_wire()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, MetadataKVPair):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_wire_value(item) for item in value]
    return value


class _WirePayload:
    """JSON wire form shared by all payload variants"""

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            coerced = _coerce(f.name, f.type, value)
            if coerced is not value:
                object.__setattr__(self, f.name, coerced)

    def to_wire(self) -> Dict[str, Any]:
        """
        JSON object sent to the REST API

        Addresses are checksummed hex, token amounts decimal strings,
        enums their protocol names.
        """
        return {f.name: _wire_value(getattr(self, f.name)) for f in fields(self)}

    def signature_hash(self) -> bytes:
        """keccak256 of the canonical encoding"""
        from ..infra.encoder import signature_hash
        return signature_hash(self)

    def to_request(self, signature: Signature) -> Dict[str, Any]:
        """Signed request body: payload fields flattened next to the signature"""
        body = self.to_wire()
        body["signature"] = signature.to_dict()
        return body


@dataclass(frozen=True)
class PaymentPayload(_WirePayload):
    """Transfer of `value` units of `token` to `recipient`"""
    recent_epoch: int
    recent_checkpoint: int
    chain_id: int
    nonce: int
    recipient: Address
    value: TokenAmount
    token: Address


@dataclass(frozen=True)
class TokenMintPayload(_WirePayload):
    recent_epoch: int
    recent_checkpoint: int
    chain_id: int
    nonce: int
    recipient: Address
    value: TokenAmount
    token: Address


@dataclass(frozen=True)
class TokenBurnPayload(_WirePayload):
    recent_epoch: int
    recent_checkpoint: int
    chain_id: int
    nonce: int
    recipient: Address
    value: TokenAmount
    token: Address


@dataclass(frozen=True)
class TokenAuthorityPayload(_WirePayload):
    """Grant or revoke an authority role on a token"""
    recent_epoch: int
    recent_checkpoint: int
    chain_id: int
    nonce: int
    action: AuthorityAction
    authority_type: Authority
    authority_address: Address
    token: Address
    value: TokenAmount


@dataclass(frozen=True)
class TokenPausePayload(_WirePayload):
    recent_epoch: int
    recent_checkpoint: int
    chain_id: int
    nonce: int
    action: PauseAction
    token: Address


@dataclass(frozen=True)
class TokenBlacklistPayload(_WirePayload):
    recent_epoch: int
    recent_checkpoint: int
    chain_id: int
    nonce: int
    action: BlacklistAction
    address: Address
    token: Address


@dataclass(frozen=True)
class TokenWhitelistPayload(_WirePayload):
    recent_epoch: int
    recent_checkpoint: int
    chain_id: int
    nonce: int
    action: WhitelistAction
    address: Address
    token: Address


@dataclass(frozen=True)
class TokenMetadataUpdatePayload(_WirePayload):
    recent_epoch: int
    recent_checkpoint: int
    chain_id: int
    nonce: int
    name: str
    uri: str
    token: Address
    additional_metadata: MetadataPairs = field(default_factory=tuple)


@dataclass(frozen=True)
class TokenBridgeAndMintPayload(_WirePayload):
    """
    Mint tokens bridged in from another chain

    Anchored by checkpoint only (no epoch field).
    """
    recent_checkpoint: int
    chain_id: int
    nonce: int
    recipient: Address
    value: TokenAmount
    token: Address
    source_chain_id: int
    source_tx_hash: str
    bridge_metadata: Optional[str] = None


@dataclass(frozen=True)
class TokenBurnAndBridgePayload(_WirePayload):
    """
    Burn tokens here and release them on a destination chain

    `bbnonce` is the account's separate burn-and-bridge counter.
    """
    recent_checkpoint: int
    chain_id: int
    nonce: int
    sender: Address
    value: TokenAmount
    token: Address
    destination_chain_id: int
    destination_address: str
    escrow_fee: TokenAmount
    bridge_metadata: Optional[str]
    bbnonce: int


Payload = Union[
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
]

