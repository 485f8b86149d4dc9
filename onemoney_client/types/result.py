"""
Result and response type definitions
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Union

from .common import Address, TokenAmount, Signature, MAX_U64
from .payloads import Payload, MetadataKVPair
from ..errors import DecodingError, EncodingError


class TransactionStatus(Enum):
    """
    Transaction status

    PENDING is the only non-terminal state; CONFIRMED and FAILED are absorbing.
    """
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not TransactionStatus.PENDING


@dataclass(frozen=True)
class TransactionResult:
    """
    Outcome of a successful submission

    Attributes:
        hash: Transaction hash returned by the network (0x hex)
        accepted_payload: The payload that was signed and accepted
    """
    hash: str
    accepted_payload: Payload


@contextmanager
def _decoding(type_name: str) -> Iterator[None]:
    try:
        yield
    except DecodingError:
        raise
    except (KeyError, TypeError, ValueError, AttributeError, EncodingError) as e:
        raise DecodingError.unexpected_shape(type_name, e) from e


def _u64(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError("expected integer, got bool")
    if isinstance(value, str):
        value = int(value, 0)
    if not isinstance(value, int):
        raise TypeError(f"expected integer, got {type(value).__name__}")
    if value < 0 or value > MAX_U64:
        raise ValueError(f"{value} is outside the u64 range")
    return value


def _opt_u64(value: Any) -> Optional[int]:
    return None if value is None else _u64(value)


def _hash(value: Any) -> str:
    if not isinstance(value, str) or not value.startswith("0x"):
        raise ValueError(f"expected 0x-prefixed hash, got {value!r}")
    return value.lower()


def _opt_hash(value: Any) -> Optional[str]:
    return None if value is None else _hash(value)


def _opt_address(value: Any) -> Optional[Address]:
    return None if value is None else Address.from_hex(value)


def _amount(value: Any) -> TokenAmount:
    if isinstance(value, str):
        return TokenAmount.parse(value)
    return TokenAmount(value)


@dataclass(frozen=True)
class TransactionHash:
    """Submission response: {"hash": "0x..."} or the bare "0x..." string"""
    hash: str

    @classmethod
    def from_dict(cls, data: Union[Dict[str, Any], str]) -> "TransactionHash":
        with _decoding("TransactionHash"):
            if isinstance(data, str):
                return cls(hash=_hash(data))
            return cls(hash=_hash(data["hash"]))


@dataclass(frozen=True)
class Transaction:
    """
    Transaction as reported by the network

    checkpoint_number is None until the transaction is included in a checkpoint.
    """
    hash: str
    chain_id: int
    sender: Address
    nonce: int
    recent_epoch: Optional[int]
    recent_checkpoint: Optional[int]
    signature: Signature
    transaction_type: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)
    checkpoint_hash: Optional[str] = None
    checkpoint_number: Optional[int] = None
    transaction_index: Optional[int] = None

    @property
    def is_included(self) -> bool:
        return self.checkpoint_number is not None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        with _decoding("Transaction"):
            return cls(
                hash=_hash(data["hash"]),
                chain_id=_u64(data["chain_id"]),
                sender=Address.from_hex(data["from"]),
                nonce=_u64(data["nonce"]),
                recent_epoch=_opt_u64(data.get("recent_epoch")),
                recent_checkpoint=_opt_u64(data.get("recent_checkpoint")),
                signature=Signature.from_dict(data["signature"]),
                transaction_type=data.get("transaction_type"),
                data=dict(data.get("data") or {}),
                checkpoint_hash=_opt_hash(data.get("checkpoint_hash")),
                checkpoint_number=_opt_u64(data.get("checkpoint_number")),
                transaction_index=_opt_u64(data.get("transaction_index")),
            )


@dataclass(frozen=True)
class TransactionReceipt:
    """Execution receipt for an included transaction"""
    success: bool
    transaction_hash: str
    fee_used: int
    sender: Address
    recipient: Optional[Address] = None
    token_address: Optional[Address] = None
    transaction_index: Optional[int] = None
    checkpoint_hash: Optional[str] = None
    checkpoint_number: Optional[int] = None

    @property
    def status(self) -> TransactionStatus:
        return TransactionStatus.CONFIRMED if self.success else TransactionStatus.FAILED

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TransactionReceipt":
        with _decoding("TransactionReceipt"):
            success = data["success"]
            if not isinstance(success, bool):
                raise TypeError(f"success must be bool, got {type(success).__name__}")
            fee_used = data["fee_used"]
            if isinstance(fee_used, str):
                fee_used = int(fee_used)
            if isinstance(fee_used, bool) or not isinstance(fee_used, int):
                raise TypeError("fee_used must be an integer")
            return cls(
                success=success,
                transaction_hash=_hash(data["transaction_hash"]),
                fee_used=fee_used,
                sender=Address.from_hex(data["from"]),
                recipient=_opt_address(data.get("to")),
                token_address=_opt_address(data.get("token_address")),
                transaction_index=_opt_u64(data.get("transaction_index")),
                checkpoint_hash=_opt_hash(data.get("checkpoint_hash")),
                checkpoint_number=_opt_u64(data.get("checkpoint_number")),
            )


@dataclass(frozen=True)
class AccountNonce:
    nonce: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccountNonce":
        with _decoding("AccountNonce"):
            return cls(nonce=_u64(data["nonce"]))


@dataclass(frozen=True)
class AccountBBNonce:
    """Burn-and-bridge counter, separate from the account nonce"""
    bbnonce: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccountBBNonce":
        with _decoding("AccountBBNonce"):
            return cls(bbnonce=_u64(data["bbnonce"]))


@dataclass(frozen=True)
class AssociatedTokenAccount:
    """Token account derived from (wallet, token)"""
    token_account_address: Address
    balance: TokenAmount
    nonce: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssociatedTokenAccount":
        with _decoding("AssociatedTokenAccount"):
            return cls(
                token_account_address=Address.from_hex(data["token_account_address"]),
                balance=_amount(data["balance"]),
                nonce=_u64(data["nonce"]),
            )


@dataclass(frozen=True)
class LatestState:
    """Latest epoch/checkpoint pair used to anchor new payloads"""
    epoch: int
    checkpoint: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LatestState":
        with _decoding("LatestState"):
            return cls(epoch=_u64(data["epoch"]), checkpoint=_u64(data["checkpoint"]))


@dataclass(frozen=True)
class ChainId:
    chain_id: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChainId":
        with _decoding("ChainId"):
            return cls(chain_id=_u64(data["chain_id"]))


@dataclass(frozen=True)
class CheckpointNumber:
    number: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CheckpointNumber":
        with _decoding("CheckpointNumber"):
            return cls(number=_u64(data["number"]))


@dataclass(frozen=True)
class Checkpoint:
    """
    Checkpoint header plus its transactions

    `transactions` holds hash strings, or full Transaction objects when the
    checkpoint was requested with full=True.
    """
    hash: str
    parent_hash: str
    state_root: str
    transactions_root: str
    receipts_root: str
    number: int
    timestamp: int
    extra_data: str
    transactions: List[Union[str, Transaction]] = field(default_factory=list)
    size: Optional[int] = None

    @property
    def transaction_hashes(self) -> List[str]:
        return [tx if isinstance(tx, str) else tx.hash for tx in self.transactions]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Checkpoint":
        with _decoding("Checkpoint"):
            return cls(
                hash=_hash(data["hash"]),
                parent_hash=_hash(data["parent_hash"]),
                state_root=_hash(data["state_root"]),
                transactions_root=_hash(data["transactions_root"]),
                receipts_root=_hash(data["receipts_root"]),
                number=_u64(data["number"]),
                timestamp=_u64(data["timestamp"]),
                extra_data=str(data.get("extra_data") or ""),
                transactions=[
                    _hash(tx) if isinstance(tx, str) else Transaction.from_dict(tx)
                    for tx in data.get("transactions") or []
                ],
                size=_opt_u64(data.get("size")),
            )


@dataclass(frozen=True)
class EpochInfo:
    """
    Governance epoch with its certificate

    The certificate is either structured JSON or a hex-encoded BCS string;
    it is kept as returned.
    """
    epoch_id: int
    certificate_hash: str
    certificate: Any

    @property
    def certificate_bcs_hex(self) -> Optional[str]:
        return self.certificate if isinstance(self.certificate, str) else None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EpochInfo":
        with _decoding("EpochInfo"):
            return cls(
                epoch_id=_u64(data["epoch_id"]),
                certificate_hash=_hash(data["certificate_hash"]),
                certificate=data["certificate"],
            )


@dataclass(frozen=True)
class FeeEstimate:
    fee: TokenAmount

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeeEstimate":
        with _decoding("FeeEstimate"):
            return cls(fee=_amount(data["fee"]))


@dataclass(frozen=True)
class TokenMetadata:
    name: str
    uri: str
    additional_metadata: List[MetadataKVPair] = field(default_factory=list)


@dataclass(frozen=True)
class MintInfo:
    """
    Token information

    Subset of the mint record: authority lists are kept as addresses,
    per-minter allowances are not decoded.
    """
    symbol: str
    master_authority: Address
    master_mint_burn_authority: Address
    supply: TokenAmount
    decimals: int
    is_paused: bool
    is_private: bool
    pause_authorities: List[Address] = field(default_factory=list)
    list_authorities: List[Address] = field(default_factory=list)
    black_list: List[Address] = field(default_factory=list)
    white_list: List[Address] = field(default_factory=list)
    metadata_update_authorities: List[Address] = field(default_factory=list)
    meta: Optional[TokenMetadata] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MintInfo":
        with _decoding("MintInfo"):
            meta = data.get("meta")
            return cls(
                symbol=str(data["symbol"]),
                master_authority=Address.from_hex(data["master_authority"]),
                master_mint_burn_authority=Address.from_hex(data["master_mint_burn_authority"]),
                supply=_amount(data["supply"]),
                decimals=_u64(data["decimals"]),
                is_paused=bool(data["is_paused"]),
                is_private=bool(data["is_private"]),
                pause_authorities=[Address.from_hex(a) for a in data.get("pause_authorities", [])],
                list_authorities=[Address.from_hex(a) for a in data.get("list_authorities", [])],
                black_list=[Address.from_hex(a) for a in data.get("black_list", [])],
                white_list=[Address.from_hex(a) for a in data.get("white_list", [])],
                metadata_update_authorities=[
                    Address.from_hex(a) for a in data.get("metadata_update_authorities", [])
                ],
                meta=TokenMetadata(
                    name=str(meta["name"]),
                    uri=str(meta["uri"]),
                    additional_metadata=[
                        MetadataKVPair.from_dict(kv) for kv in meta.get("additional_metadata", [])
                    ],
                ) if meta else None,
            )
