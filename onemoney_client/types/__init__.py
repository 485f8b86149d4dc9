"""
Type definitions for the 1Money client
"""

from .common import (
    Address,
    AddressLike,
    TokenAmount,
    AmountLike,
    Signature,
    MAX_U64,
    MAX_U256,
    to_address,
    to_amount,
)
from .payloads import (
    AuthorityAction,
    Authority,
    PauseAction,
    BlacklistAction,
    WhitelistAction,
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
    Payload,
    metadata_pairs,
)
from .result import (
    TransactionStatus,
    TransactionResult,
    TransactionHash,
    Transaction,
    TransactionReceipt,
    AccountNonce,
    AccountBBNonce,
    AssociatedTokenAccount,
    LatestState,
    ChainId,
    CheckpointNumber,
    Checkpoint,
    EpochInfo,
    FeeEstimate,
    TokenMetadata,
    MintInfo,
)

__all__ = [
    # Common types
    "Address",
    "AddressLike",
    "TokenAmount",
    "AmountLike",
    "Signature",
    "MAX_U64",
    "MAX_U256",
    "to_address",
    "to_amount",
    # Payloads
    "AuthorityAction",
    "Authority",
    "PauseAction",
    "BlacklistAction",
    "WhitelistAction",
    "MetadataKVPair",
    "PaymentPayload",
    "TokenMintPayload",
    "TokenBurnPayload",
    "TokenAuthorityPayload",
    "TokenPausePayload",
    "TokenBlacklistPayload",
    "TokenWhitelistPayload",
    "TokenMetadataUpdatePayload",
    "TokenBridgeAndMintPayload",
    "TokenBurnAndBridgePayload",
    "Payload",
    "metadata_pairs",
    # Results
    "TransactionStatus",
    "TransactionResult",
    "TransactionHash",
    "Transaction",
    "TransactionReceipt",
    "AccountNonce",
    "AccountBBNonce",
    "AssociatedTokenAccount",
    "LatestState",
    "ChainId",
    "CheckpointNumber",
    "Checkpoint",
    "EpochInfo",
    "FeeEstimate",
    "TokenMetadata",
    "MintInfo",
]
