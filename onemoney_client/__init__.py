"""
1Money ledger client

Async REST client that builds canonical transaction payloads, signs them
with recoverable secp256k1 ECDSA, submits them and polls for finality.

Usage:
    from onemoney_client import OneMoneyClient, PaymentPayload, Address, TokenAmount

    async with OneMoneyClient.testnet() as client:
        result = await client.transactions.send_payment(payload, private_key)
        status = await client.transactions.wait_for_confirmation(result.hash)
"""

from .config import (
    CLIENT_VERSION,
    ClientConfig,
    PollConfig,
    NetworkConfig,
    NETWORKS,
    LoggingConfig,
    setup_logging,
    resolve_network,
)
from .client import OneMoneyClient
from .errors import (
    ErrorCode,
    OneMoneyError,
    TransportError,
    ApiError,
    DecodingError,
    EncodingError,
    CryptoError,
    InvalidKeyError,
    InvalidSignatureError,
    ConfirmationTimeoutError,
    ConfigurationError,
    ErrorMapper,
)
from .infra import (
    CanonicalEncoder,
    Signer,
    RequestDispatcher,
    ConfirmationPoller,
    HttpxTransport,
    Transport,
    Hook,
    LoggingHook,
    RetryConfig,
    execute_with_retry,
    encode_address,
    decode_address,
    is_valid_address,
    derive_token_account_address,
)
from .types import (
    Address,
    TokenAmount,
    Signature,
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
    TransactionStatus,
    TransactionResult,
)

__version__ = CLIENT_VERSION

__all__ = [
    "__version__",
    # Client
    "OneMoneyClient",
    # Config
    "ClientConfig",
    "PollConfig",
    "NetworkConfig",
    "NETWORKS",
    "LoggingConfig",
    "setup_logging",
    "resolve_network",
    # Errors
    "ErrorCode",
    "OneMoneyError",
    "TransportError",
    "ApiError",
    "DecodingError",
    "EncodingError",
    "CryptoError",
    "InvalidKeyError",
    "InvalidSignatureError",
    "ConfirmationTimeoutError",
    "ConfigurationError",
    "ErrorMapper",
    # Infra
    "CanonicalEncoder",
    "Signer",
    "RequestDispatcher",
    "ConfirmationPoller",
    "HttpxTransport",
    "Transport",
    "Hook",
    "LoggingHook",
    "RetryConfig",
    "execute_with_retry",
    "encode_address",
    "decode_address",
    "is_valid_address",
    "derive_token_account_address",
    # Types
    "Address",
    "TokenAmount",
    "Signature",
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
    "TransactionStatus",
    "TransactionResult",
]
