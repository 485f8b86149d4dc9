"""
Infrastructure layer: encoding, signing, transport, dispatch and polling
"""

from .address import (
    encode_address,
    decode_address,
    is_valid_address,
    public_key_to_address,
    derive_token_account_address,
)
from .encoder import CanonicalEncoder, encode_payload, signature_hash
from .signer import Signer, sign_payload, derive_address
from .transport import Transport, HttpxTransport
from .hooks import Hook, LoggingHook
from .dispatcher import RequestDispatcher
from .poller import ConfirmationPoller
from .retry import (
    RetryConfig,
    CorrelationContext,
    execute_with_retry,
    is_retryable_status,
    is_retryable_error,
)

__all__ = [
    "encode_address",
    "decode_address",
    "is_valid_address",
    "public_key_to_address",
    "derive_token_account_address",
    "CanonicalEncoder",
    "encode_payload",
    "signature_hash",
    "Signer",
    "sign_payload",
    "derive_address",
    "Transport",
    "HttpxTransport",
    "Hook",
    "LoggingHook",
    "RequestDispatcher",
    "ConfirmationPoller",
    "RetryConfig",
    "CorrelationContext",
    "execute_with_retry",
    "is_retryable_status",
    "is_retryable_error",
]
