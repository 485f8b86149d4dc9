"""
Error definitions for the 1Money client
"""

from .exceptions import (
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
)
from .mapper import ErrorMapper

__all__ = [
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
]
