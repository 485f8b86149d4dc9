"""
Exception definitions for the 1Money client
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """
    Unified error codes for client operations

    1xxx - Transport errors
    2xxx - API errors (remote service rejected the request)
    3xxx - Decoding errors
    4xxx - Encoding errors
    5xxx - Crypto errors
    6xxx - Confirmation errors
    9xxx - Configuration errors
    """
    # Transport errors (recoverable)
    TRANSPORT_CONNECTION_FAILED = "1001"
    TRANSPORT_TIMEOUT = "1002"
    TRANSPORT_FAILED = "1003"

    # API errors
    API_VALIDATION = "2001"
    API_NOT_FOUND = "2002"
    API_CONFLICT = "2003"
    API_RATE_LIMITED = "2004"
    API_BUSINESS = "2005"
    API_SERVER = "2006"
    API_AUTH = "2007"
    API_UNKNOWN = "2099"

    # Decoding errors
    DECODE_INVALID_JSON = "3001"
    DECODE_UNEXPECTED_SHAPE = "3002"

    # Encoding errors
    ENCODE_MISSING_FIELD = "4001"
    ENCODE_OUT_OF_RANGE = "4002"
    ENCODE_INVALID_VALUE = "4003"
    ENCODE_UNSUPPORTED_PAYLOAD = "4004"

    # Crypto errors
    CRYPTO_INVALID_KEY = "5001"
    CRYPTO_INVALID_SIGNATURE = "5002"
    CRYPTO_RECOVERY_FAILED = "5003"

    # Confirmation errors
    CONFIRMATION_TIMEOUT = "6001"

    # Configuration errors
    CONFIG_INVALID = "9001"
    CONFIG_MISSING = "9002"


class OneMoneyError(Exception):
    """
    Base exception for all client errors

    Attributes:
        message: Human-readable error message
        code: Error code for programmatic handling
        recoverable: Whether the operation might succeed if the caller retries
        original_error: The underlying exception if any
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.recoverable = recoverable
        self.original_error = original_error
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"

    @property
    def should_retry(self) -> bool:
        """Indicate if the caller may retry the operation"""
        return self.recoverable


class TransportError(OneMoneyError):
    """
    Transport-level failure before any response was received

    Raised when:
    - Connection is refused or DNS resolution fails
    - TLS handshake fails
    - Request times out
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.TRANSPORT_FAILED,
        original_error: Optional[Exception] = None,
        url: Optional[str] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=True,
            original_error=original_error,
            details={"url": url} if url else None,
        )
        self.url = url

    @classmethod
    def connection_failed(cls, url: str, error: Exception = None) -> "TransportError":
        return cls(
            f"Failed to connect to {url}: {error}" if error else f"Failed to connect to {url}",
            ErrorCode.TRANSPORT_CONNECTION_FAILED,
            original_error=error,
            url=url,
        )

    @classmethod
    def timeout(cls, url: str, timeout_seconds: float, error: Exception = None) -> "TransportError":
        return cls(
            f"Request to {url} timed out after {timeout_seconds}s",
            ErrorCode.TRANSPORT_TIMEOUT,
            original_error=error,
            url=url,
        )

    @classmethod
    def failed(cls, url: str, error: Exception) -> "TransportError":
        return cls(
            f"Request to {url} failed: {error}",
            ErrorCode.TRANSPORT_FAILED,
            original_error=error,
            url=url,
        )


class ApiError(OneMoneyError):
    """
    The remote service answered with a non-success status

    The status code, the service's error code and the raw body are kept
    verbatim so callers can branch on them (404 not found, 409 stale nonce...).
    """

    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        body: str = "",
        code: ErrorCode = ErrorCode.API_UNKNOWN,
        url: Optional[str] = None,
    ):
        recoverable = status_code == 429 or 500 <= status_code < 600
        super().__init__(
            f"HTTP {status_code} ({error_code}): {message}",
            code,
            recoverable=recoverable,
            details={
                "status_code": status_code,
                "error_code": error_code,
                "url": url,
            },
        )
        self.status_code = status_code
        self.error_code = error_code
        self.api_message = message
        self.body = body
        self.url = url

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_conflict(self) -> bool:
        return self.status_code == 409

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429

    @property
    def is_server_error(self) -> bool:
        return 500 <= self.status_code < 600


class DecodingError(OneMoneyError):
    """
    A response arrived but could not be parsed into the expected type
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.DECODE_UNEXPECTED_SHAPE,
        original_error: Optional[Exception] = None,
        body: Optional[str] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=False,
            original_error=original_error,
            details={"body": body} if body is not None else None,
        )
        self.body = body

    @classmethod
    def invalid_json(cls, url: str, body: str, error: Exception = None) -> "DecodingError":
        return cls(
            f"Response from {url} is not valid JSON",
            ErrorCode.DECODE_INVALID_JSON,
            original_error=error,
            body=body,
        )

    @classmethod
    def unexpected_shape(cls, type_name: str, error: Exception) -> "DecodingError":
        return cls(
            f"Cannot decode {type_name}: {error}",
            ErrorCode.DECODE_UNEXPECTED_SHAPE,
            original_error=error,
        )


class EncodingError(OneMoneyError):
    """
    A value could not be canonically serialized

    Raised before any network call is attempted.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.ENCODE_INVALID_VALUE,
        field_name: Optional[str] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=False,
            details={"field": field_name} if field_name else None,
        )
        self.field_name = field_name

    @classmethod
    def missing_field(cls, field_name: str) -> "EncodingError":
        return cls(
            f"Required field '{field_name}' is missing",
            ErrorCode.ENCODE_MISSING_FIELD,
            field_name=field_name,
        )

    @classmethod
    def out_of_range(cls, field_name: str, value: int, bits: int) -> "EncodingError":
        return cls(
            f"Field '{field_name}' value {value} does not fit in an unsigned {bits}-bit integer",
            ErrorCode.ENCODE_OUT_OF_RANGE,
            field_name=field_name,
        )

    @classmethod
    def invalid(cls, field_name: str, reason: str) -> "EncodingError":
        return cls(
            f"Field '{field_name}' is invalid: {reason}",
            ErrorCode.ENCODE_INVALID_VALUE,
            field_name=field_name,
        )

    @classmethod
    def unsupported_payload(cls, payload: object) -> "EncodingError":
        return cls(
            f"Unsupported payload type: {type(payload).__name__}",
            ErrorCode.ENCODE_UNSUPPORTED_PAYLOAD,
        )


class CryptoError(OneMoneyError):
    """
    Key, signature or recovery failure, independent of any network call
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CRYPTO_RECOVERY_FAILED,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=False,
            original_error=original_error,
        )

    @classmethod
    def recovery_failed(cls, error: Exception) -> "CryptoError":
        return cls(
            f"Public key recovery failed: {error}",
            ErrorCode.CRYPTO_RECOVERY_FAILED,
            original_error=error,
        )


class InvalidKeyError(CryptoError):
    """Private or public key is malformed or outside the valid scalar range"""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message, ErrorCode.CRYPTO_INVALID_KEY, original_error)


class InvalidSignatureError(CryptoError):
    """Signature components are malformed for recovery"""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message, ErrorCode.CRYPTO_INVALID_SIGNATURE, original_error)


class ConfirmationTimeoutError(OneMoneyError):
    """
    Confirmation polling exhausted its attempt budget

    The transaction status is still unknown; this is neither a transport
    failure nor a definite rejection.
    """

    def __init__(self, tx_hash: str, attempts: int, interval: float):
        super().__init__(
            f"Transaction {tx_hash} not final after {attempts} attempts ({interval}s interval)",
            ErrorCode.CONFIRMATION_TIMEOUT,
            recoverable=True,
            details={"tx_hash": tx_hash, "attempts": attempts, "interval": interval},
        )
        self.tx_hash = tx_hash
        self.attempts = attempts
        self.interval = interval


class ConfigurationError(OneMoneyError):
    """
    Configuration error - not recoverable

    Raised when:
    - Unknown network name
    - Invalid timeout or poll settings
    """

    def __init__(self, message: str, param_name: Optional[str] = None):
        super().__init__(
            message,
            ErrorCode.CONFIG_INVALID,
            recoverable=False,
            details={"param": param_name} if param_name else None,
        )
        self.param_name = param_name

    @classmethod
    def missing(cls, param_name: str) -> "ConfigurationError":
        err = cls(f"Missing required configuration: {param_name}", param_name)
        err.code = ErrorCode.CONFIG_MISSING
        return err

    @classmethod
    def invalid(cls, param_name: str, reason: str) -> "ConfigurationError":
        return cls(f"Invalid configuration for {param_name}: {reason}", param_name)
