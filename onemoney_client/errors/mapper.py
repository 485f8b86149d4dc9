"""
Error mapping

Folds the three failure layers of a REST call into the client taxonomy:
transport exceptions (no response), non-success responses with a structured
body, and bodies that cannot be decoded.
"""

import json
import logging
from typing import Any, Optional

import httpx

from .exceptions import (
    ErrorCode,
    ApiError,
    DecodingError,
    TransportError,
)

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_CODE = "unknown"


def _body_text(body: bytes) -> str:
    return body.decode("utf-8", errors="replace")


class ErrorMapper:
    """
    Classify transport, wire and decoding failures

    Stateless; one instance is shared by the dispatcher.
    """

    def map_transport_exception(
        self,
        error: Exception,
        url: str,
        timeout: Optional[float] = None,
    ) -> TransportError:
        """Map an exception raised before any response was received"""
        if isinstance(error, httpx.TimeoutException):
            return TransportError.timeout(url, timeout if timeout is not None else 0.0, error)
        if isinstance(error, (httpx.ConnectError, httpx.NetworkError, ConnectionError)):
            return TransportError.connection_failed(url, error)
        return TransportError.failed(url, error)

    def classify_status(self, status_code: int, error_code: str) -> ErrorCode:
        """Pick an ErrorCode from the status and the service's error code prefix"""
        if status_code == 400 or error_code.startswith("validation_"):
            return ErrorCode.API_VALIDATION
        if status_code in (401, 403):
            return ErrorCode.API_AUTH
        if status_code == 404 or error_code.startswith("resource_"):
            return ErrorCode.API_NOT_FOUND
        if status_code == 409:
            return ErrorCode.API_CONFLICT
        if status_code == 422 or error_code.startswith("business_"):
            return ErrorCode.API_BUSINESS
        if status_code == 429:
            return ErrorCode.API_RATE_LIMITED
        if 500 <= status_code < 600 or error_code.startswith("system_"):
            return ErrorCode.API_SERVER
        return ErrorCode.API_UNKNOWN

    def map_error_response(self, status_code: int, body: bytes, url: Optional[str] = None) -> ApiError:
        """
        Map a non-success response to ApiError

        A body of the form {"error_code": ..., "message": ...} is parsed;
        anything else keeps the raw text as the message with error_code "unknown".
        """
        text = _body_text(body)
        error_code = UNKNOWN_ERROR_CODE
        message = text

        try:
            parsed = json.loads(text) if text else None
        except ValueError:
            parsed = None

        if isinstance(parsed, dict) and "error_code" in parsed and "message" in parsed:
            error_code = str(parsed["error_code"])
            message = str(parsed["message"])

        code = self.classify_status(status_code, error_code)
        logger.debug(f"API error {status_code} ({error_code}) from {url}: {message}")
        return ApiError(
            status_code=status_code,
            error_code=error_code,
            message=message,
            body=text,
            code=code,
            url=url,
        )

    def decode_json(self, body: bytes, url: str) -> Any:
        """Parse a success body as JSON or raise DecodingError"""
        text = _body_text(body)
        try:
            return json.loads(text)
        except ValueError as e:
            raise DecodingError.invalid_json(url, text, e) from e
