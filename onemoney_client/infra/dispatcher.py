"""
Request dispatcher

Single path every REST call goes through: build the URL, serialize the body,
attach headers, run hooks, send through the transport with the configured
timeout, and turn the outcome into a typed result or a client error.
No retries happen here.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, TypeVar
from urllib.parse import urlencode

from .hooks import Hook
from .transport import Transport
from ..config import ClientConfig
from ..errors import DecodingError, ErrorMapper, OneMoneyError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _serialize_body(body: Any) -> bytes:
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


class RequestDispatcher:
    """
    Issues REST requests against the configured base URL

    Usage:
        dispatcher = RequestDispatcher(config, HttpxTransport())
        nonce = await dispatcher.get("/accounts/nonce", params={"address": addr},
                                     decoder=AccountNonce.from_dict)
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Transport,
        hooks: Sequence[Hook] = (),
        error_mapper: Optional[ErrorMapper] = None,
    ):
        self._config = config
        self._transport = transport
        self._hooks = tuple(hooks)
        self._errors = error_mapper or ErrorMapper()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def transport(self) -> Transport:
        return self._transport

    def _headers(self, has_body: bool) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": self._config.user_agent,
        }
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    def build_url(self, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
        url = self._config.url_for(path)
        if params:
            query = {k: str(v) for k, v in params.items() if v is not None}
            if query:
                url = f"{url}?{urlencode(query)}"
        return url

    async def send(
        self,
        method: str,
        path: str,
        body: Any = None,
        decoder: Optional[Callable[[Any], T]] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """
        Send one request and decode the response

        Args:
            method: HTTP verb
            path: Endpoint path without the version prefix (e.g. "/transactions/payment")
            body: JSON-serializable request body
            decoder: Callable turning the parsed JSON into the result type
            params: Query parameters (None values are skipped)

        Returns:
            decoder(parsed JSON), or the parsed JSON when no decoder is given

        Raises:
            TransportError: No response was received
            ApiError: Non-success status
            DecodingError: Body is not JSON or does not fit the decoder
        """
        method = method.upper()
        url = self.build_url(path, params)
        payload = _serialize_body(body) if body is not None else None
        body_text = payload.decode("utf-8") if payload is not None else None

        for hook in self._hooks:
            hook.before_request(method, url, body_text)

        timeout = self._config.timeout_seconds
        try:
            status, raw = await self._transport.send(
                method, url, self._headers(payload is not None), payload, timeout
            )
        except OneMoneyError:
            raise
        except Exception as e:
            error = self._errors.map_transport_exception(e, url, timeout)
            logger.warning(f"{method} {url} failed: {error}")
            raise error from e

        response_text = raw.decode("utf-8", errors="replace")
        for hook in self._hooks:
            hook.after_response(method, url, status, response_text)

        if not 200 <= status < 300:
            raise self._errors.map_error_response(status, raw, url)

        data = self._errors.decode_json(raw, url)
        if decoder is None:
            return data
        try:
            return decoder(data)
        except DecodingError:
            raise
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            type_name = getattr(decoder, "__qualname__", repr(decoder))
            raise DecodingError.unexpected_shape(type_name, e) from e

    async def get(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        decoder: Optional[Callable[[Any], T]] = None,
    ) -> Any:
        return await self.send("GET", path, decoder=decoder, params=params)

    async def post(
        self,
        path: str,
        body: Any,
        decoder: Optional[Callable[[Any], T]] = None,
    ) -> Any:
        return await self.send("POST", path, body=body, decoder=decoder)
