"""
Request/response hooks

Hooks are injected at client construction and called by the dispatcher
around every request. Hook exceptions are not caught.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class Hook(Protocol):
    """Callbacks invoked before each request and after each response"""

    def before_request(self, method: str, url: str, body: Optional[str]) -> None:
        ...

    def after_response(self, method: str, url: str, status: int, body: Optional[str]) -> None:
        ...


class LoggingHook:
    """
    Log every request and response

    Bodies are logged at DEBUG; they contain signatures but never keys.
    """

    def __init__(self, log: Optional[logging.Logger] = None, max_body_chars: int = 2000):
        self._log = log or logger
        self._max_body_chars = max_body_chars

    def _clip(self, body: Optional[str]) -> str:
        if body is None:
            return ""
        if len(body) > self._max_body_chars:
            return body[:self._max_body_chars] + "...(truncated)"
        return body

    def before_request(self, method: str, url: str, body: Optional[str]) -> None:
        if body:
            self._log.debug(f"-> {method} {url} with body: {self._clip(body)}")
        else:
            self._log.debug(f"-> {method} {url}")

    def after_response(self, method: str, url: str, status: int, body: Optional[str]) -> None:
        level = logging.DEBUG if 200 <= status < 300 else logging.WARNING
        self._log.log(level, f"<- {method} {url} [{status}] {self._clip(body)}")
