"""
Confirmation polling

Re-queries a transaction's status at a fixed interval until it is terminal
or the attempt budget runs out. Query failures are surfaced at once; this
component never retries a failed query.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from .retry import CorrelationContext, log_with_correlation
from ..errors import ConfigurationError, ConfirmationTimeoutError
from ..types.result import TransactionStatus

logger = logging.getLogger(__name__)

StatusFetcher = Callable[[str], Awaitable[TransactionStatus]]


class ConfirmationPoller:
    """
    Wait for a submitted transaction to reach a terminal status

    At most max_attempts queries and max_attempts - 1 sleeps, so a poll is
    bounded by roughly max_attempts * interval plus query latency. The sleep
    is asyncio.sleep, so cancelling the awaiting task stops the poll at once.

    Usage:
        poller = ConfirmationPoller(client.transactions.get_status)
        status = await poller.wait_for_terminal_status(tx_hash, max_attempts=30, interval=1.0)
    """

    def __init__(
        self,
        fetch_status: StatusFetcher,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        self._fetch_status = fetch_status
        self._sleep = sleep or asyncio.sleep

    async def wait_for_terminal_status(
        self,
        tx_hash: str,
        max_attempts: int,
        interval: float,
    ) -> TransactionStatus:
        """
        Poll until CONFIRMED or FAILED

        Args:
            tx_hash: Transaction hash to watch
            max_attempts: Maximum number of status queries (>= 1)
            interval: Seconds to wait between queries (>= 0)

        Returns:
            The terminal TransactionStatus

        Raises:
            ConfirmationTimeoutError: Still PENDING after max_attempts queries
            TransportError, ApiError, DecodingError: A status query failed
            ConfigurationError: Invalid max_attempts or interval
        """
        if max_attempts < 1:
            raise ConfigurationError.invalid("max_attempts", f"must be >= 1, got {max_attempts}")
        if interval < 0:
            raise ConfigurationError.invalid("interval", f"must be >= 0, got {interval}")

        operation = f"confirm({tx_hash[:10]})"
        with CorrelationContext("poll"):
            for attempt in range(1, max_attempts + 1):
                status = await self._fetch_status(tx_hash)

                if status.is_terminal:
                    log_with_correlation(
                        logging.INFO,
                        f"Transaction {tx_hash} is {status.value}",
                        operation,
                        attempt,
                        max_attempts,
                        tx_hash=tx_hash,
                    )
                    return status

                log_with_correlation(
                    logging.DEBUG,
                    f"Transaction {tx_hash} still {status.value}",
                    operation,
                    attempt,
                    max_attempts,
                    tx_hash=tx_hash,
                )
                if attempt < max_attempts:
                    await self._sleep(interval)

            log_with_correlation(
                logging.WARNING,
                f"Transaction {tx_hash} not final after {max_attempts} attempts",
                operation,
                max_attempts,
                max_attempts,
                tx_hash=tx_hash,
            )
        raise ConfirmationTimeoutError(tx_hash, max_attempts, interval)
