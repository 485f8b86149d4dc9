"""
Test Confirmation Poller
"""

import asyncio
import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from onemoney_client.errors import (
    ApiError,
    ConfigurationError,
    ConfirmationTimeoutError,
    TransportError,
)
from onemoney_client.infra import ConfirmationPoller
from onemoney_client.types import TransactionStatus

PENDING = TransactionStatus.PENDING
CONFIRMED = TransactionStatus.CONFIRMED
FAILED = TransactionStatus.FAILED

TX_HASH = "0x" + "ab" * 32


class ScriptedStatus:
    """Returns (or raises) the scripted outcomes in order"""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.queries = []

    async def __call__(self, tx_hash):
        self.queries.append(tx_hash)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


@pytest.mark.asyncio
async def test_returns_confirmed_after_pending():
    fetch = ScriptedStatus(PENDING, PENDING, CONFIRMED)
    sleep = RecordingSleep()
    poller = ConfirmationPoller(fetch, sleep=sleep)

    status = await poller.wait_for_terminal_status(TX_HASH, max_attempts=5, interval=0.25)

    assert status is CONFIRMED
    assert fetch.queries == [TX_HASH] * 3
    assert sleep.delays == [0.25, 0.25]


@pytest.mark.asyncio
async def test_failed_is_terminal():
    fetch = ScriptedStatus(FAILED)
    sleep = RecordingSleep()

    status = await ConfirmationPoller(fetch, sleep=sleep).wait_for_terminal_status(TX_HASH, 3, 1.0)

    assert status is FAILED
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_times_out_after_max_attempts():
    fetch = ScriptedStatus(PENDING, PENDING, PENDING, CONFIRMED)
    sleep = RecordingSleep()
    poller = ConfirmationPoller(fetch, sleep=sleep)

    with pytest.raises(ConfirmationTimeoutError) as exc_info:
        await poller.wait_for_terminal_status(TX_HASH, max_attempts=3, interval=0.5)

    assert len(fetch.queries) == 3
    assert len(sleep.delays) == 2
    assert exc_info.value.tx_hash == TX_HASH
    assert exc_info.value.attempts == 3


@pytest.mark.asyncio
async def test_single_attempt_never_sleeps():
    fetch = ScriptedStatus(PENDING)
    sleep = RecordingSleep()

    with pytest.raises(ConfirmationTimeoutError):
        await ConfirmationPoller(fetch, sleep=sleep).wait_for_terminal_status(TX_HASH, 1, 10.0)

    assert sleep.delays == []


@pytest.mark.asyncio
async def test_query_error_short_circuits():
    error = ApiError(404, "resource_transaction", "not found")
    fetch = ScriptedStatus(PENDING, error, CONFIRMED)
    sleep = RecordingSleep()

    with pytest.raises(ApiError) as exc_info:
        await ConfirmationPoller(fetch, sleep=sleep).wait_for_terminal_status(TX_HASH, 5, 0.0)

    assert exc_info.value is error
    assert len(fetch.queries) == 2


@pytest.mark.asyncio
async def test_transport_error_is_not_a_timeout():
    fetch = ScriptedStatus(TransportError.timeout("http://x", 1.0))

    with pytest.raises(TransportError):
        await ConfirmationPoller(fetch, sleep=RecordingSleep()).wait_for_terminal_status(TX_HASH, 5, 0.0)


@pytest.mark.asyncio
@pytest.mark.parametrize("max_attempts, interval", [(0, 1.0), (-1, 1.0), (3, -0.1)])
async def test_invalid_arguments(max_attempts, interval):
    fetch = ScriptedStatus()

    with pytest.raises(ConfigurationError):
        await ConfirmationPoller(fetch).wait_for_terminal_status(TX_HASH, max_attempts, interval)

    assert fetch.queries == []


@pytest.mark.asyncio
async def test_cancellation_stops_polling():
    fetch = ScriptedStatus(*([PENDING] * 100))
    poller = ConfirmationPoller(fetch)

    task = asyncio.ensure_future(poller.wait_for_terminal_status(TX_HASH, max_attempts=100, interval=10.0))
    await asyncio.sleep(0.01)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert len(fetch.queries) == 1
