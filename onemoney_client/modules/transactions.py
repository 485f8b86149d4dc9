"""
Transactions Module

Payment submission, transaction lookup and confirmation.

Status model:
- not yet in a checkpoint: PENDING
- included, receipt success: CONFIRMED
- included, receipt failure: FAILED
"""

import logging
from typing import Awaitable, Optional, TYPE_CHECKING

from ..infra.signer import PrivateKeyLike
from ..types import (
    AddressLike,
    AmountLike,
    FeeEstimate,
    PaymentPayload,
    Transaction,
    TransactionReceipt,
    TransactionResult,
    TransactionStatus,
    to_address,
    to_amount,
)

if TYPE_CHECKING:
    from ..client import OneMoneyClient

logger = logging.getLogger(__name__)


class TransactionsModule:
    """
    Transaction operations module

    Usage:
        result = await client.transactions.send_payment(payload, private_key)
        status = await client.transactions.wait_for_confirmation(result.hash)
    """

    PAYMENT = "/transactions/payment"
    BY_HASH = "/transactions/by_hash"
    RECEIPT_BY_HASH = "/transactions/receipt/by_hash"
    ESTIMATE_FEE = "/transactions/estimate_fee"

    def __init__(self, client: "OneMoneyClient"):
        self._client = client

    def send_payment(self, payload: PaymentPayload, private_key: PrivateKeyLike) -> Awaitable[TransactionResult]:
        """
        Sign and submit a payment

        Signing happens when this is called; the returned awaitable only
        performs the network request.
        """
        body = self._client.sign_request(payload, private_key)
        return self._client.submit_signed(self.PAYMENT, payload, body)

    async def get_transaction_by_hash(self, tx_hash: str) -> Transaction:
        return await self._client.dispatcher.get(
            self.BY_HASH, params={"hash": tx_hash}, decoder=Transaction.from_dict
        )

    async def get_transaction_receipt(self, tx_hash: str) -> TransactionReceipt:
        return await self._client.dispatcher.get(
            self.RECEIPT_BY_HASH, params={"hash": tx_hash}, decoder=TransactionReceipt.from_dict
        )

    async def estimate_fee(self, sender: AddressLike, value: AmountLike, token: AddressLike) -> FeeEstimate:
        """Estimate the fee for transferring `value` of `token` from `sender`"""
        params = {
            "from": to_address(sender, "from").checksum(),
            "value": to_amount(value).to_wire(),
            "token": to_address(token, "token").checksum(),
        }
        return await self._client.dispatcher.get(self.ESTIMATE_FEE, params=params, decoder=FeeEstimate.from_dict)

    async def get_status(self, tx_hash: str) -> TransactionStatus:
        """
        Current status of a transaction, fetched fresh on every call

        Raises:
            ApiError: Including 404 when the network does not know the hash yet
        """
        tx = await self.get_transaction_by_hash(tx_hash)
        if not tx.is_included:
            return TransactionStatus.PENDING
        receipt = await self.get_transaction_receipt(tx_hash)
        return receipt.status

    async def wait_for_confirmation(
        self,
        tx_hash: str,
        max_attempts: Optional[int] = None,
        interval: Optional[float] = None,
    ) -> TransactionStatus:
        """
        Poll until the transaction is CONFIRMED or FAILED

        Defaults come from the client's poll configuration.

        Raises:
            ConfirmationTimeoutError: Still pending after max_attempts queries
        """
        poll = self._client.config.poll
        return await self._client.poller().wait_for_terminal_status(
            tx_hash,
            max_attempts if max_attempts is not None else poll.max_attempts,
            interval if interval is not None else poll.interval_seconds,
        )
