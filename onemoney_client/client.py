"""
OneMoneyClient - Unified entry point for 1Money ledger operations

Provides a high-level async interface through functional modules
(transactions, tokens, accounts, states).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence, TYPE_CHECKING

from .config import ClientConfig
from .infra import (
    CanonicalEncoder,
    ConfirmationPoller,
    Hook,
    HttpxTransport,
    RequestDispatcher,
    Signer,
    Transport,
)
from .infra.signer import PrivateKeyLike
from .types import Payload, TransactionHash, TransactionResult

if TYPE_CHECKING:
    from .modules.transactions import TransactionsModule
    from .modules.tokens import TokensModule
    from .modules.accounts import AccountsModule
    from .modules.states import StatesModule

logger = logging.getLogger(__name__)


class OneMoneyClient:
    """
    Unified 1Money client

    Provides access to ledger operations through functional modules:
    - transactions: Payments, transaction lookup, receipts, confirmation
    - tokens: Mint, burn, authorities, pause, lists, metadata, bridging
    - accounts: Nonces and token accounts
    - states: Latest epoch/checkpoint, chain id, checkpoint number

    Usage:
        async with OneMoneyClient.testnet() as client:
            state = await client.states.get_latest_epoch_checkpoint()
            nonce = await client.accounts.get_nonce(sender)
            payload = PaymentPayload(
                recent_epoch=state.epoch,
                recent_checkpoint=state.checkpoint,
                chain_id=client.chain_id,
                nonce=nonce.nonce,
                recipient=Address.from_hex(recipient),
                value=TokenAmount(1_000_000),
                token=Address.from_hex(token),
            )
            result = await client.transactions.send_payment(payload, private_key)
            status = await client.transactions.wait_for_confirmation(result.hash)
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[Transport] = None,
        hooks: Sequence[Hook] = (),
    ):
        """
        Initialize OneMoneyClient

        Args:
            config: Client configuration (read from environment if None)
            transport: HTTP transport (an HttpxTransport is created if None)
            hooks: Request/response hooks called on every request
        """
        self._config = config or ClientConfig.from_env()

        self._owns_transport = transport is None
        self._transport: Transport = transport if transport is not None else HttpxTransport()

        self._dispatcher = RequestDispatcher(self._config, self._transport, hooks)
        self._encoder = CanonicalEncoder()
        self._signer = Signer()

        # Lazy-loaded modules
        self._transactions: Optional["TransactionsModule"] = None
        self._tokens: Optional["TokensModule"] = None
        self._accounts: Optional["AccountsModule"] = None
        self._states: Optional["StatesModule"] = None

    @classmethod
    def mainnet(cls, **kwargs) -> "OneMoneyClient":
        return cls(ClientConfig(network="mainnet", base_url_override=None), **kwargs)

    @classmethod
    def testnet(cls, **kwargs) -> "OneMoneyClient":
        return cls(ClientConfig(network="testnet", base_url_override=None), **kwargs)

    @classmethod
    def local(cls, **kwargs) -> "OneMoneyClient":
        return cls(ClientConfig(network="local", base_url_override=None), **kwargs)

    @property
    def config(self) -> ClientConfig:
        """Immutable client configuration"""
        return self._config

    @property
    def chain_id(self) -> int:
        """Chain id of the configured network"""
        return self._config.chain_id

    @property
    def dispatcher(self) -> RequestDispatcher:
        return self._dispatcher

    @property
    def encoder(self) -> CanonicalEncoder:
        return self._encoder

    @property
    def signer(self) -> Signer:
        return self._signer

    @property
    def transactions(self) -> "TransactionsModule":
        """
        Transactions module

        Provides:
        - send_payment(payload, key): Sign and submit a payment
        - get_transaction_by_hash(hash), get_transaction_receipt(hash)
        - estimate_fee(sender, value, token)
        - get_status(hash), wait_for_confirmation(hash)
        """
        if self._transactions is None:
            from .modules.transactions import TransactionsModule
            self._transactions = TransactionsModule(self)
        return self._transactions

    @property
    def tokens(self) -> "TokensModule":
        """
        Tokens module

        Provides:
        - mint, burn, grant_authority, revoke_authority, pause
        - manage_blacklist, manage_whitelist, update_metadata
        - bridge_and_mint, burn_and_bridge, get_token_metadata
        """
        if self._tokens is None:
            from .modules.tokens import TokensModule
            self._tokens = TokensModule(self)
        return self._tokens

    @property
    def accounts(self) -> "AccountsModule":
        """
        Accounts module

        Provides:
        - get_nonce(address), get_bbnonce(address)
        - get_token_account(address, token), token_account_address(address, token)
        """
        if self._accounts is None:
            from .modules.accounts import AccountsModule
            self._accounts = AccountsModule(self)
        return self._accounts

    @property
    def states(self) -> "StatesModule":
        """
        States module

        Provides:
        - get_latest_epoch_checkpoint(), get_chain_id(), get_checkpoint_number()
        """
        if self._states is None:
            from .modules.states import StatesModule
            self._states = StatesModule(self)
        return self._states

    def poller(self) -> ConfirmationPoller:
        """Confirmation poller bound to this client's status query"""
        return ConfirmationPoller(self.transactions.get_status)

    def sign_request(self, payload: Payload, private_key: PrivateKeyLike) -> Dict[str, Any]:
        """
        Sign a payload and build the request body

        Runs synchronously; the key is not referenced after this returns.
        """
        if payload.chain_id != self._config.chain_id:
            logger.warning(
                f"Payload chain_id {payload.chain_id} differs from {self._config.network} "
                f"chain_id {self._config.chain_id}"
            )
        signature = self._signer.sign_payload(payload, private_key)
        return payload.to_request(signature)

    async def submit_signed(self, path: str, payload: Payload, body: Dict[str, Any]) -> TransactionResult:
        """POST a signed request body and wrap the returned hash"""
        response = await self._dispatcher.post(path, body, decoder=TransactionHash.from_dict)
        logger.info(f"Submitted {type(payload).__name__} nonce={payload.nonce}: {response.hash}")
        return TransactionResult(hash=response.hash, accepted_payload=payload)

    async def aclose(self):
        """Close the transport if this client created it"""
        if self._owns_transport and isinstance(self._transport, HttpxTransport):
            await self._transport.aclose()

    async def __aenter__(self) -> "OneMoneyClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    def __repr__(self) -> str:
        return f"OneMoneyClient(network={self._config.network}, base_url={self._config.base_url})"
