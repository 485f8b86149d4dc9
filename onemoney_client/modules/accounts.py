"""
Accounts Module

Nonce and token account queries.
"""

import logging
from typing import TYPE_CHECKING

from ..infra.address import derive_token_account_address
from ..types import (
    AccountBBNonce,
    AccountNonce,
    Address,
    AddressLike,
    AssociatedTokenAccount,
    to_address,
)

if TYPE_CHECKING:
    from ..client import OneMoneyClient

logger = logging.getLogger(__name__)


class AccountsModule:
    """
    Account queries

    Usage:
        nonce = await client.accounts.get_nonce(address)
        account = await client.accounts.get_token_account(address, token)
    """

    NONCE = "/accounts/nonce"
    BBNONCE = "/accounts/bbnonce"
    TOKEN_ACCOUNT = "/accounts/token_account"

    def __init__(self, client: "OneMoneyClient"):
        self._client = client

    async def get_nonce(self, address: AddressLike) -> AccountNonce:
        """Next nonce the network expects from this account"""
        params = {"address": to_address(address).checksum()}
        return await self._client.dispatcher.get(self.NONCE, params=params, decoder=AccountNonce.from_dict)

    async def get_bbnonce(self, address: AddressLike) -> AccountBBNonce:
        """Next burn-and-bridge nonce for this account"""
        params = {"address": to_address(address).checksum()}
        return await self._client.dispatcher.get(self.BBNONCE, params=params, decoder=AccountBBNonce.from_dict)

    async def get_token_account(self, address: AddressLike, token: AddressLike) -> AssociatedTokenAccount:
        params = {
            "address": to_address(address).checksum(),
            "token": to_address(token, "token").checksum(),
        }
        return await self._client.dispatcher.get(
            self.TOKEN_ACCOUNT, params=params, decoder=AssociatedTokenAccount.from_dict
        )

    def token_account_address(self, address: AddressLike, token: AddressLike) -> Address:
        """Derive the associated token account address locally, without a request"""
        return derive_token_account_address(address, token)
