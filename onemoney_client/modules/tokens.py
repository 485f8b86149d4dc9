"""
Tokens Module

Token administration (mint, burn, authorities, pause, black/white lists,
metadata) and cross-chain bridging. Every submission signs the payload with
the caller's key and posts it with the signature flattened alongside.
"""

import logging
from typing import Awaitable, Dict, TYPE_CHECKING

from ..errors import EncodingError
from ..infra.signer import PrivateKeyLike
from ..types import (
    AddressLike,
    AuthorityAction,
    MintInfo,
    Payload,
    TokenAuthorityPayload,
    TokenBlacklistPayload,
    TokenBridgeAndMintPayload,
    TokenBurnAndBridgePayload,
    TokenBurnPayload,
    TokenMetadataUpdatePayload,
    TokenMintPayload,
    TokenPausePayload,
    TokenWhitelistPayload,
    TransactionResult,
    to_address,
)

if TYPE_CHECKING:
    from ..client import OneMoneyClient

logger = logging.getLogger(__name__)


class TokensModule:
    """
    Token operations module

    Submission methods sign when called and return an awaitable for the
    network request, so the key never outlives the call.

    Usage:
        result = await client.tokens.mint(payload, private_key)
        info = await client.tokens.get_token_metadata(token)
    """

    MINT = "/tokens/mint"
    BURN = "/tokens/burn"
    GRANT_AUTHORITY = "/tokens/grant_authority"
    REVOKE_AUTHORITY = "/tokens/revoke_authority"
    PAUSE = "/tokens/pause"
    MANAGE_BLACKLIST = "/tokens/manage_blacklist"
    MANAGE_WHITELIST = "/tokens/manage_whitelist"
    UPDATE_METADATA = "/tokens/update_metadata"
    BRIDGE_AND_MINT = "/tokens/bridge_and_mint"
    BURN_AND_BRIDGE = "/tokens/burn_and_bridge"
    TOKEN_METADATA = "/tokens/token_metadata"

    _AUTHORITY_PATHS: Dict[AuthorityAction, str] = {
        AuthorityAction.GRANT: GRANT_AUTHORITY,
        AuthorityAction.REVOKE: REVOKE_AUTHORITY,
    }

    def __init__(self, client: "OneMoneyClient"):
        self._client = client

    def _submit(self, path: str, payload: Payload, private_key: PrivateKeyLike) -> Awaitable[TransactionResult]:
        body = self._client.sign_request(payload, private_key)
        return self._client.submit_signed(path, payload, body)

    def mint(self, payload: TokenMintPayload, private_key: PrivateKeyLike) -> Awaitable[TransactionResult]:
        return self._submit(self.MINT, payload, private_key)

    def burn(self, payload: TokenBurnPayload, private_key: PrivateKeyLike) -> Awaitable[TransactionResult]:
        return self._submit(self.BURN, payload, private_key)

    def update_authority(
        self, payload: TokenAuthorityPayload, private_key: PrivateKeyLike
    ) -> Awaitable[TransactionResult]:
        """Grant or revoke, routed by payload.action"""
        path = self._AUTHORITY_PATHS.get(payload.action)
        if path is None:
            raise EncodingError.invalid("action", f"expected AuthorityAction, got {payload.action!r}")
        return self._submit(path, payload, private_key)

    def grant_authority(
        self, payload: TokenAuthorityPayload, private_key: PrivateKeyLike
    ) -> Awaitable[TransactionResult]:
        if payload.action is not AuthorityAction.GRANT:
            raise EncodingError.invalid("action", f"grant_authority requires Grant, got {payload.action}")
        return self._submit(self.GRANT_AUTHORITY, payload, private_key)

    def revoke_authority(
        self, payload: TokenAuthorityPayload, private_key: PrivateKeyLike
    ) -> Awaitable[TransactionResult]:
        if payload.action is not AuthorityAction.REVOKE:
            raise EncodingError.invalid("action", f"revoke_authority requires Revoke, got {payload.action}")
        return self._submit(self.REVOKE_AUTHORITY, payload, private_key)

    def pause(self, payload: TokenPausePayload, private_key: PrivateKeyLike) -> Awaitable[TransactionResult]:
        """Pause or unpause, per payload.action"""
        return self._submit(self.PAUSE, payload, private_key)

    def manage_blacklist(
        self, payload: TokenBlacklistPayload, private_key: PrivateKeyLike
    ) -> Awaitable[TransactionResult]:
        return self._submit(self.MANAGE_BLACKLIST, payload, private_key)

    def manage_whitelist(
        self, payload: TokenWhitelistPayload, private_key: PrivateKeyLike
    ) -> Awaitable[TransactionResult]:
        return self._submit(self.MANAGE_WHITELIST, payload, private_key)

    def update_metadata(
        self, payload: TokenMetadataUpdatePayload, private_key: PrivateKeyLike
    ) -> Awaitable[TransactionResult]:
        return self._submit(self.UPDATE_METADATA, payload, private_key)

    def bridge_and_mint(
        self, payload: TokenBridgeAndMintPayload, private_key: PrivateKeyLike
    ) -> Awaitable[TransactionResult]:
        return self._submit(self.BRIDGE_AND_MINT, payload, private_key)

    def burn_and_bridge(
        self, payload: TokenBurnAndBridgePayload, private_key: PrivateKeyLike
    ) -> Awaitable[TransactionResult]:
        return self._submit(self.BURN_AND_BRIDGE, payload, private_key)

    async def get_token_metadata(self, token: AddressLike) -> MintInfo:
        params = {"token": to_address(token, "token").checksum()}
        return await self._client.dispatcher.get(self.TOKEN_METADATA, params=params, decoder=MintInfo.from_dict)
