"""
States Module

Network state anchors: latest epoch/checkpoint, chain id, checkpoints and
governance epochs.
"""

import logging
from typing import TYPE_CHECKING

from ..types import ChainId, Checkpoint, CheckpointNumber, EpochInfo, LatestState

if TYPE_CHECKING:
    from ..client import OneMoneyClient

logger = logging.getLogger(__name__)


def _flag(value: bool) -> str:
    return "true" if value else "false"


class StatesModule:
    """Chain, checkpoint and epoch queries"""

    LATEST_EPOCH_CHECKPOINT = "/states/latest_epoch_checkpoint"
    CHAIN_ID = "/chains/chain_id"
    CHECKPOINT_NUMBER = "/checkpoints/number"
    CHECKPOINT_BY_NUMBER = "/checkpoints/by_number"
    CHECKPOINT_BY_HASH = "/checkpoints/by_hash"
    CURRENT_EPOCH = "/governances/epoch"
    EPOCH_BY_ID = "/governances/epoch/by_id"

    def __init__(self, client: "OneMoneyClient"):
        self._client = client

    async def get_latest_epoch_checkpoint(self) -> LatestState:
        """Recent epoch and checkpoint to anchor new payloads to"""
        return await self._client.dispatcher.get(self.LATEST_EPOCH_CHECKPOINT, decoder=LatestState.from_dict)

    async def get_chain_id(self) -> ChainId:
        chain = await self._client.dispatcher.get(self.CHAIN_ID, decoder=ChainId.from_dict)
        if chain.chain_id != self._client.chain_id:
            logger.warning(
                f"Server chain_id {chain.chain_id} differs from configured "
                f"{self._client.config.network} chain_id {self._client.chain_id}"
            )
        return chain

    async def get_checkpoint_number(self) -> CheckpointNumber:
        return await self._client.dispatcher.get(self.CHECKPOINT_NUMBER, decoder=CheckpointNumber.from_dict)

    async def get_checkpoint_by_number(self, number: int, full: bool = False) -> Checkpoint:
        """
        Fetch a checkpoint by number

        Args:
            number: Checkpoint number
            full: Return full transactions instead of their hashes
        """
        params = {"number": number, "full": _flag(full)}
        return await self._client.dispatcher.get(
            self.CHECKPOINT_BY_NUMBER, params=params, decoder=Checkpoint.from_dict
        )

    async def get_checkpoint_by_hash(self, checkpoint_hash: str, full: bool = False) -> Checkpoint:
        params = {"hash": checkpoint_hash, "full": _flag(full)}
        return await self._client.dispatcher.get(
            self.CHECKPOINT_BY_HASH, params=params, decoder=Checkpoint.from_dict
        )

    async def get_current_epoch(self) -> EpochInfo:
        return await self._client.dispatcher.get(self.CURRENT_EPOCH, decoder=EpochInfo.from_dict)

    async def get_epoch_by_id(self, epoch_id: int) -> EpochInfo:
        return await self._client.dispatcher.get(
            self.EPOCH_BY_ID, params={"id": epoch_id}, decoder=EpochInfo.from_dict
        )
