"""Enhanced data API client (tokens, transfers, NFTs)."""

from __future__ import annotations

from alchemykit.data.nfts import NFTsMixin
from alchemykit.data.tokens import TokensMixin
from alchemykit.data.transfers import TransfersMixin
from alchemykit.transport.http import HttpExecutor
from alchemykit.transport.jsonrpc import JsonRpcClient


class DataClient(TokensMixin, TransfersMixin, NFTsMixin):
    """
    Token and transfer calls go over the node's JSON-RPC endpoint; NFT calls
    are REST GETs against the network's NFT v3 base URL.
    """

    def __init__(self, rpc: JsonRpcClient, nft: HttpExecutor):
        self.rpc = rpc
        self.nft = nft
