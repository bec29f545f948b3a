"""
Response projections.

Each class wraps chain data that was fetched for one request and renders it
into the Rosetta response shape. None of them touch the chain themselves.
"""

from typing import List

from .config import Currency
from .errors import error_descriptions
from .models import Block, BlockMeta, ChainEntry, CoinView, Peer
from .network import Network
from .operations import TransactionProjection


def to_difficulty(bits: int) -> float:
    """Expands compact `bits` into a floating point difficulty."""
    shift = (bits >> 24) & 0xFF
    mantissa = bits & 0x00FFFFFF

    if mantissa == 0:
        return 0.0

    diff = 0x0000FFFF / mantissa

    while shift < 29:
        diff *= 256.0
        shift += 1

    while shift > 29:
        diff /= 256.0
        shift -= 1

    return diff


class BlockProjection:
    def __init__(self, height: int, block: Block, view: CoinView, prev: BlockMeta,
                 network: Network, currency: Currency):
        self.height = height
        self.block = block
        self.view = view
        self.prev = prev
        self.network = network
        self.currency = currency

    def transactions(self) -> List[dict]:
        return [
            TransactionProjection(tx, self.view, self.network, self.currency).to_dict()
            for tx in self.block.transactions
        ]

    def to_dict(self) -> dict:
        return {
            "block": {
                "block_identifier": {
                    "index": self.height,
                    "hash": self.block.hash,
                },
                "parent_block_identifier": self.prev.to_dict(),
                "timestamp": self.block.header.time * 1000,
                "transactions": self.transactions(),
                "metadata": {
                    "transactions_root": self.block.header.merkle_root,
                    "difficulty": to_difficulty(self.block.header.bits),
                },
            }
        }


class AccountBalance:
    def __init__(self, height: int, block: Block, balance: int, currency: Currency):
        self.height = height
        self.block = block
        self.balance = balance
        self.currency = currency

    def to_dict(self) -> dict:
        return {
            "block_identifier": {
                "index": self.height,
                "hash": self.block.hash,
            },
            "balances": [
                {
                    "value": str(self.balance),
                    "currency": self.currency.to_dict(),
                }
            ],
        }


class MempoolProjection:
    def __init__(self, hashes: List[str]):
        self.hashes = hashes

    def to_dict(self) -> dict:
        return {
            "transaction_identifiers": [{"hash": h} for h in self.hashes],
        }


class NetworkList:
    def __init__(self, blockchain: str, network: Network):
        self.blockchain = blockchain
        self.network = network

    def to_dict(self) -> dict:
        return {
            "network_identifiers": [{
                "blockchain": self.blockchain,
                "network": str(self.network),
            }]
        }


class NetworkOptions:
    def __init__(self, agent: str, rosetta_version: str, middleware_version: str):
        self.agent = agent
        self.rosetta_version = rosetta_version
        self.middleware_version = middleware_version

    def to_dict(self) -> dict:
        return {
            "version": {
                "rosetta_version": self.rosetta_version,
                "node_version": self.agent,
                "middleware_version": self.middleware_version,
            },
            "allow": {
                "operation_statuses": [
                    {"status": "SUCCESS", "successful": True},
                ],
                "operation_types": ["TRANSFER"],
                "errors": error_descriptions(),
            },
        }


class NetworkStatus:
    def __init__(self, peers: List[Peer], tip: ChainEntry, genesis: BlockMeta):
        self.peers = peers
        self.tip = tip
        self.genesis = genesis

    def to_dict(self) -> dict:
        return {
            "current_block_identifier": {
                "index": self.tip.height,
                "hash": self.tip.hash,
            },
            "current_block_timestamp": self.tip.time * 1000,
            "genesis_block_identifier": self.genesis.to_dict(),
            "peers": [{"peer_id": peer.peer_id} for peer in self.peers],
        }
