"""
Chain and mempool access.

`Chain` is the read interface the endpoints are written against. `MongoChain`
implements it on top of the collections the node's indexer maintains.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import List, Optional, Union

from pymongo.errors import DuplicateKeyError, PyMongoError

from .database import (
    get_blocks_collection,
    get_coins_collection,
    get_mempool_collection,
    get_peers_collection,
    get_undo_collection,
)
from .errors import RelayError, UnsupportedQueryError
from .models import (
    Address,
    Block,
    BlockMeta,
    ChainEntry,
    Coin,
    CoinView,
    Peer,
    Transaction,
)
from .network import Network

logger = logging.getLogger(__name__)


class Chain(ABC):
    @abstractmethod
    async def get_block(self, height_or_hash: Union[int, str]) -> Optional[Block]:
        ...

    @abstractmethod
    async def get_block_view(self, block: Block) -> Optional[CoinView]:
        ...

    @abstractmethod
    async def get_tx(self, tx_hash: str) -> Optional[Transaction]:
        ...

    @abstractmethod
    async def get_height(self, block_hash: str) -> Optional[int]:
        ...

    @abstractmethod
    async def get_coins_by_address(self, address: str) -> List[Coin]:
        ...

    async def get_balance_at(self, address: str, height: int) -> int:
        """Balance at a past height. Only stores with coin-set snapshots can answer."""
        raise UnsupportedQueryError(
            "Balance queries at a historical height are not supported.",
            {"address": address, "height": height},
        )

    @abstractmethod
    async def get_mempool_snapshot(self) -> List[str]:
        ...

    @abstractmethod
    async def get_mempool_tx(self, tx_hash: str) -> Optional[Transaction]:
        ...

    @abstractmethod
    async def get_mempool_view(self, tx: Transaction) -> Optional[CoinView]:
        ...

    @abstractmethod
    async def add_tx(self, tx: Transaction, raw: Optional[str] = None) -> None:
        ...

    @abstractmethod
    async def get_peers(self) -> List[Peer]:
        ...

    @abstractmethod
    async def get_tip(self) -> ChainEntry:
        ...

    @abstractmethod
    async def get_genesis(self) -> BlockMeta:
        ...


class MongoChain(Chain):
    def __init__(self, network: Network):
        self.network = network

    async def get_block(self, height_or_hash: Union[int, str]) -> Optional[Block]:
        blocks = get_blocks_collection()
        if isinstance(height_or_hash, int):
            doc = await blocks.find_one({"header.height": height_or_hash})
        else:
            doc = await blocks.find_one({"hash": height_or_hash})
        return Block(**doc) if doc else None

    async def get_block_view(self, block: Block) -> Optional[CoinView]:
        view = CoinView()

        spends = any(not tx.is_coinbase() for tx in block.transactions)
        if not spends:
            return view

        undo = await get_undo_collection().find_one({"_id": block.hash})
        if not undo:
            return None

        for doc in undo["coins"]:
            view.add_coin(Coin(**doc))
        return view

    async def get_tx(self, tx_hash: str) -> Optional[Transaction]:
        blocks = get_blocks_collection()
        pipeline = [
            {"$match": {"transactions.hash": tx_hash}},
            {"$unwind": "$transactions"},
            {"$match": {"transactions.hash": tx_hash}},
            {"$replaceRoot": {"newRoot": "$transactions"}},
        ]
        found = await blocks.aggregate(pipeline).to_list(length=1)
        return Transaction(**found[0]) if found else None

    async def get_height(self, block_hash: str) -> Optional[int]:
        doc = await get_blocks_collection().find_one({"hash": block_hash}, {"header.height": 1})
        return doc["header"]["height"] if doc else None

    async def get_coins_by_address(self, address: str) -> List[Coin]:
        addr = Address.from_string(address, self.network)
        cursor = get_coins_collection().find({
            "address.version": addr.version,
            "address.hash": addr.hash,
        })
        return [Coin(**doc) async for doc in cursor]

    async def get_mempool_snapshot(self) -> List[str]:
        cursor = get_mempool_collection().find({}, {"_id": 1}).sort("time", 1)
        return [doc["_id"] async for doc in cursor]

    async def get_mempool_tx(self, tx_hash: str) -> Optional[Transaction]:
        doc = await get_mempool_collection().find_one({"_id": tx_hash})
        return Transaction(**doc["tx"]) if doc else None

    async def get_mempool_view(self, tx: Transaction) -> Optional[CoinView]:
        view = CoinView()
        if tx.is_coinbase():
            return view

        keys = [tin.prevout.key() for tin in tx.inputs]
        async for doc in get_coins_collection().find({"_id": {"$in": keys}}):
            view.add_coin(Coin(**doc))

        # Inputs may spend outputs of other unconfirmed transactions.
        missing = [tin.prevout for tin in tx.inputs if view.get_coin_for(tin) is None]
        parents = {prevout.hash for prevout in missing}
        if parents:
            async for doc in get_mempool_collection().find({"_id": {"$in": list(parents)}}):
                parent = Transaction(**doc["tx"])
                for prevout in missing:
                    if prevout.hash == parent.hash and prevout.index < len(parent.outputs):
                        view.add_coin(Coin.from_output(parent.hash, prevout.index, parent.outputs[prevout.index]))

        return view

    async def add_tx(self, tx: Transaction, raw: Optional[str] = None) -> None:
        mempool = get_mempool_collection()
        try:
            await mempool.insert_one({
                "_id": tx.hash,
                "tx": tx.model_dump(mode="json"),
                "raw": raw,
                "time": time.time(),
            })
        except DuplicateKeyError:
            raise RelayError(f"Transaction {tx.hash} already in mempool.", {"hash": tx.hash})
        except PyMongoError as e:
            logger.error("Could not queue transaction %s: %s", tx.hash, e)
            raise RelayError(details={"hash": tx.hash}) from e
        logger.info("Queued transaction %s for relay.", tx.hash)

    async def get_peers(self) -> List[Peer]:
        cursor = get_peers_collection().find({}, {"_id": 0})
        return [Peer(**doc) async for doc in cursor]

    async def get_tip(self) -> ChainEntry:
        blocks = get_blocks_collection()
        cursor = blocks.find().sort("header.height", -1).limit(1)
        found = await cursor.to_list(length=1)
        if not found:
            raise RuntimeError("Chain has no blocks.")
        tip = found[0]
        return ChainEntry(height=tip["header"]["height"], hash=tip["hash"], time=tip["header"]["time"])

    async def get_genesis(self) -> BlockMeta:
        doc = await get_blocks_collection().find_one({"header.height": 0}, {"hash": 1})
        if not doc:
            raise RuntimeError("Chain has no genesis block.")
        return BlockMeta(height=0, hash=doc["hash"])
