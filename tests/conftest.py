"""
hs-rosetta Test Configuration

Shared fixtures: an in-memory chain, a chain that fails the test when it is
touched, and builders for transactions and blocks.
"""

import hashlib
import itertools
from typing import Dict, List, Optional, Union

import pytest
from fastapi.testclient import TestClient

from hs_rosetta.api_v1.deps import get_chain, get_settings
from hs_rosetta.core.chain import Chain
from hs_rosetta.core.config import Currency, Settings
from hs_rosetta.core.covenants import CovenantType
from hs_rosetta.core.errors import RelayError
from hs_rosetta.core.models import (
    Address,
    Block,
    BlockHeader,
    BlockMeta,
    ChainEntry,
    Coin,
    CoinView,
    Covenant,
    Input,
    Outpoint,
    Output,
    Peer,
    Transaction,
)
from hs_rosetta.core.network import get_network
from hs_rosetta.main import app

_counter = itertools.count(1)


def fake_hash(label: Union[int, str]) -> str:
    return hashlib.blake2b(str(label).encode(), digest_size=32).hexdigest()


def make_address(fill: str, version: int = 0) -> Address:
    return Address(version=version, hash=fill * 20)


def make_output(value: int, address: Optional[Address], covenant: CovenantType = CovenantType.NONE) -> Output:
    return Output(value=value, address=address, covenant=Covenant(type=covenant))


def make_coin(value: int, address: Optional[Address], covenant: CovenantType = CovenantType.NONE) -> Coin:
    return Coin(
        hash=fake_hash(f"coin-{next(_counter)}"),
        index=0,
        height=1,
        value=value,
        address=address,
        covenant=Covenant(type=covenant),
    )


def spend(coin: Coin, witness: Optional[List[str]] = None) -> Input:
    return Input(
        prevout=Outpoint(hash=coin.hash, index=coin.index),
        witness=witness if witness is not None else ["30440220" + "11" * 32, "02" + "22" * 32],
    )


def make_tx(inputs: List[Input], outputs: List[Output]) -> Transaction:
    return Transaction(
        hash=fake_hash(f"tx-{next(_counter)}"),
        inputs=inputs,
        outputs=outputs,
        locktime=0,
        size=200,
    )


def make_coinbase(outputs: List[Output]) -> Transaction:
    return make_tx([Input(prevout=Outpoint(), witness=["00" * 8])], outputs)


def view_of(*coins: Coin) -> CoinView:
    view = CoinView()
    for coin in coins:
        view.add_coin(coin)
    return view


class MemoryChain(Chain):
    """Chain held in memory, filled by the tests."""

    def __init__(self, network):
        self.network = network
        self.blocks: List[Block] = []
        self.views: Dict[str, CoinView] = {}
        self.coins: List[Coin] = []
        self.mempool: Dict[str, Transaction] = {}
        self.mempool_views: Dict[str, CoinView] = {}
        self.peers: List[Peer] = []
        self.relayed: List[Transaction] = []
        self.relay_error: Optional[str] = None
        self.snapshots: Optional[Dict[int, Dict[str, int]]] = None

    def add_block(self, transactions: List[Transaction], view: Optional[CoinView] = None,
                  bits: int = 0x1D00FFFF) -> Block:
        height = len(self.blocks)
        prev = self.blocks[-1].hash if self.blocks else "00" * 32
        block = Block(
            hash=fake_hash(f"block-{height}"),
            header=BlockHeader(
                prev_block=prev,
                merkle_root=fake_hash(f"root-{height}"),
                time=1580745078 + height * 600,
                bits=bits,
                height=height,
            ),
            transactions=transactions,
        )
        self.blocks.append(block)
        if view is not None:
            self.views[block.hash] = view
        return block

    async def get_block(self, height_or_hash):
        if isinstance(height_or_hash, int):
            if height_or_hash < len(self.blocks):
                return self.blocks[height_or_hash]
            return None
        for block in self.blocks:
            if block.hash == height_or_hash:
                return block
        return None

    async def get_block_view(self, block):
        return self.views.get(block.hash)

    async def get_tx(self, tx_hash):
        for block in self.blocks:
            for tx in block.transactions:
                if tx.hash == tx_hash:
                    return tx
        return None

    async def get_height(self, block_hash):
        for block in self.blocks:
            if block.hash == block_hash:
                return block.header.height
        return None

    async def get_coins_by_address(self, address):
        return [coin for coin in self.coins if coin.address and coin.address.to_string(self.network) == address]

    async def get_balance_at(self, address, height):
        if self.snapshots is None:
            return await super().get_balance_at(address, height)
        return self.snapshots.get(height, {}).get(address, 0)

    async def get_mempool_snapshot(self):
        return list(self.mempool)

    async def get_mempool_tx(self, tx_hash):
        return self.mempool.get(tx_hash)

    async def get_mempool_view(self, tx):
        return self.mempool_views.get(tx.hash)

    async def add_tx(self, tx, raw=None):
        if self.relay_error:
            raise RelayError(self.relay_error)
        self.relayed.append(tx)

    async def get_peers(self):
        return list(self.peers)

    async def get_tip(self):
        tip = self.blocks[-1]
        return ChainEntry(height=tip.header.height, hash=tip.hash, time=tip.header.time)

    async def get_genesis(self):
        return BlockMeta(height=0, hash=self.blocks[0].hash)


class GuardChain:
    """Fails the test on any use. Proves a request was rejected before chain I/O."""

    def __getattr__(self, name):
        pytest.fail(f"chain.{name} was called")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def network():
    return get_network("regtest")


@pytest.fixture
def currency():
    return Currency(symbol="HNS", decimals=8, issuer="handshake-org")


@pytest.fixture
def config():
    config = Settings()
    config.BLOCKCHAIN = "handshake"
    config.NETWORK = "regtest"
    config.UNIT = "hns"
    config.DECIMALS = 8
    config.ORGANIZATION = "handshake-org"
    config.BURN_ADDRESS = None
    return config


@pytest.fixture
def envelope():
    return {"network_identifier": {"blockchain": "handshake", "network": "regtest"}}


@pytest.fixture
def chain(network):
    chain = MemoryChain(network)
    chain.add_block([make_coinbase([make_output(2000_000000, make_address("01"))])], view=CoinView())
    return chain


@pytest.fixture
def client(chain, config):
    app.dependency_overrides[get_chain] = lambda: chain
    app.dependency_overrides[get_settings] = lambda: config
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def guarded_client(config):
    app.dependency_overrides[get_chain] = lambda: GuardChain()
    app.dependency_overrides[get_settings] = lambda: config
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
