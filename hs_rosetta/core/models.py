from pydantic import BaseModel, Field, StrictInt, StrictStr
from typing import Any, Dict, List, Optional

from embit import bech32

from .covenants import CovenantType
from .network import Network

NULL_HASH = "00" * 32
NULL_INDEX = 0xFFFFFFFF
NULL_DATA_VERSION = 31


class Address(BaseModel):
    version: int = 0
    hash: str

    def is_null_data(self) -> bool:
        return self.version == NULL_DATA_VERSION

    def to_string(self, network: Network) -> str:
        data = [self.version] + bech32.convertbits(bytes.fromhex(self.hash), 8, 5)
        return bech32.bech32_encode(bech32.Encoding.BECH32, network.address_prefix, data)

    @classmethod
    def from_string(cls, text: str, network: Network) -> "Address":
        encoding, hrp, data = bech32.bech32_decode(text.lower())
        if encoding != bech32.Encoding.BECH32 or hrp != network.address_prefix or not data:
            raise ValueError(f"Invalid {network.name} address: {text}")
        program = bech32.convertbits(data[1:], 5, 8, False)
        if program is None or not 2 <= len(program) <= 40:
            raise ValueError(f"Invalid {network.name} address: {text}")
        return cls(version=data[0], hash=bytes(program).hex())


class Covenant(BaseModel):
    type: CovenantType = CovenantType.NONE
    items: List[str] = []


class Outpoint(BaseModel):
    hash: str = NULL_HASH
    index: int = NULL_INDEX

    def is_null(self) -> bool:
        return self.hash == NULL_HASH and self.index == NULL_INDEX

    def key(self) -> str:
        return f"{self.hash}:{self.index}"


class Input(BaseModel):
    prevout: Outpoint = Field(default_factory=Outpoint)
    witness: List[str] = []
    sequence: int = 0xFFFFFFFF


class Output(BaseModel):
    value: int
    address: Optional[Address] = None
    covenant: Covenant = Field(default_factory=Covenant)

    def is_unspendable(self) -> bool:
        return self.address is not None and self.address.is_null_data()

    def get_hash(self) -> Optional[str]:
        return self.address.hash if self.address else None


class Transaction(BaseModel):
    hash: str
    version: int = 0
    inputs: List[Input]
    outputs: List[Output]
    locktime: int = 0
    size: int = 0

    def is_coinbase(self) -> bool:
        return len(self.inputs) > 0 and self.inputs[0].prevout.is_null()


class Coin(BaseModel):
    hash: str
    index: int
    height: int = -1
    value: int
    address: Optional[Address] = None
    covenant: Covenant = Field(default_factory=Covenant)
    coinbase: bool = False

    def is_unspendable(self) -> bool:
        return self.address is not None and self.address.is_null_data()

    def get_hash(self) -> Optional[str]:
        return self.address.hash if self.address else None

    def key(self) -> str:
        return f"{self.hash}:{self.index}"

    @classmethod
    def from_output(cls, tx_hash: str, index: int, output: Output, height: int = -1, coinbase: bool = False) -> "Coin":
        return cls(
            hash=tx_hash,
            index=index,
            height=height,
            value=output.value,
            address=output.address,
            covenant=output.covenant,
            coinbase=coinbase,
        )


class CoinView(BaseModel):
    """Request-scoped map of outpoints to the coins they reference."""
    coins: Dict[str, Coin] = {}

    def add_coin(self, coin: Coin) -> None:
        self.coins[coin.key()] = coin

    def get_coin_for(self, tin: Input) -> Optional[Coin]:
        return self.coins.get(tin.prevout.key())


class BlockHeader(BaseModel):
    version: int = 0
    prev_block: str
    merkle_root: str
    time: int
    bits: int
    nonce: int = 0
    height: int


class Block(BaseModel):
    hash: str
    header: BlockHeader
    transactions: List[Transaction]


class BlockMeta(BaseModel):
    height: int
    hash: str

    def to_dict(self) -> dict:
        return {"index": self.height, "hash": self.hash}


class ChainEntry(BaseModel):
    height: int
    hash: str
    time: int


class Peer(BaseModel):
    host: str
    port: int
    connected: bool = True

    @property
    def peer_id(self) -> str:
        return f"{self.host}:{self.port}"


# --- API Models ---
# Request bodies accept any JSON for their fields. The network identifier is
# checked before anything else, so field shapes are validated afterwards by
# the handlers against the identifier models below.
class NetworkRequest(BaseModel):
    network_identifier: Optional[Any] = None


class AccountBalanceRequest(NetworkRequest):
    account_identifier: Optional[Any] = None
    block_identifier: Optional[Any] = None


class BlockRequest(NetworkRequest):
    block_identifier: Optional[Any] = None


class BlockTransactionRequest(BlockRequest):
    transaction_identifier: Optional[Any] = None


class ConstructionSubmitRequest(NetworkRequest):
    signed_transaction: Optional[Any] = None


class MempoolTransactionRequest(NetworkRequest):
    transaction_identifier: Optional[Any] = None


class PartialBlockIdentifier(BaseModel):
    index: Optional[StrictInt] = None
    hash: Optional[StrictStr] = None


class AccountIdentifier(BaseModel):
    address: Optional[StrictStr] = None


class TransactionIdentifier(BaseModel):
    hash: Optional[StrictStr] = None
