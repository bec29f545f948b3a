"""
Request validation shared by every endpoint.

Checks run in a fixed order: the network identifier first, then the presence
of endpoint fields, then their shape. Only after that do endpoints touch the
chain.
"""

import re
from typing import Any, Optional, Tuple, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

from hs_rosetta.core.chain import Chain
from hs_rosetta.core.config import Settings, settings
from hs_rosetta.core.errors import (
    BlockHashMismatchError,
    BlockHeightRequiredError,
    BlockNotFoundError,
    InvalidBlockchainError,
    InvalidFieldError,
    InvalidNetworkError,
    NetworkRequiredError,
    TxHashRequiredError,
)
from hs_rosetta.core.models import Address, Block, NetworkRequest, PartialBlockIdentifier, TransactionIdentifier

HASH_RE = re.compile(r"^[0-9a-fA-F]{64}$")

M = TypeVar("M", bound=BaseModel)


def get_settings() -> Settings:
    return settings


def get_chain(request: Request) -> Chain:
    return request.app.state.chain


def check_network(body: Optional[NetworkRequest], config: Settings) -> None:
    ident = body.network_identifier if body is not None else None
    if not isinstance(ident, dict):
        raise NetworkRequiredError()

    blockchain = ident.get("blockchain")
    network = ident.get("network")

    if blockchain is None or network is None:
        raise NetworkRequiredError()

    # Non-string values never compare equal and are reported as a mismatch.
    if blockchain != config.BLOCKCHAIN:
        raise InvalidBlockchainError(details={"blockchain": blockchain})

    if network != config.NETWORK:
        raise InvalidNetworkError(details={"network": network})


def parse_identifier(model: Type[M], value: Any, field: str) -> M:
    """Validates one request field against its identifier model."""
    try:
        return model.model_validate(value)
    except ValidationError as e:
        errors = [
            {"loc": ".".join([field] + [str(part) for part in err.get("loc", ())]), "msg": err.get("msg", "")}
            for err in e.errors()
        ]
        raise InvalidFieldError(f"Invalid {field}.", {"errors": errors})


def parse_hash(value: str, field: str) -> str:
    if not isinstance(value, str) or not HASH_RE.match(value):
        raise InvalidFieldError(f"Invalid {field}.", {"field": field})
    return value.lower()


def parse_address(value: str, config: Settings) -> Address:
    try:
        return Address.from_string(value, config.network)
    except ValueError:
        raise InvalidFieldError("Invalid address.", {"address": value})


def parse_block_identifier(value: Any) -> Tuple[int, Optional[str]]:
    if isinstance(value, dict) and value.get("index") is None:
        raise BlockHeightRequiredError()

    ident = parse_identifier(PartialBlockIdentifier, value, "block_identifier")
    if ident.index is None:
        raise BlockHeightRequiredError()

    if ident.index < 0:
        raise InvalidFieldError("Invalid block index.", {"index": ident.index})

    block_hash = None
    if ident.hash is not None:
        block_hash = parse_hash(ident.hash, "block hash")

    return ident.index, block_hash


def parse_transaction_identifier(value: Any) -> str:
    if isinstance(value, dict) and not value.get("hash"):
        raise TxHashRequiredError()

    ident = parse_identifier(TransactionIdentifier, value, "transaction_identifier")
    if not ident.hash:
        raise TxHashRequiredError()

    return parse_hash(ident.hash, "transaction hash")


async def fetch_block(chain: Chain, height: int, block_hash: Optional[str] = None) -> Block:
    block = await chain.get_block(height)
    if not block:
        raise BlockNotFoundError(details={"index": height})

    if block_hash and block.hash != block_hash:
        raise BlockHashMismatchError(details={"expected": block_hash, "actual": block.hash})

    return block


def get_burn_address(config: Settings) -> Optional[Address]:
    return config.burn_address()
