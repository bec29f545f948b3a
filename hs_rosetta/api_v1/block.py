from typing import Optional

from fastapi import APIRouter, Depends

from hs_rosetta.api_v1.deps import (
    check_network,
    fetch_block,
    get_chain,
    get_settings,
    parse_block_identifier,
    parse_transaction_identifier,
)
from hs_rosetta.core.chain import Chain
from hs_rosetta.core.config import Settings
from hs_rosetta.core.errors import (
    BlockNotFoundError,
    BlockRequiredError,
    TxNotFoundError,
    TxRequiredError,
    ViewNotFoundError,
)
from hs_rosetta.core.models import BlockMeta, BlockRequest, BlockTransactionRequest
from hs_rosetta.core.operations import TransactionProjection
from hs_rosetta.core.projections import BlockProjection

router = APIRouter(prefix="/block", tags=["Block"])


@router.post("", summary="Get Block")
async def get_block(
    body: Optional[BlockRequest] = None,
    chain: Chain = Depends(get_chain),
    config: Settings = Depends(get_settings),
):
    """
    Returns a block with every transaction translated into operations.
    """
    check_network(body, config)

    if body.block_identifier is None:
        raise BlockRequiredError()

    height, block_hash = parse_block_identifier(body.block_identifier)

    block = await fetch_block(chain, height, block_hash)
    height = block.header.height

    view = await chain.get_block_view(block)
    if view is None:
        raise ViewNotFoundError(details={"block": block.hash})

    # The genesis block is its own parent.
    prev = BlockMeta(height=height, hash=block.hash)
    if height != 0:
        prev_height = await chain.get_height(block.header.prev_block)
        if prev_height is None:
            raise BlockNotFoundError(details={"hash": block.header.prev_block})
        prev = BlockMeta(height=prev_height, hash=block.header.prev_block)

    result = BlockProjection(height, block, view, prev, config.network, config.currency())
    return result.to_dict()


@router.post("/transaction", summary="Get Block Transaction")
async def get_block_transaction(
    body: Optional[BlockTransactionRequest] = None,
    chain: Chain = Depends(get_chain),
    config: Settings = Depends(get_settings),
):
    """
    Returns one transaction of a block, resolved against that block's coin view.
    """
    check_network(body, config)

    if body.block_identifier is None:
        raise BlockRequiredError()

    if body.transaction_identifier is None:
        raise TxRequiredError()

    tx_hash = parse_transaction_identifier(body.transaction_identifier)
    height, block_hash = parse_block_identifier(body.block_identifier)

    block = await fetch_block(chain, height, block_hash)

    tx = await chain.get_tx(tx_hash)
    if tx is None or all(t.hash != tx.hash for t in block.transactions):
        raise TxNotFoundError(details={"hash": tx_hash, "block": block.hash})

    view = await chain.get_block_view(block)
    if view is None:
        raise ViewNotFoundError(details={"block": block.hash})

    transaction = TransactionProjection(tx, view, config.network, config.currency())
    return {"transaction": transaction.to_dict()}
