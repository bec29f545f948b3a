from typing import Optional

from fastapi import APIRouter, Depends

from hs_rosetta.api_v1.deps import check_network, get_chain, get_settings, parse_transaction_identifier
from hs_rosetta.core.chain import Chain
from hs_rosetta.core.config import Settings
from hs_rosetta.core.errors import (
    TxNotFoundError,
    TxRequiredError,
    ViewNotFoundError,
)
from hs_rosetta.core.models import MempoolTransactionRequest, NetworkRequest
from hs_rosetta.core.operations import TransactionProjection
from hs_rosetta.core.projections import MempoolProjection

router = APIRouter(prefix="/mempool", tags=["Mempool"])


@router.post("", summary="List Mempool Transactions")
async def get_mempool(
    body: Optional[NetworkRequest] = None,
    chain: Chain = Depends(get_chain),
    config: Settings = Depends(get_settings),
):
    check_network(body, config)
    hashes = await chain.get_mempool_snapshot()
    return MempoolProjection(hashes).to_dict()


@router.post("/transaction", summary="Get Mempool Transaction")
async def get_mempool_transaction(
    body: Optional[MempoolTransactionRequest] = None,
    chain: Chain = Depends(get_chain),
    config: Settings = Depends(get_settings),
):
    """
    Returns an unconfirmed transaction with its operations.
    """
    check_network(body, config)

    if body.transaction_identifier is None:
        raise TxRequiredError()

    tx_hash = parse_transaction_identifier(body.transaction_identifier)

    tx = await chain.get_mempool_tx(tx_hash)
    if tx is None:
        raise TxNotFoundError(details={"hash": tx_hash})

    view = await chain.get_mempool_view(tx)
    if view is None:
        raise ViewNotFoundError(details={"hash": tx_hash})

    transaction = TransactionProjection(tx, view, config.network, config.currency())
    return {"transaction": transaction.to_dict()}
