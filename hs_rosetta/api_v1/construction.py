import logging
from typing import Optional

from fastapi import APIRouter, Depends

from hs_rosetta.api_v1.deps import check_network, get_chain, get_settings
from hs_rosetta.core.chain import Chain
from hs_rosetta.core.codec import DecodeError, decode_transaction_hex
from hs_rosetta.core.config import Settings
from hs_rosetta.core.errors import InvalidFieldError, RelayError, SignedTxRequiredError
from hs_rosetta.core.models import ConstructionSubmitRequest, NetworkRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/construction", tags=["Construction"])


@router.post("/metadata", summary="Get Construction Metadata")
async def construction_metadata(
    body: Optional[NetworkRequest] = None,
    chain: Chain = Depends(get_chain),
    config: Settings = Depends(get_settings),
):
    """
    Returns the hash of the current tip, used by clients as a recent block reference.
    """
    check_network(body, config)
    tip = await chain.get_tip()
    return {"metadata": {"recent_block_hash": tip.hash}}


@router.post("/submit", summary="Submit a Signed Transaction")
async def construction_submit(
    body: Optional[ConstructionSubmitRequest] = None,
    chain: Chain = Depends(get_chain),
    config: Settings = Depends(get_settings),
):
    """
    Decodes a signed transaction and hands it to the node's relay path.
    The transaction is not validated here; the relay decides.
    """
    check_network(body, config)

    if not body.signed_transaction:
        raise SignedTxRequiredError()

    if not isinstance(body.signed_transaction, str):
        raise InvalidFieldError("Invalid signed transaction.", {"field": "signed_transaction"})

    try:
        tx = decode_transaction_hex(body.signed_transaction)
    except DecodeError as e:
        raise InvalidFieldError("Invalid signed transaction.", {"reason": str(e)})

    try:
        await chain.add_tx(tx, body.signed_transaction.lower())
    except RelayError as e:
        logger.warning("Relay rejected transaction %s: %s", tx.hash, e)
        raise

    return {"transaction_identifier": {"hash": tx.hash}}
