from typing import Optional

from fastapi import APIRouter, Depends

from hs_rosetta.api_v1.deps import check_network, get_chain, get_settings
from hs_rosetta.core.chain import Chain
from hs_rosetta.core.config import Settings
from hs_rosetta.core.models import NetworkRequest
from hs_rosetta.core.projections import NetworkList, NetworkOptions, NetworkStatus

router = APIRouter(prefix="/network", tags=["Network"])


@router.post("/list", summary="List Available Networks")
async def network_list(config: Settings = Depends(get_settings)):
    """
    Returns the single network this middleware serves.
    """
    return NetworkList(config.BLOCKCHAIN, config.network).to_dict()


@router.post("/options", summary="Get Network Options")
async def network_options(
    body: Optional[NetworkRequest] = None,
    config: Settings = Depends(get_settings),
):
    """
    Returns version information and the statuses, operation types and
    errors this implementation can produce.
    """
    check_network(body, config)
    options = NetworkOptions(config.NODE_AGENT, config.ROSETTA_VERSION, config.MIDDLEWARE_VERSION)
    return options.to_dict()


@router.post("/status", summary="Get Network Status")
async def network_status(
    body: Optional[NetworkRequest] = None,
    chain: Chain = Depends(get_chain),
    config: Settings = Depends(get_settings),
):
    """
    Returns the chain tip, the genesis block and the connected peers.
    """
    check_network(body, config)

    tip = await chain.get_tip()
    genesis = await chain.get_genesis()
    peers = [peer for peer in await chain.get_peers() if peer.connected]

    return NetworkStatus(peers, tip, genesis).to_dict()
