from typing import Optional

from fastapi import APIRouter, Depends

from hs_rosetta.api_v1.deps import (
    check_network,
    fetch_block,
    get_burn_address,
    get_chain,
    get_settings,
    parse_address,
    parse_block_identifier,
    parse_identifier,
)
from hs_rosetta.core.balance import balance_at
from hs_rosetta.core.chain import Chain
from hs_rosetta.core.config import Settings
from hs_rosetta.core.errors import AccountRequiredError, AddressRequiredError
from hs_rosetta.core.models import AccountBalanceRequest, AccountIdentifier
from hs_rosetta.core.projections import AccountBalance

router = APIRouter(prefix="/account", tags=["Account"])


@router.post("/balance", summary="Get Account Balance")
async def account_balance(
    body: Optional[AccountBalanceRequest] = None,
    chain: Chain = Depends(get_chain),
    config: Settings = Depends(get_settings),
):
    """
    Sums the spendable coins of an address at the chain tip.

    A block identifier naming any block other than the tip is rejected with
    QUERY_NOT_SUPPORTED: the coin set holds no history to answer it from.
    """
    check_network(body, config)

    if body.account_identifier is None:
        raise AccountRequiredError()

    account = parse_identifier(AccountIdentifier, body.account_identifier, "account_identifier")
    address = account.address
    if not address:
        raise AddressRequiredError()

    parse_address(address, config)

    if body.block_identifier is not None:
        height, block_hash = parse_block_identifier(body.block_identifier)
        block = await fetch_block(chain, height, block_hash)
        height = block.header.height
        balance = await balance_at(chain, address, height, get_burn_address(config))
    else:
        tip = await chain.get_tip()
        height = tip.height
        block = await fetch_block(chain, height)
        balance = await balance_at(chain, address, None, get_burn_address(config))

    return AccountBalance(height, block, balance, config.currency()).to_dict()
