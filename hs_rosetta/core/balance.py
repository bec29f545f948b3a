from typing import Iterable, Optional

from .chain import Chain
from .covenants import is_unspendable
from .models import Address, Coin


def is_spendable(coin: Coin, burn_address: Optional[Address] = None) -> bool:
    if burn_address is not None and coin.address == burn_address:
        return False
    if coin.is_unspendable():
        return False
    if is_unspendable(coin.covenant):
        return False
    return True


def balance_of(coins: Iterable[Coin], burn_address: Optional[Address] = None) -> int:
    """Sums the value of the spendable coins, in dollarydoos."""
    return sum(coin.value for coin in coins if is_spendable(coin, burn_address))


async def balance_at(
    chain: Chain,
    address: str,
    height: Optional[int] = None,
    burn_address: Optional[Address] = None,
) -> int:
    """
    Computes the balance of `address` from the current coin set.

    The coin set only reflects the chain tip. A request for any other height
    goes to `Chain.get_balance_at`, which refuses unless the store keeps
    historical snapshots.
    """
    if height is not None:
        tip = await chain.get_tip()
        if height != tip.height:
            return await chain.get_balance_at(address, height)

    coins = await chain.get_coins_by_address(address)
    return balance_of(coins, burn_address)
