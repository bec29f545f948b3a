"""
Handshake network table.

Only the values the middleware needs are kept here: the name a client puts
in its network identifier and the bech32 prefix addresses are rendered with.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Network:
    name: str
    address_prefix: str

    def __str__(self) -> str:
        return self.name


NETWORKS: Dict[str, Network] = {
    "main": Network(name="main", address_prefix="hs"),
    "testnet": Network(name="testnet", address_prefix="ts"),
    "regtest": Network(name="regtest", address_prefix="rs"),
    "simnet": Network(name="simnet", address_prefix="ss"),
}


def get_network(name: str) -> Network:
    network = NETWORKS.get(name)
    if network is None:
        raise ValueError(f"Unknown network: {name}")
    return network
