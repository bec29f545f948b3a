from dataclasses import dataclass, field
from typing import Dict, List

from .codec import witness_to_asm, witness_to_hex
from .config import Currency
from .covenants import is_unspendable
from .models import CoinView, Transaction
from .network import Network


@dataclass
class Operation:
    index: int
    address: str
    value: str
    metadata: Dict = field(default_factory=dict)

    def to_dict(self, currency: Currency) -> dict:
        return {
            "operation_identifier": {
                "index": self.index,
                "network_index": 0,
            },
            "type": "TRANSFER",
            "status": "SUCCESS",
            "account": {"address": self.address},
            "amount": {
                "value": self.value,
                "currency": currency.to_dict(),
            },
            "metadata": self.metadata,
        }


def build_operations(tx: Transaction, view: CoinView, network: Network) -> List[Operation]:
    """
    Translates a transaction into its ordered operations.

    Debits for the spent coins come first, in input order, followed by
    credits for the outputs, in output order. Indices are assigned as the
    operations are emitted, so a skipped input or output leaves no gap.
    Coins without an address, null-data outputs and coins locked by a
    REGISTER..REVOKE covenant produce no operation.
    """
    operations: List[Operation] = []

    if not tx.is_coinbase():
        for tin in tx.inputs:
            coin = view.get_coin_for(tin)

            if coin is None or not coin.get_hash():
                continue

            if is_unspendable(coin.covenant):
                continue

            operations.append(Operation(
                index=len(operations),
                address=coin.address.to_string(network),
                value="-" + str(coin.value),
                metadata={
                    "asm": witness_to_asm(tin.witness),
                    "hex": witness_to_hex(tin.witness),
                },
            ))

    for output in tx.outputs:
        if output.is_unspendable():
            continue

        if not output.get_hash():
            continue

        if is_unspendable(output.covenant):
            continue

        operations.append(Operation(
            index=len(operations),
            address=output.address.to_string(network),
            value=str(output.value),
        ))

    return operations


class TransactionProjection:
    def __init__(self, tx: Transaction, view: CoinView, network: Network, currency: Currency):
        self.tx = tx
        self.view = view
        self.network = network
        self.currency = currency

    def operations(self) -> List[dict]:
        ops = build_operations(self.tx, self.view, self.network)
        return [op.to_dict(self.currency) for op in ops]

    def to_dict(self) -> dict:
        return {
            "transaction_identifier": {"hash": self.tx.hash},
            "operations": self.operations(),
            "metadata": {
                "size": self.tx.size,
                "lockTime": self.tx.locktime,
            },
        }
