from enum import IntEnum


class CovenantType(IntEnum):
    NONE = 0
    CLAIM = 1
    OPEN = 2
    BID = 3
    REVEAL = 4
    REDEEM = 5
    REGISTER = 6
    UPDATE = 7
    RENEW = 8
    TRANSFER = 9
    FINALIZE = 10
    REVOKE = 11


def is_unspendable(covenant) -> bool:
    """
    Returns True when the covenant locks its coin for name administration.
    Accepts a Covenant model, a CovenantType or a bare ordinal.
    """
    kind = getattr(covenant, "type", covenant)
    # REGISTER->REVOKE covenants have no effect on value.
    return CovenantType.REGISTER <= kind <= CovenantType.REVOKE
