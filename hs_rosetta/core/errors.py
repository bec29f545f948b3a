"""
hs-rosetta - Error Types

Every failure a client can see is one of the kinds below. Each concrete
error has a stable numeric code that is also advertised by /network/options.
"""

from typing import Dict, List, Optional


class RosettaError(Exception):
    """Base exception for all middleware errors."""

    code: int = 32
    message: str = "Unknown error."
    retriable: bool = False
    status_code: int = 500

    def __init__(self, message: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_dict(self) -> dict:
        body = {
            "code": self.code,
            "message": self.message,
            "retriable": self.retriable,
        }
        if self.details:
            body["details"] = self.details
        return body

    @classmethod
    def describe(cls) -> dict:
        return {"code": cls.code, "message": cls.message, "retriable": cls.retriable}


# =============================================================================
# Request Errors
# =============================================================================

class MissingFieldError(RosettaError):
    """A required envelope or identifier field is absent."""
    retriable = True
    status_code = 400


class InvalidFieldError(RosettaError):
    """A field is present but has the wrong type or shape."""
    code = 18
    message = "Invalid request field."
    retriable = True
    status_code = 400


class MismatchError(RosettaError):
    """The request names a different chain, network or block than the one served."""
    retriable = True
    status_code = 400


class TxRequiredError(MissingFieldError):
    code = 1
    message = "Transaction is required."


class TxHashRequiredError(MissingFieldError):
    code = 2
    message = "Transaction hash is required."


class BlockRequiredError(MissingFieldError):
    code = 3
    message = "Block is required."


class BlockHeightRequiredError(MissingFieldError):
    code = 4
    message = "Block height is required."


class BlockHashMismatchError(MismatchError):
    code = 5
    message = "Block hash mismatch."


class AccountRequiredError(MissingFieldError):
    code = 6
    message = "Account is required."


class AddressRequiredError(MissingFieldError):
    code = 7
    message = "Address is required."


class NetworkRequiredError(MissingFieldError):
    code = 8
    message = "Network is required."


class InvalidNetworkError(MismatchError):
    code = 10
    message = "Invalid network."


class InvalidBlockchainError(MismatchError):
    code = 11
    message = "Invalid blockchain."


class SignedTxRequiredError(MissingFieldError):
    code = 12
    message = "Signed transaction required."


# =============================================================================
# Lookup Errors
# =============================================================================

class NotFoundError(RosettaError):
    """A block, transaction or coin view does not exist."""
    retriable = True
    status_code = 404


class BlockNotFoundError(NotFoundError):
    code = 13
    message = "Block not found."


class TxNotFoundError(NotFoundError):
    code = 14
    message = "Transaction not found."


class ViewNotFoundError(NotFoundError):
    code = 15
    message = "Coin view not found."


# =============================================================================
# Capability and Relay Errors
# =============================================================================

class RelayError(RosettaError):
    """The relay path rejected the transaction."""
    code = 16
    message = "Error relaying transaction."
    retriable = False
    status_code = 500


class UnsupportedQueryError(RosettaError):
    """The query needs data the chain store does not keep."""
    code = 17
    message = "Query not supported."
    retriable = False
    status_code = 400


class UnknownError(RosettaError):
    code = 32
    message = "Unknown error."


ERRORS: List[type] = [
    TxRequiredError,
    TxHashRequiredError,
    BlockRequiredError,
    BlockHeightRequiredError,
    BlockHashMismatchError,
    AccountRequiredError,
    AddressRequiredError,
    NetworkRequiredError,
    InvalidNetworkError,
    InvalidBlockchainError,
    SignedTxRequiredError,
    BlockNotFoundError,
    TxNotFoundError,
    ViewNotFoundError,
    RelayError,
    UnsupportedQueryError,
    InvalidFieldError,
    UnknownError,
]


def error_descriptions() -> List[Dict]:
    return [error.describe() for error in sorted(ERRORS, key=lambda e: e.code)]
