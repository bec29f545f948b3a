import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from .models import Address
from .network import Network, get_network

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Currency(BaseModel):
    symbol: str
    decimals: int
    issuer: str

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "decimals": self.decimals,
            "metadata": {"Issuer": self.issuer},
        }


class Settings:
    """Process configuration, read once from the environment (and .env)."""

    def __init__(self):
        self.MONGO_DETAILS: str = os.getenv("MONGO_DETAILS", "mongodb://localhost:27017")
        self.DATABASE_NAME: str = os.getenv("DATABASE_NAME", "hsd")

        self.BLOCKCHAIN: str = os.getenv("BLOCKCHAIN", "handshake")
        self.NETWORK: str = os.getenv("NETWORK", "main")
        self.UNIT: str = os.getenv("UNIT", "hns")
        self.DECIMALS: int = int(os.getenv("DECIMALS", "8"))
        self.ORGANIZATION: str = os.getenv("ORGANIZATION", "handshake-org")
        self.BURN_ADDRESS: Optional[str] = os.getenv("BURN_ADDRESS") or None

        self.NODE_AGENT: str = os.getenv("NODE_AGENT", "/hsd:2.1.5/")
        self.ROSETTA_VERSION: str = os.getenv("ROSETTA_VERSION", "1.3.1")
        self.MIDDLEWARE_VERSION: str = "0.1.0"

        self.HOST: str = os.getenv("HOST", "127.0.0.1")
        self.PORT: int = int(os.getenv("PORT", "8080"))
        self.API_KEY: Optional[str] = os.getenv("API_KEY") or None
        self.NO_AUTH: bool = _env_bool("NO_AUTH", False)
        self.CORS: bool = _env_bool("CORS", False)
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

        # Raises ValueError for a malformed BURN_ADDRESS.
        self.burn_address()

        # Listening locally without a key implies no auth.
        if not self.API_KEY and self.HOST in ("127.0.0.1", "::1"):
            self.NO_AUTH = True

    @property
    def network(self) -> Network:
        return get_network(self.NETWORK)

    def burn_address(self) -> Optional[Address]:
        if not self.BURN_ADDRESS:
            return None
        return Address.from_string(self.BURN_ADDRESS, self.network)

    def currency(self) -> Currency:
        return Currency(symbol=self.UNIT.upper(), decimals=self.DECIMALS, issuer=self.ORGANIZATION)


settings = Settings()
