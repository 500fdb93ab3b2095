"""
tokenledger - a fungible token ledger with owner-only mint and public burn.

Usage:
    >>> from tokenledger import TokenLedgerClient, parse_ether
    >>>
    >>> client = TokenLedgerClient()
    >>> token = await client.deploy("My Test Token", "MTT", creator="0xOwner")
    >>> await token.transfer("0xOwner", "0xAlice", parse_ether("100"))
    >>> await token.connect("0xAlice").burn(parse_ether("50"))
    >>> await token.total_supply()
"""

from tokenledger.client import TokenLedgerClient
from tokenledger.core.config import Config
from tokenledger.core.exceptions import (
    ConfigurationError,
    InsufficientBalanceError,
    LedgerBusyError,
    LedgerStateError,
    SupplyOverflowError,
    TokenLedgerError,
    UnauthorizedError,
    ValidationError,
)
from tokenledger.core.logging import configure_logging, get_logger
from tokenledger.core.types import (
    DEFAULT_DECIMALS,
    INITIAL_SUPPLY,
    MAX_UINT256,
    ZERO_ADDRESS,
    Address,
    TokenInfo,
    TransferEvent,
)
from tokenledger.core.units import format_ether, format_units, parse_ether, parse_units
from tokenledger.ledger import LedgerLock, TokenLedger, TokenSession
from tokenledger.storage import InMemoryStorage, RedisStorage, StorageBackend, get_storage

__version__ = "0.1.0"

__all__ = [
    # Client
    "TokenLedgerClient",
    "Config",
    # Ledger
    "TokenLedger",
    "TokenSession",
    "LedgerLock",
    # Types
    "Address",
    "TokenInfo",
    "TransferEvent",
    "DEFAULT_DECIMALS",
    "INITIAL_SUPPLY",
    "MAX_UINT256",
    "ZERO_ADDRESS",
    # Units
    "parse_units",
    "format_units",
    "parse_ether",
    "format_ether",
    # Storage
    "StorageBackend",
    "InMemoryStorage",
    "RedisStorage",
    "get_storage",
    # Logging
    "configure_logging",
    "get_logger",
    # Exceptions
    "TokenLedgerError",
    "ConfigurationError",
    "ValidationError",
    "InsufficientBalanceError",
    "UnauthorizedError",
    "SupplyOverflowError",
    "LedgerStateError",
    "LedgerBusyError",
]
