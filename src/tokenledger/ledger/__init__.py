"""
Ledger module - fungible token balances for tokenledger.

Provides the TokenLedger, caller-bound sessions and the storage-backed
write lock.
"""

from tokenledger.ledger.lock import LedgerLock
from tokenledger.ledger.session import TokenSession
from tokenledger.ledger.token import TokenLedger, TransferListener

__all__ = [
    "LedgerLock",
    "TokenLedger",
    "TokenSession",
    "TransferListener",
]
