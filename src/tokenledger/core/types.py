"""
Type definitions for tokenledger.

Constants for the unsigned amount range and the zero address, plus the
TransferEvent record emitted for every balance-affecting operation.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, TypeAlias

# Identities are opaque strings (typically 0x-prefixed addresses)
Address: TypeAlias = str

# Type alias for human-readable amount input to parse_units
AmountType: TypeAlias = Decimal | int | str

MAX_UINT256 = 2**256 - 1

ZERO_ADDRESS: Address = "0x" + "0" * 40

DEFAULT_DECIMALS = 18

# 1,000,000 whole tokens in base units
INITIAL_SUPPLY = 1_000_000 * 10**DEFAULT_DECIMALS


def is_zero_address(account: Any) -> bool:
    """Check whether an identity denotes 'no source' / 'no destination'."""
    return isinstance(account, str) and account.lower() == ZERO_ADDRESS


@dataclass(frozen=True)
class TransferEvent:
    """
    A balance-change notification.

    Mints carry ZERO_ADDRESS as from_address, burns carry it as to_address.

    Attributes:
        sequence: Position in the ledger's notification log (0 is the deploy mint)
        from_address: Debited account, or ZERO_ADDRESS for a mint
        to_address: Credited account, or ZERO_ADDRESS for a burn
        amount: Base units moved
        ledger_id: Ledger that emitted the event
        timestamp: Commit time
        id: Unique event ID
    """

    sequence: int
    from_address: Address
    to_address: Address
    amount: int
    ledger_id: str = ""
    timestamp: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def is_mint(self) -> bool:
        return is_zero_address(self.from_address)

    @property
    def is_burn(self) -> bool:
        return is_zero_address(self.to_address)

    def as_tuple(self) -> tuple[Address, Address, int]:
        """Return the observable (from, to, amount) triple."""
        return (self.from_address, self.to_address, self.amount)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "sequence": self.sequence,
            "from_address": self.from_address,
            "to_address": self.to_address,
            "amount": str(self.amount),
            "ledger_id": self.ledger_id,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TransferEvent:
        """Create TransferEvent from dictionary."""
        ts_str = data.get("timestamp")
        timestamp = datetime.fromisoformat(ts_str) if ts_str else datetime.now()

        return cls(
            sequence=int(data["sequence"]),
            from_address=data["from_address"],
            to_address=data["to_address"],
            amount=int(data.get("amount", "0")),
            ledger_id=data.get("ledger_id", ""),
            timestamp=timestamp,
            id=data.get("id", str(uuid.uuid4())),
        )


@dataclass(frozen=True)
class TokenInfo:
    """Immutable token metadata fixed at deployment."""

    ledger_id: str
    name: str
    symbol: str
    owner: Address
    decimals: int = DEFAULT_DECIMALS
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ledger_id": self.ledger_id,
            "name": self.name,
            "symbol": self.symbol,
            "owner": self.owner,
            "decimals": self.decimals,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TokenInfo:
        ts_str = data.get("created_at")
        return cls(
            ledger_id=data["ledger_id"],
            name=data["name"],
            symbol=data["symbol"],
            owner=data["owner"],
            decimals=int(data.get("decimals", DEFAULT_DECIMALS)),
            created_at=datetime.fromisoformat(ts_str) if ts_str else datetime.now(),
        )
