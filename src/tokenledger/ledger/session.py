"""
Caller-bound ledger sessions.

A TokenSession fixes the caller identity so submission code can call
``session.transfer(to, amount)`` the way a connected wallet signs for one
account.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tokenledger.core.exceptions import ValidationError
from tokenledger.core.types import Address, TransferEvent, is_zero_address

if TYPE_CHECKING:
    from tokenledger.ledger.token import TokenLedger


class TokenSession:
    """A TokenLedger bound to one caller identity."""

    def __init__(self, ledger: TokenLedger, account: Address) -> None:
        if not isinstance(account, str) or not account.strip() or is_zero_address(account):
            raise ValidationError(
                "Session account must be a non-empty, non-zero identity", field="account"
            )
        self._ledger = ledger
        self._account = account

    @property
    def account(self) -> Address:
        return self._account

    @property
    def ledger(self) -> TokenLedger:
        return self._ledger

    async def balance(self) -> int:
        return await self._ledger.balance_of(self._account)

    async def transfer(self, to: Address, amount: int) -> TransferEvent:
        return await self._ledger.transfer(self._account, to, amount)

    async def mint(self, to: Address, amount: int) -> TransferEvent:
        return await self._ledger.mint(self._account, to, amount)

    async def burn(self, amount: int) -> TransferEvent:
        return await self._ledger.burn(self._account, amount)

    def __repr__(self) -> str:
        return f"TokenSession(ledger={self._ledger.ledger_id!r}, account={self._account!r})"
