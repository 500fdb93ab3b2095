"""
Exception hierarchy for tokenledger.

All ledger-specific exceptions inherit from TokenLedgerError for easy catching.
A raised exception always means the operation left ledger state unchanged.
"""

from __future__ import annotations

from typing import Any


class TokenLedgerError(Exception):
    """
    Base exception for all tokenledger errors.

    Catch this to handle any ledger-related exception.

    Example:
        >>> try:
        ...     await ledger.transfer(caller, recipient, amount)
        ... except TokenLedgerError as e:
        ...     print(f"Ledger rejected the call: {e}")
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(TokenLedgerError):
    """
    Configuration is missing or invalid.

    Raised when:
    - Configuration values fail validation
    - Environment variables hold unparseable values
    """

    pass


class ValidationError(TokenLedgerError):
    """
    Input validation error.

    Raised when:
    - An account identity is empty, not a string, or the zero address
    - An amount is not an unsigned integer within range
    - Token name or symbol is empty at deployment
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.field = field


class InsufficientBalanceError(TokenLedgerError):
    """
    Account does not hold enough tokens for a transfer or burn.
    """

    def __init__(
        self,
        message: str,
        account: str,
        current_balance: int,
        required_amount: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.account = account
        self.current_balance = current_balance
        self.required_amount = required_amount
        self.shortfall = required_amount - current_balance

    def __str__(self) -> str:
        return (
            f"{self.message} | "
            f"Balance: {self.current_balance}, Required: {self.required_amount}, "
            f"Shortfall: {self.shortfall}"
        )


class UnauthorizedError(TokenLedgerError):
    """
    Caller is not allowed to perform the operation.

    Raised when anyone other than the ledger owner attempts to mint.
    """

    def __init__(
        self,
        message: str,
        account: str,
        owner: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.account = account
        self.owner = owner

    def __str__(self) -> str:
        return f"{self.message} (account: {self.account})"


class SupplyOverflowError(TokenLedgerError):
    """
    Mint would push total supply past the unsigned 256-bit range.
    """

    def __init__(
        self,
        message: str,
        total_supply: int,
        amount: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.total_supply = total_supply
        self.amount = amount


class LedgerStateError(TokenLedgerError):
    """
    Ledger identifier does not match the persisted state.

    Raised when:
    - Loading a ledger that was never deployed
    - Deploying onto an identifier that already holds a ledger
    """

    def __init__(
        self,
        message: str,
        ledger_id: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.ledger_id = ledger_id


class LedgerBusyError(TokenLedgerError):
    """
    The ledger lock could not be acquired within the retry budget.
    """

    def __init__(
        self,
        message: str,
        ledger_id: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.ledger_id = ledger_id
