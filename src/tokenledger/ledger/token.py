"""
Fungible token ledger.

Tracks per-account balances and total supply for one named, symbol-tagged
token with a single owner allowed to mint. Every successful transfer, mint
or burn is committed atomically together with exactly one TransferEvent.
"""

from __future__ import annotations

import asyncio
import inspect
import uuid
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any, Union

from tokenledger.core.exceptions import (
    InsufficientBalanceError,
    LedgerStateError,
    SupplyOverflowError,
    UnauthorizedError,
    ValidationError,
)
from tokenledger.core.logging import get_logger
from tokenledger.core.types import (
    DEFAULT_DECIMALS,
    INITIAL_SUPPLY,
    MAX_UINT256,
    ZERO_ADDRESS,
    Address,
    TokenInfo,
    TransferEvent,
    is_zero_address,
)
from tokenledger.ledger.lock import LedgerLock
from tokenledger.ledger.session import TokenSession
from tokenledger.storage.base import StorageWrite

if TYPE_CHECKING:
    from tokenledger.storage.base import StorageBackend

logger = get_logger("ledger")

TransferListener = Callable[[TransferEvent], Union[None, Awaitable[None]]]


def _require_account(account: Any, field: str) -> Address:
    if not isinstance(account, str) or not account.strip():
        raise ValidationError(f"{field} must be a non-empty account identity", field=field)
    if is_zero_address(account):
        raise ValidationError(f"{field} cannot be the zero address", field=field)
    return account


def _require_amount(amount: Any) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValidationError(
            f"amount must be an integer number of base units, got {type(amount).__name__}",
            field="amount",
        )
    if amount < 0:
        raise ValidationError(f"amount must be >= 0, got {amount}", field="amount")
    if amount > MAX_UINT256:
        raise ValidationError("amount exceeds the unsigned 256-bit range", field="amount")
    return amount


class TokenLedger:
    """
    Balance ledger for a single fungible token.

    Create with ``await TokenLedger.deploy(...)`` or reopen persisted state
    with ``await TokenLedger.load(...)``. Mutating calls are serialized per
    ledger; queries read committed state.
    """

    def __init__(
        self,
        storage: StorageBackend,
        info: TokenInfo,
        lock: LedgerLock | None = None,
    ) -> None:
        """
        Bind to already-persisted ledger state. Prefer deploy() or load().

        Args:
            storage: Storage backend holding the ledger's records
            info: Immutable token metadata
            lock: Cross-process write lock (defaults to one on the same storage)
        """
        self._storage = storage
        self._info = info
        self._lock = lock or LedgerLock(storage, info.ledger_id)
        self._mutex = asyncio.Lock()
        self._listeners: list[TransferListener] = []

        prefix = f"token:{info.ledger_id}"
        self._meta_collection = f"{prefix}:meta"
        self._balances_collection = f"{prefix}:balances"
        self._events_collection = f"{prefix}:events"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @classmethod
    async def deploy(
        cls,
        storage: StorageBackend,
        name: str,
        symbol: str,
        creator: Address,
        ledger_id: str | None = None,
        lock: LedgerLock | None = None,
        listeners: list[TransferListener] | None = None,
    ) -> TokenLedger:
        """
        Create a new ledger and mint the initial supply to its creator.

        Args:
            storage: Storage backend for the ledger's records
            name: Display name
            symbol: Ticker symbol
            creator: Identity that receives INITIAL_SUPPLY and becomes owner
            ledger_id: Identifier to deploy under (generated when omitted)
            lock: Optional pre-configured write lock
            listeners: Subscribers registered before the initial mint is emitted

        Returns:
            The deployed ledger

        Raises:
            ValidationError: On empty name/symbol or malformed creator
            LedgerStateError: If ledger_id already holds a ledger
        """
        if not isinstance(name, str) or not name:
            raise ValidationError("Token name must be a non-empty string", field="name")
        if not isinstance(symbol, str) or not symbol:
            raise ValidationError("Token symbol must be a non-empty string", field="symbol")
        creator = _require_account(creator, "creator")

        info = TokenInfo(
            ledger_id=ledger_id or str(uuid.uuid4()),
            name=name,
            symbol=symbol,
            owner=creator,
            decimals=DEFAULT_DECIMALS,
        )
        ledger = cls(storage, info, lock=lock)
        for listener in listeners or []:
            ledger.subscribe(listener)

        async with ledger._mutex:
            async with ledger._lock.hold():
                if await storage.get(ledger._meta_collection, "token") is not None:
                    raise LedgerStateError(
                        f"Ledger {info.ledger_id} is already deployed", ledger_id=info.ledger_id
                    )

                event = ledger._new_event(0, ZERO_ADDRESS, creator, INITIAL_SUPPLY)
                await storage.commit(
                    [
                        StorageWrite(ledger._meta_collection, "token", info.to_dict()),
                        *ledger._state_writes(
                            {creator: INITIAL_SUPPLY}, INITIAL_SUPPLY, event
                        ),
                    ]
                )

            logger.info(
                f"Deployed {symbol} ledger {info.ledger_id} "
                f"(owner: {creator}, supply: {INITIAL_SUPPLY})"
            )
            await ledger._notify(event)
        return ledger

    @classmethod
    async def load(
        cls,
        storage: StorageBackend,
        ledger_id: str,
        lock: LedgerLock | None = None,
    ) -> TokenLedger:
        """
        Reopen a ledger previously deployed on this storage.

        Raises:
            LedgerStateError: If no ledger exists under ledger_id
        """
        data = await storage.get(f"token:{ledger_id}:meta", "token")
        if data is None:
            raise LedgerStateError(f"Ledger {ledger_id} not found", ledger_id=ledger_id)
        return cls(storage, TokenInfo.from_dict(data), lock=lock)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def ledger_id(self) -> str:
        return self._info.ledger_id

    @property
    def info(self) -> TokenInfo:
        return self._info

    @property
    def name(self) -> str:
        return self._info.name

    @property
    def symbol(self) -> str:
        return self._info.symbol

    @property
    def owner(self) -> Address:
        return self._info.owner

    @property
    def decimals(self) -> int:
        return self._info.decimals

    async def total_supply(self) -> int:
        """Current total supply in base units."""
        supply, _ = await self._read_supply()
        return supply

    async def balance_of(self, account: Address) -> int:
        """Balance of account in base units; 0 for accounts never credited."""
        if not isinstance(account, str):
            return 0
        data = await self._storage.get(self._balances_collection, account)
        return int(data["balance"]) if data else 0

    async def balances(self) -> dict[Address, int]:
        """Balances of every account the ledger has ever touched."""
        rows = await self._storage.query(self._balances_collection)
        return {row["_key"]: int(row["balance"]) for row in rows}

    async def events(self, start: int = 0) -> list[TransferEvent]:
        """
        The notification log, in the order operations were applied.

        Args:
            start: First sequence number to return
        """
        rows = await self._storage.query(self._events_collection)
        events = [TransferEvent.from_dict(row) for row in rows]
        return sorted(
            (e for e in events if e.sequence >= start), key=lambda e: e.sequence
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def transfer(self, caller: Address, to: Address, amount: int) -> TransferEvent:
        """
        Move amount from caller to to.

        Self-transfers and zero amounts succeed and still emit an event.

        Raises:
            ValidationError: Malformed caller, recipient or amount
            InsufficientBalanceError: caller holds less than amount
        """
        caller = _require_account(caller, "caller")
        to = _require_account(to, "to")
        amount = _require_amount(amount)

        async with self._mutex:
            async with self._lock.hold():
                supply, sequence = await self._read_supply()
                from_balance = await self.balance_of(caller)
                if from_balance < amount:
                    logger.info(
                        f"Rejected transfer of {amount} from {caller}: balance {from_balance}"
                    )
                    raise InsufficientBalanceError(
                        f"Insufficient balance for transfer from {caller}",
                        account=caller,
                        current_balance=from_balance,
                        required_amount=amount,
                    )

                updates = {caller: from_balance - amount}
                to_balance = updates[to] if to in updates else await self.balance_of(to)
                updates[to] = to_balance + amount

                event = self._new_event(sequence, caller, to, amount)
                await self._storage.commit(self._state_writes(updates, supply, event))

            logger.debug(f"Transfer #{sequence}: {amount} from {caller} to {to}")
            await self._notify(event)
        return event

    async def mint(self, caller: Address, to: Address, amount: int) -> TransferEvent:
        """
        Create amount new tokens and credit them to to. Owner only.

        Raises:
            UnauthorizedError: caller is not the owner
            ValidationError: Malformed recipient or amount
            SupplyOverflowError: Supply would exceed the unsigned 256-bit range
        """
        caller = _require_account(caller, "caller")
        if caller != self.owner:
            logger.info(f"Rejected mint by non-owner {caller}")
            raise UnauthorizedError(
                "Only the owner can mint", account=caller, owner=self.owner
            )
        to = _require_account(to, "to")
        amount = _require_amount(amount)

        async with self._mutex:
            async with self._lock.hold():
                supply, sequence = await self._read_supply()
                if supply + amount > MAX_UINT256:
                    logger.info(f"Rejected mint of {amount}: supply {supply} would overflow")
                    raise SupplyOverflowError(
                        "Mint would overflow total supply", total_supply=supply, amount=amount
                    )

                updates = {to: await self.balance_of(to) + amount}
                event = self._new_event(sequence, ZERO_ADDRESS, to, amount)
                await self._storage.commit(self._state_writes(updates, supply + amount, event))

            logger.debug(f"Mint #{sequence}: {amount} to {to}")
            await self._notify(event)
        return event

    async def burn(self, caller: Address, amount: int) -> TransferEvent:
        """
        Destroy amount of caller's own tokens.

        Raises:
            ValidationError: Malformed caller or amount
            InsufficientBalanceError: caller holds less than amount
        """
        caller = _require_account(caller, "caller")
        amount = _require_amount(amount)

        async with self._mutex:
            async with self._lock.hold():
                supply, sequence = await self._read_supply()
                balance = await self.balance_of(caller)
                if balance < amount:
                    logger.info(f"Rejected burn of {amount} by {caller}: balance {balance}")
                    raise InsufficientBalanceError(
                        f"Insufficient balance to burn from {caller}",
                        account=caller,
                        current_balance=balance,
                        required_amount=amount,
                    )

                event = self._new_event(sequence, caller, ZERO_ADDRESS, amount)
                await self._storage.commit(
                    self._state_writes({caller: balance - amount}, supply - amount, event)
                )

            logger.debug(f"Burn #{sequence}: {amount} from {caller}")
            await self._notify(event)
        return event

    def connect(self, account: Address) -> TokenSession:
        """Bind this ledger to a caller identity."""
        return TokenSession(self, account)

    # ------------------------------------------------------------------
    # Notification sink
    # ------------------------------------------------------------------

    def subscribe(self, listener: TransferListener) -> None:
        """
        Register a callback for every committed TransferEvent.

        The listener may be sync or async; it is called after the commit,
        in commit order, while the write mutex is still held. Listeners must
        not call mutating methods of the same ledger.
        """
        self._listeners.append(listener)

    def unsubscribe(self, listener: TransferListener) -> bool:
        """Remove a listener. Returns False if it was not registered."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            return False
        return True

    async def _notify(self, event: TransferEvent) -> None:
        for listener in list(self._listeners):
            try:
                result = listener(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                # Already committed; remaining listeners still run
                logger.exception(f"Transfer listener failed on event #{event.sequence}")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _read_supply(self) -> tuple[int, int]:
        """Return (total_supply, next event sequence)."""
        data = await self._storage.get(self._meta_collection, "supply")
        if data is None:
            return 0, 0
        return int(data["total_supply"]), int(data["event_count"])

    def _new_event(
        self, sequence: int, from_address: Address, to_address: Address, amount: int
    ) -> TransferEvent:
        return TransferEvent(
            sequence=sequence,
            from_address=from_address,
            to_address=to_address,
            amount=amount,
            ledger_id=self.ledger_id,
            timestamp=datetime.now(),
        )

    def _state_writes(
        self,
        balances: dict[Address, int],
        total_supply: int,
        event: TransferEvent,
    ) -> list[StorageWrite]:
        writes = [
            StorageWrite(self._balances_collection, account, {"balance": str(balance)})
            for account, balance in balances.items()
        ]
        writes.append(
            StorageWrite(
                self._meta_collection,
                "supply",
                {"total_supply": str(total_supply), "event_count": event.sequence + 1},
            )
        )
        writes.append(
            StorageWrite(self._events_collection, f"{event.sequence:012d}", event.to_dict())
        )
        return writes
