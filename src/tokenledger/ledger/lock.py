"""
Ledger Lock Service.

Serializes mutating ledger operations across every process that shares a
storage backend, so a balance read and the commit that depends on it are
never interleaved with another writer.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from tenacity import AsyncRetrying, RetryError, retry_if_result, stop_after_attempt, wait_fixed

from tokenledger.core.exceptions import LedgerBusyError

if TYPE_CHECKING:
    from tokenledger.storage.base import StorageBackend

logger = logging.getLogger(__name__)


class LedgerLock:
    """
    Storage-backed mutex for one ledger.

    Implements a distributed lock pattern using the storage backend's
    ownership-token locks.
    """

    def __init__(
        self,
        storage: StorageBackend,
        ledger_id: str,
        ttl: int = 30,
        retry_count: int = 20,
        retry_delay: float = 0.05,
    ) -> None:
        """
        Initialize lock service.

        Args:
            storage: Storage backend (Redis/Memory)
            ledger_id: Ledger whose writes this lock serializes
            ttl: Lock time-to-live in seconds
            retry_count: Number of retries if lock is held
            retry_delay: Delay between retries in seconds
        """
        self._storage = storage
        self._ledger_id = ledger_id
        self._ttl = ttl
        self._retry_count = retry_count
        self._retry_delay = retry_delay

    @property
    def key(self) -> str:
        return f"lock:ledger:{self._ledger_id}"

    async def acquire(
        self,
        retry_count: int | None = None,
        retry_delay: float | None = None,
    ) -> str | None:
        """
        Acquire the ledger lock.

        Returns:
            lock_token (str) if successful, None if still held after all retries
        """
        retries = self._retry_count if retry_count is None else retry_count
        delay = self._retry_delay if retry_delay is None else retry_delay

        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_result(lambda token: token is None),
                stop=stop_after_attempt(retries + 1),
                wait=wait_fixed(delay),
                before_sleep=lambda state: logger.debug(
                    f"Ledger {self._ledger_id} locked, retrying in {delay}s "
                    f"(attempt {state.attempt_number})"
                ),
            ):
                with attempt:
                    token = await self._storage.acquire_lock(self.key, self._ttl)
                if not attempt.retry_state.outcome.failed:
                    attempt.retry_state.set_result(token)
        except RetryError:
            logger.warning(
                f"Failed to acquire lock for ledger {self._ledger_id} after {retries} retries"
            )
            return None

        logger.debug(f"Acquired lock for ledger {self._ledger_id} (token: {token[:8]}...)")
        return token

    async def release(self, lock_token: str) -> bool:
        """
        Release a previously acquired lock.

        Args:
            lock_token: The ownership token returned by acquire()

        Returns:
            True if released, False if not held or token mismatch
        """
        result = await self._storage.release_lock(self.key, lock_token)
        if result:
            logger.debug(f"Released lock for ledger {self._ledger_id}")
        return result

    @asynccontextmanager
    async def hold(self) -> AsyncIterator[str]:
        """
        Hold the lock for the duration of the block.

        Raises:
            LedgerBusyError: If the lock could not be acquired
        """
        token = await self.acquire()
        if token is None:
            raise LedgerBusyError(
                f"Ledger {self._ledger_id} is locked by another writer",
                ledger_id=self._ledger_id,
            )
        try:
            yield token
        finally:
            await self.release(token)
