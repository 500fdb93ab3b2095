"""TokenLedgerClient - Main entry point."""

from __future__ import annotations

import uuid

from tokenledger.core.config import Config
from tokenledger.core.logging import configure_logging, get_logger
from tokenledger.core.types import Address
from tokenledger.ledger import LedgerLock, TokenLedger, TransferListener
from tokenledger.storage import StorageBackend, get_storage


class TokenLedgerClient:
    """
    Main client for tokenledger.

    Owns the configuration, logging setup and storage backend, and hands out
    TokenLedger instances that share them. Several ledgers can live on one
    storage backend side by side.
    """

    def __init__(
        self,
        config: Config | None = None,
        storage: StorageBackend | None = None,
        log_level: int | str | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Configuration (default: Config.from_env())
            storage: Storage backend (default: built from config.storage_backend)
            log_level: Overrides config.log_level
        """
        self._config = config or Config.from_env()

        configure_logging(
            level=log_level or self._config.log_level, json_format=self._config.log_json
        )
        self._logger = get_logger("client")

        if storage is None:
            kwargs = {}
            if self._config.storage_backend == "redis" and self._config.redis_url:
                kwargs["redis_url"] = self._config.redis_url
            storage = get_storage(self._config.storage_backend, **kwargs)
        self._storage = storage

        self._logger.info(
            f"Initializing tokenledger (storage: {type(storage).__name__}, env: {self._config.env})"
        )

    @property
    def config(self) -> Config:
        """Get client configuration."""
        return self._config

    @property
    def storage(self) -> StorageBackend:
        """Get the storage backend."""
        return self._storage

    def _lock_for(self, ledger_id: str) -> LedgerLock:
        return LedgerLock(
            self._storage,
            ledger_id,
            ttl=self._config.lock_ttl,
            retry_count=self._config.lock_retry_count,
            retry_delay=self._config.lock_retry_delay,
        )

    async def deploy(
        self,
        name: str,
        symbol: str,
        creator: Address,
        ledger_id: str | None = None,
        listeners: list[TransferListener] | None = None,
    ) -> TokenLedger:
        """
        Deploy a new token ledger.

        Args:
            name: Token display name
            symbol: Token symbol
            creator: Owner identity receiving the initial supply
            ledger_id: Optional identifier (generated when omitted)
            listeners: Transfer listeners to register before the initial mint

        Returns:
            The deployed TokenLedger
        """
        ledger_id = ledger_id or str(uuid.uuid4())
        return await TokenLedger.deploy(
            self._storage,
            name,
            symbol,
            creator,
            ledger_id=ledger_id,
            lock=self._lock_for(ledger_id),
            listeners=listeners,
        )

    async def load(self, ledger_id: str) -> TokenLedger:
        """Reopen a deployed ledger by identifier."""
        return await TokenLedger.load(self._storage, ledger_id, lock=self._lock_for(ledger_id))

    async def health_check(self) -> bool:
        """Check that the storage backend is reachable."""
        return await self._storage.health_check()

    async def close(self) -> None:
        """Release storage connections."""
        await self._storage.close()

    async def __aenter__(self) -> TokenLedgerClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
