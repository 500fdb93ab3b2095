"""Tests for TokenLedgerClient."""

import logging

import pytest

from tokenledger import TokenLedgerClient
from tokenledger.core.config import Config
from tokenledger.core.exceptions import LedgerBusyError, LedgerStateError
from tokenledger.core.logging import JsonFormatter
from tokenledger.core.types import INITIAL_SUPPLY, ZERO_ADDRESS
from tokenledger.storage import InMemoryStorage, RedisStorage


@pytest.fixture
def client(storage):
    return TokenLedgerClient(config=Config(lock_retry_count=0), storage=storage)


class TestClientInit:
    def test_uses_given_storage_and_config(self, storage):
        config = Config(env="test")
        client = TokenLedgerClient(config=config, storage=storage)

        assert client.config is config
        assert client.storage is storage

    def test_builds_storage_from_config(self):
        client = TokenLedgerClient(config=Config(storage_backend="memory"))
        assert isinstance(client.storage, InMemoryStorage)

    def test_builds_redis_storage_from_config(self):
        client = TokenLedgerClient(
            config=Config(storage_backend="redis", redis_url="redis://cache:6379/3")
        )
        assert isinstance(client.storage, RedisStorage)
        assert client.storage._redis_url == "redis://cache:6379/3"

    def test_json_logging_from_config(self, storage):
        TokenLedgerClient(config=Config(log_json=True), storage=storage)

        handler = logging.getLogger("tokenledger").handlers[0]
        assert isinstance(handler.formatter, JsonFormatter)

    def test_reads_env(self, monkeypatch):
        monkeypatch.setenv("TOKENLEDGER_ENV", "staging")
        monkeypatch.setenv("TOKENLEDGER_STORAGE_BACKEND", "memory")

        client = TokenLedgerClient()

        assert client.config.env == "staging"


class TestClientLedgers:
    @pytest.mark.asyncio
    async def test_deploy_and_load(self, client, owner, addr1):
        token = await client.deploy("My Test Token", "MTT", owner, ledger_id="mtt")
        await token.transfer(owner, addr1, 100)

        loaded = await client.load("mtt")

        assert loaded.symbol == "MTT"
        assert await loaded.balance_of(addr1) == 100
        assert await loaded.total_supply() == INITIAL_SUPPLY

    @pytest.mark.asyncio
    async def test_deploy_with_listeners(self, client, owner):
        received = []
        await client.deploy("My Test Token", "MTT", owner, listeners=[received.append])

        assert [e.as_tuple() for e in received] == [(ZERO_ADDRESS, owner, INITIAL_SUPPLY)]

    @pytest.mark.asyncio
    async def test_ledgers_are_independent(self, client, owner, addr1):
        first = await client.deploy("First", "ONE", owner)
        second = await client.deploy("Second", "TWO", addr1)

        await first.burn(owner, 10)

        assert await first.total_supply() == INITIAL_SUPPLY - 10
        assert await second.total_supply() == INITIAL_SUPPLY
        assert await second.balance_of(owner) == 0

    @pytest.mark.asyncio
    async def test_load_missing(self, client):
        with pytest.raises(LedgerStateError):
            await client.load("nope")

    @pytest.mark.asyncio
    async def test_lock_settings_from_config(self, client, storage, owner, addr1):
        token = await client.deploy("My Test Token", "MTT", owner, ledger_id="mtt")
        await storage.acquire_lock("lock:ledger:mtt")

        # lock_retry_count=0: the first contended attempt gives up
        with pytest.raises(LedgerBusyError):
            await token.transfer(owner, addr1, 1)

    @pytest.mark.asyncio
    async def test_health_check_and_close(self, client):
        assert await client.health_check() is True
        async with client as c:
            assert c is client
