import pytest
import pytest_asyncio

from tokenledger.core.units import parse_ether
from tokenledger.ledger import TokenLedger
from tokenledger.storage.memory import InMemoryStorage

NAME = "My Test Token"
SYMBOL = "MTT"
INITIAL_SUPPLY = parse_ether("1000000")


@pytest.fixture
def owner() -> str:
    return "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


@pytest.fixture
def addr1() -> str:
    return "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"


@pytest.fixture
def addr2() -> str:
    return "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC"


@pytest.fixture
def storage() -> InMemoryStorage:
    """Fresh in-memory storage per test."""
    return InMemoryStorage()


@pytest_asyncio.fixture
async def token(storage, owner) -> TokenLedger:
    """A freshly deployed 'My Test Token' ledger owned by `owner`."""
    return await TokenLedger.deploy(storage, NAME, SYMBOL, owner, ledger_id="mtt")
