"""Unit tests for type definitions."""

from datetime import datetime

from tokenledger.core.types import (
    INITIAL_SUPPLY,
    MAX_UINT256,
    ZERO_ADDRESS,
    TokenInfo,
    TransferEvent,
    is_zero_address,
)


class TestConstants:
    def test_zero_address(self):
        assert ZERO_ADDRESS == "0x0000000000000000000000000000000000000000"
        assert is_zero_address(ZERO_ADDRESS)
        assert is_zero_address("0X" + "0" * 40)
        assert not is_zero_address("0xabc")
        assert not is_zero_address(None)

    def test_supply_constants(self):
        assert INITIAL_SUPPLY == 1_000_000 * 10**18
        assert MAX_UINT256 == 2**256 - 1


class TestTransferEvent:
    def test_mint_and_burn_flags(self):
        mint = TransferEvent(sequence=0, from_address=ZERO_ADDRESS, to_address="0xa", amount=1)
        burn = TransferEvent(sequence=1, from_address="0xa", to_address=ZERO_ADDRESS, amount=1)
        move = TransferEvent(sequence=2, from_address="0xa", to_address="0xb", amount=1)

        assert mint.is_mint and not mint.is_burn
        assert burn.is_burn and not burn.is_mint
        assert not move.is_mint and not move.is_burn

    def test_to_dict_serializes_amount_as_string(self):
        event = TransferEvent(
            sequence=3,
            from_address="0xa",
            to_address="0xb",
            amount=2**200,
            ledger_id="mtt",
        )
        d = event.to_dict()

        assert d["amount"] == str(2**200)
        assert d["sequence"] == 3
        assert d["ledger_id"] == "mtt"
        assert "timestamp" in d
        assert "id" in d

    def test_from_dict_restores_event(self):
        event = TransferEvent(
            sequence=5,
            from_address="0xa",
            to_address="0xb",
            amount=123,
            ledger_id="mtt",
            timestamp=datetime(2024, 1, 2, 3, 4, 5, 678),
        )

        assert TransferEvent.from_dict(event.to_dict()) == event


class TestTokenInfo:
    def test_from_dict_restores_info(self):
        info = TokenInfo(ledger_id="mtt", name="My Test Token", symbol="MTT", owner="0xa")

        restored = TokenInfo.from_dict(info.to_dict())

        assert restored == info
        assert restored.decimals == 18
