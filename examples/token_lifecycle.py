"""
Example: Token Lifecycle

Deploys a token, moves balances around, and prints the transfer log.
"""

import asyncio

from dotenv import load_dotenv

load_dotenv()

from tokenledger import (  # noqa: E402
    InsufficientBalanceError,
    TokenLedgerClient,
    TransferEvent,
    UnauthorizedError,
    format_ether,
    parse_ether,
)

OWNER = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
ALICE = "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC"
BOB = "0x90F79bf6EB2c4f870365E785982E1f101E93b906"


def print_event(event: TransferEvent) -> None:
    kind = "mint" if event.is_mint else "burn" if event.is_burn else "transfer"
    print(f"  #{event.sequence} {kind}: {event.from_address} -> {event.to_address} "
          f"({format_ether(event.amount)})")


async def main():
    print("=== tokenledger Lifecycle Example ===\n")

    async with TokenLedgerClient() as client:
        token = await client.deploy(
            "My Test Token", "MTT", creator=OWNER, listeners=[print_event]
        )
        print(f"Deployed {token.name} ({token.symbol}) as {token.ledger_id}\n")

        owner = token.connect(OWNER)
        alice = token.connect(ALICE)

        print("--- Transfers ---")
        await owner.transfer(ALICE, parse_ether("100"))
        await alice.transfer(BOB, parse_ether("50"))

        print("\n--- Mint and burn ---")
        await owner.mint(ALICE, parse_ether("5000"))
        await alice.burn(parse_ether("25"))

        print("\n--- Rejected calls ---")
        try:
            await alice.mint(ALICE, parse_ether("1"))
        except UnauthorizedError as e:
            print(f"  mint by Alice: {e}")
        try:
            await token.connect(BOB).burn(parse_ether("500"))
        except InsufficientBalanceError as e:
            print(f"  burn by Bob: {e}")

        print("\n--- Balances ---")
        for account, balance in (await token.balances()).items():
            print(f"  {account}: {format_ether(balance)} {token.symbol}")
        print(f"  total supply: {format_ether(await token.total_supply())} {token.symbol}")


if __name__ == "__main__":
    asyncio.run(main())
