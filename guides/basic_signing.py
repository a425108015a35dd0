"""Simple example showing signing and peer verification."""

import asyncio
import time

from jwtwallet import JwtWalletService, WalletConfig, WalletError
from jwtwallet.registry import InMemoryKeyRegistry


async def main():
    """Two wallets sharing one registry verify each other's tokens."""
    # Shared registry (use the sqlite or kubernetes backend across processes)
    registry = InMemoryKeyRegistry()

    orders = WalletConfig(
        issuer="orders.example",
        namespace="shop",
        key_expiration_seconds=3600,
        key_rotation_interval_seconds=300,
    )
    billing = orders.model_copy(update={"issuer": "billing.example"})

    async with JwtWalletService(orders, registry=registry) as orders_wallet, JwtWalletService(
        billing, registry=registry
    ) as billing_wallet:
        token = orders_wallet.sign_token(
            {"sub": "cust-123", "aud": "billing"}, int(time.time()) + 600
        )
        print(f"✅ Token signed by {orders.issuer}")

        claims = await billing_wallet.verify_token(token, audience="billing")
        print(f"🔑 Verified by {billing.issuer}: {claims}")

        # Rotating keeps older tokens verifiable through the registry
        await orders_wallet.rotation.rotate()
        claims = await billing_wallet.verify_token(token, audience="billing")
        print(f"🔁 Still valid after rotation: sub={claims['sub']}")

        try:
            await billing_wallet.verify_token(token.replace(token.split(".")[0], "e30"), "billing")
        except WalletError as err:
            print(f"❌ Rejected: {err} ({err.kind.value})")


if __name__ == "__main__":
    asyncio.run(main())
