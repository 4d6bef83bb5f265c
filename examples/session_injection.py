"""Example sharing an application-managed aiohttp session."""

import asyncio

from aiohttp import ClientSession

from pyzenwifi import ZenClient


async def main() -> None:
    """Use a session owned by the application."""
    async with ClientSession() as session:
        client = ZenClient(
            username="your@email.com",
            password="your_password",
            session=session,  # Inject existing session
        )

        async with client:
            consumer_id = await client.get_consumer_id()
            devices = await client.get_device_list(consumer_id)
            print(f"Found {len(devices)} thermostat(s) using injected session")

        # Session remains open after client exits
        print(f"Session closed: {session.closed}")


if __name__ == "__main__":
    asyncio.run(main())
