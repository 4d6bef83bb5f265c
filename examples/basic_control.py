"""Set a thermostat's mode and temperature."""

import asyncio

from pyzenwifi import InvalidParameterError, ZenClient


async def main() -> None:
    """Heat to 21C, then turn the thermostat off."""
    async with ZenClient(username="your@email.com", password="your_password") as client:
        consumer_id = await client.get_consumer_id()
        devices = await client.get_device_list(consumer_id)
        if not devices:
            print("No thermostats found")
            return

        device_id = devices[0].device_id

        print("Setting heat to 21C...")
        await client.set_mode_and_temperature(device_id, "heat", 21)

        status = await client.get_device_status(device_id)
        print(f"Mode is now {status.mode_name}, setpoint {status.heating_setpoint}C")

        print("Turning off...")
        await client.set_mode_and_temperature(device_id, "off")

        try:
            await client.set_mode_and_temperature(device_id, "eco", 19)
        except InvalidParameterError as err:
            print(f"Rejected: {err}")


if __name__ == "__main__":
    asyncio.run(main())
