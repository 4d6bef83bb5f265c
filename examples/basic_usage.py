"""Basic usage example for pyzenwifi library."""

import asyncio

from pyzenwifi import ZenClient


async def main() -> None:
    """Log in, list thermostats and print their state."""
    async with ZenClient(
        username="your@email.com",
        password="your_password",
    ) as client:
        print("Connected to Zen API")

        consumer_id = await client.get_consumer_id()
        devices = await client.get_device_list(consumer_id)
        print(f"Found {len(devices)} thermostat(s)")

        for device in devices:
            status = await client.get_device_status(device.device_id)
            print(f"\nThermostat: {device.name}")
            print(f"  Device ID: {device.device_id}")
            print(f"  Online: {status.is_online}")
            print(f"  Mode: {status.mode_name}")
            print(f"  Temperature: {status.current_temperature}C")
            print(f"  Heating setpoint: {status.heating_setpoint}C")
            print(f"  Cooling setpoint: {status.cooling_setpoint}C")
            print(f"  Heating: {status.is_heating}  Cooling: {status.is_cooling}")


if __name__ == "__main__":
    asyncio.run(main())
