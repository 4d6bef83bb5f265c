"""Pytest configuration and fixtures for integration tests."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from dotenv import load_dotenv

from pyzenwifi import ZenClient
from pyzenwifi.const import DEFAULT_API_HOST


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator


# Load .env file from project root
env_path = Path(__file__).parents[2] / ".env"
load_dotenv(env_path)


@pytest.fixture(scope="session")
def integration_config() -> dict[str, str]:
    """Load integration test configuration from environment.

    Returns:
        Dictionary with API credentials and configuration.
    """
    username = os.getenv("ZEN_USERNAME")
    password = os.getenv("ZEN_PASSWORD")
    api_host = os.getenv("ZEN_API_HOST", DEFAULT_API_HOST)

    if not username or not password:
        pytest.skip("ZEN_USERNAME and/or ZEN_PASSWORD not set in environment or .env file")

    return {
        "username": username,
        "password": password,
        "api_host": api_host,
    }


@pytest.fixture
async def integration_client(integration_config: dict[str, str]) -> AsyncGenerator[ZenClient]:
    """Create a logged-in client against the real API."""
    async with ZenClient(
        username=integration_config["username"],
        password=integration_config["password"],
        api_host=integration_config["api_host"],
    ) as client:
        yield client
