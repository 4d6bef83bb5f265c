"""Integration tests for pyzenwifi library.

These tests use real API credentials from .env file and make actual API calls.
They are marked with @pytest.mark.integration and skipped by default.

To run integration tests:
    pytest tests/integration -v -m integration

Environment variables required in .env:
    ZEN_USERNAME: Account email
    ZEN_PASSWORD: Account password
    ZEN_API_HOST: API host (optional, defaults to wifi.zenhq.com)
"""
