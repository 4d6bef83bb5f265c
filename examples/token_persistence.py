"""Example persisting tokens between runs.

The library keeps tokens in memory only. This script stores them in a JSON
file so later runs can skip the password login, and rewrites the file
whenever a refresh issues a new pair.
"""

import asyncio
import json
from pathlib import Path

from pyzenwifi import TokenPair, ZenClient


TOKEN_FILE = Path("zen_tokens.json")


def load_tokens() -> TokenPair | None:
    """Load tokens saved by an earlier run."""
    if not TOKEN_FILE.exists():
        return None
    data = json.loads(TOKEN_FILE.read_text())
    return TokenPair(access_token=data["access_token"], refresh_token=data["refresh_token"])


def save_tokens(tokens: TokenPair) -> None:
    """Store tokens for the next run."""
    TOKEN_FILE.write_text(
        json.dumps({"access_token": tokens.access_token, "refresh_token": tokens.refresh_token})
    )
    print("Tokens saved")


async def main() -> None:
    """Resume with saved tokens, falling back to a password login."""
    saved = load_tokens()

    async with ZenClient(
        username="your@email.com",
        password="your_password",
        access_token=saved.access_token if saved else None,
        refresh_token=saved.refresh_token if saved else None,
        on_tokens_updated=save_tokens,
    ) as client:
        # A stale access token is refreshed transparently, which calls save_tokens
        user_info = await client.get_user_info()
        print(f"Consumer ID: {user_info.consumer_id}")


if __name__ == "__main__":
    asyncio.run(main())
