"""Token store and authentication handler for the Zen thermostat API."""

from __future__ import annotations

import asyncio
import logging
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

from aiohttp import ClientError, ClientSession, ClientTimeout

from pyzenwifi.const import GRANT_TYPE_PASSWORD, GRANT_TYPE_REFRESH_TOKEN, TOKEN_ENDPOINT
from pyzenwifi.exceptions import AuthenticationError, MissingTokensError
from pyzenwifi.models import ClientConfig, TokenPair
from pyzenwifi.parsers import parse_token_pair, read_response_body


if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

_LOGGER = logging.getLogger(__name__)


class TokenStore:
    """In-memory holder of the current access/refresh token pair.

    Tokens are opaque: no format or expiry validation is done. Persisting
    them between runs is up to the caller.
    """

    def __init__(self, access_token: str | None = None, refresh_token: str | None = None) -> None:
        """Initialize the store, optionally with previously persisted tokens."""
        self._access_token = access_token
        self._refresh_token = refresh_token

    @property
    def tokens(self) -> TokenPair | None:
        """Return the current pair, or None if either token is missing."""
        if not self.has_tokens():
            return None
        return TokenPair(access_token=self._access_token, refresh_token=self._refresh_token)  # type: ignore[arg-type]

    def has_tokens(self) -> bool:
        """Check whether both tokens are set."""
        return self._access_token is not None and self._refresh_token is not None

    def set_tokens(self, access_token: str | None, refresh_token: str | None) -> None:
        """Replace the stored tokens."""
        self._access_token = access_token
        self._refresh_token = refresh_token

    def get_tokens(self) -> TokenPair:
        """Return the current token pair.

        Raises:
            MissingTokensError: If either token is missing.
        """
        tokens = self.tokens
        if tokens is None:
            msg = "No available tokens. Call authenticate() or set_tokens() first."
            raise MissingTokensError(msg)
        return tokens

    def clear(self) -> None:
        """Forget both tokens."""
        self._access_token = None
        self._refresh_token = None


class AuthenticationHandler:
    """Obtain and refresh OAuth2 tokens from the Zen token endpoint.

    Supports the password grant for the initial login and the refresh_token
    grant for renewing an expired access token. Every successful grant
    replaces the pair held in the TokenStore.

    Token Update Callback:
        Tokens are not persisted by this library. Pass on_tokens_updated to
        be told whenever a grant issues a new pair:

        Example:
            def save_tokens(tokens: TokenPair) -> None:
                my_app.store(tokens.access_token, tokens.refresh_token)

            handler = AuthenticationHandler(on_tokens_updated=save_tokens)

    Refreshes are serialised with a lock. When several requests fail with the
    same stale access token, only the first one performs the refresh grant and
    the others reuse its result.

    Attributes:
        config: Host and timeout settings.
        token_store: Holder of the current token pair.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        token_store: TokenStore | None = None,
        session: ClientSession | None = None,
        on_tokens_updated: Callable[[TokenPair], None] | None = None,
    ) -> None:
        """Initialize the authentication handler.

        Args:
            config: Host and timeout settings. Defaults to the production host.
            token_store: Optional TokenStore, e.g. one pre-loaded with persisted
                tokens. A new empty store is created if not provided.
            session: Optional aiohttp ClientSession. If not provided, one will be
                created when entering the context manager.
            on_tokens_updated: Optional callback invoked with the new TokenPair
                after every successful grant.
        """
        self.config = config or ClientConfig()
        self.token_store = token_store if token_store is not None else TokenStore()

        self._session = session
        self._owns_session = session is None
        self._refresh_lock = asyncio.Lock()
        self._on_tokens_updated = on_tokens_updated

    def set_session(self, session: ClientSession) -> None:
        """Set the aiohttp session for this handler.

        The handler will not take ownership and will not close this session.

        Args:
            session: The aiohttp ClientSession to use for requests.
        """
        self._session = session
        self._owns_session = False

    async def __aenter__(self) -> AuthenticationHandler:
        """Enter the context manager.

        Creates a new aiohttp session if one wasn't provided during initialization.

        Returns:
            Self for use in async with statements.
        """
        if self._session is None:
            self._session = ClientSession()
            self._owns_session = True
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the context manager, closing the session if this handler created it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    def set_tokens(self, access_token: str | None, refresh_token: str | None) -> None:
        """Inject tokens, typically ones persisted from an earlier run."""
        self.token_store.set_tokens(access_token, refresh_token)

    def get_tokens(self) -> TokenPair:
        """Return the current token pair.

        Raises:
            MissingTokensError: If no tokens are set.
        """
        return self.token_store.get_tokens()

    def is_authenticated(self) -> bool:
        """Check if both tokens are available."""
        return self.token_store.has_tokens()

    def clear_authentication(self) -> None:
        """Forget the stored tokens."""
        self.token_store.clear()
        _LOGGER.debug("Authentication state cleared")

    def _validate_session(self) -> None:
        """Validate that the session is initialized and open.

        Raises:
            RuntimeError: If session is not initialized or is closed.
        """
        if self._session is None:
            msg = "Session not initialized. Use 'async with' or provide a session."
            raise RuntimeError(msg)

        if self._session.closed:
            msg = "Session is closed. Cannot make requests."
            raise RuntimeError(msg)

    async def authenticate(self, username: str, password: str) -> TokenPair:
        """Exchange username and password for a token pair (password grant).

        Args:
            username: Account email address.
            password: Account password.

        Returns:
            The newly issued TokenPair, which is also stored.

        Raises:
            AuthenticationError: If the token endpoint rejects the credentials.
                Stored tokens are left untouched.
            aiohttp.ClientError: If a connection error occurs.
            TimeoutError: If the request times out.
        """
        data = {
            "grant_type": GRANT_TYPE_PASSWORD,
            "username": username,
            "password": password,
        }
        tokens = await self._request_tokens("Authentication failed", data=data)
        _LOGGER.info("Authentication successful")
        return tokens

    async def refresh_token_grant(self) -> TokenPair:
        """Exchange the stored refresh token for a new token pair.

        Returns:
            The newly issued TokenPair, which is also stored.

        Raises:
            MissingTokensError: If no tokens are set.
            AuthenticationError: If the token endpoint rejects the refresh token.
            aiohttp.ClientError: If a connection error occurs.
            TimeoutError: If the request times out.
        """
        async with self._refresh_lock:
            return await self._refresh_token_grant()

    async def refresh_after_failure(self, stale_access_token: str) -> TokenPair:
        """Refresh tokens after an API call was rejected.

        If another request already replaced the stale access token while this
        one was waiting for the lock, the current pair is returned without a
        second refresh grant.

        Args:
            stale_access_token: Access token the failed request was sent with.

        Returns:
            The token pair the retry should use.

        Raises:
            AuthenticationError: If the refresh grant fails.
        """
        async with self._refresh_lock:
            current = self.token_store.tokens
            if current is not None and current.access_token != stale_access_token:
                _LOGGER.debug("Tokens already refreshed by a concurrent request")
                return current

            _LOGGER.warning("Access token rejected, attempting refresh token grant")
            return await self._refresh_token_grant()

    def should_retry_on_status(self, status_code: int) -> bool:
        """Check if a status code should trigger a refresh and retry.

        Every non-200 status is treated as an expired access token.

        Args:
            status_code: HTTP status code from API response.
        """
        return status_code != HTTPStatus.OK

    async def _refresh_token_grant(self) -> TokenPair:
        """Perform the refresh grant. Callers must hold the refresh lock."""
        current = self.token_store.get_tokens()
        payload = {
            "grant_type": GRANT_TYPE_REFRESH_TOKEN,
            "refresh_token": current.refresh_token,
        }
        tokens = await self._request_tokens("Refresh token failed", json_data=payload)
        _LOGGER.info("Refresh token grant successful")
        return tokens

    async def _request_tokens(
        self,
        failure_message: str,
        *,
        data: dict[str, str] | None = None,
        json_data: dict[str, Any] | None = None,
    ) -> TokenPair:
        """POST a grant to the token endpoint and store the issued tokens.

        Args:
            failure_message: Message for the AuthenticationError raised on a
                non-200 response.
            data: Form-encoded grant body.
            json_data: JSON grant body.

        Returns:
            The newly issued TokenPair.
        """
        self._validate_session()
        assert self._session is not None

        url = f"{self.config.base_url}{TOKEN_ENDPOINT}"
        headers = {"Accept": "application/json"}
        timeout = ClientTimeout(total=self.config.timeout)

        _LOGGER.debug("Requesting tokens from %s", url)

        try:
            async with self._session.post(
                url,
                data=data,
                json=json_data,
                headers=headers,
                timeout=timeout,
            ) as response:
                body = await read_response_body(response)
                if response.status != HTTPStatus.OK:
                    _LOGGER.debug("Token request failed with status %d", response.status)
                    raise AuthenticationError(failure_message, response.status, body)

        except TimeoutError:
            _LOGGER.exception("Token request to %s timed out", url)
            raise

        except ClientError:
            _LOGGER.exception("Connection error for %s", url)
            raise

        tokens = parse_token_pair(body)
        self.token_store.set_tokens(tokens.access_token, tokens.refresh_token)

        if self._on_tokens_updated is not None:
            self._on_tokens_updated(tokens)

        return tokens
