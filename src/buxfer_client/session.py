from __future__ import annotations

import getpass
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Protocol

from .api.client import BuxferClient, Endpoint, is_ok
from .api.models import Account, Tag
from .config import Settings
from .errors import AuthError, ValidationError
from .readers import list_accounts, list_tags
from .storage.token_store import TokenStore
from .transactions.encoding import encode_transaction
from .transactions.query import TransactionQuery
from .transactions.reader import TransactionListing, list_transactions
from .transactions.types import TransactionRequest
from .transactions.writer import submit_encoded
from .types import DryRun

logger = logging.getLogger(__name__)

# rendered in dry runs when no token is known yet
TOKEN_PLACEHOLDER = "<token>"


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"


class CredentialProvider(Protocol):
    def get_credentials(self, username: str | None = None) -> Credentials: ...


class PromptCredentialProvider:
    """Asks on the terminal; the password is read without echo."""

    def __init__(self, input_fn=input, getpass_fn=getpass.getpass):
        self._input = input_fn
        self._getpass = getpass_fn

    def get_credentials(self, username: str | None = None) -> Credentials:
        if not username:
            username = self._input("Buxfer username: ").strip()
        password = self._getpass(f"Password for {username}: ")
        return Credentials(username=username, password=password)


class EnvCredentialProvider:
    """BUXFER_USERNAME / BUXFER_PASSWORD from settings."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def get_credentials(self, username: str | None = None) -> Credentials:
        return Credentials(
            username=username or self._settings.username or "",
            password=self._settings.password or "",
        )


class StaticCredentialProvider:
    def __init__(self, username: str, password: str):
        self._credentials = Credentials(username=username, password=password)

    def get_credentials(self, username: str | None = None) -> Credentials:
        if username and username != self._credentials.username:
            return Credentials(username=username, password=self._credentials.password)
        return self._credentials


def login(
    client: BuxferClient,
    username: str | None = None,
    password: str | None = None,
    provider: CredentialProvider | None = None,
) -> str:
    if (not username or not password) and provider is not None:
        creds = provider.get_credentials(username)
        username = username or creds.username
        password = password or creds.password

    if not username:
        raise ValidationError("username must not be empty")
    if not password:
        raise ValidationError("password must not be empty")

    response = client.post(Endpoint.LOGIN, {"userid": username, "password": password})
    if not is_ok(response):
        status = str(response.get("status"))
        logger.warning("Login rejected for %s: %s", username, status)
        raise AuthError(f"Login failed for {username}: {status}", status=status)

    token = response.get("token")
    if not token:
        raise AuthError(f"Login for {username} returned no token", status=str(response.get("status")))

    logger.info("Logged in as %s", username)
    return str(token)


class Session:
    """
    Holds the client, the credential source and the default token.

    Every operation takes an optional token. Without one the session looks,
    in order, at its own default, BUXFER_TOKEN, the persisted token, and
    finally logs in through the credential provider.
    """

    def __init__(
        self,
        settings: Settings,
        client: BuxferClient | None = None,
        credential_provider: CredentialProvider | None = None,
        token_store: TokenStore | None = None,
    ):
        self.settings = settings
        self.client = client or BuxferClient(base_url=settings.base_url, timeout_s=settings.timeout_s)
        self.credential_provider = credential_provider or PromptCredentialProvider()
        self.token_store = token_store or TokenStore(settings.cache_dir, settings.master_key)
        self._default_token: str | None = None

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def default_token(self) -> str | None:
        return self._default_token

    def set_default_token(self, token: str, persist: bool = False, username: str | None = None) -> None:
        if not token:
            raise ValidationError("token must not be empty")
        self._default_token = token
        if persist:
            path = self.token_store.save(token, username=username)
            logger.info("Default token saved to %s", path)

    def new_token(self, username: str | None = None, save: bool = False) -> str:
        username = username or self.settings.username
        token = login(self.client, username=username, provider=self.credential_provider)
        if save:
            self.set_default_token(token, persist=True, username=username)
        return token

    def _known_token(self) -> str | None:
        if self._default_token:
            return self._default_token
        if self.settings.token:
            return self.settings.token
        stored = self.token_store.load()
        return stored.token if stored else None

    def resolve_token(self, token: str | None = None) -> str:
        if token:
            return token

        known = self._known_token()
        if known:
            return known

        logger.info("No token configured, logging in")
        token = self.new_token()
        self._default_token = token
        return token

    def _token_for(self, token: str | None, dry_run: bool) -> str:
        if dry_run:
            return token or self._known_token() or TOKEN_PLACEHOLDER
        return self.resolve_token(token)

    def list_accounts(self, token: str | None = None) -> list[Account] | None:
        return list_accounts(self.client, self.resolve_token(token))

    def list_tags(self, token: str | None = None) -> list[Tag] | None:
        return list_tags(self.client, self.resolve_token(token))

    def list_transactions(
        self,
        query: TransactionQuery | None = None,
        token: str | None = None,
        *,
        exhaustive: bool = False,
        dry_run: bool = False,
        today: date | None = None,
    ) -> TransactionListing | DryRun | None:
        return list_transactions(
            None if dry_run else self.client,
            query or TransactionQuery(),
            self._token_for(token, dry_run),
            exhaustive=exhaustive,
            dry_run=dry_run,
            today=today,
        )

    def add_transaction(
        self,
        req: TransactionRequest,
        token: str | None = None,
        *,
        dry_run: bool = False,
    ) -> dict[str, Any] | DryRun | None:
        encoded = encode_transaction(req)
        return submit_encoded(
            None if dry_run else self.client,
            encoded,
            self._token_for(token, dry_run),
            dry_run=dry_run,
        )
