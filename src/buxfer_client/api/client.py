from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from .. import __version__
from ..errors import ApiError

logger = logging.getLogger(__name__)

STATUS_OK = "OK"

# never written to logs
_SECRET_FIELDS = frozenset({"password", "token"})


class Endpoint:
    LOGIN = "login"
    ACCOUNTS = "accounts"
    TAGS = "tags"
    TRANSACTIONS = "transactions"
    ADD_TRANSACTION = "add_transaction"


def is_ok(response: Mapping[str, Any]) -> bool:
    return response.get("status") == STATUS_OK


def _describe_form(form: Mapping[str, Any]) -> dict[str, Any]:
    return {k: ("***" if k in _SECRET_FIELDS else v) for k, v in form.items()}


class BuxferClient:
    """
    Thin synchronous client for the Buxfer REST API.

    Every endpoint takes a form-encoded POST and answers with
      { "response": { "status": "OK" | <error text>, ...payload } }
    post() returns the inner "response" object. Deciding what a non-OK status
    means is left to the caller.
    """

    def __init__(
        self,
        base_url: str = "https://www.buxfer.com/api",
        timeout_s: float = 20.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self._base_url = base_url.rstrip("/")

        self._client = httpx.Client(
            base_url=self._base_url,
            headers={
                "Accept": "application/json",
                "User-Agent": f"buxfer-client/{__version__}",
            },
            timeout=httpx.Timeout(timeout_s),
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "BuxferClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def post(self, endpoint: str, form: Mapping[str, Any]) -> dict[str, Any]:
        logger.debug("POST %s %s", endpoint, _describe_form(form))

        try:
            resp = self._client.post(f"/{endpoint}", data=dict(form))
        except httpx.HTTPError as e:
            raise ApiError(f"Buxfer request failed: {endpoint}. Error: {e}") from e

        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ApiError(
                f"Buxfer API error: {resp.status_code} {resp.reason_phrase}. Response: {resp.text}",
                status_code=resp.status_code,
            ) from e

        try:
            body = resp.json()
        except ValueError as e:
            raise ApiError(
                f"Buxfer API returned non-JSON body for {endpoint}: {resp.text[:200]}",
                status_code=resp.status_code,
            ) from e

        response = body.get("response") if isinstance(body, dict) else None
        if not isinstance(response, dict):
            raise ApiError(
                f"Buxfer API response for {endpoint} has no 'response' object",
                status_code=resp.status_code,
            )

        logger.debug("POST %s -> status=%s", endpoint, response.get("status"))
        return response
