from __future__ import annotations

import logging

from .api.client import BuxferClient, Endpoint, is_ok
from .api.models import Account, Tag

logger = logging.getLogger(__name__)


def list_accounts(client: BuxferClient, token: str) -> list[Account] | None:
    response = client.post(Endpoint.ACCOUNTS, {"token": token})
    if not is_ok(response):
        logger.warning("accounts: service returned status=%s", response.get("status"))
        return None
    return [Account.model_validate(x) for x in response.get("accounts") or []]


def list_tags(client: BuxferClient, token: str) -> list[Tag] | None:
    response = client.post(Endpoint.TAGS, {"token": token})
    if not is_ok(response):
        logger.warning("tags: service returned status=%s", response.get("status"))
        return None
    return [Tag.model_validate(x) for x in response.get("tags") or []]
