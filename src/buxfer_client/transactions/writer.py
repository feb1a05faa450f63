from __future__ import annotations

import logging
from typing import Any

from ..api.client import BuxferClient, Endpoint, is_ok
from ..types import DryRun
from .encoding import EncodedTransaction, encode_transaction
from .types import TransactionRequest

logger = logging.getLogger(__name__)

SMS_FORMAT = "sms"


def submit_encoded(
    client: BuxferClient | None,
    encoded: EncodedTransaction,
    token: str,
    *,
    dry_run: bool = False,
) -> dict[str, Any] | DryRun | None:
    form = {"token": token, "format": SMS_FORMAT, "text": encoded.text}

    if dry_run:
        logger.info("Dry run, not submitting: %s", encoded.text)
        return DryRun(endpoint=Endpoint.ADD_TRANSACTION, params=form)

    if client is None:
        raise ValueError("client is required unless dry_run is set")

    response = client.post(Endpoint.ADD_TRANSACTION, form)
    if not is_ok(response):
        logger.warning("add_transaction: service returned status=%s", response.get("status"))
        return None

    logger.info("Added %s transaction: %s", encoded.type.value, encoded.text)
    return response


def add_transaction(
    client: BuxferClient | None,
    req: TransactionRequest,
    token: str,
    *,
    dry_run: bool = False,
) -> dict[str, Any] | DryRun | None:
    """
    Encode `req` as an SMS-format line and submit it.

    Raises ValidationError before any request for contradictory input.
    Returns the service response on success, None when the service rejects
    the line, or the assembled form when `dry_run` is set.
    """
    return submit_encoded(client, encode_transaction(req), token, dry_run=dry_run)
