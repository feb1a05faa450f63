from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date

from ..api.client import BuxferClient, Endpoint, is_ok
from ..api.models import Transaction
from ..types import DryRun
from .query import TransactionQuery

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransactionListing:
    transactions: list[Transaction]
    total: int
    pages_fetched: int
    warnings: list[str] = field(default_factory=list)

    @property
    def partial(self) -> bool:
        return len(self.transactions) < self.total


def _parse_batch(response: dict) -> list[Transaction]:
    return [Transaction.model_validate(x) for x in response.get("transactions") or []]


def _parse_total(response: dict, fallback: int) -> int:
    raw = response.get("numTransactions")
    try:
        return int(raw)
    except (TypeError, ValueError):
        return fallback


def list_transactions(
    client: BuxferClient | None,
    query: TransactionQuery,
    token: str,
    *,
    exhaustive: bool = False,
    dry_run: bool = False,
    today: date | None = None,
) -> TransactionListing | DryRun | None:
    """
    Fetch transactions matching `query`.

    The service answers with one page of results plus `numTransactions`, the
    total for the whole filter. The first page's length is taken as the page
    size. With `exhaustive` the remaining pages are requested one after
    another and concatenated in page order; without it only the first page is
    returned and the listing carries a warning with both counts.

    Returns None when the service rejects the first request.
    """
    params = query.to_params(token, today=today)
    if dry_run:
        return DryRun(endpoint=Endpoint.TRANSACTIONS, params=params)

    if client is None:
        raise ValueError("client is required unless dry_run is set")

    response = client.post(Endpoint.TRANSACTIONS, params)
    if not is_ok(response):
        logger.warning("transactions: service returned status=%s", response.get("status"))
        return None

    out = _parse_batch(response)
    batch_size = len(out)
    total = _parse_total(response, fallback=batch_size)
    warnings: list[str] = []
    pages_fetched = 1

    if batch_size == 0 or total <= batch_size:
        return TransactionListing(transactions=out, total=total, pages_fetched=pages_fetched)

    if not exhaustive:
        msg = (
            f"Returned {batch_size} of {total} transactions; "
            "request all pages to fetch the rest"
        )
        logger.warning(msg)
        warnings.append(msg)
        return TransactionListing(
            transactions=out, total=total, pages_fetched=pages_fetched, warnings=warnings
        )

    last_page = math.ceil(total / batch_size)
    for page in range(query.page + 1, last_page + 1):
        page_params = query.with_page(page).to_params(token, today=today)
        response = client.post(Endpoint.TRANSACTIONS, page_params)
        if not is_ok(response):
            msg = (
                f"Stopped at page {page} of {last_page} "
                f"(status={response.get('status')}); returned {len(out)} of {total} transactions"
            )
            logger.warning(msg)
            warnings.append(msg)
            break

        batch = _parse_batch(response)
        pages_fetched += 1
        logger.debug("transactions: page %s/%s -> %s items", page, last_page, len(batch))
        if not batch:
            break
        out.extend(batch)

    return TransactionListing(
        transactions=out, total=total, pages_fetched=pages_fetched, warnings=warnings
    )
