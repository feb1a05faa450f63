from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Any


@dataclass(frozen=True)
class TransactionQuery:
    date_start: date | None = None
    date_end: date | None = None
    account: str | None = None
    tag: str | None = None
    contact: str | None = None
    group: str | None = None
    page: int = 1

    def resolved(self, today: date | None = None) -> "TransactionQuery":
        """
        Fill the missing side of a date range:
        - only an end date: the range is that single day
        - only a start date: the range runs up to today
        - neither: no date filter at all
        """
        if self.date_end is not None and self.date_start is None:
            return replace(self, date_start=self.date_end)
        if self.date_start is not None and self.date_end is None:
            return replace(self, date_end=today or date.today())
        return self

    def with_page(self, page: int) -> "TransactionQuery":
        if page < 1:
            raise ValueError("page must be >= 1")
        return replace(self, page=page)

    def to_params(self, token: str, today: date | None = None) -> dict[str, Any]:
        q = self.resolved(today)

        params: dict[str, Any] = {"token": token}
        if q.date_start is not None:
            params["startDate"] = q.date_start.isoformat()
        if q.date_end is not None:
            params["endDate"] = q.date_end.isoformat()

        filters = {
            "accountName": q.account,
            "tagName": q.tag,
            "contactName": q.contact,
            "groupName": q.group,
        }
        for key, value in filters.items():
            if value:
                params[key] = value

        params["page"] = q.page
        return params
