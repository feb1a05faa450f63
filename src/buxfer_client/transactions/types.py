from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum


class TransactionType(str, Enum):
    EXPENSE = "Expense"
    INCOME = "Income"
    SHARED = "Shared"
    TRANSFER = "Transfer"


class TransactionStatus(str, Enum):
    PENDING = "Pending"
    CLEARED = "Cleared"


@dataclass(frozen=True)
class TransactionRequest:
    amount: Decimal
    description: str
    type: TransactionType | None = None
    status: TransactionStatus | None = None
    accounts: list[str] = field(default_factory=list)  # 0..2, two means "from, to"
    tags: list[str] = field(default_factory=list)
    date: date | None = None
    shared_with: list[str] = field(default_factory=list)
