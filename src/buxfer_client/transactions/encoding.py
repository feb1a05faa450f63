from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from ..errors import ValidationError
from .types import TransactionRequest, TransactionType

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class EncodedTransaction:
    text: str
    type: TransactionType
    amount: Decimal
    warnings: list[str] = field(default_factory=list)


def _fmt(amount: Decimal) -> str:
    return str(amount.quantize(CENTS, rounding=ROUND_HALF_UP))


def _resolve_type(req: TransactionRequest, amount: Decimal) -> TransactionType | None:
    accounts = list(req.accounts)
    tx_type = req.type

    if len(accounts) > 2:
        raise ValidationError("at most two accounts can be given (from, to)")

    if len(accounts) == 2:
        if accounts[0] == accounts[1]:
            raise ValidationError("cannot transfer from/to the same account")
        if tx_type is None:
            tx_type = TransactionType.TRANSFER
        elif tx_type is not TransactionType.TRANSFER:
            raise ValidationError(f"two accounts are only valid for a Transfer, not {tx_type.value}")
    elif tx_type is TransactionType.TRANSFER:
        raise ValidationError("must specify both accounts")

    if req.shared_with:
        if tx_type is None:
            tx_type = TransactionType.SHARED
        elif tx_type is not TransactionType.SHARED:
            raise ValidationError(f"shared-with is only valid for a Shared transaction, not {tx_type.value}")
    elif tx_type is TransactionType.SHARED:
        raise ValidationError("must specify who to share with")

    if amount == 0:
        raise ValidationError("amount must not be zero")

    return tx_type


def _coerce(amount: Decimal, tx_type: TransactionType, negative: bool, warnings: list[str]) -> Decimal:
    wrong_sign = amount > 0 if negative else amount < 0
    if not wrong_sign:
        return amount

    fixed = -amount
    msg = f"{tx_type.value} amount must be {'negative' if negative else 'positive'}; using {_fmt(fixed)}"
    logger.warning(msg)
    warnings.append(msg)
    return fixed


def encode_transaction(req: TransactionRequest) -> EncodedTransaction:
    """
    Validate `req` and render it as one line of Buxfer's SMS format:

      <description> <amount> [WITH: a b] [STATUS:x] [ACCT:a[,b]] [TAGS:t1,t2] [DATE:yyyy-mm-dd]

    Expenses are written unsigned, income with a leading "+", transfers as a
    positive amount. A sign that contradicts an explicit type is flipped and
    reported in `warnings`.
    """
    try:
        amount = Decimal(str(req.amount))
    except InvalidOperation:
        raise ValidationError(f"invalid amount: {req.amount!r}")
    if not amount.is_finite():
        raise ValidationError("amount must be a finite number")

    req_type = _resolve_type(req, amount)
    warnings: list[str] = []

    text = req.description

    if req_type is TransactionType.SHARED:
        amount = _coerce(amount, req_type, negative=True, warnings=warnings)
        text += f" {_fmt(abs(amount))} WITH: {' '.join(req.shared_with)}"
    elif req_type is TransactionType.TRANSFER:
        amount = _coerce(amount, req_type, negative=False, warnings=warnings)
        text += f" {_fmt(amount)}"
    elif req_type is TransactionType.EXPENSE:
        amount = _coerce(amount, req_type, negative=True, warnings=warnings)
        text += f" {_fmt(abs(amount))}"
    elif req_type is TransactionType.INCOME:
        amount = _coerce(amount, req_type, negative=False, warnings=warnings)
        text += f" +{_fmt(amount)}"
    elif amount > 0:
        req_type = TransactionType.INCOME
        text += f" +{_fmt(amount)}"
    else:
        req_type = TransactionType.EXPENSE
        text += f" {_fmt(abs(amount))}"

    if req.status is not None:
        text += f" STATUS:{req.status.value}"

    if req.accounts:
        if req_type is TransactionType.TRANSFER:
            text += f" ACCT:{','.join(req.accounts)}"
        else:
            text += f" ACCT:{req.accounts[0]}"

    if req.tags:
        text += f" TAGS:{','.join(req.tags)}"

    if req.date is not None:
        text += f" DATE:{req.date.isoformat()}"

    return EncodedTransaction(
        text=text,
        type=req_type,
        amount=amount.quantize(CENTS, rounding=ROUND_HALF_UP),
        warnings=warnings,
    )
