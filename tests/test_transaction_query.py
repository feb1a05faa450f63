from datetime import date

import pytest

from buxfer_client.transactions import TransactionQuery


def test_only_end_date_means_single_day():
    q = TransactionQuery(date_end=date(2024, 1, 31)).resolved()
    assert q.date_start == q.date_end == date(2024, 1, 31)


def test_only_start_date_runs_to_today():
    q = TransactionQuery(date_start=date(2024, 1, 1)).resolved(today=date(2024, 3, 15))
    assert q.date_start == date(2024, 1, 1)
    assert q.date_end == date(2024, 3, 15)


def test_only_start_date_defaults_to_real_today():
    q = TransactionQuery(date_start=date(2024, 1, 1)).resolved()
    assert q.date_end == date.today()


def test_no_dates_sends_no_date_filter():
    params = TransactionQuery().to_params("tok")
    assert params == {"token": "tok", "page": 1}


def test_unset_and_empty_filters_are_omitted():
    params = TransactionQuery(account="", tag=None, contact="Bob", group=None).to_params("tok")
    assert "accountName" not in params
    assert "tagName" not in params
    assert "groupName" not in params
    assert params["contactName"] == "Bob"


def test_both_dates_are_kept():
    params = TransactionQuery(date_start=date(2024, 1, 1), date_end=date(2024, 2, 1)).to_params("tok")
    assert params["startDate"] == "2024-01-01"
    assert params["endDate"] == "2024-02-01"


def test_with_page_rejects_zero():
    with pytest.raises(ValueError):
        TransactionQuery().with_page(0)
