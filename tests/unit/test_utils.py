"""Unit tests for date helpers, serialization and the alert client"""

import asyncio
import httpx
import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch
from wealthblend.domain.exceptions import AlertDeliveryError, ValidationError
from wealthblend.domain.models import Budget, BudgetCategory, BudgetTransaction, TransactionType
from wealthblend.infrastructure.clients.alerts import AlertClient
from wealthblend.utils.date_utils import add_frequency, quarter_of, to_naive_utc, week_of_year
from wealthblend.utils.serialization import deep_merge, dump, load


@pytest.mark.parametrize("month,quarter", [(1, 1), (3, 1), (4, 2), (9, 3), (12, 4)])
def test_quarter_of(month, quarter):
    assert quarter_of(month) == quarter


def test_week_of_year_rounds_up():
    assert week_of_year(datetime(2024, 1, 1), 2024) == 0
    assert week_of_year(datetime(2024, 1, 1, 0, 0, 1), 2024) == 1
    assert week_of_year(datetime(2024, 1, 8), 2024) == 1
    assert week_of_year(datetime(2024, 1, 8, 1), 2024) == 2


def test_add_frequency_clamps_month_end():
    assert add_frequency(datetime(2024, 1, 31), "monthly") == datetime(2024, 2, 29)
    assert add_frequency(datetime(2024, 11, 30), "quarterly") == datetime(2025, 2, 28)
    assert add_frequency(datetime(2024, 2, 29), "yearly") == datetime(2025, 2, 28)


def test_to_naive_utc_converts_offsets():
    aware = datetime(2024, 1, 15, 9, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert to_naive_utc(aware) == datetime(2024, 1, 15, 14, 0)
    assert to_naive_utc(datetime(2024, 1, 15, 9, 0)) == datetime(2024, 1, 15, 9, 0)


def test_deep_merge_merges_dicts_and_replaces_lists():
    base = {"alerts": {"enabled": True, "warning": 80}, "tags": ["a", "b"], "name": "Food"}
    patch_doc = {"alerts": {"warning": 70}, "tags": ["c"]}

    merged = deep_merge(base, patch_doc)

    assert merged == {"alerts": {"enabled": True, "warning": 70}, "tags": ["c"], "name": "Food"}
    assert base["alerts"]["warning"] == 80


def test_load_coerces_enums_and_dates():
    budget = load(
        Budget,
        {
            "user_id": "user_alice",
            "name": "Food",
            "category": "food",
            "budgeted_amount": 100,
            "transactions": [{"description": "Shop", "amount": 5, "type": "income", "date": "2024-01-02T10:00:00"}],
        },
    )

    assert budget.category == BudgetCategory.FOOD
    assert budget.transactions[0].type == TransactionType.INCOME
    assert budget.transactions[0].date == datetime(2024, 1, 2, 10, 0)


def test_load_reports_nested_field_path():
    with pytest.raises(ValidationError) as exc:
        load(
            Budget,
            {
                "user_id": "user_alice",
                "name": "Food",
                "category": "food",
                "budgeted_amount": 100,
                "transactions": [{"description": "Shop", "amount": 5, "type": "barter"}],
            },
        )

    assert exc.value.field == "transactions[0].type"


def test_dump_emits_enum_values():
    data = dump(BudgetTransaction(description="Shop", amount=5, date=datetime(2024, 1, 2)))

    assert data["type"] == "expense"
    assert data["date"] == "2024-01-02T00:00:00"


PAYLOAD = {"event": "BUDGET_ALERT", "budget_id": "b1", "percentage_used": 90}


def _response(status_code: int) -> httpx.Response:
    request = httpx.Request("POST", "http://alerts.test/hook")
    return httpx.Response(status_code, request=request)


@patch("wealthblend.infrastructure.clients.alerts.asyncio.sleep", new_callable=AsyncMock)
@patch("httpx.AsyncClient.post", new_callable=AsyncMock)
def test_alert_client_delivers(mock_post: AsyncMock, mock_sleep: AsyncMock):
    mock_post.return_value = _response(202)

    asyncio.run(AlertClient(webhook_url="http://alerts.test/hook").send_budget_alert(PAYLOAD))

    mock_post.assert_awaited_once()
    assert mock_post.call_args.kwargs["json"] == PAYLOAD
    mock_sleep.assert_not_awaited()


@patch("wealthblend.infrastructure.clients.alerts.asyncio.sleep", new_callable=AsyncMock)
@patch("httpx.AsyncClient.post", new_callable=AsyncMock)
def test_alert_client_retries_then_succeeds(mock_post: AsyncMock, mock_sleep: AsyncMock):
    mock_post.side_effect = [_response(503), httpx.ConnectError("refused"), _response(200)]

    asyncio.run(AlertClient(webhook_url="http://alerts.test/hook").send_budget_alert(PAYLOAD))

    assert mock_post.await_count == 3
    assert [c.args[0] for c in mock_sleep.await_args_list] == [1.0, 2.0]


@patch("wealthblend.infrastructure.clients.alerts.asyncio.sleep", new_callable=AsyncMock)
@patch("httpx.AsyncClient.post", new_callable=AsyncMock)
def test_alert_client_gives_up(mock_post: AsyncMock, mock_sleep: AsyncMock):
    mock_post.side_effect = httpx.ConnectError("refused")
    client = AlertClient(webhook_url="http://alerts.test/hook")

    with pytest.raises(AlertDeliveryError):
        asyncio.run(client.send_budget_alert(PAYLOAD))

    assert mock_post.await_count == client.max_retries
