"""
E2E test walking one pay cycle through the API.

Persona: salaried user with a laptop on installments and two savings goals.
1. Forecast the next eight weeks before payday
2. Split the salary: installment first, then reserve, then goals
3. Confirm the split and check the goal balances
4. Pay the installment and re-forecast; the paid debt drops out
"""

import pytest
from fastapi.testclient import TestClient

LAPTOP = {
    "debt_id": "laptop",
    "card_name": "Everyday Visa",
    "monthly_amount_cents": 20000,
    "payment_day": 15,
    "is_paid_this_month": False,
    "remaining_amount_cents": 60000,
    "total_periods": 6,
    "current_period": 3,
}


def _forecast(client: TestClient, debt: dict) -> dict:
    response = client.post(
        "/v1/forecast",
        json={"as_of": "2024-03-01", "installment_debts": [debt]},
    )
    assert response.status_code == 200
    return response.json()


@pytest.mark.integration
def test_pay_cycle(client: TestClient, sync_client):
    # 1. Installment due 03-15 and 04-15; 05-15 falls after the eighth week
    forecast = _forecast(client, LAPTOP)
    exposed = [w["week_index"] for w in forecast["weeks"] if w["has_exposure"]]
    assert exposed == [2, 6]
    assert forecast["total_cents"] == 40000
    assert forecast["estimated_pressure_cents"] == 40000

    # 2. Goals and the salary split
    for name, pct in (("Emergency fund", 25), ("Trip", 10)):
        created = client.post(
            "/v1/goals",
            json={"user_id": "user_salaried", "name": name, "target_amount_cents": 500000, "allocation_percentage": pct},
        )
        assert created.status_code == 201

    proposal = client.post(
        "/v1/allocations",
        json={
            "user_id": "user_salaried",
            "income": {"amount_cents": 100000, "date": "2024-03-01"},
            "upcoming_debts": [{"label": LAPTOP["card_name"], "amount_cents": LAPTOP["monthly_amount_cents"]}],
            "reserve_days": 7,
            "daily_baseline_cents": 1000,
        },
    ).json()
    assert proposal["survival"] == [{"label": "Everyday Visa", "amount_cents": 20000}]
    assert proposal["living_reserve_cents"] == 7000
    assert proposal["strategic"] == [
        {"goal_name": "Emergency fund", "amount_cents": 18250},
        {"goal_name": "Trip", "amount_cents": 7300},
    ]
    assert proposal["free_cash_cents"] == 47450

    # 3. Confirm
    confirmed = client.post(f"/v1/allocations/{proposal['allocation_id']}/confirm")
    assert confirmed.status_code == 200
    balances = {g["name"]: g["current_amount_cents"] for g in confirmed.json()["goals"]}
    assert balances == {"Emergency fund": 18250, "Trip": 7300}
    sync_client.send_allocation_event.assert_awaited_once()

    # 4. Pay this month's installment; the debt leaves the forecast until the month resets
    paid = client.post(
        "/v1/installments/payment",
        json={"debt": LAPTOP, "paid_on": "2024-03-10", "account_id": "checking"},
    )
    assert paid.status_code == 200
    paid_debt = paid.json()["debt"]
    assert paid_debt["remaining_amount_cents"] == 40000

    forecast = _forecast(client, paid_debt)
    assert forecast["total_cents"] == 0
    assert forecast["estimated_pressure_cents"] == 0
