"""POST /v1/forecast - weekly cash exposure forecast"""

import time
from datetime import date
from fastapi import APIRouter, Request

from cashflow_gateway.api.v1.schemas import ForecastRequest, ForecastResponse
from cashflow_gateway.api.v1 import converters
from cashflow_gateway.api.dependencies import get_request_id
from cashflow_gateway.config import settings
from cashflow_gateway.domain.allocation import estimate_future_obligations
from cashflow_gateway.domain.exposure import aggregate_weeks, forecast_total
from cashflow_gateway.domain.obligations import (
    build_obligations,
    calendar_from_obligations,
    outstanding_card_balances,
)
from cashflow_gateway.infrastructure.observability.metrics import record_forecast
from cashflow_gateway.infrastructure.observability.logging import log_forecast

router = APIRouter()


@router.post("/forecast", response_model=ForecastResponse)
def create_forecast(request_body: ForecastRequest, request: Request):
    """
    Project known obligations onto the coming weeks.

    Flow:
    1. Map the snapshot into domain records (cash vs card routes)
    2. Route every card expense through its own statement date, past-dated
       ones included; statements already due today or earlier are dropped
    3. Build the obligation calendar and bucket it into 7-day windows
    4. Report unsettled card spend per card alongside the weeks
    """
    start_time = time.time()
    request_id = get_request_id(request)
    today = request_body.as_of or date.today()
    week_count = request_body.week_count or settings.forecast_weeks
    horizon_days = settings.forecast_horizon_days if request_body.horizon_days is None else request_body.horizon_days

    # Unknown card references raise InvalidInputError, answered with 422 by the app handler
    cards = converters.to_cards(request_body.cards)
    transactions = converters.to_transactions(request_body.transactions, cards)
    recurring_items = converters.to_recurring_items(request_body.recurring_items, cards)
    debts = [converters.to_installment_debt(d) for d in request_body.installment_debts]

    obligations = build_obligations(
        today,
        transactions=transactions,
        recurring_items=recurring_items,
        installment_debts=debts,
        horizon_days=horizon_days,
        installment_months=settings.installment_window_months,
    )
    weeks = aggregate_weeks(calendar_from_obligations(obligations), today, week_count, obligations)
    total = forecast_total(weeks)

    exposed_weeks = sum(1 for w in weeks if w.has_exposure)
    record_forecast(exposed_weeks)
    log_forecast(request_id, week_count, exposed_weeks, total, (time.time() - start_time) * 1000)

    return ForecastResponse(
        as_of=today,
        weeks=[converters.from_week(w) for w in weeks],
        total_cents=total,
        estimated_pressure_cents=estimate_future_obligations(recurring_items, debts),
        card_balances=[converters.from_card_balance(b) for b in outstanding_card_balances(transactions, today)],
    )
