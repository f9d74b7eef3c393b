"""Income allocation waterfall - survival debts, living reserve, savings goals"""

from fractions import Fraction
from typing import Iterable, List, Sequence

from cashflow_gateway.domain.exceptions import InvalidInputError
from cashflow_gateway.domain.models import (
    EXPENSE,
    AllocationProposal,
    InstallmentDebt,
    RecurringItem,
    SavingsGoal,
    StrategicLine,
    SurvivalLine,
    UpcomingDebt,
)

DEFAULT_RESERVE_DAYS = 7
UNNAMED_DEBT = "Unnamed debt"


def _goal_share(base_cents: int, percentage: float) -> int:
    """floor(base * percentage / 100) in exact rational arithmetic"""
    return int((base_cents * Fraction(str(percentage))) // 100)


def allocate(
    income_cents: int,
    upcoming_debts: Sequence[UpcomingDebt],
    savings_goals: Sequence[SavingsGoal],
    reserve_days: int = DEFAULT_RESERVE_DAYS,
    *,
    daily_baseline_cents: int,
) -> AllocationProposal:
    """
    Split an income event into a three-tier disbursement proposal.

    Tiers run strictly in order and each only draws from what the previous
    tiers left:
    1. Survival: debts in caller order, each paid min(remaining, amount)
    2. Living reserve: min(remaining, reserve_days * daily_baseline_cents)
    3. Strategic: every goal with a positive percentage gets
       floor(base * pct / 100), where base is the amount left *before* this
       tier for all goals; the tier total is subtracted once

    Whatever is left is free cash. Floor rounding keeps the strategic total
    at or below its base as long as the goal percentages add up to 100 or
    less, so free cash only goes negative through later manual edits.

    Example:
        income 50_000, debt 10_000, 7 days x 500, one goal at 20%
        -> survival [10_000], reserve 3_500, goal 7_300, free cash 29_200
    """
    if income_cents < 0:
        raise InvalidInputError(f"income must be non-negative, got {income_cents}")
    if reserve_days < 0 or daily_baseline_cents < 0:
        raise InvalidInputError("reserve_days and daily_baseline_cents must be non-negative")

    remaining = income_cents

    survival: List[SurvivalLine] = []
    for debt in upcoming_debts:
        pay = min(remaining, debt.amount_cents)
        if pay > 0:
            survival.append(SurvivalLine(label=debt.label or UNNAMED_DEBT, amount_cents=pay))
            remaining -= pay

    living_reserve = min(remaining, reserve_days * daily_baseline_cents)
    remaining -= living_reserve

    strategic: List[StrategicLine] = []
    if remaining > 0:
        base = remaining
        for goal in savings_goals:
            if goal.allocation_percentage <= 0:
                continue
            pay = _goal_share(base, goal.allocation_percentage)
            if pay > 0:
                strategic.append(StrategicLine(goal_name=goal.name, amount_cents=pay))

        remaining -= sum(line.amount_cents for line in strategic)

    return AllocationProposal(
        income_cents=income_cents,
        survival=tuple(survival),
        living_reserve_cents=living_reserve,
        strategic=tuple(strategic),
        free_cash_cents=remaining,
    )


def upcoming_debts_from_installments(debts: Iterable[InstallmentDebt]) -> List[UpcomingDebt]:
    """Unpaid installments of the current month, in feed order, as survival-tier debts"""
    return [
        UpcomingDebt(label=debt.card_name or UNNAMED_DEBT, amount_cents=debt.monthly_amount_cents)
        for debt in debts
        if not debt.is_paid_this_month
    ]


def estimate_future_obligations(
    recurring_items: Iterable[RecurringItem],
    debts: Iterable[InstallmentDebt],
    months: int = 2,
) -> int:
    """
    Rough cash pressure over the coming weeks: recurring expenses plus unpaid
    installments, each counted `months` times (two months ~ eight weeks).
    """
    recurring = sum(item.amount_cents for item in recurring_items if item.kind == EXPENSE)
    installments = sum(debt.monthly_amount_cents for debt in debts if not debt.is_paid_this_month)
    return (recurring + installments) * months
