"""Installment debt bookkeeping - monthly payment and month rollover"""

import uuid
from dataclasses import replace
from datetime import date
from typing import Optional, Tuple

from cashflow_gateway.domain.exceptions import InvalidInputError
from cashflow_gateway.domain.models import EXPENSE, CashRoute, InstallmentDebt, LedgerTransaction

DEBT_CATEGORY = "Debt"


def record_installment_payment(
    debt: InstallmentDebt,
    paid_on: date,
    account_id: Optional[str] = None,
) -> Tuple[InstallmentDebt, LedgerTransaction]:
    """
    Pay this month's installment from cash.

    Returns the advanced debt and the cash expense that records the payment:
    - current_period + 1
    - remaining reduced by the monthly amount, never below zero
    - marked paid for this month, so forecasts stop projecting it

    Raises:
        InvalidInputError: If the debt was already paid this month
    """
    if debt.is_paid_this_month:
        raise InvalidInputError(f"installment {debt.debt_id} is already paid this month")

    updated = replace(
        debt,
        current_period=debt.current_period + 1,
        remaining_amount_cents=max(0, debt.remaining_amount_cents - debt.monthly_amount_cents),
        is_paid_this_month=True,
    )
    payment = LedgerTransaction(
        transaction_id=str(uuid.uuid4()),
        date=paid_on,
        amount_cents=debt.monthly_amount_cents,
        kind=EXPENSE,
        route=CashRoute(account_id=account_id),
        note=f"Repayment: {debt.card_name}",
        category=DEBT_CATEGORY,
    )
    return updated, payment


def reset_month(debt: InstallmentDebt) -> InstallmentDebt:
    """Start-of-month rollover: the installment is due again unless fully repaid"""
    if debt.remaining_amount_cents == 0:
        return debt
    return replace(debt, is_paid_this_month=False)
