"""Billing-cycle resolution for card-routed spend"""

from datetime import date

from cashflow_gateway.domain.models import CreditCard
from cashflow_gateway.utils.date_utils import shift_month


def resolve_statement_date(purchase_date: date, card: CreditCard) -> date:
    """
    Compute the date a card purchase turns into a cash outflow.

    Rules:
    - Purchase after the closing day belongs to the next cycle (+1 month)
    - Due on the card's payment day
    - Payment day earlier than closing day means the statement spans a
      month boundary, so the due date moves one more month (+1 month)

    Example (closing 10, payment 25):
        2024-03-05 -> 2024-03-25
        2024-03-15 -> 2024-04-25

    Payment days past the end of the target month are clamped to its last day.
    """
    months = 0
    if purchase_date.day > card.closing_day:
        months += 1
    if card.payment_day < card.closing_day:
        months += 1

    return shift_month(purchase_date, months, card.payment_day)


def is_future_statement(purchase_date: date, card: CreditCard, today: date) -> bool:
    """True when the purchase is still unpaid as of today (statement strictly after today)"""
    return resolve_statement_date(purchase_date, card) > today
