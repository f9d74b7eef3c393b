"""Obligation calendar - projects every known outflow source onto future dates"""

from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Sequence

from cashflow_gateway.domain.billing import is_future_statement, resolve_statement_date
from cashflow_gateway.domain.models import (
    CARD_STATEMENT,
    EXPENSE,
    INSTALLMENT_DEBT,
    ONE_OFF,
    RECURRING,
    CardBalance,
    CardRoute,
    InstallmentDebt,
    LedgerTransaction,
    Obligation,
    RecurringItem,
)
from cashflow_gateway.utils.date_utils import clamp_day, generate_date_range, shift_month

DEFAULT_HORIZON_DAYS = 60
DEFAULT_INSTALLMENT_MONTHS = 3


def _one_off_obligations(
    transactions: Iterable[LedgerTransaction], today: date, window_end: date
) -> List[Obligation]:
    obligations = []
    for txn in transactions:
        # Cash spend is settled on the spot; only card spend is still owed
        if txn.kind != EXPENSE or not isinstance(txn.route, CardRoute):
            continue

        due = resolve_statement_date(txn.date, txn.route.card)
        if today < due <= window_end:
            obligations.append(
                Obligation(
                    date=due,
                    amount_cents=txn.amount_cents,
                    source_label=txn.note or txn.category or txn.route.card.name,
                    origin_kind=ONE_OFF,
                )
            )
    return obligations


def _recurring_fire_day(item: RecurringItem, day: date) -> int:
    """Day-of-month the item fires on in the month containing `day`"""
    wanted = item.route.card.payment_day if isinstance(item.route, CardRoute) else item.day_of_month
    return clamp_day(day.year, day.month, wanted).day


def _recurring_obligations(
    items: Sequence[RecurringItem], today: date, window_end: date
) -> List[Obligation]:
    expenses = [item for item in items if item.kind == EXPENSE]
    if not expenses:
        return []

    obligations = []
    for day in generate_date_range(today, window_end):
        for item in expenses:
            if day.day == _recurring_fire_day(item, day):
                obligations.append(
                    Obligation(
                        date=day,
                        amount_cents=item.amount_cents,
                        source_label=item.description,
                        origin_kind=RECURRING,
                    )
                )
    return obligations


def _installment_obligations(
    debts: Iterable[InstallmentDebt], today: date, months: int
) -> List[Obligation]:
    obligations = []
    for debt in debts:
        if debt.is_paid_this_month:
            continue

        for offset in range(months):
            due = shift_month(today, offset, debt.payment_day)
            if due > today:
                obligations.append(
                    Obligation(
                        date=due,
                        amount_cents=debt.monthly_amount_cents,
                        source_label=f"{debt.card_name} installment",
                        origin_kind=INSTALLMENT_DEBT,
                    )
                )
    return obligations


def _card_statement_obligations(
    balances: Iterable[CardBalance], today: date, window_end: date
) -> List[Obligation]:
    obligations = []
    for balance in balances:
        if balance.amount_cents <= 0:
            continue

        due = resolve_statement_date(today, balance.card)
        if today < due <= window_end:
            obligations.append(
                Obligation(
                    date=due,
                    amount_cents=balance.amount_cents,
                    source_label=f"{balance.card.name} statement",
                    origin_kind=CARD_STATEMENT,
                )
            )
    return obligations


def build_obligations(
    today: date,
    transactions: Sequence[LedgerTransaction] = (),
    recurring_items: Sequence[RecurringItem] = (),
    installment_debts: Sequence[InstallmentDebt] = (),
    card_balances: Sequence[CardBalance] = (),
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    installment_months: int = DEFAULT_INSTALLMENT_MONTHS,
) -> List[Obligation]:
    """
    Merge the four outflow sources into one list of dated obligations.

    Sources:
    - One-off card expenses, due on their resolved statement date
    - Recurring expenses, firing on their (clamped) day of month; card-routed
      ones fire on the card's payment day
    - Unpaid installment debts, for `installment_months` months from today
    - Outstanding card balances, once on the card's next statement date

    Card balances stand in for card transactions when only a per-card total
    is known; passing both for the same spend counts it twice.

    Everything except installments is limited to [today, today + horizon_days];
    nothing dated today or earlier is projected except recurring items
    firing today. Result is ordered by date, then by source.
    """
    window_end = today + timedelta(days=horizon_days)

    obligations = (
        _one_off_obligations(transactions, today, window_end)
        + _recurring_obligations(recurring_items, today, window_end)
        + _installment_obligations(installment_debts, today, installment_months)
        + _card_statement_obligations(card_balances, today, window_end)
    )
    return sorted(obligations, key=lambda o: o.date)


def calendar_from_obligations(obligations: Iterable[Obligation]) -> Dict[date, int]:
    """Sum obligations per date; dates without outflow are absent"""
    calendar: Dict[date, int] = defaultdict(int)
    for obligation in obligations:
        if obligation.amount_cents > 0:
            calendar[obligation.date] += obligation.amount_cents
    return dict(calendar)


def build_calendar(
    today: date,
    transactions: Sequence[LedgerTransaction] = (),
    recurring_items: Sequence[RecurringItem] = (),
    installment_debts: Sequence[InstallmentDebt] = (),
    card_balances: Sequence[CardBalance] = (),
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    installment_months: int = DEFAULT_INSTALLMENT_MONTHS,
) -> Dict[date, int]:
    """Sparse date -> total outflow mapping over all obligation sources"""
    return calendar_from_obligations(
        build_obligations(
            today,
            transactions,
            recurring_items,
            installment_debts,
            card_balances,
            horizon_days=horizon_days,
            installment_months=installment_months,
        )
    )


def outstanding_card_balances(
    transactions: Iterable[LedgerTransaction], today: date
) -> List[CardBalance]:
    """
    Unsettled card spend to date, per card.

    Sums card-routed expenses dated on or before today whose statement is
    still ahead of today; spend on a statement already due is settled.
    Cards appear in order of their first charge; cards with no unsettled
    spend are omitted.
    """
    totals: Dict[str, int] = {}
    cards = {}
    for txn in transactions:
        if txn.kind != EXPENSE or not isinstance(txn.route, CardRoute) or txn.date > today:
            continue
        card = txn.route.card
        if not is_future_statement(txn.date, card, today):
            continue
        cards.setdefault(card.card_id, card)
        totals[card.card_id] = totals.get(card.card_id, 0) + txn.amount_cents

    return [
        CardBalance(card=cards[card_id], amount_cents=amount)
        for card_id, amount in totals.items()
        if amount > 0
    ]
