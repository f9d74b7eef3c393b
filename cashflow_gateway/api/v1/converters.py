"""Mapping between API schemas and domain records"""

from typing import Dict, Iterable, List, Optional

from cashflow_gateway.api.v1 import schemas
from cashflow_gateway.domain.exceptions import InvalidInputError
from cashflow_gateway.domain.models import (
    CardBalance,
    CardRoute,
    CashRoute,
    CreditCard,
    InstallmentDebt,
    LedgerTransaction,
    PaymentRoute,
    RecurringItem,
    SavingsGoal,
    WeeklyExposure,
)


def to_cards(cards: Iterable[schemas.CardSchema]) -> Dict[str, CreditCard]:
    return {
        c.card_id: CreditCard(card_id=c.card_id, name=c.name, closing_day=c.closing_day, payment_day=c.payment_day)
        for c in cards
    }


def to_route(cards: Dict[str, CreditCard], card_id: Optional[str], account_id: Optional[str]) -> PaymentRoute:
    """card_id selects the card route; anything else is paid from cash"""
    if card_id is None:
        return CashRoute(account_id=account_id)
    if card_id not in cards:
        raise InvalidInputError(f"unknown card_id {card_id!r}")
    return CardRoute(card=cards[card_id])


def to_transactions(
    items: Iterable[schemas.TransactionSchema], cards: Dict[str, CreditCard]
) -> List[LedgerTransaction]:
    return [
        LedgerTransaction(
            transaction_id=t.transaction_id,
            date=t.date,
            amount_cents=t.amount_cents,
            kind=t.kind,
            route=to_route(cards, t.card_id, t.account_id),
            note=t.note,
            category=t.category,
        )
        for t in items
    ]


def to_recurring_items(
    items: Iterable[schemas.RecurringItemSchema], cards: Dict[str, CreditCard]
) -> List[RecurringItem]:
    return [
        RecurringItem(
            item_id=r.item_id,
            description=r.description,
            amount_cents=r.amount_cents,
            day_of_month=r.day_of_month,
            kind=r.kind,
            route=to_route(cards, r.card_id, r.account_id),
        )
        for r in items
    ]


def to_installment_debt(d: schemas.InstallmentDebtSchema) -> InstallmentDebt:
    return InstallmentDebt(**d.model_dump())


def from_installment_debt(debt: InstallmentDebt) -> schemas.InstallmentDebtSchema:
    return schemas.InstallmentDebtSchema(
        debt_id=debt.debt_id,
        card_name=debt.card_name,
        monthly_amount_cents=debt.monthly_amount_cents,
        payment_day=debt.payment_day,
        is_paid_this_month=debt.is_paid_this_month,
        remaining_amount_cents=debt.remaining_amount_cents,
        total_periods=debt.total_periods,
        current_period=debt.current_period,
    )


def from_transaction(txn: LedgerTransaction) -> schemas.TransactionSchema:
    card_id = txn.route.card.card_id if isinstance(txn.route, CardRoute) else None
    account_id = txn.route.account_id if isinstance(txn.route, CashRoute) else None
    return schemas.TransactionSchema(
        transaction_id=txn.transaction_id,
        date=txn.date,
        amount_cents=txn.amount_cents,
        kind=txn.kind,
        card_id=card_id,
        account_id=account_id,
        note=txn.note,
        category=txn.category,
    )


def from_week(week: WeeklyExposure) -> schemas.WeekSchema:
    return schemas.WeekSchema(
        week_index=week.week_index,
        range_start=week.range_start,
        range_end=week.range_end,
        total_cents=week.total_cents,
        has_exposure=week.has_exposure,
        obligations=[
            schemas.ObligationSchema(
                date=o.date,
                amount_cents=o.amount_cents,
                source_label=o.source_label,
                origin_kind=o.origin_kind,
            )
            for o in week.obligations
        ],
    )


def from_card_balance(balance: CardBalance) -> schemas.CardBalanceSchema:
    return schemas.CardBalanceSchema(
        card_id=balance.card.card_id,
        name=balance.card.name,
        amount_cents=balance.amount_cents,
    )


def from_goal(goal: SavingsGoal) -> schemas.GoalResponse:
    return schemas.GoalResponse(
        goal_id=goal.goal_id,
        name=goal.name,
        target_amount_cents=goal.target_amount_cents,
        current_amount_cents=goal.current_amount_cents,
        allocation_percentage=goal.allocation_percentage,
    )
