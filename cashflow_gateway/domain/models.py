"""Domain models - frozen dataclasses representing ledger snapshots and engine outputs"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Tuple, Union

from cashflow_gateway.domain.exceptions import InvalidInputError

INCOME = "income"
EXPENSE = "expense"
TRANSACTION_KINDS = (INCOME, EXPENSE)

# Obligation origins
ONE_OFF = "one_off"
RECURRING = "recurring"
INSTALLMENT_DEBT = "installment_debt"
CARD_STATEMENT = "card_statement"


def _require_day(name: str, value: int) -> None:
    if not 1 <= value <= 31:
        raise InvalidInputError(f"{name} must be between 1 and 31, got {value}")


def _require_non_negative(name: str, value: int) -> None:
    if value < 0:
        raise InvalidInputError(f"{name} must be non-negative, got {value}")


def _require_kind(value: str) -> None:
    if value not in TRANSACTION_KINDS:
        raise InvalidInputError(f"kind must be one of {TRANSACTION_KINDS}, got {value!r}")


@dataclass(frozen=True)
class CreditCard:
    """Card billing configuration"""

    card_id: str
    name: str
    closing_day: int
    payment_day: int  # may be numerically before closing_day

    def __post_init__(self) -> None:
        _require_day("closing_day", self.closing_day)
        _require_day("payment_day", self.payment_day)


@dataclass(frozen=True)
class CashRoute:
    """Paid from a cash account; settled on the transaction date"""

    account_id: Optional[str] = None


@dataclass(frozen=True)
class CardRoute:
    """Charged to a card; becomes a cash outflow on the statement date"""

    card: CreditCard


PaymentRoute = Union[CashRoute, CardRoute]


@dataclass(frozen=True)
class LedgerTransaction:
    """One-off ledger entry"""

    transaction_id: str
    date: date
    amount_cents: int
    kind: str  # "income" or "expense"
    route: PaymentRoute = field(default_factory=CashRoute)
    note: str = ""
    category: str = ""

    def __post_init__(self) -> None:
        _require_non_negative("amount_cents", self.amount_cents)
        _require_kind(self.kind)


@dataclass(frozen=True)
class RecurringItem:
    """Monthly income or expense projected onto every future month"""

    item_id: str
    description: str
    amount_cents: int
    day_of_month: int
    kind: str
    route: PaymentRoute = field(default_factory=CashRoute)

    def __post_init__(self) -> None:
        _require_non_negative("amount_cents", self.amount_cents)
        _require_day("day_of_month", self.day_of_month)
        _require_kind(self.kind)


@dataclass(frozen=True)
class InstallmentDebt:
    """Card installment plan paid once per month"""

    debt_id: str
    card_name: str
    monthly_amount_cents: int
    payment_day: int
    is_paid_this_month: bool
    remaining_amount_cents: int
    total_periods: int
    current_period: int

    def __post_init__(self) -> None:
        _require_non_negative("monthly_amount_cents", self.monthly_amount_cents)
        _require_non_negative("remaining_amount_cents", self.remaining_amount_cents)
        _require_day("payment_day", self.payment_day)


@dataclass(frozen=True)
class CardBalance:
    """Unsettled card-routed spend accumulated up to today"""

    card: CreditCard
    amount_cents: int

    def __post_init__(self) -> None:
        _require_non_negative("amount_cents", self.amount_cents)


@dataclass(frozen=True)
class SavingsGoal:
    """Savings target receiving a share of residual income"""

    name: str
    target_amount_cents: int
    current_amount_cents: int
    allocation_percentage: float  # 0-100
    goal_id: Optional[str] = None

    def __post_init__(self) -> None:
        _require_non_negative("target_amount_cents", self.target_amount_cents)
        if not 0 <= self.allocation_percentage <= 100:
            raise InvalidInputError(
                f"allocation_percentage must be between 0 and 100, got {self.allocation_percentage}"
            )


@dataclass(frozen=True)
class IncomeEvent:
    """Incoming cash that triggers an allocation"""

    amount_cents: int
    date: date

    def __post_init__(self) -> None:
        if self.amount_cents <= 0:
            raise InvalidInputError(f"income amount must be positive, got {self.amount_cents}")


@dataclass(frozen=True)
class Obligation:
    """Projected future cash outflow"""

    date: date
    amount_cents: int
    source_label: str
    origin_kind: str  # one_off | recurring | installment_debt | card_statement


@dataclass(frozen=True)
class WeeklyExposure:
    """Seven-day window of the forecast"""

    week_index: int
    range_start: date
    range_end: date
    total_cents: int
    has_exposure: bool
    obligations: Tuple[Obligation, ...] = ()


@dataclass(frozen=True)
class UpcomingDebt:
    """Near-term debt competing for the survival tier"""

    label: str
    amount_cents: int

    def __post_init__(self) -> None:
        _require_non_negative("amount_cents", self.amount_cents)


@dataclass(frozen=True)
class SurvivalLine:
    label: str
    amount_cents: int


@dataclass(frozen=True)
class StrategicLine:
    goal_name: str
    amount_cents: int


@dataclass(frozen=True)
class AllocationProposal:
    """Three-tier disbursement of a single income event"""

    income_cents: int
    survival: Tuple[SurvivalLine, ...]
    living_reserve_cents: int
    strategic: Tuple[StrategicLine, ...]
    free_cash_cents: int

    @property
    def survival_total_cents(self) -> int:
        return sum(line.amount_cents for line in self.survival)

    @property
    def strategic_total_cents(self) -> int:
        return sum(line.amount_cents for line in self.strategic)
