"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date
from typing import Annotated, Dict, List, Literal, Optional

Kind = Literal["income", "expense"]
DayOfMonth = Annotated[int, Field(ge=1, le=31)]


class CardSchema(BaseModel):
    """Card billing configuration"""

    card_id: str = Field(..., min_length=1)
    name: str
    closing_day: DayOfMonth
    payment_day: DayOfMonth


class TransactionSchema(BaseModel):
    """One-off ledger entry; card_id set means card-routed, otherwise cash"""

    transaction_id: str
    date: date
    amount_cents: int = Field(..., ge=0)
    kind: Kind
    card_id: Optional[str] = None
    account_id: Optional[str] = None
    note: str = ""
    category: str = ""


class RecurringItemSchema(BaseModel):
    """Monthly recurring income or expense"""

    item_id: str
    description: str
    amount_cents: int = Field(..., ge=0)
    day_of_month: DayOfMonth
    kind: Kind
    card_id: Optional[str] = None
    account_id: Optional[str] = None


class InstallmentDebtSchema(BaseModel):
    """Card installment plan"""

    debt_id: str
    card_name: str
    monthly_amount_cents: int = Field(..., ge=0)
    payment_day: DayOfMonth
    is_paid_this_month: bool = False
    remaining_amount_cents: int = Field(..., ge=0)
    total_periods: int = Field(..., ge=0)
    current_period: int = Field(..., ge=0)


class ForecastRequest(BaseModel):
    """Request body for POST /v1/forecast"""

    as_of: Optional[date] = None
    week_count: Optional[int] = Field(None, ge=1, le=52)
    horizon_days: Optional[int] = Field(None, ge=0, le=366)
    cards: List[CardSchema] = []
    transactions: List[TransactionSchema] = []
    recurring_items: List[RecurringItemSchema] = []
    installment_debts: List[InstallmentDebtSchema] = []


class ObligationSchema(BaseModel):
    date: date
    amount_cents: int
    source_label: str
    origin_kind: str


class WeekSchema(BaseModel):
    """Single 7-day exposure window"""

    week_index: int
    range_start: date
    range_end: date
    total_cents: int
    has_exposure: bool
    obligations: List[ObligationSchema]


class CardBalanceSchema(BaseModel):
    """Card spend to date whose statement is not yet due"""

    card_id: str
    name: str
    amount_cents: int


class ForecastResponse(BaseModel):
    """Response for POST /v1/forecast"""

    as_of: date
    weeks: List[WeekSchema]
    total_cents: int
    estimated_pressure_cents: int = Field(..., description="Recurring expenses and unpaid installments over two months")
    card_balances: List[CardBalanceSchema]


class GoalRequest(BaseModel):
    """Request body for POST /v1/goals"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    name: str = Field(..., min_length=1)
    target_amount_cents: int = Field(..., ge=0)
    current_amount_cents: int = Field(0, ge=0)
    allocation_percentage: float = Field(0.0, ge=0, le=100)


class GoalResponse(BaseModel):
    goal_id: str
    name: str
    target_amount_cents: int
    current_amount_cents: int
    allocation_percentage: float


class GoalListResponse(BaseModel):
    """Response for GET /v1/goals"""

    user_id: str
    goals: List[GoalResponse]


class IncomeSchema(BaseModel):
    amount_cents: int = Field(..., gt=0, description="Incoming amount in cents")
    date: date


class UpcomingDebtSchema(BaseModel):
    label: str = ""
    amount_cents: int = Field(..., ge=0)


class AllocationRequest(BaseModel):
    """Request body for POST /v1/allocations"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    income: IncomeSchema
    upcoming_debts: List[UpcomingDebtSchema] = []
    reserve_days: Optional[int] = Field(None, ge=0)
    daily_baseline_cents: Optional[int] = Field(None, ge=0)


class AllocationEditRequest(BaseModel):
    """Request body for PATCH /v1/allocations/{allocation_id}; survival lines are not editable"""

    living_reserve_cents: Optional[int] = Field(None, ge=0)
    strategic: Dict[str, int] = Field(default_factory=dict, description="goal name -> amount in cents")


class SurvivalLineSchema(BaseModel):
    label: str
    amount_cents: int


class StrategicLineSchema(BaseModel):
    goal_name: str
    amount_cents: int


class AllocationResponse(BaseModel):
    """Allocation proposal with its lifecycle state"""

    allocation_id: str
    user_id: str
    status: str
    income_cents: int
    survival: List[SurvivalLineSchema]
    living_reserve_cents: int
    strategic: List[StrategicLineSchema]
    free_cash_cents: int


class ConfirmResponse(BaseModel):
    """Response for POST /v1/allocations/{allocation_id}/confirm"""

    allocation: AllocationResponse
    goals: List[GoalResponse]


class InstallmentPaymentRequest(BaseModel):
    """Request body for POST /v1/installments/payment"""

    debt: InstallmentDebtSchema
    paid_on: Optional[date] = None
    account_id: Optional[str] = None


class InstallmentPaymentResponse(BaseModel):
    debt: InstallmentDebtSchema
    payment: TransactionSchema
