"""Data access layer for savings goals and allocation proposals"""

import uuid
from datetime import date, datetime, timezone
from typing import List, Mapping, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from cashflow_gateway.infrastructure.database.models import AllocationRecord, SavingsGoalRecord, StrategicLineRecord
from cashflow_gateway.domain.confirmation import PROPOSED
from cashflow_gateway.domain.models import AllocationProposal, SavingsGoal, StrategicLine, SurvivalLine


def to_savings_goal(record: SavingsGoalRecord) -> SavingsGoal:
    """Map ORM row to domain goal"""
    return SavingsGoal(
        name=record.name,
        target_amount_cents=record.target_amount_cents,
        current_amount_cents=record.current_amount_cents,
        allocation_percentage=record.allocation_percentage,
        goal_id=str(record.id),
    )


def to_proposal(record: AllocationRecord) -> AllocationProposal:
    """Rebuild the domain proposal from its stored lines"""
    return AllocationProposal(
        income_cents=record.income_cents,
        survival=tuple(SurvivalLine(line["label"], line["amount_cents"]) for line in record.survival),
        living_reserve_cents=record.living_reserve_cents,
        strategic=tuple(StrategicLine(line.goal_name, line.amount_cents) for line in record.strategic_lines),
        free_cash_cents=record.free_cash_cents,
    )


class GoalRepository:
    """Repository for savings goals"""

    def __init__(self, db: Session):
        self.db = db

    def create_goal(
        self,
        user_id: str,
        name: str,
        target_amount_cents: int,
        current_amount_cents: int,
        allocation_percentage: float,
    ) -> SavingsGoalRecord:
        """Persist a new savings goal"""
        last = (
            self.db.query(func.max(SavingsGoalRecord.sequence))
            .filter(SavingsGoalRecord.user_id == user_id)
            .scalar()
        )
        db_goal = SavingsGoalRecord(
            user_id=user_id,
            sequence=(last or 0) + 1,
            name=name,
            target_amount_cents=target_amount_cents,
            current_amount_cents=current_amount_cents,
            allocation_percentage=allocation_percentage,
        )
        self.db.add(db_goal)
        self.db.flush()
        return db_goal

    def get_goal_by_name(self, user_id: str, name: str) -> Optional[SavingsGoalRecord]:
        """Goal names are unique per user; allocations credit goals by name"""
        return (
            self.db.query(SavingsGoalRecord)
            .filter(SavingsGoalRecord.user_id == user_id, SavingsGoalRecord.name == name)
            .first()
        )

    def get_goals_by_user(self, user_id: str) -> List[SavingsGoalRecord]:
        """Goals in creation order; this order drives strategic line order"""
        return (
            self.db.query(SavingsGoalRecord)
            .filter(SavingsGoalRecord.user_id == user_id)
            .order_by(SavingsGoalRecord.sequence.asc())
            .all()
        )

    def credit_goals(self, user_id: str, credits: Mapping[str, int]) -> None:
        """
        Add committed amounts (goal name -> cents) to goal balances.

        Each credit is an SQL increment, so two allocations confirmed at the
        same time both land instead of the later one overwriting the earlier.
        """
        for name, amount in credits.items():
            if amount == 0:
                continue
            self.db.query(SavingsGoalRecord).filter(
                SavingsGoalRecord.user_id == user_id,
                SavingsGoalRecord.name == name,
            ).update(
                {SavingsGoalRecord.current_amount_cents: SavingsGoalRecord.current_amount_cents + amount},
                synchronize_session=False,
            )
        self.db.flush()


class AllocationRepository:
    """Repository for allocation proposals"""

    def __init__(self, db: Session):
        self.db = db

    def create_allocation(
        self,
        user_id: str,
        income_date: date,
        proposal: AllocationProposal,
    ) -> AllocationRecord:
        """Persist a freshly computed proposal in the proposed state"""
        db_allocation = AllocationRecord(
            user_id=user_id,
            income_cents=proposal.income_cents,
            income_date=income_date,
            status=PROPOSED,
            living_reserve_cents=proposal.living_reserve_cents,
            free_cash_cents=proposal.free_cash_cents,
            survival=[{"label": s.label, "amount_cents": s.amount_cents} for s in proposal.survival],
        )
        self.db.add(db_allocation)
        self.db.flush()

        for position, line in enumerate(proposal.strategic):
            self.db.add(
                StrategicLineRecord(
                    allocation_id=db_allocation.id,
                    position=position,
                    goal_name=line.goal_name,
                    amount_cents=line.amount_cents,
                )
            )
        self.db.flush()
        self.db.refresh(db_allocation)
        return db_allocation

    def get_allocation_by_id(self, allocation_id: uuid.UUID) -> Optional[AllocationRecord]:
        """Fetch allocation with its strategic lines"""
        return (
            self.db.query(AllocationRecord)
            .filter(AllocationRecord.id == allocation_id)
            .first()
        )

    def save_edits(self, record: AllocationRecord, proposal: AllocationProposal) -> None:
        """Store edited reserve, strategic amounts and the recomputed free cash"""
        record.living_reserve_cents = proposal.living_reserve_cents
        record.free_cash_cents = proposal.free_cash_cents
        amounts = {line.goal_name: line.amount_cents for line in proposal.strategic}
        for line in record.strategic_lines:
            line.amount_cents = amounts[line.goal_name]
        self.db.flush()

    def transition_status(self, allocation_id: uuid.UUID, from_status: str, to_status: str) -> bool:
        """
        Move an allocation out of `from_status` atomically.

        Returns False when another writer already moved it, so a proposal can
        be confirmed or discarded only once even under concurrent requests.
        """
        updated = (
            self.db.query(AllocationRecord)
            .filter(AllocationRecord.id == allocation_id, AllocationRecord.status == from_status)
            .update(
                {"status": to_status, "resolved_at": datetime.now(timezone.utc)},
                synchronize_session=False,
            )
        )
        return updated == 1
