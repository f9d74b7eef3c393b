"""Integration tests for goal and allocation repositories against the test database"""

from datetime import date
from sqlalchemy.orm import Session
from cashflow_gateway.domain.confirmation import CONFIRMED, PROPOSED, commit, strategic_credits
from cashflow_gateway.domain.models import AllocationProposal, StrategicLine
from cashflow_gateway.infrastructure.database.repositories import (
    AllocationRepository,
    GoalRepository,
    to_savings_goal,
)


def _proposal(amount_cents: int) -> AllocationProposal:
    return AllocationProposal(
        income_cents=amount_cents,
        survival=(),
        living_reserve_cents=0,
        strategic=(StrategicLine("House", amount_cents),),
        free_cash_cents=0,
    )


def test_credits_from_the_same_snapshot_both_land(db: Session):
    """Two confirms that read the goal at 0 must add up to 12,300, not keep only the last one"""
    goal_repo = GoalRepository(db)
    goal_repo.create_goal("user_1", "House", 1_000_000, 0, 20)
    db.commit()

    snapshot = [to_savings_goal(r) for r in goal_repo.get_goals_by_user("user_1")]
    first, second = _proposal(7300), _proposal(5000)
    assert commit(first, snapshot)[0].current_amount_cents == 7300
    assert commit(second, snapshot)[0].current_amount_cents == 5000

    goal_repo.credit_goals("user_1", strategic_credits(first))
    db.commit()
    goal_repo.credit_goals("user_1", strategic_credits(second))
    db.commit()

    assert goal_repo.get_goals_by_user("user_1")[0].current_amount_cents == 12300


def test_credit_only_touches_the_named_goal_of_that_user(db: Session):
    goal_repo = GoalRepository(db)
    goal_repo.create_goal("user_1", "House", 1_000_000, 100, 20)
    goal_repo.create_goal("user_1", "Car", 1_000_000, 100, 10)
    goal_repo.create_goal("user_2", "House", 1_000_000, 100, 20)
    db.commit()

    goal_repo.credit_goals("user_1", {"House": 900, "Unknown": 50})
    db.commit()

    balances = {
        (r.user_id, r.name): r.current_amount_cents
        for user in ("user_1", "user_2")
        for r in goal_repo.get_goals_by_user(user)
    }
    assert balances == {("user_1", "House"): 1000, ("user_1", "Car"): 100, ("user_2", "House"): 100}


def test_goals_listed_in_creation_order_within_the_same_second(db: Session):
    goal_repo = GoalRepository(db)
    for name in ("Zeta", "Alpha", "Mid"):
        goal_repo.create_goal("user_1", name, 1_000, 0, 10)
    db.commit()

    assert [r.name for r in goal_repo.get_goals_by_user("user_1")] == ["Zeta", "Alpha", "Mid"]


def test_status_transition_happens_once(db: Session):
    repo = AllocationRepository(db)
    record = repo.create_allocation("user_1", date(2024, 3, 1), _proposal(1000))
    db.commit()

    assert repo.transition_status(record.id, PROPOSED, CONFIRMED) is True
    assert repo.transition_status(record.id, PROPOSED, CONFIRMED) is False
