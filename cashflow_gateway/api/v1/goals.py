"""/v1/goals - savings goals store"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from cashflow_gateway.api.v1.schemas import GoalListResponse, GoalRequest, GoalResponse
from cashflow_gateway.api.v1.converters import from_goal
from cashflow_gateway.infrastructure.database.session import get_db
from cashflow_gateway.infrastructure.database.repositories import GoalRepository, to_savings_goal

router = APIRouter()


@router.post("/goals", response_model=GoalResponse, status_code=201)
def create_goal(request_body: GoalRequest, db: Session = Depends(get_db)):
    """Create a savings goal; its percentage weights future strategic allocations"""
    goal_repo = GoalRepository(db)
    if goal_repo.get_goal_by_name(request_body.user_id, request_body.name):
        raise HTTPException(status_code=409, detail="Goal name already exists")

    # Shares are taken from one base, so more than 100% in total would overdraw it
    allocated = sum(r.allocation_percentage for r in goal_repo.get_goals_by_user(request_body.user_id))
    if round(allocated + request_body.allocation_percentage, 6) > 100:
        raise HTTPException(status_code=422, detail="Goal percentages would exceed 100% in total")

    record = goal_repo.create_goal(
        user_id=request_body.user_id,
        name=request_body.name,
        target_amount_cents=request_body.target_amount_cents,
        current_amount_cents=request_body.current_amount_cents,
        allocation_percentage=request_body.allocation_percentage,
    )
    db.commit()
    return from_goal(to_savings_goal(record))


@router.get("/goals", response_model=GoalListResponse)
def list_goals(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    goal_repo = GoalRepository(db)
    goals = [to_savings_goal(r) for r in goal_repo.get_goals_by_user(user_id)]
    return GoalListResponse(user_id=user_id, goals=[from_goal(g) for g in goals])
