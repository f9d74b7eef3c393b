"""/v1/allocations - income allocation proposal, edit, confirm and discard"""

import time
import uuid
import logging
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from cashflow_gateway.api.v1.schemas import (
    AllocationEditRequest,
    AllocationRequest,
    AllocationResponse,
    ConfirmResponse,
    StrategicLineSchema,
    SurvivalLineSchema,
)
from cashflow_gateway.api.v1.converters import from_goal
from cashflow_gateway.api.dependencies import get_ledger_sync_client, get_request_id
from cashflow_gateway.config import settings
from cashflow_gateway.domain.allocation import allocate
from cashflow_gateway.domain.confirmation import (
    CONFIRMED,
    DISCARDED,
    PROPOSED,
    AllocationSession,
    strategic_credits,
)
from cashflow_gateway.domain.exceptions import AllocationStateError, InvalidInputError
from cashflow_gateway.domain.models import AllocationProposal, UpcomingDebt
from cashflow_gateway.infrastructure.clients.ledger import LedgerSyncClient
from cashflow_gateway.infrastructure.database.models import AllocationRecord
from cashflow_gateway.infrastructure.database.session import get_db
from cashflow_gateway.infrastructure.database.repositories import (
    AllocationRepository,
    GoalRepository,
    to_proposal,
    to_savings_goal,
)
from cashflow_gateway.infrastructure.observability.metrics import record_allocation
from cashflow_gateway.infrastructure.observability.logging import log_allocation

router = APIRouter()


def _to_response(record: AllocationRecord, proposal: AllocationProposal, status: str) -> AllocationResponse:
    return AllocationResponse(
        allocation_id=str(record.id),
        user_id=record.user_id,
        status=status,
        income_cents=proposal.income_cents,
        survival=[SurvivalLineSchema(label=s.label, amount_cents=s.amount_cents) for s in proposal.survival],
        living_reserve_cents=proposal.living_reserve_cents,
        strategic=[StrategicLineSchema(goal_name=s.goal_name, amount_cents=s.amount_cents) for s in proposal.strategic],
        free_cash_cents=proposal.free_cash_cents,
    )


def _load_allocation(repo: AllocationRepository, allocation_id: str) -> AllocationRecord:
    try:
        allocation_uuid = uuid.UUID(allocation_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid allocation ID format")

    record = repo.get_allocation_by_id(allocation_uuid)
    if not record:
        raise HTTPException(status_code=404, detail="Allocation not found")
    return record


@router.post("/allocations", response_model=AllocationResponse, status_code=201)
def create_allocation(
    request_body: AllocationRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Propose how a new income should be split.

    Flow:
    1. Load the user's savings goals
    2. Run the waterfall: survival debts -> living reserve -> goals
    3. Persist the proposal in the proposed state for review
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        goals = [to_savings_goal(r) for r in GoalRepository(db).get_goals_by_user(request_body.user_id)]
        debts = [UpcomingDebt(label=d.label, amount_cents=d.amount_cents) for d in request_body.upcoming_debts]

        proposal = allocate(
            request_body.income.amount_cents,
            debts,
            goals,
            settings.reserve_days if request_body.reserve_days is None else request_body.reserve_days,
            daily_baseline_cents=(
                settings.daily_baseline_cents
                if request_body.daily_baseline_cents is None
                else request_body.daily_baseline_cents
            ),
        )

        record = AllocationRepository(db).create_allocation(
            user_id=request_body.user_id,
            income_date=request_body.income.date,
            proposal=proposal,
        )
        db.commit()

    except InvalidInputError as e:
        db.rollback()
        logging.warning(f"Invalid allocation input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_allocation(PROPOSED)
    log_allocation(
        request_id, request_body.user_id, str(record.id), PROPOSED,
        proposal.income_cents, proposal.free_cash_cents, duration_ms,
    )

    return _to_response(record, proposal, PROPOSED)


@router.get("/allocations/{allocation_id}", response_model=AllocationResponse)
def get_allocation(allocation_id: str, db: Session = Depends(get_db)):
    record = _load_allocation(AllocationRepository(db), allocation_id)
    return _to_response(record, to_proposal(record), record.status)


@router.patch("/allocations/{allocation_id}", response_model=AllocationResponse)
def edit_allocation(
    allocation_id: str,
    request_body: AllocationEditRequest,
    db: Session = Depends(get_db),
):
    """
    Adjust the living reserve and per-goal amounts of a pending proposal.

    Free cash is recomputed so the lines still add up to the income; it
    turns negative when more is handed out than came in.
    """
    repo = AllocationRepository(db)
    record = _load_allocation(repo, allocation_id)

    # AllocationStateError -> 409, InvalidInputError -> 422 via the app exception handlers
    session = AllocationSession(to_proposal(record), record.status)
    proposal = session.edit(
        living_reserve_cents=request_body.living_reserve_cents,
        strategic_amounts=request_body.strategic,
    )

    repo.save_edits(record, proposal)
    db.commit()
    return _to_response(record, proposal, session.state)


@router.post("/allocations/{allocation_id}/confirm", response_model=ConfirmResponse)
def confirm_allocation(
    allocation_id: str,
    background_tasks: BackgroundTasks,
    request: Request,
    db: Session = Depends(get_db),
    sync_client: LedgerSyncClient = Depends(get_ledger_sync_client),
):
    """
    Commit the proposal into the user's savings goals.

    Flow:
    1. Flip the status proposed -> confirmed; a second confirm gets 409
    2. Add each strategic line to the goal of the same name as an SQL
       increment, in the same transaction as the status change
    3. Return the goal balances as stored after the commit
    4. Send the confirmed allocation to the ledger sync in the background
    """
    start_time = time.time()
    request_id = get_request_id(request)
    repo = AllocationRepository(db)
    goal_repo = GoalRepository(db)
    record = _load_allocation(repo, allocation_id)

    session = AllocationSession(to_proposal(record), record.status)
    goals = [to_savings_goal(r) for r in goal_repo.get_goals_by_user(record.user_id)]

    try:
        session.confirm(goals)
        if not repo.transition_status(record.id, PROPOSED, CONFIRMED):
            raise AllocationStateError("allocation was resolved by another request")
        # Increment in SQL rather than write back the balances read above
        goal_repo.credit_goals(record.user_id, strategic_credits(session.proposal))
        db.commit()

    except AllocationStateError as e:
        db.rollback()
        logging.warning(f"Rejected confirm: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    proposal = session.proposal
    updated_goals = [to_savings_goal(r) for r in goal_repo.get_goals_by_user(record.user_id)]
    background_tasks.add_task(
        sync_client.send_allocation_event,
        {
            "event": "ALLOCATION_CONFIRMED",
            "allocation_id": str(record.id),
            "user_id": record.user_id,
            "income_cents": proposal.income_cents,
            "living_reserve_cents": proposal.living_reserve_cents,
            "free_cash_cents": proposal.free_cash_cents,
            "goals": [
                {"goal_id": g.goal_id, "name": g.name, "current_amount_cents": g.current_amount_cents}
                for g in updated_goals
            ],
        },
    )

    duration_ms = (time.time() - start_time) * 1000
    record_allocation(CONFIRMED, proposal.free_cash_cents)
    log_allocation(
        request_id, record.user_id, str(record.id), CONFIRMED,
        proposal.income_cents, proposal.free_cash_cents, duration_ms,
    )

    return ConfirmResponse(
        allocation=_to_response(record, proposal, CONFIRMED),
        goals=[from_goal(g) for g in updated_goals],
    )


@router.post("/allocations/{allocation_id}/discard", response_model=AllocationResponse)
def discard_allocation(allocation_id: str, request: Request, db: Session = Depends(get_db)):
    """Drop a pending proposal; goals are left untouched"""
    start_time = time.time()
    request_id = get_request_id(request)
    repo = AllocationRepository(db)
    record = _load_allocation(repo, allocation_id)

    session = AllocationSession(to_proposal(record), record.status)
    try:
        session.discard()
        if not repo.transition_status(record.id, PROPOSED, DISCARDED):
            raise AllocationStateError("allocation was resolved by another request")
        db.commit()
    except AllocationStateError as e:
        db.rollback()
        raise HTTPException(status_code=409, detail=str(e))

    proposal = session.proposal
    record_allocation(DISCARDED)
    log_allocation(
        request_id, record.user_id, str(record.id), DISCARDED,
        proposal.income_cents, proposal.free_cash_cents, (time.time() - start_time) * 1000,
    )
    return _to_response(record, proposal, DISCARDED)
