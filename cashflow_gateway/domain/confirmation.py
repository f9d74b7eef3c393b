"""Allocation confirmation - editable proposal that commits into savings goals exactly once"""

from dataclasses import replace
from typing import Dict, List, Mapping, Optional, Sequence

from cashflow_gateway.domain.exceptions import AllocationStateError, InvalidInputError
from cashflow_gateway.domain.models import AllocationProposal, SavingsGoal, StrategicLine

PROPOSED = "proposed"
CONFIRMED = "confirmed"
DISCARDED = "discarded"
TERMINAL_STATES = (CONFIRMED, DISCARDED)


def rebalance(
    proposal: AllocationProposal,
    living_reserve_cents: Optional[int] = None,
    strategic_amounts: Optional[Mapping[str, int]] = None,
) -> AllocationProposal:
    """
    Apply user edits and recompute free cash.

    Only the living reserve and strategic lines are editable; survival lines
    are already owed. Free cash absorbs the difference and goes negative when
    the user hands out more than the income.
    """
    living = proposal.living_reserve_cents if living_reserve_cents is None else living_reserve_cents
    if living < 0:
        raise InvalidInputError(f"living reserve must be non-negative, got {living}")

    strategic = proposal.strategic
    if strategic_amounts:
        known = {line.goal_name for line in strategic}
        unknown = set(strategic_amounts) - known
        if unknown:
            raise InvalidInputError(f"no strategic line for goal(s): {sorted(unknown)}")
        if any(amount < 0 for amount in strategic_amounts.values()):
            raise InvalidInputError("strategic amounts must be non-negative")

        strategic = tuple(
            StrategicLine(line.goal_name, strategic_amounts.get(line.goal_name, line.amount_cents))
            for line in strategic
        )

    free_cash = (
        proposal.income_cents
        - proposal.survival_total_cents
        - living
        - sum(line.amount_cents for line in strategic)
    )
    return replace(
        proposal,
        living_reserve_cents=living,
        strategic=strategic,
        free_cash_cents=free_cash,
    )


def strategic_credits(proposal: AllocationProposal) -> Dict[str, int]:
    """Amount each goal receives, keyed by goal name"""
    allocated: Dict[str, int] = {}
    for line in proposal.strategic:
        allocated[line.goal_name] = allocated.get(line.goal_name, 0) + line.amount_cents
    return allocated


def commit(proposal: AllocationProposal, goals: Sequence[SavingsGoal]) -> List[SavingsGoal]:
    """
    Credit each strategic line to the goal of the same name.

    Returns new goal records in input order; goals without a line come back
    unchanged. Inputs are not mutated.
    """
    allocated = strategic_credits(proposal)

    return [
        replace(goal, current_amount_cents=goal.current_amount_cents + allocated[goal.name])
        if goal.name in allocated
        else goal
        for goal in goals
    ]


class AllocationSession:
    """
    Proposed -> Confirmed | Discarded.

    The session owns the only path that mutates goal balances; both outcomes
    are terminal so a proposal can never be committed twice.
    """

    def __init__(self, proposal: AllocationProposal, state: str = PROPOSED):
        if state not in (PROPOSED,) + TERMINAL_STATES:
            raise InvalidInputError(f"unknown allocation state {state!r}")
        self._proposal = proposal
        self._state = state

    @property
    def proposal(self) -> AllocationProposal:
        return self._proposal

    @property
    def state(self) -> str:
        return self._state

    @property
    def free_cash_cents(self) -> int:
        return self._proposal.free_cash_cents

    def _require_open(self, action: str) -> None:
        if self._state != PROPOSED:
            raise AllocationStateError(f"cannot {action} an allocation that is already {self._state}")

    def set_living_reserve(self, amount_cents: int) -> AllocationProposal:
        self._require_open("edit")
        self._proposal = rebalance(self._proposal, living_reserve_cents=amount_cents)
        return self._proposal

    def set_strategic_amount(self, goal_name: str, amount_cents: int) -> AllocationProposal:
        self._require_open("edit")
        self._proposal = rebalance(self._proposal, strategic_amounts={goal_name: amount_cents})
        return self._proposal

    def edit(
        self,
        living_reserve_cents: Optional[int] = None,
        strategic_amounts: Optional[Mapping[str, int]] = None,
    ) -> AllocationProposal:
        """Apply several edits at once; all-or-nothing"""
        self._require_open("edit")
        self._proposal = rebalance(self._proposal, living_reserve_cents, strategic_amounts)
        return self._proposal

    def confirm(self, goals: Sequence[SavingsGoal]) -> List[SavingsGoal]:
        self._require_open("confirm")
        updated = commit(self._proposal, goals)
        self._state = CONFIRMED
        return updated

    def discard(self) -> None:
        self._require_open("discard")
        self._state = DISCARDED
