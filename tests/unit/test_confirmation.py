"""Unit tests for the allocation confirmation protocol"""

import pytest
from cashflow_gateway.domain.allocation import allocate
from cashflow_gateway.domain.confirmation import (
    CONFIRMED,
    DISCARDED,
    PROPOSED,
    AllocationSession,
    commit,
    rebalance,
    strategic_credits,
)
from cashflow_gateway.domain.exceptions import AllocationStateError, InvalidInputError
from cashflow_gateway.domain.models import StrategicLine, UpcomingDebt


def _balanced(proposal):
    return (
        proposal.survival_total_cents
        + proposal.living_reserve_cents
        + proposal.strategic_total_cents
        + proposal.free_cash_cents
    ) == proposal.income_cents


@pytest.fixture
def proposal(savings_goals):
    # 100,000 - 20,000 rent - 14,000 reserve = 66,000 base; 30% -> 19,800, 10% -> 6,600
    return allocate(100_000, [UpcomingDebt("Rent", 20_000)], savings_goals, 7, daily_baseline_cents=2_000)


def test_proposal_fixture_shape(proposal):
    assert proposal.strategic == (StrategicLine("Emergency fund", 19_800), StrategicLine("Vacation", 6_600))
    assert proposal.free_cash_cents == 39_600


def test_new_session_is_proposed(proposal):
    session = AllocationSession(proposal)

    assert session.state == PROPOSED
    assert session.proposal == proposal


def test_editing_reserve_recomputes_free_cash(proposal):
    session = AllocationSession(proposal)

    edited = session.set_living_reserve(20_000)

    assert edited.living_reserve_cents == 20_000
    assert edited.free_cash_cents == 39_600 - 6_000
    assert _balanced(edited)


def test_editing_strategic_line(proposal):
    session = AllocationSession(proposal)

    edited = session.set_strategic_amount("Vacation", 10_000)

    assert edited.strategic == (StrategicLine("Emergency fund", 19_800), StrategicLine("Vacation", 10_000))
    assert session.free_cash_cents == 39_600 - 3_400
    assert _balanced(edited)


def test_over_allocation_drives_free_cash_negative(proposal):
    session = AllocationSession(proposal)

    edited = session.edit(living_reserve_cents=50_000, strategic_amounts={"Emergency fund": 40_000})

    assert edited.free_cash_cents < 0
    assert _balanced(edited)


def test_survival_lines_survive_edits(proposal):
    edited = rebalance(proposal, living_reserve_cents=0, strategic_amounts={"Vacation": 0})

    assert edited.survival == proposal.survival


def test_rebalance_without_edits_is_identity(proposal):
    assert rebalance(proposal) == proposal


def test_unknown_goal_edit_rejected(proposal):
    session = AllocationSession(proposal)

    with pytest.raises(InvalidInputError):
        session.set_strategic_amount("Dormant", 1_000)
    assert session.proposal == proposal


def test_negative_edits_rejected(proposal):
    session = AllocationSession(proposal)

    with pytest.raises(InvalidInputError):
        session.set_living_reserve(-1)
    with pytest.raises(InvalidInputError):
        session.set_strategic_amount("Vacation", -1)


def test_confirm_credits_matching_goals(proposal, savings_goals):
    session = AllocationSession(proposal)

    updated = session.confirm(savings_goals)

    assert session.state == CONFIRMED
    assert [g.current_amount_cents for g in updated] == [200_000 + 19_800, 6_600, 5_000]
    # Originals untouched
    assert [g.current_amount_cents for g in savings_goals] == [200_000, 0, 5_000]


def test_confirm_uses_edited_amounts(proposal, savings_goals):
    session = AllocationSession(proposal)
    session.set_strategic_amount("Vacation", 1_234)

    updated = session.confirm(savings_goals)

    assert updated[1].current_amount_cents == 1_234


def test_confirm_is_terminal(proposal, savings_goals):
    session = AllocationSession(proposal)
    session.confirm(savings_goals)

    with pytest.raises(AllocationStateError):
        session.confirm(savings_goals)
    with pytest.raises(AllocationStateError):
        session.set_living_reserve(0)
    with pytest.raises(AllocationStateError):
        session.discard()


def test_discard_is_terminal_and_side_effect_free(proposal, savings_goals):
    session = AllocationSession(proposal)

    session.discard()

    assert session.state == DISCARDED
    assert [g.current_amount_cents for g in savings_goals] == [200_000, 0, 5_000]
    with pytest.raises(AllocationStateError):
        session.confirm(savings_goals)


def test_restored_terminal_session_rejects_transitions(proposal, savings_goals):
    session = AllocationSession(proposal, state=CONFIRMED)

    with pytest.raises(AllocationStateError):
        session.confirm(savings_goals)


def test_unknown_state_rejected(proposal):
    with pytest.raises(InvalidInputError):
        AllocationSession(proposal, state="pending")


def test_commit_leaves_goals_without_line_unchanged(proposal, savings_goals):
    updated = commit(proposal, savings_goals)

    assert updated[2] is savings_goals[2]
    assert len(updated) == len(savings_goals)


def test_strategic_credits_by_goal_name(proposal):
    assert strategic_credits(proposal) == {"Emergency fund": 19_800, "Vacation": 6_600}
    assert strategic_credits(rebalance(proposal, strategic_amounts={"Vacation": 0})) == {
        "Emergency fund": 19_800,
        "Vacation": 0,
    }
