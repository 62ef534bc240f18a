from __future__ import annotations

import pytest

from voting.ballot_box import set_vote
from voting.errors import AlreadyVoted, NotVoter, ProposalNotFound, WrongPhase
from voting.proposal_registry import add_proposal, start_proposals_registering
from voting.state import ContractState
from voting.voter_registry import add_voter
from voting.workflow import end_proposals_registering, end_voting_session, start_voting_session

from conftest import OWNER, SECOND, THIRD


def _session_state() -> ContractState:
    state = ContractState(owner=OWNER)
    add_voter(state, OWNER, OWNER)
    add_voter(state, OWNER, SECOND)
    start_proposals_registering(state, OWNER)
    add_proposal(state, SECOND, "My proposal")
    end_proposals_registering(state, OWNER)
    start_voting_session(state, OWNER)
    return state


def test_set_vote_updates_voter_proposal_and_emits():
    state = _session_state()
    ev = set_vote(state, OWNER, 1)
    assert ev.name == "Voted"
    assert ev.args == {"voter": OWNER, "proposalId": 1}

    v = state.voters[OWNER]
    assert v.has_voted is True
    assert v.voted_proposal_id == 1
    assert state.proposals[1].vote_count == 1


def test_set_vote_before_session_started():
    state = ContractState(owner=OWNER)
    add_voter(state, OWNER, OWNER)
    with pytest.raises(WrongPhase, match="Voting session havent started yet") as ei:
        set_vote(state, OWNER, 0)
    assert ei.value.too_early is True


def test_set_vote_after_session_ended():
    state = _session_state()
    end_voting_session(state, OWNER)
    with pytest.raises(WrongPhase, match="Voting session is closed"):
        set_vote(state, OWNER, 1)


def test_second_vote_always_fails_whatever_the_target():
    state = _session_state()
    set_vote(state, OWNER, 1)
    for target in (0, 1, 10):
        with pytest.raises(AlreadyVoted, match="You have already voted"):
            set_vote(state, OWNER, target)
    assert state.voters[OWNER].voted_proposal_id == 1
    assert state.proposals[1].vote_count == 1


def test_unknown_proposal_leaves_state_untouched():
    state = _session_state()
    before = state.to_dict()
    with pytest.raises(ProposalNotFound, match="Proposal not found"):
        set_vote(state, OWNER, 10)
    assert state.to_dict() == before
    assert state.voters[OWNER].has_voted is False


def test_non_voter_cannot_vote():
    state = _session_state()
    with pytest.raises(NotVoter):
        set_vote(state, THIRD, 1)


def test_vote_counts_match_voter_records():
    state = _session_state()
    set_vote(state, OWNER, 0)
    set_vote(state, SECOND, 1)
    for idx, p in enumerate(state.proposals):
        ballots = sum(1 for v in state.voters.values() if v.has_voted and v.voted_proposal_id == idx)
        assert p.vote_count == ballots


@pytest.mark.parametrize("bad_id", [True, False, "1", 1.0])
def test_non_integer_proposal_ids_are_not_found(bad_id):
    state = _session_state()
    with pytest.raises(ProposalNotFound):
        set_vote(state, OWNER, bad_id)
    assert state.voters[OWNER].has_voted is False
