from __future__ import annotations

from voting.errors import AlreadyVoted
from voting.events import ContractEvent, voted
from voting.proposal_registry import require_proposal
from voting.state import ContractState
from voting.voter_registry import require_voter
from voting.workflow import require_status


def set_vote(state: ContractState, caller: str, proposal_id: int) -> ContractEvent:
    """
    Records the caller's single ballot for proposal_id.

    All checks run before the first write, so a rejected ballot leaves the
    voter record and every proposal count untouched.
    """
    require_status(state, "setVote")
    voter = require_voter(state, caller)
    if voter.has_voted:
        raise AlreadyVoted()
    proposal = require_proposal(state, proposal_id)

    voter.has_voted = True
    voter.voted_proposal_id = proposal_id
    proposal.vote_count += 1
    return voted(caller, proposal_id)
