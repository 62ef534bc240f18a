from __future__ import annotations

from typing import Any, Dict, List, Sequence

from voting.events import ContractEvent, workflow_status_change
from voting.state import ContractState, Proposal
from voting.workflow import WorkflowStatus, check_transition


def compute_winner(proposals: Sequence[Proposal]) -> int:
    """
    First-past-the-post over proposal indices, single pass from 0 upward.
    A later proposal only takes the lead with a strictly greater count, so ties
    go to the lowest index (GENESIS wins when nobody voted).
    """
    if not proposals:
        raise ValueError("cannot tally an empty proposal list")

    best_id, best_count = 0, proposals[0].vote_count
    for idx in range(1, len(proposals)):
        if proposals[idx].vote_count > best_count:
            best_id, best_count = idx, proposals[idx].vote_count
    return best_id


def tally_votes(state: ContractState, caller: str) -> ContractEvent:
    previous, new = check_transition(state, caller, "tallyVotes")
    state.winning_proposal_id = compute_winner(state.proposals)
    state.workflow_status = new
    return workflow_status_change(previous, new)


def tally_report(state: ContractState) -> Dict[str, Any]:
    """
    Read-only summary of the current counts. `winning_proposal_id` is only set
    once the workflow has reached VotesTallied.
    """
    counts: List[Dict[str, Any]] = [
        {"proposalId": idx, "description": p.description, "voteCount": p.vote_count}
        for idx, p in enumerate(state.proposals)
    ]
    tallied = state.workflow_status == WorkflowStatus.VotesTallied
    winner = state.winning_proposal_id if tallied else None
    return {
        "tallied": tallied,
        "counts": counts,
        "total_votes": sum(p.vote_count for p in state.proposals),
        "voters_registered": len(state.voters),
        "voters_voted": sum(1 for v in state.voters.values() if v.has_voted),
        "winning_proposal_id": winner,
        "winning_description": state.proposals[winner].description if winner is not None else None,
    }
