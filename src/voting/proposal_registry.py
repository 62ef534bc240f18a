"""
Proposal registry

Append-only list; a proposal's identifier is its index and never changes.
Index 0 is the GENESIS placeholder created when proposal registration opens.
"""
from __future__ import annotations

from dataclasses import replace

from voting.errors import EmptyProposal, ProposalNotFound
from voting.events import ContractEvent, proposal_registered, workflow_status_change
from voting.state import GENESIS_DESCRIPTION, ContractState, Proposal
from voting.voter_registry import require_voter
from voting.workflow import check_transition, require_status


def has_proposal(state: ContractState, proposal_id: int) -> bool:
    # bool is an int subclass but never a proposal handle
    if isinstance(proposal_id, bool) or not isinstance(proposal_id, int):
        return False
    return 0 <= proposal_id < len(state.proposals)


def require_proposal(state: ContractState, proposal_id: int) -> Proposal:
    if not has_proposal(state, proposal_id):
        raise ProposalNotFound()
    return state.proposals[proposal_id]


def start_proposals_registering(state: ContractState, caller: str) -> ContractEvent:
    previous, new = check_transition(state, caller, "startProposalsRegistering")
    state.workflow_status = new
    state.proposals.append(Proposal(description=GENESIS_DESCRIPTION, vote_count=0))
    return workflow_status_change(previous, new)


def add_proposal(state: ContractState, caller: str, description: str) -> ContractEvent:
    require_status(state, "addProposal")
    require_voter(state, caller)
    if not description:
        raise EmptyProposal()

    state.proposals.append(Proposal(description=description, vote_count=0))
    return proposal_registered(len(state.proposals) - 1)


def get_one_proposal(state: ContractState, caller: str, proposal_id: int) -> Proposal:
    require_voter(state, caller)
    return replace(require_proposal(state, proposal_id))
