"""
Workflow state machine

Six phases in strict forward order. Every phase change is one named operation
with exactly one legal predecessor; everything else is rejected with WrongPhase.

Phase gates:
  - transition operations: TRANSITIONS[op] = (predecessor, successor)
  - plain operations:      PHASE_GATES[op] = required status
"""
from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from voting.access import require_owner
from voting.errors import WrongPhase
from voting.events import ContractEvent, workflow_status_change

if TYPE_CHECKING:
    from voting.state import ContractState


class WorkflowStatus(IntEnum):
    RegisteringVoters = 0
    ProposalsRegistrationStarted = 1
    ProposalsRegistrationEnded = 2
    VotingSessionStarted = 3
    VotingSessionEnded = 4
    VotesTallied = 5


TRANSITIONS: Dict[str, Tuple[WorkflowStatus, WorkflowStatus]] = {
    "startProposalsRegistering": (WorkflowStatus.RegisteringVoters, WorkflowStatus.ProposalsRegistrationStarted),
    "endProposalsRegistering": (WorkflowStatus.ProposalsRegistrationStarted, WorkflowStatus.ProposalsRegistrationEnded),
    "startVotingSession": (WorkflowStatus.ProposalsRegistrationEnded, WorkflowStatus.VotingSessionStarted),
    "endVotingSession": (WorkflowStatus.VotingSessionStarted, WorkflowStatus.VotingSessionEnded),
    "tallyVotes": (WorkflowStatus.VotingSessionEnded, WorkflowStatus.VotesTallied),
}

PHASE_GATES: Dict[str, WorkflowStatus] = {
    "addVoter": WorkflowStatus.RegisteringVoters,
    "addProposal": WorkflowStatus.ProposalsRegistrationStarted,
    "setVote": WorkflowStatus.VotingSessionStarted,
}

# operation -> (too early, already past); None where that side cannot happen
PHASE_REASONS: Dict[str, Tuple[Optional[str], Optional[str]]] = {
    "addVoter": (None, "Voters registration is not open yet"),
    "startProposalsRegistering": (None, "Registering proposals cant be started now"),
    "endProposalsRegistering": ("Registering proposals havent started yet", "Registering proposals already ended"),
    "startVotingSession": ("Registering proposals phase is not finished", "Voting session already started"),
    "endVotingSession": ("Voting session havent started yet", "Voting session already ended"),
    "tallyVotes": ("Current status is not voting session ended", "Votes already tallied"),
    "addProposal": ("Proposals are not allowed yet", "Proposals registration is closed"),
    "setVote": ("Voting session havent started yet", "Voting session is closed"),
}


def required_status(operation: str) -> WorkflowStatus:
    if operation in TRANSITIONS:
        return TRANSITIONS[operation][0]
    if operation in PHASE_GATES:
        return PHASE_GATES[operation]
    raise KeyError(f"unknown workflow operation '{operation}'")


def require_status(state: "ContractState", operation: str) -> None:
    required = required_status(operation)
    current = state.workflow_status
    if current == required:
        return

    too_early = current < required
    early, past = PHASE_REASONS[operation]
    reason = early if too_early else past
    if reason is None:
        reason = f"{operation} requires status {required.name} (current: {current.name})"
    raise WrongPhase(reason, operation=operation, current=current, required=required, too_early=too_early)


def check_transition(state: "ContractState", caller: str, operation: str) -> Tuple[WorkflowStatus, WorkflowStatus]:
    if operation not in TRANSITIONS:
        raise KeyError(f"'{operation}' is not a workflow transition")
    require_owner(state, caller)
    require_status(state, operation)
    return TRANSITIONS[operation]


# transitions with no side effect beyond the status change; the other two
# live with their effects in proposal_registry and vote_tally
PLAIN_TRANSITIONS = frozenset({"endProposalsRegistering", "startVotingSession", "endVotingSession"})


def advance(state: "ContractState", caller: str, operation: str) -> ContractEvent:
    if operation not in PLAIN_TRANSITIONS:
        raise KeyError(f"'{operation}' is not a plain workflow transition")
    previous, new = check_transition(state, caller, operation)
    state.workflow_status = new
    return workflow_status_change(previous, new)


def end_proposals_registering(state: "ContractState", caller: str) -> ContractEvent:
    return advance(state, caller, "endProposalsRegistering")


def start_voting_session(state: "ContractState", caller: str) -> ContractEvent:
    return advance(state, caller, "startVotingSession")


def end_voting_session(state: "ContractState", caller: str) -> ContractEvent:
    return advance(state, caller, "endVotingSession")
