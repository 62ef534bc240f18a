"""
Voter registry

The owner whitelists addresses while the workflow is in RegisteringVoters.
A record is created once and later touched only by the ballot box.
"""
from __future__ import annotations

from dataclasses import replace

from voting.access import require_owner
from voting.errors import AlreadyRegistered, NotVoter
from voting.events import ContractEvent, voter_registered
from voting.state import ContractState, Voter
from voting.workflow import require_status


def is_voter(state: ContractState, address: str) -> bool:
    v = state.voters.get(address)
    return v is not None and v.is_registered


def require_voter(state: ContractState, caller: str) -> Voter:
    if not is_voter(state, caller):
        raise NotVoter()
    return state.voters[caller]


def add_voter(state: ContractState, caller: str, address: str) -> ContractEvent:
    require_owner(state, caller)
    require_status(state, "addVoter")
    if is_voter(state, address):
        raise AlreadyRegistered()

    state.voters[address] = Voter(is_registered=True, has_voted=False, voted_proposal_id=0)
    return voter_registered(address)


def get_voter(state: ContractState, caller: str, address: str) -> Voter:
    """
    Returns a copy of the record for `address`. Both the caller and the
    looked-up address must be registered; otherwise NotVoter.
    """
    require_voter(state, caller)
    return replace(require_voter(state, address))
