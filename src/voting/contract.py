"""
Voting contract

Public surface of the ballot. Every mutating call is one transaction:
  - the state is snapshotted
  - the operation runs against the live state
  - on any exception the snapshot is restored and the exception propagates unchanged
  - on success events are emitted, the call is journaled, and a TxReceipt is returned

Callers identify themselves with the keyword-only `sender`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from voting import ballot_box, proposal_registry, vote_tally, voter_registry, workflow
from voting.events import ContractEvent, emit_event
from voting.journal import Journal
from voting.state import ContractState, Proposal, Voter
from voting.workflow import WorkflowStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TxReceipt:
    tx_index: int
    method: str
    sender: str
    args: List[Any]
    events: List[ContractEvent] = field(default_factory=list)
    seal: str = ""

    def event(self, name: str) -> Optional[ContractEvent]:
        for e in self.events:
            if e.name == name:
                return e
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tx_index": self.tx_index,
            "method": self.method,
            "sender": self.sender,
            "args": list(self.args),
            "events": [e.to_dict() for e in self.events],
            "seal": self.seal,
        }


class Voting:
    def __init__(self, owner: str, *, journal: Optional[Journal] = None) -> None:
        if not owner:
            raise ValueError("owner address required")
        self._state = ContractState(owner=owner)
        self.journal = journal if journal is not None else Journal()

    # ---------- read-only attributes ----------

    @property
    def owner(self) -> str:
        return self._state.owner

    @property
    def workflow_status(self) -> WorkflowStatus:
        return self._state.workflow_status

    @property
    def winning_proposal_id(self) -> int:
        return self._state.winning_proposal_id

    def snapshot(self) -> ContractState:
        return self._state.snapshot()

    # ---------- transaction runner ----------

    def _transact(self, method: str, sender: str, args: List[Any], op: Callable[[ContractState], ContractEvent]) -> TxReceipt:
        saved = self._state.snapshot()
        try:
            events = [op(self._state)]
            entry = self.journal.append(
                method=method,
                sender=sender,
                args=args,
                events=[ev.to_dict() for ev in events],
            )
        except Exception as e:
            self._state = saved
            logger.info("tx reverted: %s by %s: %s", method, sender, e)
            raise

        # committed from here on; a broken event sink must not surface as a revert
        for ev in events:
            try:
                emit_event(ev, tx_index=entry["index"])
            except OSError as e:
                logger.warning("event sink unavailable; %s not written for tx %d: %s", ev.name, entry["index"], e)
        logger.info("tx %d committed: %s by %s (status=%s)", entry["index"], method, sender, self._state.workflow_status.name)
        return TxReceipt(
            tx_index=entry["index"],
            method=method,
            sender=sender,
            args=list(args),
            events=events,
            seal=entry["seal"],
        )

    # ---------- voters ----------

    def add_voter(self, address: str, *, sender: str) -> TxReceipt:
        return self._transact("addVoter", sender, [address], lambda s: voter_registry.add_voter(s, sender, address))

    def get_voter(self, address: str, *, sender: str) -> Voter:
        logger.debug("getVoter(%s) by %s", address, sender)
        return voter_registry.get_voter(self._state, sender, address)

    # ---------- proposals ----------

    def start_proposals_registering(self, *, sender: str) -> TxReceipt:
        return self._transact(
            "startProposalsRegistering", sender, [], lambda s: proposal_registry.start_proposals_registering(s, sender)
        )

    def end_proposals_registering(self, *, sender: str) -> TxReceipt:
        return self._transact("endProposalsRegistering", sender, [], lambda s: workflow.end_proposals_registering(s, sender))

    def add_proposal(self, description: str, *, sender: str) -> TxReceipt:
        return self._transact(
            "addProposal", sender, [description], lambda s: proposal_registry.add_proposal(s, sender, description)
        )

    def get_one_proposal(self, proposal_id: int, *, sender: str) -> Proposal:
        logger.debug("getOneProposal(%s) by %s", proposal_id, sender)
        return proposal_registry.get_one_proposal(self._state, sender, proposal_id)

    # ---------- voting ----------

    def start_voting_session(self, *, sender: str) -> TxReceipt:
        return self._transact("startVotingSession", sender, [], lambda s: workflow.start_voting_session(s, sender))

    def end_voting_session(self, *, sender: str) -> TxReceipt:
        return self._transact("endVotingSession", sender, [], lambda s: workflow.end_voting_session(s, sender))

    def set_vote(self, proposal_id: int, *, sender: str) -> TxReceipt:
        return self._transact("setVote", sender, [proposal_id], lambda s: ballot_box.set_vote(s, sender, proposal_id))

    def tally_votes(self, *, sender: str) -> TxReceipt:
        return self._transact("tallyVotes", sender, [], lambda s: vote_tally.tally_votes(s, sender))


# ABI name -> (python method, mutating)
ABI: Dict[str, tuple] = {
    "addVoter": ("add_voter", True),
    "getVoter": ("get_voter", False),
    "startProposalsRegistering": ("start_proposals_registering", True),
    "endProposalsRegistering": ("end_proposals_registering", True),
    "addProposal": ("add_proposal", True),
    "getOneProposal": ("get_one_proposal", False),
    "startVotingSession": ("start_voting_session", True),
    "endVotingSession": ("end_voting_session", True),
    "setVote": ("set_vote", True),
    "tallyVotes": ("tally_votes", True),
}
