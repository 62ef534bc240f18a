"""
Contract state v1

One explicit record holds everything the ballot contract owns:
  - owner (fixed at deployment)
  - workflow_status
  - voters: address -> Voter
  - proposals: append-only list, identifier = index
  - winning_proposal_id

Operations receive this record as explicit context; nothing lives in module globals.
"""
from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from jsonschema import Draft202012Validator

from voting.workflow import WorkflowStatus


GENESIS_DESCRIPTION = "GENESIS"

STATE_SCHEMA_PATH = Path(__file__).resolve().parent / "schema" / "state.schema.json"


class StateSchemaError(ValueError):
    pass


@dataclass
class Voter:
    is_registered: bool = False
    has_voted: bool = False
    voted_proposal_id: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isRegistered": self.is_registered,
            "hasVoted": self.has_voted,
            "votedProposalId": self.voted_proposal_id,
        }


@dataclass
class Proposal:
    description: str
    vote_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"description": self.description, "voteCount": self.vote_count}


@dataclass
class ContractState:
    owner: str
    workflow_status: WorkflowStatus = WorkflowStatus.RegisteringVoters
    voters: Dict[str, Voter] = field(default_factory=dict)
    proposals: List[Proposal] = field(default_factory=list)
    winning_proposal_id: int = 0

    def snapshot(self) -> "ContractState":
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "owner": self.owner,
            "workflowStatus": int(self.workflow_status),
            "workflowStatusName": self.workflow_status.name,
            "voters": {addr: v.to_dict() for addr, v in sorted(self.voters.items())},
            "proposals": [p.to_dict() for p in self.proposals],
            "winningProposalID": self.winning_proposal_id,
        }


_validator: Optional[Draft202012Validator] = None


def _get_validator() -> Draft202012Validator:
    global _validator
    if _validator is None:
        obj = json.loads(STATE_SCHEMA_PATH.read_text(encoding="utf-8-sig"))
        Draft202012Validator.check_schema(obj)
        _validator = Draft202012Validator(obj)
    return _validator


def validate_state_doc(doc: Dict[str, Any]) -> None:
    errs = sorted(_get_validator().iter_errors(doc), key=lambda e: list(e.path))
    if errs:
        e0 = errs[0]
        loc = ".".join(str(x) for x in e0.path) if e0.path else "<root>"
        raise StateSchemaError(f"state schema violation at {loc}: {e0.message}")


def state_from_dict(doc: Dict[str, Any]) -> ContractState:
    """
    Rebuilds a ContractState from ContractState.to_dict() output.
    The document is schema-checked first; vote counts must agree with voter records.
    """
    validate_state_doc(doc)

    proposals = [Proposal(description=p["description"], vote_count=int(p["voteCount"])) for p in doc["proposals"]]
    voters = {
        str(addr): Voter(
            is_registered=bool(v["isRegistered"]),
            has_voted=bool(v["hasVoted"]),
            voted_proposal_id=int(v["votedProposalId"]),
        )
        for addr, v in doc["voters"].items()
    }

    counts = [0] * len(proposals)
    for addr, v in voters.items():
        if not v.has_voted:
            continue
        if v.voted_proposal_id >= len(proposals):
            raise StateSchemaError(f"voter {addr} voted for unknown proposal {v.voted_proposal_id}")
        counts[v.voted_proposal_id] += 1
    for idx, p in enumerate(proposals):
        if p.vote_count != counts[idx]:
            raise StateSchemaError(f"proposal {idx} voteCount {p.vote_count} != ballots cast {counts[idx]}")

    return ContractState(
        owner=str(doc["owner"]),
        workflow_status=WorkflowStatus(int(doc["workflowStatus"])),
        voters=voters,
        proposals=proposals,
        winning_proposal_id=int(doc["winningProposalID"]),
    )
