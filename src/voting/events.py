from __future__ import annotations

import itertools
import json
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

EVENTS_OUT_ENV = "VOTING_EVENTS_OUT"

_lock = threading.Lock()
_seq = itertools.count(1)


@dataclass(frozen=True)
class ContractEvent:
    name: str
    args: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.name, "args": dict(self.args)}


def workflow_status_change(previous: int, new: int) -> ContractEvent:
    return ContractEvent("WorkflowStatusChange", {"previousStatus": int(previous), "newStatus": int(new)})


def voter_registered(address: str) -> ContractEvent:
    return ContractEvent("VoterRegistered", {"voterAddress": address})


def proposal_registered(proposal_id: int) -> ContractEvent:
    return ContractEvent("ProposalRegistered", {"proposalId": int(proposal_id)})


def voted(voter: str, proposal_id: int) -> ContractEvent:
    return ContractEvent("Voted", {"voter": voter, "proposalId": int(proposal_id)})


def reset_seq_for_tests() -> None:
    global _seq
    with _lock:
        _seq = itertools.count(1)


def events_out_path() -> Optional[Path]:
    """Event log file configured through $VOTING_EVENTS_OUT, or None."""
    v = os.environ.get(EVENTS_OUT_ENV, "").strip()
    return Path(v) if v else None


def event_record(event: ContractEvent, *, tx_index: Optional[int] = None) -> Dict[str, Any]:
    data: Dict[str, Any] = dict(event.args)
    if tx_index is not None:
        data["tx_index"] = tx_index
    with _lock:
        seq = next(_seq)
    return {"seq": seq, "kind": event.name, "data": data}


def emit_event(event: ContractEvent, *, tx_index: Optional[int] = None) -> None:
    """
    Appends the event as one JSONL line to $VOTING_EVENTS_OUT. No-op when unset.
    """
    out = events_out_path()
    if out is None:
        return

    line = json.dumps(event_record(event, tx_index=tx_index), ensure_ascii=False, sort_keys=True, separators=(",", ":"))
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("a", encoding="utf-8", newline="\n") as f:
        f.write(line + "\n")
