"""
Scenario replay v1

Deploys a fresh Voting contract and replays a scripted list of calls from a
YAML file, checking expected reverts along the way.

Scenario format (YAML):
  accounts: {alias: address, ...}
  owner: alias
  steps:
    - {sender: alias, call: addVoter, args: [alias-or-literal]}
    - {sender: alias, call: setVote, args: [10], expect_revert: "Proposal not found"}
  expect: {workflow_status: 5, winning_proposal_id: 1}   # optional

String args that match an account alias are replaced by its address.
"""
from __future__ import annotations

import argparse
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from jsonschema import Draft202012Validator

from voting.contract import ABI, Voting
from voting.errors import VotingError
from voting.events import EVENTS_OUT_ENV
from voting.journal import Journal
from voting.vote_tally import tally_report
from voting.workflow import WorkflowStatus

logger = logging.getLogger(__name__)

SCENARIO_SCHEMA_PATH = Path(__file__).resolve().parent / "schema" / "scenario.schema.json"
JOURNAL_PATH_ENV = "VOTING_JOURNAL_PATH"


class ScenarioError(ValueError):
    pass


def load_yaml(path: Path) -> Dict[str, Any]:
    return yaml.safe_load(path.read_text(encoding="utf-8-sig"))


def validate_scenario(doc: Dict[str, Any]) -> None:
    schema = json.loads(SCENARIO_SCHEMA_PATH.read_text(encoding="utf-8-sig"))
    v = Draft202012Validator(schema)
    errors = sorted(v.iter_errors(doc), key=lambda e: list(e.path))
    if errors:
        msg = "\n".join([f"- {list(e.path)}: {e.message}" for e in errors])
        raise ScenarioError("scenario schema validation failed:\n" + msg)

    accounts = doc["accounts"]
    if doc["owner"] not in accounts:
        raise ScenarioError(f"owner alias '{doc['owner']}' not in accounts")
    for i, step in enumerate(doc["steps"]):
        if step["sender"] not in accounts:
            raise ScenarioError(f"step {i}: sender alias '{step['sender']}' not in accounts")


def load_scenario(path: Path) -> Dict[str, Any]:
    doc = load_yaml(path)
    if not isinstance(doc, dict):
        raise ScenarioError(f"scenario must be a mapping: {path}")
    validate_scenario(doc)
    return doc


def _resolve_args(args: List[Any], accounts: Dict[str, str]) -> List[Any]:
    return [accounts.get(a, a) if isinstance(a, str) else a for a in args]


def run_scenario(scenario: Dict[str, Any], *, journal: Optional[Journal] = None) -> Dict[str, Any]:
    """
    Returns result dict. Does NOT write to disk (the journal may, if it has a path).
    """
    accounts: Dict[str, str] = dict(scenario["accounts"])
    contract = Voting(accounts[scenario["owner"]], journal=journal)

    receipts = 0
    reverts = 0
    for i, step in enumerate(scenario["steps"]):
        call = step["call"]
        sender = accounts[step["sender"]]
        args = _resolve_args(step.get("args", []), accounts)
        expected = step.get("expect_revert")
        method_name, mutating = ABI[call]
        method = getattr(contract, method_name)

        try:
            method(*args, sender=sender)
        except VotingError as e:
            if expected is None:
                raise ScenarioError(f"step {i} ({call}): unexpected revert: {e.reason}") from e
            if e.reason != expected:
                raise ScenarioError(f"step {i} ({call}): expected revert '{expected}', got '{e.reason}'") from e
            reverts += 1
            continue
        except TypeError as e:
            raise ScenarioError(f"step {i} ({call}): bad arguments {args}: {e}") from e

        if expected is not None:
            raise ScenarioError(f"step {i} ({call}): expected revert '{expected}' but call succeeded")
        if mutating:
            receipts += 1

    state = contract.snapshot()
    result: Dict[str, Any] = {
        "version": 1,
        "scenario": scenario.get("name"),
        "workflow_status": int(contract.workflow_status),
        "workflow_status_name": contract.workflow_status.name,
        "winning_proposal_id": contract.winning_proposal_id,
        "receipts": receipts,
        "reverts": reverts,
        "tally": tally_report(state) if contract.workflow_status == WorkflowStatus.VotesTallied else None,
        "state": state.to_dict(),
        "journal": contract.journal.checkpoint(),
    }

    expect = scenario.get("expect") or {}
    for key, want in expect.items():
        if result.get(key) != want:
            raise ScenarioError(f"expected {key}={want}, got {result.get(key)}")
    return result


def main() -> int:
    ap = argparse.ArgumentParser(description="Replay a ballot scenario against a fresh Voting contract.")
    ap.add_argument("scenario", help="Scenario YAML path (e.g., scenarios/winner.yml)")
    ap.add_argument("--out", required=True, help="Output JSON path for the result")
    ap.add_argument("--journal", default=os.getenv(JOURNAL_PATH_ENV, ""), help="Optional JSONL transaction journal path")
    ap.add_argument("--events", default="", help="Optional JSONL event log path (sets VOTING_EVENTS_OUT)")
    ap.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG/INFO/WARNING)")

    args = ap.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    if args.events:
        os.environ[EVENTS_OUT_ENV] = args.events

    scenario_path = Path(args.scenario)
    if not scenario_path.exists():
        raise SystemExit(f"scenario file not found: {scenario_path}")

    # an existing journal file is extended, not replaced
    journal = Journal.load(Path(args.journal)) if args.journal else None
    try:
        result = run_scenario(load_scenario(scenario_path), journal=journal)
    except ScenarioError as e:
        raise SystemExit(f"scenario failed: {e}")

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(result, indent=2, sort_keys=True), encoding="utf-8")
    print(f"Wrote: {out_path.resolve()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
