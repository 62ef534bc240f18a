import json

from voting.contract import Voting
from voting.events import emit_event, reset_seq_for_tests, voter_registered, workflow_status_change

from conftest import OWNER, SECOND


def test_emit_event_writes_jsonl(tmp_path, monkeypatch):
    reset_seq_for_tests()
    p = tmp_path / "voting_events.jsonl"
    monkeypatch.setenv("VOTING_EVENTS_OUT", str(p))

    emit_event(voter_registered(SECOND))
    emit_event(workflow_status_change(0, 1), tx_index=3)

    lines = [ln for ln in p.read_text(encoding="utf-8").splitlines() if ln.strip()]
    assert len(lines) == 2
    obj0 = json.loads(lines[0])
    assert obj0["seq"] == 1
    assert obj0["kind"] == "VoterRegistered"
    assert obj0["data"] == {"voterAddress": SECOND}
    obj1 = json.loads(lines[1])
    assert obj1["data"] == {"previousStatus": 0, "newStatus": 1, "tx_index": 3}


def test_emit_event_noop_without_env(tmp_path):
    emit_event(voter_registered(SECOND))
    assert list(tmp_path.iterdir()) == []


def test_contract_emits_only_committed_events(tmp_path, monkeypatch):
    p = tmp_path / "events.jsonl"
    monkeypatch.setenv("VOTING_EVENTS_OUT", str(p))

    v = Voting(OWNER)
    v.add_voter(SECOND, sender=OWNER)
    try:
        v.add_voter(SECOND, sender=OWNER)
    except ValueError:
        pass
    v.start_proposals_registering(sender=OWNER)

    kinds = [json.loads(ln)["kind"] for ln in p.read_text(encoding="utf-8").splitlines() if ln.strip()]
    assert kinds == ["VoterRegistered", "WorkflowStatusChange"]


def test_broken_event_sink_does_not_undo_commit(tmp_path, monkeypatch, caplog):
    monkeypatch.setenv("VOTING_EVENTS_OUT", str(tmp_path))  # a directory, not a file

    v = Voting(OWNER)
    with caplog.at_level("WARNING", logger="voting.contract"):
        r = v.add_voter(SECOND, sender=OWNER)

    assert r.event("VoterRegistered").args == {"voterAddress": SECOND}
    assert list(v.snapshot().voters) == [SECOND]
    assert len(v.journal) == 1
    assert "event sink unavailable" in caplog.text
