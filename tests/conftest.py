from __future__ import annotations

import pytest

from voting.contract import Voting
from voting.events import EVENTS_OUT_ENV, reset_seq_for_tests

OWNER = "0x627306090abaB3A6e1400e9345bC60c78a8BEf57"
SECOND = "0xf17f52151EbEF6C7334FAD080c5704D77216b732"
THIRD = "0xC5fdf4076b8F3A5357c5E395ab970B5B54098Fef"


@pytest.fixture(autouse=True)
def _no_event_sink(monkeypatch):
    monkeypatch.delenv(EVENTS_OUT_ENV, raising=False)
    reset_seq_for_tests()


@pytest.fixture
def voting() -> Voting:
    return Voting(OWNER)


@pytest.fixture
def voting_in_proposals(voting: Voting) -> Voting:
    voting.add_voter(OWNER, sender=OWNER)
    voting.add_voter(SECOND, sender=OWNER)
    voting.start_proposals_registering(sender=OWNER)
    return voting


@pytest.fixture
def voting_in_session(voting_in_proposals: Voting) -> Voting:
    v = voting_in_proposals
    v.add_proposal("My proposal", sender=SECOND)
    v.end_proposals_registering(sender=OWNER)
    v.start_voting_session(sender=OWNER)
    return v
