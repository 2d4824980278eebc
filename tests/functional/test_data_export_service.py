"""Functional tests for DataExportService sequencing.

Covers the verify -> aggregate -> format flow, the terminal REJECTED and
FAILED outcomes, and the domain events each outcome publishes.
"""

from __future__ import annotations

import json

import pytest

from storefront.logic import events
from storefront.logic.aggregator import UserDataAggregator
from storefront.logic.challenge import ChallengeStore
from storefront.logic.data_export import DataExportService, ExportState
from storefront.logic.errors import AggregationFailed, UnsupportedFormat, WrongAnswer
from storefront.logic.export_formatter import CONFIRMATION
from storefront.logic.security import Session
from storefront.models.export import ExportSnapshot
from storefront.models.user import UserProfile

JIM = UserProfile(id=2, email="jim@juice-sh.op")


class RecordingAggregator(UserDataAggregator):
    def __init__(self, fail: bool = False) -> None:
        self.calls: list[int] = []
        self.fail = fail

    def aggregate(self, user_id: int) -> ExportSnapshot:
        self.calls.append(user_id)
        if self.fail:
            raise AggregationFailed()
        return ExportSnapshot(username="", email="jim@juice-sh.op")


@pytest.fixture()
def challenges() -> ChallengeStore:
    return ChallengeStore(ttl_seconds=300)


@pytest.fixture()
def session() -> Session:
    return Session(token="token-jim", user=JIM)


def _event_types() -> list[str]:
    return [e["type"] for e in events.get_buffered_events(clear=False)]


def test_export_without_pending_challenge_skips_verification(challenges, session) -> None:
    aggregator = RecordingAggregator()
    service = DataExportService(challenges=challenges, aggregator=aggregator)

    outcome = service.export(session, "1")

    assert outcome.confirmation == CONFIRMATION
    assert json.loads(outcome.user_data)["email"] == "jim@juice-sh.op"
    assert outcome.media_type == "application/json"
    assert outcome.states == [
        ExportState.RECEIVED,
        ExportState.AGGREGATING,
        ExportState.FORMATTING,
        ExportState.COMPLETED,
    ]
    assert aggregator.calls == [2]
    assert _event_types() == [events.DATA_EXPORT_COMPLETED]


def test_answer_without_pending_challenge_is_ignored(challenges, session) -> None:
    outcome = DataExportService(challenges=challenges, aggregator=RecordingAggregator()).export(
        session, "1", "whatever"
    )
    assert ExportState.VERIFYING not in outcome.states
    assert outcome.states[-1] is ExportState.COMPLETED


def test_correct_answer_verifies_then_exports(challenges, session) -> None:
    challenges.issue(session.token, "aB3xY")
    service = DataExportService(challenges=challenges, aggregator=RecordingAggregator())

    outcome = service.export(session, "1", "aB3xY")

    assert outcome.states == [
        ExportState.RECEIVED,
        ExportState.VERIFYING,
        ExportState.VERIFIED,
        ExportState.AGGREGATING,
        ExportState.FORMATTING,
        ExportState.COMPLETED,
    ]
    assert challenges.is_pending(session.token) is False


def test_wrong_answer_rejects_before_any_aggregation(challenges, session) -> None:
    challenges.issue(session.token, "aB3xY")
    aggregator = RecordingAggregator()
    service = DataExportService(challenges=challenges, aggregator=aggregator)

    with pytest.raises(WrongAnswer):
        service.export(session, "1", "AAAAAA")

    assert aggregator.calls == []
    assert _event_types() == [events.DATA_EXPORT_REJECTED]
    assert challenges.is_pending(session.token) is True


def test_missing_answer_with_pending_challenge_is_rejected(challenges, session) -> None:
    challenges.issue(session.token, "aB3xY")
    aggregator = RecordingAggregator()

    with pytest.raises(WrongAnswer):
        DataExportService(challenges=challenges, aggregator=aggregator).export(session, "1")
    assert aggregator.calls == []


def test_unsupported_format_leaves_pending_challenge_untouched(challenges, session) -> None:
    challenges.issue(session.token, "aB3xY")
    aggregator = RecordingAggregator()
    service = DataExportService(challenges=challenges, aggregator=aggregator)

    with pytest.raises(UnsupportedFormat):
        service.export(session, "2", "aB3xY")

    assert challenges.is_pending(session.token) is True
    assert aggregator.calls == []
    assert _event_types() == []


def test_aggregation_failure_propagates_without_user_data(challenges, session) -> None:
    service = DataExportService(challenges=challenges, aggregator=RecordingAggregator(fail=True))

    with pytest.raises(AggregationFailed):
        service.export(session, "1")
    assert events.DATA_EXPORT_COMPLETED not in _event_types()


def test_export_reads_only_the_session_users_data(challenges) -> None:
    aggregator = RecordingAggregator()
    service = DataExportService(challenges=challenges, aggregator=aggregator)

    service.export(Session(token="t-amy", user=UserProfile(id=5, email="amy@juice-sh.op")), "1")
    service.export(Session(token="t-jim", user=JIM), "1")

    assert aggregator.calls == [5, 2]


def test_expired_challenge_lets_export_proceed_unverified(session) -> None:
    now = [1000.0]
    challenges = ChallengeStore(ttl_seconds=300, clock=lambda: now[0])
    challenges.issue(session.token, "aB3xY")
    now[0] += 301
    aggregator = RecordingAggregator()

    outcome = DataExportService(challenges=challenges, aggregator=aggregator).export(session, "1", "stale")

    assert outcome.states == [
        ExportState.RECEIVED,
        ExportState.AGGREGATING,
        ExportState.FORMATTING,
        ExportState.COMPLETED,
    ]
    assert aggregator.calls == [2]
    assert _event_types() == [events.DATA_EXPORT_COMPLETED]
