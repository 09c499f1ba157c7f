import itertools

import pytest

from conftest import at, fixed_clock
from services.scheduling.conflicts import (
    ACCEPTED,
    ACCEPTED_WITH_PREEMPTIONS,
    REJECTED,
    ConflictResolver,
)
from services.scheduling.models import Meeting, MeetingStatus, Room
from services.scheduling.repository import MeetingRepository

_codes = itertools.count(1)


@pytest.fixture
def repo(session):
    return MeetingRepository(session)


@pytest.fixture
def resolver(repo):
    return ConflictResolver(repo, fixed_clock)


@pytest.fixture
def add(session, room):
    def _add(start, end, status=MeetingStatus.SCHEDULED, room_id=None):
        m = Meeting(
            title="existing",
            start_date=start,
            end_date=end,
            attendees=[],
            organizer_full_name="Zoe",
            organizer_email="zoe@acme.io",
            room_id=room_id or room.id,
            status=status,
            access_code=f"CODE{next(_codes):08d}",
        )
        session.add(m)
        session.commit()
        session.refresh(m)
        return m
    return _add


def test_empty_room_is_accepted(resolver, room):
    out = resolver.resolve(room.id, at(10), at(11), "Ann", privileged=False)
    assert out.kind == ACCEPTED
    assert out.accepted
    assert out.meeting_ids == ()


def test_adjacent_meeting_is_not_a_conflict(resolver, add, room):
    add(at(9), at(10))
    add(at(11), at(12))
    assert resolver.resolve(room.id, at(10), at(11), "Ann", privileged=False).kind == ACCEPTED


def test_cancelled_and_completed_meetings_are_ignored(resolver, add, room):
    add(at(10), at(11), status=MeetingStatus.CANCELLED)
    add(at(10), at(11), status=MeetingStatus.COMPLETED)
    assert resolver.find_conflicts(room.id, at(10), at(11)) == []


def test_other_rooms_are_ignored(resolver, add, room, session):
    other = Room(name="K2", company="acme", access_code="654321")
    session.add(other)
    session.commit()
    add(at(10), at(11), room_id=other.id)
    assert resolver.resolve(room.id, at(10), at(11), "Ann", privileged=False).kind == ACCEPTED


def test_non_privileged_is_rejected_without_writes(resolver, add, room, repo):
    m1 = add(at(10), at(11))
    m2 = add(at(11), at(12))
    out = resolver.resolve(room.id, at(10, 30), at(11, 30), "Ann", privileged=False)
    assert out.kind == REJECTED
    assert not out.accepted
    assert out.meeting_ids == (m1.id, m2.id)
    repo.commit()
    assert repo.refresh(m1).status == MeetingStatus.SCHEDULED
    assert repo.refresh(m2).status == MeetingStatus.SCHEDULED


def test_privileged_preempts_every_conflict(resolver, add, room, repo):
    m1 = add(at(10), at(11))
    m2 = add(at(11), at(12))
    keep = add(at(12), at(13))
    out = resolver.resolve(room.id, at(10, 30), at(12), "Big Boss", privileged=True)
    assert out.kind == ACCEPTED_WITH_PREEMPTIONS
    assert out.meeting_ids == (m1.id, m2.id)
    repo.commit()
    for m in (m1, m2):
        repo.refresh(m)
        assert m.status == MeetingStatus.CANCELLED
        assert m.cancelled_by == "SYSTEM"
        assert "Big Boss" in m.cancelled_reason
        assert m.cancelled_at == fixed_clock()
    assert repo.refresh(keep).status == MeetingStatus.SCHEDULED


def test_preemption_is_not_committed_by_resolver(resolver, add, room, repo):
    m1 = add(at(10), at(11))
    resolver.resolve(room.id, at(10), at(11), "Big Boss", privileged=True)
    repo.rollback()
    assert repo.refresh(m1).status == MeetingStatus.SCHEDULED


def test_update_excludes_itself(resolver, add, room):
    m1 = add(at(10), at(11))
    out = resolver.resolve(room.id, at(10), at(11), "Zoe", privileged=False, is_update=True, self_meeting_id=m1.id)
    assert out.kind == ACCEPTED


def test_update_never_preempts(resolver, add, room, repo):
    m1 = add(at(10), at(11))
    m2 = add(at(11), at(12))
    out = resolver.resolve(room.id, at(10, 30), at(11, 30), "Boss", privileged=True,
                           is_update=True, self_meeting_id=m1.id)
    assert out.kind == REJECTED
    assert out.meeting_ids == (m2.id,)
    repo.commit()
    assert repo.refresh(m2).status == MeetingStatus.SCHEDULED


def test_preemption_skips_meeting_cancelled_meanwhile(resolver, add, room, repo, monkeypatch, caplog):
    m1 = add(at(10), at(11))
    m2 = add(at(11), at(12))
    real = repo.transition

    def cancelled_first(meeting_id, values, expected=MeetingStatus.SCHEDULED):
        if meeting_id == m1.id:
            real(meeting_id, {"status": MeetingStatus.CANCELLED, "cancelled_by": "Zoe"})
        return real(meeting_id, values, expected)

    monkeypatch.setattr(repo, "transition", cancelled_first)
    out = resolver.resolve(room.id, at(10, 30), at(11, 30), "Big Boss", privileged=True)
    assert out.kind == ACCEPTED_WITH_PREEMPTIONS
    assert out.meeting_ids == (m2.id,)
    assert f"meeting {m1.id} left SCHEDULED before preemption" in caplog.text
    repo.commit()
    assert repo.refresh(m1).cancelled_by == "Zoe"
    assert repo.refresh(m2).cancelled_by == "SYSTEM"
