import pytest
from pydantic import ValidationError

from conftest import at
from services.scheduling.models import MeetingCreate, PrivilegedUserCreate, PrivilegedUserUpdate

BAD_EMAILS = ["ann@acme..io", "ann@.acme.io", "a,b@acme.io", "ann@acme.io.", "not-an-email", ""]


def _meeting(**kw):
    data = dict(
        title="Weekly sync",
        start_date=at(10),
        end_date=at(11),
        attendees=["bob@acme.io"],
        organizer_full_name="Ann",
        organizer_email="ann@acme.io",
        room_id=1,
    )
    data.update(kw)
    return MeetingCreate(**data)


def test_valid_meeting_passes():
    m = _meeting()
    assert m.organizer_email == "ann@acme.io"
    assert m.attendees == ["bob@acme.io"]


@pytest.mark.parametrize("email", BAD_EMAILS)
def test_bad_organizer_email_is_rejected(email):
    with pytest.raises(ValidationError):
        _meeting(organizer_email=email)


@pytest.mark.parametrize("email", BAD_EMAILS)
def test_bad_attendee_email_is_rejected(email):
    with pytest.raises(ValidationError):
        _meeting(attendees=["bob@acme.io", email])


def test_privileged_email_is_lowercased():
    u = PrivilegedUserCreate(full_name="Big Boss", email="Boss@Acme.IO", company="acme")
    assert u.email == "boss@acme.io"
    assert PrivilegedUserUpdate(email="Boss@Acme.IO").email == "boss@acme.io"
    assert PrivilegedUserUpdate().email is None


def test_bad_privileged_email_is_rejected():
    with pytest.raises(ValidationError):
        PrivilegedUserCreate(full_name="Big Boss", email="boss@acme..io", company="acme")
