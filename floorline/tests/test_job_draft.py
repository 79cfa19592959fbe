import uuid
from datetime import date, datetime
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from floorline.core.scheduling.draft import (
    AppointmentDraft,
    AppointmentRemovalError,
    JobDraft,
    parse_appointment_datetime,
)


def _quote(installer_id=None):
    return SimpleNamespace(id=uuid.uuid4(), installer_id=installer_id or uuid.uuid4())


@pytest.fixture
def draft():
    return JobDraft(project_id=uuid.uuid4())


def test_add_appointment_names_parts_in_order(draft):
    draft = draft.add_appointment().add_appointment().add_appointment()
    assert [a.appointment_name for a in draft.appointments] == ["Part 1", "Part 2", "Part 3"]
    assert len({a.id for a in draft.appointments}) == 3


def test_add_appointment_prefills_sole_accepted_quote(draft):
    quote = _quote()
    draft = draft.add_appointment([quote])
    appt = draft.appointments[0]
    assert appt.quote_id == quote.id
    assert appt.installer_id == quote.installer_id


def test_add_appointment_leaves_link_empty_with_multiple_quotes(draft):
    draft = draft.add_appointment([_quote(), _quote()])
    assert draft.appointments[0].quote_id is None
    assert draft.appointments[0].installer_id is None


def test_drafts_are_immutable(draft):
    updated = draft.add_appointment()
    assert draft.appointments == ()
    assert len(updated.appointments) == 1
    with pytest.raises(ValidationError):
        updated.po_number = "PO-1"


def test_remove_appointment(draft):
    draft = draft.add_appointment().add_appointment()
    first, second = draft.appointments
    remaining = draft.remove_appointment(first.id)
    assert remaining.appointments == (second,)


def test_remove_last_appointment_rejected(draft):
    draft = draft.add_appointment()
    with pytest.raises(AppointmentRemovalError):
        draft.remove_appointment(draft.appointments[0].id)


def test_remove_unknown_appointment(draft):
    draft = draft.add_appointment().add_appointment()
    with pytest.raises(KeyError):
        draft.remove_appointment(uuid.uuid4())


def test_with_field_updates_flags(draft):
    updated = draft.with_field("deposit_received", True).with_field("po_number", "PO-77")
    assert updated.deposit_received is True
    assert updated.po_number == "PO-77"
    assert draft.deposit_received is False


def test_with_field_rejects_non_editable(draft):
    with pytest.raises(KeyError):
        draft.with_field("project_id", uuid.uuid4())


def test_with_appointment_revalidates_dates(draft):
    draft = draft.add_appointment()
    appt_id = draft.appointments[0].id

    updated = draft.with_appointment(appt_id, start_date=date(2026, 3, 2), end_date="2026-03-04")
    assert updated.appointments[0].start_date == "2026-03-02"
    assert updated.appointments[0].end_date == "2026-03-04"

    with pytest.raises(ValidationError):
        draft.with_appointment(appt_id, start_date="not-a-date")


def test_with_appointment_unknown_field_or_id(draft):
    draft = draft.add_appointment()
    with pytest.raises(KeyError):
        draft.with_appointment(draft.appointments[0].id, colour="red")
    with pytest.raises(KeyError):
        draft.with_appointment(uuid.uuid4(), appointment_name="Tile")


def test_auto_link_points_all_appointments_at_sole_quote(draft):
    stale = _quote()
    draft = draft.add_appointment().add_appointment()
    draft = draft.with_appointment(
        draft.appointments[0].id, quote_id=stale.id, installer_id=stale.installer_id
    )
    quote = _quote()

    linked = draft.auto_link([quote])
    assert all(a.quote_id == quote.id for a in linked.appointments)
    assert all(a.installer_id == quote.installer_id for a in linked.appointments)


def test_auto_link_is_noop_without_single_quote(draft):
    draft = draft.add_appointment()
    assert draft.auto_link([]) is draft
    assert draft.auto_link([_quote(), _quote()]) is draft


def test_auto_link_returns_same_draft_when_already_linked(draft):
    quote = _quote()
    draft = draft.add_appointment([quote])
    assert draft.auto_link([quote]) is draft


def test_link_to_quotes_derives_installer_and_drops_stale_links(draft):
    q1, q2 = _quote(), _quote()
    draft = draft.add_appointment().add_appointment()
    first, second = draft.appointments
    draft = draft.with_appointment(first.id, quote_id=q2.id).with_appointment(
        second.id, quote_id=uuid.uuid4(), installer_id=uuid.uuid4()
    )

    linked = draft.link_to_quotes([q1, q2])
    assert linked.appointments[0].quote_id == q2.id
    assert linked.appointments[0].installer_id == q2.installer_id
    assert linked.appointments[1].quote_id is None
    assert linked.appointments[1].installer_id is None


def test_from_job_reads_persisted_state():
    appt = SimpleNamespace(
        id=uuid.uuid4(),
        appointment_name="Part 1",
        quote_id=uuid.uuid4(),
        installer_id=None,
        start_date=datetime(2026, 5, 1, 12, 0),
        end_date=None,
    )
    job = SimpleNamespace(
        po_number="PO-9",
        deposit_received=True,
        contracts_received=False,
        final_payment_received=False,
        is_on_hold=True,
        notes="Back door access",
        appointments=[appt],
    )
    draft = JobDraft.from_job(uuid.uuid4(), job)
    assert draft.po_number == "PO-9"
    assert draft.is_on_hold is True
    assert draft.appointments[0].id == appt.id
    assert draft.appointments[0].start_date == "2026-05-01T12:00:00"


def test_from_job_without_job_is_blank():
    draft = JobDraft.from_job(uuid.uuid4(), None)
    assert draft.appointments == ()
    assert draft.deposit_received is False


def test_has_start_date():
    assert AppointmentDraft(start_date="2026-01-05").has_start_date
    assert not AppointmentDraft(start_date="  ").has_start_date
    assert not AppointmentDraft().has_start_date


def test_date_only_input_pinned_to_noon():
    assert parse_appointment_datetime("2026-07-04") == datetime(2026, 7, 4, 12, 0)
    assert parse_appointment_datetime(date(2026, 7, 4)) == datetime(2026, 7, 4, 12, 0)
    assert parse_appointment_datetime("2026-07-04", hour=8) == datetime(2026, 7, 4, 8, 0)
    assert parse_appointment_datetime("20260701") == datetime(2026, 7, 1, 12, 0)


def test_parse_appointment_datetime_passthrough():
    assert parse_appointment_datetime(None) is None
    assert parse_appointment_datetime("") is None
    assert parse_appointment_datetime("2026-07-04T09:30") == datetime(2026, 7, 4, 9, 30)
    aware = parse_appointment_datetime("2026-07-04T09:30:00Z")
    assert aware.tzinfo is None


def test_stored_times_keep_seconds():
    appt = AppointmentDraft(start_date=datetime(2026, 5, 1, 9, 30, 45))
    assert appt.start_date == "2026-05-01T09:30:45"
    assert parse_appointment_datetime(appt.start_date) == datetime(2026, 5, 1, 9, 30, 45)
