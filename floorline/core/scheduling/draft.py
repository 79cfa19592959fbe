"""Immutable job form state and the pure transformations applied to it."""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import date, datetime, time
from typing import Any

from pydantic import BaseModel, Field, field_validator

from floorline.config import settings

EDITABLE_FIELDS = frozenset(
    {
        "po_number",
        "deposit_received",
        "contracts_received",
        "final_payment_received",
        "is_on_hold",
        "notes",
    }
)
APPOINTMENT_FIELDS = frozenset(
    {"appointment_name", "quote_id", "installer_id", "start_date", "end_date"}
)


class AppointmentRemovalError(ValueError):
    pass


def _date_text(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    return value


class AppointmentDraft(BaseModel):
    # Scoped to the draft until the appointment is persisted.
    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    appointment_name: str = ""
    quote_id: uuid.UUID | None = None
    installer_id: uuid.UUID | None = None
    start_date: str | None = None
    end_date: str | None = None

    model_config = {"frozen": True}

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def coerce_dates(cls, value: Any) -> Any:
        return _date_text(value)

    @field_validator("start_date", "end_date")
    @classmethod
    def check_dates(cls, value: str | None) -> str | None:
        if value and value.strip():
            parse_appointment_datetime(value)
        return value

    @property
    def has_start_date(self) -> bool:
        return bool(self.start_date and self.start_date.strip())


class JobDraft(BaseModel):
    project_id: uuid.UUID
    po_number: str | None = None
    deposit_received: bool = False
    contracts_received: bool = False
    final_payment_received: bool = False
    is_on_hold: bool = False
    notes: str | None = None
    appointments: tuple[AppointmentDraft, ...] = ()

    model_config = {"frozen": True}

    @classmethod
    def from_job(cls, project_id: uuid.UUID, job: Any | None) -> JobDraft:
        if job is None:
            return cls(project_id=project_id)
        return cls(
            project_id=project_id,
            po_number=job.po_number,
            deposit_received=job.deposit_received,
            contracts_received=job.contracts_received,
            final_payment_received=job.final_payment_received,
            is_on_hold=job.is_on_hold,
            notes=job.notes,
            appointments=tuple(
                AppointmentDraft(
                    id=a.id,
                    appointment_name=a.appointment_name,
                    quote_id=a.quote_id,
                    installer_id=a.installer_id,
                    start_date=a.start_date,
                    end_date=a.end_date,
                )
                for a in job.appointments
            ),
        )

    def with_field(self, name: str, value: Any) -> JobDraft:
        if name not in EDITABLE_FIELDS:
            raise KeyError(f"'{name}' is not an editable job field")
        return self.model_copy(update={name: value})

    def with_appointment(self, appointment_id: uuid.UUID, **changes: Any) -> JobDraft:
        unknown = set(changes) - APPOINTMENT_FIELDS
        if unknown:
            raise KeyError(f"Unknown appointment field(s): {', '.join(sorted(unknown))}")
        found = False
        updated = []
        for appt in self.appointments:
            if appt.id == appointment_id:
                appt = AppointmentDraft.model_validate({**appt.model_dump(), **changes})
                found = True
            updated.append(appt)
        if not found:
            raise KeyError(f"Appointment '{appointment_id}' is not part of this job")
        return self.model_copy(update={"appointments": tuple(updated)})

    def add_appointment(self, accepted_quotes: Sequence[Any] = ()) -> JobDraft:
        appt = AppointmentDraft(appointment_name=f"Part {len(self.appointments) + 1}")
        if len(accepted_quotes) == 1:
            sole = accepted_quotes[0]
            appt = appt.model_copy(
                update={"quote_id": sole.id, "installer_id": sole.installer_id}
            )
        return self.model_copy(update={"appointments": self.appointments + (appt,)})

    def remove_appointment(self, appointment_id: uuid.UUID) -> JobDraft:
        if len(self.appointments) <= 1:
            raise AppointmentRemovalError("A job must keep at least one appointment")
        remaining = tuple(a for a in self.appointments if a.id != appointment_id)
        if len(remaining) == len(self.appointments):
            raise KeyError(f"Appointment '{appointment_id}' is not part of this job")
        return self.model_copy(update={"appointments": remaining})

    def auto_link(self, accepted_quotes: Sequence[Any]) -> JobDraft:
        """Point every appointment at the sole accepted quote, if there is one."""
        if len(accepted_quotes) != 1:
            return self
        sole = accepted_quotes[0]
        if all(
            a.quote_id == sole.id and a.installer_id == sole.installer_id
            for a in self.appointments
        ):
            return self
        relinked = tuple(
            a.model_copy(update={"quote_id": sole.id, "installer_id": sole.installer_id})
            for a in self.appointments
        )
        return self.model_copy(update={"appointments": relinked})

    def link_to_quotes(self, accepted_quotes: Sequence[Any]) -> JobDraft:
        """Auto-link, then re-derive each installer from its accepted quote.

        Links to quotes that are no longer accepted are dropped.
        """
        if len(accepted_quotes) == 1:
            return self.auto_link(accepted_quotes)
        installers = {q.id: q.installer_id for q in accepted_quotes}
        derived = tuple(
            a.model_copy(
                update={
                    "quote_id": a.quote_id if a.quote_id in installers else None,
                    "installer_id": installers.get(a.quote_id),
                }
            )
            for a in self.appointments
        )
        return self.model_copy(update={"appointments": derived})


def parse_appointment_datetime(value: Any, hour: int | None = None) -> datetime | None:
    """Turn form input into a local wall-clock ``datetime``.

    Date-only values are pinned to ``APPOINTMENT_TIME_OF_DAY``. Aware values are
    converted to local time and made naive.
    """
    if value is None:
        return None
    at = time(hour=settings.APPOINTMENT_TIME_OF_DAY if hour is None else hour)
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime.combine(value, at)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            return datetime.combine(date.fromisoformat(text), at)
        except ValueError:
            pass
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed
