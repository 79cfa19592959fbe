from collections.abc import Iterable

from floorline.core.scheduling.draft import AppointmentDraft, parse_appointment_datetime
from floorline.core.scheduling.schemas import ScheduleConflict, ScheduleEntry


def find_schedule_conflicts(
    appointments: Iterable[AppointmentDraft], existing: Iterable[ScheduleEntry]
) -> list[ScheduleConflict]:
    """Overlaps between draft appointments and the installer's other bookings.

    Conflicts are warnings only; they never block a save.
    """
    existing = list(existing)
    conflicts = []
    for appt in appointments:
        start = parse_appointment_datetime(appt.start_date)
        if start is None or appt.installer_id is None:
            continue
        end = parse_appointment_datetime(appt.end_date) or start
        for entry in existing:
            if entry.installer_id != appt.installer_id:
                continue
            entry_end = entry.end_date or entry.start_date
            if start <= entry_end and end >= entry.start_date:
                conflicts.append(
                    ScheduleConflict(
                        appointment_name=appt.appointment_name,
                        installer_id=appt.installer_id,
                        project_id=entry.project_id,
                        project_name=entry.project_name,
                        scheduled_start_date=entry.start_date,
                        scheduled_end_date=entry.end_date,
                    )
                )
    return conflicts
