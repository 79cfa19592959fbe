from floorline.db.models.change_order import ChangeOrder
from floorline.db.models.installer import Installer
from floorline.db.models.job import Job, JobAppointment
from floorline.db.models.project import Project
from floorline.db.models.quote import Quote

__all__ = [
    "ChangeOrder",
    "Installer",
    "Job",
    "JobAppointment",
    "Project",
    "Quote",
]
