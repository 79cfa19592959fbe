import enum


class ProjectStatus(str, enum.Enum):
    NEW = "New"
    SAMPLE_CHECKOUT = "Sample Checkout"
    AWAITING_DECISION = "Awaiting Decision"
    QUOTING = "Quoting"
    ACCEPTED = "Accepted"
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    CLOSED = "Closed"


# Statuses a project can be in before any quote has been accepted.
PRE_ACCEPTANCE_STATUSES = frozenset(
    {
        ProjectStatus.NEW,
        ProjectStatus.SAMPLE_CHECKOUT,
        ProjectStatus.AWAITING_DECISION,
        ProjectStatus.QUOTING,
    }
)

# Once scheduled, deposit/contracts flags are locked.
LOCKED_STATUSES = frozenset({ProjectStatus.SCHEDULED, ProjectStatus.COMPLETED})


class QuoteStatus(str, enum.Enum):
    SENT = "Sent"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"


class InstallationType(str, enum.Enum):
    MANAGED = "Managed Installation"
    MATERIALS_ONLY = "Materials Only Sale"
    UNMANAGED = "Unmanaged Installer"


# Installation types that put a crew on site and therefore need appointments.
SCHEDULABLE_INSTALLATION_TYPES = frozenset(
    {InstallationType.MANAGED, InstallationType.UNMANAGED}
)


class ChangeOrderType(str, enum.Enum):
    MATERIALS = "Materials"
    LABOR = "Labor"


class ProjectType(str, enum.Enum):
    FLOORING = "Flooring"
    TILE = "Tile"
    KITCHEN_REMODEL = "Kitchen Remodel"
    BATHROOM_REMODEL = "Bathroom Remodel"
    NEW_CONSTRUCTION = "New Construction"
    OTHER = "Other"
