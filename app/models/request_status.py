"""Status values shared by consultations and legal assistance requests."""

PENDING = "pending"
ACTIVE = "active"
EXPIRED = "expired"
COMPLETED = "completed"
CANCELLED = "cancelled"

# No automated transition leaves these.
TERMINAL_STATUSES = frozenset({EXPIRED, COMPLETED, CANCELLED})
