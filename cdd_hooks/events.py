"""Event names and status values shared by hooks, dispatcher and notifiers."""

SESSION_STARTED = "session_started"
RUNNING = "running"
STOPPED = "stopped"
SCOPE_WARNING = "scope_warning"
NEEDS_INPUT = "needs_input"
NEEDS_PERMISSION = "needs_permission"

EVENTS = (
    SESSION_STARTED,
    RUNNING,
    STOPPED,
    SCOPE_WARNING,
    NEEDS_INPUT,
    NEEDS_PERMISSION,
)

STATUS_STARTED = "STARTED"
STATUS_RUNNING = "RUNNING"
STATUS_STOPPED = "STOPPED"
STATUS_NEEDS_INPUT = "NEEDS_INPUT"
STATUS_NEEDS_PERMISSION = "NEEDS_PERMISSION"
