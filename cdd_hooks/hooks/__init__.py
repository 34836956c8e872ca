"""Host lifecycle hooks. Each ``run`` is total: it logs failures and returns normally."""

from . import on_notification, on_stop, scope_guard, session_start, statusline

__all__ = ["on_notification", "on_stop", "scope_guard", "session_start", "statusline"]
