"""Event dispatch: snapshot persistence plus fan-out to notifier back-ends."""

from .dispatcher import DispatchResult, build_notifier_payload, build_snapshot, dispatch
from .launcher import BUILTIN_NOTIFIERS, NotifierLauncher

__all__ = [
    "BUILTIN_NOTIFIERS",
    "DispatchResult",
    "NotifierLauncher",
    "build_notifier_payload",
    "build_snapshot",
    "dispatch",
]
