"""Fire-and-forget launch of notifier processes."""

from __future__ import annotations

import os
import subprocess
import sys
import threading
from typing import Any, Callable, Dict, List, Optional

from ..config import NotifierConfig
from ..logging import get_logger

BUILTIN_NOTIFIERS: Dict[str, str] = {
    "webhook": "cdd_hooks.notifiers.webhook",
    "telegram": "cdd_hooks.notifiers.telegram",
}


class NotifierLauncher:
    """Starts one detached process per notifier and hands it the payload on stdin.

    The launcher never waits for the child and never captures its output.
    """

    def __init__(
        self,
        popen: Callable[..., Any] | None = None,
        *,
        python: str | None = None,
    ) -> None:
        self._popen = popen or subprocess.Popen
        self._python = python or sys.executable
        self.logger = get_logger("notify.launcher")

    def resolve_command(self, notifier: NotifierConfig) -> Optional[List[str]]:
        """Return argv for ``notifier``, or None when it cannot be resolved."""
        if notifier.is_custom:
            # Whitespace split only; quoted arguments are not supported.
            parts = (notifier.command or "").split()
            return parts or None
        module = BUILTIN_NOTIFIERS.get(notifier.type)
        if module is None:
            return None
        return [self._python, "-m", module]

    def launch(self, notifier: NotifierConfig, payload_json: str) -> bool:
        """Start the notifier. Returns False when the process could not be started."""
        command = self.resolve_command(notifier)
        if command is None:
            self.logger.debug("Unknown notifier type %r; skipping", notifier.type)
            return False

        try:
            process = self._popen(command, **_detached_options())
        except (OSError, ValueError, subprocess.SubprocessError) as exc:
            self.logger.debug("Failed to start notifier %s: %s", command[0], exc)
            return False

        stdin = getattr(process, "stdin", None)
        if stdin is not None:
            self._hand_over(stdin, payload_json.encode("utf-8"), command[0])
        self.logger.debug("Launched %s notifier (pid %s)", notifier.type, getattr(process, "pid", "?"))
        return True

    def _hand_over(self, stdin: Any, data: bytes, name: str) -> None:
        """Deliver ``data`` and close ``stdin`` without waiting on the child.

        Whatever fits in the pipe is written immediately. A remainder the child
        has not drained yet is finished by a daemon thread.
        """
        fileno = _fileno(stdin)
        if fileno is None:
            self._finish_write(stdin, data, name)
            return
        try:
            os.set_blocking(fileno, False)
        except OSError:
            # Pipes that cannot be made non-blocking get the whole payload in the background.
            self._start_writer(stdin, data, name)
            return
        try:
            data = data[_write_available(fileno, data):]
            if data:
                os.set_blocking(fileno, True)
        except OSError as exc:
            self.logger.debug("Failed to hand payload to %s: %s", name, exc)
            _close(stdin)
            return
        if not data:
            _close(stdin)
            return
        self.logger.debug(
            "%s has not drained its input; %d bytes left for background delivery", name, len(data)
        )
        self._start_writer(stdin, data, name)

    def _start_writer(self, stdin: Any, data: bytes, name: str) -> None:
        thread = threading.Thread(
            target=self._finish_write,
            args=(stdin, data, name),
            name="cdd-notifier-payload",
            daemon=True,
        )
        thread.start()

    def _finish_write(self, stdin: Any, data: bytes, name: str) -> None:
        try:
            stdin.write(data)
        except (OSError, ValueError) as exc:
            self.logger.debug("Failed to hand payload to %s: %s", name, exc)
        finally:
            # Closing stdin is how the child learns the payload is complete.
            _close(stdin)


def _write_available(fileno: int, data: bytes) -> int:
    written = 0
    while written < len(data):
        try:
            written += os.write(fileno, data[written:])
        except BlockingIOError:
            break
    return written


def _fileno(stream: Any) -> Optional[int]:
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def _close(stream: Any) -> None:
    try:
        stream.close()
    except OSError:
        pass


def _detached_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {
        "stdin": subprocess.PIPE,
        "stdout": subprocess.DEVNULL,
        "stderr": subprocess.DEVNULL,
        "env": os.environ.copy(),
        "close_fds": True,
    }
    if sys.platform == "win32":
        options["creationflags"] = getattr(subprocess, "CREATE_NEW_PROCESS_GROUP", 0) | getattr(
            subprocess, "CREATE_NO_WINDOW", 0
        )
    else:
        options["start_new_session"] = True
    return options


__all__ = ["BUILTIN_NOTIFIERS", "NotifierLauncher"]
