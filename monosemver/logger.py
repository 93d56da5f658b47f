"""Step reporting for release runs.

Progress and failures are emitted as LogEvent objects to an observer
callback instead of being returned. The default observer prints them.
"""

from __future__ import annotations

import sys
from collections.abc import Callable

from .models import LogEvent

Observer = Callable[[LogEvent], None]


def print_observer(event: LogEvent) -> None:
    """Print an event, sending warnings and errors to stderr."""
    line = f"[{event.project_name}] {event.message}"
    if event.level in ("error", "warning"):
        print(f"{event.level.upper()}: {line}", file=sys.stderr)
    else:
        print(f"  {line}")


def log_step(
    observer: Observer,
    *,
    step: str,
    message: str,
    project_name: str,
    level: str = "info",
) -> None:
    observer(
        LogEvent(step=step, message=message, project_name=project_name, level=level)
    )

