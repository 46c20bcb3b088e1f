"""Per-connection log context.

Each observer connection runs in its own task, so values bound here appear
on every record that connection's handlers emit, including the broker's
stdlib records when they run in the same task.
"""

from __future__ import annotations

import structlog


def bind_observer(observer_id: str, transport: str, campus_id: str | None = None) -> None:
    """Tag the current task's log records with the observer it serves."""
    values: dict[str, object] = {"observer_id": observer_id, "transport": transport}
    if campus_id is not None:
        values["campus_id"] = campus_id
    structlog.contextvars.bind_contextvars(**values)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
