"""Query log for the monitoring read model.

One JSON line per served query, so the log can be read back as typed entries
(e.g. to see which queues the dashboard polls and how large the task lists
it pulled were).
"""

from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class QueryEntry(BaseModel):
    """A single served read-model query."""

    model_config = ConfigDict(extra="forbid")

    at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    operation: str  # QUEUES | STATS | OVERVIEW | HISTORY | TASKS | REDIS_INFO
    queue: str | None = None
    state: str | None = None
    days: int | None = None
    count: int | None = None
    size: int | None = None
    address: str | None = None


class QueryLogger:
    """Appends QueryEntry records to a JSON-lines file."""

    def __init__(self, log_path: Path) -> None:
        self.log_path = log_path

    def log_query(
        self, operation: str, queue: str | None = None, **fields: str | int | None
    ) -> QueryEntry:
        """Record one query.

        Args:
            operation: Query name, e.g. STATS or TASKS.
            queue: Queue the query was about, if any.
            **fields: Other QueryEntry fields (state, days, count, address).

        Returns:
            The entry as written.
        """
        entry = QueryEntry(operation=operation, queue=queue, **fields)
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.log_path, "a") as f:
            f.write(entry.model_dump_json(exclude_none=True) + "\n")
        return entry

    def read(self) -> list[QueryEntry]:
        """Return all logged entries in write order. Empty if no log exists yet."""
        if not self.log_path.exists():
            return []
        with open(self.log_path) as f:
            return [QueryEntry.model_validate_json(line) for line in f if line.strip()]
