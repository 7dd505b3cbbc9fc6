"""Query interface of the queue engine, and a JSON dump backed implementation."""

import json
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel, Field

from .models.engine import (
    ActiveTaskInfo,
    DeadTaskInfo,
    PendingTaskInfo,
    QueueDailyStats,
    QueueStats,
    RedisInfoRecord,
    RetryTaskInfo,
    ScheduledTaskInfo,
)


class QueueNotFoundError(KeyError):
    """Raised when a query names a queue the engine does not know."""


class Inspector(ABC):
    """Read-only query API of the queue engine.

    Implementations return engine records; projecting them into snapshots is
    the caller's job.
    """

    @abstractmethod
    def queues(self) -> list[str]:
        """Return the names of all known queues."""

    @abstractmethod
    def current_stats(self, queue: str) -> QueueStats:
        """Return aggregate stats of a queue as of now."""

    @abstractmethod
    def history(self, queue: str, n_days: int) -> list[QueueDailyStats]:
        """Return up to n_days daily buckets, newest first."""

    @abstractmethod
    def list_active_tasks(self, queue: str) -> list[ActiveTaskInfo]:
        ...

    @abstractmethod
    def list_pending_tasks(self, queue: str) -> list[PendingTaskInfo]:
        ...

    @abstractmethod
    def list_scheduled_tasks(self, queue: str) -> list[ScheduledTaskInfo]:
        ...

    @abstractmethod
    def list_retry_tasks(self, queue: str) -> list[RetryTaskInfo]:
        ...

    @abstractmethod
    def list_dead_tasks(self, queue: str) -> list[DeadTaskInfo]:
        ...

    @abstractmethod
    def redis_info(self) -> RedisInfoRecord:
        """Return address and INFO map of the backing Redis server."""


class QueueDump(BaseModel):
    """Everything the engine reported about one queue."""

    stats: QueueStats
    history: list[QueueDailyStats] = Field(default_factory=list)
    active: list[ActiveTaskInfo] = Field(default_factory=list)
    pending: list[PendingTaskInfo] = Field(default_factory=list)
    scheduled: list[ScheduledTaskInfo] = Field(default_factory=list)
    retry: list[RetryTaskInfo] = Field(default_factory=list)
    dead: list[DeadTaskInfo] = Field(default_factory=list)


class EngineDump(BaseModel):
    """Root structure of an engine state dump file."""

    queues: dict[str, QueueDump] = Field(default_factory=dict)
    redis: RedisInfoRecord | None = None


class FileInspector(Inspector):
    """Serves engine queries from a JSON dump of engine state.

    The dump is read once, on first use.
    """

    def __init__(self, dump_path: Path) -> None:
        self.dump_path = dump_path
        self._dump: EngineDump | None = None

    @property
    def dump(self) -> EngineDump:
        """Lazy-load the dump file."""
        if self._dump is None:
            with open(self.dump_path) as f:
                data = json.load(f)
            self._dump = EngineDump.model_validate(data)
        return self._dump

    def _queue(self, queue: str) -> QueueDump:
        try:
            return self.dump.queues[queue]
        except KeyError:
            raise QueueNotFoundError(queue) from None

    def queues(self) -> list[str]:
        return list(self.dump.queues.keys())

    def current_stats(self, queue: str) -> QueueStats:
        return self._queue(queue).stats

    def history(self, queue: str, n_days: int) -> list[QueueDailyStats]:
        if n_days < 0:
            raise ValueError(f"n_days must be non-negative, got {n_days}")
        return self._queue(queue).history[:n_days]

    def list_active_tasks(self, queue: str) -> list[ActiveTaskInfo]:
        return list(self._queue(queue).active)

    def list_pending_tasks(self, queue: str) -> list[PendingTaskInfo]:
        return list(self._queue(queue).pending)

    def list_scheduled_tasks(self, queue: str) -> list[ScheduledTaskInfo]:
        return list(self._queue(queue).scheduled)

    def list_retry_tasks(self, queue: str) -> list[RetryTaskInfo]:
        return list(self._queue(queue).retry)

    def list_dead_tasks(self, queue: str) -> list[DeadTaskInfo]:
        return list(self._queue(queue).dead)

    def redis_info(self) -> RedisInfoRecord:
        if self.dump.redis is None:
            raise LookupError(f"No redis info in dump: {self.dump_path}")
        return self.dump.redis
