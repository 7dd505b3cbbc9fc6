"""Source records as returned by the queue engine's query API."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class QueueStats(BaseModel):
    """Aggregate statistics of one queue at a point in time."""

    model_config = ConfigDict(frozen=True)
    queue: str
    size: int
    active: int
    pending: int
    scheduled: int
    retry: int
    dead: int
    processed: int
    failed: int
    paused: bool = False
    timestamp: datetime


class QueueDailyStats(BaseModel):
    """Processed/failed totals of one queue for one calendar day."""

    model_config = ConfigDict(frozen=True)
    queue: str
    processed: int
    failed: int
    date: date


class TaskInfo(BaseModel):
    """Identity fields shared by every task record."""

    model_config = ConfigDict(frozen=True)
    id: str
    type: str
    payload: Any = None
    queue: str


class ActiveTaskInfo(TaskInfo):
    """Task currently held by a worker."""


class PendingTaskInfo(TaskInfo):
    """Task waiting for a worker."""


class ScheduledTaskInfo(TaskInfo):
    """Task waiting for its process time."""

    next_process_at: datetime


class RetryTaskInfo(TaskInfo):
    """Failed task waiting for its next attempt."""

    next_process_at: datetime
    max_retry: int
    retried: int
    error_message: str = ""


class DeadTaskInfo(TaskInfo):
    """Task that exhausted its retry budget."""

    max_retry: int
    retried: int
    error_message: str = ""
    last_failed_at: datetime


class RedisInfoRecord(BaseModel):
    """Address and raw INFO output of the backing Redis server."""

    model_config = ConfigDict(frozen=True)
    address: str
    info: dict[str, str] = Field(default_factory=dict)
