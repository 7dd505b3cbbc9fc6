"""Snapshot values exposed to the monitoring API.

Field names are part of the wire contract: dashboards parse them structurally,
so renaming a field here is a breaking change.
"""

import base64
from datetime import date, datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_serializer


class QueueStateSnapshot(BaseModel):
    """Point-in-time view of one queue."""

    model_config = ConfigDict(frozen=True)
    queue: str
    size: int
    active: int
    pending: int
    scheduled: int
    retry: int
    dead: int
    # processed includes both succeeded and failed tasks
    processed: int
    succeeded: int
    failed: int
    paused: bool
    timestamp: datetime


class DailyStats(BaseModel):
    """Closed per-day rollup of one queue."""

    model_config = ConfigDict(frozen=True)
    queue: str
    processed: int
    succeeded: int
    failed: int
    date: date


class BaseTask(BaseModel):
    """Identity block shared by all task states.

    Payload is opaque. Freezing is shallow: fields cannot be reassigned, but a
    mutable payload (dict, list) is the caller's own copy and is not locked.
    Bytes payloads are emitted as base64 in JSON mode.
    """

    model_config = ConfigDict(frozen=True)
    id: str
    type: str
    payload: Any = None
    queue: str

    @field_serializer("payload", when_used="json")
    def serialize_payload(self, payload: Any) -> Any:
        if isinstance(payload, (bytes, bytearray)):
            return base64.b64encode(payload).decode("ascii")
        return payload


class ActiveTask(BaseTask):
    state: Literal["active"] = "active"


class PendingTask(BaseTask):
    state: Literal["pending"] = "pending"


class ScheduledTask(BaseTask):
    state: Literal["scheduled"] = "scheduled"
    next_process_at: datetime


class RetryTask(BaseTask):
    state: Literal["retry"] = "retry"
    next_process_at: datetime
    max_retry: int
    retried: int
    error_message: str = ""


class DeadTask(BaseTask):
    state: Literal["dead"] = "dead"
    max_retry: int
    retried: int
    error_message: str = ""
    last_failed_at: datetime


TaskSnapshot = Annotated[
    Union[ActiveTask, PendingTask, ScheduledTask, RetryTask, DeadTask],
    Field(discriminator="state"),
]

TASK_LIST_ADAPTER: TypeAdapter[list[TaskSnapshot]] = TypeAdapter(list[TaskSnapshot])

TASK_STATES = ("active", "pending", "scheduled", "retry", "dead")


class RedisInfo(BaseModel):
    """Redis server details shown on the dashboard."""

    model_config = ConfigDict(frozen=True)
    address: str
    info: dict[str, str] = Field(default_factory=dict)
