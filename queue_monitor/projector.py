"""Snapshot projector - map queue engine records to snapshot values.

Every function here is pure: it reads one source record (or a sequence of
them) and returns freshly built snapshot values in input order. Nothing is
validated except the succeeded/failed arithmetic, and only when a stricter
policy than "passthrough" is requested.
"""

import copy
import warnings
from collections.abc import Callable, Sequence
from typing import Any, Literal

from .models.engine import (
    ActiveTaskInfo,
    DeadTaskInfo,
    PendingTaskInfo,
    QueueDailyStats,
    QueueStats,
    RedisInfoRecord,
    RetryTaskInfo,
    ScheduledTaskInfo,
    TaskInfo,
)
from .models.snapshot import (
    ActiveTask,
    DailyStats,
    DeadTask,
    PendingTask,
    QueueStateSnapshot,
    RedisInfo,
    RetryTask,
    ScheduledTask,
)

IntegrityPolicy = Literal["passthrough", "clamp", "strict"]
INTEGRITY_POLICIES: tuple[str, ...] = ("passthrough", "clamp", "strict")


class SnapshotIntegrityError(ValueError):
    """Raised under the strict policy when counts cannot be reconciled."""


def check_policy(policy: str) -> None:
    """Raise ValueError for an unknown integrity policy name."""
    if policy not in INTEGRITY_POLICIES:
        raise ValueError(
            f"Unknown integrity policy: {policy}. Supported: {', '.join(INTEGRITY_POLICIES)}"
        )


def derive_succeeded(
    processed: int, failed: int, policy: IntegrityPolicy = "passthrough", stacklevel: int = 2
) -> int:
    """Compute the succeeded count from processed and failed totals.

    Args:
        processed: Total processed tasks (succeeded + failed).
        failed: Failed tasks.
        policy: "passthrough" returns the raw difference, even if negative.
            "clamp" floors the result at zero and warns.
            "strict" raises SnapshotIntegrityError on inconsistent counts.
        stacklevel: Frame the clamp warning is attributed to, as in
            warnings.warn; the default points at the direct caller.

    Returns:
        processed - failed, adjusted according to policy.

    Raises:
        SnapshotIntegrityError: Under "strict" when a count is negative or
            failed exceeds processed.
        ValueError: If policy is not supported.
    """
    check_policy(policy)
    succeeded = processed - failed
    if policy == "passthrough" or (succeeded >= 0 and failed >= 0):
        return succeeded

    if policy == "strict":
        raise SnapshotIntegrityError(
            f"Inconsistent counts: processed={processed} failed={failed}"
        )

    if succeeded < 0:
        warnings.warn(
            f"failed ({failed}) exceeds processed ({processed}); succeeded clamped to 0",
            stacklevel=stacklevel,
        )
        return 0
    return succeeded


def project_queue_snapshot(
    source: QueueStats, policy: IntegrityPolicy = "passthrough", stacklevel: int = 2
) -> QueueStateSnapshot:
    """Project aggregate queue stats into a QueueStateSnapshot."""
    return QueueStateSnapshot(
        queue=source.queue,
        size=source.size,
        active=source.active,
        pending=source.pending,
        scheduled=source.scheduled,
        retry=source.retry,
        dead=source.dead,
        processed=source.processed,
        succeeded=derive_succeeded(source.processed, source.failed, policy, stacklevel + 1),
        failed=source.failed,
        paused=source.paused,
        timestamp=source.timestamp,
    )


def project_daily_stats(
    source: QueueDailyStats, policy: IntegrityPolicy = "passthrough", stacklevel: int = 2
) -> DailyStats:
    """Project one day of queue history into DailyStats."""
    return DailyStats(
        queue=source.queue,
        processed=source.processed,
        succeeded=derive_succeeded(source.processed, source.failed, policy, stacklevel + 1),
        failed=source.failed,
        date=source.date,
    )


def project_daily_stats_list(
    sources: Sequence[QueueDailyStats],
    policy: IntegrityPolicy = "passthrough",
    stacklevel: int = 2,
) -> list[DailyStats]:
    stats = []
    for s in sources:
        stats.append(project_daily_stats(s, policy, stacklevel + 1))
    return stats


def _identity(source: TaskInfo) -> dict[str, Any]:
    # payload is copied so snapshots never share mutable state with the engine
    return {
        "id": source.id,
        "type": source.type,
        "payload": copy.deepcopy(source.payload),
        "queue": source.queue,
    }


def project_active_task(source: ActiveTaskInfo) -> ActiveTask:
    return ActiveTask(**_identity(source))


def project_pending_task(source: PendingTaskInfo) -> PendingTask:
    return PendingTask(**_identity(source))


def project_scheduled_task(source: ScheduledTaskInfo) -> ScheduledTask:
    return ScheduledTask(**_identity(source), next_process_at=source.next_process_at)


def project_retry_task(source: RetryTaskInfo) -> RetryTask:
    return RetryTask(
        **_identity(source),
        next_process_at=source.next_process_at,
        max_retry=source.max_retry,
        retried=source.retried,
        error_message=source.error_message,
    )


def project_dead_task(source: DeadTaskInfo) -> DeadTask:
    return DeadTask(
        **_identity(source),
        max_retry=source.max_retry,
        retried=source.retried,
        error_message=source.error_message,
        last_failed_at=source.last_failed_at,
    )


def project_active_tasks(sources: Sequence[ActiveTaskInfo]) -> list[ActiveTask]:
    return [project_active_task(t) for t in sources]


def project_pending_tasks(sources: Sequence[PendingTaskInfo]) -> list[PendingTask]:
    return [project_pending_task(t) for t in sources]


def project_scheduled_tasks(sources: Sequence[ScheduledTaskInfo]) -> list[ScheduledTask]:
    return [project_scheduled_task(t) for t in sources]


def project_retry_tasks(sources: Sequence[RetryTaskInfo]) -> list[RetryTask]:
    return [project_retry_task(t) for t in sources]


def project_dead_tasks(sources: Sequence[DeadTaskInfo]) -> list[DeadTask]:
    return [project_dead_task(t) for t in sources]


# Source record type -> single-item projection
TASK_PROJECTIONS: dict[type, Callable[[Any], Any]] = {
    ActiveTaskInfo: project_active_task,
    PendingTaskInfo: project_pending_task,
    ScheduledTaskInfo: project_scheduled_task,
    RetryTaskInfo: project_retry_task,
    DeadTaskInfo: project_dead_task,
}


def project_task(source: TaskInfo) -> ActiveTask | PendingTask | ScheduledTask | RetryTask | DeadTask:
    """Project a task record of any state into its snapshot variant.

    Raises:
        TypeError: If the record is not one of the five task state records.
    """
    projection = TASK_PROJECTIONS.get(type(source))
    if projection is None:
        raise TypeError(f"Unsupported task record: {type(source).__name__}")
    return projection(source)


def project_tasks(
    sources: Sequence[TaskInfo],
) -> list[ActiveTask | PendingTask | ScheduledTask | RetryTask | DeadTask]:
    """Project a mixed sequence of task records, preserving order and length."""
    return [project_task(t) for t in sources]


def project_redis_info(source: RedisInfoRecord) -> RedisInfo:
    return RedisInfo(address=source.address, info=dict(source.info))
