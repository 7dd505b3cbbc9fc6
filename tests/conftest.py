"""Pytest fixtures for queue monitor tests."""

import json
from datetime import date, datetime, timezone
from pathlib import Path

import pytest

from queue_monitor.models.engine import (
    ActiveTaskInfo,
    DeadTaskInfo,
    PendingTaskInfo,
    QueueDailyStats,
    QueueStats,
    RetryTaskInfo,
    ScheduledTaskInfo,
)

CAPTURED_AT = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
NEXT_RUN_AT = datetime(2026, 3, 1, 12, 30, tzinfo=timezone.utc)
FAILED_AT = datetime(2026, 2, 28, 23, 15, tzinfo=timezone.utc)


@pytest.fixture
def email_stats() -> QueueStats:
    """Aggregate stats of a well-formed "email" queue."""
    return QueueStats(
        queue="email",
        size=10,
        active=2,
        pending=5,
        scheduled=1,
        retry=1,
        dead=1,
        processed=100,
        failed=7,
        paused=False,
        timestamp=CAPTURED_AT,
    )


@pytest.fixture
def email_history() -> list[QueueDailyStats]:
    """Three days of "email" queue history, newest first."""
    return [
        QueueDailyStats(queue="email", processed=100, failed=7, date=date(2026, 3, 1)),
        QueueDailyStats(queue="email", processed=80, failed=0, date=date(2026, 2, 28)),
        QueueDailyStats(queue="email", processed=0, failed=0, date=date(2026, 2, 27)),
    ]


@pytest.fixture
def retry_task() -> RetryTaskInfo:
    return RetryTaskInfo(
        id="abc",
        type="send_email",
        payload={"to": "user@example.com", "tags": ["welcome"]},
        queue="email",
        next_process_at=NEXT_RUN_AT,
        max_retry=5,
        retried=2,
        error_message="smtp timeout",
    )


@pytest.fixture
def dead_task() -> DeadTaskInfo:
    return DeadTaskInfo(
        id="def",
        type="send_email",
        payload=b"\x00raw",
        queue="email",
        max_retry=3,
        retried=3,
        error_message="mailbox unavailable",
        last_failed_at=FAILED_AT,
    )


@pytest.fixture
def engine_dump(tmp_path: Path) -> Path:
    """Write an engine state dump with two queues and redis info."""
    dump = {
        "queues": {
            "email": {
                "stats": {
                    "queue": "email",
                    "size": 4,
                    "active": 1,
                    "pending": 1,
                    "scheduled": 1,
                    "retry": 1,
                    "dead": 0,
                    "processed": 100,
                    "failed": 7,
                    "paused": False,
                    "timestamp": CAPTURED_AT.isoformat(),
                },
                "history": [
                    {"queue": "email", "processed": 100, "failed": 7, "date": "2026-03-01"},
                    {"queue": "email", "processed": 80, "failed": 1, "date": "2026-02-28"},
                ],
                "active": [{"id": "a1", "type": "send_email", "payload": {"n": 1}, "queue": "email"}],
                "pending": [
                    {"id": "p1", "type": "send_email", "payload": None, "queue": "email"},
                    {"id": "p2", "type": "send_sms", "payload": "x", "queue": "email"},
                ],
                "scheduled": [
                    {
                        "id": "s1",
                        "type": "digest",
                        "payload": {},
                        "queue": "email",
                        "next_process_at": NEXT_RUN_AT.isoformat(),
                    }
                ],
                "retry": [
                    {
                        "id": "abc",
                        "type": "send_email",
                        "payload": {"to": "user@example.com"},
                        "queue": "email",
                        "next_process_at": NEXT_RUN_AT.isoformat(),
                        "max_retry": 5,
                        "retried": 2,
                        "error_message": "smtp timeout",
                    }
                ],
            },
            "broken": {
                "stats": {
                    "queue": "broken",
                    "size": 0,
                    "active": 0,
                    "pending": 0,
                    "scheduled": 0,
                    "retry": 0,
                    "dead": 0,
                    "processed": 3,
                    "failed": 5,
                    "paused": True,
                    "timestamp": CAPTURED_AT.isoformat(),
                },
            },
        },
        "redis": {
            "address": "localhost:6379",
            "info": {"redis_version": "7.2.4", "connected_clients": "3"},
        },
    }
    dump_path = tmp_path / "engine.json"
    dump_path.write_text(json.dumps(dump, indent=2))
    return dump_path


@pytest.fixture
def mixed_tasks(retry_task: RetryTaskInfo, dead_task: DeadTaskInfo) -> list:
    """One task record of every state."""
    return [
        ActiveTaskInfo(id="a1", type="resize", payload=[1, 2], queue="images"),
        PendingTaskInfo(id="p1", type="resize", payload=None, queue="images"),
        ScheduledTaskInfo(
            id="s1", type="digest", payload={}, queue="email", next_process_at=NEXT_RUN_AT
        ),
        retry_task,
        dead_task,
    ]
