"""Monitor - read-model facade over the queue engine.

Each query:
1. Ask the inspector for engine records
2. Project them into snapshot values
3. Write a query log entry (if a query log is configured)

Inspector errors propagate unchanged.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from .inspector import FileInspector, Inspector, QueueNotFoundError
from .models.snapshot import (
    TASK_STATES,
    ActiveTask,
    DailyStats,
    DeadTask,
    PendingTask,
    QueueStateSnapshot,
    RedisInfo,
    RetryTask,
    ScheduledTask,
)
from .projector import (
    INTEGRITY_POLICIES,
    IntegrityPolicy,
    check_policy,
    project_active_tasks,
    project_daily_stats_list,
    project_dead_tasks,
    project_pending_tasks,
    project_queue_snapshot,
    project_redis_info,
    project_retry_tasks,
    project_scheduled_tasks,
)
from .query_log import QueryLogger


class Monitor:
    """Serves queue snapshots and task lists for the monitoring API."""

    def __init__(
        self,
        inspector: Inspector,
        policy: IntegrityPolicy = "passthrough",
        query_log: QueryLogger | None = None,
    ) -> None:
        """Initialize monitor.

        Args:
            inspector: Query API of the queue engine.
            policy: How to derive succeeded counts when failed > processed
                (passthrough, clamp or strict).
            query_log: Optional logger receiving one entry per query.
        """
        check_policy(policy)
        self.inspector = inspector
        self.policy = policy
        self.query_log = query_log

    def _log(self, operation: str, queue: str | None = None, **fields: str | int | None) -> None:
        if self.query_log:
            self.query_log.log_query(operation, queue=queue, **fields)

    def queues(self) -> list[str]:
        names = self.inspector.queues()
        self._log("QUEUES", count=len(names))
        return names

    def current_stats(self, queue: str) -> QueueStateSnapshot:
        snapshot = project_queue_snapshot(
            self.inspector.current_stats(queue), self.policy, stacklevel=3
        )
        self._log("STATS", queue=queue, size=snapshot.size)
        return snapshot

    def overview(self) -> list[QueueStateSnapshot]:
        """Return the current snapshot of every queue, in inspector order."""
        snapshots = []
        for q in self.inspector.queues():
            snapshots.append(
                project_queue_snapshot(self.inspector.current_stats(q), self.policy, stacklevel=3)
            )
        self._log("OVERVIEW", count=len(snapshots))
        return snapshots

    def history(self, queue: str, n_days: int) -> list[DailyStats]:
        stats = project_daily_stats_list(
            self.inspector.history(queue, n_days), self.policy, stacklevel=3
        )
        self._log("HISTORY", queue=queue, days=n_days, count=len(stats))
        return stats

    def list_active_tasks(self, queue: str) -> list[ActiveTask]:
        return self.list_tasks(queue, "active")

    def list_pending_tasks(self, queue: str) -> list[PendingTask]:
        return self.list_tasks(queue, "pending")

    def list_scheduled_tasks(self, queue: str) -> list[ScheduledTask]:
        return self.list_tasks(queue, "scheduled")

    def list_retry_tasks(self, queue: str) -> list[RetryTask]:
        return self.list_tasks(queue, "retry")

    def list_dead_tasks(self, queue: str) -> list[DeadTask]:
        return self.list_tasks(queue, "dead")

    def list_tasks(self, queue: str, state: str) -> list[Any]:
        """List the tasks of a queue in the given state.

        Args:
            queue: Queue name.
            state: One of active, pending, scheduled, retry, dead.

        Returns:
            Task snapshots in the order the inspector returned them.

        Raises:
            ValueError: If state is not a known task state.
        """
        if state == "active":
            tasks: list[Any] = project_active_tasks(self.inspector.list_active_tasks(queue))
        elif state == "pending":
            tasks = project_pending_tasks(self.inspector.list_pending_tasks(queue))
        elif state == "scheduled":
            tasks = project_scheduled_tasks(self.inspector.list_scheduled_tasks(queue))
        elif state == "retry":
            tasks = project_retry_tasks(self.inspector.list_retry_tasks(queue))
        elif state == "dead":
            tasks = project_dead_tasks(self.inspector.list_dead_tasks(queue))
        else:
            raise ValueError(f"Unknown task state: {state}. Supported: {', '.join(TASK_STATES)}")
        self._log("TASKS", queue=queue, state=state, count=len(tasks))
        return tasks

    def redis_info(self) -> RedisInfo:
        info = project_redis_info(self.inspector.redis_info())
        self._log("REDIS_INFO", address=info.address)
        return info


def _dump(value: BaseModel | list[Any]) -> Any:
    if isinstance(value, list):
        return [v.model_dump(mode="json") for v in value]
    return value.model_dump(mode="json")


def main() -> None:
    """CLI entry point for the queue monitor."""
    parser = argparse.ArgumentParser(
        description="Queue Monitor - Print queue snapshots from an engine state dump"
    )
    parser.add_argument(
        "--dump",
        required=True,
        help="Path to the engine state dump JSON file",
    )
    parser.add_argument(
        "--queue",
        help="Queue to inspect (default: overview of all queues)",
    )
    parser.add_argument(
        "--state",
        choices=list(TASK_STATES),
        help="List tasks of --queue in this state",
    )
    parser.add_argument(
        "--history",
        type=int,
        metavar="N",
        help="Show the last N days of stats for --queue",
    )
    parser.add_argument(
        "--redis",
        action="store_true",
        help="Show redis server info",
    )
    parser.add_argument(
        "--policy",
        default="passthrough",
        choices=list(INTEGRITY_POLICIES),
        help="Succeeded count policy when failed > processed (default: passthrough)",
    )
    parser.add_argument(
        "--log",
        help="Path to query log file (optional)",
    )

    args = parser.parse_args()

    if (args.state or args.history is not None) and not args.queue:
        parser.error("--state and --history require --queue")

    monitor = Monitor(
        FileInspector(Path(args.dump)),
        policy=args.policy,
        query_log=QueryLogger(Path(args.log)) if args.log else None,
    )

    try:
        if args.redis:
            result: Any = monitor.redis_info()
        elif not args.queue:
            result = monitor.overview()
        elif args.state:
            result = monitor.list_tasks(args.queue, args.state)
        elif args.history is not None:
            result = monitor.history(args.queue, args.history)
        else:
            result = monitor.current_stats(args.queue)
        output = json.dumps(_dump(result), indent=2)
    except QueueNotFoundError as e:
        print(f"Queue not found: {e.args[0]}", file=sys.stderr)
        sys.exit(1)
    except (ValueError, LookupError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(output)


if __name__ == "__main__":
    main()
