"""Read-model layer for task queue monitoring.

Projects queue engine statistics and task records into immutable snapshot
values consumed by the monitoring API and dashboard.
"""

from .monitor import Monitor
from .projector import SnapshotIntegrityError, derive_succeeded

__all__ = ["Monitor", "SnapshotIntegrityError", "derive_succeeded"]
