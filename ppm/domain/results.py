"""Value records returned by the scheduling services."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from ppm.utils.dates import format_date


@dataclass
class CriticalPathResult:
    path: List[Any] = field(default_factory=list)
    earliest_start: Dict[Any, float] = field(default_factory=dict)
    # earliest completion distance of each node (earliest start + duration)
    distance: Dict[Any, float] = field(default_factory=dict)
    predecessor: Dict[Any, Optional[Any]] = field(default_factory=dict)
    slack: Dict[Any, float] = field(default_factory=dict)
    order: List[Any] = field(default_factory=list)
    excluded: List[Any] = field(default_factory=list)

    @property
    def length(self) -> float:
        if not self.path:
            return 0
        return self.distance[self.path[-1]]

    def is_critical(self, node_id) -> bool:
        # Any zero-slack node counts, not only those on the reported path
        return self.slack.get(node_id) == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": list(self.path),
            "length": self.length,
            "earliest_start": dict(self.earliest_start),
            "distance": dict(self.distance),
            "predecessor": dict(self.predecessor),
            "slack": dict(self.slack),
            "excluded": list(self.excluded),
        }


@dataclass
class TaskChange:
    task_id: str
    task_name: str
    original_start: date
    new_start: date
    delay: int
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "task_id": self.task_id,
            "task_name": self.task_name,
            "original_start": format_date(self.original_start),
            "new_start": format_date(self.new_start),
            "delay": self.delay,
            "reason": self.reason,
        }


@dataclass
class OptimizationMetrics:
    original_duration: int = 0
    new_duration: int = 0
    conflicts_resolved: int = 0
    peak_overload: int = 0
    remaining_conflicts: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original_duration": self.original_duration,
            "new_duration": self.new_duration,
            "conflicts_resolved": self.conflicts_resolved,
            "peak_overload": self.peak_overload,
            "remaining_conflicts": self.remaining_conflicts,
        }


@dataclass
class OptimizationResult:
    tasks: List[Any]
    changes: List[TaskChange]
    metrics: OptimizationMetrics
    original_tasks: List[Any] = field(default_factory=list)
    strategy: str = "smoothing"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strategy": self.strategy,
            "tasks": [t.to_dict() for t in self.tasks],
            "changes": [c.to_dict() for c in self.changes],
            "metrics": self.metrics.to_dict(),
        }


@dataclass
class ResourceConflict:
    resource_id: str
    resource_name: str
    day: date
    capacity: int
    allocated: int
    task_ids: List[str] = field(default_factory=list)

    @property
    def overallocation(self) -> int:
        return self.allocated - self.capacity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resource_id": self.resource_id,
            "resource_name": self.resource_name,
            "day": format_date(self.day),
            "capacity": self.capacity,
            "allocated": self.allocated,
            "overallocation": self.overallocation,
            "task_ids": list(self.task_ids),
        }


@dataclass
class ImpactEntry:
    project_id: str
    project_name: str
    original_end_date: date
    new_end_date: date
    delay_days: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project_id": self.project_id,
            "project_name": self.project_name,
            "original_end_date": format_date(self.original_end_date),
            "new_end_date": format_date(self.new_end_date),
            "delay_days": self.delay_days,
        }


@dataclass
class ProjectCount:
    id: str
    name: str
    count: int


@dataclass
class DependencyStats:
    total_dependencies: int = 0
    critical_dependencies: int = 0
    most_dependent: Optional[ProjectCount] = None
    most_blocking: Optional[ProjectCount] = None

    def to_dict(self) -> Dict[str, Any]:
        def _count(item):
            if item is None:
                return None
            return {"id": item.id, "name": item.name, "count": item.count}

        return {
            "total_dependencies": self.total_dependencies,
            "critical_dependencies": self.critical_dependencies,
            "most_dependent": _count(self.most_dependent),
            "most_blocking": _count(self.most_blocking),
        }
