from datetime import date, timedelta
from enum import Enum
from typing import List, Dict, Optional, Any, Union

from ppm.utils.dates import parse_date, format_date


class Priority(Enum):
    """
    Enum representing task priority, declared highest first.
    """

    P0 = "P0"
    P1 = "P1"
    P2 = "P2"
    P3 = "P3"

    @property
    def rank(self) -> int:
        """Ordering key: larger means more important."""
        return {"P0": 3, "P1": 2, "P2": 1, "P3": 0}[self.value]


class TaskError(Exception):
    """Exception raised for errors in the Task class."""

    pass


class Task:
    """
    Represents a scheduled unit of work inside a project.

    A task occupies an inclusive range of calendar days, is assigned to a
    single pooled resource and may list the tasks it depends on. The
    optimizer only ever translates a task in time; its duration is fixed.
    """

    def __init__(
        self,
        id: str,
        name: str,
        start_date: Union[str, date],
        end_date: Union[str, date],
        assignee: Optional[str] = None,
        priority: Union[str, Priority] = Priority.P1,
        dependencies: Optional[List[str]] = None,
        description: str = "",
    ):
        """
        Initialize a new Task.

        Args:
            id: Unique identifier for the task
            name: Name of the task
            start_date: First day of work (date or ``YYYY-MM-DD`` string)
            end_date: Last day of work, inclusive
            assignee: ID of the resource pool item doing the work
            priority: "P0" (highest) to "P3" (lowest)
            dependencies: List of task IDs that this task depends on
            description: Detailed description of the task

        Raises:
            TaskError: If any input validation fails
        """
        if id is None or str(id).strip() == "":
            raise TaskError("Task ID cannot be None or empty")
        self.id = id

        if not name or not isinstance(name, str):
            raise TaskError("Task name must be a non-empty string")
        self.name = name

        try:
            self.start_date = parse_date(start_date)
            self.end_date = parse_date(end_date)
        except ValueError as e:
            raise TaskError(f"Task {id} has an invalid date: {e}")

        if self.end_date < self.start_date:
            raise TaskError(
                f"Task {id} ends ({format_date(self.end_date)}) before it starts "
                f"({format_date(self.start_date)})"
            )

        self.assignee = assignee
        self.priority = priority

        self.dependencies = []
        if dependencies:
            if not isinstance(dependencies, (list, tuple)):
                raise TaskError("Dependencies must be a list")
            self.dependencies = list(dependencies)

        self.description = description

    @property
    def priority(self) -> Priority:
        return self._priority

    @priority.setter
    def priority(self, value):
        if isinstance(value, Priority):
            self._priority = value
            return
        try:
            self._priority = Priority(value)
        except ValueError:
            valid = [p.value for p in Priority]
            raise TaskError(f"Invalid priority: {value}. Must be one of {valid}")

    @property
    def duration(self) -> int:
        """Length of the task in days (end minus start)."""
        return (self.end_date - self.start_date).days

    def overlaps(self, day) -> bool:
        """True when the task is being worked on the given day."""
        day = parse_date(day)
        return self.start_date <= day <= self.end_date

    def shifted(self, days: int) -> "Task":
        """Return a copy of this task moved by whole days, duration unchanged."""
        task = self.copy()
        task.start_date = self.start_date + timedelta(days=days)
        task.end_date = self.end_date + timedelta(days=days)
        return task

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert task to a dictionary representation.

        Returns:
            dict: Dictionary with dates rendered as ``YYYY-MM-DD``
        """
        return {
            "id": self.id,
            "name": self.name,
            "start_date": format_date(self.start_date),
            "end_date": format_date(self.end_date),
            "assignee": self.assignee,
            "priority": self.priority.value,
            "dependencies": self.dependencies.copy(),
            "description": self.description,
            "duration": self.duration,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """
        Create a task from a dictionary representation.

        Args:
            data: Dictionary representation of the task

        Returns:
            Task: New task instance
        """
        return cls(
            id=data["id"],
            name=data["name"],
            start_date=data["start_date"],
            end_date=data["end_date"],
            assignee=data.get("assignee"),
            priority=data.get("priority") or Priority.P1,
            dependencies=data.get("dependencies", []),
            description=data.get("description", ""),
        )

    def copy(self) -> "Task":
        """
        Create a deep copy of this task.

        Returns:
            Task: New task instance with the same properties
        """
        return self.from_dict(self.to_dict())

    def __eq__(self, other):
        if not isinstance(other, Task):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"Task(id={self.id}, name={self.name}, "
            f"{format_date(self.start_date)}..{format_date(self.end_date)}, "
            f"assignee={self.assignee}, priority={self.priority.value})"
        )
