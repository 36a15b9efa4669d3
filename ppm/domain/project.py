from datetime import date
from enum import Enum
from typing import List, Dict, Optional, Any, Union

from ppm.domain.task import Task
from ppm.utils.dates import parse_date, format_date


class ProjectStatus(Enum):
    """
    Enum representing the possible status values of a project.
    """

    PLANNING = "planning"
    ACTIVE = "active"
    ON_HOLD = "on-hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ProjectError(Exception):
    """Exception raised for errors in the Project class."""

    pass


class ResourceRequirement:
    """A planned need for ``count`` units of a pooled resource."""

    def __init__(self, resource_id: str, count: int = 1):
        if resource_id is None or str(resource_id).strip() == "":
            raise ProjectError("Resource requirement needs a resource ID")
        if not isinstance(count, (int, float)) or count < 0:
            raise ProjectError("Resource requirement count must be a non-negative number")
        self.resource_id = resource_id
        self.count = count

    def to_dict(self) -> Dict[str, Any]:
        return {"resource_id": self.resource_id, "count": self.count}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResourceRequirement":
        return cls(data["resource_id"], data.get("count", 1))

    def __repr__(self) -> str:
        return f"ResourceRequirement({self.resource_id}, count={self.count})"


class Project:
    """
    Represents a project in the portfolio.

    Budget and cost figures are carried for downstream reporting only; the
    scheduling engine reads dates, status and resource requirements.
    """

    def __init__(
        self,
        id: str,
        name: str,
        start_date: Union[str, date],
        end_date: Union[str, date],
        status: Union[str, ProjectStatus] = ProjectStatus.PLANNING,
        resource_requirements: Optional[List[Any]] = None,
        budget: float = 0.0,
        actual_cost: float = 0.0,
        tasks: Optional[List[Task]] = None,
        description: str = "",
    ):
        """
        Initialize a new Project.

        Args:
            id: Unique identifier for the project
            name: Name of the project
            start_date: Planned start (date or ``YYYY-MM-DD`` string)
            end_date: Planned end, inclusive
            status: One of planning, active, on-hold, completed, cancelled
            resource_requirements: ResourceRequirement objects, dicts, or bare
                resource IDs (count 1)
            budget: Approved budget
            actual_cost: Cost incurred so far
            tasks: Tasks owned by the project
            description: Free text

        Raises:
            ProjectError: If any input validation fails
        """
        if id is None or str(id).strip() == "":
            raise ProjectError("Project ID cannot be None or empty")
        self.id = id

        if not name or not isinstance(name, str):
            raise ProjectError("Project name must be a non-empty string")
        self.name = name

        try:
            self.start_date = parse_date(start_date)
            self.end_date = parse_date(end_date)
        except ValueError as e:
            raise ProjectError(f"Project {id} has an invalid date: {e}")

        if self.end_date < self.start_date:
            raise ProjectError(f"Project {id} ends before it starts")

        self.status = status

        self.resource_requirements = []
        for requirement in resource_requirements or []:
            if isinstance(requirement, ResourceRequirement):
                self.resource_requirements.append(requirement)
            elif isinstance(requirement, dict):
                self.resource_requirements.append(ResourceRequirement.from_dict(requirement))
            else:
                self.resource_requirements.append(ResourceRequirement(requirement))

        self.budget = budget
        self.actual_cost = actual_cost
        self.tasks = list(tasks) if tasks else []
        self.description = description

    @property
    def status(self) -> ProjectStatus:
        return self._status

    @status.setter
    def status(self, value):
        if isinstance(value, ProjectStatus):
            self._status = value
            return
        try:
            self._status = ProjectStatus(value)
        except ValueError:
            valid = [s.value for s in ProjectStatus]
            raise ProjectError(f"Invalid status: {value}. Must be one of {valid}")

    @property
    def duration(self) -> int:
        return (self.end_date - self.start_date).days

    def resource_ids(self) -> List[str]:
        """Resource IDs required by this project, in declaration order, without repeats."""
        return list(dict.fromkeys(r.resource_id for r in self.resource_requirements))

    def is_schedulable(self) -> bool:
        """Only active and planning projects take part in dependency inference."""
        return self._status in (ProjectStatus.ACTIVE, ProjectStatus.PLANNING)

    def add_task(self, task: Task) -> "Project":
        self.tasks.append(task)
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "start_date": format_date(self.start_date),
            "end_date": format_date(self.end_date),
            "status": self.status.value,
            "resource_requirements": [r.to_dict() for r in self.resource_requirements],
            "budget": self.budget,
            "actual_cost": self.actual_cost,
            "tasks": [t.to_dict() for t in self.tasks],
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        return cls(
            id=data["id"],
            name=data["name"],
            start_date=data["start_date"],
            end_date=data["end_date"],
            status=data.get("status", "planning"),
            resource_requirements=data.get("resource_requirements", []),
            budget=data.get("budget", 0.0),
            actual_cost=data.get("actual_cost", 0.0),
            tasks=[Task.from_dict(t) for t in data.get("tasks", [])],
            description=data.get("description", ""),
        )

    def __repr__(self) -> str:
        return (
            f"Project(id={self.id}, name={self.name}, status={self.status.value}, "
            f"{format_date(self.start_date)}..{format_date(self.end_date)})"
        )
