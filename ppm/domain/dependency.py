from datetime import datetime
from enum import Enum
from typing import Dict, Any, Optional


class DependencyType(Enum):
    FINISH_TO_START = "finish-to-start"
    START_TO_START = "start-to-start"
    FINISH_TO_FINISH = "finish-to-finish"


class DependencyStatus(Enum):
    ACTIVE = "active"
    RESOLVED = "resolved"
    BROKEN = "broken"


class DependencyError(Exception):
    """Exception raised for errors in the DependencyEdge class."""

    pass


class DependencyEdge:
    """
    A directed project-to-project dependency.

    Edges are inferred by the dependency graph builder and regenerated on
    every build; ``description`` records why the edge exists.
    """

    def __init__(
        self,
        source_id: str,
        target_id: str,
        type: Any = DependencyType.FINISH_TO_START,
        description: str = "",
        critical: bool = False,
        status: Any = DependencyStatus.ACTIVE,
        source_name: str = "",
        target_name: str = "",
        created_at: Optional[datetime] = None,
    ):
        """
        Initialize a new DependencyEdge.

        Args:
            source_id: ID of the project that must act first
            target_id: ID of the dependent project
            type: finish-to-start, start-to-start or finish-to-finish
            description: Rationale for the edge
            critical: Whether the edge lies on the portfolio critical path
            status: active, resolved or broken
            source_name: Display name of the source project
            target_name: Display name of the target project
            created_at: Creation timestamp (defaults to now)

        Raises:
            DependencyError: If any input validation fails
        """
        if source_id is None or target_id is None:
            raise DependencyError("Dependency endpoints cannot be None")
        if source_id == target_id:
            raise DependencyError(f"Project {source_id} cannot depend on itself")

        self.source_id = source_id
        self.target_id = target_id
        self.type = type
        self.description = description
        self.critical = bool(critical)
        self.status = status
        self.source_name = source_name
        self.target_name = target_name
        self.created_at = created_at or datetime.now()

    @property
    def id(self) -> str:
        return f"dep-{self.source_id}-{self.target_id}"

    @property
    def type(self) -> DependencyType:
        return self._type

    @type.setter
    def type(self, value):
        try:
            self._type = DependencyType(value)
        except ValueError:
            valid = [t.value for t in DependencyType]
            raise DependencyError(f"Invalid dependency type: {value}. Must be one of {valid}")

    @property
    def status(self) -> DependencyStatus:
        return self._status

    @status.setter
    def status(self, value):
        try:
            self._status = DependencyStatus(value)
        except ValueError:
            valid = [s.value for s in DependencyStatus]
            raise DependencyError(f"Invalid dependency status: {value}. Must be one of {valid}")

    def as_pair(self):
        return (self.source_id, self.target_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source_id": self.source_id,
            "source_name": self.source_name,
            "target_id": self.target_id,
            "target_name": self.target_name,
            "type": self.type.value,
            "description": self.description,
            "critical": self.critical,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DependencyEdge":
        created_at = data.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return cls(
            source_id=data["source_id"],
            target_id=data["target_id"],
            type=data.get("type", DependencyType.FINISH_TO_START.value),
            description=data.get("description", ""),
            critical=data.get("critical", False),
            status=data.get("status", DependencyStatus.ACTIVE.value),
            source_name=data.get("source_name", ""),
            target_name=data.get("target_name", ""),
            created_at=created_at,
        )

    def __repr__(self) -> str:
        flag = ", critical" if self.critical else ""
        return f"DependencyEdge({self.source_id} -> {self.target_id}, {self.type.value}{flag})"
