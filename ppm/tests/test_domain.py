import unittest
from datetime import date, datetime

from ppm.domain.task import Task, Priority, TaskError
from ppm.domain.project import Project, ProjectStatus, ResourceRequirement, ProjectError
from ppm.domain.resource import ResourcePoolItem, ResourceError
from ppm.domain.dependency import (
    DependencyEdge,
    DependencyType,
    DependencyStatus,
    DependencyError,
)


class TaskTestCase(unittest.TestCase):
    """Test cases for the Task class."""

    def setUp(self):
        self.task = Task(
            id="T1",
            name="Schema redesign",
            start_date="2024-01-01",
            end_date="2024-01-05",
            assignee="dev1",
            priority="P1",
            dependencies=["T0"],
        )

    def test_initialization_validation(self):
        """Test validation during task initialization."""
        with self.assertRaises(TaskError):
            Task(id=None, name="No ID", start_date="2024-01-01", end_date="2024-01-02")

        with self.assertRaises(TaskError):
            Task(id="I1", name="", start_date="2024-01-01", end_date="2024-01-02")

        # End before start
        with self.assertRaises(TaskError):
            Task(id="I2", name="Backwards", start_date="2024-01-05", end_date="2024-01-01")

        with self.assertRaises(TaskError):
            Task(id="I3", name="Bad date", start_date="2024-13-45", end_date="2024-01-01")

        with self.assertRaises(TaskError):
            Task(id="I4", name="Bad priority", start_date="2024-01-01", end_date="2024-01-01", priority="P9")

        with self.assertRaises(TaskError):
            Task(id="I5", name="Bad deps", start_date="2024-01-01", end_date="2024-01-01", dependencies="T1")

        # Zero-length task is allowed
        task = Task(id="Z1", name="Milestone", start_date="2024-01-01", end_date="2024-01-01")
        self.assertEqual(task.duration, 0)
        self.assertEqual(task.priority, Priority.P1)

    def test_dates_and_duration(self):
        """Dates are parsed to calendar dates and duration is end minus start."""
        self.assertEqual(self.task.start_date, date(2024, 1, 1))
        self.assertEqual(self.task.end_date, date(2024, 1, 5))
        self.assertEqual(self.task.duration, 4)

        task = Task("T9", "From datetime", datetime(2024, 3, 1, 15, 30), date(2024, 3, 2))
        self.assertEqual(task.start_date, date(2024, 3, 1))
        self.assertEqual(task.duration, 1)

    def test_overlaps(self):
        self.assertTrue(self.task.overlaps("2024-01-01"))
        self.assertTrue(self.task.overlaps(date(2024, 1, 5)))
        self.assertFalse(self.task.overlaps("2024-01-06"))
        self.assertFalse(self.task.overlaps("2023-12-31"))

    def test_shifted_preserves_duration(self):
        moved = self.task.shifted(3)
        self.assertEqual(moved.start_date, date(2024, 1, 4))
        self.assertEqual(moved.end_date, date(2024, 1, 8))
        self.assertEqual(moved.duration, self.task.duration)
        # Original untouched
        self.assertEqual(self.task.start_date, date(2024, 1, 1))

    def test_priority_rank(self):
        self.assertGreater(Priority.P0.rank, Priority.P1.rank)
        self.assertGreater(Priority.P1.rank, Priority.P2.rank)
        self.assertGreater(Priority.P2.rank, Priority.P3.rank)

    def test_serialization(self):
        data = self.task.to_dict()
        self.assertEqual(data["start_date"], "2024-01-01")
        self.assertEqual(data["priority"], "P1")
        self.assertEqual(data["dependencies"], ["T0"])

        restored = Task.from_dict(data)
        self.assertEqual(restored, self.task)

    def test_copy_is_independent(self):
        task_copy = self.task.copy()
        self.assertEqual(task_copy.id, self.task.id)
        task_copy.dependencies.append("T8")
        task_copy.name = "Changed"
        self.assertEqual(self.task.dependencies, ["T0"])
        self.assertEqual(self.task.name, "Schema redesign")


class ProjectTestCase(unittest.TestCase):
    """Test cases for the Project class."""

    def test_initialization_validation(self):
        with self.assertRaises(ProjectError):
            Project(id="", name="No ID", start_date="2024-01-01", end_date="2024-02-01")

        with self.assertRaises(ProjectError):
            Project(id="P1", name="Backwards", start_date="2024-02-01", end_date="2024-01-01")

        with self.assertRaises(ProjectError):
            Project(id="P1", name="Bad status", start_date="2024-01-01", end_date="2024-02-01", status="paused")

        with self.assertRaises(ProjectError):
            ResourceRequirement("dev", count=-1)

    def test_status_and_schedulable(self):
        project = Project("P1", "Upgrade", "2024-01-01", "2024-01-31", status="active")
        self.assertEqual(project.status, ProjectStatus.ACTIVE)
        self.assertTrue(project.is_schedulable())

        project.status = "planning"
        self.assertTrue(project.is_schedulable())

        for status in ("on-hold", "completed", "cancelled"):
            project.status = status
            self.assertFalse(project.is_schedulable())

    def test_resource_requirements(self):
        """Requirements accept objects, dicts or bare IDs; IDs are deduplicated."""
        project = Project(
            "P1",
            "Upgrade",
            "2024-01-01",
            "2024-01-31",
            resource_requirements=[
                ResourceRequirement("dev", 3),
                {"resource_id": "qa", "count": 1},
                "dev",
            ],
        )
        self.assertEqual(len(project.resource_requirements), 3)
        self.assertEqual(project.resource_requirements[0].count, 3)
        self.assertEqual(project.resource_ids(), ["dev", "qa"])
        self.assertEqual(project.duration, 30)

    def test_round_trip_with_tasks(self):
        project = Project("P1", "Upgrade", "2024-01-01", "2024-01-31", budget=1000)
        project.add_task(Task("T1", "Design", "2024-01-01", "2024-01-10", assignee="dev"))
        restored = Project.from_dict(project.to_dict())
        self.assertEqual(restored.id, "P1")
        self.assertEqual(restored.budget, 1000)
        self.assertEqual(len(restored.tasks), 1)
        self.assertEqual(restored.tasks[0].assignee, "dev")


class ResourcePoolItemTestCase(unittest.TestCase):
    """Test cases for pooled resources."""

    def test_capacity_validation(self):
        with self.assertRaises(ResourceError):
            ResourcePoolItem("dev", "Developers", total_quantity=0)
        with self.assertRaises(ResourceError):
            ResourcePoolItem("dev", "Developers", total_quantity=-2)
        with self.assertRaises(ResourceError):
            ResourcePoolItem("dev", "Developers", total_quantity=1.5)
        with self.assertRaises(ResourceError):
            ResourcePoolItem("dev", "Developers", total_quantity=True)

        # Same plain Exception base as the other domain errors
        self.assertFalse(issubclass(ResourceError, ValueError))
        self.assertEqual(ResourceError.__bases__, TaskError.__bases__)

        resource = ResourcePoolItem("dev", total_quantity=3)
        self.assertEqual(resource.name, "dev")
        self.assertEqual(resource.capacity, 3)

    def test_usage(self):
        resource = ResourcePoolItem("dev", "Developers", total_quantity=1)
        tasks = [
            Task("T1", "A", "2024-01-01", "2024-01-05", assignee="dev"),
            Task("T2", "B", "2024-01-03", "2024-01-07", assignee="dev"),
            Task("T3", "C", "2024-01-03", "2024-01-07", assignee="qa"),
        ]
        self.assertEqual(resource.usage_on(tasks, "2024-01-02"), 1)
        self.assertEqual(resource.usage_on(tasks, "2024-01-04"), 2)
        self.assertEqual(resource.overload_on(tasks, "2024-01-04"), 1)
        self.assertEqual(resource.overload_on(tasks, "2024-01-07"), 0)

        utilization = resource.get_utilization_for_period(tasks, "2024-01-04", "2024-01-06")
        self.assertEqual(utilization["2024-01-04"], 200)
        self.assertEqual(utilization["2024-01-06"], 100)


class DependencyEdgeTestCase(unittest.TestCase):
    """Test cases for project dependency edges."""

    def test_validation(self):
        with self.assertRaises(DependencyError):
            DependencyEdge("P1", "P1")
        with self.assertRaises(DependencyError):
            DependencyEdge("P1", "P2", type="start-to-finish")
        with self.assertRaises(DependencyError):
            DependencyEdge("P1", "P2", status="pending")

    def test_defaults_and_round_trip(self):
        edge = DependencyEdge("P1", "P2", description="Shared resources: dev")
        self.assertEqual(edge.id, "dep-P1-P2")
        self.assertEqual(edge.type, DependencyType.FINISH_TO_START)
        self.assertEqual(edge.status, DependencyStatus.ACTIVE)
        self.assertFalse(edge.critical)
        self.assertEqual(edge.as_pair(), ("P1", "P2"))

        restored = DependencyEdge.from_dict(edge.to_dict())
        self.assertEqual(restored.as_pair(), ("P1", "P2"))
        self.assertEqual(restored.description, "Shared resources: dev")
        self.assertEqual(restored.created_at, edge.created_at)


if __name__ == "__main__":
    unittest.main()
