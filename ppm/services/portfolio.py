import logging

from ppm.domain.project import Project
from ppm.domain.resource import ResourcePoolItem
from ppm.services.critical_path import (
    critical_path_for_projects,
    critical_path_for_tasks,
)
from ppm.services.delay_propagation import propagate_delay
from ppm.services.dependency_graph import (
    PROXIMITY_WINDOW_DAYS,
    build_dependency_graph,
    mark_critical_edges,
)
from ppm.services.dependency_stats import aggregate_dependency_stats
from ppm.services.schedule_optimizer import find_resource_conflicts, optimize_schedule
from ppm.services.scheduling_strategies import get_strategy

logger = logging.getLogger(__name__)


class PortfolioScheduler:
    def __init__(
        self,
        window_days=PROXIMITY_WINDOW_DAYS,
        default_strategy="smoothing",
    ):
        self.window_days = window_days
        # Raises ValueError for an unknown strategy name
        self.default_strategy = get_strategy(default_strategy).get_name()

        self.projects = {}  # Dictionary of Project objects
        self.resource_pool = []  # List of ResourcePoolItem objects

        # Inferred cross-project dependencies, rebuilt by build_dependencies()
        self.dependencies = None

        # Last optimization result per project
        self.optimizations = {}

    def add_project(self, project):
        """Add a project to the portfolio"""
        self.projects[project.id] = project
        self.dependencies = None
        return self

    def add_task(self, project_id, task):
        """Add a task to a project in the portfolio"""
        self._get_project(project_id).add_task(task)
        return self

    def set_resource_pool(self, resource_pool):
        """Set the shared resource pool"""
        self.resource_pool = [
            r if isinstance(r, ResourcePoolItem) else ResourcePoolItem.from_dict(r)
            for r in resource_pool
        ]
        return self

    def _get_project(self, project_id):
        if project_id not in self.projects:
            raise ValueError(f"Project {project_id} not found in the portfolio")
        return self.projects[project_id]

    def build_dependencies(self):
        """Infer cross-project dependencies and flag those on the critical path."""
        projects = list(self.projects.values())
        self.dependencies = build_dependency_graph(projects, self.window_days)
        mark_critical_edges(projects, self.dependencies)
        return self.dependencies

    def _ensure_dependencies(self):
        if self.dependencies is None:
            self.build_dependencies()
        return self.dependencies

    def critical_path(self, project_id=None):
        """
        Critical path of one project's tasks, or of the portfolio when no
        project is given.
        """
        if project_id is not None:
            return critical_path_for_tasks(self._get_project(project_id).tasks)
        return critical_path_for_projects(
            list(self.projects.values()), self._ensure_dependencies()
        )

    def optimize(self, project_id, strategy=None, cancel_check=None):
        """Resolve resource conflicts in one project; the project keeps its original tasks."""
        project = self._get_project(project_id)
        result = optimize_schedule(
            project,
            project.tasks,
            self.resource_pool,
            strategy or self.default_strategy,
            cancel_check=cancel_check,
        )
        self.optimizations[project_id] = result
        return result

    def apply_optimization(self, project_id):
        """Replace a project's tasks with the last optimized schedule."""
        project = self._get_project(project_id)
        if project_id not in self.optimizations:
            raise ValueError(f"Project {project_id} has not been optimized")
        result = self.optimizations[project_id]
        project.tasks = list(result.tasks)
        logger.info("Applied %d schedule change(s) to %s", len(result.changes), project_id)
        return project

    def resource_conflicts(self, project_id):
        return find_resource_conflicts(
            self._get_project(project_id).tasks, self.resource_pool
        )

    def simulate_delay(self, project_id, delay_days):
        """Projects reached by a delay on ``project_id`` and their new end dates."""
        self._get_project(project_id)
        return propagate_delay(
            project_id,
            delay_days,
            list(self.projects.values()),
            self._ensure_dependencies(),
        )

    def dependency_stats(self):
        return aggregate_dependency_stats(
            list(self.projects.values()), self._ensure_dependencies()
        )

    def generate_report(self):
        """
        Plain-data snapshot of the portfolio schedule for downstream formatters.

        Returns:
            dict: projects, dependencies, portfolio critical path, dependency
            statistics and per-project task critical paths and conflicts
        """
        dependencies = self._ensure_dependencies()
        portfolio_path = self.critical_path()

        projects = []
        for project in self.projects.values():
            task_path = critical_path_for_tasks(project.tasks)
            projects.append(
                {
                    "project": project.to_dict(),
                    "critical_tasks": list(task_path.path),
                    "task_slack": dict(task_path.slack),
                    "resource_conflicts": len(self.resource_conflicts(project.id)),
                }
            )

        return {
            "projects": projects,
            "dependencies": [edge.to_dict() for edge in dependencies],
            "critical_path": list(portfolio_path.path),
            "critical_path_length": portfolio_path.length,
            "statistics": self.dependency_stats().to_dict(),
        }

    @classmethod
    def from_dict(cls, data, **kwargs):
        """Build a scheduler from ``{"projects": [...], "resource_pool": [...]}``."""
        scheduler = cls(**kwargs)
        for project_data in data.get("projects", []):
            scheduler.add_project(Project.from_dict(project_data))
        scheduler.set_resource_pool(data.get("resource_pool", []))
        return scheduler
