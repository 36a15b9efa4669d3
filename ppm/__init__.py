"""
PPM Portfolio Scheduling Engine
===============================

Critical path, resource smoothing/leveling and cross-project dependency
analysis for a portfolio of interdependent projects.

Entry points:
- compute_critical_path: longest path and slack over a dependency graph
- optimize_schedule: resolve resource over-allocation inside one project
- build_dependency_graph: infer project-to-project dependencies
- propagate_delay: downstream impact of a slipping project
- aggregate_dependency_stats: dependency counts for reporting
"""

from ppm.domain.task import Task, Priority, TaskError
from ppm.domain.project import Project, ProjectStatus, ResourceRequirement, ProjectError
from ppm.domain.resource import ResourcePoolItem, ResourceError
from ppm.domain.dependency import (
    DependencyEdge,
    DependencyType,
    DependencyStatus,
    DependencyError,
)
from ppm.services.critical_path import (
    compute_critical_path,
    critical_path_for_tasks,
    critical_path_for_projects,
)
from ppm.services.schedule_optimizer import (
    optimize_schedule,
    find_resource_conflicts,
    OptimizationCancelled,
)
from ppm.services.dependency_graph import build_dependency_graph, mark_critical_edges
from ppm.services.delay_propagation import propagate_delay
from ppm.services.dependency_stats import aggregate_dependency_stats
from ppm.services.portfolio import PortfolioScheduler

__all__ = [
    "Task",
    "Priority",
    "TaskError",
    "Project",
    "ProjectStatus",
    "ResourceRequirement",
    "ProjectError",
    "ResourcePoolItem",
    "ResourceError",
    "DependencyEdge",
    "DependencyType",
    "DependencyStatus",
    "DependencyError",
    "compute_critical_path",
    "critical_path_for_tasks",
    "critical_path_for_projects",
    "optimize_schedule",
    "find_resource_conflicts",
    "OptimizationCancelled",
    "build_dependency_graph",
    "mark_critical_edges",
    "propagate_delay",
    "aggregate_dependency_stats",
    "PortfolioScheduler",
]
