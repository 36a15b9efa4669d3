import logging

import networkx as nx

from ..domain.dependency import DependencyEdge, DependencyType
from .critical_path import critical_path_for_projects

logger = logging.getLogger(__name__)

# Projects whose dates fall within this many days of each other are linked
PROXIMITY_WINDOW_DAYS = 7


def find_shared_resources(project1, project2):
    """Resource IDs required by both projects, in the first project's order."""
    other = set(project2.resource_ids())
    return [r for r in project1.resource_ids() if r in other]


def classify_temporal_dependency(project1, project2, window_days=PROXIMITY_WINDOW_DAYS):
    """
    Classify how two projects' dates relate within a proximity window.

    Args:
        project1: Candidate source project
        project2: Candidate target project
        window_days: Proximity window in days (strict)

    Returns:
        DependencyType or None
    """
    if (
        project2.start_date > project1.end_date
        and (project2.start_date - project1.end_date).days < window_days
    ):
        return DependencyType.FINISH_TO_START

    if abs((project1.start_date - project2.start_date).days) < window_days:
        return DependencyType.START_TO_START

    if abs((project1.end_date - project2.end_date).days) < window_days:
        return DependencyType.FINISH_TO_FINISH

    return None


def build_dependency_graph(projects, window_days=PROXIMITY_WINDOW_DAYS):
    """
    Infer project-to-project dependencies for the active part of a portfolio.

    Every unordered pair of active or planning projects is tested for shared
    resources and for date proximity. Either signal yields one edge from the
    earlier-listed project to the later one. The heuristic can produce
    cycles once edges are combined with others; consumers must tolerate them.

    Args:
        projects: List of Project objects
        window_days: Proximity window for the date heuristic

    Returns:
        list: DependencyEdge objects in pair order
    """
    candidates = [p for p in projects if p.is_schedulable()]
    edges = []

    for i, project1 in enumerate(candidates):
        for project2 in candidates[i + 1 :]:
            if project1.id == project2.id:
                logger.warning("Skipping pair of projects sharing ID %s", project1.id)
                continue

            shared = find_shared_resources(project1, project2)
            temporal = classify_temporal_dependency(project1, project2, window_days)

            if not shared and temporal is None:
                continue

            if shared:
                description = f"Shared resources: {', '.join(str(r) for r in shared)}"
            else:
                description = "Temporal dependency"

            edges.append(
                DependencyEdge(
                    source_id=project1.id,
                    target_id=project2.id,
                    type=temporal or DependencyType.FINISH_TO_START,
                    description=description,
                    source_name=project1.name,
                    target_name=project2.name,
                )
            )

    logger.info(
        "Inferred %d dependency edge(s) among %d schedulable project(s)",
        len(edges),
        len(candidates),
    )
    return edges


def mark_critical_edges(projects, edges):
    """
    Flag the edges that join consecutive projects on the portfolio critical path.

    Args:
        projects: List of Project objects
        edges: DependencyEdge objects (updated in place)

    Returns:
        list: The project IDs forming the critical path
    """
    result = critical_path_for_projects(projects, edges)
    on_path = set(zip(result.path, result.path[1:]))
    for edge in edges:
        edge.critical = edge.as_pair() in on_path
    return result.path


def to_graph(edges, projects=None):
    """
    Build a networkx DiGraph of project dependencies.

    Args:
        edges: DependencyEdge objects
        projects: Optional Project list; adds isolated projects and names

    Returns:
        nx.DiGraph: Edge attributes carry type, description and critical flag
    """
    G = nx.DiGraph()
    for project in projects or []:
        G.add_node(project.id, name=project.name, status=project.status.value)
    for edge in edges:
        G.add_edge(
            edge.source_id,
            edge.target_id,
            type=edge.type.value,
            description=edge.description,
            critical=edge.critical,
        )
    return G
