from ..domain.results import DependencyStats, ProjectCount


def _leader(counts, names):
    """Project with the highest count (first wins ties), or None if all are zero."""
    best_id = None
    best_count = 0
    for project_id, count in counts.items():
        if count > best_count:
            best_id = project_id
            best_count = count
    if best_id is None:
        return None
    return ProjectCount(id=best_id, name=names.get(best_id, ""), count=best_count)


def aggregate_dependency_stats(projects, edges):
    """
    Summarize a dependency graph for reporting.

    Args:
        projects: List of Project objects
        edges: DependencyEdge objects

    Returns:
        DependencyStats: Edge totals plus the most dependent (most incoming
        edges) and most blocking (most outgoing edges) projects
    """
    names = {project.id: project.name for project in projects}
    incoming = {project.id: 0 for project in projects}
    outgoing = {project.id: 0 for project in projects}

    edges = list(edges)
    for edge in edges:
        outgoing[edge.source_id] = outgoing.get(edge.source_id, 0) + 1
        incoming[edge.target_id] = incoming.get(edge.target_id, 0) + 1

    return DependencyStats(
        total_dependencies=len(edges),
        critical_dependencies=sum(1 for edge in edges if edge.critical),
        most_dependent=_leader(incoming, names),
        most_blocking=_leader(outgoing, names),
    )
