import logging
from collections import deque

from ..domain.results import ImpactEntry
from ..utils.dates import add_days

logger = logging.getLogger(__name__)


def propagate_delay(project_id, delay_days, projects, edges, cancel_check=None):
    """
    Work out which projects a delay reaches and their new end dates.

    Breadth-first from ``project_id`` along dependency edges. Each project
    is visited at most once, so cyclic dependency graphs terminate. Every
    reached project receives the same delay as the start project; the delay
    does not grow from hop to hop.

    Args:
        project_id: ID of the project that slips
        delay_days: Size of the slip in days
        projects: List of Project objects
        edges: DependencyEdge objects
        cancel_check: Optional callable; a truthy return stops the walk early

    Returns:
        list: ImpactEntry objects for downstream projects, in visit order
    """
    by_id = {project.id: project for project in projects}

    dependents = {}
    for edge in edges:
        dependents.setdefault(edge.source_id, []).append(edge.target_id)

    impacted = []
    queue = deque([(project_id, delay_days)])
    visited = set()

    while queue:
        if cancel_check is not None and cancel_check():
            logger.info("Delay propagation from %s cancelled", project_id)
            break

        current_id, accumulated_delay = queue.popleft()
        if current_id in visited:
            continue
        visited.add(current_id)

        project = by_id.get(current_id)
        if project is None:
            logger.debug("Skipping unknown project %s", current_id)
            continue

        if current_id != project_id:
            impacted.append(
                ImpactEntry(
                    project_id=current_id,
                    project_name=project.name,
                    original_end_date=project.end_date,
                    new_end_date=add_days(project.end_date, accumulated_delay),
                    delay_days=accumulated_delay,
                )
            )

        for dependent_id in dependents.get(current_id, []):
            queue.append((dependent_id, accumulated_delay))

    logger.info(
        "A %d day delay on %s reaches %d project(s)",
        delay_days,
        project_id,
        len(impacted),
    )
    return impacted
