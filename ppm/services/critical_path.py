import logging

from ..domain.results import CriticalPathResult
from ..utils.dates import days_between
from ..utils.graph import build_graph, kahn_order

logger = logging.getLogger(__name__)


def _edge_pairs(edges):
    """Accept DependencyEdge objects or plain (source, target) pairs."""
    pairs = []
    for edge in edges or []:
        if hasattr(edge, "as_pair"):
            pairs.append(edge.as_pair())
        else:
            source, target = edge
            pairs.append((source, target))
    return pairs


def _durations(nodes):
    if isinstance(nodes, dict):
        return dict(nodes)
    return {node.id: node.duration for node in nodes}


def compute_critical_path(nodes, edges, release=None, order_hint=None):
    """
    Find the longest duration-weighted path through a dependency graph.

    Forward pass is Kahn's algorithm: each popped node relaxes the earliest
    start of its successors to ``max(current, start + duration)``, keeping the
    first predecessor found on ties. A backward pass over the same order
    gives latest starts and slack. Nodes caught in a cycle never reach
    in-degree zero and are left out of every map (listed in ``excluded``).

    Args:
        nodes: Dict of {node_id: duration}, or objects with ``id`` and ``duration``
        edges: DependencyEdge objects or (source_id, target_id) pairs
        release: Optional {node_id: earliest start offset} anchoring nodes in time
        order_hint: Optional node order used to seed the ready queue

    Returns:
        CriticalPathResult: Empty when there are no nodes
    """
    durations = _durations(nodes)
    if not durations:
        return CriticalPathResult()

    release = release or {}
    graph = build_graph(list(durations), _edge_pairs(edges))
    order, excluded = kahn_order(graph, order_hint)

    earliest_start = {node: release.get(node, 0) for node in order}
    predecessor = {node: None for node in order}

    # Forward pass
    for node in order:
        finish = earliest_start[node] + durations[node]
        for succ in graph.successors(node):
            if succ not in earliest_start:
                continue
            if finish > earliest_start[succ]:
                earliest_start[succ] = finish
                predecessor[succ] = node

    distance = {node: earliest_start[node] + durations[node] for node in order}

    # Terminal node: largest completion distance, first in order on ties
    terminal = None
    for node in order:
        if terminal is None or distance[node] > distance[terminal]:
            terminal = node

    path = []
    current = terminal
    while current is not None:
        path.append(current)
        current = predecessor[current]
    path.reverse()

    # Backward pass
    project_length = distance[terminal] if terminal is not None else 0
    latest_start = {}
    slack = {}
    for node in reversed(order):
        successors = [s for s in graph.successors(node) if s in latest_start]
        if successors:
            latest_finish = min(latest_start[s] for s in successors)
        else:
            latest_finish = project_length
        latest_start[node] = latest_finish - durations[node]
        slack[node] = latest_start[node] - earliest_start[node]

    logger.debug(
        "Critical path over %d node(s): %s (length %s)",
        len(order),
        " -> ".join(str(n) for n in path),
        project_length,
    )

    return CriticalPathResult(
        path=path,
        earliest_start=earliest_start,
        distance=distance,
        predecessor=predecessor,
        slack=slack,
        order=order,
        excluded=excluded,
    )


def critical_path_for_tasks(tasks):
    """
    Critical path and slack for the tasks of one project.

    Explicit ``dependencies`` are used as edges. When no task declares any,
    tasks are taken in start-date order with no links between them. Either
    way each task is anchored at its calendar start, so slack is the number
    of days it can move before passing the latest task end.

    Args:
        tasks: List of Task objects

    Returns:
        CriticalPathResult: Offsets are days from the earliest task start
    """
    tasks = list(tasks)
    if not tasks:
        return CriticalPathResult()

    origin = min(task.start_date for task in tasks)
    release = {task.id: days_between(origin, task.start_date) for task in tasks}
    known = {task.id for task in tasks}
    edges = [
        (dep_id, task.id)
        for task in tasks
        for dep_id in task.dependencies
        if dep_id in known
    ]

    order_hint = None
    if not edges:
        logger.debug("No explicit task dependencies; ordering %d task(s) by start date", len(tasks))
        order_hint = [task.id for task in sorted(tasks, key=lambda t: t.start_date)]

    return compute_critical_path(tasks, edges, release=release, order_hint=order_hint)


def critical_path_for_projects(projects, edges):
    """
    Critical path through a portfolio using project durations as weights.

    Args:
        projects: List of Project objects
        edges: DependencyEdge objects between those projects

    Returns:
        CriticalPathResult
    """
    return compute_critical_path(list(projects), edges)
