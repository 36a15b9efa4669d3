import logging
from datetime import timedelta

import networkx as nx

from ..utils.graph import build_task_graph
from .critical_path import critical_path_for_tasks

logger = logging.getLogger(__name__)


def would_create_cycle(tasks, from_task_id, to_task_id):
    """
    Check whether making ``to_task_id`` depend on ``from_task_id`` closes a loop.

    Args:
        tasks: List of Task objects
        from_task_id: Proposed predecessor
        to_task_id: Task that would gain the dependency

    Returns:
        bool: True if the new edge would create a cycle
    """
    if from_task_id == to_task_id:
        return True
    graph = build_task_graph(tasks)
    if from_task_id not in graph or to_task_id not in graph:
        return False
    return nx.has_path(graph, to_task_id, from_task_id)


def all_predecessors(task_id, tasks):
    """IDs of every task ``task_id`` depends on, directly or transitively."""
    graph = build_task_graph(tasks)
    if task_id not in graph:
        return []
    return sorted(nx.ancestors(graph, task_id), key=str)


def all_successors(task_id, tasks):
    """IDs of every task that depends on ``task_id``, directly or transitively."""
    graph = build_task_graph(tasks)
    if task_id not in graph:
        return []
    return sorted(nx.descendants(graph, task_id), key=str)


def adjust_task_dates(tasks):
    """
    Move each task to the earliest start its dependencies allow.

    A task never moves earlier than its own planned start; it only moves
    later when a predecessor ends after it begins. Durations are kept.

    Args:
        tasks: List of Task objects (not modified)

    Returns:
        list: New Task objects in the input order
    """
    tasks = list(tasks)
    if not tasks:
        return []

    result = critical_path_for_tasks(tasks)
    origin = min(task.start_date for task in tasks)

    adjusted = []
    for task in tasks:
        if task.id not in result.earliest_start:
            adjusted.append(task.copy())
            continue
        new_start = origin + timedelta(days=result.earliest_start[task.id])
        delta = (new_start - task.start_date).days
        if delta:
            logger.debug("Moving task %s by %d day(s) to respect dependencies", task.id, delta)
        adjusted.append(task.shifted(delta))
    return adjusted
