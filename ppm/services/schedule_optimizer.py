import logging
from datetime import timedelta

from ..domain.results import (
    OptimizationMetrics,
    OptimizationResult,
    ResourceConflict,
    TaskChange,
)
from ..utils.dates import date_range
from ..utils.graph import build_task_graph
from .critical_path import critical_path_for_tasks
from .scheduling_strategies import get_strategy

logger = logging.getLogger(__name__)

# Extra simulated days allowed on top of twice the original project duration
SIMULATION_PADDING_DAYS = 365


class OptimizationCancelled(Exception):
    """Raised when a cancellation check asks the optimizer to stop."""

    pass


class _SimulationState:
    """Mutable working state of one optimizer run, private to that run."""

    def __init__(self, tasks, critical_path, project_end):
        self.tasks = {task.id: task for task in tasks}
        self.critical_path = critical_path
        self.slack_left = {
            task.id: critical_path.slack.get(task.id, 0) for task in tasks
        }
        self.project_end = project_end
        self.visited = set()
        self.graph = build_task_graph(tasks)

    def new_end(self, task_id, days):
        return self.tasks[task_id].end_date + timedelta(days=days)

    def all_visited(self):
        return len(self.visited) == len(self.tasks)

    def visit(self, day):
        for task in self.tasks.values():
            if task.start_date <= day:
                self.visited.add(task.id)

    def plan_shift(self, task_id, days=1):
        """
        Shifts needed to move one task by ``days``, cascading to successors.

        A successor is pushed only by the overlap the move introduces, so a
        pre-existing gap is consumed before anything downstream moves.
        Successors inside a dependency cycle are never cascaded to.
        """
        shifts = {task_id: days}
        for node in self.critical_path.order:
            if node not in shifts:
                continue
            moved = self.tasks[node]
            new_end = moved.end_date + timedelta(days=shifts[node])
            for succ in self.graph.successors(node):
                if succ not in self.tasks:
                    continue
                need = min(shifts[node], (new_end - self.tasks[succ].start_date).days)
                if need > 0 and need > shifts.get(succ, 0):
                    shifts[succ] = need
        return shifts

    def apply(self, shifts):
        for task_id, days in shifts.items():
            task = self.tasks[task_id]
            task.start_date += timedelta(days=days)
            task.end_date += timedelta(days=days)
            self.slack_left[task_id] = self.slack_left.get(task_id, 0) - days
            if task.end_date > self.project_end:
                self.project_end = task.end_date


def find_resource_conflicts(tasks, resource_pool, start=None, end=None):
    """
    List every day on which a pooled resource carries more tasks than its capacity.

    Args:
        tasks: List of Task objects
        resource_pool: List of ResourcePoolItem objects
        start: First day to inspect (defaults to the earliest task start)
        end: Last day to inspect (defaults to the latest task end)

    Returns:
        list: ResourceConflict records, ordered by resource then day
    """
    tasks = list(tasks)
    if not tasks:
        return []

    start = start or min(task.start_date for task in tasks)
    end = end or max(task.end_date for task in tasks)

    conflicts = []
    for resource in resource_pool:
        for day in date_range(start, end):
            active = resource.active_tasks(tasks, day)
            if len(active) > resource.total_quantity:
                conflicts.append(
                    ResourceConflict(
                        resource_id=resource.id,
                        resource_name=resource.name,
                        day=day,
                        capacity=resource.total_quantity,
                        allocated=len(active),
                        task_ids=[task.id for task in active],
                    )
                )
    return conflicts


def _resolution_order(active, critical_path):
    """Non-critical before critical (zero slack), then lowest priority first; stable otherwise."""
    return sorted(
        active,
        key=lambda task: (critical_path.is_critical(task.id), task.priority.rank),
    )


def _simulate(project, state, strategy, ordered, resource_pool, start, max_days, cancel_check):
    """
    Run one day-by-day pass of ``strategy`` over the shared state.

    A candidate whose shift would also move another task competing for the
    same resource that day is skipped; moving both keeps the overlap.

    Returns:
        tuple: (shifts applied, largest overload seen)
    """
    conflicts_resolved = 0
    peak_overload = 0

    current_date = start
    day_count = 0

    while day_count < max_days:
        if strategy.should_stop(current_date, state):
            break
        if cancel_check is not None and cancel_check():
            raise OptimizationCancelled(
                f"Optimization of {getattr(project, 'id', 'project')} cancelled "
                f"on day {day_count}"
            )

        state.visit(current_date)

        for resource in resource_pool:
            active = resource.active_tasks(ordered, current_date)
            overload = len(active) - resource.total_quantity
            if overload <= 0:
                continue

            peak_overload = max(peak_overload, overload)
            logger.debug(
                "%s: resource %s over capacity by %d (%s)",
                current_date,
                resource.id,
                overload,
                ", ".join(str(t.id) for t in active),
            )

            competing = {task.id for task in active}
            resolved = 0
            for task in _resolution_order(active, state.critical_path):
                if resolved >= overload:
                    break
                shifts = state.plan_shift(task.id)
                if any(other in competing for other in shifts if other != task.id):
                    continue
                if strategy.can_shift(shifts, state):
                    state.apply(shifts)
                    resolved += 1
                    conflicts_resolved += 1

        current_date += timedelta(days=1)
        day_count += 1
    else:
        logger.warning(
            "%s pass stopped at the %d day simulation limit", strategy.get_name(), max_days
        )

    return conflicts_resolved, peak_overload


def optimize_schedule(project, tasks, resource_pool, strategy="smoothing", cancel_check=None):
    """
    Resolve resource over-allocation by moving tasks later, one day at a time.

    The simulation walks the calendar from the earliest task start. On each
    day, for each pooled resource, every unit of overload is answered by
    shifting one competing task (and any successor it would collide with) by
    a single day. Criticality and slack come from the critical path computed
    once at the start of the run. Leveling first runs a full smoothing pass
    and then levels whatever conflicts that pass left.

    Args:
        project: The Project the tasks belong to
        tasks: List of Task objects (``project.tasks`` when None)
        resource_pool: List of ResourcePoolItem objects
        strategy: "smoothing", "leveling" or a SchedulingStrategy instance
        cancel_check: Optional callable; a truthy return aborts the run

    Returns:
        OptimizationResult: New task objects plus change records and metrics.
        The tasks passed in are left untouched.

    Raises:
        ValueError: If the strategy is unknown
        OptimizationCancelled: If ``cancel_check`` requested a stop
    """
    strategy = get_strategy(strategy)
    if tasks is None:
        tasks = project.tasks if project is not None else []

    originals = list(tasks)
    if not originals:
        return OptimizationResult(
            tasks=[],
            changes=[],
            metrics=OptimizationMetrics(),
            original_tasks=[],
            strategy=strategy.get_name(),
        )

    # Work on clones so the caller's task objects are never modified
    working = [task.copy() for task in originals]

    critical_path = critical_path_for_tasks(working)
    project_start = min(task.start_date for task in working)
    original_end = max(task.end_date for task in working)
    original_duration = (original_end - project_start).days

    state = _SimulationState(working, critical_path, original_end)

    # Tasks are considered in start-date order throughout the run
    ordered = sorted(working, key=lambda t: t.start_date)

    conflicts_resolved = 0
    peak_overload = 0

    max_days = original_duration * 2 + SIMULATION_PADDING_DAYS

    passes = [strategy]
    prepass = strategy.get_prepass()
    if prepass is not None:
        passes.insert(0, prepass)

    for current in passes:
        resolved, peak = _simulate(
            project,
            state,
            current,
            ordered,
            resource_pool,
            project_start,
            max_days,
            cancel_check,
        )
        conflicts_resolved += resolved
        peak_overload = max(peak_overload, peak)

    changes = []
    reason = strategy.get_reason()
    for original in originals:
        moved = state.tasks[original.id]
        if moved.start_date != original.start_date:
            changes.append(
                TaskChange(
                    task_id=original.id,
                    task_name=original.name,
                    original_start=original.start_date,
                    new_start=moved.start_date,
                    delay=(moved.start_date - original.start_date).days,
                    reason=reason,
                )
            )

    new_end = max(task.end_date for task in working)
    metrics = OptimizationMetrics(
        original_duration=original_duration,
        new_duration=(new_end - project_start).days,
        conflicts_resolved=conflicts_resolved,
        peak_overload=peak_overload,
        remaining_conflicts=len(find_resource_conflicts(working, resource_pool)),
    )

    logger.info(
        "Optimized %s with %s: %d conflict(s) resolved, %d task(s) moved, duration %d -> %d days",
        getattr(project, "id", "project"),
        strategy.get_name(),
        conflicts_resolved,
        len(changes),
        metrics.original_duration,
        metrics.new_duration,
    )

    return OptimizationResult(
        tasks=[state.tasks[original.id] for original in originals],
        changes=changes,
        metrics=metrics,
        original_tasks=originals,
        strategy=strategy.get_name(),
    )
