import random
import unittest
from datetime import date, timedelta

from ppm.domain.task import Task
from ppm.domain.project import Project
from ppm.domain.resource import ResourcePoolItem
from ppm.services.schedule_optimizer import (
    optimize_schedule,
    find_resource_conflicts,
    OptimizationCancelled,
)
from ppm.services.scheduling_strategies import (
    SmoothingStrategy,
    LevelingStrategy,
    get_strategy,
)


class ScheduleOptimizerTestCase(unittest.TestCase):
    """Test cases for resource smoothing and leveling."""

    def setUp(self):
        self.project = Project("P1", "Upgrade", "2024-01-01", "2024-01-31", status="active")
        self.pool = [ResourcePoolItem("dev1", "Developer", total_quantity=1)]
        self.tasks = [
            Task("T1", "Task 1", "2024-01-01", "2024-01-05", assignee="dev1", priority="P1"),
            Task("T2", "Task 2", "2024-01-03", "2024-01-07", assignee="dev1", priority="P0"),
        ]

    def test_find_resource_conflicts(self):
        conflicts = find_resource_conflicts(self.tasks, self.pool)

        self.assertEqual(
            [c.day for c in conflicts],
            [date(2024, 1, 3), date(2024, 1, 4), date(2024, 1, 5)],
        )
        for conflict in conflicts:
            self.assertEqual(conflict.resource_id, "dev1")
            self.assertEqual(conflict.allocated, 2)
            self.assertEqual(conflict.overallocation, 1)
            self.assertEqual(conflict.task_ids, ["T1", "T2"])

    def test_smoothing_uses_slack_only(self):
        """Smoothing moves the non-critical task within its slack."""
        result = optimize_schedule(self.project, self.tasks, self.pool, "smoothing")

        self.assertEqual(result.strategy, "smoothing")
        self.assertEqual(len(result.changes), 1)
        change = result.changes[0]
        self.assertEqual(change.task_id, "T1")
        self.assertEqual(change.delay, 2)
        self.assertEqual(change.new_start, date(2024, 1, 3))
        self.assertEqual(change.reason, "Resource smoothing (used available slack)")

        metrics = result.metrics
        self.assertEqual(metrics.original_duration, 6)
        self.assertEqual(metrics.new_duration, 6)
        self.assertEqual(metrics.conflicts_resolved, 2)
        self.assertEqual(metrics.peak_overload, 1)
        self.assertEqual(metrics.remaining_conflicts, 5)

    def test_leveling_extends_project(self):
        """Leveling uses the slack first, then pushes the end date out."""
        result = optimize_schedule(self.project, self.tasks, self.pool, "leveling")

        self.assertEqual(result.strategy, "leveling")
        self.assertEqual(len(result.changes), 1)
        change = result.changes[0]
        self.assertEqual(change.task_id, "T1")
        self.assertEqual(change.delay, 7)
        self.assertEqual(change.new_start, date(2024, 1, 8))
        self.assertEqual(change.reason, "Resource leveling (resolved resource conflict)")

        # Two shifts inside the slack plus five beyond it
        self.assertEqual(result.metrics.conflicts_resolved, 7)
        self.assertEqual(result.metrics.new_duration, 11)
        self.assertEqual(result.metrics.remaining_conflicts, 0)

    def test_inputs_are_not_modified(self):
        optimize_schedule(self.project, self.tasks, self.pool, "leveling")
        self.assertEqual(self.tasks[0].start_date, date(2024, 1, 1))
        self.assertEqual(self.tasks[0].end_date, date(2024, 1, 5))

    def test_output_keeps_input_order_and_durations(self):
        result = optimize_schedule(self.project, self.tasks, self.pool, "leveling")
        self.assertEqual([t.id for t in result.tasks], ["T1", "T2"])
        for before, after in zip(result.original_tasks, result.tasks):
            self.assertEqual(before.duration, after.duration)
            self.assertIsNot(before, after)

    def test_uses_project_tasks_when_none_given(self):
        for task in self.tasks:
            self.project.add_task(task)
        result = optimize_schedule(self.project, None, self.pool)
        self.assertEqual(len(result.changes), 1)

    def test_empty_task_list(self):
        result = optimize_schedule(self.project, [], self.pool)
        self.assertEqual(result.tasks, [])
        self.assertEqual(result.changes, [])
        self.assertEqual(result.metrics.conflicts_resolved, 0)

    def test_unknown_strategy(self):
        with self.assertRaises(ValueError):
            optimize_schedule(self.project, self.tasks, self.pool, "crashing")

    def test_cancel_check(self):
        with self.assertRaises(OptimizationCancelled):
            optimize_schedule(self.project, self.tasks, self.pool, cancel_check=lambda: True)

    def test_successor_moves_with_predecessor(self):
        """A dependent task is pushed along when its predecessor moves into it."""
        tasks = [
            Task("T1", "Prep", "2024-01-01", "2024-01-03", assignee="dev", priority="P2"),
            Task("T2", "Build", "2024-01-01", "2024-01-08", assignee="dev", priority="P0"),
            Task("T3", "Check", "2024-01-03", "2024-01-04", assignee="qa", dependencies=["T1"]),
        ]
        pool = [
            ResourcePoolItem("dev", total_quantity=1),
            ResourcePoolItem("qa", total_quantity=1),
        ]

        result = optimize_schedule(self.project, tasks, pool, "smoothing")

        delays = {change.task_id: change.delay for change in result.changes}
        self.assertEqual(delays, {"T1": 4, "T3": 4})
        moved = {task.id: task for task in result.tasks}
        self.assertGreaterEqual(moved["T3"].start_date, moved["T1"].end_date)
        self.assertEqual(result.metrics.new_duration, result.metrics.original_duration)

    def test_chained_tasks_on_one_resource(self):
        """A successor sharing its predecessor's resource is moved on its own."""
        tasks = [
            Task("A", "Migrate", "2024-01-01", "2024-01-03", assignee="dev1"),
            Task("B", "Verify", "2024-01-03", "2024-01-05", assignee="dev1", dependencies=["A"]),
        ]

        result = optimize_schedule(self.project, tasks, self.pool, "leveling")

        delays = {change.task_id: change.delay for change in result.changes}
        self.assertEqual(delays, {"B": 1})
        self.assertEqual(result.metrics.conflicts_resolved, 1)
        self.assertEqual(result.metrics.remaining_conflicts, 0)
        self.assertEqual(result.metrics.new_duration, 5)
        moved = {task.id: task for task in result.tasks}
        self.assertGreater(moved["B"].start_date, moved["A"].end_date)

        # Neither task has slack, so smoothing leaves both in place
        smoothed = optimize_schedule(self.project, tasks, self.pool, "smoothing")
        self.assertEqual(smoothed.changes, [])

    def test_zero_slack_tasks_rank_as_critical(self):
        """A zero-slack task off the reported path is not moved ahead of one with slack."""
        tasks = [
            Task("B", "Runway", "2024-01-01", "2024-01-10", assignee="ops"),
            Task("A", "Core work", "2024-01-02", "2024-01-10", assignee="dev1", priority="P2"),
            Task("C", "Side work", "2024-01-02", "2024-01-04", assignee="dev1", priority="P1"),
        ]

        for strategy in ("smoothing", "leveling"):
            result = optimize_schedule(self.project, tasks, self.pool, strategy)
            moved = [change.task_id for change in result.changes]
            self.assertEqual(moved, ["C"], strategy)

    def test_lowest_priority_moves_first(self):
        tasks = [
            Task("A", "Urgent", "2024-01-01", "2024-01-01", assignee="r", priority="P0"),
            Task("B", "Minor", "2024-01-01", "2024-01-01", assignee="r", priority="P2"),
            Task("C", "Normal", "2024-01-01", "2024-01-01", assignee="r", priority="P1"),
            # Long task on an unpooled resource gives the others slack
            Task("D", "Runway", "2024-01-01", "2024-01-10", assignee="ops"),
        ]
        pool = [ResourcePoolItem("r", total_quantity=1)]

        result = optimize_schedule(self.project, tasks, pool, "smoothing")

        delays = {change.task_id: change.delay for change in result.changes}
        self.assertEqual(delays, {"B": 2, "C": 1})

    def test_rerun_is_stable(self):
        """Optimizing an already conflict-free result changes nothing."""
        tasks = [
            Task("T1", "One", "2024-01-01", "2024-01-01", assignee="dev1"),
            Task("T2", "Two", "2024-01-01", "2024-01-01", assignee="dev1"),
        ]
        first = optimize_schedule(self.project, tasks, self.pool, "leveling")
        self.assertEqual(len(first.changes), 1)
        self.assertEqual(first.metrics.remaining_conflicts, 0)

        second = optimize_schedule(self.project, first.tasks, self.pool, "leveling")
        self.assertEqual(second.changes, [])
        self.assertEqual(second.metrics.conflicts_resolved, 0)

    def test_smoothing_never_moves_end_date(self):
        """On random schedules smoothing keeps the end date and task durations."""
        rng = random.Random(7)
        origin = date(2024, 1, 1)
        pool = [
            ResourcePoolItem("dev", total_quantity=2),
            ResourcePoolItem("qa", total_quantity=1),
        ]
        for _ in range(20):
            tasks = []
            for i in range(rng.randint(1, 8)):
                start = origin + timedelta(days=rng.randint(0, 20))
                end = start + timedelta(days=rng.randint(0, 6))
                tasks.append(
                    Task(
                        f"T{i}",
                        f"Task {i}",
                        start,
                        end,
                        assignee=rng.choice(["dev", "qa", "ops"]),
                        priority=rng.choice(["P0", "P1", "P2", "P3"]),
                    )
                )

            result = optimize_schedule(self.project, tasks, pool, "smoothing")

            original_end = max(t.end_date for t in tasks)
            self.assertLessEqual(max(t.end_date for t in result.tasks), original_end)
            self.assertEqual(result.metrics.new_duration, result.metrics.original_duration)
            for before, after in zip(tasks, result.tasks):
                self.assertGreaterEqual(after.start_date, before.start_date)
                self.assertEqual(after.duration, before.duration)

    def test_leveling_resolves_at_least_as_much_as_smoothing(self):
        """On random schedules, some with dependency chains, leveling never resolves fewer conflicts."""
        rng = random.Random(1)
        origin = date(2024, 1, 1)
        pool = [
            ResourcePoolItem("dev", total_quantity=1),
            ResourcePoolItem("qa", total_quantity=1),
        ]
        for _ in range(60):
            tasks = []
            for i in range(rng.randint(2, 8)):
                start = origin + timedelta(days=rng.randint(0, 15))
                end = start + timedelta(days=rng.randint(0, 5))
                dependencies = []
                if i and rng.random() < 0.3:
                    dependencies.append(f"T{rng.randrange(i)}")
                tasks.append(
                    Task(
                        f"T{i}",
                        f"Task {i}",
                        start,
                        end,
                        assignee=rng.choice(["dev", "qa"]),
                        priority=rng.choice(["P0", "P1", "P2"]),
                        dependencies=dependencies,
                    )
                )

            smoothed = optimize_schedule(self.project, tasks, pool, "smoothing")
            leveled = optimize_schedule(self.project, tasks, pool, "leveling")

            self.assertGreaterEqual(
                leveled.metrics.conflicts_resolved, smoothed.metrics.conflicts_resolved
            )


class SchedulingStrategyTestCase(unittest.TestCase):
    def test_get_strategy(self):
        self.assertIsInstance(get_strategy("smoothing"), SmoothingStrategy)
        self.assertIsInstance(get_strategy("leveling"), LevelingStrategy)
        strategy = LevelingStrategy()
        self.assertIs(get_strategy(strategy), strategy)
        with self.assertRaises(ValueError):
            get_strategy("fast-track")
        with self.assertRaises(ValueError):
            get_strategy(None)

    def test_names(self):
        self.assertEqual(SmoothingStrategy().get_name(), "smoothing")
        self.assertEqual(LevelingStrategy().get_name(), "leveling")

    def test_leveling_smooths_first(self):
        self.assertIsInstance(LevelingStrategy().get_prepass(), SmoothingStrategy)
        self.assertIsNone(SmoothingStrategy().get_prepass())


if __name__ == "__main__":
    unittest.main()
