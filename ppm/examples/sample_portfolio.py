from ppm.domain.task import Task
from ppm.domain.project import Project
from ppm.domain.resource import ResourcePoolItem
from ppm.services.portfolio import PortfolioScheduler


def create_sample_portfolio(strategy="smoothing"):
    # Define the shared resource pool
    resource_pool = [
        ResourcePoolItem("dev", "Software Department", total_quantity=2),
        ResourcePoolItem("qa", "Test Lab", total_quantity=1),
        ResourcePoolItem("ops", "Operations", total_quantity=1),
    ]

    # Create projects
    platform = Project(
        "P1",
        "Platform Upgrade",
        "2025-04-01",
        "2025-04-30",
        status="active",
        resource_requirements=[{"resource_id": "dev", "count": 2}, "qa"],
        budget=120000,
    )
    billing = Project(
        "P2",
        "Billing Migration",
        "2025-05-03",
        "2025-06-15",
        status="planning",
        resource_requirements=["dev"],
        budget=80000,
    )
    reporting = Project(
        "P3",
        "Reporting Portal",
        "2025-06-20",
        "2025-07-31",
        status="planning",
        resource_requirements=["ops"],
        budget=45000,
    )
    archive = Project(
        "P4",
        "Archive Cleanup",
        "2025-01-10",
        "2025-02-28",
        status="completed",
        resource_requirements=["ops"],
    )

    # Tasks for the platform upgrade
    platform.add_task(
        Task("T1", "Schema redesign", "2025-04-01", "2025-04-08", assignee="dev", priority="P0")
    )
    platform.add_task(
        Task("T2", "API refactor", "2025-04-03", "2025-04-12", assignee="dev", priority="P1")
    )
    platform.add_task(
        Task("T3", "Admin screens", "2025-04-05", "2025-04-10", assignee="dev", priority="P2")
    )
    platform.add_task(
        Task(
            "T4",
            "Regression suite",
            "2025-04-13",
            "2025-04-20",
            assignee="qa",
            priority="P1",
            dependencies=["T1", "T2"],
        )
    )
    platform.add_task(
        Task(
            "T5",
            "Release rollout",
            "2025-04-21",
            "2025-04-30",
            assignee="ops",
            priority="P0",
            dependencies=["T4"],
        )
    )

    # Create the scheduler
    scheduler = PortfolioScheduler(default_strategy=strategy)
    scheduler.set_resource_pool(resource_pool)
    for project in (platform, billing, reporting, archive):
        scheduler.add_project(project)

    scheduler.build_dependencies()
    return scheduler


def print_report(scheduler, project_id="P1", delay_project=None, delay_days=0):
    """Print a plain-text summary of the sample portfolio."""
    print("Portfolio Schedule Report")
    print("=========================")

    print("\nDependencies:")
    for edge in scheduler.dependencies:
        marker = " [critical]" if edge.critical else ""
        print(f"  {edge.source_id} -> {edge.target_id} ({edge.type.value}){marker}")
        print(f"    {edge.description}")

    portfolio_path = scheduler.critical_path()
    print(f"\nPortfolio critical path: {' -> '.join(portfolio_path.path)}")
    print(f"  Length: {portfolio_path.length} days")

    task_path = scheduler.critical_path(project_id)
    print(f"\nCritical tasks in {project_id}: {', '.join(task_path.path)}")
    for task_id, slack in task_path.slack.items():
        print(f"  {task_id}: slack {slack} days")

    result = scheduler.optimize(project_id)
    print(f"\nOptimization ({result.strategy}):")
    for change in result.changes:
        print(
            f"  {change.task_id} {change.task_name}: "
            f"{change.original_start} -> {change.new_start} (+{change.delay}d) {change.reason}"
        )
    metrics = result.metrics
    print(f"  Duration: {metrics.original_duration} -> {metrics.new_duration} days")
    print(f"  Conflicts resolved: {metrics.conflicts_resolved}")
    print(f"  Peak overload: {metrics.peak_overload}")
    print(f"  Conflict-days remaining: {metrics.remaining_conflicts}")

    if delay_project:
        print(f"\nDelay impact of {delay_days} days on {delay_project}:")
        for entry in scheduler.simulate_delay(delay_project, delay_days):
            print(
                f"  {entry.project_id} {entry.project_name}: "
                f"{entry.original_end_date} -> {entry.new_end_date}"
            )

    stats = scheduler.dependency_stats()
    print("\nDependency statistics:")
    print(f"  Total: {stats.total_dependencies}, critical: {stats.critical_dependencies}")
    if stats.most_dependent:
        print(f"  Most dependent: {stats.most_dependent.name} ({stats.most_dependent.count})")
    if stats.most_blocking:
        print(f"  Most blocking: {stats.most_blocking.name} ({stats.most_blocking.count})")


if __name__ == "__main__":
    print_report(create_sample_portfolio(), delay_project="P1", delay_days=5)
