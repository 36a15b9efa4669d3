from ppm.utils.dates import date_range, parse_date


class ResourceError(Exception):
    """Exception raised for an invalid resource pool entry."""

    pass


class ResourcePoolItem:
    """
    A pooled resource shared by every task assigned to it.

    ``total_quantity`` is the number of tasks the resource can carry on a
    single day, across all projects.
    """

    def __init__(self, id, name=None, total_quantity=1):
        """
        Initialize a resource pool item.

        Args:
            id: Unique identifier for the resource
            name: Human-readable name (defaults to the ID)
            total_quantity: Positive integer daily capacity (default: 1)
        """
        if id is None or str(id).strip() == "":
            raise ResourceError("Resource ID cannot be None or empty")
        self.id = id
        self.name = name or str(id)

        if (
            isinstance(total_quantity, bool)
            or not isinstance(total_quantity, int)
            or total_quantity <= 0
        ):
            raise ResourceError(
                f"Resource {id} capacity must be a positive integer, got {total_quantity!r}"
            )
        self.total_quantity = total_quantity

    @property
    def capacity(self):
        return self.total_quantity

    def active_tasks(self, tasks, day):
        """Tasks assigned to this resource that are being worked on ``day``."""
        day = parse_date(day)
        return [t for t in tasks if t.assignee == self.id and t.overlaps(day)]

    def usage_on(self, tasks, day):
        """
        Units of this resource in use on a day (one per active task).

        Args:
            tasks: Iterable of Task objects
            day: Calendar date

        Returns:
            int: Number of active tasks assigned to this resource
        """
        return len(self.active_tasks(tasks, day))

    def overload_on(self, tasks, day):
        """Units above capacity on a day, zero when within capacity."""
        return max(0, self.usage_on(tasks, day) - self.total_quantity)

    def get_utilization_for_period(self, tasks, start_date, end_date):
        """
        Calculate resource utilization for a period.

        Args:
            tasks: Iterable of Task objects
            start_date: Start date of the period
            end_date: End date of the period (inclusive)

        Returns:
            dict: Daily utilization {date_str: percentage}
        """
        tasks = list(tasks)
        utilization = {}
        for day in date_range(start_date, end_date):
            date_str = day.strftime("%Y-%m-%d")
            utilization[date_str] = (self.usage_on(tasks, day) / self.total_quantity) * 100
        return utilization

    def to_dict(self):
        return {"id": self.id, "name": self.name, "total_quantity": self.total_quantity}

    @classmethod
    def from_dict(cls, data):
        return cls(data["id"], data.get("name"), data.get("total_quantity", 1))

    def __repr__(self):
        return f"ResourcePoolItem(id={self.id}, name={self.name}, total_quantity={self.total_quantity})"
