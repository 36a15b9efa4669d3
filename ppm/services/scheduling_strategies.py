from abc import ABC, abstractmethod


class SchedulingStrategy(ABC):
    @abstractmethod
    def can_shift(self, shifts, state):
        """Decide whether a proposed set of task shifts {task_id: days} may be applied"""
        pass

    @abstractmethod
    def should_stop(self, day, state):
        """Whether the day-by-day simulation is finished before ``day``"""
        pass

    def get_reason(self):
        """Explanation recorded against every task this strategy moved"""
        return "Rescheduled to resolve a resource conflict"

    def get_prepass(self):
        """Strategy whose full simulation runs before this one, or None"""
        return None

    def get_name(self):
        """Get the name of this strategy"""
        return self.__class__.__name__


# Resource smoothing: consume slack only, never move the project end
class SmoothingStrategy(SchedulingStrategy):
    def can_shift(self, shifts, state):
        """
        Every moved task must still have the slack to absorb its shift, and
        no moved task may end after the project end date.
        """
        for task_id, days in shifts.items():
            if state.slack_left.get(task_id, 0) < days:
                return False
            if state.new_end(task_id, days) > state.project_end:
                return False
        return True

    def should_stop(self, day, state):
        return day > state.project_end

    def get_reason(self):
        return "Resource smoothing (used available slack)"

    def get_name(self):
        return "smoothing"


# Resource leveling: always move, extending the project end if needed
class LevelingStrategy(SchedulingStrategy):
    def can_shift(self, shifts, state):
        return True

    def should_stop(self, day, state):
        return state.all_visited() and day > state.project_end

    def get_prepass(self):
        """
        Slack is used up first; leveling then only handles what smoothing
        could not resolve, so it never resolves fewer conflicts than smoothing.
        """
        return SmoothingStrategy()

    def get_reason(self):
        return "Resource leveling (resolved resource conflict)"

    def get_name(self):
        return "leveling"


STRATEGIES = {
    "smoothing": SmoothingStrategy,
    "leveling": LevelingStrategy,
}


def get_strategy(strategy):
    """
    Resolve a strategy name or instance.

    Raises:
        ValueError: For an unknown strategy name
    """
    if isinstance(strategy, SchedulingStrategy):
        return strategy
    try:
        return STRATEGIES[strategy]()
    except (KeyError, TypeError):
        raise ValueError(
            f"Unknown scheduling strategy: {strategy!r}. Must be one of {sorted(STRATEGIES)}"
        )
