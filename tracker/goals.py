from dataclasses import replace
from typing import Iterator, Optional, Tuple

from tracker.domain import SavingsGoal
from tracker.events import GOALS_CHANGED, EventBus
from tracker.functional import Maybe, Nothing, Some, is_finite_number, validate_goal
from tracker.logger import get_logger

logger = get_logger(__name__)


def add_goal(goals: Tuple[SavingsGoal, ...], goal: SavingsGoal) -> Tuple[SavingsGoal, ...]:
    return goals + (goal,)


def add_funds(goals: Tuple[SavingsGoal, ...], goal_id: str, delta: float) -> Tuple[SavingsGoal, ...]:
    # no clamping: a goal may be overfunded
    return tuple(
        replace(g, current_amount=g.current_amount + delta) if g.id == goal_id else g
        for g in goals
    )


def delete_goal(goals: Tuple[SavingsGoal, ...], goal_id: str) -> Tuple[SavingsGoal, ...]:
    return tuple(g for g in goals if g.id != goal_id)


def find_goal(goals: Tuple[SavingsGoal, ...], goal_id: str) -> Maybe[SavingsGoal]:
    for g in goals:
        if g.id == goal_id:
            return Some(g)
    return Nothing()


def goal_progress(goal: SavingsGoal) -> float:
    """Percentage saved, clamped to 0..100 for display."""
    if goal.target <= 0:
        return 0.0
    return max(0.0, min(goal.current_amount / goal.target * 100, 100.0))


class SavingsGoalLedger:

    def __init__(self, goals: Tuple[SavingsGoal, ...] = (), bus: Optional[EventBus] = None):
        self._goals: Tuple[SavingsGoal, ...] = tuple(goals)
        self._bus = bus

    @property
    def goals(self) -> Tuple[SavingsGoal, ...]:
        return self._goals

    def __len__(self) -> int:
        return len(self._goals)

    def __iter__(self) -> Iterator[SavingsGoal]:
        return iter(self._goals)

    def find(self, goal_id: str) -> Maybe[SavingsGoal]:
        return find_goal(self._goals, goal_id)

    def add(self, goal: SavingsGoal) -> None:
        checked = validate_goal(goal)
        if checked.is_left():
            raise ValueError(checked.get_error()["message"])
        self._set(add_goal(self._goals, goal))
        logger.info(f"Added savings goal {goal.id} ({goal.name}, target {goal.target})")

    def add_funds(self, goal_id: str, delta: float) -> None:
        if not is_finite_number(delta):
            raise ValueError(f"Amount must be a number, got {delta!r}")
        if find_goal(self._goals, goal_id).is_none():
            return
        self._set(add_funds(self._goals, goal_id, delta))
        logger.info(f"Added {delta} to savings goal {goal_id}")

    def delete(self, goal_id: str) -> None:
        remaining = delete_goal(self._goals, goal_id)
        if len(remaining) == len(self._goals):
            return
        self._set(remaining)
        logger.info(f"Deleted savings goal {goal_id}")

    def _set(self, goals: Tuple[SavingsGoal, ...]) -> None:
        self._goals = goals
        if self._bus is not None:
            self._bus.publish(GOALS_CHANGED, {"goals": goals})
