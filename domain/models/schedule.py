"""
Schedule domain models: trial plans, scores and the final plan.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum


class SchedulingState(str, Enum):
    """Lifecycle of a single scheduling request."""

    VALIDATING = "validating"
    SEARCHING = "searching"
    FOUND = "found"  # perfect plan, search stopped early
    BUDGET_EXHAUSTED = "budget_exhausted"  # best plan seen within the budget
    INFEASIBLE = "infeasible"

    @property
    def is_terminal(self) -> bool:
        return self in (
            SchedulingState.FOUND,
            SchedulingState.BUDGET_EXHAUSTED,
            SchedulingState.INFEASIBLE,
        )


@dataclass(frozen=True)
class ScheduleBudget:
    """
    Search limits. The search stops at whichever ceiling is reached first.

    Reproducible runs must set time_limit_seconds to None so that only the
    attempt count decides when the search ends.
    """

    max_attempts: int = 500
    time_limit_seconds: float | None = 10.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.time_limit_seconds is not None and self.time_limit_seconds <= 0:
            raise ValueError(
                f"time_limit_seconds must be positive, got {self.time_limit_seconds}"
            )


@dataclass(frozen=True, order=True)
class ScheduleScore:
    """
    Quality of a plan. Lower is better; compared lexicographically.

    repeat_meetings: sum over team pairs of (times grouped together - 1)
    max_pair_repeats: the worst single pair's repeat count
    """

    repeat_meetings: int = 0
    max_pair_repeats: int = 0

    @property
    def is_perfect(self) -> bool:
        return self.repeat_meetings == 0 and self.max_pair_repeats == 0

    def as_tuple(self) -> tuple[int, int]:
        return (self.repeat_meetings, self.max_pair_repeats)

    def __str__(self) -> str:
        return f"({self.repeat_meetings}, {self.max_pair_repeats})"


@dataclass(frozen=True)
class TrialGroup:
    host_team_id: str
    guest_team_ids: tuple[str, ...]

    @property
    def members(self) -> tuple[str, ...]:
        return (self.host_team_id, *self.guest_team_ids)


@dataclass(frozen=True)
class TrialCourse:
    course_id: str
    position: int
    groups: tuple[TrialGroup, ...]

    @property
    def host_team_ids(self) -> tuple[str, ...]:
        return tuple(g.host_team_id for g in self.groups)


@dataclass(frozen=True)
class TrialPlan:
    """One complete candidate assignment produced from a single seed."""

    seed: int
    courses: tuple[TrialCourse, ...]
    non_hosting_team_ids: tuple[str, ...] = ()

    def iter_groups(self):
        for course in self.courses:
            for group in course.groups:
                yield course, group

    def host_counts(self) -> Counter:
        return Counter(group.host_team_id for _, group in self.iter_groups())


@dataclass(frozen=True)
class CourseMatch:
    """
    One group sharing one course at the host's address.

    Holds team identifiers only; the Plan owns its matches, never the teams.
    """

    match_id: str
    course_id: str
    host_team_id: str
    guest_team_ids: tuple[str, ...]

    @property
    def team_ids(self) -> tuple[str, ...]:
        return (self.host_team_id, *self.guest_team_ids)

    def includes(self, team_id: str) -> bool:
        return team_id == self.host_team_id or team_id in self.guest_team_ids


@dataclass(frozen=True)
class Plan:
    """The scheduler's result: ordered course matches plus how good they are."""

    course_matches: tuple[CourseMatch, ...]
    score: ScheduleScore
    state: SchedulingState
    seed: int
    attempts: int = field(compare=False)
    course_ids: tuple[str, ...] = ()
    non_hosting_team_ids: tuple[str, ...] = ()
    lower_bound: int = 0
    elapsed_seconds: float = field(default=0.0, compare=False)
    dinner_id: str | None = None

    @property
    def is_perfect(self) -> bool:
        return self.score.is_perfect

    def matches_for_course(self, course_id: str) -> list[CourseMatch]:
        return [m for m in self.course_matches if m.course_id == course_id]

    def hosted_match(self, team_id: str) -> CourseMatch | None:
        for match in self.course_matches:
            if match.host_team_id == team_id:
                return match
        return None

    def itinerary(self, team_id: str) -> list[CourseMatch]:
        """Matches the team takes part in, in course order."""
        return [m for m in self.course_matches if m.includes(team_id)]

    def host_counts(self) -> Counter:
        return Counter(m.host_team_id for m in self.course_matches)
