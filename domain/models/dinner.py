"""
Dinner and scheduling configuration models.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from domain.models.course import Course
from domain.models.schedule import ScheduleBudget


class HostRemainderPolicy(str, Enum):
    """
    Which teams are left without a hosting slot when courses < group size.

    SEEDED: the tail of each trial's seeded permutation (varies per trial).
    ROSTER: the last teams in roster order, i.e. the latest sign-ups.
    """

    SEEDED = "seeded"
    ROSTER = "roster"

    @classmethod
    def parse(cls, value: "str | HostRemainderPolicy") -> "HostRemainderPolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown host remainder policy {value!r}; "
                f"expected one of {[p.value for p in cls]}"
            ) from None


@dataclass(frozen=True)
class Dinner:
    """
    A progressive dinner event as stored by the persistence layer.

    team_size is the number of members per team; teams_per_course is the
    number of teams eating together in one group (the group size).
    """

    dinner_id: str
    name: str
    team_size: int
    teams_per_course: int
    date: datetime | None = None


@dataclass(frozen=True)
class DinnerConfig:
    """Everything the scheduler needs besides the team roster."""

    group_size: int
    courses: tuple[Course, ...]
    budget: ScheduleBudget = field(default_factory=ScheduleBudget)
    allow_non_hosting_teams: bool = False
    host_remainder_policy: HostRemainderPolicy = HostRemainderPolicy.SEEDED
    dinner_id: str | None = None

    def __post_init__(self):
        if not isinstance(self.courses, tuple):
            object.__setattr__(self, "courses", tuple(self.courses))
        object.__setattr__(
            self, "host_remainder_policy", HostRemainderPolicy.parse(self.host_remainder_policy)
        )

    @property
    def course_count(self) -> int:
        return len(self.courses)
