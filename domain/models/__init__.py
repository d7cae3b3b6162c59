"""
Domain models - pure data structures representing business entities.
"""

from domain.models.course import Course
from domain.models.dinner import Dinner, DinnerConfig, HostRemainderPolicy
from domain.models.meeting_graph import MeetingGraph
from domain.models.schedule import (
    CourseMatch,
    Plan,
    ScheduleBudget,
    ScheduleScore,
    SchedulingState,
    TrialCourse,
    TrialGroup,
    TrialPlan,
)
from domain.models.team import Team
from domain.models.team_set import TeamSet

__all__ = [
    "Course",
    "CourseMatch",
    "Dinner",
    "DinnerConfig",
    "HostRemainderPolicy",
    "MeetingGraph",
    "Plan",
    "ScheduleBudget",
    "ScheduleScore",
    "SchedulingState",
    "Team",
    "TeamSet",
    "TrialCourse",
    "TrialGroup",
    "TrialPlan",
]
