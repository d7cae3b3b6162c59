"""
Pytest fixtures for tests.

Rosters and courses are built in memory for scheduler tests; repository and
service tests get a fresh SQLite file per test under tmp_path.
"""

import pytest

from domain.models.course import Course
from domain.models.dinner import DinnerConfig
from domain.models.schedule import ScheduleBudget
from domain.models.team import Team
from repositories.course_match_repository import CourseMatchRepository
from repositories.dinner_repository import DinnerRepository
from repositories.team_repository import TeamRepository
from scheduler import MatchScheduler
from services.dinner_service import DinnerService
from services.scheduling_service import SchedulingService


# =============================================================================
# CENTRALIZED CONSTANTS
# =============================================================================

DETERMINISTIC_BUDGET = ScheduleBudget(max_attempts=40, time_limit_seconds=None)
"""Attempt-only budget: no wall clock, so repeated runs pick the same plan."""


def make_teams(count: int, prefix: str = "t") -> list[Team]:
    """Teams with zero-padded ids so roster order equals sorted order."""
    return [
        Team(team_id=f"{prefix}{i:02d}", members=(f"Cook {i}A", f"Cook {i}B"), address=f"{i} Main St")
        for i in range(count)
    ]


def make_courses(count: int) -> tuple[Course, ...]:
    names = ["Starter", "Main", "Dessert", "Cheese", "Coffee"]
    return tuple(
        Course(course_id=f"c{i}", position=i, name=names[i] if i < len(names) else f"Course {i}")
        for i in range(count)
    )


def make_config(group_size: int, course_count: int, **kwargs) -> DinnerConfig:
    kwargs.setdefault("budget", DETERMINISTIC_BUDGET)
    return DinnerConfig(group_size=group_size, courses=make_courses(course_count), **kwargs)


@pytest.fixture
def teams_six():
    return make_teams(6)


@pytest.fixture
def teams_nine():
    return make_teams(9)


@pytest.fixture
def three_courses():
    return make_courses(3)


@pytest.fixture
def scheduler():
    """Scheduler with a fixed worker count and seed base."""
    return MatchScheduler(max_workers=2, base_seed=0, improvement_passes=4)


@pytest.fixture
def temp_db_path(tmp_path):
    """Create a temporary database path (schema is created on first repository use)."""
    path = str(tmp_path / "dinner.db")
    yield path


@pytest.fixture
def dinner_repository(temp_db_path):
    return DinnerRepository(temp_db_path)


@pytest.fixture
def team_repository(temp_db_path):
    return TeamRepository(temp_db_path)


@pytest.fixture
def course_match_repository(temp_db_path):
    return CourseMatchRepository(temp_db_path)


@pytest.fixture
def dinner_service(dinner_repository, team_repository):
    return DinnerService(dinner_repository, team_repository)


@pytest.fixture
def scheduling_service(dinner_repository, team_repository, course_match_repository, scheduler):
    return SchedulingService(
        dinner_repo=dinner_repository,
        team_repo=team_repository,
        match_repo=course_match_repository,
        scheduler=scheduler,
        budget=DETERMINISTIC_BUDGET,
        allow_non_hosting_teams=False,
        host_remainder_policy="seeded",
    )


@pytest.fixture
def nine_team_dinner(dinner_service):
    """A stored dinner with three courses, groups of three and nine teams."""
    dinner = dinner_service.create_dinner(
        name="Autumn Hop",
        team_size=2,
        teams_per_course=3,
        course_names=["Starter", "Main", "Dessert"],
    ).unwrap()
    teams = [
        dinner_service.register_team(
            dinner.dinner_id, [f"Cook {i}A", f"Cook {i}B"], address=f"{i} Elm Rd"
        ).unwrap()
        for i in range(9)
    ]
    return dinner, teams
