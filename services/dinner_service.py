"""
Dinner setup: creating dinners with their courses and registering teams.
"""

import logging
from datetime import datetime

from config import DEFAULT_COURSE_NAMES, DEFAULT_TEAM_SIZE
from domain.models.course import Course
from domain.models.dinner import Dinner
from domain.models.team import Team
from repositories.interfaces import IDinnerRepository, ITeamRepository
from services import error_codes
from services.result import Result

logger = logging.getLogger("dinner.services.dinner")


class DinnerService:
    """Encapsulates dinner creation, course setup and team sign-up."""

    def __init__(self, dinner_repo: IDinnerRepository, team_repo: ITeamRepository):
        self.dinner_repo = dinner_repo
        self.team_repo = team_repo

    def create_dinner(
        self,
        name: str,
        teams_per_course: int,
        team_size: int = DEFAULT_TEAM_SIZE,
        course_names: list[str] | None = None,
        date: datetime | None = None,
    ) -> Result[Dinner]:
        """
        Create a dinner and its courses.

        Args:
            name: Display name
            teams_per_course: Teams sharing one course (group size)
            team_size: Members per team (defaults from config)
            course_names: Course names in serving order (defaults from config)
            date: Event date

        Returns:
            Result with the stored Dinner
        """
        name = (name or "").strip()
        if not name:
            return Result.fail("Dinner name is required", code=error_codes.VALIDATION_ERROR)
        if team_size < 1:
            return Result.fail("Team size must be at least 1", code=error_codes.INVALID_TEAM_SIZE)
        if teams_per_course < 1:
            return Result.fail(
                "Teams per course must be at least 1", code=error_codes.INVALID_GROUP_SIZE
            )

        names = [n.strip() for n in (course_names or DEFAULT_COURSE_NAMES) if n and n.strip()]
        if not names:
            return Result.fail("A dinner needs at least one course", code=error_codes.INVALID_COURSES)

        dinner, _ = self.dinner_repo.add_with_courses(
            name=name,
            team_size=team_size,
            teams_per_course=teams_per_course,
            course_names=names,
            date=date,
        )

        logger.info(
            f"Created dinner {dinner.dinner_id} ({name}) with {len(names)} course(s), "
            f"{teams_per_course} teams per course"
        )
        return Result.ok(dinner)

    def get_dinner(self, dinner_id: str) -> Result[Dinner]:
        dinner = self.dinner_repo.get_by_id(dinner_id)
        if dinner is None:
            return Result.fail(f"Dinner {dinner_id} not found", code=error_codes.DINNER_NOT_FOUND)
        return Result.ok(dinner)

    def list_courses(self, dinner_id: str) -> Result[list[Course]]:
        return self.get_dinner(dinner_id).map(
            lambda dinner: Result.ok(self.dinner_repo.get_courses(dinner.dinner_id))
        )

    def register_team(
        self, dinner_id: str, member_names: list[str], address: str | None = None
    ) -> Result[Team]:
        """
        Sign a team up for a dinner.

        A team has between 1 and the dinner's team_size members.
        """
        dinner_result = self.get_dinner(dinner_id)
        if not dinner_result:
            return dinner_result

        dinner = dinner_result.value
        members = [m.strip() for m in member_names if m and m.strip()]
        if not members:
            return Result.fail("A team needs at least one member", code=error_codes.INVALID_TEAM_SIZE)
        if len(members) > dinner.team_size:
            return Result.fail(
                f"Teams for {dinner.name} have at most {dinner.team_size} member(s), got {len(members)}",
                code=error_codes.INVALID_TEAM_SIZE,
            )

        team = self.team_repo.add(dinner_id, members, address=address)
        logger.info(f"Registered team {team.team_id} for dinner {dinner_id}")
        return Result.ok(team)

    def list_teams(self, dinner_id: str) -> Result[list[Team]]:
        return self.get_dinner(dinner_id).map(
            lambda dinner: Result.ok(self.team_repo.get_for_dinner(dinner.dinner_id))
        )
