"""
Service layer for computing, storing and reading course match plans.
"""

import logging

from config import ALLOW_NON_HOSTING_TEAMS, HOST_REMAINDER_POLICY
from domain.exceptions import ConfigError, SchedulingError
from domain.models.course import Course
from domain.models.dinner import Dinner, DinnerConfig, HostRemainderPolicy
from domain.models.schedule import CourseMatch, Plan, ScheduleBudget
from domain.models.team import Team
from repositories.interfaces import ICourseMatchRepository, IDinnerRepository, ITeamRepository
from scheduler import MatchScheduler, default_budget
from services import error_codes
from services.result import Result

logger = logging.getLogger("dinner.services.scheduling")


class SchedulingService:
    """
    Runs the match scheduler for stored dinners.

    Wraps the repositories and MatchScheduler to maintain clean layered
    architecture. Domain errors come back as failed Results carrying the
    domain error code.
    """

    def __init__(
        self,
        dinner_repo: IDinnerRepository,
        team_repo: ITeamRepository,
        match_repo: ICourseMatchRepository,
        scheduler: MatchScheduler | None = None,
        budget: ScheduleBudget | None = None,
        allow_non_hosting_teams: bool | None = None,
        host_remainder_policy: str | HostRemainderPolicy | None = None,
    ):
        self.dinner_repo = dinner_repo
        self.team_repo = team_repo
        self.match_repo = match_repo
        self.scheduler = scheduler or MatchScheduler()
        self.budget = budget or default_budget()
        self.allow_non_hosting_teams = (
            allow_non_hosting_teams
            if allow_non_hosting_teams is not None
            else ALLOW_NON_HOSTING_TEAMS
        )
        self.host_remainder_policy = HostRemainderPolicy.parse(
            host_remainder_policy if host_remainder_policy is not None else HOST_REMAINDER_POLICY
        )

    def build_config(
        self,
        dinner: Dinner,
        courses: list[Course],
        budget: ScheduleBudget | None = None,
        allow_non_hosting_teams: bool | None = None,
    ) -> DinnerConfig:
        return DinnerConfig(
            group_size=dinner.teams_per_course,
            courses=tuple(courses),
            budget=budget or self.budget,
            allow_non_hosting_teams=(
                allow_non_hosting_teams
                if allow_non_hosting_teams is not None
                else self.allow_non_hosting_teams
            ),
            host_remainder_policy=self.host_remainder_policy,
            dinner_id=dinner.dinner_id,
        )

    def schedule_roster(
        self,
        config: DinnerConfig,
        teams: list[Team],
        seeds: list[int] | None = None,
    ) -> Result[Plan]:
        """
        Compute a plan for an in-memory roster without storing anything.

        A non-perfect plan is still a success; check plan.score and plan.state.
        """
        try:
            plan = self.scheduler.schedule(config, teams, seeds=seeds)
        except (ConfigError, SchedulingError) as exc:
            logger.warning(f"Scheduling rejected ({exc.code}): {exc}")
            return Result.from_error(exc)
        except ValueError as exc:
            return Result.from_error(exc, default_code=error_codes.VALIDATION_ERROR)
        return Result.ok(plan)

    def plan_dinner(
        self,
        dinner_id: str,
        budget: ScheduleBudget | None = None,
        seeds: list[int] | None = None,
        allow_non_hosting_teams: bool | None = None,
    ) -> Result[Plan]:
        """
        Load a dinner's roster, schedule it and store the resulting matches.

        Any previously stored plan for the dinner is replaced.
        """
        dinner = self.dinner_repo.get_by_id(dinner_id)
        if dinner is None:
            return Result.fail(f"Dinner {dinner_id} not found", code=error_codes.DINNER_NOT_FOUND)

        courses = self.dinner_repo.get_courses(dinner_id)
        teams = self.team_repo.get_for_dinner(dinner_id)
        config = self.build_config(dinner, courses, budget, allow_non_hosting_teams)

        result = self.schedule_roster(config, teams, seeds=seeds)
        if not result:
            return result

        plan = result.value
        self.match_repo.replace_for_dinner(dinner_id, plan)
        logger.info(
            f"Stored {len(plan.course_matches)} course matches for dinner {dinner_id} "
            f"(state={plan.state.value}, score={plan.score})"
        )
        return result

    def get_course_matches(self, dinner_id: str) -> Result[list[CourseMatch]]:
        if self.dinner_repo.get_by_id(dinner_id) is None:
            return Result.fail(f"Dinner {dinner_id} not found", code=error_codes.DINNER_NOT_FOUND)
        matches = self.match_repo.get_for_dinner(dinner_id)
        if not matches:
            return Result.fail(f"Dinner {dinner_id} has no plan yet", code=error_codes.NO_PLAN)
        return Result.ok(matches)

    def get_itinerary(self, dinner_id: str, team_id: str) -> Result[list[dict]]:
        """
        Get where a team eats each course.

        Returns:
            Result with one dict per course: course_id, course_name, position,
            role ("host" or "guest"), host_team_id, address, guest_team_ids
        """
        team = self.team_repo.get_by_id(team_id)
        if team is None or team.dinner_id != dinner_id:
            return Result.fail(
                f"Team {team_id} is not registered for dinner {dinner_id}",
                code=error_codes.TEAM_NOT_FOUND,
            )

        matches = self.match_repo.get_for_team(dinner_id, team_id)
        if not matches:
            if self.match_repo.get_run_summary(dinner_id) is not None:
                # registered after the stored plan was computed
                return Result.fail(
                    f"Team {team_id} is not part of the current plan for dinner {dinner_id}; "
                    "plan the dinner again to include it",
                    code=error_codes.TEAM_NOT_IN_PLAN,
                )
            return Result.fail(f"Dinner {dinner_id} has no plan yet", code=error_codes.NO_PLAN)

        courses = {c.course_id: c for c in self.dinner_repo.get_courses(dinner_id)}
        addresses = {t.team_id: t.address for t in self.team_repo.get_for_dinner(dinner_id)}

        itinerary = []
        for match in matches:
            course = courses.get(match.course_id)
            itinerary.append(
                {
                    "course_id": match.course_id,
                    "course_name": course.name if course else "",
                    "position": course.position if course else None,
                    "role": "host" if match.host_team_id == team_id else "guest",
                    "host_team_id": match.host_team_id,
                    "address": addresses.get(match.host_team_id),
                    "guest_team_ids": list(match.guest_team_ids),
                }
            )
        itinerary.sort(key=lambda stop: (stop["position"] is None, stop["position"]))
        return Result.ok(itinerary)
