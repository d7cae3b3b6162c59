"""
Abstract repository interfaces for data access.

These interfaces define the contracts implemented by concrete repositories.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from domain.models.course import Course
from domain.models.dinner import Dinner
from domain.models.schedule import CourseMatch, Plan
from domain.models.team import Team


class IDinnerRepository(ABC):
    @abstractmethod
    def add(
        self,
        name: str,
        team_size: int,
        teams_per_course: int,
        date: datetime | None = None,
        dinner_id: str | None = None,
    ) -> Dinner: ...

    @abstractmethod
    def add_with_courses(
        self,
        name: str,
        team_size: int,
        teams_per_course: int,
        course_names: list[str],
        date: datetime | None = None,
    ) -> tuple[Dinner, list[Course]]: ...

    @abstractmethod
    def get_by_id(self, dinner_id: str) -> Dinner | None: ...

    @abstractmethod
    def get_all(self) -> list[Dinner]: ...

    @abstractmethod
    def add_course(self, dinner_id: str, name: str, position: int) -> Course: ...

    @abstractmethod
    def get_courses(self, dinner_id: str) -> list[Course]: ...


class ITeamRepository(ABC):
    @abstractmethod
    def add(self, dinner_id: str, members: list[str], address: str | None = None) -> Team: ...

    @abstractmethod
    def get_by_id(self, team_id: str) -> Team | None: ...

    @abstractmethod
    def get_for_dinner(self, dinner_id: str) -> list[Team]: ...

    @abstractmethod
    def count_for_dinner(self, dinner_id: str) -> int: ...


class ICourseMatchRepository(ABC):
    @abstractmethod
    def replace_for_dinner(self, dinner_id: str, plan: Plan) -> None: ...

    @abstractmethod
    def get_for_dinner(self, dinner_id: str) -> list[CourseMatch]: ...

    @abstractmethod
    def get_for_team(self, dinner_id: str, team_id: str) -> list[CourseMatch]: ...

    @abstractmethod
    def get_run_summary(self, dinner_id: str) -> dict | None: ...
