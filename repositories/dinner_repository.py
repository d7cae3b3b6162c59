"""
Repository for dinners and their courses.
"""

from datetime import datetime

from domain.models.course import Course
from domain.models.dinner import Dinner
from repositories.base_repository import BaseRepository
from repositories.interfaces import IDinnerRepository


class DinnerRepository(BaseRepository, IDinnerRepository):
    """
    Handles CRUD operations for dinner and course records.
    """

    def add(
        self,
        name: str,
        team_size: int,
        teams_per_course: int,
        date: datetime | None = None,
        dinner_id: str | None = None,
    ) -> Dinner:
        """
        Store a new dinner.

        Args:
            name: Display name
            team_size: Members per team
            teams_per_course: Teams eating together in one group
            date: Event date (defaults to now)
            dinner_id: Explicit id (a new UUID if omitted)

        Returns:
            The stored Dinner
        """
        dinner = self._new_dinner(name, team_size, teams_per_course, date, dinner_id)
        with self.connection() as conn:
            self._insert_dinner(conn.cursor(), dinner)
        return dinner

    def add_with_courses(
        self,
        name: str,
        team_size: int,
        teams_per_course: int,
        course_names: list[str],
        date: datetime | None = None,
    ) -> tuple[Dinner, list[Course]]:
        """
        Store a dinner together with its courses in one transaction.

        Either the dinner and every course are stored, or nothing is.
        Course positions follow the order of course_names.
        """
        dinner = self._new_dinner(name, team_size, teams_per_course, date, None)
        courses = [
            Course(course_id=self.new_id(), position=position, name=course_name)
            for position, course_name in enumerate(course_names)
        ]
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            self._insert_dinner(cursor, dinner)
            for course in courses:
                self._insert_course(cursor, dinner.dinner_id, course)
        return dinner, courses

    def get_by_id(self, dinner_id: str) -> Dinner | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM dinner WHERE id = ?", (dinner_id,))
            row = cursor.fetchone()
            return self._row_to_dinner(row) if row else None

    def get_all(self) -> list[Dinner]:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM dinner ORDER BY date, name")
            return [self._row_to_dinner(row) for row in cursor.fetchall()]

    def add_course(self, dinner_id: str, name: str, position: int) -> Course:
        course = Course(course_id=self.new_id(), position=position, name=name)
        with self.connection() as conn:
            self._insert_course(conn.cursor(), dinner_id, course)
        return course

    def get_courses(self, dinner_id: str) -> list[Course]:
        """Get a dinner's courses ordered by position."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT id, name, position FROM course WHERE dinner_id = ? ORDER BY position, id",
                (dinner_id,),
            )
            return [
                Course(course_id=row["id"], position=row["position"], name=row["name"] or "")
                for row in cursor.fetchall()
            ]

    def _new_dinner(self, name, team_size, teams_per_course, date, dinner_id) -> Dinner:
        return Dinner(
            dinner_id=dinner_id or self.new_id(),
            name=name,
            team_size=team_size,
            teams_per_course=teams_per_course,
            date=date or datetime.now(),
        )

    def _insert_dinner(self, cursor, dinner: Dinner) -> None:
        cursor.execute(
            """
            INSERT INTO dinner (id, name, date, team_size, teams_per_course)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                dinner.dinner_id,
                dinner.name,
                dinner.date.isoformat() if dinner.date else None,
                dinner.team_size,
                dinner.teams_per_course,
            ),
        )

    def _insert_course(self, cursor, dinner_id: str, course: Course) -> None:
        cursor.execute(
            "INSERT INTO course (id, name, position, dinner_id) VALUES (?, ?, ?, ?)",
            (course.course_id, course.name, course.position, dinner_id),
        )

    @staticmethod
    def _row_to_dinner(row) -> Dinner:
        raw_date = row["date"]
        return Dinner(
            dinner_id=row["id"],
            name=row["name"],
            team_size=row["team_size"],
            teams_per_course=row["teams_per_course"],
            date=datetime.fromisoformat(raw_date) if raw_date else None,
        )
