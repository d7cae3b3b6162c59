"""
Course domain model.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Course:
    """One meal segment of the dinner. Position 0 is served first."""

    course_id: str
    position: int
    name: str = ""

    def __str__(self) -> str:
        return f"Course {self.position}: {self.name or self.course_id}"


def order_courses(courses) -> list[Course]:
    """Return courses sorted by position, then id for a stable order."""
    return sorted(courses, key=lambda c: (c.position, c.course_id))
