"""
Repository layer for data access abstraction.
"""

from repositories.base_repository import BaseRepository
from repositories.course_match_repository import CourseMatchRepository
from repositories.dinner_repository import DinnerRepository
from repositories.interfaces import (
    ICourseMatchRepository,
    IDinnerRepository,
    ITeamRepository,
)
from repositories.team_repository import TeamRepository

__all__ = [
    "BaseRepository",
    "DinnerRepository",
    "TeamRepository",
    "CourseMatchRepository",
    "IDinnerRepository",
    "ITeamRepository",
    "ICourseMatchRepository",
]
