"""
Structured errors raised by the scheduling domain.

Both error types subclass ValueError so callers that only care about bad
input can keep catching ValueError. The `code` attribute carries a stable
string the service layer forwards as a Result error code.
"""

# ConfigError codes
NOT_DIVISIBLE = "not_divisible"
DUPLICATE_TEAM = "duplicate_team"
INSUFFICIENT_COURSES = "insufficient_courses"
INVALID_GROUP_SIZE = "invalid_group_size"
EMPTY_ROSTER = "empty_roster"
INVALID_COURSES = "invalid_courses"

# SchedulingError codes
INFEASIBLE = "infeasible"


class ConfigError(ValueError):
    """The dinner configuration or roster cannot produce any plan."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code

    @classmethod
    def not_divisible(cls, team_count: int, group_size: int) -> "ConfigError":
        return cls(
            NOT_DIVISIBLE,
            f"{team_count} teams cannot be split into groups of {group_size}",
        )

    @classmethod
    def duplicate_team(cls, team_id: str) -> "ConfigError":
        return cls(DUPLICATE_TEAM, f"Team id {team_id!r} appears more than once")

    @classmethod
    def insufficient_courses(cls, course_count: int, required: int) -> "ConfigError":
        return cls(
            INSUFFICIENT_COURSES,
            f"{course_count} course(s) given but {required} are required "
            "for every team to host once",
        )


class SchedulingError(ValueError):
    """Structural invariants cannot be met even though the input is well formed."""

    def __init__(self, message: str, code: str = INFEASIBLE):
        super().__init__(message)
        self.code = code

    @classmethod
    def infeasible(cls, message: str) -> "SchedulingError":
        return cls(message, code=INFEASIBLE)
