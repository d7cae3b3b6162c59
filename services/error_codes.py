"""
Standard error codes for service layer.

These error codes allow callers (e.g. an HTTP layer) to map failures to
responses without parsing error message text. Scheduling codes are the ones
carried by the domain's ConfigError / SchedulingError.

Usage:
    from services.error_codes import DINNER_NOT_FOUND
    from services.result import Result

    if dinner is None:
        return Result.fail("Dinner not found", code=DINNER_NOT_FOUND)
"""

from domain.exceptions import (
    DUPLICATE_TEAM,
    EMPTY_ROSTER,
    INFEASIBLE,
    INSUFFICIENT_COURSES,
    INVALID_COURSES,
    INVALID_GROUP_SIZE,
    NOT_DIVISIBLE,
)

# General errors
NOT_FOUND = "not_found"
VALIDATION_ERROR = "validation_error"
STATE_ERROR = "state_error"

# Dinner/roster errors
DINNER_NOT_FOUND = "dinner_not_found"
TEAM_NOT_FOUND = "team_not_found"
INVALID_TEAM_SIZE = "invalid_team_size"
NO_PLAN = "no_plan"
TEAM_NOT_IN_PLAN = "team_not_in_plan"

# Configuration errors (domain ConfigError codes)
CONFIG_ERROR_CODES = frozenset(
    {
        NOT_DIVISIBLE,
        DUPLICATE_TEAM,
        INSUFFICIENT_COURSES,
        INVALID_GROUP_SIZE,
        EMPTY_ROSTER,
        INVALID_COURSES,
    }
)

# Scheduling errors (domain SchedulingError codes)
SCHEDULING_ERROR_CODES = frozenset({INFEASIBLE})

__all__ = [
    "NOT_FOUND",
    "VALIDATION_ERROR",
    "STATE_ERROR",
    "DINNER_NOT_FOUND",
    "TEAM_NOT_FOUND",
    "INVALID_TEAM_SIZE",
    "NO_PLAN",
    "TEAM_NOT_IN_PLAN",
    "NOT_DIVISIBLE",
    "DUPLICATE_TEAM",
    "INSUFFICIENT_COURSES",
    "INVALID_GROUP_SIZE",
    "EMPTY_ROSTER",
    "INVALID_COURSES",
    "INFEASIBLE",
    "CONFIG_ERROR_CODES",
    "SCHEDULING_ERROR_CODES",
]
