"""
Centralized configuration for the progressive dinner scheduler.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _parse_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float(env_var: str, default: float) -> float:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_optional_float(env_var: str, default: float | None) -> float | None:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    if raw.strip().lower() in {"", "none", "off"}:
        return None
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_bool(env_var: str, default: bool) -> bool:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _parse_str_list(env_var: str, default: list[str]) -> list[str]:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    values = [x.strip() for x in raw.split(",") if x.strip()]
    return values or default


DB_PATH = os.getenv("DB_PATH", "progressive_dinner.db")

# Search budget: whichever ceiling is reached first ends the search
SCHEDULER_MAX_ATTEMPTS = _parse_int("SCHEDULER_MAX_ATTEMPTS", 500)
SCHEDULER_TIME_LIMIT_SECONDS = _parse_optional_float("SCHEDULER_TIME_LIMIT_SECONDS", 10.0)
SCHEDULER_MAX_WORKERS = _parse_int("SCHEDULER_MAX_WORKERS", 4)
SCHEDULER_BASE_SEED = _parse_int("SCHEDULER_BASE_SEED", 0)
SCHEDULER_IMPROVEMENT_PASSES = _parse_int("SCHEDULER_IMPROVEMENT_PASSES", 4)

# Hosting when there are fewer courses than teams per group
ALLOW_NON_HOSTING_TEAMS = _parse_bool("ALLOW_NON_HOSTING_TEAMS", False)
HOST_REMAINDER_POLICY = os.getenv("HOST_REMAINDER_POLICY", "seeded")

DEFAULT_COURSE_NAMES = _parse_str_list("DEFAULT_COURSE_NAMES", ["Starter", "Main", "Dessert"])
DEFAULT_TEAM_SIZE = _parse_int("DEFAULT_TEAM_SIZE", 2)
