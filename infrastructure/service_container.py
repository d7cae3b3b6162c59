"""
Service container for dependency injection and initialization.

Usage:
    container = ServiceContainer(config)
    await container.initialize()

    # Access services
    dinner_service = container.dinner_service
    scheduling_service = container.scheduling_service
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from services.dinner_service import DinnerService
    from services.scheduling_service import SchedulingService

import config as app_config
from domain.models.schedule import ScheduleBudget
from infrastructure.schema_manager import SchemaManager
from repositories.course_match_repository import CourseMatchRepository
from repositories.dinner_repository import DinnerRepository
from repositories.team_repository import TeamRepository
from scheduler import MatchScheduler

logger = logging.getLogger("dinner.infrastructure.container")


@dataclass
class RepositoryContainer:
    """Container for all repositories."""

    dinner: DinnerRepository | None = None
    team: TeamRepository | None = None
    course_match: CourseMatchRepository | None = None


@dataclass
class ServiceConfig:
    """Configuration for service initialization."""

    # Database
    db_path: str = app_config.DB_PATH

    # Search budget
    max_attempts: int = app_config.SCHEDULER_MAX_ATTEMPTS
    time_limit_seconds: float | None = app_config.SCHEDULER_TIME_LIMIT_SECONDS

    # Search execution
    max_workers: int = app_config.SCHEDULER_MAX_WORKERS
    base_seed: int = app_config.SCHEDULER_BASE_SEED
    improvement_passes: int = app_config.SCHEDULER_IMPROVEMENT_PASSES

    # Hosting
    allow_non_hosting_teams: bool = app_config.ALLOW_NON_HOSTING_TEAMS
    host_remainder_policy: str = app_config.HOST_REMAINDER_POLICY

    @property
    def budget(self) -> ScheduleBudget:
        return ScheduleBudget(
            max_attempts=self.max_attempts,
            time_limit_seconds=self.time_limit_seconds,
        )


class ServiceContainer:
    """
    Central container for all application services.

    Handles initialization order and dependency injection.

    Example:
        container = ServiceContainer(config)
        await container.initialize()

        plan = container.scheduling_service.plan_dinner(dinner_id)
    """

    def __init__(self, config: ServiceConfig | None = None):
        self.config = config or ServiceConfig()
        self._initialized = False
        self._repos = RepositoryContainer()
        self._scheduler: MatchScheduler | None = None
        self._services: dict[str, Any] = {}

    @property
    def is_initialized(self) -> bool:
        """Check if container has been initialized."""
        return self._initialized

    async def initialize(self) -> None:
        """
        Initialize all services in correct order.

        This method is idempotent - calling it multiple times has no effect.
        """
        if self._initialized:
            logger.debug("ServiceContainer already initialized, skipping")
            return

        logger.info("Initializing ServiceContainer...")

        self._init_database()
        self._init_repositories()
        self._init_scheduler()
        self._init_services()

        self._initialized = True
        logger.info("ServiceContainer initialization complete")

    def _init_database(self) -> None:
        """Create the schema and run migrations."""
        logger.debug(f"Initializing database at {self.config.db_path}")
        SchemaManager(self.config.db_path).initialize()

    def _init_repositories(self) -> None:
        logger.debug("Initializing repositories")

        db_path = self.config.db_path
        self._repos.dinner = DinnerRepository(db_path)
        self._repos.team = TeamRepository(db_path)
        self._repos.course_match = CourseMatchRepository(db_path)

    def _init_scheduler(self) -> None:
        self._scheduler = MatchScheduler(
            max_workers=self.config.max_workers,
            base_seed=self.config.base_seed,
            improvement_passes=self.config.improvement_passes,
        )

    def _init_services(self) -> None:
        logger.debug("Initializing services")

        from services.dinner_service import DinnerService
        from services.scheduling_service import SchedulingService

        self._services["dinner"] = DinnerService(
            dinner_repo=self._repos.dinner,
            team_repo=self._repos.team,
        )
        self._services["scheduling"] = SchedulingService(
            dinner_repo=self._repos.dinner,
            team_repo=self._repos.team,
            match_repo=self._repos.course_match,
            scheduler=self._scheduler,
            budget=self.config.budget,
            allow_non_hosting_teams=self.config.allow_non_hosting_teams,
            host_remainder_policy=self.config.host_remainder_policy,
        )

    # =========================================================================
    # Service accessors
    # =========================================================================

    @property
    def dinner_repo(self) -> DinnerRepository:
        return self._repos.dinner

    @property
    def team_repo(self) -> TeamRepository:
        return self._repos.team

    @property
    def course_match_repo(self) -> CourseMatchRepository:
        return self._repos.course_match

    @property
    def scheduler(self) -> MatchScheduler | None:
        return self._scheduler

    @property
    def dinner_service(self) -> "DinnerService | None":
        return self._services.get("dinner")

    @property
    def scheduling_service(self) -> "SchedulingService | None":
        return self._services.get("scheduling")
