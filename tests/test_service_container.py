"""Tests for ServiceContainer."""

import pytest

from infrastructure.service_container import ServiceConfig, ServiceContainer
from services.dinner_service import DinnerService
from services.scheduling_service import SchedulingService


@pytest.fixture
def config(temp_db_path):
    """Create a test configuration."""
    return ServiceConfig(
        db_path=temp_db_path,
        max_attempts=20,
        time_limit_seconds=None,
        max_workers=2,
        base_seed=0,
    )


class TestServiceContainerInitialization:
    """Tests for ServiceContainer initialization."""

    @pytest.mark.asyncio
    async def test_initialize_creates_all_repositories(self, config):
        container = ServiceContainer(config)
        await container.initialize()

        assert container.is_initialized
        assert container.dinner_repo is not None
        assert container.team_repo is not None
        assert container.course_match_repo is not None

    @pytest.mark.asyncio
    async def test_initialize_creates_all_services(self, config):
        container = ServiceContainer(config)
        await container.initialize()

        assert isinstance(container.dinner_service, DinnerService)
        assert isinstance(container.scheduling_service, SchedulingService)
        assert container.scheduling_service.scheduler is container.scheduler

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, config):
        """Calling initialize multiple times is safe."""
        container = ServiceContainer(config)

        await container.initialize()
        first = container.scheduling_service

        await container.initialize()
        assert container.scheduling_service is first

    def test_services_unavailable_before_initialize(self, config):
        container = ServiceContainer(config)
        assert not container.is_initialized
        assert container.dinner_service is None
        assert container.scheduling_service is None


class TestServiceConfigWiring:
    """Configuration values reach the scheduler and services."""

    @pytest.mark.asyncio
    async def test_config_values_applied(self, config):
        config.allow_non_hosting_teams = True
        config.host_remainder_policy = "roster"
        container = ServiceContainer(config)
        await container.initialize()

        service = container.scheduling_service
        assert service.budget.max_attempts == 20
        assert service.budget.time_limit_seconds is None
        assert service.allow_non_hosting_teams is True
        assert service.host_remainder_policy.value == "roster"
        assert container.scheduler.max_workers == 2

    @pytest.mark.asyncio
    async def test_end_to_end_plan(self, config):
        """Create a dinner, sign up teams and plan it through the container."""
        container = ServiceContainer(config)
        await container.initialize()

        dinner = container.dinner_service.create_dinner(
            name="Container Hop", team_size=2, teams_per_course=3, course_names=["A", "B", "C"]
        ).unwrap()
        for i in range(9):
            container.dinner_service.register_team(dinner.dinner_id, [f"Cook {i}"], address=f"{i} Rd")

        plan = container.scheduling_service.plan_dinner(dinner.dinner_id).unwrap()
        assert len(plan.course_matches) == 9
        summary = container.course_match_repo.get_run_summary(dinner.dinner_id)
        assert summary["seed"] == plan.seed
