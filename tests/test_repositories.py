"""Tests for the SQLite repositories."""

from datetime import datetime

import pytest

from conftest import make_config, make_teams
from domain.models.dinner import HostRemainderPolicy
from repositories.base_repository import BaseRepository
from repositories.dinner_repository import DinnerRepository


class _FailingCourseRepository(DinnerRepository):
    """Dinner repository whose second course insert fails."""

    def _insert_course(self, cursor, dinner_id, course):
        if course.position == 1:
            raise RuntimeError("disk full")
        super()._insert_course(cursor, dinner_id, course)


class TestDinnerRepository:
    """Tests for dinner and course records."""

    def test_add_and_get_dinner(self, dinner_repository):
        """A stored dinner loads back unchanged."""
        date = datetime(2026, 11, 7, 18, 30)
        dinner = dinner_repository.add(name="Winter Hop", team_size=2, teams_per_course=3, date=date)

        loaded = dinner_repository.get_by_id(dinner.dinner_id)
        assert loaded == dinner
        assert loaded.date == date

    def test_get_missing_dinner(self, dinner_repository):
        """Unknown dinner ids return None."""
        assert dinner_repository.get_by_id("nope") is None

    def test_explicit_dinner_id(self, dinner_repository):
        """An explicit id is used instead of a generated one."""
        dinner = dinner_repository.add(
            name="Fixed", team_size=2, teams_per_course=3, dinner_id="dinner-42"
        )
        assert dinner.dinner_id == "dinner-42"
        assert dinner_repository.get_by_id("dinner-42").name == "Fixed"

    def test_get_all(self, dinner_repository):
        """Dinners list in date order."""
        dinner_repository.add(name="B", team_size=2, teams_per_course=3, date=datetime(2026, 1, 2))
        dinner_repository.add(name="A", team_size=2, teams_per_course=3, date=datetime(2026, 1, 1))
        assert [d.name for d in dinner_repository.get_all()] == ["A", "B"]

    def test_courses_ordered_by_position(self, dinner_repository):
        """Courses load in serving order regardless of insert order."""
        dinner = dinner_repository.add(name="Hop", team_size=2, teams_per_course=3)
        dinner_repository.add_course(dinner.dinner_id, "Dessert", 2)
        dinner_repository.add_course(dinner.dinner_id, "Starter", 0)
        dinner_repository.add_course(dinner.dinner_id, "Main", 1)

        courses = dinner_repository.get_courses(dinner.dinner_id)
        assert [c.name for c in courses] == ["Starter", "Main", "Dessert"]
        assert [c.position for c in courses] == [0, 1, 2]

    def test_courses_scoped_to_dinner(self, dinner_repository):
        """Courses of one dinner are not visible on another."""
        first = dinner_repository.add(name="One", team_size=2, teams_per_course=3)
        second = dinner_repository.add(name="Two", team_size=2, teams_per_course=3)
        dinner_repository.add_course(first.dinner_id, "Starter", 0)

        assert dinner_repository.get_courses(second.dinner_id) == []

    def test_add_with_courses(self, dinner_repository):
        """A dinner and its courses are stored together in order."""
        dinner, courses = dinner_repository.add_with_courses(
            name="Hop", team_size=2, teams_per_course=3, course_names=["Starter", "Main", "Dessert"]
        )

        assert dinner_repository.get_by_id(dinner.dinner_id) == dinner
        assert dinner_repository.get_courses(dinner.dinner_id) == courses
        assert [c.position for c in courses] == [0, 1, 2]

    def test_add_with_courses_is_atomic(self, temp_db_path):
        """A failing course insert leaves neither the dinner nor any course behind."""
        repo = _FailingCourseRepository(temp_db_path)

        with pytest.raises(RuntimeError, match="disk full"):
            repo.add_with_courses(
                name="Hop", team_size=2, teams_per_course=3, course_names=["Starter", "Main", "Dessert"]
            )

        assert repo.get_all() == []
        with repo.connection() as conn:
            assert conn.execute("SELECT COUNT(*) FROM course").fetchone()[0] == 0


class TestTeamRepository:
    """Tests for team and member records."""

    def test_add_and_get_team(self, team_repository):
        """A stored team loads back with members and address."""
        team = team_repository.add("d1", ["Ann", "Bo"], address="1 Elm Rd")

        loaded = team_repository.get_by_id(team.team_id)
        assert loaded.members == ("Ann", "Bo")
        assert loaded.address == "1 Elm Rd"
        assert loaded.dinner_id == "d1"

    def test_get_missing_team(self, team_repository):
        """Unknown team ids return None."""
        assert team_repository.get_by_id("nope") is None

    def test_teams_in_registration_order(self, team_repository):
        """Teams of a dinner load in registration order."""
        ids = [team_repository.add("d1", [f"Cook {i}"]).team_id for i in range(5)]
        assert [t.team_id for t in team_repository.get_for_dinner("d1")] == ids

    def test_member_order_preserved(self, team_repository):
        """Members keep the order they were given."""
        team = team_repository.add("d1", ["Zed", "Amy", "Kim"])
        assert team_repository.get_by_id(team.team_id).members == ("Zed", "Amy", "Kim")

    def test_count_for_dinner(self, team_repository):
        """Counts only the teams of the given dinner."""
        team_repository.add("d1", ["Ann"])
        team_repository.add("d1", ["Bo"])
        team_repository.add("d2", ["Cy"])
        assert team_repository.count_for_dinner("d1") == 2
        assert team_repository.count_for_dinner("d3") == 0


class TestCourseMatchRepository:
    """Tests for storing and loading plans."""

    @pytest.fixture
    def plan(self, scheduler):
        return scheduler.schedule(make_config(3, 3, dinner_id="d1"), make_teams(9))

    def test_round_trip_matches(self, course_match_repository, plan):
        """Stored matches load back in plan order."""
        course_match_repository.replace_for_dinner("d1", plan)
        assert course_match_repository.get_for_dinner("d1") == list(plan.course_matches)

    def test_get_for_team(self, course_match_repository, plan):
        """A team's matches equal its itinerary in the plan."""
        course_match_repository.replace_for_dinner("d1", plan)
        matches = course_match_repository.get_for_team("d1", "t04")
        assert matches == plan.itinerary("t04")
        assert len(matches) == 3

    def test_replace_discards_previous_plan(self, course_match_repository, scheduler, plan):
        """Saving a new plan removes every match of the old one."""
        course_match_repository.replace_for_dinner("d1", plan)
        other = scheduler.schedule(
            make_config(3, 3, dinner_id="d1"), make_teams(9, prefix="x"), seeds=[7]
        )
        course_match_repository.replace_for_dinner("d1", other)

        stored = course_match_repository.get_for_dinner("d1")
        assert stored == list(other.course_matches)
        assert all(not m.includes("t00") for m in stored)

    def test_plans_scoped_to_dinner(self, course_match_repository, plan):
        """Plans of one dinner are not visible on another."""
        course_match_repository.replace_for_dinner("d1", plan)
        assert course_match_repository.get_for_dinner("d2") == []

    def test_run_summary(self, course_match_repository, plan):
        """The run summary mirrors the plan's search outcome."""
        course_match_repository.replace_for_dinner("d1", plan)
        summary = course_match_repository.get_run_summary("d1")

        assert summary["seed"] == plan.seed
        assert summary["state"] == plan.state.value
        assert summary["repeat_meetings"] == plan.score.repeat_meetings
        assert summary["max_pair_repeats"] == plan.score.max_pair_repeats
        assert summary["lower_bound"] == plan.lower_bound
        assert summary["attempts"] == plan.attempts
        assert summary["non_hosting_team_ids"] == []

    def test_run_summary_keeps_non_hosting_teams(self, course_match_repository, scheduler):
        """Teams without a hosting slot are kept in the summary."""
        config = make_config(
            3, 2, allow_non_hosting_teams=True, host_remainder_policy=HostRemainderPolicy.ROSTER
        )
        plan = scheduler.schedule(config, make_teams(6))
        course_match_repository.replace_for_dinner("d1", plan)

        summary = course_match_repository.get_run_summary("d1")
        assert summary["non_hosting_team_ids"] == ["t04", "t05"]

    def test_missing_run_summary(self, course_match_repository):
        """Dinners without a plan have no summary."""
        assert course_match_repository.get_run_summary("none") is None


class TestBaseRepository:
    """Tests for shared repository plumbing."""

    def test_schema_created_on_first_use(self, temp_db_path, dinner_repository):
        """Constructing a repository initializes the schema once."""
        assert temp_db_path in BaseRepository._schema_initialized_paths

    def test_transaction_rolls_back_on_error(self, dinner_repository):
        """atomic_transaction rolls back when the block raises."""
        with pytest.raises(RuntimeError):
            with dinner_repository.atomic_transaction() as conn:
                conn.execute(
                    "INSERT INTO dinner (id, name, team_size, teams_per_course) VALUES ('x', 'X', 2, 3)"
                )
                raise RuntimeError("boom")
        assert dinner_repository.get_by_id("x") is None

    def test_new_ids_are_unique(self):
        """new_id() returns a fresh id each call."""
        assert BaseRepository.new_id() != BaseRepository.new_id()
