"""
Progressive dinner match scheduling.

Runs many seeded candidate builds in parallel and keeps the best-scoring
structurally valid plan.
"""

import logging
import math
import os
import threading
import time
import uuid
from collections.abc import Iterable, Sequence
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from dataclasses import dataclass

from config import (
    SCHEDULER_BASE_SEED,
    SCHEDULER_IMPROVEMENT_PASSES,
    SCHEDULER_MAX_ATTEMPTS,
    SCHEDULER_MAX_WORKERS,
    SCHEDULER_TIME_LIMIT_SECONDS,
)
from domain.exceptions import INVALID_COURSES, ConfigError, SchedulingError
from domain.models.course import Course, order_courses
from domain.models.dinner import DinnerConfig
from domain.models.schedule import (
    CourseMatch,
    Plan,
    ScheduleBudget,
    ScheduleScore,
    SchedulingState,
    TrialPlan,
)
from domain.models.team import Team
from domain.models.team_set import TeamSet
from domain.services.candidate_builder import CandidateBuilder
from domain.services.schedule_evaluator import ScheduleEvaluator
from utils.trial_trace import trace_trial

logger = logging.getLogger("dinner.scheduler")

# Namespace for deterministic course match ids
MATCH_ID_NAMESPACE = uuid.UUID("6f1c2a4e-93b5-4d0e-8a57-2f0d5c9e7b31")


def default_budget() -> ScheduleBudget:
    """Budget from environment configuration."""
    return ScheduleBudget(
        max_attempts=SCHEDULER_MAX_ATTEMPTS,
        time_limit_seconds=SCHEDULER_TIME_LIMIT_SECONDS,
    )


@dataclass(frozen=True)
class ScoredTrial:
    """A finished trial with its position in the seed list."""

    index: int
    trial: TrialPlan
    score: ScheduleScore

    @property
    def rank_key(self) -> tuple[ScheduleScore, int]:
        return (self.score, self.index)


class _BestTrialHolder:
    """
    The only state shared between search workers.

    Ranking by (score, seed index) makes the winner independent of the
    order in which workers finish: it is always the trial a sequential scan
    of the seed list would keep.
    """

    def __init__(self, deadline: float | None):
        self._lock = threading.Lock()
        self._deadline = deadline
        self._best: ScoredTrial | None = None
        self._perfect_index: int | None = None
        self._completed = 0
        self._rejected = 0
        self._skipped = 0

    def offer(self, scored: ScoredTrial) -> bool:
        """Record a finished trial. Returns True if it is the new best."""
        with self._lock:
            self._completed += 1
            if scored.score.is_perfect and (
                self._perfect_index is None or scored.index < self._perfect_index
            ):
                self._perfect_index = scored.index
            if self._best is None or scored.rank_key < self._best.rank_key:
                self._best = scored
                return True
            return False

    def reject(self) -> None:
        with self._lock:
            self._completed += 1
            self._rejected += 1

    def skip(self) -> None:
        with self._lock:
            self._skipped += 1

    def deadline_passed(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def should_skip(self, index: int) -> bool:
        """
        Cooperative cancellation check, made before a trial starts.

        Trials after a perfect one cannot win. The first trial always runs so
        that even a tiny time limit yields a plan.
        """
        with self._lock:
            if self._perfect_index is not None and index > self._perfect_index:
                return True
        return index > 0 and self.deadline_passed()

    @property
    def best(self) -> ScoredTrial | None:
        with self._lock:
            return self._best

    @property
    def completed(self) -> int:
        with self._lock:
            return self._completed

    @property
    def rejected(self) -> int:
        with self._lock:
            return self._rejected

    @property
    def skipped(self) -> int:
        with self._lock:
            return self._skipped


class MatchScheduler:
    """
    Orchestrates the search for a course match plan.

    Validates the configuration, runs seeded CandidateBuilder trials in a
    thread pool, scores them with ScheduleEvaluator and converts the best
    one into CourseMatch records.
    """

    def __init__(
        self,
        builder: CandidateBuilder | None = None,
        evaluator: ScheduleEvaluator | None = None,
        max_workers: int | None = None,
        base_seed: int | None = None,
        improvement_passes: int | None = None,
    ):
        """
        Initialize the scheduler.

        Args:
            builder: Fixed candidate builder; by default one is created per
                request from the dinner's host remainder policy
            evaluator: Plan evaluator
            max_workers: Upper bound on parallel trials (default from config)
            base_seed: First seed when no explicit seed list is given
            improvement_passes: Local repair sweeps for default builders
        """
        self._builder = builder
        self.evaluator = evaluator or ScheduleEvaluator()
        self.max_workers = max_workers if max_workers is not None else SCHEDULER_MAX_WORKERS
        self.base_seed = base_seed if base_seed is not None else SCHEDULER_BASE_SEED
        self.improvement_passes = (
            improvement_passes
            if improvement_passes is not None
            else SCHEDULER_IMPROVEMENT_PASSES
        )
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")

    def builder_for(self, config: DinnerConfig) -> CandidateBuilder:
        if self._builder is not None:
            return self._builder
        return CandidateBuilder(
            improvement_passes=self.improvement_passes,
            host_remainder_policy=config.host_remainder_policy,
        )

    def validate(self, config: DinnerConfig, teams: Iterable[Team]) -> tuple[TeamSet, list[Course]]:
        """
        Check that a plan can exist before any search work is done.

        Raises:
            ConfigError: Roster or course configuration is unusable
            SchedulingError: Hosting rules cannot be satisfied
        """
        team_set = TeamSet.validate(teams, config.group_size)
        courses = order_courses(config.courses)

        if not courses:
            raise ConfigError(INVALID_COURSES, "A dinner needs at least one course")
        course_ids = [c.course_id for c in courses]
        if len(set(course_ids)) != len(course_ids):
            raise ConfigError(INVALID_COURSES, f"Course ids must be unique: {course_ids}")
        positions = [c.position for c in courses]
        if positions != list(range(len(courses))):
            raise ConfigError(
                INVALID_COURSES,
                f"Course positions must be 0..{len(courses) - 1}, got {positions}",
            )

        team_count = len(team_set)
        group_size = team_set.group_size
        course_count = len(courses)
        groups = team_set.groups_per_course

        required = math.ceil(team_count / group_size)
        if course_count < required:
            raise ConfigError.insufficient_courses(course_count, required)

        # One host per group: each course consumes `groups` hosting slots
        if course_count * groups > team_count:
            raise SchedulingError.infeasible(
                f"{course_count} courses with {groups} group(s) each need "
                f"{course_count * groups} hosts, but only {team_count} teams can host once"
            )
        if course_count * groups < team_count and not config.allow_non_hosting_teams:
            raise ConfigError.insufficient_courses(course_count, group_size)

        return team_set, courses

    def schedule(
        self,
        config: DinnerConfig,
        teams: Iterable[Team],
        budget: ScheduleBudget | None = None,
        seeds: Sequence[int] | None = None,
    ) -> Plan:
        """
        Compute a course match plan.

        Args:
            config: Group size, courses and hosting options
            teams: Roster in registration order
            budget: Search limits (defaults to config.budget)
            seeds: Explicit ordered seeds; truncated to budget.max_attempts

        Returns:
            The best plan found. state is FOUND for a perfect plan and
            BUDGET_EXHAUSTED otherwise.

        Raises:
            ConfigError: Invalid configuration (no search attempted)
            SchedulingError: Structural invariants cannot be met
        """
        started = time.monotonic()
        budget = budget or config.budget
        self._log_state(SchedulingState.VALIDATING, config)

        try:
            team_set, courses = self.validate(config, teams)
        except (ConfigError, SchedulingError) as exc:
            self._log_state(SchedulingState.INFEASIBLE, config, f"{exc.code}: {exc}")
            raise

        seed_list = self._seed_list(budget, seeds)
        builder = self.builder_for(config)

        self._log_state(
            SchedulingState.SEARCHING,
            config,
            f"{len(team_set)} teams, group size {team_set.group_size}, "
            f"{len(courses)} courses, up to {len(seed_list)} attempt(s)",
        )
        holder = self._search(builder, team_set, courses, seed_list, budget, started)

        best = holder.best
        if best is None:
            self._log_state(SchedulingState.INFEASIBLE, config, "no valid trial produced")
            raise SchedulingError.infeasible(
                f"None of {holder.completed} trial(s) produced a structurally valid plan"
            )

        state = SchedulingState.FOUND if best.score.is_perfect else SchedulingState.BUDGET_EXHAUSTED
        plan = self._to_plan(config, team_set, courses, best, state, holder.completed, started)
        self._log_state(state, config, f"score {plan.score}")
        self._log_summary(plan, holder)
        return plan

    def _seed_list(self, budget: ScheduleBudget, seeds: Sequence[int] | None) -> list[int]:
        if seeds is None:
            return [self.base_seed + i for i in range(budget.max_attempts)]
        seed_list = list(seeds)[: budget.max_attempts]
        if not seed_list:
            raise ValueError("At least one seed is required")
        return seed_list

    def _worker_count(self, attempts: int) -> int:
        return max(1, min(self.max_workers, os.cpu_count() or 1, attempts))

    def _search(
        self,
        builder: CandidateBuilder,
        team_set: TeamSet,
        courses: list[Course],
        seed_list: list[int],
        budget: ScheduleBudget,
        started: float,
    ) -> _BestTrialHolder:
        deadline = None
        if budget.time_limit_seconds is not None:
            deadline = started + budget.time_limit_seconds
        holder = _BestTrialHolder(deadline)

        workers = self._worker_count(len(seed_list))
        window = workers * 2  # bounded so cancellation never has to drain a long queue
        pending = set()
        next_index = 0

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="dinner-trial") as executor:
            while True:
                while (
                    next_index < len(seed_list)
                    and len(pending) < window
                    and not holder.should_skip(next_index)
                ):
                    pending.add(
                        executor.submit(
                            self._run_trial,
                            builder,
                            team_set,
                            courses,
                            next_index,
                            seed_list[next_index],
                            holder,
                        )
                    )
                    next_index += 1

                if not pending:
                    break

                timeout = None
                if deadline is not None and not holder.deadline_passed():
                    timeout = max(0.0, deadline - time.monotonic())
                done, pending = wait(pending, timeout=timeout, return_when=FIRST_COMPLETED)
                for future in done:
                    future.result()

                if holder.deadline_passed() and holder.best is not None:
                    logger.info(
                        f"Time limit of {budget.time_limit_seconds}s reached after "
                        f"{holder.completed} attempt(s)"
                    )
                    for future in pending:
                        future.cancel()
                    break

        for future in pending:
            if not future.cancelled():
                future.result()
        return holder

    def _run_trial(
        self,
        builder: CandidateBuilder,
        team_set: TeamSet,
        courses: list[Course],
        index: int,
        seed: int,
        holder: _BestTrialHolder,
    ) -> ScheduleScore | None:
        if holder.should_skip(index):
            holder.skip()
            return None

        trial = builder.build(team_set, courses, seed)
        violations = self.evaluator.find_violations(trial, team_set, courses)
        if violations:
            logger.error(f"Trial {index} (seed={seed}) broke plan invariants: {violations}")
            holder.reject()
            return None

        score = self.evaluator.score(trial)
        is_best = holder.offer(ScoredTrial(index=index, trial=trial, score=score))
        trace_trial(
            "trial_scored",
            "scheduler.py:_run_trial",
            {
                "index": index,
                "seed": seed,
                "repeat_meetings": score.repeat_meetings,
                "max_pair_repeats": score.max_pair_repeats,
                "best": is_best,
            },
        )
        if is_best:
            logger.debug(f"New best plan: seed={seed} score={score}")
        return score

    def _to_plan(
        self,
        config: DinnerConfig,
        team_set: TeamSet,
        courses: list[Course],
        best: ScoredTrial,
        state: SchedulingState,
        attempts: int,
        started: float,
    ) -> Plan:
        namespace = uuid.uuid5(MATCH_ID_NAMESPACE, config.dinner_id or "unsaved-dinner")
        matches = []
        for course in best.trial.courses:
            for group in course.groups:
                matches.append(
                    CourseMatch(
                        match_id=str(uuid.uuid5(namespace, f"{course.course_id}:{group.host_team_id}")),
                        course_id=course.course_id,
                        host_team_id=group.host_team_id,
                        guest_team_ids=group.guest_team_ids,
                    )
                )

        return Plan(
            course_matches=tuple(matches),
            score=best.score,
            state=state,
            seed=best.trial.seed,
            attempts=attempts,
            course_ids=tuple(c.course_id for c in courses),
            non_hosting_team_ids=best.trial.non_hosting_team_ids,
            lower_bound=self.evaluator.lower_bound(
                len(team_set), team_set.group_size, len(courses)
            ),
            elapsed_seconds=time.monotonic() - started,
            dinner_id=config.dinner_id,
        )

    def _log_state(self, state: SchedulingState, config: DinnerConfig, detail: str = "") -> None:
        dinner = config.dinner_id or "unsaved dinner"
        suffix = f" ({detail})" if detail else ""
        level = logging.WARNING if state is SchedulingState.INFEASIBLE else logging.INFO
        logger.log(level, f"Scheduling {dinner}: {state.value}{suffix}")

    def _log_summary(self, plan: Plan, holder: _BestTrialHolder) -> None:
        logger.info("=" * 60)
        logger.info(
            f"SELECTED: seed {plan.seed} with score {plan.score} "
            f"(lower bound {plan.lower_bound} repeats) after {plan.attempts} attempt(s) "
            f"in {plan.elapsed_seconds:.2f}s"
        )
        if holder.rejected or holder.skipped:
            logger.info(f"  Rejected trials: {holder.rejected}, skipped trials: {holder.skipped}")
        if plan.non_hosting_team_ids:
            logger.info(f"  Teams without a hosting slot: {', '.join(plan.non_hosting_team_ids)}")
        if logger.isEnabledFor(logging.DEBUG):
            for course_id in plan.course_ids:
                logger.debug(f"  Course {course_id}:")
                for match in plan.matches_for_course(course_id):
                    logger.debug(
                        f"    host {match.host_team_id} <- {', '.join(match.guest_team_ids)}"
                    )
        logger.info("=" * 60)
