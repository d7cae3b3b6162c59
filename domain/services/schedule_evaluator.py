"""
Schedule evaluation domain service.

Scores trial plans by repeat meetings and checks structural invariants.
"""

import math
from collections import Counter
from collections.abc import Iterable

from domain.models.course import Course
from domain.models.meeting_graph import MeetingGraph
from domain.models.schedule import ScheduleScore, TrialPlan
from domain.models.team_set import TeamSet


class ScheduleEvaluator:
    """
    Pure domain service for ranking candidate plans.

    Responsibilities:
    - Score a plan by repeat meetings (lower is better)
    - List structural invariant violations
    - Report the pigeonhole lower bound on repeats for given parameters

    The evaluator never declares a configuration infeasible; it only scores.
    """

    def build_meeting_graph(self, trial_plan: TrialPlan) -> MeetingGraph:
        """Rebuild the meeting graph for a complete plan from scratch."""
        graph = MeetingGraph()
        for _, group in trial_plan.iter_groups():
            graph.record_group(group.members)
        return graph

    def score(self, trial_plan: TrialPlan) -> ScheduleScore:
        """
        Score a plan as (total repeat meetings, worst pair repeat count).

        Scoring is side-effect free, so scoring the same plan twice always
        yields the same score.
        """
        graph = self.build_meeting_graph(trial_plan)
        return ScheduleScore(
            repeat_meetings=graph.repeat_meetings(),
            max_pair_repeats=graph.max_pair_repeats(),
        )

    def find_violations(
        self,
        trial_plan: TrialPlan,
        team_set: TeamSet,
        courses: Iterable[Course],
    ) -> list[str]:
        """
        Check the structural invariants of a plan.

        Returns:
            One message per violation; an empty list means the plan is valid
        """
        violations: list[str] = []
        expected_courses = {course.course_id for course in courses}
        planned_courses = [course.course_id for course in trial_plan.courses]
        if set(planned_courses) != expected_courses or len(planned_courses) != len(expected_courses):
            violations.append(
                f"Plan covers courses {sorted(planned_courses)}, expected {sorted(expected_courses)}"
            )

        team_ids = set(team_set.team_ids)
        group_size = team_set.group_size

        for course in trial_plan.courses:
            seen = Counter()
            for group in course.groups:
                members = group.members
                if len(members) != group_size:
                    violations.append(
                        f"Course {course.course_id}: group hosted by {group.host_team_id} "
                        f"has {len(members)} teams, expected {group_size}"
                    )
                if len(set(members)) != len(members):
                    violations.append(
                        f"Course {course.course_id}: group hosted by {group.host_team_id} "
                        "contains a team twice"
                    )
                seen.update(members)

            unknown = sorted(set(seen) - team_ids)
            missing = sorted(team_ids - set(seen))
            duplicated = sorted(t for t, n in seen.items() if n > 1)
            if unknown:
                violations.append(f"Course {course.course_id}: unknown teams {unknown}")
            if missing:
                violations.append(f"Course {course.course_id}: teams not seated {missing}")
            if duplicated:
                violations.append(f"Course {course.course_id}: teams seated twice {duplicated}")

        host_counts = trial_plan.host_counts()
        non_hosting = set(trial_plan.non_hosting_team_ids)
        for team_id in team_set.team_ids:
            expected = 0 if team_id in non_hosting else 1
            if host_counts.get(team_id, 0) != expected:
                violations.append(
                    f"Team {team_id} hosts {host_counts.get(team_id, 0)} time(s), expected {expected}"
                )

        return violations

    def is_feasible(self, trial_plan: TrialPlan, team_set: TeamSet, courses: Iterable[Course]) -> bool:
        return not self.find_violations(trial_plan, team_set, courses)

    @staticmethod
    def lower_bound(team_count: int, group_size: int, course_count: int) -> int:
        """
        Pigeonhole lower bound on repeat meetings for any valid plan.

        Two bounds are combined: plan-wide pair meetings against the number
        of distinct pairs, and each team's partners against the T-1 teams it
        can meet. The true optimum may be higher.
        """
        if group_size < 2 or team_count < 2:
            return 0
        groups = team_count // group_size
        pair_meetings = course_count * groups * group_size * (group_size - 1) // 2
        distinct_pairs = team_count * (team_count - 1) // 2
        plan_bound = max(0, pair_meetings - distinct_pairs)

        per_team = max(0, course_count * (group_size - 1) - (team_count - 1))
        team_bound = math.ceil(team_count * per_team / 2)
        return max(plan_bound, team_bound)
