"""
Candidate plan construction.

Builds one complete, structurally valid assignment per seed: host cohorts
from a seeded permutation, then meeting-aware greedy packing of guests.
"""

import random
from collections.abc import Sequence
from itertools import combinations

from domain.exceptions import SchedulingError
from domain.models.course import Course, order_courses
from domain.models.dinner import HostRemainderPolicy
from domain.models.meeting_graph import MeetingGraph
from domain.models.schedule import TrialCourse, TrialGroup, TrialPlan
from domain.models.team_set import TeamSet


class CandidateBuilder:
    """
    Pure domain service producing trial plans.

    build() is a pure function of (team_set, courses, seed): all randomness
    comes from a private random.Random(seed), and every tie is broken by a
    seeded permutation rank, so the same inputs always give the same plan.
    """

    def __init__(
        self,
        improvement_passes: int = 4,
        host_remainder_policy: HostRemainderPolicy = HostRemainderPolicy.SEEDED,
    ):
        """
        Initialize the builder.

        Args:
            improvement_passes: Max local repair sweeps over all courses (0 disables)
            host_remainder_policy: Which teams skip hosting when there are
                fewer hosting slots than teams
        """
        if improvement_passes < 0:
            raise ValueError(f"improvement_passes must be >= 0, got {improvement_passes}")
        self.improvement_passes = improvement_passes
        self.host_remainder_policy = HostRemainderPolicy.parse(host_remainder_policy)

    def build(self, team_set: TeamSet, courses: Sequence[Course], seed: int) -> TrialPlan:
        """
        Build one complete trial plan.

        Args:
            team_set: Validated roster
            courses: The dinner's courses (any order; sorted by position)
            seed: Seed for this trial

        Returns:
            TrialPlan satisfying the structural invariants by construction
        """
        ordered_courses = order_courses(courses)
        rng = random.Random(seed)

        roster = list(team_set.team_ids)
        order = roster[:]
        rng.shuffle(order)

        cohorts, non_hosting = self._host_cohorts(
            roster, order, len(ordered_courses), team_set.groups_per_course
        )

        graph = MeetingGraph()
        course_groups: list[list[list[str]]] = []
        for hosts in cohorts:
            rank = self._course_rank(order, rng)
            course_groups.append(
                self._pack_course(hosts, roster, rank, graph, team_set.group_size)
            )

        if self.improvement_passes and team_set.group_size > 1:
            self._repair(course_groups, graph)

        trial_courses = tuple(
            TrialCourse(
                course_id=course.course_id,
                position=course.position,
                groups=tuple(
                    TrialGroup(host_team_id=members[0], guest_team_ids=tuple(members[1:]))
                    for members in groups
                ),
            )
            for course, groups in zip(ordered_courses, course_groups)
        )
        return TrialPlan(seed=seed, courses=trial_courses, non_hosting_team_ids=tuple(non_hosting))

    def _host_cohorts(
        self,
        roster: list[str],
        order: list[str],
        course_count: int,
        hosts_per_course: int,
    ) -> tuple[list[list[str]], list[str]]:
        """
        Split teams into one host cohort per course.

        Every group needs one host, so each course takes exactly
        hosts_per_course hosts. Teams beyond course_count * hosts_per_course
        never host; which ones depends on the remainder policy.
        """
        slots = course_count * hosts_per_course
        if slots > len(roster):
            raise SchedulingError.infeasible(
                f"{course_count} courses need {slots} hosts but only {len(roster)} teams exist"
            )

        if self.host_remainder_policy is HostRemainderPolicy.ROSTER:
            non_hosting = roster[slots:]
            skipped = set(non_hosting)
            hosting_order = [t for t in order if t not in skipped]
        else:
            hosting_order = order[:slots]
            non_hosting = order[slots:]

        cohorts = [
            hosting_order[i * hosts_per_course : (i + 1) * hosts_per_course]
            for i in range(course_count)
        ]
        return cohorts, non_hosting

    @staticmethod
    def _course_rank(order: list[str], rng: random.Random) -> dict[str, int]:
        """Fresh seeded tie-break rank for one course."""
        permuted = order[:]
        rng.shuffle(permuted)
        return {team_id: i for i, team_id in enumerate(permuted)}

    def _pack_course(
        self,
        hosts: list[str],
        roster: list[str],
        rank: dict[str, int],
        graph: MeetingGraph,
        group_size: int,
    ) -> list[list[str]]:
        """Greedily fill every host's group with the least-met guests."""
        hosting = set(hosts)
        pool = sorted((t for t in roster if t not in hosting), key=rank.__getitem__)

        groups: list[list[str]] = []
        for host in sorted(hosts, key=rank.__getitem__):
            members = [host]
            while len(members) < group_size:
                guest = self._pick_guest(pool, members, rank, graph)
                pool.remove(guest)
                members.append(guest)
            graph.record_group(members)
            groups.append(members)
        return groups

    @staticmethod
    def _pick_guest(
        pool: list[str], members: list[str], rank: dict[str, int], graph: MeetingGraph
    ) -> str:
        best_team = None
        best_key = None
        for candidate in pool:
            key = (graph.meetings_with(candidate, members), rank[candidate])
            if best_key is None or key < best_key:
                best_team, best_key = candidate, key
        return best_team

    def _repair(self, course_groups: list[list[list[str]]], graph: MeetingGraph) -> None:
        """Swap guests within courses while each swap strictly improves the plan."""
        for _ in range(self.improvement_passes):
            improved = False
            for groups in course_groups:
                if self._repair_course(groups, graph):
                    improved = True
            if not improved:
                break

    def _repair_course(self, groups: list[list[str]], graph: MeetingGraph) -> bool:
        improved = False
        for a_idx, b_idx in combinations(range(len(groups)), 2):
            group_a, group_b = groups[a_idx], groups[b_idx]
            # Index 0 is the host; hosts never move
            for i in range(1, len(group_a)):
                for j in range(1, len(group_b)):
                    if self._swap_improves(group_a, i, group_b, j, graph):
                        graph.forget_group(group_a)
                        graph.forget_group(group_b)
                        group_a[i], group_b[j] = group_b[j], group_a[i]
                        graph.record_group(group_a)
                        graph.record_group(group_b)
                        improved = True
        return improved

    @staticmethod
    def _swap_changes(
        group_a: list[str], i: int, group_b: list[str], j: int, graph: MeetingGraph
    ) -> tuple[list[int], list[int]]:
        """
        Current meeting counts of the pairs a swap of group_a[i] and group_b[j]
        would break and would create. The pairs are all distinct.
        """
        out_a, out_b = group_a[i], group_b[j]
        lost, gained = [], []
        for k, member in enumerate(group_a):
            if k != i:
                lost.append(graph.meetings(out_a, member))
                gained.append(graph.meetings(out_b, member))
        for k, member in enumerate(group_b):
            if k != j:
                lost.append(graph.meetings(out_b, member))
                gained.append(graph.meetings(out_a, member))
        return lost, gained

    def _swap_improves(
        self, group_a: list[str], i: int, group_b: list[str], j: int, graph: MeetingGraph
    ) -> bool:
        """
        Accept a swap if it lowers repeat meetings, or keeps them equal while
        lowering the sum over pairs of C(meetings, 2) without raising the worst
        pair. Each accepted swap lowers (repeats, quadratic cost), so repair
        terminates and never worsens the score.
        """
        lost, gained = self._swap_changes(group_a, i, group_b, j, graph)

        # Meetings per course are fixed, so repeats only move with distinct pairs
        repeat_delta = sum(1 for c in lost if c == 1) - sum(1 for c in gained if c == 0)
        if repeat_delta != 0:
            return repeat_delta < 0

        quadratic_delta = sum(gained) - sum(c - 1 for c in lost)
        if quadratic_delta >= 0:
            return False
        return max(gained) <= graph.max_pair_repeats()
