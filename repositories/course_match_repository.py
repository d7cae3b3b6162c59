"""
Repository for computed course matches.
"""

import json

from domain.models.schedule import CourseMatch, Plan
from repositories.base_repository import BaseRepository
from repositories.interfaces import ICourseMatchRepository


class CourseMatchRepository(BaseRepository, ICourseMatchRepository):
    """
    Stores the plan of a dinner: one course_match row per group, guests in
    course_match_guest, and a schedule_run summary row.

    A dinner has at most one stored plan; saving a new plan replaces it.
    """

    def replace_for_dinner(self, dinner_id: str, plan: Plan) -> None:
        """Atomically replace the stored plan of a dinner."""
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                DELETE FROM course_match_guest
                WHERE match_id IN (SELECT id FROM course_match WHERE dinner_id = ?)
                """,
                (dinner_id,),
            )
            cursor.execute("DELETE FROM course_match WHERE dinner_id = ?", (dinner_id,))

            for position, match in enumerate(plan.course_matches):
                cursor.execute(
                    """
                    INSERT INTO course_match (id, dinner_id, course_id, host_team_id, position)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (match.match_id, dinner_id, match.course_id, match.host_team_id, position),
                )
                cursor.executemany(
                    "INSERT INTO course_match_guest (match_id, team_id, position) VALUES (?, ?, ?)",
                    [(match.match_id, guest, i) for i, guest in enumerate(match.guest_team_ids)],
                )

            cursor.execute(
                """
                INSERT INTO schedule_run (
                    dinner_id, seed, state, repeat_meetings, max_pair_repeats,
                    lower_bound, attempts, non_hosting_team_ids
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(dinner_id) DO UPDATE SET
                    seed = excluded.seed,
                    state = excluded.state,
                    repeat_meetings = excluded.repeat_meetings,
                    max_pair_repeats = excluded.max_pair_repeats,
                    lower_bound = excluded.lower_bound,
                    attempts = excluded.attempts,
                    non_hosting_team_ids = excluded.non_hosting_team_ids,
                    created_at = CURRENT_TIMESTAMP
                """,
                (
                    dinner_id,
                    plan.seed,
                    plan.state.value,
                    plan.score.repeat_meetings,
                    plan.score.max_pair_repeats,
                    plan.lower_bound,
                    plan.attempts,
                    json.dumps(list(plan.non_hosting_team_ids)),
                ),
            )

    def get_for_dinner(self, dinner_id: str) -> list[CourseMatch]:
        """Get all matches of a dinner in plan order."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT id, course_id, host_team_id FROM course_match
                WHERE dinner_id = ?
                ORDER BY position
                """,
                (dinner_id,),
            )
            rows = cursor.fetchall()
            guests = self._guests_by_match(cursor, [row["id"] for row in rows])
            return [self._row_to_match(row, guests.get(row["id"], ())) for row in rows]

    def get_for_team(self, dinner_id: str, team_id: str) -> list[CourseMatch]:
        """Get the matches a team hosts or visits, in plan order."""
        return [m for m in self.get_for_dinner(dinner_id) if m.includes(team_id)]

    def get_run_summary(self, dinner_id: str) -> dict | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM schedule_run WHERE dinner_id = ?", (dinner_id,))
            row = cursor.fetchone()
            if not row:
                return None
            summary = dict(row)
            summary["non_hosting_team_ids"] = json.loads(row["non_hosting_team_ids"] or "[]")
            return summary

    @staticmethod
    def _guests_by_match(cursor, match_ids: list[str]) -> dict[str, tuple[str, ...]]:
        if not match_ids:
            return {}
        placeholders = ",".join("?" * len(match_ids))
        cursor.execute(
            f"""
            SELECT match_id, team_id FROM course_match_guest
            WHERE match_id IN ({placeholders})
            ORDER BY match_id, position
            """,
            match_ids,
        )
        guests: dict[str, list[str]] = {}
        for row in cursor.fetchall():
            guests.setdefault(row["match_id"], []).append(row["team_id"])
        return {match_id: tuple(ids) for match_id, ids in guests.items()}

    @staticmethod
    def _row_to_match(row, guest_ids: tuple[str, ...]) -> CourseMatch:
        return CourseMatch(
            match_id=row["id"],
            course_id=row["course_id"],
            host_team_id=row["host_team_id"],
            guest_team_ids=guest_ids,
        )
