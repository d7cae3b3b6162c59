"""
Repository for teams and their members.
"""

from domain.models.team import Team
from repositories.base_repository import BaseRepository
from repositories.interfaces import ITeamRepository


class TeamRepository(BaseRepository, ITeamRepository):
    """
    Handles CRUD operations for team and team_member records.

    Teams keep their registration position so rosters load in sign-up order.
    """

    def add(self, dinner_id: str, members: list[str], address: str | None = None) -> Team:
        """
        Register a team and its members in one transaction.

        Returns:
            The stored Team (capacity is filled in later by TeamSet validation)
        """
        team = Team(team_id=self.new_id(), members=tuple(members), address=address, dinner_id=dinner_id)
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT COALESCE(MAX(position), -1) + 1 FROM team WHERE dinner_id = ?",
                (dinner_id,),
            )
            position = cursor.fetchone()[0]
            cursor.execute(
                "INSERT INTO team (id, dinner_id, address, position) VALUES (?, ?, ?, ?)",
                (team.team_id, dinner_id, address, position),
            )
            cursor.executemany(
                "INSERT INTO team_member (id, name, team_id, position) VALUES (?, ?, ?, ?)",
                [(self.new_id(), name, team.team_id, i) for i, name in enumerate(team.members)],
            )
        return team

    def get_by_id(self, team_id: str) -> Team | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT id, dinner_id, address FROM team WHERE id = ?", (team_id,))
            row = cursor.fetchone()
            if not row:
                return None
            members = self._members_by_team(cursor, [team_id])
            return self._row_to_team(row, members.get(team_id, ()))

    def get_for_dinner(self, dinner_id: str) -> list[Team]:
        """Get all teams of a dinner in registration order."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT id, dinner_id, address FROM team WHERE dinner_id = ? ORDER BY position, id",
                (dinner_id,),
            )
            rows = cursor.fetchall()
            members = self._members_by_team(cursor, [row["id"] for row in rows])
            return [self._row_to_team(row, members.get(row["id"], ())) for row in rows]

    def count_for_dinner(self, dinner_id: str) -> int:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) FROM team WHERE dinner_id = ?", (dinner_id,))
            return cursor.fetchone()[0]

    @staticmethod
    def _members_by_team(cursor, team_ids: list[str]) -> dict[str, tuple[str, ...]]:
        if not team_ids:
            return {}
        placeholders = ",".join("?" * len(team_ids))
        cursor.execute(
            f"""
            SELECT team_id, name FROM team_member
            WHERE team_id IN ({placeholders})
            ORDER BY team_id, position
            """,
            team_ids,
        )
        members: dict[str, list[str]] = {}
        for row in cursor.fetchall():
            members.setdefault(row["team_id"], []).append(row["name"])
        return {team_id: tuple(names) for team_id, names in members.items()}

    @staticmethod
    def _row_to_team(row, members: tuple[str, ...]) -> Team:
        return Team(
            team_id=row["id"],
            members=members,
            address=row["address"],
            dinner_id=row["dinner_id"],
        )
