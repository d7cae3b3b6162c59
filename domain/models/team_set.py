"""
Validated team roster for one scheduling request.
"""

from collections.abc import Iterable
from dataclasses import replace

from domain.exceptions import EMPTY_ROSTER, INVALID_GROUP_SIZE, ConfigError
from domain.models.team import Team


class TeamSet:
    """
    Immutable, validated collection of teams sharing one group size.

    Build instances with TeamSet.validate(); the constructor trusts its input.
    Roster order is preserved because it drives the ROSTER host policy.
    """

    def __init__(self, teams: tuple[Team, ...], group_size: int):
        self._teams = teams
        self._by_id = {team.team_id: team for team in teams}
        self.group_size = group_size

    @classmethod
    def validate(cls, teams: Iterable[Team], group_size: int) -> "TeamSet":
        """
        Validate a roster against the dinner's group size.

        Raises:
            ConfigError: INVALID_GROUP_SIZE, EMPTY_ROSTER, DUPLICATE_TEAM or
                NOT_DIVISIBLE
        """
        if group_size < 1:
            raise ConfigError(INVALID_GROUP_SIZE, f"Group size must be at least 1, got {group_size}")

        roster = list(teams)
        if not roster:
            raise ConfigError(EMPTY_ROSTER, "Cannot schedule a dinner without teams")

        seen: set[str] = set()
        for team in roster:
            if team.team_id in seen:
                raise ConfigError.duplicate_team(team.team_id)
            seen.add(team.team_id)

        if len(roster) % group_size != 0:
            raise ConfigError.not_divisible(len(roster), group_size)

        capacity = group_size - 1
        validated = tuple(
            team if team.capacity == capacity else replace(team, capacity=capacity)
            for team in roster
        )
        return cls(validated, group_size)

    @property
    def team_ids(self) -> tuple[str, ...]:
        return tuple(team.team_id for team in self._teams)

    @property
    def groups_per_course(self) -> int:
        return len(self._teams) // self.group_size

    def team(self, team_id: str) -> Team:
        return self._by_id[team_id]

    def __contains__(self, team_id: object) -> bool:
        return team_id in self._by_id

    def __iter__(self):
        return iter(self._teams)

    def __len__(self) -> int:
        return len(self._teams)

    def __repr__(self) -> str:
        return f"TeamSet(teams={len(self._teams)}, group_size={self.group_size})"
