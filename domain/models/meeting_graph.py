"""
Pairwise meeting counts between teams within one plan.
"""

from collections.abc import Iterable, Sequence
from itertools import combinations


class MeetingGraph:
    """
    Symmetric relation "grouped together N times" over team pairs.

    Each trial owns its own instance; it is not thread-safe. Pairs are
    stored canonically with the smaller id first to avoid duplicates.
    """

    def __init__(self):
        self._counts: dict[tuple[str, str], int] = {}

    @staticmethod
    def _canonical_pair(a: str, b: str) -> tuple[str, str]:
        return (a, b) if a < b else (b, a)

    def meetings(self, a: str, b: str) -> int:
        if a == b:
            return 0
        return self._counts.get(self._canonical_pair(a, b), 0)

    def have_met(self, a: str, b: str) -> bool:
        return self.meetings(a, b) > 0

    def meetings_with(self, team_id: str, members: Iterable[str]) -> int:
        """Total prior meetings between team_id and every team in members."""
        return sum(self.meetings(team_id, other) for other in members)

    def record_group(self, members: Sequence[str]) -> None:
        """Count one meeting for every pair in the group."""
        for a, b in combinations(members, 2):
            if a == b:
                raise ValueError(f"Team {a} cannot appear twice in one group")
            pair = self._canonical_pair(a, b)
            self._counts[pair] = self._counts.get(pair, 0) + 1

    def forget_group(self, members: Sequence[str]) -> None:
        """Undo record_group() for the same members."""
        for a, b in combinations(members, 2):
            pair = self._canonical_pair(a, b)
            count = self._counts.get(pair, 0)
            if count <= 0:
                raise ValueError(f"Teams {a} and {b} have no recorded meeting to forget")
            if count == 1:
                del self._counts[pair]
            else:
                self._counts[pair] = count - 1

    def repeat_meetings(self) -> int:
        return sum(count - 1 for count in self._counts.values() if count > 1)

    def max_pair_repeats(self) -> int:
        return max((count - 1 for count in self._counts.values()), default=0)

    def distinct_pairs(self) -> int:
        return len(self._counts)

    def pair_counts(self) -> dict[tuple[str, str], int]:
        return dict(self._counts)

    def copy(self) -> "MeetingGraph":
        clone = MeetingGraph()
        clone._counts = dict(self._counts)
        return clone

    def __len__(self) -> int:
        return len(self._counts)
