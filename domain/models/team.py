"""
Team domain model.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Team:
    """
    A team taking part in a progressive dinner.

    This is a pure domain model with no infrastructure dependencies. The
    scheduler treats teams as read-only; capacity is filled in by TeamSet
    validation from the dinner's group size.
    """

    team_id: str
    members: tuple[str, ...] = field(default_factory=tuple)
    address: str | None = None
    capacity: int = 0  # guests this team hosts in its course
    dinner_id: str | None = None

    def __post_init__(self):
        if not self.team_id:
            raise ValueError("Team must have a non-empty team_id")
        # Accept lists from callers but keep the model hashable
        if not isinstance(self.members, tuple):
            object.__setattr__(self, "members", tuple(self.members))

    @property
    def display_name(self) -> str:
        if self.members:
            return " & ".join(self.members)
        return self.team_id

    def __str__(self) -> str:
        return f"Team {self.team_id}: {self.display_name}"
