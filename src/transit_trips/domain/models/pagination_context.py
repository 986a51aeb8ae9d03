"""Continuation state for fetching earlier or later trip pages."""

from dataclasses import dataclass
from datetime import datetime

from transit_trips.domain.models.location import Location


@dataclass(eq=False)
class PaginationContext:
    """Opaque, caller-owned state for incremental trip queries.

    Adapters mutate the same instance on every page fetch. It must not be
    shared by two in-flight ``query_more_trips`` calls.
    """

    from_location: Location
    via_location: Location | None
    to_location: Location
    date: datetime
    earlier_token: str | None = None
    later_token: str | None = None

    def can_query_earlier(self) -> bool:
        return bool(self.earlier_token)

    def can_query_later(self) -> bool:
        return bool(self.later_token)

    def reset_tokens(self, earlier_token: str | None, later_token: str | None) -> None:
        """Take both cursors from the first page of a query."""
        self.earlier_token = earlier_token or None
        self.later_token = later_token or None

    def advance(self, later: bool, token: str | None) -> None:
        """Move the cursor of the direction just fetched.

        The opposite cursor still points past the outermost page seen so far
        and is left alone. An absent token marks the direction exhausted.
        """
        if later:
            self.later_token = token or None
        else:
            self.earlier_token = token or None
