from __future__ import annotations

from typing import List


class PlanningError(Exception):
    """Base class for failures that stop a route planning request."""


class EndpointResolutionError(PlanningError):
    """One or both place names could not be geocoded."""

    def __init__(self, unresolved: List[str]) -> None:
        self.unresolved = list(unresolved)
        super().__init__("Could not find one or both locations: %s" % ", ".join(self.unresolved))


class NoRoutesError(PlanningError):
    """No route candidate could be produced for any requested profile."""

    def __init__(self, message: str = "No routes found") -> None:
        super().__init__(message)


class PlanCancelled(PlanningError):
    """The request was superseded by a newer one before it finished."""
