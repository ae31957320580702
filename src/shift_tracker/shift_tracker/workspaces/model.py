from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Workspace:
    """A workplace an employee can clock in at."""

    workspace_id: int
    name: str
    is_active: bool = True
