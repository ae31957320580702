from __future__ import annotations

from typing import Protocol, Sequence

from .model import Workspace


class WorkspaceRepository(Protocol):
    def list_active(self) -> Sequence[Workspace]:
        raise NotImplementedError
