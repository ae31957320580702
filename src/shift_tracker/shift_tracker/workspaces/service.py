from __future__ import annotations

from typing import Optional

from ..core.constants import CUSTOM_WORKPLACE
from ..core.exceptions import ValidationError
from .model import Workspace
from .repository import WorkspaceRepository


class WorkspaceService:
    def __init__(self, workspaces: WorkspaceRepository):
        self._workspaces = workspaces

    def list_active(self) -> list[Workspace]:
        return list(self._workspaces.list_active())

    def default_workplace(self) -> Optional[str]:
        active = self.list_active()
        return active[0].name if active else None

    @staticmethod
    def resolve_workplace(selected: Optional[str], custom: Optional[str] = None) -> str:
        """Turn the selector value into the workplace name stored on the time entry.

        "Otro" means the employee typed the workplace by hand.
        """

        selected = (selected or "").strip()
        if selected == CUSTOM_WORKPLACE:
            custom = (custom or "").strip()
            if not custom:
                raise ValidationError("Indica el lugar de trabajo")
            return custom
        if not selected:
            raise ValidationError("Selecciona un lugar de trabajo")
        return selected
