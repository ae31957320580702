from __future__ import annotations

from flask import Flask

from ..common.web import login_required, ok
from ..core.constants import CUSTOM_WORKPLACE


def register(app: Flask, container) -> None:
    @app.route("/api/workspaces", methods=["GET"], endpoint="workspaces")
    @login_required
    def workspaces():
        items = container.workspace_service.list_active()
        return ok(
            {
                "workspaces": [{"id": w.workspace_id, "name": w.name} for w in items],
                "default": container.workspace_service.default_workplace(),
                "custom_option": CUSTOM_WORKPLACE,
            }
        )
