from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall
from .model import Workspace
from .repository import WorkspaceRepository


class MySQLWorkspaceRepository(WorkspaceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self) -> Sequence[Workspace]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, ativo FROM workspaces WHERE ativo=1 ORDER BY id")
            return [
                Workspace(workspace_id=int(r["id"]), name=r["name"], is_active=as_bool(r["ativo"]))
                for r in fetchall(cur)
            ]
