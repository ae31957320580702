from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .core.constants import PAYSLIP_BUCKET
from .database.connection import DBConfig, DatabaseConnection
from .days_off.mysql_day_off_repository import MySQLDayOffRepository
from .days_off.service import DayOffService
from .payslips.mysql_payslip_repository import MySQLPayslipRepository
from .payslips.service import PayslipService
from .payslips.storage import FileStorage
from .petty_cash.mysql_petty_cash_repository import MySQLCashEntryRepository, MySQLMovementTypeRepository
from .petty_cash.service import PettyCashService
from .time_entries.mysql_time_entry_repository import MySQLTimeEntryRepository
from .time_entries.service import TimeEntryService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, UserService
from .workspaces.mysql_workspace_repository import MySQLWorkspaceRepository
from .workspaces.service import WorkspaceService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: MySQLUserRepository
    workspaces_repo: MySQLWorkspaceRepository
    time_entries_repo: MySQLTimeEntryRepository
    payslips_repo: MySQLPayslipRepository
    days_off_repo: MySQLDayOffRepository
    movement_types_repo: MySQLMovementTypeRepository
    cash_entries_repo: MySQLCashEntryRepository

    payslip_storage: FileStorage

    auth_service: AuthService
    user_service: UserService
    workspace_service: WorkspaceService
    time_entry_service: TimeEntryService
    payslip_service: PayslipService
    day_off_service: DayOffService
    petty_cash_service: PettyCashService


def build_container(
    *,
    db_config: dict,
    storage_dir: str,
    public_base_url: str = "",
    admin_emails: Iterable[str] = (),
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    users_repo = MySQLUserRepository(conn)
    workspaces_repo = MySQLWorkspaceRepository(conn)
    time_entries_repo = MySQLTimeEntryRepository(conn)
    payslips_repo = MySQLPayslipRepository(conn)
    days_off_repo = MySQLDayOffRepository(conn)
    movement_types_repo = MySQLMovementTypeRepository(conn)
    cash_entries_repo = MySQLCashEntryRepository(conn)

    payslip_storage = FileStorage(storage_dir, PAYSLIP_BUCKET, public_base_url=public_base_url)

    return Container(
        conn=conn,
        users_repo=users_repo,
        workspaces_repo=workspaces_repo,
        time_entries_repo=time_entries_repo,
        payslips_repo=payslips_repo,
        days_off_repo=days_off_repo,
        movement_types_repo=movement_types_repo,
        cash_entries_repo=cash_entries_repo,
        payslip_storage=payslip_storage,
        auth_service=AuthService(users_repo, admin_emails=admin_emails),
        user_service=UserService(users_repo),
        workspace_service=WorkspaceService(workspaces_repo),
        time_entry_service=TimeEntryService(time_entries_repo),
        payslip_service=PayslipService(payslips_repo, payslip_storage, users_repo),
        day_off_service=DayOffService(days_off_repo, users_repo),
        petty_cash_service=PettyCashService(movement_types_repo, cash_entries_repo),
    )
