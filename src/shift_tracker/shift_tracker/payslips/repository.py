from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Payslip


class PayslipRepository(Protocol):
    def get_by_id(self, payslip_id: int) -> Optional[Payslip]:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[Payslip]:
        """Newest upload first."""

        raise NotImplementedError

    def upsert(
        self,
        *,
        user_id: int,
        year: int,
        month: int,
        file_url: str,
        storage_path: str,
        uploaded_by: int,
    ) -> int:
        """Create or replace the payslip of (user_id, year, month). Returns its id."""

        raise NotImplementedError

    def delete(self, payslip_id: int) -> bool:
        raise NotImplementedError
