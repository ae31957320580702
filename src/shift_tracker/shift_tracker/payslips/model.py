from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Payslip:
    """Domain entity: a payslip (boleta de pago) file for one user and month."""

    payslip_id: int
    user_id: int
    year: int
    month: int
    file_url: str
    storage_path: str
    uploaded_by: Optional[int] = None
    created_at: Optional[datetime] = None
