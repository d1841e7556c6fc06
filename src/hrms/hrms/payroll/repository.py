from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import PayrollRecord


class PayrollRepository(Protocol):
    def replace(self, record: PayrollRecord) -> None:
        """Store `record`, replacing any existing one for the same employee and month."""
        raise NotImplementedError

    def get_for_period(self, employee_id: str, month: int, year: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def list(self, *, employee_id: Optional[str] = None, limit: int = 200) -> Sequence[PayrollRecord]:
        raise NotImplementedError
