from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import FieldWorkVisit


class FieldVisitRepository(Protocol):
    def create(self, visit: FieldWorkVisit) -> None:
        raise NotImplementedError

    def get_by_id(self, visit_id: str) -> Optional[FieldWorkVisit]:
        raise NotImplementedError

    def get_latest_for_employee(self, employee_id: str) -> Optional[FieldWorkVisit]:
        """Most recently started visit, any status."""
        raise NotImplementedError

    def get_active_for_employee(self, employee_id: str) -> Optional[FieldWorkVisit]:
        """Most recently started visit still in progress."""
        raise NotImplementedError

    def update_end_location(
        self,
        visit_id: str,
        *,
        latitude: float,
        longitude: float,
        address: Optional[str],
        distance: Decimal,
    ) -> bool:
        raise NotImplementedError

    def complete(
        self,
        visit_id: str,
        *,
        end_time: datetime,
        latitude: Optional[float],
        longitude: Optional[float],
        address: Optional[str],
        distance: Decimal,
        notes: Optional[str],
    ) -> bool:
        """Close an in-progress visit. False when it was already completed."""
        raise NotImplementedError

    def list_started_between(self, employee_id: str, start: datetime, end: datetime) -> Sequence[FieldWorkVisit]:
        raise NotImplementedError
