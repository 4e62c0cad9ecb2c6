"""Payroll period lifecycle: create, edit, process, approve, delete."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from payroll_admin.models import PayrollPeriod, utcnow
from payroll_admin.services.errors import (
    ConflictError,
    LockedError,
    NotFoundError,
    ValidationError,
)
from payroll_admin.services.events import PAYROLL_PERIOD, ChangeEmitter, ChangeNotification
from payroll_admin.services.identity import IdentityProvider
from payroll_admin.services.results import returns_result
from payroll_admin.services.state_machine import (
    PayFrequency,
    PayrollPeriodStateMachine,
    PeriodStatus,
)
from payroll_admin.services.store import Page, PayrollStore
from payroll_admin.services.validation import parse_date, parse_uuid

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
UPDATABLE_FIELDS = ("name", "start_date", "end_date", "frequency", "description", "status")


class PayrollPeriodService:
    """Service for managing payroll period lifecycle.

    Operations:
    - create: new period in draft, attributed to the acting identity
    - update: edit metadata; limited status moves; refused once paid
    - process: draft → processing, stamps processed_at
    - approve: processing → approved, stamps approved_at/approved_by
    - delete: refused once paid, or when records exist without cascade
    """

    def __init__(
        self,
        store: PayrollStore,
        identity: IdentityProvider,
        emitter: ChangeEmitter | None = None,
    ):
        self.store = store
        self.identity = identity
        self.emitter = emitter or ChangeEmitter()

    @returns_result
    async def create(
        self,
        name: str,
        start_date: date | str,
        end_date: date | str,
        frequency: str = PayFrequency.MONTHLY.value,
        description: str | None = None,
    ) -> PayrollPeriod:
        """Create a draft payroll period."""
        clean_name = self._validate_name(name)
        start = parse_date(start_date, "start_date")
        end = parse_date(end_date, "end_date")
        self._validate_dates(start, end)
        self._validate_frequency(frequency)
        self._validate_description(description)

        actor = await self.identity.get_current_identity()
        period = PayrollPeriod(
            name=clean_name,
            start_date=start,
            end_date=end,
            frequency=frequency,
            description=description,
            status=PeriodStatus.DRAFT.value,
            total_gross=Decimal("0"),
            total_net=Decimal("0"),
            created_by=actor.id,
        )
        period = await self.store.insert_period(period)

        logger.info("Created payroll period %s (%s) by %s", period.id, period.name, actor.id)
        self._notify(period, "created")
        return period

    @returns_result
    async def update(self, period_id: UUID | str, **changes: Any) -> PayrollPeriod:
        """Edit a period that is not yet paid."""
        unknown = [name for name in changes if name not in UPDATABLE_FIELDS]
        if unknown:
            raise ValidationError(f"Unknown field(s): {', '.join(unknown)}", field=unknown[0])

        period = await self._get_period(parse_uuid(period_id, "period_id"))
        self._ensure_unlocked(period)

        values: dict[str, Any] = {}
        if "name" in changes:
            values["name"] = self._validate_name(changes["name"])
        if "frequency" in changes:
            self._validate_frequency(changes["frequency"])
            values["frequency"] = changes["frequency"]
        if "description" in changes:
            self._validate_description(changes["description"])
            values["description"] = changes["description"]

        start = (
            parse_date(changes["start_date"], "start_date")
            if "start_date" in changes
            else period.start_date
        )
        end = parse_date(changes["end_date"], "end_date") if "end_date" in changes else period.end_date
        if "start_date" in changes or "end_date" in changes:
            self._validate_dates(start, end)
            values["start_date"] = start
            values["end_date"] = end

        if "status" in changes and changes["status"] != period.status:
            values.update(self._status_change(period, changes["status"]))

        if not values:
            return period

        period = await self.store.update_period(period.id, values)
        self._notify(period, "updated")
        return period

    @returns_result
    async def process(self, period_id: UUID | str) -> PayrollPeriod:
        """draft → processing."""
        period = await self._get_period(parse_uuid(period_id, "period_id"))
        PayrollPeriodStateMachine.validate_transition(period.status, PeriodStatus.PROCESSING.value)

        period = await self.store.update_period(
            period.id,
            {"status": PeriodStatus.PROCESSING.value, "processed_at": utcnow()},
        )
        logger.info("Payroll period %s processing", period.id)
        self._notify(period, "processing")
        return period

    @returns_result
    async def approve(self, period_id: UUID | str) -> PayrollPeriod:
        """processing → approved, attributed to the acting identity."""
        period = await self._get_period(parse_uuid(period_id, "period_id"))
        PayrollPeriodStateMachine.validate_transition(period.status, PeriodStatus.APPROVED.value)

        actor = await self.identity.get_current_identity()
        period = await self.store.update_period(
            period.id,
            {
                "status": PeriodStatus.APPROVED.value,
                "approved_at": utcnow(),
                "approved_by": actor.id,
            },
        )
        logger.info("Payroll period %s approved by %s", period.id, actor.id)
        self._notify(period, "approved")
        return period

    @returns_result
    async def delete(self, period_id: UUID | str, cascade: bool = False) -> UUID:
        """Delete a period; its records go too only with ``cascade=True``."""
        period = await self._get_period(parse_uuid(period_id, "period_id"))
        self._ensure_unlocked(period)

        record_count = await self.store.count_records_for_period(period.id)
        if record_count and not cascade:
            raise ConflictError(
                f"Payroll period {period.id} has {record_count} payroll records; "
                "pass cascade=True to delete them with the period",
                {"record_count": record_count},
            )
        if record_count:
            deleted = await self.store.delete_records_for_period(period.id)
            logger.warning("Cascade-deleted %d payroll records of period %s", deleted, period.id)

        await self.store.delete_period(period.id)
        logger.info("Deleted payroll period %s", period.id)
        self._notify(period, "deleted")
        return period.id

    @returns_result
    async def get(self, period_id: UUID | str) -> PayrollPeriod:
        return await self._get_period(parse_uuid(period_id, "period_id"))

    @returns_result
    async def list(
        self, status: str | None = None, page: int = 1, page_size: int = 20
    ) -> Page[PayrollPeriod]:
        if status and status not in {s.value for s in PeriodStatus}:
            raise ValidationError(f"Unknown status '{status}'", field="status")
        return await self.store.list_periods(status=status, page=page, page_size=page_size)

    def _status_change(self, period: PayrollPeriod, to_status: Any) -> dict[str, Any]:
        if not isinstance(to_status, str) or to_status not in {s.value for s in PeriodStatus}:
            raise ValidationError(f"Unknown status '{to_status}'", field="status")
        PayrollPeriodStateMachine.validate_update_transition(period.status, to_status)

        values: dict[str, Any] = {"status": to_status}
        if to_status == PeriodStatus.PROCESSING.value:
            values["processed_at"] = utcnow()
        elif to_status == PeriodStatus.DRAFT.value:
            values["processed_at"] = None
        return values

    async def _get_period(self, period_id: UUID) -> PayrollPeriod:
        period = await self.store.get_period(period_id)
        if period is None:
            raise NotFoundError("payroll_period", period_id)
        return period

    def _ensure_unlocked(self, period: PayrollPeriod) -> None:
        if PayrollPeriodStateMachine.is_locked(period.status):
            raise LockedError(
                f"Payroll period {period.id} is paid and cannot be changed",
                {"period_id": str(period.id)},
            )

    def _validate_name(self, name: Any) -> str:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("name is required", field="name")
        clean = name.strip()
        if len(clean) > NAME_MAX_LENGTH:
            raise ValidationError(
                f"name must be at most {NAME_MAX_LENGTH} characters", field="name"
            )
        return clean

    def _validate_dates(self, start: date, end: date) -> None:
        if end <= start:
            raise ValidationError("end_date must be after start_date", field="end_date")

    def _validate_frequency(self, frequency: Any) -> None:
        if not isinstance(frequency, str) or frequency not in {f.value for f in PayFrequency}:
            raise ValidationError(
                f"frequency must be one of: {', '.join(f.value for f in PayFrequency)}",
                field="frequency",
            )

    def _validate_description(self, description: Any) -> None:
        if description is None:
            return
        if not isinstance(description, str) or len(description) > DESCRIPTION_MAX_LENGTH:
            raise ValidationError(
                f"description must be text of at most {DESCRIPTION_MAX_LENGTH} characters",
                field="description",
            )

    def _notify(self, period: PayrollPeriod, action: str) -> None:
        self.emitter.emit(
            ChangeNotification(
                entity_type=PAYROLL_PERIOD,
                action=action,
                entity_id=period.id,
                period_id=period.id,
            )
        )
