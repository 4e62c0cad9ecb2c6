"""Tests for bulk generation of payroll records."""

from decimal import Decimal
from uuid import uuid4

import pytest

from payroll_admin.models import PayrollRecord
from payroll_admin.services import ErrorKind, PayrollRecordGenerator
from payroll_admin.services.generator import NOTHING_TO_GENERATE
from payroll_admin.services.store import BatchInsertResult, FailedInsert


@pytest.fixture
def generator(services):
    return services.generator


class TestGenerate:
    """Test record generation for a period."""

    async def test_creates_one_pending_record_per_active_employee(
        self, generator, make_employee, period
    ):
        first = await make_employee(salary="3000", hourly_rate="20")
        second = await make_employee(salary="2500", hourly_rate="18")

        result = await generator.generate(period.id)

        assert result.success, result.message
        assert result.data.created == 2
        by_employee = {r.employee_id: r for r in result.data.records}
        assert by_employee[first.id].net_pay == Decimal("3000.00")
        assert by_employee[first.id].overtime_rate == Decimal("20.00")
        assert by_employee[second.id].base_salary == Decimal("2500.00")
        assert all(r.status == "pending" for r in result.data.records)

    async def test_skips_inactive_and_non_employee_roles(
        self, generator, make_employee, period
    ):
        eligible = await make_employee()
        await make_employee(status="inactive")
        await make_employee(status="terminated")
        await make_employee(role="hr")
        await make_employee(role="admin")

        result = await generator.generate(period.id)

        assert [r.employee_id for r in result.data.records] == [eligible.id]

    async def test_missing_hourly_rate_means_zero_overtime_rate(
        self, generator, make_employee, period
    ):
        await make_employee(hourly_rate=None)

        result = await generator.generate(period.id)

        assert result.data.records[0].overtime_rate == Decimal("0")

    async def test_second_run_creates_nothing(self, generator, make_employee, period, store):
        await make_employee()
        await make_employee()

        first = await generator.generate(period.id)
        second = await generator.generate(period.id)

        assert first.data.created == 2
        assert second.success is True
        assert second.data.created == 0
        assert second.data.nothing_to_generate is True
        assert second.data.message == NOTHING_TO_GENERATE
        assert len(await store.find_payroll_records(period_id=period.id)) == 2

    async def test_only_fills_gaps(self, generator, services, make_employee, period):
        existing = await make_employee()
        missing = await make_employee()
        await services.records.create(existing.id, period.id, base_salary="9999")

        result = await generator.generate(period.id)

        assert [r.employee_id for r in result.data.records] == [missing.id]

    async def test_no_employees_is_nothing_to_generate(self, generator, period):
        result = await generator.generate(period.id)

        assert result.success
        assert result.data.nothing_to_generate is True

    async def test_unknown_period(self, generator):
        result = await generator.generate(uuid4())
        assert result.error == ErrorKind.NOT_FOUND

    async def test_paid_period_is_locked(self, generator, make_employee, period, advance_period):
        await make_employee()
        await advance_period(period.id, "paid")

        result = await generator.generate(period.id)

        assert result.error == ErrorKind.LOCKED

    async def test_emits_one_period_scoped_notification(
        self, generator, make_employee, period, notifications
    ):
        await make_employee()
        await make_employee()
        notifications.clear()

        await generator.generate(period.id)

        assert len(notifications) == 1
        assert notifications[0].action == "generated"
        assert notifications[0].period_id == period.id
        assert notifications[0].entity_id is None


class FlakyStore:
    """Wraps a store and fails inserts for chosen employees."""

    def __init__(self, store, conflicts=(), broken=()):
        self._store = store
        self.conflicts = set(conflicts)
        self.broken = set(broken)

    def __getattr__(self, name):
        return getattr(self._store, name)

    async def insert_records(self, records: list[PayrollRecord]) -> BatchInsertResult:
        result = BatchInsertResult()
        for record in records:
            if record.employee_id in self.conflicts:
                result.failed.append(FailedInsert(record, ErrorKind.CONFLICT, "duplicate"))
            elif record.employee_id in self.broken:
                result.failed.append(FailedInsert(record, ErrorKind.STORE, "disk full"))
            else:
                result.inserted.append(await self._store.insert_record(record))
        return result


class TestGenerateFailures:
    """Test per-row insert failures."""

    async def test_concurrent_duplicates_are_skipped(self, store, emitter, make_employee, period):
        raced = await make_employee()
        fresh = await make_employee()
        generator = PayrollRecordGenerator(FlakyStore(store, conflicts=[raced.id]), emitter)

        result = await generator.generate(period.id)

        assert result.success
        assert result.data.created == 1
        assert result.data.skipped_employee_ids == [raced.id]
        assert result.data.records[0].employee_id == fresh.id

    async def test_other_failures_are_partial_failure(
        self, store, emitter, make_employee, period
    ):
        ok = await make_employee()
        broken = await make_employee()
        generator = PayrollRecordGenerator(FlakyStore(store, broken=[broken.id]), emitter)

        result = await generator.generate(period.id)

        assert result.success is False
        assert result.error == ErrorKind.PARTIAL_FAILURE
        assert result.details["succeeded"] == [str(ok.id)]
        assert result.details["failed"][0]["employee_id"] == str(broken.id)
        assert result.details["failed"][0]["reason"] == "store_error"
        # Inserted rows are kept
        assert len(await store.find_payroll_records(period_id=period.id)) == 1


class TestSqlAlchemyBatchInsert:
    """Test savepoint isolation of batch inserts against the real store."""

    async def test_duplicate_row_fails_alone(self, store, make_employee, period):
        first = await make_employee()
        second = await make_employee()

        def record_for(employee):
            return PayrollRecord(
                employee_id=employee.id,
                payroll_period_id=period.id,
                base_salary=Decimal("100"),
                net_pay=Decimal("100"),
                status="pending",
            )

        await store.insert_record(record_for(first))

        result = await store.insert_records([record_for(first), record_for(second)])

        assert [r.employee_id for r in result.inserted] == [second.id]
        assert len(result.failed) == 1
        assert result.failed[0].reason == ErrorKind.CONFLICT
        assert await store.count_records_for_period(period.id) == 2
