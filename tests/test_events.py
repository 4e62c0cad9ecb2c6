"""Tests for change notifications."""

import asyncio
from uuid import uuid4

from payroll_admin.services import ChangeEmitter, ChangeNotification
from payroll_admin.services.events import PAYROLL_PERIOD, PAYROLL_RECORD


def record_changed(action: str = "updated") -> ChangeNotification:
    return ChangeNotification(
        entity_type=PAYROLL_RECORD,
        action=action,
        entity_id=uuid4(),
        period_id=uuid4(),
        employee_id=uuid4(),
    )


class TestChangeEmitter:
    """Test subscription and delivery."""

    def test_delivers_to_matching_handlers(self):
        emitter = ChangeEmitter()
        records, periods, everything = [], [], []
        emitter.on(PAYROLL_RECORD, records.append)
        emitter.on(PAYROLL_PERIOD, periods.append)
        emitter.on_all(everything.append)

        notification = record_changed()
        emitter.emit(notification)

        assert records == [notification]
        assert periods == []
        assert everything == [notification]

    def test_subscribe_to_several_types(self):
        emitter = ChangeEmitter()
        seen = []
        emitter.on([PAYROLL_RECORD, PAYROLL_PERIOD], seen.append)

        emitter.emit(record_changed())
        emitter.emit(ChangeNotification(entity_type=PAYROLL_PERIOD, action="created"))

        assert len(seen) == 2

    def test_off_unsubscribes(self):
        emitter = ChangeEmitter()
        seen = []
        emitter.on_all(seen.append)
        emitter.off(seen.append)

        emitter.emit(record_changed())

        assert seen == []

    def test_failing_handler_does_not_stop_others(self):
        """One broken subscriber must not starve the rest."""
        emitter = ChangeEmitter()
        seen = []

        def broken(notification):
            raise RuntimeError("cache offline")

        emitter.on_all(broken)
        emitter.on_all(seen.append)

        errors = emitter.emit(record_changed())

        assert len(seen) == 1
        assert len(errors) == 1
        assert isinstance(errors[0], RuntimeError)


class TestChangeBatch:
    """Test batched delivery."""

    def test_batch_holds_until_exit(self):
        emitter = ChangeEmitter()
        seen = []
        emitter.on_all(seen.append)

        with emitter.batch():
            emitter.emit(record_changed("approved"))
            emitter.emit(record_changed("approved"))
            assert seen == []

        assert [n.action for n in seen] == ["approved", "approved"]

    def test_batch_discarded_on_error(self):
        emitter = ChangeEmitter()
        seen = []
        emitter.on_all(seen.append)

        try:
            with emitter.batch():
                emitter.emit(record_changed())
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        assert seen == []
        emitter.emit(record_changed())
        assert len(seen) == 1

    async def test_concurrent_batches_are_independent(self):
        """A batch opened in one task neither captures nor drops another task's."""
        emitter = ChangeEmitter()
        seen = []
        emitter.on_all(seen.append)
        first_open = asyncio.Event()

        async def first():
            with emitter.batch():
                emitter.emit(record_changed("first"))
                first_open.set()
                await asyncio.sleep(0.01)
                emitter.emit(record_changed("first"))

        async def second():
            await first_open.wait()
            with emitter.batch():
                emitter.emit(record_changed("second"))
            emitter.emit(record_changed("direct"))

        await asyncio.gather(first(), second())

        assert [n.action for n in seen] == ["second", "direct", "first", "first"]

    def test_nested_batches_deliver_at_their_own_exit(self):
        emitter = ChangeEmitter()
        seen = []
        emitter.on_all(seen.append)

        with emitter.batch():
            with emitter.batch():
                emitter.emit(record_changed("inner"))
            emitter.emit(record_changed("outer"))
            assert [n.action for n in seen] == ["inner"]

        assert [n.action for n in seen] == ["inner", "outer"]


class TestChangeNotification:
    """Test serialization."""

    def test_to_dict(self):
        notification = record_changed("created")
        data = notification.to_dict()

        assert data["entity_type"] == "payroll_record"
        assert data["action"] == "created"
        assert data["entity_id"] == str(notification.entity_id)
        assert data["occurred_at"].endswith("+00:00")

    def test_collection_level_change_has_no_entity(self):
        data = ChangeNotification(entity_type=PAYROLL_RECORD, action="generated").to_dict()
        assert data["entity_id"] is None
