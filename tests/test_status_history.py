"""Status history log tests."""

from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import select, text

from workforce_api.models.domain.employee import EmployeeStatus
from workforce_api.models.dto.status import SeparationRequest
from workforce_api.models.orm import StatusHistoryORM
from workforce_api.repositories.status_history_repository import StatusHistoryRepository
from workforce_api.services.separation_service import SeparationService
from workforce_api.services.status_history_service import StatusHistoryService
from workforce_api.services.status_transition_service import StatusTransitionService

from tests.factories import history_of, make_employee, reload_employee


class TestStatusHistory:
    """Append-only history."""

    async def test_append_keeps_only_snapshot_fields(self, session):
        employee = await make_employee(session)
        log = StatusHistoryService(session)

        entry = await log.append(
            employee.id,
            EmployeeStatus.ACTIVE,
            EmployeeStatus.ON_HOLD,
            note="Medical leave",
            snapshot={"reason": "Leave", "not_a_column": 1},
        )
        await session.commit()

        assert entry.old_status == "active"
        assert entry.new_status == "on_hold"
        assert entry.reason == "Leave"
        assert entry.note == "Medical leave"
        assert entry.changed_at is not None

    async def test_list_is_newest_first(self, session, terminator):
        employee = await make_employee(session)
        transitions = StatusTransitionService(session)

        await transitions.change_status(employee.id, "on_hold", terminator)
        await transitions.change_status(employee.id, "active", terminator)
        await SeparationService(session).separate(
            employee.id,
            SeparationRequest(separation_type="terminated", separation_date=date(2024, 6, 1)),
            terminator,
        )

        entries = await StatusHistoryService(session).list_for_employee(employee.id)
        assert [(e.old_status, e.new_status) for e in entries] == [
            ("active", "terminated"),
            ("on_hold", "active"),
            ("active", "on_hold"),
        ]


    async def test_entries_cannot_be_modified(self, session):
        employee = await make_employee(session)
        entry = await StatusHistoryService(session).append(
            employee.id, EmployeeStatus.ACTIVE, EmployeeStatus.ON_HOLD
        )
        await session.commit()

        with pytest.raises(TypeError):
            await StatusHistoryRepository(session).apply(entry, new_status="active")

        stored = await history_of(session, employee.id)
        assert [e.new_status for e in stored] == ["on_hold"]

    async def test_database_stamps_changed_at_on_plain_insert(self, session):
        employee = await make_employee(session)
        entry_id = uuid4()

        await session.execute(
            text(
                "INSERT INTO employee_status_history (id, employee_id, new_status) "
                "VALUES (:id, :employee_id, 'on_hold')"
            ),
            {"id": entry_id.hex, "employee_id": employee.id.hex},
        )
        await session.commit()

        result = await session.execute(
            select(StatusHistoryORM.changed_at).where(StatusHistoryORM.id == entry_id)
        )
        assert isinstance(result.scalar_one(), datetime)

    async def test_clearance_amount_is_stored_as_decimal(self, session, terminator):
        employee = await make_employee(session)
        employee_id = employee.id

        await SeparationService(session).separate(
            employee_id,
            SeparationRequest(
                separation_type="terminated",
                separation_date=date(2024, 6, 1),
                clearance_done=True,
                clearance_amount="1234.565",
                clearance_cheque_number="CHQ-12",
            ),
            terminator,
        )

        session.expire_all()
        stored = (await history_of(session, employee_id))[0]
        refreshed = await reload_employee(session, employee_id)
        assert stored.clearance_amount == Decimal("1234.57")
        assert isinstance(stored.clearance_amount, Decimal)
        assert refreshed.clearance_amount == Decimal("1234.57")
