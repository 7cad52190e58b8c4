"""Employment period ledger tests."""

from datetime import date
from uuid import uuid4

import pytest

from workforce_api.exceptions import PeriodAlreadyOpenError, PeriodNotFoundError
from workforce_api.services.employment_period_service import EmploymentPeriodService

from tests.factories import make_employee, periods_of


class TestOpenPeriod:
    """Opening periods."""

    async def test_open_period(self, session):
        employee = await make_employee(session, with_open_period=False)
        ledger = EmploymentPeriodService(session)

        period = await ledger.open_period(employee.id, date(2024, 2, 1))
        await session.commit()

        current = await ledger.current_open_period(employee.id)
        assert current is not None
        assert current.id == period.id
        assert current.start_date == date(2024, 2, 1)

    async def test_second_open_period_is_rejected(self, session):
        employee = await make_employee(session)
        ledger = EmploymentPeriodService(session)

        with pytest.raises(PeriodAlreadyOpenError):
            await ledger.open_period(employee.id, date(2024, 2, 1))

        open_periods = [p for p in await periods_of(session, employee.id) if p.end_date is None]
        assert len(open_periods) == 1

    async def test_database_rejects_second_open_period(self, session):
        """The partial unique index backs up the check."""
        from sqlalchemy.exc import IntegrityError

        from workforce_api.models.orm import EmploymentPeriodORM

        employee = await make_employee(session)
        session.add(EmploymentPeriodORM(employee_id=employee.id, start_date=date(2024, 1, 1)))

        with pytest.raises(IntegrityError):
            await session.flush()
        await session.rollback()


class TestClosePeriod:
    """Closing periods."""

    async def test_close_period_with_metadata(self, session):
        employee = await make_employee(session)
        ledger = EmploymentPeriodService(session)
        current = await ledger.current_open_period(employee.id)

        closed = await ledger.close_period(
            current.id,
            date(2024, 5, 31),
            {
                "separation_type": "resigned",
                "separation_reason": "Relocation",
                "eligible_for_rehire": True,
                "notice_days": 30,
                "unrelated": "ignored",
            },
        )
        await session.commit()

        assert closed.end_date == date(2024, 5, 31)
        assert closed.separation_type == "resigned"
        assert closed.notice_days == 30
        assert await ledger.current_open_period(employee.id) is None

    async def test_close_unknown_period(self, session):
        with pytest.raises(PeriodNotFoundError):
            await EmploymentPeriodService(session).close_period(uuid4(), date(2024, 1, 1))

    async def test_close_already_closed_period(self, session):
        employee = await make_employee(session)
        ledger = EmploymentPeriodService(session)
        current = await ledger.current_open_period(employee.id)
        await ledger.close_period(current.id, date(2024, 1, 31))
        await session.commit()

        with pytest.raises(PeriodNotFoundError):
            await ledger.close_period(current.id, date(2024, 2, 28))


class TestMostRecentClosed:
    """Closed-period lookup used as the separation fallback."""

    async def test_orders_by_end_date(self, session):
        employee = await make_employee(session, with_open_period=False)
        ledger = EmploymentPeriodService(session)

        first = await ledger.open_period(employee.id, date(2019, 1, 1))
        await ledger.close_period(first.id, date(2020, 12, 31), {"separation_type": "resigned"})
        second = await ledger.open_period(employee.id, date(2021, 6, 1))
        await ledger.close_period(second.id, date(2022, 3, 15), {"separation_type": "terminated"})
        await ledger.open_period(employee.id, date(2023, 1, 1))
        await session.commit()

        latest = await ledger.most_recent_closed_period(employee.id)
        assert latest.id == second.id
        assert latest.separation_type == "terminated"
        assert [p.start_date for p in await ledger.list_periods(employee.id)] == [
            date(2023, 1, 1),
            date(2021, 6, 1),
            date(2019, 1, 1),
        ]

    async def test_none_when_never_closed(self, session):
        employee = await make_employee(session)
        assert await EmploymentPeriodService(session).most_recent_closed_period(employee.id) is None
