"""Separation workflow tests."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from workforce_api.exceptions import (
    IncompleteClearanceError,
    InvalidStatusError,
    InvalidTransitionError,
    MissingFieldError,
    PermissionDeniedError,
    PersistenceFailureError,
)
from workforce_api.models.domain.employee import EmployeeStatus
from workforce_api.models.dto.employee import EmployeeCreate
from workforce_api.models.dto.status import SeparationRequest
from workforce_api.services.employee_service import EmployeeService
from workforce_api.services.employment_period_service import EmploymentPeriodService
from workforce_api.services.separation_service import SeparationService
from workforce_api.services.status_history_service import StatusHistoryService

from tests.factories import history_of, make_employee, periods_of, reload_employee


def termination(**overrides) -> SeparationRequest:
    fields = {
        "separation_type": "terminated",
        "separation_date": date(2024, 6, 1),
        "final_working_day": date(2024, 6, 5),
        "separation_reason": "  Repeated absence  ",
        "eligible_for_rehire": False,
        "notice_given": False,
        "notice_days_served": 0,
    }
    fields.update(overrides)
    return SeparationRequest(**fields)


class TestTermination:
    """Terminating an active employee."""

    async def test_terminate_closes_period_and_logs_history(self, session, terminator):
        """ACTIVE employee hired 2023-01-10 is terminated with a final working day."""
        created = await EmployeeService(session).create_employee(
            EmployeeCreate(
                full_name="Amina Yusuf",
                national_id="NID-A",
                id_no="ID-A",
                hire_date=date(2023, 1, 10),
                birth_date=date(1991, 2, 3),
            )
        )
        service = SeparationService(session)

        result = await service.separate(created.id, termination(), terminator)

        assert result.period_closed is True
        assert result.closed_period.end_date == date(2024, 6, 5)
        assert result.closed_period.separation_type == EmployeeStatus.TERMINATED
        assert result.closed_period.notice_days == 0
        assert result.employee.status == EmployeeStatus.TERMINATED
        assert result.employee.separation_reason == "Repeated absence"

        periods = await periods_of(session, created.id)
        assert len(periods) == 1
        assert periods[0].start_date == date(2023, 1, 10)
        assert periods[0].end_date == date(2024, 6, 5)

        history = await history_of(session, created.id)
        assert len(history) == 1
        assert history[0].old_status == "active"
        assert history[0].new_status == "terminated"
        assert history[0].separation_date == date(2024, 6, 1)
        assert history[0].final_working_day == date(2024, 6, 5)
        assert history[0].changed_by == terminator.id

    async def test_end_date_falls_back_to_separation_date(self, session, terminator):
        employee = await make_employee(session)
        service = SeparationService(session)

        result = await service.separate(employee.id, termination(final_working_day=None), terminator)

        assert result.closed_period.end_date == date(2024, 6, 1)

    async def test_terminate_from_on_hold(self, session, terminator):
        employee = await make_employee(session, status="on_hold")
        result = await SeparationService(session).separate(employee.id, termination(), terminator)
        assert result.history.old_status == EmployeeStatus.ON_HOLD

    async def test_terminate_without_capability_is_denied(self, session, admin):
        employee = await make_employee(session)
        employee_id = employee.id

        with pytest.raises(PermissionDeniedError):
            await SeparationService(session).separate(employee_id, termination(), admin)

        assert (await reload_employee(session, employee_id)).status == "active"
        assert await history_of(session, employee_id) == []


class TestResignation:
    """Resigning and edge checks."""

    async def test_resign_does_not_need_terminate_capability(self, session, admin):
        employee = await make_employee(session)

        result = await SeparationService(session).separate(
            employee.id,
            termination(separation_type="RESIGNED", eligible_for_rehire=True),
            admin,
        )

        assert result.employee.status == EmployeeStatus.RESIGNED
        assert result.employee.eligible_for_rehire is True

    async def test_on_hold_to_resigned_is_invalid(self, session, admin):
        employee = await make_employee(session, status="on_hold")
        employee_id = employee.id

        with pytest.raises(InvalidTransitionError):
            await SeparationService(session).separate(
                employee_id, termination(separation_type="resigned"), admin
            )

        refreshed = await reload_employee(session, employee_id)
        assert refreshed.status == "on_hold"
        assert (await periods_of(session, employee_id))[0].end_date is None

    async def test_non_separated_target_is_invalid(self, session, admin):
        employee = await make_employee(session)
        with pytest.raises(InvalidTransitionError):
            await SeparationService(session).separate(
                employee.id, termination(separation_type="on_hold"), admin
            )

    async def test_unknown_target_is_invalid_status(self, session, admin):
        employee = await make_employee(session)
        with pytest.raises(InvalidStatusError):
            await SeparationService(session).separate(
                employee.id, termination(separation_type="fired"), admin
            )

    async def test_missing_edge_wins_over_missing_capability(self, session, admin):
        """RESIGNED -> TERMINATED is not an edge, whoever asks."""
        employee = await make_employee(session, status="resigned", with_open_period=False)
        employee_id = employee.id

        with pytest.raises(InvalidTransitionError) as exc_info:
            await SeparationService(session).separate(employee_id, termination(), admin)

        assert exc_info.value.details["old_status"] == "resigned"
        assert exc_info.value.details["new_status"] == "terminated"
        assert (await reload_employee(session, employee_id)).status == "resigned"

    def test_draft_for_non_separated_target_names_no_old_status(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            SeparationService.start("active")

        assert "old_status" not in exc_info.value.details
        assert exc_info.value.details["new_status"] == "active"


class TestValidation:
    """Payload validation happens before any write."""

    async def test_missing_separation_date(self, session, terminator):
        employee = await make_employee(session)

        with pytest.raises(MissingFieldError) as exc_info:
            await SeparationService(session).separate(
                employee.id, termination(separation_date=None), terminator
            )

        assert exc_info.value.details["field"] == "separation_date"

    async def test_clearance_without_amount_does_not_mutate(self, session, terminator):
        employee = await make_employee(session)
        employee_id = employee.id

        with pytest.raises(IncompleteClearanceError) as exc_info:
            await SeparationService(session).separate(
                employee_id,
                termination(clearance_done=True, clearance_amount=None, clearance_cheque_number="CHQ-9"),
                terminator,
            )

        assert exc_info.value.details["field"] == "clearance_amount"
        refreshed = await reload_employee(session, employee_id)
        assert refreshed.status == "active"
        assert refreshed.separation_date is None
        assert refreshed.clearance_done is False
        assert await history_of(session, employee_id) == []

    async def test_clearance_without_cheque(self, session, terminator):
        employee = await make_employee(session)
        with pytest.raises(IncompleteClearanceError) as exc_info:
            await SeparationService(session).separate(
                employee.id,
                termination(clearance_done=True, clearance_amount=Decimal("250.00"), clearance_cheque_number="  "),
                terminator,
            )
        assert exc_info.value.details["field"] == "clearance_cheque_number"

    async def test_clearance_recorded_when_done(self, session, terminator):
        employee = await make_employee(session)

        result = await SeparationService(session).separate(
            employee.id,
            termination(clearance_done=True, clearance_amount=Decimal("250.50"), clearance_cheque_number="CHQ-77"),
            terminator,
        )

        assert result.employee.clearance_done is True
        assert result.employee.clearance_amount == Decimal("250.50")
        assert result.history.clearance_cheque_number == "CHQ-77"

    async def test_clearance_fields_dropped_when_not_done(self, session, terminator):
        employee = await make_employee(session)

        result = await SeparationService(session).separate(
            employee.id,
            termination(clearance_done=False, clearance_amount=Decimal("99.00"), clearance_cheque_number="CHQ-1"),
            terminator,
        )

        assert result.employee.clearance_amount is None
        assert result.employee.clearance_cheque_number is None


class TestNoOpenPeriod:
    """Separating an employee who has no open period."""

    async def test_reports_period_not_closed(self, session, terminator, caplog):
        employee = await make_employee(session, with_open_period=False)

        with caplog.at_level("WARNING"):
            result = await SeparationService(session).separate(employee.id, termination(), terminator)

        assert result.period_closed is False
        assert result.closed_period is None
        assert result.employee.status == EmployeeStatus.TERMINATED
        assert "no open employment period" in caplog.text


class TestAtomicity:
    """A failure partway leaves nothing written."""

    @pytest.mark.parametrize(
        "target,method,step",
        [
            (StatusHistoryService, "append", "append_history"),
            (EmploymentPeriodService, "close_period", "close_period"),
        ],
    )
    async def test_failed_step_rolls_back_everything(
        self, session, terminator, monkeypatch, target, method, step
    ):
        employee = await make_employee(session)
        employee_id = employee.id

        async def fail(self, *args, **kwargs):
            raise OperationalError("write", {}, Exception("connection reset"))

        monkeypatch.setattr(target, method, fail)

        with pytest.raises(PersistenceFailureError) as exc_info:
            await SeparationService(session).separate(employee_id, termination(), terminator)

        assert exc_info.value.step == step
        assert exc_info.value.details["step"] == step
        refreshed = await reload_employee(session, employee_id)
        assert refreshed.status == "active"
        assert refreshed.separation_date is None
        periods = await periods_of(session, employee_id)
        assert len(periods) == 1 and periods[0].end_date is None
        assert await history_of(session, employee_id) == []
