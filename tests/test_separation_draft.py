"""Separation form draft tests."""

from datetime import date
from decimal import Decimal

import pytest

from workforce_api.exceptions import IncompleteClearanceError, MissingFieldError, ValidationError
from workforce_api.models.domain.employee import EmployeeStatus
from workforce_api.models.domain.separation import SeparationDraft


def draft(**overrides) -> SeparationDraft:
    fields = {
        "separation_type": EmployeeStatus.RESIGNED,
        "separation_date": date(2024, 5, 31),
        "separation_reason": "  Relocating  ",
        "notice_given": True,
        "notice_days_served": 30,
    }
    fields.update(overrides)
    return SeparationDraft(**fields)


class TestClearanceStep:
    """Confirming and cancelling the clearance step."""

    def test_confirm_records_payment(self):
        form = draft()
        form.confirm_clearance("1500.50", "  CHQ-001 ")

        assert form.clearance_done is True
        assert form.clearance_amount == Decimal("1500.50")
        assert form.clearance_cheque_number == "CHQ-001"

    @pytest.mark.parametrize("amount", [None, "", "abc", "-5", "nan", "inf", True, Decimal("-0.01"), "1e40"])
    def test_confirm_rejects_bad_amount(self, amount):
        form = draft()

        with pytest.raises(IncompleteClearanceError) as exc_info:
            form.confirm_clearance(amount, "CHQ-001")

        assert exc_info.value.details["field"] == "clearance_amount"
        assert form.clearance_done is False

    @pytest.mark.parametrize("cheque", [None, "", "   "])
    def test_confirm_requires_cheque_number(self, cheque):
        form = draft()

        with pytest.raises(IncompleteClearanceError) as exc_info:
            form.confirm_clearance(100, cheque)

        assert exc_info.value.details["field"] == "clearance_cheque_number"
        assert form.clearance_done is False

    def test_zero_amount_is_accepted(self):
        form = draft()
        form.confirm_clearance(0, "CHQ-0")
        assert form.clearance_amount == Decimal("0.00")

    @pytest.mark.parametrize(
        "amount,expected",
        [("10.005", Decimal("10.01")), ("10.004", Decimal("10.00")), (0.1, Decimal("0.10")), (7, Decimal("7.00"))],
    )
    def test_amount_is_kept_exact_to_the_cent(self, amount, expected):
        form = draft()
        form.confirm_clearance(amount, "CHQ-5")

        assert isinstance(form.clearance_amount, Decimal)
        assert form.clearance_amount == expected

    def test_cancel_keeps_other_fields(self):
        form = draft()
        form.confirm_clearance(250, "CHQ-9")

        form.cancel_clearance()

        assert form.clearance_done is False
        assert form.clearance_amount is None
        assert form.clearance_cheque_number is None
        assert form.separation_date == date(2024, 5, 31)
        assert form.notice_days_served == 30


class TestFinalize:
    """Turning a draft into separation details."""

    def test_finalize_trims_reason(self):
        details = draft().finalize()

        assert details.separation_reason == "Relocating"
        assert details.clearance_done is False
        assert details.clearance_amount is None

    def test_blank_reason_becomes_none(self):
        assert draft(separation_reason="   ").finalize().separation_reason is None

    def test_missing_separation_date(self):
        with pytest.raises(MissingFieldError) as exc_info:
            draft(separation_date=None).finalize()
        assert exc_info.value.details["field"] == "separation_date"

    def test_missing_date_is_reported_before_clearance(self):
        form = draft(separation_date=None, clearance_done=True)

        with pytest.raises(MissingFieldError):
            form.finalize()

    def test_clearance_done_without_amount(self):
        form = draft(clearance_done=True, clearance_cheque_number="CHQ-1")

        with pytest.raises(IncompleteClearanceError) as exc_info:
            form.finalize()

        assert exc_info.value.details["field"] == "clearance_amount"

    def test_clearance_done_without_cheque(self):
        form = draft(clearance_done=True, clearance_amount=100)

        with pytest.raises(IncompleteClearanceError) as exc_info:
            form.finalize()

        assert exc_info.value.details["field"] == "clearance_cheque_number"

    def test_negative_notice_days(self):
        with pytest.raises(ValidationError):
            draft(notice_days_served=-1).finalize()

    def test_clearance_values_dropped_when_not_done(self):
        details = draft(clearance_amount=900, clearance_cheque_number="CHQ-7").finalize()

        assert details.employee_fields()["clearance_amount"] is None
        assert details.history_fields()["clearance_cheque_number"] is None

    def test_effective_end_date_prefers_final_working_day(self):
        details = draft(final_working_day=date(2024, 5, 20)).finalize()

        assert details.effective_end_date(date(2024, 6, 30)) == date(2024, 5, 20)
        assert draft().finalize().effective_end_date(date(2024, 6, 30)) == date(2024, 5, 31)

    def test_period_closure_fields(self):
        details = draft(eligible_for_rehire=True).finalize()

        assert details.period_closure_fields() == {
            "separation_type": "resigned",
            "separation_reason": "Relocating",
            "eligible_for_rehire": True,
            "notice_days": 30,
        }
