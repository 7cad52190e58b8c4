"""Separation form state and validation.

A separation is collected as a draft: the main form fields plus an optional
clearance step that can be confirmed or cancelled on its own without losing
the rest of the draft. ``SeparationDraft.finalize`` turns the draft into the
immutable ``SeparationDetails`` applied by the separation workflow.
"""

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from workforce_api.exceptions import IncompleteClearanceError, MissingFieldError, ValidationError
from workforce_api.models.domain.employee import EmployeeStatus


@dataclass(frozen=True)
class SeparationDetails:
    """Validated separation payload."""

    separation_type: EmployeeStatus
    separation_date: date
    separation_reason: str | None = None
    final_working_day: date | None = None
    eligible_for_rehire: bool | None = None
    notice_given: bool | None = None
    notice_days_served: int | None = None
    exit_interview_done: bool = False
    clearance_done: bool = False
    clearance_amount: Decimal | None = None
    clearance_cheque_number: str | None = None

    def effective_end_date(self, today: date) -> date:
        """Date the employment period closes on."""
        return self.final_working_day or self.separation_date or today

    def employee_fields(self) -> dict[str, Any]:
        """Column values copied onto the employee record."""
        return {
            "separation_type": self.separation_type.value,
            "separation_date": self.separation_date,
            "separation_reason": self.separation_reason,
            "final_working_day": self.final_working_day,
            "eligible_for_rehire": self.eligible_for_rehire,
            "notice_given": self.notice_given,
            "notice_days_served": self.notice_days_served,
            "exit_interview_done": self.exit_interview_done,
            "clearance_done": self.clearance_done,
            "clearance_amount": self.clearance_amount if self.clearance_done else None,
            "clearance_cheque_number": self.clearance_cheque_number if self.clearance_done else None,
        }

    def period_closure_fields(self) -> dict[str, Any]:
        """Closure metadata copied onto the employment period."""
        return {
            "separation_type": self.separation_type.value,
            "separation_reason": self.separation_reason,
            "eligible_for_rehire": self.eligible_for_rehire,
            "notice_days": self.notice_days_served,
        }

    def history_fields(self) -> dict[str, Any]:
        """Separation snapshot stored on the history entry."""
        return {
            "separation_date": self.separation_date,
            "final_working_day": self.final_working_day,
            "reason": self.separation_reason,
            "eligible_for_rehire": self.eligible_for_rehire,
            "notice_given": self.notice_given,
            "notice_days_served": self.notice_days_served,
            "exit_interview_done": self.exit_interview_done,
            "clearance_done": self.clearance_done,
            "clearance_amount": self.clearance_amount if self.clearance_done else None,
            "clearance_cheque_number": self.clearance_cheque_number if self.clearance_done else None,
        }


CENTS = Decimal("0.01")


def _valid_amount(amount: Any) -> Decimal | None:
    """Parse a clearance amount as a non-negative Decimal rounded to cents."""
    if amount is None or isinstance(amount, bool):
        return None
    if isinstance(amount, str):
        amount = amount.strip()
        if not amount:
            return None
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite() or value < 0:
        return None
    try:
        return value.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return None


@dataclass
class SeparationDraft:
    """In-progress separation form."""

    separation_type: EmployeeStatus
    separation_date: date | None = None
    separation_reason: str | None = None
    final_working_day: date | None = None
    eligible_for_rehire: bool | None = None
    notice_given: bool | None = None
    notice_days_served: int | None = None
    exit_interview_done: bool = False
    clearance_done: bool = False
    clearance_amount: Any = None
    clearance_cheque_number: str | None = None

    def confirm_clearance(self, amount: Any, cheque_number: str | None) -> None:
        """Record the clearance payment and mark clearance done.

        Raises:
            IncompleteClearanceError: If amount is missing/invalid or cheque number is blank
        """
        value = _valid_amount(amount)
        if value is None:
            raise IncompleteClearanceError("clearance_amount")
        cheque = (cheque_number or "").strip()
        if not cheque:
            raise IncompleteClearanceError("clearance_cheque_number")
        self.clearance_amount = value
        self.clearance_cheque_number = cheque
        self.clearance_done = True

    def cancel_clearance(self) -> None:
        """Abandon the clearance step, keeping every other field."""
        self.clearance_done = False
        self.clearance_amount = None
        self.clearance_cheque_number = None

    def finalize(self) -> SeparationDetails:
        """Validate the draft.

        Raises:
            MissingFieldError: If separation_date is missing
            IncompleteClearanceError: If clearance is done without amount or cheque number
        """
        if self.separation_date is None:
            raise MissingFieldError("separation_date")
        if self.notice_days_served is not None and self.notice_days_served < 0:
            raise ValidationError(
                "Notice days served cannot be negative", {"field": "notice_days_served"}
            )

        amount = None
        cheque = None
        if self.clearance_done:
            amount = _valid_amount(self.clearance_amount)
            if amount is None:
                raise IncompleteClearanceError("clearance_amount")
            cheque = (self.clearance_cheque_number or "").strip()
            if not cheque:
                raise IncompleteClearanceError("clearance_cheque_number")

        reason = (self.separation_reason or "").strip() or None
        return SeparationDetails(
            separation_type=self.separation_type,
            separation_date=self.separation_date,
            separation_reason=reason,
            final_working_day=self.final_working_day,
            eligible_for_rehire=self.eligible_for_rehire,
            notice_given=self.notice_given,
            notice_days_served=self.notice_days_served,
            exit_interview_done=bool(self.exit_interview_done),
            clearance_done=bool(self.clearance_done),
            clearance_amount=amount,
            clearance_cheque_number=cheque,
        )
