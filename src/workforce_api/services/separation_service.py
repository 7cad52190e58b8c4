"""Separation workflow (resignation and termination)."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from workforce_api.exceptions import InvalidTransitionError, ValidationError
from workforce_api.models.domain.employee import EmployeeStatus, parse_status
from workforce_api.models.domain.principal import Principal
from workforce_api.models.domain.separation import SeparationDraft
from workforce_api.models.dto.status import SeparationRequest, SeparationResponse
from workforce_api.services.profile_cache import ProfileCache
from workforce_api.services.status_transition_service import StatusTransitionService

logger = logging.getLogger(__name__)


class SeparationService:
    """Collects separation details and applies them as one transition."""

    def __init__(self, session: AsyncSession, profile_cache: ProfileCache | None = None) -> None:
        """Initialize service with database session."""
        self.session = session
        self.transitions = StatusTransitionService(session, profile_cache)

    @staticmethod
    def start(separation_type: str | EmployeeStatus) -> SeparationDraft:
        """Begin a separation draft for a target status.

        The edge and the terminate capability are checked against the
        employee's current status when the draft is applied.

        Raises:
            InvalidStatusError: If the status is unknown
            InvalidTransitionError: If the status is not RESIGNED or TERMINATED
        """
        target = parse_status(separation_type)
        if not target.is_separated:
            raise InvalidTransitionError(
                None, target, reason="separation must target resigned or terminated"
            )
        return SeparationDraft(separation_type=target)

    async def separate(
        self,
        employee_id: UUID,
        request: SeparationRequest,
        principal: Principal,
    ) -> SeparationResponse:
        """Validate a separation request and apply it.

        Validation happens before anything is written, so a rejected
        request leaves the employee untouched.

        Args:
            employee_id: Employee UUID
            request: Separation details
            principal: Acting principal

        Returns:
            SeparationResponse

        Raises:
            InvalidStatusError: If separation_type is unknown
            InvalidTransitionError: If the target is not a separated status
                or the edge is illegal from the current status
            PermissionDeniedError: If termination is requested without can_terminate
            MissingFieldError: If separation_date is missing
            IncompleteClearanceError: If clearance is done without amount or cheque number
            ConcurrentModificationError: If the employee changed concurrently
            PersistenceFailureError: If the store rejects a write
        """
        draft = self.start(request.separation_type)
        draft.separation_date = request.separation_date
        draft.separation_reason = request.separation_reason
        draft.final_working_day = request.final_working_day
        draft.eligible_for_rehire = request.eligible_for_rehire
        draft.notice_given = request.notice_given
        draft.notice_days_served = request.notice_days_served
        draft.exit_interview_done = request.exit_interview_done
        draft.clearance_done = request.clearance_done
        draft.clearance_amount = request.clearance_amount
        draft.clearance_cheque_number = request.clearance_cheque_number

        try:
            details = draft.finalize()
        except ValidationError:
            logger.info("Rejected separation for employee %s: invalid details", employee_id)
            raise

        return await self.transitions.apply_separation(
            employee_id,
            details,
            principal,
            expected_status=request.expected_status,
        )
