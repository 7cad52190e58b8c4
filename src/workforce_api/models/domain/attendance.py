"""Attendance domain model."""

from enum import StrEnum


class AttendanceStatus(StrEnum):
    """Daily attendance status."""

    PRESENT = "present"
    ABSENT = "absent"
    LEAVE = "leave"
