from __future__ import annotations

from enum import Enum


class AttendanceType(str, Enum):
    """Kind of scan the teacher is recording."""

    TIME_IN = "TimeIn"
    TIME_OUT = "TimeOut"


class AttendanceStatus(str, Enum):
    """Daily attendance status stored in the canonical store."""

    NOT_MARKED = "Not Marked"
    PRESENT = "Present"
    LATE = "Late"
    HALF_DAY = "Half Day"
    WHOLE_DAY = "Whole Day"


class AttendanceError(str, Enum):
    """Structured state-machine rejections surfaced to the scanning UI."""

    NO_TIME_IN_FOUND = "NoTimeInFound"
    ALREADY_MARKED = "AlreadyMarked"


class ValidationReason(str, Enum):
    """Why a scanned identity was accepted or rejected."""

    OK = "Ok"
    NO_ACTOR = "NoActor"
    INVALID_FORMAT = "InvalidFormat"
    SCHOOL_MISMATCH = "SchoolMismatch"
    GRADE_MISMATCH = "GradeMismatch"
    SECTION_MISMATCH = "SectionMismatch"
    STRAND_MISMATCH = "StrandMismatch"
    STUDENT_NOT_FOUND = "StudentNotFound"
    SUBJECT_NOT_FOUND = "SubjectNotFound"
    NOT_ENROLLED = "NotEnrolled"
    TEACHER_NOT_ASSIGNED = "TeacherNotAssigned"


class PayloadShape(str, Enum):
    """QR payload encodings, in the order the parser tries them."""

    JSON = "json"
    DELIMITED = "delimited"
    BARE = "bare"


class ScanDisposition(str, Enum):
    """What happened to a validated scan on the device."""

    RECORDED = "Recorded"
    BUFFERED = "Buffered"
    REJECTED = "Rejected"
    FAILED = "Failed"
