from __future__ import annotations

from enum import Enum


class ApprovalStatus(str, Enum):
    """Approval workflow state shared by every approval table."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AttendanceSource(str, Enum):
    """Where the current values of a processed attendance row came from."""

    BIOMETRIC = "biometric"
    IMPORT = "import"
    MANUAL_EDIT = "manual_edit"
    SLVL_SYNC = "slvl_sync"
    HOLIDAY_SET = "holiday_set"


class PostingStatus(str, Enum):
    NOT_POSTED = "not_posted"
    POSTED = "posted"


class PeriodType(str, Enum):
    """Semi-monthly cutoff."""

    FIRST_HALF = "1st_half"
    SECOND_HALF = "2nd_half"


class SummaryStatus(str, Enum):
    DRAFT = "draft"
    POSTED = "posted"


class OvertimeType(str, Enum):
    REGULAR = "regular"
    REST_DAY = "rest_day"
    REGULAR_HOLIDAY = "regular_holiday"
    SPECIAL_HOLIDAY = "special_holiday"


class PayType(str, Enum):
    WITH_PAY = "with_pay"
    WITHOUT_PAY = "without_pay"


class OffsetTransaction(str, Enum):
    CREDIT = "credit"
    DEBIT = "debit"
