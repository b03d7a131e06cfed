"""
Ledger Service - Payment status and payment history of each course.

Every operation reads the whole history of one course, changes it and writes it
back. Concurrent writes to the same course are not serialized: the last one wins.
"""
import logging
import re
from datetime import datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional, Tuple

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from django.utils.translation import gettext as _

from ..lms.models import Course
from ..models import CommissionProfile, PaymentRecord, PaymentStatus
from .commission_service import CommissionService

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r'\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))')


def parse_amount(raw) -> Decimal:
    """Lenient money parsing: ``"12,50"`` is 12.50, garbage is 0."""
    if isinstance(raw, Decimal):
        return raw if raw.is_finite() else Decimal('0')
    if raw is None:
        return Decimal('0')
    match = _NUMBER_RE.match(str(raw).replace(',', '.'))
    if not match:
        return Decimal('0')
    try:
        return Decimal(match.group(1))
    except InvalidOperation:
        return Decimal('0')


def parse_timestamp(raw) -> Optional[datetime]:
    """Parse a submitted date; None when empty or unparseable."""
    if isinstance(raw, datetime):
        value = raw
    else:
        text = str(raw or '').strip()
        if not text:
            return None
        try:
            value = parse_datetime(text)
        except ValueError:
            value = None
        if value is None:
            try:
                day = parse_date(text)
            except ValueError:
                day = None
            if day is None:
                return None
            value = datetime.combine(day, time.min)
    if settings.USE_TZ and timezone.is_naive(value):
        value = timezone.make_aware(value)
    return value


def timestamp_or_now(raw) -> datetime:
    return parse_timestamp(raw) or timezone.now()


class PaymentLedger:
    """Payment status and positional payment history per course."""

    @staticmethod
    def get_course(course_id) -> Optional[Course]:
        if course_id is None or course_id <= 0:
            return None
        return Course.objects.filter(pk=course_id).first()

    @staticmethod
    def _existing_profile(course: Course) -> Optional[CommissionProfile]:
        return CommissionProfile.objects.filter(course=course).first()

    # ==================== Status ====================

    @staticmethod
    @transaction.atomic
    def set_status(
        course_id: int,
        status,
        note: str = '',
        explicit_date=None,
    ) -> Tuple[Optional[CommissionProfile], Optional[str]]:
        """Store status and note; paid/unpaid also stamp the status date."""
        course = PaymentLedger.get_course(course_id)
        if course is None:
            logger.warning("Status update rejected: invalid course id %r", course_id)
            return None, _("Invalid course ID.")

        try:
            status = PaymentStatus(status or '')
        except ValueError:
            status = PaymentStatus.UNSET

        profile = PaymentLedger._existing_profile(course) or CommissionProfile(course=course)
        profile.status = status
        profile.status_note = note or ''
        if status in (PaymentStatus.PAID, PaymentStatus.UNPAID):
            profile.status_date = timestamp_or_now(explicit_date)
        profile.save()

        logger.info("Course %s payment status set to %r", course.pk, status.value)
        return profile, None

    # ==================== History ====================

    @staticmethod
    @transaction.atomic
    def append_payment(
        course_id: int,
        amount,
        date=None,
        note: str = '',
    ) -> Tuple[Optional[PaymentRecord], Optional[str]]:
        """Append a payment. Non-positive amounts are rejected."""
        course = PaymentLedger.get_course(course_id)
        amount = parse_amount(amount)
        if course is None or amount <= 0:
            logger.warning(
                "Payment rejected for course %r: amount %s", course_id, amount
            )
            return None, _("Invalid amount or course for registration.")

        profile = PaymentLedger._existing_profile(course) or CommissionProfile(course=course)
        history = profile.get_history()
        record = PaymentRecord(
            amount=amount, date=timestamp_or_now(date), note=note or ''
        )
        history.append(record)
        profile.set_history(history)
        profile.save()

        logger.info("Course %s payment of %s recorded", course.pk, amount)
        return record, None

    @staticmethod
    @transaction.atomic
    def edit_payment(
        course_id: int,
        index: int,
        amount,
        date=None,
        note: str = '',
    ) -> bool:
        """Replace the record at ``index``. Out-of-range positions change nothing."""
        course = PaymentLedger.get_course(course_id)
        if course is None:
            return False
        profile = PaymentLedger._existing_profile(course)
        if profile is None:
            return False

        history = profile.get_history()
        if not 0 <= index < len(history):
            return False

        # Edits accept any amount, unlike appends
        history[index] = PaymentRecord(
            amount=parse_amount(amount), date=timestamp_or_now(date), note=note or ''
        )
        profile.set_history(history)
        profile.save(update_fields=['history', 'updated_at'])

        logger.info("Course %s payment #%s updated", course.pk, index)
        return True

    @staticmethod
    @transaction.atomic
    def delete_payment(course_id: int, index: int) -> bool:
        """Remove the record at ``index``; later records move down one position."""
        course = PaymentLedger.get_course(course_id)
        if course is None:
            return False
        profile = PaymentLedger._existing_profile(course)
        if profile is None:
            return False

        history = profile.get_history()
        if not 0 <= index < len(history):
            return False

        del history[index]
        profile.set_history(history)
        profile.save(update_fields=['history', 'updated_at'])

        logger.info("Course %s payment #%s deleted", course.pk, index)
        return True

    # ==================== Balance ====================

    @staticmethod
    def derive(course_id: int, commission_total: Optional[Decimal] = None) -> Optional[Dict[str, Any]]:
        """Paid total and remaining balance against the course commission."""
        course = PaymentLedger.get_course(course_id)
        if course is None:
            return None

        if commission_total is None:
            stats = CommissionService.calculate_course_stats(
                course, CommissionService.dashboard_statuses()
            )
            commission_total = stats.commission_total if stats else Decimal('0')

        profile = CommissionProfile.load(course)
        return {
            'course_id': course.pk,
            'commission_total': commission_total,
            'total_paid': profile.total_paid,
            'remaining': profile.remaining(commission_total),
            'status': profile.payment_status,
            'status_date': profile.status_date,
        }
