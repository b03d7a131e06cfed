"""Course commissions module models."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils.dateparse import parse_datetime
from django.utils.translation import gettext_lazy as _

from .module import PERMISSIONS


class CommissionsBaseModel(models.Model):
    created_at = models.DateTimeField(_("Created"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated"), auto_now=True)

    class Meta:
        abstract = True


# =============================================================================
# Payment status
# =============================================================================

class PaymentStatus(models.TextChoices):
    """Stored as the legacy ``yes``/``no``/empty values."""

    PAID = 'yes', _("Paid")
    UNPAID = 'no', _("Not paid")
    UNSET = '', _("No record")


# =============================================================================
# Payment history entries
# =============================================================================

@dataclass
class PaymentRecord:
    """One disbursement to the instructor. Identified by its list position."""

    amount: Decimal
    date: Optional[datetime] = None
    note: str = ''

    @classmethod
    def from_dict(cls, data) -> 'PaymentRecord':
        if not isinstance(data, dict):
            data = {}
        try:
            amount = Decimal(str(data.get('amount', 0)))
        except (InvalidOperation, ValueError):
            amount = Decimal('0')
        if not amount.is_finite():
            amount = Decimal('0')
        raw_date = data.get('date') or ''
        try:
            date = parse_datetime(str(raw_date)) if raw_date else None
        except ValueError:
            date = None
        return cls(amount=amount, date=date, note=str(data.get('note') or ''))

    def to_dict(self) -> dict:
        return {
            'amount': str(self.amount),
            'date': self.date.isoformat() if self.date else '',
            'note': self.note,
        }


# =============================================================================
# Commission profile
# =============================================================================

class CommissionProfile(CommissionsBaseModel):
    """Commission rate, payment status and payment history of one course."""

    course = models.OneToOneField(
        'commission_lms.Course', on_delete=models.CASCADE,
        related_name='commission_profile', verbose_name=_("Course")
    )

    rate = models.IntegerField(
        _("Commission Rate (%)"), default=0,
        help_text=_("Percentage of the course revenue paid to the instructor")
    )

    # Payment status
    status = models.CharField(
        _("Payment Status"), max_length=3, blank=True,
        choices=PaymentStatus.choices, default=PaymentStatus.UNSET
    )
    status_date = models.DateTimeField(_("Status Date"), null=True, blank=True)
    status_note = models.TextField(_("Notes"), blank=True)

    # List of {amount, date, note}
    history = models.JSONField(
        _("Payment History"), default=list, blank=True, encoder=DjangoJSONEncoder
    )

    class Meta:
        db_table = 'course_commissions_profile'
        verbose_name = _("Commission Profile")
        verbose_name_plural = _("Commission Profiles")
        permissions = PERMISSIONS

    def __str__(self):
        return f"{self.course} ({self.rate}%)"

    @classmethod
    def load(cls, course):
        """Return the saved profile, or an unsaved default one."""
        try:
            return course.commission_profile
        except cls.DoesNotExist:
            return cls(course=course)

    @property
    def payment_status(self) -> PaymentStatus:
        try:
            return PaymentStatus(self.status or '')
        except ValueError:
            return PaymentStatus.UNSET

    def get_history(self) -> List[PaymentRecord]:
        if not isinstance(self.history, list):
            return []
        return [PaymentRecord.from_dict(entry) for entry in self.history]

    def set_history(self, records: List[PaymentRecord]):
        self.history = [record.to_dict() for record in records]

    @property
    def total_paid(self) -> Decimal:
        return sum((record.amount for record in self.get_history()), Decimal('0'))

    def remaining(self, commission_total: Decimal) -> Decimal:
        remaining = commission_total - self.total_paid
        if remaining < 0:
            return Decimal('0')
        return remaining
