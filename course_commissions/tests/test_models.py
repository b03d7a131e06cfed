"""
Tests for commissions models.
"""
import pytest
from datetime import datetime
from decimal import Decimal

from course_commissions.models import CommissionProfile, PaymentRecord, PaymentStatus


class TestPaymentRecord:
    """Tests for the payment history entry."""

    def test_from_dict(self):
        """Test a stored entry is parsed."""
        record = PaymentRecord.from_dict({
            'amount': '12.50', 'date': '2024-03-01T10:30:00', 'note': 'PIX',
        })
        assert record.amount == Decimal('12.50')
        assert record.date == datetime(2024, 3, 1, 10, 30)
        assert record.note == 'PIX'

    def test_from_dict_defaults(self):
        """Test missing or corrupt fields fall back to defaults."""
        record = PaymentRecord.from_dict({'amount': 'abc', 'date': 'yesterday'})
        assert record.amount == Decimal('0')
        assert record.date is None
        assert record.note == ''

    def test_from_dict_not_a_dict(self):
        record = PaymentRecord.from_dict('garbage')
        assert record.amount == Decimal('0')

    def test_from_dict_rejects_nan(self):
        record = PaymentRecord.from_dict({'amount': 'NaN'})
        assert record.amount == Decimal('0')

    def test_to_dict(self):
        """Test serialization keeps the amount exact."""
        record = PaymentRecord(amount=Decimal('10.10'), date=datetime(2024, 1, 2, 3, 4), note='x')
        assert record.to_dict() == {
            'amount': '10.10', 'date': '2024-01-02T03:04:00', 'note': 'x',
        }

    def test_to_dict_without_date(self):
        assert PaymentRecord(amount=Decimal('1')).to_dict()['date'] == ''


@pytest.mark.django_db
class TestCommissionProfile:
    """Tests for the per-course commission profile."""

    def test_load_default(self, course):
        """Test a course without a profile gets an unsaved default."""
        profile = CommissionProfile.load(course)
        assert profile.pk is None
        assert profile.rate == 0
        assert profile.payment_status == PaymentStatus.UNSET
        assert profile.get_history() == []

    def test_load_existing(self, course):
        CommissionProfile.objects.create(course=course, rate=15)
        course.refresh_from_db()
        assert CommissionProfile.load(course).rate == 15

    def test_history_round_trip(self, course):
        """Test records survive a save."""
        profile = CommissionProfile.objects.create(course=course)
        profile.set_history([
            PaymentRecord(amount=Decimal('10'), note='first'),
            PaymentRecord(amount=Decimal('5.25'), note='second'),
        ])
        profile.save()
        profile.refresh_from_db()

        history = profile.get_history()
        assert [r.note for r in history] == ['first', 'second']
        assert profile.total_paid == Decimal('15.25')

    def test_corrupt_history_is_empty(self, course):
        profile = CommissionProfile(course=course, history={'amount': 10})
        assert profile.get_history() == []
        assert profile.total_paid == Decimal('0')

    def test_remaining(self, course):
        profile = CommissionProfile(course=course)
        profile.set_history([PaymentRecord(amount=Decimal('10'))])
        assert profile.remaining(Decimal('30')) == Decimal('20')

    def test_remaining_never_negative(self, course):
        """Test overpayment shows a zero balance."""
        profile = CommissionProfile(course=course)
        profile.set_history([PaymentRecord(amount=Decimal('50'))])
        assert profile.remaining(Decimal('30')) == Decimal('0')

    def test_unknown_status_is_unset(self, course):
        profile = CommissionProfile(course=course, status='zz')
        assert profile.payment_status == PaymentStatus.UNSET

    def test_str(self, course):
        profile = CommissionProfile(course=course, rate=20)
        assert str(profile) == 'Python Fundamentals (20%)'
