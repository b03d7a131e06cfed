"""Course commissions forms."""

import re

from django import forms
from django.utils.translation import gettext_lazy as _

from .models import PaymentStatus

NOTE_MAX_LENGTH = 1000

_RATE_FIELD_RE = re.compile(r'^course_commission\[(\d+)\]$')


class DashboardFilterForm(forms.Form):
    STATUS_CHOICES = [
        ('', _("All")),
        ('yes', _("Paid")),
        ('no', _("Not paid")),
        ('none', _("No record")),
    ]

    instructor = forms.CharField(
        required=False,
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': _("Instructor name")})
    )
    course = forms.CharField(
        required=False,
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': _("Course name")})
    )
    status = forms.ChoiceField(
        required=False, choices=STATUS_CHOICES,
        widget=forms.Select(attrs={'class': 'form-control'})
    )

    def filters(self):
        # Fields that fail validation are left out of cleaned_data; the rest still apply
        self.full_clean()
        data = getattr(self, 'cleaned_data', {})
        return {
            'instructor': (data.get('instructor') or '').strip(),
            'search': (data.get('course') or '').strip(),
            'status': data.get('status') or None,
        }


class PaymentStatusForm(forms.Form):
    """Status update with an optional payment for the history."""

    payment_status = forms.ChoiceField(
        required=False, choices=PaymentStatus.choices,
        widget=forms.Select(attrs={'class': 'form-control'})
    )
    payment_date = forms.CharField(
        required=False,
        widget=forms.DateTimeInput(attrs={'class': 'form-control', 'type': 'datetime-local'})
    )
    payment_notes = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 4})
    )
    payment_amount = forms.CharField(
        required=False,
        widget=forms.NumberInput(attrs={'class': 'form-control', 'step': '0.01', 'placeholder': '150.00'})
    )


class PaymentForm(forms.Form):
    payment_value = forms.CharField(
        required=False,
        widget=forms.NumberInput(attrs={'class': 'form-control', 'step': '0.01'})
    )
    payment_value_date = forms.CharField(
        required=False,
        widget=forms.DateTimeInput(attrs={'class': 'form-control', 'type': 'datetime-local'})
    )
    payment_note = forms.CharField(
        required=False, max_length=NOTE_MAX_LENGTH,
        widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 3})
    )


class PaymentEditForm(forms.Form):
    payment_edit_value = forms.CharField(
        required=False,
        widget=forms.NumberInput(attrs={'class': 'form-control', 'step': '0.01'})
    )
    payment_edit_date = forms.CharField(
        required=False,
        widget=forms.DateTimeInput(attrs={'class': 'form-control', 'type': 'datetime-local'})
    )
    payment_edit_note = forms.CharField(
        required=False, max_length=NOTE_MAX_LENGTH,
        widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 3})
    )


class BulkRateForm(forms.Form):
    apply_rate = forms.IntegerField(
        min_value=0, max_value=100,
        widget=forms.NumberInput(attrs={'class': 'form-control', 'min': '0', 'max': '100'})
    )

    def clean(self):
        cleaned = super().clean()
        course_ids = []
        for value in self.data.getlist('selected_courses') if hasattr(self.data, 'getlist') else []:
            try:
                course_ids.append(int(value))
            except (TypeError, ValueError):
                continue
        if not course_ids:
            raise forms.ValidationError(_("Select at least one course."))
        cleaned['selected_courses'] = course_ids
        return cleaned


class CourseRatesForm(forms.Form):
    """Parses the ``course_commission[<course id>]`` inputs of the course table."""

    def clean(self):
        cleaned = super().clean()
        rates = {}
        for key in self.data:
            match = _RATE_FIELD_RE.match(key)
            if not match:
                continue
            try:
                rates[int(match.group(1))] = int(str(self.data.get(key)).strip())
            except (TypeError, ValueError):
                rates[int(match.group(1))] = None
        if not rates:
            raise forms.ValidationError(_("No rates were submitted."))
        cleaned['rates'] = rates
        return cleaned
