"""Course commissions module views."""

import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required, permission_required
from django.core.paginator import Paginator
from django.http import HttpResponse, JsonResponse
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.utils.translation import gettext as _
from django.views.decorators.http import require_GET, require_POST

from .conf import get_setting
from .forms import (
    BulkRateForm,
    CourseRatesForm,
    DashboardFilterForm,
    PaymentEditForm,
    PaymentForm,
    PaymentStatusForm,
)
from .models import PaymentStatus
from .module import MODULE_NAME, NAVIGATION
from .services import CommissionService, ExportUnavailable, PaymentLedger
from .services.export_service import XLSX_CONTENT_TYPE, export_filename, render_ranking_xlsx

logger = logging.getLogger(__name__)

MANAGE_PERMISSION = 'course_commissions.manage_commissions'
EXPORT_PERMISSION = 'course_commissions.export_commissions'


def _back(request):
    """Redirect to a safe ``next`` URL, or to the dashboard."""
    target = request.POST.get('next') or request.GET.get('next')
    if target and url_has_allowed_host_and_scheme(
        target, allowed_hosts={request.get_host()}, require_https=request.is_secure()
    ):
        return redirect(target)
    return redirect('course_commissions:dashboard')


def _store_unavailable_json():
    logger.error("Commissions API requested but the store app is not installed")
    return JsonResponse({'error': 'Store not available'}, status=503)


def csrf_failure(request, reason=''):
    """Set as CSRF_FAILURE_VIEW: shows the forgery error instead of Django's page."""
    logger.warning("CSRF verification failed for %s: %s", request.path, reason)
    return render(request, 'course_commissions/pages/csrf_failure.html', {
        'module_name': MODULE_NAME,
    }, status=403)


# =============================================================================
# Dashboard
# =============================================================================

@login_required
@permission_required(MANAGE_PERMISSION, raise_exception=True)
@require_GET
def dashboard(request):
    if not CommissionService.store_available():
        logger.error("Commissions dashboard requested but the store app is not installed")
        return render(request, 'course_commissions/pages/store_unavailable.html', {
            'module_name': MODULE_NAME,
        })

    filter_form = DashboardFilterForm(request.GET)
    courses = CommissionService.get_certificate_courses(**filter_form.filters())

    paginator = Paginator(courses, get_setting('courses_per_page'))
    page_obj = paginator.get_page(request.GET.get('page'))
    rows = CommissionService.get_course_rows(page_obj.object_list)

    ranking = CommissionService.collect_instructor_stats()

    query = request.GET.copy()
    query.pop('page', None)

    return render(request, 'course_commissions/pages/dashboard.html', {
        'module_name': MODULE_NAME,
        'navigation': NAVIGATION,
        'filter_form': filter_form,
        'page_obj': page_obj,
        'rows': rows,
        'ranking': ranking,
        'ranking_data': CommissionService.get_ranking_data(ranking),
        'querystring': query.urlencode(),
        'currency': get_setting('currency_symbol'),
        'status_paid': PaymentStatus.PAID,
        'status_unpaid': PaymentStatus.UNPAID,
    })


# =============================================================================
# Payment ledger
# =============================================================================

@login_required
@permission_required(MANAGE_PERMISSION, raise_exception=True)
@require_POST
def payment_update(request, course_id):
    """Save status and notes, optionally recording a payment in the history."""
    form = PaymentStatusForm(request.POST)
    if not form.is_valid():
        messages.error(request, _("Invalid payment data."))
        return _back(request)

    data = form.cleaned_data
    profile, error = PaymentLedger.set_status(
        course_id, data['payment_status'], data['payment_notes'], data['payment_date']
    )
    if error:
        messages.error(request, error)
        return _back(request)

    if data['payment_amount'].strip():
        history_date = profile.status_date if profile.payment_status != PaymentStatus.UNSET else None
        _record, error = PaymentLedger.append_payment(
            course_id, data['payment_amount'], history_date, data['payment_notes']
        )
        if error:
            messages.warning(request, error)

    messages.success(request, _("Payment status updated successfully."))
    return _back(request)


@login_required
@permission_required(MANAGE_PERMISSION, raise_exception=True)
@require_POST
def payment_add(request, course_id):
    form = PaymentForm(request.POST)
    if not form.is_valid():
        messages.error(request, _("Invalid payment data."))
        return _back(request)

    data = form.cleaned_data
    _record, error = PaymentLedger.append_payment(
        course_id, data['payment_value'], data['payment_value_date'], data['payment_note']
    )
    if error:
        messages.warning(request, error)
    else:
        messages.success(request, _("Payment recorded successfully."))
    return _back(request)


@login_required
@permission_required(MANAGE_PERMISSION, raise_exception=True)
@require_POST
def payment_edit(request, course_id, index):
    form = PaymentEditForm(request.POST)
    if not form.is_valid():
        messages.error(request, _("Invalid payment data."))
        return _back(request)

    data = form.cleaned_data
    if PaymentLedger.edit_payment(
        course_id, index,
        data['payment_edit_value'], data['payment_edit_date'], data['payment_edit_note'],
    ):
        messages.success(request, _("Payment updated."))
    return _back(request)


@login_required
@permission_required(MANAGE_PERMISSION, raise_exception=True)
@require_POST
def payment_delete(request, course_id, index):
    if PaymentLedger.delete_payment(course_id, index):
        messages.success(request, _("Payment removed."))
    return _back(request)


# =============================================================================
# Rates
# =============================================================================

@login_required
@permission_required(MANAGE_PERMISSION, raise_exception=True)
@require_POST
def rates_apply(request):
    form = BulkRateForm(request.POST)
    if not form.is_valid():
        messages.warning(request, _("Enter a rate between 0 and 100 and select at least one course."))
        return _back(request)

    saved, rejected = CommissionService.apply_rate(
        form.cleaned_data['selected_courses'], form.cleaned_data['apply_rate']
    )
    if saved:
        messages.success(request, _("Rate applied to the selected courses."))
    if rejected:
        messages.warning(request, _("Unknown courses were skipped: %(ids)s") % {
            'ids': ', '.join(str(pk) for pk in rejected),
        })
    return _back(request)


@login_required
@permission_required(MANAGE_PERMISSION, raise_exception=True)
@require_POST
def rates_save(request):
    form = CourseRatesForm(request.POST)
    if not form.is_valid():
        messages.warning(request, _("No rates were submitted."))
        return _back(request)

    saved, rejected = CommissionService.save_rates(form.cleaned_data['rates'])
    if saved:
        messages.success(request, _("Individual rates saved successfully."))
    if rejected:
        messages.warning(request, _("Rates must be whole numbers between 0 and 100. Not saved for courses: %(ids)s") % {
            'ids': ', '.join(str(pk) for pk in rejected),
        })
    return _back(request)


# =============================================================================
# Export
# =============================================================================

@login_required
@permission_required(EXPORT_PERMISSION, raise_exception=True)
@require_GET
def export_ranking(request):
    """Download the completed-orders ranking as XLSX."""
    if not CommissionService.store_available():
        logger.error("Ranking export requested but the store app is not installed")
        return render(request, 'course_commissions/pages/store_unavailable.html', {
            'module_name': MODULE_NAME,
        }, status=503)

    try:
        content = render_ranking_xlsx()
    except ExportUnavailable as e:
        return HttpResponse(str(e), status=500, content_type='text/plain; charset=utf-8')

    response = HttpResponse(content, content_type=XLSX_CONTENT_TYPE)
    response['Content-Disposition'] = f'attachment; filename="{export_filename()}"'
    response['Cache-Control'] = 'max-age=0'
    return response


# =============================================================================
# API Endpoints
# =============================================================================

@login_required
@permission_required(MANAGE_PERMISSION, raise_exception=True)
@require_GET
def api_ranking(request):
    """Instructor ranking (completed orders only)."""
    if not CommissionService.store_available():
        return _store_unavailable_json()
    return JsonResponse({'instructors': CommissionService.get_ranking_data()})


@login_required
@permission_required(MANAGE_PERMISSION, raise_exception=True)
@require_GET
def api_course_summary(request, course_id):
    """Commission, paid total and remaining balance of a course."""
    if not CommissionService.store_available():
        return _store_unavailable_json()

    summary = PaymentLedger.derive(course_id)
    if summary is None:
        return JsonResponse({'error': 'Course not found'}, status=404)

    return JsonResponse({
        'course_id': summary['course_id'],
        'commission_total': str(summary['commission_total']),
        'total_paid': str(summary['total_paid']),
        'remaining': str(summary['remaining']),
        'status': summary['status'].value,
        'status_date': summary['status_date'].isoformat() if summary['status_date'] else None,
    })
