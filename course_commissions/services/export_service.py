"""
Export Service - Instructor ranking spreadsheet, one worksheet per instructor.
"""
import logging
import re
from datetime import datetime
from io import BytesIO
from typing import List, Optional, Set

from django.utils import timezone
from django.utils.translation import gettext as _

from ..conf import get_setting
from .commission_service import CommissionService, InstructorStats

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

# Worksheet names are capped at 31 characters and reject : \ / ? * [ ]
MAX_SHEET_TITLE = 31
INVALID_SHEET_CHARS = re.compile(r'[:\\/?*\[\]]+')


class ExportUnavailable(Exception):
    """The spreadsheet library is not installed."""


def sheet_title(name: str, instructor_id: Optional[int] = None) -> str:
    title = INVALID_SHEET_CHARS.sub('_', name or '')[:MAX_SHEET_TITLE]
    if not title.strip():
        title = f"Instructor {instructor_id}" if instructor_id else "Instructor"
    return title


def unique_sheet_title(title: str, used: Set[str]) -> str:
    """Number repeated titles, staying within the length cap. Excel compares case-insensitively."""
    candidate = title
    counter = 1
    while candidate.lower() in used:
        suffix = str(counter)
        candidate = title[:MAX_SHEET_TITLE - len(suffix)] + suffix
        counter += 1
    used.add(candidate.lower())
    return candidate


def export_filename(now: Optional[datetime] = None) -> str:
    now = timezone.localtime(now or timezone.now())
    prefix = get_setting('export_filename_prefix')
    return f"{prefix}-{now.strftime('%Y-%m-%d_%H%M')}.xlsx"


def _load_openpyxl():
    try:
        import openpyxl
    except ImportError as exc:
        logger.error("Ranking export requested but openpyxl is not installed")
        raise ExportUnavailable(
            "openpyxl is required for the ranking export. "
            "Install it with: pip install openpyxl"
        ) from exc
    return openpyxl


def _write_header(ws):
    from openpyxl.styles import Font

    headers = [_("Course"), _("Sales"), _("Revenue"), _("Rate (%)"), _("Commission")]
    for col, header in enumerate(headers, start=1):
        ws.cell(row=1, column=col, value=header).font = Font(bold=True)


def _write_instructor_sheet(ws, instructor: InstructorStats):
    _write_header(ws)

    row = 2
    total_revenue = 0
    total_commission = 0
    for course in instructor.courses_with_sales():
        ws.cell(row=row, column=1, value=course.name)
        ws.cell(row=row, column=2, value=course.sales).number_format = '#,##0'
        ws.cell(row=row, column=3, value=course.revenue).number_format = '#,##0.00'
        ws.cell(row=row, column=4, value=course.rate)
        ws.cell(row=row, column=5, value=course.commission_total).number_format = '#,##0.00'
        total_revenue += course.revenue
        total_commission += course.commission_total
        row += 1

    if row == 2:
        ws.cell(row=row, column=1, value=_("No sales"))
        row += 1

    # Totals block after a blank row
    row += 1
    ws.cell(row=row, column=1, value=_("Total revenue:"))
    ws.cell(row=row, column=2, value=total_revenue).number_format = '#,##0.00'
    row += 1
    ws.cell(row=row, column=1, value=_("Total commission:"))
    ws.cell(row=row, column=2, value=total_commission).number_format = '#,##0.00'


def build_ranking_workbook(ranking: List[InstructorStats]):
    """Workbook with one sheet per instructor, in ranking order."""
    openpyxl = _load_openpyxl()

    wb = openpyxl.Workbook()
    default_sheet = wb.active
    if not ranking:
        default_sheet.title = "Ranking"
        _write_header(default_sheet)
        default_sheet.cell(row=2, column=1, value=_("No sales"))
        return wb

    wb.remove(default_sheet)
    used = set()
    for instructor in ranking:
        title = unique_sheet_title(sheet_title(instructor.name, instructor.instructor_id), used)
        ws = wb.create_sheet(title=title)
        _write_instructor_sheet(ws, instructor)
    wb.active = 0
    return wb


def render_ranking_xlsx(ranking: Optional[List[InstructorStats]] = None) -> bytes:
    """Serialize the completed-orders ranking to XLSX bytes."""
    if ranking is None:
        ranking = CommissionService.collect_instructor_stats(
            statuses=CommissionService.ranking_statuses()
        )
    wb = build_ranking_workbook(ranking)
    buffer = BytesIO()
    wb.save(buffer)
    logger.info("Ranking export generated for %d instructors", len(ranking))
    return buffer.getvalue()
