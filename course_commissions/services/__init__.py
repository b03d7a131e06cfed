from .commission_service import CommissionService, CourseStats, InstructorStats
from .export_service import ExportUnavailable, render_ranking_xlsx
from .ledger_service import PaymentLedger

__all__ = [
    'CommissionService',
    'CourseStats',
    'InstructorStats',
    'ExportUnavailable',
    'PaymentLedger',
    'render_ranking_xlsx',
]
