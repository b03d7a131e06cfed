"""
Commission Service - Revenue and commission aggregation for certificate courses.
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from django.apps import apps
from django.db import transaction
from django.db.models import Q

from ..conf import get_setting
from ..lms.models import Course
from ..models import CommissionProfile

logger = logging.getLogger(__name__)

STORE_APP = 'course_commissions.store'


@dataclass
class CourseStats:
    course_id: int
    name: str
    sales: int = 0
    revenue: Decimal = Decimal('0')
    rate: int = 0
    commission_total: Decimal = Decimal('0')

    def as_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'sales': self.sales,
            'amount': str(self.revenue),
            'commission_rate': self.rate,
            'commission_total': str(self.commission_total),
        }


@dataclass
class InstructorStats:
    instructor_id: int
    name: str
    sales: int = 0
    revenue: Decimal = Decimal('0')
    commission_total: Decimal = Decimal('0')
    courses: Dict[int, CourseStats] = field(default_factory=dict)

    def add_course(self, stats: CourseStats):
        self.courses[stats.course_id] = stats
        self.sales += stats.sales
        self.revenue += stats.revenue
        self.commission_total += stats.commission_total

    def courses_with_sales(self) -> List[CourseStats]:
        return [c for c in self.courses.values() if c.sales > 0]

    def as_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'sales': self.sales,
            'amount': str(self.revenue),
            'commission_total': str(self.commission_total),
            'courses': {str(pk): c.as_dict() for pk, c in self.courses.items()},
        }


def coerce_rate(value) -> int:
    """Missing or non-numeric rates count as 0."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class CommissionService:
    """Service class for commission aggregation and rates."""

    # ==================== Collaborators ====================

    @staticmethod
    def store_available() -> bool:
        return apps.is_installed(STORE_APP)

    @staticmethod
    def dashboard_statuses() -> Tuple[str, ...]:
        return tuple(get_setting('dashboard_statuses'))

    @staticmethod
    def ranking_statuses() -> Tuple[str, ...]:
        return tuple(get_setting('ranking_statuses'))

    # ==================== Courses ====================

    @staticmethod
    def get_certificate_courses(
        instructor: str = '',
        search: str = '',
        status: Optional[str] = None,
    ):
        """Published courses of the certificate category, with optional filters."""
        qs = Course.objects.filter(
            status='publish',
            categories__slug=get_setting('certificate_category'),
        ).select_related('author', 'commission_profile').distinct()

        if search:
            qs = qs.filter(title__icontains=search)

        for term in instructor.split():
            qs = qs.filter(
                Q(author__first_name__icontains=term) |
                Q(author__last_name__icontains=term) |
                Q(author__username__icontains=term)
            )

        if status == 'none':
            qs = qs.filter(
                Q(commission_profile__isnull=True) | Q(commission_profile__status='')
            )
        elif status in ('yes', 'no'):
            qs = qs.filter(commission_profile__status=status)

        return qs

    @staticmethod
    def get_rate(course: Course) -> int:
        try:
            return coerce_rate(course.commission_profile.rate)
        except CommissionProfile.DoesNotExist:
            return 0

    # ==================== Aggregation ====================

    @staticmethod
    def get_matching_items(course: Course, product_id: int) -> list:
        """
        Item meta rows linking a line item to the product or to the course.

        One row is returned per matching meta entry, so a line item carrying
        both links appears twice.
        """
        OrderItemMeta = apps.get_model('commission_store', 'OrderItemMeta')
        return list(
            OrderItemMeta.objects.filter(item__item_type='line_item')
            .filter(
                Q(meta_key=OrderItemMeta.PRODUCT_ID, meta_value=str(product_id)) |
                Q(meta_key=OrderItemMeta.COURSE_ID, meta_value=str(course.pk))
            )
            .select_related('item__order')
            .order_by('item_id', 'pk')
        )

    @staticmethod
    def get_line_total(item) -> Decimal:
        """Item total, falling back to the ``_line_total`` meta when empty."""
        if item.line_total:
            return item.line_total
        raw = item.get_meta('_line_total')
        try:
            total = Decimal(str(raw).strip()) if raw not in (None, '') else Decimal('0')
        except InvalidOperation:
            return Decimal('0')
        return total if total.is_finite() else Decimal('0')

    @staticmethod
    def calculate_commission(revenue: Decimal, rate: int) -> Decimal:
        return revenue * Decimal(rate) / Decimal('100')

    @staticmethod
    def calculate_course_stats(
        course: Course,
        statuses: Sequence[str],
        rate: Optional[int] = None,
    ) -> Optional[CourseStats]:
        """Sales, revenue and commission of a course; None without a linked product."""
        product_id = course.product_id
        if not product_id:
            return None
        if rate is None:
            rate = CommissionService.get_rate(course)

        sales = 0
        revenue = Decimal('0')
        for row in CommissionService.get_matching_items(course, product_id):
            if row.item.order.status not in statuses:
                continue
            sales += 1
            revenue += CommissionService.get_line_total(row.item)

        return CourseStats(
            course_id=course.pk,
            name=course.title,
            sales=sales,
            revenue=revenue,
            rate=rate,
            commission_total=CommissionService.calculate_commission(revenue, rate),
        )

    @staticmethod
    def get_course_rows(courses: Iterable[Course]) -> List[Dict[str, Any]]:
        """Dashboard rows: course stats joined with the payment ledger."""
        statuses = CommissionService.dashboard_statuses()
        rows = []
        for course in courses:
            stats = CommissionService.calculate_course_stats(course, statuses)
            if stats is None:
                continue
            profile = CommissionProfile.load(course)
            history = profile.get_history()
            rows.append({
                'course': course,
                'instructor': course.instructor_name,
                'stats': stats,
                'profile': profile,
                'status': profile.payment_status,
                'history': history,
                'total_paid': profile.total_paid,
                'remaining': profile.remaining(stats.commission_total),
            })
        return rows

    # ==================== Ranking ====================

    @staticmethod
    def rank_instructors(instructors: Iterable[InstructorStats]) -> List[InstructorStats]:
        """Sort by total sales, descending. Ties keep their order."""
        return sorted(instructors, key=lambda i: i.sales, reverse=True)

    @staticmethod
    def collect_instructor_stats(
        courses: Optional[Iterable[Course]] = None,
        statuses: Optional[Sequence[str]] = None,
    ) -> List[InstructorStats]:
        """Per-instructor totals over all certificate courses, ranked by sales."""
        if courses is None:
            courses = CommissionService.get_certificate_courses()
        if statuses is None:
            statuses = CommissionService.ranking_statuses()

        instructors: Dict[int, InstructorStats] = {}
        for course in courses:
            instructor = instructors.get(course.author_id)
            if instructor is None:
                instructor = InstructorStats(
                    instructor_id=course.author_id,
                    name=course.instructor_name,
                )
                instructors[course.author_id] = instructor

            rate = CommissionService.get_rate(course)
            stats = CommissionService.calculate_course_stats(course, statuses, rate)
            if stats is None:
                stats = CourseStats(course_id=course.pk, name=course.title, rate=rate)
            instructor.add_course(stats)

        return CommissionService.rank_instructors(instructors.values())

    @staticmethod
    def get_ranking_data(ranking: Optional[List[InstructorStats]] = None) -> List[Dict[str, Any]]:
        """JSON-ready ranking, used by the page script and the API."""
        if ranking is None:
            ranking = CommissionService.collect_instructor_stats()
        return [
            dict(i.as_dict(), id=i.instructor_id, position=position)
            for position, i in enumerate(ranking, 1)
        ]

    # ==================== Rates ====================

    @staticmethod
    def _set_rate(course_id: int, rate) -> bool:
        try:
            rate = int(rate)
        except (TypeError, ValueError):
            return False
        if course_id <= 0 or not 0 <= rate <= 100:
            return False
        course = Course.objects.filter(pk=course_id).first()
        if course is None:
            return False
        CommissionProfile.objects.update_or_create(course=course, defaults={'rate': rate})
        return True

    @staticmethod
    @transaction.atomic
    def apply_rate(course_ids: Iterable[int], rate: int) -> Tuple[List[int], List[int]]:
        """Overwrite the rate of every listed course. Returns (saved, rejected)."""
        saved, rejected = [], []
        for course_id in course_ids:
            if CommissionService._set_rate(course_id, rate):
                saved.append(course_id)
            else:
                rejected.append(course_id)
        logger.info("Applied rate %s%% to courses %s", rate, saved)
        if rejected:
            logger.warning("Rate %s rejected for courses %s", rate, rejected)
        return saved, rejected

    @staticmethod
    @transaction.atomic
    def save_rates(rates: Dict[int, Any]) -> Tuple[List[int], List[int]]:
        """Overwrite each course's rate with its paired value. Returns (saved, rejected)."""
        saved, rejected = [], []
        for course_id, rate in rates.items():
            if rate is not None and CommissionService._set_rate(course_id, rate):
                saved.append(course_id)
            else:
                rejected.append(course_id)
        logger.info("Saved individual rates for courses %s", saved)
        if rejected:
            logger.warning("Individual rates rejected for courses %s", rejected)
        return saved, rejected
