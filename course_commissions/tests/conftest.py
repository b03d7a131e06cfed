"""
Fixtures for course commissions tests.
"""
import pytest
from decimal import Decimal

from django.contrib.auth.models import Permission


@pytest.fixture
def certificate_category(db):
    """The category that marks certificate courses."""
    from course_commissions.lms.models import CourseCategory

    category, _ = CourseCategory.objects.get_or_create(
        slug='certificados', defaults={'name': 'Certificados'}
    )
    return category


@pytest.fixture
def instructor(django_user_model):
    return django_user_model.objects.create_user(
        username='ana', password='pass', first_name='Ana', last_name='Souza'
    )


@pytest.fixture
def other_instructor(django_user_model):
    return django_user_model.objects.create_user(
        username='bruno', password='pass', first_name='Bruno', last_name='Lima'
    )


@pytest.fixture
def make_course(certificate_category):
    """Factory for courses; certificate courses by default."""
    from course_commissions.lms.models import Course

    def _make(title, author, product_id=None, status='publish', certificate=True):
        course = Course.objects.create(
            title=title, author=author, product_id=product_id, status=status
        )
        if certificate:
            course.categories.add(certificate_category)
        return course

    return _make


@pytest.fixture
def make_sale(db):
    """
    Factory for a one-item order.

    The item is linked to ``product_id`` and/or ``course_id`` through item meta,
    the way the store records it.
    """
    from course_commissions.store.models import Order, OrderItem, OrderItemMeta

    def _make(total, status='completed', product_id=None, course_id=None, meta_total=None):
        order = Order.objects.create(status=status)
        item = OrderItem.objects.create(
            order=order, name='Course purchase',
            line_total=Decimal(str(total)) if total is not None else None,
        )
        if product_id is not None:
            OrderItemMeta.objects.create(
                item=item, meta_key=OrderItemMeta.PRODUCT_ID, meta_value=str(product_id)
            )
        if course_id is not None:
            OrderItemMeta.objects.create(
                item=item, meta_key=OrderItemMeta.COURSE_ID, meta_value=str(course_id)
            )
        if meta_total is not None:
            OrderItemMeta.objects.create(
                item=item, meta_key=OrderItemMeta.LINE_TOTAL, meta_value=str(meta_total)
            )
        return item

    return _make


@pytest.fixture
def course(make_course, instructor):
    """Published certificate course linked to product 501."""
    return make_course('Python Fundamentals', instructor, product_id=501)


@pytest.fixture
def course_with_sales(course, make_sale):
    """Two completed sales (100 + 50) at a 20% rate."""
    from course_commissions.models import CommissionProfile

    make_sale(100, product_id=501)
    make_sale(50, product_id=501)
    CommissionProfile.objects.create(course=course, rate=20)
    return course


@pytest.fixture
def manager(django_user_model):
    """Staff user holding the commissions permissions."""
    user = django_user_model.objects.create_user(username='manager', password='pass')
    user.user_permissions.add(*Permission.objects.filter(
        content_type__app_label='course_commissions',
        codename__in=['manage_commissions', 'export_commissions'],
    ))
    return user


@pytest.fixture
def manager_client(client, manager):
    client.force_login(manager)
    return client


@pytest.fixture
def plain_client(client, django_user_model):
    """Logged-in user without any commissions permission."""
    user = django_user_model.objects.create_user(username='visitor', password='pass')
    client.force_login(user)
    return client
