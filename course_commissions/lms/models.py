"""Course catalog models read by the commissions module."""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class CourseCategory(models.Model):
    name = models.CharField(_("Name"), max_length=100)
    slug = models.SlugField(_("Slug"), max_length=100, unique=True)

    class Meta:
        db_table = 'lms_course_category'
        verbose_name = _("Course Category")
        verbose_name_plural = _("Course Categories")
        ordering = ['name']

    def __str__(self):
        return self.name


class Course(models.Model):
    """A purchasable course authored by an instructor."""

    STATUS_CHOICES = [
        ('publish', _("Published")),
        ('draft', _("Draft")),
        ('private', _("Private")),
    ]

    title = models.CharField(_("Title"), max_length=200)
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT,
        related_name='authored_courses', verbose_name=_("Instructor")
    )
    categories = models.ManyToManyField(
        CourseCategory, blank=True, related_name='courses',
        verbose_name=_("Categories")
    )
    status = models.CharField(
        _("Status"), max_length=20, choices=STATUS_CHOICES, default='publish'
    )

    # Linked store product, kept as a plain id like any other course attribute
    product_id = models.PositiveIntegerField(
        _("Linked Product"), null=True, blank=True,
        help_text=_("Store product sold for this course")
    )

    created_at = models.DateTimeField(_("Created"), auto_now_add=True)

    class Meta:
        db_table = 'lms_course'
        verbose_name = _("Course")
        verbose_name_plural = _("Courses")
        ordering = ['-created_at', '-id']

    def __str__(self):
        return self.title

    @property
    def instructor_name(self):
        return self.author.get_full_name() or self.author.get_username()
