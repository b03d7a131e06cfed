from django.apps import AppConfig


class LmsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "course_commissions.lms"
    label = "commission_lms"
    verbose_name = "Courses"
