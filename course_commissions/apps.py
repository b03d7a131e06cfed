from django.apps import AppConfig


class CourseCommissionsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "course_commissions"
    verbose_name = "Instructor Commissions"
