from django.apps import AppConfig


class StoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "course_commissions.store"
    label = "commission_store"
    verbose_name = "Store"
