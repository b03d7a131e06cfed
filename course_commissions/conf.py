from django.conf import settings

from .module import SETTINGS


def get_setting(name):
    """Return a module setting, preferring ``settings.COURSE_COMMISSIONS``."""
    overrides = getattr(settings, 'COURSE_COMMISSIONS', None) or {}
    if name in overrides:
        return overrides[name]
    return SETTINGS[name]
