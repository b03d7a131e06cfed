"""
Course Commissions Module Configuration

This file defines the module metadata, navigation and default settings for the
Course Commissions module: instructor commissions on courses sold through the store.
Project settings may override SETTINGS through a COURSE_COMMISSIONS dict (see conf.py).
"""
from django.utils.translation import gettext_lazy as _

# Module Identification
MODULE_ID = "course_commissions"
MODULE_NAME = _("Instructor Commissions")
MODULE_ICON = "wallet-outline"
MODULE_VERSION = "1.0.0"
MODULE_CATEGORY = "sales"

# Internal Navigation (page sections)
NAVIGATION = [
    {
        "id": "courses",
        "label": _("Courses"),
        "icon": "school-outline",
        "anchor": "courses",
    },
    {
        "id": "ranking",
        "label": _("Instructor Ranking"),
        "icon": "trophy-outline",
        "anchor": "ranking",
    },
]

# Default Settings
SETTINGS = {
    "certificate_category": "certificados",
    "courses_per_page": 20,
    # Order statuses counted as revenue: the dashboard table also counts
    # processing orders, the ranking and export only completed ones.
    "dashboard_statuses": ("processing", "completed"),
    "ranking_statuses": ("completed",),
    "export_filename_prefix": "ranking-instrutores",
    "currency_symbol": "R$",
}

# Permissions - tuple format (codename, display_name), used as CommissionProfile.Meta.permissions
PERMISSIONS = [
    ("manage_commissions", "Can manage instructor commissions"),
    ("export_commissions", "Can export the instructor ranking"),
]
