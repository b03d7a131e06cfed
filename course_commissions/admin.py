from django.contrib import admin

from .models import CommissionProfile


@admin.register(CommissionProfile)
class CommissionProfileAdmin(admin.ModelAdmin):
    list_display = ['course', 'rate', 'status', 'status_date', 'updated_at']
    list_filter = ['status']
    search_fields = ['course__title', 'status_note']
    readonly_fields = ['created_at', 'updated_at']
