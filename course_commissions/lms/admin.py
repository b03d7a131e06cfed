from django.contrib import admin

from .models import Course, CourseCategory


@admin.register(CourseCategory)
class CourseCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug']
    prepopulated_fields = {'slug': ('name',)}


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ['title', 'author', 'status', 'product_id', 'created_at']
    list_filter = ['status', 'categories']
    search_fields = ['title', 'author__username', 'author__first_name', 'author__last_name']
