from django.contrib import admin
from .models import Course


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    """
    Admin config for Course; the roster is shown but enrollments happen through payments.
    """
    list_display = ('id', 'title', 'created_by', 'price', 'currency', 'created_at')
    search_fields = ('title', 'description', 'created_by__username')
    list_filter = ('currency', 'created_at')
    readonly_fields = ('id', 'created_at', 'updated_at')
    filter_horizontal = ('students',)
