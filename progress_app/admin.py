from django.contrib import admin
from .models import CourseProgress, QuizAttempt


@admin.register(QuizAttempt)
class QuizAttemptAdmin(admin.ModelAdmin):
    """
    Attempts are an audit trail: listed and searchable, never edited.
    """
    list_display = ('id', 'user', 'quiz', 'course', 'correct', 'total', 'score', 'attempted_at')
    search_fields = ('user__username', 'quiz__title', 'course__title')
    list_filter = ('attempted_at',)

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(CourseProgress)
class CourseProgressAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'course', 'percent_complete', 'updated_at')
    search_fields = ('user__username', 'course__title')
