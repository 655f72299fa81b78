from django.contrib import admin
from .models import Quiz, Question


class QuestionInline(admin.StackedInline):
    model = Question
    extra = 0
    fields = ('position', 'text', 'options', 'correct_option_id', 'explanation', 'points')


@admin.register(Quiz)
class QuizAdmin(admin.ModelAdmin):
    """
    Admin config for Quiz with its questions inline; Question.clean() keeps the answer key valid.
    """
    list_display = ('id', 'title', 'slug', 'course', 'created_by', 'published', 'created_at')
    search_fields = ('title', 'description', 'slug', 'created_by__username', 'course__title')
    list_filter = ('published', 'created_at')
    readonly_fields = ('id', 'created_at', 'updated_at')
    inlines = (QuestionInline,)
