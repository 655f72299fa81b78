import uuid
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


class Quiz(models.Model):
    """
    A multiple-choice quiz attached to a course.

    Fields:
    - course: the course the quiz belongs to.
    - created_by: the instructor who authored it; only this user may change it.
    - slug: optional, unique when present (NULL is allowed for many rows).
    - published: one-way latch, see quiz_app.services.quiz_store.
    - time_limit_minutes: advisory only, nothing enforces it server-side.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, null=True, blank=True)
    description = models.TextField(blank=True, default='')
    course = models.ForeignKey(
        'course_app.Course',
        on_delete=models.CASCADE,
        related_name='quizzes',
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='quizzes',
    )
    time_limit_minutes = models.PositiveIntegerField(null=True, blank=True)
    published = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self) -> str:
        return f'Quiz({self.id}) by User({self.created_by_id}): {self.title}'


class Question(models.Model):
    """
    A question embedded in a quiz; only addressable through its quiz.

    Fields:
    - position: 0-based order inside the quiz, used for review display.
    - options: list of {"id": <uuid str>, "text": <str>} dicts (at least two).
    - correct_option_id: id of exactly one entry of options.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    quiz = models.ForeignKey(
        'Quiz', on_delete=models.CASCADE, related_name='questions'
    )
    position = models.PositiveIntegerField(default=0)
    text = models.TextField()
    options = models.JSONField(default=list)
    correct_option_id = models.CharField(max_length=36)
    explanation = models.TextField(blank=True, default='')
    points = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ['position']

    def __str__(self) -> str:
        return f'Question({self.id}) for Quiz({self.quiz_id})'

    def option_ids(self) -> list:
        return [str(opt.get('id')) for opt in (self.options or []) if isinstance(opt, dict)]

    def clean(self):
        """Rejects a correct_option_id that does not point at one of the options"""
        if len(self.options or []) < 2:
            raise ValidationError({'options': 'A question must have at least 2 options.'})
        if self.option_ids().count(str(self.correct_option_id)) != 1:
            raise ValidationError({'correct_option_id': 'correctOptionId must reference one of the option ids.'})
