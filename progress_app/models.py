import uuid
from django.conf import settings
from django.db import models


class QuizAttempt(models.Model):
    """
    One finished quiz attempt. Append-only audit record: never updated after creation.

    The quiz reference is nulled when the quiz is deleted so the history survives.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='quiz_attempts',
    )
    quiz = models.ForeignKey(
        'quiz_app.Quiz',
        on_delete=models.SET_NULL,
        null=True,
        related_name='attempts',
    )
    course = models.ForeignKey(
        'course_app.Course',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='quiz_attempts',
    )
    correct = models.PositiveIntegerField(default=0)
    total = models.PositiveIntegerField(default=0)
    score = models.FloatField()  # percentage or raw, as recorded by the caller
    attempted_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-attempted_at']
        indexes = [
            models.Index(fields=['user', 'quiz']),
            models.Index(fields=['user', 'course']),
        ]

    def __str__(self) -> str:
        return f'QuizAttempt({self.id}) by User({self.user_id}) on Quiz({self.quiz_id}): {self.correct}/{self.total}'

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError('Quiz attempts are append-only and cannot be modified.')
        super().save(*args, **kwargs)


class CourseProgress(models.Model):
    """
    Per-user completion state of a course.

    Fields:
    - completed_items: ids of completed lessons (video link index or any client id).
    - percent_complete: 0..100, recomputed on every completion.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='course_progress',
    )
    course = models.ForeignKey(
        'course_app.Course',
        on_delete=models.CASCADE,
        related_name='progress_records',
    )
    percent_complete = models.PositiveSmallIntegerField(default=0)
    completed_items = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'course'],
                name='uq_progress_user_course',
            )
        ]

    def __str__(self) -> str:
        return f'CourseProgress User({self.user_id}) Course({self.course_id}): {self.percent_complete}%'
