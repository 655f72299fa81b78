import logging
from typing import Optional

from django.db import transaction

from course_app.models import Course
from progress_app.models import CourseProgress, QuizAttempt

logger = logging.getLogger(__name__)


def percentage(correct: int, total: int) -> int:
    return round(correct / total * 100) if total > 0 else 0


def record_attempt(user, quiz, correct: int, total: int, course: Optional[Course] = None,
                   score: Optional[float] = None) -> QuizAttempt:
    """Appends a quiz attempt; score defaults to the rounded percentage of correct answers"""
    if score is None:
        score = percentage(correct, total)
    with transaction.atomic():
        attempt = QuizAttempt.objects.create(
            user=user,
            quiz=quiz,
            course=course,
            correct=correct,
            total=total,
            score=score,
        )
    logger.info('Recorded attempt %s of user %s on quiz %s: %s/%s', attempt.id, user.id, quiz.id, correct, total)
    return attempt


def get_course_progress(user, course: Course) -> CourseProgress:
    progress, _ = CourseProgress.objects.get_or_create(user=user, course=course)
    return progress


def attempts_count(user, course: Course) -> int:
    return QuizAttempt.objects.filter(user=user, course=course).count()


def complete_item(user, course: Course, item_id: str) -> CourseProgress:
    """Marks a lesson as completed once and recomputes the completion percentage"""
    total_items = len(course.video_links or [])
    with transaction.atomic():
        progress, _ = CourseProgress.objects.select_for_update().get_or_create(user=user, course=course)
        items = list(progress.completed_items or [])
        if item_id not in items:
            items.append(item_id)
        progress.completed_items = items
        progress.percent_complete = min(100, percentage(len(items), total_items))
        progress.save()
    return progress
