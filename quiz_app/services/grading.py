"""
Quiz Grading Engine.

grade() is a pure scoring step: it reads the quiz's answer key and never
writes. After submission the correct answer of every answered question is
disclosed for review, unlike the pre-submission views from redaction.
"""
import logging
from typing import Iterable, Optional, Tuple

from django.db import DatabaseError

from core.utils.validators import canonical_id
from progress_app.services import record_attempt
from quiz_app.models import Quiz

logger = logging.getLogger(__name__)


def grade(quiz: Quiz, answers: Iterable[dict]) -> dict:
    """
    Scores answers given as {'question_id', 'selected_option_id'} dicts.

    - total is the number of questions in the quiz, not of answers.
    - Each answer yields one feedback entry, in submission order; duplicates
      are graded again.
    - Answers to unknown questions are incorrect and disclose nothing.
    - Unanswered questions get no feedback entry and score nothing.
    """
    questions = {canonical_id(q.id): q for q in quiz.questions.all()}
    score = 0
    feedback = []

    for answer in answers:
        question = questions.get(canonical_id(answer.get('question_id')))
        if question is None:
            feedback.append({'questionId': answer.get('question_id'), 'correct': False})
            continue
        correct_id = canonical_id(question.correct_option_id)
        is_correct = canonical_id(answer.get('selected_option_id')) == correct_id
        if is_correct:
            score += 1
        feedback.append({
            'questionId': canonical_id(question.id),
            'correct': is_correct,
            'correctOptionId': correct_id,
        })

    return {'score': score, 'total': len(questions), 'feedback': feedback}


def grade_and_record(quiz: Quiz, user, answers: Iterable[dict], course=None) -> Tuple[dict, Optional[object]]:
    """
    Grades and then appends a QuizAttempt for the user.

    Best effort, not one transaction: if recording fails the grade is still
    returned and the failure is logged, matching a separate record call.
    """
    result = grade(quiz, answers)
    try:
        attempt = record_attempt(
            user=user,
            quiz=quiz,
            course=course or quiz.course,
            correct=result['score'],
            total=result['total'],
        )
    except DatabaseError:
        logger.exception('Could not record attempt of user %s on quiz %s', user.id, quiz.id)
        attempt = None
    return result, attempt
