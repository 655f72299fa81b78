import uuid

import pytest
from progress_app.models import QuizAttempt
from quiz_app.services import grading
from quiz_app.services.redaction import ANSWER_FIELD, redact, redact_many


def _view():
    return {
        'id': 'q1',
        'title': 'Quiz',
        'questions': [
            {'id': 'a', 'text': 'A?', 'options': [{'id': 'x', 'text': 'x'}, {'id': 'y', 'text': 'y'}], ANSWER_FIELD: 'x'},
            {'id': 'b', 'text': 'B?', 'options': [{'id': 'z', 'text': 'z'}, {'id': 'w', 'text': 'w'}], ANSWER_FIELD: 'w'},
        ],
    }


def test_redact_strips_answers_for_students_without_touching_input():
    original = _view()
    view = redact(original, 'student')
    assert all(ANSWER_FIELD not in q for q in view['questions'])
    assert [len(q['options']) for q in view['questions']] == [2, 2]
    assert original['questions'][0][ANSWER_FIELD] == 'x'


@pytest.mark.parametrize('role', ['instructor', 'admin'])
def test_redact_keeps_answers_for_privileged_roles(role):
    view = redact(_view(), role)
    assert [q[ANSWER_FIELD] for q in view['questions']] == ['x', 'w']


def test_redact_unknown_role_is_treated_as_student():
    assert all(ANSWER_FIELD not in q for q in redact(_view(), 'guest')['questions'])


def test_redact_many_applies_to_every_quiz():
    views = redact_many([_view(), _view()], 'student')
    assert len(views) == 2
    assert all(ANSWER_FIELD not in q for v in views for q in v['questions'])


def _answers(quiz, correct=True):
    answers = []
    for question in quiz.questions.all():
        wrong = next(opt['id'] for opt in question.options if opt['id'] != question.correct_option_id)
        answers.append({
            'question_id': str(question.id),
            'selected_option_id': question.correct_option_id if correct else wrong,
        })
    return answers


@pytest.mark.django_db
def test_grade_all_correct(quiz_factory):
    quiz = quiz_factory()
    result = grading.grade(quiz, _answers(quiz))
    assert result['score'] == 2
    assert result['total'] == 2
    assert all(entry['correct'] for entry in result['feedback'])


@pytest.mark.django_db
def test_grade_discloses_correct_option_after_submission(quiz_factory):
    quiz = quiz_factory()
    result = grading.grade(quiz, _answers(quiz, correct=False))
    assert result['score'] == 0
    expected = [q.correct_option_id for q in quiz.questions.all()]
    assert [entry['correctOptionId'] for entry in result['feedback']] == expected


@pytest.mark.django_db
def test_grade_total_counts_questions_not_answers(quiz_factory):
    """Unanswered questions score nothing and produce no feedback entry"""
    quiz = quiz_factory()
    result = grading.grade(quiz, _answers(quiz)[:1])
    assert (result['score'], result['total']) == (1, 2)
    assert len(result['feedback']) == 1


@pytest.mark.django_db
def test_grade_duplicate_answers_are_counted_again(quiz_factory):
    quiz = quiz_factory()
    first = _answers(quiz)[0]
    result = grading.grade(quiz, [first, first])
    assert result['score'] == 2
    assert len(result['feedback']) == 2


@pytest.mark.django_db
def test_grade_unknown_question_discloses_nothing(quiz_factory):
    quiz = quiz_factory()
    stray = str(uuid.uuid4())
    result = grading.grade(quiz, [{'question_id': stray, 'selected_option_id': 'x'}])
    assert result['score'] == 0
    assert result['feedback'] == [{'questionId': stray, 'correct': False}]


@pytest.mark.django_db
def test_grade_does_not_write(quiz_factory):
    quiz = quiz_factory()
    grading.grade(quiz, _answers(quiz))
    assert QuizAttempt.objects.count() == 0


@pytest.mark.django_db
def test_grade_and_record_appends_attempt(quiz_factory, student):
    quiz = quiz_factory()
    result, attempt = grading.grade_and_record(quiz, student, _answers(quiz)[:1])
    assert result['score'] == 1
    assert attempt is not None
    assert (attempt.correct, attempt.total, attempt.score) == (1, 2, 50)
    assert attempt.course_id == quiz.course_id


@pytest.mark.django_db
def test_grade_and_record_returns_grade_when_storage_fails(quiz_factory, student, monkeypatch):
    from django.db import DatabaseError

    def broken(**kwargs):
        raise DatabaseError('disk full')

    monkeypatch.setattr(grading, 'record_attempt', broken)
    quiz = quiz_factory()
    result, attempt = grading.grade_and_record(quiz, student, _answers(quiz))
    assert result['score'] == 2
    assert attempt is None
