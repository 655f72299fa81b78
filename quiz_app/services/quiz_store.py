"""
Quiz Store: the only write path for quizzes.

Every create/update runs the question drafts through build_questions() before
anything touches the database, so a quiz whose correct answer does not point
at one of its own options can never be stored. Writes happen inside one
transaction; a failing question or a slug collision leaves nothing behind.

Publishing is a one-way latch. A quiz may be created unpublished, but every
update path (field update, publish, bulk publish) leaves it published. The
update path forces published=True even when the payload does not mention it,
so an instructor cannot unpublish a quiz through the API.
"""
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from django.db import IntegrityError, transaction
from django.db.models import Q, QuerySet
from django.utils.text import slugify

from auth_app.models import Profile, role_of
from core.utils import exceptions as errors
from core.utils.validators import parse_identifier
from course_app.models import Course
from quiz_app.models import Question, Quiz

logger = logging.getLogger(__name__)

MIN_OPTIONS = 2
SLUG_MAX_LENGTH = 255
UPDATABLE_FIELDS = ('title', 'description', 'time_limit_minutes', 'slug', 'published', 'questions')


@dataclass
class OptionDraft:
    id: str
    text: str

    def as_dict(self) -> dict:
        return {'id': self.id, 'text': self.text}


@dataclass
class QuestionDraft:
    text: str
    correct_option_id: str
    options: List[OptionDraft] = field(default_factory=list)
    explanation: str = ''
    points: int = 1


def _base36(number: int) -> str:
    digits = '0123456789abcdefghijklmnopqrstuvwxyz'
    out = ''
    while True:
        number, rem = divmod(number, 36)
        out = digits[rem] + out
        if not number:
            return out


def make_slug(title: str, slug: Optional[str] = None) -> str:
    """Slugifies an explicit slug, or derives one from the title plus a base-36 millisecond suffix"""
    if slug:
        explicit = slugify(slug)[:SLUG_MAX_LENGTH]
        if explicit:
            return explicit
    suffix = _base36(int(time.time() * 1000))
    base = (slugify(title) or 'quiz')[:SLUG_MAX_LENGTH - len(suffix) - 1]
    return f'{base}-{suffix}'


def build_questions(raw_questions: Iterable[dict]) -> List[QuestionDraft]:
    """
    Validates raw question payloads and returns drafts with final option ids.

    Missing option ids are generated first; the correct answer must then match
    exactly one final option id. Errors name the question by 1-based index.
    """
    raw_questions = list(raw_questions or [])
    if not raw_questions:
        raise errors.ValidationError('at least one question is required')

    drafts = []
    for index, raw in enumerate(raw_questions, start=1):
        text = (raw.get('text') or '').strip()
        raw_options = raw.get('options') or []
        if not text or len(raw_options) < MIN_OPTIONS:
            raise errors.ValidationError(
                f'question #{index} must have text and at least {MIN_OPTIONS} options', index=index)

        options = []
        for opt_index, raw_opt in enumerate(raw_options, start=1):
            opt_text = (raw_opt.get('text') or '').strip()
            if not opt_text:
                raise errors.ValidationError(f'question #{index} option #{opt_index} must have text', index=index)
            supplied_id = raw_opt.get('id')
            if supplied_id in (None, ''):
                opt_id = str(uuid.uuid4())
            else:
                opt_id = parse_identifier(supplied_id)
                if opt_id is None:
                    raise errors.ValidationError(
                        f'question #{index} option #{opt_index} has an invalid id', index=index)
            options.append(OptionDraft(id=opt_id, text=opt_text))

        option_ids = [opt.id for opt in options]
        if len(set(option_ids)) != len(option_ids):
            raise errors.ValidationError(f'question #{index} has duplicate option ids', index=index)

        correct = parse_identifier(raw.get('correct_option_id'))
        if correct is None:
            raise errors.ValidationError(f'question #{index} has invalid correctOptionId', index=index)
        if correct not in option_ids:
            raise errors.ValidationError(
                f'question #{index} correctOptionId must reference one of its option ids', index=index)

        points = raw.get('points')
        drafts.append(QuestionDraft(
            text=text,
            correct_option_id=correct,
            options=options,
            explanation=raw.get('explanation') or '',
            points=1 if points is None else points,
        ))
    return drafts


def _write_questions(quiz: Quiz, drafts: List[QuestionDraft]) -> None:
    Question.objects.bulk_create([
        Question(
            quiz=quiz,
            position=position,
            text=draft.text,
            options=[opt.as_dict() for opt in draft.options],
            correct_option_id=draft.correct_option_id,
            explanation=draft.explanation,
            points=draft.points,
        )
        for position, draft in enumerate(drafts)
    ])


def _slug_taken(slug: Optional[str], exclude_id=None) -> bool:
    if not slug:
        return False
    qs = Quiz.objects.filter(slug=slug)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return qs.exists()


def _require_instructor(user) -> None:
    if role_of(user) != Profile.Role.INSTRUCTOR:
        raise errors.ForbiddenError('forbidden')


def require_owner(quiz: Quiz, user) -> None:
    """Instructor role and authorship of the quiz; raises ForbiddenError otherwise"""
    _require_instructor(user)
    if quiz.created_by_id != user.id:
        raise errors.ForbiddenError('not_quiz_owner')


def resolve_course(course_id) -> Course:
    parsed = parse_identifier(course_id)
    if parsed is None:
        raise errors.ValidationError('invalid courseId')
    course = Course.objects.filter(pk=parsed).first()
    if course is None:
        raise errors.ValidationError('courseId does not reference an existing course')
    return course


def create_quiz(owner, data: dict) -> Quiz:
    """
    Creates a quiz with its questions for an instructor.

    published is stored as True only when the caller sent exactly True; this is
    the only place a quiz can be stored unpublished.
    """
    _require_instructor(owner)
    title = (data.get('title') or '').strip()
    if not title:
        raise errors.ValidationError('title is required')
    course = resolve_course(data.get('course_id'))
    drafts = build_questions(data.get('questions'))
    slug = make_slug(title, data.get('slug'))

    try:
        with transaction.atomic():
            quiz = Quiz.objects.create(
                title=title,
                slug=slug,
                description=data.get('description') or '',
                course=course,
                created_by=owner,
                time_limit_minutes=data.get('time_limit_minutes') or None,
                published=data.get('published') is True,
            )
            _write_questions(quiz, drafts)
    except IntegrityError:
        if _slug_taken(slug):
            logger.warning('Quiz slug collision on create: %s', slug)
            raise errors.DuplicateError('slug_already_in_use')
        raise

    logger.info('Quiz %s created by user %s with %s questions', quiz.id, owner.id, len(drafts))
    return quiz


def apply_publish_latch(changes: dict) -> dict:
    """
    Post-validation transform of every update payload: published is always True.

    Reproduces the platform's one-way latch. It also blocks intentional
    unpublishing, which product owners have been asked to confirm.
    """
    latched = dict(changes)
    latched['published'] = True
    return latched


def update_quiz(quiz: Quiz, actor, changes: dict) -> Quiz:
    """
    Applies an allow-listed partial update; questions are replaced wholesale.

    A blank or null slug keeps the stored slug; only a non-empty slug replaces it.
    """
    require_owner(quiz, actor)
    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise errors.ValidationError(f'fields not updatable: {", ".join(sorted(unknown))}')

    drafts = None
    if 'questions' in changes:
        drafts = build_questions(changes['questions'])

    changes = apply_publish_latch(changes)
    if 'title' in changes:
        title = (changes['title'] or '').strip()
        if not title:
            raise errors.ValidationError('title must not be empty')
        quiz.title = title
    if 'description' in changes:
        quiz.description = changes['description'] or ''
    if 'time_limit_minutes' in changes:
        quiz.time_limit_minutes = changes['time_limit_minutes'] or None
    if changes.get('slug'):
        quiz.slug = make_slug(quiz.title, changes['slug'])
    quiz.published = changes['published']

    try:
        with transaction.atomic():
            quiz.save()
            if drafts is not None:
                quiz.questions.all().delete()
                _write_questions(quiz, drafts)
    except IntegrityError:
        slug = quiz.slug
        quiz.refresh_from_db()
        if _slug_taken(slug, exclude_id=quiz.pk):
            logger.warning('Quiz slug collision on update of %s: %s', quiz.id, slug)
            raise errors.DuplicateError('slug_already_in_use')
        raise

    logger.info('Quiz %s updated by user %s (fields: %s)', quiz.id, actor.id, ', '.join(sorted(changes)))
    return quiz


def delete_quiz(quiz: Quiz, actor) -> None:
    require_owner(quiz, actor)
    quiz_id = quiz.id
    quiz.delete()
    logger.info('Quiz %s deleted by user %s', quiz_id, actor.id)


def publish_quiz(quiz: Quiz, actor) -> Quiz:
    require_owner(quiz, actor)
    quiz.published = True
    quiz.save(update_fields=['published', 'updated_at'])
    logger.info('Quiz %s published by user %s', quiz.id, actor.id)
    return quiz


def publish_all() -> int:
    """Bulk publish of every unpublished quiz; returns the number of quizzes changed"""
    count = Quiz.objects.filter(published=False).update(published=True)
    logger.info('Bulk published %s quizzes', count)
    return count


def visible_quizzes(user, course_id=None) -> QuerySet:
    """
    Quizzes a viewer may list: admins see everything, instructors see published
    quizzes plus their own drafts, everyone else sees published quizzes only.
    """
    qs = Quiz.objects.select_related('course').prefetch_related('questions')
    if course_id is not None:
        parsed = parse_identifier(course_id)
        if parsed is None:
            raise errors.ValidationError('invalid courseId')
        qs = qs.filter(course_id=parsed)

    role = role_of(user)
    if role == Profile.Role.ADMIN:
        return qs
    if role == Profile.Role.INSTRUCTOR:
        return qs.filter(Q(published=True) | Q(created_by=user))
    return qs.filter(published=True)


def get_quiz(quiz_id) -> Quiz:
    parsed = parse_identifier(quiz_id)
    if parsed is None:
        raise errors.ValidationError('invalid_quiz_id')
    quiz = Quiz.objects.prefetch_related('questions').filter(pk=parsed).first()
    if quiz is None:
        raise errors.NotFoundError('not_found')
    return quiz


def get_visible_quiz(quiz_id, user) -> Quiz:
    """Like get_quiz, but drafts of other instructors are reported as missing"""
    quiz = get_quiz(quiz_id)
    if not quiz.published and quiz.created_by_id != user.id and role_of(user) != Profile.Role.ADMIN:
        raise errors.NotFoundError('not_found')
    return quiz
