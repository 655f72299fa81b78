import logging

from auth_app.models import Profile, role_of
from core.utils import exceptions as errors
from core.utils.validators import parse_identifier
from course_app.models import Course

logger = logging.getLogger(__name__)


def is_enrolled(course: Course, user) -> bool:
    return course.students.filter(pk=user.pk).exists()


def enroll_student(course: Course, user) -> bool:
    """
    Adds the user to the course roster once.

    Returns True when the user was added, False when already enrolled. The
    roster is append-only: nothing in the platform removes a student.
    """
    if is_enrolled(course, user):
        logger.info('User %s already enrolled in course %s', user.pk, course.pk)
        return False
    course.students.add(user)
    logger.info('Enrolled user %s in course %s', user.pk, course.pk)
    return True


def get_course(course_id) -> Course:
    """Looks a course up by id; malformed and unknown ids both raise NotFoundError"""
    parsed = parse_identifier(course_id)
    course = Course.objects.filter(pk=parsed).first() if parsed else None
    if course is None:
        raise errors.NotFoundError('Course not found')
    return course


def list_courses():
    return Course.objects.select_related('created_by')


def enroll_free(course: Course, user) -> bool:
    """Enrollment without payment; priced courses go through the payment flow instead"""
    if not course.is_free:
        raise errors.PaymentRequiredError()
    return enroll_student(course, user)


def can_view_content(course: Course, user) -> bool:
    """Lesson links are for the author, admins and enrolled students"""
    if user is None or not user.is_authenticated:
        return False
    if course.created_by_id == user.id or role_of(user) == Profile.Role.ADMIN:
        return True
    return is_enrolled(course, user)
