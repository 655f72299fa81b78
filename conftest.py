import uuid

import pytest
from django.contrib.auth.models import User
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from auth_app.models import Profile
from course_app.models import Course
from quiz_app.services import quiz_store


def authenticate_client(client: APIClient, user: User) -> APIClient:
    """Creates JWTs for user and sets them as cookies on the test client"""
    refresh = RefreshToken.for_user(user)
    client.cookies['access_token'] = str(refresh.access_token)
    client.cookies['refresh_token'] = str(refresh)
    return client


def make_user(username: str, role: str = Profile.Role.STUDENT) -> User:
    user = User.objects.create_user(username=username, email=f'{username}@example.com', password='Str0ng!Pass')
    Profile.objects.create(user=user, role=role)
    return user


def question_payload(text='What is 2 + 2?', answers=('3', '4'), correct=1) -> dict:
    """One question in the create/update wire format with explicit option ids"""
    options = [{'id': str(uuid.uuid4()), 'text': answer} for answer in answers]
    return {
        'text': text,
        'options': options,
        'correctOptionId': options[correct]['id'],
        'explanation': 'basic arithmetic',
    }


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def instructor(db) -> User:
    return make_user('ada', Profile.Role.INSTRUCTOR)


@pytest.fixture
def other_instructor(db) -> User:
    return make_user('grace', Profile.Role.INSTRUCTOR)


@pytest.fixture
def student(db) -> User:
    return make_user('learner', Profile.Role.STUDENT)


@pytest.fixture
def admin_user(db) -> User:
    return User.objects.create_superuser(username='root', email='root@example.com', password='Str0ng!Pass')


@pytest.fixture
def course(instructor) -> Course:
    return Course.objects.create(
        title='Intro to Python',
        created_by=instructor,
        price=49900,
        currency='INR',
        video_links=['https://videos.example.com/1', 'https://videos.example.com/2'],
    )


@pytest.fixture
def client_for():
    """Returns a factory that builds an APIClient authenticated as the given user"""
    def _client_for(user: User) -> APIClient:
        return authenticate_client(APIClient(), user)
    return _client_for


@pytest.fixture
def quiz_factory(instructor, course):
    """Creates quizzes through the quiz store, the same path the API uses"""
    def _make(owner=None, published=True, questions=None, **extra):
        data = {
            'title': extra.pop('title', 'Arithmetic'),
            'course_id': str(course.id),
            'published': published,
            'questions': [_to_internal(q) for q in (questions or [question_payload(), question_payload('1 + 1?', ('2', '5'), 0)])],
        }
        data.update(extra)
        return quiz_store.create_quiz(owner or instructor, data)
    return _make


def _to_internal(payload: dict) -> dict:
    """Maps a wire-format question to the serializer's validated shape"""
    question = dict(payload)
    question['correct_option_id'] = question.pop('correctOptionId', None)
    return question


@pytest.fixture
def make_question():
    """Builder for wire-format questions, see question_payload()"""
    return question_payload


@pytest.fixture
def user_factory(db):
    """Creates users with a profile role; the password is always 'Str0ng!Pass'"""
    return make_user
