import uuid

import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from course_app.models import Course


@pytest.fixture
def free_course(instructor) -> Course:
    return Course.objects.create(
        title='Git in an afternoon',
        created_by=instructor,
        price=0,
        video_links=['https://videos.example.com/git'],
    )


@pytest.mark.django_db
def test_list_courses(client_for, student, course, free_course):
    resp = client_for(student).get(reverse('course-list'))
    assert resp.status_code == status.HTTP_200_OK
    courses = {c['id']: c for c in resp.json()['courses']}
    assert set(courses) == {str(course.id), str(free_course.id)}
    assert courses[str(course.id)]['price'] == 49900
    assert courses[str(course.id)]['isFree'] is False
    assert courses[str(free_course.id)]['isFree'] is True


@pytest.mark.django_db
def test_list_requires_auth(course):
    assert APIClient().get(reverse('course-list')).status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
def test_detail_hides_lessons_until_enrolled(client_for, student, course):
    url = reverse('course-detail', kwargs={'pk': course.id})
    before = client_for(student).get(url).json()['course']
    assert before['videoLinks'] == []
    assert before['lessonCount'] == 2
    assert before['enrolled'] is False

    course.students.add(student)
    after = client_for(student).get(url).json()['course']
    assert after['videoLinks'] == course.video_links
    assert after['enrolled'] is True


@pytest.mark.django_db
def test_detail_shows_lessons_to_author_and_admin(client_for, instructor, admin_user, course):
    url = reverse('course-detail', kwargs={'pk': course.id})
    assert client_for(instructor).get(url).json()['course']['videoLinks'] == course.video_links
    assert client_for(admin_user).get(url).json()['course']['videoLinks'] == course.video_links


@pytest.mark.django_db
@pytest.mark.parametrize('pk', ['not-a-uuid', uuid.uuid4()])
def test_detail_unknown_course(client_for, student, pk):
    resp = client_for(student).get(reverse('course-detail', kwargs={'pk': pk}))
    assert resp.status_code == status.HTTP_404_NOT_FOUND
    assert resp.json()['detail'] == 'Course not found'


@pytest.mark.django_db
def test_enroll_in_free_course_once(client_for, student, free_course):
    client = client_for(student)
    url = reverse('course-enroll', kwargs={'pk': free_course.id})

    first = client.post(url)
    assert first.status_code == status.HTTP_200_OK
    assert first.json()['message'] == 'Enrolled'
    assert first.json()['course']['enrolled'] is True

    second = client.post(url)
    assert second.status_code == status.HTTP_200_OK
    assert second.json()['message'] == 'Already enrolled'
    assert free_course.students.filter(pk=student.pk).count() == 1


@pytest.mark.django_db
def test_enroll_in_priced_course_requires_payment(client_for, student, course):
    resp = client_for(student).post(reverse('course-enroll', kwargs={'pk': course.id}))
    assert resp.status_code == status.HTTP_402_PAYMENT_REQUIRED
    assert resp.json()['detail'] == 'Course requires payment'
    assert not course.students.exists()


@pytest.mark.django_db
def test_enroll_unknown_course(client_for, student):
    resp = client_for(student).post(reverse('course-enroll', kwargs={'pk': uuid.uuid4()}))
    assert resp.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
def test_enroll_requires_auth(free_course):
    resp = APIClient().post(reverse('course-enroll', kwargs={'pk': free_course.id}))
    assert resp.status_code == status.HTTP_401_UNAUTHORIZED
    assert not free_course.students.exists()
