from django.urls import path
from course_app.api.views import CourseDetailView, CourseEnrollView, CourseListView


urlpatterns = [
    path('', CourseListView.as_view(), name='course-list'),
    path('<str:pk>/', CourseDetailView.as_view(), name='course-detail'),
    path('<str:pk>/enroll/', CourseEnrollView.as_view(), name='course-enroll'),
]
